"""Domain records for PON topology planning.

These are plain immutable records; nothing here is persisted. Device
inventory lives elsewhere and is handed in as ``DeviceSnapshot`` values.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


def normalize_type_code(code: str) -> str:
    """Lower-case a stored type code and drop separators ("XGS-PON" becomes "xgspon")."""
    return code.strip().lower().replace("-", "").replace("_", "").replace("\u00d7", "x")


class SplitterType(enum.Enum):
    split_1x2 = "1x2"
    split_1x4 = "1x4"
    split_1x8 = "1x8"
    split_1x16 = "1x16"
    split_1x32 = "1x32"
    split_1x64 = "1x64"

    @property
    def fanout(self) -> int:
        return int(self.value.split("x", 1)[1])


class PonType(enum.Enum):
    epon = "epon"
    gpon = "gpon"
    xgpon = "xgpon"
    xgspon = "xgspon"

    @property
    def label(self) -> str:
        return {
            PonType.epon: "EPON",
            PonType.gpon: "GPON",
            PonType.xgpon: "XG-PON",
            PonType.xgspon: "XGS-PON",
        }[self]


class DeviceType(enum.Enum):
    olt = "olt"
    ms = "ms"
    subms = "subms"
    fdb = "fdb"
    x2 = "x2"


SLOT_DEVICE_TYPES = (DeviceType.olt, DeviceType.ms, DeviceType.subms)


class TopologyType(enum.Enum):
    direct = "direct"
    single_stage = "single_stage"
    tube_system = "tube_system"
    custom = "custom"


class IssueCode(enum.Enum):
    loss_budget_exceeded = "LOSS_BUDGET_EXCEEDED"
    capacity_exceeded = "CAPACITY_EXCEEDED"
    loss_budget_at_maximum = "LOSS_BUDGET_AT_MAXIMUM"
    non_standard_topology = "NON_STANDARD_TOPOLOGY"
    unknown_splitter_type = "UNKNOWN_SPLITTER_TYPE"
    fanout_saturated = "FANOUT_SATURATED"


@dataclass(frozen=True)
class SplitterStage:
    """One passive splitting step, numbered from the OLT outward."""

    stage_index: int
    splitter_type: SplitterType | None
    insertion_loss_db: float
    cumulative_loss_db: float
    device_role: DeviceType
    output_ports: int
    can_add_more: bool = False
    # Raw splitter code when it did not match a known SplitterType.
    unknown_splitter_code: str | None = None

    @property
    def splitter_label(self) -> str:
        if self.splitter_type is not None:
            return self.splitter_type.value
        return self.unknown_splitter_code or "unknown"


@dataclass(frozen=True)
class TopologyPlan:
    subscriber_count: int
    pon_type: PonType
    topology_type: TopologyType
    stages: tuple[SplitterStage, ...]
    total_loss_db: float
    capacity_limit: int
    max_subscribers: int
    saturated: bool = False
    message: str = ""


@dataclass(frozen=True)
class ValidationIssue:
    code: IssueCode
    message: str


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def has_error(self, code: IssueCode) -> bool:
        return any(issue.code == code for issue in self.errors)

    def has_warning(self, code: IssueCode) -> bool:
        return any(issue.code == code for issue in self.warnings)


@dataclass(frozen=True)
class DeviceSnapshot:
    """Port-relevant fields of one stored OLT, MS or SUBMS record."""

    device_id: str
    device_type: DeviceType
    active_ports: int = 0
    type_code: str | None = None
    declared_total_ports: int | None = None
    name: str | None = None
    parent_id: str | None = None


@dataclass(frozen=True)
class DeviceSlotInfo:
    device: DeviceSnapshot
    inferred_total_ports: int
    total_ports: int
    available_ports: int
    type_recognized: bool


@dataclass(frozen=True)
class AttachmentRecommendation:
    best_olt: tuple[DeviceSlotInfo, ...] = ()
    best_ms: tuple[DeviceSlotInfo, ...] = ()
    best_subms: tuple[DeviceSlotInfo, ...] = ()
    optimal_path: tuple[DeviceSlotInfo, ...] = field(default_factory=tuple)
