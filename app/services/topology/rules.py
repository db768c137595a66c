"""Static planning rules for PON topologies.

The rules table is built once per process and is read-only afterwards.
Losses are insertion losses in dB, stored as positive numbers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType

from app.config import Settings, settings
from app.models.topology import (
    DeviceType,
    PonType,
    SplitterStage,
    SplitterType,
    normalize_type_code,
)

logger = logging.getLogger(__name__)

MAX_PASSIVE_LOSS_DB = 20.0
DIRECT_SUBSCRIBER_THRESHOLD = 12

SPLITTER_LOSSES_DB: Mapping[SplitterType, float] = MappingProxyType(
    {
        SplitterType.split_1x2: 3.0,
        SplitterType.split_1x4: 7.0,
        SplitterType.split_1x8: 10.0,
        SplitterType.split_1x16: 13.0,
        SplitterType.split_1x32: 17.0,
        SplitterType.split_1x64: 20.0,
    }
)

PON_CAPACITY: Mapping[PonType, int] = MappingProxyType(
    {
        PonType.epon: 64,
        PonType.gpon: 128,
        PonType.xgpon: 256,
        PonType.xgspon: 256,
    }
)

# Port counts used when a device record carries no explicit total.
DEVICE_PORTS: Mapping[DeviceType, Mapping[str, int]] = MappingProxyType(
    {
        DeviceType.olt: MappingProxyType({"epon": 8, "gpon": 16, "xgpon": 16, "xgspon": 16}),
        DeviceType.ms: MappingProxyType({"1x8": 8, "1x16": 16, "1x32": 32}),
        DeviceType.subms: MappingProxyType({"1x4": 4, "1x8": 8, "1x16": 16}),
    }
)


@dataclass(frozen=True)
class TopologyRules:
    max_passive_loss_db: float = MAX_PASSIVE_LOSS_DB
    direct_subscriber_threshold: int = DIRECT_SUBSCRIBER_THRESHOLD
    splitter_losses_db: Mapping[SplitterType, float] = field(
        default_factory=lambda: SPLITTER_LOSSES_DB
    )
    pon_capacity: Mapping[PonType, int] = field(default_factory=lambda: PON_CAPACITY)
    device_ports: Mapping[DeviceType, Mapping[str, int]] = field(
        default_factory=lambda: DEVICE_PORTS
    )
    tube_primary: SplitterType = SplitterType.split_1x16
    tube_secondary: SplitterType = SplitterType.split_1x4
    top_olt: int = 3
    top_splitters: int = 5

    @property
    def tube_secondary_count(self) -> int:
        # Four 1x4 secondaries hang off a 1x16 primary.
        return self.tube_primary.fanout // self.tube_secondary.fanout

    @property
    def tube_capacity(self) -> int:
        return self.tube_primary.fanout * self.tube_secondary.fanout

    @property
    def tube_loss_db(self) -> float:
        return self.loss_for(self.tube_primary) + self.loss_for(self.tube_secondary)

    @property
    def smallest_splitter(self) -> SplitterType:
        return min(self.splitter_losses_db, key=self.splitter_losses_db.__getitem__)

    @property
    def smallest_splitter_loss_db(self) -> float:
        return self.loss_for(self.smallest_splitter)

    def loss_for(self, splitter: SplitterType) -> float:
        return self.splitter_losses_db[splitter]

    def capacity_for(self, pon_type: PonType) -> int:
        return self.pon_capacity[pon_type]

    def ports_for(self, device_type: DeviceType, type_code: str | None) -> int | None:
        """Return the inferred port count, or None when the code is not known."""
        if not type_code:
            return None
        table = self.device_ports.get(device_type)
        if table is None:
            return None
        return table.get(normalize_type_code(type_code))


def build_rules(config: Settings) -> TopologyRules:
    rules = TopologyRules(
        max_passive_loss_db=config.topology_max_passive_loss_db,
        direct_subscriber_threshold=config.topology_direct_subscriber_threshold,
        top_olt=config.topology_top_olt,
        top_splitters=config.topology_top_splitters,
    )
    if rules.tube_loss_db > rules.max_passive_loss_db:
        raise ValueError(
            f"Tube system loss {rules.tube_loss_db:g} dB exceeds the configured "
            f"maximum passive loss of {rules.max_passive_loss_db:g} dB"
        )
    if rules.direct_subscriber_threshold > rules.tube_capacity:
        raise ValueError(
            "Direct subscriber threshold cannot exceed the tube system capacity "
            f"of {rules.tube_capacity}"
        )
    return rules


@lru_cache(maxsize=1)
def get_rules() -> TopologyRules:
    rules = build_rules(settings)
    logger.info(
        "Topology rules loaded: max loss %s dB, direct threshold %s",
        rules.max_passive_loss_db,
        rules.direct_subscriber_threshold,
    )
    return rules


def get_splitter_loss(splitter: SplitterType | str, rules: TopologyRules | None = None) -> float:
    """Insertion loss for a splitter type; unknown codes carry no loss."""
    rules = rules or get_rules()
    if isinstance(splitter, str):
        try:
            splitter = SplitterType(normalize_type_code(splitter))
        except ValueError:
            return 0.0
    return rules.loss_for(splitter)


def can_add_passive_element(
    current_loss_db: float, new_element_loss_db: float, rules: TopologyRules | None = None
) -> bool:
    rules = rules or get_rules()
    return current_loss_db + new_element_loss_db <= rules.max_passive_loss_db


def calculate_cumulative_loss(stages: Iterable[SplitterStage]) -> float:
    return sum(stage.insertion_loss_db for stage in stages)


def get_max_subscribers(stages: Iterable[SplitterStage]) -> int:
    """Product of stage fan-outs; zero when there are no stages."""
    stages = list(stages)
    if not stages:
        return 0
    total = 1
    for stage in stages:
        total *= stage.output_ports
    return total


def rules_snapshot(rules: TopologyRules | None = None) -> dict:
    rules = rules or get_rules()
    return {
        "splitter_losses_db": {
            splitter.value: loss for splitter, loss in rules.splitter_losses_db.items()
        },
        "splitter_ports": {splitter.value: splitter.fanout for splitter in SplitterType},
        "pon_capacity": {pon.value: capacity for pon, capacity in rules.pon_capacity.items()},
        "device_ports": {
            device.value: dict(table) for device, table in rules.device_ports.items()
        },
        "max_passive_loss_db": rules.max_passive_loss_db,
        "direct_subscriber_threshold": rules.direct_subscriber_threshold,
        "tube_system": {
            "primary": rules.tube_primary.value,
            "secondary": rules.tube_secondary.value,
            "secondary_count": rules.tube_secondary_count,
            "capacity": rules.tube_capacity,
            "total_loss_db": rules.tube_loss_db,
        },
    }
