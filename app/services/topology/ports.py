"""Port and slot allocation across OLT, MS and SUBMS devices.

Totals come from the device record when it declares them, otherwise from
the type code (``oltType``/``msType``/``submsType``). Unknown type codes
infer zero ports; inventory data is not always clean, so this is logged
rather than raised.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from app.errors import InvalidInputError
from app.models.topology import (
    AttachmentRecommendation,
    DeviceSlotInfo,
    DeviceSnapshot,
    DeviceType,
    SLOT_DEVICE_TYPES,
)
from app.services.topology.rules import TopologyRules, get_rules

logger = logging.getLogger(__name__)

_PATH_ORDER = (DeviceType.olt, DeviceType.ms, DeviceType.subms)


def infer_total_ports(
    device_type: DeviceType, type_code: str | None, rules: TopologyRules | None = None
) -> int:
    rules = rules or get_rules()
    ports = rules.ports_for(device_type, type_code)
    if ports is None:
        if type_code:
            logger.warning(
                "UNKNOWN_SPLITTER_TYPE: no port mapping for %s type %r",
                device_type.value,
                type_code,
            )
        return 0
    return ports


def describe_device_slots(
    device: DeviceSnapshot, rules: TopologyRules | None = None
) -> DeviceSlotInfo:
    rules = rules or get_rules()
    if device.device_type not in SLOT_DEVICE_TYPES:
        names = ", ".join(item.value for item in SLOT_DEVICE_TYPES)
        raise InvalidInputError(
            f"Device type '{device.device_type.value}' has no port slots. Allowed: {names}",
            field="device_type",
        )
    recognized = rules.ports_for(device.device_type, device.type_code) is not None
    inferred = infer_total_ports(device.device_type, device.type_code, rules)
    total = device.declared_total_ports or inferred
    return DeviceSlotInfo(
        device=device,
        inferred_total_ports=inferred,
        total_ports=total,
        available_ports=max(0, total - device.active_ports),
        type_recognized=recognized,
    )


def calculate_available_slots(device: DeviceSnapshot, rules: TopologyRules | None = None) -> int:
    return describe_device_slots(device, rules).available_ports


def rank_by_available_ports(slots: Iterable[DeviceSlotInfo]) -> list[DeviceSlotInfo]:
    # Stable sort keeps input order among equal candidates.
    return sorted(slots, key=lambda info: info.available_ports, reverse=True)


def _group_slots(
    devices: Iterable[DeviceSnapshot], rules: TopologyRules
) -> dict[DeviceType, list[DeviceSlotInfo]]:
    groups: dict[DeviceType, list[DeviceSlotInfo]] = {kind: [] for kind in SLOT_DEVICE_TYPES}
    for device in devices:
        info = describe_device_slots(device, rules)
        groups[device.device_type].append(info)
    return {kind: rank_by_available_ports(items) for kind, items in groups.items()}


def recommend_attachment_points(
    devices: Iterable[DeviceSnapshot],
    connected_only: bool = False,
    rules: TopologyRules | None = None,
) -> AttachmentRecommendation:
    """Rank devices per level and pick a greedy OLT -> MS -> SUBMS path.

    Each level's pick is the device with the most free ports. By default the
    levels are chosen independently, so the path is a capacity hint rather
    than a verified fiber route. With ``connected_only`` a lower level only
    considers devices whose ``parent_id`` is the device picked above it.
    """
    rules = rules or get_rules()
    groups = _group_slots(devices, rules)

    path: list[DeviceSlotInfo] = []
    for kind in _PATH_ORDER:
        candidates = [info for info in groups[kind] if info.available_ports > 0]
        if connected_only and path:
            parent_id = path[-1].device.device_id
            candidates = [info for info in candidates if info.device.parent_id == parent_id]
        if not candidates:
            break
        path.append(candidates[0])

    return AttachmentRecommendation(
        best_olt=tuple(groups[DeviceType.olt][: rules.top_olt]),
        best_ms=tuple(groups[DeviceType.ms][: rules.top_splitters]),
        best_subms=tuple(groups[DeviceType.subms][: rules.top_splitters]),
        optimal_path=tuple(path),
    )


def utilization_percentage(active: int, capacity: int) -> int:
    if capacity <= 0:
        return 0
    ratio = Decimal(active) * 100 / Decimal(capacity)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _attachment_lines(recommendation: AttachmentRecommendation) -> list[str]:
    lines: list[str] = []
    for info in recommendation.optimal_path:
        label = info.device.name or info.device.device_id
        lines.append(
            f"Attach via {info.device.device_type.value.upper()} {label} "
            f"({info.available_ports} free ports)"
        )
    if len(recommendation.optimal_path) < len(_PATH_ORDER):
        missing = _PATH_ORDER[len(recommendation.optimal_path)]
        lines.append(f"No {missing.value.upper()} with free ports available")
    return lines


def summarize_port_allocation(
    devices: Iterable[DeviceSnapshot],
    connected_only: bool = False,
    rules: TopologyRules | None = None,
) -> dict:
    rules = rules or get_rules()
    devices = list(devices)
    slots = [describe_device_slots(device, rules) for device in devices]

    total_capacity = sum(info.total_ports for info in slots)
    total_active = sum(info.device.active_ports for info in slots)
    total_available = sum(info.available_ports for info in slots)
    recommendation = recommend_attachment_points(devices, connected_only, rules)

    lines = _attachment_lines(recommendation)
    unknown = [info for info in slots if info.device.type_code and not info.type_recognized]
    if unknown:
        lines.append(
            f"{len(unknown)} device(s) have unrecognised type codes; their capacity "
            "was inferred as zero"
        )
    if total_capacity and total_available == 0:
        lines.append("All ports are in use; plan a new OLT PON port or splitter")

    return {
        "summary": {
            "total_capacity": total_capacity,
            "total_active": total_active,
            "total_available": total_available,
            "utilization_percentage": utilization_percentage(total_active, total_capacity),
        },
        "devices_with_available_slots": rank_by_available_ports(
            info for info in slots if info.available_ports > 0
        ),
        "attachment": recommendation,
        "recommendations": lines,
    }
