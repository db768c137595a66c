"""Input coercion for topology planning.

Everything that reaches the planning services goes through these helpers,
so the services can assume well-typed input.
"""

from collections.abc import Mapping

from app.errors import InvalidInputError
from app.models.topology import (
    SLOT_DEVICE_TYPES,
    DeviceSnapshot,
    DeviceType,
    PonType,
    normalize_type_code,
)


def validate_subscriber_count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError("Subscriber count must be an integer", field="subscriber_count")
    if value <= 0:
        raise InvalidInputError(
            "Subscriber count must be greater than zero", field="subscriber_count"
        )
    return value


def coerce_pon_type(value) -> PonType:
    if isinstance(value, PonType):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError("PON type is required", field="pon_type")
    try:
        return PonType(normalize_type_code(value))
    except ValueError as exc:
        allowed = ", ".join(pon.value for pon in PonType)
        raise InvalidInputError(
            f"Unknown PON type '{value}'. Allowed: {allowed}", field="pon_type"
        ) from exc


def coerce_device_type(value, allowed: tuple[DeviceType, ...] = tuple(DeviceType)) -> DeviceType:
    if isinstance(value, DeviceType):
        device_type = value
    else:
        try:
            device_type = DeviceType(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown device type '{value}'", field="device_type"
            ) from exc
    if device_type not in allowed:
        names = ", ".join(item.value for item in allowed)
        raise InvalidInputError(
            f"Device type '{device_type.value}' is not supported here. Allowed: {names}",
            field="device_type",
        )
    return device_type


def _non_negative_int(value, field: str, optional: bool = False) -> int | None:
    if value is None:
        if optional:
            return None
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{field} must be an integer", field=field)
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative", field=field)
    return value


# Stored device documents name their type code per device kind.
_TYPE_CODE_KEYS = {
    DeviceType.olt: "oltType",
    DeviceType.ms: "msType",
    DeviceType.subms: "submsType",
}


def device_snapshot_from_record(record: Mapping) -> DeviceSnapshot:
    """Build a snapshot from a stored device record.

    Accepts both snake_case keys and the camelCase keys used by the
    inventory documents (``oltType``, ``totalPorts``, ``activePorts``...).
    """
    if not isinstance(record, Mapping):
        raise InvalidInputError("Device snapshot must be an object")
    device_type = coerce_device_type(
        record.get("device_type") or record.get("deviceType"), allowed=SLOT_DEVICE_TYPES
    )
    device_id = record.get("device_id") or record.get("deviceId") or record.get("id")
    if device_id is None or not str(device_id).strip():
        raise InvalidInputError("Device snapshot requires a device id", field="device_id")

    type_code = record.get("type_code") or record.get(_TYPE_CODE_KEYS[device_type])
    declared = record.get("declared_total_ports", record.get("totalPorts"))
    active = record.get("active_ports", record.get("activePorts"))
    parent_id = record.get("parent_id") or record.get("parentId")
    return DeviceSnapshot(
        device_id=str(device_id),
        device_type=device_type,
        active_ports=_non_negative_int(active, "active_ports"),
        type_code=str(type_code) if type_code is not None else None,
        declared_total_ports=_non_negative_int(declared, "declared_total_ports", optional=True),
        name=record.get("name") or record.get("deviceName"),
        parent_id=str(parent_id) if parent_id is not None else None,
    )
