from fastapi import APIRouter

from app.errors import InvalidInputError
from app.metrics import observe_topology_operation
from app.schemas.topology import (
    DeviceSlotRead,
    DeviceSnapshotPayload,
    ExistingTopologyRequest,
    ExistingTopologyResponse,
    PortAllocationRequest,
    PortAllocationResponse,
    TopologyExampleRead,
    TopologyPlanRequest,
    TopologyPlanResponse,
)
from app.services import topology as topology_service
from app.validators.topology import device_snapshot_from_record

router = APIRouter(prefix="/topology", tags=["topology"])


def _record(operation: str, is_valid: bool) -> None:
    observe_topology_operation(operation, "valid" if is_valid else "invalid")


@router.post("/plan", response_model=TopologyPlanResponse)
def plan_topology(payload: TopologyPlanRequest):
    rules = topology_service.get_rules()
    try:
        plan = topology_service.calculate_topology(
            payload.subscriber_count, payload.pon_type, rules
        )
    except InvalidInputError:
        observe_topology_operation("plan", "rejected")
        raise
    validation = topology_service.validate_topology(plan, rules)
    _record("plan", validation.is_valid)
    return TopologyPlanResponse.model_validate(
        {
            "topology": plan,
            "validation": validation,
            "recommendations": topology_service.recommend_for_plan(plan, validation, rules),
            "diagram": topology_service.create_topology_diagram(plan),
            "rules": topology_service.rules_snapshot(rules),
        },
        from_attributes=True,
    )


@router.get("/rules")
def get_topology_rules():
    return topology_service.rules_snapshot()


@router.post("/validate", response_model=ExistingTopologyResponse)
def validate_existing_topology(payload: ExistingTopologyRequest):
    try:
        plan, validation, recommendations = topology_service.validate_existing_topology(
            [stage.model_dump() for stage in payload.stages],
            payload.pon_type,
            payload.subscriber_count,
        )
    except InvalidInputError:
        observe_topology_operation("validate", "rejected")
        raise
    _record("validate", validation.is_valid)
    return ExistingTopologyResponse.model_validate(
        {"topology": plan, "validation": validation, "recommendations": recommendations},
        from_attributes=True,
    )


@router.get("/examples", response_model=list[TopologyExampleRead])
def get_topology_examples():
    return [
        TopologyExampleRead.model_validate(example, from_attributes=True)
        for example in topology_service.topology_examples()
    ]


@router.post("/ports/slots", response_model=DeviceSlotRead)
def get_device_slots(payload: DeviceSnapshotPayload):
    snapshot = device_snapshot_from_record(payload.model_dump())
    return DeviceSlotRead.model_validate(
        topology_service.describe_device_slots(snapshot), from_attributes=True
    )


@router.post("/ports/allocation", response_model=PortAllocationResponse)
def get_port_allocation(payload: PortAllocationRequest):
    snapshots = [device_snapshot_from_record(device.model_dump()) for device in payload.devices]
    result = topology_service.summarize_port_allocation(
        snapshots, connected_only=payload.connected_only
    )
    observe_topology_operation("port_allocation", "ok")
    return PortAllocationResponse.model_validate(result, from_attributes=True)
