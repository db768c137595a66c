"""Render a topology plan as an ordered diagram structure."""

from __future__ import annotations

from app.models.topology import SplitterStage, TopologyPlan

_DEVICE_PREFIXES = {
    "olt": "OLT",
    "ms": "MS",
    "subms": "SUBMS",
    "fdb": "FDB",
    "x2": "X2",
}


def device_name(device_role: str, stage_index: int) -> str:
    return f"{_DEVICE_PREFIXES.get(device_role, 'DEV')}_{stage_index}"


def _stage_node(stage: SplitterStage, is_last: bool) -> dict:
    return {
        "stage_index": stage.stage_index,
        "device_role": stage.device_role.value,
        "device_name": device_name(stage.device_role.value, stage.stage_index),
        "splitter_type": stage.splitter_label,
        "loss_db": stage.insertion_loss_db,
        "cumulative_loss_db": stage.cumulative_loss_db,
        "output_ports": stage.output_ports,
        "can_add_more": stage.can_add_more,
        "connections": [
            {"type": "client" if is_last else "next_stage", "count": stage.output_ports}
        ],
    }


def create_topology_diagram(plan: TopologyPlan) -> dict:
    """Project a plan into display nodes, OLT first, stages in plan order."""
    if plan.stages:
        head_connections = [{"type": "next_stage", "count": 1}]
    else:
        head_connections = [{"type": "client", "count": plan.subscriber_count}]
    last_index = len(plan.stages) - 1
    return {
        "topology_type": plan.topology_type.value,
        "total_loss_db": plan.total_loss_db,
        "head": {
            "device_role": "olt",
            "device_name": "OLT",
            "pon_type": plan.pon_type.value,
            "connections": head_connections,
        },
        "stages": [
            _stage_node(stage, index == last_index) for index, stage in enumerate(plan.stages)
        ],
    }
