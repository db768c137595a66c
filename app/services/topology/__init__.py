"""PON topology planning services.

This package provides:
- the static rules table (splitter losses, PON capacities, port mapping)
- the topology calculator and validator
- recommendations and diagram rendering for a plan
- port/slot allocation and attachment-point ranking
- validation of topologies rebuilt from stored devices
"""

from app.services.topology.calculator import build_stages, calculate_topology
from app.services.topology.diagram import create_topology_diagram
from app.services.topology.examples import topology_examples
from app.services.topology.existing import (
    plan_from_history,
    stages_from_history,
    validate_existing_topology,
)
from app.services.topology.ports import (
    calculate_available_slots,
    describe_device_slots,
    infer_total_ports,
    recommend_attachment_points,
    summarize_port_allocation,
)
from app.services.topology.recommendations import (
    generate_recommendations,
    recommend_for_plan,
)
from app.services.topology.rules import (
    TopologyRules,
    build_rules,
    calculate_cumulative_loss,
    can_add_passive_element,
    get_max_subscribers,
    get_rules,
    get_splitter_loss,
    rules_snapshot,
)
from app.services.topology.validator import classify_stages, validate_topology

__all__ = [
    "TopologyRules",
    "build_rules",
    "build_stages",
    "calculate_available_slots",
    "calculate_cumulative_loss",
    "calculate_topology",
    "can_add_passive_element",
    "classify_stages",
    "create_topology_diagram",
    "describe_device_slots",
    "generate_recommendations",
    "get_max_subscribers",
    "get_rules",
    "get_splitter_loss",
    "infer_total_ports",
    "plan_from_history",
    "recommend_attachment_points",
    "recommend_for_plan",
    "rules_snapshot",
    "stages_from_history",
    "summarize_port_allocation",
    "topology_examples",
    "validate_existing_topology",
    "validate_topology",
]
