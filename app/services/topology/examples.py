"""Canned planning scenarios for client-side display."""

from __future__ import annotations

from app.models.topology import PonType
from app.services.topology.calculator import calculate_topology
from app.services.topology.rules import TopologyRules, get_rules
from app.services.topology.validator import validate_topology

EXAMPLE_SCENARIOS: tuple[tuple[str, int, PonType], ...] = (
    ("Small building, direct attach", 8, PonType.gpon),
    ("Apartment block on a tube system", 24, PonType.gpon),
    ("Full tube system", 64, PonType.gpon),
    ("Beyond tube fan-out", 100, PonType.gpon),
    ("EPON over capacity", 65, PonType.epon),
)


def topology_examples(rules: TopologyRules | None = None) -> list[dict]:
    rules = rules or get_rules()
    examples = []
    for title, subscriber_count, pon_type in EXAMPLE_SCENARIOS:
        plan = calculate_topology(subscriber_count, pon_type, rules)
        examples.append(
            {
                "title": title,
                "topology": plan,
                "validation": validate_topology(plan, rules),
            }
        )
    return examples
