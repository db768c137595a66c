"""Human-readable planning guidance."""

from __future__ import annotations

import math

from app.models.topology import (
    IssueCode,
    PonType,
    TopologyPlan,
    TopologyType,
    ValidationResult,
)
from app.services.topology.calculator import calculate_topology
from app.services.topology.rules import TopologyRules, get_rules
from app.services.topology.validator import validate_topology


def _next_pon_type(pon_type: PonType, subscriber_count: int, rules: TopologyRules) -> PonType | None:
    current = rules.capacity_for(pon_type)
    for candidate in PonType:
        capacity = rules.capacity_for(candidate)
        if capacity > current and capacity >= subscriber_count:
            return candidate
    return None


def recommend_for_plan(
    plan: TopologyPlan,
    validation: ValidationResult,
    rules: TopologyRules | None = None,
) -> list[str]:
    rules = rules or get_rules()
    lines: list[str] = []

    if plan.topology_type == TopologyType.direct:
        lines.append("Use DIRECT topology - no passive elements needed")
        lines.append("Connect clients directly to OLT port")
    elif plan.topology_type == TopologyType.tube_system:
        primary_loss = plan.stages[0].insertion_loss_db
        secondary_loss = plan.stages[1].insertion_loss_db
        lines.append(
            f"Use TUBE SYSTEM topology: {rules.tube_primary.value} -> "
            f"{rules.tube_secondary_count}x{rules.tube_secondary.value}"
        )
        lines.append(
            f"Total loss will be {plan.total_loss_db:g} dB "
            f"({primary_loss:g} + {secondary_loss:g})"
        )
        lines.append(f"Maximum {plan.max_subscribers} subscribers supported")
    elif plan.stages:
        pattern = " -> ".join(stage.splitter_label for stage in plan.stages)
        lines.append(f"Current splitter chain: {pattern} (total loss {plan.total_loss_db:g} dB)")

    remaining_loss = rules.max_passive_loss_db - plan.total_loss_db
    if remaining_loss < 0:
        lines.append(
            f"Loss budget exceeded by {-remaining_loss:g} dB; remove or replace "
            "a splitter stage"
        )
    elif plan.stages:
        spare = math.floor(remaining_loss / rules.smallest_splitter_loss_db)
        if spare > 0:
            lines.append(
                f"{remaining_loss:g} dB of loss budget remains; can add {spare} more "
                f"{rules.smallest_splitter.value} splitter stage(s)"
            )
        else:
            lines.append(
                f"No further passive elements allowed after {plan.total_loss_db:g} dB"
            )

    headroom = plan.capacity_limit - plan.subscriber_count
    label = plan.pon_type.label
    if headroom > 0:
        lines.append(
            f"{headroom} more subscribers can be added before reaching the "
            f"{label} limit of {plan.capacity_limit}"
        )
    elif headroom == 0:
        lines.append(f"At {label} capacity limit of {plan.capacity_limit} subscribers")
    else:
        upgrade = _next_pon_type(plan.pon_type, plan.subscriber_count, rules)
        advice = f"Consider using multiple OLT ports for {plan.subscriber_count} subscribers"
        if upgrade is not None:
            advice += f" or upgrading to {upgrade.label}"
        lines.append(advice)

    if validation.has_warning(IssueCode.fanout_saturated):
        ports_needed = math.ceil(plan.subscriber_count / plan.max_subscribers)
        lines.append(
            f"Passive fan-out saturated; split subscribers across {ports_needed} "
            "OLT PON ports"
        )
    if validation.has_warning(IssueCode.non_standard_topology):
        lines.append(
            f"Non-standard splitter chain detected; consider migrating to the "
            f"{rules.tube_primary.value} -> {rules.tube_secondary.value} tube system"
        )
    if validation.has_warning(IssueCode.unknown_splitter_type):
        lines.append("Verify splitter types recorded in inventory; unknown types carry no loss")

    return lines


def generate_recommendations(
    subscriber_count: int,
    pon_type: PonType | str,
    rules: TopologyRules | None = None,
) -> list[str]:
    rules = rules or get_rules()
    plan = calculate_topology(subscriber_count, pon_type, rules)
    return recommend_for_plan(plan, validate_topology(plan, rules), rules)
