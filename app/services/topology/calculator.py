"""Topology calculator: subscriber count and PON type to a splitter plan."""

from __future__ import annotations

import logging

from app.models.topology import (
    DeviceType,
    PonType,
    SplitterStage,
    SplitterType,
    TopologyPlan,
    TopologyType,
)
from app.services.topology.rules import TopologyRules, get_rules
from app.validators.topology import coerce_pon_type, validate_subscriber_count

logger = logging.getLogger(__name__)


def build_stages(
    splitters: list[SplitterType], rules: TopologyRules
) -> tuple[SplitterStage, ...]:
    """Chain splitters from the OLT outward, accumulating insertion loss.

    The first passive stage sits in an MS, later stages in SUBMS boxes.
    """
    stages: list[SplitterStage] = []
    cumulative = 0.0
    for index, splitter in enumerate(splitters, start=1):
        loss = rules.loss_for(splitter)
        cumulative += loss
        stages.append(
            SplitterStage(
                stage_index=index,
                splitter_type=splitter,
                insertion_loss_db=loss,
                cumulative_loss_db=cumulative,
                device_role=DeviceType.ms if index == 1 else DeviceType.subms,
                output_ports=splitter.fanout,
                can_add_more=cumulative + rules.smallest_splitter_loss_db
                <= rules.max_passive_loss_db,
            )
        )
    return tuple(stages)


def _direct_plan(subscriber_count: int, pon_type: PonType, rules: TopologyRules) -> TopologyPlan:
    return TopologyPlan(
        subscriber_count=subscriber_count,
        pon_type=pon_type,
        topology_type=TopologyType.direct,
        stages=(),
        total_loss_db=0.0,
        capacity_limit=rules.capacity_for(pon_type),
        max_subscribers=subscriber_count,
        message=(
            f"Direct topology for {subscriber_count} subscribers. "
            "No passive elements needed."
        ),
    )


def _tube_plan(subscriber_count: int, pon_type: PonType, rules: TopologyRules) -> TopologyPlan:
    stages = build_stages([rules.tube_primary, rules.tube_secondary], rules)
    total_loss = stages[-1].cumulative_loss_db
    saturated = subscriber_count > rules.tube_capacity
    message = (
        f"Tube system topology: {rules.tube_primary.value} -> "
        f"{rules.tube_secondary_count}x{rules.tube_secondary.value} "
        f"(total loss: {total_loss:g} dB)."
    )
    if total_loss >= rules.max_passive_loss_db:
        message += " No further passive elements allowed."
    if saturated:
        message += (
            f" {subscriber_count} subscribers exceed the tube system fan-out of "
            f"{rules.tube_capacity}."
        )
    return TopologyPlan(
        subscriber_count=subscriber_count,
        pon_type=pon_type,
        topology_type=TopologyType.tube_system,
        stages=stages,
        total_loss_db=total_loss,
        capacity_limit=rules.capacity_for(pon_type),
        max_subscribers=rules.tube_capacity,
        saturated=saturated,
        message=message,
    )


def calculate_topology(
    subscriber_count: int,
    pon_type: PonType | str,
    rules: TopologyRules | None = None,
) -> TopologyPlan:
    """Select the splitter layout for a subscriber count on one PON port.

    Below the direct threshold customers attach straight to the OLT port.
    From the threshold up, the 1x16 -> 1x4 tube system is used; it already
    sits on the loss ceiling, so larger counts keep the same layout and the
    plan is marked saturated. Counts above the PON type's ONU limit still
    get this best-effort plan; ``validate_topology`` reports the overflow.
    Boundary counts resolve to the smaller layout.

    The tube loss is fixed by its two splitters (13 + 7 dB), so it only
    equals the loss ceiling at the default 20 dB. With a higher configured
    ceiling a saturated plan still reports the tube loss, and no
    at-maximum warning is raised for it.
    """
    rules = rules or get_rules()
    subscriber_count = validate_subscriber_count(subscriber_count)
    pon = coerce_pon_type(pon_type)

    if subscriber_count < rules.direct_subscriber_threshold:
        plan = _direct_plan(subscriber_count, pon, rules)
    else:
        plan = _tube_plan(subscriber_count, pon, rules)

    logger.debug(
        "Planned %s topology for %s subscribers on %s (loss %s dB, saturated=%s)",
        plan.topology_type.value,
        subscriber_count,
        pon.value,
        plan.total_loss_db,
        plan.saturated,
    )
    return plan
