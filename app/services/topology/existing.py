"""Validation of topologies reconstructed from stored device records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from app.errors import InvalidInputError
from app.models.topology import (
    DeviceType,
    PonType,
    SplitterStage,
    SplitterType,
    TopologyPlan,
    ValidationResult,
    normalize_type_code,
)
from app.services.topology.recommendations import recommend_for_plan
from app.services.topology.rules import TopologyRules, get_max_subscribers, get_rules
from app.services.topology.validator import classify_stages, validate_topology
from app.validators.topology import coerce_device_type, coerce_pon_type, validate_subscriber_count

logger = logging.getLogger(__name__)

_NO_LOSS_CODES = {"", "direct", "none"}


def stages_from_history(
    history: Iterable[Mapping], rules: TopologyRules | None = None
) -> tuple[SplitterStage, ...]:
    """Turn ``{device_type, splitter_type}`` records into splitter stages.

    Records are ordered from the OLT outward. OLT entries and ``direct``
    links carry no passive loss and are skipped. Splitter codes that are
    not in the rules table become zero-loss stages with no known type.
    """
    rules = rules or get_rules()
    stages: list[SplitterStage] = []
    cumulative = 0.0
    for position, record in enumerate(history, start=1):
        if not isinstance(record, Mapping):
            raise InvalidInputError(f"Stage {position} must be an object", field="stages")
        device_type = coerce_device_type(
            record.get("device_type") or record.get("deviceType") or "ms"
        )
        raw_code = record.get("splitter_type") or record.get("splitterType") or ""
        code = normalize_type_code(str(raw_code))
        if device_type == DeviceType.olt or code in _NO_LOSS_CODES:
            continue

        try:
            splitter: SplitterType | None = SplitterType(code)
        except ValueError:
            splitter = None
            logger.warning(
                "UNKNOWN_SPLITTER_TYPE: stage %s (%s) has splitter type %r",
                position,
                device_type.value,
                raw_code,
            )

        loss = rules.loss_for(splitter) if splitter is not None else 0.0
        cumulative += loss
        stages.append(
            SplitterStage(
                stage_index=len(stages) + 1,
                splitter_type=splitter,
                insertion_loss_db=loss,
                cumulative_loss_db=cumulative,
                device_role=device_type,
                output_ports=splitter.fanout if splitter is not None else 0,
                can_add_more=cumulative + rules.smallest_splitter_loss_db
                <= rules.max_passive_loss_db,
                unknown_splitter_code=None if splitter is not None else str(raw_code),
            )
        )
    return tuple(stages)


def plan_from_history(
    history: Iterable[Mapping],
    pon_type: PonType | str,
    subscriber_count: int | None = None,
    rules: TopologyRules | None = None,
) -> TopologyPlan:
    rules = rules or get_rules()
    pon = coerce_pon_type(pon_type)
    stages = stages_from_history(history, rules)
    max_subscribers = get_max_subscribers(stages)
    if subscriber_count is None:
        # Without a live count, judge the tree by what it can fan out to.
        subscriber_count = max(max_subscribers, 1)
    subscriber_count = validate_subscriber_count(subscriber_count)
    topology_type = classify_stages(stages, rules)
    total_loss = stages[-1].cumulative_loss_db if stages else 0.0
    return TopologyPlan(
        subscriber_count=subscriber_count,
        pon_type=pon,
        topology_type=topology_type,
        stages=stages,
        total_loss_db=total_loss,
        capacity_limit=rules.capacity_for(pon),
        max_subscribers=max_subscribers if stages else subscriber_count,
        saturated=bool(stages) and 0 < max_subscribers < subscriber_count,
        message=f"Existing {topology_type.value} topology with {len(stages)} passive stage(s)",
    )


def validate_existing_topology(
    history: Iterable[Mapping],
    pon_type: PonType | str,
    subscriber_count: int | None = None,
    rules: TopologyRules | None = None,
) -> tuple[TopologyPlan, ValidationResult, list[str]]:
    rules = rules or get_rules()
    plan = plan_from_history(history, pon_type, subscriber_count, rules)
    validation = validate_topology(plan, rules)
    return plan, validation, recommend_for_plan(plan, validation, rules)
