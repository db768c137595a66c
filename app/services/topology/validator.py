"""Topology validation against the loss budget and PON capacity."""

from __future__ import annotations

from collections.abc import Sequence

from app.models.topology import (
    IssueCode,
    SplitterStage,
    TopologyPlan,
    TopologyType,
    ValidationIssue,
    ValidationResult,
)
from app.services.topology.rules import TopologyRules, get_rules


def classify_stages(stages: Sequence[SplitterStage], rules: TopologyRules) -> TopologyType:
    if not stages:
        return TopologyType.direct
    if any(stage.splitter_type is None for stage in stages):
        return TopologyType.custom
    if len(stages) == 1:
        return TopologyType.single_stage
    if len(stages) == 2 and (
        stages[0].splitter_type == rules.tube_primary
        and stages[1].splitter_type == rules.tube_secondary
    ):
        return TopologyType.tube_system
    return TopologyType.custom


def validate_topology(plan: TopologyPlan, rules: TopologyRules | None = None) -> ValidationResult:
    """Check a plan and return its errors and warnings.

    Loss beyond the ceiling and subscribers beyond the PON limit are
    errors. Sitting exactly on the loss ceiling, an unrecognised stage
    pattern, a saturated fan-out and unknown splitter codes are warnings.
    """
    rules = rules or get_rules()
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    max_loss = rules.max_passive_loss_db

    if plan.total_loss_db > max_loss:
        errors.append(
            ValidationIssue(
                IssueCode.loss_budget_exceeded,
                f"Total loss {plan.total_loss_db:g} dB exceeds maximum allowed {max_loss:g} dB",
            )
        )
    elif plan.total_loss_db == max_loss:
        warnings.append(
            ValidationIssue(
                IssueCode.loss_budget_at_maximum,
                f"Total loss is at the {max_loss:g} dB maximum, no further elements allowed",
            )
        )

    if plan.subscriber_count > plan.capacity_limit:
        errors.append(
            ValidationIssue(
                IssueCode.capacity_exceeded,
                f"Subscriber count {plan.subscriber_count} exceeds "
                f"{plan.pon_type.label} capacity limit of {plan.capacity_limit}",
            )
        )

    if classify_stages(plan.stages, rules) == TopologyType.custom:
        pattern = " -> ".join(stage.splitter_label for stage in plan.stages)
        warnings.append(
            ValidationIssue(
                IssueCode.non_standard_topology,
                f"Non-standard topology: {pattern}",
            )
        )

    if plan.saturated:
        warnings.append(
            ValidationIssue(
                IssueCode.fanout_saturated,
                f"Subscriber count {plan.subscriber_count} exceeds the passive fan-out "
                f"of {plan.max_subscribers}",
            )
        )

    for stage in plan.stages:
        if stage.splitter_type is None:
            warnings.append(
                ValidationIssue(
                    IssueCode.unknown_splitter_type,
                    f"Stage {stage.stage_index} has unknown splitter type "
                    f"'{stage.splitter_label}'; its loss was not counted",
                )
            )

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))
