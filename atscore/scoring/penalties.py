from __future__ import annotations

from datetime import date
from typing import Iterable

from pydantic import BaseModel, Field

from atscore.core.config.scoring import get_scoring_value
from atscore.schemas.engine import (
    PenaltyReport,
    PenaltySummary,
    ProportionalPenalty,
    Severity,
    SoftPenaltyResult,
)

from .dates import parse_date_flexible, validate_date_range
from .numeric import finite_or_zero, round_half_up

SEVERITY_ORDER: dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}

_DEFAULT_SEVERITY_PENALTIES: dict[str, tuple[float, float]] = {
    "critical": (3.0, 15),
    "high": (2.0, 12),
    "medium": (1.5, 10),
    "low": (1.0, 8),
}


class DateValidationReport(BaseModel):
    is_valid: bool = True
    warnings: list[str] = Field(default_factory=list)
    penalties: list[ProportionalPenalty] = Field(default_factory=list)


def global_penalty_cap() -> float:
    return float(get_scoring_value("penalties.global_cap", 15))


def per_item_penalty_cap() -> float:
    return float(get_scoring_value("penalties.per_item_cap", 15))


def severity_penalty(severity: Severity) -> tuple[float, float]:
    """(penalty percentage, max penalty) for a severity."""
    default_pct, default_max = _DEFAULT_SEVERITY_PENALTIES[severity]
    pct = float(get_scoring_value(f"penalties.severity.{severity}.percentage", default_pct))
    max_penalty = float(get_scoring_value(f"penalties.severity.{severity}.max_penalty", default_max))
    return pct, max_penalty


def calculate_proportional_penalties(missing: Iterable[tuple[str, Severity]]) -> PenaltyReport:
    """Turn (skill, importance) pairs into severity-scaled penalties."""
    penalties: list[ProportionalPenalty] = []
    for skill, severity in missing:
        pct, max_penalty = severity_penalty(severity)
        penalties.append(
            ProportionalPenalty(
                type="missing_critical_skill" if severity in ("critical", "high") else "missing_optional_skill",
                severity=severity,
                penalty_percentage=pct,
                max_penalty=max_penalty,
                applied_penalty=min(pct, max_penalty),
                reason=f"Missing {severity} skill: {skill}",
            )
        )

    total = sum(penalty.applied_penalty for penalty in penalties)
    return PenaltyReport(
        penalties=penalties,
        total_penalty=total,
        capped_penalty=min(total, per_item_penalty_cap() * len(penalties)),
    )


def apply_soft_penalties(
    base_score: float,
    penalties: Iterable[ProportionalPenalty],
    *,
    cap: float | None = None,
) -> SoftPenaltyResult:
    """Apply penalties most-severe first as compounding percentage reductions.

    The run stops once the accumulated reduction reaches the global cap.
    """
    cap = global_penalty_cap() if cap is None else cap
    running = max(0.0, finite_or_zero(base_score))
    applied: list[ProportionalPenalty] = []
    total_reduction = 0.0

    for penalty in sorted(penalties, key=lambda item: SEVERITY_ORDER[item.severity]):
        reduction = running * penalty.applied_penalty / 100
        running = max(0.0, running - reduction)
        total_reduction += reduction
        applied.append(penalty)
        if total_reduction >= cap:
            break

    return SoftPenaltyResult(
        adjusted_score=round_half_up(running, 1),
        applied_penalties=applied,
        total_reduction=round_half_up(total_reduction, 1),
    )


def validate_date_ranges(
    ranges: Iterable[tuple[str, str]],
    *,
    today: date | None = None,
) -> DateValidationReport:
    pct = float(get_scoring_value("penalties.date_issue.percentage", 1.0))
    max_penalty = float(get_scoring_value("penalties.date_issue.max_penalty", 5))
    warnings: list[str] = []
    penalties: list[ProportionalPenalty] = []

    for start, end in ranges:
        validation = validate_date_range(start, end, today=today)
        if not validation.is_valid:
            warnings.extend(validation.warnings)
            penalties.append(
                ProportionalPenalty(
                    type="date_issue",
                    severity="low",
                    penalty_percentage=pct,
                    max_penalty=max_penalty,
                    applied_penalty=min(pct, max_penalty),
                    reason=f"Date range issue: {', '.join(validation.warnings)}",
                )
            )
        if parse_date_flexible(start, today=today).penalize_future:
            warnings.append(f"Start date is in future without 'expected' keyword: {start}")
        if parse_date_flexible(end, today=today).penalize_future:
            warnings.append(f"End date is in future without 'expected' keyword: {end}")

    return DateValidationReport(is_valid=not penalties, warnings=warnings, penalties=penalties)


def create_penalty_summary(penalties: Iterable[ProportionalPenalty]) -> PenaltySummary:
    items = list(penalties)
    cap = global_penalty_cap()
    by_severity = {severity: 0 for severity in SEVERITY_ORDER}
    by_type: dict[str, int] = {}
    total = 0.0
    for penalty in items:
        by_severity[penalty.severity] += 1
        by_type[penalty.type] = by_type.get(penalty.type, 0) + 1
        total += penalty.applied_penalty

    capped = min(total, cap)
    return PenaltySummary(
        total_penalties=len(items),
        by_severity=by_severity,
        by_type=by_type,
        total_impact=round_half_up(capped, 1),
        description=f"{len(items)} penalties identified with {capped:.1f}% total reduction (capped at {cap:g}%)",
    )
