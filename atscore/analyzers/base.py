from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple, Union

from pydantic import BaseModel, Field

from atscore.normalize.document import ScoringDocument
from atscore.schemas.scoring import FormatIssue, OrderIssue
from atscore.schemas.tiers import TIER_DEFINITIONS, TierScore


class TierAnalysis(BaseModel):
    """A tier score plus the side findings some analyzers report."""

    tier_score: TierScore
    order_issues: list[OrderIssue] = Field(default_factory=list)
    format_issues: list[FormatIssue] = Field(default_factory=list)


TierAnalyzer = Callable[[ScoringDocument], Union[TierScore, TierAnalysis]]


class AnalyzerError(RuntimeError):
    def __init__(self, tier_key: str, cause: BaseException | str) -> None:
        super().__init__(f"{tier_key}: {cause}")
        self.tier_key = tier_key
        self.cause = cause


@dataclass(frozen=True)
class AnalyzerOutcome:
    tier_key: str
    analysis: TierAnalysis | None = None
    error: AnalyzerError | None = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None and self.error is None

    @classmethod
    def success(cls, tier_key: str, analysis: TierAnalysis) -> "AnalyzerOutcome":
        return cls(tier_key=tier_key, analysis=analysis)

    @classmethod
    def failure(cls, tier_key: str, cause: BaseException | str) -> "AnalyzerOutcome":
        return cls(tier_key=tier_key, error=AnalyzerError(tier_key, cause))


def coerce_analysis(tier_key: str, result: object) -> TierAnalysis:
    """Validate an analyzer's return value against the tier it was registered for."""
    if isinstance(result, TierScore):
        result = TierAnalysis(tier_score=result)
    if not isinstance(result, TierAnalysis):
        raise AnalyzerError(tier_key, f"unexpected result type {type(result).__name__}")
    expected_number = TIER_DEFINITIONS[tier_key][0]
    if result.tier_score.tier_number != expected_number:
        raise AnalyzerError(
            tier_key,
            f"tier_number {result.tier_score.tier_number} does not match expected {expected_number}",
        )
    return result


class Check(NamedTuple):
    passed: bool
    issue: str
    weight: float = 1.0


def checklist_score(tier_key: str, checks: list[Check]) -> TierScore:
    """Score a tier as the weighted share of passed checks; failed checks become issues."""
    total_weight = sum(check.weight for check in checks)
    passed_weight = sum(check.weight for check in checks if check.passed)
    percentage = 100 * passed_weight / total_weight if total_weight > 0 else 0.0
    issues = [check.issue for check in sorted(checks, key=lambda item: -item.weight) if not check.passed]
    return TierScore.for_tier(tier_key, percentage=percentage, top_issues=issues)
