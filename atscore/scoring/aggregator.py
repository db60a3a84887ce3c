from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping

from atscore.core.config.scoring import get_scoring_value
from atscore.schemas.engine import RedFlag, ScoreMapperResult
from atscore.schemas.tiers import PENALTY_TIER, TierScore, TierScores

from .bands import get_interview_probability, get_match_band
from .numeric import round_half_up

logger = logging.getLogger(__name__)


def _contribution(key: str, tier: Any) -> float:
    if not isinstance(tier, TierScore):
        logger.warning("tier_score_malformed tier=%s type=%s", key, type(tier).__name__)
        return 0.0
    percentage = tier.percentage
    weight = tier.weight
    if not (math.isfinite(percentage) and math.isfinite(weight)):
        logger.warning("tier_score_non_finite tier=%s percentage=%s weight=%s", key, percentage, weight)
        return 0.0
    return percentage * weight / 100


def calculate_weighted_score(tier_scores: TierScores | Mapping[str, Any]) -> float:
    """Sum of percentage x current weight over all tiers except the penalty tier."""
    total = 0.0
    for key, tier in tier_scores.items():
        if key == PENALTY_TIER:
            continue
        total += _contribution(key, tier)
    return round(total, 2)


def total_red_flag_penalty(red_flags: Iterable[RedFlag]) -> float:
    return float(sum(min(0, flag.penalty) for flag in red_flags))


def critical_flag_count(red_flags: Iterable[RedFlag]) -> int:
    return sum(1 for flag in red_flags if flag.severity == "critical")


def has_auto_reject_risk(red_flags: Iterable[RedFlag], threshold: int | None = None) -> bool:
    if threshold is None:
        threshold = int(get_scoring_value("red_flags.auto_reject_critical_threshold", 3))
    return critical_flag_count(red_flags) >= threshold


def apply_penalties(weighted_score: float, total_penalty: float) -> float:
    if not math.isfinite(weighted_score):
        weighted_score = 0.0
    if not math.isfinite(total_penalty):
        total_penalty = 0.0
    return round(max(0.0, min(100.0, weighted_score + total_penalty)), 2)


def map_score(
    tier_scores: TierScores | Mapping[str, Any],
    red_flags: list[RedFlag],
    *,
    auto_reject_threshold: int | None = None,
) -> ScoreMapperResult:
    weighted = calculate_weighted_score(tier_scores)
    penalty = total_red_flag_penalty(red_flags)
    final_score = apply_penalties(weighted, penalty)
    # Bands follow the reported integer score, not the 2 dp final score.
    reported = round_half_up(final_score)
    return ScoreMapperResult(
        final_score=final_score,
        weighted_score=weighted,
        match_band=get_match_band(reported),
        interview_probability=get_interview_probability(reported),
        total_penalty=penalty,
        auto_reject_risk=has_auto_reject_risk(red_flags, auto_reject_threshold),
    )
