from __future__ import annotations

import logging
import math
from typing import Any

from atscore.core.config.scoring import get_scoring_value
from atscore.schemas.engine import RoleType
from atscore.schemas.tiers import PENALTY_TIER, SCORED_TIER_KEYS, TierScore, TierScores

logger = logging.getLogger(__name__)

DEFAULT_ROLE_WEIGHTS: dict[str, dict[str, int]] = {
    "fresher": {
        "experience": 0,
        "skills_keywords": 35,
        "content_structure": 12,
        "basic_structure": 10,
        "projects": 13,
        "education": 11,
        "competitive": 7,
        "certifications": 6,
        "culture_fit": 3,
        "qualitative": 3,
    },
    "experienced": {
        "experience": 25,
        "skills_keywords": 25,
        "content_structure": 10,
        "basic_structure": 8,
        "projects": 8,
        "education": 6,
        "competitive": 6,
        "certifications": 4,
        "culture_fit": 4,
        "qualitative": 4,
    },
}


def _valid_table(table: Any) -> bool:
    if not isinstance(table, dict) or set(table) != set(SCORED_TIER_KEYS):
        return False
    try:
        values = [float(table[key]) for key in SCORED_TIER_KEYS]
    except (TypeError, ValueError):
        return False
    if any(not math.isfinite(value) or value < 0 for value in values):
        return False
    return math.isclose(sum(values), 100.0, abs_tol=1e-9)


def get_role_weights(role_type: RoleType) -> dict[str, float]:
    """Weight table for a role type; a configured table that does not sum to 100 is ignored."""
    default = DEFAULT_ROLE_WEIGHTS[role_type]
    configured = get_scoring_value(f"weights.{role_type}", None)
    if configured is not None and not _valid_table(configured):
        logger.warning("tier_weight_table_invalid role_type=%s using_defaults=true", role_type)
        configured = None
    table = configured or default
    return {key: float(table[key]) for key in SCORED_TIER_KEYS}


def normalize_tier_weights(tier_scores: TierScores, role_type: RoleType) -> TierScores:
    """Assign the role-type weight table to every tier and re-derive contributions.

    The penalty tier always carries weight 0. Applying this twice with the same
    role type yields the same result.
    """
    weights = get_role_weights(role_type)
    reweighted: dict[str, TierScore] = {}
    for key, tier in tier_scores.items():
        weight = 0.0 if key == PENALTY_TIER else weights[key]
        reweighted[key] = tier.with_weight(weight)

    normalized = TierScores.from_mapping(reweighted)
    total = normalized.scored_weight_total()
    if not math.isclose(total, 100.0, abs_tol=1e-6):
        raise RuntimeError(f"Tier weights for role_type={role_type} sum to {total}, expected 100.")
    return normalized
