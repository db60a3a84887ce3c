from .aggregator import calculate_weighted_score, has_auto_reject_risk, map_score, total_red_flag_penalty
from .bands import band_rank, get_interview_probability, get_match_band
from .candidate_level import detect_candidate_level, role_type_for_level
from .confidence import adjust_confidence_for_mode, calculate_confidence, penalize_missing_semantic
from .keyword_context import validate_bullet_list, validate_keyword_usage
from .penalties import apply_soft_penalties, calculate_proportional_penalties, create_penalty_summary
from .red_flags import RedFlagDetector, default_red_flag_detectors, detect_red_flags
from .weights import get_role_weights, normalize_tier_weights

__all__ = [
    "RedFlagDetector",
    "adjust_confidence_for_mode",
    "apply_soft_penalties",
    "band_rank",
    "calculate_confidence",
    "calculate_proportional_penalties",
    "calculate_weighted_score",
    "create_penalty_summary",
    "default_red_flag_detectors",
    "detect_candidate_level",
    "detect_red_flags",
    "get_interview_probability",
    "get_match_band",
    "get_role_weights",
    "has_auto_reject_risk",
    "map_score",
    "normalize_tier_weights",
    "penalize_missing_semantic",
    "role_type_for_level",
    "total_red_flag_penalty",
    "validate_bullet_list",
    "validate_keyword_usage",
]
