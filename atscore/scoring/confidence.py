from __future__ import annotations

from typing import Literal

from atscore.core.config.scoring import get_scoring_value
from atscore.schemas.engine import (
    ConfidenceBreakdown,
    ConfidenceComponents,
    ConfidenceFeatures,
    ConfidenceLevel,
)

from .numeric import clamp, round_half_up, safe_ratio

ScoringMode = Literal["general", "jd_based"]

_DEFAULT_WEIGHTS = {
    "literal_match": 0.30,
    "semantic_similarity": 0.25,
    "experience_relevancy": 0.20,
    "keyword_coverage": 0.15,
    "context_quality": 0.10,
}


def _weight(name: str) -> float:
    return float(get_scoring_value(f"confidence.weights.{name}", _DEFAULT_WEIGHTS[name]))


def keyword_coverage_score(missing: int, total: int) -> float:
    if total <= 0:
        return float(get_scoring_value("confidence.neutral_keyword_coverage", 50))
    return clamp(100 * (1 - safe_ratio(missing, total)), 0, 100)


def context_quality_score(features: ConfidenceFeatures) -> float:
    score = features.context_quality_score
    if features.has_quantified_achievements:
        score += float(get_scoring_value("confidence.quantified_bonus", 15))
    score += features.section_completeness / 100 * 10
    score += features.formatting_score / 100 * 10
    return min(100.0, score)


def confidence_level(score: float) -> ConfidenceLevel:
    if score >= float(get_scoring_value("confidence.thresholds.high", 80)):
        return "High"
    if score >= float(get_scoring_value("confidence.thresholds.medium", 50)):
        return "Medium"
    return "Low"


def _reasoning(features: ConfidenceFeatures, score: int) -> list[str]:
    reasoning: list[str] = []
    if score >= 80:
        reasoning.append("Strong overall match with high confidence in scoring accuracy")
    elif score >= 50:
        reasoning.append("Moderate match with reasonable confidence in scoring")
    else:
        reasoning.append("Weak match with limited confidence in scoring accuracy")

    literal = features.literal_match_percentage
    if literal >= 70:
        reasoning.append(f"High literal keyword match ({literal:.1f}%)")
    elif literal < 40:
        reasoning.append(f"Low literal keyword match ({literal:.1f}%) reduces confidence")

    if features.semantic_similarity_score >= 0.75:
        reasoning.append("Strong semantic similarity between resume and job requirements")
    elif features.semantic_similarity_score < 0.5:
        reasoning.append("Weak semantic similarity impacts confidence")

    if features.missing_critical_keywords_count > 0:
        reasoning.append(f"{features.missing_critical_keywords_count} critical keywords missing from resume")
    if features.context_quality_score < 50:
        reasoning.append("Keywords lack contextual support (action verbs, metrics)")
    if not features.has_quantified_achievements:
        reasoning.append("Limited quantified achievements reduce scoring confidence")
    return reasoning


def _strengths(features: ConfidenceFeatures) -> list[str]:
    strengths: list[str] = []
    if features.literal_match_percentage >= 70:
        strengths.append("Excellent keyword coverage")
    if features.semantic_similarity_score >= 0.75:
        strengths.append("Strong semantic alignment with job requirements")
    if features.experience_relevancy_percentage >= 70:
        strengths.append("Highly relevant work experience")
    if features.context_quality_score >= 70:
        strengths.append("Skills demonstrated in meaningful context")
    if features.has_quantified_achievements:
        strengths.append("Quantified achievements present")
    if features.formatting_score >= 80:
        strengths.append("Professional formatting and structure")
    return strengths or ["Basic resume structure present"]


def _weaknesses(features: ConfidenceFeatures) -> list[str]:
    weaknesses: list[str] = []
    if features.literal_match_percentage < 40:
        weaknesses.append("Low keyword match rate")
    if features.semantic_similarity_score < 0.5:
        weaknesses.append("Weak semantic alignment with job description")
    if features.experience_relevancy_percentage < 40:
        weaknesses.append("Limited relevant experience")
    if features.missing_critical_keywords_count > 3:
        weaknesses.append("Multiple critical keywords missing")
    if features.context_quality_score < 40:
        weaknesses.append("Skills lack contextual support")
    if not features.has_quantified_achievements:
        weaknesses.append("No quantified achievements")
    if features.section_completeness < 60:
        weaknesses.append("Incomplete resume sections")
    return weaknesses or ["No major weaknesses identified"]


def calculate_confidence(features: ConfidenceFeatures) -> ConfidenceBreakdown:
    """Blend five weighted signals into a 0-100 confidence score and a High/Medium/Low label."""
    literal = features.literal_match_percentage * _weight("literal_match")
    semantic = features.semantic_similarity_score * 100 * _weight("semantic_similarity")
    experience = features.experience_relevancy_percentage * _weight("experience_relevancy")
    coverage = keyword_coverage_score(
        features.missing_critical_keywords_count,
        features.total_critical_keywords,
    ) * _weight("keyword_coverage")
    context = context_quality_score(features) * _weight("context_quality")

    numeric_score = int(clamp(round_half_up(literal + semantic + experience + coverage + context), 0, 100))
    return ConfidenceBreakdown(
        numeric_score=numeric_score,
        level=confidence_level(numeric_score),
        components=ConfidenceComponents(
            literal_match=round_half_up(literal, 1),
            semantic_similarity=round_half_up(semantic, 1),
            experience_relevancy=round_half_up(experience, 1),
            keyword_coverage=round_half_up(coverage, 1),
            context_quality=round_half_up(context, 1),
        ),
        reasoning=_reasoning(features, numeric_score),
        strengths=_strengths(features),
        weaknesses=_weaknesses(features),
    )


def adjust_confidence_for_mode(breakdown: ConfidenceBreakdown, mode: ScoringMode) -> ConfidenceBreakdown:
    if mode != "general":
        return breakdown
    boost = int(get_scoring_value("confidence.general_mode_boost", 5))
    score = min(100, breakdown.numeric_score + boost)
    return breakdown.model_copy(
        update={
            "numeric_score": score,
            "level": confidence_level(score),
            "reasoning": [
                *breakdown.reasoning,
                "General mode: Confidence slightly boosted due to broader matching criteria",
            ],
        }
    )


def penalize_missing_semantic(breakdown: ConfidenceBreakdown, detail: str = "") -> ConfidenceBreakdown:
    """Lower confidence when the semantic signal had to be replaced by literal matching."""
    penalty = int(get_scoring_value("confidence.semantic_unavailable_penalty", 10))
    score = max(0, breakdown.numeric_score - penalty)
    weakness = "Semantic matching unavailable; confidence based on literal keyword match only"
    return breakdown.model_copy(
        update={
            "numeric_score": score,
            "level": confidence_level(score),
            "weaknesses": [item for item in breakdown.weaknesses if item != "No major weaknesses identified"]
            + [weakness],
            "reasoning": [*breakdown.reasoning, detail] if detail else breakdown.reasoning,
        }
    )


def features_from_analysis(
    *,
    matched_keywords: int,
    total_keywords: int,
    semantic_similarity: float,
    years_of_experience: float,
    required_years: float | None,
    missing_critical_keywords: int,
    total_critical_keywords: int,
    context_quality: float,
    has_quantified_achievements: bool,
    section_completeness: float,
    formatting_score: float,
) -> ConfidenceFeatures:
    """Assemble confidence features from raw analysis counts."""
    literal = clamp(safe_ratio(matched_keywords, total_keywords) * 100, 0, 100)
    if required_years and required_years > 0:
        experience = clamp(years_of_experience / required_years * 100, 0, 100)
    else:
        experience = 100.0
    return ConfidenceFeatures(
        literal_match_percentage=literal,
        semantic_similarity_score=clamp(semantic_similarity, 0, 1),
        experience_relevancy_percentage=experience,
        missing_critical_keywords_count=max(0, missing_critical_keywords),
        total_critical_keywords=max(0, total_critical_keywords),
        context_quality_score=clamp(context_quality, 0, 100),
        has_quantified_achievements=has_quantified_achievements,
        section_completeness=clamp(section_completeness, 0, 100),
        formatting_score=clamp(formatting_score, 0, 100),
    )
