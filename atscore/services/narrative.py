from __future__ import annotations

from pydantic import BaseModel, Field

from atscore.schemas.engine import (
    CandidateLevelResult,
    ConfidenceBreakdown,
    InputQualityAssessment,
    RedFlag,
    ScoreMapperResult,
)
from atscore.schemas.scoring import CriticalMetrics, FormatIssue, MissingKeyword
from atscore.schemas.tiers import PENALTY_TIER, TierScores

MAX_ACTIONS = 10
MAX_RECOMMENDATIONS = 10
MAX_HIGHLIGHTS = 5


class Narrative(BaseModel):
    issues: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    analysis: str = ""


def _unique(items: list[str], limit: int) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            output.append(item)
        if len(output) >= limit:
            break
    return output


def build_narrative(
    *,
    overall: int,
    mapped: ScoreMapperResult,
    tier_scores: TierScores,
    red_flags: list[RedFlag],
    missing_keywords: list[MissingKeyword],
    format_issues: list[FormatIssue],
    critical_metrics: CriticalMetrics,
    candidate: CandidateLevelResult,
    confidence: ConfidenceBreakdown,
    weighting_mode: str,
) -> Narrative:
    scored = [(key, tier) for key, tier in tier_scores.items() if key != PENALTY_TIER and tier.weight > 0]
    by_impact = sorted(scored, key=lambda item: (item[1].percentage - 100) * item[1].weight)

    issues = [flag.description for flag in red_flags]
    issues.extend(issue for _, tier in by_impact if tier.percentage < 50 for issue in tier.top_issues[:2])

    actions = [
        f"Add '{item.keyword}' to your {item.suggested_placement.lower()}"
        for item in missing_keywords
        if item.tier == "critical"
    ]
    actions.extend(flag.recommendation for flag in red_flags)
    actions.extend(issue.recommendation for issue in format_issues if issue.severity in ("high", "critical"))
    actions.extend(tier.top_issues[0] for _, tier in by_impact if tier.top_issues)

    recommendations = [issue for _, tier in by_impact for issue in tier.top_issues]
    strengths = [
        f"Strong {tier.tier_name} ({tier.percentage:.0f}%)"
        for _, tier in sorted(scored, key=lambda item: -item[1].percentage)
        if tier.percentage >= 80
    ]
    strengths.extend(item for item in confidence.strengths if item != "Basic resume structure present")
    improvements = [f"{tier.tier_name}: {tier.percentage:.0f}%" for _, tier in by_impact if tier.percentage < 70]

    notes = [
        f"Candidate level: {candidate.level} ({candidate.role_type} weighting)",
        f"Weighting mode: {weighting_mode}",
        f"Confidence: {confidence.level} ({confidence.numeric_score}/100)",
    ]
    if mapped.total_penalty < 0:
        notes.append(f"Red flag penalty applied: {mapped.total_penalty:g} points")

    analysis = (
        f"Overall score {overall}/100 ({mapped.match_band}, interview probability {mapped.interview_probability}). "
        f"Weighted tier score {mapped.weighted_score:.1f} with {len(red_flags)} red flag(s). "
        f"Big 5 score: {critical_metrics.total_critical_score}/19."
    )
    return Narrative(
        issues=_unique(issues, MAX_RECOMMENDATIONS),
        notes=notes,
        actions=_unique(actions, MAX_ACTIONS),
        recommendations=_unique(recommendations, MAX_RECOMMENDATIONS),
        strengths=_unique(strengths, MAX_HIGHLIGHTS),
        improvements=_unique(improvements, MAX_HIGHLIGHTS),
        analysis=analysis,
    )


INVALID_INPUT_RECOMMENDATIONS = [
    "Ensure resume has standard sections (Experience, Education, Skills)",
    "Add contact information (email, phone)",
    "Include relevant work experience or projects",
    "List technical and soft skills",
]


def build_invalid_narrative(quality: InputQualityAssessment, overall: int) -> Narrative:
    return Narrative(
        issues=list(quality.issues),
        notes=[
            f"Input Quality: {quality.level}",
            f"Word count: {quality.word_count}",
            f"Sections detected: {quality.section_count}",
        ],
        actions=list(INVALID_INPUT_RECOMMENDATIONS),
        recommendations=list(INVALID_INPUT_RECOMMENDATIONS),
        improvements=quality.issues[:MAX_HIGHLIGHTS],
        analysis=" ".join(
            [
                f"Resume quality assessment: {quality.level}.",
                *(f"{issue}." for issue in quality.issues),
                f"Score capped at {overall}/100 until the resume is complete.",
            ]
        ),
    )
