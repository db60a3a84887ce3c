from __future__ import annotations

import re
from typing import Iterable

from atscore.core.config.scoring import get_scoring_value
from atscore.normalize.utils import strip_bullet_prefix
from atscore.schemas.engine import (
    BulletListStuffingReport,
    KeywordContext,
    KeywordPosition,
    StuffingDetectionResult,
)

from .numeric import round_half_up, safe_ratio

ACTION_VERBS = frozenset(
    {
        "developed", "implemented", "architected", "designed", "built", "created",
        "led", "managed", "optimized", "improved", "reduced", "increased",
        "achieved", "delivered", "established", "engineered", "automated",
        "streamlined", "transformed", "executed", "spearheaded", "coordinated",
    }
)
CONTEXTUAL_WORDS = (
    "using", "with", "for", "in", "to", "via", "through", "implementing",
    "leveraging", "utilizing", "integrating", "building", "creating",
)

_METRIC_RE = re.compile(r"[$€£]\s?\d|\d+(?:[.,]\d+)?(?:%|x|k|m|b|\+)?", re.IGNORECASE)
_FIRST_WORD_RE = re.compile(r"[a-z]+")


def _max_keywords_per_span() -> int:
    return int(get_scoring_value("keyword_context.max_keywords_per_span", 2))


def _stuffing_threshold() -> float:
    return float(get_scoring_value("keyword_context.stuffing_threshold", 0.6))


def has_action_verb(span: str) -> bool:
    match = _FIRST_WORD_RE.match(strip_bullet_prefix(span).lower())
    return bool(match) and match.group(0) in ACTION_VERBS


def has_metric(span: str) -> bool:
    return bool(_METRIC_RE.search(span))


def keyword_position(index: int, total_length: int) -> KeywordPosition:
    relative = safe_ratio(index, total_length)
    if relative < 0.2:
        return "start"
    if relative > 0.8:
        return "end"
    return "middle"


def extract_context(span: str, index: int, keyword_length: int) -> str:
    radius = int(get_scoring_value("keyword_context.context_window", 50))
    return span[max(0, index - radius) : min(len(span), index + keyword_length + radius)].strip()


def context_score(span: str, keyword: str, action_verb: bool, metric: bool) -> float:
    score = 0.5
    if action_verb:
        score += 0.2
    if metric:
        score += 0.2

    lowered = span.lower()
    keyword_lower = keyword.lower()
    index = lowered.find(keyword_lower)
    if index != -1:
        window = int(get_scoring_value("keyword_context.preposition_window", 30))
        before = lowered[max(0, index - window) : index]
        after = lowered[index + len(keyword_lower) : index + len(keyword_lower) + window]
        if any(word in before or word in after for word in CONTEXTUAL_WORDS):
            score += 0.1
    return min(1.0, round(score, 4))


def is_keyword_stuffed(span: str, keyword: str, position: KeywordPosition, score: float) -> bool:
    if position == "start" and score < 0.6:
        return True
    if span.lower().count(keyword.lower()) > 1:
        return True
    density = safe_ratio(len(keyword.split()), len(span.split()))
    if density > float(get_scoring_value("keyword_context.density_threshold", 0.15)):
        return True
    return score < 0.5


def analyze_keyword(span: str, keyword: str) -> KeywordContext | None:
    """Context analysis for the first occurrence of keyword in span, or None when absent."""
    index = span.lower().find(keyword.lower())
    if not keyword or index == -1:
        return None
    action_verb = has_action_verb(span)
    metric = has_metric(span)
    position = keyword_position(index, len(span))
    score = context_score(span, keyword, action_verb, metric)
    return KeywordContext(
        keyword=keyword,
        context=extract_context(span, index, len(keyword)),
        has_action_verb=action_verb,
        has_metric=metric,
        context_score=score,
        is_stuffed=is_keyword_stuffed(span, keyword, position, score),
        position=position,
    )


def stuffing_score(contexts: list[KeywordContext], span: str) -> float:
    if not contexts:
        return 0.0
    stuffed_ratio = safe_ratio(sum(1 for item in contexts if item.is_stuffed), len(contexts))
    average = sum(item.context_score for item in contexts) / len(contexts)
    density = safe_ratio(len(contexts), len(span.split()))
    return min(1.0, stuffed_ratio * 0.5 + (1 - average) * 0.3 + density * 0.2)


def stuffing_penalty(score: float, keyword_count: int) -> int:
    threshold = _stuffing_threshold()
    limit = _max_keywords_per_span()
    penalty = 0.0
    if score > threshold:
        penalty += (score - threshold) * 50
    if keyword_count > limit:
        penalty += (keyword_count - limit) * 10
    return int(round_half_up(min(penalty, float(get_scoring_value("keyword_context.max_penalty", 50)))))


def _recommendations(contexts: list[KeywordContext], original_span: str | None) -> list[str]:
    recommendations: list[str] = []
    limit = _max_keywords_per_span()
    if len(contexts) > limit:
        recommendations.append(f"Reduce keywords: Found {len(contexts)} keywords, limit to {limit} per bullet")
    if any(item.position == "start" for item in contexts):
        recommendations.append("Avoid keyword stuffing at bullet start. Begin with strong action verbs instead.")
    weak = [item.keyword for item in contexts if item.context_score < 0.6]
    if weak:
        recommendations.append(
            f"Improve context for: {', '.join(weak)}. Add contextual words like \"using\", \"with\", \"for\"."
        )
    if contexts and not any(item.has_action_verb for item in contexts):
        recommendations.append("Add strong action verb at bullet start (Developed, Implemented, Architected, etc.)")
    if contexts and not any(item.has_metric for item in contexts):
        recommendations.append("Add quantifiable metrics to demonstrate impact (%, numbers, time saved)")
    stuffed = [item.keyword for item in contexts if item.is_stuffed]
    if stuffed:
        recommendations.append(f"Stuffed keywords detected: {', '.join(stuffed)}. Rewrite to integrate naturally.")
    if original_span is not None and contexts:
        original_lower = original_span.lower()
        inserted = [item for item in contexts if item.keyword.lower() not in original_lower]
        if len(inserted) > 2:
            recommendations.append(
                f"Too many new keywords inserted ({len(inserted)}). Only add keywords that fit the semantic context."
            )
    return recommendations


def validate_keyword_usage(
    span: str,
    keywords: Iterable[str],
    original_span: str | None = None,
) -> StuffingDetectionResult:
    """Score how naturally each keyword found in one short span is used."""
    contexts = [context for context in (analyze_keyword(span, keyword) for keyword in keywords) if context]
    score = stuffing_score(contexts, span)
    return StuffingDetectionResult(
        is_stuffed=score > _stuffing_threshold() or len(contexts) > _max_keywords_per_span(),
        stuffing_score=round(score, 4),
        keywords=contexts,
        recommendations=_recommendations(contexts, original_span),
        penalty_score=stuffing_penalty(score, len(contexts)),
    )


def validate_bullet_list(
    bullets: list[str],
    keywords: list[str],
    original_bullets: list[str] | None = None,
) -> BulletListStuffingReport:
    results = [
        validate_keyword_usage(
            bullet,
            keywords,
            original_bullets[index] if original_bullets and index < len(original_bullets) else None,
        )
        for index, bullet in enumerate(bullets)
    ]
    stuffed = sum(1 for result in results if result.is_stuffed)
    contexts = [context for result in results for context in result.keywords]
    recommendations: list[str] = []
    for result in results:
        for recommendation in result.recommendations:
            if recommendation not in recommendations:
                recommendations.append(recommendation)
    return BulletListStuffingReport(
        overall_stuffing_rate=round(safe_ratio(stuffed, max(len(bullets), 1)), 4),
        stuffed_bullets=stuffed,
        total_bullets=len(bullets),
        total_penalty=sum(result.penalty_score for result in results),
        average_context_score=(
            round(sum(item.context_score for item in contexts) / len(contexts), 4) if contexts else None
        ),
        recommendations=recommendations,
        results=results,
    )


def is_natural_keyword_use(span: str, keyword: str) -> bool:
    context = analyze_keyword(span, keyword)
    if context is None:
        return True
    return context.position != "start" and context.context_score >= 0.6 and context.has_action_verb


def generate_stuffing_report(result: StuffingDetectionResult) -> str:
    lines = [
        "=== KEYWORD STUFFING ANALYSIS ===",
        f"Stuffing Detected: {'YES' if result.is_stuffed else 'NO'}",
        f"Stuffing Score: {result.stuffing_score * 100:.1f}%",
        f"Penalty: -{result.penalty_score} points",
        "",
    ]
    if result.keywords:
        lines.append("KEYWORD ANALYSIS:")
        for index, item in enumerate(result.keywords, start=1):
            lines.extend(
                [
                    f"\n{index}. \"{item.keyword}\"",
                    f"   Position: {item.position}",
                    f"   Context Score: {item.context_score * 100:.1f}%",
                    f"   Has Action Verb: {'Yes' if item.has_action_verb else 'No'}",
                    f"   Has Metric: {'Yes' if item.has_metric else 'No'}",
                    f"   Stuffed: {'YES' if item.is_stuffed else 'No'}",
                ]
            )
    if result.recommendations:
        lines.append("\n\nRECOMMENDATIONS:")
        lines.extend(f"  {index}. {text}" for index, text in enumerate(result.recommendations, start=1))
    return "\n".join(lines)
