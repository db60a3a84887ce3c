from __future__ import annotations

import re

from atscore.normalize.document import ScoringDocument
from atscore.schemas.scoring import CriticalMetrics, CriticalMetricScore
from atscore.taxonomy import TaxonomyProvider

from .bands import get_critical_metric_status
from .input_quality import resume_skill_ids
from .numeric import finite_or_zero, round_half_up, safe_ratio

_QUANTIFIED_RE = re.compile(
    r"\d+\s*%|\$\s?\d+|\d+\s*(?:users?|customers?|clients?|projects?|team|people|million|k\b)",
    re.IGNORECASE,
)


def _metric(percentage: float, max_score: float, details: str) -> CriticalMetricScore:
    percentage = max(0.0, min(100.0, finite_or_zero(percentage)))
    return CriticalMetricScore(
        score=round_half_up(percentage / 100 * max_score, 2),
        max_score=max_score,
        percentage=round_half_up(percentage),
        status=get_critical_metric_status(percentage),  # type: ignore[arg-type]
        details=details,
    )


def has_quantified_result(text: str) -> bool:
    return bool(_QUANTIFIED_RE.search(text or ""))


def jd_keywords_match(keyword_match_rate: float | None) -> CriticalMetricScore:
    if keyword_match_rate is None:
        return _metric(50, 5, "No JD provided for comparison")
    rate = finite_or_zero(keyword_match_rate)
    return _metric(rate, 5, f"{int(round_half_up(rate))}% of JD keywords found in resume")


def technical_skills_alignment(document: ScoringDocument, taxonomy: TaxonomyProvider) -> CriticalMetricScore:
    if not document.has_job_description:
        return _metric(50, 5, "No JD provided for comparison")
    jd_skills = set(taxonomy.find_skills(document.job_description))
    if not jd_skills:
        return _metric(50, 5, "No technical skills named in the JD")
    matches = len(jd_skills & resume_skill_ids(document, taxonomy))
    return _metric(
        safe_ratio(matches, len(jd_skills)) * 100,
        5,
        f"{matches}/{len(jd_skills)} technical skills match JD",
    )


def quantified_results_presence(document: ScoringDocument) -> CriticalMetricScore:
    if not document.work_experience:
        return _metric(0, 3, "No work experience to analyze")
    bullets = document.experience_bullets()
    quantified = sum(1 for bullet in bullets if has_quantified_result(bullet))
    return _metric(safe_ratio(quantified, len(bullets)) * 100, 3, f"{quantified}/{len(bullets)} bullets have metrics")


def job_title_relevance(document: ScoringDocument) -> CriticalMetricScore:
    if not document.work_experience or not document.has_job_description:
        return _metric(50, 3, "Cannot assess title relevance")
    titles = [entry.role.lower() for entry in document.work_experience if entry.role.strip()]
    if not titles:
        return _metric(50, 3, "No job titles found in resume")
    jd_lower = document.job_description.lower()
    relevant = [title for title in titles if any(len(word) > 3 and word in jd_lower for word in title.split())]
    return _metric(
        safe_ratio(len(relevant), len(titles)) * 100,
        3,
        f"{len(relevant)}/{len(titles)} titles relevant to JD",
    )


def experience_relevance(document: ScoringDocument) -> CriticalMetricScore:
    if not document.work_experience or not document.has_job_description:
        return _metric(50, 3, "Cannot assess experience relevance")
    bullets = document.experience_bullets()
    if not bullets:
        return _metric(0, 3, "No experience bullets found")
    jd_lower = document.job_description.lower()
    relevant = [
        bullet
        for bullet in bullets
        if sum(1 for word in bullet.lower().split() if len(word) > 4 and word in jd_lower) >= 2
    ]
    return _metric(
        safe_ratio(len(relevant), len(bullets)) * 100,
        3,
        f"{len(relevant)}/{len(bullets)} bullets relevant to JD",
    )


def calculate_critical_metrics(
    document: ScoringDocument,
    taxonomy: TaxonomyProvider,
    keyword_match_rate: float | None,
) -> CriticalMetrics:
    """The Big 5 headline metrics, 19 points in total.

    keyword_match_rate is None when there is no job description to match against.
    """
    metrics = {
        "jd_keywords_match": jd_keywords_match(keyword_match_rate),
        "technical_skills_alignment": technical_skills_alignment(document, taxonomy),
        "quantified_results_presence": quantified_results_presence(document),
        "job_title_relevance": job_title_relevance(document),
        "experience_relevance": experience_relevance(document),
    }
    total = sum(finite_or_zero(metric.score) for metric in metrics.values())
    return CriticalMetrics(**metrics, total_critical_score=round(min(19.0, total), 2))


def empty_critical_metrics() -> CriticalMetrics:
    """Zeroed metrics for input too thin to assess."""

    def cannot_assess(max_score: float) -> CriticalMetricScore:
        return CriticalMetricScore(score=0, max_score=max_score, percentage=0, status="poor", details="Cannot assess")

    return CriticalMetrics(
        jd_keywords_match=cannot_assess(5),
        technical_skills_alignment=cannot_assess(5),
        quantified_results_presence=cannot_assess(3),
        job_title_relevance=cannot_assess(3),
        experience_relevance=cannot_assess(3),
        total_critical_score=0,
    )
