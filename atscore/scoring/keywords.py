from __future__ import annotations

import re

from pydantic import BaseModel, Field

from atscore.normalize.document import ScoringDocument
from atscore.schemas.engine import Severity
from atscore.schemas.scoring import KeywordTier, MissingKeyword
from atscore.taxonomy import TaxonomyProvider

from .input_quality import resume_skill_ids
from .numeric import safe_ratio

_CRITICAL_MARKERS = re.compile(r"\b(required|must|essential|mandatory|minimum|requirements?)\b", re.IGNORECASE)
_OPTIONAL_MARKERS = re.compile(r"\b(preferred|nice to have|bonus|plus|desirable|optional|familiarity)\b", re.IGNORECASE)

_TIER_RANK: dict[str, int] = {"critical": 0, "important": 1, "nice_to_have": 2}
_TIER_COLOR = {"critical": "red", "important": "orange", "nice_to_have": "yellow"}
_TIER_IMPACT = {"critical": 5.0, "important": 3.0, "nice_to_have": 1.0}
_TIER_SEVERITY: dict[str, Severity] = {"critical": "critical", "important": "medium", "nice_to_have": "low"}


class JobKeyword(BaseModel):
    keyword: str
    canonical_id: str
    tier: KeywordTier


class KeywordMatchReport(BaseModel):
    keywords: list[JobKeyword] = Field(default_factory=list)
    matched: list[JobKeyword] = Field(default_factory=list)
    missing: list[JobKeyword] = Field(default_factory=list)

    @property
    def match_rate(self) -> float:
        """Share of job keywords found in the resume, 0-100."""
        return round(safe_ratio(len(self.matched), len(self.keywords)) * 100, 2)

    @property
    def critical_keywords(self) -> list[JobKeyword]:
        return [item for item in self.keywords if item.tier == "critical"]

    @property
    def missing_critical(self) -> list[JobKeyword]:
        return [item for item in self.missing if item.tier == "critical"]


def _line_tier(line: str) -> KeywordTier:
    if _CRITICAL_MARKERS.search(line):
        return "critical"
    if _OPTIONAL_MARKERS.search(line):
        return "nice_to_have"
    return "important"


def extract_job_keywords(job_description: str, taxonomy: TaxonomyProvider) -> list[JobKeyword]:
    """Known skills named in a job description, tiered by the wording of their line."""
    found: dict[str, JobKeyword] = {}
    for line in (job_description or "").splitlines():
        tier = _line_tier(line)
        for canonical, term in taxonomy.find_skills(line).items():
            current = found.get(canonical)
            if current is None or _TIER_RANK[tier] < _TIER_RANK[current.tier]:
                found[canonical] = JobKeyword(keyword=term, canonical_id=canonical, tier=tier)
    return sorted(found.values(), key=lambda item: (_TIER_RANK[item.tier], item.keyword))


def match_keywords(
    document: ScoringDocument,
    keywords: list[JobKeyword],
    taxonomy: TaxonomyProvider,
    *,
    extra_matches: list[str] | None = None,
) -> KeywordMatchReport:
    """Split job keywords into matched and missing, resolving synonyms through the taxonomy.

    extra_matches names keywords confirmed by another signal, such as semantic matching.
    """
    resume_ids = resume_skill_ids(document, taxonomy)
    rescued = {item.lower() for item in extra_matches or []}
    matched: list[JobKeyword] = []
    missing: list[JobKeyword] = []
    for item in keywords:
        if item.canonical_id in resume_ids or item.keyword.lower() in rescued:
            matched.append(item)
        else:
            missing.append(item)
    return KeywordMatchReport(keywords=keywords, matched=matched, missing=missing)


def _suggested_placement(item: JobKeyword) -> str:
    if item.tier == "critical":
        return "Skills section and a relevant experience bullet"
    if item.tier == "important":
        return "Skills section"
    return "Skills section or summary, if genuinely applicable"


def build_missing_keywords(report: KeywordMatchReport) -> list[MissingKeyword]:
    return [
        MissingKeyword(
            keyword=item.keyword,
            tier=item.tier,
            impact=_TIER_IMPACT[item.tier],
            suggested_placement=_suggested_placement(item),
            color=_TIER_COLOR[item.tier],  # type: ignore[arg-type]
        )
        for item in report.missing
    ]


def missing_keyword_severities(report: KeywordMatchReport) -> list[tuple[str, Severity]]:
    return [(item.keyword, _TIER_SEVERITY[item.tier]) for item in report.missing]
