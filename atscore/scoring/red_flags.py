from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Protocol, Sequence

from atscore.core.config.scoring import get_scoring_value
from atscore.normalize.document import ScoringDocument
from atscore.schemas.engine import RedFlag, RedFlagType
from atscore.schemas.tiers import TierScore
from atscore.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .dates import ParsedDate, duration_months, parse_date_flexible, split_date_range
from .keyword_context import validate_bullet_list

logger = logging.getLogger(__name__)

FLAG_ID_OFFSETS: dict[str, int] = {"employment": 1, "skills": 11, "formatting": 21}
FLAGS_PER_GROUP = 10


class RedFlagDetector(Protocol):
    def detect(self, document: ScoringDocument) -> list[RedFlag]:
        ...


def _penalty(name: str, default: int) -> int:
    return -abs(int(get_scoring_value(f"red_flags.penalties.{name}", default)))


def _flag(flag_type: RedFlagType, severity: str, penalty: int, description: str, recommendation: str) -> RedFlag:
    # Ids are assigned per group once every detector has run.
    return RedFlag(
        id=FLAG_ID_OFFSETS[flag_type],
        type=flag_type,
        severity=severity,  # type: ignore[arg-type]
        penalty=penalty,
        description=description,
        recommendation=recommendation,
    )


@dataclass(frozen=True)
class _Stint:
    label: str
    start: ParsedDate
    end: ParsedDate

    @property
    def months(self) -> int | None:
        return duration_months(self.start, self.end)


def _work_stints(document: ScoringDocument, today: date | None) -> list[_Stint]:
    stints: list[_Stint] = []
    for entry in document.work_experience:
        parts = split_date_range(entry.year)
        if parts is None:
            continue
        label = " at ".join(part for part in (entry.role, entry.company) if part) or entry.year
        stints.append(
            _Stint(
                label=label,
                start=parse_date_flexible(parts[0], today=today),
                end=parse_date_flexible(parts[1], today=today),
            )
        )
    return stints


def _month_index(parsed: ParsedDate, *, end_of_year: bool) -> int:
    return parsed.year * 12 + (parsed.month or (12 if end_of_year else 1))


@dataclass(frozen=True)
class EmploymentGapDetector:
    today: date | None = None

    def detect(self, document: ScoringDocument) -> list[RedFlag]:
        threshold = int(get_scoring_value("red_flags.employment_gap_months", 6))
        stints = [stint for stint in _work_stints(document, self.today) if stint.months is not None]
        stints.sort(key=lambda stint: _month_index(stint.start, end_of_year=False))
        flags: list[RedFlag] = []
        for previous, current in zip(stints, stints[1:]):
            gap = _month_index(current.start, end_of_year=False) - _month_index(previous.end, end_of_year=True)
            if gap > threshold:
                flags.append(
                    _flag(
                        "employment",
                        "medium",
                        _penalty("employment_gap", 3),
                        f"Employment gap of {gap} months before {current.label}",
                        "Briefly explain the gap (education, freelance work, caregiving) in your summary or experience.",
                    )
                )
        return flags


@dataclass(frozen=True)
class JobHoppingDetector:
    today: date | None = None

    def detect(self, document: ScoringDocument) -> list[RedFlag]:
        short_months = int(get_scoring_value("red_flags.short_tenure_months", 12))
        min_stints = int(get_scoring_value("red_flags.job_hopping_min_short_stints", 3))
        short = [
            stint
            for stint in _work_stints(document, self.today)
            if stint.months is not None and stint.months < short_months and not stint.end.is_present
        ]
        if len(short) < min_stints:
            return []
        return [
            _flag(
                "employment",
                "medium",
                _penalty("job_hopping", 3),
                f"{len(short)} roles lasted less than {short_months} months",
                "Group contract or short-term roles together and highlight what you delivered in each.",
            )
        ]


@dataclass(frozen=True)
class ConflictingDatesDetector:
    today: date | None = None

    def detect(self, document: ScoringDocument) -> list[RedFlag]:
        flags: list[RedFlag] = []
        for stint in _work_stints(document, self.today):
            if stint.start.is_valid and stint.end.is_valid and stint.months is None:
                flags.append(
                    _flag(
                        "formatting",
                        "low",
                        _penalty("conflicting_dates", 2),
                        f"End date is before start date for {stint.label}",
                        "Check the dates on this role so they read start to end.",
                    )
                )
        return flags


@dataclass(frozen=True)
class KeywordStuffingDetector:
    taxonomy: TaxonomyProvider | None = None

    def detect(self, document: ScoringDocument) -> list[RedFlag]:
        taxonomy = self.taxonomy or get_default_taxonomy_provider()
        bullets = document.bullets
        keywords = sorted({term for bullet in bullets for term in taxonomy.find_skills(bullet).values()})
        if not bullets or not keywords:
            return []
        report = validate_bullet_list(bullets, keywords)
        threshold = float(get_scoring_value("red_flags.stuffing_rate_threshold", 0.3))
        if report.overall_stuffing_rate <= threshold:
            return []
        return [
            _flag(
                "skills",
                "critical",
                _penalty("keyword_stuffing", 5),
                f"Keyword stuffing detected in {report.stuffed_bullets} of {report.total_bullets} bullets",
                "Work each skill into a bullet that states what you built with it and the result.",
            )
        ]


def default_red_flag_detectors(taxonomy: TaxonomyProvider | None = None) -> list[RedFlagDetector]:
    return [
        EmploymentGapDetector(),
        JobHoppingDetector(),
        KeywordStuffingDetector(taxonomy=taxonomy),
        ConflictingDatesDetector(),
    ]


def assign_flag_ids(flags: Iterable[RedFlag]) -> list[RedFlag]:
    """Give each flag a stable id within its group, in detection order.

    Each group owns FLAGS_PER_GROUP ids; flags past that are dropped.
    """
    counters = dict(FLAG_ID_OFFSETS)
    numbered: list[RedFlag] = []
    for flag in flags:
        if counters[flag.type] - FLAG_ID_OFFSETS[flag.type] >= FLAGS_PER_GROUP:
            logger.info("red_flag_dropped type=%s description=%s", flag.type, flag.description)
            continue
        numbered.append(flag.model_copy(update={"id": counters[flag.type]}))
        counters[flag.type] += 1
    return numbered


def detect_red_flags(document: ScoringDocument, detectors: Sequence[RedFlagDetector]) -> list[RedFlag]:
    flags: list[RedFlag] = []
    for detector in detectors:
        try:
            flags.extend(detector.detect(document))
        except Exception as exc:
            logger.warning("red_flag_detector_failed detector=%s error=%s", type(detector).__name__, exc)
    return assign_flag_ids(flags)


def red_flag_tier_score(flags: Sequence[RedFlag]) -> TierScore:
    max_score = int(get_scoring_value("red_flags.tier_max_score", 30))
    total = sum(abs(flag.penalty) for flag in flags)
    remaining = max(0, max_score - total)
    return TierScore.for_tier(
        "red_flags",
        percentage=100 * remaining / max_score if max_score > 0 else 0.0,
        top_issues=[flag.description for flag in flags],
    )


def incomplete_resume_flag() -> RedFlag:
    return RedFlag(
        id=FLAG_ID_OFFSETS["formatting"],
        type="formatting",
        severity="critical",
        penalty=-20,
        description="Incomplete Resume",
        recommendation="Add work experience, education, skills and contact details before scoring again.",
    )
