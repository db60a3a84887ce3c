from __future__ import annotations

import re
from datetime import date

from atscore.core.config.scoring import get_scoring_value
from atscore.normalize.document import ScoringDocument
from atscore.schemas.engine import CandidateLevel, CandidateLevelResult, RoleType
from atscore.schemas.scoring import Education, UserType

_FRESHER_INDICATORS = (
    "fresher",
    "fresh graduate",
    "recent graduate",
    "entry level",
    "entry-level",
    "no experience",
    "seeking first",
    "looking for first",
    "aspiring",
    "beginner",
    "final year",
    "graduating",
    "new graduate",
    "campus placement",
    "internship only",
)
_TEXT_YEARS_PATTERNS = (
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience", re.IGNORECASE),
    re.compile(r"experience\s*:?\s*(\d+)\+?\s*years?", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*years?\s*(?:in|of|working)\b", re.IGNORECASE),
)
_JD_YEARS_PATTERNS = (
    re.compile(r"(\d+)\+?\s*(?:-\s*\d+\s*)?years?", re.IGNORECASE),
    re.compile(r"minimum\s+(?:of\s+)?(\d+)\s*years?", re.IGNORECASE),
    re.compile(r"at\s+least\s+(\d+)\s*years?", re.IGNORECASE),
)
_MID_TITLE_RE = re.compile(r"\b(senior|sr\.?|lead|staff|manager|architect)\b", re.IGNORECASE)
_SENIOR_TITLE_RE = re.compile(r"\b(principal|director|head of|vp|vice president|chief)\b", re.IGNORECASE)
_INTERN_RE = re.compile(r"\bintern(ship)?\b|\btrainee\b|\bapprentice\b", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
_IN_PROGRESS_RE = re.compile(r"\b(expected|pursuing|present|current|ongoing)\b", re.IGNORECASE)

_LEVEL_ORDER: tuple[CandidateLevel, ...] = ("fresher", "junior", "mid", "senior")


def _years_from_text(text: str) -> int:
    years = 0
    for pattern in _TEXT_YEARS_PATTERNS:
        match = pattern.search(text)
        if match:
            years = max(years, int(match.group(1)))
    return years


def required_years_from_job_description(job_description: str) -> int | None:
    """Largest explicit years-of-experience requirement in a job description, if any."""
    found: list[int] = []
    for pattern in _JD_YEARS_PATTERNS:
        for match in pattern.finditer(job_description or ""):
            value = int(match.group(1))
            if 0 < value <= 40:
                found.append(value)
    return max(found) if found else None


def _has_recent_education(education: list[Education], text_lower: str, today: date) -> bool:
    window = int(get_scoring_value("candidate_level.recent_education_years", 2))
    for entry in education:
        blob = f"{entry.degree} {entry.year}"
        if _IN_PROGRESS_RE.search(blob):
            return True
        years = [int(match.group(0)) for match in _YEAR_RE.finditer(entry.year)]
        if years and today.year - max(years) <= window:
            return True
    return any(marker in text_lower for marker in ("expected graduation", "pursuing", "currently studying"))


def _raise_to(level: CandidateLevel, floor: CandidateLevel) -> CandidateLevel:
    return max(level, floor, key=_LEVEL_ORDER.index)


def role_type_for_level(level: CandidateLevel) -> RoleType:
    return "fresher" if level == "fresher" else "experienced"


def _declared_level(user_type: UserType) -> CandidateLevelResult:
    level: CandidateLevel = "mid" if user_type == "experienced" else "fresher"
    return CandidateLevelResult(
        level=level,
        confidence=1.0,
        signals=[f"Candidate declared as {user_type}"],
        role_type=role_type_for_level(level),
    )


def detect_candidate_level(
    document: ScoringDocument,
    *,
    today: date | None = None,
) -> CandidateLevelResult:
    """Classify seniority from resume signals, then apply a job-description years requirement."""
    if document.user_type:
        return _declared_level(document.user_type)

    today = today or date.today()
    text_lower = document.text_lower
    signals: list[str] = []

    has_fresher_indicator = any(indicator in text_lower for indicator in _FRESHER_INDICATORS)
    if has_fresher_indicator:
        signals.append("Fresher indicator found in text")

    entries = document.work_experience
    if entries:
        per_entry = float(get_scoring_value("candidate_level.years_per_work_entry", 2))
        total_years = per_entry * len(entries)
        signals.append(f"{total_years:.1f} years of experience estimated from {len(entries)} work entries")
    else:
        total_years = float(_years_from_text(document.text))
        if total_years:
            signals.append(f"{total_years:.1f} years of experience stated in text")
        else:
            signals.append("No work experience section found")

    only_internships = bool(entries) and all(
        _INTERN_RE.search(f"{entry.role} {entry.company}") for entry in entries
    )
    if only_internships:
        signals.append("Only internship experience found")

    strong_projects = int(get_scoring_value("candidate_level.strong_project_count", 3))
    if len(document.projects) >= strong_projects and total_years < 2:
        signals.append("Strong project portfolio (fresher signal)")

    recent_education = _has_recent_education(document.education, text_lower, today)
    if recent_education:
        signals.append("Recent education detected")

    level: CandidateLevel
    if has_fresher_indicator or (total_years < 1 and (only_internships or recent_education)):
        level, confidence = "fresher", (0.95 if has_fresher_indicator else 0.85)
    elif total_years < 2 or only_internships:
        level, confidence = "fresher", 0.75
    elif total_years < 4:
        level, confidence = "junior", 0.80
    elif total_years < 8:
        level, confidence = "mid", 0.85
    else:
        level, confidence = "senior", 0.90

    titles = " ".join(entry.role for entry in entries if not _INTERN_RE.search(entry.role))
    if level != "fresher" and titles:
        if _SENIOR_TITLE_RE.search(titles):
            level = _raise_to(level, "senior")
            signals.append("Executive or principal title found")
        elif _MID_TITLE_RE.search(titles):
            level = _raise_to(level, "mid")
            signals.append("Senior or lead title found")

    if document.has_job_description and level == "fresher":
        required = required_years_from_job_description(document.job_description)
        threshold = int(get_scoring_value("candidate_level.jd_experienced_years", 2))
        if required is not None and required >= threshold:
            level = "junior"
            signals.append(f"Job description requires {required}+ years of experience")

    return CandidateLevelResult(
        level=level,
        confidence=confidence,
        signals=signals,
        total_years_experience=total_years,
        role_type=role_type_for_level(level),
    )
