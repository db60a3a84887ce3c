from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, Field

_MONTH_NAMES = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}
_MONTH_RE = re.compile(r"\b(" + "|".join(sorted(_MONTH_NAMES, key=len, reverse=True)) + r")\b")
_EXPECTED_KEYWORDS = ("expected", "incoming", "anticipated", "graduating", "completion", "prospective")
_PRESENT_KEYWORDS = ("present", "current", "now", "ongoing", "till date", "to date")
_EXPECTED_RE = re.compile("|".join(_EXPECTED_KEYWORDS))
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
_MONTH_YEAR_RE = re.compile(r"(\d{1,2})[/\-.](\d{4})")
_YEAR_MONTH_RE = re.compile(r"(\d{4})[/\-.](\d{1,2})")
_RANGE_SPLIT_RE = re.compile(
    r"\s+(?:-|–|—|to)\s+|\s*[–—]\s*"
    # "2015-2016", "Jan 2015-Dec 2016"; "01-2023" and "2023-05" stay whole.
    r"|(?<=(?:19|20)\d{2})\s*-\s*(?=(?:19|20)\d{2}\b|(?:"
    + "|".join(sorted(_MONTH_NAMES, key=len, reverse=True))
    + r")\b|present\b|current\b|now\b)",
    re.IGNORECASE,
)


class ParsedDate(BaseModel):
    year: int = 0
    month: int | None = Field(default=None, ge=1, le=12)
    is_future: bool = False
    is_expected: bool = False
    is_present: bool = False
    original: str = ""
    normalized: str = "Invalid Date"
    is_valid: bool = False
    warning: str | None = None

    @property
    def penalize_future(self) -> bool:
        return self.is_future and not self.is_expected


class DateRangeValidation(BaseModel):
    is_valid: bool
    warnings: list[str] = Field(default_factory=list)
    normalized_start: str = ""
    normalized_end: str = ""
    total_months: int = 0


def _invalid(original: str, warning: str) -> ParsedDate:
    return ParsedDate(original=original, warning=warning)


def parse_date_flexible(value: str, *, today: date | None = None) -> ParsedDate:
    """Parse loose resume dates such as '01/2023', 'Jan 2020', '2019' or 'Present'."""
    if not value or not value.strip():
        return _invalid(value or "", "Empty or invalid date string")

    today = today or date.today()
    original = value.strip()
    cleaned = original.lower()
    is_expected = any(keyword in cleaned for keyword in _EXPECTED_KEYWORDS)
    if any(keyword in cleaned for keyword in _PRESENT_KEYWORDS):
        return ParsedDate(
            year=today.year,
            month=today.month,
            is_present=True,
            original=original,
            normalized="Present",
            is_valid=True,
        )

    cleaned = _EXPECTED_RE.sub("", cleaned).strip()
    year_match = _YEAR_RE.search(cleaned)
    year = int(year_match.group(0)) if year_match else None
    month_match = _MONTH_RE.search(cleaned)
    month = _MONTH_NAMES[month_match.group(1)] if month_match else None

    for pattern, year_group, month_group in ((_MONTH_YEAR_RE, 2, 1), (_YEAR_MONTH_RE, 1, 2)):
        match = pattern.search(cleaned)
        if match and 1 <= int(match.group(month_group)) <= 12:
            year, month = int(match.group(year_group)), int(match.group(month_group))

    if not year:
        return _invalid(original, "Could not parse year from date string")

    is_future = year > today.year or (year == today.year and bool(month) and month > today.month) or is_expected
    normalized = f"{month:02d}/{year}" if month else str(year)
    warning = None
    if is_future and not is_expected:
        warning = f"Future date detected without 'expected' keyword. Date: {normalized}"
    return ParsedDate(
        year=year,
        month=month,
        is_future=is_future,
        is_expected=is_expected,
        original=original,
        normalized=normalized,
        is_valid=True,
        warning=warning,
    )


def duration_months(start: ParsedDate, end: ParsedDate) -> int | None:
    """Months between two parsed dates, or None when invalid or inverted."""
    if not (start.is_valid and end.is_valid):
        return None
    total = (end.year - start.year) * 12 + ((end.month or 12) - (start.month or 1))
    return total if total >= 0 else None


def split_date_range(value: str) -> tuple[str, str] | None:
    """Split 'Jan 2020 - Present' style ranges into their two ends."""
    parts = [part.strip() for part in _RANGE_SPLIT_RE.split(value or "", maxsplit=1)]
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def validate_date_range(start: str, end: str, *, today: date | None = None) -> DateRangeValidation:
    parsed_start = parse_date_flexible(start, today=today)
    parsed_end = parse_date_flexible(end, today=today)
    warnings: list[str] = []
    if not parsed_start.is_valid:
        warnings.append(f"Invalid start date: {start}")
    if not parsed_end.is_valid:
        warnings.append(f"Invalid end date: {end}")
    for parsed in (parsed_start, parsed_end):
        if parsed.is_valid and parsed.warning:
            warnings.append(parsed.warning)

    months = duration_months(parsed_start, parsed_end)
    if parsed_start.is_valid and parsed_end.is_valid and months is None:
        warnings.append("End date is before start date")
    return DateRangeValidation(
        is_valid=months is not None,
        warnings=warnings,
        normalized_start=parsed_start.normalized,
        normalized_end=parsed_end.normalized,
        total_months=months or 0,
    )
