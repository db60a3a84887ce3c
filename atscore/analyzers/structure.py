from __future__ import annotations

import re

from atscore.normalize.document import ScoringDocument
from atscore.schemas.scoring import FormatIssue, OrderIssue
from atscore.scoring.dates import parse_date_flexible, split_date_range

from .base import Check, TierAnalysis, checklist_score

EXPECTED_SECTION_ORDER = (
    "summary",
    "skills",
    "experience",
    "projects",
    "education",
    "certifications",
    "achievements",
)

_FILENAME_RE = re.compile(r"^[A-Za-z]+[_\-\s][A-Za-z]+.*\.(pdf|docx?)$", re.IGNORECASE)
_DATE_TOKEN_RE = re.compile(r"\b(?:[A-Za-z]{3,9}\.?\s+)?(?:19|20)\d{2}\b|\bpresent\b", re.IGNORECASE)
_MAX_FILE_SIZE = 2 * 1024 * 1024


def detect_format_issues(document: ScoringDocument) -> list[FormatIssue]:
    meta = document.file_meta
    issues: list[FormatIssue] = []
    if meta.has_tables:
        issues.append(
            FormatIssue(
                type="table",
                severity="high",
                description="Tables detected; many ATS parsers read table cells out of order",
                recommendation="Replace tables with plain section headings and bullet lists.",
            )
        )
    if meta.has_multiple_columns:
        issues.append(
            FormatIssue(
                type="columns",
                severity="high",
                description="Multi-column layout detected",
                recommendation="Use a single-column layout so sections parse in reading order.",
            )
        )
    if meta.has_graphics:
        issues.append(
            FormatIssue(
                type="image",
                severity="medium",
                description="Images or graphics detected; their content is invisible to ATS",
                recommendation="Remove icons, charts and skill bars or repeat their content as text.",
            )
        )
    if meta.has_colors:
        issues.append(
            FormatIssue(
                type="color",
                severity="low",
                description="Colored text detected",
                recommendation="Keep body text black; use color only for thin accents.",
            )
        )
    if meta.extraction_mode != "TEXT":
        issues.append(
            FormatIssue(
                type="extraction",
                severity="medium",
                description=f"Text had to be recovered with {meta.extraction_mode} extraction",
                recommendation="Export the resume as a text-based PDF or DOCX instead of a scan.",
            )
        )
    if meta.page_count is not None and meta.page_count > 2:
        issues.append(
            FormatIssue(
                type="length",
                severity="medium",
                description=f"Resume is {meta.page_count} pages long",
                recommendation="Trim to one page (early career) or two pages (experienced).",
            )
        )
    return issues


def analyze_basic_structure(document: ScoringDocument) -> TierAnalysis:
    meta = document.file_meta
    format_issues = detect_format_issues(document)
    checks = [
        Check(document.has_email, "Add a professional email address", 2),
        Check(document.has_phone, "Add a phone number"),
        Check(document.has_linkedin, "Add your LinkedIn profile URL", 0.5),
        Check(300 <= document.word_count <= 1000, "Keep resume length between 300 and 1000 words", 2),
        Check(len(document.sections) >= 3, "Use clear section headings (Experience, Education, Skills)", 2),
        Check(not (meta.has_tables or meta.has_multiple_columns), "Use a single-column layout without tables", 2),
        Check(not meta.has_graphics, "Remove graphics and icons"),
        Check(not meta.has_colors, "Use black text for body content", 0.5),
        Check(meta.extraction_mode == "TEXT", "Provide a text-based file instead of a scanned image"),
        Check(meta.page_count is None or meta.page_count <= 2, "Keep the resume to at most two pages"),
        Check(
            meta.file_size is None or meta.file_size <= _MAX_FILE_SIZE,
            "Keep the file under 2MB",
            0.5,
        ),
        Check(
            not meta.filename or bool(_FILENAME_RE.match(meta.filename)),
            "Name the file FirstName_LastName_Resume.pdf",
            0.5,
        ),
    ]
    return TierAnalysis(tier_score=checklist_score("basic_structure", checks), format_issues=format_issues)


def detect_section_order_issues(sections: list[str]) -> list[OrderIssue]:
    """Sections that appear out of the conventional order, with their actual and expected positions."""
    known = [section for section in sections if section in EXPECTED_SECTION_ORDER]
    expected = sorted(known, key=EXPECTED_SECTION_ORDER.index)
    return [
        OrderIssue(section=section, current_position=position, expected_position=expected.index(section), penalty=-1)
        for position, section in enumerate(known)
        if expected[position] != section
    ]


def _dates_are_consistent(document: ScoringDocument) -> bool:
    values: list[str] = []
    for entry in document.work_experience:
        if entry.year:
            values.extend(split_date_range(entry.year) or (entry.year,))
    if not document.work_experience:
        values = _DATE_TOKEN_RE.findall(document.section_text.get("experience", ""))
    return all(parse_date_flexible(value).is_valid for value in values)


def analyze_content_structure(document: ScoringDocument) -> TierAnalysis:
    sections = set(document.sections)
    order_issues = detect_section_order_issues(document.sections)
    bullet_lengths = [len(bullet.split()) for bullet in document.bullets]
    average_length = sum(bullet_lengths) / len(bullet_lengths) if bullet_lengths else 0
    checks = [
        Check(bool(document.summary.strip()), "Add a 2-3 line professional summary", 2),
        Check(
            "experience" in sections or "projects" in sections or bool(document.work_experience),
            "Add an Experience or Projects section",
            3,
        ),
        Check("education" in sections or bool(document.education), "Add an Education section", 2),
        Check("skills" in sections or bool(document.skills), "Add a dedicated Skills section", 2),
        Check(not order_issues, "Reorder sections: Summary, Skills, Experience, Projects, Education"),
        Check(len(document.bullets) >= 5, "Describe your work in bullet points", 2),
        Check(8 <= average_length <= 30, "Keep bullets between 8 and 30 words"),
        Check(_dates_are_consistent(document), "Use a consistent date format such as 'Jan 2022 - Present'"),
        Check(document.has_contact_info, "Put contact details at the top of the resume"),
    ]
    return TierAnalysis(tier_score=checklist_score("content_structure", checks), order_issues=order_issues)
