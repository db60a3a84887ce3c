from __future__ import annotations

import re

from atscore.normalize.document import ScoringDocument

from .base import Check, TierAnalysis, checklist_score

_DEGREE_RE = re.compile(
    r"\b(bachelor|master|phd|doctorate|mba|b\.?\s?tech|m\.?\s?tech|b\.?s\.?c?|m\.?s\.?c?|b\.?e\.?|m\.?e\.?|diploma|degree)\b",
    re.IGNORECASE,
)
_GPA_RE = re.compile(r"\b(c?gpa)\b|\d\.\d{1,2}\s*/\s*(4|10)", re.IGNORECASE)
_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
_HONORS_RE = re.compile(
    r"\b(cum laude|magna|summa|honou?rs|dean.?s list|distinction|gold medal|first class|scholarship)\b",
    re.IGNORECASE,
)
_COURSEWORK_RE = re.compile(r"\b(coursework|courses|relevant courses|key courses)\b", re.IGNORECASE)
_INSTITUTION_RE = re.compile(r"\b(university|college|institute|school|academy)\b", re.IGNORECASE)
_TECH_FIELDS = ("computer", "software", "engineering", "technology", "science", "mathematics", "data", "information")
_CERT_ISSUERS = (
    "aws", "amazon", "google", "microsoft", "azure", "oracle", "cisco", "comptia", "pmi",
    "scrum", "linux foundation", "cncf", "hashicorp", "salesforce", "coursera", "udemy",
)
_CERT_RE = re.compile(r"\b(certified|certification|certificate)\b", re.IGNORECASE)


def _education_text(document: ScoringDocument) -> str:
    structured = " ".join(f"{edu.degree} {edu.school} {edu.year} {edu.cgpa or ''}" for edu in document.education)
    return f"{structured}\n{document.section_text.get('education', '')}"


def analyze_education(document: ScoringDocument) -> TierAnalysis:
    text = _education_text(document)
    degrees = [edu.degree.lower() for edu in document.education if edu.degree]
    checks = [
        Check(bool(document.education) or bool(_DEGREE_RE.search(text)), "List your highest degree", 3),
        Check(
            bool(document.education) and all(edu.degree and edu.school for edu in document.education)
            or bool(_INSTITUTION_RE.search(text)),
            "Name the institution for each degree",
        ),
        Check(
            any(edu.year for edu in document.education) or bool(_YEAR_RE.search(text)),
            "Add a graduation year (or 'Expected 2026')",
        ),
        Check(
            any(edu.cgpa for edu in document.education) or bool(_GPA_RE.search(text)),
            "Include your GPA/CGPA if it is strong",
            0.5,
        ),
        Check(bool(_HONORS_RE.search(text)), "Mention honors, scholarships or awards", 0.5),
        Check(bool(_COURSEWORK_RE.search(text)), "Add relevant coursework", 0.5),
    ]
    if document.has_job_description:
        relevant = any(field in degree for degree in degrees for field in _TECH_FIELDS) or any(
            field in text.lower() for field in _TECH_FIELDS
        )
        checks.append(Check(relevant, "Highlight the degree's relevance to the role"))
    return TierAnalysis(tier_score=checklist_score("education", checks))


def _certification_lines(document: ScoringDocument) -> list[str]:
    lines = [" ".join(part for part in (cert.name, cert.issuer, cert.year) if part) for cert in document.certifications]
    section = document.section_text.get("certifications", "")
    lines.extend(line for line in section.splitlines() if line.strip())
    return lines


def analyze_certifications(document: ScoringDocument) -> TierAnalysis:
    lines = _certification_lines(document)
    joined = " ".join(lines).lower()
    jd_lower = document.job_description.lower()
    checks = [
        Check(bool(lines) or bool(_CERT_RE.search(document.text)), "Add relevant certifications", 3),
        Check(any(issuer in joined for issuer in _CERT_ISSUERS), "Prefer certifications from recognized issuers"),
        Check(
            bool(document.certifications) and all(cert.issuer or cert.year for cert in document.certifications)
            or bool(_YEAR_RE.search(joined)),
            "Add issuer and year to each certification",
        ),
        Check(len(lines) >= 2, "List at least two certifications or courses", 0.5),
    ]
    if jd_lower:
        checks.append(
            Check(
                any(word in jd_lower for line in lines for word in line.lower().split() if len(word) > 3),
                "Add certifications that match the job's tools",
            )
        )
    return TierAnalysis(tier_score=checklist_score("certifications", checks))
