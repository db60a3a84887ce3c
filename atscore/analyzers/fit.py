"""Softer signals: competitive standing, culture fit and overall narrative quality."""

from __future__ import annotations

import re

from atscore.normalize.document import ScoringDocument
from atscore.normalize.utils import words
from atscore.scoring.critical_metrics import has_quantified_result

from .base import Check, TierAnalysis, checklist_score
from .experience import action_verb_ratio

_SENIORITY_RE = re.compile(r"\b(senior|sr\.?|lead|principal|staff|manager|head)\b", re.IGNORECASE)
_MODERN_STACK_RE = re.compile(
    r"\b(aws|azure|gcp|docker|kubernetes|terraform|microservices|machine learning|llm|genai|ai|"
    r"data pipelines?|ci/cd|serverless|react|next\.js|typescript|kafka|spark)\b",
    re.IGNORECASE,
)
_DISTINCTION_RE = re.compile(
    r"\b(award(ed)?|winner|won|hackathon|published|publication|patent|ranked|top \d+%?|finalist|speaker)\b",
    re.IGNORECASE,
)
_OPEN_SOURCE_RE = re.compile(r"github\.com|open[- ]source|contributor", re.IGNORECASE)

_CULTURE_SIGNALS: tuple[tuple[str, re.Pattern[str], str], ...] = (
    ("collaboration", re.compile(r"collaborat|cross-functional|partnered|teamed", re.IGNORECASE),
     "Show collaboration with other teams"),
    ("leadership", re.compile(r"\b(led|mentor(ed|ing)?|managed|coached|guided)\b", re.IGNORECASE),
     "Mention mentoring or leading others"),
    ("communication", re.compile(r"present(ed|ation)|documented|wrote|communicat|stakeholder", re.IGNORECASE),
     "Show how you communicate (docs, demos, presentations)"),
    ("learning", re.compile(r"learn(ed|ing)|self-taught|certif|course|upskill", re.IGNORECASE),
     "Show continuous learning"),
    ("initiative", re.compile(r"initiated|proposed|founded|volunteer|own(ed|ership)|proactive", re.IGNORECASE),
     "Highlight work you initiated yourself"),
    ("customer", re.compile(r"customer|client|end[- ]users?|user experience", re.IGNORECASE),
     "Connect your work to customers or users"),
    ("improvement", re.compile(r"improv|optimi[sz]|refactor|streamlin|automat", re.IGNORECASE),
     "Describe improvements you made to existing systems"),
)
_WORK_STYLE_TERMS = ("remote", "agile", "scrum", "fast-paced", "startup", "ownership", "autonomous", "hybrid")
_CLICHES = (
    "hard-working", "hardworking", "team player", "go-getter", "detail-oriented", "synergy",
    "results-driven", "think outside the box", "self-starter", "dynamic", "passionate",
)


def _jd_terms(job_description: str) -> set[str]:
    return {word.lower() for word in words(job_description) if len(word) > 4}


def jd_term_overlap(document: ScoringDocument) -> float:
    terms = _jd_terms(document.job_description)
    if not terms:
        return 0.0
    resume_terms = {word.lower() for word in words(document.text)}
    return len(terms & resume_terms) / len(terms)


def analyze_competitive(document: ScoringDocument) -> TierAnalysis:
    text = document.text
    titles = [entry.role for entry in document.work_experience if entry.role]
    checks = [
        Check(
            len(document.work_experience) >= 2 or any(_SENIORITY_RE.search(title) for title in titles),
            "Show career progression across roles",
        ),
        Check(len(document.skills) >= 5 or len(set(words(document.section_text.get("skills", "")))) >= 5,
              "Build a clear specialization in your skills"),
        Check(bool(_MODERN_STACK_RE.search(text)), "Mention modern, in-demand tools you have used"),
        Check(bool(_DISTINCTION_RE.search(text)), "Add awards, publications or hackathon results", 1.5),
        Check(bool(_OPEN_SOURCE_RE.search(text)), "Link open-source work or your GitHub profile", 0.5),
    ]
    if document.has_job_description:
        checks.append(Check(jd_term_overlap(document) >= 0.5, "Mirror more of the job's language", 1.5))
    return TierAnalysis(tier_score=checklist_score("competitive", checks))


def analyze_culture_fit(document: ScoringDocument) -> TierAnalysis:
    text = document.text
    checks = [Check(bool(pattern.search(text)), issue) for _, pattern, issue in _CULTURE_SIGNALS]
    if document.has_job_description:
        jd_lower = document.job_description.lower()
        wanted = [term for term in _WORK_STYLE_TERMS if term in jd_lower]
        if wanted:
            checks.append(
                Check(
                    any(term in document.text_lower for term in wanted),
                    f"Reflect the job's work style ({', '.join(wanted[:3])})",
                )
            )
    return TierAnalysis(tier_score=checklist_score("culture_fit", checks))


def analyze_qualitative(document: ScoringDocument) -> TierAnalysis:
    bullets = document.bullets
    summary_words = len(document.summary.split())
    quantified = sum(1 for bullet in bullets if has_quantified_result(bullet))
    cliches = [cliche for cliche in _CLICHES if cliche in document.text_lower]
    checks = [
        Check(20 <= summary_words <= 80, "Write a focused 2-4 sentence summary"),
        Check(bool(bullets) and quantified / len(bullets) >= 0.4, "Back more claims with numbers", 1.5),
        Check(action_verb_ratio(bullets) >= 0.6, "Lead with what you did, not what you were responsible for"),
        Check(not cliches, f"Replace generic phrases ({', '.join(cliches[:3])}) with evidence"),
        Check(all(len(bullet.split()) <= 40 for bullet in bullets), "Split bullets longer than 40 words", 0.5),
    ]
    if document.has_job_description:
        checks.append(Check(jd_term_overlap(document) >= 0.3, "Tailor the resume to this job description"))
    return TierAnalysis(tier_score=checklist_score("qualitative", checks))
