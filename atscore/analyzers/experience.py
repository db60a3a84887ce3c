from __future__ import annotations

import re

from atscore.normalize.document import ScoringDocument
from atscore.normalize.utils import strip_bullet_prefix
from atscore.scoring.critical_metrics import has_quantified_result

from .base import Check, TierAnalysis, checklist_score

STRONG_ACTION_VERBS = frozenset(
    {
        "achieved", "accelerated", "accomplished", "advanced", "analyzed", "architected",
        "automated", "built", "collaborated", "coordinated", "created", "delivered",
        "designed", "developed", "drove", "engineered", "enhanced", "established",
        "executed", "facilitated", "generated", "implemented", "improved", "increased",
        "initiated", "launched", "led", "managed", "mentored", "migrated", "negotiated",
        "optimized", "orchestrated", "pioneered", "presented", "reduced", "resolved",
        "scaled", "spearheaded", "streamlined", "supervised", "transformed", "upgraded",
    }
)
_WEAK_PHRASE_RE = re.compile(
    r"\b(responsible for|duties included|tasks involved|helped|assisted with|involved in|worked on)\b",
    re.IGNORECASE,
)


def first_word(bullet: str) -> str:
    parts = strip_bullet_prefix(bullet).strip().lower().split()
    return parts[0].strip(",.;:") if parts else ""


def action_verb_ratio(bullets: list[str]) -> float:
    if not bullets:
        return 0.0
    return sum(1 for bullet in bullets if first_word(bullet) in STRONG_ACTION_VERBS) / len(bullets)


def quantified_ratio(bullets: list[str]) -> float:
    if not bullets:
        return 0.0
    return sum(1 for bullet in bullets if has_quantified_result(bullet)) / len(bullets)


def analyze_experience(document: ScoringDocument) -> TierAnalysis:
    entries = document.work_experience
    bullets = document.experience_bullets() or document.bullets
    weak = sum(1 for bullet in bullets if _WEAK_PHRASE_RE.search(bullet))
    openers = [first_word(bullet) for bullet in bullets]
    has_history = bool(entries) or "experience" in document.sections

    checks = [
        Check(has_history, "Add a work experience section (internships count)", 3),
        Check(action_verb_ratio(bullets) >= 0.5, "Start bullets with strong action verbs (Built, Led, Optimized)", 2),
        Check(quantified_ratio(bullets) >= 0.3, "Quantify results in at least a third of your bullets", 2),
        Check(bool(bullets) and weak / len(bullets) < 0.2, "Replace 'responsible for' phrasing with achievements"),
        Check(
            bool(entries) and all(entry.role and entry.company for entry in entries),
            "Give every role a job title and company name",
        ),
        Check(bool(entries) and all(entry.year for entry in entries), "Add start and end dates to every role"),
        Check(
            bool(entries) and len(document.experience_bullets()) >= 3 * len(entries),
            "Describe each role with at least 3 bullets",
        ),
        Check(
            bool(openers) and len(set(openers)) >= 0.6 * len(openers),
            "Vary your action verbs across bullets",
            0.5,
        ),
    ]
    if document.has_job_description and entries:
        jd_lower = document.job_description.lower()
        relevant = any(
            any(len(word) > 3 and word in jd_lower for word in entry.role.lower().split()) for entry in entries
        )
        checks.append(Check(relevant, "Align job titles with the role you are targeting"))
    return TierAnalysis(tier_score=checklist_score("experience", checks))
