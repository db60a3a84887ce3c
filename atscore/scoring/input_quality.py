from __future__ import annotations

from atscore.core.config.scoring import get_scoring_value
from atscore.normalize.document import ScoringDocument
from atscore.schemas.engine import InputQualityAssessment, InputQualityLevel
from atscore.taxonomy import TaxonomyProvider, get_default_taxonomy_provider


def _tiered(value: int, steps: tuple[tuple[int, int], ...]) -> int:
    for minimum, points in steps:
        if value >= minimum:
            return points
    return 0


def _quality_level(score: int) -> InputQualityLevel:
    if score >= 80:
        return "excellent"
    if score >= 60:
        return "good"
    if score >= 40:
        return "fair"
    if score >= int(get_scoring_value("input_quality.invalid_below", 20)):
        return "poor"
    return "invalid"


def resume_skill_ids(document: ScoringDocument, taxonomy: TaxonomyProvider) -> set[str]:
    found = set(taxonomy.find_skills(document.text))
    for skill in document.skills:
        normalized, canonical = taxonomy.normalize_skill(skill)
        found.add(canonical or normalized)
    return found


def assess_input_quality(
    document: ScoringDocument,
    taxonomy: TaxonomyProvider | None = None,
) -> InputQualityAssessment:
    """Rate how much usable content the resume carries before any tier is scored."""
    taxonomy = taxonomy or get_default_taxonomy_provider()
    sections = set(document.sections)
    word_count = document.word_count
    unique_skills = len(resume_skill_ids(document, taxonomy))
    has_skills = bool(document.skills) or "skills" in sections or unique_skills >= 3
    has_education = bool(document.education) or "education" in sections
    has_experience = bool(document.work_experience) or "experience" in sections
    has_projects = bool(document.projects) or "projects" in sections

    issues: list[str] = []
    min_words = int(get_scoring_value("input_quality.min_words", 50))
    if word_count < min_words:
        issues.append(f"Resume text too short (< {min_words} words)")
    if word_count < 100:
        issues.append("Resume appears incomplete")
    if not document.has_contact_info:
        issues.append("Missing contact information")
    if not (has_skills or has_experience or has_projects):
        issues.append("No substantive content detected")
    if len(sections) < 2:
        issues.append("Missing standard resume sections")

    score = _tiered(word_count, ((400, 20), (200, 15), (100, 10), (50, 5)))
    score += 5 if document.has_contact_info else 0
    score += 8 if has_skills else 0
    score += 5 if has_education else 0
    score += 7 if has_experience else 0
    score += 5 if has_projects else 0
    score += _tiered(len(document.bullets), ((10, 15), (5, 10), (2, 5)))
    score += _tiered(unique_skills, ((10, 15), (5, 10), (2, 5)))
    score += _tiered(len(sections), ((5, 20), (3, 15), (2, 10), (1, 5)))
    score = min(100, score)

    return InputQualityAssessment(
        quality_score=score,
        level=_quality_level(score),
        word_count=word_count,
        section_count=len(sections),
        has_contact_info=document.has_contact_info,
        has_skills=has_skills,
        has_education=has_education,
        has_experience=has_experience,
        has_projects=has_projects,
        issues=issues,
    )


def invalid_input_score(assessment: InputQualityAssessment) -> int:
    """Capped score for a resume too thin to run the tier pipeline on."""
    score = assessment.quality_score * 0.4
    score += 3 if assessment.has_contact_info else 0
    score += 5 if assessment.has_skills else 0
    score += 3 if assessment.has_education else 0
    score += 5 if assessment.word_count > 100 else 0
    cap = int(get_scoring_value("input_quality.invalid_score_cap", 35))
    return int(max(0, min(cap, round(score))))
