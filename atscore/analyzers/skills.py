from __future__ import annotations

from dataclasses import dataclass

from atscore.core.config.scoring import get_scoring_value
from atscore.normalize.document import ScoringDocument
from atscore.scoring.input_quality import resume_skill_ids
from atscore.scoring.keyword_context import validate_bullet_list
from atscore.scoring.keywords import extract_job_keywords, match_keywords
from atscore.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .base import Check, TierAnalysis, checklist_score


@dataclass(frozen=True)
class SkillsKeywordsAnalyzer:
    taxonomy: TaxonomyProvider | None = None

    def __call__(self, document: ScoringDocument) -> TierAnalysis:
        taxonomy = self.taxonomy or get_default_taxonomy_provider()
        skill_ids = resume_skill_ids(document, taxonomy)
        bullets = document.bullets
        bullet_text = "\n".join(bullets)
        evidenced = set(taxonomy.find_skills(bullet_text))
        skills_section = document.section_text.get("skills", "")
        categorized = sum(1 for line in skills_section.splitlines() if ":" in line) >= 2
        stuffing_terms = sorted(set(taxonomy.find_skills(bullet_text).values()))
        stuffing_rate = validate_bullet_list(bullets, stuffing_terms).overall_stuffing_rate if stuffing_terms else 0.0
        threshold = float(get_scoring_value("red_flags.stuffing_rate_threshold", 0.3))

        checks = [
            Check(bool(document.skills) or "skills" in document.sections, "Add a dedicated Skills section", 3),
            Check(len(skill_ids) >= 8, "List at least 8 relevant technical skills", 2),
            Check(len(document.skills) <= 40, "Trim the skills list to the ones you can discuss in depth", 0.5),
            Check(categorized or len(document.skills) <= 12, "Group skills by category (Languages, Tools)", 0.5),
            Check(
                bool(skill_ids) and len(evidenced & skill_ids) >= 0.5 * len(skill_ids),
                "Show your key skills in experience and project bullets",
            ),
            Check(stuffing_rate <= threshold, "Work keywords into sentences instead of listing them in bullets"),
        ]

        if document.has_job_description:
            report = match_keywords(document, extract_job_keywords(document.job_description, taxonomy), taxonomy)
            if report.keywords:
                checks.append(
                    Check(report.match_rate >= 60, f"Only {report.match_rate:.0f}% of the job's skills appear", 3)
                )
                missing = ", ".join(item.keyword for item in report.missing_critical[:5])
                checks.append(Check(not report.missing_critical, f"Add required skills: {missing}", 2))
        return TierAnalysis(tier_score=checklist_score("skills_keywords", checks))
