from atscore.taxonomy import TaxonomyProvider

from .base import AnalyzerError, AnalyzerOutcome, Check, TierAnalysis, TierAnalyzer, checklist_score, coerce_analysis
from .education import analyze_certifications, analyze_education
from .experience import analyze_experience
from .fit import analyze_competitive, analyze_culture_fit, analyze_qualitative
from .projects import ProjectsAnalyzer
from .skills import SkillsKeywordsAnalyzer
from .structure import analyze_basic_structure, analyze_content_structure


def default_analyzers(taxonomy: TaxonomyProvider | None = None) -> dict[str, TierAnalyzer]:
    """One analyzer per scored tier, keyed by tier."""
    return {
        "basic_structure": analyze_basic_structure,
        "content_structure": analyze_content_structure,
        "experience": analyze_experience,
        "education": analyze_education,
        "certifications": analyze_certifications,
        "skills_keywords": SkillsKeywordsAnalyzer(taxonomy=taxonomy),
        "projects": ProjectsAnalyzer(taxonomy=taxonomy),
        "competitive": analyze_competitive,
        "culture_fit": analyze_culture_fit,
        "qualitative": analyze_qualitative,
    }


__all__ = [
    "AnalyzerError",
    "AnalyzerOutcome",
    "Check",
    "TierAnalysis",
    "TierAnalyzer",
    "checklist_score",
    "coerce_analysis",
    "default_analyzers",
]
