from __future__ import annotations

import re
from dataclasses import dataclass

from atscore.normalize.document import ScoringDocument
from atscore.scoring.critical_metrics import has_quantified_result
from atscore.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .base import Check, TierAnalysis, checklist_score

_LINK_RE = re.compile(r"github\.com|gitlab\.com|https?://|\blive demo\b", re.IGNORECASE)
_PROJECT_LINE_RE = re.compile(r"^(project\s*:|[A-Z][\w\- ]{2,40}\s*[|(\-–])")


def project_texts(document: ScoringDocument) -> list[str]:
    texts = [
        "\n".join([project.title, project.description, *project.bullets]).strip()
        for project in document.projects
    ]
    if texts:
        return [text for text in texts if text]
    section = document.section_text.get("projects", "")
    blocks: list[list[str]] = []
    for line in section.splitlines():
        if _PROJECT_LINE_RE.match(line.strip()) or not blocks:
            blocks.append([line])
        else:
            blocks[-1].append(line)
    return ["\n".join(block).strip() for block in blocks if "".join(block).strip()]


@dataclass(frozen=True)
class ProjectsAnalyzer:
    taxonomy: TaxonomyProvider | None = None

    def __call__(self, document: ScoringDocument) -> TierAnalysis:
        taxonomy = self.taxonomy or get_default_taxonomy_provider()
        texts = project_texts(document)
        joined = "\n".join(texts)
        described = [text for text in texts if len(text.split()) >= 12]
        with_stack = [text for text in texts if taxonomy.find_skills(text)]
        checks = [
            Check(bool(texts), "Add a Projects section with 2-3 relevant projects", 3),
            Check(len(texts) >= 2, "Show at least two projects"),
            Check(bool(texts) and len(described) == len(texts), "Describe what each project does and your role"),
            Check(bool(texts) and len(with_stack) == len(texts), "Name the technologies used in each project"),
            Check(has_quantified_result(joined), "Quantify a project outcome (users, latency, accuracy)"),
            Check(bool(_LINK_RE.search(joined)), "Link to source code or a live demo", 0.5),
        ]
        if document.has_job_description and texts:
            jd_skills = set(taxonomy.find_skills(document.job_description))
            checks.append(
                Check(
                    not jd_skills or bool(jd_skills & set(taxonomy.find_skills(joined))),
                    "Feature projects that use the job's core technologies",
                )
            )
        return TierAnalysis(tier_score=checklist_score("projects", checks))
