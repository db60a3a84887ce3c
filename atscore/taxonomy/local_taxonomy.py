from __future__ import annotations

import json
import re
from pathlib import Path

from .provider import TaxonomyProvider


class LocalTaxonomy(TaxonomyProvider):
    def __init__(self, synonyms_path: str | Path | None = None) -> None:
        path = Path(synonyms_path) if synonyms_path else Path(__file__).with_name("synonyms.json")
        self._synonyms = self._load_synonyms(path)
        # Longest terms first so "spring boot" wins over "spring".
        terms = sorted(self._synonyms, key=len, reverse=True)
        self._term_pattern = re.compile(
            r"(?<![A-Za-z0-9])(" + "|".join(re.escape(term) for term in terms) + r")(?![A-Za-z0-9+#])",
            re.IGNORECASE,
        )

    @staticmethod
    def _load_synonyms(path: Path) -> dict[str, str]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        return {str(key).strip().lower(): str(value) for key, value in raw.items()}

    def normalize_skill(self, raw: str) -> tuple[str, str | None]:
        normalized = raw.strip().lower()
        canonical_skill_id = self._synonyms.get(normalized)
        return normalized, canonical_skill_id

    def find_skills(self, text: str) -> dict[str, str]:
        found: dict[str, str] = {}
        for match in self._term_pattern.finditer(text or ""):
            term = match.group(1).lower()
            canonical = self._synonyms.get(term)
            if canonical and canonical not in found:
                found[canonical] = term
        return found
