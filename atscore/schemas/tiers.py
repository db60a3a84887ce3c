from __future__ import annotations

import math
from typing import Any, Iterator, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TierKey = Literal[
    "basic_structure",
    "content_structure",
    "experience",
    "education",
    "certifications",
    "skills_keywords",
    "projects",
    "red_flags",
    "competitive",
    "culture_fit",
    "qualitative",
]

PENALTY_TIER = "red_flags"

# key -> (tier_number, tier_name, metrics_total)
TIER_DEFINITIONS: dict[str, tuple[int, str, int]] = {
    "basic_structure": (1, "Basic Structure", 20),
    "content_structure": (2, "Content Structure", 25),
    "experience": (3, "Experience", 35),
    "education": (4, "Education", 12),
    "certifications": (5, "Certifications", 8),
    "skills_keywords": (6, "Skills & Keywords", 40),
    "projects": (7, "Projects", 15),
    "red_flags": (8, "Red Flags", 30),
    "competitive": (9, "Competitive", 15),
    "culture_fit": (10, "Culture Fit", 20),
    "qualitative": (11, "Qualitative", 10),
}

TIER_KEYS: tuple[str, ...] = tuple(TIER_DEFINITIONS)
SCORED_TIER_KEYS: tuple[str, ...] = tuple(key for key in TIER_KEYS if key != PENALTY_TIER)

MAX_TOP_ISSUES = 5


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


class TierScore(BaseModel):
    tier_number: int = Field(ge=0)
    tier_name: str
    score: float = Field(ge=0)
    max_score: float = Field(gt=0)
    percentage: float = 0.0
    weight: float = Field(default=0.0, ge=0, le=100)
    weighted_contribution: float = 0.0
    metrics_passed: int = Field(default=0, ge=0)
    metrics_total: int = Field(default=0, ge=0)
    top_issues: list[str] = Field(default_factory=list)

    @field_validator("top_issues")
    @classmethod
    def _limit_issues(cls, value: list[str]) -> list[str]:
        return [item for item in value if item][:MAX_TOP_ISSUES]

    @model_validator(mode="after")
    def _derive_percentages(self) -> "TierScore":
        if self.metrics_passed > self.metrics_total:
            raise ValueError("metrics_passed cannot exceed metrics_total")
        ratio = _finite_or_zero(self.score / self.max_score)
        self.percentage = round(max(0.0, min(100.0, ratio * 100)), 2)
        self.weighted_contribution = round(self.percentage * _finite_or_zero(self.weight) / 100, 2)
        return self

    def with_weight(self, weight: float) -> "TierScore":
        """Return a validated copy carrying a new weight."""
        return TierScore.model_validate({**self.model_dump(), "weight": weight})

    @classmethod
    def for_tier(
        cls,
        tier_key: str,
        *,
        percentage: float,
        metrics_passed: int | None = None,
        top_issues: list[str] | None = None,
    ) -> "TierScore":
        tier_number, tier_name, metrics_total = TIER_DEFINITIONS[tier_key]
        fraction = max(0.0, min(100.0, _finite_or_zero(percentage))) / 100
        passed = int(metrics_total * fraction) if metrics_passed is None else metrics_passed
        return cls(
            tier_number=tier_number,
            tier_name=tier_name,
            score=round(metrics_total * fraction, 4),
            max_score=metrics_total,
            metrics_passed=min(passed, metrics_total),
            metrics_total=metrics_total,
            top_issues=top_issues or [],
        )

    @classmethod
    def degraded(cls, tier_key: str, percentage: float = 20.0) -> "TierScore":
        """Placeholder score for a tier whose analyzer failed or returned malformed data."""
        tier_name = TIER_DEFINITIONS[tier_key][1]
        return cls.for_tier(
            tier_key,
            percentage=percentage,
            top_issues=[f"{tier_name} analysis incomplete - limited data available"],
        )


class TierScores(BaseModel):
    model_config = ConfigDict(extra="forbid")

    basic_structure: TierScore
    content_structure: TierScore
    experience: TierScore
    education: TierScore
    certifications: TierScore
    skills_keywords: TierScore
    projects: TierScore
    red_flags: TierScore
    competitive: TierScore
    culture_fit: TierScore
    qualitative: TierScore

    def items(self) -> Iterator[tuple[str, TierScore]]:
        for key in TIER_KEYS:
            yield key, getattr(self, key)

    def get(self, key: str) -> TierScore:
        return getattr(self, key)

    def as_dict(self) -> dict[str, TierScore]:
        return dict(self.items())

    def scored_weight_total(self) -> float:
        return sum(tier.weight for key, tier in self.items() if key != PENALTY_TIER)

    @classmethod
    def from_mapping(cls, tiers: Mapping[str, Any]) -> "TierScores":
        return cls.model_validate({key: tiers[key] for key in TIER_KEYS})
