from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

CandidateLevel = Literal["fresher", "junior", "mid", "senior"]
RoleType = Literal["fresher", "experienced"]
Severity = Literal["low", "medium", "high", "critical"]
RedFlagType = Literal["employment", "skills", "formatting"]
ConfidenceLevel = Literal["High", "Medium", "Low"]
MatchBand = Literal[
    "Excellent Match",
    "Very Good Match",
    "Good Match",
    "Fair Match",
    "Below Average",
    "Poor Match",
    "Very Poor",
    "Inadequate",
    "Minimal Match",
]
PenaltyType = Literal[
    "missing_critical_skill",
    "missing_optional_skill",
    "date_issue",
    "formatting",
    "experience_gap",
]
KeywordPosition = Literal["start", "middle", "end"]
InputQualityLevel = Literal["excellent", "good", "fair", "poor", "invalid"]


class RedFlag(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    type: RedFlagType
    severity: Severity
    penalty: int = Field(le=0)
    description: str
    recommendation: str


class CandidateLevelResult(BaseModel):
    level: CandidateLevel
    confidence: float = Field(ge=0.0, le=1.0)
    signals: list[str] = Field(default_factory=list)
    total_years_experience: float = Field(default=0.0, ge=0.0)
    role_type: RoleType = "experienced"


class ConfidenceFeatures(BaseModel):
    literal_match_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    semantic_similarity_score: float = Field(default=0.0, ge=0.0, le=1.0)
    experience_relevancy_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    missing_critical_keywords_count: int = Field(default=0, ge=0)
    total_critical_keywords: int = Field(default=0, ge=0)
    context_quality_score: float = Field(default=0.0, ge=0.0, le=100.0)
    has_quantified_achievements: bool = False
    section_completeness: float = Field(default=0.0, ge=0.0, le=100.0)
    formatting_score: float = Field(default=0.0, ge=0.0, le=100.0)


class ConfidenceComponents(BaseModel):
    literal_match: float = 0.0
    semantic_similarity: float = 0.0
    experience_relevancy: float = 0.0
    keyword_coverage: float = 0.0
    context_quality: float = 0.0


class ConfidenceBreakdown(BaseModel):
    numeric_score: int = Field(ge=0, le=100)
    level: ConfidenceLevel
    components: ConfidenceComponents = Field(default_factory=ConfidenceComponents)
    reasoning: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class ProportionalPenalty(BaseModel):
    type: PenaltyType
    severity: Severity
    penalty_percentage: float = Field(ge=0.0)
    max_penalty: float = Field(ge=0.0)
    applied_penalty: float = Field(ge=0.0)
    reason: str


class PenaltyReport(BaseModel):
    penalties: list[ProportionalPenalty] = Field(default_factory=list)
    total_penalty: float = 0.0
    capped_penalty: float = 0.0


class SoftPenaltyResult(BaseModel):
    adjusted_score: float
    applied_penalties: list[ProportionalPenalty] = Field(default_factory=list)
    total_reduction: float = 0.0


class PenaltySummary(BaseModel):
    total_penalties: int = 0
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    total_impact: float = 0.0
    description: str = ""


class KeywordContext(BaseModel):
    keyword: str
    context: str
    has_action_verb: bool = False
    has_metric: bool = False
    context_score: float = Field(ge=0.0, le=1.0)
    is_stuffed: bool = False
    position: KeywordPosition = "middle"


class StuffingDetectionResult(BaseModel):
    is_stuffed: bool = False
    stuffing_score: float = Field(default=0.0, ge=0.0, le=1.0)
    keywords: list[KeywordContext] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    penalty_score: int = Field(default=0, ge=0)


class BulletListStuffingReport(BaseModel):
    overall_stuffing_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    stuffed_bullets: int = 0
    total_bullets: int = 0
    total_penalty: int = 0
    average_context_score: float | None = None
    recommendations: list[str] = Field(default_factory=list)
    results: list[StuffingDetectionResult] = Field(default_factory=list)


class ScoreMapperResult(BaseModel):
    final_score: float = Field(ge=0.0, le=100.0)
    weighted_score: float = 0.0
    match_band: MatchBand
    interview_probability: str
    total_penalty: float = Field(default=0.0, le=0.0)
    auto_reject_risk: bool = False


class InputQualityAssessment(BaseModel):
    quality_score: int = Field(ge=0, le=100)
    level: InputQualityLevel
    word_count: int = 0
    section_count: int = 0
    has_contact_info: bool = False
    has_skills: bool = False
    has_education: bool = False
    has_experience: bool = False
    has_projects: bool = False
    issues: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.level != "invalid"
