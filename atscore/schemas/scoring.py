from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from atscore.schemas.engine import (
    BulletListStuffingReport,
    CandidateLevelResult,
    ConfidenceBreakdown,
    ConfidenceLevel,
    InputQualityAssessment,
    MatchBand,
    PenaltySummary,
    RedFlag,
    Severity,
)
from atscore.schemas.tiers import TierScores

UserType = Literal["fresher", "experienced", "student"]
ExtractionMode = Literal["TEXT", "OCR", "HYBRID"]
WeightingMode = Literal["JD", "GENERAL"]
MetricStatus = Literal["excellent", "good", "fair", "poor"]
KeywordTier = Literal["critical", "important", "nice_to_have"]
KeywordColor = Literal["red", "orange", "yellow"]


class WorkExperience(BaseModel):
    role: str = ""
    company: str = ""
    year: str = ""
    bullets: list[str] = Field(default_factory=list)


class Education(BaseModel):
    degree: str = ""
    school: str = ""
    year: str = ""
    cgpa: str | None = None


class SkillGroup(BaseModel):
    category: str = ""
    items: list[str] = Field(default_factory=list)


class Project(BaseModel):
    title: str = ""
    description: str = ""
    bullets: list[str] = Field(default_factory=list)


class Certification(BaseModel):
    name: str = ""
    issuer: str = ""
    year: str = ""


def _wrap_plain_strings(value: Any, field_name: str) -> Any:
    if not isinstance(value, list):
        return value
    return [{field_name: item} if isinstance(item, str) else item for item in value]


class ResumeData(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    linkedin: str = ""
    location: str = ""
    summary: str = ""
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[SkillGroup] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> Any:
        if isinstance(value, list) and value and all(isinstance(item, str) for item in value):
            return [{"category": "", "items": value}]
        return value

    @field_validator("certifications", mode="before")
    @classmethod
    def _coerce_certifications(cls, value: Any) -> Any:
        return _wrap_plain_strings(value, "name")

    @field_validator("projects", mode="before")
    @classmethod
    def _coerce_projects(cls, value: Any) -> Any:
        return _wrap_plain_strings(value, "title")


class FileMeta(BaseModel):
    filename: str = ""
    page_count: int | None = Field(default=None, ge=0)
    file_size: int | None = Field(default=None, ge=0)
    has_tables: bool = False
    has_colors: bool = False
    has_graphics: bool = False
    has_multiple_columns: bool = False
    extraction_mode: ExtractionMode = "TEXT"


class ScoringRequest(BaseModel):
    resume_text: str = Field(default="", max_length=120000)
    resume_data: ResumeData | None = None
    job_description: str | None = Field(default=None, max_length=60000)
    user_type: UserType | None = None
    file_meta: FileMeta | None = None


class CriticalMetricScore(BaseModel):
    score: float = Field(ge=0.0)
    max_score: float = Field(gt=0.0)
    percentage: float = Field(ge=0.0, le=100.0)
    status: MetricStatus
    details: str = ""


class CriticalMetrics(BaseModel):
    jd_keywords_match: CriticalMetricScore
    technical_skills_alignment: CriticalMetricScore
    quantified_results_presence: CriticalMetricScore
    job_title_relevance: CriticalMetricScore
    experience_relevance: CriticalMetricScore
    total_critical_score: float = Field(ge=0.0, le=19.0)


class MissingKeyword(BaseModel):
    keyword: str
    tier: KeywordTier
    impact: float = Field(ge=0.0)
    suggested_placement: str
    color: KeywordColor


class OrderIssue(BaseModel):
    section: str
    current_position: int
    expected_position: int
    penalty: float = 0.0


class FormatIssue(BaseModel):
    type: str
    severity: Severity
    description: str
    recommendation: str = ""


class ScoreResult(BaseModel):
    overall: int = Field(ge=0, le=100)
    match_band: MatchBand
    interview_probability_range: str
    confidence: ConfidenceLevel
    confidence_score: int = Field(default=0, ge=0, le=100)
    rubric_version: str
    weighting_mode: WeightingMode
    extraction_mode: ExtractionMode = "TEXT"
    tier_scores: TierScores
    critical_metrics: CriticalMetrics
    red_flags: list[RedFlag] = Field(default_factory=list)
    red_flag_penalty: float = Field(default=0.0, le=0.0)
    auto_reject_risk: bool = False
    missing_keywords_enhanced: list[MissingKeyword] = Field(default_factory=list)
    section_order_issues: list[OrderIssue] = Field(default_factory=list)
    format_issues: list[FormatIssue] = Field(default_factory=list)
    candidate_level: CandidateLevelResult
    input_quality: InputQualityAssessment
    confidence_breakdown: ConfidenceBreakdown | None = None
    penalty_summary: PenaltySummary | None = None
    keyword_stuffing: BulletListStuffingReport | None = None
    issues: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    analysis: str = ""
