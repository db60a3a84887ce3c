from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Sequence

from atscore.analyzers import (
    AnalyzerOutcome,
    TierAnalysis,
    TierAnalyzer,
    coerce_analysis,
    default_analyzers,
)
from atscore.core.config import Settings, settings as default_settings
from atscore.core.config.scoring import get_scoring_value
from atscore.normalize.document import ScoringDocument, normalize_request
from atscore.normalize.utils import split_sentences
from atscore.schemas.engine import (
    BulletListStuffingReport,
    CandidateLevelResult,
    InputQualityAssessment,
    RedFlag,
)
from atscore.schemas.scoring import FormatIssue, OrderIssue, ScoreResult, ScoringRequest
from atscore.schemas.tiers import PENALTY_TIER, SCORED_TIER_KEYS, TIER_KEYS, TierScore, TierScores
from atscore.scoring.aggregator import map_score
from atscore.scoring.candidate_level import detect_candidate_level, required_years_from_job_description
from atscore.scoring.confidence import (
    adjust_confidence_for_mode,
    calculate_confidence,
    features_from_analysis,
    penalize_missing_semantic,
)
from atscore.scoring.critical_metrics import (
    calculate_critical_metrics,
    empty_critical_metrics,
    has_quantified_result,
)
from atscore.scoring.dates import split_date_range
from atscore.scoring.input_quality import assess_input_quality, invalid_input_score
from atscore.scoring.keyword_context import validate_bullet_list
from atscore.scoring.keywords import (
    JobKeyword,
    build_missing_keywords,
    extract_job_keywords,
    match_keywords,
    missing_keyword_severities,
)
from atscore.scoring.numeric import round_half_up
from atscore.scoring.penalties import (
    calculate_proportional_penalties,
    create_penalty_summary,
    validate_date_ranges,
)
from atscore.scoring.red_flags import (
    RedFlagDetector,
    default_red_flag_detectors,
    detect_red_flags,
    incomplete_resume_flag,
    red_flag_tier_score,
)
from atscore.scoring.weights import normalize_tier_weights
from atscore.semantic import (
    EmbeddingProvider,
    HashingEmbeddingProvider,
    SemanticSignal,
    blend_match_scores,
    compute_semantic_signal,
)
from atscore.taxonomy import TaxonomyProvider, get_default_taxonomy_provider

from .narrative import build_invalid_narrative, build_narrative

logger = logging.getLogger(__name__)

_MAX_SEMANTIC_SENTENCES = 200


def _stub_percentage() -> float:
    return float(get_scoring_value("analyzers.stub_percentage", 20))


@dataclass(frozen=True)
class _Fanout:
    outcomes: list[AnalyzerOutcome]
    red_flags: list[RedFlag]
    stuffing: BulletListStuffingReport
    semantic: SemanticSignal


@dataclass(frozen=True)
class ScoringPipeline:
    """Scores one resume per call; every collaborator is passed in explicitly."""

    analyzers: Mapping[str, TierAnalyzer]
    red_flag_detectors: Sequence[RedFlagDetector]
    taxonomy: TaxonomyProvider
    embedding_provider: EmbeddingProvider | None = None
    semantic_timeout_seconds: float = 3.0
    today: date | None = field(default=None, compare=False)

    async def score(self, request: ScoringRequest) -> ScoreResult:
        document = normalize_request(request)
        quality = assess_input_quality(document, self.taxonomy)
        candidate = detect_candidate_level(document, today=self.today)
        if not quality.is_valid:
            logger.info("scoring_input_invalid quality=%s words=%s", quality.quality_score, quality.word_count)
            return self._invalid_result(document, quality, candidate)

        job_keywords = extract_job_keywords(document.job_description, self.taxonomy)
        literal_report = match_keywords(document, job_keywords, self.taxonomy)
        fanout = await self._fan_out(document, [item.keyword for item in literal_report.missing])
        return self._assemble(document, quality, candidate, job_keywords, fanout)

    def score_sync(self, request: ScoringRequest) -> ScoreResult:
        return asyncio.run(self.score(request))

    def _run_analyzer(self, tier_key: str, document: ScoringDocument) -> AnalyzerOutcome:
        analyzer = self.analyzers.get(tier_key)
        if analyzer is None:
            logger.warning("tier_analyzer_missing tier=%s", tier_key)
            return AnalyzerOutcome.failure(tier_key, "no analyzer registered")
        try:
            return AnalyzerOutcome.success(tier_key, coerce_analysis(tier_key, analyzer(document)))
        except Exception as exc:
            logger.warning("tier_analyzer_failed tier=%s error=%s", tier_key, exc)
            return AnalyzerOutcome.failure(tier_key, exc)

    def _stuffing_report(self, document: ScoringDocument) -> BulletListStuffingReport:
        terms = sorted({term for bullet in document.bullets for term in self.taxonomy.find_skills(bullet).values()})
        return validate_bullet_list(document.bullets, terms)

    async def _fan_out(self, document: ScoringDocument, semantic_keywords: list[str]) -> _Fanout:
        sentences = (document.bullets or split_sentences(document.text))[:_MAX_SEMANTIC_SENTENCES]
        outcomes, red_flags, stuffing, semantic = await asyncio.gather(
            asyncio.gather(
                *(asyncio.to_thread(self._run_analyzer, tier_key, document) for tier_key in SCORED_TIER_KEYS)
            ),
            asyncio.to_thread(detect_red_flags, document, self.red_flag_detectors),
            asyncio.to_thread(self._stuffing_report, document),
            compute_semantic_signal(
                document.text,
                document.job_description,
                self.embedding_provider,
                timeout_seconds=self.semantic_timeout_seconds,
                keywords=semantic_keywords,
                sentences=sentences,
            ),
        )
        return _Fanout(outcomes=list(outcomes), red_flags=red_flags, stuffing=stuffing, semantic=semantic)

    def _assemble(
        self,
        document: ScoringDocument,
        quality: InputQualityAssessment,
        candidate: CandidateLevelResult,
        job_keywords: list[JobKeyword],
        fanout: _Fanout,
    ) -> ScoreResult:
        tiers: dict[str, TierScore] = {}
        analyses: list[TierAnalysis] = []
        for outcome in fanout.outcomes:
            if outcome.ok and outcome.analysis is not None:
                tiers[outcome.tier_key] = outcome.analysis.tier_score
                analyses.append(outcome.analysis)
            else:
                tiers[outcome.tier_key] = TierScore.degraded(outcome.tier_key, _stub_percentage())
        tiers[PENALTY_TIER] = red_flag_tier_score(fanout.red_flags)
        tier_scores = normalize_tier_weights(TierScores.from_mapping(tiers), candidate.role_type)

        semantic = fanout.semantic
        rescued = semantic.matched_keywords if semantic.available else None
        report = match_keywords(document, job_keywords, self.taxonomy, extra_matches=rescued)
        mapped = map_score(tier_scores, fanout.red_flags)
        overall = int(round_half_up(mapped.final_score))

        warnings: list[str] = []
        has_jd = document.has_job_description
        if has_jd and report.keywords:
            matched, total = len(report.matched), len(report.keywords)
        else:
            skills_tier = tier_scores.skills_keywords
            matched, total = skills_tier.metrics_passed, skills_tier.metrics_total
        literal_fraction = matched / total if total else 0.0
        if semantic.available and semantic.score is not None:
            similarity = blend_match_scores(semantic.score, literal_fraction)
        else:
            similarity = literal_fraction
        neutral_context = float(get_scoring_value("confidence.neutral_context_quality", 50))
        features = features_from_analysis(
            matched_keywords=matched,
            total_keywords=total,
            semantic_similarity=similarity,
            years_of_experience=candidate.total_years_experience,
            required_years=required_years_from_job_description(document.job_description) if has_jd else None,
            missing_critical_keywords=len(report.missing_critical),
            total_critical_keywords=len(report.critical_keywords),
            context_quality=(
                fanout.stuffing.average_context_score * 100
                if fanout.stuffing.average_context_score is not None
                else neutral_context
            ),
            has_quantified_achievements=any(has_quantified_result(bullet) for bullet in document.bullets),
            section_completeness=tier_scores.content_structure.percentage,
            formatting_score=tier_scores.basic_structure.percentage,
        )
        confidence = calculate_confidence(features)
        if semantic.status in ("timeout", "error"):
            confidence = penalize_missing_semantic(confidence, semantic.detail)
            warnings.append(semantic.detail)
        confidence = adjust_confidence_for_mode(confidence, "jd_based" if has_jd else "general")

        ranges = [parts for entry in document.work_experience if (parts := split_date_range(entry.year))]
        date_report = validate_date_ranges(ranges, today=self.today)
        warnings.extend(date_report.warnings)
        proportional = calculate_proportional_penalties(missing_keyword_severities(report))
        penalty_summary = create_penalty_summary([*proportional.penalties, *date_report.penalties])

        missing_keywords = build_missing_keywords(report)
        order_issues: list[OrderIssue] = [issue for analysis in analyses for issue in analysis.order_issues]
        format_issues: list[FormatIssue] = [issue for analysis in analyses for issue in analysis.format_issues]
        critical_metrics = calculate_critical_metrics(
            document,
            self.taxonomy,
            report.match_rate if has_jd and report.keywords else None,
        )
        weighting_mode = "JD" if has_jd else "GENERAL"
        narrative = build_narrative(
            overall=overall,
            mapped=mapped,
            tier_scores=tier_scores,
            red_flags=fanout.red_flags,
            missing_keywords=missing_keywords,
            format_issues=format_issues,
            critical_metrics=critical_metrics,
            candidate=candidate,
            confidence=confidence,
            weighting_mode=weighting_mode,
        )
        failed = [outcome.tier_key for outcome in fanout.outcomes if not outcome.ok]
        if failed:
            warnings.append(f"Partial analysis: {', '.join(failed)} scored with placeholder values")

        logger.info(
            "scoring_completed overall=%s band=%s mode=%s level=%s red_flags=%s",
            overall,
            mapped.match_band,
            weighting_mode,
            candidate.level,
            len(fanout.red_flags),
        )
        return ScoreResult(
            overall=overall,
            match_band=mapped.match_band,
            interview_probability_range=mapped.interview_probability,
            confidence=confidence.level,
            confidence_score=confidence.numeric_score,
            rubric_version=str(get_scoring_value("rubric.version", "2.1-tiered")),
            weighting_mode=weighting_mode,
            extraction_mode=document.file_meta.extraction_mode,
            tier_scores=tier_scores,
            critical_metrics=critical_metrics,
            red_flags=fanout.red_flags,
            red_flag_penalty=mapped.total_penalty,
            auto_reject_risk=mapped.auto_reject_risk,
            missing_keywords_enhanced=missing_keywords,
            section_order_issues=order_issues,
            format_issues=format_issues,
            candidate_level=candidate,
            input_quality=quality,
            confidence_breakdown=confidence,
            penalty_summary=penalty_summary,
            keyword_stuffing=fanout.stuffing,
            warnings=warnings,
            **narrative.model_dump(),
        )

    def _invalid_result(
        self,
        document: ScoringDocument,
        quality: InputQualityAssessment,
        candidate: CandidateLevelResult,
    ) -> ScoreResult:
        zeroed = {key: TierScore.for_tier(key, percentage=0) for key in TIER_KEYS}
        tier_scores = normalize_tier_weights(TierScores.from_mapping(zeroed), candidate.role_type)
        flag = incomplete_resume_flag()
        overall = invalid_input_score(quality)
        narrative = build_invalid_narrative(quality, overall)
        return ScoreResult(
            overall=overall,
            match_band="Very Poor",
            interview_probability_range="0-3%",
            confidence="Low",
            confidence_score=min(quality.quality_score, 20),
            rubric_version=str(get_scoring_value("rubric.invalid_input_version", "2.1-tiered-invalid")),
            weighting_mode="JD" if document.has_job_description else "GENERAL",
            extraction_mode=document.file_meta.extraction_mode,
            tier_scores=tier_scores,
            critical_metrics=empty_critical_metrics(),
            red_flags=[flag],
            red_flag_penalty=flag.penalty,
            auto_reject_risk=True,
            format_issues=[
                FormatIssue(
                    type="image",
                    severity="high",
                    description="Resume content is insufficient for proper analysis",
                    recommendation="Upload a complete resume with all standard sections",
                )
            ],
            candidate_level=candidate,
            input_quality=quality,
            warnings=["Input too thin for full analysis; tier analyzers were not run"],
            **narrative.model_dump(),
        )


def build_default_pipeline(config: Settings | None = None) -> ScoringPipeline:
    config = config or default_settings
    taxonomy = get_default_taxonomy_provider()
    provider = HashingEmbeddingProvider(dimension=config.embedding_dimension) if config.semantic_enabled else None
    return ScoringPipeline(
        analyzers=default_analyzers(taxonomy),
        red_flag_detectors=default_red_flag_detectors(taxonomy),
        taxonomy=taxonomy,
        embedding_provider=provider,
        semantic_timeout_seconds=config.semantic_timeout_seconds,
    )


def score_resume(request: ScoringRequest, pipeline: ScoringPipeline | None = None) -> ScoreResult:
    """Synchronous entry point for scripts and tests."""
    return (pipeline or build_default_pipeline()).score_sync(request)
