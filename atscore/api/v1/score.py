from fastapi import APIRouter, Depends, Request

from atscore.core.rate_limit import rate_limit
from atscore.schemas.scoring import ScoreResult, ScoringRequest
from atscore.services.scoring_service import ScoringPipeline, build_default_pipeline

router = APIRouter()


def get_scoring_pipeline(request: Request) -> ScoringPipeline:
    pipeline = getattr(request.app.state, "scoring_pipeline", None)
    if pipeline is None:
        pipeline = build_default_pipeline()
        request.app.state.scoring_pipeline = pipeline
    return pipeline


@router.post(
    "/score",
    response_model=ScoreResult,
    summary="Score Resume",
    description="Score a resume, optionally against a job description.",
)
@rate_limit()
async def score_resume(
    request: Request,
    payload: ScoringRequest,
    pipeline: ScoringPipeline = Depends(get_scoring_pipeline),
) -> ScoreResult:
    _ = request
    return await pipeline.score(payload)
