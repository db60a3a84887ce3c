from contextlib import asynccontextmanager
import logging

from atscore.core.config.scoring import get_scoring_config
from atscore.services.scoring_service import build_default_pipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    # A broken scoring.yaml stops startup.
    config = get_scoring_config()
    app.state.scoring_pipeline = build_default_pipeline()
    logger.info(
        "scoring_pipeline_ready rubric=%s semantic=%s",
        config.get("rubric", {}).get("version"),
        app.state.scoring_pipeline.embedding_provider is not None,
    )
    yield
