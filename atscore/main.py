import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from atscore.api.v1.health import router as health_router
from atscore.api.v1.score import router as score_router
from atscore.core.config import settings
from atscore.core.lifespan import lifespan
from atscore.core.rate_limit import limiter

logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, traces_sample_rate=0.0)

app = FastAPI(title="ATS Resume Scoring API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, **settings.cors_options())
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["health"])
app.include_router(score_router, prefix="/v1", tags=["scoring"])
