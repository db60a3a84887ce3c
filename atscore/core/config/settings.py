from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

load_dotenv()

T = TypeVar("T")

_TRUTHY = {"1", "true", "yes", "y", "on"}
_DEFAULT_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
)


def _env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _parsed(name: str, parse: Callable[[str], T], default: T) -> T:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError:
        return default


def _as_bool(raw: str) -> bool:
    return raw.lower() in _TRUTHY


def _as_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(item.strip() for item in raw.split(",") if item.strip())
    if not origins:
        raise ValueError("empty origin list")
    return origins


@dataclass(frozen=True)
class Settings:
    """Process-wide settings read once from the environment (and .env)."""

    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    semantic_enabled: bool
    semantic_timeout_seconds: float
    embedding_dimension: int
    scoring_config_path: str | None

    @classmethod
    def from_env(cls) -> "Settings":
        loaded = cls(
            rate_limit=_env("RATE_LIMIT") or "60/minute",
            rate_limit_enabled=_parsed("RATE_LIMIT_ENABLED", _as_bool, True),
            log_level=(_env("LOG_LEVEL") or "INFO").upper(),
            sentry_dsn=_env("SENTRY_DSN"),
            cors_allowed_origins=_parsed("CORS_ALLOWED_ORIGINS", _as_origins, _DEFAULT_ORIGINS),
            cors_allow_origin_regex=_env("CORS_ALLOW_ORIGIN_REGEX"),
            cors_allow_credentials=_parsed("CORS_ALLOW_CREDENTIALS", _as_bool, False),
            semantic_enabled=_parsed("SEMANTIC_ENABLED", _as_bool, True),
            semantic_timeout_seconds=_parsed("SEMANTIC_TIMEOUT_SECONDS", float, 3.0),
            embedding_dimension=_parsed("EMBEDDING_DIMENSION", int, 64),
            scoring_config_path=_env("SCORING_CONFIG_PATH"),
        )
        loaded.validate()
        return loaded

    def validate(self) -> None:
        if self.semantic_timeout_seconds <= 0:
            raise RuntimeError("SEMANTIC_TIMEOUT_SECONDS must be greater than 0.")
        if self.embedding_dimension <= 0:
            raise RuntimeError("EMBEDDING_DIMENSION must be greater than 0.")

    def cors_options(self) -> dict:
        return {
            "allow_origins": list(self.cors_allowed_origins),
            "allow_origin_regex": self.cors_allow_origin_regex,
            "allow_credentials": self.cors_allow_credentials,
            "allow_methods": ["POST", "GET", "OPTIONS"],
            "allow_headers": ["*"],
        }


settings = Settings.from_env()
