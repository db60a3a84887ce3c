from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .settings import settings

_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_SCORING_CONFIG_PATH = Path(__file__).with_name("scoring.yaml")


def _scoring_config_path() -> Path:
    if settings.scoring_config_path:
        return Path(settings.scoring_config_path)
    return _DEFAULT_SCORING_CONFIG_PATH


def load_scoring_config(path: Path) -> dict[str, Any]:
    """Read and validate a scoring config file without touching the cache."""
    if not path.exists():
        raise RuntimeError(
            f"Scoring config not found at '{path}'. "
            "Expected file: atscore/core/config/scoring.yaml or SCORING_CONFIG_PATH"
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")
    return parsed


def get_scoring_config() -> dict[str, Any]:
    """Load the scoring config once and cache it for the process."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is None:
        _SCORING_CONFIG_CACHE = load_scoring_config(_scoring_config_path())
    return _SCORING_CONFIG_CACHE


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'confidence.weights.literal_match'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
