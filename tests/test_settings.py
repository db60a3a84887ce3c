import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.core.config.settings import Settings  # noqa: E402

_KEYS = (
    "RATE_LIMIT",
    "RATE_LIMIT_ENABLED",
    "LOG_LEVEL",
    "CORS_ALLOWED_ORIGINS",
    "CORS_ALLOW_CREDENTIALS",
    "SEMANTIC_TIMEOUT_SECONDS",
    "EMBEDDING_DIMENSION",
)


def _clean_env(**overrides):
    env = {key: value for key, value in os.environ.items() if key not in _KEYS}
    env.update(overrides)
    return patch.dict(os.environ, env, clear=True)


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with _clean_env():
            loaded = Settings.from_env()
        self.assertEqual(loaded.rate_limit, "60/minute")
        self.assertTrue(loaded.rate_limit_enabled)
        self.assertEqual(loaded.log_level, "INFO")
        self.assertIn("http://localhost:3000", loaded.cors_allowed_origins)
        self.assertEqual(loaded.semantic_timeout_seconds, 3.0)

    def test_overrides_and_bad_values(self):
        with _clean_env(
            RATE_LIMIT_ENABLED="off",
            LOG_LEVEL="debug",
            CORS_ALLOWED_ORIGINS=" https://a.example , ,https://b.example",
            EMBEDDING_DIMENSION="not-a-number",
            SEMANTIC_TIMEOUT_SECONDS="1.5",
        ):
            loaded = Settings.from_env()
        self.assertFalse(loaded.rate_limit_enabled)
        self.assertEqual(loaded.log_level, "DEBUG")
        self.assertEqual(loaded.cors_allowed_origins, ("https://a.example", "https://b.example"))
        self.assertEqual(loaded.embedding_dimension, 64)
        self.assertEqual(loaded.semantic_timeout_seconds, 1.5)

    def test_blank_origin_list_falls_back(self):
        with _clean_env(CORS_ALLOWED_ORIGINS=" , "):
            loaded = Settings.from_env()
        self.assertEqual(len(loaded.cors_allowed_origins), 3)

    def test_non_positive_timeout_is_rejected(self):
        with _clean_env(SEMANTIC_TIMEOUT_SECONDS="0"):
            with self.assertRaises(RuntimeError):
                Settings.from_env()

    def test_cors_options(self):
        with _clean_env(CORS_ALLOW_CREDENTIALS="yes"):
            options = Settings.from_env().cors_options()
        self.assertTrue(options["allow_credentials"])
        self.assertIsNone(options["allow_origin_regex"])
        self.assertIn("POST", options["allow_methods"])


if __name__ == "__main__":
    unittest.main()
