import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.schemas.tiers import TIER_KEYS, TierScore, TierScores  # noqa: E402
from atscore.scoring.weights import (  # noqa: E402
    DEFAULT_ROLE_WEIGHTS,
    get_role_weights,
    normalize_tier_weights,
)


def make_tiers(percentage: float = 70) -> TierScores:
    return TierScores.from_mapping({key: TierScore.for_tier(key, percentage=percentage) for key in TIER_KEYS})


class WeightNormalizerTests(unittest.TestCase):
    def test_weights_sum_to_100_for_both_role_types(self):
        for role_type in ("fresher", "experienced"):
            normalized = normalize_tier_weights(make_tiers(), role_type)
            self.assertAlmostEqual(normalized.scored_weight_total(), 100.0)
            self.assertEqual(normalized.red_flags.weight, 0)

    def test_fresher_table_moves_experience_weight_to_skills(self):
        normalized = normalize_tier_weights(make_tiers(), "fresher")
        self.assertEqual(normalized.experience.weight, 0)
        self.assertEqual(normalized.skills_keywords.weight, 35)
        self.assertEqual(normalized.projects.weight, 13)

    def test_experienced_table(self):
        normalized = normalize_tier_weights(make_tiers(), "experienced")
        self.assertEqual(normalized.experience.weight, 25)
        self.assertEqual(normalized.skills_keywords.weight, 25)

    def test_normalization_is_idempotent(self):
        once = normalize_tier_weights(make_tiers(55), "experienced")
        twice = normalize_tier_weights(once, "experienced")
        self.assertEqual(once, twice)

    def test_weighted_contribution_follows_new_weight(self):
        normalized = normalize_tier_weights(make_tiers(50), "experienced")
        self.assertAlmostEqual(normalized.experience.weighted_contribution, 12.5)
        self.assertEqual(normalized.red_flags.weighted_contribution, 0)

    def test_invalid_configured_table_falls_back_to_defaults(self):
        with patch("atscore.scoring.weights.get_scoring_value", return_value={"experience": 50}):
            with self.assertLogs("atscore.scoring.weights", level="WARNING"):
                weights = get_role_weights("experienced")
        expected = {key: float(value) for key, value in DEFAULT_ROLE_WEIGHTS["experienced"].items()}
        self.assertEqual(weights, expected)

    def test_table_not_summing_to_100_is_rejected(self):
        skewed = {key: 20 for key in DEFAULT_ROLE_WEIGHTS["fresher"]}
        with patch("atscore.scoring.weights.get_scoring_value", return_value=skewed):
            with self.assertLogs("atscore.scoring.weights", level="WARNING"):
                weights = get_role_weights("fresher")
        self.assertEqual(weights["skills_keywords"], 35.0)


if __name__ == "__main__":
    unittest.main()
