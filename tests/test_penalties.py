import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.scoring.penalties import (  # noqa: E402
    apply_soft_penalties,
    calculate_proportional_penalties,
    create_penalty_summary,
    severity_penalty,
    validate_date_ranges,
)


class ProportionalPenaltyTests(unittest.TestCase):
    def test_severity_table(self):
        self.assertEqual(severity_penalty("critical"), (3.0, 15.0))
        self.assertEqual(severity_penalty("high"), (2.0, 12.0))
        self.assertEqual(severity_penalty("medium"), (1.5, 10.0))
        self.assertEqual(severity_penalty("low"), (1.0, 8.0))

    def test_missing_skills_become_typed_penalties(self):
        report = calculate_proportional_penalties([("kubernetes", "critical"), ("graphql", "low")])
        self.assertEqual(
            [penalty.type for penalty in report.penalties],
            ["missing_critical_skill", "missing_optional_skill"],
        )
        self.assertEqual(report.total_penalty, 4.0)
        for penalty in report.penalties:
            self.assertLessEqual(penalty.applied_penalty, penalty.max_penalty)

    def test_single_critical_penalty_stays_within_15_percent(self):
        report = calculate_proportional_penalties([("python", "critical")])
        for base in (10.0, 55.0, 100.0):
            result = apply_soft_penalties(base, report.penalties)
            self.assertGreaterEqual(result.adjusted_score, round(base * 0.85, 1))
            self.assertLess(result.adjusted_score, base)

    def test_penalties_compound_most_severe_first(self):
        report = calculate_proportional_penalties([("graphql", "low"), ("python", "critical")])
        result = apply_soft_penalties(100, report.penalties)
        self.assertEqual([penalty.severity for penalty in result.applied_penalties], ["critical", "low"])
        # 100 -> 97 -> 96.03
        self.assertEqual(result.adjusted_score, 96.0)
        self.assertEqual(result.total_reduction, 4.0)

    def test_global_cap_stops_the_run(self):
        report = calculate_proportional_penalties([(f"skill{index}", "critical") for index in range(10)])
        result = apply_soft_penalties(100, report.penalties, cap=5)
        self.assertEqual(len(result.applied_penalties), 2)
        self.assertGreaterEqual(result.total_reduction, 5)

    def test_non_finite_base_score_is_treated_as_zero(self):
        report = calculate_proportional_penalties([("python", "critical")])
        self.assertEqual(apply_soft_penalties(float("nan"), report.penalties).adjusted_score, 0)


class PenaltySummaryTests(unittest.TestCase):
    def test_summary_counts_and_caps_total_impact(self):
        report = calculate_proportional_penalties([(f"skill{index}", "critical") for index in range(10)])
        summary = create_penalty_summary(report.penalties)
        self.assertEqual(summary.total_penalties, 10)
        self.assertEqual(summary.by_severity["critical"], 10)
        self.assertEqual(summary.by_type, {"missing_critical_skill": 10})
        self.assertEqual(summary.total_impact, 15.0)
        self.assertIn("capped at 15%", summary.description)

    def test_empty_summary(self):
        summary = create_penalty_summary([])
        self.assertEqual(summary.total_penalties, 0)
        self.assertEqual(summary.total_impact, 0)


class DateRangePenaltyTests(unittest.TestCase):
    def test_inverted_range_is_penalized(self):
        report = validate_date_ranges([("Jan 2022", "Jan 2020")], today=date(2026, 10, 18))
        self.assertFalse(report.is_valid)
        self.assertEqual(len(report.penalties), 1)
        self.assertEqual(report.penalties[0].type, "date_issue")
        self.assertIn("End date is before start date", report.warnings)

    def test_future_date_without_expected_keyword_warns(self):
        report = validate_date_ranges([("Jan 2025", "Dec 2028")], today=date(2026, 10, 18))
        self.assertTrue(report.is_valid)
        self.assertTrue(any("future" in warning.lower() for warning in report.warnings))

    def test_valid_ranges_pass_cleanly(self):
        report = validate_date_ranges(
            [("Jan 2020", "Present"), ("Jun 2018", "Dec 2019")],
            today=date(2026, 10, 18),
        )
        self.assertTrue(report.is_valid)
        self.assertEqual(report.warnings, [])
        self.assertEqual(report.penalties, [])


if __name__ == "__main__":
    unittest.main()
