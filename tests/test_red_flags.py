import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.normalize.document import ScoringDocument  # noqa: E402
from atscore.schemas.engine import RedFlag  # noqa: E402
from atscore.schemas.scoring import WorkExperience  # noqa: E402
from atscore.scoring.red_flags import (  # noqa: E402
    ConflictingDatesDetector,
    EmploymentGapDetector,
    JobHoppingDetector,
    KeywordStuffingDetector,
    assign_flag_ids,
    detect_red_flags,
    incomplete_resume_flag,
    red_flag_tier_score,
)
from atscore.taxonomy import LocalTaxonomy  # noqa: E402

TODAY = date(2026, 10, 18)


def role(company: str, year: str) -> WorkExperience:
    return WorkExperience(role="Engineer", company=company, year=year)


def make_flag(flag_type: str = "employment", penalty: int = -3, severity: str = "medium") -> RedFlag:
    return RedFlag(
        id=1,
        type=flag_type,
        severity=severity,
        penalty=penalty,
        description=f"{flag_type} issue",
        recommendation="Fix it",
    )


class _ExplodingDetector:
    def detect(self, document):
        raise ValueError("boom")


class RedFlagDetectorTests(unittest.TestCase):
    def test_employment_gap_over_six_months(self):
        document = ScoringDocument(
            work_experience=[role("Acme", "Jan 2018 - Dec 2018"), role("Globex", "Jan 2020 - Present")]
        )
        flags = EmploymentGapDetector(today=TODAY).detect(document)
        self.assertEqual(len(flags), 1)
        self.assertEqual(flags[0].type, "employment")
        self.assertEqual(flags[0].penalty, -3)
        self.assertIn("13 months", flags[0].description)

    def test_unspaced_year_ranges_are_checked(self):
        document = ScoringDocument(
            work_experience=[role("Acme", "2015-2016"), role("Globex", "2020-2021"), role("Initech", "2024-2022")]
        )
        self.assertEqual(len(EmploymentGapDetector(today=TODAY).detect(document)), 1)
        self.assertEqual(len(ConflictingDatesDetector(today=TODAY).detect(document)), 1)

    def test_short_gap_is_ignored(self):
        document = ScoringDocument(
            work_experience=[role("Acme", "Jan 2018 - Dec 2018"), role("Globex", "Mar 2019 - Present")]
        )
        self.assertEqual(EmploymentGapDetector(today=TODAY).detect(document), [])

    def test_job_hopping_needs_three_short_stints(self):
        stints = [
            role("Acme", "Jan 2019 - Jun 2019"),
            role("Globex", "Aug 2019 - Jan 2020"),
            role("Initech", "Mar 2020 - Sep 2020"),
        ]
        flags = JobHoppingDetector(today=TODAY).detect(ScoringDocument(work_experience=stints))
        self.assertEqual(len(flags), 1)
        self.assertEqual(flags[0].severity, "medium")

        two = JobHoppingDetector(today=TODAY).detect(ScoringDocument(work_experience=stints[:2]))
        self.assertEqual(two, [])

    def test_current_short_role_does_not_count_as_hopping(self):
        stints = [
            role("Acme", "Jan 2019 - Jun 2019"),
            role("Globex", "Aug 2019 - Jan 2020"),
            role("Initech", "Jun 2026 - Present"),
        ]
        self.assertEqual(JobHoppingDetector(today=TODAY).detect(ScoringDocument(work_experience=stints)), [])

    def test_conflicting_dates(self):
        document = ScoringDocument(work_experience=[role("Acme", "Jan 2022 - Jan 2020")])
        flags = ConflictingDatesDetector(today=TODAY).detect(document)
        self.assertEqual(len(flags), 1)
        self.assertEqual(flags[0].type, "formatting")
        self.assertEqual(flags[0].penalty, -2)

    def test_keyword_stuffing_is_critical(self):
        document = ScoringDocument(
            bullets=["Python python developer python", "Docker, Kubernetes, AWS, Terraform"],
        )
        flags = KeywordStuffingDetector(taxonomy=LocalTaxonomy()).detect(document)
        self.assertEqual(len(flags), 1)
        self.assertEqual(flags[0].type, "skills")
        self.assertEqual(flags[0].severity, "critical")
        self.assertEqual(flags[0].penalty, -5)

    def test_natural_bullets_are_not_stuffed(self):
        document = ScoringDocument(
            bullets=[
                "Developed payment APIs using Python, cutting latency by 40%",
                "Migrated 30 services to Kubernetes with zero downtime",
            ],
        )
        self.assertEqual(KeywordStuffingDetector(taxonomy=LocalTaxonomy()).detect(document), [])


class RedFlagAggregationTests(unittest.TestCase):
    def test_ids_are_assigned_per_group(self):
        flags = assign_flag_ids(
            [make_flag("employment"), make_flag("skills", -5, "critical"), make_flag("employment"), make_flag("formatting")]
        )
        self.assertEqual([flag.id for flag in flags], [1, 11, 2, 21])

    def test_group_ids_never_collide(self):
        flags = assign_flag_ids([make_flag("employment") for _ in range(12)] + [make_flag("skills", -5, "critical")])
        ids = [flag.id for flag in flags]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(max(flag.id for flag in flags if flag.type == "employment"), 10)
        self.assertEqual([flag.id for flag in flags if flag.type == "skills"], [11])

    def test_failing_detector_is_skipped(self):
        document = ScoringDocument(work_experience=[role("Acme", "Jan 2022 - Jan 2020")])
        with self.assertLogs("atscore.scoring.red_flags", level="WARNING") as logs:
            flags = detect_red_flags(document, [_ExplodingDetector(), ConflictingDatesDetector(today=TODAY)])
        self.assertEqual(len(flags), 1)
        self.assertEqual(flags[0].id, 21)
        self.assertTrue(any("red_flag_detector_failed" in line for line in logs.output))

    def test_tier_score_subtracts_penalties_from_30(self):
        tier = red_flag_tier_score([make_flag(penalty=-5), make_flag(penalty=-3)])
        self.assertEqual(tier.tier_number, 8)
        self.assertAlmostEqual(tier.percentage, 73.33, places=2)
        self.assertEqual(len(tier.top_issues), 2)

        self.assertEqual(red_flag_tier_score([]).percentage, 100)
        self.assertEqual(red_flag_tier_score([make_flag(penalty=-20), make_flag(penalty=-20)]).percentage, 0)

    def test_incomplete_resume_flag(self):
        flag = incomplete_resume_flag()
        self.assertEqual(flag.severity, "critical")
        self.assertEqual(flag.penalty, -20)
        self.assertEqual(flag.id, 21)


if __name__ == "__main__":
    unittest.main()
