import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.normalize.document import ScoringDocument  # noqa: E402
from atscore.schemas.scoring import WorkExperience  # noqa: E402
from atscore.scoring.critical_metrics import (  # noqa: E402
    calculate_critical_metrics,
    empty_critical_metrics,
    has_quantified_result,
    jd_keywords_match,
)
from atscore.scoring.keywords import (  # noqa: E402
    build_missing_keywords,
    extract_job_keywords,
    match_keywords,
    missing_keyword_severities,
)
from atscore.taxonomy import LocalTaxonomy  # noqa: E402

JOB_DESCRIPTION = (
    "Senior Data Engineer\n"
    "Must have: Python, SQL and Airflow\n"
    "Experience with Spark is required. Python daily.\n"
    "Nice to have: Kafka, dbt\n"
    "Our stack includes Docker.\n"
)


class JobKeywordTests(unittest.TestCase):
    def setUp(self):
        self.taxonomy = LocalTaxonomy()
        self.keywords = extract_job_keywords(JOB_DESCRIPTION, self.taxonomy)

    def test_keywords_are_tiered_by_line(self):
        tiers = {item.keyword: item.tier for item in self.keywords}
        self.assertEqual(tiers["python"], "critical")
        self.assertEqual(tiers["spark"], "critical")
        self.assertEqual(tiers["kafka"], "nice_to_have")
        self.assertEqual(tiers["docker"], "important")
        self.assertNotIn("dbt", tiers)
        self.assertEqual(self.keywords[0].tier, "critical")

    def test_synonyms_and_semantic_matches_count(self):
        document = ScoringDocument(text="Built ETL in Python3 and Postgres", skills=["Apache Airflow", "k8s"])
        report = match_keywords(document, self.keywords, self.taxonomy)
        self.assertIn("python", {item.keyword for item in report.matched})
        self.assertIn("sql", {item.keyword for item in report.missing})

        rescued = match_keywords(document, self.keywords, self.taxonomy, extra_matches=["SQL", "spark"])
        self.assertIn("sql", {item.keyword for item in rescued.matched})
        self.assertGreater(rescued.match_rate, report.match_rate)

    def test_missing_keyword_presentation(self):
        report = match_keywords(ScoringDocument(text="Docker"), self.keywords, self.taxonomy)
        missing = {item.keyword: item for item in build_missing_keywords(report)}
        self.assertEqual(missing["python"].color, "red")
        self.assertEqual(missing["python"].impact, 5)
        self.assertEqual(missing["kafka"].color, "yellow")
        self.assertNotIn("docker", missing)
        severities = dict(missing_keyword_severities(report))
        self.assertEqual(severities["python"], "critical")
        self.assertEqual(severities["kafka"], "low")
        self.assertEqual(len(report.missing_critical), len(report.critical_keywords))

    def test_empty_job_description(self):
        self.assertEqual(extract_job_keywords("", self.taxonomy), [])
        report = match_keywords(ScoringDocument(text="Python"), [], self.taxonomy)
        self.assertEqual(report.match_rate, 0)


class CriticalMetricTests(unittest.TestCase):
    def test_quantified_result_patterns(self):
        self.assertTrue(has_quantified_result("Cut costs by 25%"))
        self.assertTrue(has_quantified_result("Saved $40,000 a year"))
        self.assertTrue(has_quantified_result("Onboarded 300 customers"))
        self.assertFalse(has_quantified_result("Improved onboarding"))

    def test_no_job_description_is_neutral(self):
        metric = jd_keywords_match(None)
        self.assertEqual(metric.percentage, 50)
        self.assertEqual(metric.score, 2.5)
        self.assertEqual(metric.details, "No JD provided for comparison")

    def test_half_percent_rounds_up(self):
        metric = jd_keywords_match(62.5)
        self.assertEqual(metric.percentage, 63)
        self.assertEqual(metric.details, "63% of JD keywords found in resume")
        self.assertEqual(metric.status, "good")

    def test_big_five_against_job_description(self):
        document = ScoringDocument(
            text="Python SQL Airflow pipelines",
            skills=["Python", "SQL"],
            work_experience=[
                WorkExperience(
                    role="Data Engineer",
                    company="Acme",
                    bullets=["Built Airflow pipelines moving 2 million rows daily with Python", "Wrote docs"],
                )
            ],
            job_description=JOB_DESCRIPTION,
        )
        metrics = calculate_critical_metrics(document, LocalTaxonomy(), keyword_match_rate=80)
        self.assertEqual(metrics.jd_keywords_match.score, 4.0)
        self.assertEqual(metrics.jd_keywords_match.status, "excellent")
        self.assertEqual(metrics.quantified_results_presence.details, "1/2 bullets have metrics")
        self.assertEqual(metrics.job_title_relevance.percentage, 100)
        self.assertLessEqual(metrics.total_critical_score, 19)
        expected_total = sum(
            getattr(metrics, name).score
            for name in (
                "jd_keywords_match",
                "technical_skills_alignment",
                "quantified_results_presence",
                "job_title_relevance",
                "experience_relevance",
            )
        )
        self.assertAlmostEqual(metrics.total_critical_score, round(expected_total, 2))

    def test_empty_metrics(self):
        metrics = empty_critical_metrics()
        self.assertEqual(metrics.total_critical_score, 0)
        self.assertEqual(metrics.jd_keywords_match.max_score, 5)
        self.assertEqual(metrics.experience_relevance.status, "poor")


if __name__ == "__main__":
    unittest.main()
