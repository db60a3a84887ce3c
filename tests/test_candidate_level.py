import sys
import unittest
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.normalize.document import ScoringDocument  # noqa: E402
from atscore.schemas.scoring import Education, WorkExperience  # noqa: E402
from atscore.scoring.candidate_level import (  # noqa: E402
    detect_candidate_level,
    required_years_from_job_description,
    role_type_for_level,
)

TODAY = date(2026, 10, 18)
FRESHER_TEXT = "Final year computer science student building web apps with Python and React."


def engineer(company: str) -> WorkExperience:
    return WorkExperience(role="Software Engineer", company=company, year="2019 - 2021")


class CandidateLevelTests(unittest.TestCase):
    def test_declared_user_type_wins(self):
        document = ScoringDocument(text=FRESHER_TEXT, user_type="experienced")
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.level, "mid")
        self.assertEqual(result.role_type, "experienced")
        self.assertEqual(result.confidence, 1.0)

        student = detect_candidate_level(
            ScoringDocument(work_experience=[engineer(f"Co{index}") for index in range(5)], user_type="student"),
            today=TODAY,
        )
        self.assertEqual(student.level, "fresher")
        self.assertEqual(student.role_type, "fresher")

    def test_fresher_indicator_without_job_description(self):
        result = detect_candidate_level(ScoringDocument(text=FRESHER_TEXT), today=TODAY)
        self.assertEqual(result.level, "fresher")
        self.assertEqual(result.role_type, "fresher")
        self.assertIn("Fresher indicator found in text", result.signals)

    def test_job_description_years_requirement_forces_non_fresher(self):
        document = ScoringDocument(
            text=FRESHER_TEXT,
            job_description="Backend developer. Minimum 3 years of experience with Python required.",
        )
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.level, "junior")
        self.assertEqual(result.role_type, "experienced")

    def test_job_description_without_years_changes_nothing(self):
        base = ScoringDocument(text=FRESHER_TEXT)
        with_jd = base.model_copy(update={"job_description": "We use Python and React every day."})
        self.assertEqual(
            detect_candidate_level(base, today=TODAY),
            detect_candidate_level(with_jd, today=TODAY),
        )

    def test_each_work_entry_counts_as_two_years(self):
        document = ScoringDocument(work_experience=[engineer("Acme"), engineer("Globex"), engineer("Initech")])
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.total_years_experience, 6.0)
        self.assertEqual(result.level, "mid")

    def test_senior_title_raises_level(self):
        document = ScoringDocument(
            work_experience=[
                WorkExperience(role="Principal Engineer", company="Acme", year="2020 - Present"),
                engineer("Globex"),
            ]
        )
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.level, "senior")

    def test_internships_only_is_fresher(self):
        document = ScoringDocument(
            work_experience=[WorkExperience(role="Software Intern", company="Acme", year="Jun 2025 - Aug 2025")]
        )
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.level, "fresher")
        self.assertIn("Only internship experience found", result.signals)

    def test_recent_degree_without_experience_is_fresher(self):
        document = ScoringDocument(
            education=[Education(degree="B.Sc. Computer Science", school="State University", year="2026")]
        )
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.level, "fresher")
        self.assertIn("Recent education detected", result.signals)

    def test_years_stated_in_text(self):
        document = ScoringDocument(text="Data engineer with 9 years of experience in analytics platforms.")
        result = detect_candidate_level(document, today=TODAY)
        self.assertEqual(result.level, "senior")
        self.assertEqual(result.total_years_experience, 9.0)

    def test_required_years_from_job_description(self):
        jd = "We need 5+ years of Python and at least 3 years of AWS."
        self.assertEqual(required_years_from_job_description(jd), 5)
        self.assertIsNone(required_years_from_job_description("No experience requirement listed."))
        self.assertIsNone(required_years_from_job_description(""))

    def test_role_type_for_level(self):
        self.assertEqual(role_type_for_level("fresher"), "fresher")
        for level in ("junior", "mid", "senior"):
            self.assertEqual(role_type_for_level(level), "experienced")


if __name__ == "__main__":
    unittest.main()
