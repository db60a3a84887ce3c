import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.normalize.document import build_text_from_resume_data, normalize_request  # noqa: E402
from atscore.normalize.utils import section_key, split_sentences, strip_bullet_prefix  # noqa: E402
from atscore.schemas.scoring import ResumeData, ScoringRequest, WorkExperience  # noqa: E402
from atscore.scoring.input_quality import assess_input_quality, invalid_input_score  # noqa: E402
from atscore.taxonomy import LocalTaxonomy  # noqa: E402


class NormalizationTests(unittest.TestCase):
    def test_text_resume_is_split_into_sections_and_bullets(self):
        document = normalize_request(
            ScoringRequest(
                resume_text=(
                    "Jane Doe\n"
                    "jane@example.com\n"
                    "Professional Summary:\n"
                    "Backend engineer.\n"
                    "Work Experience\n"
                    "- Built APIs for payments\n"
                    "* Reduced latency by 30%\n"
                    "3. Led migration to cloud\n"
                    "- Built APIs for payments\n"
                ),
            )
        )
        self.assertEqual(document.sections, ["summary", "experience"])
        self.assertEqual(
            document.bullets,
            ["Built APIs for payments", "Reduced latency by 30%", "Led migration to cloud"],
        )
        self.assertEqual(document.summary, "Backend engineer.")
        self.assertTrue(document.has_email)
        self.assertFalse(document.has_job_description)
        self.assertEqual(document.file_meta.extraction_mode, "TEXT")

    def test_structured_data_fills_missing_text(self):
        data = ResumeData(
            name="Sam Lee",
            email="sam@example.com",
            work_experience=[
                WorkExperience(role="Analyst", company="Acme", year="2022 - Present", bullets=["Built dashboards"])
            ],
            skills=["Python", "python", "SQL"],
            projects=["Churn model"],
            certifications=["AWS Cloud Practitioner"],
        )
        document = normalize_request(ScoringRequest(resume_data=data, job_description="  Python role  "))
        self.assertIn("EXPERIENCE", document.text)
        self.assertIn("Analyst at Acme (2022 - Present)", document.text)
        self.assertEqual(document.skills, ["Python", "SQL"])
        self.assertEqual(document.projects[0].title, "Churn model")
        self.assertEqual(document.certifications[0].name, "AWS Cloud Practitioner")
        self.assertEqual(document.bullets, ["Built dashboards"])
        self.assertEqual(document.job_description, "Python role")
        self.assertTrue(document.has_job_description)

    def test_resume_text_takes_precedence_over_rendered_data(self):
        data = ResumeData(summary="From structured data")
        document = normalize_request(ScoringRequest(resume_text="Plain text resume", resume_data=data))
        self.assertEqual(document.text, "Plain text resume")
        self.assertNotIn("SUMMARY", build_text_from_resume_data(ResumeData()))

    def test_helpers(self):
        self.assertEqual(section_key("TECHNICAL SKILLS:"), "skills")
        self.assertIsNone(section_key("Built APIs"))
        self.assertEqual(strip_bullet_prefix("• Led a team"), "Led a team")
        self.assertEqual(split_sentences("One. Two!\nThree"), ["One.", "Two!", "Three"])


class InputQualityTests(unittest.TestCase):
    def test_empty_input_is_invalid(self):
        quality = assess_input_quality(normalize_request(ScoringRequest()), LocalTaxonomy())
        self.assertEqual(quality.level, "invalid")
        self.assertFalse(quality.is_valid)
        self.assertIn("Missing contact information", quality.issues)
        self.assertEqual(invalid_input_score(quality), 0)

    def test_complete_resume_is_valid(self):
        text = (
            "Jane Doe\njane@example.com | +1 555 123 4567\n"
            "SUMMARY\nBackend engineer shipping Python services for payments and logistics teams.\n"
            "SKILLS\nPython, SQL, Docker, Kubernetes, AWS, Redis, PostgreSQL, Git, Kafka, Terraform\n"
            "EXPERIENCE\n"
            "- Built payment APIs in Python serving 2 million requests per day across regions\n"
            "- Reduced p95 latency by 40% using Redis caching and query tuning\n"
            "- Migrated 30 services to Kubernetes on AWS with zero downtime\n"
            "- Automated infrastructure with Terraform modules reused by 6 teams\n"
            "- Led a Kafka event pipeline rollout processing 10k events per second\n"
            "PROJECTS\n- Designed an open-source PostgreSQL migration tool\n"
            "EDUCATION\nB.Sc. Computer Science, State University, 2018\n"
        )
        quality = assess_input_quality(normalize_request(ScoringRequest(resume_text=text)), LocalTaxonomy())
        self.assertTrue(quality.is_valid)
        self.assertIn(quality.level, {"good", "excellent"})
        self.assertEqual(quality.section_count, 5)
        self.assertTrue(quality.has_skills and quality.has_experience and quality.has_education)

    def test_invalid_score_is_capped(self):
        quality = assess_input_quality(normalize_request(ScoringRequest(resume_text="Hi")), LocalTaxonomy())
        self.assertLessEqual(invalid_input_score(quality), 35)


if __name__ == "__main__":
    unittest.main()
