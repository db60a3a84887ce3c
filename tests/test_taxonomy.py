import json
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from atscore.taxonomy import get_default_taxonomy_provider  # noqa: E402
from atscore.taxonomy.local_taxonomy import LocalTaxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    def test_synonym_normalization_resolves_canonical_id(self):
        taxonomy = LocalTaxonomy()
        normalized, canonical_id = taxonomy.normalize_skill("Client Management")
        self.assertEqual(normalized, "client management")
        self.assertEqual(canonical_id, "skill_stakeholder_mgmt")

    def test_unknown_skill_has_no_canonical_id(self):
        normalized, canonical_id = LocalTaxonomy().normalize_skill("  Basket Weaving ")
        self.assertEqual(normalized, "basket weaving")
        self.assertIsNone(canonical_id)

    def test_find_skills_in_text(self):
        found = LocalTaxonomy().find_skills("Built services in Python3 and Node.js, deployed with K8s on AWS.")
        self.assertEqual(found["skill_python"], "python3")
        self.assertEqual(found["skill_nodejs"], "node.js")
        self.assertEqual(found["skill_kubernetes"], "k8s")
        self.assertIn("skill_aws", found)

    def test_longest_term_wins(self):
        found = LocalTaxonomy().find_skills("Shipped APIs on Spring Boot")
        self.assertEqual(found, {"skill_spring": "spring boot"})

    def test_terms_match_on_word_boundaries(self):
        found = LocalTaxonomy().find_skills("Javascript is not Java, and C++ is not C#.")
        self.assertIn("skill_javascript", found)
        self.assertIn("skill_java", found)
        self.assertIn("skill_cpp", found)
        self.assertIn("skill_csharp", found)
        self.assertEqual(LocalTaxonomy().find_skills("Pythonic idioms"), {})

    def test_custom_synonyms_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "synonyms.json"
            path.write_text(json.dumps({"Dbt": "skill_dbt"}), encoding="utf-8")
            taxonomy = LocalTaxonomy(path)
            self.assertEqual(taxonomy.normalize_skill("DBT"), ("dbt", "skill_dbt"))
            self.assertEqual(taxonomy.find_skills("Modelled data with dbt"), {"skill_dbt": "dbt"})

    def test_default_provider_is_shared(self):
        self.assertIs(get_default_taxonomy_provider(), get_default_taxonomy_provider())


if __name__ == "__main__":
    unittest.main()
