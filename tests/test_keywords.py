import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from cv_analyzer.features import detect_industry, jaccard, keyword_overlap, tokenize, top_terms  # noqa: E402


class TokenizeTests(unittest.TestCase):
    def test_lowercases_and_drops_short_tokens_and_stopwords(self):
        tokens = tokenize("Python, SQL i AWS oraz Docker for the team")
        self.assertEqual(tokens, ["python", "sql", "aws", "docker"])

    def test_keeps_polish_letters_inside_tokens(self):
        self.assertEqual(tokenize("Zarządzanie łańcuchem dostaw"), ["zarządzanie", "łańcuchem", "dostaw"])

    def test_splits_on_punctuation_and_underscores(self):
        self.assertEqual(tokenize("node.js/react_native"), ["node", "react", "native"])


class TopTermsTests(unittest.TestCase):
    def test_orders_by_frequency_then_first_occurrence(self):
        text = "kotlin swift python swift python java python"
        self.assertEqual(top_terms(text, 10), ["python", "swift", "kotlin", "java"])

    def test_limit(self):
        self.assertEqual(top_terms("alpha beta gamma delta", 2), ["alpha", "beta"])

    def test_empty_text(self):
        self.assertEqual(top_terms("", 5), [])


class JaccardTests(unittest.TestCase):
    def test_symmetric(self):
        a = {"python", "sql", "docker"}
        b = {"python", "java"}
        self.assertEqual(jaccard(a, b), jaccard(b, a))
        self.assertAlmostEqual(jaccard(a, b), 0.25)

    def test_identity_is_one(self):
        a = {"python", "sql"}
        self.assertEqual(jaccard(a, a), 1.0)

    def test_disjoint_is_zero(self):
        self.assertEqual(jaccard({"python"}, {"excel"}), 0.0)

    def test_two_empty_sets_are_zero(self):
        self.assertEqual(jaccard(set(), set()), 0.0)

    def test_keyword_overlap_of_texts(self):
        cv = "Python Django PostgreSQL Docker"
        posting = "Szukamy programisty Python z Django i Kubernetes"
        overlap = keyword_overlap(cv, posting)
        self.assertGreater(overlap, 0.0)
        self.assertLess(overlap, 1.0)


class IndustryTests(unittest.TestCase):
    def test_first_category_in_priority_order_wins(self):
        text = "Poszukujemy specjalisty ds. marketingu, który zna Python i SEO."
        detection = detect_industry(text)
        self.assertEqual(detection.industry, "IT")
        self.assertEqual(detection.keyword, "python")

    def test_polish_keyword(self):
        detection = detect_industry("Praca w magazynie, spedycja międzynarodowa")
        self.assertEqual(detection.industry, "Logistyka")

    def test_no_match(self):
        detection = detect_industry("Zupełnie nic konkretnego")
        self.assertIsNone(detection.industry)
        self.assertIsNone(detection.keyword)


if __name__ == "__main__":
    unittest.main()
