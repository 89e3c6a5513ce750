import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobfillr.catalog import LocalCatalog  # noqa: E402
from jobfillr.core.errors import InvalidInput  # noqa: E402
from jobfillr.matching import QuestionMatcher, is_type_compatible  # noqa: E402
from jobfillr.matching.similarity import dice_similarity  # noqa: E402
from jobfillr.schemas import Confidence, MatchContext, ObservedQuestion, parse_template  # noqa: E402

TEMPLATES = [
    {
        "id": 1,
        "category": "personal.email",
        "question": "What is your email address?",
        "question_type": "text",
        "aliases": ["Email"],
    },
    {
        "id": 2,
        "category": "personal.phone",
        "question": "What is your phone number?",
        "question_type": "text",
    },
    {
        "id": 3,
        "category": "personal.fullName",
        "question": "What is your full name?",
        "question_type": "text",
        "aliases": ["Name"],
    },
    {
        "id": 30,
        "category": "experience.currentEmployer",
        "question": "Who is your current employer?",
        "question_type": "text",
        "aliases": ["Current employer"],
    },
    {
        "id": 10,
        "category": "preferences.availability",
        "question": "When are you available to start?",
        "question_type": "date",
        "aliases": ["Start date"],
    },
    {
        "id": 11,
        "category": "experience.currentStartDate",
        "question": "When did you start your current role?",
        "question_type": "date",
        "aliases": ["Start date"],
    },
    {
        "id": 20,
        "category": "eligibility.age",
        "question": "Are you at least 18 years of age?",
        "question_type": "boolean",
    },
    {
        "id": 21,
        "category": "essay.motivation",
        "question": "Why do you want to work here?",
        "question_type": "textarea",
    },
]


def build_matcher(**kwargs) -> QuestionMatcher:
    catalog = LocalCatalog(parse_template(payload) for payload in TEMPLATES)
    return QuestionMatcher(catalog, **kwargs)


class ExactMatchTests(unittest.TestCase):
    def setUp(self):
        self.matcher = build_matcher()

    def test_label_matches_canonical_question(self):
        result = self.matcher.match(ObservedQuestion(text="Email Address"))
        self.assertEqual(result.template_id, 1)
        self.assertEqual(result.confidence, Confidence.EXACT)
        self.assertEqual(result.score, 1.0)

    def test_label_matches_alias(self):
        result = self.matcher.match(ObservedQuestion(text="Email:"))
        self.assertEqual(result.template_id, 1)
        self.assertEqual(result.confidence, Confidence.EXACT)

    def test_tie_without_context_prefers_lowest_id(self):
        result = self.matcher.match(ObservedQuestion(text="Start date *"))
        self.assertEqual(result.template_id, 10)

    def test_tie_prefers_most_recent_category(self):
        observed = ObservedQuestion(text="Start date")
        newest_experience = MatchContext(
            recent_categories=("preferences.availability", "experience.currentStartDate")
        )
        newest_preferences = MatchContext(
            recent_categories=("experience.currentStartDate", "preferences.availability")
        )
        self.assertEqual(self.matcher.match(observed, newest_experience).template_id, 11)
        self.assertEqual(self.matcher.match(observed, newest_preferences).template_id, 10)

    def test_tie_falls_back_to_category_group(self):
        context = MatchContext(recent_categories=("experience.currentTitle",))
        result = self.matcher.match(ObservedQuestion(text="Start date"), context)
        self.assertEqual(result.template_id, 11)

    def test_field_context_is_tried_when_label_fails(self):
        observed = ObservedQuestion(text="Field 12", field_context="Phone number")
        result = self.matcher.match(observed)
        self.assertEqual(result.template_id, 2)
        self.assertEqual(result.confidence, Confidence.FUZZY)

    def test_field_context_alone_is_never_exact(self):
        result = self.matcher.match(ObservedQuestion(text="Field 7", field_context="Email"))
        self.assertEqual(result.template_id, 1)
        self.assertEqual(result.confidence, Confidence.FUZZY)

    def test_label_match_beats_generic_placeholder(self):
        label_only = self.matcher.match(ObservedQuestion(text="Current employer name"))
        with_placeholder = self.matcher.match(
            ObservedQuestion(text="Current employer name", field_context="Name")
        )
        self.assertEqual(label_only.template_id, 30)
        self.assertEqual(with_placeholder.template_id, 30)
        self.assertEqual(with_placeholder.confidence, Confidence.FUZZY)
        self.assertAlmostEqual(with_placeholder.score, 0.8)

    def test_type_hint_filters_exact_matches(self):
        text = "Why do you want to work here?"
        self.assertEqual(self.matcher.match(ObservedQuestion(text=text)).template_id, 21)
        hinted = self.matcher.match(ObservedQuestion(text=text, question_type="boolean"))
        self.assertFalse(hinted.matched)
        self.assertEqual(hinted.confidence, Confidence.UNRESOLVED)


class FuzzyMatchTests(unittest.TestCase):
    def setUp(self):
        self.matcher = build_matcher()

    def test_close_label_is_fuzzy(self):
        result = self.matcher.match(ObservedQuestion(text="Email address for contact"))
        self.assertEqual(result.template_id, 1)
        self.assertEqual(result.confidence, Confidence.FUZZY)
        self.assertAlmostEqual(result.score, 0.8)

    def test_weak_overlap_is_unresolved(self):
        result = self.matcher.match(ObservedQuestion(text="Preferred email client"))
        self.assertIsNone(result.template)
        self.assertEqual(result.confidence, Confidence.UNRESOLVED)

    def test_threshold_is_exclusive(self):
        matcher = build_matcher(threshold=0.8)
        result = matcher.match(ObservedQuestion(text="Email address for contact"))
        self.assertFalse(result.matched)

    def test_lower_threshold_accepts_more(self):
        matcher = build_matcher(threshold=0.4)
        result = matcher.match(ObservedQuestion(text="Preferred email client"))
        self.assertEqual(result.template_id, 1)
        self.assertEqual(result.confidence, Confidence.FUZZY)

    def test_unrelated_tokens_never_raise_the_score(self):
        template = parse_template(TEMPLATES[0])
        previous = self.matcher.score("email address", template)
        for suffix in ("zebra", "zebra quokka", "zebra quokka telescope"):
            current = self.matcher.score(f"email address {suffix}", template)
            self.assertLessEqual(current, previous)
            previous = current

    def test_similarity_is_symmetric_and_bounded(self):
        pairs = [
            (frozenset({"email", "address"}), frozenset({"email"})),
            (frozenset({"phone"}), frozenset({"phone", "number", "mobil"})),
            (frozenset(), frozenset({"email"})),
        ]
        for left, right in pairs:
            self.assertEqual(dice_similarity(left, right), dice_similarity(right, left))
            self.assertGreaterEqual(dice_similarity(left, right), 0.0)
            self.assertLessEqual(dice_similarity(left, right), 1.0)


class MatcherContractTests(unittest.TestCase):
    def test_identical_inputs_give_identical_results(self):
        observed = ObservedQuestion(text="Email address for contact")
        first = build_matcher().match(observed)
        second = build_matcher().match(observed)
        self.assertEqual(first, second)

    def test_empty_text_is_invalid(self):
        matcher = build_matcher()
        for text in ("", "   ", "\n\t"):
            with self.assertRaises(InvalidInput):
                matcher.match(ObservedQuestion(text=text))

    def test_punctuation_only_label_is_unresolved(self):
        result = build_matcher().match(ObservedQuestion(text="*** ?"))
        self.assertFalse(result.matched)

    def test_threshold_must_be_a_fraction(self):
        with self.assertRaises(ValueError):
            build_matcher(threshold=1.5)

    def test_type_compatibility_table(self):
        self.assertTrue(is_type_compatible(None, "textarea"))
        self.assertFalse(is_type_compatible("boolean", "textarea"))
        self.assertTrue(is_type_compatible("date", "text"))
        self.assertTrue(is_type_compatible("checkbox", "boolean"))
        self.assertFalse(is_type_compatible("number", "checkbox"))


if __name__ == "__main__":
    unittest.main()
