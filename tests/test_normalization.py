import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobfillr.matching.normalize import NormalizationRules, normalize_question  # noqa: E402

SAMPLES = [
    "What is your email address?",
    "Email Address *",
    "  PLEASE enter your   first name (required) ",
    "What's your phone #?",
    "Programming languages: C++, C#, Python",
    "your",
    "What is your",
    "Enter the",
    "Are you legally authorized to work in the US?",
    "Ünïcödé – label",
    "snake_case_label",
    "",
]


class NormalizationTests(unittest.TestCase):
    def test_strips_prompt_stems_and_punctuation(self):
        self.assertEqual(normalize_question("What is your email address?"), "email address")
        self.assertEqual(normalize_question("Email Address"), "email address")
        self.assertEqual(normalize_question("Please enter your first name (required)"), "first name")

    def test_apostrophes_are_removed_not_spaced(self):
        self.assertEqual(normalize_question("What's your phone number?"), "phone number")
        self.assertEqual(normalize_question("Manager's decision"), "managers decision")

    def test_plus_and_hash_survive(self):
        self.assertEqual(normalize_question("C++ / C# experience"), "c++ c# experience")

    def test_stem_only_label_keeps_its_last_word(self):
        self.assertEqual(normalize_question("What is your"), "your")
        self.assertEqual(normalize_question("Your"), "your")

    def test_idempotent(self):
        for sample in SAMPLES:
            once = normalize_question(sample)
            self.assertEqual(normalize_question(once), once, sample)

    def test_custom_rules(self):
        rules = NormalizationRules(boilerplate_tokens=frozenset({"bitte"}), prompt_stems=("ihre",))
        self.assertEqual(normalize_question("Bitte Ihre E-Mail", rules), "e mail")


if __name__ == "__main__":
    unittest.main()
