import unittest

from fakes import ScriptedRandom

from title_guide.chatbot import FALLBACK, FALLBACK_VARIANTS, INTENTS, IntentMatcher, match_intent, normalize
from title_guide.chatbot.knowledge_base import INTENTS_BY_NAME


class TestNormalize(unittest.TestCase):
    def test_strips_punctuation_and_apostrophes(self):
        self.assertEqual(normalize("  What's the   TITLE-format?! "), "whats the title format")
        self.assertEqual(normalize("Don’t"), "dont")

    def test_only_punctuation_is_empty(self):
        self.assertEqual(normalize(" ?!... "), "")


class TestIntentMatcher(unittest.TestCase):
    def setUp(self):
        self.matcher = IntentMatcher(rng=ScriptedRandom())

    def test_catalog_shape(self):
        self.assertEqual(len(INTENTS), len(INTENTS_BY_NAME))
        for entry in INTENTS:
            with self.subTest(intent=entry.intent):
                self.assertTrue(entry.triggers)
                self.assertGreaterEqual(len(entry.variants), 2)

    def test_hi_is_greeting(self):
        result = self.matcher.match("hi")
        self.assertEqual((result.intent, result.confidence), ("GREETING", 1.0))
        self.assertIn(result.answer, INTENTS_BY_NAME["GREETING"].variants)

    def test_greeting_phrase(self):
        self.assertEqual(self.matcher.match("Good morning!").intent, "GREETING")

    def test_question_with_hi_is_not_a_greeting(self):
        result = self.matcher.match("hi, how do I add a release date?")
        self.assertEqual(result.intent, "RELEASE_DATES")

    def test_thanks(self):
        self.assertEqual(self.matcher.match("Thank you").intent, "THANKS")
        self.assertEqual(self.matcher.match("ok thx!").intent, "THANKS")

    def test_valid_evidence_question(self):
        result = self.matcher.match("What counts as valid evidence?")
        self.assertEqual(result.intent, "WHAT_IS_EVIDENCE")
        self.assertAlmostEqual(result.confidence, 0.7)
        self.assertIn(result.answer, INTENTS_BY_NAME["WHAT_IS_EVIDENCE"].variants)

    def test_exact_trigger_dominates(self):
        result = self.matcher.match("title format")
        self.assertEqual(result.intent, "HOW_TO_WRITE_TITLE")
        self.assertEqual(result.confidence, 1.0)

    def test_below_threshold_falls_back(self):
        result = self.matcher.match("drama comedy")
        self.assertEqual((result.intent, result.confidence), (FALLBACK, 0.0))
        self.assertIn(result.answer, FALLBACK_VARIANTS)

    def test_threshold_reached_by_keywords(self):
        result = self.matcher.match("drama comedy horror")
        self.assertEqual(result.intent, "GENRES")
        self.assertAlmostEqual(result.confidence, 0.3)

    def test_unrelated_input_falls_back(self):
        self.assertEqual(self.matcher.match("banana bread recipe").intent, FALLBACK)

    def test_blank_input_falls_back(self):
        for text in ("", "   ", "?!"):
            with self.subTest(text=text):
                self.assertEqual(self.matcher.match(text).confidence, 0.0)

    def test_answers_do_not_repeat(self):
        first = self.matcher.match("what is evidence")
        second = self.matcher.match("what is evidence")
        self.assertNotEqual(first.answer, second.answer)

    def test_fallback_does_not_repeat(self):
        first = self.matcher.match("zzz")
        second = self.matcher.match("zzz")
        self.assertNotEqual(first.answer, second.answer)

    def test_reset_forgets_last_variant(self):
        first = self.matcher.match("what is evidence")
        self.matcher.reset()
        self.assertEqual(self.matcher.match("what is evidence").answer, first.answer)

    def test_ranked_scores(self):
        ranked = self.matcher.ranked("What counts as valid evidence?")
        self.assertEqual(ranked[0], ("WHAT_IS_EVIDENCE", 7))


class TestModuleMatcher(unittest.TestCase):
    def test_match_intent(self):
        self.assertEqual(match_intent("What is IMDb?").intent, "WHAT_IS_IMDB")


if __name__ == "__main__":
    unittest.main()
