import unittest

from fakes import complete_payload

from title_guide.merge import MAX_TRANSCRIPT_CHARS, merge_parsed, validate_transcript
from title_guide.models import FormSnapshot
from title_guide.snapshot import snapshot_from_dict


def fixed_clock():
    return 1234


class TestValidateTranscript(unittest.TestCase):
    def test_strips_and_accepts(self):
        self.assertEqual(validate_transcript("  a short film  "), "a short film")

    def test_too_short(self):
        for value in ("hey", "    ", None, 42):
            with self.subTest(value=value):
                with self.assertRaisesRegex(ValueError, "too short"):
                    validate_transcript(value)

    def test_too_long(self):
        with self.assertRaisesRegex(ValueError, "max 5000"):
            validate_transcript("x" * (MAX_TRANSCRIPT_CHARS + 1))


class TestMergeParsed(unittest.TestCase):
    def test_fills_blank_core_fields(self):
        merged = merge_parsed(
            FormSnapshot(),
            {"core": {"title": "Night Train", "type": "film", "status": "bogus", "year": 2019}},
            clock=fixed_clock,
        )
        self.assertEqual(merged.core.title, "Night Train")
        self.assertEqual(merged.core.type, "film")
        self.assertEqual(merged.core.status, "")
        self.assertEqual(merged.core.year, 2019)

    def test_never_overwrites_user_values(self):
        snapshot = snapshot_from_dict(complete_payload())
        merged = merge_parsed(
            snapshot,
            {"core": {"title": "Other", "type": "videoGame", "year": 1990}},
            clock=fixed_clock,
        )
        self.assertEqual(merged.core, snapshot.core)

    def test_zero_year_is_ignored(self):
        self.assertIsNone(merge_parsed(FormSnapshot(), {"core": {"year": 0}}, clock=fixed_clock).core.year)

    def test_identity_lists_are_deduplicated(self):
        snapshot = snapshot_from_dict(complete_payload())
        merged = merge_parsed(
            snapshot,
            {"identity": {"languages": ["English", "French", "", 3], "genres": ["Drama", "Thriller"]}},
            clock=fixed_clock,
        )
        self.assertEqual(merged.identity.languages, ("English", "French"))
        self.assertEqual(merged.identity.genres, ("Action", "Sci-Fi", "Drama", "Thriller"))

    def test_release_dates_need_a_country(self):
        merged = merge_parsed(
            FormSnapshot(),
            {
                "mandatory": {
                    "releaseDates": [
                        {"country": "Japan", "month": "03", "year": "2024", "releaseType": "festival"},
                        {"month": "04"},
                        {"country": "Spain", "releaseType": "cinema"},
                    ]
                }
            },
            clock=fixed_clock,
        )
        rows = merged.mandatory.release_dates
        self.assertEqual([row.id for row in rows], ["voice-rd-1234-0", "voice-rd-1234-1"])
        self.assertEqual(rows[0].release_type, "festival")
        self.assertEqual(rows[1].release_type, "")

    def test_directors_default_role(self):
        merged = merge_parsed(
            FormSnapshot(),
            {"production": {"directors": [{"name": "Mia Park"}, {"role": "Director"}]}},
            clock=fixed_clock,
        )
        (director,) = merged.production.directors
        self.assertEqual((director.id, director.name, director.role), ("voice-dir-1234-0", "Mia Park", "Director"))

    def test_budget_and_directors_in_one_payload(self):
        merged = merge_parsed(
            FormSnapshot(),
            {
                "production": {
                    "budget": {"currency": "EUR", "amount": 250000},
                    "directors": [{"name": "Mia Park"}],
                }
            },
            clock=fixed_clock,
        )
        self.assertEqual(merged.production.budget.currency, "EUR")
        self.assertEqual(merged.production.budget.amount, 250000.0)
        self.assertEqual(len(merged.production.directors), 1)

    def test_budget_only_fills_when_unset(self):
        snapshot = snapshot_from_dict(complete_payload())
        merged = merge_parsed(snapshot, {"production": {"budget": {"currency": "EUR", "amount": 5}}}, clock=fixed_clock)
        self.assertEqual(merged.production.budget, snapshot.production.budget)

    def test_non_positive_budget_is_dropped(self):
        merged = merge_parsed(FormSnapshot(), {"production": {"budget": {"amount": -10}}}, clock=fixed_clock)
        self.assertIsNone(merged.production.budget.amount)

    def test_assumptions_are_recorded(self):
        merged = merge_parsed(
            FormSnapshot(),
            {},
            ["Assumed the status is released", "", None],
            clock=fixed_clock,
        )
        (assumption,) = merged.meta.assumptions
        self.assertEqual(assumption.id, "voice-a-1234-0")
        self.assertEqual(assumption.field, "voice")
        self.assertEqual(assumption.message, "Assumed the status is released")

    def test_garbage_leaves_snapshot_untouched(self):
        snapshot = snapshot_from_dict(complete_payload())
        for parsed in (None, "text", {"identity": "x", "production": [1], "mandatory": {"releaseDates": "x"}}):
            with self.subTest(parsed=parsed):
                self.assertEqual(merge_parsed(snapshot, parsed, clock=fixed_clock), snapshot)


if __name__ == "__main__":
    unittest.main()
