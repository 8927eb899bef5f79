import unittest

from fakes import complete_payload

from title_guide.models import FormSnapshot
from title_guide.snapshot import snapshot_from_dict
from title_guide.utils import choice_field, field_value, text_field


class TestSnapshotFromDict(unittest.TestCase):
    def test_complete_payload(self):
        snapshot = snapshot_from_dict(complete_payload())
        self.assertEqual(snapshot.core.title, "The Last Horizon")
        self.assertTrue(snapshot.core.title_checked)
        self.assertEqual(snapshot.core.year, 2026)
        self.assertEqual(snapshot.mandatory.release_dates[0].release_type, "theatrical")
        self.assertEqual(snapshot.identity.countries_of_origin, ("United States", "United Kingdom"))
        self.assertEqual(snapshot.production.budget.amount, 45_000_000.0)
        self.assertEqual(snapshot.production.directors[0].name, "Ava Chen")
        self.assertEqual(snapshot.credits.major_credits.filled_count(), 6)
        self.assertTrue(snapshot.credits.recommended_info.any_filled())

    def test_snake_case_keys(self):
        snapshot = snapshot_from_dict(
            {
                "core": {"title": "Dusk", "title_checked": True, "contributor_role": "publicist"},
                "identity": {"countries_of_origin": ["France"]},
                "credits": {"major_credits": {"self": 2}},
            }
        )
        self.assertTrue(snapshot.core.title_checked)
        self.assertEqual(snapshot.core.contributor_role, "publicist")
        self.assertEqual(snapshot.identity.countries_of_origin, ("France",))
        self.assertEqual(snapshot.credits.major_credits.self_credits, 2)

    def test_unknown_enum_values_become_unset(self):
        snapshot = snapshot_from_dict({"core": {"type": "feature", "status": "RELEASED"}})
        self.assertEqual(snapshot.core.type, "")
        self.assertEqual(snapshot.core.status, "")

    def test_year_coercion(self):
        self.assertEqual(snapshot_from_dict({"core": {"year": "1999"}}).core.year, 1999)
        self.assertEqual(snapshot_from_dict({"core": {"year": 2001.0}}).core.year, 2001)
        self.assertIsNone(snapshot_from_dict({"core": {"year": True}}).core.year)
        self.assertIsNone(snapshot_from_dict({"core": {"year": "soon"}}).core.year)

    def test_missing_budget_defaults_to_usd(self):
        budget = snapshot_from_dict({}).production.budget
        self.assertEqual(budget.currency, "USD")
        self.assertIsNone(budget.amount)

    def test_rows_without_id_get_positional_ids(self):
        payload = {"mandatory": {"miscLinks": ["junk", {"url": "https://a.example"}, {"id": "ml-7"}, {"url": "b"}]}}
        snapshot = snapshot_from_dict(payload)
        self.assertEqual([link.id for link in snapshot.mandatory.misc_links], ["ml_0", "ml-7", "ml_2"])

    def test_reloading_same_payload_is_equal(self):
        payload = complete_payload()
        del payload["mandatory"]["releaseDates"][0]["id"]
        payload["meta"]["assumptions"] = [{"field": "year", "message": "Assumed"}]
        self.assertEqual(snapshot_from_dict(payload), snapshot_from_dict(payload))

    def test_garbage_input_is_an_empty_form(self):
        for payload in (None, [], "text", {"core": "nope", "credits": {"majorCredits": {"cast": -3}}}):
            with self.subTest(payload=payload):
                self.assertEqual(snapshot_from_dict(payload), FormSnapshot())

    def test_step_slice(self):
        snapshot = snapshot_from_dict(complete_payload())
        self.assertIs(snapshot.step_slice(2), snapshot.identity)
        self.assertIs(snapshot.step_slice(9), snapshot.core)


class TestFieldHelpers(unittest.TestCase):
    def test_first_present_key_wins(self):
        self.assertEqual(field_value({"b": 2, "a": 1}, "a", "b"), 1)
        self.assertIsNone(field_value(["a"], "a"))

    def test_text_and_choice(self):
        self.assertEqual(text_field({"title": 3}, "title"), "")
        self.assertEqual(choice_field({"type": "film"}, ("film",), "type"), "film")
        self.assertEqual(choice_field({"type": "show"}, ("film",), "type"), "")


if __name__ == "__main__":
    unittest.main()
