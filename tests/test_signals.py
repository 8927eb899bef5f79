import unittest

from fakes import complete_payload

from title_guide.intents import Intent, evaluate_form
from title_guide.models import (
    CoreInfo,
    CreditsInfo,
    FormSnapshot,
    IdentityInfo,
    MajorCreditCounts,
    MandatoryInfo,
    ProductionInfo,
)
from title_guide.signals import CONFIDENCE_WEIGHTS, compute_confidence, compute_signals, derive_next_action
from title_guide.snapshot import snapshot_from_dict
from title_guide.store import FormStore


class TestConfidence(unittest.TestCase):
    def test_weights_total_one_hundred(self):
        self.assertEqual(sum(w.weight for w in CONFIDENCE_WEIGHTS), 100)

    def test_empty_form_scores_zero(self):
        self.assertEqual(compute_confidence(FormSnapshot()), 0)

    def test_complete_form_scores_one_hundred(self):
        self.assertEqual(compute_confidence(snapshot_from_dict(complete_payload())), 100)

    def test_filling_fields_never_lowers_score(self):
        full = complete_payload()
        payload = {"core": {}, "mandatory": {}, "identity": {}, "production": {}, "credits": {}}
        previous = compute_confidence(snapshot_from_dict(payload))
        for section in ("core", "mandatory", "identity", "production", "credits"):
            for key, value in full[section].items():
                payload[section][key] = value
                score = compute_confidence(snapshot_from_dict(payload))
                self.assertGreaterEqual(score, previous, f"{section}.{key} lowered the score")
                self.assertLessEqual(score, 100)
                previous = score
        self.assertEqual(previous, 100)

    def test_two_credit_categories_do_not_count(self):
        payload = complete_payload()
        payload["credits"]["majorCredits"] = {"cast": 3, "writers": 1}
        self.assertEqual(compute_confidence(snapshot_from_dict(payload)), 90)


class TestSignals(unittest.TestCase):
    def test_lowercase_title_flags_capitalization(self):
        payload = complete_payload()
        payload["core"]["title"] = "the matrix"
        signals = compute_signals(snapshot_from_dict(payload))
        self.assertTrue(signals.title_lowercase)
        self.assertFalse(signals.title_missing)

    def test_digit_title_is_not_lowercase(self):
        payload = complete_payload()
        payload["core"]["title"] = "9 Lives"
        self.assertFalse(compute_signals(snapshot_from_dict(payload)).title_lowercase)

    def test_year_bounds(self):
        for year, invalid in ((None, True), (999, True), (1000, False), (2024, False), (9999, False), (10000, True)):
            payload = complete_payload()
            payload["core"]["year"] = year
            with self.subTest(year=year):
                self.assertEqual(compute_signals(snapshot_from_dict(payload)).year_invalid, invalid)

    def test_music_video_feature_length_mismatch(self):
        payload = complete_payload()
        payload["core"]["type"] = "musicVideo"
        self.assertTrue(compute_signals(snapshot_from_dict(payload)).type_subtype_mismatch)
        payload["core"]["subtype"] = "shortSubject"
        self.assertFalse(compute_signals(snapshot_from_dict(payload)).type_subtype_mismatch)

    def test_budget_without_currency_is_missing(self):
        payload = complete_payload()
        payload["production"]["budget"] = {"currency": "", "amount": 5000}
        self.assertTrue(compute_signals(snapshot_from_dict(payload)).budget_missing)

    def test_next_action_follows_priority(self):
        signals = compute_signals(FormSnapshot())
        self.assertEqual(derive_next_action(signals), "Enter a title for your submission")
        payload = complete_payload()
        payload["identity"]["languages"] = []
        payload["production"]["budget"] = {}
        signals = compute_signals(snapshot_from_dict(payload))
        self.assertEqual(derive_next_action(signals), "Add at least one language")

    def test_complete_form_has_no_next_action(self):
        signals = compute_signals(snapshot_from_dict(complete_payload()))
        self.assertEqual(derive_next_action(signals), "")
        self.assertFalse(any(signals.as_dict().values()))


class TestEvaluateForm(unittest.TestCase):
    def test_empty_form_blockers_in_scan_order(self):
        evaluation = evaluate_form(FormSnapshot())
        self.assertEqual(
            evaluation.blockers,
            (Intent.MISSING_EVIDENCE, Intent.MISSING_RELEASE_DATE, Intent.CREDITS_REQUIRED, Intent.YEAR_FORMAT),
        )
        self.assertEqual(evaluation.warnings, ())
        self.assertEqual(evaluation.suggestions, (Intent.NEXT_BEST_ACTION,))

    def test_accepts_raw_dictionaries(self):
        payload = complete_payload()
        payload["core"]["title"] = "the matrix"
        evaluation = evaluate_form(payload)
        self.assertEqual(evaluation.confidence, 100)
        self.assertEqual(evaluation.blockers, ())
        self.assertEqual(evaluation.warnings, (Intent.TITLE_CAPITALIZATION,))

    def test_garbage_payload_does_not_raise(self):
        evaluation = evaluate_form({"core": "nope", "mandatory": {"releaseDates": [1, None]}, "meta": None})
        self.assertEqual(evaluation.confidence, 0)
        self.assertIn(Intent.MISSING_RELEASE_DATE, evaluation.blockers)

    def test_evaluation_is_idempotent(self):
        snapshot = snapshot_from_dict(complete_payload())
        self.assertEqual(evaluate_form(snapshot), evaluate_form(snapshot))


class TestNoneFields(unittest.TestCase):
    def none_snapshot(self):
        return FormSnapshot(
            core=CoreInfo(title=None, type=None, status=None, contributor_role=None),
            mandatory=MandatoryInfo(release_dates=None, misc_links=None),
            identity=IdentityInfo(countries_of_origin=None, languages=None, genres=None, color_format=None),
            production=ProductionInfo(
                budget=None,
                official_sites=None,
                directors=None,
                distributors=None,
                production_companies=None,
            ),
            credits=CreditsInfo(major_credits=MajorCreditCounts(cast=None), recommended_info=None),
        )

    def test_none_title_reads_as_unset(self):
        evaluation = evaluate_form(FormSnapshot(core=CoreInfo(title=None)))
        self.assertEqual(evaluation.confidence, 0)
        self.assertEqual(evaluation.next_best_action, "Enter a title for your submission")

    def test_none_list_reads_as_empty(self):
        evaluation = evaluate_form(FormSnapshot(mandatory=MandatoryInfo(misc_links=None)))
        self.assertIn(Intent.MISSING_EVIDENCE, evaluation.blockers)

    def test_all_none_matches_empty_form(self):
        snapshot = self.none_snapshot()
        self.assertEqual(compute_confidence(snapshot), 0)
        self.assertEqual(compute_signals(snapshot), compute_signals(FormSnapshot()))
        self.assertEqual(evaluate_form(snapshot).blockers, evaluate_form(FormSnapshot()).blockers)

    def test_store_accepts_none_title(self):
        store = FormStore(snapshot_from_dict(complete_payload()))
        store.update_core(title=None)
        self.assertEqual(store.snapshot().meta.confidence_score, 88)


if __name__ == "__main__":
    unittest.main()
