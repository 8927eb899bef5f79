import unittest

from fakes import complete_payload

from title_guide.autofix import (
    AUTOFIXES,
    AddAssumption,
    UpdateCore,
    apply_autofix,
    get_autofix,
    to_title_case,
)
from title_guide.intents import Intent, evaluate_form
from title_guide.models import UNKNOWN_YEAR, FormSnapshot
from title_guide.snapshot import snapshot_from_dict
from title_guide.store import FormStore


class TestRegistry(unittest.TestCase):
    def test_registered_fixes(self):
        self.assertEqual(
            set(AUTOFIXES),
            {Intent.TITLE_CAPITALIZATION, Intent.YEAR_FORMAT, Intent.MISSING_RELEASE_DATE, Intent.MISSING_EVIDENCE},
        )
        fix = get_autofix("MISSING_EVIDENCE")
        self.assertEqual((fix.label, fix.fix_id, fix.target_step), ("Add evidence link", "fix-add-evidence", 1))

    def test_unknown_key_returns_none(self):
        self.assertIsNone(get_autofix("NOT_AN_INTENT"))
        self.assertIsNone(get_autofix(Intent.ALMOST_READY))

    def test_title_case(self):
        self.assertEqual(to_title_case("the last horizon"), "The Last Horizon")
        self.assertEqual(to_title_case("mission: impossible"), "Mission: Impossible")


class TestApplyAutofix(unittest.TestCase):
    def test_capitalize_title(self):
        payload = complete_payload()
        payload["core"]["title"] = "the last horizon"
        store = FormStore(snapshot_from_dict(payload))
        outcome = apply_autofix(get_autofix(Intent.TITLE_CAPITALIZATION), store.snapshot(), store)
        self.assertEqual(outcome.status, "executed")
        self.assertEqual(store.snapshot().core.title, "The Last Horizon")
        self.assertNotIn(Intent.TITLE_CAPITALIZATION, evaluate_form(store.snapshot()).warnings)

    def test_unknown_year_adds_assumption(self):
        store = FormStore()
        action = get_autofix(Intent.YEAR_FORMAT)
        commands = action.plan(store.snapshot(), now_ms=42)
        self.assertEqual(commands[0], UpdateCore({"year": UNKNOWN_YEAR}))
        self.assertIsInstance(commands[1], AddAssumption)
        apply_autofix(action, store.snapshot(), store, now_ms=42)
        snapshot = store.snapshot()
        self.assertEqual(snapshot.core.year, UNKNOWN_YEAR)
        self.assertEqual(snapshot.meta.assumptions[0].id, "autofix-year-42")
        self.assertEqual(snapshot.meta.assumptions[0].value, "????")
        self.assertNotIn(Intent.YEAR_FORMAT, evaluate_form(snapshot).blockers)

    def test_add_rows_clear_blockers(self):
        store = FormStore(FormSnapshot())
        apply_autofix(get_autofix(Intent.MISSING_RELEASE_DATE), store.snapshot(), store, now_ms=7)
        apply_autofix(get_autofix(Intent.MISSING_EVIDENCE), store.snapshot(), store, now_ms=8)
        snapshot = store.snapshot()
        self.assertEqual(snapshot.mandatory.release_dates[0].id, "autofix-rd-7")
        self.assertEqual(snapshot.mandatory.misc_links[0].id, "autofix-ml-8")
        blockers = evaluate_form(snapshot).blockers
        self.assertNotIn(Intent.MISSING_RELEASE_DATE, blockers)
        self.assertNotIn(Intent.MISSING_EVIDENCE, blockers)


class TestFormStore(unittest.TestCase):
    def test_mutations_recompute_confidence_and_notify(self):
        store = FormStore()
        seen = []
        store.subscribe(seen.append)
        store.update_core(title="Dune", type="film")
        self.assertEqual(store.snapshot().meta.confidence_score, 20)
        self.assertEqual(len(seen), 1)
        self.assertIs(seen[0], store.snapshot())

    def test_noop_update_is_silent(self):
        store = FormStore()
        seen = []
        store.subscribe(seen.append)
        store.update_core(title="")
        self.assertEqual(seen, [])

    def test_reloading_unchanged_payload_is_silent(self):
        payload = complete_payload()
        for row in payload["mandatory"]["releaseDates"] + payload["production"]["directors"]:
            del row["id"]
        store = FormStore(snapshot_from_dict(payload))
        seen = []
        store.subscribe(seen.append)
        store.replace(snapshot_from_dict(payload))
        self.assertEqual(seen, [])


if __name__ == "__main__":
    unittest.main()
