import unittest

from fakes import ManualScheduler

from title_guide.intents import Intent
from title_guide.memory import COOLDOWNS_MS, MAX_FRUSTRATION, AssistantMemory


class TestAssistantMemory(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.memory = AssistantMemory(clock=self.scheduler.clock)
        self.notifications = []
        self.memory.subscribe(lambda memory: self.notifications.append(memory.snapshot()))

    def test_record_intent_sets_cooldown_from_table(self):
        self.memory.record_intent(Intent.CREDITS_REQUIRED, "CREDITS_REQUIRED-2")
        self.assertEqual(self.memory.cooldown_expiry(Intent.CREDITS_REQUIRED), self.scheduler.now_ms + 25_000)
        self.assertTrue(self.memory.is_on_cooldown(Intent.CREDITS_REQUIRED))
        self.assertEqual(self.memory.last_message_id, "CREDITS_REQUIRED-2")
        self.assertEqual(self.memory.last_intent, Intent.CREDITS_REQUIRED)
        self.scheduler.advance(24_999)
        self.assertTrue(self.memory.is_on_cooldown(Intent.CREDITS_REQUIRED))
        self.scheduler.advance(1)
        self.assertFalse(self.memory.is_on_cooldown(Intent.CREDITS_REQUIRED))

    def test_every_intent_has_a_cooldown(self):
        self.assertEqual(set(COOLDOWNS_MS), set(Intent))

    def test_record_intent_resets_idle(self):
        self.scheduler.advance(30_000)
        self.memory.record_intent(Intent.IDLE_NUDGE, "IDLE_NUDGE-1")
        self.assertEqual(self.memory.idle_since, self.scheduler.now_ms)

    def test_fix_decrements_frustration_to_zero(self):
        self.memory.bump_frustration()
        self.memory.record_fix("fix-title-cap")
        self.memory.record_fix("fix-unknown-year")
        self.assertEqual(self.memory.frustration_score, 0)
        self.assertEqual(self.memory.recent_fixes, ("fix-title-cap", "fix-unknown-year"))

    def test_frustration_is_clamped(self):
        for _ in range(MAX_FRUSTRATION + 3):
            self.memory.bump_frustration()
        self.assertEqual(self.memory.frustration_score, MAX_FRUSTRATION)
        self.assertEqual(len(self.notifications), MAX_FRUSTRATION)

    def test_tick_only_notifies_on_change(self):
        self.memory.tick(40)
        self.memory.tick(40)
        self.memory.tick(40)
        self.assertEqual(len(self.notifications), 1)
        self.assertEqual(self.memory.prev_confidence, 40)
        self.memory.tick(55)
        self.assertEqual(len(self.notifications), 2)

    def test_clear_fixes_without_fixes_is_silent(self):
        self.memory.clear_fixes()
        self.assertEqual(self.notifications, [])
        self.memory.record_fix("fix-add-evidence")
        self.memory.clear_fixes()
        self.assertEqual(self.memory.recent_fixes, ())
        self.assertEqual(len(self.notifications), 2)

    def test_snapshot_is_frozen_copy(self):
        self.memory.record_intent(Intent.SUCCESS_ACK, "SUCCESS_ACK-0")
        snap = self.memory.snapshot()
        self.memory.record_fix("fix-title-cap")
        self.assertEqual(snap.recent_fixes, ())
        self.assertTrue(snap.is_on_cooldown(Intent.SUCCESS_ACK))
        self.assertFalse(snap.is_on_cooldown(Intent.ALMOST_READY))

    def test_unsubscribe(self):
        calls = []
        unsubscribe = self.memory.subscribe(calls.append)
        unsubscribe()
        self.memory.bump_frustration()
        self.assertEqual(calls, [])

    def test_reset_clears_everything(self):
        self.memory.record_intent(Intent.MISSING_EVIDENCE, "MISSING_EVIDENCE-1")
        self.memory.record_fix("fix-add-evidence")
        self.memory.bump_frustration()
        self.memory.tick(70)
        self.memory.reset()
        self.assertFalse(self.memory.is_on_cooldown(Intent.MISSING_EVIDENCE))
        self.assertEqual(self.memory.recent_fixes, ())
        self.assertEqual(self.memory.frustration_score, 0)
        self.assertEqual(self.memory.prev_confidence, 0)
        self.assertEqual(self.memory.last_message_id, "")

    def test_reset_idle(self):
        self.scheduler.advance(12_000)
        self.memory.reset_idle()
        self.assertEqual(self.memory.idle_since, self.scheduler.now_ms)
        self.assertEqual(self.notifications[-1].idle_since, self.scheduler.now_ms)


class TestCooldownMonotonic(unittest.TestCase):
    def test_expiry_never_moves_backwards(self):
        now = [1_000_000]
        memory = AssistantMemory(clock=lambda: now[0])
        memory.record_intent(Intent.IDLE_NUDGE, "IDLE_NUDGE-0")
        first = memory.cooldown_expiry(Intent.IDLE_NUDGE)
        now[0] -= 5_000
        memory.record_intent(Intent.IDLE_NUDGE, "IDLE_NUDGE-1")
        self.assertEqual(memory.cooldown_expiry(Intent.IDLE_NUDGE), first)


if __name__ == "__main__":
    unittest.main()
