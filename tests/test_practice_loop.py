import unittest

from tab_practice.core.events import PlayerEventType
from tab_practice.core.scheduler import DeferredScheduler
from tab_practice.mock_player import MockPlayer
from tab_practice.note_types import Bar, BarRange, LoopState, PlaybackRange, Score, TempoRampPolicy
from tab_practice.practice_loop import PracticeLoopController


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make_score(count, ticks_per_bar=3840):
    return Score([Bar(i * ticks_per_bar, ticks_per_bar) for i in range(count)])


class PracticeLoopTestCase(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.scheduler = DeferredScheduler(clock=self.clock)
        self.player = MockPlayer(tempo=0.9)
        self.controller = PracticeLoopController(
            self.player, score=make_score(16), scheduler=self.scheduler
        )

    def run_deferred(self):
        self.clock.now += 1.0
        return self.scheduler.process_pending()


class TestActivation(PracticeLoopTestCase):
    def test_activate_captures_tempo(self):
        self.assertEqual(self.controller.state, LoopState.IDLE)
        self.controller.activate()
        self.assertEqual(self.controller.state, LoopState.ARMED)
        self.assertEqual(self.controller.session.saved_tempo, 0.9)

    def test_activate_twice_is_noop(self):
        self.controller.activate()
        self.player.set_tempo(1.5)
        self.controller.activate()
        self.assertEqual(self.controller.session.saved_tempo, 0.9)
        self.assertEqual(self.player.events.listener_count(PlayerEventType.PLAYER_FINISHED), 1)

    def test_deactivate_unsubscribes(self):
        self.controller.activate()
        self.controller.deactivate()
        self.assertEqual(self.controller.state, LoopState.IDLE)
        self.assertIsNone(self.controller.session.saved_tempo)
        self.assertEqual(self.player.events.listener_count(PlayerEventType.PLAYER_FINISHED), 0)

    def test_deactivate_when_idle_is_noop(self):
        self.controller.deactivate()
        self.assertEqual(self.player.calls, [])


class TestRange(PracticeLoopTestCase):
    def test_inverted_range_normalized(self):
        self.assertEqual(self.controller.set_range(5, 2), BarRange(5, 5))

    def test_range_clamped_to_score(self):
        self.controller.set_range(-3, 40)
        self.assertEqual(self.controller.bar_range, BarRange(1, 16))

    def test_end_never_below_start(self):
        for start, end in [(1, 1), (3, 1), (16, 2), (7, 9)]:
            bar_range = self.controller.set_range(start, end)
            self.assertGreaterEqual(bar_range.end_bar, bar_range.start_bar)

    def test_new_score_reclamps_range(self):
        self.controller.set_range(10, 14)
        self.controller.set_score(make_score(8))
        self.assertEqual(self.controller.bar_range, BarRange(8, 8))
        self.assertEqual(self.controller.get_tick_range(), PlaybackRange(7 * 3840, 8 * 3840))


class TestPolicySetters(PracticeLoopTestCase):
    def test_clamps(self):
        self.controller.set_loop_tempo(5)
        self.assertEqual(self.controller.policy.loop_tempo, 2.0)
        self.controller.set_loop_tempo(0.1)
        self.assertEqual(self.controller.policy.loop_tempo, 0.25)
        self.controller.set_tempo_increment(0)
        self.assertEqual(self.controller.policy.increment, 0.01)
        self.controller.set_tempo_increment(1)
        self.assertEqual(self.controller.policy.increment, 0.5)
        self.controller.set_max_tempo(0.1)
        self.assertEqual(self.controller.policy.max_tempo, 0.5)
        self.controller.set_max_tempo(3)
        self.assertEqual(self.controller.policy.max_tempo, 2.0)

    def test_toggle_count_in(self):
        self.assertTrue(self.controller.toggle_count_in())
        self.assertFalse(self.controller.toggle_count_in())

    def test_initial_policy_is_clamped(self):
        controller = PracticeLoopController(
            self.player, policy=TempoRampPolicy(loop_tempo=9, increment=0.0, max_tempo=0.0)
        )
        self.assertEqual(controller.policy.loop_tempo, 2.0)
        self.assertEqual(controller.policy.increment, 0.01)
        self.assertEqual(controller.policy.max_tempo, 0.5)


class TestStartLoop(PracticeLoopTestCase):
    def test_start_applies_range_then_plays_after_delay(self):
        self.controller.set_range(2, 3)
        self.controller.set_loop_tempo(0.75)
        self.controller.activate()
        self.assertTrue(self.controller.start_loop())

        self.assertEqual(self.controller.state, LoopState.LOOPING)
        self.assertEqual(self.player.playback_range, PlaybackRange(3840, 3 * 3840))
        self.assertTrue(self.player.looping)
        self.assertEqual(self.player.tempo, 0.75)
        self.assertEqual(self.player.count_in_volume, 0.0)
        self.assertEqual(
            self.player.call_names(),
            ["stop", "set_playback_range", "set_looping", "set_tempo", "set_count_in_volume"],
        )
        self.assertFalse(self.player.is_playing)

        self.assertEqual(self.run_deferred(), 1)
        self.assertTrue(self.player.is_playing)
        self.assertEqual(self.player.call_names()[-1], "play_pause")

    def test_play_not_issued_before_delay(self):
        self.controller.activate()
        self.controller.start_loop()
        self.clock.now += 0.01
        self.assertEqual(self.scheduler.process_pending(), 0)
        self.assertFalse(self.player.is_playing)

    def test_count_in_volume(self):
        self.controller.toggle_count_in()
        self.controller.activate()
        self.controller.start_loop()
        self.assertGreater(self.player.count_in_volume, 0)

    def test_start_without_bars_leaves_session_untouched(self):
        controller = PracticeLoopController(self.player, score=Score(), scheduler=self.scheduler)
        controller.activate()
        before = (
            controller.session.active,
            controller.session.looping,
            controller.session.loop_count,
            controller.session.saved_tempo,
        )
        calls_before = list(self.player.calls)
        self.assertFalse(controller.start_loop())
        after = (
            controller.session.active,
            controller.session.looping,
            controller.session.loop_count,
            controller.session.saved_tempo,
        )
        self.assertEqual(before, after)
        self.assertEqual(self.player.calls, calls_before)
        self.assertEqual(self.scheduler.pending_count(), 0)

    def test_start_requires_activation(self):
        self.assertFalse(self.controller.start_loop())
        self.assertEqual(self.player.calls, [])

    def test_stop_before_delay_cancels_play(self):
        self.controller.activate()
        self.controller.start_loop()
        self.controller.stop_loop()
        self.run_deferred()
        self.assertFalse(self.player.is_playing)
        self.assertNotIn("play_pause", self.player.call_names())

    def test_restart_before_delay_plays_once(self):
        self.controller.activate()
        self.controller.start_loop()
        self.controller.start_loop()
        self.run_deferred()
        self.assertEqual(self.player.call_names().count("play_pause"), 1)
        self.assertTrue(self.player.is_playing)


class TestLoopIterations(PracticeLoopTestCase):
    def start(self, **policy):
        self.controller.set_loop_tempo(policy.get("loop_tempo", 0.7))
        self.controller.set_gradual_increase(policy.get("gradual", True))
        self.controller.set_tempo_increment(policy.get("increment", 0.1))
        self.controller.set_max_tempo(policy.get("max_tempo", 1.0))
        self.controller.activate()
        self.controller.start_loop()
        self.run_deferred()

    def test_loop_count_increments(self):
        self.start(gradual=False)
        for _ in range(3):
            self.player.finish_pass()
        self.assertEqual(self.controller.loop_count, 3)
        self.assertEqual(self.player.tempo, 0.7)

    def test_ramp_is_monotonic_and_bounded(self):
        self.start(loop_tempo=0.7, increment=0.1, max_tempo=1.0)
        tempos = [self.player.tempo]
        for _ in range(8):
            self.player.finish_pass()
            tempos.append(self.player.tempo)
        self.assertEqual(tempos, sorted(tempos))
        self.assertLessEqual(max(tempos), 1.0)
        self.assertAlmostEqual(tempos[1], 0.8)
        self.assertEqual(tempos[-1], 1.0)
        self.assertEqual(self.controller.loop_tempo, 1.0)

    def test_ramp_pulls_tempo_above_cap_down_to_cap(self):
        self.start(loop_tempo=1.5, increment=0.1, max_tempo=1.0)
        tempos = [self.player.tempo]
        for _ in range(2):
            self.player.finish_pass()
            tempos.append(self.player.tempo)
        self.assertEqual(tempos, [1.5, 1.0, 1.0])
        self.assertEqual(self.controller.loop_tempo, 1.0)

    def test_next_tempo_is_capped(self):
        self.assertEqual(TempoRampPolicy(loop_tempo=1.5, max_tempo=1.0).next_tempo(), 1.0)
        self.assertAlmostEqual(
            TempoRampPolicy(loop_tempo=0.9, increment=0.05, max_tempo=1.0).next_tempo(), 0.95
        )

    def test_fresh_start_resets_ramp(self):
        self.start(loop_tempo=0.6, increment=0.2, max_tempo=1.5)
        self.player.finish_pass()
        self.player.finish_pass()
        self.assertAlmostEqual(self.player.tempo, 1.0)
        self.controller.start_loop()
        self.assertEqual(self.player.tempo, 0.6)
        self.assertEqual(self.controller.loop_count, 0)

    def test_finish_while_armed_is_ignored(self):
        self.controller.activate()
        self.player.finish_pass()
        self.assertEqual(self.controller.loop_count, 0)

    def test_finish_after_deactivate_is_ignored(self):
        self.start()
        self.controller.deactivate()
        self.player.finish_pass()
        self.assertEqual(self.controller.loop_count, 0)
        self.assertEqual(self.player.tempo, 0.9)

    def test_deactivate_restores_saved_tempo_after_ramp(self):
        self.start(loop_tempo=0.5, increment=0.25, max_tempo=2.0)
        for _ in range(5):
            self.player.finish_pass()
        self.controller.deactivate()
        self.assertEqual(self.player.tempo, 0.9)
        self.assertIsNone(self.player.playback_range)
        self.assertFalse(self.player.looping)
        self.assertEqual(self.player.count_in_volume, 0.0)
        self.assertFalse(self.player.is_playing)
        self.assertEqual(self.controller.loop_count, 0)

    def test_loop_completed_event(self):
        completed = []
        self.controller.on_loop_completed(lambda count, tempo: completed.append((count, tempo)))
        self.start(loop_tempo=1.0, increment=0.05, max_tempo=1.05)
        self.player.finish_pass()
        self.player.finish_pass()
        self.assertEqual([c for c, _ in completed], [1, 2])
        self.assertEqual(completed[-1][1], 1.05)

    def test_state_changed_events(self):
        states = []
        self.controller.on_state_changed(states.append)
        self.start()
        self.controller.stop_loop()
        self.assertEqual(states, [LoopState.ARMED, LoopState.LOOPING, LoopState.IDLE])


if __name__ == "__main__":
    unittest.main()
