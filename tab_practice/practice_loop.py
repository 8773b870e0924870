"""Practice loop controller: repeat a bar range, optionally speeding up each pass."""

from typing import Callable, Optional

from .core.events import EventEmitter, PracticeEventType, Subscription
from .core.interfaces import IPlayer, IScheduler
from .core.scheduler import DeferredScheduler
from .logger import get_logger
from .note_types import (
    BarRange,
    LoopSession,
    LoopState,
    MAX_LOOP_TEMPO,
    MAX_MAX_TEMPO,
    MAX_TEMPO_INCREMENT,
    MIN_LOOP_TEMPO,
    MIN_MAX_TEMPO,
    MIN_TEMPO_INCREMENT,
    PlaybackRange,
    Score,
    TempoRampPolicy,
    clamp,
)
from .ticks import get_tick_range

# Get logger for this module
logger = get_logger(__name__)

DEFAULT_START_DELAY = 0.05  # seconds between applying the range and pressing play
COUNT_IN_VOLUME = 1.0


class PracticeLoopController:
    """Drives a practice session on top of an external player.

    Idle -> armed (activate) -> looping (start_loop) -> idle (stop_loop/deactivate).
    Every handler runs on the thread that dispatches player events; the only
    deferred work is the play command issued start_delay after start_loop.
    """

    def __init__(
        self,
        player: IPlayer,
        score: Optional[Score] = None,
        scheduler: Optional[IScheduler] = None,
        policy: Optional[TempoRampPolicy] = None,
        bar_range: Optional[BarRange] = None,
        count_in: bool = False,
        start_delay: float = DEFAULT_START_DELAY,
    ) -> None:
        """Initialize the controller.

        Args:
            player: Playback engine to drive
            score: Currently loaded score, if any
            scheduler: Where the deferred play command is queued
            policy: Initial tempo policy
            bar_range: Initial bar selection
            count_in: Whether loops start with a count-in
            start_delay: Delay in seconds between applying the range and playing
        """
        self.player = player
        self.scheduler = scheduler if scheduler is not None else DeferredScheduler()
        self.score = score or Score()
        self.policy = TempoRampPolicy()
        self.session = LoopSession(count_in_enabled=count_in)
        self.bar_range = BarRange()
        self.start_delay = start_delay
        self.events = EventEmitter()

        self._finished_subscription: Optional[Subscription] = None
        # Tempo a fresh start_loop begins from; the ramp only moves policy.loop_tempo
        self._base_loop_tempo = self.policy.loop_tempo
        # Incremented on every start/stop so stale deferred plays can be detected
        self._generation = 0

        initial = policy or TempoRampPolicy()
        self.set_loop_tempo(initial.loop_tempo)
        self.set_gradual_increase(initial.gradual_increase)
        self.set_tempo_increment(initial.increment)
        self.set_max_tempo(initial.max_tempo)
        bar_range = bar_range or BarRange()
        self.set_range(bar_range.start_bar, bar_range.end_bar)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> LoopState:
        return self.session.state

    @property
    def total_bars(self) -> int:
        return self.score.total_bars

    @property
    def loop_tempo(self) -> float:
        return self.policy.loop_tempo

    @property
    def loop_count(self) -> int:
        return self.session.loop_count

    def get_tick_range(self) -> Optional[PlaybackRange]:
        """Tick range of the current bar selection against the current score."""
        return get_tick_range(self.score.bars, self.bar_range)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_score(self, score: Optional[Score]) -> None:
        """Replace the loaded score and re-clamp the bar selection to it."""
        self.score = score or Score()
        self.bar_range = self.bar_range.normalized(self.total_bars)
        logger.debug(
            "Score set: %d bars, range %d-%d",
            self.total_bars,
            self.bar_range.start_bar,
            self.bar_range.end_bar,
        )

    def set_range(self, start: int, end: int) -> BarRange:
        """Select bars start..end (1-based, inclusive); end is raised to start if lower."""
        self.bar_range = BarRange(start, end).normalized(self.total_bars)
        logger.debug(
            "Bar range set to %d-%d (requested %s-%s)",
            self.bar_range.start_bar,
            self.bar_range.end_bar,
            start,
            end,
        )
        return self.bar_range

    def set_loop_tempo(self, tempo: float) -> None:
        self.policy.loop_tempo = clamp(float(tempo), MIN_LOOP_TEMPO, MAX_LOOP_TEMPO)
        self._base_loop_tempo = self.policy.loop_tempo

    def set_gradual_increase(self, enabled: bool) -> None:
        self.policy.gradual_increase = bool(enabled)

    def set_tempo_increment(self, increment: float) -> None:
        self.policy.increment = clamp(
            float(increment), MIN_TEMPO_INCREMENT, MAX_TEMPO_INCREMENT
        )

    def set_max_tempo(self, max_tempo: float) -> None:
        self.policy.max_tempo = clamp(float(max_tempo), MIN_MAX_TEMPO, MAX_MAX_TEMPO)

    def toggle_count_in(self) -> bool:
        self.session.count_in_enabled = not self.session.count_in_enabled
        return self.session.count_in_enabled

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def activate(self) -> None:
        """Enter practice mode, remembering the tempo to restore afterwards."""
        if self.session.active:
            logger.debug("Practice mode already active")
            return

        self.session.saved_tempo = self.player.tempo
        self.session.active = True
        self._finished_subscription = self.player.events.on_player_finished(
            self._on_player_finished
        )
        logger.info("Practice mode activated (saved tempo %.2f)", self.session.saved_tempo)
        self._emit_state()

    def start_loop(self) -> bool:
        """Apply the bar range and start looping it.

        Returns:
            True if the loop was started, False if nothing changed
        """
        if not self.session.active:
            logger.warning("start_loop called while practice mode is not active")
            return False

        playback_range = self.get_tick_range()
        if playback_range is None:
            logger.debug("No playable tick range, loop not started")
            return False

        self.player.stop()
        self.player.set_playback_range(playback_range)
        self.player.set_looping(True)
        self.policy.loop_tempo = self._base_loop_tempo
        self.player.set_tempo(self.policy.loop_tempo)
        self.player.set_count_in_volume(
            COUNT_IN_VOLUME if self.session.count_in_enabled else 0.0
        )
        self.session.loop_count = 0
        self.session.looping = True

        self._generation += 1
        generation = self._generation
        # The player applies a range asynchronously, so play only after a short delay
        self.scheduler.call_later(self.start_delay, lambda: self._deferred_play(generation))

        logger.info(
            "Loop started: bars %d-%d, ticks %d-%d, tempo %.2f",
            self.bar_range.start_bar,
            self.bar_range.end_bar,
            playback_range.start_tick,
            playback_range.end_tick,
            self.policy.loop_tempo,
        )
        self._emit_state()
        return True

    def stop_loop(self) -> None:
        """Stop looping and leave practice mode."""
        self.deactivate()

    def deactivate(self) -> None:
        """Stop playback, clear the loop and restore the pre-session tempo."""
        if not self.session.active and not self.session.looping:
            logger.debug("Practice mode already idle")
            return

        self.player.stop()
        self.player.set_playback_range(None)
        self.player.set_looping(False)
        if self.session.saved_tempo is not None:
            self.player.set_tempo(self.session.saved_tempo)
        self.player.set_count_in_volume(0.0)

        if self._finished_subscription is not None:
            self._finished_subscription.close()
            self._finished_subscription = None

        restored = self.session.saved_tempo
        self._generation += 1
        self.session.looping = False
        self.session.active = False
        self.session.loop_count = 0
        self.session.saved_tempo = None

        logger.info("Practice mode deactivated (tempo restored to %s)", restored)
        self._emit_state()

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _deferred_play(self, generation: int) -> None:
        if not self.session.looping or generation != self._generation:
            logger.debug("Skipping deferred play for a stopped loop")
            return
        self.player.play_pause()

    def _on_player_finished(self) -> None:
        """Count a completed pass and ramp the tempo for the next one."""
        if not self.session.looping:
            return

        self.session.loop_count += 1
        if self.policy.gradual_increase:
            self.policy.loop_tempo = self.policy.next_tempo()
            self.player.set_tempo(self.policy.loop_tempo)

        logger.debug(
            "Loop %d completed, tempo now %.2f",
            self.session.loop_count,
            self.policy.loop_tempo,
        )
        self.events.emit(
            PracticeEventType.LOOP_COMPLETED,
            self.session.loop_count,
            self.policy.loop_tempo,
        )

    def _emit_state(self) -> None:
        self.events.emit(PracticeEventType.STATE_CHANGED, self.state)

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def on_state_changed(self, callback: Callable[[LoopState], None]) -> Subscription:
        return self.events.on(PracticeEventType.STATE_CHANGED, callback)

    def on_loop_completed(self, callback: Callable[[int, float], None]) -> Subscription:
        return self.events.on(PracticeEventType.LOOP_COMPLETED, callback)
