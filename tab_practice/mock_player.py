"""A player stand-in for unit tests and the simulator. Allows manual triggering of player events."""

from typing import List, Optional, Sequence, Tuple, Any

from .core.events import PlayerEvents
from .core.interfaces import IPlayer
from .logger import get_logger
from .note_types import Beat, PlaybackRange

logger = get_logger(__name__)


class MockPlayer(IPlayer):
    """Records every command and lets tests fire player events by hand."""

    def __init__(self, tempo: float = 1.0):
        self.events = PlayerEvents()
        self._tempo = tempo
        self.playback_range: Optional[PlaybackRange] = None
        self.looping = False
        self.count_in_volume = 0.0
        self.is_playing = False
        self.calls: List[Tuple[str, Any]] = []

    @property
    def tempo(self) -> float:
        return self._tempo

    def _record(self, name: str, value: Any = None) -> None:
        self.calls.append((name, value))
        logger.debug(f"{name}({value!r})")

    def set_tempo(self, tempo: float) -> None:
        self._tempo = tempo
        self._record("set_tempo", tempo)

    def set_playback_range(self, playback_range: Optional[PlaybackRange]) -> None:
        self.playback_range = playback_range
        self._record("set_playback_range", playback_range)

    def set_looping(self, looping: bool) -> None:
        self.looping = looping
        self._record("set_looping", looping)

    def set_count_in_volume(self, volume: float) -> None:
        self.count_in_volume = volume
        self._record("set_count_in_volume", volume)

    def play_pause(self) -> None:
        self.is_playing = not self.is_playing
        self._record("play_pause")

    def stop(self) -> None:
        self.is_playing = False
        self._record("stop")

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def finish_pass(self) -> None:
        """Simulate the player reaching the end of the playback range."""
        self.events.emit_player_finished()

    def sound(self, beats: Sequence[Beat]) -> None:
        """Simulate the set of sounding beats changing."""
        self.events.emit_active_beats_changed(beats)
