"""Type definitions for the tab_practice project."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence, Tuple

# Tempo policy bounds, as multipliers of the score tempo
MIN_LOOP_TEMPO = 0.25
MAX_LOOP_TEMPO = 2.0
MIN_TEMPO_INCREMENT = 0.01
MAX_TEMPO_INCREMENT = 0.5
MIN_MAX_TEMPO = 0.5
MAX_MAX_TEMPO = 2.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class Bar:
    """A bar (measure) of the score as seen by the playback engine."""

    start_tick: int  # Tick at which the bar starts
    duration: int  # Length of the bar in ticks


@dataclass
class Score:
    """The loaded score: an ordered sequence of bars."""

    bars: List[Bar] = field(default_factory=list)

    @property
    def total_bars(self) -> int:
        return len(self.bars)


@dataclass(frozen=True)
class PlaybackRange:
    """A tick range handed to the player."""

    start_tick: int
    end_tick: int


@dataclass(frozen=True)
class BarRange:
    """A 1-based, inclusive range of bars selected for practice."""

    start_bar: int = 1
    end_bar: int = 4

    def normalized(self, total_bars: int) -> "BarRange":
        """Return a copy clamped into [1, total_bars] with end_bar >= start_bar.

        With an empty score only the lower bound and the ordering are enforced.
        """
        start = max(1, int(self.start_bar))
        end = int(self.end_bar)
        if total_bars > 0:
            start = min(start, total_bars)
            end = min(end, total_bars)
        return BarRange(start, max(start, end))


@dataclass
class TempoRampPolicy:
    """How the loop tempo is chosen and ramped between iterations."""

    loop_tempo: float = 1.0
    gradual_increase: bool = False
    increment: float = 0.05
    max_tempo: float = 1.0

    def next_tempo(self) -> float:
        """Tempo for the next loop iteration, never above max_tempo.

        A loop tempo already above max_tempo is pulled down to max_tempo, so
        the ramp only rises once the loop tempo starts at or below the cap.
        """
        return min(self.loop_tempo + self.increment, self.max_tempo)


class LoopState(Enum):
    """States of a practice session."""

    IDLE = "idle"
    ARMED = "armed"
    LOOPING = "looping"


@dataclass
class LoopSession:
    """Mutable state of the current practice session."""

    active: bool = False
    looping: bool = False
    loop_count: int = 0
    saved_tempo: Optional[float] = None  # Tempo to restore on deactivation
    count_in_enabled: bool = False

    @property
    def state(self) -> LoopState:
        if self.looping:
            return LoopState.LOOPING
        if self.active:
            return LoopState.ARMED
        return LoopState.IDLE


@dataclass(frozen=True)
class TabNote:
    """A note of an active beat: 1-based string (1 = lowest pitch) and fret."""

    string: int
    fret: int


@dataclass(frozen=True)
class ChordAnnotation:
    """A chord diagram written into the score by its author."""

    name: str
    first_fret: int = 0
    strings: Tuple[int, ...] = ()
    barre_frets: Tuple[int, ...] = ()


@dataclass
class Beat:
    """A group of notes currently sounding during playback."""

    notes: List[TabNote] = field(default_factory=list)
    chord: Optional[ChordAnnotation] = None


@dataclass(frozen=True)
class FretPosition:
    """Represents a sounding position on the fretboard."""

    string: int  # String number (1 = lowest pitch)
    fret: int  # Fret number (0 for open string)

    def __str__(self):
        return f"S{self.string}F{self.fret}"


@dataclass(frozen=True)
class ActiveChord:
    """The chord currently shown to the player."""

    name: str
    first_fret: int
    string_frets: Tuple[int, ...]  # -1 muted, 0 open, n fretted; index = string - 1
    barre_frets: FrozenSet[int] = frozenset()

    @classmethod
    def from_annotation(cls, annotation: ChordAnnotation) -> "ActiveChord":
        return cls(
            name=annotation.name,
            first_fret=annotation.first_fret,
            string_frets=tuple(annotation.strings or ()),
            barre_frets=frozenset(annotation.barre_frets or ()),
        )


# Sequence of open-string MIDI pitches; index 0 is string 1 (lowest pitch)
Tuning = Sequence[int]
