"""Live inference of fret positions and chord names during playback."""

from typing import Callable, List, Optional, Sequence

from .chords import classify_chord
from .core.events import EventEmitter, InferenceEventType, Subscription
from .core.interfaces import IPlayer
from .fretboard import map_notes, num_strings_for
from .logger import get_logger
from .note_types import ActiveChord, Beat, FretPosition

logger = get_logger(__name__)

MIN_CHORD_PITCHES = 2


class LiveInferenceEngine:
    """Follows the player's active beats and keeps fret and chord state current.

    Fret positions are replaced on every notification. The chord is only
    replaced when the score annotates one or at least two distinct pitches
    sound, so sparse passages keep showing the last chord.
    """

    def __init__(self, tuning: Optional[Sequence[int]] = None):
        """Initialize the engine.

        Args:
            tuning: Open-string MIDI pitches, index 0 = string 1 (lowest)
        """
        self.tuning: List[int] = list(tuning or [])
        self.active_notes: List[FretPosition] = []
        self.active_chord: Optional[ActiveChord] = None
        self.events = EventEmitter()
        self._subscription: Optional[Subscription] = None

    @property
    def num_strings(self) -> int:
        return num_strings_for(self.tuning)

    @property
    def attached(self) -> bool:
        return self._subscription is not None

    def set_tuning(self, tuning: Sequence[int]) -> None:
        self.tuning = list(tuning)

    def attach(self, player: IPlayer) -> None:
        """Start following a player's active beats (replacing any previous player)."""
        self.detach()
        self._subscription = player.events.on_active_beats_changed(self.on_active_beats_changed)
        logger.info("Live inference attached (%d strings)", self.num_strings)

    def detach(self) -> None:
        if self._subscription is None:
            return
        self._subscription.close()
        self._subscription = None
        logger.info("Live inference detached")

    def __enter__(self) -> "LiveInferenceEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()

    def on_active_beats_changed(self, beats: Sequence[Beat]) -> None:
        """Handle one active beats notification."""
        notes = [note for beat in beats for note in beat.notes]
        positions, pitches = map_notes(notes, self.tuning)
        self.active_notes = positions
        self.events.emit(InferenceEventType.FRETS_CHANGED, list(positions))

        for beat in beats:
            if beat.chord is not None:
                self._publish_chord(ActiveChord.from_annotation(beat.chord))
                return

        string_frets = [-1] * self.num_strings
        for note in notes:
            if 1 <= note.string <= self.num_strings:
                string_frets[note.string - 1] = note.fret

        if len(set(pitches)) < MIN_CHORD_PITCHES:
            logger.debug("%d pitch(es) sounding, keeping previous chord", len(set(pitches)))
            return

        fretted = [fret for fret in string_frets if fret > 0]
        chord = ActiveChord(
            name=classify_chord(pitches),
            first_fret=min(fretted) if fretted else 1,
            string_frets=tuple(string_frets),
            barre_frets=frozenset(),
        )
        self._publish_chord(chord)

    def _publish_chord(self, chord: ActiveChord) -> None:
        changed = chord != self.active_chord
        self.active_chord = chord
        if changed:
            logger.debug("Active chord: %s", chord.name)
        self.events.emit(InferenceEventType.CHORD_CHANGED, chord)

    def on_chord_changed(self, callback: Callable[[ActiveChord], None]) -> Subscription:
        return self.events.on(InferenceEventType.CHORD_CHANGED, callback)

    def on_frets_changed(self, callback: Callable[[List[FretPosition]], None]) -> Subscription:
        return self.events.on(InferenceEventType.FRETS_CHANGED, callback)
