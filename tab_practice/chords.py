"""Chord naming from a set of sounding MIDI pitches.

The root is the pitch class of the lowest sounding note (the bass), not a
normal-form root, so inversions are named after their bass note. The
intervals above that root are matched against an ordered table of rules and
the first rule that matches supplies the quality suffix.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from .logger import get_logger
from .note_utils import pitch_class_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChordRule:
    """One entry of the chord table."""

    quality: str
    suffix: str
    required: FrozenSet[int]  # intervals above the root that must sound
    excluded: FrozenSet[int] = frozenset()  # intervals that must not sound
    pitch_class_count: Optional[int] = None  # exact size of the pitch class set

    def matches(self, intervals: FrozenSet[int], pitch_class_count: int) -> bool:
        if self.pitch_class_count is not None and pitch_class_count != self.pitch_class_count:
            return False
        return self.required <= intervals and not (self.excluded & intervals)


# Ordered by priority, first match wins
CHORD_RULES = (
    ChordRule("major", "", frozenset({4, 7}), frozenset({3, 10})),
    ChordRule("minor", "m", frozenset({3, 7}), frozenset({4})),
    ChordRule("dominant7", "7", frozenset({4, 7, 10})),
    ChordRule("minor7", "m7", frozenset({3, 7, 10})),
    ChordRule("major7", "maj7", frozenset({4, 7, 11})),
    ChordRule("diminished", "dim", frozenset({3, 6}), frozenset({7})),
    ChordRule("augmented", "aug", frozenset({4, 8})),
    ChordRule("sus4", "sus4", frozenset({5, 7}), frozenset({3, 4})),
    ChordRule("sus2", "sus2", frozenset({2, 7}), frozenset({3, 4})),
    ChordRule("power", "5", frozenset({7}), pitch_class_count=2),
)


def pitch_classes(pitches: Iterable[int]) -> FrozenSet[int]:
    """Reduce MIDI pitches to their pitch classes."""
    return frozenset(p % 12 for p in pitches)


def find_rule(pitches: Iterable[int]) -> Optional[ChordRule]:
    """Return the first chord rule matching pitches, or None."""
    pitches = list(pitches)
    if not pitches:
        return None

    classes = pitch_classes(pitches)
    root = min(pitches) % 12
    intervals = frozenset((pc - root) % 12 for pc in classes)
    for rule in CHORD_RULES:
        if rule.matches(intervals, len(classes)):
            return rule
    return None


def classify_chord(pitches: Iterable[int]) -> Optional[str]:
    """Name the chord formed by pitches.

    Args:
        pitches: MIDI note numbers sounding together

    Returns:
        A label such as 'C', 'Am', 'G7' or 'E5', the bare root name when no
        rule matches, or None when no pitches are given
    """
    pitches = list(pitches)
    if not pitches:
        return None

    classes = pitch_classes(pitches)
    root_name = pitch_class_name(min(pitches))
    if len(classes) == 1:
        return root_name

    rule = find_rule(pitches)
    label = root_name + rule.suffix if rule else root_name
    logger.debug(
        "Classified %s as %s (%s)",
        sorted(pitches),
        label,
        rule.quality if rule else "no match",
    )
    return label
