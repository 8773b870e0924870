"""Fretboard mapping: sounding notes to pitches and to display coordinates."""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .note_types import ActiveChord, FretPosition, TabNote
from .note_utils import midi_to_note_name

DEFAULT_NUM_STRINGS = 6
DEFAULT_NUM_FRETS = 22

# Fret marker inlays
FRET_MARKERS = (3, 5, 7, 9, 15)
DOUBLE_MARKER = 12


def num_strings_for(tuning: Sequence[int]) -> int:
    """Number of strings drawn for a tuning (six when the tuning is unknown)."""
    return len(tuning) or DEFAULT_NUM_STRINGS


def string_pitch(tuning: Sequence[int], string: int, fret: int):
    """MIDI pitch of a fretted string, or None if the string has no tuning entry."""
    index = string - 1
    if 0 <= index < len(tuning):
        return tuning[index] + fret
    return None


def map_notes(
    notes: Iterable[TabNote], tuning: Sequence[int]
) -> Tuple[List[FretPosition], List[int]]:
    """Convert sounding notes into fret positions and MIDI pitches.

    Every note gets a fret position; only notes on tuned strings get a pitch.

    Args:
        notes: Notes of the active beats, strings numbered from 1 (lowest pitch)
        tuning: Open-string MIDI pitches, index 0 = string 1

    Returns:
        (positions, pitches)
    """
    positions: List[FretPosition] = []
    pitches: List[int] = []
    for note in notes:
        positions.append(FretPosition(note.string, note.fret))
        pitch = string_pitch(tuning, note.string, note.fret)
        if pitch is not None:
            pitches.append(pitch)
    return positions, pitches


def display_row(string: int, num_strings: int) -> int:
    """Row from the top at which a string is drawn (lowest string at the bottom)."""
    return num_strings - string


def chord_diagram_base_fret(chord: ActiveChord) -> int:
    """Fret shown at the top of a chord diagram; 1 means the nut is drawn."""
    return 1 if chord.first_fret <= 1 else chord.first_fret


@dataclass
class FretboardLayout:
    """Geometry of the horizontal fretboard view, in pixels."""

    num_strings: int = DEFAULT_NUM_STRINGS
    num_frets: int = DEFAULT_NUM_FRETS
    fret_width: float = 50
    string_spacing: float = 20
    nut_width: float = 6
    label_width: float = 36
    padding_y: float = 16

    @classmethod
    def for_tuning(cls, tuning: Sequence[int], num_frets: int = DEFAULT_NUM_FRETS):
        return cls(num_strings=num_strings_for(tuning), num_frets=num_frets)

    @property
    def width(self) -> float:
        return self.label_width + self.nut_width + self.num_frets * self.fret_width

    @property
    def height(self) -> float:
        return (self.num_strings - 1) * self.string_spacing + self.padding_y * 2

    @property
    def neck_left(self) -> float:
        return self.label_width + self.nut_width

    def string_y(self, string: int) -> float:
        return self.padding_y + display_row(string, self.num_strings) * self.string_spacing

    def fret_x(self, fret: int) -> float:
        """Centre of a fret cell; open strings sit on the nut."""
        if fret == 0:
            return self.label_width + self.nut_width / 2
        return self.neck_left + (fret - 0.5) * self.fret_width

    def note_coordinates(self, positions: Sequence[FretPosition]) -> np.ndarray:
        """(x, y) centres for a batch of positions, shape (n, 2)."""
        if not positions:
            return np.empty((0, 2), dtype=float)
        strings = np.array([p.string for p in positions], dtype=float)
        frets = np.array([p.fret for p in positions], dtype=float)
        xs = np.where(
            frets == 0,
            self.label_width + self.nut_width / 2,
            self.neck_left + (frets - 0.5) * self.fret_width,
        )
        ys = self.padding_y + (self.num_strings - strings) * self.string_spacing
        return np.column_stack((xs, ys))

    def fret_line_xs(self) -> np.ndarray:
        return self.neck_left + np.arange(self.num_frets + 1) * self.fret_width

    def marker_positions(self) -> List[Tuple[float, float]]:
        """Centres of the inlay dots; the twelfth fret gets two."""
        mid_y = self.height / 2
        offset = self.string_spacing * 1.2
        markers = []
        for fret in range(1, self.num_frets + 1):
            x = self.fret_x(fret)
            if fret == DOUBLE_MARKER:
                markers.append((x, mid_y - offset))
                markers.append((x, mid_y + offset))
            elif fret in FRET_MARKERS:
                markers.append((x, mid_y))
        return markers

    def string_labels(self, tuning: Sequence[int]) -> List[Tuple[float, str]]:
        """(y, note name) for each tuned string, top row first."""
        labels = []
        for row in range(self.num_strings):
            index = self.num_strings - 1 - row
            if index < len(tuning):
                labels.append(
                    (self.padding_y + row * self.string_spacing, midi_to_note_name(tuning[index]))
                )
        return labels
