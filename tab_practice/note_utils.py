"""Utility functions for working with note names and MIDI pitches."""

import re
from typing import Optional

from .logger import get_logger

logger = get_logger(__name__)

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

FLAT_TO_SHARP = {
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Db": "C#",
    "Eb": "D#",
    "Fb": "E",
    "Gb": "F#",
}

# Sharps that cross into the next letter; B# also crosses the octave boundary
SHARP_ENHARMONICS = {
    "B#": ("C", 1),
    "E#": ("F", 0),
}

# Matches a note letter, an optional accidental and an optional (possibly negative) octave
NOTE_PATTERN = re.compile(r"^([A-Ga-g][#b]?)(-?[0-9]*)$")


def pitch_class_name(pitch_class: int) -> str:
    """Name of a pitch class (0 = C), always spelled with sharps."""
    return NOTE_NAMES[pitch_class % 12]


def midi_to_note_name(midi: int) -> str:
    """Convert a MIDI pitch to a name with octave (60 -> 'C4', 40 -> 'E2')."""
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"


def normalize_to_sharp(note: str) -> str:
    """Spell a flat note name with its sharp equivalent ('Bb2' -> 'A#2')."""
    if len(note) > 1 and note[1] == "b":
        return FLAT_TO_SHARP.get(note[:2], note[:2]) + note[2:]
    return note


def note_name_to_midi(name: str) -> Optional[int]:
    """Parse a note name such as 'E2', 'Bb3' or '64' into a MIDI pitch.

    Returns:
        The MIDI pitch, or None if the name cannot be parsed
    """
    name = str(name).strip()
    if name.isdigit():
        return int(name)

    match = NOTE_PATTERN.match(name)
    if not match or not match.group(2):
        logger.warning(f"Could not parse note name: {name!r}")
        return None

    letter = match.group(1)
    letter = letter[0].upper() + letter[1:]
    octave = int(match.group(2))
    if letter in SHARP_ENHARMONICS:
        letter, octave_shift = SHARP_ENHARMONICS[letter]
        octave += octave_shift
    sharp = normalize_to_sharp(letter)
    if sharp not in NOTE_NAMES:
        logger.warning(f"Could not parse note name: {name!r}")
        return None
    midi = (octave + 1) * 12 + NOTE_NAMES.index(sharp)
    if letter == "Cb":
        # Cb sits below C in the same written octave
        midi -= 12
    return midi
