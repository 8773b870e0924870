"""Practice loops and live chord/fret inference on top of a tablature player."""

from .chords import classify_chord
from .live_inference import LiveInferenceEngine
from .practice_loop import PracticeLoopController
from .ticks import get_tick_range

__version__ = "0.1.0"

__all__ = [
    "classify_chord",
    "get_tick_range",
    "LiveInferenceEngine",
    "PracticeLoopController",
]
