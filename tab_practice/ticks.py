"""Translate 1-based bar ranges into playback tick ranges."""

from typing import Optional, Sequence

from .logger import get_logger
from .note_types import Bar, BarRange, PlaybackRange

logger = get_logger(__name__)


def get_tick_range(bars: Sequence[Bar], bar_range: BarRange) -> Optional[PlaybackRange]:
    """Compute the tick range covering bar_range.

    Args:
        bars: Ordered bars of the score, each with start_tick and duration
        bar_range: 1-based inclusive bar selection

    Returns:
        The tick range, or None if the score has no bars or the range is empty
    """
    total_bars = len(bars)
    if total_bars == 0:
        logger.debug("No bars in score, no tick range")
        return None

    start_idx = max(0, min(total_bars - 1, bar_range.start_bar - 1))
    end_idx = max(0, min(total_bars - 1, bar_range.end_bar - 1))
    if start_idx > end_idx:
        logger.debug(f"Empty bar selection {bar_range.start_bar}-{bar_range.end_bar}")
        return None

    end_bar = bars[end_idx]
    return PlaybackRange(
        start_tick=bars[start_idx].start_tick,
        end_tick=end_bar.start_tick + end_bar.duration,
    )


def bar_for_tick(bars: Sequence[Bar], tick: int) -> Optional[int]:
    """Return the 1-based number of the bar containing tick, or None."""
    for number, bar in enumerate(bars, start=1):
        if bar.start_tick <= tick < bar.start_tick + bar.duration:
            return number
    return None
