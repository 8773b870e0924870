"""Defines the core interfaces for the tab_practice application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Callable

from ..note_types import PlaybackRange
from .events import PlayerEvents


class IPlayer(ABC):
    """Interface for the external score playback engine."""

    events: PlayerEvents

    @property
    @abstractmethod
    def tempo(self) -> float:
        """Current playback speed multiplier."""
        pass

    @abstractmethod
    def set_tempo(self, tempo: float) -> None:
        """Set the playback speed multiplier."""
        pass

    @abstractmethod
    def set_playback_range(self, playback_range: Optional[PlaybackRange]) -> None:
        """Restrict playback to a tick range, or clear it with None."""
        pass

    @abstractmethod
    def set_looping(self, looping: bool) -> None:
        """Enable or disable looping of the playback range."""
        pass

    @abstractmethod
    def set_count_in_volume(self, volume: float) -> None:
        """Set the count-in metronome volume (0 disables the count-in)."""
        pass

    @abstractmethod
    def play_pause(self) -> None:
        """Toggle playback."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop playback and rewind to the start of the range."""
        pass


class IScheduler(ABC):
    """Interface for deferring a call by a short delay."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback once, no earlier than delay seconds from now."""
        pass
