"""Core components for the tab_practice application."""

# Import interfaces for easier access
from .interfaces import (
    IPlayer,
    IScheduler,
)
from .events import EventEmitter, PlayerEvents, Subscription

__all__ = ["IPlayer", "IScheduler", "EventEmitter", "PlayerEvents", "Subscription"]
