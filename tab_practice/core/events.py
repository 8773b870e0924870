"""Event system for tab_practice components."""

from typing import Dict, List, Callable, Any, Optional, Tuple
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class PlayerEventType(Enum):
    """Event types raised by the playback engine."""

    ACTIVE_BEATS_CHANGED = auto()
    PLAYER_FINISHED = auto()


class PracticeEventType(Enum):
    """Event types published by the practice loop controller."""

    STATE_CHANGED = auto()
    LOOP_COMPLETED = auto()


class InferenceEventType(Enum):
    """Event types published by the live inference engine."""

    CHORD_CHANGED = auto()
    FRETS_CHANGED = auto()


class Subscription:
    """An owned registration of a callback on an emitter.

    Closing the subscription unregisters the callback. Closing twice is harmless.
    Registering the same callback again returns the same subscription while it
    is still active.
    """

    def __init__(self, emitter: "EventEmitter", event_type: Any, callback: Callable):
        self._emitter: Optional[EventEmitter] = emitter
        self.event_type = event_type
        self.callback = callback

    @property
    def active(self) -> bool:
        return self._emitter is not None

    def close(self) -> None:
        """Unregister the callback."""
        emitter = self._emitter
        if emitter is None:
            return
        self._emitter = None
        emitter.off(self.event_type, self.callback)

    def _release(self) -> None:
        self._emitter = None

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class EventEmitter:
    """Event emitter for tab_practice components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}
        self._subscriptions: Dict[Tuple[Any, Callable], Subscription] = {}

    def on(self, event_type: Any, callback: Callable) -> Subscription:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs

        Returns:
            A subscription that unregisters the callback when closed
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        subscription = self._subscriptions.get((event_type, callback))
        if subscription is not None and subscription.active:
            return subscription

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

        subscription = Subscription(self, event_type, callback)
        self._subscriptions[(event_type, callback)] = subscription
        return subscription

    def off(self, event_type: Any, callback: Callable) -> None:
        """Unregister a callback for an event type.

        Args:
            event_type: Event type the callback was registered for
            callback: Previously registered callback
        """
        listeners = self._listeners.get(event_type)
        if listeners and callback in listeners:
            listeners.remove(callback)
            logger.debug(f"Removed listener for event {event_type}")
        subscription = self._subscriptions.pop((event_type, callback), None)
        if subscription is not None:
            subscription._release()

    def listener_count(self, event_type: Any) -> int:
        """Number of callbacks registered for an event type."""
        return len(self._listeners.get(event_type, []))

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        # Listeners may unsubscribe while being notified
        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        for subscription in self._subscriptions.values():
            subscription._release()
        self._subscriptions = {}
        logger.debug("Cleared all event listeners")


class PlayerEvents:
    """Event emitter specifically for playback engine events."""

    def __init__(self):
        """Initialize the player events."""
        self._emitter = EventEmitter()

    def on_active_beats_changed(self, callback: Callable) -> Subscription:
        """Register a callback for active beat changes.

        Args:
            callback: Function called with the list of currently sounding beats
        """
        return self._emitter.on(PlayerEventType.ACTIVE_BEATS_CHANGED, callback)

    def on_player_finished(self, callback: Callable) -> Subscription:
        """Register a callback for the end of playback (one per loop iteration).

        Args:
            callback: Function called without arguments
        """
        return self._emitter.on(PlayerEventType.PLAYER_FINISHED, callback)

    def emit_active_beats_changed(self, beats) -> None:
        """Emit an active beats changed event.

        Args:
            beats: The beats sounding at this point of playback
        """
        self._emitter.emit(PlayerEventType.ACTIVE_BEATS_CHANGED, list(beats))

    def emit_player_finished(self) -> None:
        """Emit a playback finished event."""
        self._emitter.emit(PlayerEventType.PLAYER_FINISHED)

    def listener_count(self, event_type: PlayerEventType) -> int:
        return self._emitter.listener_count(event_type)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
