"""
Events published by the live recorder.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger("recording_events")


class EventType(str, Enum):
    """Types of recording events."""
    RECORDING_STARTED = "recording_started"
    RECORDING_PAUSED = "recording_paused"
    RECORDING_RESUMED = "recording_resumed"
    RECORDING_STOPPED = "recording_stopped"
    RECORDING_RESET = "recording_reset"
    NOISE_FLOOR_CALIBRATED = "noise_floor_calibrated"
    QUALITY_WARNING_CHANGED = "quality_warning_changed"
    MAX_DURATION_REACHED = "max_duration_reached"


@dataclass
class RecordingEvent:
    """A single recorder event; `elapsed` is recording time in seconds."""
    event_type: EventType
    elapsed: float
    data: Dict[str, Any] = field(default_factory=dict)


EventHandler = Callable[[RecordingEvent], None]


class RecordingEventBus:
    """Synchronous publish/subscribe for recorder events."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Subscribed handler to %s", event_type)

    def subscribe_all(self, handler: EventHandler) -> None:
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type)
        else:
            logger.warning("Handler not found for %s", event_type)

    def emit(self, event: RecordingEvent) -> None:
        """
        Deliver an event to its subscribers, then to global subscribers.

        A failing handler is logged and does not stop delivery to the others.
        """
        logger.debug("Emitting %s at %.1fs", event.event_type, event.elapsed)

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error("Error in event handler for %s: %s", event.event_type, e)

        for handler in list(self._global_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error("Error in global event handler: %s", e)


class EventLogger:
    """Logs every recorder event."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.log_level = log_level

    def handle_event(self, event: RecordingEvent) -> None:
        self.logger.log(self.log_level, "Event: %s | t=%.1fs | Data: %s",
                        event.event_type.value, event.elapsed, event.data)
