"""
Event bus - in-memory publish/subscribe
Checkout, check-in and room changes publish here; follow-up bookkeeping subscribes
"""
from typing import Callable, Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from collections import defaultdict, deque
import logging
import threading
import uuid

logger = logging.getLogger(__name__)

Handler = Callable[["Event"], None]

HISTORY_SIZE = 100


@dataclass
class Event:
    """Published event"""
    event_type: str
    timestamp: datetime
    data: Dict[str, Any]
    source: str  # publishing service
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)


class EventBus:
    """
    Process-wide event bus

    Handlers run synchronously in the publisher's thread, after the publisher
    has committed. Only one instance exists per process.
    """

    _instance: Optional["EventBus"] = None
    _instance_lock = threading.Lock()

    def __new__(cls):
        with cls._instance_lock:
            if cls._instance is None:
                bus = super().__new__(cls)
                bus._handlers = defaultdict(list)
                bus._history = deque(maxlen=HISTORY_SIZE)
                bus._lock = threading.RLock()
                cls._instance = bus
                logger.info("EventBus created")
        return cls._instance

    def subscribe(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            if handler in self._handlers[event_type]:
                return
            self._handlers[event_type].append(handler)
        logger.info(f"{handler.__name__} subscribed to {event_type}")

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            if handler not in self._handlers.get(event_type, []):
                return
            self._handlers[event_type].remove(handler)
        logger.info(f"{handler.__name__} unsubscribed from {event_type}")

    def publish(self, event: Event) -> None:
        """
        Deliver an event to its handlers

        A handler that raises is logged and skipped; the publisher never sees
        the error.
        """
        with self._lock:
            self._history.append(event)
            handlers = list(self._handlers.get(event.event_type, []))

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"{handler.__name__} failed on {event.event_type} ({event.event_id}): {e}",
                    exc_info=True
                )

    def get_history(self, event_type: Optional[str] = None, limit: int = 50) -> List[Event]:
        """Recent events, newest first"""
        with self._lock:
            events = list(reversed(self._history))
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events[:limit]

    def clear_subscribers(self) -> None:
        """Drop every subscription (tests)"""
        with self._lock:
            self._handlers.clear()

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()


# Process-wide bus
event_bus = EventBus()
