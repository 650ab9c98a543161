"""Synchronous notification bus shared by the host and the engine."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class Notification(str, Enum):
    """Notification topics exchanged with the host diagram."""

    # Inbound (host -> engine)
    CONNECTION_CREATED = "connection.created"
    CONNECTION_RECONNECTED = "connection.reconnected"
    IMPORT_DONE = "import.done"
    ELEMENT_CHANGED = "element.changed"

    # Outbound (engine -> rendering, panels)
    ELEMENTS_CHANGED = "elements.changed"


@dataclass
class Event:
    """A fired notification."""

    topic: str
    payload: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


Handler = Callable[[Event], None]


class EventBus:
    """Dispatches notifications to subscribers, synchronously and in priority order.

    A failing handler is logged and does not stop the remaining handlers.
    """

    def __init__(self):
        self.subscribers: dict[str, list[tuple[int, Handler]]] = {}

    def subscribe(self, topic: str | Notification, callback: Handler, priority: int = 1000) -> None:
        """Subscribe a callback to a topic. Higher priority runs first."""
        handlers = self.subscribers.setdefault(_topic(topic), [])
        handlers.append((priority, callback))
        handlers.sort(key=lambda entry: -entry[0])
        logger.debug("Subscribed to %s", _topic(topic))

    def unsubscribe(self, topic: str | Notification, callback: Handler) -> None:
        """Unsubscribe a callback from a topic."""
        handlers = self.subscribers.get(_topic(topic), [])
        self.subscribers[_topic(topic)] = [
            (priority, cb) for priority, cb in handlers if cb != callback
        ]

    def fire(self, topic: str | Notification, **payload: Any) -> Event:
        """Fire a notification and dispatch it to all subscribers."""
        event = Event(_topic(topic), payload)
        for _, callback in list(self.subscribers.get(event.topic, [])):
            try:
                callback(event)
            except Exception:
                logger.exception("Handler for %s failed", event.topic)
        return event


def _topic(topic: str | Notification) -> str:
    return topic.value if isinstance(topic, Notification) else topic
