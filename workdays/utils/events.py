"""
In-process event listeners.

Publishers call _notify(event, fields); every subscriber gets its own copy of
the fields. A failing listener is logged and skipped so it can never break
a holiday lookup.
"""
import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

EventListener = Callable[[str, dict[str, Any]], None]


class EventPublisher:
    """Mixin for objects that publish (event, fields) to subscribers.

    Subclasses set self._listeners = [] in __init__.
    """

    _listeners: list[EventListener]

    def subscribe(self, listener: EventListener) -> None:
        """Register a callable(event, fields)."""
        self._listeners.append(listener)

    def _notify(self, event: str, payload: dict[str, Any]) -> None:
        for listener in self._listeners:
            try:
                listener(event, dict(payload))
            except Exception:
                logger.warning("Event listener failed for %s", event)
