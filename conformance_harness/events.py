"""Event hook surface exposed by the rendering collaborator."""

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Event:
    """A named occurrence delivered to listeners."""

    type: str


type Listener = Callable[[Event], object]


class EventTarget:
    """Entity that listeners can subscribe to by event type.

    Nothing is promised about when, or whether, an event is dispatched.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        """Subscribe `listener`; adding the same listener twice has no effect."""
        listeners = self._listeners[event_type]
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> None:
        if listener in (listeners := self._listeners.get(event_type, [])):
            listeners.remove(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def dispatch_event(self, event: Event) -> int:
        """Call each listener for `event.type` in subscription order.

        A listener that raises is logged and does not stop the others.

        Returns:
            Number of listeners called

        """
        listeners = list(self._listeners.get(event.type, []))
        log.debug("Dispatching %s to %d listener(s)", event.type, len(listeners))

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                log.exception("Listener for %s raised", event.type)
        return len(listeners)
