"""
In-process publish/subscribe channel used to tell open views to refetch.

Views subscribe a callback for a topic; the booking service publishes after
a successful commit. The interval engine itself never touches this channel.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

BOOKINGS_CHANGED = "bookings-changed"

Listener = Callable[[str, Dict[str, Any]], None]


class RefreshChannel:
    """Topic-based callback registry."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener`` for ``topic``.

        Returns a function that removes the subscription again.
        """
        self._listeners[topic].append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners[topic]:
                self._listeners[topic].remove(listener)

        return unsubscribe

    def publish(self, topic: str, payload: Dict[str, Any] | None = None) -> int:
        """
        Call every listener of ``topic`` with the payload.

        Returns the number of listeners notified. A failing listener is logged
        and does not stop delivery to the others.
        """
        data = payload or {}
        delivered = 0

        for listener in list(self._listeners.get(topic, [])):
            try:
                listener(topic, data)
            except Exception as exc:
                logger.warning("Listener %r failed for topic %s: %s", listener, topic, exc)
                continue
            delivered += 1

        return delivered

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, []))
