"""Cart change notifications.

Presentation state (the cart badge) subscribes here instead of polling.
Every mutating cart operation calls `notify` AFTER its transaction commits,
so listeners never see a cart that was rolled back.

A listener that raises is logged and skipped; it never fails the cart write.

Usage:
    from app.core.events import cart_events

    def refresh_badge(event):
        print(event.user_id, event.count)

    cart_events.subscribe(refresh_badge)
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartUpdated:
    user_id: str
    action: str  # add | update | remove | clear
    items: List[dict] = field(default_factory=list)

    @property
    def count(self) -> int:
        return sum(item["quantity"] for item in self.items)


Listener = Callable[[CartUpdated], None]


class CartEvents:
    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Listener:
        with self._lock:
            self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def notify(self, event: CartUpdated) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Cart listener {listener!r} failed for user {event.user_id}: {e}", exc_info=True)

        logger.debug(f"cartUpdated ({event.action}) for user {event.user_id}: {event.count} item(s)")


cart_events = CartEvents()
