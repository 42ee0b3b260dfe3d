"""Event bus for operation diagnostics.

``observe_operation`` publishes an ``operation.start`` and an
``operation.end`` envelope for every storage-touching call of a
FileLocation. Subscribers receive the event name with the envelope and may
limit themselves to some event names.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from filelocation.core.logging import get_logger

_logger = get_logger(__name__)

OPERATION_START = "operation.start"
OPERATION_END = "operation.end"

EventCallback = Callable[[str, dict[str, Any]], None]


@dataclass(frozen=True)
class _Subscription:
    callback: EventCallback
    events: frozenset[str] | None  # None: every event

    def wants(self, event: str) -> bool:
        return self.events is None or event in self.events


class EventBus:
    """Publish operation envelopes to subscribers.

    Example:
        bus = EventBus()

        def on_end(event, envelope):
            print(envelope["operation"], envelope["data"]["status"])

        bus.subscribe(on_end, OPERATION_END)
        bus.publish(OPERATION_END, envelope)
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def subscribe(self, callback: EventCallback, *events: str) -> None:
        """Call ``callback(event, envelope)`` for ``events``, or for every event if none given."""
        self._subscriptions.append(_Subscription(callback, frozenset(events) or None))

    def publish(self, event: str, envelope: dict[str, Any] | None = None) -> None:
        """Deliver ``envelope`` in subscription order.

        Handler exceptions are logged and never propagate to the publisher.
        """
        envelope = envelope or {}

        for sub in list(self._subscriptions):
            if not sub.wants(event):
                continue
            try:
                sub.callback(event, envelope)
            except Exception as e:
                _logger.error(
                    f"Error in event handler for '{event}' (callback={sub.callback!r}): "
                    f"{type(e).__name__}: {e}\n{traceback.format_exc()}"
                )

    def clear(self) -> None:
        """Drop all subscriptions."""
        self._subscriptions.clear()


_global_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get global event bus instance."""
    global _global_bus
    if _global_bus is None:
        _global_bus = EventBus()
    return _global_bus
