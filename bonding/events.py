"""Notifications emitted after a committed operation."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from bonding.constants import DEFAULT_EVENT_HISTORY

logger = structlog.get_logger()


@dataclass(frozen=True)
class TokensBought:
    buyer: str
    amount: int
    cost: int


@dataclass(frozen=True)
class TokensSold:
    seller: str
    amount: int
    proceeds: int


@dataclass(frozen=True)
class ReserveWithdrawn:
    owner: str
    amount: int


Event = TokensBought | TokensSold | ReserveWithdrawn
Subscriber = Callable[[Event], None]


class EventLog:
    """Bounded event history with synchronous subscribers.

    Only the most recent max_events events are kept; subscribers see every
    event. Subscribers run after the emitting operation has committed. A
    failing subscriber is logged and skipped; it cannot undo the operation.
    """

    def __init__(self, max_events: int = DEFAULT_EVENT_HISTORY) -> None:
        self._events: deque[Event] = deque(maxlen=max_events)
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def emit(self, event: Event) -> None:
        self._events.append(event)
        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception:
                logger.exception("event_subscriber_failed", event_type=type(event).__name__)

    def of_type(self, event_type: type[Event]) -> list[Event]:
        """All recorded events of one type, oldest first."""
        return [event for event in self._events if isinstance(event, event_type)]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._events)
