"""
Typed event bus for decoupled notification.

Rules functions report what happened as Enum members (a rank-up, a
gate rejection, ...). Hosts that want to react - apply a bonus, show
a toast, write an audit line - subscribe to those members here rather
than inspecting every result by hand.

Usage:
    class ProgressionEvent(Enum):
        RANK_UP = auto()

    event_bus.subscribe(ProgressionEvent.RANK_UP, on_rank_up)
    event_bus.publish(ProgressionEvent.RANK_UP, skill_id="smithing", rank=2)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Event-specific keyword data
        consumed: Whether a handler stopped propagation
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Stop delivery to lower-priority handlers."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


EventHandler = Callable[[Event], None]


@dataclass
class _Subscription:
    priority: int
    handler_ref: Any
    one_shot: bool
    is_weak: bool

    def resolve(self) -> EventHandler | None:
        if self.is_weak:
            return self.handler_ref()
        return self.handler_ref


class EventBus:
    """
    Publish/subscribe hub keyed by Enum members.

    Features:
    - Priority ordering (higher first, ties keep subscription order)
    - Weak references by default
    - One-shot handlers
    - Consumption stops propagation
    - Events published from inside a handler are queued, not nested
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._pending: deque[Event] = deque()
        self._dispatching = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Enum member to listen for
            handler: Callback taking the Event
            priority: Higher priority handlers run first
            one_shot: Remove the handler after its first call
            weak: Hold the handler weakly (dropped once garbage collected)
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        subs = self._subscriptions.setdefault(event_type, [])
        position = len(subs)
        for index, existing in enumerate(subs):
            if priority > existing.priority:
                position = index
                break
        subs.insert(position, _Subscription(priority, handler_ref, one_shot, weak))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        subs = self._subscriptions.get(event_type)
        if not subs:
            return
        self._subscriptions[event_type] = [s for s in subs if s.resolve() != handler]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Returns:
            The Event (check ``consumed`` to see whether a handler took it)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        self._pending.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._pending:
                self._dispatch(self._pending.popleft())
        finally:
            self._dispatching = False

    def clear(self, event_type: Enum | None = None) -> None:
        """Drop handlers for one event type, or all of them."""
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        return sum(1 for s in self._subscriptions.get(event_type, []) if s.resolve() is not None)

    def _dispatch(self, event: Event) -> None:
        subs = self._subscriptions.get(event.type)
        if not subs:
            return

        dropped: set[int] = set()
        for sub in list(subs):
            handler = sub.resolve()
            if handler is None:
                dropped.add(id(sub))
                continue

            try:
                handler(event)
            except Exception:
                # A failing listener must not break the publisher
                logger.exception(f"Error in event handler for {event.type}")

            if sub.one_shot:
                dropped.add(id(sub))

            if event.consumed:
                break

        if dropped:
            current = self._subscriptions.get(event.type, [])
            self._subscriptions[event.type] = [s for s in current if id(s) not in dropped]
