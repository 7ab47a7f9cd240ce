"""In-process event bus for document lifecycle events.

Handlers are registered per event type and awaited in subscription order.
Handler errors propagate to the publisher.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel

E = TypeVar("E", bound=BaseModel)

Handler = Callable[[Any], Awaitable[None]]


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``EventBus.subscribe``. ``cancel`` is idempotent."""

    bus: EventBus
    event_type: type[BaseModel]
    handler: Handler
    active: bool = True

    def cancel(self) -> None:
        if self.active:
            self.bus._unsubscribe(self)
            self.active = False


@dataclass(eq=False)
class EventBus:
    _handlers: dict[type[BaseModel], list[Subscription]] = field(default_factory=dict)

    def subscribe(
        self, event_type: type[E], handler: Callable[[E], Awaitable[None]]
    ) -> Subscription:
        subscription = Subscription(bus=self, event_type=event_type, handler=handler)
        self._handlers.setdefault(event_type, []).append(subscription)
        return subscription

    def _unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._handlers.get(subscription.event_type, [])
        if subscription in subscribers:
            subscribers.remove(subscription)

    def handler_count(self, event_type: type[BaseModel]) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: BaseModel) -> None:
        # Exact type match; copy so handlers may unsubscribe while running.
        for subscription in list(self._handlers.get(type(event), [])):
            await subscription.handler(event)
