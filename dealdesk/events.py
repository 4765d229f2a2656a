"""In-process domain events emitted by mutating services.

Services publish after their primary write has committed. Subscribers
run in registration order on the caller's session; a failing subscriber
is logged and skipped, and never fails the publishing mutation.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

log = logging.getLogger(__name__)

DEAL_CREATED = "deal_created"
DEAL_UPDATED = "deal_updated"
DEAL_STAGE_CHANGED = "deal_stage_changed"
CONTACT_ADDED = "contact_added"
COMPANY_ADDED = "company_added"


@dataclass(frozen=True)
class DomainEvent:
    name: str
    entity_type: str
    entity_id: uuid.UUID
    description: str
    actor_id: uuid.UUID | None = None


EventHandler = Callable[[AsyncSession, DomainEvent], Awaitable[None]]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._subscribers[event_name]
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers(self, event_name: str) -> list[EventHandler]:
        return list(self._subscribers.get(event_name, []))

    async def publish(self, db: AsyncSession, event: DomainEvent) -> None:
        for handler in self.handlers(event.name):
            try:
                await handler(db, event)
            except Exception:
                log.warning(
                    "Subscriber %s failed for %s on %s %s",
                    getattr(handler, "__qualname__", handler),
                    event.name,
                    event.entity_type,
                    event.entity_id,
                    exc_info=True,
                )


bus = EventBus()
