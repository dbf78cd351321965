"""In-process publish/subscribe channel for dashboard live updates.

Subscribers are bound to a church and to the lifetime of the viewing
connection: register on connect, unregister on disconnect. Publishing never
blocks a write; a subscriber whose queue is full misses that message.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from eventscale.core.config import REALTIME_QUEUE_SIZE

logger = logging.getLogger(__name__)


@dataclass
class Subscription:
    church_id: uuid.UUID
    queue: asyncio.Queue
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    async def next_message(self) -> dict[str, Any]:
        return await self.queue.get()


class EventBroker:
    def __init__(self, queue_size: int = REALTIME_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscriptions: dict[uuid.UUID, dict[str, Subscription]] = {}

    def subscribe(self, church_id: uuid.UUID) -> Subscription:
        subscription = Subscription(church_id=church_id, queue=asyncio.Queue(maxsize=self.queue_size))
        self._subscriptions.setdefault(church_id, {})[subscription.id] = subscription
        logger.debug(f"Subscribed {subscription.id} to church {church_id} (total: {self.subscriber_count()})")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        church_subs = self._subscriptions.get(subscription.church_id)
        if not church_subs:
            return
        church_subs.pop(subscription.id, None)
        if not church_subs:
            self._subscriptions.pop(subscription.church_id, None)
        logger.debug(f"Unsubscribed {subscription.id} (total: {self.subscriber_count()})")

    def publish(self, church_id: Optional[uuid.UUID], message: dict[str, Any]) -> int:
        """Fan a message out to the church's subscribers; returns how many got it."""
        if church_id is None:
            return 0
        delivered = 0
        for subscription in list(self._subscriptions.get(church_id, {}).values()):
            try:
                subscription.queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"Dropping realtime message for slow subscriber {subscription.id}")
        return delivered

    def subscriber_count(self, church_id: Optional[uuid.UUID] = None) -> int:
        if church_id is not None:
            return len(self._subscriptions.get(church_id, {}))
        return sum(len(subs) for subs in self._subscriptions.values())


# Shared broker for the process
event_broker = EventBroker()
