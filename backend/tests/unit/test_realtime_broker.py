"""
Unit tests for the in-process realtime broker.
"""

import uuid

import pytest

from eventscale.services.realtime import EventBroker


class TestEventBroker:
    """Tests for subscribe / publish / unsubscribe."""

    @pytest.mark.asyncio
    async def test_publish_reaches_church_subscribers_only(self):
        broker = EventBroker(queue_size=5)
        church_a, church_b = uuid.uuid4(), uuid.uuid4()
        sub_a = broker.subscribe(church_a)
        sub_b = broker.subscribe(church_b)

        delivered = broker.publish(church_a, {'type': 'scale.updated'})

        assert delivered == 1
        assert await sub_a.next_message() == {'type': 'scale.updated'}
        assert sub_b.queue.empty()

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_delivery(self):
        broker = EventBroker()
        church = uuid.uuid4()
        sub = broker.subscribe(church)
        assert broker.subscriber_count(church) == 1

        broker.unsubscribe(sub)

        assert broker.subscriber_count() == 0
        assert broker.publish(church, {'type': 'x'}) == 0

    @pytest.mark.asyncio
    async def test_full_queue_drops_without_blocking(self):
        broker = EventBroker(queue_size=1)
        church = uuid.uuid4()
        sub = broker.subscribe(church)

        assert broker.publish(church, {'n': 1}) == 1
        assert broker.publish(church, {'n': 2}) == 0
        assert await sub.next_message() == {'n': 1}

    def test_publish_without_church_is_ignored(self):
        assert EventBroker().publish(None, {'type': 'x'}) == 0

    def test_unsubscribe_twice_is_harmless(self):
        broker = EventBroker()
        sub = broker.subscribe(uuid.uuid4())
        broker.unsubscribe(sub)
        broker.unsubscribe(sub)
        assert broker.subscriber_count() == 0
