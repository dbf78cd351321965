"""
Integration tests for checklist items and templates.
"""

import uuid

import pytest

from eventscale.core.errors import NotFoundError, ValidationFailure
from eventscale.services.checklist_tracker import ChecklistTracker, checklist_progress


@pytest.fixture
def tracker(db_service, broker):
    return ChecklistTracker(db_service, broker=broker)


class TestToggleTask:
    """Tests for setting a task's completion."""

    @pytest.mark.asyncio
    async def test_check_and_uncheck(self, tracker, db_service, sunday_service, church):
        item = await tracker.add_item(sunday_service.id, 'Check microphones', church.id)
        assert item.completed is False

        item = await tracker.toggle_task(item.id, True, church.id)
        assert item.completed is True

        item = await tracker.toggle_task(item.id, False, church.id)
        assert item.completed is False

    @pytest.mark.asyncio
    async def test_same_target_twice_is_stable(self, tracker, sunday_service, church):
        item = await tracker.add_item(sunday_service.id, 'Arrange chairs', church.id)

        await tracker.toggle_task(item.id, True, church.id)
        item = await tracker.toggle_task(item.id, True, church.id)

        assert item.completed is True

    @pytest.mark.asyncio
    async def test_other_church_cannot_toggle(self, tracker, sunday_service, church, other_church):
        item = await tracker.add_item(sunday_service.id, 'Arrange chairs', church.id)

        with pytest.raises(NotFoundError):
            await tracker.toggle_task(item.id, True, other_church.id)

    @pytest.mark.asyncio
    async def test_toggle_publishes(self, tracker, broker, sunday_service, church):
        item = await tracker.add_item(sunday_service.id, 'Arrange chairs', church.id)
        subscription = broker.subscribe(church.id)

        await tracker.toggle_task(item.id, True, church.id)

        message = subscription.queue.get_nowait()
        assert message == {
            'type': 'checklist.updated',
            'event_id': str(sunday_service.id),
            'item_id': str(item.id),
            'completed': True,
        }


class TestTemplates:
    """Tests for bulk checklist creation."""

    @pytest.mark.asyncio
    async def test_service_template(self, tracker, db_service, sunday_service, church):
        items = await tracker.apply_template(sunday_service.id, 'service', church.id)

        assert len(items) == 5
        assert 'Check microphones' in [item.task for item in items]

        detail = await db_service.get_event_detail(sunday_service.id, church.id)
        progress = checklist_progress(detail.checklist)
        assert (progress.done, progress.total, progress.percent) == (0, 5, 0)

    @pytest.mark.asyncio
    async def test_custom_template(self, tracker, sunday_service, church):
        items = await tracker.apply_template(
            sunday_service.id, 'custom', church.id, lines='Print bulletins\n\n  Buy flowers  \n'
        )

        assert [item.task for item in items] == ['Print bulletins', 'Buy flowers']

    @pytest.mark.asyncio
    async def test_unknown_event_writes_nothing(self, tracker, broker, church):
        subscription = broker.subscribe(church.id)

        with pytest.raises(NotFoundError):
            await tracker.apply_template(uuid.uuid4(), 'service', church.id)
        assert subscription.queue.empty()

    @pytest.mark.asyncio
    async def test_blank_task_rejected(self, tracker, sunday_service, church):
        with pytest.raises(ValidationFailure):
            await tracker.add_item(sunday_service.id, '   ', church.id)

    @pytest.mark.asyncio
    async def test_remove_item(self, tracker, db_service, sunday_service, church):
        item = await tracker.add_item(sunday_service.id, 'Arrange chairs', church.id)

        await tracker.remove_item(item.id, church.id)

        assert await db_service.get_checklist_item(item.id, church.id) is None
