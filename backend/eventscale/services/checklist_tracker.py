from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from eventscale.core.errors import ValidationFailure
from eventscale.models import ChecklistItem
from eventscale.services.db_service import DBService, IdLike, require_tenant
from eventscale.services.realtime import EventBroker, event_broker

logger = logging.getLogger(__name__)

CHECKLIST_TEMPLATES: dict[str, tuple[str, ...]] = {
    "service": (
        "Test sound equipment",
        "Check microphones",
        "Prepare sermon slides",
        "Arrange chairs",
        "Brief the welcome team",
    ),
    "event": (
        "Confirm the venue",
        "Set up the registration desk",
        "Prepare sound and projection",
        "Brief volunteers",
        "Arrange decorations",
    ),
}
CUSTOM_TEMPLATE = "custom"


@dataclass
class ChecklistProgress:
    done: int
    total: int

    @property
    def percent(self) -> int:
        if not self.total:
            return 0
        return round(100 * self.done / self.total)


def checklist_progress(items: Iterable[ChecklistItem]) -> ChecklistProgress:
    items = list(items)
    return ChecklistProgress(done=sum(1 for item in items if item.completed), total=len(items))


def template_tasks(template: str, lines: Optional[str] = None) -> List[str]:
    """Tasks for a named template, or one per non-blank line for ``custom``."""
    if template == CUSTOM_TEMPLATE:
        tasks = [line.strip() for line in (lines or "").splitlines() if line.strip()]
        if not tasks:
            raise ValidationFailure("Custom checklist needs at least one task")
        return tasks
    if template not in CHECKLIST_TEMPLATES:
        raise ValidationFailure(f"Unknown checklist template: {template}")
    return list(CHECKLIST_TEMPLATES[template])


class ChecklistTracker:
    def __init__(self, db: DBService, broker: Optional[EventBroker] = None):
        self.db = db
        self.broker = broker or event_broker

    async def add_item(
        self,
        event_id: IdLike,
        task: str,
        church_id: IdLike,
        responsible_id: Optional[IdLike] = None,
    ) -> ChecklistItem:
        item = await self.db.add_checklist_item(event_id, task, church_id, responsible_id=responsible_id)
        self._publish(church_id, "checklist.added", item)
        return item

    async def apply_template(
        self,
        event_id: IdLike,
        template: str,
        church_id: IdLike,
        lines: Optional[str] = None,
    ) -> List[ChecklistItem]:
        tasks = template_tasks(template, lines)
        # Resolve the event once so an unknown id fails before any write
        await self.db.require_event(event_id, church_id)
        return [await self.add_item(event_id, task, church_id) for task in tasks]

    async def toggle_task(self, item_id: IdLike, completed_target: bool, church_id: IdLike) -> ChecklistItem:
        """Set ``completed`` to exactly ``completed_target``."""
        item = await self.db.set_checklist_completed(item_id, completed_target, church_id)
        self._publish(church_id, "checklist.updated", item)
        return item

    async def remove_item(self, item_id: IdLike, church_id: IdLike) -> ChecklistItem:
        item = await self.db.delete_checklist_item(item_id, church_id)
        self._publish(church_id, "checklist.removed", item)
        return item

    def _publish(self, church_id: IdLike, kind: str, item: ChecklistItem) -> None:
        self.broker.publish(require_tenant(church_id), {
            "type": kind,
            "event_id": str(item.event_id),
            "item_id": str(item.id),
            "completed": bool(item.completed),
        })


def ordered_tasks(items: Sequence[ChecklistItem]) -> List[ChecklistItem]:
    """Open tasks first, then done ones; stable within each group."""
    return sorted(items, key=lambda item: bool(item.completed))
