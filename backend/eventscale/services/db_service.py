from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional, Union

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventscale.core.errors import AuthorizationFailure, NotFoundError, StorageFailure, ValidationFailure
from eventscale.integrations.directory import MemberContact, MemberDirectory, SqlMemberDirectory
from eventscale.models import ChecklistItem, Event, EventStatus, EventType, ServiceScaleEntry

logger = logging.getLogger(__name__)

IdLike = Union[str, uuid.UUID]

EVENT_FIELDS = {
    "title",
    "type",
    "date",
    "time",
    "location",
    "description",
    "responsible_id",
    "status",
    "estimated_attendees",
    "actual_attendees",
    "registration_fee",
}


def parse_uuid(value: Optional[IdLike]) -> Optional[uuid.UUID]:
    """Return a UUID, or None when the value is empty or malformed."""
    if value is None or isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def require_tenant(church_id: Optional[IdLike]) -> uuid.UUID:
    tenant = parse_uuid(church_id)
    if tenant is None:
        raise AuthorizationFailure("Missing or invalid church context")
    return tenant


@dataclass
class ScaleEntryDetail:
    entry: ServiceScaleEntry
    assignee_name: Optional[str] = None
    assignee_phone: Optional[str] = None


@dataclass
class EventDetail:
    event: Event
    checklist: List[ChecklistItem] = field(default_factory=list)
    scales: List[ScaleEntryDetail] = field(default_factory=list)


class DBService:
    """
    Event, checklist and scale persistence.

    Every operator-facing lookup is scoped by church id; an id that exists
    under another church behaves exactly like a missing one.
    """

    def __init__(self, session: AsyncSession, directory: Optional[MemberDirectory] = None):
        self.session = session
        self.directory = directory or SqlMemberDirectory(session)

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageFailure("Could not save changes, please try again", cause=e)

    async def _execute(self, statement):
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageFailure("Could not reach the event store, please try again", cause=e)

    async def _add(self, instance):
        self.session.add(instance)
        await self._commit()
        await self.session.refresh(instance)
        return instance

    # ==================== EVENTS ====================

    def _clean_event_fields(self, data: dict[str, Any]) -> dict[str, Any]:
        unknown = set(data) - EVENT_FIELDS
        if unknown:
            raise ValidationFailure(f"Unknown event fields: {', '.join(sorted(unknown))}")

        cleaned = dict(data)
        if "title" in cleaned:
            title = (cleaned["title"] or "").strip()
            if not title:
                raise ValidationFailure("Event title cannot be blank")
            cleaned["title"] = title
        if "type" in cleaned:
            try:
                cleaned["type"] = EventType(cleaned["type"]).value
            except ValueError:
                raise ValidationFailure(f"Invalid event type: {cleaned['type']}")
        if "status" in cleaned:
            try:
                cleaned["status"] = EventStatus(cleaned["status"]).value
            except ValueError:
                raise ValidationFailure(f"Invalid event status: {cleaned['status']}")
        for key in ("estimated_attendees", "actual_attendees", "registration_fee"):
            value = cleaned.get(key)
            if value is not None and value < 0:
                raise ValidationFailure(f"{key} cannot be negative")
        if "responsible_id" in cleaned and cleaned["responsible_id"] is not None:
            responsible = parse_uuid(cleaned["responsible_id"])
            if responsible is None:
                raise ValidationFailure("Invalid responsible_id")
            cleaned["responsible_id"] = responsible
        return cleaned

    async def create_event(self, data: dict[str, Any], church_id: IdLike) -> Event:
        """Create an event under the given church."""
        tenant = require_tenant(church_id)
        fields = self._clean_event_fields(data)
        for required in ("title", "date", "time"):
            if fields.get(required) is None:
                raise ValidationFailure(f"Event {required} is required")

        event = Event(church_id=tenant, **fields)
        event = await self._add(event)
        logger.info(f"Created event {event.id} '{event.title}' for church {tenant}")
        return event

    async def get_event(self, event_id: IdLike, church_id: IdLike, with_detail: bool = False) -> Optional[Event]:
        tenant = require_tenant(church_id)
        e_uuid = parse_uuid(event_id)
        if e_uuid is None:
            return None

        query = select(Event).where(Event.id == e_uuid, Event.church_id == tenant)
        if with_detail:
            # Children may have changed since the event entered the session
            query = query.options(
                selectinload(Event.checklist_items),
                selectinload(Event.scale_entries),
            ).execution_options(populate_existing=True)
        result = await self._execute(query)
        return result.scalar_one_or_none()

    async def require_event(self, event_id: IdLike, church_id: IdLike, with_detail: bool = False) -> Event:
        event = await self.get_event(event_id, church_id, with_detail=with_detail)
        if not event:
            raise NotFoundError("No such event")
        return event

    async def update_event(self, event_id: IdLike, data: dict[str, Any], church_id: IdLike) -> Event:
        """Partial update; only the keys present in ``data`` are touched."""
        event = await self.require_event(event_id, church_id)
        fields = self._clean_event_fields(data)
        for key in ("title", "date", "time", "type", "status"):
            if key in fields and fields[key] is None:
                raise ValidationFailure(f"Event {key} cannot be cleared")
        for key, value in fields.items():
            setattr(event, key, value)
        await self._commit()
        await self.session.refresh(event)
        return event

    async def delete_event(self, event_id: IdLike, church_id: IdLike) -> None:
        """Delete an event together with its checklist items and scale entries."""
        event = await self.require_event(event_id, church_id)
        # Explicit child deletes so the cascade does not depend on FK pragmas
        await self._execute(delete(ChecklistItem).where(ChecklistItem.event_id == event.id))
        await self._execute(delete(ServiceScaleEntry).where(ServiceScaleEntry.event_id == event.id))
        await self._execute(delete(Event).where(Event.id == event.id))
        await self._commit()
        logger.info(f"Deleted event {event.id} for church {event.church_id}")

    async def list_events(
        self,
        church_id: IdLike,
        event_type: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        search: Optional[str] = None,
        upcoming: bool = False,
        with_detail: bool = False,
    ) -> List[Event]:
        """List a church's events, optionally filtered by type, range or text.

        Upcoming lists are oldest first; everything else newest first.
        """
        tenant = require_tenant(church_id)
        query = select(Event).where(Event.church_id == tenant)

        if event_type:
            try:
                query = query.where(Event.type == EventType(event_type).value)
            except ValueError:
                raise ValidationFailure(f"Invalid event type: {event_type}")
        if upcoming:
            query = query.where(Event.date >= date.today())
        if start:
            query = query.where(Event.date >= start)
        if end:
            query = query.where(Event.date <= end)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(Event.title.ilike(pattern), Event.description.ilike(pattern))
            )

        if upcoming or (start and end):
            query = query.order_by(Event.date.asc(), Event.time.asc())
        else:
            query = query.order_by(Event.date.desc(), Event.time.desc())

        if with_detail:
            query = query.options(
                selectinload(Event.checklist_items),
                selectinload(Event.scale_entries),
            ).execution_options(populate_existing=True)

        result = await self._execute(query)
        return list(result.scalars().all())

    async def list_events_with_detail(self, church_id: IdLike, **filters) -> List[EventDetail]:
        """Events with their checklist and scale, assignees resolved from the directory."""
        tenant = require_tenant(church_id)
        events = await self.list_events(tenant, with_detail=True, **filters)
        member_ids = {entry.member_id for event in events for entry in event.scale_entries}
        contacts = await self.directory.get_contacts(tenant, member_ids)
        return [self._detail(event, contacts) for event in events]

    async def get_event_detail(self, event_id: IdLike, church_id: IdLike) -> EventDetail:
        tenant = require_tenant(church_id)
        event = await self.require_event(event_id, tenant, with_detail=True)
        contacts = await self.directory.get_contacts(
            tenant, {entry.member_id for entry in event.scale_entries}
        )
        return self._detail(event, contacts)

    def _detail(self, event: Event, contacts: dict[uuid.UUID, MemberContact]) -> EventDetail:
        scales = []
        for entry in event.scale_entries:
            contact = contacts.get(entry.member_id)
            scales.append(ScaleEntryDetail(
                entry=entry,
                assignee_name=contact.name if contact else None,
                assignee_phone=contact.phone if contact else None,
            ))
        return EventDetail(event=event, checklist=list(event.checklist_items), scales=scales)

    # ==================== CHECKLIST ====================

    async def add_checklist_item(
        self,
        event_id: IdLike,
        task: str,
        church_id: IdLike,
        responsible_id: Optional[IdLike] = None,
    ) -> ChecklistItem:
        """Attach a task to an event."""
        task = (task or "").strip()
        if not task:
            raise ValidationFailure("Task description cannot be blank")
        responsible = None
        if responsible_id is not None:
            responsible = parse_uuid(responsible_id)
            if responsible is None:
                raise ValidationFailure("Invalid responsible_id")

        event = await self.require_event(event_id, church_id)
        item = ChecklistItem(event_id=event.id, task=task, responsible_id=responsible)
        return await self._add(item)

    async def get_checklist_item(self, item_id: IdLike, church_id: IdLike) -> Optional[ChecklistItem]:
        tenant = require_tenant(church_id)
        i_uuid = parse_uuid(item_id)
        if i_uuid is None:
            return None
        result = await self._execute(
            select(ChecklistItem)
            .join(Event, ChecklistItem.event_id == Event.id)
            .where(ChecklistItem.id == i_uuid, Event.church_id == tenant)
        )
        return result.scalar_one_or_none()

    async def set_checklist_completed(self, item_id: IdLike, completed: bool, church_id: IdLike) -> ChecklistItem:
        item = await self.get_checklist_item(item_id, church_id)
        if not item:
            raise NotFoundError("No such checklist item")
        await self._execute(
            update(ChecklistItem)
            .where(ChecklistItem.id == item.id)
            .values(completed=bool(completed))
        )
        await self._commit()
        await self.session.refresh(item)
        return item

    async def delete_checklist_item(self, item_id: IdLike, church_id: IdLike) -> ChecklistItem:
        item = await self.get_checklist_item(item_id, church_id)
        if not item:
            raise NotFoundError("No such checklist item")
        await self._execute(delete(ChecklistItem).where(ChecklistItem.id == item.id))
        await self._commit()
        return item

    # ==================== SCALES ====================

    async def add_scale_entry(
        self,
        event_id: IdLike,
        member_id: IdLike,
        role: str,
        church_id: IdLike,
    ) -> ServiceScaleEntry:
        """Assign a directory member to a role on an event (state: pending)."""
        tenant = require_tenant(church_id)
        role = (role or "").strip()
        if not role:
            raise ValidationFailure("Role cannot be blank")
        m_uuid = parse_uuid(member_id)
        if m_uuid is None:
            raise ValidationFailure("Invalid member id")

        event = await self.require_event(event_id, tenant)
        contact = await self.directory.get_contact(tenant, m_uuid)
        if not contact:
            raise NotFoundError("No such member")

        entry = ServiceScaleEntry(
            event_id=event.id,
            member_id=m_uuid,
            role=role,
            confirmed=False,
            declined=False,
        )
        return await self._add(entry)

    async def get_scale_entry(self, entry_id: IdLike, church_id: IdLike) -> Optional[ServiceScaleEntry]:
        tenant = require_tenant(church_id)
        s_uuid = parse_uuid(entry_id)
        if s_uuid is None:
            return None
        result = await self._execute(
            select(ServiceScaleEntry)
            .join(Event, ServiceScaleEntry.event_id == Event.id)
            .where(ServiceScaleEntry.id == s_uuid, Event.church_id == tenant)
            .options(selectinload(ServiceScaleEntry.event))
        )
        return result.scalar_one_or_none()

    async def get_scale_entry_by_token(self, token: str) -> Optional[ServiceScaleEntry]:
        """Resolve a public link token. Not tenant scoped: the token is the credential."""
        token = (token or "").strip()
        if not token:
            return None
        result = await self._execute(
            select(ServiceScaleEntry)
            .where(ServiceScaleEntry.public_token == token)
            .options(
                selectinload(ServiceScaleEntry.event),
                selectinload(ServiceScaleEntry.member),
            )
        )
        return result.scalar_one_or_none()

    async def write_scale_outcome(self, entry_id: uuid.UUID, confirmed: bool, declined: bool) -> int:
        """Write both outcome flags in a single UPDATE statement."""
        if confirmed and declined:
            raise ValidationFailure("A scale entry cannot be both confirmed and declined")
        result = await self._execute(
            update(ServiceScaleEntry)
            .where(ServiceScaleEntry.id == entry_id)
            .values(
                confirmed=confirmed,
                declined=declined,
                responded_at=None if not (confirmed or declined) else datetime.utcnow(),
            )
        )
        await self._commit()
        return result.rowcount

    async def delete_scale_entry(self, entry_id: IdLike, church_id: IdLike) -> ServiceScaleEntry:
        entry = await self.get_scale_entry(entry_id, church_id)
        if not entry:
            raise NotFoundError("No such scale entry")
        await self._execute(delete(ServiceScaleEntry).where(ServiceScaleEntry.id == entry.id))
        await self._commit()
        return entry
