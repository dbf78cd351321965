from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from eventscale.api.deps import (
    CallerContext,
    get_checklist_tracker,
    get_db_service,
    get_scale_manager,
    require,
)
from eventscale.api.v1.serializers import (
    checklist_item_to_dict,
    event_detail_to_dict,
    event_to_dict,
    scale_entry_to_dict,
)
from eventscale.core.errors import NotFoundError
from eventscale.core.permissions import Capability
from eventscale.models import EventStatus, EventType
from eventscale.services.checklist_tracker import CHECKLIST_TEMPLATES, CUSTOM_TEMPLATE, ChecklistTracker
from eventscale.services.db_service import DBService
from eventscale.services.messaging import (
    build_chat_deep_link,
    build_confirmation_url,
    compose_scale_message,
    compose_share_text,
    normalize_phone,
)
from eventscale.services.scale_manager import ScaleManager

router = APIRouter()


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    type: EventType = EventType.SERVICE
    date: dt.date
    time: dt.time
    location: Optional[str] = None
    description: Optional[str] = None
    responsible_id: Optional[str] = None
    status: EventStatus = EventStatus.PLANNED
    estimated_attendees: Optional[int] = Field(None, ge=0)
    actual_attendees: Optional[int] = Field(None, ge=0)
    registration_fee: Optional[Decimal] = Field(None, ge=0)
    # Members invited as guests when the event is created
    guest_ids: list[str] = Field(default_factory=list)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    type: Optional[EventType] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    location: Optional[str] = None
    description: Optional[str] = None
    responsible_id: Optional[str] = None
    status: Optional[EventStatus] = None
    estimated_attendees: Optional[int] = Field(None, ge=0)
    actual_attendees: Optional[int] = Field(None, ge=0)
    registration_fee: Optional[Decimal] = Field(None, ge=0)


class ChecklistItemCreate(BaseModel):
    task: str
    responsible_id: Optional[str] = None


class ChecklistTemplateRequest(BaseModel):
    template: str = Field(..., description=f"One of {sorted(CHECKLIST_TEMPLATES)} or '{CUSTOM_TEMPLATE}'")
    tasks: Optional[str] = Field(None, description="Custom tasks, one per line")


class ChecklistToggle(BaseModel):
    completed: bool


class ScaleEntryCreate(BaseModel):
    member_id: str
    role: str


class ScaleBulkCreate(BaseModel):
    entries: list[ScaleEntryCreate] = Field(default_factory=list)


class GuestInvite(BaseModel):
    member_ids: list[str] = Field(default_factory=list)


class OperatorConfirmation(BaseModel):
    confirmed: bool


def _event_fields(payload: BaseModel, exclude_unset: bool = False) -> dict:
    data = payload.model_dump(exclude_unset=exclude_unset, exclude={"guest_ids"})
    for key in ("type", "status"):
        if data.get(key) is not None:
            data[key] = data[key].value
    return data


# ==================== EVENTS ====================

@router.post("/events", status_code=201)
async def create_event(
    payload: EventCreate,
    caller: CallerContext = Depends(require(Capability.MANAGE_EVENTS)),
    db_service: DBService = Depends(get_db_service),
    manager: ScaleManager = Depends(get_scale_manager),
):
    """Create an event, optionally inviting guests in the same call."""
    event = await db_service.create_event(_event_fields(payload), caller.church_id)

    invitations = []
    if payload.guest_ids:
        invitations = await manager.invite_guests(event.id, payload.guest_ids, caller.church_id)

    return {
        "event": event_to_dict(event),
        "invitations": [result.to_dict() for result in invitations],
    }


@router.get("/events")
async def list_events(
    type: Optional[EventType] = None,
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
    search: Optional[str] = None,
    upcoming: bool = False,
    caller: CallerContext = Depends(require(Capability.VIEW_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    """List the caller's events with checklist and scale."""
    details = await db_service.list_events_with_detail(
        caller.church_id,
        event_type=type.value if type else None,
        start=start,
        end=end,
        search=search,
        upcoming=upcoming,
    )
    return {
        "total": len(details),
        "events": [event_detail_to_dict(detail) for detail in details],
    }


@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    caller: CallerContext = Depends(require(Capability.VIEW_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    detail = await db_service.get_event_detail(event_id, caller.church_id)
    return event_detail_to_dict(detail)


@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    payload: EventUpdate,
    caller: CallerContext = Depends(require(Capability.MANAGE_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    event = await db_service.update_event(
        event_id, _event_fields(payload, exclude_unset=True), caller.church_id
    )
    return event_to_dict(event)


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    caller: CallerContext = Depends(require(Capability.MANAGE_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    await db_service.delete_event(event_id, caller.church_id)
    return {"status": "ok", "event_id": event_id}


@router.get("/events/{event_id}/share")
async def share_event(
    event_id: str,
    caller: CallerContext = Depends(require(Capability.VIEW_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    """Text for sharing the event itself on chat/social channels."""
    event = await db_service.require_event(event_id, caller.church_id)
    return {"text": compose_share_text(event)}


# ==================== CHECKLIST ====================

@router.post("/events/{event_id}/checklist", status_code=201)
async def add_checklist_item(
    event_id: str,
    payload: ChecklistItemCreate,
    caller: CallerContext = Depends(require(Capability.MANAGE_CHECKLIST)),
    tracker: ChecklistTracker = Depends(get_checklist_tracker),
):
    item = await tracker.add_item(event_id, payload.task, caller.church_id, payload.responsible_id)
    return checklist_item_to_dict(item)


@router.post("/events/{event_id}/checklist/template", status_code=201)
async def apply_checklist_template(
    event_id: str,
    payload: ChecklistTemplateRequest,
    caller: CallerContext = Depends(require(Capability.MANAGE_CHECKLIST)),
    tracker: ChecklistTracker = Depends(get_checklist_tracker),
):
    items = await tracker.apply_template(event_id, payload.template, caller.church_id, payload.tasks)
    return {
        "total": len(items),
        "items": [checklist_item_to_dict(item) for item in items],
    }


@router.patch("/checklist/{item_id}")
async def toggle_checklist_item(
    item_id: str,
    payload: ChecklistToggle,
    caller: CallerContext = Depends(require(Capability.TOGGLE_CHECKLIST)),
    tracker: ChecklistTracker = Depends(get_checklist_tracker),
):
    item = await tracker.toggle_task(item_id, payload.completed, caller.church_id)
    return checklist_item_to_dict(item)


@router.delete("/checklist/{item_id}")
async def delete_checklist_item(
    item_id: str,
    caller: CallerContext = Depends(require(Capability.MANAGE_CHECKLIST)),
    tracker: ChecklistTracker = Depends(get_checklist_tracker),
):
    await tracker.remove_item(item_id, caller.church_id)
    return {"status": "ok", "item_id": item_id}


# ==================== SCALES ====================

@router.post("/events/{event_id}/scales", status_code=201)
async def add_scale_entry(
    event_id: str,
    payload: ScaleEntryCreate,
    caller: CallerContext = Depends(require(Capability.MANAGE_SCALE)),
    manager: ScaleManager = Depends(get_scale_manager),
):
    entry = await manager.add_entry(event_id, payload.member_id, payload.role, caller.church_id)
    return scale_entry_to_dict(entry, include_token=True)


@router.post("/events/{event_id}/scales/bulk")
async def add_scale_entries_bulk(
    event_id: str,
    payload: ScaleBulkCreate,
    caller: CallerContext = Depends(require(Capability.MANAGE_SCALE)),
    manager: ScaleManager = Depends(get_scale_manager),
):
    """Add several entries; each one succeeds or fails on its own."""
    results = await manager.add_entries_bulk(
        event_id,
        [(item.member_id, item.role) for item in payload.entries],
        caller.church_id,
    )
    return {
        "total": len(results),
        "created": sum(1 for result in results if result.ok),
        "results": [result.to_dict() for result in results],
    }


@router.post("/events/{event_id}/guests")
async def invite_guests(
    event_id: str,
    payload: GuestInvite,
    caller: CallerContext = Depends(require(Capability.MANAGE_SCALE)),
    manager: ScaleManager = Depends(get_scale_manager),
):
    results = await manager.invite_guests(event_id, payload.member_ids, caller.church_id)
    return {
        "total": len(results),
        "created": sum(1 for result in results if result.ok),
        "results": [result.to_dict() for result in results],
    }


@router.patch("/scales/{entry_id}/confirmation")
async def confirm_scale_entry(
    entry_id: str,
    payload: OperatorConfirmation,
    caller: CallerContext = Depends(require(Capability.MANAGE_SCALE)),
    manager: ScaleManager = Depends(get_scale_manager),
):
    entry = await manager.confirm_entry_as_operator(entry_id, payload.confirmed, caller.church_id)
    return scale_entry_to_dict(entry)


@router.delete("/scales/{entry_id}")
async def delete_scale_entry(
    entry_id: str,
    caller: CallerContext = Depends(require(Capability.MANAGE_SCALE)),
    manager: ScaleManager = Depends(get_scale_manager),
):
    await manager.remove_entry(entry_id, caller.church_id)
    return {"status": "ok", "entry_id": entry_id}


@router.get("/scales/{entry_id}/share")
async def share_scale_entry(
    entry_id: str,
    caller: CallerContext = Depends(require(Capability.MANAGE_SCALE)),
    db_service: DBService = Depends(get_db_service),
):
    """Compose the chat message and deep link that invite the assignee."""
    entry = await db_service.get_scale_entry(entry_id, caller.church_id)
    if not entry:
        raise NotFoundError("No such scale entry")
    contact = await db_service.directory.get_contact(caller.church_id, entry.member_id)

    confirmation_url = build_confirmation_url(entry.public_token)
    message = compose_scale_message(
        entry.event,
        entry.role,
        contact.name if contact else None,
        confirmation_url,
    )
    phone = normalize_phone(contact.phone if contact else None)

    return {
        "entry_id": str(entry.id),
        "confirmation_url": confirmation_url,
        "message": message,
        "phone": phone or None,
        # No phone on file: the operator copies the message by hand
        "chat_link": build_chat_deep_link(phone, message) if phone else None,
    }
