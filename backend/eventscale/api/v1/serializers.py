from __future__ import annotations

from typing import Any, Optional

from eventscale.models import ChecklistItem, Event, ServiceScaleEntry
from eventscale.services.calendar_view import DayCell, MonthGrid
from eventscale.services.checklist_tracker import checklist_progress, ordered_tasks
from eventscale.services.db_service import EventDetail, ScaleEntryDetail
from eventscale.services.scale_manager import entry_state


def _str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def event_to_dict(event: Event) -> dict:
    return {
        "id": str(event.id),
        "title": event.title,
        "type": event.type,
        "date": event.date.isoformat() if event.date else None,
        "time": event.time.strftime("%H:%M") if event.time else None,
        "location": event.location,
        "description": event.description,
        "responsible_id": _str(event.responsible_id),
        "status": event.status,
        "estimated_attendees": event.estimated_attendees,
        "actual_attendees": event.actual_attendees,
        "registration_fee": float(event.registration_fee) if event.registration_fee is not None else None,
    }


def checklist_item_to_dict(item: ChecklistItem) -> dict:
    return {
        "id": str(item.id),
        "event_id": str(item.event_id),
        "task": item.task,
        "responsible_id": _str(item.responsible_id),
        "completed": bool(item.completed),
    }


def scale_entry_to_dict(
    entry: ServiceScaleEntry,
    assignee_name: Optional[str] = None,
    assignee_phone: Optional[str] = None,
    include_token: bool = False,
) -> dict:
    data = {
        "id": str(entry.id),
        "event_id": str(entry.event_id),
        "member_id": str(entry.member_id),
        "role": entry.role,
        "confirmed": bool(entry.confirmed),
        "declined": bool(entry.declined),
        "state": entry_state(entry).value,
        "responded_at": entry.responded_at.isoformat() if entry.responded_at else None,
        "assignee_name": assignee_name,
        "assignee_phone": assignee_phone,
    }
    # Only shown to callers allowed to hand out confirmation links
    if include_token:
        data["public_token"] = entry.public_token
    return data


def scale_detail_to_dict(detail: ScaleEntryDetail) -> dict:
    return scale_entry_to_dict(detail.entry, detail.assignee_name, detail.assignee_phone)


def event_detail_to_dict(detail: EventDetail) -> dict:
    progress = checklist_progress(detail.checklist)
    data = event_to_dict(detail.event)
    data["checklist"] = [checklist_item_to_dict(item) for item in ordered_tasks(detail.checklist)]
    data["checklist_progress"] = {
        "done": progress.done,
        "total": progress.total,
        "percent": progress.percent,
    }
    data["scales"] = [scale_detail_to_dict(scale) for scale in detail.scales]
    return data


def day_cell_to_dict(cell: DayCell) -> dict:
    return {
        "date": cell.day.isoformat(),
        "in_month": cell.in_month,
        "events": [event_to_dict(event) for event in cell.events],
    }


def month_grid_to_dict(grid: MonthGrid) -> dict:
    prev_year, prev_month = grid.previous
    next_year, next_month = grid.next
    return {
        "year": grid.year,
        "month": grid.month,
        "previous": {"year": prev_year, "month": prev_month},
        "next": {"year": next_year, "month": next_month},
        "weeks": [[day_cell_to_dict(cell) for cell in week] for week in grid.weeks],
    }
