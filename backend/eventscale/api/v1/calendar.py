from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends

from eventscale.api.deps import CallerContext, get_db_service, require
from eventscale.api.v1.serializers import month_grid_to_dict
from eventscale.core.errors import ValidationFailure
from eventscale.core.permissions import Capability
from eventscale.services.calendar_view import attendance_summary, build_month_grid, month_bounds
from eventscale.services.db_service import DBService

router = APIRouter()


@router.get("/calendar/{year}/{month}")
async def get_month_grid(
    year: int,
    month: int,
    caller: CallerContext = Depends(require(Capability.VIEW_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    """Month grid of the caller's events, with prev/next navigation."""
    try:
        start, end = month_bounds(year, month)
    except ValueError as e:
        raise ValidationFailure(str(e))
    events = await db_service.list_events(caller.church_id, start=start, end=end)
    return month_grid_to_dict(build_month_grid(year, month, events))


@router.get("/dashboard/attendance")
async def get_attendance_dashboard(
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
    caller: CallerContext = Depends(require(Capability.VIEW_EVENTS)),
    db_service: DBService = Depends(get_db_service),
):
    events = await db_service.list_events(caller.church_id, start=start, end=end)
    summary = attendance_summary(events)
    return {
        "start": start.isoformat() if start else None,
        "end": end.isoformat() if end else None,
        **summary.to_dict(),
    }
