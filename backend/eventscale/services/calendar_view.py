"""Month grids and attendance figures for the events dashboard.

Pure functions over already-loaded events; nothing here touches the database.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterable, List, Optional, Sequence

from eventscale.models import Event, EventStatus

# Weeks start on Sunday, like the church calendar screens
FIRST_WEEKDAY = calendar.SUNDAY


@dataclass
class DayCell:
    day: date
    in_month: bool
    events: List[Event] = field(default_factory=list)


@dataclass
class MonthGrid:
    year: int
    month: int
    weeks: List[List[DayCell]]

    @property
    def previous(self) -> tuple[int, int]:
        return previous_month(self.year, self.month)

    @property
    def next(self) -> tuple[int, int]:
        return next_month(self.year, self.month)

    def cell_for(self, day: date) -> Optional[DayCell]:
        for week in self.weeks:
            for cell in week:
                if cell.day == day and cell.in_month:
                    return cell
        return None


def _check_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    if not 1 <= year <= 9999:
        raise ValueError(f"year out of range: {year}")


def next_month(year: int, month: int) -> tuple[int, int]:
    _check_month(year, month)
    return (year + 1, 1) if month == 12 else (year, month + 1)


def previous_month(year: int, month: int) -> tuple[int, int]:
    _check_month(year, month)
    return (year - 1, 12) if month == 1 else (year, month - 1)


def events_by_day(events: Iterable[Event]) -> dict[date, List[Event]]:
    grouped: dict[date, List[Event]] = defaultdict(list)
    for event in events:
        if event.date is not None:
            grouped[event.date].append(event)
    for day_events in grouped.values():
        day_events.sort(key=lambda e: e.time or time.min)
    return dict(grouped)


def build_month_grid(year: int, month: int, events: Iterable[Event]) -> MonthGrid:
    """Lay a month out in full weeks.

    Padding days from the neighbouring months are present but flagged
    ``in_month=False`` and carry no events, so each event lands in at most
    one cell.
    """
    _check_month(year, month)
    grouped = events_by_day(events)
    weeks = []
    for week in calendar.Calendar(firstweekday=FIRST_WEEKDAY).monthdatescalendar(year, month):
        row = []
        for day in week:
            in_month = day.month == month
            row.append(DayCell(
                day=day,
                in_month=in_month,
                events=list(grouped.get(day, [])) if in_month else [],
            ))
        weeks.append(row)
    return MonthGrid(year=year, month=month, weeks=weeks)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    _check_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


@dataclass
class AttendanceSummary:
    total_events: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    estimated_attendees: int
    actual_attendees: int
    attendance_rate: Optional[float]

    def to_dict(self) -> dict:
        return {
            "total_events": self.total_events,
            "by_status": self.by_status,
            "by_type": self.by_type,
            "estimated_attendees": self.estimated_attendees,
            "actual_attendees": self.actual_attendees,
            "attendance_rate": self.attendance_rate,
        }


def attendance_summary(events: Sequence[Event]) -> AttendanceSummary:
    """Counts per status/type and how held events compared to estimates.

    The rate only uses held events that have both an estimate and an actual
    count; it is None when there are none.
    """
    by_status = {status.value: 0 for status in EventStatus}
    by_type: dict[str, int] = defaultdict(int)
    estimated_total = 0
    actual_total = 0
    rate_estimated = 0
    rate_actual = 0

    for event in events:
        by_status[event.status] = by_status.get(event.status, 0) + 1
        by_type[event.type] += 1
        estimated_total += event.estimated_attendees or 0
        if event.status == EventStatus.HELD.value:
            actual_total += event.actual_attendees or 0
            if event.estimated_attendees and event.actual_attendees is not None:
                rate_estimated += event.estimated_attendees
                rate_actual += event.actual_attendees

    rate = round(rate_actual / rate_estimated, 4) if rate_estimated else None
    return AttendanceSummary(
        total_events=len(events),
        by_status=by_status,
        by_type=dict(by_type),
        estimated_attendees=estimated_total,
        actual_attendees=actual_total,
        attendance_rate=rate,
    )
