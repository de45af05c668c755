# api/routes/timesheets.py
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_system, to_http_error
from api.models.schemas import DayEntry, RangeResponse
from core.errors import TimeclockError
from core.system import TimeclockSystem

router = APIRouter()


@router.get("/timesheets/{subject_id}", response_model=RangeResponse)
async def get_timesheet_range(
    subject_id: str,
    start: date = Query(..., description="First date of the window (inclusive)"),
    end: date = Query(..., description="Last date of the window (inclusive)"),
    system: TimeclockSystem = Depends(get_system),
) -> RangeResponse:
    """Per-day worked and break hours for administrator review."""
    try:
        report = system.get_range(subject_id, start, end)
    except TimeclockError as exc:
        raise to_http_error(exc)

    return RangeResponse(
        subject_id=report.subject_id,
        start=report.start,
        end=report.end,
        total_hours_worked=report.total_worked_hours,
        total_break_time=report.total_break_hours,
        days=[
            DayEntry(day=day.date, hours_worked=day.worked_hours, break_time=day.break_hours)
            for day in report.days
        ],
    )
