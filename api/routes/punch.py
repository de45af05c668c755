# api/routes/punch.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_subject_id, get_system, to_http_error
from api.models.schemas import BreakRequest, PunchRequest, TimesheetResponse
from core.errors import TimeclockError
from core.system import TimeclockSystem

router = APIRouter(prefix="/user")


@router.post("/punch", response_model=TimesheetResponse, response_model_exclude_none=True)
async def record_punch(
    request: PunchRequest,
    subject_id: str = Depends(get_subject_id),
    system: TimeclockSystem = Depends(get_system),
) -> TimesheetResponse:
    try:
        timesheet = system.record_punch(subject_id, request.action)
    except TimeclockError as exc:
        raise to_http_error(exc)
    return TimesheetResponse.model_validate(timesheet.to_dict())


@router.post("/break", response_model=TimesheetResponse, response_model_exclude_none=True)
async def record_break(
    request: BreakRequest,
    subject_id: str = Depends(get_subject_id),
    system: TimeclockSystem = Depends(get_system),
) -> TimesheetResponse:
    try:
        timesheet = system.record_break(subject_id, request.action)
    except TimeclockError as exc:
        raise to_http_error(exc)
    return TimesheetResponse.model_validate(timesheet.to_dict())


@router.get("/punch-state", response_model=TimesheetResponse, response_model_exclude_none=True)
async def get_punch_state(
    subject_id: str = Depends(get_subject_id),
    system: TimeclockSystem = Depends(get_system),
) -> TimesheetResponse:
    try:
        timesheet = system.get_state(subject_id)
    except TimeclockError as exc:
        raise to_http_error(exc)
    return TimesheetResponse.model_validate(timesheet.to_dict())
