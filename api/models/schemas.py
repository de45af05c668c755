# api/models/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FaceAuthRequest(CamelModel):
    face_descriptor: List[float] = Field(..., alias="faceDescriptor")


class FaceAuthResponse(CamelModel):
    subject_id: str = Field(..., alias="subjectId")
    role: str
    name: Optional[str] = None


class RegisterRequest(CamelModel):
    subject_id: str = Field(..., alias="subjectId", min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    face_descriptor: List[float] = Field(..., alias="faceDescriptor")


class RegisterResponse(CamelModel):
    subject_id: str = Field(..., alias="subjectId")
    name: Optional[str] = None
    email: Optional[str] = None


class PunchRequest(BaseModel):
    action: str


class BreakRequest(BaseModel):
    action: str


class DayEntry(CamelModel):
    day: date = Field(..., alias="date")
    hours_worked: float = Field(..., ge=0, alias="hoursWorked")
    break_time: float = Field(..., ge=0, alias="breakTime")


class TimesheetResponse(CamelModel):
    is_punched_in: bool = Field(..., alias="isPunchedIn")
    is_on_break: bool = Field(..., alias="isOnBreak")
    last_punch_in: Optional[datetime] = Field(None, alias="lastPunchIn")
    last_punch_out: Optional[datetime] = Field(None, alias="lastPunchOut")
    last_break_start: Optional[datetime] = Field(None, alias="lastBreakStart")
    last_break_end: Optional[datetime] = Field(None, alias="lastBreakEnd")
    hours_today: float = Field(..., ge=0, alias="hoursToday")
    hours_this_week: float = Field(..., ge=0, alias="hoursThisWeek")
    break_time_today: float = Field(..., ge=0, alias="breakTimeToday")
    weekly_timesheet: List[DayEntry] = Field(..., alias="weeklyTimesheet")


class RangeResponse(CamelModel):
    subject_id: str = Field(..., alias="subjectId")
    start: date
    end: date
    total_hours_worked: float = Field(..., ge=0, alias="totalHoursWorked")
    total_break_time: float = Field(..., ge=0, alias="totalBreakTime")
    days: List[DayEntry]


class Announcement(BaseModel):
    id: str
    type: str
    message: str
    timestamp: datetime


class HealthResponse(CamelModel):
    status: str
    uptime_seconds: float
    storage_backend: str
    enrolled_identities: int
