from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from attendance.aggregator import DayAggregate, HoursAggregator, week_bounds
from attendance.ingestion import Clock, utc_now
from attendance.projector import PunchState, StateProjector


@dataclass(frozen=True)
class Timesheet:
    state: PunchState
    hours_today: float
    hours_this_week: float
    break_time_today: float
    # Most recent date first.
    weekly_timesheet: List[DayAggregate]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "isPunchedIn": self.state.is_punched_in,
            "isOnBreak": self.state.is_on_break,
        }
        for key, value in (
            ("lastPunchIn", self.state.last_punch_in),
            ("lastPunchOut", self.state.last_punch_out),
            ("lastBreakStart", self.state.last_break_start),
            ("lastBreakEnd", self.state.last_break_end),
        ):
            if value is not None:
                data[key] = value.isoformat()
        data.update(
            hoursToday=self.hours_today,
            hoursThisWeek=self.hours_this_week,
            breakTimeToday=self.break_time_today,
            weeklyTimesheet=[
                {
                    "date": day.date.isoformat(),
                    "hoursWorked": day.worked_hours,
                    "breakTime": day.break_hours,
                }
                for day in self.weekly_timesheet
            ],
        )
        return data


@dataclass(frozen=True)
class RangeReport:
    subject_id: str
    start: date
    end: date
    total_worked_hours: float
    total_break_hours: float
    days: List[DayAggregate]


class TimesheetAssembler:
    def __init__(
        self,
        projector: StateProjector,
        aggregator: HoursAggregator,
        first_weekday: int = 6,
        clock: Clock = utc_now,
    ) -> None:
        self.projector = projector
        self.aggregator = aggregator
        self.first_weekday = first_weekday
        self.clock = clock

    def assemble(self, subject_id: str, now: Optional[datetime] = None) -> Timesheet:
        now = now or self.clock()
        today = now.astimezone(self.aggregator.tz).date()
        week_start, week_end = week_bounds(today, self.first_weekday)

        state = self.projector.project(subject_id)
        days = self.aggregator.aggregate(subject_id, week_start, week_end)
        today_row = next(day for day in days if day.date == today)

        return Timesheet(
            state=state,
            hours_today=today_row.worked_hours,
            hours_this_week=sum(day.worked_hours for day in days),
            break_time_today=today_row.break_hours,
            weekly_timesheet=sorted(days, key=lambda day: day.date, reverse=True),
        )

    def assemble_range(self, subject_id: str, start: date, end: date) -> RangeReport:
        days = self.aggregator.aggregate(subject_id, start, end)
        return RangeReport(
            subject_id=subject_id,
            start=start,
            end=end,
            total_worked_hours=sum(day.worked_hours for day in days),
            total_break_hours=sum(day.break_hours for day in days),
            days=sorted(days, key=lambda day: day.date, reverse=True),
        )
