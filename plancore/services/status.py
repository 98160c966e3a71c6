"""Workout status derived from the day's date and the completion record.

The tag drives the status colour shown on each workout slot; the tag to
colour table belongs to the presentation layer.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from enum import Enum
from typing import Any, Optional

from plancore.config import Settings, get_settings
from plancore.errors import InvalidValue
from plancore.models import Day, Workout, parse_number

SLOT_SYMBOLS = ("○", "□", "△")  # session 1, 2, 3


class StatusTag(str, Enum):
    DONE_DIFFERENT = "DONE_DIFFERENT"
    DONE_PARTIAL = "DONE_PARTIAL"
    DONE_FULL = "DONE_FULL"
    MISSED_PAST = "MISSED_PAST"
    PLANNED_CURRENT_WEEK = "PLANNED_CURRENT_WEEK"
    PLANNED_NEXT_WEEK = "PLANNED_NEXT_WEEK"
    PLANNED_FUTURE = "PLANNED_FUTURE"
    UNSCHEDULED = "UNSCHEDULED"  # template day without a date

    @property
    def is_done(self) -> bool:
        return self.value.startswith("DONE_")

    @property
    def is_planned(self) -> bool:
        return self.value.startswith("PLANNED_")


def days_between(day_date: date, today: date) -> int:
    """Whole days from today to the day's date; negative once the date has passed."""
    return (day_date - today).days


def _monday(d: date) -> date:
    return d - timedelta(days=d.weekday())


def is_done(workout: Workout) -> bool:
    return bool(workout.is_done) or str(workout.status or "").upper() == "COMPLETED"


def _done_status(workout: Workout, threshold: float) -> StatusTag:
    if workout.is_different:
        return StatusTag.DONE_DIFFERENT
    rate = parse_number(workout.completion_rate) or 0.0
    if rate < threshold:
        return StatusTag.DONE_PARTIAL
    return StatusTag.DONE_FULL


def _planned_status(day_date: date, today: date, settings: Settings) -> StatusTag:
    diff_days = days_between(day_date, today)
    if diff_days < 0:
        return StatusTag.MISSED_PAST
    if settings.calendar_weeks:
        week_offset = (_monday(day_date) - _monday(today)).days // 7
        if week_offset == 0:
            return StatusTag.PLANNED_CURRENT_WEEK
        if week_offset == 1:
            return StatusTag.PLANNED_NEXT_WEEK
        return StatusTag.PLANNED_FUTURE
    if diff_days <= settings.current_week_days:
        return StatusTag.PLANNED_CURRENT_WEEK
    if diff_days <= settings.next_week_days:
        return StatusTag.PLANNED_NEXT_WEEK
    return StatusTag.PLANNED_FUTURE


def derive_workout_status(
    workout: Workout,
    day: Day,
    today: date,
    settings: Optional[Settings] = None,
) -> StatusTag:
    """Classify a workout as done (different / partial / full), missed, or planned.

    Planned workouts are bucketed by distance from ``today``: with the
    default rolling alignment 0..7 days is the current week and 8..14 the
    next; with ``week_alignment="calendar"`` Monday-based weeks are used.
    """
    settings = settings or get_settings()
    if is_done(workout):
        return _done_status(workout, settings.done_full_threshold)
    if day.date is None:
        return StatusTag.UNSCHEDULED
    return _planned_status(day.date, today, settings)


def day_status_symbols(
    day: Day,
    today: date,
    settings: Optional[Settings] = None,
) -> list[dict[str, Any]]:
    """One entry per workout slot (○ □ △) with the slot's status, or None when empty."""
    settings = settings or get_settings()
    by_number = {w.session_number: w for w in day.workouts}
    out: list[dict[str, Any]] = []
    for number, symbol in enumerate(SLOT_SYMBOLS, start=1):
        workout = by_number.get(number)
        out.append(
            {
                "session_number": number,
                "symbol": symbol,
                "workout_id": workout.id if workout else None,
                "status": derive_workout_status(workout, day, today, settings) if workout else None,
            }
        )
    return out


def mark_done(
    workout: Workout,
    completion_rate: Any,
    as_different: bool = False,
    notes: Optional[str] = None,
) -> Workout:
    """Record a workout as completed with a completion percentage in 0..100."""
    if isinstance(completion_rate, bool) or not isinstance(completion_rate, (int, float)):
        raise InvalidValue("Invalid completion percentage")
    if not 0 <= completion_rate <= 100:
        raise InvalidValue("Invalid completion percentage")
    done = replace(
        workout,
        status="COMPLETED",
        is_done=True,
        is_different=bool(as_different),
        completion_rate=completion_rate,
    )
    if notes is not None:
        done = replace(done, notes=notes)
    return done
