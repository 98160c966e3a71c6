"""Plan hierarchy snapshots: Plan > Week > Day > Workout > Moveframe > Movelap.

Entities are frozen; every structural change produces new instances via
``dataclasses.replace`` and the caller owns persistence of the result.
"""

from __future__ import annotations

import datetime as dt
import math
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Union

from plancore.errors import NotFound

PLAN_TYPES = ("TEMPLATE_WEEKS", "YEARLY_PLAN", "WORKOUTS_DONE", "ARCHIVE")
WORK_TYPES = ("MAIN", "SECONDARY")
MANUAL_INPUT_TYPES = ("meters", "time")
MOVELAP_ORIGINS = ("NORMAL", "DUPLICATE", "NEW", "PASTE")


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Movelap:
    id: str
    index: int = 0
    distance: Any = None  # meters
    reps: Any = None
    time: Any = None  # seconds, fractional allowed
    pace: Optional[str] = None
    pause: Optional[str] = None
    speed_code: Optional[str] = None
    style: Optional[str] = None
    notes: Optional[str] = None
    status: str = "PENDING"
    is_disabled: bool = False
    origin: str = "NORMAL"


@dataclass(frozen=True)
class Moveframe:
    id: str
    sport: str
    letter: str = ""
    work_type: Optional[str] = None
    manual_mode: bool = False
    manual_input_type: str = "meters"  # manual scalar: meters or deciseconds
    distance: Any = None
    repetitions: Any = None
    aerobic_series: Any = 1
    description: Optional[str] = None
    notes: Optional[str] = None
    section_id: Optional[str] = None
    movelaps: tuple[Movelap, ...] = ()

    @property
    def total_distance(self) -> float:
        if self.manual_mode:
            return _number(self.distance)
        return sum(_number(lap.distance) for lap in self.movelaps)

    @property
    def total_reps(self) -> float:
        if self.manual_mode:
            return _number(self.repetitions)
        return sum(_number(lap.reps) for lap in self.movelaps)


@dataclass(frozen=True)
class Workout:
    id: str
    session_number: int = 0
    name: Optional[str] = None
    code: Optional[str] = None
    status: str = "PLANNED"
    is_done: bool = False
    completion_rate: Any = 0
    is_different: bool = False
    section_id: Optional[str] = None
    notes: Optional[str] = None
    moveframes: tuple[Moveframe, ...] = ()


@dataclass(frozen=True)
class Day:
    id: str
    date: Optional[dt.date] = None  # None in template mode
    weekday: Optional[int] = None  # 1 = Monday .. 7 = Sunday
    notes: Optional[str] = None
    period_id: Optional[str] = None
    workouts: tuple[Workout, ...] = ()

    @property
    def slot(self) -> Union[dt.date, int, None]:
        """Position of the day inside its week: the date, or the weekday in template mode."""
        return self.date if self.date is not None else self.weekday


@dataclass(frozen=True)
class Week:
    id: str
    week_number: int = 1
    days: tuple[Day, ...] = ()


@dataclass(frozen=True)
class Plan:
    id: str
    plan_type: str = "YEARLY_PLAN"
    weeks: tuple[Week, ...] = ()

    def iter_days(self):
        for week in self.weeks:
            yield from week.days

    def iter_workouts(self):
        for day in self.iter_days():
            yield from day.workouts


def parse_number(value: Any) -> Optional[float]:
    """Parse a loosely typed numeric field. Blank is 0.0, malformed is None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _number(value: Any) -> float:
    return parse_number(value) or 0.0


def _find(children, child_id: str, kind: str):
    for child in children:
        if child.id == child_id:
            return child
    raise NotFound(f"{kind} {child_id} not found")


def find_day(week: Week, day_id: str) -> Day:
    return _find(week.days, day_id, "Day")


def find_workout(day: Day, workout_id: str) -> Workout:
    return _find(day.workouts, workout_id, "Workout")


def find_moveframe(workout: Workout, moveframe_id: str) -> Moveframe:
    return _find(workout.moveframes, moveframe_id, "Moveframe")


def find_movelap(moveframe: Moveframe, movelap_id: str) -> Movelap:
    return _find(moveframe.movelaps, movelap_id, "Movelap")
