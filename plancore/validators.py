"""Pydantic models for caller payloads that become plan snapshots.

Payloads may use snake_case or the camelCase keys sent by the UI
(``sessionNumber``, ``manualMode``...). Telemetry numbers (distance, time,
reps) are accepted as-is; aggregation decides how malformed values count.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from plancore.config import get_settings
from plancore.models import (
    MANUAL_INPUT_TYPES,
    MOVELAP_ORIGINS,
    PLAN_TYPES,
    WORK_TYPES,
    Day,
    Movelap,
    Moveframe,
    Plan,
    Week,
    Workout,
    new_id,
)

WORKOUT_NAME_MAX_LENGTH = 40
WORKOUT_CODE_MAX_LENGTH = 5


class _Input(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class MovelapInput(_Input):
    id: Optional[str] = None
    index: Optional[int] = Field(default=None, ge=1)  # 1..N; omitted means list position
    distance: Any = None
    reps: Any = None
    time: Any = None
    pace: Optional[str] = None
    pause: Optional[str] = None
    speed_code: Optional[str] = None
    style: Optional[str] = None
    notes: Optional[str] = None
    status: str = "PENDING"
    is_disabled: bool = False
    origin: str = "NORMAL"

    @field_validator("origin")
    @classmethod
    def valid_origin(cls, v):
        v = (v or "NORMAL").upper()
        if v not in MOVELAP_ORIGINS:
            raise ValueError(f"origin must be one of {MOVELAP_ORIGINS}")
        return v

    def to_movelap(self, position: int = 1) -> Movelap:
        data = self.model_dump(exclude={"id", "index"})
        return Movelap(id=self.id or new_id(), index=self.index or position, **data)


class MoveframeInput(_Input):
    id: Optional[str] = None
    sport: str = Field(min_length=1, max_length=40)
    letter: str = ""
    work_type: Optional[str] = None
    manual_mode: bool = False
    manual_input_type: str = "meters"
    distance: Any = None
    repetitions: Any = None
    aerobic_series: Any = 1
    description: Optional[str] = None
    notes: Optional[str] = None
    section_id: Optional[str] = None
    movelaps: list[MovelapInput] = Field(default_factory=list)

    @field_validator("sport")
    @classmethod
    def normalize_sport(cls, v):
        return v.strip().upper().replace(" ", "_")

    @field_validator("work_type")
    @classmethod
    def valid_work_type(cls, v):
        if v in (None, ""):
            return None
        v = v.upper()
        if v not in WORK_TYPES:
            raise ValueError(f"work_type must be one of {WORK_TYPES}")
        return v

    @field_validator("manual_input_type")
    @classmethod
    def valid_manual_input_type(cls, v):
        v = (v or "meters").lower()
        if v not in MANUAL_INPUT_TYPES:
            raise ValueError(f"manual_input_type must be one of {MANUAL_INPUT_TYPES}")
        return v

    def to_moveframe(self) -> Moveframe:
        data = self.model_dump(exclude={"id", "movelaps"})
        return Moveframe(
            id=self.id or new_id(),
            movelaps=tuple(lap.to_movelap(i) for i, lap in enumerate(self.movelaps, start=1)),
            **data,
        )


class WorkoutInput(_Input):
    id: Optional[str] = None
    session_number: int = Field(default=0, ge=0)  # 0 until the day renumbers it
    name: Optional[str] = Field(default=None, max_length=WORKOUT_NAME_MAX_LENGTH)
    code: Optional[str] = Field(default=None, max_length=WORKOUT_CODE_MAX_LENGTH)
    status: str = "PLANNED"
    is_done: bool = False
    completion_rate: Any = 0
    is_different: bool = False
    section_id: Optional[str] = None
    notes: Optional[str] = None
    moveframes: list[MoveframeInput] = Field(default_factory=list)

    @field_validator("session_number")
    @classmethod
    def within_day_cap(cls, v):
        cap = get_settings().max_workouts_per_day
        if v > cap:
            raise ValueError(f"session_number must be at most {cap}")
        return v

    def to_workout(self) -> Workout:
        data = self.model_dump(exclude={"id", "moveframes"})
        return Workout(
            id=self.id or new_id(),
            moveframes=tuple(mf.to_moveframe() for mf in self.moveframes),
            **data,
        )


class DayInput(_Input):
    id: Optional[str] = None
    date: Optional[dt.date] = None
    weekday: Optional[int] = Field(default=None, ge=1, le=7)
    notes: Optional[str] = None
    period_id: Optional[str] = None
    workouts: list[WorkoutInput] = Field(default_factory=list)

    def to_day(self) -> Day:
        weekday = self.weekday
        if weekday is None and self.date is not None:
            weekday = self.date.isoweekday()
        return Day(
            id=self.id or new_id(),
            date=self.date,
            weekday=weekday,
            notes=self.notes,
            period_id=self.period_id,
            workouts=tuple(w.to_workout() for w in self.workouts),
        )


class WeekInput(_Input):
    id: Optional[str] = None
    week_number: int = Field(default=1, ge=1, le=53)
    days: list[DayInput] = Field(default_factory=list)

    def to_week(self) -> Week:
        return Week(id=self.id or new_id(), week_number=self.week_number, days=tuple(d.to_day() for d in self.days))


class PlanInput(_Input):
    id: Optional[str] = None
    plan_type: str = "YEARLY_PLAN"
    weeks: list[WeekInput] = Field(default_factory=list)

    @field_validator("plan_type")
    @classmethod
    def valid_plan_type(cls, v):
        v = v.upper()
        if v not in PLAN_TYPES:
            raise ValueError(f"plan_type must be one of {PLAN_TYPES}")
        return v

    def to_plan(self) -> Plan:
        return Plan(id=self.id or new_id(), plan_type=self.plan_type, weeks=tuple(w.to_week() for w in self.weeks))


def parse_plan(payload: dict[str, Any]) -> Plan:
    return PlanInput.model_validate(payload).to_plan()


def parse_day(payload: dict[str, Any]) -> Day:
    return DayInput.model_validate(payload).to_day()


def parse_workout(payload: dict[str, Any]) -> Workout:
    return WorkoutInput.model_validate(payload).to_workout()


def parse_moveframe(payload: dict[str, Any]) -> Moveframe:
    return MoveframeInput.model_validate(payload).to_moveframe()
