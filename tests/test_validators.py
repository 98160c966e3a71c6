"""Tests for Pydantic input validation models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from plancore.services.hierarchy import validate_plan
from plancore.services.sequencing import renumber_workouts
from plancore.validators import (
    DayInput,
    MovelapInput,
    MoveframeInput,
    WorkoutInput,
    parse_day,
    parse_moveframe,
    parse_plan,
    parse_workout,
)


# --- MoveframeInput ---

def test_moveframe_camel_case_payload():
    mf = parse_moveframe({"sport": "body building", "manualMode": True, "repetitions": 5, "workType": "main"})
    assert mf.sport == "BODY_BUILDING"
    assert mf.manual_mode is True
    assert mf.work_type == "MAIN"
    assert mf.id


def test_moveframe_snake_case_payload():
    mf = MoveframeInput(sport="SWIM", manual_input_type="TIME").to_moveframe()
    assert mf.manual_input_type == "time"


def test_moveframe_requires_sport():
    with pytest.raises(ValidationError):
        MoveframeInput(sport="")


def test_moveframe_unknown_work_type():
    with pytest.raises(ValidationError, match="work_type must be one of"):
        MoveframeInput(sport="RUN", work_type="bonus")


def test_moveframe_keeps_malformed_telemetry():
    mf = parse_moveframe({"sport": "SWIM", "movelaps": [{"distance": "abc", "time": "60"}]})
    assert mf.movelaps[0].distance == "abc"


# --- MovelapInput ---

def test_movelap_origin_normalised():
    assert MovelapInput(origin="paste").to_movelap().origin == "PASTE"


def test_movelap_unknown_origin():
    with pytest.raises(ValidationError):
        MovelapInput(origin="CLONE")


# --- WorkoutInput ---

def test_workout_name_too_long():
    with pytest.raises(ValidationError):
        WorkoutInput(name="x" * 41)


def test_workout_code_too_long():
    with pytest.raises(ValidationError):
        WorkoutInput(code="ABCDEF")


def test_workout_session_number_out_of_range():
    with pytest.raises(ValidationError):
        WorkoutInput(session_number=4)


def test_parse_workout_nested():
    workout = parse_workout({
        "sessionNumber": 1,
        "name": "Threshold swim",
        "isDone": True,
        "moveframes": [{"sport": "SWIM", "letter": "A", "movelaps": [{"index": 1, "distance": 100}]}],
    })
    assert workout.is_done is True
    assert workout.moveframes[0].movelaps[0].distance == 100
    assert isinstance(workout.moveframes, tuple)


# --- DayInput / PlanInput ---

def test_day_weekday_derived_from_date():
    day = parse_day({"date": "2026-03-04"})
    assert day.date == date(2026, 3, 4)
    assert day.weekday == 3


def test_day_weekday_out_of_range():
    with pytest.raises(ValidationError):
        DayInput(weekday=0)


def test_parse_plan_then_validate():
    plan = parse_plan({
        "planType": "yearly_plan",
        "weeks": [{"weekNumber": 1, "days": [{"date": "2026-03-02", "workouts": [{"name": "Easy"}, {"name": "Gym"}]}]}],
    })
    assert plan.plan_type == "YEARLY_PLAN"
    day = plan.weeks[0].days[0]
    assert validate_plan(plan)
    fixed = renumber_workouts(day)
    assert [w.session_number for w in fixed.workouts] == [1, 2]


def test_plan_unknown_type():
    with pytest.raises(ValidationError):
        parse_plan({"planType": "monthly"})


def test_movelap_index_is_one_based():
    with pytest.raises(ValidationError):
        MovelapInput(index=0)
    assert MovelapInput(index=4).to_movelap().index == 4


def test_omitted_movelap_indices_follow_position():
    mf = parse_moveframe({"sport": "RUN", "movelaps": [{"distance": 400}, {"distance": 400}, {"index": 7}]})
    assert [lap.index for lap in mf.movelaps] == [1, 2, 7]


def test_session_number_cap_follows_settings(monkeypatch):
    monkeypatch.setenv("MAX_WORKOUTS_PER_DAY", "5")
    assert WorkoutInput(session_number=5).session_number == 5
    with pytest.raises(ValidationError, match="session_number must be at most 5"):
        WorkoutInput(session_number=6)


def test_session_number_cap_can_shrink(monkeypatch):
    monkeypatch.setenv("MAX_WORKOUTS_PER_DAY", "2")
    with pytest.raises(ValidationError):
        parse_workout({"sessionNumber": 3})
