"""Structural validation of plan snapshots.

Validators collect every violation instead of stopping at the first, so a
caller can choose between rejecting the snapshot and repairing it with the
sequencing helpers (``renumber_workouts``, ``reletter_moveframes``,
``reindex_movelaps``).
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Union

from plancore.config import Settings, get_settings
from plancore.models import Day, Moveframe, Plan, Week, Workout
from plancore.services.sequencing import letters


def _duplicates(ids: Iterable[str]) -> list[str]:
    return sorted(i for i, n in Counter(ids).items() if n > 1)


def _subtree_ids(node) -> Iterable[str]:
    yield node.id
    for attr in ("weeks", "days", "workouts", "moveframes", "movelaps"):
        for child in getattr(node, attr, ()):
            yield from _subtree_ids(child)


def validate_moveframe(moveframe: Moveframe) -> list[str]:
    errors: list[str] = []
    where = f"Moveframe {moveframe.id}"
    if not moveframe.sport:
        errors.append(f"{where}: sport is required")
    if moveframe.work_type not in (None, "", "MAIN", "SECONDARY"):
        errors.append(f"{where}: unknown work type {moveframe.work_type!r}")
    if moveframe.manual_mode and moveframe.movelaps:
        errors.append(f"{where}: manual mode moveframe must not carry movelaps")
    if moveframe.manual_input_type not in ("meters", "time"):
        errors.append(f"{where}: unknown manual input type {moveframe.manual_input_type!r}")

    indices = [lap.index for lap in moveframe.movelaps]
    expected = list(range(1, len(indices) + 1))
    if indices != expected:
        errors.append(f"{where}: movelap indices {indices} should be {expected}")
    for dup in _duplicates(lap.id for lap in moveframe.movelaps):
        errors.append(f"{where}: movelap id {dup} appears more than once")
    return errors


def validate_workout(workout: Workout) -> list[str]:
    errors: list[str] = []
    where = f"Workout {workout.id}"
    found = [mf.letter for mf in workout.moveframes]
    expected = letters(len(found))
    if found != expected:
        errors.append(f"{where}: moveframe letters {found} should be {expected}")
    for dup in _duplicates(mf.id for mf in workout.moveframes):
        errors.append(f"{where}: moveframe id {dup} appears more than once")
    for mf in workout.moveframes:
        errors.extend(validate_moveframe(mf))
    return errors


def validate_day(day: Day, settings: Optional[Settings] = None) -> list[str]:
    cap = (settings or get_settings()).max_workouts_per_day
    errors: list[str] = []
    where = f"Day {day.id}"
    if len(day.workouts) > cap:
        errors.append(f"{where}: {len(day.workouts)} workouts exceed the maximum of {cap}")
    numbers = [w.session_number for w in day.workouts]
    expected = list(range(1, len(numbers) + 1))
    if numbers != expected:
        errors.append(f"{where}: session numbers {numbers} should be {expected}")
    if day.weekday is not None and not 1 <= int(day.weekday) <= 7:
        errors.append(f"{where}: weekday {day.weekday} outside 1..7")
    for dup in _duplicates(w.id for w in day.workouts):
        errors.append(f"{where}: workout id {dup} appears more than once")
    for workout in day.workouts:
        errors.extend(validate_workout(workout))
    return errors


def validate_week(week: Week, settings: Optional[Settings] = None) -> list[str]:
    settings = settings or get_settings()
    errors: list[str] = []
    where = f"Week {week.id}"
    if len(week.days) > settings.max_days_per_week:
        errors.append(f"{where}: {len(week.days)} days exceed the maximum of {settings.max_days_per_week}")
    slots = [str(d.slot) for d in week.days if d.slot is not None]
    for dup in _duplicates(slots):
        errors.append(f"{where}: more than one day on {dup}")
    for day in week.days:
        errors.extend(validate_day(day, settings))
    return errors


def validate_plan(plan: Plan, settings: Optional[Settings] = None) -> list[str]:
    settings = settings or get_settings()
    errors: list[str] = []
    for week in plan.weeks:
        errors.extend(validate_week(week, settings))
    for dup in _duplicates(_subtree_ids(plan)):
        errors.append(f"Plan {plan.id}: id {dup} is owned by more than one parent")
    return errors


def is_valid(node: Union[Plan, Week, Day, Workout, Moveframe], settings: Optional[Settings] = None) -> bool:
    if isinstance(node, Plan):
        return not validate_plan(node, settings)
    if isinstance(node, Week):
        return not validate_week(node, settings)
    if isinstance(node, Day):
        return not validate_day(node, settings)
    if isinstance(node, Workout):
        return not validate_workout(node)
    if isinstance(node, Moveframe):
        return not validate_moveframe(node)
    raise TypeError(f"Cannot validate {type(node).__name__}")
