"""Sequencing engine: ordered children and the numbering derived from order.

Every structural change rewrites the ordering field of all siblings, so
workouts always carry session numbers 1..N, moveframes the letters A, B,
.., Z, AA, .. and movelaps the indices 1..N in display order. All
operations take an immutable parent and return a new one.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence, TypeVar

from plancore.config import Settings, get_settings
from plancore.errors import CapacityExceeded, DuplicateEntity, InvalidPermutation
from plancore.models import Day, Movelap, Moveframe, Week, Workout, find_day, find_moveframe, find_movelap, find_workout

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_base26_letters(index: int) -> str:
    """Map a zero-based position to its letter code: 0 -> A, 25 -> Z, 26 -> AA, 52 -> BA."""
    if index < 0:
        raise ValueError("index must be >= 0")
    n = index + 1
    out = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(ord("A") + rem) + out
    return out


def letters(count: int) -> list[str]:
    return [to_base26_letters(i) for i in range(count)]


# ---------------------------------------------------------------------------
# Generic list helpers
# ---------------------------------------------------------------------------

def _insert(children: Sequence[T], child: T, at_index: Optional[int]) -> list[T]:
    items = list(children)
    if any(c.id == child.id for c in items):
        raise DuplicateEntity(f"{type(child).__name__} {child.id} is already present")
    if at_index is None:
        items.append(child)
    else:
        items.insert(max(0, min(int(at_index), len(items))), child)
    return items


def _remove(children: Sequence[T], child_id: str) -> list[T]:
    return [c for c in children if c.id != child_id]


def _reorder(children: Sequence[T], ordered_ids: Sequence[str], kind: str) -> list[T]:
    by_id = {c.id: c for c in children}
    ids = list(ordered_ids)
    if len(ids) != len(by_id) or len(set(ids)) != len(ids) or set(ids) != set(by_id):
        logger.info("reorder_rejected", extra={"ctx_kind": kind, "ctx_expected": len(by_id), "ctx_given": len(ids)})
        raise InvalidPermutation(f"{kind} ids must be a permutation of the existing {len(by_id)} ids")
    return [by_id[i] for i in ids]


def _settings(settings: Optional[Settings]) -> Settings:
    return settings or get_settings()


# ---------------------------------------------------------------------------
# Renumbering (also usable as auto-repair after validation)
# ---------------------------------------------------------------------------

def renumber_workouts(day: Day, workouts: Optional[Sequence[Workout]] = None) -> Day:
    items = day.workouts if workouts is None else workouts
    numbered = tuple(
        w if w.session_number == i else replace(w, session_number=i)
        for i, w in enumerate(items, start=1)
    )
    return replace(day, workouts=numbered)


def reletter_moveframes(workout: Workout, moveframes: Optional[Sequence[Moveframe]] = None) -> Workout:
    items = workout.moveframes if moveframes is None else moveframes
    lettered = tuple(
        mf if mf.letter == to_base26_letters(i) else replace(mf, letter=to_base26_letters(i))
        for i, mf in enumerate(items)
    )
    return replace(workout, moveframes=lettered)


def reindex_movelaps(moveframe: Moveframe, movelaps: Optional[Sequence[Movelap]] = None) -> Moveframe:
    items = moveframe.movelaps if movelaps is None else movelaps
    indexed = tuple(
        lap if lap.index == i else replace(lap, index=i)
        for i, lap in enumerate(items, start=1)
    )
    return replace(moveframe, movelaps=indexed)


# ---------------------------------------------------------------------------
# Workouts within a day
# ---------------------------------------------------------------------------

def next_session_number(day: Day, settings: Optional[Settings] = None) -> Optional[int]:
    """Session number the next added workout would get, or None when the day is full."""
    count = len(day.workouts)
    return count + 1 if count < _settings(settings).max_workouts_per_day else None


def _check_day_capacity(day: Day, settings: Optional[Settings], incoming: int = 1) -> None:
    cap = _settings(settings).max_workouts_per_day
    if len(day.workouts) + incoming > cap:
        logger.info("day_capacity_exceeded", extra={"ctx_day_id": day.id, "ctx_cap": cap})
        raise CapacityExceeded(f"Maximum {cap} workouts per day allowed")


def insert_workout(day: Day, workout: Workout, at_index: Optional[int] = None, settings: Optional[Settings] = None) -> Day:
    _check_day_capacity(day, settings)
    return renumber_workouts(day, _insert(day.workouts, workout, at_index))


def remove_workout(day: Day, workout_id: str) -> Day:
    find_workout(day, workout_id)
    return renumber_workouts(day, _remove(day.workouts, workout_id))


def reorder_workouts(day: Day, ordered_ids: Sequence[str]) -> Day:
    return renumber_workouts(day, _reorder(day.workouts, ordered_ids, "Workout"))


def move_workout(
    source_day: Day,
    target_day: Day,
    workout_id: str,
    at_index: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> tuple[Day, Day]:
    """Move a workout to another day (or another slot of the same day).

    Returns ``(new_source_day, new_target_day)``; both are the same object
    when source and target are the same day.
    """
    workout = find_workout(source_day, workout_id)
    if source_day.id == target_day.id:
        remaining = _remove(source_day.workouts, workout_id)
        moved = renumber_workouts(source_day, _insert(remaining, workout, at_index))
        return moved, moved
    _check_day_capacity(target_day, settings)
    new_source = remove_workout(source_day, workout_id)
    new_target = insert_workout(target_day, workout, at_index, settings)
    return new_source, new_target


def switch_workouts(day_a: Day, workout_a_id: str, day_b: Day, workout_b_id: str) -> tuple[Day, Day]:
    """Swap two workouts; each takes the other's slot and session number."""
    workout_a = find_workout(day_a, workout_a_id)
    workout_b = find_workout(day_b, workout_b_id)
    if day_a.id == day_b.id:
        swapped = [
            workout_b if w.id == workout_a_id else workout_a if w.id == workout_b_id else w
            for w in day_a.workouts
        ]
        new_day = renumber_workouts(day_a, swapped)
        return new_day, new_day
    new_a = renumber_workouts(day_a, [workout_b if w.id == workout_a_id else w for w in day_a.workouts])
    new_b = renumber_workouts(day_b, [workout_a if w.id == workout_b_id else w for w in day_b.workouts])
    return new_a, new_b


# ---------------------------------------------------------------------------
# Moveframes within a workout
# ---------------------------------------------------------------------------

def insert_moveframe(workout: Workout, moveframe: Moveframe, at_index: Optional[int] = None) -> Workout:
    return reletter_moveframes(workout, _insert(workout.moveframes, moveframe, at_index))


def remove_moveframe(workout: Workout, moveframe_id: str) -> Workout:
    find_moveframe(workout, moveframe_id)
    return reletter_moveframes(workout, _remove(workout.moveframes, moveframe_id))


def reorder_moveframes(workout: Workout, ordered_ids: Sequence[str]) -> Workout:
    return reletter_moveframes(workout, _reorder(workout.moveframes, ordered_ids, "Moveframe"))


def move_moveframe(
    source_workout: Workout,
    target_workout: Workout,
    moveframe_id: str,
    at_index: Optional[int] = None,
) -> tuple[Workout, Workout]:
    moveframe = find_moveframe(source_workout, moveframe_id)
    if source_workout.id == target_workout.id:
        remaining = _remove(source_workout.moveframes, moveframe_id)
        moved = reletter_moveframes(source_workout, _insert(remaining, moveframe, at_index))
        return moved, moved
    new_source = remove_moveframe(source_workout, moveframe_id)
    new_target = insert_moveframe(target_workout, moveframe, at_index)
    return new_source, new_target


# ---------------------------------------------------------------------------
# Movelaps within a moveframe
# ---------------------------------------------------------------------------

def insert_movelap(moveframe: Moveframe, movelap: Movelap, at_index: Optional[int] = None) -> Moveframe:
    return reindex_movelaps(moveframe, _insert(moveframe.movelaps, movelap, at_index))


def remove_movelap(moveframe: Moveframe, movelap_id: str) -> Moveframe:
    find_movelap(moveframe, movelap_id)
    return reindex_movelaps(moveframe, _remove(moveframe.movelaps, movelap_id))


def reorder_movelaps(moveframe: Moveframe, ordered_ids: Sequence[str]) -> Moveframe:
    return reindex_movelaps(moveframe, _reorder(moveframe.movelaps, ordered_ids, "Movelap"))


# ---------------------------------------------------------------------------
# Days within a week
# ---------------------------------------------------------------------------

def _day_sort_key(day: Day) -> tuple[int, int]:
    if day.date is not None:
        return (0, day.date.toordinal())
    if day.weekday is not None:
        return (1, int(day.weekday))
    return (2, 0)


def insert_day(week: Week, day: Day, settings: Optional[Settings] = None) -> Week:
    """Add a day to a week, keeping days ordered by date (or weekday slot)."""
    cap = _settings(settings).max_days_per_week
    if len(week.days) >= cap:
        logger.info("week_capacity_exceeded", extra={"ctx_week_id": week.id, "ctx_cap": cap})
        raise CapacityExceeded(f"Maximum {cap} days per week allowed")
    if day.slot is not None and any(d.slot == day.slot for d in week.days):
        logger.info("day_slot_occupied", extra={"ctx_week_id": week.id, "ctx_slot": day.slot})
        raise CapacityExceeded(f"A workout day already exists on {day.slot}")
    days = _insert(week.days, day, None)
    return replace(week, days=tuple(sorted(days, key=_day_sort_key)))


def remove_day(week: Week, day_id: str) -> Week:
    find_day(week, day_id)
    return replace(week, days=tuple(_remove(week.days, day_id)))


def replace_day(week: Week, day: Day) -> Week:
    find_day(week, day.id)
    return replace(week, days=tuple(day if d.id == day.id else d for d in week.days))


def replace_workout(day: Day, workout: Workout) -> Day:
    find_workout(day, workout.id)
    return replace(day, workouts=tuple(workout if w.id == workout.id else w for w in day.workouts))


def replace_moveframe(workout: Workout, moveframe: Moveframe) -> Workout:
    find_moveframe(workout, moveframe.id)
    return replace(workout, moveframes=tuple(moveframe if m.id == moveframe.id else m for m in workout.moveframes))
