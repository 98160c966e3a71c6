"""Tests for ordering and numbering of workouts, moveframes, movelaps and days."""

from __future__ import annotations

import random
from datetime import date

import pytest

from plancore.config import Settings
from plancore.errors import CapacityExceeded, DuplicateEntity, InvalidPermutation, NotFound
from plancore.models import Day, Movelap, Moveframe, Week, Workout
from plancore.services.sequencing import (
    insert_day,
    insert_movelap,
    insert_moveframe,
    insert_workout,
    letters,
    move_moveframe,
    move_workout,
    next_session_number,
    reindex_movelaps,
    reletter_moveframes,
    remove_day,
    remove_movelap,
    remove_moveframe,
    remove_workout,
    renumber_workouts,
    reorder_movelaps,
    reorder_moveframes,
    reorder_workouts,
    replace_workout,
    switch_workouts,
    to_base26_letters,
)

SETTINGS = Settings()


def _day(*workout_ids, day_id="d1", on=date(2026, 3, 2)):
    workouts = tuple(Workout(id=w, session_number=i) for i, w in enumerate(workout_ids, start=1))
    return Day(id=day_id, date=on, workouts=workouts)


def _workout(n_moveframes=0, workout_id="w1"):
    moveframes = tuple(Moveframe(id=f"mf{i}", sport="SWIM") for i in range(n_moveframes))
    return reletter_moveframes(Workout(id=workout_id, moveframes=moveframes))


def _ids(items):
    return [i.id for i in items]


# --- letter codes ---

@pytest.mark.parametrize("index,expected", [(0, "A"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")])
def test_to_base26_letters(index, expected):
    assert to_base26_letters(index) == expected


def test_to_base26_letters_negative():
    with pytest.raises(ValueError):
        to_base26_letters(-1)


def test_letters_sequence():
    assert letters(3) == ["A", "B", "C"]
    assert letters(0) == []


# --- workouts ---

def test_insert_workout_at_front_renumbers():
    day = _day("old1", "old2")
    result = insert_workout(day, Workout(id="new"), at_index=0, settings=SETTINGS)
    assert _ids(result.workouts) == ["new", "old1", "old2"]
    assert [w.session_number for w in result.workouts] == [1, 2, 3]


def test_insert_workout_appends_by_default():
    result = insert_workout(_day("a"), Workout(id="b"), settings=SETTINGS)
    assert _ids(result.workouts) == ["a", "b"]
    assert result.workouts[1].session_number == 2


def test_insert_workout_over_cap():
    day = _day("a", "b", "c")
    with pytest.raises(CapacityExceeded, match="Maximum 3 workouts per day allowed"):
        insert_workout(day, Workout(id="d"), settings=SETTINGS)


def test_insert_workout_respects_configured_cap():
    day = _day("a", "b", "c")
    result = insert_workout(day, Workout(id="d"), settings=Settings(max_workouts_per_day=4))
    assert len(result.workouts) == 4


def test_insert_workout_duplicate_id():
    with pytest.raises(DuplicateEntity):
        insert_workout(_day("a"), Workout(id="a"), settings=SETTINGS)


def test_insert_leaves_input_day_untouched():
    day = _day("a")
    insert_workout(day, Workout(id="b"), settings=SETTINGS)
    assert _ids(day.workouts) == ["a"]


def test_insert_workout_index_clamped():
    result = insert_workout(_day("a"), Workout(id="b"), at_index=99, settings=SETTINGS)
    assert _ids(result.workouts) == ["a", "b"]


def test_remove_workout_closes_gap():
    result = remove_workout(_day("a", "b", "c"), "a")
    assert _ids(result.workouts) == ["b", "c"]
    assert [w.session_number for w in result.workouts] == [1, 2]


def test_remove_missing_workout():
    with pytest.raises(NotFound):
        remove_workout(_day("a"), "zzz")


def test_reorder_workouts():
    result = reorder_workouts(_day("a", "b", "c"), ["c", "a", "b"])
    assert _ids(result.workouts) == ["c", "a", "b"]
    assert [w.session_number for w in result.workouts] == [1, 2, 3]


@pytest.mark.parametrize("ordered", [["a", "b"], ["a", "b", "b"], ["a", "b", "x"], ["a", "b", "c", "d"]])
def test_reorder_workouts_not_a_permutation(ordered):
    day = _day("a", "b", "c")
    with pytest.raises(InvalidPermutation):
        reorder_workouts(day, ordered)


def test_next_session_number():
    assert next_session_number(_day(), SETTINGS) == 1
    assert next_session_number(_day("a", "b"), SETTINGS) == 3
    assert next_session_number(_day("a", "b", "c"), SETTINGS) is None


def test_move_workout_between_days():
    source = _day("a", "b", day_id="d1")
    target = _day("c", day_id="d2")
    new_source, new_target = move_workout(source, target, "a", at_index=0, settings=SETTINGS)
    assert _ids(new_source.workouts) == ["b"]
    assert new_source.workouts[0].session_number == 1
    assert _ids(new_target.workouts) == ["a", "c"]
    assert [w.session_number for w in new_target.workouts] == [1, 2]


def test_move_workout_target_full():
    source = _day("a", day_id="d1")
    target = _day("b", "c", "d", day_id="d2")
    with pytest.raises(CapacityExceeded):
        move_workout(source, target, "a", settings=SETTINGS)


def test_move_workout_within_full_day():
    day = _day("a", "b", "c")
    moved, same = move_workout(day, day, "c", at_index=0, settings=SETTINGS)
    assert moved is same
    assert _ids(moved.workouts) == ["c", "a", "b"]


def test_switch_workouts_across_days():
    day_a = _day("a1", "a2", day_id="da")
    day_b = _day("b1", day_id="db")
    new_a, new_b = switch_workouts(day_a, "a2", day_b, "b1")
    assert _ids(new_a.workouts) == ["a1", "b1"]
    assert new_a.workouts[1].session_number == 2
    assert _ids(new_b.workouts) == ["a2"]
    assert new_b.workouts[0].session_number == 1


def test_switch_workouts_same_day():
    day = _day("a", "b", "c")
    new_day, _ = switch_workouts(day, "a", day, "c")
    assert _ids(new_day.workouts) == ["c", "b", "a"]


def test_replace_workout_keeps_position():
    day = _day("a", "b")
    renamed = Workout(id="b", session_number=2, name="Tempo")
    result = replace_workout(day, renamed)
    assert result.workouts[1].name == "Tempo"


def test_renumber_repairs_gaps():
    day = Day(id="d", workouts=(Workout(id="a", session_number=3), Workout(id="b", session_number=7)))
    assert [w.session_number for w in renumber_workouts(day).workouts] == [1, 2]


# --- moveframes ---

def test_twenty_seventh_moveframe_gets_aa():
    workout = _workout(26)
    result = insert_moveframe(workout, Moveframe(id="new", sport="RUN"))
    assert result.moveframes[-1].letter == "AA"
    assert result.moveframes[25].letter == "Z"


def test_insert_moveframe_at_front_reletters():
    result = insert_moveframe(_workout(2), Moveframe(id="new", sport="RUN"), at_index=0)
    assert [mf.letter for mf in result.moveframes] == ["A", "B", "C"]
    assert result.moveframes[0].id == "new"


def test_remove_moveframe_reletters():
    result = remove_moveframe(_workout(3), "mf0")
    assert [(mf.id, mf.letter) for mf in result.moveframes] == [("mf1", "A"), ("mf2", "B")]


def test_reorder_moveframes():
    result = reorder_moveframes(_workout(3), ["mf2", "mf0", "mf1"])
    assert [(mf.id, mf.letter) for mf in result.moveframes] == [("mf2", "A"), ("mf0", "B"), ("mf1", "C")]


def test_move_moveframe_between_workouts():
    source = _workout(2, workout_id="w1")
    target = _workout(0, workout_id="w2")
    new_source, new_target = move_moveframe(source, target, "mf1")
    assert [(mf.id, mf.letter) for mf in new_source.moveframes] == [("mf0", "A")]
    assert [(mf.id, mf.letter) for mf in new_target.moveframes] == [("mf1", "A")]


# --- movelaps ---

def test_movelap_indices_follow_order():
    mf = reindex_movelaps(Moveframe(id="mf", sport="SWIM", movelaps=(Movelap(id="l1"), Movelap(id="l2"))))
    assert [lap.index for lap in mf.movelaps] == [1, 2]
    mf = insert_movelap(mf, Movelap(id="l0"), at_index=0)
    assert [(lap.id, lap.index) for lap in mf.movelaps] == [("l0", 1), ("l1", 2), ("l2", 3)]
    mf = remove_movelap(mf, "l1")
    assert [(lap.id, lap.index) for lap in mf.movelaps] == [("l0", 1), ("l2", 2)]
    mf = reorder_movelaps(mf, ["l2", "l0"])
    assert [(lap.id, lap.index) for lap in mf.movelaps] == [("l2", 1), ("l0", 2)]


def test_reorder_movelaps_rejects_partial_list():
    mf = reindex_movelaps(Moveframe(id="mf", sport="SWIM", movelaps=(Movelap(id="l1"), Movelap(id="l2"))))
    with pytest.raises(InvalidPermutation):
        reorder_movelaps(mf, ["l1"])


# --- days ---

def test_insert_day_keeps_date_order():
    week = Week(id="wk", days=(Day(id="tue", date=date(2026, 3, 3)),))
    week = insert_day(week, Day(id="mon", date=date(2026, 3, 2)), SETTINGS)
    assert _ids(week.days) == ["mon", "tue"]


def test_insert_day_slot_occupied():
    week = Week(id="wk", days=(Day(id="a", date=date(2026, 3, 3)),))
    with pytest.raises(CapacityExceeded):
        insert_day(week, Day(id="b", date=date(2026, 3, 3)), SETTINGS)


def test_insert_day_week_full():
    week = Week(id="wk", days=tuple(Day(id=f"d{i}", weekday=i) for i in range(1, 8)))
    with pytest.raises(CapacityExceeded, match="Maximum 7 days per week allowed"):
        insert_day(week, Day(id="extra"), SETTINGS)


def test_remove_day():
    week = Week(id="wk", days=(Day(id="a", weekday=1), Day(id="b", weekday=2)))
    assert _ids(remove_day(week, "a").days) == ["b"]


# --- numbering holds across arbitrary edit sequences ---

@pytest.mark.parametrize("seed", range(8))
def test_session_numbers_stay_contiguous(seed):
    rng = random.Random(seed)
    settings = Settings(max_workouts_per_day=6)
    day = _day()
    for step in range(60):
        ids = _ids(day.workouts)
        action = rng.choice(("insert", "remove", "reorder"))
        if action == "insert" and len(ids) < settings.max_workouts_per_day:
            day = insert_workout(day, Workout(id=f"w{step}"), at_index=rng.randint(0, len(ids)), settings=settings)
        elif action == "remove" and ids:
            day = remove_workout(day, rng.choice(ids))
        elif action == "reorder" and ids:
            rng.shuffle(ids)
            day = reorder_workouts(day, ids)
        assert [w.session_number for w in day.workouts] == list(range(1, len(day.workouts) + 1))


@pytest.mark.parametrize("seed", range(8))
def test_moveframe_letters_stay_contiguous(seed):
    rng = random.Random(seed)
    workout = _workout(0)
    for step in range(120):
        ids = _ids(workout.moveframes)
        action = rng.choice(("insert", "insert", "remove", "reorder"))
        if action == "insert":
            workout = insert_moveframe(workout, Moveframe(id=f"m{step}", sport="RUN"), at_index=rng.randint(0, len(ids)))
        elif action == "remove" and ids:
            workout = remove_moveframe(workout, rng.choice(ids))
        elif action == "reorder" and ids:
            rng.shuffle(ids)
            workout = reorder_moveframes(workout, ids)
        assert [mf.letter for mf in workout.moveframes] == letters(len(workout.moveframes))
