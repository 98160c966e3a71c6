"""Tests for plan density colour tiers."""

from __future__ import annotations

import pytest

from plancore.models import Day, Moveframe, Plan, Week, Workout
from plancore.services.classification import (
    TIER_HEX,
    ColorTier,
    classify_plan_density,
    count_workouts_with_moveframes,
    plan_density_label,
    tier_for_count,
)


def _plan(n_with, n_without=0):
    workouts = [Workout(id=f"w{i}", moveframes=(Moveframe(id=f"mf{i}", sport="RUN"),)) for i in range(n_with)]
    workouts += [Workout(id=f"empty{i}") for i in range(n_without)]
    days = tuple(Day(id=f"d{i}", weekday=(i % 7) + 1, workouts=(w,)) for i, w in enumerate(workouts))
    return Plan(id="p", weeks=(Week(id="wk", days=days),))


@pytest.mark.parametrize(
    "count,tier",
    [
        (0, ColorTier.RED),
        (1, ColorTier.LIGHT_GREY),
        (2, ColorTier.LIGHT_YELLOW),
        (3, ColorTier.YELLOW),
        (4, ColorTier.LIGHT_GREEN),
        (5, ColorTier.GREEN),
        (6, ColorTier.DARK_GREEN),
        (7, ColorTier.BLUE),
        (12, ColorTier.BLUE),
    ],
)
def test_tier_for_count(count, tier):
    assert tier_for_count(count) is tier


def test_empty_workouts_do_not_count():
    plan = _plan(2, n_without=3)
    assert count_workouts_with_moveframes(plan) == 2
    assert classify_plan_density(plan) is ColorTier.LIGHT_YELLOW


def test_empty_plan_is_red():
    assert classify_plan_density(Plan(id="p")) is ColorTier.RED


def test_shared_workout_counted_once():
    workout = Workout(id="w", moveframes=(Moveframe(id="mf", sport="RUN"),))
    plan = Plan(
        id="p",
        weeks=(
            Week(id="a", days=(Day(id="d1", weekday=1, workouts=(workout,)),)),
            Week(id="b", days=(Day(id="d2", weekday=1, workouts=(workout,)),)),
        ),
    )
    assert count_workouts_with_moveframes(plan) == 1


def test_density_label():
    assert plan_density_label(_plan(1)) == "1 workout with moveframes"
    assert plan_density_label(_plan(4)) == "4 workouts with moveframes"


def test_every_tier_has_a_colour():
    assert set(TIER_HEX) == set(ColorTier)
    assert ColorTier.DARK_GREEN.value == "dark-green"
