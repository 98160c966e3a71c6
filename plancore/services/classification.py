from __future__ import annotations

from enum import Enum

from plancore.models import Plan


class ColorTier(str, Enum):
    RED = "red"
    LIGHT_GREY = "light-grey"
    LIGHT_YELLOW = "light-yellow"
    YELLOW = "yellow"
    LIGHT_GREEN = "light-green"
    GREEN = "green"
    DARK_GREEN = "dark-green"
    BLUE = "blue"


# Index = number of workouts with moveframes; the last tier covers 7 and more.
_TIERS = (
    ColorTier.RED,
    ColorTier.LIGHT_GREY,
    ColorTier.LIGHT_YELLOW,
    ColorTier.YELLOW,
    ColorTier.LIGHT_GREEN,
    ColorTier.GREEN,
    ColorTier.DARK_GREEN,
    ColorTier.BLUE,
)

TIER_HEX = {
    ColorTier.RED: "#EF4444",
    ColorTier.LIGHT_GREY: "#D1D5DB",
    ColorTier.LIGHT_YELLOW: "#FDE047",
    ColorTier.YELLOW: "#FACC15",
    ColorTier.LIGHT_GREEN: "#86EFAC",
    ColorTier.GREEN: "#22C55E",
    ColorTier.DARK_GREEN: "#15803D",
    ColorTier.BLUE: "#3B82F6",
}


def count_workouts_with_moveframes(plan: Plan) -> int:
    """Distinct workouts (by id) across all weeks holding at least one moveframe."""
    return len({w.id for w in plan.iter_workouts() if w.moveframes})


def tier_for_count(count: int) -> ColorTier:
    return _TIERS[max(0, min(count, len(_TIERS) - 1))]


def classify_plan_density(plan: Plan) -> ColorTier:
    return tier_for_count(count_workouts_with_moveframes(plan))


def plan_density_label(plan: Plan) -> str:
    count = count_workouts_with_moveframes(plan)
    return f"{count} workout{'' if count == 1 else 's'} with moveframes"
