"""Plan-level statistics: status counts, completion rate, sport and week breakdowns.

Also provides the week totals table (one row per day and sport) used by
the week summary view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

import pandas as pd

from plancore.config import Settings, get_settings
from plancore.models import Plan, Week
from plancore.services.aggregation import aggregate_day, aggregate_workout
from plancore.services.sports import SportTaxonomy
from plancore.services.status import StatusTag, derive_workout_status

WEEK_TOTALS_COLUMNS = [
    "day_id",
    "date",
    "weekday",
    "sport",
    "workouts",
    "moveframes",
    "distance_meters",
    "duration_deciseconds",
    "series",
    "repetitions",
]


@dataclass
class PlanStatistics:
    total: int = 0
    planned: int = 0
    done: int = 0
    done_different: int = 0
    done_partial: int = 0
    done_full: int = 0
    missed: int = 0
    unscheduled: int = 0
    completion_rate: int = 0
    by_sport: dict[str, dict[str, Any]] = field(default_factory=dict)
    by_week: dict[str, dict[str, int]] = field(default_factory=dict)


_DONE_COUNTERS = {
    StatusTag.DONE_DIFFERENT: "done_different",
    StatusTag.DONE_PARTIAL: "done_partial",
    StatusTag.DONE_FULL: "done_full",
}


def plan_statistics(
    plan: Plan,
    today: date,
    settings: Optional[Settings] = None,
    taxonomy: Optional[SportTaxonomy] = None,
) -> PlanStatistics:
    """Count workouts by derived status and summarise moveframes per sport and week.

    completion_rate is done / (planned + done) as a rounded percentage;
    missed and unscheduled workouts are left out of the denominator.
    """
    settings = settings or get_settings()
    stats = PlanStatistics()

    for week in plan.weeks:
        week_key = f"W{week.week_number}"
        week_row = stats.by_week.setdefault(week_key, {"total": 0, "done": 0, "planned": 0})
        for day in week.days:
            for workout in day.workouts:
                tag = derive_workout_status(workout, day, today, settings)
                stats.total += 1
                week_row["total"] += 1
                if tag.is_done:
                    stats.done += 1
                    week_row["done"] += 1
                    counter = _DONE_COUNTERS[tag]
                    setattr(stats, counter, getattr(stats, counter) + 1)
                elif tag.is_planned:
                    stats.planned += 1
                    week_row["planned"] += 1
                elif tag is StatusTag.MISSED_PAST:
                    stats.missed += 1
                else:
                    stats.unscheduled += 1

                for sport, totals in aggregate_workout(workout, taxonomy).per_sport.items():
                    row = stats.by_sport.setdefault(sport, {"total": 0, "done": 0, "distance_meters": 0.0})
                    row["total"] += totals.moveframe_count
                    if tag.is_done:
                        row["done"] += totals.moveframe_count
                    row["distance_meters"] += totals.distance_meters

    denominator = stats.planned + stats.done
    if denominator > 0:
        stats.completion_rate = int(round(stats.done / denominator * 100))
    return stats


def week_totals_frame(week: Week, taxonomy: Optional[SportTaxonomy] = None) -> pd.DataFrame:
    """Per-day, per-sport totals for one week, in day order."""
    rows: list[dict[str, Any]] = []
    for day in week.days:
        for sport, totals in aggregate_day(day, taxonomy).per_sport.items():
            rows.append(
                {
                    "day_id": day.id,
                    "date": day.date,
                    "weekday": day.weekday if day.weekday is not None else (day.date.isoweekday() if day.date else None),
                    "sport": sport,
                    "workouts": totals.workout_count,
                    "moveframes": totals.moveframe_count,
                    "distance_meters": totals.distance_meters,
                    "duration_deciseconds": totals.duration_deciseconds,
                    "series": totals.series,
                    "repetitions": totals.repetitions,
                }
            )
    if not rows:
        return pd.DataFrame(columns=WEEK_TOTALS_COLUMNS)
    return pd.DataFrame(rows, columns=WEEK_TOTALS_COLUMNS)


def week_sport_summary(week: Week, taxonomy: Optional[SportTaxonomy] = None) -> pd.DataFrame:
    """Week totals grouped by sport."""
    frame = week_totals_frame(week, taxonomy)
    if frame.empty:
        return pd.DataFrame(columns=["sport", "workouts", "distance_meters", "duration_deciseconds", "series", "repetitions"])
    return frame.groupby("sport", as_index=False, sort=False).agg(
        workouts=("workouts", "sum"),
        distance_meters=("distance_meters", "sum"),
        duration_deciseconds=("duration_deciseconds", "sum"),
        series=("series", "sum"),
        repetitions=("repetitions", "sum"),
    )
