"""Per-sport and grand totals of distance, duration, series and repetitions.

Aerobic sports accumulate meters and duration; series-based sports
accumulate series and repetitions. Durations are kept in integer
deciseconds so many fractional-second laps add up without drift.

Aggregation is best-effort: a malformed numeric field contributes zero and
never stops the rest of the day from being totalled.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from plancore.models import Day, Moveframe, Plan, Week, Workout, parse_number
from plancore.services.sports import DEFAULT_TAXONOMY, SportTaxonomy, normalize_sport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SportTotals:
    workout_count: int = 0
    moveframe_count: int = 0
    movelap_count: int = 0
    distance_meters: float = 0.0
    duration_deciseconds: int = 0
    series: int = 0
    repetitions: int = 0
    workout_ids: frozenset = field(default=frozenset(), repr=False, compare=False)

    def as_dict(self) -> dict[str, Any]:
        return {
            "workout_count": self.workout_count,
            "moveframe_count": self.moveframe_count,
            "movelap_count": self.movelap_count,
            "distance_meters": self.distance_meters,
            "duration_deciseconds": self.duration_deciseconds,
            "duration": format_deciseconds(self.duration_deciseconds),
            "series": self.series,
            "repetitions": self.repetitions,
        }


@dataclass(frozen=True)
class Aggregate:
    per_sport: dict[str, SportTotals]
    grand: SportTotals

    @property
    def sports(self) -> list[str]:
        return list(self.per_sport)


def _malformed(value: Any, field_name: str, owner_id: Optional[str]) -> float:
    logger.debug(
        "malformed_numeric",
        extra={"ctx_field": field_name, "ctx_owner": owner_id, "ctx_value": repr(value)},
    )
    return 0.0


def to_number(value: Any, field_name: str = "value", owner_id: Optional[str] = None) -> float:
    """Coerce a telemetry field to a number; malformed input counts as zero."""
    number = parse_number(value)
    if number is None:
        return _malformed(value, field_name, owner_id)
    return number


def _finite(value: float, field_name: str, owner_id: Optional[str]) -> float:
    """Zero out products that left the float range (e.g. ``1e308`` meters x 2)."""
    return value if math.isfinite(value) else _malformed(value, field_name, owner_id)


def _series_multiplier(moveframe: Moveframe) -> float:
    multiplier = math.floor(to_number(moveframe.aerobic_series, "aerobic_series", moveframe.id))
    return float(multiplier) if multiplier > 0 else 1.0


def _scaled(value: Any, multiplier: float, field_name: str, owner_id: Optional[str]) -> float:
    return _finite(to_number(value, field_name, owner_id) * multiplier, field_name, owner_id)


def _deciseconds(value: Any, multiplier: float, field_name: str, owner_id: Optional[str], unit: int = 10) -> int:
    """Duration field as integer deciseconds; ``unit`` is deciseconds per input unit."""
    return int(round(_scaled(value, multiplier * unit, field_name, owner_id)))


def _moveframe_totals(moveframe: Moveframe, workout_id: str, is_aerobic: bool) -> SportTotals:
    distance = 0.0
    duration = 0
    series = 0
    repetitions = 0
    laps = moveframe.movelaps

    if not is_aerobic:
        if moveframe.manual_mode:
            reps = int(round(to_number(moveframe.repetitions, "repetitions", moveframe.id)))
            series += reps
            repetitions += reps
        else:
            series += len(laps)
            for lap in laps:
                repetitions += int(round(to_number(lap.reps, "reps", lap.id)))
                duration += _deciseconds(lap.time, 1, "time", lap.id)
    else:
        multiplier = _series_multiplier(moveframe)
        if moveframe.manual_mode:
            if moveframe.manual_input_type == "time":
                # manual time is entered in deciseconds
                duration += _deciseconds(moveframe.distance, multiplier, "distance", moveframe.id, unit=1)
            else:
                distance += _scaled(moveframe.distance, multiplier, "distance", moveframe.id)
        else:
            for lap in laps:
                distance += _scaled(lap.distance, multiplier, "distance", lap.id)
                duration += _deciseconds(lap.time, multiplier, "time", lap.id)
        distance = _finite(distance, "distance", moveframe.id)

    return SportTotals(
        workout_count=1,
        moveframe_count=1,
        movelap_count=len(laps),
        distance_meters=distance,
        duration_deciseconds=duration,
        series=series,
        repetitions=repetitions,
        workout_ids=frozenset({workout_id}),
    )


def merge_totals(a: SportTotals, b: SportTotals) -> SportTotals:
    """Merge two buckets of the same sport; workouts are counted once by id."""
    ids = a.workout_ids | b.workout_ids
    return SportTotals(
        workout_count=len(ids),
        moveframe_count=a.moveframe_count + b.moveframe_count,
        movelap_count=a.movelap_count + b.movelap_count,
        distance_meters=a.distance_meters + b.distance_meters,
        duration_deciseconds=a.duration_deciseconds + b.duration_deciseconds,
        series=a.series + b.series,
        repetitions=a.repetitions + b.repetitions,
        workout_ids=ids,
    )


def sum_totals(buckets: Iterable[SportTotals]) -> SportTotals:
    """Grand total across sports: every field, workout_count included, is summed."""
    items = list(buckets)
    ids: frozenset = frozenset().union(*(b.workout_ids for b in items))
    return SportTotals(
        workout_count=sum(b.workout_count for b in items),
        moveframe_count=sum(b.moveframe_count for b in items),
        movelap_count=sum(b.movelap_count for b in items),
        distance_meters=sum(b.distance_meters for b in items),
        duration_deciseconds=sum(b.duration_deciseconds for b in items),
        series=sum(b.series for b in items),
        repetitions=sum(b.repetitions for b in items),
        workout_ids=ids,
    )


def merge_aggregates(aggregates: Iterable[Aggregate]) -> Aggregate:
    per_sport: dict[str, SportTotals] = {}
    for agg in aggregates:
        for sport, totals in agg.per_sport.items():
            per_sport[sport] = merge_totals(per_sport[sport], totals) if sport in per_sport else totals
    return Aggregate(per_sport=per_sport, grand=sum_totals(per_sport.values()))


def aggregate_workout(workout: Workout, taxonomy: Optional[SportTaxonomy] = None) -> Aggregate:
    taxonomy = taxonomy or DEFAULT_TAXONOMY
    per_sport: dict[str, SportTotals] = {}
    for moveframe in workout.moveframes:
        sport = normalize_sport(moveframe.sport)
        totals = _moveframe_totals(moveframe, workout.id, taxonomy.is_aerobic(sport))
        per_sport[sport] = merge_totals(per_sport[sport], totals) if sport in per_sport else totals
    return Aggregate(per_sport=per_sport, grand=sum_totals(per_sport.values()))


def aggregate_day(day: Day, taxonomy: Optional[SportTaxonomy] = None) -> Aggregate:
    return merge_aggregates(aggregate_workout(w, taxonomy) for w in day.workouts)


def aggregate_week(week: Week, taxonomy: Optional[SportTaxonomy] = None) -> Aggregate:
    return merge_aggregates(aggregate_day(d, taxonomy) for d in week.days)


def aggregate_plan(plan: Plan, taxonomy: Optional[SportTaxonomy] = None) -> Aggregate:
    return merge_aggregates(aggregate_week(w, taxonomy) for w in plan.weeks)


def format_deciseconds(deciseconds: int) -> str:
    """Render deciseconds as ``HhMM'SS"d``, e.g. 37215 -> ``1h02'01"5``."""
    ds = max(0, int(deciseconds))
    total_seconds, tenths = divmod(ds, 10)
    hours, rem = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours}h{minutes:02d}'{seconds:02d}\"{tenths}"
