"""Sport taxonomy: which sports aggregate by distance/time and which by series.

The table is static configuration handed to the aggregation engine; callers
with their own catalogue pass a different ``SportTaxonomy``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class SportInfo:
    is_aerobic: bool
    distance_unit: str = "m"


AEROBIC_SPORTS = (
    "SWIM",
    "BIKE",
    "SPINNING",
    "RUN",
    "ROWING",
    "SKATE",
    "SKI",
    "SNOWBOARD",
    "WALKING",
    "HIKING",
)

SERIES_SPORTS = (
    "BODY_BUILDING",
    "GYMNASTIC",
    "STRETCHING",
    "PILATES",
    "YOGA",
    "TECHNICAL_MOVES",
    "FREE_MOVES",
    "SOCCER",
    "BASKETBALL",
    "TENNIS",
    "VOLLEYBALL",
    "GOLF",
    "BOXING",
    "MARTIAL_ARTS",
    "CLIMBING",
    "DANCING",
    "CALISTENIC",
    "CROSSFIT",
    "SPARTAN",
    "TRIATHLON",
    "TRACK_FIELD",
)

DEFAULT_SPORT_TABLE: dict[str, SportInfo] = {
    **{sport: SportInfo(is_aerobic=True, distance_unit="m") for sport in AEROBIC_SPORTS},
    **{sport: SportInfo(is_aerobic=False, distance_unit="reps") for sport in SERIES_SPORTS},
}

_SERIES_FALLBACK = SportInfo(is_aerobic=False, distance_unit="reps")


def normalize_sport(sport: Optional[str]) -> str:
    return str(sport or "UNKNOWN").strip().upper().replace(" ", "_") or "UNKNOWN"


class SportTaxonomy:
    """Read-only lookup from sport identifier to SportInfo.

    Unknown sports are series-based, matching the catalogue rule that only
    the listed distance sports track meters and duration.
    """

    def __init__(self, table: Optional[Mapping[str, SportInfo]] = None):
        source = DEFAULT_SPORT_TABLE if table is None else table
        self._table = {normalize_sport(k): v for k, v in source.items()}

    def info(self, sport: Optional[str]) -> SportInfo:
        return self._table.get(normalize_sport(sport), _SERIES_FALLBACK)

    def is_aerobic(self, sport: Optional[str]) -> bool:
        return self.info(sport).is_aerobic

    def is_series_based(self, sport: Optional[str]) -> bool:
        return not self.is_aerobic(sport)

    def __contains__(self, sport: object) -> bool:
        return isinstance(sport, str) and normalize_sport(sport) in self._table


DEFAULT_TAXONOMY = SportTaxonomy()
