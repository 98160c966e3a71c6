"""Expand moveframe sequences ("4 x 100m pause 20s + 2 x 200m") into movelaps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from plancore.models import Movelap, new_id
from plancore.services.sports import normalize_sport

_DISTANCE_SPORTS = {"SWIM", "BIKE", "RUN"}
_STYLE_SPORTS = {"SWIM", "RUN"}


@dataclass(frozen=True)
class LapSequence:
    repetitions: int
    distance: Optional[float] = None
    reps: Optional[int] = None
    pause: Optional[str] = None
    end_pause: Optional[str] = None
    speed: Optional[str] = None
    style: Optional[str] = None
    exercise: Optional[str] = None
    sets: Optional[int] = None
    time: Optional[float] = None


def generate_movelaps(sequences: Sequence[LapSequence], pace: Optional[str] = None) -> tuple[Movelap, ...]:
    """One movelap per repetition, indexed 1..N across all sequences.

    The last repetition of a sequence takes the sequence's ``end_pause``
    when one is set.
    """
    laps: list[Movelap] = []
    for seq in sequences:
        for rep in range(1, int(seq.repetitions) + 1):
            pause = seq.end_pause if rep == seq.repetitions and seq.end_pause else seq.pause
            laps.append(
                Movelap(
                    id=new_id(),
                    index=len(laps) + 1,
                    distance=seq.distance,
                    reps=seq.reps,
                    time=seq.time,
                    pace=pace,
                    pause=pause,
                    speed_code=seq.speed,
                    style=seq.style,
                    origin="NEW",
                )
            )
    return tuple(laps)


def _meters(seq: LapSequence) -> str:
    return f"{seq.distance:g}m" if seq.distance is not None else "0m"


def _describe(sport: str, seq: LapSequence) -> str:
    if sport in ("SWIM", "RUN"):
        return f"{_meters(seq)} x {seq.repetitions} {seq.speed or ''} {seq.style or ''} pause {seq.pause or ''}"
    if sport == "BIKE":
        return f"{_meters(seq)} x {seq.repetitions} {seq.speed or ''} pause {seq.pause or ''}"
    if sport == "BODY_BUILDING":
        return f"{seq.exercise or ''} {seq.reps} reps x {seq.sets} sets {seq.speed or ''} pause {seq.pause or ''}"
    return f"{seq.repetitions} reps pause {seq.pause or ''}"


def describe_sequences(sport: str, sequences: Sequence[LapSequence]) -> str:
    if not sequences:
        return "Empty moveframe"
    sport = normalize_sport(sport)
    parts = []
    for i, seq in enumerate(sequences):
        text = " ".join(_describe(sport, seq).split())
        if seq.end_pause and i < len(sequences) - 1:
            text += f" + {seq.end_pause}"
        parts.append(text)
    return " + ".join(parts)


def validate_sequences(sport: str, sequences: Sequence[LapSequence]) -> list[str]:
    sport = normalize_sport(sport)
    errors: list[str] = []
    for i, seq in enumerate(sequences, start=1):
        problems = []
        if not seq.repetitions or seq.repetitions < 1:
            problems.append("Repetitions must be at least 1")
        if not seq.pause:
            problems.append("Pause is required")
        if sport in _DISTANCE_SPORTS:
            if not seq.distance or seq.distance < 1:
                problems.append("Distance/meters is required")
            if not seq.speed:
                problems.append("Speed is required")
            if sport in _STYLE_SPORTS and not seq.style:
                problems.append("Style is required")
        elif sport == "BODY_BUILDING":
            if not seq.exercise:
                problems.append("Exercise is required")
            if not seq.reps or seq.reps < 1:
                problems.append("Reps per set is required")
            if not seq.sets or seq.sets < 1:
                problems.append("Number of sets is required")
        if problems:
            errors.append(f"Sequence {i}: {', '.join(problems)}")
    return errors
