"""Single-slot clipboard for copying and moving Day, Workout and Moveframe subtrees.

States: Idle -> Holding(COPY | CUT). A successful paste of a CUT entry
removes the source from its old parent and returns to Idle; a COPY entry
stays held so it can be pasted again. A paste that fails before the target
write leaves the clipboard and the source exactly as they were.

The source of a CUT is only removed after the ``commit`` callback (the
caller's persistence write of the new target) returns, so a failed write
never loses data. When the later source write fails the entry stays held
and is marked as placed; ``finish_cut`` completes it without pasting twice.

Also hosts the other subtree-copying operations: in-place duplicates of a
workout or moveframe, and copying a whole week onto another by weekday.
"""

from __future__ import annotations

import datetime as dt
import logging
from copy import deepcopy
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional, Union

from plancore.config import Settings
from plancore.errors import EmptyClipboard, IncompatibleTarget, InvalidTransition, NotFound
from plancore.models import (
    Day,
    Movelap,
    Moveframe,
    Week,
    Workout,
    find_day,
    find_moveframe,
    find_workout,
    new_id,
)
from plancore.services import sequencing

logger = logging.getLogger(__name__)

Entity = Union[Day, Workout, Moveframe]
Container = Union[Week, Day, Workout]


class ClipboardKind(str, Enum):
    DAY = "DAY"
    WORKOUT = "WORKOUT"
    MOVEFRAME = "MOVEFRAME"


class ClipboardMode(str, Enum):
    COPY = "COPY"
    CUT = "CUT"


_KIND_OF = {Day: ClipboardKind.DAY, Workout: ClipboardKind.WORKOUT, Moveframe: ClipboardKind.MOVEFRAME}
# Which payload kind each container type can host.
_ACCEPTS = {Week: ClipboardKind.DAY, Day: ClipboardKind.WORKOUT, Workout: ClipboardKind.MOVEFRAME}


@dataclass(frozen=True)
class ClipboardEntry:
    kind: ClipboardKind
    mode: ClipboardMode
    payload: Entity
    source_id: str
    source_parent_id: Optional[str] = None
    placed_id: Optional[str] = None  # set once a CUT's target write succeeded


@dataclass(frozen=True)
class PasteResult:
    target: Container  # new target snapshot holding the pasted subtree
    pasted: Entity  # pasted entity with fresh ids and final numbering
    source_parent: Optional[Container] = None  # old parent with the cut source removed


# ---------------------------------------------------------------------------
# Fresh identities
# ---------------------------------------------------------------------------

def _fresh_movelap(lap: Movelap, reset: bool, origin: str) -> Movelap:
    return replace(lap, id=new_id(), origin=origin, status="PENDING" if reset else lap.status)


def _fresh_moveframe(moveframe: Moveframe, reset: bool, origin: str = "PASTE") -> Moveframe:
    laps = tuple(_fresh_movelap(lap, reset, origin) for lap in moveframe.movelaps)
    return replace(moveframe, id=new_id(), movelaps=laps)


def _fresh_workout(workout: Workout, reset: bool, origin: str = "PASTE") -> Workout:
    moveframes = tuple(_fresh_moveframe(mf, reset, origin) for mf in workout.moveframes)
    fresh = replace(workout, id=new_id(), moveframes=moveframes)
    if reset:
        # copies start unplanned
        fresh = replace(fresh, status="NOT_PLANNED", is_done=False, completion_rate=0, is_different=False)
    return fresh


def _fresh_day(day: Day, reset: bool, on_date: Optional[dt.date]) -> Day:
    workouts = tuple(_fresh_workout(w, reset) for w in day.workouts)
    fresh = replace(day, id=new_id(), workouts=workouts)
    if on_date is not None:
        fresh = replace(fresh, date=on_date, weekday=on_date.isoweekday())
    return fresh


def _fresh(payload: Entity, reset: bool, on_date: Optional[dt.date]) -> Entity:
    if isinstance(payload, Day):
        return _fresh_day(payload, reset, on_date)
    if isinstance(payload, Workout):
        return _fresh_workout(payload, reset)
    return _fresh_moveframe(payload, reset)


# ---------------------------------------------------------------------------
# Container operations
# ---------------------------------------------------------------------------

def _insert(target: Container, entity: Entity, at_index: Optional[int], settings: Optional[Settings]) -> Container:
    if isinstance(target, Week):
        return sequencing.insert_day(target, entity, settings)
    if isinstance(target, Day):
        return sequencing.insert_workout(target, entity, at_index, settings)
    return sequencing.insert_moveframe(target, entity, at_index)


def _remove(parent: Container, child_id: str) -> Container:
    if isinstance(parent, Week):
        return sequencing.remove_day(parent, child_id)
    if isinstance(parent, Day):
        return sequencing.remove_workout(parent, child_id)
    return sequencing.remove_moveframe(parent, child_id)


def _require_child(parent: Container, child_id: str) -> None:
    if isinstance(parent, Week):
        find_day(parent, child_id)
    elif isinstance(parent, Day):
        find_workout(parent, child_id)
    else:
        find_moveframe(parent, child_id)


def _find_placed(container: Container, entity_id: str) -> Entity:
    children = getattr(container, {Week: "days", Day: "workouts", Workout: "moveframes"}[type(container)])
    for child in children:
        if child.id == entity_id:
            return child
    raise NotFound(f"{entity_id} missing after paste")


class Clipboard:
    """Caller-held clipboard; the only stateful object in the engine."""

    def __init__(self) -> None:
        self._entry: Optional[ClipboardEntry] = None

    @property
    def entry(self) -> Optional[ClipboardEntry]:
        return self._entry

    @property
    def is_empty(self) -> bool:
        return self._entry is None

    @property
    def kind(self) -> Optional[ClipboardKind]:
        return self._entry.kind if self._entry else None

    @property
    def mode(self) -> Optional[ClipboardMode]:
        return self._entry.mode if self._entry else None

    @property
    def state(self) -> str:
        return "IDLE" if self._entry is None else f"HOLDING_{self._entry.mode.value}"

    @property
    def awaiting_source_removal(self) -> bool:
        return self._entry is not None and self._entry.placed_id is not None

    def clear(self) -> None:
        self._entry = None

    def _hold(self, entity: Entity, mode: ClipboardMode, source_parent_id: Optional[str]) -> ClipboardEntry:
        kind = _KIND_OF.get(type(entity))
        if kind is None:
            raise IncompatibleTarget(f"Cannot place {type(entity).__name__} on the clipboard")
        self._entry = ClipboardEntry(
            kind=kind,
            mode=mode,
            payload=deepcopy(entity),
            source_id=entity.id,
            source_parent_id=source_parent_id,
        )
        logger.debug("clipboard_hold", extra={"ctx_kind": kind.value, "ctx_mode": mode.value, "ctx_source_id": entity.id})
        return self._entry

    def copy(self, entity: Entity, source_parent_id: Optional[str] = None) -> ClipboardEntry:
        return self._hold(entity, ClipboardMode.COPY, source_parent_id)

    def cut(self, entity: Entity, source_parent_id: str) -> ClipboardEntry:
        return self._hold(entity, ClipboardMode.CUT, source_parent_id)

    def paste(
        self,
        target: Container,
        *,
        at_index: Optional[int] = None,
        on_date: Optional[dt.date] = None,
        source_parent: Optional[Container] = None,
        commit: Optional[Callable[[Container], Any]] = None,
        settings: Optional[Settings] = None,
    ) -> PasteResult:
        """Paste the held subtree into ``target``.

        A Workout hosts a Moveframe, a Day hosts a Workout and a Week hosts a
        Day (``on_date`` re-dates it). For a CUT entry ``source_parent`` must
        be the snapshot of the old parent unless it is ``target`` itself.
        ``commit`` receives each new container snapshot to persist: first
        the target, then (CUT only) the source parent. The clipboard returns
        to Idle only once both writes have returned.
        """
        entry = self._entry
        if entry is None:
            raise EmptyClipboard("Clipboard is empty")
        if entry.placed_id is not None:
            raise InvalidTransition("The cut entry is already placed; finish_cut must remove its source")

        accepted = _ACCEPTS.get(type(target))
        if accepted is not entry.kind:
            logger.info(
                "paste_rejected",
                extra={"ctx_kind": entry.kind.value, "ctx_target": type(target).__name__},
            )
            raise IncompatibleTarget(f"{type(target).__name__} cannot host a {entry.kind.value.lower()}")

        is_cut = entry.mode is ClipboardMode.CUT
        same_container = is_cut and entry.source_parent_id == target.id
        if is_cut and not same_container:
            if source_parent is None or source_parent.id != entry.source_parent_id:
                raise NotFound(f"Source parent {entry.source_parent_id} snapshot is required to complete the cut")
            _require_child(source_parent, entry.source_id)

        base = target
        if same_container:
            _require_child(target, entry.source_id)
            base = _remove(target, entry.source_id)

        fresh = _fresh(entry.payload, reset=not is_cut, on_date=on_date)
        new_target = _insert(base, fresh, at_index, settings)
        pasted = _find_placed(new_target, fresh.id)

        if commit is not None:
            commit(new_target)

        new_source: Optional[Container] = None
        if is_cut:
            if same_container:
                new_source = new_target
                self._entry = None
            else:
                self._entry = replace(entry, placed_id=pasted.id)
                new_source = self.finish_cut(source_parent, commit=commit)

        logger.info(
            "paste_completed",
            extra={
                "ctx_kind": entry.kind.value,
                "ctx_mode": entry.mode.value,
                "ctx_target_id": target.id,
                "ctx_pasted_id": pasted.id,
            },
        )
        return PasteResult(target=new_target, pasted=pasted, source_parent=new_source)

    def finish_cut(
        self,
        source_parent: Container,
        commit: Optional[Callable[[Container], Any]] = None,
    ) -> Container:
        """Remove a placed CUT entry's source from ``source_parent`` and return to Idle."""
        entry = self._entry
        if entry is None:
            raise EmptyClipboard("Clipboard is empty")
        if entry.placed_id is None:
            raise InvalidTransition("Only a cut entry that was already pasted can be finished")
        if source_parent.id != entry.source_parent_id:
            raise NotFound(f"Source parent {entry.source_parent_id} snapshot is required to complete the cut")
        new_source = _remove(source_parent, entry.source_id)
        if commit is not None:
            commit(new_source)
        self._entry = None
        return new_source


# ---------------------------------------------------------------------------
# Duplicates and week copies
# ---------------------------------------------------------------------------

def duplicate_workout(day: Day, workout_id: str, settings: Optional[Settings] = None) -> tuple[Day, Workout]:
    """Insert a copy of a workout right after it, keeping its status."""
    source = find_workout(day, workout_id)
    position = [w.id for w in day.workouts].index(workout_id)
    copy = _fresh_workout(source, reset=False, origin="DUPLICATE")
    new_day = sequencing.insert_workout(day, copy, position + 1, settings)
    return new_day, _find_placed(new_day, copy.id)


def duplicate_moveframe(workout: Workout, moveframe_id: str) -> tuple[Workout, Moveframe]:
    """Insert a copy of a moveframe right after it; later letters shift by one."""
    source = find_moveframe(workout, moveframe_id)
    position = [mf.id for mf in workout.moveframes].index(moveframe_id)
    copy = _fresh_moveframe(source, reset=False, origin="DUPLICATE")
    new_workout = sequencing.insert_moveframe(workout, copy, position + 1)
    return new_workout, _find_placed(new_workout, copy.id)


def _day_of_week(day: Day) -> Optional[int]:
    if day.weekday is not None:
        return int(day.weekday)
    return day.date.isoweekday() if day.date is not None else None


def copy_week(source: Week, target: Week, settings: Optional[Settings] = None) -> Week:
    """Replace the target week's workouts with copies of the source's, matched by weekday.

    Target days keep their identity and date. Source days with no target
    day on the same weekday are skipped.
    """
    by_weekday = {}
    for day in source.days:
        by_weekday.setdefault(_day_of_week(day), day)

    days = []
    for day in target.days:
        new_day = replace(day, workouts=())
        match = by_weekday.pop(_day_of_week(day), None)
        if match is not None:
            for workout in match.workouts:
                new_day = sequencing.insert_workout(new_day, _fresh_workout(workout, reset=False), settings=settings)
        days.append(new_day)

    for weekday, skipped in by_weekday.items():
        if skipped.workouts:
            logger.warning(
                "week_copy_day_skipped",
                extra={"ctx_source_day": skipped.id, "ctx_weekday": weekday, "ctx_target_week": target.id},
            )
    return replace(target, days=tuple(days))
