"""Persistence port for plan snapshots.

The engine never talks to storage itself. Callers read a consistent
snapshot through a ``PlanRepository``, run engine operations on it, and
write the returned containers back, typically by passing ``repo.save`` as
the clipboard's ``commit`` callback.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Protocol, Union

from plancore.errors import NotFound
from plancore.models import Day, Plan, Week, Workout

Container = Union[Plan, Week, Day, Workout]

_CHILDREN = {Plan: "weeks", Week: "days", Day: "workouts"}


class PlanRepository(Protocol):
    """Abstract interface for whole-subtree reads and writes."""

    def get_week(self, week_id: str) -> Week:
        ...

    def get_day(self, day_id: str) -> Day:
        ...

    def get_workout(self, workout_id: str) -> Workout:
        ...

    def save(self, container: Container) -> Container:
        """Insert or replace the container and its whole subtree."""
        ...

    def delete(self, container_id: str) -> None:
        ...

    def periods(self) -> list[dict[str, Any]]:
        """Period lookup table; opaque to the engine."""
        ...

    def sections(self) -> list[dict[str, Any]]:
        """Workout section lookup table; opaque to the engine."""
        ...


class InMemoryPlanRepository:
    """Dict-backed PlanRepository.

    Snapshots are frozen, so stored objects can be handed out without
    copying. Every container is indexed by id along with its parent, so a
    save rewrites the stored ancestors and forgets descendants the new
    snapshot dropped. ``fail_on_save`` makes the next N saves raise, for
    exercising failure paths.
    """

    def __init__(
        self,
        periods: Optional[list[dict[str, Any]]] = None,
        sections: Optional[list[dict[str, Any]]] = None,
    ):
        self._store: dict[str, Container] = {}
        self._parent: dict[str, Optional[str]] = {}
        self._periods = list(periods or [])
        self._sections = list(sections or [])
        self.saves: list[str] = []
        self.fail_on_save = 0

    def reset(self) -> None:
        self._store.clear()
        self._parent.clear()
        self.saves.clear()
        self.fail_on_save = 0

    def seed(self, *containers: Container) -> None:
        for container in containers:
            self._replace(container)

    @staticmethod
    def _children(container: Container) -> tuple:
        attr = _CHILDREN.get(type(container))
        return getattr(container, attr) if attr else ()

    def _index(self, container: Container, parent_id: Optional[str]) -> None:
        self._store[container.id] = container
        self._parent[container.id] = parent_id
        for child in self._children(container):
            self._index(child, container.id)

    def _drop(self, container: Container) -> None:
        # children already re-saved under another parent stay
        for child in self._children(container):
            if self._parent.get(child.id) == container.id:
                self._drop(self._store.get(child.id, child))
        self._store.pop(container.id, None)
        self._parent.pop(container.id, None)

    def _propagate(self, child_id: str, child: Optional[Container]) -> None:
        """Rewrite every stored ancestor of ``child_id``; ``child=None`` removes it."""
        parent_id = self._parent.get(child_id)
        while parent_id is not None and parent_id in self._store:
            parent = self._store[parent_id]
            attr = _CHILDREN[type(parent)]
            siblings = getattr(parent, attr)
            if all(c.id != child_id for c in siblings):
                return
            if child is None:
                kept = tuple(c for c in siblings if c.id != child_id)
            else:
                kept = tuple(child if c.id == child_id else c for c in siblings)
            parent = replace(parent, **{attr: kept})
            self._store[parent_id] = parent
            child_id, child = parent_id, parent
            parent_id = self._parent.get(parent_id)

    def _replace(self, container: Container) -> None:
        parent_id = self._parent.get(container.id)
        old = self._store.get(container.id)
        if old is not None:
            self._drop(old)
        self._index(container, parent_id)
        self._propagate(container.id, container)

    def _get(self, container_id: str, kind: type) -> Any:
        found = self._store.get(container_id)
        if not isinstance(found, kind):
            raise NotFound(f"{kind.__name__} {container_id} not found")
        return found

    # -- PlanRepository --

    def get_week(self, week_id: str) -> Week:
        return self._get(week_id, Week)

    def get_day(self, day_id: str) -> Day:
        return self._get(day_id, Day)

    def get_workout(self, workout_id: str) -> Workout:
        return self._get(workout_id, Workout)

    def save(self, container: Container) -> Container:
        if self.fail_on_save > 0:
            self.fail_on_save -= 1
            raise IOError(f"write of {container.id} failed")
        self._replace(container)
        self.saves.append(container.id)
        return container

    def delete(self, container_id: str) -> None:
        container = self._store.get(container_id)
        if container is None:
            return
        self._propagate(container_id, None)
        self._drop(container)

    def periods(self) -> list[dict[str, Any]]:
        return list(self._periods)

    def sections(self) -> list[dict[str, Any]]:
        return list(self._sections)
