"""Planning diagnostics and exceptions.

Diagnostics (:class:`DanglingDependency`, :class:`CyclicDependency`) are plain
values collected next to a result. Exceptions abort the call that raised them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DanglingDependency:
    """*task_id* depends on *missing_id*, which is not in the task list."""

    task_id: str
    missing_id: str

    def __str__(self) -> str:
        return f"Task {self.task_id}: dependency {self.missing_id} not found"


@dataclass(frozen=True)
class CyclicDependency:
    """The listed ids form a dependency cycle, in dependency order."""

    cycle_ids: tuple[str, ...]

    def __str__(self) -> str:
        chain = " -> ".join(self.cycle_ids + self.cycle_ids[:1])
        return f"Cycle detected: {chain}"


ValidationError = Union[DanglingDependency, CyclicDependency]


class PlanningError(Exception):
    """Base class for errors that abort a planning call."""


class InvalidTaskError(PlanningError, ValueError):
    """Task records failed model validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid task list")


class CyclicDependencyError(PlanningError):
    """Plan generation refused: the dependency graph contains a cycle."""

    def __init__(self, cycle_ids: tuple[str, ...] | list[str]) -> None:
        self.cycle_ids = tuple(cycle_ids)
        super().__init__(str(CyclicDependency(self.cycle_ids)))


class SchedulingStalledError(PlanningError):
    """Pending tasks remain that no wave can ever schedule.

    Unreachable once the cycle check passed; raising it means an internal
    invariant broke.
    """

    def __init__(self, remaining_ids: tuple[str, ...] | list[str]) -> None:
        self.remaining_ids = tuple(remaining_ids)
        super().__init__(
            "Scheduling stalled with pending tasks: " + ", ".join(self.remaining_ids)
        )


class TaskFormatError(ValueError):
    """A task file or record could not be parsed."""
