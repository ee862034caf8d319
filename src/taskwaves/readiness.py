"""Readiness analysis: which tasks can start now, and which of them together."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from taskwaves.tasks.model import Task, TaskStatus


class RunMode(str, Enum):
    PARALLEL = "parallel"
    SINGLE = "single"
    NONE = "none"


@dataclass(frozen=True)
class RunnableSet:
    """Result of one readiness pass.

    ``tasks`` is the chosen set to run next: the whole parallel batch when
    there is one, otherwise the first serial task in task-list order.
    """

    tasks: tuple[Task, ...] = ()
    mode: RunMode = RunMode.NONE
    parallel_batch: tuple[Task, ...] = ()
    serial: tuple[Task, ...] = ()
    waiting: tuple[Task, ...] = ()
    blockers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def runnable_count(self) -> int:
        return len(self.tasks)

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]


def is_ready(task: Task, status: Mapping[str, TaskStatus]) -> bool:
    """Pending, and every dependency completed. Unknown ids never complete."""
    if status.get(task.id) != TaskStatus.PENDING:
        return False
    return all(status.get(dep) == TaskStatus.COMPLETED for dep in task.dependencies)


def unmet_dependencies(task: Task, status: Mapping[str, TaskStatus]) -> tuple[str, ...]:
    return tuple(dep for dep in task.dependencies if status.get(dep) != TaskStatus.COMPLETED)


def analyze_readiness(tasks: Iterable[Task], status: Mapping[str, TaskStatus]) -> RunnableSet:
    """Split the ready tasks into a parallel batch and a serial remainder.

    *status* maps task id to its real or simulated status; it is only read.
    Two ready tasks never depend on each other (the dependent one would not
    be ready), so readiness alone makes the parallel batch safe.
    """
    batch: list[Task] = []
    serial: list[Task] = []
    waiting: list[Task] = []
    blockers: dict[str, tuple[str, ...]] = {}
    seen: set[str] = set()

    for task in tasks:
        if task.id in seen:
            continue
        seen.add(task.id)
        if is_ready(task, status):
            (batch if task.parallel_eligible else serial).append(task)
        elif status.get(task.id) == TaskStatus.PENDING:
            waiting.append(task)
            blockers[task.id] = unmet_dependencies(task, status)

    if batch:
        chosen, mode = tuple(batch), RunMode.PARALLEL
    elif serial:
        chosen, mode = (serial[0],), RunMode.SINGLE
    else:
        chosen, mode = (), RunMode.NONE

    return RunnableSet(
        tasks=chosen,
        mode=mode,
        parallel_batch=tuple(batch),
        serial=tuple(serial),
        waiting=tuple(waiting),
        blockers=blockers,
    )
