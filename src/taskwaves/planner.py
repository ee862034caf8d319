"""Wave planner: simulate completion wave by wave to order all outstanding work."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from taskwaves import log
from taskwaves.errors import CyclicDependencyError, SchedulingStalledError, ValidationError
from taskwaves.graph import build
from taskwaves.readiness import RunMode, RunnableSet, analyze_readiness
from taskwaves.tasks.model import Task, TaskStatus, status_map
from taskwaves.tasks.validate import ensure_valid


@dataclass(frozen=True)
class Wave:
    """Tasks that may run concurrently once every earlier wave is done."""

    index: int
    tasks: tuple[Task, ...]

    @property
    def parallel(self) -> bool:
        return len(self.tasks) > 1

    @property
    def worker_count(self) -> int:
        return len(self.tasks)

    @property
    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]


@dataclass(frozen=True)
class BlockedTask:
    """A pending task no wave can reach, and the ids it is waiting on."""

    task: Task
    reason: str
    waiting_on: tuple[str, ...] = ()


@dataclass
class ExecutionPlan:
    waves: list[Wave] = field(default_factory=list)
    blocked: list[BlockedTask] = field(default_factory=list)
    diagnostics: list[ValidationError] = field(default_factory=list)
    pending_count: int = 0

    def scheduled_ids(self) -> list[str]:
        return [tid for wave in self.waves for tid in wave.task_ids]

    def wave_of(self, task_id: str) -> int | None:
        for wave in self.waves:
            if task_id in wave.task_ids:
                return wave.index
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "waves": [
                {
                    "index": w.index,
                    "mode": "parallel" if w.parallel else "sequential",
                    "tasks": w.task_ids,
                }
                for w in self.waves
            ],
            "blocked": [
                {"id": b.task.id, "reason": b.reason, "waiting_on": list(b.waiting_on)}
                for b in self.blocked
            ],
            "diagnostics": [str(d) for d in self.diagnostics],
            "summary": {
                "pending": self.pending_count,
                "scheduled": len(self.scheduled_ids()),
                "waves": len(self.waves),
                "blocked": len(self.blocked),
            },
        }


class PlanSimulation:
    """Private simulated status map, advanced one wave at a time.

    Usage::

        sim = PlanSimulation(tasks)
        runnable = sim.analyze()        # readiness against simulated statuses
        sim.complete(runnable.tasks)    # wave done: mark simulated-completed
    """

    def __init__(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)
        # Copy, never alias: callers' statuses stay untouched.
        self._real = status_map(self._tasks)
        self._state: dict[str, TaskStatus] = dict(self._real)

    # ── state queries ────────────────────────────────────────────

    def state(self, task_id: str) -> TaskStatus | None:
        return self._state.get(task_id)

    def real_state(self, task_id: str) -> TaskStatus | None:
        return self._real.get(task_id)

    def count_pending(self) -> int:
        return sum(1 for s in self._state.values() if s == TaskStatus.PENDING)

    def pending_tasks(self) -> list[Task]:
        seen: set[str] = set()
        pending: list[Task] = []
        for t in self._tasks:
            if t.id not in seen and self.state(t.id) == TaskStatus.PENDING:
                pending.append(t)
            seen.add(t.id)
        return pending

    # ── transitions ──────────────────────────────────────────────

    def analyze(self) -> RunnableSet:
        return analyze_readiness(self._tasks, self._state)

    def complete(self, tasks: Iterable[Task]) -> None:
        for t in tasks:
            self._state[t.id] = TaskStatus.COMPLETED
            log.debug(f"Task {t.id}: pending -> completed (simulated)")

    # ── diagnostics ──────────────────────────────────────────────

    def explain_blocked(self, remaining: list[Task]) -> tuple[list[BlockedTask], list[str]]:
        """Split *remaining* pending tasks into explained blocks and the rest.

        A task is explained when a dependency is unknown, is really in
        progress, or is itself an explained blocked task. Anything left over
        has no structural reason to be stuck.
        """
        blocked: dict[str, BlockedTask] = {}
        changed = True
        while changed:
            changed = False
            for task in remaining:
                if task.id in blocked:
                    continue
                entry = self._block_reason(task, blocked)
                if entry is not None:
                    blocked[task.id] = entry
                    changed = True

        ordered = [blocked[t.id] for t in remaining if t.id in blocked]
        unexplained = [t.id for t in remaining if t.id not in blocked]
        return ordered, unexplained

    def _block_reason(self, task: Task, blocked: dict[str, BlockedTask]) -> BlockedTask | None:
        missing = tuple(d for d in task.dependencies if self.real_state(d) is None)
        if missing:
            return BlockedTask(task, f"dependency not found: {', '.join(missing)}", missing)

        running = tuple(
            d for d in task.dependencies if self.real_state(d) == TaskStatus.IN_PROGRESS
        )
        if running:
            return BlockedTask(task, f"waiting on in-progress: {', '.join(running)}", running)

        upstream = tuple(d for d in task.dependencies if d in blocked)
        if upstream:
            return BlockedTask(task, f"waiting on blocked: {', '.join(upstream)}", upstream)
        return None


def generate_plan(tasks: Iterable[Task]) -> ExecutionPlan:
    """Order every pending task into numbered waves.

    Raises :class:`~taskwaves.errors.InvalidTaskError` for bad records,
    :class:`~taskwaves.errors.CyclicDependencyError` before any wave is
    computed when the graph has a cycle, and
    :class:`~taskwaves.errors.SchedulingStalledError` if pending tasks remain
    with no structural reason.
    """
    task_list = list(tasks)
    ensure_valid(task_list)

    graph, diagnostics = build(task_list)
    if not graph.is_valid:
        raise CyclicDependencyError(graph.cycle)

    sim = PlanSimulation(task_list)
    plan = ExecutionPlan(diagnostics=diagnostics, pending_count=sim.count_pending())

    # Each pass retires at least one task, so this runs at most N times.
    while True:
        runnable = sim.analyze()
        if runnable.mode == RunMode.NONE:
            break
        wave = Wave(index=len(plan.waves) + 1, tasks=runnable.tasks)
        plan.waves.append(wave)
        sim.complete(wave.tasks)
        log.debug(f"Wave {wave.index}: {', '.join(wave.task_ids)}")

    remaining = sim.pending_tasks()
    if remaining:
        plan.blocked, unexplained = sim.explain_blocked(remaining)
        if unexplained:
            log.error(f"Scheduling stalled; unschedulable tasks: {', '.join(unexplained)}")
            raise SchedulingStalledError(unexplained)

    return plan
