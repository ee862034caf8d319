"""The two user actions: "Execute" (next step) and "Optimize All" (full plan)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from taskwaves.config import Config
from taskwaves.errors import ValidationError
from taskwaves.formatter import format_plan, format_runnable
from taskwaves.graph import build
from taskwaves.hints import apply_hints
from taskwaves.planner import ExecutionPlan, generate_plan
from taskwaves.readiness import RunnableSet, analyze_readiness
from taskwaves.tasks.model import Task, status_map
from taskwaves.tasks.validate import ensure_valid


@dataclass
class NextStep:
    text: str
    runnable: RunnableSet
    diagnostics: list[ValidationError] = field(default_factory=list)

    @property
    def runnable_count(self) -> int:
        return self.runnable.runnable_count


@dataclass
class PlanResult:
    text: str
    plan: ExecutionPlan

    @property
    def diagnostics(self) -> list[ValidationError]:
        return self.plan.diagnostics


def _prepare(tasks: Iterable[Task], cfg: Config) -> list[Task]:
    task_list = list(tasks)
    if cfg.infer_hints:
        task_list = apply_hints(task_list)
    return task_list


def next_step(tasks: Iterable[Task], cfg: Config | None = None) -> NextStep:
    """Analyze real statuses and describe what to run now.

    Nothing is planned ahead here, so a cycle is only a diagnostic: its
    tasks are never ready and show up as waiting.
    """
    cfg = cfg or Config()
    task_list = _prepare(tasks, cfg)
    ensure_valid(task_list)
    _, diagnostics = build(task_list)
    runnable = analyze_readiness(task_list, status_map(task_list))
    return NextStep(text=format_runnable(runnable, cfg), runnable=runnable, diagnostics=diagnostics)


def optimize_all(tasks: Iterable[Task], cfg: Config | None = None) -> PlanResult:
    """Generate and format the full wave plan. Planning errors propagate."""
    cfg = cfg or Config()
    plan = generate_plan(_prepare(tasks, cfg))
    return PlanResult(text=format_plan(plan, cfg), plan=plan)
