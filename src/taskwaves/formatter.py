"""Turn runnable sets and execution plans into instruction text.

Pure string building: no I/O, and identical input always yields identical text.
"""

from __future__ import annotations

from taskwaves.config import (
    AGENT_KEYWORDS,
    DEFAULT_SERIAL_REASON,
    FALLBACK_AGENT,
    Config,
)
from taskwaves.planner import ExecutionPlan, Wave
from taskwaves.readiness import RunMode, RunnableSet
from taskwaves.tasks.model import Task

PLAN_HEADER = "=== EXECUTION PLAN ==="
SUMMARY_HEADER = "=== SUMMARY ==="
ALL_DONE = "All tasks are completed! No further action needed."
NOTHING_RUNNABLE = "Nothing is runnable right now: all tasks complete or blocked."


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def resolve_agent(task: Task, cfg: Config | None = None) -> str:
    """Agent label for *task*: its own, an inferred one, or the default."""
    cfg = cfg or Config()
    agent = (task.agent or "").strip()
    if not agent and cfg.infer_agents:
        agent = _infer_agent(task)
    if not agent:
        return cfg.default_agent
    if cfg.agents_dir and "/" not in agent:
        return f"{cfg.agents_dir}/{agent}"
    return agent


def _infer_agent(task: Task) -> str:
    name = task.name.lower()
    for keywords, agent in AGENT_KEYWORDS:
        if any(k in name for k in keywords):
            return agent
    return FALLBACK_AGENT


def parallel_line(task: Task, cfg: Config | None = None) -> str:
    return f"Task `{task.id}` (agent: `{resolve_agent(task, cfg)}`) — run in parallel"


def sequential_line(task: Task, cfg: Config | None = None) -> str:
    # For eligible tasks parallel_reason says why concurrency is safe, not why it is serial.
    if task.parallel_eligible:
        reason = "no other task is ready alongside it"
    else:
        reason = task.parallel_reason or DEFAULT_SERIAL_REASON
    return f"Task `{task.id}` (agent: `{resolve_agent(task, cfg)}`) — run sequentially: {reason}"


# ── single-shot ──────────────────────────────────────────────────


def format_runnable(runnable: RunnableSet, cfg: Config | None = None) -> str:
    """Instruction text for the next step."""
    if runnable.mode == RunMode.PARALLEL:
        count = runnable.runnable_count
        lines = [f"{_plural(count, 'task')} ready to run in parallel:"]
        lines += [parallel_line(t, cfg) for t in runnable.tasks]
        if count > 1:
            lines.append(f"Start all {count} tasks concurrently, not sequentially.")
        return "\n".join(lines)

    if runnable.mode == RunMode.SINGLE:
        return "\n".join(["Next task (sequential):", sequential_line(runnable.tasks[0], cfg)])

    return "\n".join([NOTHING_RUNNABLE] + _waiting_lines(runnable))


def _waiting_lines(runnable: RunnableSet) -> list[str]:
    if not runnable.waiting:
        return []
    first = runnable.waiting[0]
    unmet = runnable.blockers.get(first.id, ())
    line = f"{_plural(len(runnable.waiting), 'task')} waiting on dependencies."
    if unmet:
        line += f" First complete: {', '.join(unmet)}"
    return [line]


# ── full plan ────────────────────────────────────────────────────


def wave_title(wave: Wave) -> str:
    if wave.parallel:
        return f"Wave {wave.index} (parallel — {wave.worker_count} workers):"
    return f"Wave {wave.index} (sequential):"


def format_plan(plan: ExecutionPlan, cfg: Config | None = None) -> str:
    """Numbered waves, blocked tasks, and a summary."""
    if not plan.waves and not plan.blocked:
        return ALL_DONE

    lines = [PLAN_HEADER]
    for wave in plan.waves:
        lines.append("")
        lines.append(wave_title(wave))
        line_for = parallel_line if wave.parallel else sequential_line
        lines += [f"  {line_for(t, cfg)}" for t in wave.tasks]

    if plan.blocked:
        lines.append("")
        lines.append(f"Blocked ({_plural(len(plan.blocked), 'task')}):")
        lines += [f"  Task `{b.task.id}`: {b.reason}" for b in plan.blocked]

    lines.append("")
    lines.append(SUMMARY_HEADER)
    lines.append(f"Total pending tasks: {plan.pending_count}")
    lines.append(f"Scheduled tasks: {len(plan.scheduled_ids())}")
    lines.append(f"Waves: {len(plan.waves)}")
    if plan.blocked:
        lines.append(f"Blocked tasks: {len(plan.blocked)}")
    return "\n".join(lines)
