"""taskwaves CLI: what to run next, and the full wave plan, for a task file.

Installed as ``taskwaves`` console_script via pipx / pip.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import click
from rich.markup import escape

from taskwaves import __version__
from taskwaves import log
from taskwaves.config import Config
from taskwaves.errors import CyclicDependency, DanglingDependency, PlanningError, TaskFormatError
from taskwaves.tasks.model import TaskList


CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def _format_options(fn: Callable) -> Callable:
    """Options shared by commands that render instructions."""
    fn = click.option("--infer-hints", is_flag=True, help="Infer parallel hints from related files")(fn)
    fn = click.option("--infer-agents", is_flag=True, help="Guess an agent from the task name")(fn)
    fn = click.option("--agents-dir", default="", help="Directory prefix for bare agent names")(fn)
    fn = click.option("--copy", "copy", is_flag=True, help="Copy the instructions to the clipboard")(fn)
    return fn


def _load(tasks_file: Path) -> TaskList:
    from taskwaves.tasks.io import load_task_file

    try:
        return load_task_file(tasks_file)
    except TaskFormatError as exc:
        log.error(f"Invalid task file: {exc}")
        sys.exit(1)


def _report_diagnostics(diagnostics: list) -> None:
    for diag in diagnostics:
        if isinstance(diag, DanglingDependency):
            log.warn(f"{diag} (task stays blocked)")
        else:
            log.warn(str(diag))


def _emit(text: str, copy: bool, cfg: Config) -> None:
    from taskwaves.clipboard import copy_to_clipboard

    log.plain(text)
    if not copy:
        return
    if copy_to_clipboard(text, cfg.clipboard_command):
        log.success("Copied to clipboard")
    else:
        log.warn("Could not copy to clipboard; copy the text above instead")


def _make_config(agents_dir: str, infer_agents: bool, infer_hints: bool) -> Config:
    return Config(agents_dir=agents_dir, infer_agents=infer_agents, infer_hints=infer_hints)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="taskwaves")
def main(verbose: bool) -> None:
    """taskwaves — dependency-aware parallel task planner.

    Reads a task file (JSON or YAML) and tells you which tasks can run now,
    or lays out every outstanding task in dependency-ordered waves.

    \b
    EXAMPLES:
      taskwaves next tasks.json            # What to run right now
      taskwaves next tasks.json --copy     # ...and copy it to the clipboard
      taskwaves plan tasks.json            # Full wave-by-wave plan
      taskwaves plan tasks.json --json     # Plan as JSON
      taskwaves validate tasks.json        # Check ids, dependencies, cycles
      taskwaves hints tasks.json           # Parallel hints from related files
    """
    log.set_verbose(verbose)


# ── Subcommand: next ─────────────────────────────────────────────


@main.command("next")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_format_options
def next_cmd(
    tasks_file: Path,
    copy: bool,
    agents_dir: str,
    infer_agents: bool,
    infer_hints: bool,
) -> None:
    """Show the tasks that can start right now."""
    from taskwaves.actions import next_step

    cfg = _make_config(agents_dir, infer_agents, infer_hints)
    tf = _load(tasks_file)
    try:
        step = next_step(tf, cfg)
    except PlanningError as exc:
        log.error(str(exc))
        sys.exit(1)

    _report_diagnostics(step.diagnostics)
    _emit(step.text, copy, cfg)
    log.info(f"Runnable tasks: {step.runnable_count}")


# ── Subcommand: plan ─────────────────────────────────────────────


@main.command("plan")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@_format_options
def plan_cmd(
    tasks_file: Path,
    as_json: bool,
    copy: bool,
    agents_dir: str,
    infer_agents: bool,
    infer_hints: bool,
) -> None:
    """Show every outstanding task in dependency-ordered waves."""
    from taskwaves.actions import optimize_all

    cfg = _make_config(agents_dir, infer_agents, infer_hints)
    tf = _load(tasks_file)
    try:
        result = optimize_all(tf, cfg)
    except PlanningError as exc:
        log.error(f"Task graph problem: {exc}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.plan.to_dict(), indent=2))
        return

    _report_diagnostics(result.diagnostics)
    _emit(result.text, copy, cfg)


# ── Subcommand: validate ─────────────────────────────────────────


@main.command("validate")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate_cmd(tasks_file: Path) -> None:
    """Check task records, dependency references and cycles."""
    from taskwaves.graph import build
    from taskwaves.tasks.validate import validate_and_report

    tf = _load(tasks_file)
    ok = validate_and_report(tf)
    _, diagnostics = build(tf)
    for diag in diagnostics:
        if isinstance(diag, CyclicDependency):
            log.error(str(diag))
        else:
            log.warn(str(diag))

    if not ok or any(isinstance(d, CyclicDependency) for d in diagnostics):
        sys.exit(1)
    log.success(f"{len(tf)} tasks valid")


# ── Subcommand: hints ────────────────────────────────────────────


@main.command("hints")
@click.argument("tasks_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def hints_cmd(tasks_file: Path) -> None:
    """Infer parallel-safety hints from each task's related files."""
    from taskwaves.hints import analyze_files, find_file_conflicts

    tf = _load(tasks_file)
    with_files = [t for t in tf if t.files]
    if not with_files:
        log.info("No tasks list related files.")
        return

    for task in with_files:
        hint = analyze_files(task.files)
        mark = "[green]parallel[/green]" if hint.parallel_ok else "[yellow]sequential[/yellow]"
        log.console.print(f"  - \\[{escape(task.id)}] {mark} ({hint.confidence}%): {escape(hint.reason)}")

    for conflict in find_file_conflicts(tf):
        log.warn(
            f"{conflict.severity} conflict on {conflict.path}: "
            f"{conflict.reason} ({', '.join(conflict.task_ids)})"
        )
