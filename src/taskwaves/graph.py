"""Dependency graph construction with dangling-reference and cycle checks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from taskwaves import log
from taskwaves.errors import CyclicDependency, DanglingDependency, ValidationError
from taskwaves.tasks.model import Task


@dataclass
class Graph:
    """Forward and reverse dependency edges over the ids present in a task list.

    ``dependencies`` and ``dependents`` only hold edges between known ids;
    references to unknown ids are kept apart in ``missing``.
    """

    order: list[str] = field(default_factory=list)
    dependencies: dict[str, tuple[str, ...]] = field(default_factory=dict)
    dependents: dict[str, list[str]] = field(default_factory=dict)
    missing: dict[str, tuple[str, ...]] = field(default_factory=dict)
    cycle: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        """``False`` when a cycle makes wave planning unsound."""
        return not self.cycle


def build(tasks: Iterable[Task]) -> tuple[Graph, list[ValidationError]]:
    """Build the dependency graph for *tasks* and collect diagnostics.

    Dangling references are reported as :class:`DanglingDependency` and do
    not stop construction. A cycle is reported as :class:`CyclicDependency`
    and recorded on ``Graph.cycle``.
    """
    task_list = list(tasks)
    graph = Graph()
    diagnostics: list[ValidationError] = []

    for task in task_list:
        if task.id in graph.dependencies:
            continue
        graph.order.append(task.id)
        graph.dependencies[task.id] = ()
        graph.dependents[task.id] = []

    known = set(graph.order)
    linked: set[str] = set()
    for task in task_list:
        # Duplicate ids: the first record wins.
        if task.id in linked:
            continue
        linked.add(task.id)
        present: list[str] = []
        missing: list[str] = []
        for dep in task.dependencies:
            (present if dep in known else missing).append(dep)
        graph.dependencies[task.id] = tuple(present)
        for dep in present:
            graph.dependents[dep].append(task.id)
        if missing:
            graph.missing[task.id] = tuple(missing)
            for dep in missing:
                diagnostics.append(DanglingDependency(task_id=task.id, missing_id=dep))
                log.debug(f"Task {task.id}: dependency {dep} not found (never ready)")

    cycle = find_cycle(graph.dependencies, graph.order)
    if cycle:
        graph.cycle = tuple(cycle)
        diagnostics.append(CyclicDependency(cycle_ids=graph.cycle))
        log.debug(f"Cycle detected: {' -> '.join(cycle)}")

    return graph, diagnostics


def find_cycle(dependencies: Mapping[str, Sequence[str]], order: Iterable[str]) -> list[str]:
    """Return the ids of the first dependency cycle found, or ``[]``.

    Iterative DFS from each id in *order*. Edges to ids absent from
    *dependencies* are ignored. The cycle is listed in dependency order,
    starting where the search entered it.
    """
    white, gray, black = 0, 1, 2
    color = dict.fromkeys(dependencies, white)

    for root in order:
        if color.get(root, black) != white:
            continue
        color[root] = gray
        path = [root]
        stack = [iter(dependencies[root])]
        while stack:
            for dep in stack[-1]:
                state = color.get(dep)
                if state is None or state == black:
                    continue
                if state == gray:
                    return path[path.index(dep):]
                color[dep] = gray
                path.append(dep)
                stack.append(iter(dependencies[dep]))
                break
            else:
                color[path.pop()] = black
                stack.pop()
    return []
