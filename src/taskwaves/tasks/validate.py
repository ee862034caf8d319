"""Model-level validation of task records.

Dangling references and cycles are graph concerns and live in
:mod:`taskwaves.graph`; this module only checks each record and id uniqueness.
"""

from __future__ import annotations

from typing import Iterable

from taskwaves import log
from taskwaves.errors import InvalidTaskError
from taskwaves.tasks.model import Task


def validate(tasks: Iterable[Task]) -> list[str]:
    """Return a list of model errors; empty when the records are usable."""
    errors: list[str] = []
    seen: set[str] = set()

    for idx, task in enumerate(tasks):
        if not task.id:
            errors.append(f"Task #{idx + 1}: missing id")
            continue
        if task.id in seen:
            errors.append(f"Duplicate id: {task.id}")
        seen.add(task.id)

        if not task.name.strip():
            errors.append(f"Task {task.id}: missing name")
        if task.id in task.dependencies:
            errors.append(f"Task {task.id}: depends on itself")
        if isinstance(task.user_count, bool) or not isinstance(task.user_count, int):
            errors.append(f"Task {task.id}: userCount must be an integer")
        elif task.user_count < 1:
            errors.append(f"Task {task.id}: userCount must be >= 1 (got {task.user_count})")

    return errors


def validate_and_report(tasks: Iterable[Task]) -> bool:
    """Validate and log each error. Return ``True`` if the list is usable."""
    errors = validate(tasks)
    for err in errors:
        log.error(err)
    return not errors


def ensure_valid(tasks: Iterable[Task]) -> None:
    """Raise :class:`InvalidTaskError` when *tasks* fail validation."""
    errors = validate(tasks)
    if errors:
        raise InvalidTaskError(errors)
