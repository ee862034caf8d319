"""Shared fixtures for taskwaves tests.

File handling in tests:
- Use tmp_path for any task file so tests are isolated and cleaned up.
- Write files with explicit UTF-8 encoding.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskwaves.tasks.model import Task, TaskStatus


def _make_task(
    id: str,
    name: str = "",
    status: TaskStatus | str = TaskStatus.PENDING,
    dependencies: list[str] | None = None,
    multi_dev_ok: bool = False,
    is_parallelizable: bool = False,
    parallel_reason: str | None = None,
    agent: str | None = None,
    user_count: int = 1,
) -> Task:
    return Task(
        id=id,
        name=name or f"Task {id}",
        status=status,
        dependencies=tuple(dependencies or ()),
        multi_dev_ok=multi_dev_ok,
        is_parallelizable=is_parallelizable,
        parallel_reason=parallel_reason,
        agent=agent,
        user_count=user_count,
    )


@pytest.fixture
def make_task():
    """Factory fixture that creates Task instances."""
    return _make_task


@pytest.fixture
def write_tasks(tmp_path: Path):
    """Write task records as ``{"tasks": [...]}`` JSON and return the path."""

    def _write(records: list[dict], name: str = "tasks.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"tasks": records}), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep user-level overrides out of Config defaults."""
    monkeypatch.delenv("TASKWAVES_AGENTS_DIR", raising=False)
    monkeypatch.delenv("TASKWAVES_CLIPBOARD", raising=False)
