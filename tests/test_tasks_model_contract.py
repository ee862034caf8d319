"""Contract tests for task data models used across loader/planner/formatter."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, fields

import pytest

from taskwaves.tasks.model import FileRef, Task, TaskList, TaskStatus, status_map


def test_task_has_hint_fields() -> None:
    names = {f.name for f in fields(Task)}
    assert {"multi_dev_ok", "is_parallelizable", "parallel_reason", "user_count", "agent"} <= names


def test_task_defaults() -> None:
    t = Task(id="1", name="One")
    assert t.status == TaskStatus.PENDING
    assert t.dependencies == ()
    assert t.user_count == 1
    assert t.agent is None
    assert t.parallel_reason is None


def test_task_is_immutable() -> None:
    t = Task(id="1", name="One")
    with pytest.raises(FrozenInstanceError):
        t.name = "Other"  # type: ignore[misc]


def test_status_string_is_coerced() -> None:
    assert Task(id="1", name="x", status="in_progress").status is TaskStatus.IN_PROGRESS


def test_status_is_closed_enum() -> None:
    with pytest.raises(ValueError):
        Task(id="1", name="x", status="done")


def test_dependencies_deduplicated_in_order() -> None:
    t = Task(id="3", name="x", dependencies=("2", "1", "2", "", "1"))
    assert t.dependencies == ("2", "1")


class TestParallelEligibility:
    """Either hint makes a task eligible; neither leaves it serial."""

    @pytest.mark.parametrize(
        "multi_dev_ok,is_parallelizable,expected",
        [(False, False, False), (True, False, True), (False, True, True), (True, True, True)],
    )
    def test_eligibility_is_or_of_hints(self, multi_dev_ok, is_parallelizable, expected) -> None:
        t = Task(id="1", name="x", multi_dev_ok=multi_dev_ok, is_parallelizable=is_parallelizable)
        assert t.parallel_eligible is expected


class TestTaskList:
    def test_iterates_in_file_order(self) -> None:
        tl = TaskList(tasks=[Task(id="2", name="b"), Task(id="1", name="a")], source="tasks.json")
        assert [t.id for t in tl] == ["2", "1"]
        assert len(tl) == 2


def test_status_map_is_fresh_copy() -> None:
    tasks = [Task(id="1", name="a"), Task(id="2", name="b", status="completed")]
    first = status_map(tasks)
    first["1"] = TaskStatus.COMPLETED
    assert status_map(tasks)["1"] == TaskStatus.PENDING


def test_file_ref_kinds() -> None:
    assert FileRef("a.py", "CREATE").is_new
    assert FileRef("a.py", "TO_MODIFY").is_modify
    assert not FileRef("a.py", "REFERENCE").is_modify
