"""Task and TaskList data models used across loading, planning and formatting."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class FileRef:
    """A file a task touches, with the task store's change kind (NEW, MODIFY, ...)."""

    path: str
    kind: str = "OTHER"

    @property
    def is_new(self) -> bool:
        return self.kind in ("NEW", "CREATE")

    @property
    def is_modify(self) -> bool:
        return self.kind in ("MODIFY", "TO_MODIFY")


@dataclass(frozen=True)
class Task:
    id: str
    name: str = ""
    status: TaskStatus = TaskStatus.PENDING
    dependencies: tuple[str, ...] = ()
    multi_dev_ok: bool = False
    is_parallelizable: bool = False
    parallel_reason: str | None = None
    user_count: int = 1
    agent: str | None = None
    files: tuple[FileRef, ...] = ()

    def __post_init__(self) -> None:
        # Closed enum: TaskStatus("done") raises ValueError.
        object.__setattr__(self, "status", TaskStatus(self.status))
        deps = tuple(dict.fromkeys(d for d in self.dependencies if d))
        object.__setattr__(self, "dependencies", deps)
        object.__setattr__(self, "files", tuple(self.files))

    @property
    def parallel_eligible(self) -> bool:
        """The one flag the scheduler reads: either hint allows concurrency."""
        return self.multi_dev_ok or self.is_parallelizable


@dataclass
class TaskList:
    tasks: list[Task] = field(default_factory=list)
    source: str = ""

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)


def status_map(tasks: Iterable[Task]) -> dict[str, TaskStatus]:
    """Return a fresh id -> status dict (first record wins on duplicate ids)."""
    statuses: dict[str, TaskStatus] = {}
    for t in tasks:
        statuses.setdefault(t.id, t.status)
    return statuses
