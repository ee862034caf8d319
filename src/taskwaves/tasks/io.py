"""Load task lists exported by the task store (JSON or YAML)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from taskwaves.errors import TaskFormatError
from taskwaves.tasks.model import FileRef, Task, TaskList

_TASK_FIELDS = frozenset(
    {
        "id",
        "name",
        "status",
        "dependencies",
        "multi_dev_ok",
        "is_parallelizable",
        "parallel_reason",
        "user_count",
        "agent",
        "files",
    }
)

# Task-store key -> Task field. Snake_case keys map to themselves.
_KEY_ALIASES: dict[str, str] = {
    "multiDevOK": "multi_dev_ok",
    "isParallelizable": "is_parallelizable",
    "parallelReason": "parallel_reason",
    "userCount": "user_count",
    "relatedFiles": "files",
    "related_files": "files",
    "title": "name",
    "depends_on": "dependencies",
    "dependsOn": "dependencies",
}


def load_task_file(path: Path) -> TaskList:
    """Read *path* and return its tasks in file order.

    ``.yaml``/``.yml`` files are parsed as YAML, everything else as JSON.
    Raises ``FileNotFoundError`` for a missing file and
    :class:`TaskFormatError` for malformed content.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TaskFormatError(f"{path}: {exc}") from exc
    return TaskList(tasks=parse_tasks(data), source=str(path))


def parse_tasks(data: Any) -> list[Task]:
    """Build tasks from ``{"tasks": [...]}`` or a bare list of records."""
    if isinstance(data, dict):
        data = data.get("tasks")
    if data is None:
        return []
    if not isinstance(data, list):
        raise TaskFormatError("Expected a list of tasks")
    return [parse_task(raw, idx) for idx, raw in enumerate(data)]


def parse_task(raw: Any, idx: int = 0) -> Task:
    if not isinstance(raw, dict):
        raise TaskFormatError(f"Task #{idx + 1}: expected a mapping, got {type(raw).__name__}")

    fields: dict[str, Any] = {}
    for key, value in raw.items():
        name = _KEY_ALIASES.get(key, key)
        if name in _TASK_FIELDS:
            fields[name] = value

    task_id = fields.get("id")
    if task_id is None:
        raise TaskFormatError(f"Task #{idx + 1}: missing id")
    fields["id"] = str(task_id)
    fields["name"] = str(fields.get("name") or "")
    fields["dependencies"] = tuple(_dependency_ids(fields.get("dependencies"), fields["id"]))
    fields["files"] = tuple(_file_refs(fields.get("files")))
    for flag in ("multi_dev_ok", "is_parallelizable"):
        fields[flag] = _flag(fields.get(flag), flag, fields["id"])

    count = fields.get("user_count")
    if count is None:
        fields.pop("user_count", None)
    elif isinstance(count, bool) or not isinstance(count, int):
        raise TaskFormatError(f"Task {fields['id']}: userCount must be an integer")

    for opt in ("parallel_reason", "agent"):
        value = fields.get(opt)
        if value is not None:
            value = str(value).strip() or None
        fields[opt] = value

    try:
        return Task(**fields)
    except ValueError as exc:
        raise TaskFormatError(f"Task {fields['id']}: {exc}") from exc


_TRUE_STRINGS = frozenset({"true", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "0", ""})


def _flag(value: Any, name: str, task_id: str) -> bool:
    """Exported stores sometimes write hint flags as strings."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise TaskFormatError(f"Task {task_id}: {name} must be true or false, got {value!r}")


def _dependency_ids(raw: Any, task_id: str) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise TaskFormatError(f"Task {task_id}: dependencies must be a list")
    ids: list[str] = []
    for dep in raw:
        if isinstance(dep, dict):
            dep = dep.get("taskId") or dep.get("id")
        if dep is None or isinstance(dep, (dict, list)):
            raise TaskFormatError(f"Task {task_id}: unrecognised dependency entry")
        ids.append(str(dep))
    return ids


def _file_refs(raw: Any) -> list[FileRef]:
    if not raw:
        return []
    refs: list[FileRef] = []
    for entry in raw:
        if isinstance(entry, str):
            refs.append(FileRef(path=entry))
        elif isinstance(entry, dict) and entry.get("path"):
            refs.append(FileRef(path=str(entry["path"]), kind=str(entry.get("type", "OTHER")).upper()))
    return refs
