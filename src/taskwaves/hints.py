"""Infer parallel-safety hints from the files a task touches.

Rules run in order; the first one that refuses decides the reason. The result
only ever feeds ``Task.is_parallelizable``, never scheduling directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Iterable

from taskwaves.tasks.model import FileRef, Task

INDEPENDENT_MODULES: tuple[str, ...] = (
    "src/components",
    "src/pages",
    "tools/",
    "docs/",
    "test/",
    "tests/",
    "__tests__",
)

SHARED_PATHS: tuple[str, ...] = (
    "src/components/shared",
    "src/utils",
    "src/lib",
    "common",
    "shared",
    "core",
)

DATABASE_MARKERS: tuple[str, ...] = ("migration", "schema", "database", "model")
CONFIG_MARKERS: tuple[str, ...] = ("config", ".env")
CONFIG_SUFFIXES: tuple[str, ...] = (".json", ".yml", ".yaml")
API_MARKERS: tuple[str, ...] = ("api", "routes", "controller", "endpoint", "interface", ".d.ts")


@dataclass(frozen=True)
class ParallelHint:
    parallel_ok: bool
    reason: str
    confidence: int = 100
    risk_factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class FileConflict:
    path: str
    task_ids: tuple[str, ...]
    severity: str
    reason: str


@dataclass
class _RuleResult:
    allowed: bool
    confidence: int = 100
    reason: str = ""
    warnings: list[str] = field(default_factory=list)


def _paths(files: Iterable[FileRef]) -> str:
    return ", ".join(f.path for f in files)


def _check_new_files_only(files: list[FileRef]) -> _RuleResult:
    modified = [f for f in files if f.is_modify]
    if not modified:
        return _RuleResult(True, 95)
    minor = [f for f in modified if "test" in f.path or "spec" in f.path or f.path.endswith(".md")]
    if len(minor) == len(modified):
        return _RuleResult(True, 85, warnings=["Minor modifications to tests/docs"])
    return _RuleResult(False, reason=f"Modifies existing files: {_paths(modified)}")


def _check_independent_modules(files: list[FileRef]) -> _RuleResult:
    modules = list(dict.fromkeys("/".join(f.path.split("/")[:2]) for f in files if "/" in f.path))
    if len(modules) > 1:
        return _RuleResult(False, reason="Changes span multiple modules, increasing risk of conflicts")
    if len(modules) == 1 and modules[0].startswith(INDEPENDENT_MODULES):
        return _RuleResult(True, 90)
    return _RuleResult(True, 70, warnings=["Module independence not verified"])


def _check_no_database_changes(files: list[FileRef]) -> _RuleResult:
    db = [f for f in files if any(m in f.path for m in DATABASE_MARKERS) or f.path.endswith(".sql")]
    if db:
        return _RuleResult(False, reason=f"Contains database changes: {_paths(db)}")
    return _RuleResult(True)


def _check_no_shared_components(files: list[FileRef]) -> _RuleResult:
    shared = [f for f in files if f.is_modify and any(p in f.path for p in SHARED_PATHS)]
    if shared:
        return _RuleResult(False, reason=f"Modifies shared components: {_paths(shared)}")
    return _RuleResult(True, 95)


def _check_no_config_changes(files: list[FileRef]) -> _RuleResult:
    cfg = [
        f for f in files
        if any(m in f.path for m in CONFIG_MARKERS) or f.path.endswith(CONFIG_SUFFIXES)
    ]
    if cfg:
        return _RuleResult(False, reason=f"Contains configuration changes: {_paths(cfg)}")
    return _RuleResult(True)


def _check_no_api_contract_changes(files: list[FileRef]) -> _RuleResult:
    api = [f for f in files if f.is_modify and any(m in f.path for m in API_MARKERS)]
    if api:
        return _RuleResult(False, reason=f"Modifies API contracts: {_paths(api)}")
    return _RuleResult(True, 95)


RULES: tuple[Callable[[list[FileRef]], _RuleResult], ...] = (
    _check_new_files_only,
    _check_independent_modules,
    _check_no_database_changes,
    _check_no_shared_components,
    _check_no_config_changes,
    _check_no_api_contract_changes,
)


def analyze_files(files: Iterable[FileRef]) -> ParallelHint:
    """Judge whether work on *files* is safe to run alongside other tasks."""
    file_list = list(files)
    confidence = 100
    risks: list[str] = []

    for rule in RULES:
        result = rule(file_list)
        if not result.allowed:
            return ParallelHint(False, result.reason, confidence, tuple(risks + [result.reason]))
        confidence = min(confidence, result.confidence)
        risks.extend(result.warnings)

    return ParallelHint(True, _positive_reason(file_list, confidence), confidence, tuple(risks))


def _positive_reason(files: list[FileRef], confidence: int) -> str:
    if not files:
        return "No files specified - safe for parallel work"
    if all(f.is_new for f in files):
        return "Creates new independent components with no shared dependencies"
    if confidence >= 90:
        return "Changes are isolated to independent modules"
    if confidence >= 80:
        return "Low risk of conflicts with proper coordination"
    return "Moderate risk - recommend communication between developers"


def apply_hints(tasks: Iterable[Task]) -> list[Task]:
    """Return copies of *tasks* with ``is_parallelizable`` inferred from files.

    Only tasks that list files and carry neither hint are touched; explicit
    hints always win.
    """
    result: list[Task] = []
    for task in tasks:
        if task.files and not task.parallel_eligible:
            hint = analyze_files(task.files)
            task = replace(
                task,
                is_parallelizable=hint.parallel_ok,
                parallel_reason=task.parallel_reason or hint.reason,
            )
        result.append(task)
    return result


def find_file_conflicts(tasks: Iterable[Task]) -> list[FileConflict]:
    """Files that several tasks modify (high) or one modifies and others use (medium)."""
    usage: dict[str, list[tuple[str, bool]]] = {}
    for task in tasks:
        for ref in task.files:
            usage.setdefault(ref.path, []).append((task.id, ref.is_modify))

    conflicts: list[FileConflict] = []
    for path, users in usage.items():
        if len(users) < 2:
            continue
        modifying = tuple(tid for tid, is_mod in users if is_mod)
        if len(modifying) > 1:
            conflicts.append(
                FileConflict(path, modifying, "high", "Multiple tasks modify the same file")
            )
        elif len(modifying) == 1:
            conflicts.append(
                FileConflict(
                    path,
                    tuple(tid for tid, _ in users),
                    "medium",
                    "One task modifies a file that others depend on",
                )
            )
    return conflicts
