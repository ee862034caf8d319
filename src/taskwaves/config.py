"""Configuration defaults, env vars, and formatting options for taskwaves."""

from __future__ import annotations

import os
from dataclasses import dataclass


VERSION = "1.0.0"

DEFAULT_AGENT = "auto-assigned"

DEFAULT_SERIAL_REASON = "not marked safe for concurrent work"

# Keyword -> agent file, checked in order against the task name when
# ``infer_agents`` is on.
AGENT_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("api", "endpoint", "backend"), "api-integration.md"),
    (("component", "ui", "react", "frontend"), "react-components.md"),
    (("test", "spec"), "testing-specialist.md"),
)

FALLBACK_AGENT = "fullstack.md"


@dataclass
class Config:
    """Formatting and CLI options. None of these change scheduling."""

    # Agents
    default_agent: str = DEFAULT_AGENT
    agents_dir: str = ""
    infer_agents: bool = False

    # Hints
    infer_hints: bool = False

    # Clipboard
    clipboard_command: str = ""

    def __post_init__(self) -> None:
        if not self.agents_dir:
            self.agents_dir = os.environ.get("TASKWAVES_AGENTS_DIR", "")
        if not self.clipboard_command:
            self.clipboard_command = os.environ.get("TASKWAVES_CLIPBOARD", "")
        self.agents_dir = self.agents_dir.rstrip("/")
