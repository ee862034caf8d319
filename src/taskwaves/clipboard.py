"""Cross-platform clipboard sink, best-effort."""

from __future__ import annotations

import shlex
import shutil
import subprocess
import sys

from taskwaves import log

_LINUX_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
)


def clipboard_command() -> list[str] | None:
    """Return the first available clipboard command for this platform."""
    if sys.platform == "darwin":
        candidates: tuple[tuple[str, ...], ...] = (("pbcopy",),)
    elif sys.platform == "win32":
        candidates = (("clip",),)
    elif sys.platform.startswith("linux"):
        candidates = _LINUX_COMMANDS
    else:
        candidates = ()

    for cmd in candidates:
        if shutil.which(cmd[0]):
            return list(cmd)
    return None


def copy_to_clipboard(text: str, command: str = "") -> bool:
    """Write *text* to the system clipboard. Return ``True`` on success.

    *command* overrides detection (e.g. ``"xclip -selection primary"``).
    Failures are reported through the return value, never raised.
    """
    cmd = shlex.split(command) if command else clipboard_command()
    if not cmd:
        log.debug("No clipboard command available")
        return False

    try:
        subprocess.run(
            cmd,
            input=text,
            text=True,
            encoding="utf-8",
            capture_output=True,
            check=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        log.debug(f"Clipboard write via {cmd[0]} failed: {exc}")
        return False
    return True
