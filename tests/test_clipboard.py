"""Tests for taskwaves.clipboard — best-effort clipboard sink."""

from __future__ import annotations

import subprocess
from unittest.mock import patch

from taskwaves import clipboard
from taskwaves.clipboard import clipboard_command, copy_to_clipboard


class TestClipboardCommand:
    def test_macos_uses_pbcopy(self, monkeypatch):
        monkeypatch.setattr(clipboard.sys, "platform", "darwin")
        monkeypatch.setattr(clipboard.shutil, "which", lambda name: f"/usr/bin/{name}")
        assert clipboard_command() == ["pbcopy"]

    def test_linux_prefers_first_available(self, monkeypatch):
        monkeypatch.setattr(clipboard.sys, "platform", "linux")
        monkeypatch.setattr(
            clipboard.shutil, "which", lambda name: "/usr/bin/xclip" if name == "xclip" else None
        )
        assert clipboard_command() == ["xclip", "-selection", "clipboard"]

    def test_nothing_available(self, monkeypatch):
        monkeypatch.setattr(clipboard.sys, "platform", "linux")
        monkeypatch.setattr(clipboard.shutil, "which", lambda name: None)
        assert clipboard_command() is None


class TestCopyToClipboard:
    def test_success_passes_text_on_stdin(self):
        with patch.object(clipboard.subprocess, "run") as run:
            assert copy_to_clipboard("Wave 1", command="fakeclip --in") is True
        args, kwargs = run.call_args
        assert args[0] == ["fakeclip", "--in"]
        assert kwargs["input"] == "Wave 1"

    def test_command_failure_returns_false(self):
        err = subprocess.CalledProcessError(1, ["fakeclip"])
        with patch.object(clipboard.subprocess, "run", side_effect=err):
            assert copy_to_clipboard("x", command="fakeclip") is False

    def test_missing_binary_returns_false(self):
        with patch.object(clipboard.subprocess, "run", side_effect=FileNotFoundError()):
            assert copy_to_clipboard("x", command="fakeclip") is False

    def test_timeout_returns_false(self):
        err = subprocess.TimeoutExpired(["fakeclip"], 5)
        with patch.object(clipboard.subprocess, "run", side_effect=err):
            assert copy_to_clipboard("x", command="fakeclip") is False

    def test_no_command_returns_false(self, monkeypatch):
        monkeypatch.setattr(clipboard, "clipboard_command", lambda: None)
        assert copy_to_clipboard("x") is False
