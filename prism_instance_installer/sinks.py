"""Collaborators for running without a window."""

from __future__ import annotations

import sys
from typing import TextIO

from .installer import LogEntry, LogLevel


class FixedPathPicker:
    """Stands in for the file dialog when --archive is given."""

    def __init__(self, path: str):
        self.path = path

    def pick_file(self, pattern: str, title: str) -> str | None:
        return self.path or None


class ConsoleLogSink:
    """Collects the run log and prints it in one go."""

    _TAGS = {
        LogLevel.INFO:  "INFO ",
        LogLevel.WARN:  "WARN ",
        LogLevel.ERROR: "ERROR",
    }

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream
        self.entries: list[LogEntry] = []
        self.presented = False

    def append(self, level: LogLevel, message: str) -> None:
        self.entries.append(LogEntry(level, message))

    def flush_and_present(self) -> None:
        out = self.stream or sys.stdout
        for entry in self.entries:
            out.write(f"[{self._TAGS[entry.level]}] {entry.message}\n")
        out.flush()
        self.presented = True
