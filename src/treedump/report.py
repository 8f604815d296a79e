"""
Per-run result accumulator.

The walker and the assembler record what they could not handle here instead
of printing, so callers can tell "completed fully" from "completed with N
skipped entries".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import FileSystemError


@dataclass(frozen=True)
class SkippedEntry:
    path: Path
    reason: str


@dataclass
class TraversalReport:
    files_written: int = 0
    bytes_written: int = 0
    skipped: List[SkippedEntry] = field(default_factory=list)
    empty_roots: List[Path] = field(default_factory=list)

    def record(self, error: FileSystemError) -> None:
        self.skipped.append(SkippedEntry(path=error.path, reason=error.reason))

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def completed_fully(self) -> bool:
        return not self.skipped

    def status(self) -> str:
        if self.completed_fully:
            return "completed fully"
        noun = "entry" if self.skipped_count == 1 else "entries"
        return f"completed with {self.skipped_count} skipped {noun}"
