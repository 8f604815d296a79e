"""
Exception hierarchy for treedump.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class TreedumpError(Exception):
    """Base exception for treedump errors."""
    pass


class PatternError(TreedumpError):
    """Raised when an exclusion pattern cannot be compiled.

    ``source`` names where the pattern came from (an ignore-file path or
    ``--exclude``) and ``position`` is the line number in that file or the
    ordinal among the command-line patterns.
    """

    def __init__(
        self,
        pattern: str,
        reason: str,
        position: Optional[int] = None,
        source: Optional[str] = None,
    ):
        self.pattern = pattern
        self.reason = reason
        self.position = position
        self.source = source
        if source is not None and position is not None:
            where = f" at {source}:{position}"
        elif position is not None:
            where = f" #{position}"
        else:
            where = ""
        super().__init__(f"Invalid exclusion pattern{where} '{pattern}': {reason}")


class FileSystemError(TreedumpError):
    """Raised when a directory cannot be listed or a file cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class TraversalError(TreedumpError):
    """Raised when the traversal root is missing or not a directory."""
    pass


class OutputError(TreedumpError):
    """Raised when there are issues writing output files."""
    pass
