"""
Directory traversal.

:class:`TreeWalker` walks a root depth-first in pre-order, children sorted by
name, and lazily yields the files that survive the hidden-entry policy and
the exclusion patterns. Excluded directories are pruned before descent, so
nothing beneath them is ever listed or opened. Symlinks are never followed
into.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Iterable, Iterator, List, Optional

from .errors import FileSystemError, TraversalError
from .patterns import MatchSet
from .report import TraversalReport


class NodeKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True)
class TraversalNode:
    """A filesystem entry seen during the walk."""

    path: Path
    relative_path: str
    kind: NodeKind

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def hidden(self) -> bool:
        return self.name.startswith(".")

    @property
    def is_directory(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass(frozen=True)
class IncludedFile:
    """A file that passed every check; ``relative_path`` uses ``/``."""

    path: Path
    relative_path: str


def _node_kind(entry: os.DirEntry) -> NodeKind:
    if entry.is_symlink():
        return NodeKind.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return NodeKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return NodeKind.FILE
    return NodeKind.OTHER


def resolve_root(root: Path) -> Path:
    """Resolve and validate a traversal root, raising :class:`TraversalError`."""
    try:
        resolved = Path(root).resolve()
    except (OSError, RuntimeError) as e:
        raise TraversalError(f"Could not resolve root path '{root}': {e}")
    if not resolved.exists():
        raise TraversalError(f"Root directory '{root}' does not exist")
    if not resolved.is_dir():
        raise TraversalError(f"Root path '{root}' is not a directory")
    return resolved


class TreeWalker:
    """Single-pass walker over one root.

    Listing failures are recorded in ``report`` and the walk moves on to the
    next sibling. Calling :meth:`walk` again performs a fresh traversal.
    """

    def __init__(
        self,
        root: Path,
        match_set: MatchSet,
        skip_hidden: bool = True,
        report: Optional[TraversalReport] = None,
        include_symlinked_files: bool = False,
        skip_paths: Iterable[Path] = (),
    ):
        self.root = resolve_root(root)
        self.match_set = match_set
        self.skip_hidden = skip_hidden
        self.report = report if report is not None else TraversalReport()
        self.include_symlinked_files = include_symlinked_files
        self._skip_paths: AbstractSet[Path] = frozenset(Path(p) for p in skip_paths)

    def walk(self) -> Iterator[IncludedFile]:
        # One iterator per open directory keeps pre-order without recursion.
        stack: List[Iterator[TraversalNode]] = [self._children(self.root, "")]
        while stack:
            node = next(stack[-1], None)
            if node is None:
                stack.pop()
                continue

            if self.skip_hidden and node.hidden:
                continue

            if node.is_directory:
                if self.match_set.is_excluded(node.relative_path, is_directory=True):
                    if not self.match_set.could_reinclude_under(node.relative_path):
                        continue
                stack.append(self._children(node.path, node.relative_path))
                continue

            if self.match_set.is_excluded(node.relative_path, is_directory=False):
                continue
            if not self._is_readable_kind(node):
                continue
            if node.path in self._skip_paths:
                continue
            yield IncludedFile(path=node.path, relative_path=node.relative_path)

    def _is_readable_kind(self, node: TraversalNode) -> bool:
        if node.kind is NodeKind.FILE:
            return True
        if node.kind is NodeKind.SYMLINK and self.include_symlinked_files:
            # Dangling links and links to directories stay out.
            return node.path.is_file()
        return False

    def _children(self, directory: Path, relative: str) -> Iterator[TraversalNode]:
        nodes: List[TraversalNode] = []
        try:
            with os.scandir(directory) as entries:
                for entry in sorted(entries, key=lambda e: e.name):
                    child_relative = f"{relative}/{entry.name}" if relative else entry.name
                    try:
                        kind = _node_kind(entry)
                    except OSError as e:
                        self.report.record(FileSystemError(Path(entry.path), f"could not stat: {e}"))
                        continue
                    nodes.append(
                        TraversalNode(
                            path=Path(entry.path),
                            relative_path=child_relative,
                            kind=kind,
                        )
                    )
        except OSError as e:
            self.report.record(FileSystemError(directory, f"could not list directory: {e}"))
            return iter(())
        return iter(nodes)


def walk(
    root: Path,
    match_set: MatchSet,
    skip_hidden: bool = True,
    report: Optional[TraversalReport] = None,
) -> Iterator[IncludedFile]:
    """Validate *root* now and return the lazy file sequence."""
    return TreeWalker(root, match_set, skip_hidden=skip_hidden, report=report).walk()
