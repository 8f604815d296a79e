"""
Run configuration.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .ignorefile import IGNORE_FILENAME

DEFAULT_OUTPUT = Path("treedump.txt")


@dataclass(frozen=True)
class SnapshotConfig:
    """Everything one run needs; ``output_path`` only matters to the sink."""

    input_paths: Tuple[Path, ...] = (Path("."),)
    output_path: Path = DEFAULT_OUTPUT
    exclude: Tuple[str, ...] = ()
    ignore_root: Optional[Path] = None
    ignore_filename: str = IGNORE_FILENAME
    extra_pattern_file: Optional[Path] = None
    skip_hidden: bool = True
    raw: bool = True
    case_sensitive: bool = True
    include_symlinked_files: bool = False

    def __post_init__(self) -> None:
        if not self.input_paths:
            raise ValueError("at least one input path is required")
        if not self.raw:
            raise ValueError("only raw output mode is supported")

    @property
    def effective_ignore_root(self) -> Path:
        return self.ignore_root if self.ignore_root is not None else self.input_paths[0]

    @classmethod
    def from_namespace(cls, ns: argparse.Namespace) -> "SnapshotConfig":
        return cls(
            input_paths=tuple(ns.inputs) or (Path("."),),
            output_path=ns.out,
            exclude=tuple(ns.exclude or ()),
            ignore_root=ns.root,
            extra_pattern_file=ns.config,
            skip_hidden=ns.skip_hidden,
            case_sensitive=not ns.ignore_case,
            include_symlinked_files=ns.include_symlinks,
        )
