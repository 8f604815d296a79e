"""
treedump - Flatten a directory tree into one labelled text file.

This package walks a directory tree, decides for every entry whether it is
included (hidden-entry policy plus gitignore-style exclusion patterns from
a ``.treedumpignore`` file and the command line), and concatenates the
contents of all included text files into a single ordered output with
``==> path`` section headers.
"""

__version__ = "0.1.0"

from .errors import (
    FileSystemError,
    OutputError,
    PatternError,
    TraversalError,
    TreedumpError,
)
from .patterns import ExclusionPattern, MatchSet, compile_patterns
from .ignorefile import IGNORE_FILENAME, load_ignore_file
from .walker import IncludedFile, TraversalNode, TreeWalker
from .assembler import assemble, format_section
from .report import SkippedEntry, TraversalReport
from .config import SnapshotConfig
from .core import build_match_set, snapshot, snapshot_text

__all__ = [
    "__version__",
    "TreedumpError",
    "PatternError",
    "FileSystemError",
    "TraversalError",
    "OutputError",
    "ExclusionPattern",
    "MatchSet",
    "compile_patterns",
    "IGNORE_FILENAME",
    "load_ignore_file",
    "TraversalNode",
    "IncludedFile",
    "TreeWalker",
    "assemble",
    "format_section",
    "SkippedEntry",
    "TraversalReport",
    "SnapshotConfig",
    "build_match_set",
    "snapshot",
    "snapshot_text",
]
