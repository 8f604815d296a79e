"""
Ignore-file loading.

The ignore-file holds one gitignore-style pattern per line. Blank lines and
``#`` comments are dropped, everything else is kept verbatim and in file
order since order decides last-match-wins precedence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .errors import FileSystemError
from .patterns import SourcedPattern

IGNORE_FILENAME = ".treedumpignore"


def parse_ignore_lines(lines: Iterable[str], source: Optional[str] = None) -> List[str]:
    """Return the pattern lines of an ignore-file, in order.

    Each pattern remembers *source* and its 1-based line number so compile
    errors can point back into the file.
    """
    patterns: List[str] = []
    for number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        patterns.append(SourcedPattern(line, source=source, line=number))
    return patterns


def read_pattern_file(path: Path) -> List[str]:
    """Parse the pattern file at *path*; the file must exist."""
    if not path.is_file():
        raise FileSystemError(path, "not a regular file")
    try:
        with path.open("r", encoding="utf-8") as fh:
            return parse_ignore_lines(fh, source=str(path))
    except UnicodeDecodeError as e:
        raise FileSystemError(path, f"not valid UTF-8 text: {e}") from e
    except OSError as e:
        raise FileSystemError(path, f"could not read pattern file: {e}") from e


def load_ignore_file(root_dir: Path, filename: str = IGNORE_FILENAME) -> List[str]:
    """Load patterns from ``root_dir/filename``.

    A missing ignore-file is not an error and yields no patterns. A present
    file that cannot be read raises :class:`FileSystemError`.
    """
    ignore_path = Path(root_dir) / filename
    if not ignore_path.exists() and not ignore_path.is_symlink():
        return []
    return read_pattern_file(ignore_path)
