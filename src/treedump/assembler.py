"""
Output assembly: one ``==> path`` section per included file.
"""

from __future__ import annotations

from typing import Iterable, Optional, TextIO

from .errors import FileSystemError, OutputError
from .report import TraversalReport
from .walker import IncludedFile

HEADER_PREFIX = "==> "


def format_section(relative_path: str, text: str) -> str:
    """Frame *text* as a section.

    Trailing line breaks of the content are normalized so every section ends
    with the content's last line followed by exactly one blank line.
    """
    body = text.rstrip("\r\n")
    header = f"{HEADER_PREFIX}{relative_path}\n"
    if not body:
        return header + "\n"
    return f"{header}{body}\n\n"


def read_text(included: IncludedFile) -> str:
    try:
        raw = included.path.read_bytes()
    except OSError as e:
        raise FileSystemError(included.path, f"could not read file: {e}") from e
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FileSystemError(included.path, f"not valid UTF-8 text: {e}") from e


def assemble(
    files: Iterable[IncludedFile],
    sink: TextIO,
    report: Optional[TraversalReport] = None,
    label: str = "",
) -> int:
    """Write a section for every readable file of *files* into *sink*.

    Unreadable or undecodable files are recorded in *report* and skipped.
    A non-empty *label* is prepended to every header path.
    Returns the number of files written.
    """
    if report is None:
        report = TraversalReport()
    written = 0
    for included in files:
        try:
            text = read_text(included)
        except FileSystemError as e:
            report.record(e)
            continue

        header_path = f"{label}/{included.relative_path}" if label else included.relative_path
        section = format_section(header_path, text)
        try:
            sink.write(section)
        except OSError as e:
            raise OutputError(f"Could not write section for '{header_path}': {e}") from e
        written += 1
        report.files_written += 1
        report.bytes_written += len(section.encode("utf-8"))
    return written
