"""
Gitignore-style exclusion patterns.

Each raw pattern is compiled once into an :class:`ExclusionPattern`; an
ordered :class:`MatchSet` of them decides exclusion with gitignore's
last-match-wins rule. Glob translation is delegated to ``pathspec``'s
``gitwildmatch`` flavour so the ignore-file really is gitignore-compatible.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable, Iterator, Optional, Pattern, Tuple, Union

import pathspec

from .errors import PatternError

PathLike = Union[str, PurePath]

# Characters that may follow a backslash outside a bracket expression.
# Inside ``[...]`` any character may be escaped, as in wildmatch.
_ESCAPABLE = frozenset(" !#*?[]\\")
_GLOB_CHARS = frozenset("*?[\\")


class SourcedPattern(str):
    """A raw pattern string that remembers where it was read from."""

    def __new__(cls, raw: str, source: Optional[str] = None, line: Optional[int] = None):
        obj = super().__new__(cls, raw)
        obj.source = source
        obj.line = line
        return obj


def _check_escapes(raw: str, position: Optional[int], source: Optional[str]) -> None:
    in_bracket = False
    bracket_body = 0
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\":
            if i + 1 >= len(raw):
                raise PatternError(raw, "trailing backslash escapes nothing", position, source)
            if not in_bracket and raw[i + 1] not in _ESCAPABLE:
                raise PatternError(
                    raw, f"unsupported escape sequence '\\{raw[i + 1]}'", position, source
                )
            i += 2
            continue
        if in_bracket:
            # A ']' right after '[' or '[!' is a literal member.
            if ch == "]" and i > bracket_body:
                in_bracket = False
        elif ch == "[":
            in_bracket = True
            bracket_body = i + 1
            if bracket_body < len(raw) and raw[bracket_body] in "!^":
                bracket_body += 1
        i += 1


def _trim(raw: str) -> str:
    # An escaped trailing space is significant.
    if raw.endswith("\\ "):
        return raw.lstrip()
    return raw.strip()


def normalize_relative(path: PathLike) -> str:
    """Return *path* with ``/`` separators and no leading ``./`` or ``/``."""
    if isinstance(path, PurePath):
        text = path.as_posix()
    else:
        text = path.replace(os.sep, "/")
        if os.altsep:
            text = text.replace(os.altsep, "/")
    while text.startswith("./"):
        text = text[2:]
    text = text.lstrip("/")
    return "" if text == "." else text


@dataclass(frozen=True)
class ExclusionPattern:
    """One compiled pattern.

    ``segments`` are the ``/``-separated pieces of the pattern body (without
    the ``!`` and trailing ``/``). ``anchored`` is true when the body holds a
    ``/`` before its end, i.e. it matches relative to the root instead of
    against the final path segment at any depth.
    """

    raw: str
    negated: bool
    directory_only: bool
    anchored: bool
    segments: Tuple[str, ...]
    regex: Pattern[str]

    def matches(self, candidate: str) -> bool:
        """Test a normalized path (directories carry a trailing ``/``)."""
        return self.regex.match(candidate) is not None

    @property
    def literal_prefix(self) -> Tuple[str, ...]:
        """Glob-free leading directory segments of an anchored pattern."""
        if not self.anchored:
            return ()
        prefix = []
        for segment in self.segments[:-1]:
            if any(ch in _GLOB_CHARS for ch in segment):
                break
            prefix.append(segment)
        return tuple(prefix)


def compile_pattern(
    raw: str,
    position: Optional[int] = None,
    case_sensitive: bool = True,
    source: Optional[str] = None,
) -> ExclusionPattern:
    """Compile a single raw pattern string, raising :class:`PatternError`."""
    raw = str(raw)
    if not raw.strip():
        raise PatternError(raw, "pattern is empty", position, source)
    _check_escapes(raw, position, source)

    body = _trim(raw)
    negated = body.startswith("!")
    if negated:
        body = body[1:]
        if not body.strip():
            raise PatternError(raw, "negation without a pattern", position, source)
    directory_only = body.endswith("/")
    stripped = body.rstrip("/")
    anchored = "/" in stripped
    segments = tuple(seg for seg in stripped.split("/") if seg)

    try:
        compiled = pathspec.PathSpec.from_lines("gitwildmatch", [raw]).patterns[0]
    except ValueError as e:
        raise PatternError(raw, str(e), position, source) from e
    if compiled.include is None or compiled.regex is None:
        raise PatternError(raw, "pattern matches nothing", position, source)

    regex = compiled.regex
    if not case_sensitive:
        regex = re.compile(regex.pattern, re.IGNORECASE)

    return ExclusionPattern(
        raw=raw,
        negated=negated,
        directory_only=directory_only,
        anchored=anchored,
        segments=segments,
        regex=regex,
    )


@dataclass(frozen=True)
class MatchSet:
    """Ordered, immutable pattern list evaluated with last-match-wins."""

    patterns: Tuple[ExclusionPattern, ...] = ()
    case_sensitive: bool = True

    def __len__(self) -> int:
        return len(self.patterns)

    def __iter__(self) -> Iterator[ExclusionPattern]:
        return iter(self.patterns)

    def last_match(
        self, relative_path: PathLike, is_directory: bool = False
    ) -> Optional[ExclusionPattern]:
        """Return the last pattern that matches, or ``None``."""
        candidate = normalize_relative(relative_path)
        if not candidate:
            return None
        if is_directory:
            candidate += "/"
        winner = None
        for pattern in self.patterns:
            if pattern.matches(candidate):
                winner = pattern
        return winner

    def is_excluded(self, relative_path: PathLike, is_directory: bool = False) -> bool:
        winner = self.last_match(relative_path, is_directory)
        return winner is not None and not winner.negated

    def could_reinclude_under(self, relative_dir: PathLike) -> bool:
        """Whether a negated pattern names something inside *relative_dir*.

        Used to decide if an excluded directory has to be descended anyway.
        Only anchored negations with a literal directory prefix count, so
        ``!build/keep.txt`` opens ``build`` while ``!*.txt`` opens nothing.
        """
        parts = tuple(seg for seg in normalize_relative(relative_dir).split("/") if seg)
        if not parts:
            return False
        if not self.case_sensitive:
            parts = tuple(seg.lower() for seg in parts)
        for pattern in self.patterns:
            if not pattern.negated:
                continue
            prefix = pattern.literal_prefix
            if not self.case_sensitive:
                prefix = tuple(seg.lower() for seg in prefix)
            if len(prefix) >= len(parts) and prefix[: len(parts)] == parts:
                return True
        return False


def compile_patterns(patterns: Iterable[str], case_sensitive: bool = True) -> MatchSet:
    """Compile raw pattern strings, in order, into a :class:`MatchSet`.

    Errors are reported here, never at match time. A :class:`SourcedPattern`
    reports its own source and line; plain strings report their 1-based
    index in *patterns*.
    """
    compiled = []
    for index, raw in enumerate(patterns, start=1):
        if isinstance(raw, SourcedPattern) and raw.source is not None:
            position, source = raw.line, raw.source
        else:
            position, source = index, None
        compiled.append(
            compile_pattern(raw, position=position, case_sensitive=case_sensitive, source=source)
        )
    return MatchSet(patterns=tuple(compiled), case_sensitive=case_sensitive)
