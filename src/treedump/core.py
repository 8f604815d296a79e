"""
Core pipeline for treedump: patterns -> walk -> assemble.
"""

from __future__ import annotations

import io
import os
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .assembler import assemble
from .config import SnapshotConfig
from .errors import OutputError
from .ignorefile import load_ignore_file, read_pattern_file
from .patterns import MatchSet, SourcedPattern, compile_patterns
from .report import TraversalReport
from .walker import TreeWalker, resolve_root

# (root, patterns for that root, header label)
RootPlan = Tuple[Path, MatchSet, str]


def collect_patterns(config: SnapshotConfig, ignore_root: Optional[Path] = None) -> List[str]:
    """Ignore-file patterns first, then the extra pattern file, then ``exclude``.

    Later patterns win, so command-line excludes override the ignore-file.
    """
    if ignore_root is None:
        ignore_root = config.effective_ignore_root
    patterns = load_ignore_file(ignore_root, config.ignore_filename)
    if config.extra_pattern_file is not None:
        patterns.extend(read_pattern_file(config.extra_pattern_file))
    patterns.extend(
        SourcedPattern(raw, source="--exclude", line=index)
        for index, raw in enumerate(config.exclude, start=1)
    )
    return patterns


def build_match_set(config: SnapshotConfig, ignore_root: Optional[Path] = None) -> MatchSet:
    return compile_patterns(
        collect_patterns(config, ignore_root), case_sensitive=config.case_sensitive
    )


def root_labels(roots: List[Path]) -> List[str]:
    """Header labels keeping sections of several roots apart.

    A single root gets no label. Otherwise each root is labelled with its
    path below the roots' common parent, or its own name if it is that parent.
    """
    if len(roots) < 2:
        return [""] * len(roots)
    try:
        common = Path(os.path.commonpath([str(root) for root in roots]))
    except ValueError:
        # Different drives share no parent.
        return [root.as_posix() for root in roots]
    labels = []
    for root in roots:
        relative = root.relative_to(common).as_posix()
        labels.append(root.name if relative == "." else relative)
    return labels


def plan_roots(config: SnapshotConfig, match_set: Optional[MatchSet] = None) -> List[RootPlan]:
    """Validate every root and compile its patterns before anything is written.

    Without an explicit ``ignore_root`` each root reads its own ignore-file.
    """
    roots = [resolve_root(p) for p in config.input_paths]
    plan: List[RootPlan] = []
    shared = match_set
    if shared is None and config.ignore_root is not None:
        shared = build_match_set(config)
    for root, label in zip(roots, root_labels(roots)):
        root_set = shared if shared is not None else build_match_set(config, ignore_root=root)
        plan.append((root, root_set, label))
    return plan


def _write_roots(
    config: SnapshotConfig,
    plan: List[RootPlan],
    sink: TextIO,
    report: TraversalReport,
    skip_paths: Tuple[Path, ...] = (),
) -> None:
    for root, match_set, label in plan:
        walker = TreeWalker(
            root,
            match_set,
            skip_hidden=config.skip_hidden,
            report=report,
            include_symlinked_files=config.include_symlinked_files,
            skip_paths=skip_paths,
        )
        if assemble(walker.walk(), sink, report, label=label) == 0:
            report.empty_roots.append(root)


def _prepare_output(out_path: Path) -> Path:
    try:
        out_path = out_path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}")

    if not out_path.parent.exists():
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create directory '{out_path.parent}': {e}")
    return out_path


def snapshot(config: SnapshotConfig, match_set: Optional[MatchSet] = None) -> TraversalReport:
    """Write the snapshot described by *config* to ``config.output_path``.

    Pattern, ignore-file and root problems raise before the output file is
    opened. Per-entry failures end up in the returned report.
    """
    plan = plan_roots(config, match_set)
    out_path = _prepare_output(config.output_path)

    report = TraversalReport()
    try:
        with out_path.open("w", encoding="utf-8", newline="\n") as out_fh:
            _write_roots(config, plan, out_fh, report, skip_paths=(out_path,))
    except OSError as e:
        raise OutputError(f"Could not write to output file '{out_path}': {e}")
    return report


def snapshot_text(
    config: SnapshotConfig, match_set: Optional[MatchSet] = None
) -> Tuple[str, TraversalReport]:
    """Like :func:`snapshot` but return the output as one string."""
    plan = plan_roots(config, match_set)

    report = TraversalReport()
    buffer = io.StringIO()
    _write_roots(config, plan, buffer, report)
    return buffer.getvalue(), report
