"""
CLI entrypoint for treedump package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, init as colorama_init

from . import __version__
from .config import DEFAULT_OUTPUT, SnapshotConfig
from .core import snapshot
from .errors import FileSystemError, OutputError, PatternError, TraversalError
from .ignorefile import IGNORE_FILENAME


def _say(msg: str, color: str = "") -> None:
    if color:
        print(color + msg + Style.RESET_ALL)
    else:
        print(msg)


def _fail(msg: str) -> None:
    print(Fore.RED + f"Error: {msg}" + Style.RESET_ALL, file=sys.stderr)
    sys.exit(1)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="treedump",
        description="Concatenate every included file under a directory into one text file.",
    )
    p.add_argument(
        "inputs",
        nargs="*",
        type=Path,
        default=[Path(".")],
        help="Directories to walk (default: current directory)",
    )
    p.add_argument(
        "--out",
        "-o",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"Output file (default: {DEFAULT_OUTPUT})",
    )
    p.add_argument(
        "--root",
        type=Path,
        help=f"Directory holding {IGNORE_FILENAME} (default: each input root)",
    )
    p.add_argument(
        "--exclude",
        "-e",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style exclusion pattern; repeatable, overrides the ignore-file",
    )
    p.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    p.add_argument(
        "--no-skip-hidden",
        dest="skip_hidden",
        action="store_false",
        help="Include entries whose name starts with '.'",
    )
    p.add_argument("--ignore-case", action="store_true", help="Match patterns case-insensitively")
    p.add_argument(
        "--include-symlinks",
        action="store_true",
        help="Read symlinks that point to regular files",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    colorama_init()
    try:
        ns = _parse_args(argv)
        config = SnapshotConfig.from_namespace(ns)

        if ns.verbose:
            for root in config.input_paths:
                _say(f"[treedump] Scanning {root.resolve()} …")

        try:
            report = snapshot(config)
        except (PatternError, FileSystemError, TraversalError, OutputError) as e:
            _fail(str(e))

        for root in report.empty_roots:
            _say(f"[treedump] ! No files found in {root}", Fore.YELLOW)
        if report.files_written == 0:
            _fail("No files found in any of the specified directories")

        if ns.verbose:
            for skipped in report.skipped:
                _say(f"[treedump] ! Skipped {skipped.path}: {skipped.reason}", Fore.YELLOW)

        color = Fore.GREEN if report.completed_fully else Fore.YELLOW
        _say(
            f"[treedump] Done → {config.output_path}. "
            f"{report.files_written} files, {report.bytes_written} bytes written; "
            f"{report.status()}.",
            color,
        )

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
