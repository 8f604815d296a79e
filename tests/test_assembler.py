"""Tests for section framing and output assembly."""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from treedump.assembler import assemble, format_section
from treedump.errors import OutputError
from treedump.report import TraversalReport
from treedump.walker import IncludedFile


def _included(root: Path, relative: str, data: bytes) -> IncludedFile:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return IncludedFile(path=path, relative_path=relative)


class FormatSectionTests(unittest.TestCase):
    def test_content_without_trailing_newline(self) -> None:
        self.assertEqual(format_section("a.txt", "hello"), "==> a.txt\nhello\n\n")

    def test_trailing_newlines_are_normalized(self) -> None:
        self.assertEqual(format_section("a.txt", "hello\n\n\n"), "==> a.txt\nhello\n\n")
        self.assertEqual(format_section("a.txt", "hello\r\n"), "==> a.txt\nhello\n\n")

    def test_inner_content_is_untouched(self) -> None:
        text = "  line one\n\n\tline three  \n"
        self.assertEqual(format_section("x/y.py", text), "==> x/y.py\n  line one\n\n\tline three  \n\n")

    def test_empty_file_has_header_and_blank_line(self) -> None:
        self.assertEqual(format_section("empty.txt", ""), "==> empty.txt\n\n")


class AssembleTests(unittest.TestCase):
    def test_sections_written_in_yield_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            files = [
                _included(root, "z.txt", b"last?\n"),
                _included(root, "a/b.txt", b"world"),
            ]
            sink = io.StringIO()

            count = assemble(iter(files), sink)

            self.assertEqual(count, 2)
            self.assertEqual(sink.getvalue(), "==> z.txt\nlast?\n\n==> a/b.txt\nworld\n\n")

    def test_invalid_utf8_file_is_recorded_and_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            files = [
                _included(root, "bin.dat", b"\xff\xfe\x00\x01"),
                _included(root, "ok.txt", "café\n".encode("utf-8")),
            ]
            sink = io.StringIO()
            report = TraversalReport()

            count = assemble(files, sink, report)

            self.assertEqual(count, 1)
            self.assertEqual(sink.getvalue(), "==> ok.txt\ncafé\n\n")
            self.assertEqual(report.files_written, 1)
            self.assertEqual([s.path.name for s in report.skipped], ["bin.dat"])
            self.assertEqual(report.status(), "completed with 1 skipped entry")

    def test_missing_file_is_recorded_and_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            ghost = IncludedFile(path=root / "ghost.txt", relative_path="ghost.txt")
            real = _included(root, "real.txt", b"here")
            report = TraversalReport()
            sink = io.StringIO()

            self.assertEqual(assemble([ghost, real], sink, report), 1)
            self.assertEqual(report.skipped_count, 1)
            self.assertIn("could not read", report.skipped[0].reason)

    def test_bytes_written_counts_utf8_bytes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            report = TraversalReport()
            sink = io.StringIO()

            assemble([_included(root, "e.txt", "é".encode("utf-8"))], sink, report)

            self.assertEqual(report.bytes_written, len(sink.getvalue().encode("utf-8")))
            self.assertTrue(report.completed_fully)
            self.assertEqual(report.status(), "completed fully")

    def test_label_prefixes_every_header(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            sink = io.StringIO()

            assemble([_included(root, "a/b.txt", b"B")], sink, label="one")

            self.assertEqual(sink.getvalue(), "==> one/a/b.txt\nB\n\n")

    def test_failing_sink_raises_output_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            files = [_included(root, "a.txt", b"A"), _included(root, "b.txt", b"B")]
            sink = mock.Mock(write=mock.Mock(side_effect=OSError(28, "No space left on device")))
            report = TraversalReport()

            with self.assertRaises(OutputError) as ctx:
                assemble(files, sink, report)

            self.assertIn("'a.txt'", str(ctx.exception))
            self.assertIsInstance(ctx.exception.__cause__, OSError)
            self.assertEqual(sink.write.call_count, 1)
            self.assertEqual(report.files_written, 0)
            self.assertEqual(report.skipped_count, 0)


if __name__ == "__main__":
    unittest.main()
