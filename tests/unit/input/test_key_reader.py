"""Tests for reading key tokens from a file descriptor."""

from __future__ import annotations

import os
import unittest
from unittest import mock

from vercelx.input import KeyParser, read_keys


class ReadKeysTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        self.addCleanup(os.close, self.read_fd)
        self._write_open = True
        self.addCleanup(self._close_writer)

    def _close_writer(self) -> None:
        if self._write_open:
            os.close(self.write_fd)
            self._write_open = False

    def test_timeout_returns_no_keys(self) -> None:
        self.assertEqual(read_keys(self.read_fd, KeyParser(), timeout_ms=1), [])

    def test_reads_available_chunk(self) -> None:
        os.write(self.write_fd, b"ab\x1b[A")
        self.assertEqual(read_keys(self.read_fd, KeyParser(), timeout_ms=100), ["a", "b", "UP"])

    def test_lone_escape_resolves_after_timeout(self) -> None:
        os.write(self.write_fd, b"\x1b")
        parser = KeyParser()
        self.assertEqual(read_keys(self.read_fd, parser, timeout_ms=100), ["ESC"])
        self.assertFalse(parser.pending)

    def test_split_sequence_is_completed_by_follow_up_read(self) -> None:
        chunks = [b"\x1b[", b"B"]
        with mock.patch("vercelx.input.reader._wait_readable", return_value=True), mock.patch(
            "vercelx.input.reader.os.read", side_effect=chunks
        ):
            self.assertEqual(read_keys(self.read_fd, KeyParser(), timeout_ms=100), ["DOWN"])

    def test_closed_stream_raises_eof(self) -> None:
        self._close_writer()
        with self.assertRaises(EOFError):
            read_keys(self.read_fd, KeyParser(), timeout_ms=100)

    def test_eof_after_escape_flushes(self) -> None:
        with mock.patch("vercelx.input.reader._wait_readable", return_value=True), mock.patch(
            "vercelx.input.reader.os.read", side_effect=[b"\x1b", b""]
        ):
            self.assertEqual(read_keys(self.read_fd, KeyParser(), timeout_ms=100), ["ESC"])


if __name__ == "__main__":
    unittest.main()
