"""Tests for ANSI-aware width, clipping and padding helpers."""

from __future__ import annotations

import unittest

from vercelx.ansi import ELLIPSIS, RESET, clip_ansi_line, fit_ansi, pad_ansi, strip_ansi, visible_width


class AnsiHelperTests(unittest.TestCase):
    def test_visible_width_ignores_escape_sequences(self) -> None:
        self.assertEqual(visible_width("\033[32mready\033[0m"), 5)
        self.assertEqual(strip_ansi("\033[1;38;5;81mhi\033[0m"), "hi")

    def test_wide_characters_take_two_columns(self) -> None:
        self.assertEqual(visible_width("日本"), 4)
        self.assertEqual(clip_ansi_line("日本語", 5), "日本")

    def test_clip_preserves_escapes(self) -> None:
        self.assertEqual(clip_ansi_line("\033[31mabcdef\033[0m", 3), "\033[31mabc")

    def test_fit_marks_truncation_and_closes_styles(self) -> None:
        self.assertEqual(fit_ansi("abcdef", 4), "abc" + ELLIPSIS)
        clipped = fit_ansi("\033[31mabcdef\033[0m", 4)
        self.assertTrue(clipped.endswith(RESET))
        self.assertEqual(visible_width(clipped), 4)

    def test_fit_leaves_short_text_untouched(self) -> None:
        self.assertEqual(fit_ansi("abc", 10), "abc")
        self.assertEqual(fit_ansi("abc", 0), "")

    def test_pad_reaches_exact_width(self) -> None:
        self.assertEqual(pad_ansi("ab", 5), "ab   ")
        self.assertEqual(visible_width(pad_ansi("\033[32mab\033[0m", 5)), 5)
        self.assertEqual(visible_width(pad_ansi("abcdefgh", 5)), 5)


if __name__ == "__main__":
    unittest.main()
