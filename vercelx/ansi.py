"""ANSI-aware text measurement and line shaping utilities.

Provides width measurement, clipping, and padding that preserve escape
sequences so bordered table rows stay aligned when color codes are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"
RESET = "\033[0m"


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    """Remove all CSI escape sequences from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def visible_width(text: str) -> int:
    """Return display columns used by ``text`` ignoring escape sequences."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns, marking truncation with an ellipsis."""
    if width <= 0:
        return ""
    if visible_width(text) <= width:
        return text
    clipped = clip_ansi_line(text, width - 1) + ELLIPSIS
    if ANSI_ESCAPE_RE.search(text):
        # Clipping can drop the trailing reset of a styled span.
        clipped += RESET
    return clipped


def pad_ansi(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to exactly ``width`` visible columns.

    Longer input is clipped first so the result never exceeds ``width``.
    """
    clipped = fit_ansi(text, width)
    return clipped + " " * max(0, width - visible_width(clipped))
