"""Terminal control helpers for the interactive list session.

Owns raw-mode lifecycle and alternate-screen switching, plus the screen
primitives used to draw frames either by full clear or by in-place overwrite.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
ERASE_LINE = "\x1b[2K"
ERASE_LINE_END = "\x1b[K"
ERASE_DOWN = "\x1b[J"


class TerminalController:
    """Manage terminal mode transitions for one interactive session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen, and restore tty state.

        ``TCSAFLUSH`` discards input the session never read, so stray key
        bytes do not leak into whatever prompt runs next.
        """
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()


class ScreenRenderer:
    """Scoped screen operations written straight to the output descriptor."""

    def __init__(self, stdout_fd: int) -> None:
        self.stdout_fd = stdout_fd

    def _write(self, payload: str) -> None:
        os.write(self.stdout_fd, payload.encode("utf-8"))

    def clear_screen(self) -> None:
        """Clear the whole screen and home the cursor."""
        self._write(CLEAR_SCREEN + CURSOR_HOME)

    def move_to_top(self) -> None:
        """Home the cursor without clearing, for in-place redraws."""
        self._write(CURSOR_HOME)

    def hide_cursor(self) -> None:
        self._write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self._write(SHOW_CURSOR)

    def erase_line(self) -> None:
        self._write(ERASE_LINE)

    def erase_down(self) -> None:
        """Erase from the cursor to the end of the screen."""
        self._write(ERASE_DOWN)

    def draw_frame(self, lines: list[str], *, hard: bool) -> None:
        """Draw ``lines`` as one frame.

        A hard frame clears the screen first and is used on view switches.
        A soft frame overwrites rows in place, erasing each row tail and
        everything below the last row.
        """
        parts: list[str] = [CLEAR_SCREEN + CURSOR_HOME if hard else CURSOR_HOME]
        for line in lines:
            parts.append(line)
            if not hard:
                parts.append(ERASE_LINE_END)
            # Raw mode disables output post-processing, so newlines need an explicit CR.
            parts.append("\r\n")
        parts.append(ERASE_DOWN)
        self._write("".join(parts))
