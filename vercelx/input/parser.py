"""Byte-level terminal key decoder.

Translates raw stdin bytes into normalized key tokens such as ``UP``,
``ENTER`` or ``CTRL_A``. Printable characters decode to themselves.
Incomplete escape sequences and UTF-8 characters stay buffered across
``feed`` calls, so chunk boundaries never change the decoded tokens.
"""

from __future__ import annotations

from enum import Enum


class ParserState(Enum):
    IDLE = "idle"
    SAW_ESCAPE = "saw_escape"
    SAW_BRACKET = "saw_bracket"
    COLLECTING_NUMERIC = "collecting_numeric"
    SAW_SS3 = "saw_ss3"


ESC = 0x1B
REPLACEMENT_CHAR = "�"
MAX_CSI_PARAMS = 16

_CONTROL_TOKENS: dict[int, str] = {
    0x09: "TAB",
    0x0A: "ENTER",
    0x0D: "ENTER",
    0x08: "BACKSPACE",
    0x7F: "BACKSPACE",
}

# Final bytes shared by ``ESC [`` and ``ESC O`` forms.
_FINAL_TOKENS: dict[int, str] = {
    ord("A"): "UP",
    ord("B"): "DOWN",
    ord("C"): "RIGHT",
    ord("D"): "LEFT",
    ord("H"): "HOME",
    ord("F"): "END",
}

# ``ESC [ <n> ~`` forms, keyed by the first numeric parameter.
_TILDE_TOKENS: dict[str, str] = {
    "1": "HOME",
    "2": "INSERT",
    "3": "DELETE",
    "4": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
    "7": "HOME",
    "8": "END",
}


def _utf8_length(lead: int) -> int:
    """Return expected UTF-8 sequence length for ``lead``, or 0 when invalid."""
    if lead & 0b1110_0000 == 0b1100_0000:
        return 2
    if lead & 0b1111_0000 == 0b1110_0000:
        return 3
    if lead & 0b1111_1000 == 0b1111_0000:
        return 4
    return 0


def _control_token(byte: int) -> str:
    if byte in _CONTROL_TOKENS:
        return _CONTROL_TOKENS[byte]
    return f"CTRL_{chr(byte + 0x40)}"


def _is_csi_final(byte: int) -> bool:
    return 0x40 <= byte <= 0x7E


class KeyParser:
    """Incremental decoder fed with arbitrary byte chunks."""

    def __init__(self) -> None:
        self.state = ParserState.IDLE
        self._params = ""
        self._params_overflow = False
        self._utf8 = bytearray()
        self._utf8_expected = 0

    @property
    def pending(self) -> bool:
        """True while an escape sequence or UTF-8 character is incomplete."""
        return self.state is not ParserState.IDLE or bool(self._utf8)

    def reset(self) -> None:
        self.state = ParserState.IDLE
        self._params = ""
        self._params_overflow = False
        self._utf8.clear()
        self._utf8_expected = 0

    def feed(self, data: bytes) -> list[str]:
        """Consume ``data`` and return every token it completes."""
        tokens: list[str] = []
        for byte in data:
            self._step(byte, tokens)
        return tokens

    def flush(self) -> list[str]:
        """Resolve buffered input after the escape timeout has elapsed.

        A lone ``ESC`` becomes the ``ESC`` token. Partial CSI/SS3 sequences
        and truncated UTF-8 characters are discarded.
        """
        tokens = ["ESC"] if self.state is ParserState.SAW_ESCAPE else []
        self.reset()
        return tokens

    def _step(self, byte: int, tokens: list[str]) -> None:
        state = self.state
        if state is ParserState.IDLE:
            self._step_idle(byte, tokens)
        elif state is ParserState.SAW_ESCAPE:
            if byte == ord("["):
                self.state = ParserState.SAW_BRACKET
            elif byte == ord("O"):
                self.state = ParserState.SAW_SS3
            else:
                tokens.append("ESC")
                self.state = ParserState.IDLE
                self._step_idle(byte, tokens)
        elif state is ParserState.SAW_BRACKET:
            self._step_bracket(byte, tokens)
        elif state is ParserState.COLLECTING_NUMERIC:
            self._step_numeric(byte, tokens)
        elif state is ParserState.SAW_SS3:
            self.state = ParserState.IDLE
            token = _FINAL_TOKENS.get(byte)
            if token is not None:
                tokens.append(token)

    def _step_idle(self, byte: int, tokens: list[str]) -> None:
        if self._utf8:
            if byte & 0b1100_0000 == 0b1000_0000:
                self._utf8.append(byte)
                if len(self._utf8) == self._utf8_expected:
                    tokens.append(bytes(self._utf8).decode("utf-8", errors="replace"))
                    self._utf8.clear()
                return
            # Truncated character: emit a placeholder and decode ``byte`` fresh.
            tokens.append(REPLACEMENT_CHAR)
            self._utf8.clear()

        if byte == ESC:
            self.state = ParserState.SAW_ESCAPE
        elif byte < 0x20 or byte == 0x7F:
            tokens.append(_control_token(byte))
        elif byte < 0x80:
            tokens.append(chr(byte))
        else:
            expected = _utf8_length(byte)
            if expected == 0:
                tokens.append(REPLACEMENT_CHAR)
                return
            self._utf8.append(byte)
            self._utf8_expected = expected

    def _step_bracket(self, byte: int, tokens: list[str]) -> None:
        if ord("0") <= byte <= ord("9") or byte == ord(";"):
            self._params = chr(byte)
            self.state = ParserState.COLLECTING_NUMERIC
            return
        self.state = ParserState.IDLE
        if byte == ord("Z"):
            tokens.append("SHIFT_TAB")
            return
        token = _FINAL_TOKENS.get(byte)
        if token is not None:
            tokens.append(token)
        # Other finals (and stray bytes) are unknown sequences and dropped.

    def _step_numeric(self, byte: int, tokens: list[str]) -> None:
        if ord("0") <= byte <= ord("9") or byte == ord(";"):
            if len(self._params) >= MAX_CSI_PARAMS:
                self._params_overflow = True
            else:
                self._params += chr(byte)
            return

        params = self._params
        overflow = self._params_overflow
        self._params = ""
        self._params_overflow = False
        self.state = ParserState.IDLE
        if overflow:
            return
        if byte == ord("~"):
            token = _TILDE_TOKENS.get(params.split(";", 1)[0])
            if token is not None:
                tokens.append(token)
            return
        if byte == ord("Z"):
            tokens.append("SHIFT_TAB")
            return
        if _is_csi_final(byte):
            # Modified arrows such as ``ESC [ 1 ; 5 A`` decode as plain arrows.
            token = _FINAL_TOKENS.get(byte)
            if token is not None:
                tokens.append(token)
