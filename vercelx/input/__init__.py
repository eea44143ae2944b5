"""Keyboard input decoding for the interactive list."""

from .parser import KeyParser, ParserState
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_keys

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyParser",
    "ParserState",
    "read_keys",
]
