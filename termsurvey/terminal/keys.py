"""Key codes, terminal coordinates and the interrupt error."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import TextIO

# Column index of the first cell on a line (ANSI terminals count from 1).
COORDINATE_SYSTEM_BEGIN = 1


class Key(str, Enum):
    """Characters produced by the rune reader for special keys."""

    ARROW_LEFT = "\x02"
    ARROW_RIGHT = "\x06"
    ARROW_UP = "\x10"
    ARROW_DOWN = "\x0e"
    SPACE = " "
    ENTER = "\r"
    BACKSPACE = "\b"
    DELETE = "\x7f"
    INTERRUPT = "\x03"
    END_TRANSMISSION = "\x04"
    ESCAPE = "\x1b"
    DELETE_WORD = "\x17"  # Ctrl+W
    DELETE_LINE = "\x18"  # Ctrl+X
    SPECIAL_HOME = "\x01"
    SPECIAL_END = "\x11"
    SPECIAL_DELETE = "\x12"
    IGNORE = "\x00"
    TAB = "\t"


class InterruptError(Exception):
    """Raised when the user interrupts a prompt (Ctrl+C)."""

    def __init__(self, message: str = "interrupt") -> None:
        super().__init__(message)


class EraseLineMode(IntEnum):
    """Which part of the current line an erase affects."""

    END = 0
    START = 1
    ALL = 2


@dataclass
class Coord:
    """A cell position on the terminal; ``x`` is the column, ``y`` the row."""

    x: int = 0
    y: int = 0

    def cursor_is_at_line_end(self, size: Coord) -> bool:
        """Whether this position is in the last column of a terminal of ``size``."""
        return self.x == size.x

    def cursor_is_at_line_begin(self) -> bool:
        """Whether this position is in the first column."""
        return self.x == COORDINATE_SYSTEM_BEGIN


def sound_bell(out: TextIO) -> None:
    """Ring the terminal bell."""
    out.write("\a")
    flush = getattr(out, "flush", None)
    if flush is not None:
        flush()