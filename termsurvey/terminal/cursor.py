"""ANSI cursor movement and line erasing."""

from __future__ import annotations

import re
from contextlib import suppress
from dataclasses import dataclass
from typing import IO, Any, Optional

from termsurvey.terminal.keys import Coord, EraseLineMode

_DSR_PATTERN = re.compile(rb"\x1b\[(\d+);(\d+)R$")


@dataclass
class Stdio:
    """The input, output and error streams a prompt works with."""

    in_: Optional[IO[Any]] = None
    out: Optional[IO[Any]] = None
    err: Optional[IO[Any]] = None


def _write(out: IO[Any], text: str) -> None:
    out.write(text)
    flush = getattr(out, "flush", None)
    if flush is not None:
        with suppress(OSError, ValueError):
            flush()


def erase_line(out: IO[Any], mode: EraseLineMode) -> None:
    """Erase part of the current line according to ``mode``."""
    _write(out, f"\x1b[{int(mode)}K")


def _read_byte(stream: IO[Any]) -> bytes:
    data = stream.read(1)
    if not data:
        raise EOFError("unexpected end of input while reading cursor position")
    if isinstance(data, str):
        data = data.encode("utf-8")
    return data


@dataclass
class Cursor:
    """Moves the terminal cursor by writing ANSI escape sequences."""

    in_: Optional[IO[Any]] = None
    out: Optional[IO[Any]] = None

    def up(self, n: int) -> None:
        """Move the cursor ``n`` cells up."""
        _write(self.out, f"\x1b[{n}A")

    def down(self, n: int) -> None:
        """Move the cursor ``n`` cells down."""
        _write(self.out, f"\x1b[{n}B")

    def forward(self, n: int) -> None:
        """Move the cursor ``n`` cells right."""
        _write(self.out, f"\x1b[{n}C")

    def back(self, n: int) -> None:
        """Move the cursor ``n`` cells left."""
        _write(self.out, f"\x1b[{n}D")

    def next_line(self, n: int) -> None:
        """Move the cursor to the beginning of the next line."""
        self.down(1)
        self.horizontal_absolute(0)

    def previous_line(self, n: int) -> None:
        """Move the cursor to the beginning of the previous line."""
        self.up(1)
        self.horizontal_absolute(0)

    def horizontal_absolute(self, x: int) -> None:
        """Move the cursor horizontally to column ``x``."""
        _write(self.out, f"\x1b[{x}G")

    def show(self) -> None:
        """Make the cursor visible."""
        _write(self.out, "\x1b[?25h")

    def hide(self) -> None:
        """Make the cursor invisible."""
        _write(self.out, "\x1b[?25l")

    def _move(self, x: int, y: int) -> None:
        _write(self.out, f"\x1b[{x};{y}f")

    def save(self) -> None:
        """Save the current cursor position."""
        _write(self.out, "\x1b7")

    def restore(self) -> None:
        """Restore the saved cursor position."""
        _write(self.out, "\x1b8")

    def move_next_line(self, cur: Coord, terminal_size: Coord) -> None:
        """Go to the next line, scrolling first when on the bottom row."""
        if cur.y == terminal_size.y:
            _write(self.out, "\n")
        self.next_line(1)

    def location(self, buf: Optional[bytearray]) -> Coord:
        """Ask the terminal for the cursor position.

        Input that arrives before the position report is appended to ``buf``
        so that it is not lost.
        """
        _write(self.out, "\x1b[6n")

        while True:
            text = bytearray()
            while True:
                byte = _read_byte(self.in_)
                text += byte
                if byte == b"R":
                    break
            match = _DSR_PATTERN.search(bytes(text))
            if match is None:
                if buf is not None:
                    buf.extend(text)
                continue
            if buf is not None:
                buf.extend(text[: match.start()])
            row, col = int(match.group(1)), int(match.group(2))
            return Coord(x=col, y=row)

    def size(self, buf: Optional[bytearray]) -> Coord:
        """Return the terminal size as the position of its bottom-right cell."""
        self.hide()
        try:
            self.save()
            try:
                self._move(999, 999)
                return self.location(buf)
            finally:
                self.restore()
        finally:
            self.show()