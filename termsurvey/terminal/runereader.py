"""Reading single keys and whole lines from a terminal in raw mode."""

from __future__ import annotations

import os
import unicodedata
from contextlib import suppress
from typing import IO, Any, Callable, List, Optional, Tuple

from termsurvey.terminal.cursor import Cursor, Stdio, erase_line
from termsurvey.terminal.keys import (
    COORDINATE_SYSTEM_BEGIN,
    EraseLineMode,
    InterruptError,
    Key,
    sound_bell,
)

try:
    import termios
except ImportError:  # pragma: no cover - non-POSIX platforms
    termios = None  # type: ignore[assignment]

OnRune = Callable[[str, str], Tuple[str, bool]]

_NORMAL_KEYPAD = "["
_APPLICATION_KEYPAD = "O"
_READ_CHUNK = 4096

_ESCAPE_FINALS = {
    "A": Key.ARROW_UP,
    "B": Key.ARROW_DOWN,
    "C": Key.ARROW_RIGHT,
    "D": Key.ARROW_LEFT,
    "F": Key.SPECIAL_END,
    "H": Key.SPECIAL_HOME,
}


def rune_width(char: str) -> int:
    """Number of terminal columns ``char`` occupies when printed."""
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    if not char.isprintable():
        return 0
    return 1


def _is_ansi_marker(char: str) -> bool:
    return char == "\x1b"


def _is_ansi_terminator(char: str) -> bool:
    code = ord(char)
    return 0x40 <= code <= 0x5A or code == 0x5E or 0x60 <= code <= 0x7E


def string_width(text: str) -> int:
    """Visible width of ``text`` on a terminal, ignoring ANSI escape sequences."""
    width = 0
    in_escape = False
    for char in text:
        if in_escape or _is_ansi_marker(char):
            in_escape = not _is_ansi_terminator(char)
        else:
            width += rune_width(char)
    return width


def _fileno(stream: Any) -> Optional[int]:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _print(out: IO[Any], text: str) -> None:
    out.write(text)
    flush = getattr(out, "flush", None)
    if flush is not None:
        with suppress(OSError, ValueError):
            flush()


def _utf8_length(lead: int) -> int:
    if lead < 0x80:
        return 1
    if 0xC0 <= lead < 0xE0:
        return 2
    if 0xE0 <= lead < 0xF0:
        return 3
    if 0xF0 <= lead < 0xF8:
        return 4
    return 1


class RuneReader:
    """Reads keys from the input of ``stdio``, decoding terminal escape sequences."""

    def __init__(self, stdio: Stdio) -> None:
        self.stdio = stdio
        self._buf = bytearray()
        self._pending = bytearray()
        self._saved_term: Optional[list] = None

    def buffer(self) -> bytearray:
        """Bytes pushed back to be read before any further input."""
        return self._buf

    def set_term_mode(self) -> None:
        """Turn off echo, line buffering and signal keys on the input terminal."""
        if termios is None:
            raise OSError("terminal modes are not supported on this platform")
        fd = _fileno(self.stdio.in_)
        if fd is None:
            raise OSError("input is not attached to a file descriptor")
        try:
            self._saved_term = termios.tcgetattr(fd)
            new_state = termios.tcgetattr(fd)
            new_state[3] &= ~(termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG)
            new_state[6][termios.VMIN] = 1
            new_state[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSANOW, new_state)
        except termios.error as exc:
            raise OSError(str(exc)) from exc

    def restore_term_mode(self) -> None:
        """Put the input terminal back into the mode saved by :meth:`set_term_mode`."""
        if self._saved_term is None or termios is None:
            return
        fd = _fileno(self.stdio.in_)
        if fd is None:
            raise OSError("input is not attached to a file descriptor")
        try:
            termios.tcsetattr(fd, termios.TCSANOW, self._saved_term)
        except termios.error as exc:
            raise OSError(str(exc)) from exc

    def _fill(self) -> None:
        if self._buf:
            self._pending += self._buf
            self._buf.clear()
            return
        stream = self.stdio.in_
        if stream is None:
            raise EOFError("no input stream")
        fd = _fileno(stream)
        if fd is not None:
            data: Any = os.read(fd, _READ_CHUNK)
        else:
            raw = getattr(stream, "buffer", stream)
            read1 = getattr(raw, "read1", None)
            data = read1(_READ_CHUNK) if read1 is not None else raw.read(1)
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data:
            raise EOFError("end of input")
        self._pending += data

    def _has_buffered(self) -> bool:
        return bool(self._pending) or bool(self._buf)

    def _next_char(self) -> str:
        if not self._pending:
            self._fill()
        need = _utf8_length(self._pending[0])
        while len(self._pending) < need:
            try:
                self._fill()
            except EOFError:
                break
        try:
            char = bytes(self._pending[:need]).decode("utf-8")
            size = need
        except UnicodeDecodeError:
            char, size = "\ufffd", 1
        del self._pending[:size]
        return char

    def _discard(self) -> None:
        with suppress(EOFError):
            if not self._pending:
                self._fill()
            del self._pending[:1]

    def read_rune(self) -> str:
        """Read one key, turning escape sequences into :class:`Key` values."""
        char = self._next_char()
        if char != Key.ESCAPE:
            return char
        if not self._has_buffered():
            return Key.ESCAPE.value

        keypad = self._next_char()
        if keypad not in (_NORMAL_KEYPAD, _APPLICATION_KEYPAD):
            raise ValueError(
                f"unexpected escape sequence from terminal: {[Key.ESCAPE.value, keypad]!r}"
            )

        final = self._next_char()
        if final in _ESCAPE_FINALS:
            return _ESCAPE_FINALS[final].value
        if final == "3" and keypad == _NORMAL_KEYPAD:
            self._discard()
            return Key.SPECIAL_DELETE.value
        self._discard()
        return Key.IGNORE.value

    def _print_char(self, char: str, mask: Optional[str]) -> None:
        _print(self.stdio.out, mask if mask else char)

    def read_line(self, mask: Optional[str] = None, on_rune: Optional[OnRune] = None) -> str:
        """Read an edited line of input; ``mask`` replaces echoed characters."""
        return self.read_line_with_default(mask, "", on_rune)

    def read_line_with_default(
        self,
        mask: Optional[str] = None,
        default: str = "",
        on_rune: Optional[OnRune] = None,
    ) -> str:
        """Read an edited line of input that starts out holding ``default``.

        ``on_rune`` is called with every key and the line so far; when it
        returns ``(text, True)`` reading stops and ``text`` is returned.
        """
        out = self.stdio.out
        line: List[str] = []
        index = 0
        cursor = Cursor(in_=self.stdio.in_, out=out)

        terminal_size = cursor.size(self.buffer())
        current = cursor.location(self.buffer())

        def increment() -> None:
            if current.cursor_is_at_line_end(terminal_size):
                current.x = COORDINATE_SYSTEM_BEGIN
                current.y += 1
            else:
                current.x += 1

        def decrement() -> None:
            if current.cursor_is_at_line_begin():
                current.x = terminal_size.x
                current.y -= 1
            else:
                current.x -= 1

        def back_one_cell(width: int) -> None:
            if current.cursor_is_at_line_begin():
                cursor.previous_line(1)
                cursor.forward(terminal_size.x)
            else:
                cursor.back(width)

        if default:
            index = len(default)
            _print(out, default)
            line = list(default)
            for _ in default:
                increment()

        while True:
            char = self.read_rune()

            if on_rune is not None:
                replaced, stop = on_rune(char, "".join(line))
                if stop:
                    return replaced

            if char in ("\r", "\n", Key.END_TRANSMISSION):
                while index > 0:
                    if current.cursor_is_at_line_begin():
                        erase_line(out, EraseLineMode.END)
                        cursor.previous_line(1)
                        cursor.forward(terminal_size.x)
                    else:
                        cursor.back(1)
                    decrement()
                    index -= 1
                cursor.move_next_line(current, terminal_size)
                return "".join(line)

            if char == Key.INTERRUPT:
                _print(out, "\r\n")
                raise InterruptError()

            if char in (Key.BACKSPACE, Key.DELETE):
                if index > 0 and line:
                    if index == len(line):
                        cells = rune_width(line[-1])
                        line.pop()
                        if current.x == 1:
                            cursor.previous_line(1)
                            cursor.forward(terminal_size.x)
                        else:
                            cursor.back(cells)
                        erase_line(out, EraseLineMode.END)
                    else:
                        cells = rune_width(line[index - 1])
                        del line[index - 1]
                        cursor.save()
                        cursor.back(cells)
                        for rest in line[index - 1:]:
                            erase_line(out, EraseLineMode.END)
                            self._print_char(rest, mask)
                        if current.y < terminal_size.y:
                            cursor.next_line(1)
                            erase_line(out, EraseLineMode.END)
                        cursor.restore()
                        back_one_cell(cells)
                    index -= 1
                    decrement()
                else:
                    sound_bell(out)
                continue

            if char == Key.ARROW_LEFT:
                if index > 0:
                    back_one_cell(rune_width(line[index - 1]))
                    index -= 1
                    decrement()
                else:
                    sound_bell(out)
                continue

            if char == Key.ARROW_RIGHT:
                if index < len(line):
                    if current.cursor_is_at_line_end(terminal_size):
                        cursor.next_line(1)
                    else:
                        cursor.forward(rune_width(line[index]))
                    index += 1
                    increment()
                else:
                    sound_bell(out)
                continue

            if char == Key.SPECIAL_HOME:
                while index > 0:
                    if current.cursor_is_at_line_begin():
                        cursor.previous_line(1)
                        cursor.forward(terminal_size.x)
                        current.y -= 1
                        current.x = terminal_size.x
                    else:
                        width = rune_width(line[index - 1])
                        cursor.back(width)
                        current.x -= width
                    index -= 1
                continue

            if char == Key.SPECIAL_END:
                while index != len(line):
                    if current.cursor_is_at_line_end(terminal_size):
                        cursor.next_line(1)
                        current.y += 1
                        current.x = COORDINATE_SYSTEM_BEGIN
                    else:
                        width = rune_width(line[index])
                        cursor.forward(width)
                        current.x += width
                    index += 1
                continue

            if char == Key.SPECIAL_DELETE:
                if index != len(line):
                    cursor.save()
                    del line[index]
                    for rest in line[index:]:
                        erase_line(out, EraseLineMode.END)
                        self._print_char(rest, mask)
                    if current.y < terminal_size.y:
                        cursor.next_line(1)
                        erase_line(out, EraseLineMode.END)
                    cursor.restore()
                    if not line or index == len(line):
                        erase_line(out, EraseLineMode.END)
                continue

            if unicodedata.category(char) == "Cc" or char == Key.IGNORE:
                continue

            if index == len(line):
                line.append(char)
                index += 1
                increment()
                self._print_char(char, mask)
            else:
                line.insert(index, char)
                cursor.save()
                erase_line(out, EraseLineMode.END)
                for rest in line[index:]:
                    erase_line(out, EraseLineMode.END)
                    self._print_char(rest, mask)
                    increment()
                if current.cursor_is_at_line_end(terminal_size) and current.y == terminal_size.y:
                    _print(out, "\n")
                    cursor.restore()
                    cursor.previous_line(1)
                else:
                    cursor.restore()
                current = cursor.location(self.buffer())
                if current.cursor_is_at_line_end(terminal_size):
                    cursor.next_line(1)
                else:
                    cursor.forward(rune_width(char))
                index += 1
                increment()