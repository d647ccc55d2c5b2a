"""Drawing prompts on the terminal and erasing what was drawn before."""

from __future__ import annotations

import os
from contextlib import suppress
from dataclasses import dataclass, field
from typing import IO, Any, Sequence, Tuple

from termsurvey.core import Icon, OptionAnswer, PromptConfig, Template, compute_cursor_offset
from termsurvey.terminal.cursor import Cursor, Stdio, erase_line
from termsurvey.terminal.keys import EraseLineMode
from termsurvey.terminal.runereader import RuneReader, string_width

_WIDE_TERMINAL = 10000


@dataclass
class ErrorTemplateData:
    """Data shown when an answer is rejected."""

    error: Exception
    icon: Icon


def _render_error(data: ErrorTemplateData, color: Any) -> str:
    return (
        f"{color(data.icon.format)}{data.icon.text} Sorry, your reply was invalid: "
        f"{data.error}{color('reset')}\n"
    )


ERROR_TEMPLATE = Template(body=_render_error)


def run_template(template: Template, data: Any) -> Tuple[str, str]:
    """Render ``template`` with and without color.

    The first text is shown to the user; the second is used to measure the
    layout of what was printed.
    """
    return template.execute(data, color=True), template.execute(data, color=False)


def _write(out: IO[Any], text: str) -> None:
    out.write(text)
    flush = getattr(out, "flush", None)
    if flush is not None:
        with suppress(OSError, ValueError):
            flush()


@dataclass
class Renderer:
    """Keeps track of printed prompt text so it can be redrawn in place."""

    stdio: Stdio = field(default_factory=Stdio)
    _rendered_errors: str = field(default="", init=False, repr=False, compare=False)
    _rendered_text: str = field(default="", init=False, repr=False, compare=False)

    def with_stdio(self, stdio: Stdio) -> None:
        """Use ``stdio`` for all further input and output."""
        self.stdio = stdio

    def new_rune_reader(self) -> RuneReader:
        """A key reader on this renderer's streams."""
        return RuneReader(self.stdio)

    def new_cursor(self) -> Cursor:
        """A cursor on this renderer's streams."""
        return Cursor(in_=self.stdio.in_, out=self.stdio.out)

    def error(self, config: PromptConfig, invalid: Exception) -> None:
        """Clear the prompt and show why the answer was rejected."""
        self._reset_prompt(self.count_lines(self._rendered_errors))
        self._rendered_errors = ""
        self._reset_prompt(self.count_lines(self._rendered_text))
        self._rendered_text = ""

        user_out, layout_out = run_template(
            ERROR_TEMPLATE, ErrorTemplateData(error=invalid, icon=config.icons.error)
        )
        _write(self.stdio.out, user_out)
        self._rendered_errors += layout_out

    def offset_cursor(self, offset: int) -> None:
        """Move the cursor ``offset`` lines up."""
        cursor = self.new_cursor()
        for _ in range(offset):
            cursor.previous_line(1)

    def render(self, template: Template, data: Any) -> None:
        """Replace the previously rendered text with ``template`` rendered from ``data``."""
        self._reset_prompt(self.count_lines(self._rendered_text))
        self._rendered_text = ""

        user_out, layout_out = run_template(template, data)
        _write(self.stdio.out, user_out)
        self.append_rendered_text(layout_out)

    def render_with_cursor_offset(
        self, template: Template, data: Any, opts: Sequence[OptionAnswer], idx: int
    ) -> None:
        """Render, then place the cursor on the line of the selected option."""
        cursor = self.new_cursor()
        cursor.restore()
        self.render(template, data)
        cursor.save()
        offset = compute_cursor_offset(template, data, opts, idx, self._term_width_safe())
        self.offset_cursor(offset)

    def append_rendered_text(self, text: str) -> None:
        """Record ``text`` as printed so it is erased on the next render."""
        self._rendered_text += text

    def _reset_prompt(self, lines: int) -> None:
        out = self.stdio.out
        cursor = self.new_cursor()
        cursor.horizontal_absolute(0)
        erase_line(out, EraseLineMode.ALL)
        for _ in range(lines):
            cursor.previous_line(1)
            erase_line(out, EraseLineMode.ALL)

    def _term_width(self) -> int:
        return os.get_terminal_size(self.stdio.out.fileno()).columns

    def _term_width_safe(self) -> int:
        try:
            width = self._term_width()
        except (AttributeError, OSError, ValueError):
            return _WIDE_TERMINAL
        return width or _WIDE_TERMINAL

    def count_lines(self, text: str) -> int:
        """Count the newlines in ``text`` plus the extra lines its long lines wrap onto."""
        width = self._term_width_safe()
        count = text.count("\n")
        for line in text.split("\n"):
            line_width = string_width(line)
            if line_width > width:
                count += line_width // width
                if line_width % width == 0:
                    count -= 1
        return count