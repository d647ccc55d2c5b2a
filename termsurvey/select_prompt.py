"""A prompt that lets the user pick one option from a filterable list."""

from __future__ import annotations

import dataclasses
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from termsurvey.core import (
    OptionAnswer,
    PromptConfig,
    Template,
    default_prompt_config,
    option_answer_list,
    paginate,
)
from termsurvey.renderer import Renderer
from termsurvey.terminal.keys import InterruptError, Key

FilterFunc = Callable[[str, str, int], bool]
DescriptionFunc = Callable[[str, int], str]


@dataclass
class Select(Renderer):
    """Presents a list of options to choose from with the arrow keys and enter.

    The answer is the chosen :class:`OptionAnswer`.
    """

    message: str = ""
    options: List[str] = field(default_factory=list)
    default: Any = None
    help: str = ""
    page_size: int = 0
    vim_mode: bool = False
    filter_message: str = ""
    filter: Optional[FilterFunc] = None
    description: Optional[DescriptionFunc] = None
    _filter_text: str = field(default="", init=False, repr=False, compare=False)
    _selected_index: int = field(default=0, init=False, repr=False, compare=False)
    _showing_help: bool = field(default=False, init=False, repr=False, compare=False)

    def _page_size(self, config: PromptConfig) -> int:
        return self.page_size or config.page_size

    def _template_data(
        self, config: PromptConfig, page: List[OptionAnswer], idx: int
    ) -> SelectTemplateData:
        return SelectTemplateData(
            select=self,
            page_entries=page,
            selected_index=idx,
            show_help=self._showing_help,
            description=self.description,
            config=config,
        )

    def on_change(self, key: str, config: PromptConfig) -> bool:
        """Handle one key press; return ``True`` when an option has been chosen."""
        options = self.filter_options(config)
        old_filter = self._filter_text

        if key in (Key.ENTER, "\n"):
            return bool(options) and self._selected_index < len(options)
        if (key == Key.ARROW_UP or (self.vim_mode and key == "k")) and options:
            if self._selected_index == 0:
                self._selected_index = len(options) - 1
            else:
                self._selected_index -= 1
        elif (
            key in (Key.TAB, Key.ARROW_DOWN) or (self.vim_mode and key == "j")
        ) and options:
            if self._selected_index == len(options) - 1:
                self._selected_index = 0
            else:
                self._selected_index += 1
        elif key == config.help_input and self.help:
            self._showing_help = True
        elif key == Key.ESCAPE:
            self.vim_mode = not self.vim_mode
        elif key in (Key.DELETE_WORD, Key.DELETE_LINE):
            self._filter_text = ""
        elif key in (Key.DELETE, Key.BACKSPACE):
            if self._filter_text:
                self._filter_text = self._filter_text[:-1]
        elif ord(key) >= ord(Key.SPACE.value):
            self._filter_text += key
            self.vim_mode = False

        self.filter_message = f" {self._filter_text}" if self._filter_text else ""
        if old_filter != self._filter_text:
            options = self.filter_options(config)
            if options and len(options) <= self._selected_index:
                self._selected_index = len(options) - 1

        page, idx = paginate(self._page_size(config), options, self._selected_index)
        with suppress(Exception):
            self.render_with_cursor_offset(
                SELECT_QUESTION_TEMPLATE, self._template_data(config, page, idx), page, idx
            )
        return False

    def filter_options(self, config: PromptConfig) -> List[OptionAnswer]:
        """The options that match the text typed so far."""
        if not self._filter_text:
            return option_answer_list(self.options)
        matches = self.filter or config.filter
        return [
            OptionAnswer(value=opt, index=i)
            for i, opt in enumerate(self.options)
            if matches(self._filter_text, opt, i)
        ]

    def _initial_index(self) -> int:
        if self.default is None:
            return 0
        if isinstance(self.default, str):
            found: Optional[int] = None
            for i, opt in enumerate(self.options):
                if opt == self.default:
                    found = i
            if found is None:
                raise ValueError(f'default value "{self.default}" not found in options')
            return found
        if isinstance(self.default, int) and not isinstance(self.default, bool):
            if self.default >= len(self.options) or self.default < 0:
                raise ValueError(
                    f"default index {self.default} exceeds the number of options"
                )
            return self.default
        raise TypeError("default value of select must be an int or string")

    def prompt(self, config: PromptConfig) -> OptionAnswer:
        """Show the list, read keys until an option is chosen and return it."""
        if not self.options:
            raise ValueError("please provide options to select from")
        self._selected_index = self._initial_index()

        page, idx = paginate(
            self._page_size(config), option_answer_list(self.options), self._selected_index
        )
        cursor = self.new_cursor()
        cursor.save()
        cursor.hide()
        try:
            self.render_with_cursor_offset(
                SELECT_QUESTION_TEMPLATE, self._template_data(config, page, idx), page, idx
            )
            reader = self.new_rune_reader()
            with suppress(OSError):
                reader.set_term_mode()
            try:
                while True:
                    key = reader.read_rune()
                    if key == Key.INTERRUPT:
                        raise InterruptError()
                    if key == Key.END_TRANSMISSION:
                        break
                    if self.on_change(key, config):
                        break
            finally:
                with suppress(OSError):
                    reader.restore_term_mode()
        finally:
            cursor.restore()
            cursor.show()

        options = self.filter_options(config)
        self._filter_text = ""
        self.filter_message = ""
        if self._selected_index < len(options):
            return options[self._selected_index]
        return options[0]

    def cleanup(self, config: PromptConfig, val: OptionAnswer) -> None:
        """Redraw the prompt showing the chosen answer."""
        self.new_cursor().restore()
        self.render(
            SELECT_QUESTION_TEMPLATE,
            SelectTemplateData(
                select=self,
                answer=val.value,
                show_answer=True,
                description=self.description,
                config=config,
            ),
        )


@dataclass
class SelectTemplateData:
    """What the select template is rendered from."""

    select: Select = field(default_factory=Select)
    page_entries: List[OptionAnswer] = field(default_factory=list)
    selected_index: int = 0
    answer: str = ""
    show_answer: bool = False
    show_help: bool = False
    description: Optional[DescriptionFunc] = None
    config: PromptConfig = field(default_factory=default_prompt_config)
    current_opt: OptionAnswer = field(default_factory=lambda: OptionAnswer("", 0))
    current_index: int = 0

    def iterate_option(self, ix: int, opt: OptionAnswer) -> SelectTemplateData:
        """A copy set up to render the option ``opt`` at page position ``ix``."""
        return dataclasses.replace(self, current_index=ix, current_opt=opt)

    def get_description(self, opt: OptionAnswer) -> str:
        """The description of ``opt``, or ``""`` when there is none."""
        if self.description is None:
            return ""
        return self.description(opt.value, opt.index)


def _render_option(data: SelectTemplateData, color: Callable[[str], str]) -> str:
    icons = data.config.icons
    if data.selected_index == data.current_index:
        text = f"{color(icons.select_focus.format)}{icons.select_focus.text} "
    else:
        text = f"{color('default')}  "
    text += data.current_opt.value
    description = data.get_description(data.current_opt)
    if description:
        text += f" - {color('cyan')}{description}"
    return text + color("reset") + "\n"


def _render_select(data: SelectTemplateData, color: Callable[[str], str]) -> str:
    select = data.select
    icons = data.config.icons
    parts = []
    if data.show_help:
        parts.append(f"{color(icons.help.format)}{icons.help.text} {select.help}{color('reset')}\n")
    parts.append(f"{color(icons.question.format)}{icons.question.text} {color('reset')}")
    parts.append(f"{color('default+hb')}{select.message}{select.filter_message}{color('reset')}")
    if data.show_answer:
        parts.append(f"{color('cyan')} {data.answer}{color('reset')}\n")
    else:
        hint = "[Use arrows to move, type to filter"
        if select.help and not data.show_help:
            hint += f", {data.config.help_input} for more help"
        parts.append(f"  {color('cyan')}{hint}]{color('reset')}\n")
        parts.extend(
            _render_option(data.iterate_option(ix, opt), color)
            for ix, opt in enumerate(data.page_entries)
        )
    return "".join(parts)


SELECT_QUESTION_TEMPLATE = Template(body=_render_select, parts={"option": _render_option})