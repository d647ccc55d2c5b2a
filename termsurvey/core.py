"""Questions, prompt configuration, the ask loop and pagination helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from termsurvey.terminal.cursor import Stdio

ColorFunc = Callable[[str], str]
RenderFunc = Callable[[Any, ColorFunc], str]
Validator = Callable[[Any], None]
Transformer = Callable[[Any], Any]
FilterFunc = Callable[[str, str, int], bool]

_COLOR_NUMBERS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "default": 9,
}

_STYLE_CODES = {"b": "1", "B": "5", "u": "4", "i": "7"}


def _color_codes(spec: str, base: int, bright_base: int) -> List[str]:
    name, _, styles = spec.partition("+")
    codes = [code for flag, code in _STYLE_CODES.items() if flag in styles]
    if name.isdigit():
        codes.append(f"{base + 8};5;{name}")
    elif name in _COLOR_NUMBERS:
        number = _COLOR_NUMBERS[name]
        if name == "default" or "h" not in styles:
            codes.append(str(base + number))
        else:
            codes.append(str(bright_base + number))
    return codes


def _ansi_color(style: str) -> str:
    """Turn a style such as ``"green+hb"`` or ``"red:white"`` into an ANSI sequence."""
    if style == "reset":
        return "\x1b[0m"
    foreground, _, background = style.partition(":")
    codes: List[str] = []
    if foreground:
        codes += _color_codes(foreground, 30, 90)
    if background:
        codes += _color_codes(background, 40, 100)
    if not codes:
        return ""
    return "\x1b[" + ";".join(codes) + "m"


def _no_color(style: str) -> str:
    return ""


@dataclass(frozen=True)
class Template:
    """A renderable prompt template with optional named parts.

    Render functions receive the template data and a ``color`` function that
    maps a style name to the escape sequence for it (or to ``""`` when
    rendering without color).
    """

    body: RenderFunc
    parts: Mapping[str, RenderFunc] = field(default_factory=dict)

    def execute(self, data: Any, color: bool = True) -> str:
        """Render the whole template."""
        return self.body(data, _ansi_color if color else _no_color)

    def execute_part(self, name: str, data: Any, color: bool = True) -> str:
        """Render the part called ``name``."""
        try:
            part = self.parts[name]
        except KeyError:
            raise KeyError(f"template has no part named {name!r}") from None
        return part(data, _ansi_color if color else _no_color)


@dataclass(frozen=True)
class OptionAnswer:
    """An option picked by the user together with its position in the list."""

    value: str
    index: int


def option_answer_list(values: Sequence[str]) -> List[OptionAnswer]:
    """Pair every value with its index."""
    return [OptionAnswer(value=value, index=i) for i, value in enumerate(values)]


@dataclass
class Icon:
    """Text and color style shown for an icon."""

    text: str = ""
    format: str = ""


@dataclass
class IconSet:
    """The icons used by the prompts."""

    help_input: Icon = field(default_factory=Icon)
    error: Icon = field(default_factory=lambda: Icon("X", "red"))
    help: Icon = field(default_factory=lambda: Icon("?", "cyan"))
    question: Icon = field(default_factory=lambda: Icon("?", "green+hb"))
    marked_option: Icon = field(default_factory=lambda: Icon("[x]", "green"))
    unmarked_option: Icon = field(default_factory=lambda: Icon("[ ]", "default+hb"))
    select_focus: Icon = field(default_factory=lambda: Icon(">", "cyan+b"))


def _default_filter(filter_text: str, value: str, index: int) -> bool:
    return filter_text.lower() in value.lower()


@dataclass
class PromptConfig:
    """Settings shared by every prompt of one ask."""

    page_size: int = 7
    icons: IconSet = field(default_factory=IconSet)
    help_input: str = "?"
    suggest_input: str = "tab"
    filter: FilterFunc = _default_filter
    keep_filter: bool = False
    show_cursor: bool = False
    remove_select_all: bool = False
    remove_select_none: bool = False
    hide_character: str = "*"


@dataclass
class AskOptions:
    """Streams, extra validators and prompt settings used by :func:`ask`."""

    stdio: Stdio = field(default_factory=Stdio)
    validators: List[Validator] = field(default_factory=list)
    prompt_config: PromptConfig = field(default_factory=PromptConfig)


AskOpt = Callable[[AskOptions], None]


class Prompt(Protocol):
    """Something that can ask the user for an answer."""

    def prompt(self, config: PromptConfig) -> Any:
        """Ask and return the answer."""

    def cleanup(self, config: PromptConfig, val: Any) -> None:
        """Redraw the prompt showing the final answer."""

    def error(self, config: PromptConfig, invalid: Exception) -> None:
        """Show why the last answer was rejected."""


@dataclass
class Question:
    """One entry of a questionnaire."""

    name: str
    prompt: Prompt
    validate: Optional[Validator] = None
    transform: Optional[Transformer] = None


def default_ask_options() -> AskOptions:
    """Options using the process's standard streams and default settings."""
    return AskOptions(stdio=Stdio(in_=sys.stdin, out=sys.stdout, err=sys.stderr))


def default_prompt_config() -> PromptConfig:
    """The default prompt settings."""
    return default_ask_options().prompt_config


def default_icons() -> IconSet:
    """The default icon set."""
    return default_prompt_config().icons


def with_stdio(in_: Any, out: Any, err: Any) -> AskOpt:
    """Use the given input, output and error streams."""

    def apply(options: AskOptions) -> None:
        options.stdio = Stdio(in_=in_, out=out, err=err)

    return apply


def with_filter(filter_func: FilterFunc) -> AskOpt:
    """Use ``filter_func`` as the default option filter."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.filter = filter_func

    return apply


def with_keep_filter(keep_filter: bool) -> AskOpt:
    """Set whether the filter is kept after a selection."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.keep_filter = keep_filter

    return apply


def with_remove_select_all() -> AskOpt:
    """Remove the select-all shortcut of multi-selects."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.remove_select_all = True

    return apply


def with_remove_select_none() -> AskOpt:
    """Remove the select-none shortcut of multi-selects."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.remove_select_none = True

    return apply


def with_validator(validator: Validator) -> AskOpt:
    """Add a validator applied to every answer."""

    def apply(options: AskOptions) -> None:
        options.validators.append(validator)

    return apply


def with_page_size(page_size: int) -> AskOpt:
    """Set the default number of options shown at once."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.page_size = page_size

    return apply


def with_help_input(char: str) -> AskOpt:
    """Set the key that shows a prompt's help."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.help_input = char

    return apply


def with_icons(set_icons: Callable[[IconSet], None]) -> AskOpt:
    """Let ``set_icons`` change the icon set in place."""

    def apply(options: AskOptions) -> None:
        set_icons(options.prompt_config.icons)

    return apply


def with_show_cursor(show_cursor: bool) -> AskOpt:
    """Set whether the cursor stays visible while prompting."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.show_cursor = show_cursor

    return apply


def with_hide_character(char: str) -> AskOpt:
    """Set the character shown in place of typed passwords."""

    def apply(options: AskOptions) -> None:
        options.prompt_config.hide_character = char

    return apply


def ask(questions: Sequence[Question], *args: Optional[AskOpt]) -> Dict[str, Any]:
    """Ask every question in turn and return the answers keyed by question name.

    ``args`` are ask options such as :func:`with_validator`; ``None`` entries
    are ignored. A validator rejects an answer by raising; the prompt then
    shows the error and asks again.
    """
    options = default_ask_options()
    for option in args:
        if option is not None:
            option(options)
    config = options.prompt_config

    def validate(question: Question, value: Any) -> None:
        if question.validate is not None:
            question.validate(value)
        for validator in options.validators:
            validator(value)

    answers: Dict[str, Any] = {}
    for question in questions:
        prompt = question.prompt
        set_stdio = getattr(prompt, "with_stdio", None)
        if callable(set_stdio):
            set_stdio(options.stdio)

        answer: Any = None
        invalid: Optional[Exception] = None
        while True:
            if invalid is not None:
                prompt.error(config, invalid)
            prompt_again = getattr(prompt, "prompt_again", None)
            if invalid is not None and callable(prompt_again):
                answer = prompt_again(config, answer, invalid)
            else:
                answer = prompt.prompt(config)
            try:
                validate(question, answer)
            except Exception as exc:  # any failure from a validator rejects the answer
                invalid = exc
            else:
                break

        if question.transform is not None:
            transformed = question.transform(answer)
            if transformed is not None:
                answer = transformed

        prompt.cleanup(config, answer)
        answers[question.name] = answer

    return answers


def ask_one(prompt: Prompt, *args: Optional[AskOpt]) -> Any:
    """Ask a single prompt and return its answer."""
    return ask([Question(name="", prompt=prompt)], *args)[""]


def paginate(
    page_size: int, choices: Sequence[OptionAnswer], sel: int
) -> Tuple[List[OptionAnswer], int]:
    """Return the page of ``choices`` holding ``sel`` and its index on that page."""
    total = len(choices)
    half = page_size // 2
    if total < page_size:
        start, end, cursor = 0, total, sel
    elif sel < half:
        start, end, cursor = 0, page_size, sel
    elif total - sel - 1 < half:
        start, end = total - page_size, total
        cursor = sel - start
    else:
        start, end, cursor = sel - half, sel + (page_size - half), half
    return list(choices[start:end]), cursor


def compute_cursor_offset(
    template: Template,
    data: Any,
    opts: Sequence[OptionAnswer],
    idx: int,
    term_width: int,
) -> int:
    """Count the screen lines from the selected option to the end of the list.

    ``data`` must provide ``iterate_option(index, option)`` returning the data
    used to render the template's ``option`` part.
    """
    offset = len(opts) - idx
    for i, opt in enumerate(opts):
        if i < idx:
            continue
        try:
            rendered = template.execute_part("option", data.iterate_option(i, opt), color=False)
        except KeyError:
            rendered = ""
        width = len(rendered)
        if width > term_width:
            split_count = width // term_width
            if width % term_width == 0:
                split_count -= 1
            offset += split_count
    return offset