from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional

import pytest

from termsurvey.core import (
    AskOptions,
    Icon,
    OptionAnswer,
    PromptConfig,
    Question,
    Template,
    ask,
    ask_one,
    compute_cursor_offset,
    default_ask_options,
    default_icons,
    default_prompt_config,
    option_answer_list,
    paginate,
    with_filter,
    with_help_input,
    with_hide_character,
    with_icons,
    with_keep_filter,
    with_page_size,
    with_remove_select_all,
    with_remove_select_none,
    with_show_cursor,
    with_stdio,
    with_validator,
)


@dataclass
class MockPrompt:
    answers: List[Any]
    index: int = 0
    cleanups: int = 0
    printed_errors: List[Exception] = field(default_factory=list)
    stdio: Any = None

    def with_stdio(self, stdio):
        self.stdio = stdio

    def prompt(self, config):
        if self.index >= len(self.answers):
            raise RuntimeError("no more answers")
        value = self.answers[self.index]
        self.index += 1
        return value

    def cleanup(self, config, val):
        self.cleanups += 1

    def error(self, config, invalid):
        self.printed_errors.append(invalid)


def _min_length(length):
    def check(val):
        if len(val) < length:
            raise ValueError(f"value is too short. Min length is {length}")

    return check


def _max_length(length):
    def check(val):
        if len(val) > length:
            raise ValueError(f"value is too long. Max length is {length}")

    return check


def _lowercase_only(val):
    if val.lower() != val:
        raise ValueError("value contains uppercase characters")


def test_pagination_too_few():
    choices = option_answer_list(["choice1", "choice2", "choice3"])
    page, idx = paginate(4, choices, 3)
    assert page == choices
    assert idx == 3


def test_pagination_first_half():
    choices = option_answer_list(["choice1", "choice2", "choice3", "choice4", "choice5", "choice6"])
    page, idx = paginate(4, choices, 2)
    assert page == choices[0:4]
    assert idx == 2


def test_pagination_middle():
    choices = option_answer_list(["choice0", "choice1", "choice2", "choice3", "choice4", "choice5"])
    page, idx = paginate(2, choices, 3)
    assert page == choices[2:4]
    assert idx == 1


def test_pagination_last_half():
    choices = option_answer_list(["choice0", "choice1", "choice2", "choice3", "choice4", "choice5"])
    page, idx = paginate(3, choices, 5)
    assert page == choices[3:6]
    assert idx == 2


def test_option_answer_list_pairs_indexes():
    assert option_answer_list(["a", "b"]) == [OptionAnswer("a", 0), OptionAnswer("b", 1)]


@dataclass
class _OptionData:
    selected_index: int
    current_index: int = 0
    current_opt: Optional[OptionAnswer] = None

    def iterate_option(self, ix, opt):
        return replace(self, current_index=ix, current_opt=opt)


def _render_option(data, color):
    marker = "> " if data.selected_index == data.current_index else "  "
    return f"{marker}{color('default')}{data.current_opt.value}{color('reset')}\n"


_OPTION_TEMPLATE = Template(body=lambda data, color: "", parts={"option": _render_option})


@pytest.mark.parametrize(
    "opts, ix, term_width, want",
    [
        ([], 0, 100, 0),
        (["one"], 0, 100, 1),
        (["one", "two"], 0, 100, 2),
        (["one", "two", "three", "four", "five"], 0, 100, 5),
        (["one", "two", "three", "four", "five"], 2, 100, 3),
        (["one", "two", "three", "four", "five"], 4, 100, 1),
        (
            ["wide one wide one wide one", "two", "three", "wide four wide four wide four", "five", "six"],
            0,
            20,
            8,
        ),
        (
            ["wide one wide one wide one", "two", "three", "01234567890123456", "five", "six"],
            0,
            20,
            7,
        ),
        (
            ["wide one wide one wide one", "wide two wide two wide two", "three", "four", "five", "six"],
            2,
            20,
            4,
        ),
    ],
)
def test_compute_cursor_offset(opts, ix, term_width, want):
    data = _OptionData(selected_index=ix)
    got = compute_cursor_offset(_OPTION_TEMPLATE, data, option_answer_list(opts), ix, term_width)
    assert got == want


def test_compute_cursor_offset_without_option_part():
    template = Template(body=lambda data, color: "")
    data = _OptionData(selected_index=0)
    assert compute_cursor_offset(template, data, option_answer_list(["a", "b"]), 0, 1) == 2


def test_template_color_rendering():
    template = Template(body=lambda data, color: f"{color('red')}{data}{color('reset')}")
    assert template.execute("x", color=False) == "x"
    assert template.execute("x") == "\x1b[31mx\x1b[0m"


def test_template_missing_part():
    template = Template(body=lambda data, color: "")
    with pytest.raises(KeyError):
        template.execute_part("option", None)


def test_ask_validation():
    prompt = MockPrompt(answers=["", "company", "COM", "com"])
    answers = ask(
        [Question(name="TLDN", prompt=prompt, validate=_lowercase_only)],
        with_validator(_min_length(1)),
        with_validator(_max_length(5)),
    )
    assert answers == {"TLDN": "com"}
    assert prompt.cleanups == 1
    assert [str(e) for e in prompt.printed_errors] == [
        "value is too short. Min length is 1",
        "value is too long. Max length is 5",
        "value contains uppercase characters",
    ]


def test_ask_propagates_prompt_errors():
    def always_fail(val):
        raise ValueError("never valid")

    prompt = MockPrompt(answers=["a"])
    with pytest.raises(RuntimeError, match="no more answers"):
        ask([Question(name="x", prompt=prompt, validate=always_fail)])


def test_ask_applies_transform_and_skips_none_result():
    first = MockPrompt(answers=["Hello"])
    second = MockPrompt(answers=["Keep"])
    answers = ask(
        [
            Question(name="a", prompt=first, transform=str.upper),
            Question(name="b", prompt=second, transform=lambda ans: None),
        ]
    )
    assert answers == {"a": "HELLO", "b": "Keep"}


def test_ask_passes_stdio_to_prompt():
    prompt = MockPrompt(answers=["x"])
    sentinel_in, sentinel_out, sentinel_err = object(), object(), object()
    ask([Question(name="q", prompt=prompt)], None, with_stdio(sentinel_in, sentinel_out, sentinel_err))
    assert prompt.stdio.in_ is sentinel_in
    assert prompt.stdio.out is sentinel_out
    assert prompt.stdio.err is sentinel_err


def test_ask_uses_prompt_again_after_invalid_answer():
    @dataclass
    class AgainPrompt(MockPrompt):
        again_calls: List[Any] = field(default_factory=list)

        def prompt_again(self, config, invalid, err):
            self.again_calls.append(invalid)
            return "good"

    def reject_bad(val):
        if val == "bad":
            raise ValueError("bad answer")

    prompt = AgainPrompt(answers=["bad"])
    assert ask_one(prompt, with_validator(reject_bad)) == "good"
    assert prompt.again_calls == ["bad"]
    assert [str(e) for e in prompt.printed_errors] == ["bad answer"]


def test_ask_one_returns_answer():
    assert ask_one(MockPrompt(answers=["value"])) == "value"


def test_default_filter_is_case_insensitive():
    config = default_prompt_config()
    assert config.filter("RE", "green", 2) is True
    assert config.filter("z", "red", 0) is False


def test_default_config_values():
    config = default_prompt_config()
    assert (config.page_size, config.help_input, config.suggest_input, config.hide_character) == (
        7,
        "?",
        "tab",
        "*",
    )
    icons = default_icons()
    assert icons.error == Icon("X", "red")
    assert icons.select_focus == Icon(">", "cyan+b")


def test_options_modify_configuration():
    options = default_ask_options()
    for option in (
        with_page_size(3),
        with_help_input("h"),
        with_keep_filter(True),
        with_remove_select_all(),
        with_remove_select_none(),
        with_show_cursor(True),
        with_hide_character("#"),
        with_icons(lambda icons: setattr(icons, "question", Icon("Q", "blue"))),
    ):
        option(options)
    config = options.prompt_config
    assert config.page_size == 3
    assert config.help_input == "h"
    assert config.keep_filter and config.remove_select_all and config.remove_select_none
    assert config.show_cursor is True
    assert config.hide_character == "#"
    assert config.icons.question == Icon("Q", "blue")


def test_with_filter_and_validator():
    options = AskOptions(prompt_config=PromptConfig())
    custom = lambda text, value, index: index == 1  # noqa: E731
    with_filter(custom)(options)
    with_validator(_min_length(2))(options)
    assert options.prompt_config.filter("x", "y", 1) is True
    assert options.prompt_config.filter("x", "y", 0) is False
    assert len(options.validators) == 1