# termsurvey

Interactive prompts for the terminal. Ask the user a list of questions, validate and transform their replies, and get the answers back in a dictionary keyed by question name.

## Installation

```
pip install termsurvey
```

To run the test suite:

```
pip install "termsurvey[test]"
pytest
```

## Asking questions

```python
from termsurvey.core import Question, ask, with_page_size
from termsurvey.select_prompt import Select
from termsurvey.validate import required

questions = [
    Question(
        name="color",
        prompt=Select(message="Choose a color:", options=["red", "blue", "green"]),
        validate=required,
    ),
]

answers = ask(questions, with_page_size(5))
print(answers["color"].value, answers["color"].index)
```

`ask(questions, *options)` asks each `Question` in turn and returns a `dict` mapping each question's `name` to its answer. `ask_one(prompt, *options)` asks a single prompt and returns its answer directly. Pressing Ctrl+C raises `termsurvey.terminal.keys.InterruptError`.

A question's `validate` and every validator added with `with_validator` reject an answer by raising an exception; the prompt shows the message and asks again. After validation, the question's `transform` is applied; if it returns `None` the answer is kept unchanged.

## The select prompt

`termsurvey.select_prompt.Select` shows a list that the user moves through with the arrow keys or Tab (and `j`/`k` when `vim_mode` is on; Escape toggles it). Typing narrows the list; Backspace removes the last typed character and Ctrl+W or Ctrl+X clears the filter. Enter picks the highlighted option. The answer is an `OptionAnswer` holding the option's `value` and its `index` in `options`.

Fields of `Select`:

- `message`, `options`, `help`
- `default`: an option's value or its index; a value that is not among the options, an index out of range or any other type raises
- `page_size`: options shown at once; `0` uses the prompt configuration's page size
- `filter`: a function `(filter_text, value, index) -> bool`; by default a case-insensitive substring match
- `description`: a function `(value, index) -> str` whose text is shown after each option

`prompt()` raises `ValueError` when `options` is empty.

## Options

`termsurvey.core` provides the option functions accepted by `ask` and `ask_one` (`None` entries are ignored):

- `with_stdio(in_, out, err)`: the streams to read from and write to
- `with_page_size(page_size)`: the default number of options shown at once (7)
- `with_filter(filter_func)`: the default option filter
- `with_validator(validator)`: a validator applied to every question
- `with_help_input(char)`: the key that shows a question's help text (`?`)
- `with_icons(set_icons)`: a function that changes the `IconSet` in place
- `with_keep_filter`, `with_show_cursor`, `with_hide_character`, `with_remove_select_all`, `with_remove_select_none`: settings stored on `PromptConfig`

`default_ask_options()`, `default_prompt_config()` and `default_icons()` return fresh copies of the defaults. `paginate(page_size, choices, sel)` returns the page of choices holding the selection and the selection's position on that page.

## Validators and transformers

`termsurvey.validate` provides `required` (empty values fail, `False` passes), `min_length`, `max_length` (counted in characters), `min_items`, `max_items` (for lists of `OptionAnswer`), `compose_validators` and `is_zero`. Length checks on non-strings and item checks on anything but a list of answers raise `TypeError`.

`termsurvey.transform` provides `to_lower`, `title`, `transform_string` and `compose_transformers`. String transformers turn empty or non-string answers into `""`.

## Templates and rendering

`termsurvey.core.Template` holds a render function and named parts; render functions receive the data and a `color` function mapping style names such as `"green+hb"` or `"reset"` to ANSI sequences. `termsurvey.renderer.Renderer` prints a rendered template and erases the previous rendering, counting wrapped lines with the terminal width. `run_template(template, data)` returns the colored text and the plain text.

## Terminal toolkit

`termsurvey.terminal` holds the lower-level parts:

- `termsurvey.terminal.keys`: `Key` codes, `Coord`, `EraseLineMode`, `InterruptError`, `sound_bell`
- `termsurvey.terminal.cursor`: `Stdio`, `Cursor` (ANSI cursor movement, position and size queries) and `erase_line`
- `termsurvey.terminal.runereader`: `RuneReader`, which switches the input terminal to raw mode, reads keys (decoding arrow, Home, End and Delete sequences) and edits a single line with `read_line` / `read_line_with_default`; `rune_width` and `string_width` measure on-screen width, ignoring ANSI sequences

## What this package does not do

The only interactive prompt is `Select`. There are no text-input, password, confirmation, multi-select or editor prompts, though `RuneReader.read_line` can serve as the basis of one. Raw terminal mode relies on `termios`, so interactive use needs a POSIX terminal. There is no command-line program.