"""Transformers that change an answer before it is recorded."""

from __future__ import annotations

import re
from typing import Any, Callable

Transformer = Callable[[Any], Any]

_WORD = re.compile(r"\w+(?:['\u2019]\w+)*")


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    if isinstance(value, (bool, int, float, complex)):
        return not value
    return False


def transform_string(func: Callable[[str], str]) -> Transformer:
    """Make a transformer that applies ``func`` to string answers.

    Empty answers and answers that are not strings give ``""``.
    """

    def transformer(ans: Any) -> Any:
        if _is_zero(ans) or not isinstance(ans, str):
            return ""
        return func(ans)

    return transformer


def _title_case(text: str) -> str:
    return _WORD.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


def to_lower(ans: Any) -> Any:
    """Lower-case a string answer."""
    return transform_string(str.lower)(ans)


def title(ans: Any) -> Any:
    """Capitalise the first letter of every word of a string answer."""
    return transform_string(_title_case)(ans)


def compose_transformers(*args: Transformer) -> Transformer:
    """Make one transformer that applies each of ``args`` in order."""

    def transformer(ans: Any) -> Any:
        for transform in args:
            ans = transform(ans)
        return ans

    return transformer