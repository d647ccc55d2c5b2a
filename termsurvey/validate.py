"""Validators that accept or reject an answer by raising."""

from __future__ import annotations

import dataclasses
from typing import Any, Callable

from termsurvey.core import OptionAnswer

Validator = Callable[[Any], None]


def is_zero(value: Any) -> bool:
    """Whether ``value`` is the empty or zero value of its type."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, complex)):
        return value == 0
    if isinstance(value, (str, bytes, bytearray, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


def required(val: Any) -> None:
    """Reject empty answers; ``False`` counts as an answer."""
    if is_zero(val) and not isinstance(val, bool):
        raise ValueError("Value is required")


def _type_name(val: Any) -> str:
    return type(val).__name__


def max_length(length: int) -> Validator:
    """Reject strings with more than ``length`` characters."""

    def validator(val: Any) -> None:
        if not isinstance(val, str):
            raise TypeError(f"cannot enforce length on response of type {_type_name(val)}")
        if len(val) > length:
            raise ValueError(f"value is too long. Max length is {length}")

    return validator


def min_length(length: int) -> Validator:
    """Reject strings with fewer than ``length`` characters."""

    def validator(val: Any) -> None:
        if not isinstance(val, str):
            raise TypeError(f"cannot enforce length on response of type {_type_name(val)}")
        if len(val) < length:
            raise ValueError(f"value is too short. Min length is {length}")

    return validator


def _is_answer_list(val: Any) -> bool:
    return isinstance(val, (list, tuple)) and all(isinstance(item, OptionAnswer) for item in val)


def max_items(number_items: int) -> Validator:
    """Reject lists of answers holding more than ``number_items`` entries."""

    def validator(val: Any) -> None:
        if not _is_answer_list(val):
            raise TypeError("cannot impose the length on something other than a list of answers")
        if len(val) > number_items:
            raise ValueError(f"value is too long. Max items is {number_items}")

    return validator


def min_items(number_items: int) -> Validator:
    """Reject lists of answers holding fewer than ``number_items`` entries."""

    def validator(val: Any) -> None:
        if not _is_answer_list(val):
            raise TypeError("cannot impose the length on something other than a list of answers")
        if len(val) < number_items:
            raise ValueError(f"value is too short. Min items is {number_items}")

    return validator


def compose_validators(*args: Validator) -> Validator:
    """Make one validator that runs each of ``args`` in order, stopping at the first failure."""

    def validator(val: Any) -> None:
        for check in args:
            check(val)

    return validator