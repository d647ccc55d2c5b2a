import pytest

from termsurvey.core import OptionAnswer
from termsurvey.validate import (
    compose_validators,
    is_zero,
    max_items,
    max_length,
    min_items,
    min_length,
    required,
)

LETTERS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def letters(n):
    return (LETTERS * (n // len(LETTERS) + 1))[:n]


def answer_list():
    return [OptionAnswer(value=v, index=i) for i, v in enumerate("abcdef")]


def test_required_succeeds_on_string():
    assert required("hello") is None


def test_required_fails_on_empty_string():
    with pytest.raises(ValueError, match="Value is required"):
        required("")


def test_required_succeeds_on_map():
    assert required({"hello": 1}) is None


def test_required_passes_on_false():
    assert required(False) is None


def test_required_fails_on_empty_map():
    with pytest.raises(ValueError, match="Value is required"):
        required({})


def test_required_succeeds_on_list():
    assert required(["hello"]) is None


def test_required_fails_on_empty_list():
    with pytest.raises(ValueError, match="Value is required"):
        required([])


def test_required_fails_on_zero_int():
    with pytest.raises(ValueError):
        required(0)


def test_max_items_rejects_long_list():
    with pytest.raises(ValueError, match="Max items is 4"):
        max_items(4)(answer_list())


def test_max_items_accepts_short_list():
    assert max_items(6)(answer_list()) is None


def test_min_items_rejects_short_list():
    with pytest.raises(ValueError, match="Min items is 10"):
        min_items(10)(answer_list())


def test_items_reject_non_answer_list():
    with pytest.raises(TypeError, match="list of answers"):
        max_items(3)(["a"])
    with pytest.raises(TypeError):
        min_items(1)("abc")


def test_max_length():
    with pytest.raises(ValueError, match="value is too long. Max length is 140"):
        max_length(140)(letters(150))
    assert max_length(10)("I😍Python") is None


def test_min_length():
    with pytest.raises(ValueError, match="value is too short. Min length is 12"):
        min_length(12)(letters(10))
    with pytest.raises(ValueError):
        min_length(10)("I😍Python")


def test_length_messages_exact():
    with pytest.raises(ValueError) as short:
        min_length(1)("")
    assert str(short.value) == "value is too short. Min length is 1"
    with pytest.raises(ValueError) as long:
        max_length(5)("company")
    assert str(long.value) == "value is too long. Max length is 5"


def test_min_length_on_int():
    with pytest.raises(TypeError, match="cannot enforce length on response of type int"):
        min_length(12)(1)


def test_max_length_on_int():
    with pytest.raises(TypeError, match="type int"):
        max_length(12)(1)


def test_compose_validators_fails_on_long_string():
    valid = compose_validators(required, max_length(10))
    with pytest.raises(ValueError, match="too long"):
        valid(letters(12))


def test_compose_validators_fails_on_first_error():
    valid = compose_validators(required, max_length(10))
    with pytest.raises(ValueError, match="Value is required"):
        valid("")


def test_compose_validators_passes_valid():
    valid = compose_validators(required, max_length(10))
    assert valid("short") is None


@pytest.mark.parametrize("value", [None, 0, 0.0, "", [], {}, (), False, set()])
def test_is_zero_true(value):
    assert is_zero(value) is True


@pytest.mark.parametrize("value", [1, "a", [0], {"a": 1}, True, OptionAnswer("x", 0)])
def test_is_zero_false(value):
    assert is_zero(value) is False


def test_is_zero_on_empty_dataclass():
    assert is_zero(OptionAnswer("", 0)) is True