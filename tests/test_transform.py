import pytest

from termsurvey.transform import compose_transformers, title, to_lower, transform_string


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hello my name is", "HELLO MY NAME IS"),
        ("where are you from", "WHERE ARE YOU FROM"),
        ("does that matter?", "DOES THAT MATTER?"),
    ],
)
def test_transform_string_upper(text, expected):
    assert transform_string(str.upper)(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Hello My Name Is", "hello my name is"),
        ("WHERE are you FROM", "where are you from"),
        ("Does That Matter?", "does that matter?"),
    ],
)
def test_transform_string_lower(text, expected):
    assert transform_string(str.lower)(text) == expected


def test_transform_string_skips_empty_and_non_strings():
    transformer = transform_string(str.upper)
    assert transformer("") == ""
    assert transformer(None) == ""
    assert transformer(42) == ""


def test_compose_transformers():
    transformer = compose_transformers(title, to_lower)
    assert transformer("my name is") == "my name is"
    assert transformer("") == ""


def test_compose_applies_in_order():
    transformer = compose_transformers(to_lower, title)
    assert transformer("MY NAME IS") == "My Name Is"


def test_title():
    assert title("my name is") == "My Name Is"
    assert title("don't STOP") == "Don't Stop"


def test_to_lower():
    assert to_lower("Johnny Appleseed") == "johnny appleseed"
    assert to_lower(3) == ""