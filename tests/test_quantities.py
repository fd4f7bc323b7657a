import pytest

from prepline.parsing.catalog import IngredientCatalog
from prepline.parsing.quantities import (
    extract_quantity,
    format_amount,
    format_quantity,
    is_common_fraction,
    normalize_quantity_text,
    parse_number,
)


@pytest.mark.parametrize("raw,expected", [
    ("21/2 cups flour", "2 1/2 cups flour"),
    ("2.5cups flour", "2.5 cups flour"),
    ("1½ cups sugar", "1 1/2 cups sugar"),
    ("½ cup milk", "1/2 cup milk"),
    ("200g sugar", "200 g sugar"),
    ("1/2 cup milk", "1/2 cup milk"),
    ("  2   eggs ", "2 eggs"),
])
def test_normalize_quantity_text(raw, expected):
    assert normalize_quantity_text(raw) == expected


def test_glued_fraction_handled_before_digit_split():
    # Splitting digit/letter first would never expose the glued "21/2"
    assert normalize_quantity_text("11/4cups water") == "1 1/4 cups water"


@pytest.mark.parametrize("text,expected", [
    ("2 cups flour", (2.0, "cups flour")),
    ("2 1/2 cups", (2.5, "cups")),
    ("1/2 cup milk", (0.5, "cup milk")),
    ("2.5 cups flour", (2.5, "cups flour")),
    ("0.5 oz cheese", (0.5, "oz cheese")),
    ("2-3 carrots", (2.0, "carrots")),
    ("2 to 3 carrots", (2.0, "carrots")),
    ("salt to taste", (None, "salt to taste")),
    ("", (None, "")),
])
def test_extract_quantity(text, expected):
    assert extract_quantity(text) == expected


def test_extract_quantity_unreadable_fraction():
    assert extract_quantity("1/0 cup") == (None, "cup")


def test_parse_number():
    assert parse_number("1 1/2") == 1.5
    assert parse_number("3/4") == 0.75
    assert parse_number("abc") is None
    assert parse_number("") is None


@pytest.mark.parametrize("value,expected", [
    (2.0, "2"),
    (2.5, "2 1/2"),
    (1 / 3, "1/3"),
    (0.125, "1/8"),
    (0.2, "0.2"),
    (1.43, "1.43"),
    (None, ""),
])
def test_format_quantity(value, expected):
    assert format_quantity(value) == expected


def test_is_common_fraction():
    assert is_common_fraction(0.5)
    assert is_common_fraction(1 / 3)
    assert is_common_fraction(3)
    assert is_common_fraction(1.25)
    assert not is_common_fraction(0.2)
    assert not is_common_fraction(1 / 16)
    assert not is_common_fraction(None)


def test_format_amount_pluralizes_above_one():
    catalog = IngredientCatalog()
    cup = catalog.unit("cup")
    assert format_amount(1, cup) == "1 cup"
    assert format_amount(2, cup) == "2 cups"
    assert format_amount(0.5, cup) == "1/2 cup"
    assert format_amount(3, None) == "3"
    assert format_amount(None, None) == ""
