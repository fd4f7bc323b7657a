import pytest

from prepline.services.ingredient_normalize import normalize_ingredient_key
from prepline.services.unit_conversion import suggest_unit_conversions


def as_map(suggestions):
    return {s.unit_id: s.to_dict() for s in suggestions}


def test_cup_conversions():
    result = as_map(suggest_unit_conversions(1, "cup"))
    assert result["tbsp"] == {"qty": 16, "unit": "tbsp", "display": "16 tbsp"}
    assert result["tsp"]["qty"] == 48
    # 236.6 ml is past the measurable range
    assert "ml" not in result


def test_small_amounts():
    result = as_map(suggest_unit_conversions(2, "tbsp"))
    assert result["tsp"]["display"] == "6 tsp"
    assert result["cup"]["display"] == "1/8 cup"
    assert result["ml"]["display"] == "29.58 ml"


def test_weight_conversions():
    result = as_map(suggest_unit_conversions(1, "lb"))
    assert result["oz"]["display"] == "16 oz"
    assert result["kg"]["qty"] == pytest.approx(0.453)


def test_no_conversions():
    assert suggest_unit_conversions(1, "piece") == []
    assert suggest_unit_conversions(1, "bushel") == []
    assert suggest_unit_conversions(0, "cup") == []


@pytest.mark.parametrize("raw,key", [
    ("Fresh Roma Tomatoes (ripe)", "roma tomato"),
    ("roma tomato", "roma tomato"),
    ("Dragon Fruits", "dragon fruit"),
    ("All-Purpose Flour", "all purpose flour"),
    ("Swiss cheese", "swiss cheese"),
    ("", ""),
])
def test_normalize_ingredient_key(raw, key):
    assert normalize_ingredient_key(raw) == key
