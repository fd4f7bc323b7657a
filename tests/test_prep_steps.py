import pytest

from prepline.parsing import synthesize_prep_steps
from prepline.parsing.models import PreparationMethod


@pytest.mark.parametrize("line,expected", [
    ("2 onions, chopped", "Chop 2 onions"),
    ("2 apples, quartered", "Quarter 2 apples"),
    ("2 carrots, peeled and chopped", "Peel and chop 2 carrots"),
    ("2 cups flour, sifted", "Sift 2 cups flour"),
    ("1 cup finely chopped walnuts", "Chop 1 cup walnuts"),
])
def test_action_preparations_get_a_step(ingestion, line, expected):
    ingredient = ingestion.make_ingredient(line)
    steps = synthesize_prep_steps([ingredient])
    assert [s.content for s in steps] == [expected]
    assert steps[0].is_prep
    assert steps[0].prep_for == ingredient.id
    assert steps[0].id == f"prep-{ingredient.id}"


@pytest.mark.parametrize("line", [
    "2 apples, halves",
    "1 cup butter, softened",
    "2 cups flour",
    "salt to taste",
])
def test_descriptive_preparations_get_no_step(ingestion, line):
    assert synthesize_prep_steps([ingestion.make_ingredient(line)]) == []


def test_form_words_never_produce_a_step(ingestion):
    ingredient = ingestion.make_ingredient("2 apples")
    forced = PreparationMethod(id="custom", name="halves", requires_step=True)
    ingredient = ingredient.model_copy(update={
        "structured": ingredient.structured.model_copy(update={"preparation": forced}),
    })
    assert synthesize_prep_steps([ingredient]) == []


def test_prep_steps_follow_ingredient_order(ingestion):
    ingredients = [
        ingestion.make_ingredient("2 onions, chopped"),
        ingestion.make_ingredient("1 cup butter, softened"),
        ingestion.make_ingredient("3 cloves garlic, minced"),
    ]
    steps = synthesize_prep_steps(ingredients)
    assert [s.content for s in steps] == ["Chop 2 onions", "Mince 3 cloves garlic"]
