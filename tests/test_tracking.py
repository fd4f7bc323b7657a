import pytest

from prepline.parsing import link
from prepline.parsing.models import ResolvedMention, Step, UnresolvedMention
from prepline.parsing.tracking import amount_precedes, find_spans

STEPS = "1. Mix butter and flour.\n2. Add vanilla and mix again."
INGREDIENTS = "2 cups flour, sifted\n1 cup butter, softened\n1 tsp vanilla"


def make_steps(*contents):
    return [Step(id=f"s{i}", content=c) for i, c in enumerate(contents)]


@pytest.mark.asyncio
async def test_first_mentions_end_to_end(ingestion):
    recipe = await ingestion.ingest_recipe("Cake", STEPS, INGREDIENTS)
    flour, butter, vanilla = recipe.ingredients

    assert [s.content for s in recipe.steps] == [
        "Sift 2 cups flour",
        "Mix 1 cup butter and flour.",
        "Add 1 tsp vanilla and mix again.",
    ]
    assert recipe.steps[0].is_prep

    tracker = recipe.ingredient_tracker
    assert tracker[flour.id].first_mention_step_id == recipe.steps[0].id
    assert tracker[flour.id].step_order == 0
    assert tracker[butter.id].first_mention_step_id == recipe.steps[1].id
    assert tracker[butter.id].step_order == 1
    assert tracker[vanilla.id].step_order == 2

    mix = {m.ingredient_id: m for m in recipe.steps[1].ingredients}
    assert mix[butter.id].is_first_mention
    assert mix[butter.id].text == "1 cup butter"
    assert not mix[flour.id].is_first_mention
    assert mix[flour.id].first_mention_step_id == recipe.steps[0].id


def test_link_is_idempotent(ingestion):
    ingredients = [ingestion.make_ingredient(t) for t in INGREDIENTS.split("\n")]
    steps = make_steps("Mix butter and flour.", "Add vanilla and mix again.", "Fold in more flour.")

    once, tracker_once = link(steps, ingredients)
    twice, tracker_twice = link(once, ingredients)

    assert [s.content for s in twice] == [s.content for s in once]
    assert tracker_twice == tracker_once


def test_exactly_one_first_mention_per_ingredient(ingestion):
    ingredients = [ingestion.make_ingredient(t) for t in ("1 cup sugar", "2 eggs", "1 cup milk")]
    steps = make_steps(
        "Beat eggs with sugar.",
        "Add milk and more sugar.",
        "Whisk the eggs and milk until smooth.",
    )
    linked, tracker = link(steps, ingredients)

    for ingredient in ingredients:
        firsts = [
            (order, m) for order, step in enumerate(linked) for m in step.ingredients
            if isinstance(m, ResolvedMention) and m.ingredient_id == ingredient.id and m.is_first_mention
        ]
        assert len(firsts) == 1
        mentioned_in = [
            order for order, step in enumerate(linked)
            if any(isinstance(m, ResolvedMention) and m.ingredient_id == ingredient.id for m in step.ingredients)
        ]
        assert firsts[0][0] == min(mentioned_in) == tracker[ingredient.id].step_order


def test_longest_name_claims_text_first(ingestion):
    ingredients = [ingestion.make_ingredient("1 cup sugar"), ingestion.make_ingredient("1/2 cup brown sugar")]
    linked, _ = link(make_steps("Mix brown sugar and sugar."), ingredients)
    assert linked[0].content == "Mix 1/2 cup brown sugar and 1 cup sugar."


def test_search_term_mention(ingestion):
    ingredients = [ingestion.make_ingredient("2 cups chicken broth")]
    linked, tracker = link(make_steps("Pour in the stock."), ingredients)
    assert linked[0].content == "Pour in 2 cups stock."
    assert linked[0].ingredients[0].ingredient_id == ingredients[0].id
    assert tracker[ingredients[0].id].step_order == 0


def test_names_claim_text_before_search_terms(ingestion):
    ingredients = [ingestion.make_ingredient("1 cup vegetable oil"), ingestion.make_ingredient("2 tbsp olive oil")]
    linked, _ = link(make_steps("Heat olive oil, then add oil."), ingredients)
    assert linked[0].content == "Heat 2 tbsp olive oil, then add 1 cup oil."


def test_article_replaced_by_amount(ingestion):
    ingredients = [ingestion.make_ingredient("1 cup butter")]
    linked, _ = link(make_steps("Add the butter."), ingredients)
    assert linked[0].content == "Add 1 cup butter."


def test_article_kept_after_partial_word(ingestion):
    ingredients = [ingestion.make_ingredient("1/3 cup sugar")]
    linked, _ = link(make_steps("Add half the sugar."), ingredients)
    assert linked[0].content == "Add half the 1/3 cup sugar."

    again, _ = link(linked, ingredients)
    assert again[0].content == "Add half the 1/3 cup sugar."


def test_repeat_mention_loses_its_amount(ingestion):
    ingredients = [ingestion.make_ingredient("1 cup butter")]
    linked, _ = link(make_steps("Add 1 cup butter.", "Add 1 cup butter again."), ingredients)
    assert [s.content for s in linked] == ["Add 1 cup butter.", "Add butter again."]


def test_amount_less_ingredient_keeps_bare_name(ingestion):
    ingredients = [ingestion.make_ingredient("salt to taste")]
    linked, tracker = link(make_steps("Season with salt."), ingredients)
    assert linked[0].content == "Season with salt."
    assert tracker[ingredients[0].id].amount is None


def test_deleted_ingredient_becomes_unresolved(ingestion):
    ingredients = [ingestion.make_ingredient("1 cup butter")]
    linked, _ = link(make_steps("Melt butter."), ingredients)
    assert linked[0].content == "Melt 1 cup butter."

    relinked, tracker = link([linked[0].model_copy(update={"content": "Melt butter."})], [])
    assert relinked[0].ingredients == [UnresolvedMention(text="1 cup butter")]
    assert tracker == {}


def test_bad_step_is_left_alone(ingestion, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("regex blew up")

    monkeypatch.setattr("prepline.parsing.tracking.find_spans", boom)
    ingredients = [ingestion.make_ingredient("1 cup butter")]
    steps = make_steps("Melt butter.")
    linked, tracker = link(steps, ingredients)
    assert linked == steps
    assert tracker == {}


def test_find_spans_earliest_occurrence(ingestion):
    ingredients = [ingestion.make_ingredient("2 eggs")]
    spans = find_spans("Crack the eggs, then beat the eggs.", ingredients)
    assert spans[0].start == 10


def test_amount_precedes():
    assert amount_precedes("Mix 1 cup ", "1 cup")
    assert amount_precedes("Mix 2 tbsp. ", "1 cup")
    assert not amount_precedes("Mix ", "1 cup")
    assert amount_precedes("Mix ", "")
