import pytest
from pydantic import ValidationError

from prepline.infra.kv_store import StorageError
from prepline.parsing.catalog import CONTAINS, EXACT, SEARCH_TERM, IngredientCatalog


@pytest.fixture
def catalog():
    return IngredientCatalog()


def test_search_by_prefix(catalog):
    results = catalog.search("oni")
    assert results[0].id == "onion"


def test_search_exact_term_first(catalog):
    results = catalog.search("pepper")
    ids = [r.id for r in results]
    assert ids[0] == "black_pepper"
    assert "bell_pepper" in ids


def test_search_empty_query(catalog):
    assert catalog.search("") == []
    assert catalog.search("   ") == []


def test_search_respects_limit(catalog):
    assert len(catalog.search("c", limit=2)) == 2


def test_duplicate_ids_keep_later_definition(catalog):
    ids = [i.id for i in catalog.ingredients]
    assert len(ids) == len(set(ids))
    assert catalog.get("avocado").category == "fruits"
    assert "hass avocado" in catalog.get("avocado").search_terms


def test_builtin_entries_are_immutable(catalog):
    flour = catalog.get("flour")
    with pytest.raises(ValidationError):
        flour.name = "rye"


def test_best_match_tiers(catalog):
    exact = catalog.best_match("brown sugar")
    assert exact.ingredient.id == "brown_sugar"
    assert exact.tier == EXACT

    contains = catalog.best_match("yellow onions")
    assert contains.ingredient.id == "onion"
    assert contains.tier == CONTAINS
    assert contains.matched_text == "onions"

    alias = catalog.best_match("vanilla")
    assert alias.ingredient.id == "vanilla_extract"
    assert alias.tier == SEARCH_TERM

    assert catalog.best_match("dragonfruit") is None
    assert catalog.best_match("") is None


def test_best_match_prefers_longer_name(catalog):
    match = catalog.best_match("light brown sugar")
    assert match.ingredient.id == "brown_sugar"


def test_best_match_tie_goes_to_declaration_order():
    rows = [
        ("herb", "herb", "herbs", "spices", [], [], ["green"]),
        ("leaf", "leaf", "leaves", "spices", [], [], ["green"]),
    ]
    catalog = IngredientCatalog(rows=rows)
    assert catalog.best_match("something green").ingredient.id == "herb"


@pytest.mark.parametrize("spelling,unit_id", [
    ("Tablespoons", "tbsp"),
    ("tbsp.", "tbsp"),
    ("lbs", "lb"),
    ("cups", "cup"),
    ("g", "gram"),
    ("ounces", "oz"),
])
def test_find_unit(catalog, spelling, unit_id):
    assert catalog.find_unit(spelling).id == unit_id


def test_find_unit_unknown(catalog):
    assert catalog.find_unit("handful") is None
    assert catalog.find_unit("") is None


def test_units_and_preparations_for(catalog):
    assert [u.id for u in catalog.units_for("garlic")] == ["clove", "tbsp", "tsp"]
    assert catalog.preparations_for("onion")[0].id == "chopped"
    assert catalog.units_for("nope") == []


def test_categories(catalog):
    assert "vegetables" in catalog.categories()
    assert "butter" in [i.id for i in catalog.by_category("dairy")]


def test_add_custom(catalog):
    dragon = catalog.add_custom("Dragon Fruit")
    assert dragon.id.startswith("custom_")
    assert dragon.is_custom
    assert dragon.common_units == ["piece", "cup"]
    assert catalog.get(dragon.id) == dragon
    assert catalog.search("drag")[0].id == dragon.id
    assert catalog.best_match("dragon fruit").ingredient.id == dragon.id


def test_add_custom_requires_name(catalog):
    with pytest.raises(ValueError):
        catalog.add_custom("   ")


@pytest.mark.asyncio
async def test_custom_ingredients_persist(store):
    catalog = IngredientCatalog(store=store)
    catalog.add_custom("Sumac", search_terms=["sumac powder"])
    await catalog.persist_custom()

    fresh = IngredientCatalog(store=store)
    assert await fresh.load_custom() == 1
    sumac = fresh.search("sumac")[0]
    assert sumac.name == "Sumac"
    assert sumac.is_custom


@pytest.mark.asyncio
async def test_load_custom_ignores_malformed_data(store):
    await store.set("customIngredients", "{not json")
    catalog = IngredientCatalog(store=store)
    assert await catalog.load_custom() == 0
    assert catalog.custom_ingredients == []


@pytest.mark.asyncio
async def test_persist_custom_refuses_after_failed_load(store, monkeypatch):
    seeded = IngredientCatalog(store=store)
    seeded.add_custom("Sumac")
    await seeded.persist_custom()

    async def failing_get(key):
        raise StorageError("redis down")

    catalog = IngredientCatalog(store=store)
    monkeypatch.setattr(store, "get", failing_get)
    assert await catalog.load_custom() == 0
    assert not catalog.custom_loaded

    catalog.add_custom("Dragon Fruit")
    with pytest.raises(StorageError):
        await catalog.persist_custom()

    monkeypatch.undo()
    await catalog.persist_custom()
    fresh = IngredientCatalog(store=store)
    assert await fresh.load_custom() == 2
    assert sorted(i.name for i in fresh.custom_ingredients) == ["Dragon Fruit", "Sumac"]
