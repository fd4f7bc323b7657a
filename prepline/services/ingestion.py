import logging
import re
import uuid
from typing import Optional

from ..core.text import clean_md, clean_text, is_section_header
from ..parsing import (
    CorrectionStore,
    IngredientCatalog,
    IngredientParser,
    calculate_total_time,
    distribute_divided,
    extract_servings,
    extract_step_timing,
    format_ingredient_for_display,
    link,
    segment_steps,
    synthesize_prep_steps,
)
from ..parsing.models import (
    CatalogIngredient,
    OriginalContent,
    ParsedIngredient,
    Recipe,
    RecipeIngredient,
    Step,
    TrainingExample,
)
from .ingredient_normalize import normalize_ingredient_key

logger = logging.getLogger("prepline.ingestion")

# "For the sauce:" style sub-headings inside an ingredient list
_SUBHEADING_RE = re.compile(r"^[^\d]*:\s*$")
# "Serves 4" / "Makes 12 cookies" lines carry servings, not ingredients
_SERVINGS_LINE_RE = re.compile(r"^\s*(?:serves|makes|yields?)\b", re.IGNORECASE)


class IngestionService:
    """
    Entry point for turning typed recipe text into a structured Recipe and
    for keeping that Recipe consistent as the user edits it.

    Every edit goes through relink_all, which rebuilds the derived parts
    (prep steps, mentions, tracker, divided amounts, total time) from the
    stored original step text.
    """

    def __init__(
        self,
        catalog: IngredientCatalog,
        corrections: Optional[CorrectionStore] = None,
        parser: Optional[IngredientParser] = None,
    ):
        self.catalog = catalog
        self.corrections = corrections
        self.parser = parser or IngredientParser(catalog, corrections)

    async def _ready(self) -> None:
        if self.corrections is not None:
            await self.corrections.ensure_loaded()

    # --- Ingredients ---

    def make_ingredient(self, text: str, ingredient_id: Optional[str] = None) -> RecipeIngredient:
        structured = self.parser.parse(text)
        return RecipeIngredient(
            id=ingredient_id or f"ing-{uuid.uuid4()}",
            original_text=clean_text(text),
            structured=structured,
            display_text=format_ingredient_for_display(structured),
        )

    def parse_ingredients(self, ingredients_text: str) -> list[RecipeIngredient]:
        ingredients = []
        for line in (ingredients_text or "").replace("\r\n", "\n").split("\n"):
            if not line.strip() or is_section_header(line):
                continue
            if _SUBHEADING_RE.match(clean_md(line)):
                continue
            if _SERVINGS_LINE_RE.match(clean_md(line)):
                continue
            ingredients.append(self.make_ingredient(line))
        return ingredients

    async def reparse_ingredient(self, new_text: str, existing: RecipeIngredient) -> RecipeIngredient:
        """Full re-parse of an edited line; the ingredient keeps its id."""
        await self._ready()
        return self.make_ingredient(new_text, ingredient_id=existing.id)

    async def record_correction(self, original_text: str, corrected: ParsedIngredient) -> TrainingExample:
        if self.corrections is None:
            raise RuntimeError("No correction store configured")
        await self._ready()
        return await self.corrections.record(original_text, corrected)

    # --- Recipes ---

    async def ingest_recipe(self, title: str, steps_text: str, ingredients_text: str) -> Recipe:
        await self._ready()

        ingredients = self.parse_ingredients(ingredients_text)
        steps = [
            Step(id=f"step-{uuid.uuid4()}", content=text, timing=extract_step_timing(text))
            for text in segment_steps(steps_text)
        ]

        recipe = Recipe(
            id=str(uuid.uuid4()),
            title=clean_text(title) or "Untitled Recipe",
            original_content=OriginalContent(ingredients=ingredients_text or "", steps=steps_text or ""),
            original_step_content={s.id: s.content for s in steps},
            steps=steps,
            servings=extract_servings(ingredients_text) or extract_servings(steps_text),
            ingredients=ingredients,
        )
        recipe = self.relink_all(recipe)

        logger.info(
            f"Ingested recipe '{recipe.title}' ({recipe.id}): "
            f"{len(recipe.ingredients)} ingredients, {len(recipe.steps)} steps"
        )
        return recipe

    def relink_all(self, recipe: Recipe) -> Recipe:
        """
        Rebuild everything derived from ingredients and step text.

        Cooking steps restart from their original content so repeated runs
        never stack amounts.
        """
        cooking = []
        for step in recipe.steps:
            if step.is_prep:
                continue
            content = recipe.original_step_content.get(step.id, step.content)
            cooking.append(step.model_copy(update={"content": content, "timing": extract_step_timing(content)}))

        steps = synthesize_prep_steps(recipe.ingredients) + cooking
        steps, tracker = link(steps, recipe.ingredients)
        steps = distribute_divided(steps, recipe.ingredients)

        return recipe.model_copy(update={
            "steps": steps,
            "ingredient_tracker": tracker,
            "total_time": calculate_total_time(s.timing for s in steps),
        })

    # --- Editing ---

    def _ingredient_index(self, recipe: Recipe, ingredient_id: str) -> int:
        for i, ingredient in enumerate(recipe.ingredients):
            if ingredient.id == ingredient_id:
                return i
        raise KeyError(ingredient_id)

    def _step_index(self, recipe: Recipe, step_id: str) -> int:
        for i, step in enumerate(recipe.steps):
            if step.id == step_id:
                if step.is_prep:
                    raise ValueError(f"Step {step_id} is generated from an ingredient's preparation")
                return i
        raise KeyError(step_id)

    def update_ingredient(self, recipe: Recipe, ingredient_id: str, new_text: str) -> Recipe:
        idx = self._ingredient_index(recipe, ingredient_id)
        ingredients = list(recipe.ingredients)
        ingredients[idx] = self.make_ingredient(new_text, ingredient_id=ingredient_id)
        return self.relink_all(recipe.model_copy(update={"ingredients": ingredients}))

    def replace_structured(self, recipe: Recipe, ingredient_id: str, structured: ParsedIngredient) -> Recipe:
        """Swap in a hand-corrected parse for one ingredient."""
        idx = self._ingredient_index(recipe, ingredient_id)
        ingredients = list(recipe.ingredients)
        ingredients[idx] = ingredients[idx].model_copy(update={
            "structured": structured,
            "display_text": format_ingredient_for_display(structured),
        })
        return self.relink_all(recipe.model_copy(update={"ingredients": ingredients}))

    def add_ingredient(self, recipe: Recipe, text: str) -> Recipe:
        ingredients = [*recipe.ingredients, self.make_ingredient(text)]
        return self.relink_all(recipe.model_copy(update={"ingredients": ingredients}))

    def delete_ingredient(self, recipe: Recipe, ingredient_id: str) -> Recipe:
        """Remove an ingredient; steps that named it keep the text as an unresolved mention."""
        idx = self._ingredient_index(recipe, ingredient_id)
        ingredients = [i for n, i in enumerate(recipe.ingredients) if n != idx]
        return self.relink_all(recipe.model_copy(update={"ingredients": ingredients}))

    def update_step(self, recipe: Recipe, step_id: str, content: str) -> Recipe:
        idx = self._step_index(recipe, step_id)
        content = clean_text(content)
        steps = list(recipe.steps)
        steps[idx] = steps[idx].model_copy(update={"content": content})
        originals = {**recipe.original_step_content, step_id: content}
        return self.relink_all(recipe.model_copy(update={"steps": steps, "original_step_content": originals}))

    def add_step(self, recipe: Recipe, content: str) -> Recipe:
        content = clean_text(content)
        step = Step(id=f"step-{uuid.uuid4()}", content=content)
        originals = {**recipe.original_step_content, step.id: content}
        return self.relink_all(recipe.model_copy(update={
            "steps": [*recipe.steps, step],
            "original_step_content": originals,
        }))

    def delete_step(self, recipe: Recipe, step_id: str) -> Recipe:
        self._step_index(recipe, step_id)
        steps = [s for s in recipe.steps if s.id != step_id]
        originals = {k: v for k, v in recipe.original_step_content.items() if k != step_id}
        return self.relink_all(recipe.model_copy(update={"steps": steps, "original_step_content": originals}))

    # --- Catalog ---

    async def add_custom_ingredient(self, name: str, **data) -> CatalogIngredient:
        """Add a custom catalog entry, reusing an existing one with the same normalized name."""
        await self.catalog.ensure_custom_loaded()
        key = normalize_ingredient_key(name)
        for existing in self.catalog.custom_ingredients:
            if key and normalize_ingredient_key(existing.name) == key:
                return existing

        ingredient = self.catalog.add_custom(name, **data)
        await self.catalog.persist_custom()
        return ingredient
