import logging

from ..core.text import capitalize_first
from .ingredient_parser import full_spec
from .models import RecipeIngredient, Step
from .vocabulary import FORM_DESCRIPTORS, action_verbs, words

logger = logging.getLogger("prepline.parsing")

PREP_STEP_PREFIX = "prep-"


def prep_step_id(ingredient_id: str) -> str:
    return f"{PREP_STEP_PREFIX}{ingredient_id}"


def _join_verbs(verbs: list[str]) -> str:
    if len(verbs) == 1:
        return verbs[0]
    return ", ".join(verbs[:-1]) + " and " + verbs[-1]


def prep_actions(ingredient: RecipeIngredient) -> list[str]:
    """
    Imperative verbs a cook has to perform before starting, or [] when the
    preparation is descriptive. Form words ("halves", "pieces") are checked
    first and never count as actions.
    """
    preparation = ingredient.structured.preparation
    if preparation is None or not preparation.requires_step:
        return []

    verbs = action_verbs(preparation.name)
    if not verbs and any(w in FORM_DESCRIPTORS for w in words(preparation.name)):
        logger.debug(f"'{preparation.name}' describes a form, no prep step for {ingredient.id}")
    return verbs


def synthesize_prep_steps(ingredients: list[RecipeIngredient]) -> list[Step]:
    """One leading step per ingredient whose preparation is an action: "Chop 2 onions"."""
    steps = []
    for ingredient in ingredients:
        verbs = prep_actions(ingredient)
        if not verbs:
            continue
        content = f"{capitalize_first(_join_verbs(verbs))} {full_spec(ingredient.structured)}"
        steps.append(
            Step(
                id=prep_step_id(ingredient.id),
                content=content,
                is_prep=True,
                prep_for=ingredient.id,
            )
        )
    return steps
