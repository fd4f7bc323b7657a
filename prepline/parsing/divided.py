import logging

from .ingredient_parser import display_name
from .models import RecipeIngredient, ResolvedMention, Step
from .quantities import format_amount, is_common_fraction
from .tracking import LOOSE_AMOUNT_RE, find_spans, replaceable_article
from .vocabulary import mentions_partial_use

logger = logging.getLogger("prepline.tracking")

MIN_SHARE = 1 / 8


def _referencing_steps(steps: list[Step], ingredient_id: str) -> list[int]:
    return [
        i for i, step in enumerate(steps)
        if not step.is_prep and any(
            isinstance(m, ResolvedMention) and m.ingredient_id == ingredient_id for m in step.ingredients
        )
    ]


def _rewrite(step: Step, position: int, ingredients: list[RecipeIngredient], amount: str, suffix: str) -> Step:
    content = step.content
    span = find_spans(content, ingredients).get(position)
    if span is None:
        return step

    prefix = content[: span.start]
    existing = LOOSE_AMOUNT_RE.search(prefix) or replaceable_article(prefix)
    cut = existing.start() if existing else span.start
    tail = content[span.end:]
    if suffix and not tail.startswith(suffix):
        tail = suffix + tail

    matched = content[span.start:span.end]
    content = f"{content[:cut]}{amount} {matched}{tail}"

    ingredient_id = ingredients[position].id
    mentions = [
        m.model_copy(update={"text": f"{amount} {matched}{suffix}"})
        if isinstance(m, ResolvedMention) and m.ingredient_id == ingredient_id else m
        for m in step.ingredients
    ]
    return step.model_copy(update={"content": content, "ingredients": mentions})


def distribute_divided(steps: list[Step], ingredients: list[RecipeIngredient]) -> list[Step]:
    """
    Split a divided ingredient's amount across the cooking steps that use it.

    Only happens when at least two steps reference it and one of them talks
    about part of it ("half", "remaining", ...). A share that is not a
    measurable cooking fraction keeps the total and says "(divided by N)".
    """
    steps = list(steps)
    for position, ingredient in enumerate(ingredients):
        parsed = ingredient.structured
        if not parsed.is_divided or not parsed.quantity:
            continue

        referencing = _referencing_steps(steps, ingredient.id)
        if len(referencing) < 2:
            continue
        if not any(mentions_partial_use(steps[i].content) for i in referencing):
            continue

        count = len(referencing)
        share = parsed.quantity / count
        if share < MIN_SHARE or not is_common_fraction(share):
            amount = format_amount(parsed.quantity, parsed.unit)
            suffix = f" (divided by {count})"
            logger.debug(f"{display_name(parsed)}: {amount} does not split {count} ways cleanly")
        else:
            amount = format_amount(share, parsed.unit)
            suffix = ""

        for i in referencing:
            try:
                steps[i] = _rewrite(steps[i], position, ingredients, amount, suffix)
            except Exception as e:
                logger.warning(f"Could not distribute {ingredient.id} in step {steps[i].id}: {e}")

    return steps
