"""
Ingredient cross-referencing and first-mention tracking.

Steps are scanned in their final order. The first step that names an
ingredient shows its amount ("Mix 1 cup butter"); later steps show the bare
name. The pass is idempotent: amounts already in place are left alone.
"""

import logging
import re
from typing import NamedTuple, Optional

from ..core.text import word_pattern
from . import catalog_data
from .ingredient_parser import full_spec
from .models import RecipeIngredient, ResolvedMention, Step, TrackerEntry, UnresolvedMention
from .quantities import format_amount
from .vocabulary import PARTIAL_WORDS, words

logger = logging.getLogger("prepline.tracking")

_UNIT_WORDS = sorted(
    {w for uid, (name, plural, _) in catalog_data.UNITS.items() for w in (uid, name, plural)}
    | set(catalog_data.UNIT_ALIASES),
    key=len,
    reverse=True,
)
# Any amount sitting right before a name: "2 cups ", "1/2 ", "1 1/2 tbsp. "
LOOSE_AMOUNT_RE = re.compile(
    r"(?<![\w/.])\d+(?:\s+\d+/\d+|/\d+|\.\d+)?\s*(?:(?:" + "|".join(re.escape(u) for u in _UNIT_WORDS) + r")\.?\s+(?:of\s+)?)?$",
    re.IGNORECASE,
)
ARTICLE_RE = re.compile(r"(?<![\w-])the\s+$", re.IGNORECASE)


class Span(NamedTuple):
    start: int
    end: int
    position: int  # index into the ingredient list


def name_candidates(ingredient: RecipeIngredient) -> list[str]:
    """Spellings a step might use for this ingredient, longest first."""
    parsed = ingredient.structured
    names: list[str] = []
    for name in (parsed.name_text, parsed.ingredient.name, parsed.ingredient.plural):
        if name and name.strip() and name.lower() not in (n.lower() for n in names):
            names.append(name.strip())
    return sorted(names, key=len, reverse=True)


def search_term_candidates(ingredient: RecipeIngredient) -> list[str]:
    """Catalog search terms ("beef" for ground beef) that are not already names."""
    names = {n.lower() for n in name_candidates(ingredient)}
    terms = [t.strip() for t in ingredient.structured.ingredient.search_terms if t.strip()]
    return [t for t in dict.fromkeys(terms) if t.lower() not in names]


def find_spans(content: str, ingredients: list[RecipeIngredient]) -> dict[int, Span]:
    """
    Earliest non-overlapping occurrence of each ingredient in content.

    Longer names claim text first, so "brown sugar" is never also read as
    "sugar". Search terms only claim text no name has taken. Ties go to the
    ingredient listed first.
    """
    found: list[tuple[int, Span]] = []
    for position, ingredient in enumerate(ingredients):
        for tier, candidates in enumerate((name_candidates(ingredient), search_term_candidates(ingredient))):
            for name in candidates:
                for m in word_pattern(name).finditer(content):
                    found.append((tier, Span(m.start(), m.end(), position)))

    found.sort(key=lambda f: (f[0], -(f[1].end - f[1].start), f[1].start, f[1].position))
    claimed: list[Span] = []
    for _, span in found:
        if any(span.start < c.end and c.start < span.end for c in claimed):
            continue
        claimed.append(span)

    first: dict[int, Span] = {}
    for span in sorted(claimed, key=lambda s: s.start):
        first.setdefault(span.position, span)
    return first


def replaceable_article(prefix: str) -> Optional[re.Match]:
    """
    A "the" right before a name that an amount may replace.

    It stays after a partial-use word ("half the sugar").
    """
    article = ARTICLE_RE.search(prefix)
    if article is None:
        return None
    before = words(prefix[: article.start()])
    if before and before[-1] in PARTIAL_WORDS:
        return None
    return article


def amount_precedes(prefix: str, amount: str) -> bool:
    """True when prefix already ends in this amount or in any number-plus-unit."""
    if not amount:
        return True
    head = prefix.rstrip()
    if head.lower().endswith(amount.lower()):
        before = head[: len(head) - len(amount)]
        if not before or not (before[-1].isalnum() or before[-1] in "/."):
            return True
    return bool(LOOSE_AMOUNT_RE.search(prefix))


def _strip_own_amount(content: str, start: int, amount: str) -> tuple[str, int]:
    """Remove "<amount> " directly before start; returns new content and shifted start."""
    if not amount:
        return content, start
    prefix = content[:start]
    m = re.search(r"(?<![\w/.])" + re.escape(amount) + r"\s+$", prefix, re.IGNORECASE)
    if not m:
        return content, start
    return content[: m.start()] + content[start:], m.start()


def link(steps: list[Step], ingredients: list[RecipeIngredient]) -> tuple[list[Step], dict[str, TrackerEntry]]:
    """
    Rebuild every step's mentions and the recipe-level tracker.

    Never raises for a single bad step: that step keeps its content and the
    pass moves on.
    """
    tracker: dict[str, TrackerEntry] = {}
    known_ids = {i.id for i in ingredients}
    linked: list[Step] = []

    for order, step in enumerate(steps):
        try:
            linked.append(_link_step(step, order, ingredients, known_ids, tracker))
        except Exception as e:
            logger.warning(f"Could not link ingredients in step {step.id}: {e}")
            linked.append(step)

    return linked, tracker


def _link_step(
    step: Step,
    order: int,
    ingredients: list[RecipeIngredient],
    known_ids: set[str],
    tracker: dict[str, TrackerEntry],
) -> Step:
    content = step.content
    spans = find_spans(content, ingredients)

    # A prep step always refers to its own ingredient, even when worded oddly
    if step.prep_for:
        for position, ingredient in enumerate(ingredients):
            if ingredient.id == step.prep_for and position not in spans:
                spans[position] = Span(-1, -1, position)

    ordered = sorted(spans.values(), key=lambda s: (s.start, s.position))
    mentions: list[Optional[ResolvedMention]] = [None] * len(ordered)

    # Decide first/repeat in reading order, then rewrite right to left so offsets hold
    decisions = []
    for span in ordered:
        ingredient = ingredients[span.position]
        is_first = ingredient.id not in tracker
        if is_first:
            parsed = ingredient.structured
            tracker[ingredient.id] = TrackerEntry(
                first_mention_step_id=step.id,
                step_order=order,
                amount=parsed.quantity,
                unit=parsed.unit,
                ingredient_name=parsed.ingredient.name,
            )
        decisions.append(is_first)

    for idx in range(len(ordered) - 1, -1, -1):
        span = ordered[idx]
        ingredient = ingredients[span.position]
        parsed = ingredient.structured
        amount = format_amount(parsed.quantity, parsed.unit)
        is_first = decisions[idx]

        if span.start < 0:
            text = full_spec(parsed)
        else:
            matched = content[span.start:span.end]
            prefix = content[: span.start]
            if is_first:
                text = f"{amount} {matched}" if amount else matched
                if not amount_precedes(prefix, amount):
                    article = replaceable_article(prefix)
                    cut = article.start() if article else span.start
                    content = f"{content[:cut]}{amount} {content[span.start:]}"
            else:
                text = matched
                content, _ = _strip_own_amount(content, span.start, amount)

        mentions[idx] = ResolvedMention(
            ingredient_id=ingredient.id,
            text=text,
            full_text=full_spec(parsed),
            is_first_mention=is_first,
            first_mention_step_id=tracker[ingredient.id].first_mention_step_id,
        )

    resolved = [m for m in mentions if m is not None]
    return step.model_copy(update={
        "content": content,
        "ingredients": resolved + _carried_unresolved(step, known_ids, resolved),
    })


def _carried_unresolved(step: Step, known_ids: set[str], resolved: list[ResolvedMention]) -> list[UnresolvedMention]:
    """
    Mentions whose ingredient no longer exists stay as plain text so the
    step still reads the same.
    """
    taken = {m.text.lower() for m in resolved}
    carried: list[UnresolvedMention] = []
    for mention in step.ingredients:
        if isinstance(mention, ResolvedMention):
            if mention.ingredient_id in known_ids:
                continue
            text = mention.text
        else:
            text = mention.text
        if text.lower() in taken or any(c.text.lower() == text.lower() for c in carried):
            continue
        carried.append(UnresolvedMention(text=text))
    return carried
