import logging
import re
from typing import Optional

from ..core.text import clean_md, clean_text
from .catalog import CatalogMatch, IngredientCatalog
from .models import CatalogIngredient, ParsedIngredient, PreparationMethod, Unit
from .quantities import (
    extract_quantity,
    format_amount,
    format_quantity,
    normalize_quantity_text,
    unit_label,
)
from .vocabulary import (
    CONNECTORS,
    DIVIDED_MARKERS,
    FORM_DESCRIPTORS,
    PREP_ADVERBS,
    TRAILING_NOTES,
    has_action,
    split_trailing_note,
    words,
)

logger = logging.getLogger("prepline.parsing")

_PAREN_RE = re.compile(r"\(([^)]*)\)")
_TRAILING_DIVIDED_RE = re.compile(r"\s+divided\s*$", re.IGNORECASE)
_SIZE_WORDS = {"small", "medium", "large", "extra-large", "jumbo"}


def custom_ingredient(name: str) -> CatalogIngredient:
    return CatalogIngredient(id="custom", name=name, plural=name, category="custom", is_custom=True)


# --- Layers ---
# Each layer takes plain text and hands back plain text plus whatever it pulled out.

def sanitize_line(text: str) -> str:
    """Strip markdown and collapse whitespace."""
    return clean_text(clean_md(text or ""))


def extract_parentheticals(text: str, catalog: IngredientCatalog) -> tuple[str, Optional[str], list[str], bool]:
    """
    Pull "(...)" groups out of a line.

    Returns the remaining text, the first size annotation ("5 ounce",
    "large"), any other notes, and whether one of them was a divided marker.
    """
    size_info = None
    notes = []
    divided = False

    for m in _PAREN_RE.finditer(text):
        inner = clean_text(m.group(1))
        if not inner:
            continue
        lowered = inner.lower()
        if lowered in DIVIDED_MARKERS:
            divided = True
        elif size_info is None and _looks_like_size(inner, catalog):
            size_info = inner
        else:
            notes.append(inner)

    remaining = clean_text(_PAREN_RE.sub(" ", text))
    return remaining, size_info, notes, divided


def _looks_like_size(text: str, catalog: IngredientCatalog) -> bool:
    if re.search(r"\d", text):
        return True
    return any(w in _SIZE_WORDS or catalog.find_unit(w) is not None for w in words(text))


def split_divided(parts: list[str]) -> tuple[list[str], bool]:
    """Drop "divided"/"split" markers from the comma-separated parts."""
    kept = []
    divided = False
    for part in parts:
        if part.lower() in DIVIDED_MARKERS:
            divided = True
            continue
        stripped = _TRAILING_DIVIDED_RE.sub("", part)
        if stripped != part:
            divided = True
        if stripped:
            kept.append(stripped)
    return kept, divided


def extract_unit(text: str, quantity: Optional[float], catalog: IngredientCatalog) -> tuple[Optional[Unit], str]:
    """
    Consume a unit word right after the amount ("cups", "Tbsp.", "lbs").

    Without an amount only "pinch of"-style phrasing counts as a unit.
    """
    tokens = text.split(" ", 1)
    if not tokens or not tokens[0]:
        return None, text

    unit = catalog.find_unit(tokens[0])
    rest = tokens[1] if len(tokens) > 1 else ""
    if unit is None:
        return None, text
    if quantity is None and not rest.lower().startswith("of "):
        return None, text
    if not rest and unit.type != "size":
        # "2 cups" on its own: a unit with nothing to measure is the name
        return None, text

    rest = re.sub(r"^of\s+", "", rest, flags=re.IGNORECASE)
    return unit, rest


def is_preparation_phrase(text: str, catalog: IngredientCatalog) -> bool:
    """True when every word is a preparation word, an adverb for one, or a connector."""
    tokens = words(text)
    if not tokens:
        return False
    saw_prep = False
    for token in tokens:
        if token in PREP_ADVERBS or token in CONNECTORS:
            continue
        if catalog.find_preparation(token) or has_action(token) or token in FORM_DESCRIPTORS:
            saw_prep = True
            continue
        return False
    return saw_prep


def looks_like_preparation(part: str, catalog: IngredientCatalog) -> bool:
    """Comma clauses like "peeled and chopped", "cut into 1-inch cubes" or "to taste"."""
    if is_preparation_phrase(part, catalog):
        return True
    if clean_text(part).lower() in TRAILING_NOTES:
        return True
    tokens = [t for t in words(part) if t not in PREP_ADVERBS]
    if not tokens:
        return False
    first = tokens[0]
    return first in ("cut", "torn", "at") or catalog.find_preparation(first) is not None or has_action(first)


def split_name_and_preparation(text: str, match: CatalogMatch, catalog: IngredientCatalog) -> list[str]:
    """
    Preparation words sitting around the matched name in the same clause.

    "finely chopped onion" gives ["finely chopped"]; descriptive words that
    are not preparations ("yellow onion") are left alone.
    """
    idx = text.lower().find(match.matched_text.lower())
    if idx < 0:
        return []
    before = text[:idx].strip(" ,")
    after = text[idx + len(match.matched_text):].strip(" ,")
    return [seg for seg in (before, after) if seg and is_preparation_phrase(seg, catalog)]


def resolve_preparation(clause: str, ingredient: CatalogIngredient, catalog: IngredientCatalog) -> Optional[PreparationMethod]:
    """
    Look the clause up against the ingredient's usual preparations first,
    then the global table. Anything else becomes a custom preparation that
    requires a step only if it names an action.
    """
    clause = clean_text(clause)
    if not clause:
        return None
    key = clause.lower()

    if key in (p.lower() for p in ingredient.common_preparations):
        known = catalog.preparation(key)
        return known or PreparationMethod(id=key, name=clause, requires_step=has_action(key))

    known = catalog.find_preparation(key)
    if known:
        return known

    return PreparationMethod(id="custom", name=clause, requires_step=has_action(key))


# --- Display helpers ---

def display_name(parsed: ParsedIngredient) -> str:
    """Canonical name, pluralized only for bare or size-qualified counts ("2 onions", "2 large eggs")."""
    ingredient = parsed.ingredient
    countable = parsed.unit is None or parsed.unit.type == "size"
    if countable and parsed.quantity is not None and parsed.quantity > 1:
        return ingredient.plural or ingredient.name
    return ingredient.name


def full_spec(parsed: ParsedIngredient) -> str:
    """Amount and name: "2 cups flour", "1 tsp vanilla extract", "salt"."""
    return " ".join(p for p in (format_amount(parsed.quantity, parsed.unit), display_name(parsed)) if p)


def format_ingredient_for_display(parsed: ParsedIngredient) -> str:
    if not parsed.is_structured:
        return parsed.original_text or parsed.ingredient.name

    parts = []
    if parsed.quantity is not None:
        parts.append(format_quantity(parsed.quantity))
    if parsed.size_info:
        parts.append(f"({parsed.size_info})")
    if parsed.unit:
        parts.append(unit_label(parsed.unit, parsed.quantity))
    parts.append(display_name(parsed))

    text = " ".join(parts)
    if parsed.preparation:
        text += f", {parsed.preparation.name}"
    if parsed.is_divided:
        text += ", divided"
    return text


# --- Parser ---

class IngredientParser:
    """
    Turns one free-text ingredient line into a ParsedIngredient.

    parse() is total: any input string produces a result, the worst case
    being an unstructured custom ingredient carrying the original line.
    """

    def __init__(self, catalog: IngredientCatalog, corrections=None):
        self.catalog = catalog
        self.corrections = corrections

    def parse(self, line: str) -> ParsedIngredient:
        original = (line or "").strip()
        try:
            return self._parse(original)
        except Exception as e:
            logger.warning(f"Ingredient parse failed for '{original}': {e}")
            return ParsedIngredient(
                ingredient=custom_ingredient(original),
                original_text=original,
                is_structured=False,
                source="fallback",
            )

    def parse_structural(self, line: str) -> ParsedIngredient:
        """Parse without consulting learned corrections."""
        original = (line or "").strip()
        try:
            return self._parse_rules(original, sanitize_line(original))
        except Exception as e:
            logger.warning(f"Ingredient parse failed for '{original}': {e}")
            return ParsedIngredient(
                ingredient=custom_ingredient(original),
                original_text=original,
                is_structured=False,
                source="fallback",
            )

    def _parse(self, original: str) -> ParsedIngredient:
        text = sanitize_line(original)
        if not text:
            return ParsedIngredient(ingredient=custom_ingredient(original), original_text=original)

        if self.corrections is not None:
            normalized = normalize_quantity_text(text)
            example = self.corrections.find_best_match(normalized)
            if example is not None:
                adapted = self.corrections.adapt(normalized, example)
                if adapted is not None:
                    logger.debug(f"Reused correction {example.id} for '{original}'")
                    return adapted.model_copy(update={"original_text": original})

        return self._parse_rules(original, text)

    def _parse_rules(self, original: str, text: str) -> ParsedIngredient:
        if not text:
            return ParsedIngredient(ingredient=custom_ingredient(original), original_text=original)

        text = normalize_quantity_text(text)
        text, size_info, notes, paren_divided = extract_parentheticals(text, self.catalog)

        parts = [clean_text(p) for p in text.split(",")]
        parts, part_divided = split_divided([p for p in parts if p])
        is_divided = paren_divided or part_divided
        head, others = (parts[0], parts[1:]) if parts else ("", [])

        quantity, rest = extract_quantity(head)
        unit, rest = extract_unit(rest, quantity, self.catalog)

        name_candidate, note = split_trailing_note(rest)
        prep_pieces: list[str] = []

        # Fragment 0 is the head's name candidate, the rest are the comma clauses
        fragments = [name_candidate] + others
        eligible = [0] + [i for i, p in enumerate(others, 1) if not looks_like_preparation(p, self.catalog)]

        best: Optional[CatalogMatch] = None
        best_idx = 0
        for i in eligible:
            match = self.catalog.best_match(fragments[i])
            if match and (best is None or match.score > best.score):
                best, best_idx = match, i

        if best is not None:
            ingredient = best.ingredient
            name_text = best.matched_text
            prep_pieces.extend(split_name_and_preparation(fragments[best_idx], best, self.catalog))
            if best_idx != 0 and name_candidate and is_preparation_phrase(name_candidate, self.catalog):
                prep_pieces.append(name_candidate)
        else:
            # No catalog entry: the most content-bearing fragment names the ingredient
            fragments[0] = self._strip_leading_preparation(name_candidate, prep_pieces)
            named = [i for i in eligible if fragments[i]]
            best_idx = max(named, key=lambda i: len(fragments[i])) if named else 0
            name_text = fragments[best_idx] or name_candidate or text
            ingredient = custom_ingredient(name_text)
            if best_idx != 0 and fragments[0]:
                prep_pieces.append(fragments[0])

        if note:
            prep_pieces.append(note)
        prep_pieces.extend(p for i, p in enumerate(others, 1) if i != best_idx)
        prep_pieces.extend(notes)

        clause = ", ".join(p for p in prep_pieces if p)
        preparation = resolve_preparation(clause, ingredient, self.catalog)

        return ParsedIngredient(
            quantity=quantity,
            unit=unit,
            ingredient=ingredient,
            preparation=preparation,
            original_text=original,
            is_structured=True,
            is_divided=is_divided,
            size_info=size_info,
            name_text=name_text,
        )

    def _strip_leading_preparation(self, text: str, prep_pieces: list[str]) -> str:
        """Move "finely chopped" off the front of an unknown ingredient name."""
        tokens = text.split()
        taken = 0
        # Keep at least one word for the name
        for k in range(1, len(tokens)):
            if is_preparation_phrase(" ".join(tokens[:k]), self.catalog):
                taken = k
        if taken:
            prep_pieces.append(" ".join(tokens[:taken]))
        return " ".join(tokens[taken:])
