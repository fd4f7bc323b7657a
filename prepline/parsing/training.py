"""
Correction-learning store.

Manual corrections are kept as TrainingExamples. A new line that is close
enough to a recorded one reuses its recognition pattern (unit, ingredient
identity, preparation) while the amount is always read fresh.
"""

import json
import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from ..core.text import clean_text
from ..infra.kv_store import StorageError
from .catalog import IngredientCatalog
from .ingredient_parser import (
    custom_ingredient,
    is_preparation_phrase,
    resolve_preparation,
    sanitize_line,
)
from .models import ParsedIngredient, TrainingExample
from .quantities import extract_quantity, normalize_quantity_text
from .vocabulary import CONNECTORS, DIVIDED_MARKERS, split_trailing_note, words

logger = logging.getLogger("prepline.training")

_examples = TypeAdapter(list[TrainingExample])

EXPORT_VERSION = "1.0"

# Spelling variants collapsed to one token before comparing lines
UNIT_SYNONYMS = {
    "tablespoon": "tbsp", "tablespoons": "tbsp", "tbsp": "tbsp", "tbs": "tbsp", "tbsps": "tbsp",
    "teaspoon": "tsp", "teaspoons": "tsp", "tsp": "tsp", "tsps": "tsp",
    "ounce": "oz", "ounces": "oz", "oz": "oz",
    "pound": "lb", "pounds": "lb", "lb": "lb", "lbs": "lb",
    "cup": "cup", "cups": "cup",
    "piece": "piece", "pieces": "piece",
    "clove": "clove", "cloves": "clove",
    "sprig": "sprig", "sprigs": "sprig",
    "half": "half", "halves": "half",
    "gram": "gram", "grams": "gram",
}

_PUNCT_RE = re.compile(r"[^\w\s]")


def normalize_tokens(text: str) -> set[str]:
    """Lowercase, drop punctuation, canonicalize unit spellings, drop one-character tokens."""
    s = _PUNCT_RE.sub(" ", (text or "").lower())
    tokens = set()
    for token in s.split():
        token = UNIT_SYNONYMS.get(token, token)
        if len(token) > 1:
            tokens.add(token)
    return tokens


def calculate_similarity(text_a: str, text_b: str) -> float:
    """
    (exact matches + 0.5 * partial matches) / size of the token union.

    A partial match is a pair of unshared tokens, both longer than three
    characters, where one contains the other ("tomato" / "tomatoes").
    """
    a = normalize_tokens(text_a)
    b = normalize_tokens(text_b)
    union = a | b
    if not union:
        return 0.0

    exact = len(a & b)
    partial = 0
    for x in a - b:
        for y in b - a:
            if len(x) > 3 and len(y) > 3 and (x in y or y in x):
                partial += 1

    return min(1.0, (exact + 0.5 * partial) / len(union))


class CorrectionStore:
    def __init__(
        self,
        store,
        catalog: Optional[IngredientCatalog] = None,
        key: str = "ingredientParsingTraining",
        reuse_threshold: float = 0.8,
        similar_threshold: float = 0.7,
    ):
        self.store = store
        self.catalog = catalog or IngredientCatalog()
        self.key = key
        self.reuse_threshold = reuse_threshold
        self.similar_threshold = similar_threshold
        self.examples: list[TrainingExample] = []
        self.loaded = False

    # --- Persistence ---

    async def load(self) -> list[TrainingExample]:
        """
        Read the stored examples. Unreadable data leaves the store empty.

        A failed read leaves the store unloaded so writes are refused until
        a later read succeeds.
        """
        try:
            raw = await self.store.get(self.key)
        except Exception as e:
            logger.error(f"Could not read training data: {e}")
            self.examples = []
            return self.examples

        self.loaded = True
        if not raw:
            self.examples = []
            return self.examples

        try:
            self.examples = _examples.validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Discarding malformed training data: {e}")
            self.examples = []
        return self.examples

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.load()

    async def _require_loaded(self) -> None:
        # Saving writes the whole list, so it must start from what is stored
        await self.ensure_loaded()
        if not self.loaded:
            raise StorageError("Training data could not be read; refusing to overwrite it")

    async def _save(self) -> None:
        payload = json.dumps(_examples.dump_python(self.examples, mode="json"))
        await self.store.set(self.key, payload)

    async def record(self, original_text: str, corrected: ParsedIngredient) -> TrainingExample:
        await self._require_loaded()
        example = TrainingExample(
            id=str(uuid.uuid4()),
            original_text=clean_text(original_text),
            manual_parsing=corrected.model_copy(update={"source": "manual"}),
        )
        self.examples.append(example)
        try:
            await self._save()
        except Exception:
            self.examples.remove(example)
            raise
        logger.info(f"Recorded correction {example.id} for '{example.original_text}'")
        return example

    async def delete(self, example_id: str) -> bool:
        await self._require_loaded()
        before = len(self.examples)
        self.examples = [e for e in self.examples if e.id != example_id]
        if len(self.examples) == before:
            return False
        await self._save()
        return True

    async def clear(self) -> None:
        self.examples = []
        await self.store.delete(self.key)
        logger.info("Cleared all training data")

    def stats(self) -> dict:
        now = datetime.now(timezone.utc)
        day_ago = now - timedelta(days=1)
        week_ago = now - timedelta(days=7)
        return {
            "total": len(self.examples),
            "last_24h": sum(1 for e in self.examples if e.timestamp >= day_ago),
            "last_7_days": sum(1 for e in self.examples if e.timestamp >= week_ago),
        }

    def export(self) -> dict:
        return {
            "export_date": datetime.now(timezone.utc).isoformat(),
            "version": EXPORT_VERSION,
            "data": _examples.dump_python(self.examples, mode="json"),
        }

    # --- Retrieval ---

    def calculate_similarity(self, text_a: str, text_b: str) -> float:
        return calculate_similarity(text_a, text_b)

    def find_similar(self, text: str, threshold: Optional[float] = None) -> list[tuple[TrainingExample, float]]:
        """Examples scoring at or above threshold, best first; the newest wins a tie."""
        limit = self.similar_threshold if threshold is None else threshold
        scored = []
        for position, example in enumerate(self.examples):
            score = self.calculate_similarity(text, example.original_text)
            if score >= limit:
                scored.append((score, position, example))
        scored.sort(key=lambda s: (s[0], s[1]), reverse=True)
        return [(example, score) for score, _, example in scored]

    def find_best_match(self, text: str) -> Optional[TrainingExample]:
        matches = self.find_similar(text, self.reuse_threshold)
        return matches[0][0] if matches else None

    def apply(self, text: str) -> Optional[ParsedIngredient]:
        """Adapt the closest recorded correction to text, or None when nothing is close enough."""
        example = self.find_best_match(text)
        if example is None:
            return None
        return self.adapt(text, example)

    # --- Adaptation ---

    def adapt(self, new_text: str, example: TrainingExample) -> Optional[ParsedIngredient]:
        """
        Transplant a correction's recognition pattern onto a new line.

        The amount always comes from new_text. Returns None on any failure so
        the caller falls back to a full parse.
        """
        try:
            return self._adapt(new_text, example)
        except Exception as e:
            logger.warning(f"Could not adapt correction {example.id} to '{new_text}': {e}")
            return None

    def _adapt(self, new_text: str, example: TrainingExample) -> ParsedIngredient:
        manual = example.manual_parsing
        text = normalize_quantity_text(sanitize_line(new_text))

        parts = [clean_text(p) for p in text.split(",") if clean_text(p)]
        head = parts[0] if parts else ""
        clauses = parts[1:]
        is_divided = any(p.lower() in DIVIDED_MARKERS for p in clauses) or manual.is_divided
        clauses = [p for p in clauses if p.lower() not in DIVIDED_MARKERS]

        quantity, rest = extract_quantity(head)

        unit = None
        if manual.unit is not None:
            first, _, remainder = rest.partition(" ")
            found = self.catalog.find_unit(first)
            if found is not None:
                unit, rest = found, re.sub(r"^of\s+", "", remainder, flags=re.IGNORECASE)
            else:
                unit = manual.unit

        rest, note = split_trailing_note(rest)
        span = self._overlap_span(rest, manual)
        if span:
            ingredient = manual.ingredient
            name_text = span
        else:
            name_text = self._exclusion_name(rest)
            match = self.catalog.best_match(name_text) if name_text else None
            if match:
                ingredient, name_text = match.ingredient, match.matched_text
            else:
                ingredient = custom_ingredient(name_text or rest)

        descriptors = [seg for seg in self._around(rest, name_text) if is_preparation_phrase(seg, self.catalog)]
        if note:
            descriptors.append(note)
        descriptors.extend(clauses)

        preparation = None
        if descriptors:
            preparation = resolve_preparation(", ".join(descriptors), ingredient, self.catalog)
        if manual.preparation is not None:
            prep_words = set(words(manual.preparation.name))
            if prep_words and prep_words <= set(words(text)):
                preparation = manual.preparation

        return ParsedIngredient(
            quantity=quantity,
            unit=unit,
            ingredient=ingredient,
            preparation=preparation,
            original_text=new_text,
            is_structured=True,
            is_divided=is_divided,
            size_info=manual.size_info,
            name_text=name_text or ingredient.name,
            source="trained",
        )

    def _overlap_span(self, text: str, manual: ParsedIngredient) -> str:
        """The run of words in text that overlaps the example's ingredient name."""
        known = set(words(manual.ingredient.name)) | set(words(manual.name_text or ""))
        known |= set(words(manual.ingredient.plural))

        def overlaps(token: str) -> bool:
            t = token.lower()
            return any(t == k or (len(t) > 3 and len(k) > 3 and (t in k or k in t)) for k in known)

        tokens = text.split()
        hits = [i for i, tok in enumerate(tokens) if overlaps(tok)]
        if not hits:
            return ""
        return " ".join(tokens[hits[0]: hits[-1] + 1])

    def _exclusion_name(self, text: str) -> str:
        """Whatever is left once unit, preparation, number and filler words are removed."""
        kept = []
        for token in text.split():
            t = token.lower().strip(".,")
            if not t or re.fullmatch(r"[\d/.\-]+", t):
                continue
            if t in CONNECTORS or t == "of":
                continue
            if self.catalog.find_unit(t) or is_preparation_phrase(t, self.catalog):
                continue
            kept.append(token)
        return " ".join(kept)

    @staticmethod
    def _around(text: str, span: str) -> list[str]:
        if not span:
            return []
        idx = text.lower().find(span.lower())
        if idx < 0:
            return []
        return [s.strip(" ,") for s in (text[:idx], text[idx + len(span):]) if s.strip(" ,")]
