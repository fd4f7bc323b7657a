import json
import logging
import uuid
from typing import NamedTuple, Optional

from pydantic import TypeAdapter, ValidationError

from ..core.text import clean_text, word_pattern
from ..infra.kv_store import StorageError
from . import catalog_data
from .models import CatalogIngredient, PreparationMethod, Unit

logger = logging.getLogger("prepline.catalog")

_custom_list = TypeAdapter(list[CatalogIngredient])

DEFAULT_CUSTOM_UNITS = ["piece", "cup"]

# Match tiers, strongest first
EXACT = 3
CONTAINS = 2
SEARCH_TERM = 1


class CatalogMatch(NamedTuple):
    ingredient: CatalogIngredient
    tier: int
    # The span of the searched text that produced the match
    matched_text: str

    @property
    def score(self) -> tuple[int, int]:
        return self.tier, len(self.matched_text)


def _build_units() -> dict[str, Unit]:
    return {
        uid: Unit(id=uid, name=name, plural=plural, type=utype)
        for uid, (name, plural, utype) in catalog_data.UNITS.items()
    }


def _build_preparations() -> dict[str, PreparationMethod]:
    return {
        pid: PreparationMethod(id=pid, name=pid, requires_step=requires, category=category)
        for pid, (requires, category) in catalog_data.PREPARATION_METHODS.items()
    }


def _build_ingredients(rows) -> dict[str, CatalogIngredient]:
    ingredients: dict[str, CatalogIngredient] = {}
    for iid, name, plural, category, units, preps, terms in rows:
        if iid in ingredients:
            logger.debug(f"Duplicate catalog id '{iid}', keeping the later definition")
            # Re-insert so declaration order follows the surviving definition
            del ingredients[iid]
        ingredients[iid] = CatalogIngredient(
            id=iid,
            name=name,
            plural=plural,
            category=category,
            common_units=units,
            common_preparations=preps,
            search_terms=terms,
        )
    return ingredients


class IngredientCatalog:
    """
    Reference lookup for ingredients, units and preparation methods.

    Built-in entries never change after construction. Custom entries are
    added on top and can be persisted through a key-value store.
    """

    def __init__(self, rows=None, store=None, storage_key: str = "customIngredients"):
        self._units = _build_units()
        self._preparations = _build_preparations()
        self._builtin = _build_ingredients(rows if rows is not None else catalog_data.INGREDIENTS)
        self._custom: dict[str, CatalogIngredient] = {}
        self._store = store
        self._storage_key = storage_key
        self.custom_loaded = False

        self._unit_lookup: dict[str, Unit] = {}
        for unit in self._units.values():
            for spelling in (unit.id, unit.name, unit.plural):
                self._unit_lookup.setdefault(spelling.lower(), unit)
        for alias, uid in catalog_data.UNIT_ALIASES.items():
            self._unit_lookup.setdefault(alias, self._units[uid])

        # term prefix -> ingredient ids, in declaration order
        self._index: dict[str, list[str]] = {}
        for ingredient in self._builtin.values():
            self._index_ingredient(ingredient)

    # --- Index ---

    def _index_ingredient(self, ingredient: CatalogIngredient) -> None:
        for term in ingredient.terms:
            words = term.split()
            keys = {term[:i] for i in range(1, len(term) + 1)}
            for word in words[1:]:
                keys.update(word[:i] for i in range(1, len(word) + 1))
            for key in keys:
                ids = self._index.setdefault(key, [])
                if ingredient.id not in ids:
                    ids.append(ingredient.id)

    # --- Lookup ---

    @property
    def ingredients(self) -> list[CatalogIngredient]:
        """Built-in entries followed by custom ones, in declaration order."""
        return [*self._builtin.values(), *self._custom.values()]

    @property
    def custom_ingredients(self) -> list[CatalogIngredient]:
        return list(self._custom.values())

    def get(self, ingredient_id: str) -> Optional[CatalogIngredient]:
        return self._builtin.get(ingredient_id) or self._custom.get(ingredient_id)

    def unit(self, unit_id: str) -> Optional[Unit]:
        return self._units.get(unit_id)

    def find_unit(self, text: str) -> Optional[Unit]:
        """Resolve a unit spelling ("Tablespoons", "tbsp.", "lbs") to its catalog entry."""
        if not text:
            return None
        key = text.lower().strip().rstrip(".")
        return self._unit_lookup.get(key)

    def unit_spellings(self) -> list[str]:
        """Every recognised unit spelling, longest first."""
        return sorted(self._unit_lookup, key=len, reverse=True)

    def preparation(self, prep_id: str) -> Optional[PreparationMethod]:
        return self._preparations.get(prep_id)

    def find_preparation(self, text: str) -> Optional[PreparationMethod]:
        if not text:
            return None
        return self._preparations.get(clean_text(text).lower())

    def units_for(self, ingredient_id: str) -> list[Unit]:
        ingredient = self.get(ingredient_id)
        if not ingredient:
            return []
        return [self._units[u] for u in ingredient.common_units if u in self._units]

    def preparations_for(self, ingredient_id: str) -> list[PreparationMethod]:
        ingredient = self.get(ingredient_id)
        if not ingredient:
            return []
        return [
            self._preparations.get(p) or PreparationMethod(id=p, name=p)
            for p in ingredient.common_preparations
        ]

    def categories(self) -> dict[str, str]:
        return dict(catalog_data.CATEGORIES)

    def by_category(self, category: str) -> list[CatalogIngredient]:
        return [i for i in self.ingredients if i.category == category]

    def search(self, query: str, limit: int = 10) -> list[CatalogIngredient]:
        """Exact term hits first, then prefix hits."""
        q = clean_text(query).lower()
        if not q:
            return []

        results: list[CatalogIngredient] = []
        seen = set()

        for ingredient in self.ingredients:
            if q in ingredient.terms and ingredient.id not in seen:
                results.append(ingredient)
                seen.add(ingredient.id)

        for iid in self._index.get(q, []):
            if iid not in seen:
                ingredient = self.get(iid)
                if ingredient:
                    results.append(ingredient)
                    seen.add(iid)

        return results[:limit]

    def best_match(self, text: str) -> Optional[CatalogMatch]:
        """
        Score every ingredient against a name candidate.

        An exact name or plural beats a name contained in the text, which
        beats a search-term alias. Within a tier the longer matched span
        wins; remaining ties go to declaration order.
        """
        candidate = clean_text(text).lower()
        if not candidate:
            return None

        best: Optional[CatalogMatch] = None
        for ingredient in self.ingredients:
            match = self._score(ingredient, candidate, text)
            if match and (best is None or match.score > best.score):
                best = match
        return best

    def _score(self, ingredient: CatalogIngredient, candidate: str, raw: str) -> Optional[CatalogMatch]:
        names = {ingredient.name.lower(), ingredient.plural.lower()}
        if candidate in names:
            return CatalogMatch(ingredient, EXACT, clean_text(raw))

        found: Optional[CatalogMatch] = None
        for name in sorted(names, key=len, reverse=True):
            m = word_pattern(name).search(raw)
            if m:
                found = CatalogMatch(ingredient, CONTAINS, m.group(0))
                break
        if found:
            return found

        for term in sorted(ingredient.search_terms, key=len, reverse=True):
            m = word_pattern(term).search(raw)
            if m:
                return CatalogMatch(ingredient, SEARCH_TERM, m.group(0))
        return None

    # --- Custom entries ---

    def add_custom(
        self,
        name: str,
        plural: Optional[str] = None,
        category: str = "custom",
        common_units: Optional[list[str]] = None,
        common_preparations: Optional[list[str]] = None,
        search_terms: Optional[list[str]] = None,
    ) -> CatalogIngredient:
        name = clean_text(name)
        if not name:
            raise ValueError("Custom ingredient name is required")

        terms = [name.lower()]
        for term in search_terms or []:
            t = clean_text(term).lower()
            if t and t not in terms:
                terms.append(t)

        ingredient = CatalogIngredient(
            id=f"custom_{uuid.uuid4().hex[:12]}",
            name=name,
            plural=plural or name,
            category=category,
            common_units=common_units or list(DEFAULT_CUSTOM_UNITS),
            common_preparations=common_preparations or [],
            search_terms=terms,
            is_custom=True,
        )
        self._register_custom(ingredient)
        logger.info(f"Added custom ingredient '{name}' ({ingredient.id})")
        return ingredient

    def _register_custom(self, ingredient: CatalogIngredient) -> None:
        self._custom[ingredient.id] = ingredient
        self._index_ingredient(ingredient)

    async def load_custom(self) -> int:
        """Restore persisted custom entries. Returns how many were loaded."""
        if self._store is None:
            return 0
        try:
            raw = await self._store.get(self._storage_key)
        except Exception as e:
            logger.warning(f"Could not read custom ingredients: {e}")
            return 0
        self.custom_loaded = True
        if not raw:
            return 0

        try:
            loaded = _custom_list.validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring malformed custom ingredient data: {e}")
            return 0

        for ingredient in loaded:
            self._register_custom(ingredient.model_copy(update={"is_custom": True}))
        return len(loaded)

    async def ensure_custom_loaded(self) -> None:
        """Load stored custom entries once; raises StorageError while they cannot be read."""
        if self._store is None or self.custom_loaded:
            return
        await self.load_custom()
        if not self.custom_loaded:
            raise StorageError("Custom ingredients could not be read; refusing to overwrite them")

    async def persist_custom(self) -> None:
        if self._store is None:
            return
        # The stored list is replaced wholesale, so it has to be merged in first
        await self.ensure_custom_loaded()
        payload = json.dumps(_custom_list.dump_python(self.custom_ingredients, mode="json"))
        await self._store.set(self._storage_key, payload)
