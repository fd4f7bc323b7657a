"""
Domain models for the ingestion pipeline.

Catalog reference types are frozen; everything produced per recipe is a
plain model that the pipeline replaces wholesale rather than patching.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

UnitType = Literal["volume", "weight", "count", "size", "container"]


# --- Catalog reference data ---

class Unit(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    plural: str
    type: UnitType


class PreparationMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    requires_step: bool = False
    category: Optional[str] = None


class CatalogIngredient(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    plural: str
    category: str
    common_units: list[str] = []
    common_preparations: list[str] = []
    search_terms: list[str] = []
    is_custom: bool = False

    @property
    def terms(self) -> list[str]:
        """Every spelling this ingredient answers to, canonical names first."""
        seen = []
        for term in [self.name, self.plural, *self.search_terms]:
            t = term.lower().strip()
            if t and t not in seen:
                seen.append(t)
        return seen


# --- Parser output ---

class ParsedIngredient(BaseModel):
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[Unit] = None
    ingredient: CatalogIngredient
    preparation: Optional[PreparationMethod] = None
    original_text: str = ""
    is_structured: bool = False
    is_divided: bool = False
    size_info: Optional[str] = None
    # The fragment of the line that named the ingredient ("vanilla" for vanilla extract)
    name_text: Optional[str] = None
    source: Literal["parser", "trained", "manual", "fallback"] = "parser"


class RecipeIngredient(BaseModel):
    id: str
    original_text: str
    structured: ParsedIngredient
    display_text: str


# --- Steps and mentions ---

class ResolvedMention(BaseModel):
    kind: Literal["resolved"] = "resolved"
    ingredient_id: str
    text: str
    full_text: str
    is_first_mention: bool
    first_mention_step_id: str


class UnresolvedMention(BaseModel):
    kind: Literal["unresolved"] = "unresolved"
    ingredient_id: None = None
    text: str
    is_first_mention: bool = False


IngredientMention = Annotated[
    Union[ResolvedMention, UnresolvedMention], Field(discriminator="kind")
]


class Step(BaseModel):
    id: str
    content: str
    timing: Optional[str] = None
    ingredients: list[IngredientMention] = []
    is_prep: bool = False
    # Ingredient id a synthesized prep step was generated for
    prep_for: Optional[str] = None


class TrackerEntry(BaseModel):
    first_mention_step_id: str
    step_order: int
    amount: Optional[float] = None
    unit: Optional[Unit] = None
    ingredient_name: str


# --- Learning store ---

class TrainingExample(BaseModel):
    id: str
    original_text: str
    manual_parsing: ParsedIngredient
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# --- Recipe ---

class OriginalContent(BaseModel):
    ingredients: str = ""
    steps: str = ""


class Recipe(BaseModel):
    id: str
    title: str
    original_content: OriginalContent
    # Pristine text of every step, keyed by step id; relinking always starts from here
    original_step_content: dict[str, str] = {}
    steps: list[Step] = []
    total_time: Optional[str] = None
    servings: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ingredients: list[RecipeIngredient] = []
    ingredient_tracker: dict[str, TrackerEntry] = {}
