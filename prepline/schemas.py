from typing import Optional

from pydantic import BaseModel, Field

from .parsing.models import ParsedIngredient, Recipe, RecipeIngredient, TrainingExample


class IngestRequest(BaseModel):
    title: str = ""
    steps_text: str = ""
    ingredients_text: str = ""


class RelinkRequest(BaseModel):
    recipe: Recipe


class ParseIngredientRequest(BaseModel):
    text: str


class ReparseIngredientRequest(BaseModel):
    text: str
    existing: RecipeIngredient


class CorrectionCreate(BaseModel):
    original_text: str = Field(..., min_length=1)
    corrected: ParsedIngredient


class SimilarCorrection(BaseModel):
    example: TrainingExample
    score: float


class CorrectionStats(BaseModel):
    total: int
    last_24h: int
    last_7_days: int


class CustomIngredientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    plural: Optional[str] = None
    category: str = "custom"
    common_units: Optional[list[str]] = None
    common_preparations: Optional[list[str]] = None
    search_terms: Optional[list[str]] = None


class UnitConversionOut(BaseModel):
    qty: float
    unit: str
    display: str
