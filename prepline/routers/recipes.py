"""
Router for recipe ingestion and single-ingredient parsing.
"""

from fastapi import APIRouter, Depends

from ..deps import get_ingestion
from ..parsing.models import Recipe, RecipeIngredient
from ..schemas import IngestRequest, ParseIngredientRequest, RelinkRequest, ReparseIngredientRequest
from ..services.ingestion import IngestionService

router = APIRouter()


@router.post("/recipes/ingest", response_model=Recipe, status_code=201)
async def ingest_recipe(
    payload: IngestRequest,
    ingestion: IngestionService = Depends(get_ingestion),
):
    """Turn typed ingredients and steps into a structured, cross-referenced recipe."""
    return await ingestion.ingest_recipe(payload.title, payload.steps_text, payload.ingredients_text)


@router.post("/recipes/relink", response_model=Recipe)
def relink_recipe(
    payload: RelinkRequest,
    ingestion: IngestionService = Depends(get_ingestion),
):
    """Rebuild prep steps, mentions, tracker and totals after client-side edits."""
    return ingestion.relink_all(payload.recipe)


@router.post("/ingredients/parse", response_model=RecipeIngredient)
async def parse_ingredient(
    payload: ParseIngredientRequest,
    ingestion: IngestionService = Depends(get_ingestion),
):
    if ingestion.corrections is not None:
        await ingestion.corrections.ensure_loaded()
    return ingestion.make_ingredient(payload.text)


@router.post("/ingredients/reparse", response_model=RecipeIngredient)
async def reparse_ingredient(
    payload: ReparseIngredientRequest,
    ingestion: IngestionService = Depends(get_ingestion),
):
    return await ingestion.reparse_ingredient(payload.text, payload.existing)
