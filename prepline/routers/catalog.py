"""
Router for catalog lookups and custom ingredients.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_catalog, get_ingestion
from ..infra.kv_store import StorageError
from ..parsing import IngredientCatalog
from ..parsing.models import CatalogIngredient
from ..schemas import CustomIngredientCreate, UnitConversionOut
from ..services.ingestion import IngestionService
from ..services.unit_conversion import suggest_unit_conversions

router = APIRouter()


@router.get("/catalog/search", response_model=list[CatalogIngredient])
def search_catalog(
    q: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=50),
    catalog: IngredientCatalog = Depends(get_catalog),
):
    return catalog.search(q, limit)


@router.post("/catalog/custom", response_model=CatalogIngredient, status_code=201)
async def add_custom_ingredient(
    payload: CustomIngredientCreate,
    ingestion: IngestionService = Depends(get_ingestion),
):
    try:
        return await ingestion.add_custom_ingredient(**payload.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Could not save custom ingredient: {e}")


@router.get("/catalog/units/{unit_id}/conversions", response_model=list[UnitConversionOut])
def unit_conversions(
    unit_id: str,
    qty: float = Query(..., gt=0),
    catalog: IngredientCatalog = Depends(get_catalog),
):
    if catalog.unit(unit_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown unit '{unit_id}'")
    return [s.to_dict() for s in suggest_unit_conversions(qty, unit_id, catalog)]
