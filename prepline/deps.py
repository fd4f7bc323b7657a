"""FastAPI dependencies for the prepline API."""

from fastapi import Depends, HTTPException, Request

from .parsing import CorrectionStore, IngredientCatalog
from .services.ingestion import IngestionService


def get_ingestion(request: Request) -> IngestionService:
    """The long-lived pipeline built at startup and kept on app.state."""
    return request.app.state.ingestion


def get_catalog(ingestion: IngestionService = Depends(get_ingestion)) -> IngredientCatalog:
    return ingestion.catalog


async def get_corrections(ingestion: IngestionService = Depends(get_ingestion)) -> CorrectionStore:
    """Correction store with its examples loaded.

    Raises:
        HTTPException 503 if the pipeline runs without a correction store
    """
    if ingestion.corrections is None:
        raise HTTPException(status_code=503, detail="Correction learning is not configured")
    await ingestion.corrections.ensure_loaded()
    return ingestion.corrections
