"""
Router for the correction-learning store.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import get_corrections
from ..infra.kv_store import StorageError
from ..parsing import CorrectionStore
from ..parsing.models import TrainingExample
from ..schemas import CorrectionCreate, CorrectionStats, SimilarCorrection

router = APIRouter()


@router.post("/corrections", response_model=TrainingExample, status_code=201)
async def record_correction(
    payload: CorrectionCreate,
    corrections: CorrectionStore = Depends(get_corrections),
):
    """Store a manual correction so similar lines parse the same way next time."""
    try:
        return await corrections.record(payload.original_text, payload.corrected)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Could not save correction: {e}")


@router.get("/corrections/similar", response_model=list[SimilarCorrection])
def similar_corrections(
    text: str = Query(..., min_length=1),
    threshold: float | None = Query(None, ge=0, le=1),
    corrections: CorrectionStore = Depends(get_corrections),
):
    return [
        SimilarCorrection(example=example, score=round(score, 4))
        for example, score in corrections.find_similar(text, threshold)
    ]


@router.get("/corrections/stats", response_model=CorrectionStats)
def correction_stats(corrections: CorrectionStore = Depends(get_corrections)):
    return corrections.stats()


@router.get("/corrections/export")
def export_corrections(corrections: CorrectionStore = Depends(get_corrections)):
    return corrections.export()


@router.delete("/corrections/{example_id}", status_code=204)
async def delete_correction(
    example_id: str,
    corrections: CorrectionStore = Depends(get_corrections),
):
    try:
        deleted = await corrections.delete(example_id)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=f"Could not delete correction: {e}")
    if not deleted:
        raise HTTPException(status_code=404, detail="Correction not found")
