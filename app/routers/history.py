from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_history_store
from app.models import HistoryDeleteResponse, StoredOCRResult
from app.services.history_store import (
    KeyValueStore,
    clear_all_stored_ocr_results,
    delete_stored_ocr_result,
    get_stored_ocr_result_by_id,
    get_stored_ocr_results,
)

router = APIRouter()


@router.get("/history", response_model=List[StoredOCRResult])
async def list_history(store: KeyValueStore = Depends(get_history_store)):
    return get_stored_ocr_results(store)


@router.get("/history/{result_id}", response_model=StoredOCRResult)
async def get_history_item(
    result_id: str, store: KeyValueStore = Depends(get_history_store)
):
    result = get_stored_ocr_result_by_id(store, result_id)
    if result is None:
        raise HTTPException(status_code=404, detail="OCR result not found")
    return result


@router.delete("/history/{result_id}", response_model=HistoryDeleteResponse)
async def delete_history_item(
    result_id: str, store: KeyValueStore = Depends(get_history_store)
):
    if not delete_stored_ocr_result(store, result_id):
        raise HTTPException(status_code=404, detail="OCR result not found")
    return HistoryDeleteResponse(success=True)


@router.delete("/history", response_model=HistoryDeleteResponse)
async def clear_history(store: KeyValueStore = Depends(get_history_store)):
    return HistoryDeleteResponse(success=clear_all_stored_ocr_results(store))
