from typing import Union
import logging
import traceback

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import get_history_store
from app.models import OCRDocument, OCRError
from app.services.history_store import KeyValueStore, save_ocr_result
from app.services.ocr_service import OCRServiceError, perform_ocr

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/ocr", response_model=Union[OCRDocument, OCRError])
async def ocr_endpoint(
    file: UploadFile = File(...),
    store: KeyValueStore = Depends(get_history_store),
):
    """
    Upload a PDF and get its per-page markdown.
    Non-empty results are added to the history.
    """
    if not file.filename or not file.filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=400, detail="Invalid file type. Only PDF files are accepted."
        )

    try:
        pdf_bytes = await file.read()
        document = await perform_ocr(pdf_bytes, file.filename)
    except OCRServiceError as e:
        error = OCRError(error=str(e))
        return JSONResponse(status_code=502, content=error.model_dump())
    except Exception as e:
        logger.error(f"Error processing file {file.filename}: {e}")
        traceback.print_exc()
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred while running OCR: {str(e)}",
        )

    if document.pages:
        save_ocr_result(store, document, file.filename, limit=settings.history_limit)
    return document
