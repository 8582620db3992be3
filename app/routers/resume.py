from fastapi import APIRouter, HTTPException
import logging
import traceback

from app.models import ExtractedResumeData, OCRDocument
from app.parsers import EmptyDocumentError, extract_resume_data

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/extract-resume",
    response_model=ExtractedResumeData,
    response_model_exclude_none=True,
)
async def extract_resume_endpoint(document: OCRDocument):
    """
    Turn OCR markdown of a Japanese resume (履歴書) into structured fields.
    Fields that are not found are left out of the response.
    """
    try:
        return extract_resume_data(document)
    except EmptyDocumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error extracting resume data: {e}")
        traceback.print_exc()
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred while extracting resume data: {str(e)}",
        )
