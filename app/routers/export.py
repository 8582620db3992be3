from urllib.parse import quote
import logging
import traceback

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app.constants import XLSX_MIME_TYPE, ZIP_MIME_TYPE
from app.dependencies import Uploader, get_uploader
from app.models import (
    ExcelUrlResponse,
    ExtractedResumeData,
    MarkdownResponse,
    OCRDocument,
    TransferTextResponse,
)
from app.parsers import EmptyDocumentError, extract_resume_data
from app.services.excel_generator import (
    TemplateError,
    generate_resume_excel,
    generate_resume_excel_bytes,
    resume_download_filename,
)
from app.services.export_service import (
    build_zip,
    combine_markdown,
    format_transfer_text,
    zip_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def attachment_headers(filename: str) -> dict:
    return {
        "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
    }


def _extract_or_400(document: OCRDocument) -> ExtractedResumeData:
    try:
        return extract_resume_data(document)
    except EmptyDocumentError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/export/excel")
async def export_excel(document: OCRDocument):
    """
    Transcribe the resume fields into the Excel template and download it.
    """
    resume_data = _extract_or_400(document)
    try:
        workbook_bytes = generate_resume_excel_bytes(resume_data)
    except TemplateError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Excel export error: {e}")
        traceback.print_exc()
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred while generating the workbook: {str(e)}",
        )
    return Response(
        content=workbook_bytes,
        media_type=XLSX_MIME_TYPE,
        headers=attachment_headers(resume_download_filename()),
    )


@router.post("/export/excel-url", response_model=ExcelUrlResponse)
async def export_excel_url(
    document: OCRDocument, uploader: Uploader = Depends(get_uploader)
):
    """
    Same as /export/excel, but uploads the workbook and returns its URL.
    """
    resume_data = _extract_or_400(document)
    try:
        url, _ = generate_resume_excel(resume_data, uploader)
    except TemplateError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Excel upload error: {e}")
        traceback.print_exc()
        raise HTTPException(
            status_code=500,
            detail=f"An error occurred while uploading the workbook: {str(e)}",
        )
    return ExcelUrlResponse(url=url, filename=resume_download_filename())


@router.post("/export/markdown", response_model=MarkdownResponse)
async def export_markdown(document: OCRDocument):
    return MarkdownResponse(markdown=combine_markdown(document))


@router.post("/export/transfer-text", response_model=TransferTextResponse)
async def export_transfer_text(document: OCRDocument):
    resume_data = _extract_or_400(document)
    return TransferTextResponse(text=format_transfer_text(resume_data))


@router.post("/export/zip")
async def export_zip(document: OCRDocument):
    """
    ZIP of the combined markdown, one markdown file per page and the images.
    """
    return Response(
        content=build_zip(document),
        media_type=ZIP_MIME_TYPE,
        headers=attachment_headers(zip_filename()),
    )


@router.post("/export/markdown-zip")
async def export_markdown_zip(document: OCRDocument):
    return Response(
        content=build_zip(document, markdown_only=True),
        media_type=ZIP_MIME_TYPE,
        headers=attachment_headers(zip_filename(markdown_only=True)),
    )
