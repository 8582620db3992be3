# app/services/ocr_service.py
import base64
import logging
from typing import Any, Dict, List, Optional

import fitz  # PyMuPDF
import httpx

from app.config import settings
from app.constants import PDF_MIME_TYPE
from app.models import OCRDocument, OCRImage, OCRPage

logger = logging.getLogger(__name__)


class OCRServiceError(Exception):
    """OCR could not produce a document for the upload."""


def build_document_url(pdf_bytes: bytes) -> str:
    encoded = base64.b64encode(pdf_bytes).decode("ascii")
    return f"data:{PDF_MIME_TYPE};base64,{encoded}"


def build_ocr_payload(pdf_bytes: bytes, model: Optional[str] = None) -> Dict[str, Any]:
    return {
        "model": model or settings.mistral_ocr_model,
        "document": {
            "type": "document_url",
            "document_url": build_document_url(pdf_bytes),
        },
        "include_image_base64": True,
    }


def parse_ocr_response(data: Dict[str, Any]) -> OCRDocument:
    """Map the OCR API's JSON body onto OCRDocument, sorted by page index."""
    if not isinstance(data, dict) or not isinstance(data.get("pages"), list):
        raise OCRServiceError("OCR response did not contain a page list.")

    pages: List[OCRPage] = []
    for raw_page in data["pages"]:
        images = [
            OCRImage(
                id=str(img.get("id", "")),
                image_base64=img.get("image_base64"),
                top_left_x=img.get("top_left_x"),
                top_left_y=img.get("top_left_y"),
                bottom_right_x=img.get("bottom_right_x"),
                bottom_right_y=img.get("bottom_right_y"),
            )
            for img in raw_page.get("images") or []
        ]
        pages.append(
            OCRPage(
                index=int(raw_page.get("index", len(pages))),
                markdown=raw_page.get("markdown"),
                images=images,
            )
        )
    pages.sort(key=lambda page: page.index)
    return OCRDocument(pages=pages, model=data.get("model"))


async def perform_mistral_ocr(
    pdf_bytes: bytes,
    filename: str,
    client: Optional[httpx.AsyncClient] = None,
) -> OCRDocument:
    if not settings.mistral_api_key:
        raise OCRServiceError("MISTRAL_API_KEY is not configured.")

    headers = {
        "Authorization": f"Bearer {settings.mistral_api_key}",
        "Content-Type": "application/json",
    }
    payload = build_ocr_payload(pdf_bytes)

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.ocr_timeout_seconds)
    try:
        logger.info(f"Sending {filename} ({len(pdf_bytes)} bytes) to OCR")
        res = await client.post(settings.mistral_api_url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"OCR request for {filename} failed: {e}")
        raise OCRServiceError(f"OCR request failed: {str(e)}") from e
    finally:
        if owns_client:
            await client.aclose()

    if res.status_code != 200:
        logger.error(f"OCR error for {filename}: {res.status_code} {res.text}")
        raise OCRServiceError(f"OCR API returned status {res.status_code}")

    try:
        data = res.json()
    except ValueError as e:
        raise OCRServiceError("OCR API returned invalid JSON.") from e

    document = parse_ocr_response(data)
    logger.info(f"OCR finished for {filename}: {len(document.pages)} page(s)")
    return document


def extract_text_layer(pdf_bytes: bytes) -> OCRDocument:
    """Read the PDF's embedded text per page; no OCR involved."""
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise OCRServiceError(f"Error opening PDF with PyMuPDF: {str(e)}") from e

    pages: List[OCRPage] = []
    try:
        for page_num in range(len(doc)):
            page = doc.load_page(page_num)
            text = page.get_text("text").replace("\u00ad", "")  # soft hyphens
            pages.append(OCRPage(index=page_num, markdown=text.strip() or None))
    finally:
        doc.close()
    return OCRDocument(pages=pages, model="pymupdf")


async def perform_ocr(
    pdf_bytes: bytes,
    filename: str,
    client: Optional[httpx.AsyncClient] = None,
) -> OCRDocument:
    if settings.ocr_provider == "pymupdf":
        return extract_text_layer(pdf_bytes)
    return await perform_mistral_ocr(pdf_bytes, filename, client=client)
