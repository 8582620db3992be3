from typing import Optional

from app.models import ExtractedResumeData, OCRDocument
from app.parsers.extract_resume_from_text.main_extractor import (
    extract_resume_from_text,
)

PAGE_SEPARATOR = "\n\n"
EMPTY_DOCUMENT_MESSAGE = "有効なOCR結果がありません"


class EmptyDocumentError(ValueError):
    """The OCR document has no pages to extract from."""

    def __init__(self, message: str = EMPTY_DOCUMENT_MESSAGE):
        super().__init__(message)


def join_ocr_pages(document: OCRDocument) -> str:
    return PAGE_SEPARATOR.join(page.markdown or "" for page in document.pages)


def extract_resume_data(document: Optional[OCRDocument]) -> ExtractedResumeData:
    # Step 1. Validate
    if document is None or not document.pages:
        raise EmptyDocumentError()

    # Step 2. Join all pages in page order
    all_text = join_ocr_pages(document)

    # Step 3. Extract fields from the joined text
    return extract_resume_from_text(all_text)
