# app/services/export_service.py
import base64
import binascii
import io
import logging
import zipfile
from pathlib import PurePosixPath
from typing import Optional, Set

from app.constants import EMPTY_PAGE_PLACEHOLDER, PAGE_BREAK, TRANSFER_FIELD_LABELS
from app.models import ExtractedResumeData, OCRDocument, OCRPage
from app.utils import dashed_timestamp

logger = logging.getLogger(__name__)

COMBINED_MARKDOWN_NAME = "document.md"


def page_heading(page: OCRPage) -> str:
    return f"# Page {page.index + 1}\n\n"


def combine_markdown(document: OCRDocument) -> str:
    """All pages as one markdown text, the "copy all" format."""
    return PAGE_BREAK.join(
        page_heading(page) + (page.markdown or EMPTY_PAGE_PLACEHOLDER)
        for page in document.pages
    )


def format_transfer_text(resume_data: ExtractedResumeData) -> str:
    """`label: value` lines for pasting the basic fields elsewhere."""
    lines = []
    for field, label in TRANSFER_FIELD_LABELS:
        value = getattr(resume_data, field)
        lines.append(f"{label}: {value if value is not None else ''}")
    return "\n".join(lines)


def decode_image_base64(image_base64: str) -> bytes:
    """Decode a base64 payload, with or without a data: URL prefix."""
    if image_base64.startswith("data:") and "," in image_base64:
        image_base64 = image_base64.split(",", 1)[1]
    return base64.b64decode(image_base64)


def page_markdown_name(page: OCRPage) -> str:
    return f"pages/page_{page.index + 1:03d}.md"


def image_member_name(page: OCRPage, image_id: str, seen: Set[str]) -> str:
    """Archive path for an image, unique within the archive.

    Only the last path component of the id is used. A repeated name moves
    under a per-page folder, e.g. `images/page_002/img-0.jpeg`.
    """
    base = PurePosixPath(image_id).name or "image"
    if base in (".", ".."):
        base = "image"
    name = f"images/{base}"
    if name in seen:
        name = f"images/page_{page.index + 1:03d}/{base}"
    counter = 1
    candidate = name
    while candidate in seen:
        stem, dot, suffix = name.rpartition(".")
        candidate = f"{stem}_{counter}.{suffix}" if dot else f"{name}_{counter}"
        counter += 1
    seen.add(candidate)
    return candidate


def build_zip(document: OCRDocument, markdown_only: bool = False) -> bytes:
    image_names: Set[str] = set()
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(COMBINED_MARKDOWN_NAME, combine_markdown(document))
        for page in document.pages:
            zf.writestr(page_markdown_name(page), page.markdown or "")
            if markdown_only:
                continue
            for image in page.images:
                if not image.image_base64:
                    continue
                try:
                    data = decode_image_base64(image.image_base64)
                except (binascii.Error, ValueError) as e:
                    logger.warning(f"Skipping undecodable image {image.id}: {e}")
                    continue
                zf.writestr(image_member_name(page, image.id, image_names), data)
    return buffer.getvalue()


def zip_filename(markdown_only: bool = False, timestamp: Optional[str] = None) -> str:
    stamp = (timestamp or dashed_timestamp())[:19]
    prefix = "ocr-markdown" if markdown_only else "ocr-export"
    return f"{prefix}-{stamp}.zip"
