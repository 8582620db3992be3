# app/services/excel_generator.py
import io
import logging
import re
from pathlib import Path
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, Tuple

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from app.config import settings
from app.constants import BLOB_PREFIX, TEMPLATE_SHEET_NAME, XLSX_MIME_TYPE
from app.models import ExtractedResumeData, HistoryEntry
from app.utils import dashed_timestamp, today_iso_date

logger = logging.getLogger(__name__)

BIRTH_DATE_PARTS_PATTERN = re.compile(
    r"([0-9]+)\s*年\s*([0-9]+)\s*月\s*([0-9]+)\s*日"
)
POSTAL_PREFIX_PATTERN = re.compile(r"〒\s*[0-9]{3}-[0-9]{4}\s*")


class TemplateError(Exception):
    """The resume template cannot be used."""


class CellTarget(NamedTuple):
    cell: str
    field: str
    format: Optional[Callable[[ExtractedResumeData, Any], Any]] = None


class RowRegion(NamedTuple):
    """Year/month/description rows written downward from `start_row`.

    `max_rows` is the number of template rows the region owns; None means
    no limit.
    """

    field: str
    start_row: int
    columns: Tuple[str, str, str]
    max_rows: Optional[int] = None


# --- Value formatters ---
def format_birth_date(data: ExtractedResumeData, birth_date: str) -> str:
    parts = BIRTH_DATE_PARTS_PATTERN.search(birth_date)
    if not parts:
        return birth_date
    year, month, day = parts.groups()
    age = data.age if data.age else ""
    return f"{year}年 {month}月 {day}日生 （ 満 {age}歳 ）"


def format_postal_code(data: ExtractedResumeData, postal_code: str) -> str:
    return f"〒 {postal_code}"


def strip_postal_code(data: ExtractedResumeData, address: str) -> str:
    return POSTAL_PREFIX_PATTERN.sub("", address, count=1)


def format_yes_no(data: ExtractedResumeData, value: bool) -> str:
    return "あり" if value else "なし"


RESUME_CELL_MAP: List[CellTarget] = [
    # 基本情報
    CellTarget("B3", "name"),
    CellTarget("B2", "name_kana"),
    CellTarget("A5", "birth_date", format_birth_date),
    CellTarget("D2", "gender"),
    # 住所・連絡先
    CellTarget("B6", "address_kana"),
    CellTarget("B7", "postal_code", format_postal_code),
    CellTarget("A7", "address", strip_postal_code),
    CellTarget("F6", "phone_number"),
    CellTarget("F7", "email"),
    # その他
    CellTarget("I17", "health_condition"),
    CellTarget("I18", "hobbies"),
    CellTarget("I19", "nearest_station"),
    CellTarget("L17", "dependents"),
    CellTarget("L18", "has_spouse", format_yes_no),
    CellTarget("L19", "supporting_spouse", format_yes_no),
]

# Education rows stop before the work-history block at row 20, license rows
# stop before the health/hobby cells at I17.
RESUME_ROW_REGIONS: List[RowRegion] = [
    RowRegion("education_history", 14, ("A", "B", "C"), max_rows=6),
    RowRegion("work_history", 20, ("A", "B", "C")),
    RowRegion("licenses", 14, ("I", "J", "K"), max_rows=3),
]


def write_row_region(
    worksheet: Worksheet, region: RowRegion, entries: Sequence[HistoryEntry]
) -> int:
    """Write entries one row each; returns how many rows were written."""
    if region.max_rows is not None and len(entries) > region.max_rows:
        logger.warning(
            f"{region.field}: {len(entries)} entries but the template has "
            f"{region.max_rows} rows; dropping {len(entries) - region.max_rows}"
        )
        entries = entries[: region.max_rows]

    year_col, month_col, desc_col = region.columns
    for offset, entry in enumerate(entries):
        row = region.start_row + offset
        worksheet[f"{year_col}{row}"] = entry.year
        worksheet[f"{month_col}{row}"] = entry.month
        worksheet[f"{desc_col}{row}"] = entry.description
    return len(entries)


def fill_template(
    resume_data: ExtractedResumeData,
    template_bytes: bytes,
    cell_map: Optional[List[CellTarget]] = None,
    row_regions: Optional[List[RowRegion]] = None,
) -> bytes:
    """Transcribe `resume_data` into a copy of the template workbook."""
    try:
        workbook = load_workbook(io.BytesIO(template_bytes))
    except Exception as e:
        raise TemplateError(f"テンプレートを読み込めません: {str(e)}") from e

    if TEMPLATE_SHEET_NAME not in workbook.sheetnames:
        raise TemplateError(f"テンプレートに{TEMPLATE_SHEET_NAME}が見つかりません")
    worksheet = workbook[TEMPLATE_SHEET_NAME]

    for target in cell_map if cell_map is not None else RESUME_CELL_MAP:
        value = getattr(resume_data, target.field)
        # 0 dependents and False flags are still written
        if value is None or value == "":
            continue
        if target.format is not None:
            value = target.format(resume_data, value)
        worksheet[target.cell] = value

    for region in row_regions if row_regions is not None else RESUME_ROW_REGIONS:
        entries = getattr(resume_data, region.field)
        if entries:
            write_row_region(worksheet, region, entries)

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def load_template_bytes(template_path: Optional[str] = None) -> bytes:
    path = Path(template_path or settings.resume_template_path)
    if not path.is_file():
        raise TemplateError(f"テンプレートファイルが見つかりません: {path}")
    return path.read_bytes()


def resume_blob_name() -> str:
    return f"{BLOB_PREFIX}resume_{dashed_timestamp()}.xlsx"


def resume_download_filename() -> str:
    return f"履歴書_{today_iso_date()}.xlsx"


def generate_resume_excel_bytes(
    resume_data: ExtractedResumeData, template_path: Optional[str] = None
) -> bytes:
    return fill_template(resume_data, load_template_bytes(template_path))


def generate_resume_excel(
    resume_data: ExtractedResumeData,
    uploader: Callable[[bytes, str, str], str],
    template_path: Optional[str] = None,
) -> Tuple[str, str]:
    """Fill the template and upload it; returns (url, blob name)."""
    workbook_bytes = generate_resume_excel_bytes(resume_data, template_path)
    name = resume_blob_name()
    url = uploader(workbook_bytes, name, XLSX_MIME_TYPE)
    return url, name
