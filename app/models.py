from typing import List, Optional, Tuple
from pydantic import BaseModel, Field


# --- OCR ---
class OCRImage(BaseModel):
    id: str
    image_base64: Optional[str] = None
    top_left_x: Optional[int] = None
    top_left_y: Optional[int] = None
    bottom_right_x: Optional[int] = None
    bottom_right_y: Optional[int] = None


class OCRPage(BaseModel):
    index: int
    markdown: Optional[str] = None
    images: List[OCRImage] = Field(default_factory=list)


class OCRDocument(BaseModel):
    pages: List[OCRPage] = Field(default_factory=list)
    model: Optional[str] = None


class OCRError(BaseModel):
    success: bool = False
    error: str


# --- History ---
class StoredOCRResult(BaseModel):
    id: str
    timestamp: int  # epoch millis
    filename: str
    result: OCRDocument


# --- Resume extraction ---
class HistoryEntry(BaseModel):
    """One row of 学歴, 職歴 or 免許・資格."""

    year: str = ""
    month: str = ""
    description: str = ""

    class Config:
        frozen = True


class ExtractedResumeData(BaseModel):
    # 基本情報
    name: Optional[str] = None
    name_kana: Optional[str] = Field(alias="nameKana", default=None)
    birth_date: Optional[str] = Field(alias="birthDate", default=None)
    gender: Optional[str] = None
    age: Optional[int] = None

    # 連絡先
    address: Optional[str] = None
    address_kana: Optional[str] = Field(alias="addressKana", default=None)
    postal_code: Optional[str] = Field(alias="postalCode", default=None)
    phone_number: Optional[str] = Field(alias="phoneNumber", default=None)
    email: Optional[str] = None

    # 学歴・職歴
    education_history: Optional[Tuple[HistoryEntry, ...]] = Field(
        alias="educationHistory", default=None
    )
    work_history: Optional[Tuple[HistoryEntry, ...]] = Field(
        alias="workHistory", default=None
    )

    # その他
    licenses: Optional[Tuple[HistoryEntry, ...]] = None
    health_condition: Optional[str] = Field(alias="healthCondition", default=None)
    hobbies: Optional[str] = None
    nearest_station: Optional[str] = Field(alias="nearestStation", default=None)
    dependents: Optional[int] = None
    has_spouse: Optional[bool] = Field(alias="hasSpouse", default=None)
    supporting_spouse: Optional[bool] = Field(alias="supportingSpouse", default=None)

    class Config:
        populate_by_name = True
        frozen = True

    def to_json_dict(self) -> dict:
        """camelCase dict with absent fields left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


# --- API payloads ---
class ExcelUrlResponse(BaseModel):
    url: str
    filename: str


class MarkdownResponse(BaseModel):
    markdown: str


class TransferTextResponse(BaseModel):
    text: str


class HistoryDeleteResponse(BaseModel):
    success: bool
