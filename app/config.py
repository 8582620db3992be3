from typing import List, Optional

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Mistral OCR
    mistral_api_key: Optional[str] = None
    mistral_api_url: str = "https://api.mistral.ai/v1/ocr"
    mistral_ocr_model: str = "mistral-ocr-latest"
    ocr_timeout_seconds: float = 120.0
    # "mistral" calls the OCR API, "pymupdf" reads the PDF's own text layer
    ocr_provider: str = "mistral"

    # Supabase Storage for generated workbooks
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_bucket: str = "resumes"

    resume_template_path: str = "templates/resume_template.xlsx"

    # "auto" uses Supabase when it is configured, else the local JSON file
    history_backend: str = "auto"
    history_table: str = "ocr_history"
    history_path: str = "data/ocr_history.json"
    history_limit: int = 10

    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
