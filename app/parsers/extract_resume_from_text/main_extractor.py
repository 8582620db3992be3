from app.models import ExtractedResumeData
from app.parsers.extract_resume_from_text.extract_profile import extract_profile
from app.parsers.extract_resume_from_text.extract_history import (
    extract_history_sections,
)


def extract_resume_from_text(text: str) -> ExtractedResumeData:
    fields = extract_profile(text)
    fields.update(extract_history_sections(text))
    return ExtractedResumeData(**fields)
