import re
from typing import List, Optional

from app.models import HistoryEntry
from app.parsers.types import ExtractedFields, HistoryEntries, SectionRule
from app.parsers.extract_resume_from_text.lib.label_patterns import section_pattern

# --- Section headers ---
EDUCATION_HEADER = "学歴"
WORK_HEADER = "職歴"
LICENSE_HEADER = "免許・資格"

# Any of these ends the section that precedes it.
SECTION_TERMINATORS = [
    EDUCATION_HEADER,
    WORK_HEADER,
    LICENSE_HEADER,
    "健康状態",
    "趣味",
]

HISTORY_SECTION_RULES: List[SectionRule] = [
    SectionRule("education_history", EDUCATION_HEADER),
    SectionRule("work_history", WORK_HEADER),
    SectionRule("licenses", LICENSE_HEADER),
]

# --- Regex Patterns ---
ENTRY_SCAN_PATTERN = re.compile(r"([0-9]+)\s*年\s*([0-9]+)\s*月\s*([^\n\r]+)")
ENTRY_PARTS_PATTERN = re.compile(r"([0-9]+)\s*年\s*([0-9]+)\s*月\s*(.+)")


def terminators_for(header: str) -> List[str]:
    return [t for t in SECTION_TERMINATORS if t != header]


def find_section_body(text: str, header: str) -> Optional[str]:
    match = section_pattern(header, terminators_for(header)).search(text)
    if match and match.group(1):
        return match.group(1)
    return None


def parse_history_entry(raw: str) -> HistoryEntry:
    """Split one `YYYY年MM月 ...` occurrence into its parts.

    Anything that does not decompose is kept whole as the description.
    """
    parts = ENTRY_PARTS_PATTERN.search(raw)
    if parts:
        return HistoryEntry(
            year=parts.group(1),
            month=parts.group(2),
            description=parts.group(3).strip(),
        )
    return HistoryEntry(year="", month="", description=raw.strip())


def extract_history_entries(section_text: str) -> HistoryEntries:
    return [
        parse_history_entry(match.group(0))
        for match in ENTRY_SCAN_PATTERN.finditer(section_text)
    ]


def extract_history_sections(
    text: str, rules: Optional[List[SectionRule]] = None
) -> ExtractedFields:
    fields: ExtractedFields = {}
    for rule in rules if rules is not None else HISTORY_SECTION_RULES:
        body = find_section_body(text, rule.header)
        if body is None:
            continue
        entries = extract_history_entries(body)
        if entries:
            fields[rule.field] = entries
    return fields
