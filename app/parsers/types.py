from typing import Any, Callable, Dict, List, NamedTuple, Optional, Pattern

from app.models import HistoryEntry

# Attribute name of ExtractedResumeData -> extracted value
ExtractedFields = Dict[str, Any]

HistoryEntries = List[HistoryEntry]

Postprocess = Callable[[str], Any]


class FieldRule(NamedTuple):
    """A label-anchored scalar field.

    `pattern` captures the value in group 1. `occurrence` picks the n-th
    match instead of the first. When `source` names an already extracted
    field, the pattern runs over that value instead of the full text.
    `postprocess` turns the trimmed capture into the stored value.
    """

    field: str
    pattern: Pattern[str]
    postprocess: Optional[Postprocess] = None
    occurrence: int = 0
    source: Optional[str] = None


class SectionRule(NamedTuple):
    """A repeated-entry section located by its header line."""

    field: str
    header: str
