import re
from typing import Pattern

# --- Regex building blocks ---
# A label may be followed by any run of half/full-width colons and whitespace.
LABEL_SEPARATOR = r"[：:]*\s*"
REST_OF_LINE = r"[^\n\r]+"
UNTIL_PAREN = r"[^\n\r（(]+"
OPEN_PAREN = r"[（(]"
CLOSE_PAREN = r"[）)]"


def label_pattern(label: str, capture: str = REST_OF_LINE) -> Pattern[str]:
    """Compile `<label><separator>(<capture>)`.

    `label` is inserted as a regex fragment, not escaped, so callers can
    pass alternatives such as the E-mail spellings.
    """
    return re.compile(rf"{label}{LABEL_SEPARATOR}({capture})")


def section_pattern(header: str, terminators: list) -> Pattern[str]:
    """Header line, then the shortest body up to the next header or end."""
    stop = "|".join(re.escape(t) for t in terminators)
    return re.compile(rf"{re.escape(header)}\s*\n([\s\S]*?)(?:{stop}|\Z)")


def clean_capture(value: str) -> str:
    return value.strip()
