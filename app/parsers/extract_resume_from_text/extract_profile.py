import re
from typing import List, Optional

from app.parsers.types import ExtractedFields, FieldRule
from app.parsers.extract_resume_from_text.lib.label_patterns import (
    CLOSE_PAREN,
    LABEL_SEPARATOR,
    OPEN_PAREN,
    UNTIL_PAREN,
    clean_capture,
    label_pattern,
)

# --- Regex Patterns ---
NAME_PATTERN = label_pattern("氏名")
KANA_PATTERN = label_pattern("ふりがな")
BIRTH_DATE_PATTERN = label_pattern("生年月日", UNTIL_PAREN)
AGE_PATTERN = re.compile(
    rf"生年月日{LABEL_SEPARATOR}{UNTIL_PAREN}{OPEN_PAREN}\s*満\s*([0-9]+)\s*歳"
)
GENDER_PATTERN = label_pattern("性別", "[男女]")
ADDRESS_PATTERN = label_pattern("現住所", UNTIL_PAREN)
POSTAL_CODE_PATTERN = re.compile(r"〒\s*([0-9]{3}-[0-9]{4})")
PHONE_PATTERN = label_pattern("電話番号", r"[0-9\-]+")
EMAIL_PATTERN = label_pattern(r"E[-\s]?mail", r"[^\s]+@[^\s]+")
HEALTH_PATTERN = label_pattern("健康状態")
HOBBIES_PATTERN = label_pattern("趣味・特技")
STATION_PATTERN = label_pattern("最寄り駅")
DEPENDENTS_PATTERN = label_pattern(
    rf"扶養家族数{OPEN_PAREN}配偶者を除く{CLOSE_PAREN}", r"[0-9]+"
)
SPOUSE_PATTERN = label_pattern("配偶者の有無", "あり|なし")
SUPPORTING_SPOUSE_PATTERN = label_pattern("配偶者の扶養義務", "あり|なし")

PRESENT_TOKEN = "あり"


def is_present(token: str) -> bool:
    return PRESENT_TOKEN in token


# Evaluated top to bottom. Rules with a `source` must come after the rule
# that fills that source.
PROFILE_FIELD_RULES: List[FieldRule] = [
    FieldRule("name", NAME_PATTERN),
    FieldRule("name_kana", KANA_PATTERN),
    # The address reading is the second ふりがな row on the template.
    FieldRule("address_kana", KANA_PATTERN, occurrence=1),
    FieldRule("birth_date", BIRTH_DATE_PATTERN),
    FieldRule("age", AGE_PATTERN, int),
    FieldRule("gender", GENDER_PATTERN),
    FieldRule("address", ADDRESS_PATTERN),
    FieldRule("postal_code", POSTAL_CODE_PATTERN, source="address"),
    FieldRule("phone_number", PHONE_PATTERN),
    FieldRule("email", EMAIL_PATTERN),
    FieldRule("health_condition", HEALTH_PATTERN),
    FieldRule("hobbies", HOBBIES_PATTERN),
    FieldRule("nearest_station", STATION_PATTERN),
    FieldRule("dependents", DEPENDENTS_PATTERN, int),
    FieldRule("has_spouse", SPOUSE_PATTERN, is_present),
    FieldRule("supporting_spouse", SUPPORTING_SPOUSE_PATTERN, is_present),
]


def find_capture(rule: FieldRule, text: str) -> Optional[str]:
    """Group 1 of the rule's n-th match, or None."""
    for i, match in enumerate(rule.pattern.finditer(text)):
        if i == rule.occurrence:
            return match.group(1) or None
    return None


def apply_field_rule(rule: FieldRule, text: str, fields: ExtractedFields) -> None:
    if rule.source is not None:
        text = fields.get(rule.source)
        if not text:
            return
    captured = find_capture(rule, text)
    if captured is None:
        return
    value = clean_capture(captured)
    if rule.postprocess is not None:
        value = rule.postprocess(value)
    if value is not None:
        fields[rule.field] = value


def extract_profile(
    text: str, rules: Optional[List[FieldRule]] = None
) -> ExtractedFields:
    fields: ExtractedFields = {}
    for rule in rules if rules is not None else PROFILE_FIELD_RULES:
        apply_field_rule(rule, text, fields)
    return fields
