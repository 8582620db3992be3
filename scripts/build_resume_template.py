import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from openpyxl import Workbook
from app.config import settings
from app.constants import TEMPLATE_SHEET_NAME

# Static labels of the 履歴書 layout. Values are written next to them by
# app.services.excel_generator.
LABELS = {
    "A1": "履歴書",
    "A2": "ふりがな",
    "A3": "氏名",
    "C2": "性別",
    "A6": "ふりがな",
    "E6": "電話",
    "E7": "E-mail",
    "A12": "学歴",
    "A13": "年",
    "B13": "月",
    "C13": "学歴・職歴",
    "I12": "免許・資格",
    "I13": "年",
    "J13": "月",
    "K13": "免許・資格",
    "H17": "健康状態",
    "H18": "趣味・特技",
    "H19": "最寄り駅",
    "K17": "扶養家族数（配偶者を除く）",
    "K18": "配偶者",
    "K19": "配偶者の扶養義務",
}


def build_template(path: str) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = TEMPLATE_SHEET_NAME
    for cell, label in LABELS.items():
        ws[cell] = label
    ws.column_dimensions["C"].width = 40
    ws.column_dimensions["K"].width = 30
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    wb.save(path)


if __name__ == "__main__":
    output_path = sys.argv[1] if len(sys.argv) > 1 else settings.resume_template_path
    build_template(output_path)
    print(f"✅ Template written to {output_path}")
