XLSX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)
ZIP_MIME_TYPE = "application/zip"
PDF_MIME_TYPE = "application/pdf"

OCR_RESULTS_STORAGE_KEY = "pdf2md_ocr_results"
MAX_STORED_OCR_RESULTS = 10

TEMPLATE_SHEET_NAME = "Sheet1"
BLOB_PREFIX = "resumes/"

EMPTY_PAGE_PLACEHOLDER = "（テキストなし）"
PAGE_BREAK = "\n\n---\n\n"

# Labels for the clipboard transfer text, in display order
TRANSFER_FIELD_LABELS = [
    ("name", "氏名"),
    ("name_kana", "氏名（カナ）"),
    ("birth_date", "生年月日"),
    ("gender", "性別"),
    ("address", "住所"),
    ("address_kana", "住所（カナ）"),
    ("postal_code", "郵便番号"),
    ("phone_number", "電話番号"),
    ("email", "メールアドレス"),
]
