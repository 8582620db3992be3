"""
Test Configuration and Fixtures
"""
import io

import pytest
from openpyxl import Workbook

from app.models import OCRDocument, OCRImage, OCRPage
from app.services.history_store import MemoryStore


SAMPLE_RESUME_PAGE_1 = """# 履歴書

ふりがな やまだ たろう
氏名 山田太郎
生年月日：1990年5月3日（満34歳）
性別：男
ふりがな とうきょうと ちよだく
現住所：〒100-0001 東京都千代田区千代田1-1
電話番号：090-1234-5678
E-mail：taro@example.com
"""

SAMPLE_RESUME_PAGE_2 = """学歴
2006年4月 東京都立高校 入学
2009年3月 東京都立高校 卒業

職歴
2013年4月 株式会社サンプル 入社
2020年3月 一身上の都合により退職

免許・資格
2012年8月 普通自動車第一種運転免許 取得

健康状態：良好
趣味・特技：読書
最寄り駅：東京駅
扶養家族数（配偶者を除く）：2
配偶者の有無：あり
配偶者の扶養義務：なし
"""


def make_document(*markdowns) -> OCRDocument:
    return OCRDocument(
        pages=[OCRPage(index=i, markdown=md) for i, md in enumerate(markdowns)]
    )


@pytest.fixture
def resume_document():
    """Two-page OCR result of a filled-in 履歴書"""
    return make_document(SAMPLE_RESUME_PAGE_1, SAMPLE_RESUME_PAGE_2)


@pytest.fixture
def image_document():
    """OCR result with an embedded image on the first page"""
    return OCRDocument(
        pages=[
            OCRPage(
                index=0,
                markdown="hello ![img-0.jpeg](img-0.jpeg)",
                images=[
                    OCRImage(
                        id="img-0.jpeg",
                        # "fake-jpeg-bytes"
                        image_base64="data:image/jpeg;base64,ZmFrZS1qcGVnLWJ5dGVz",
                    )
                ],
            ),
            OCRPage(index=1, markdown=None),
        ]
    )


@pytest.fixture
def template_bytes():
    """Minimal resume template with a Sheet1 and a few preset labels"""
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"
    ws["A1"] = "履歴書"
    ws["B3"] = "（未記入）"
    ws["C13"] = "学歴・職歴"
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def template_path(tmp_path, template_bytes):
    path = tmp_path / "resume_template.xlsx"
    path.write_bytes(template_bytes)
    return str(path)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def uploaded():
    """Records calls made through the fake blob uploader"""
    return []


@pytest.fixture
def client(memory_store, uploaded, template_path, monkeypatch):
    """Create test client with in-memory history and a fake uploader"""
    from fastapi.testclient import TestClient

    from app.config import settings
    from app.dependencies import get_history_store, get_uploader
    from app.main import app

    def fake_uploader(data, name, content_type):
        uploaded.append((data, name, content_type))
        return f"https://blob.example.com/{name}"

    monkeypatch.setattr(settings, "resume_template_path", template_path)
    app.dependency_overrides[get_history_store] = lambda: memory_store
    app.dependency_overrides[get_uploader] = lambda: fake_uploader
    yield TestClient(app)
    app.dependency_overrides.clear()
