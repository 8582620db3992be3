"""
API Endpoint Tests
"""
import io
import zipfile

from openpyxl import load_workbook

from app.models import OCRDocument
from app.routers import ocr as ocr_router
from app.services.ocr_service import OCRServiceError
from tests.conftest import make_document


def document_json(document: OCRDocument) -> dict:
    return document.model_dump()


class TestRoot:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "message" in response.json()


class TestOCREndpoint:
    """PDF upload"""

    def test_rejects_non_pdf(self, client):
        response = client.post(
            "/api/v1/ocr", files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 400

    def test_success_saved_to_history(self, client, monkeypatch, memory_store):
        async def fake_ocr(pdf_bytes, filename):
            return make_document("氏名：山田太郎")

        monkeypatch.setattr(ocr_router, "perform_ocr", fake_ocr)
        response = client.post(
            "/api/v1/ocr", files={"file": ("resume.pdf", b"%PDF-1.4", "application/pdf")}
        )
        assert response.status_code == 200
        assert response.json()["pages"][0]["markdown"] == "氏名：山田太郎"

        history = client.get("/api/v1/history").json()
        assert len(history) == 1
        assert history[0]["filename"] == "resume.pdf"

    def test_empty_result_not_saved(self, client, monkeypatch):
        async def fake_ocr(pdf_bytes, filename):
            return OCRDocument(pages=[])

        monkeypatch.setattr(ocr_router, "perform_ocr", fake_ocr)
        response = client.post(
            "/api/v1/ocr", files={"file": ("empty.pdf", b"%PDF-1.4", "application/pdf")}
        )
        assert response.status_code == 200
        assert client.get("/api/v1/history").json() == []

    def test_ocr_failure_returns_error_body(self, client, monkeypatch):
        async def failing_ocr(pdf_bytes, filename):
            raise OCRServiceError("OCR API returned status 500")

        monkeypatch.setattr(ocr_router, "perform_ocr", failing_ocr)
        response = client.post(
            "/api/v1/ocr", files={"file": ("a.pdf", b"%PDF-1.4", "application/pdf")}
        )
        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "error": "OCR API returned status 500",
        }


class TestHistoryEndpoints:
    def _seed(self, client, monkeypatch):
        async def fake_ocr(pdf_bytes, filename):
            return make_document("page")

        monkeypatch.setattr(ocr_router, "perform_ocr", fake_ocr)
        client.post("/api/v1/ocr", files={"file": ("a.pdf", b"%PDF", "application/pdf")})
        return client.get("/api/v1/history").json()[0]["id"]

    def test_get_and_delete(self, client, monkeypatch):
        result_id = self._seed(client, monkeypatch)
        assert client.get(f"/api/v1/history/{result_id}").status_code == 200
        assert client.delete(f"/api/v1/history/{result_id}").json() == {"success": True}
        assert client.get(f"/api/v1/history/{result_id}").status_code == 404
        assert client.delete(f"/api/v1/history/{result_id}").status_code == 404

    def test_clear(self, client, monkeypatch):
        self._seed(client, monkeypatch)
        assert client.delete("/api/v1/history").json() == {"success": True}
        assert client.get("/api/v1/history").json() == []


class TestExtractResume:
    def test_extract(self, client, resume_document):
        response = client.post("/api/v1/extract-resume", json=document_json(resume_document))
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "山田太郎"
        assert data["nameKana"] == "やまだ たろう"
        assert data["age"] == 34
        assert data["educationHistory"][0] == {
            "year": "2006",
            "month": "4",
            "description": "東京都立高校 入学",
        }

    def test_absent_fields_omitted(self, client):
        response = client.post(
            "/api/v1/extract-resume", json=document_json(make_document("氏名：山田太郎"))
        )
        assert response.json() == {"name": "山田太郎"}

    def test_empty_document(self, client):
        response = client.post("/api/v1/extract-resume", json={"pages": []})
        assert response.status_code == 400
        assert response.json()["detail"] == "有効なOCR結果がありません"


class TestExportEndpoints:
    def test_excel_download(self, client, resume_document):
        response = client.post("/api/v1/export/excel", json=document_json(resume_document))
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "filename*=UTF-8''" in response.headers["content-disposition"]
        ws = load_workbook(io.BytesIO(response.content))["Sheet1"]
        assert ws["B3"].value == "山田太郎"

    def test_excel_empty_document(self, client):
        response = client.post("/api/v1/export/excel", json={"pages": []})
        assert response.status_code == 400

    def test_excel_missing_template(self, client, resume_document, monkeypatch, tmp_path):
        from app.config import settings

        monkeypatch.setattr(settings, "resume_template_path", str(tmp_path / "none.xlsx"))
        response = client.post("/api/v1/export/excel", json=document_json(resume_document))
        assert response.status_code == 500

    def test_excel_url(self, client, resume_document, uploaded):
        response = client.post(
            "/api/v1/export/excel-url", json=document_json(resume_document)
        )
        assert response.status_code == 200
        body = response.json()
        assert body["url"].startswith("https://blob.example.com/resumes/resume_")
        assert body["filename"].startswith("履歴書_")
        assert len(uploaded) == 1

    def test_markdown(self, client):
        response = client.post(
            "/api/v1/export/markdown", json=document_json(make_document("a", "b"))
        )
        assert response.json()["markdown"] == "# Page 1\n\na\n\n---\n\n# Page 2\n\nb"

    def test_transfer_text(self, client, resume_document):
        response = client.post(
            "/api/v1/export/transfer-text", json=document_json(resume_document)
        )
        assert response.json()["text"].startswith("氏名: 山田太郎\n")

    def test_zip(self, client, image_document):
        response = client.post("/api/v1/export/zip", json=document_json(image_document))
        assert response.headers["content-type"] == "application/zip"
        archive = zipfile.ZipFile(io.BytesIO(response.content))
        assert "images/img-0.jpeg" in archive.namelist()
        assert "ocr-export-" in response.headers["content-disposition"]

    def test_markdown_zip(self, client, image_document):
        response = client.post(
            "/api/v1/export/markdown-zip", json=document_json(image_document)
        )
        archive = zipfile.ZipFile(io.BytesIO(response.content))
        assert "images/img-0.jpeg" not in archive.namelist()
