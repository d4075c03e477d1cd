from conftest import FakeExporter
from reports_studio.api import deps
from reports_studio.api.endpoints import print_pdf
from reports_studio.main import app
from reports_studio.services.pdf_export import ExportOutcome, pdf_failed_dialog

API = "/api/v1"


def _create_custom(client, default_id="quotation_default_v1"):
    response = client.post(f"{API}/templates/{default_id}/create-from-default")
    assert response.status_code == 201
    return response.json()["id"]


class TestTemplateEndpoints:
    def test_list_and_filter(self, client):
        response = client.get(f"{API}/templates/")
        assert response.status_code == 200
        ids = {t["id"] for t in response.json()}
        assert "quotation_default_v1" in ids
        assert "trf_receipt_default_v1" in ids

        only_trf = client.get(f"{API}/templates/", params={"docType": "trf_receipt"}).json()
        assert {t["docType"] for t in only_trf} == {"trf_receipt"}

    def test_create_from_default_then_rename(self, client):
        custom_id = _create_custom(client)
        created = client.get(f"{API}/templates/{custom_id}").json()
        assert created["isDefault"] is False
        assert created["name"] == "Quotation (Default v1) (Custom)"

        response = client.post(f"{API}/templates/{custom_id}/rename", json={"name": "Shop quotation"})
        assert response.status_code == 200
        assert response.json()["name"] == "Shop quotation"

    def test_default_is_read_only(self, client):
        response = client.post(f"{API}/templates/quotation_default_v1/rename", json={"name": "Mine"})
        assert response.status_code == 400

    def test_missing_template(self, client):
        assert client.get(f"{API}/templates/nope").status_code == 404
        assert client.post(f"{API}/templates/nope/duplicate").status_code == 404

    def test_invalid_upsert_lists_issues(self, client):
        response = client.post(f"{API}/templates/", json={"id": "broken", "name": "", "docType": "invoice"})
        assert response.status_code == 422
        issues = response.json()["detail"]["issues"]
        assert issues
        assert all({"path", "reason"} <= set(issue) for issue in issues)

    def test_delete_custom(self, client):
        custom_id = _create_custom(client)
        assert client.delete(f"{API}/templates/{custom_id}").status_code == 204
        assert client.get(f"{API}/templates/{custom_id}").status_code == 404

    def test_add_block_by_type(self, client):
        custom_id = _create_custom(client)
        response = client.post(f"{API}/templates/{custom_id}/blocks", json={"type": "notes", "atIndex": 0})
        assert response.status_code == 201
        first = response.json()["blocks"][0]
        assert first["type"] == "notes"
        assert first["props"] == {"text": ""}

    def test_unknown_block_id_is_404(self, client):
        custom_id = _create_custom(client)
        patched = client.patch(f"{API}/templates/{custom_id}/blocks/no-such-block", json={"locked": True})
        assert patched.status_code == 404
        assert client.delete(f"{API}/templates/{custom_id}/blocks/no-such-block").status_code == 404

    def test_unknown_block_type_rejected(self, client):
        custom_id = _create_custom(client)
        response = client.post(f"{API}/templates/{custom_id}/blocks", json={"type": "barcode"})
        assert response.status_code == 422


class TestEditorEndpoints:
    def test_drop_palette_item_on_canvas(self, client):
        custom_id = _create_custom(client)
        response = client.post(
            f"{API}/templates/{custom_id}/drop", json={"activeId": "palette:notes", "overId": "canvas"}
        )
        assert response.status_code == 200
        assert response.json()["blocks"][-1]["type"] == "notes"

    def test_drop_without_target_changes_nothing(self, client):
        custom_id = _create_custom(client)
        before = client.get(f"{API}/templates/{custom_id}").json()["blocks"]
        response = client.post(f"{API}/templates/{custom_id}/drop", json={"activeId": before[0]["id"]})
        assert response.json()["blocks"] == before

    def test_snap(self, client):
        response = client.post(f"{API}/templates/quotation_default_v1/snap", json={"dx": 13, "dy": 7})
        assert response.json() == {"dx": 16, "dy": 8, "gridPx": 8}

    def test_canvas_html(self, client):
        response = client.get(f"{API}/templates/quotation_default_v1/canvas")
        assert response.status_code == 200
        assert "rs-editable" in response.text
        assert "QT-2025-0001" in response.text

    def test_palette(self, client):
        types = [item["type"] for item in client.get(f"{API}/palette/trf_receipt").json()]
        assert "journalItems" in types
        assert "customerInfo" not in types
        assert client.get(f"{API}/palette/invoice").status_code == 400


class TestStudioEndpoints:
    def test_sample_document(self, client):
        response = client.get(f"{API}/documents/receipt_full/anything")
        assert response.status_code == 200
        assert response.json()["docType"] == "receipt_full"

    def test_unsupported_document(self, client):
        assert client.get(f"{API}/documents/invoice/1").status_code == 400

    def test_patch_settings(self, client):
        response = client.patch(f"{API}/settings/", json={"dtoTimeoutMs": 5000})
        assert response.status_code == 200
        assert response.json()["dtoTimeoutMs"] == 5000

    def test_default_template_must_match_doc_type(self, client):
        response = client.put(
            f"{API}/settings/default-template",
            json={"docType": "quotation", "templateId": "receipt_full_default_v1"},
        )
        assert response.status_code == 422

    def test_patch_branding(self, client):
        response = client.patch(f"{API}/branding/", json={"companyName": "Acme Thailand"})
        assert response.status_code == 200
        assert response.json()["companyName"] == "Acme Thailand"
        assert client.get(f"{API}/branding/").json()["companyName"] == "Acme Thailand"

    def test_invalid_branding(self, client):
        response = client.patch(f"{API}/branding/", json={"defaultPrimaryColor": "blue"})
        assert response.status_code == 422

    def test_branding_draft_flush(self, client):
        staged = client.post(f"{API}/branding/draft", json={"companyName": "Draft Co"}).json()
        assert staged["draft"]["companyName"] == "Draft Co"
        assert staged["issues"] == []
        assert client.post(f"{API}/branding/draft/flush").json()["companyName"] == "Draft Co"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"


class TestPages:
    def test_preview_page(self, client):
        response = client.get("/preview/quotation_default_v1", params={"recordId": "42"})
        assert response.status_code == 200
        assert "QT-2025-0001" in response.text
        assert "/print/quotation_default_v1?recordId=42" in response.text

    def test_print_page(self, client):
        response = client.get("/print/receipt_short_default_v1")
        assert response.status_code == 200
        assert "size: 80mm auto" in response.text
        assert "window.print()" in response.text

    def test_export_failure_shows_quick_print(self, client):
        dialog = pdf_failed_dialog("quotation_default_v1", "7", "PDF export failed (502): down")
        exporter = FakeExporter(ExportOutcome(dialog=dialog))
        app.dependency_overrides[deps.get_pdf_exporter] = lambda: exporter
        response = client.post("/preview/quotation_default_v1/export", params={"recordId": "7"})
        assert response.status_code == 200
        assert "PDF failed" in response.text
        assert "/print/quotation_default_v1?recordId=7" in response.text
        assert exporter.calls == [("quotation_default_v1", "7")]

    def test_export_success_redirects(self, client):
        exporter = FakeExporter(ExportOutcome(pdf_url="http://files.local/doc.pdf"))
        app.dependency_overrides[deps.get_pdf_exporter] = lambda: exporter
        response = client.post("/preview/quotation_default_v1/export", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "http://files.local/doc.pdf"


class TestPdfService:
    def _payload(self):
        return {
            "templateId": "quotation_default_v1",
            "templateJson": {},
            "dtoJson": {},
            "brandingJson": {},
            "html": "<html><body>hello</body></html>",
        }

    def test_generates_and_stores(self, client, monkeypatch, tmp_path):
        async def fake_render(html):
            assert "hello" in html
            return b"%PDF-1.7"

        monkeypatch.setattr(print_pdf, "render_pdf", fake_render)
        monkeypatch.setattr(
            print_pdf, "store_pdf", lambda data, template_id: f"http://localhost:8000/static/pdfs/{template_id}.pdf"
        )
        response = client.post(f"{API}/print/pdf", json=self._payload())
        assert response.status_code == 200
        assert response.json() == {"pdfUrl": "http://localhost:8000/static/pdfs/quotation_default_v1.pdf"}

    def test_conversion_failure(self, client, monkeypatch):
        async def broken_render(html):
            raise RuntimeError("no fonts")

        monkeypatch.setattr(print_pdf, "render_pdf", broken_render)
        response = client.post(f"{API}/print/pdf", json=self._payload())
        assert response.status_code == 500
        assert "no fonts" in response.json()["detail"]
