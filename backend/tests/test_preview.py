from conftest import FakeExporter, run
from reports_studio.core.errors import FetchError
from reports_studio.db.default_templates import DEFAULT_TEMPLATES
from reports_studio.schemas.branding import DEFAULT_BRANDING
from reports_studio.services.pdf_export import ExportOutcome, pdf_failed_dialog
from reports_studio.services.preview import PreviewParams, PreviewSession, PrintParams, PrintSession


def _template(doc_type="quotation"):
    return next(t for t in DEFAULT_TEMPLATES if t.doc_type.value == doc_type)


class FailingProvider:
    async def get_document_dto(self, doc_type, record_id):
        raise FetchError("DTO fetch failed (500): upstream error", status_code=500)


class TestParams:
    def test_preview_defaults(self):
        params = PreviewParams.from_query()
        assert params.record_id == "sample"
        assert params.guides is True
        assert params.debug is False
        assert not params.auto_pdf

    def test_preview_flags(self):
        params = PreviewParams.from_query(record_id="9", guides="0", auto="pdf", debug="1")
        assert (params.record_id, params.guides, params.auto_pdf, params.debug) == ("9", False, True, True)

    def test_autoprint_defaults_on(self):
        assert PrintParams.from_query().autoprint is True
        assert PrintParams.from_query(autoprint="0").autoprint is False


class TestPreviewSession:
    def test_renders_document_for_sample_record(self, sample):
        session = PreviewSession(_template(), DEFAULT_BRANDING, sample)
        run(session.load_dto())
        html = session.render()
        assert "QT-2025-0001" in html
        assert "rs-guides" in html
        assert "Quick Print" in html

    def test_fetch_error_is_shown_inline(self):
        session = PreviewSession(_template(), DEFAULT_BRANDING, FailingProvider())
        assert run(session.load_dto()) is None
        html = session.render()
        assert "DTO fetch failed (500): upstream error" in html
        assert "rs-page" not in html

    def test_auto_export_fires_once_across_reloads(self, sample):
        exporter = FakeExporter(ExportOutcome(pdf_url="https://files/doc.pdf"))
        session = PreviewSession(_template(), DEFAULT_BRANDING, sample,
                                 params=PreviewParams(auto="pdf"), exporter=exporter)

        async def scenario():
            await session.load_dto()
            await session.load_dto()

        run(scenario())
        assert exporter.calls == [("quotation_default_v1", "sample")]
        assert "https://files/doc.pdf" in session.render()

    def test_no_auto_export_without_flag(self, sample):
        exporter = FakeExporter(ExportOutcome(pdf_url="https://files/doc.pdf"))
        session = PreviewSession(_template(), DEFAULT_BRANDING, sample, exporter=exporter)
        run(session.load_dto())
        assert exporter.calls == []

    def test_failed_export_renders_fallback_dialog(self, sample):
        dialog = pdf_failed_dialog("quotation_default_v1", "sample", "PDF export failed (502): down")
        session = PreviewSession(_template(), DEFAULT_BRANDING, sample,
                                 params=PreviewParams(auto="pdf"), exporter=FakeExporter(ExportOutcome(dialog=dialog)))
        run(session.load_dto())
        html = session.render()
        assert "PDF failed" in html
        assert 'href="/print/quotation_default_v1?recordId=sample"' in html

    def test_debug_panel(self, sample):
        session = PreviewSession(_template(), DEFAULT_BRANDING, sample, params=PreviewParams(debug=True))
        run(session.load_dto())
        html = session.render()
        assert "rs-debug" in html
        assert "&#34;docType&#34;: &#34;quotation&#34;" in html


class TestPrintSession:
    def test_autoprint_script(self, sample):
        session = PrintSession(_template(), DEFAULT_BRANDING, sample)
        run(session.load_dto())
        html = session.render()
        assert "window.print(); }, 250)" in html
        assert "rs-guides" not in html
        assert "@page { size: A4; margin: 10mm; }" in html

    def test_autoprint_off_shows_button(self, sample):
        session = PrintSession(_template(), DEFAULT_BRANDING, sample, params=PrintParams(autoprint=False))
        run(session.load_dto())
        html = session.render()
        assert "Print / Save as PDF" in html
        assert "setTimeout" not in html

    def test_thermal_print(self, sample):
        session = PrintSession(_template("receipt_short"), DEFAULT_BRANDING, sample)
        run(session.load_dto())
        assert "@page { size: 80mm auto; margin: 3mm; }" in session.render()

    def test_no_print_without_document(self):
        session = PrintSession(_template(), DEFAULT_BRANDING, FailingProvider())
        run(session.load_dto())
        html = session.render()
        assert "setTimeout" not in html
        assert "upstream error" in html
