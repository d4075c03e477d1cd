# backend/reports_studio/services/preview.py
"""
Preview and print page controllers.

Both pages share ``compose_document``. The preview keeps guides and offers PDF
export; the print page renders the bare document and, once the DTO is loaded,
opens the browser print dialog unless ``autoprint=0``.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from markupsafe import Markup

from reports_studio.core.errors import ConfigurationError, FetchError, UnsupportedDocType
from reports_studio.schemas.branding import BrandingProfile
from reports_studio.schemas.dto import AnyDocumentDTO
from reports_studio.schemas.template import Template
from reports_studio.services.composer import compose_document, page_geometry
from reports_studio.services.document_provider import DocumentProvider
from reports_studio.services.pdf_export import ExportOutcome, PdfExporter, pdf_failed_dialog, quick_print_url
from reports_studio.services.templating import jinja_env

logger = logging.getLogger(__name__)

DEFAULT_RECORD_ID = "sample"
AUTOPRINT_DELAY_MS = 250


def _flag(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    return str(value).strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class PreviewParams:
    record_id: str = DEFAULT_RECORD_ID
    guides: bool = True
    auto: Optional[str] = None
    debug: bool = False

    @classmethod
    def from_query(cls, record_id=None, guides=None, auto=None, debug=None) -> "PreviewParams":
        return cls(
            record_id=record_id or DEFAULT_RECORD_ID,
            guides=_flag(guides, True),
            auto=auto or None,
            debug=_flag(debug, False),
        )

    @property
    def auto_pdf(self) -> bool:
        return self.auto == "pdf"


@dataclass(frozen=True)
class PrintParams:
    record_id: str = DEFAULT_RECORD_ID
    autoprint: bool = True

    @classmethod
    def from_query(cls, record_id=None, autoprint=None) -> "PrintParams":
        return cls(record_id=record_id or DEFAULT_RECORD_ID, autoprint=_flag(autoprint, True))


def _pretty(model) -> str:
    if model is None:
        return "null"
    return json.dumps(model.to_json_dict(), ensure_ascii=False, indent=2)


class DocumentSession:
    """Holds the DTO of one page load. A failed fetch is kept as a message, not raised."""

    def __init__(self, template: Template, branding: BrandingProfile, provider: DocumentProvider, record_id: str):
        self.template = template
        self.branding = branding
        self.provider = provider
        self.record_id = record_id
        self.dto: Optional[AnyDocumentDTO] = None
        self.dto_error: Optional[str] = None

    async def load_dto(self) -> Optional[AnyDocumentDTO]:
        doc_type = self.template.doc_type.value
        try:
            dto = await self.provider.get_document_dto(doc_type, self.record_id)
        except (FetchError, ConfigurationError, UnsupportedDocType) as exc:
            logger.warning(f"Could not load {doc_type} '{self.record_id}' for template {self.template.id}: {exc}")
            self.dto, self.dto_error = None, str(exc)
            return None
        self.dto, self.dto_error = dto, None
        return dto


class PreviewSession(DocumentSession):
    def __init__(
        self,
        template: Template,
        branding: BrandingProfile,
        provider: DocumentProvider,
        params: PreviewParams = PreviewParams(),
        exporter: Optional[PdfExporter] = None,
    ):
        super().__init__(template, branding, provider, params.record_id)
        self.params = params
        self.exporter = exporter
        self.export_outcome: Optional[ExportOutcome] = None
        self._auto_export_fired = False

    async def load_dto(self) -> Optional[AnyDocumentDTO]:
        dto = await super().load_dto()
        if dto is not None and self.params.auto_pdf:
            await self.auto_export()
        return dto

    async def auto_export(self) -> Optional[ExportOutcome]:
        """Runs the export at most once per session, however often the DTO reloads."""
        if self._auto_export_fired or self.dto is None:
            return None
        self._auto_export_fired = True
        return await self.export_pdf()

    async def export_pdf(self) -> ExportOutcome:
        if self.exporter is None:
            raise ConfigurationError("PDF export is not configured.")
        if self.dto is None:
            await DocumentSession.load_dto(self)
        if self.dto is None:
            self.export_outcome = ExportOutcome(
                dialog=pdf_failed_dialog(self.template.id, self.record_id, self.dto_error or "No document data")
            )
        else:
            self.export_outcome = await self.exporter.export(self.template, self.dto, self.branding, self.record_id)
        return self.export_outcome

    def render(self) -> str:
        document = None
        if self.dto is not None:
            document = compose_document(
                self.template, self.dto, self.branding, mode="preview", show_guides=self.params.guides
            )
        return jinja_env.get_template("preview.html").render(
            template=self.template,
            params=self.params,
            document=document,
            dto_error=self.dto_error,
            outcome=self.export_outcome,
            quick_print_url=quick_print_url(self.template.id, self.record_id),
            debug={
                "dto": _pretty(self.dto),
                "template": _pretty(self.template),
                "branding": _pretty(self.branding),
            } if self.params.debug else None,
        )


class PrintSession(DocumentSession):
    def __init__(
        self,
        template: Template,
        branding: BrandingProfile,
        provider: DocumentProvider,
        params: PrintParams = PrintParams(),
    ):
        super().__init__(template, branding, provider, params.record_id)
        self.params = params

    def render(self) -> str:
        document: Optional[Markup] = None
        page_rule = page_geometry(self.template).page_rule
        if self.dto is not None:
            document = compose_document(self.template, self.dto, self.branding, mode="print", show_guides=False)
            page_rule = page_geometry(self.template, self.dto).page_rule
        return jinja_env.get_template("print.html").render(
            template=self.template,
            params=self.params,
            document=document,
            dto_error=self.dto_error,
            page_rule=page_rule,
            autoprint_delay_ms=AUTOPRINT_DELAY_MS,
        )
