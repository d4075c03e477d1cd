# backend/reports_studio/services/pdf_export.py
"""
PDF export.

The exporter serializes ``(template, dto, branding)`` into a standalone HTML
document and posts it to the configured PDF service. A failed request never
raises to the page: it comes back as an ``ExportDialog`` offering the print
route as a fallback. ``render_pdf`` / ``store_pdf`` implement the service side
locally with WeasyPrint.
"""
import asyncio
import logging
import re
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote, urljoin

import httpx
import pydantic
from markupsafe import Markup

from reports_studio.core.config import settings
from reports_studio.core.errors import ConfigurationError, FetchError
from reports_studio.schemas.branding import BrandingProfile
from reports_studio.schemas.common import StudioModel, new_id
from reports_studio.schemas.dto import AnyDocumentDTO
from reports_studio.schemas.template import Template
from reports_studio.services.composer import compose_document, page_geometry
from reports_studio.services.templating import STATIC_DIR, jinja_env

logger = logging.getLogger(__name__)

STYLESHEET_PATH = STATIC_DIR / "css" / "document.css"
PDF_DIR = STATIC_DIR / settings.PDF_OUTPUT_SUBDIR


class PdfExportRequest(StudioModel):
    template_id: str
    template_json: Dict[str, Any]
    dto_json: Dict[str, Any]
    branding_json: Dict[str, Any]
    html: str


class PdfExportResponse(StudioModel):
    pdf_url: str


# --- Serializers ---
class RenderTargetSerializer(ABC):
    """Produces the HTML that the PDF service turns into a document."""

    @abstractmethod
    def serialize(self, template: Template, dto: AnyDocumentDTO, branding: BrandingProfile) -> str:
        ...


class HtmlDocumentSerializer(RenderTargetSerializer):
    """Composes the print-mode page and inlines the document stylesheet."""

    def __init__(self, stylesheet_path: Path = STYLESHEET_PATH):
        self.stylesheet_path = stylesheet_path
        self._stylesheet: Optional[str] = None

    @property
    def stylesheet(self) -> str:
        if self._stylesheet is None:
            self._stylesheet = self.stylesheet_path.read_text(encoding="utf-8")
        return self._stylesheet

    def serialize(self, template: Template, dto: AnyDocumentDTO, branding: BrandingProfile) -> str:
        body = compose_document(template, dto, branding, mode="print", show_guides=False)
        return jinja_env.get_template("standalone.html").render(
            title=f"{template.name} - {dto.document.number}",
            stylesheet=Markup(self.stylesheet),
            geometry=page_geometry(template, dto),
            body=body,
        )


# --- Client side ---
class PdfExportClient:
    """POSTs export requests to ``service_url`` and returns the produced PDF URL."""

    def __init__(
        self,
        service_url: str,
        timeout_ms: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        base_url: Optional[str] = None,
    ):
        self.service_url = (service_url or "").strip()
        self.timeout_ms = timeout_ms or settings.PDF_TIMEOUT_MS
        self._transport = transport
        self.base_url = base_url or settings.SERVER_HOST

    def resolve_url(self) -> str:
        if not self.service_url:
            raise ConfigurationError("Missing PDF service URL (configure in Settings).")
        # Relative service URLs point at this server
        return urljoin(self.base_url.rstrip("/") + "/", self.service_url)

    async def export(self, request: PdfExportRequest) -> PdfExportResponse:
        url = self.resolve_url()
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_ms / 1000) as client:
                response = await client.post(url, json=request.to_json_dict())
        except httpx.HTTPError as exc:
            raise FetchError(f"PDF export failed: {exc}") from exc

        if not response.is_success:
            raise FetchError(
                f"PDF export failed ({response.status_code}): {response.text or response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            return PdfExportResponse.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as exc:
            raise FetchError(f"PDF service returned an unexpected payload: {exc}") from exc


def quick_print_url(template_id: str, record_id: str) -> str:
    return f"/print/{quote(template_id, safe='')}?recordId={quote(str(record_id), safe='')}"


@dataclass(frozen=True)
class ExportDialog:
    title: str
    message: str
    hint: str
    primary_label: str
    primary_url: str


@dataclass(frozen=True)
class ExportOutcome:
    pdf_url: Optional[str] = None
    dialog: Optional[ExportDialog] = None

    @property
    def ok(self) -> bool:
        return self.pdf_url is not None


def pdf_failed_dialog(template_id: str, record_id: str, message: str) -> ExportDialog:
    return ExportDialog(
        title="PDF failed",
        message=message,
        hint="Use Quick Print as fallback (mobile friendly).",
        primary_label="Quick Print",
        primary_url=quick_print_url(template_id, record_id),
    )


class PdfExporter:
    def __init__(self, client: PdfExportClient, serializer: Optional[RenderTargetSerializer] = None):
        self.client = client
        self.serializer = serializer or HtmlDocumentSerializer()

    def build_request(self, template: Template, dto: AnyDocumentDTO, branding: BrandingProfile) -> PdfExportRequest:
        return PdfExportRequest(
            template_id=template.id,
            template_json=template.to_json_dict(),
            dto_json=dto.to_json_dict(),
            branding_json=branding.to_json_dict(),
            html=self.serializer.serialize(template, dto, branding),
        )

    async def export(
        self, template: Template, dto: AnyDocumentDTO, branding: BrandingProfile, record_id: str
    ) -> ExportOutcome:
        try:
            response = await self.client.export(self.build_request(template, dto, branding))
        except (FetchError, ConfigurationError) as exc:
            logger.warning(f"PDF export of template {template.id} failed: {exc}")
            return ExportOutcome(dialog=pdf_failed_dialog(template.id, record_id, str(exc)))
        logger.info(f"PDF for template {template.id} available at {response.pdf_url}")
        return ExportOutcome(pdf_url=response.pdf_url)


# --- Service side ---
async def render_pdf(html: str) -> bytes:
    # WeasyPrint loads its native libraries on import
    from weasyprint import HTML

    loop = asyncio.get_event_loop()
    with ThreadPoolExecutor() as pool:
        return await loop.run_in_executor(
            pool,
            lambda: HTML(string=html, base_url=str(STATIC_DIR)).write_pdf()
        )


def pdf_file_name(template_id: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9_.-]+", "-", template_id).strip("-") or "document"
    return f"{slug}-{new_id()[:12]}.pdf"


def prune_pdfs(output_dir: Path = PDF_DIR, max_age_hours: Optional[float] = None, now: Optional[float] = None) -> int:
    """Delete generated PDFs older than ``max_age_hours`` and return how many were removed."""
    max_age_hours = settings.PDF_RETENTION_HOURS if max_age_hours is None else max_age_hours
    if max_age_hours <= 0 or not output_dir.is_dir():
        return 0
    cutoff = (time.time() if now is None else now) - max_age_hours * 3600
    removed = 0
    for path in output_dir.glob("*.pdf"):
        try:
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        except FileNotFoundError:
            continue
    if removed:
        logger.info(f"Removed {removed} generated PDF(s) older than {max_age_hours} h from {output_dir}")
    return removed


def store_pdf(pdf_bytes: bytes, template_id: str, output_dir: Path = PDF_DIR) -> str:
    """Write the PDF under ``static/`` and return its public URL. Expired PDFs are pruned first."""
    output_dir.mkdir(parents=True, exist_ok=True)
    prune_pdfs(output_dir)
    name = pdf_file_name(template_id)
    (output_dir / name).write_bytes(pdf_bytes)
    return f"{settings.SERVER_HOST.rstrip('/')}/static/{output_dir.name}/{name}"
