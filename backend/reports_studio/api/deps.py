# backend/reports_studio/api/deps.py
import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request, status

from reports_studio.core.config import settings
from reports_studio.core.errors import (
    BlockNotFoundError,
    ConfigurationError,
    FetchError,
    ReadOnlyTemplateError,
    StudioError,
    TemplateNotFoundError,
    UnsupportedDocType,
    ValidationError,
)
from reports_studio.schemas.template import Template
from reports_studio.services.pdf_export import PdfExportClient, PdfExporter
from reports_studio.services.studio import Studio

logger = logging.getLogger(__name__)

# Base URL used when a relative PDF service URL is served in-process
LOCAL_BASE_URL = "http://reports-studio.local"


def get_studio(request: Request) -> Studio:
    """The studio created at startup (see ``main.lifespan``)."""
    studio: Optional[Studio] = getattr(request.app.state, "studio", None)
    if studio is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Studio is not initialized."
        )
    return studio


def http_error(exc: StudioError) -> HTTPException:
    """Map the studio error taxonomy onto HTTP status codes."""
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=422,
            detail={
                "message": str(exc),
                "issues": [{"path": issue.path, "reason": issue.reason} for issue in exc.issues],
            },
        )
    if isinstance(exc, (TemplateNotFoundError, BlockNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (ReadOnlyTemplateError, UnsupportedDocType)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, (FetchError, ConfigurationError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    logger.error(f"Unmapped studio error: {exc}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def get_template_or_404(template_id: str, studio: Studio = Depends(get_studio)) -> Template:
    try:
        return studio.templates.get(template_id)
    except TemplateNotFoundError as exc:
        raise http_error(exc) from exc


def get_pdf_exporter(request: Request, studio: Studio = Depends(get_studio)) -> PdfExporter:
    service_url = studio.settings.get().pdf_service_url
    if service_url.startswith("/"):
        client = PdfExportClient(
            service_url,
            transport=httpx.ASGITransport(app=request.app),
            base_url=LOCAL_BASE_URL,
        )
    else:
        client = PdfExportClient(service_url, timeout_ms=settings.PDF_TIMEOUT_MS)
    return PdfExporter(client)
