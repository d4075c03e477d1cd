# backend/reports_studio/api/endpoints/pages.py
"""HTML routes: the interactive preview and the isolated print view."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from reports_studio.api import deps
from reports_studio.schemas.template import Template
from reports_studio.services.pdf_export import PdfExporter
from reports_studio.services.preview import PreviewParams, PreviewSession, PrintParams, PrintSession
from reports_studio.services.studio import Studio

router = APIRouter()


@router.get("/preview/{template_id}", response_class=HTMLResponse)
async def preview_page(
    template: Template = Depends(deps.get_template_or_404),
    record_id: Optional[str] = Query(None, alias="recordId"),
    guides: Optional[str] = Query(None),
    auto: Optional[str] = Query(None),
    debug: Optional[str] = Query(None),
    studio: Studio = Depends(deps.get_studio),
    exporter: PdfExporter = Depends(deps.get_pdf_exporter),
) -> HTMLResponse:
    session = PreviewSession(
        template,
        studio.branding.branding,
        studio.provider(),
        params=PreviewParams.from_query(record_id=record_id, guides=guides, auto=auto, debug=debug),
        exporter=exporter,
    )
    await session.load_dto()
    return HTMLResponse(session.render())


@router.post("/preview/{template_id}/export")
async def export_pdf(
    template: Template = Depends(deps.get_template_or_404),
    record_id: Optional[str] = Query(None, alias="recordId"),
    studio: Studio = Depends(deps.get_studio),
    exporter: PdfExporter = Depends(deps.get_pdf_exporter),
):
    """Open PDF: redirect to the produced file, or re-render the preview with the fallback dialog."""
    session = PreviewSession(
        template,
        studio.branding.branding,
        studio.provider(),
        params=PreviewParams.from_query(record_id=record_id),
        exporter=exporter,
    )
    await session.load_dto()
    outcome = await session.export_pdf()
    if outcome.ok:
        return RedirectResponse(outcome.pdf_url, status_code=303)
    return HTMLResponse(session.render())


@router.get("/print/{template_id}", response_class=HTMLResponse)
async def print_page(
    template: Template = Depends(deps.get_template_or_404),
    record_id: Optional[str] = Query(None, alias="recordId"),
    autoprint: Optional[str] = Query(None),
    studio: Studio = Depends(deps.get_studio),
) -> HTMLResponse:
    session = PrintSession(
        template,
        studio.branding.branding,
        studio.provider(),
        params=PrintParams.from_query(record_id=record_id, autoprint=autoprint),
    )
    await session.load_dto()
    return HTMLResponse(session.render())
