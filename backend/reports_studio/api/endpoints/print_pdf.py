# backend/reports_studio/api/endpoints/print_pdf.py
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status

from reports_studio.services.pdf_export import PdfExportRequest, PdfExportResponse, render_pdf, store_pdf

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/pdf", response_model=PdfExportResponse, response_model_by_alias=True)
async def generate_pdf(request_in: PdfExportRequest) -> Any:
    """
    PDF service: turn the posted standalone HTML into a PDF stored under
    ``/static`` and return its URL.
    """
    try:
        pdf_bytes = await render_pdf(request_in.html)
    except Exception as e:
        logger.error(f"Error generating PDF with WeasyPrint for template '{request_in.template_id}': {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"PDF conversion failed. Details: {str(e)}"
        )

    pdf_url = store_pdf(pdf_bytes, request_in.template_id)
    logger.info(f"Generated PDF for template '{request_in.template_id}' ({len(pdf_bytes)} bytes)")
    return PdfExportResponse(pdf_url=pdf_url)
