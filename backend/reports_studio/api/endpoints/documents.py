# backend/reports_studio/api/endpoints/documents.py
from typing import Any, Dict

from fastapi import APIRouter, Depends

from reports_studio.api import deps
from reports_studio.core.errors import StudioError
from reports_studio.services.studio import Studio

router = APIRouter()


@router.get("/{doc_type}/{record_id}")
async def read_document(doc_type: str, record_id: str, studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    """The document DTO from the configured provider (sample data when no ERP is set)."""
    try:
        dto = await studio.provider().get_document_dto(doc_type, record_id)
    except StudioError as exc:
        raise deps.http_error(exc) from exc
    return dto.to_json_dict()
