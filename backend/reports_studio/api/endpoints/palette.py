# backend/reports_studio/api/endpoints/palette.py
from typing import Any, Dict, List

from fastapi import APIRouter

from reports_studio.api import deps
from reports_studio.core.errors import UnsupportedDocType
from reports_studio.schemas.common import DocType
from reports_studio.services.editor import palette_for

router = APIRouter()


@router.get("/{doc_type}")
async def read_palette(doc_type: str) -> List[Dict[str, Any]]:
    """Block kinds that can be dropped onto a template of ``doc_type``."""
    if doc_type not in {d.value for d in DocType}:
        raise deps.http_error(UnsupportedDocType(doc_type))
    return [item.to_json_dict() for item in palette_for(doc_type)]
