# backend/reports_studio/api/endpoints/studio_settings.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from reports_studio import schemas
from reports_studio.api import deps
from reports_studio.core.errors import Issue, StudioError, ValidationError
from reports_studio.services.studio import Studio

router = APIRouter()


@router.get("/")
async def read_settings(studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    return studio.settings.get().to_json_dict()


@router.patch("/")
async def patch_settings(
    patch: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return studio.settings.patch(patch).to_json_dict()
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/reset")
async def reset_settings(studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    return studio.settings.reset().to_json_dict()


@router.put("/default-template")
async def set_default_template(
    default_in: schemas.DefaultTemplateIn,
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    """Choose which template a docType opens with."""
    try:
        template = studio.templates.get(default_in.template_id)
        if template.doc_type.value != default_in.doc_type:
            raise ValidationError([Issue(
                "templateId", f"Template is a {template.doc_type.value} template, not {default_in.doc_type}"
            )])
        return studio.settings.set_default_template(default_in.doc_type, default_in.template_id).to_json_dict()
    except StudioError as exc:
        raise deps.http_error(exc) from exc
