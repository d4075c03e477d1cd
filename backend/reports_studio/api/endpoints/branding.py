# backend/reports_studio/api/endpoints/branding.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from reports_studio.api import deps
from reports_studio.core.errors import StudioError
from reports_studio.services.studio import Studio

router = APIRouter()


@router.get("/")
async def read_branding(studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    return studio.branding.branding.to_json_dict()


@router.put("/")
async def replace_branding(
    branding_in: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return studio.branding.set(branding_in).to_json_dict()
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/")
async def patch_branding(
    patch: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return studio.branding.patch(patch).to_json_dict()
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/reset")
async def reset_branding(studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    return studio.branding.reset().to_json_dict()


@router.post("/draft")
async def edit_branding_draft(
    patch: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    """
    Stage field edits. They are committed once no further edit arrives within
    the debounce window; an invalid draft is reported but never committed.
    """
    editor = studio.branding_editor
    draft = editor.edit(patch)
    error = editor.last_error
    return {
        "draft": draft,
        "pending": editor.pending,
        "issues": [{"path": i.path, "reason": i.reason} for i in error.issues] if error else [],
    }


@router.post("/draft/flush")
async def flush_branding_draft(studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    editor = studio.branding_editor
    editor.flush()
    if editor.last_error is not None:
        raise deps.http_error(editor.last_error)
    return studio.branding.branding.to_json_dict()


@router.delete("/draft")
async def discard_branding_draft(studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    studio.branding_editor.discard()
    return studio.branding.branding.to_json_dict()
