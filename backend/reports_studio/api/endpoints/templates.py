# backend/reports_studio/api/endpoints/templates.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from fastapi.responses import HTMLResponse

from reports_studio import schemas
from reports_studio.api import deps
from reports_studio.core.errors import Issue, StudioError, ValidationError
from reports_studio.schemas.template import Template
from reports_studio.services.composer import compose_document
from reports_studio.services.editor import apply_drop, create_block, resolve_drop, snap_to_grid
from reports_studio.services.studio import Studio
from reports_studio.services.templating import jinja_env

router = APIRouter()


def _out(template: Template) -> Dict[str, Any]:
    return template.to_json_dict()


@router.get("/")
async def read_templates(
    doc_type: Optional[str] = Query(None, alias="docType"),
    studio: Studio = Depends(deps.get_studio),
) -> List[Dict[str, Any]]:
    return [_out(t) for t in studio.templates.list(doc_type)]


@router.post("/", status_code=status.HTTP_201_CREATED)
async def upsert_template(
    template_in: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    """Create a template, or replace a custom one with the same id."""
    try:
        return _out(studio.templates.upsert(template_in))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/refresh-defaults")
async def refresh_default_templates(studio: Studio = Depends(deps.get_studio)) -> List[Dict[str, Any]]:
    """Reconcile the shipped defaults into the collection; custom templates are kept."""
    return [_out(t) for t in studio.refresh_defaults()]


@router.get("/{template_id}")
async def read_template(template: Template = Depends(deps.get_template_or_404)) -> Dict[str, Any]:
    return _out(template)


@router.put("/{template_id}")
async def replace_template(
    template_id: str,
    template_in: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        studio.templates.get(template_id)
        return _out(studio.templates.upsert({**template_in, "id": template_id}))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: str, studio: Studio = Depends(deps.get_studio)) -> Response:
    try:
        studio.templates.delete(template_id)
    except StudioError as exc:
        raise deps.http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{template_id}/duplicate", response_model=schemas.CreatedOut, status_code=status.HTTP_201_CREATED)
async def duplicate_template(template_id: str, studio: Studio = Depends(deps.get_studio)) -> Any:
    try:
        return schemas.CreatedOut(id=studio.templates.duplicate(template_id))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{template_id}/create-from-default", response_model=schemas.CreatedOut, status_code=status.HTTP_201_CREATED)
async def create_from_default(template_id: str, studio: Studio = Depends(deps.get_studio)) -> Any:
    try:
        return schemas.CreatedOut(id=studio.templates.create_from_default(template_id))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{template_id}/toggle-publish")
async def toggle_publish(template_id: str, studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    try:
        return _out(studio.templates.toggle_publish(template_id))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{template_id}/rename")
async def rename_template(
    template_id: str,
    rename_in: schemas.RenameIn,
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return _out(studio.templates.rename(template_id, rename_in.name))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


# --- blocks ---
@router.post("/{template_id}/blocks", status_code=status.HTTP_201_CREATED)
async def add_block(
    template_id: str,
    block_in: schemas.BlockCreateIn,
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    """Append (or insert at ``atIndex``) a block given in full or created from its ``type``."""
    try:
        if block_in.block is not None:
            block = block_in.block
        elif block_in.type:
            block = create_block(block_in.type)
        else:
            raise ValidationError([Issue("type", "Either 'block' or 'type' is required")])
        if block_in.at_index is None:
            return _out(studio.templates.add_block(template_id, block))
        return _out(studio.templates.insert_block(template_id, block, block_in.at_index))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/{template_id}/blocks/{block_id}")
async def update_block(
    template_id: str,
    block_id: str,
    patch: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return _out(studio.templates.update_block(template_id, block_id, patch))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.delete("/{template_id}/blocks/{block_id}")
async def remove_block(template_id: str, block_id: str, studio: Studio = Depends(deps.get_studio)) -> Dict[str, Any]:
    try:
        return _out(studio.templates.remove_block(template_id, block_id))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{template_id}/blocks/move")
async def move_block(
    template_id: str,
    move_in: schemas.BlockMoveIn,
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return _out(studio.templates.move_block(template_id, move_in.from_index, move_in.to_index))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{template_id}/blocks/reorder")
async def reorder_blocks(
    template_id: str,
    reorder_in: schemas.BlockReorderIn,
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return _out(studio.templates.reorder_blocks(template_id, reorder_in.block_ids))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/{template_id}/theme")
async def patch_theme(
    template_id: str,
    patch: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return _out(studio.templates.patch_theme(template_id, patch))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.patch("/{template_id}/page")
async def patch_page(
    template_id: str,
    patch: Dict[str, Any] = Body(...),
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    try:
        return _out(studio.templates.patch_page(template_id, patch))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


# --- editor surface ---
@router.post("/{template_id}/drop")
async def drop(
    template_id: str,
    drop_in: schemas.DropIn,
    studio: Studio = Depends(deps.get_studio),
) -> Dict[str, Any]:
    """Resolve a finished drag (palette item or block onto block/canvas) and apply it."""
    try:
        template = studio.templates.get(template_id)
        action = resolve_drop(drop_in.active_id, drop_in.over_id, template.blocks)
        return _out(apply_drop(studio.templates, template_id, action))
    except StudioError as exc:
        raise deps.http_error(exc) from exc


@router.post("/{template_id}/snap", response_model=schemas.SnapOut)
async def snap(
    snap_in: schemas.SnapIn,
    template: Template = Depends(deps.get_template_or_404),
) -> Any:
    dx, dy = snap_to_grid(snap_in.dx, snap_in.dy, template.page.grid_px)
    return schemas.SnapOut(dx=dx, dy=dy, grid_px=template.page.grid_px)


@router.get("/{template_id}/canvas", response_class=HTMLResponse)
async def editor_canvas(
    template: Template = Depends(deps.get_template_or_404),
    selected: Optional[str] = Query(None, alias="selectedBlockId"),
    guides: bool = Query(True),
    studio: Studio = Depends(deps.get_studio),
) -> HTMLResponse:
    """The editable canvas filled with sample data for the template's docType."""
    dto = studio.sample_provider.build(template.doc_type.value)
    document = compose_document(
        template, dto, studio.branding.branding, mode="editor", show_guides=guides, selected_block_id=selected
    )
    return HTMLResponse(jinja_env.get_template("editor_canvas.html").render(template=template, document=document))
