# backend/reports_studio/schemas/requests.py
from typing import Any, Dict, List, Optional

from pydantic import Field

from .common import NonEmptyStr, StudioModel


class RenameIn(StudioModel):
    name: NonEmptyStr


class BlockCreateIn(StudioModel):
    """Either a full ``block`` or just a ``type`` to create one with default props."""
    type: Optional[str] = None
    block: Optional[Dict[str, Any]] = None
    at_index: Optional[int] = None


class BlockMoveIn(StudioModel):
    from_index: int
    to_index: int


class BlockReorderIn(StudioModel):
    block_ids: List[str]


class DropIn(StudioModel):
    active_id: str
    over_id: Optional[str] = None


class SnapIn(StudioModel):
    dx: float
    dy: float


class DefaultTemplateIn(StudioModel):
    doc_type: str
    template_id: str


class CreatedOut(StudioModel):
    id: str


class SnapOut(StudioModel):
    dx: int
    dy: int
    grid_px: int = Field(ge=1)
