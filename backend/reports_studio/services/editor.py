# backend/reports_studio/services/editor.py
"""
Canvas/editor operations without the pointer layer.

A drag ends with an ``(active_id, over_id)`` pair. Palette sources are
``palette:<type>``, the empty canvas is ``canvas`` and blocks use their own id.
``resolve_drop`` turns that pair into an insert or a move that the template
repository can apply.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from reports_studio.core.errors import UnknownBlockType
from reports_studio.schemas.common import new_id
from reports_studio.schemas.template import BLOCK_MODELS

PALETTE_PREFIX = "palette:"
CANVAS_ID = "canvas"

ALL_DOC_TYPES = ("quotation", "receipt_full", "receipt_short", "trf_receipt")


@dataclass(frozen=True)
class PaletteItem:
    type: str
    label: str
    for_doc_types: Tuple[str, ...]

    def to_json_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "label": self.label, "forDocTypes": list(self.for_doc_types)}


PALETTE: List[PaletteItem] = [
    PaletteItem("header", "Header", ALL_DOC_TYPES),
    PaletteItem("title", "Title", ALL_DOC_TYPES),
    PaletteItem("customerInfo", "Customer Info", ("quotation", "receipt_full", "receipt_short")),
    PaletteItem("docMeta", "Doc Meta", ALL_DOC_TYPES),
    PaletteItem("itemsTable", "Items / Fixed Rows", ALL_DOC_TYPES),
    PaletteItem("summaryTotals", "Summary Totals", ("quotation", "receipt_full", "receipt_short")),
    PaletteItem("amountInWords", "Amount in Words", ("quotation", "receipt_full", "trf_receipt")),
    PaletteItem("paymentMethod", "Payment Method", ("receipt_full", "receipt_short", "trf_receipt")),
    PaletteItem("journalItems", "Journal Items", ("trf_receipt",)),
    PaletteItem("signature", "Signatures", ALL_DOC_TYPES),
    PaletteItem("stamp", "Stamp", ("quotation", "receipt_full")),
    PaletteItem("notes", "Notes", ("quotation", "receipt_full")),
]

DEFAULT_PROPS: Dict[str, Dict[str, Any]] = {
    "header": {"showLogo": True, "showTaxId": True, "showContactLines": True},
    "title": {"titleEn": "TITLE", "showOriginalBadge": False},
    "customerInfo": {"showAddress": True, "showTaxId": False, "showTel": False, "label": "Customer"},
    "docMeta": {"fields": ["number", "date", "reference"]},
    "itemsTable": {"compact": False, "showUnit": False, "showDiscount": True, "currency": "THB"},
    "summaryTotals": {"showVat": True, "showDiscount": True},
    "amountInWords": {"label": "Amount in words"},
    "paymentMethod": {"style": "checkboxes", "showBank": True, "showDate": True, "showChequeNo": True},
    "journalItems": {"title": "Journal Items"},
    "signature": {"leftLabel": "Customer", "rightLabel": "Authorized"},
    "notes": {"text": ""},
    "stamp": {"enabled": True, "label": "Stamp"},
}


def palette_for(doc_type: str) -> List[PaletteItem]:
    return [item for item in PALETTE if doc_type in item.for_doc_types]


def create_block(block_type: str):
    """A new block of ``block_type`` with a fresh id and the palette's default props."""
    model = BLOCK_MODELS.get(block_type)
    if model is None:
        raise UnknownBlockType(block_type)
    return model.model_validate({"id": new_id(), "type": block_type, "props": dict(DEFAULT_PROPS[block_type])})


def snap_to_grid(dx: float, dy: float, grid_px: int) -> Tuple[int, int]:
    """Round a drag delta to the nearest grid multiple, halves rounding up."""
    if grid_px <= 0:
        return int(round(dx)), int(round(dy))

    def snap(value: float) -> int:
        return int(math.floor(value / grid_px + 0.5) * grid_px)

    return snap(dx), snap(dy)


@dataclass(frozen=True)
class InsertBlock:
    block_type: str
    at_index: int


@dataclass(frozen=True)
class MoveBlock:
    from_index: int
    to_index: int


DropAction = Union[InsertBlock, MoveBlock]


def resolve_drop(active_id: str, over_id: Optional[str], blocks: Sequence[Any]) -> Optional[DropAction]:
    if not over_id:
        return None
    ids = [b.id for b in blocks]

    if active_id.startswith(PALETTE_PREFIX):
        block_type = active_id[len(PALETTE_PREFIX):]
        if block_type not in BLOCK_MODELS:
            return None
        if over_id == CANVAS_ID or over_id not in ids:
            return InsertBlock(block_type, len(ids))
        return InsertBlock(block_type, ids.index(over_id))

    if active_id == over_id or active_id not in ids or over_id not in ids:
        return None
    if blocks[ids.index(active_id)].locked:
        return None
    return MoveBlock(ids.index(active_id), ids.index(over_id))


def pair_blocks(blocks: Sequence[Any]) -> List[List[Any]]:
    """Rows for display: ``customerInfo`` directly followed by ``docMeta`` share a row."""
    rows: List[List[Any]] = []
    idx = 0
    while idx < len(blocks):
        block = blocks[idx]
        following = blocks[idx + 1] if idx + 1 < len(blocks) else None
        if block.type == "customerInfo" and following is not None and following.type == "docMeta":
            rows.append([block, following])
            idx += 2
        else:
            rows.append([block])
            idx += 1
    return rows


def apply_drop(repo, template_id: str, action: Optional[DropAction]):
    """Apply a resolved drop to the repository; ``None`` leaves the template unchanged."""
    if action is None:
        return repo.get(template_id)
    if isinstance(action, InsertBlock):
        return repo.insert_block(template_id, create_block(action.block_type), action.at_index)
    return repo.move_block(template_id, action.from_index, action.to_index)
