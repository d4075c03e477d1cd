# backend/reports_studio/services/block_renderer.py
"""
Block renderer.

Each block kind has one Jinja template under ``templates/blocks/``. Templates
branch on ``doc_type`` for their per-document layout. ``render_block`` never
raises: an unknown kind renders nothing and a failing template renders a small
placeholder, so one broken block cannot take down the whole page.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from markupsafe import Markup

from reports_studio.schemas.branding import BrandingProfile
from reports_studio.schemas.dto import AnyDocumentDTO
from reports_studio.schemas.template import DEFAULT_BORDER_COLOR, BlockStyle, TemplateTheme
from reports_studio.services.templating import jinja_env

logger = logging.getLogger(__name__)

BLOCK_TEMPLATES: Dict[str, str] = {
    "header": "blocks/header.html",
    "title": "blocks/title.html",
    "customerInfo": "blocks/customer_info.html",
    "docMeta": "blocks/doc_meta.html",
    "itemsTable": "blocks/items_table.html",
    "summaryTotals": "blocks/summary_totals.html",
    "amountInWords": "blocks/amount_in_words.html",
    "notes": "blocks/notes.html",
    "signature": "blocks/signature.html",
    "stamp": "blocks/stamp.html",
    "paymentMethod": "blocks/payment_method.html",
    "journalItems": "blocks/journal_items.html",
}

DISPLAY_NAMES: Dict[str, str] = {
    "header": "Header",
    "title": "Title",
    "customerInfo": "Customer Info",
    "docMeta": "Doc Meta",
    "itemsTable": "Items Table",
    "summaryTotals": "Summary Totals",
    "amountInWords": "Amount in Words",
    "notes": "Notes",
    "signature": "Signature",
    "stamp": "Stamp",
    "paymentMethod": "Payment Method",
    "journalItems": "Journal Items",
}

FONT_WEIGHTS = {"normal": "400", "medium": "500", "semibold": "600", "bold": "700"}


@dataclass
class BlockViewContext:
    branding: BrandingProfile
    dto: AnyDocumentDTO
    theme: TemplateTheme


def block_display_name(block_type: str) -> str:
    return DISPLAY_NAMES.get(block_type, block_type)


def frame_style(style: Optional[BlockStyle], theme: TemplateTheme, branding: BrandingProfile) -> str:
    """Inline CSS for the wrapper applied around every block."""
    style = style or BlockStyle()
    rules: List[str] = []
    if style.padding_px is not None:
        rules.append(f"padding: {style.padding_px}px")
    if style.margin_px is not None:
        rules.append(f"margin: {style.margin_px}px")
    if style.background_color:
        rules.append(f"background-color: {style.background_color}")
    if style.border is not None and style.border.enabled:
        rules.append(f"border: {style.border.width_px}px solid {style.border.color or DEFAULT_BORDER_COLOR}")
    if style.border_radius_px is not None:
        rules.append(f"border-radius: {style.border_radius_px}px")
    if style.text_color:
        rules.append(f"color: {style.text_color}")
    if style.text_align:
        rules.append(f"text-align: {style.text_align}")
    rules.append(f"font-family: {style.font_family or theme.font_family or branding.default_font}")
    if style.font_size_px is not None:
        rules.append(f"font-size: {style.font_size_px}px")
    if style.font_weight:
        rules.append(f"font-weight: {FONT_WEIGHTS[style.font_weight]}")
    return "; ".join(rules)


def render_block(block, ctx: BlockViewContext) -> Markup:
    block_type = getattr(block, "type", None)
    template_name = BLOCK_TEMPLATES.get(block_type)
    if template_name is None:
        logger.warning(f"No renderer for block type {block_type!r}; rendering nothing.")
        return Markup("")

    try:
        inner = jinja_env.get_template(template_name).render(
            block=block,
            props=block.props,
            dto=ctx.dto,
            doc_type=ctx.dto.doc_type,
            theme=ctx.theme,
            branding=ctx.branding,
        )
        frame = frame_style(block.style, ctx.theme, ctx.branding)
    except Exception:
        logger.exception(f"Block {getattr(block, 'id', '?')} ({block_type}) failed to render")
        return Markup(
            jinja_env.get_template("blocks/_failed.html").render(block=block, name=block_display_name(block_type))
        )

    return Markup(
        jinja_env.get_template("blocks/_frame.html").render(block=block, frame_style=frame, content=Markup(inner))
    )
