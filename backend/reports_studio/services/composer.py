# backend/reports_studio/services/composer.py
"""One composition routine for the preview, print, editor canvas and PDF output."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from markupsafe import Markup

from reports_studio.schemas.branding import BrandingProfile
from reports_studio.schemas.dto import AnyDocumentDTO
from reports_studio.schemas.template import PageMode, Template
from reports_studio.services.block_renderer import BlockViewContext, block_display_name, render_block
from reports_studio.services.editor import pair_blocks
from reports_studio.services.templating import jinja_env

logger = logging.getLogger(__name__)

MODES = ("preview", "print", "editor")

A4_PADDING_PX = 24
A4_GUIDE_INSET_PX = 38
DEFAULT_THERMAL_WIDTH_MM = 80.0
DEFAULT_THERMAL_MARGIN_MM = 3.0


@dataclass(frozen=True)
class PageGeometry:
    thermal: bool
    width: str
    min_height: Optional[str]
    padding: str
    guide_inset: str
    page_rule: str


@dataclass
class RenderedCell:
    block: object
    name: str
    html: Markup


def is_thermal(template: Template, dto: Optional[AnyDocumentDTO] = None) -> bool:
    doc_type = dto.doc_type if dto is not None else template.doc_type.value
    return doc_type == "receipt_short" or template.page.mode == PageMode.THERMAL


def _mm(value: float) -> str:
    return f"{value:g}mm"


def page_geometry(template: Template, dto: Optional[AnyDocumentDTO] = None) -> PageGeometry:
    page = template.page
    if is_thermal(template, dto):
        width_mm = page.thermal_mm.width_mm if page.thermal_mm else DEFAULT_THERMAL_WIDTH_MM
        margin_mm = page.thermal_mm.margin_mm if page.thermal_mm else DEFAULT_THERMAL_MARGIN_MM
        return PageGeometry(
            thermal=True,
            width=_mm(width_mm),
            min_height=None,
            padding=_mm(margin_mm),
            guide_inset=_mm(margin_mm),
            page_rule=f"@page {{ size: {_mm(width_mm)} auto; margin: {_mm(margin_mm)}; }}",
        )
    return PageGeometry(
        thermal=False,
        width=f"{page.canvas_px.width}px",
        min_height=f"{page.canvas_px.height}px",
        padding=f"{A4_PADDING_PX}px",
        guide_inset=f"{A4_GUIDE_INSET_PX}px",
        page_rule=f"@page {{ size: A4; margin: {_mm(page.margin_mm)}; }}",
    )


def compose_document(
    template: Template,
    dto: AnyDocumentDTO,
    branding: BrandingProfile,
    mode: str = "preview",
    show_guides: bool = True,
    selected_block_id: Optional[str] = None,
) -> Markup:
    """Render the page subtree (``.rs-page``) for ``template`` filled with ``dto``."""
    if mode not in MODES:
        raise ValueError(f"Unknown render mode {mode!r}")

    ctx = BlockViewContext(branding=branding, dto=dto, theme=template.theme)
    rows: List[List[RenderedCell]] = []
    for row in pair_blocks(template.blocks):
        rows.append([
            RenderedCell(block=block, name=block_display_name(block.type), html=render_block(block, ctx))
            for block in row
        ])

    geometry = page_geometry(template, dto)
    return Markup(jinja_env.get_template("document.html").render(
        template=template,
        geometry=geometry,
        rows=rows,
        font_family=template.theme.font_family or branding.default_font,
        show_guides=show_guides and mode != "print",
        editor=mode == "editor",
        selected_block_id=selected_block_id,
    ))
