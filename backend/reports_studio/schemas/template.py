from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import Field, conint, confloat, model_validator

from .common import Color, DocType, NonEmptyStr, StudioModel

DEFAULT_BORDER_COLOR = "#CBD5E1"


class PageMode(str, Enum):
    A4 = "A4"
    THERMAL = "THERMAL"


# --- Theme & page ---
class TemplateTheme(StudioModel):
    primary_color: Color
    accent_color: Color
    header_bar_color: Color
    table_header_bg_color: Color
    totals_bar_bg_color: Color = "#111111"
    totals_bar_text_color: Color = "#ffffff"
    font_family: NonEmptyStr


class CanvasSize(StudioModel):
    width: conint(ge=1) = 794
    height: conint(ge=1) = 1123


class ThermalPage(StudioModel):
    width_mm: confloat(ge=30, le=120) = 80.0
    margin_mm: confloat(ge=0, le=10) = 3.0


class TemplatePage(StudioModel):
    size: Literal["A4"] = "A4"
    margin_mm: confloat(ge=0) = 10.0
    grid_px: conint(ge=4, le=32) = 8
    canvas_px: CanvasSize = Field(default_factory=CanvasSize)
    mode: Optional[PageMode] = None
    thermal_mm: Optional[ThermalPage] = None


# --- Common block parts ---
class BlockBorder(StudioModel):
    enabled: bool = False
    width_px: conint(ge=0) = 1
    color: Color = DEFAULT_BORDER_COLOR


class BlockStyle(StudioModel):
    padding_px: Optional[conint(ge=0)] = None
    margin_px: Optional[conint(ge=0)] = None
    border: Optional[BlockBorder] = None
    background_color: Optional[Color] = None
    text_color: Optional[Color] = None
    text_align: Optional[Literal["left", "center", "right"]] = None
    font_family: Optional[NonEmptyStr] = None
    font_size_px: Optional[conint(ge=8, le=72)] = None
    font_weight: Optional[Literal["normal", "medium", "semibold", "bold"]] = None
    border_radius_px: Optional[conint(ge=0, le=48)] = None


class BlockBase(StudioModel):
    id: NonEmptyStr
    locked: Optional[bool] = None
    style: Optional[BlockStyle] = None
    visibility: Optional[Dict[str, bool]] = None


# --- Per-kind props ---
class HeaderProps(StudioModel):
    show_logo: bool = True
    show_tax_id: bool = True
    show_contact_lines: bool = True


class TitleProps(StudioModel):
    title_en: NonEmptyStr
    title_th: Optional[str] = None
    subtitle_right: Optional[str] = None
    show_original_badge: Optional[bool] = None


class CustomerInfoProps(StudioModel):
    show_address: bool = True
    show_tax_id: bool = False
    show_tel: bool = False
    label: Optional[str] = None


DocMetaField = Literal["number", "date", "reference", "salesperson", "creditTerm", "contact", "project"]


class DocMetaProps(StudioModel):
    fields: List[DocMetaField]


class ItemsTableProps(StudioModel):
    compact: Optional[bool] = None
    show_unit: Optional[bool] = None
    show_discount: Optional[bool] = None
    currency: Optional[str] = None


class SummaryTotalsProps(StudioModel):
    show_vat: Optional[bool] = None
    show_discount: Optional[bool] = None


class AmountInWordsProps(StudioModel):
    label: Optional[str] = None


class NotesProps(StudioModel):
    text: str = ""


class SignatureProps(StudioModel):
    left_label: NonEmptyStr
    right_label: NonEmptyStr
    bottom_bar_enabled: Optional[bool] = None
    bottom_bar_color: Optional[Color] = None
    bottom_bar_height_px: Optional[conint(ge=0, le=40)] = None


class StampProps(StudioModel):
    enabled: bool = True
    label: Optional[str] = None


class PaymentMethodProps(StudioModel):
    style: Literal["checkboxes", "simple"] = "checkboxes"
    show_bank: bool = True
    show_date: bool = True
    show_cheque_no: bool = True


class JournalItemsProps(StudioModel):
    title: Optional[str] = None


# --- Block kinds ---
class HeaderBlock(BlockBase):
    type: Literal["header"]
    props: HeaderProps = Field(default_factory=HeaderProps)


class TitleBlock(BlockBase):
    type: Literal["title"]
    props: TitleProps


class CustomerInfoBlock(BlockBase):
    type: Literal["customerInfo"]
    props: CustomerInfoProps = Field(default_factory=CustomerInfoProps)


class DocMetaBlock(BlockBase):
    type: Literal["docMeta"]
    props: DocMetaProps


class ItemsTableBlock(BlockBase):
    type: Literal["itemsTable"]
    props: ItemsTableProps = Field(default_factory=ItemsTableProps)


class SummaryTotalsBlock(BlockBase):
    type: Literal["summaryTotals"]
    props: SummaryTotalsProps = Field(default_factory=SummaryTotalsProps)


class AmountInWordsBlock(BlockBase):
    type: Literal["amountInWords"]
    props: AmountInWordsProps = Field(default_factory=AmountInWordsProps)


class NotesBlock(BlockBase):
    type: Literal["notes"]
    props: NotesProps = Field(default_factory=NotesProps)


class SignatureBlock(BlockBase):
    type: Literal["signature"]
    props: SignatureProps


class StampBlock(BlockBase):
    type: Literal["stamp"]
    props: StampProps = Field(default_factory=StampProps)


class PaymentMethodBlock(BlockBase):
    type: Literal["paymentMethod"]
    props: PaymentMethodProps = Field(default_factory=PaymentMethodProps)


class JournalItemsBlock(BlockBase):
    type: Literal["journalItems"]
    props: JournalItemsProps = Field(default_factory=JournalItemsProps)


BLOCK_MODELS = {
    "header": HeaderBlock,
    "title": TitleBlock,
    "customerInfo": CustomerInfoBlock,
    "docMeta": DocMetaBlock,
    "itemsTable": ItemsTableBlock,
    "summaryTotals": SummaryTotalsBlock,
    "amountInWords": AmountInWordsBlock,
    "notes": NotesBlock,
    "signature": SignatureBlock,
    "stamp": StampBlock,
    "paymentMethod": PaymentMethodBlock,
    "journalItems": JournalItemsBlock,
}

BLOCK_TYPES = tuple(BLOCK_MODELS)

AnyBlock = Annotated[
    Union[
        HeaderBlock,
        TitleBlock,
        CustomerInfoBlock,
        DocMetaBlock,
        ItemsTableBlock,
        SummaryTotalsBlock,
        AmountInWordsBlock,
        NotesBlock,
        SignatureBlock,
        StampBlock,
        PaymentMethodBlock,
        JournalItemsBlock,
    ],
    Field(discriminator="type"),
]


# --- Template ---
class Template(StudioModel):
    schema_version: Literal[1] = 1
    id: NonEmptyStr
    name: NonEmptyStr
    doc_type: DocType
    published: bool = False
    is_default: Optional[bool] = None
    theme: TemplateTheme
    page: TemplatePage = Field(default_factory=TemplatePage)
    blocks: List[AnyBlock] = Field(default_factory=list)
    updated_at: NonEmptyStr

    @model_validator(mode="after")
    def check_unique_block_ids(self) -> "Template":
        seen = set()
        for block in self.blocks:
            if block.id in seen:
                raise ValueError(f"Duplicate block id {block.id!r}")
            seen.add(block.id)
        return self

    @property
    def read_only(self) -> bool:
        return bool(self.is_default)

    def block_index(self, block_id: str) -> int:
        for index, block in enumerate(self.blocks):
            if block.id == block_id:
                return index
        return -1
