from .common import DocType, StudioModel, EPOCH_ISO, new_id, now_iso
from .template import (
    Template, TemplateTheme, TemplatePage, ThermalPage, CanvasSize, PageMode,
    BlockStyle, BlockBorder, AnyBlock, BLOCK_MODELS, BLOCK_TYPES,
)
from .branding import BrandingProfile, DEFAULT_BRANDING, DEFAULT_FONT
from .studio_settings import StudioSettings, DEFAULT_TEMPLATE_IDS
from .dto import (
    AnyDocumentDTO, QuotationDTO, ReceiptDTO, TRFReceiptDTO, ItemLineDTO, TotalsDTO,
    CompanyDTO, PartnerDTO, DocumentMetaDTO, ReceiptPaymentDTO, TRFFixedRowsDTO, JournalItemDTO,
    document_dto_adapter,
)
from .validation import validate, validate_template, validate_branding, validate_settings
from .requests import (
    RenameIn, BlockCreateIn, BlockMoveIn, BlockReorderIn, DropIn, SnapIn, SnapOut,
    DefaultTemplateIn, CreatedOut,
)
