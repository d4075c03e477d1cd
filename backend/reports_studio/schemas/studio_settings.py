from typing import Dict

from pydantic import Field, conint

from .common import StudioModel, TrimmedStr

DEFAULT_TEMPLATE_IDS: Dict[str, str] = {
    "quotation": "quotation_default_v1",
    "receipt_full": "receipt_full_default_v1",
    "receipt_short": "receipt_short_default_v1",
}


class StudioSettings(StudioModel):
    """User-editable install settings, persisted under ``settings:v1``."""
    odoo_base_url: TrimmedStr = ""
    api_token: TrimmedStr = ""
    pdf_service_url: TrimmedStr = "/api/v1/print/pdf"
    dto_timeout_ms: conint(ge=1) = 12_000
    default_template_id_by_doc_type: Dict[str, TrimmedStr] = Field(
        default_factory=lambda: dict(DEFAULT_TEMPLATE_IDS)
    )
