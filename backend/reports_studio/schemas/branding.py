from typing import List, Optional

from pydantic import Field, constr

from .common import Color, StudioModel, TrimmedStr

DEFAULT_FONT = (
    "system-ui, -apple-system, BlinkMacSystemFont, 'SF Pro Text', 'Segoe UI', 'Inter', "
    "'Noto Sans Thai', 'Noto Sans Thai UI', Tahoma, sans-serif"
)


class BrandingProfile(StudioModel):
    company_name: constr(strip_whitespace=True, min_length=1)
    head_office_label: TrimmedStr = "(Head Office)"
    logo_base64: Optional[str] = None
    logo_file_name: Optional[str] = None
    address_lines: List[TrimmedStr] = Field(default_factory=list)
    tel: Optional[TrimmedStr] = None
    fax: Optional[TrimmedStr] = None
    email: Optional[TrimmedStr] = None
    website: Optional[TrimmedStr] = None
    tax_id: Optional[TrimmedStr] = None
    default_font: constr(strip_whitespace=True, min_length=1) = DEFAULT_FONT
    default_primary_color: Color = "#26D6F0"
    default_accent_color: Color = "#0B6EA6"
    stamp_base64: Optional[str] = None
    stamp_file_name: Optional[str] = None


DEFAULT_BRANDING = BrandingProfile(
    company_name="ERPTH Co., Ltd.",
    head_office_label="(Head Office)",
    address_lines=["123 ถนนสุขุมวิท", "แขวง/เขต ...", "กรุงเทพฯ 10110"],
    tel="02-000-0000",
    email="info@example.com",
    website="www.example.com",
    tax_id="0105559999999",
    default_primary_color="#26D6F0",
    default_accent_color="#0B6EA6",
)
