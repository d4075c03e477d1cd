# backend/reports_studio/db/default_templates.py
"""Built-in templates shipped with each release. Refreshed on every reconciliation pass."""
from typing import Any, Dict, List

from reports_studio.schemas.branding import DEFAULT_FONT
from reports_studio.schemas.common import EPOCH_ISO
from reports_studio.schemas.template import Template
from reports_studio.schemas.validation import validate_template

MONO_FONT = (
    'ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "Liberation Mono", "Courier New", monospace'
)

BASE_PAGE: Dict[str, Any] = {
    "size": "A4",
    "marginMm": 10,
    "gridPx": 8,
    "canvasPx": {"width": 794, "height": 1123},
}

BASE_THEME: Dict[str, Any] = {
    "primaryColor": "#26D6F0",
    "accentColor": "#0B6EA6",
    "headerBarColor": "#26D6F0",
    "tableHeaderBgColor": "#26D6F0",
    "totalsBarBgColor": "#111111",
    "totalsBarTextColor": "#ffffff",
    "fontFamily": DEFAULT_FONT,
}

AMOUNT_LABEL = "จำนวนเงิน (ตัวอักษร) / Amount"


def _default_template(template_id: str, name: str, doc_type: str, theme: Dict[str, Any], blocks: List[Dict[str, Any]]) -> Template:
    return validate_template({
        "schemaVersion": 1,
        "id": template_id,
        "name": name,
        "docType": doc_type,
        "published": True,
        "isDefault": True,
        "theme": {**BASE_THEME, **theme},
        "page": dict(BASE_PAGE),
        # Block ids are "<template id>.b<n>", identical on every release.
        "blocks": [{"id": f"{template_id}.b{idx}", **block} for idx, block in enumerate(blocks, start=1)],
        "updatedAt": EPOCH_ISO,
    })


def _block(block_type: str, **props: Any) -> Dict[str, Any]:
    return {"type": block_type, "props": props}


DEFAULT_TEMPLATES: List[Template] = [
    _default_template(
        "quotation_default_v1",
        "Quotation (Default v1)",
        "quotation",
        {"headerBarColor": "#26D6F0", "tableHeaderBgColor": "#111111"},
        [
            _block("header", showLogo=True, showTaxId=True, showContactLines=True),
            _block("title", titleEn="QUOTATION", titleTh="ใบเสนอราคา",
                   subtitleRight="ต้นฉบับ / Original", showOriginalBadge=True),
            _block("customerInfo", showAddress=True, showTaxId=True, showTel=False, label="Customer / ลูกค้า"),
            _block("docMeta", fields=["number", "date", "salesperson", "creditTerm", "contact", "project", "reference"]),
            _block("itemsTable", compact=False, showUnit=True, showDiscount=True, currency="THB"),
            _block("summaryTotals", showVat=True, showDiscount=True),
            _block("amountInWords", label=AMOUNT_LABEL),
            _block("signature", leftLabel="ผู้รับ / Customer Signature",
                   rightLabel="ผู้มีอำนาจลงนาม / Authorized Signature"),
        ],
    ),
    _default_template(
        "receipt_full_default_v1",
        "Tax Invoice (Full) (Default v1)",
        "receipt_full",
        {"headerBarColor": "#111111", "tableHeaderBgColor": "#111111"},
        [
            _block("header", showLogo=True, showTaxId=True, showContactLines=True),
            _block("title", titleEn="TAX INVOICE", titleTh="ใบกำกับภาษี", showOriginalBadge=False),
            _block("customerInfo", showAddress=True, showTaxId=True, showTel=True, label="Customer / ลูกค้า"),
            _block("docMeta", fields=["number", "date", "reference"]),
            _block("itemsTable", compact=False, showUnit=True, showDiscount=False, currency="THB"),
            _block("summaryTotals", showVat=True, showDiscount=True),
            _block("amountInWords", label=AMOUNT_LABEL),
            _block("paymentMethod", style="checkboxes", showBank=True, showDate=True, showChequeNo=True),
            _block("signature", leftLabel="ผู้รับ / Receiver", rightLabel="ผู้มีอำนาจลงนาม / Authorized"),
        ],
    ),
    _default_template(
        "receipt_short_default_v1",
        "Tax Invoice (Short) (Default v1)",
        "receipt_short",
        {"headerBarColor": "#111111", "tableHeaderBgColor": "#111111", "fontFamily": MONO_FONT},
        [
            _block("header", showLogo=False, showTaxId=False, showContactLines=True),
            _block("title", titleEn="TAX INVOICE", titleTh="ใบกำกับภาษีอย่างย่อ", showOriginalBadge=False),
            _block("docMeta", fields=["number", "date"]),
            _block("itemsTable", compact=True, showUnit=False, showDiscount=False, currency="THB"),
            _block("summaryTotals", showVat=False, showDiscount=False),
        ],
    ),
    _default_template(
        "trf_receipt_default_v1",
        "Receipt (Transport) (Default v1)",
        "trf_receipt",
        {},
        [
            _block("header", showLogo=True, showTaxId=True, showContactLines=True),
            _block("title", titleEn="RECEIPT", titleTh="ใบเสร็จรับเงิน", showOriginalBadge=False),
            _block("docMeta", fields=["number", "date", "reference"]),
            # Fixed rows are rendered by the items table for trf_receipt documents.
            _block("itemsTable", compact=False, showUnit=False, showDiscount=False, currency="THB"),
            _block("amountInWords", label="BAHT in words / จำนวนเงิน (ตัวอักษร)"),
            _block("paymentMethod", style="checkboxes", showBank=True, showDate=True, showChequeNo=True),
            _block("journalItems", title="Journal Items"),
            _block("signature", leftLabel="Payer", rightLabel="Authorized"),
        ],
    ),
]


def default_template_ids() -> List[str]:
    return [t.id for t in DEFAULT_TEMPLATES]
