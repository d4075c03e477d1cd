# backend/reports_studio/services/document_provider.py
"""
Document DTO providers.

``SampleDocumentProvider`` returns deterministic demo documents so templates can
be designed without an ERP connection. ``HttpDocumentProvider`` fetches the
real document from the ERP reporting API.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

import httpx
import pydantic

from reports_studio.core.errors import ConfigurationError, FetchError, UnsupportedDocType
from reports_studio.core.money import round_money, thai_baht_text
from reports_studio.schemas.dto import AnyDocumentDTO, ItemLineDTO, TotalsDTO, document_dto_adapter

logger = logging.getLogger(__name__)

VAT_RATE = 0.07
DEFAULT_TIMEOUT_MS = 12_000
SAMPLE_DATE = "2025-12-20"

ENDPOINT_PREFIXES = {
    "quotation": "/api/reports/quotation",
    "receipt_full": "/api/reports/receipt/full",
    "receipt_short": "/api/reports/receipt/short",
    "trf_receipt": "/api/reports/trf",
}


class DocumentProvider(Protocol):
    async def get_document_dto(self, doc_type: str, record_id: str) -> AnyDocumentDTO:
        ...


# --- Sample data ---
def sample_company() -> Dict[str, Any]:
    return {
        "name": "ERPTH Co., Ltd.",
        "addressLines": ["123 ถนนสุขุมวิท", "แขวง/เขต ...", "กรุงเทพฯ 10110"],
        "taxId": "0105559999999",
        "tel": "02-000-0000",
        "email": "info@example.com",
        "website": "www.example.com",
    }


def sample_partner() -> Dict[str, Any]:
    return {
        "name": "SME MOVE (Thailand) Co., Ltd.",
        "addressLines": ["88/8 ถนนสุขุมวิท", "แขวง/เขต ...", "กรุงเทพฯ 10200"],
        "taxId": "0105551111111",
        "branch": "00000",
        "tel": "081-234-5678",
    }


def sample_items(count: int) -> List[ItemLineDTO]:
    items = []
    for i in range(count):
        qty = (1, 2, 5)[i % 3]
        unit_price = 1500 + i * 250
        discount = 100 if i % 4 == 0 else 0
        items.append(ItemLineDTO(
            no=i + 1,
            description=f"Service / Product line item {i + 1} - รายการ {i + 1}",
            qty=qty,
            unit="EA",
            unit_price=round_money(unit_price),
            discount=round_money(discount),
            amount=round_money(qty * unit_price - discount),
        ))
    return items


def calc_totals(items: List[ItemLineDTO], include_vat: bool = True, currency: str = "THB") -> TotalsDTO:
    """Sum the lines; VAT is 7% of the discounted subtotal."""
    subtotal = round_money(sum(item.qty * item.unit_price for item in items))
    discount = round_money(sum(item.discount for item in items))
    after_discount = round_money(subtotal - discount)
    vat = round_money(after_discount * VAT_RATE) if include_vat else None
    total = round_money(after_discount + (vat or 0))
    return TotalsDTO(
        subtotal=subtotal,
        discount=discount,
        after_discount=after_discount,
        vat=vat,
        total=total,
        amount_text=thai_baht_text(total),
        currency=currency,
    )


def sample_journal_items() -> List[Dict[str, Any]]:
    return [
        {"accountCode": "110100", "accountName": "Cash", "label": "Cash received", "debit": 5000, "credit": 0},
        {"accountCode": "410000", "accountName": "Service Revenue", "label": "Transportation", "debit": 0, "credit": 3000},
        {"accountCode": "410100", "accountName": "Gate Charge", "label": "Gate Charge (Advanced)", "debit": 0, "credit": 1200},
        {"accountCode": "410200", "accountName": "Return Container", "label": "Return Container (Advanced)", "debit": 0, "credit": 800},
    ]


class SampleDocumentProvider:
    """Deterministic documents; ``record_id`` is accepted but does not change the output."""

    async def get_document_dto(self, doc_type: str, record_id: str = "sample") -> AnyDocumentDTO:
        return self.build(doc_type)

    def build(self, doc_type: str) -> AnyDocumentDTO:
        if doc_type == "quotation":
            items = sample_items(8)
            payload = {
                "docType": doc_type,
                "company": sample_company(),
                "partner": sample_partner(),
                "document": {
                    "number": "QT-2025-0001",
                    "date": SAMPLE_DATE,
                    "reference": "RFQ-7788",
                    "salesperson": "Somchai",
                    "creditTerm": "30 Days",
                    "contact": "Kob",
                    "project": "SME MOVE - Relocation",
                },
                "items": items,
                "totals": calc_totals(items),
            }
        elif doc_type == "receipt_full":
            items = sample_items(5)
            totals = calc_totals(items)
            payload = {
                "docType": doc_type,
                "company": sample_company(),
                "partner": sample_partner(),
                "document": {"number": "RC-2025-0100", "date": SAMPLE_DATE, "reference": "INV-2025-0550"},
                "items": items,
                "totals": totals,
                "payment": {
                    "method": "transfer",
                    "bank": "Bangkok Bank",
                    "transferAmount": totals.total,
                    "date": SAMPLE_DATE,
                },
            }
        elif doc_type == "receipt_short":
            items = sample_items(3)
            payload = {
                "docType": doc_type,
                "company": sample_company(),
                "partner": {"name": "Walk-in Customer", "tel": "08x-xxx-xxxx"},
                "document": {"number": "RC-2025-0101", "date": SAMPLE_DATE},
                "items": items,
                "totals": calc_totals(items, include_vat=False),
                "payment": {"method": "cash", "date": SAMPLE_DATE},
            }
        elif doc_type == "trf_receipt":
            fixed_rows = {"transportation": 3000, "gateChargeAdvanced": 1200, "returnContainerAdvanced": 800}
            total = round_money(sum(fixed_rows.values()))
            payload = {
                "docType": doc_type,
                "company": sample_company(),
                "partner": sample_partner(),
                "document": {"number": "RC-2025-TR-0009", "date": SAMPLE_DATE, "reference": "JOB-TR-7788"},
                "fixedRows": fixed_rows,
                "journalItems": sample_journal_items(),
                "payment": {"method": "cheque", "bank": "KBank", "chequeNo": "123456", "date": SAMPLE_DATE},
                "totals": {
                    "subtotal": total,
                    "discount": 0,
                    "afterDiscount": total,
                    "total": total,
                    "amountText": thai_baht_text(total),
                    "currency": "THB",
                },
            }
        else:
            raise UnsupportedDocType(doc_type)
        return document_dto_adapter.validate_python(payload)


# --- Remote provider ---
def endpoint_for(doc_type: str, record_id: str) -> str:
    prefix = ENDPOINT_PREFIXES.get(doc_type)
    if prefix is None:
        raise UnsupportedDocType(doc_type)
    return f"{prefix}/{quote(str(record_id), safe='')}"


class HttpDocumentProvider:
    """Fetches document DTOs from ``{base_url}/api/reports/...`` with a bounded timeout."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.token = (token or "").strip() or None
        self.timeout_ms = timeout_ms or DEFAULT_TIMEOUT_MS
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def get_document_dto(self, doc_type: str, record_id: str) -> AnyDocumentDTO:
        if not self.base_url:
            raise ConfigurationError("Missing Odoo base URL (configure in Settings).")

        url = f"{self.base_url}{endpoint_for(doc_type, record_id)}"
        timeout_s = self.timeout_ms / 1000
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout_s) as client:
                response = await asyncio.wait_for(client.get(url, headers=self._headers()), timeout=timeout_s)
        except asyncio.TimeoutError as exc:
            logger.warning(f"DTO fetch for {doc_type}/{record_id} timed out after {self.timeout_ms} ms")
            raise FetchError(f"DTO fetch timed out after {self.timeout_ms} ms") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"DTO fetch for {doc_type}/{record_id} failed: {exc}")
            raise FetchError(f"DTO fetch failed: {exc}") from exc

        if not response.is_success:
            text = response.text or response.reason_phrase
            logger.warning(f"DTO fetch for {doc_type}/{record_id} returned {response.status_code}")
            raise FetchError(f"DTO fetch failed ({response.status_code}): {text}", status_code=response.status_code)

        try:
            return document_dto_adapter.validate_python(response.json())
        except (ValueError, pydantic.ValidationError) as exc:
            raise FetchError(f"DTO payload is not a valid document: {exc}") from exc


def provider_from_settings(studio_settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> DocumentProvider:
    """Sample data until an ERP base URL is configured."""
    if not studio_settings.odoo_base_url:
        return SampleDocumentProvider()
    return HttpDocumentProvider(
        base_url=studio_settings.odoo_base_url,
        token=studio_settings.api_token,
        timeout_ms=studio_settings.dto_timeout_ms,
        transport=transport,
    )
