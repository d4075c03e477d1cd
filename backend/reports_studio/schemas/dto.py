from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter

from .common import StudioModel

Money = float


class CompanyDTO(StudioModel):
    name: str
    address_lines: List[str] = Field(default_factory=list)
    tax_id: Optional[str] = None
    tel: Optional[str] = None
    fax: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_base64: Optional[str] = None


class PartnerDTO(StudioModel):
    name: str
    address_lines: Optional[List[str]] = None
    tax_id: Optional[str] = None
    branch: Optional[str] = None
    tel: Optional[str] = None


class DocumentMetaDTO(StudioModel):
    number: str
    date: str  # ISO date
    reference: Optional[str] = None
    salesperson: Optional[str] = None
    credit_term: Optional[str] = None
    contact: Optional[str] = None
    project: Optional[str] = None


class ItemLineDTO(StudioModel):
    no: int
    description: str
    qty: float
    unit: Optional[str] = None
    unit_price: Money
    discount: Money = 0.0
    amount: Money


class TotalsDTO(StudioModel):
    subtotal: Money
    discount: Money = 0.0
    after_discount: Money
    vat: Optional[Money] = None
    total: Money
    amount_text: str = ""
    currency: Optional[str] = "THB"


class ReceiptPaymentDTO(StudioModel):
    method: Literal["cash", "transfer", "cheque", "other"]
    bank: Optional[str] = None
    cheque_no: Optional[str] = None
    transfer_amount: Optional[Money] = None
    date: Optional[str] = None


class TRFFixedRowsDTO(StudioModel):
    transportation: Money
    gate_charge_advanced: Money
    return_container_advanced: Money


class JournalItemDTO(StudioModel):
    account_code: str
    account_name: str
    label: str
    partner_name: Optional[str] = None
    debit: Money
    credit: Money


class DocumentDTOBase(StudioModel):
    company: CompanyDTO
    partner: PartnerDTO
    document: DocumentMetaDTO
    totals: TotalsDTO


class QuotationDTO(DocumentDTOBase):
    doc_type: Literal["quotation"]
    items: List[ItemLineDTO] = Field(default_factory=list)


class ReceiptDTO(DocumentDTOBase):
    doc_type: Literal["receipt_full", "receipt_short"]
    items: List[ItemLineDTO] = Field(default_factory=list)
    payment: ReceiptPaymentDTO


class TRFReceiptDTO(DocumentDTOBase):
    doc_type: Literal["trf_receipt"]
    fixed_rows: TRFFixedRowsDTO
    journal_items: List[JournalItemDTO] = Field(default_factory=list)
    payment: Optional[ReceiptPaymentDTO] = None


AnyDocumentDTO = Annotated[
    Union[QuotationDTO, ReceiptDTO, TRFReceiptDTO],
    Field(discriminator="doc_type"),
]

document_dto_adapter = TypeAdapter(AnyDocumentDTO)
