"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import Dict, List, Optional

from invoice_financing.domain.models import FinancingRunSummary, Invoice, InvoiceStatus


class FinancingRunRequest(BaseModel):
    """Request body for POST /v1/financing/run"""

    batch_size: Optional[int] = Field(None, gt=0, description="Invoices per page (default from settings)")
    financing_date: Optional[date] = Field(None, description="Financing date (default: today)")


class FinancingRunResponse(BaseModel):
    """Response for POST /v1/financing/run"""

    financing_date: date
    pages: int
    processed: int
    outcomes: Dict[InvoiceStatus, int]
    financed_value_cents: int
    early_payment_value_cents: int

    @classmethod
    def from_summary(cls, summary: FinancingRunSummary) -> "FinancingRunResponse":
        return cls(
            financing_date=summary.financing_date,
            pages=summary.pages,
            processed=summary.processed,
            outcomes=dict(summary.outcomes),
            financed_value_cents=summary.financed_value_cents,
            early_payment_value_cents=summary.early_payment_value_cents,
        )


class InvoiceResponse(BaseModel):
    """Invoice with its financing result"""

    invoice_id: int
    issuer: str
    obligor: Optional[str] = None
    value_cents: int
    maturity_date: date
    status: InvoiceStatus
    financier: Optional[str] = None
    financing_date: Optional[date] = None
    financing_term_days: Optional[int] = None
    financing_rate_bps: Optional[int] = None
    early_payment_value_cents: Optional[int] = None

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceResponse":
        return cls(
            invoice_id=invoice.id,
            issuer=invoice.issuer.name,
            obligor=invoice.obligor.name if invoice.obligor else None,
            value_cents=invoice.value_cents,
            maturity_date=invoice.maturity_date,
            status=invoice.status,
            financier=invoice.financier.name if invoice.financier else None,
            financing_date=invoice.financing_date,
            financing_term_days=invoice.financing_term_days,
            financing_rate_bps=invoice.financing_rate_bps,
            early_payment_value_cents=invoice.early_payment_value_cents,
        )


class InvoiceListResponse(BaseModel):
    """Response for GET /v1/invoices"""

    invoices: List[InvoiceResponse]
    counts: Dict[InvoiceStatus, int]
