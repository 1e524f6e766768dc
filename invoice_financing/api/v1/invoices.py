"""GET /v1/invoices - read invoices and their financing results"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from invoice_financing.api.v1.schemas import InvoiceListResponse, InvoiceResponse
from invoice_financing.domain.models import InvoiceStatus
from invoice_financing.infrastructure.database.session import get_db
from invoice_financing.infrastructure.database.repositories import InvoiceRepository

router = APIRouter()


@router.get("/invoices", response_model=InvoiceListResponse)
def list_invoices(
    status: Optional[InvoiceStatus] = Query(None, description="Filter by financing status"),
    limit: int = Query(50, gt=0, le=500),
    db: Session = Depends(get_db),
):
    """
    List invoices oldest first.

    Returns:
        Invoices plus the invoice count per status across the whole table
    """
    invoice_repo = InvoiceRepository(db)
    invoices = invoice_repo.list_invoices(status=status, limit=limit)

    return InvoiceListResponse(
        invoices=[InvoiceResponse.from_invoice(i) for i in invoices],
        counts=invoice_repo.count_by_status(),
    )


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: int, db: Session = Depends(get_db)):
    """Retrieve one invoice with its financing terms"""
    invoice = InvoiceRepository(db).get_invoice(invoice_id)

    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return InvoiceResponse.from_invoice(invoice)
