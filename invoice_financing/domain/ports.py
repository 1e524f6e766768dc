"""Interfaces the financing run expects from storage"""

from typing import List, Optional, Protocol

from invoice_financing.domain.models import Financier, Invoice, InvoicePage, InvoiceStatus


class InvoiceSource(Protocol):
    def fetch_page(self, status: InvoiceStatus, page_size: int, page_token: Optional[int] = None) -> InvoicePage:
        """Next page of invoices in the status, starting after page_token"""
        ...


class InvoiceSink(Protocol):
    def save(self, invoice: Invoice) -> None:
        """Persist the invoice's status and financing fields"""
        ...


class FinancierSource(Protocol):
    def fetch_all(self) -> List[Financier]:
        """Full financier roster with rate configurations"""
        ...
