"""Data access layer for financing entities"""

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from invoice_financing.domain.exceptions import DuplicateNameError, InvoiceNotFoundError
from invoice_financing.domain.models import (
    Financier,
    Invoice,
    InvoicePage,
    InvoiceStatus,
    Issuer,
    Obligor,
    RateConfiguration,
    require_non_negative,
)
from invoice_financing.infrastructure.database.models import (
    FinancierRecord,
    InvoiceRecord,
    IssuerRecord,
    ObligorRecord,
    RateConfigurationRecord,
)


def to_issuer(record: IssuerRecord) -> Issuer:
    return Issuer(id=record.id, name=record.name, max_rate_bps=record.max_rate_bps)


def to_obligor(record: ObligorRecord) -> Obligor:
    return Obligor(id=record.id, name=record.name)


def to_financier(record: FinancierRecord) -> Financier:
    configurations = sorted(record.rate_configurations, key=lambda c: c.issuer_id)
    return Financier(
        id=record.id,
        name=record.name,
        minimum_term_days=record.minimum_term_days,
        rate_configurations=tuple(
            RateConfiguration(issuer_id=c.issuer_id, annual_rate_bps=c.annual_rate_bps)
            for c in configurations
        ),
    )


def to_invoice(record: InvoiceRecord) -> Invoice:
    return Invoice(
        id=record.id,
        issuer=to_issuer(record.issuer),
        obligor=to_obligor(record.obligor) if record.obligor else None,
        value_cents=record.value_cents,
        maturity_date=record.maturity_date,
        status=record.status,
        financier=to_financier(record.financier) if record.financier else None,
        financing_date=record.financing_date,
        financing_term_days=record.financing_term_days,
        financing_rate_bps=record.financing_rate_bps,
        early_payment_value_cents=record.early_payment_value_cents,
    )


class IssuerRepository:
    """Repository for issuers (creditors)"""

    def __init__(self, db: Session):
        self.db = db

    def create_issuer(self, name: str, max_rate_bps: int) -> Issuer:
        """Persist a new issuer; names are unique"""
        require_non_negative("Issuer", "max_rate_bps", max_rate_bps)
        if self.get_by_name(name) is not None:
            raise DuplicateNameError(f"Duplicate issuer name: {name!r}")

        record = IssuerRecord(name=name, max_rate_bps=max_rate_bps)
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return to_issuer(record)

    def get_by_name(self, name: str) -> Optional[Issuer]:
        record = self.db.query(IssuerRecord).filter(IssuerRecord.name == name).first()
        return to_issuer(record) if record else None


class ObligorRepository:
    """Repository for obligors (debtors)"""

    def __init__(self, db: Session):
        self.db = db

    def create_obligor(self, name: str) -> Obligor:
        if self.get_by_name(name) is not None:
            raise DuplicateNameError(f"Duplicate obligor name: {name!r}")

        record = ObligorRecord(name=name)
        self.db.add(record)
        self.db.flush()
        return to_obligor(record)

    def get_by_name(self, name: str) -> Optional[Obligor]:
        record = self.db.query(ObligorRecord).filter(ObligorRecord.name == name).first()
        return to_obligor(record) if record else None


class FinancierRepository:
    """Repository for financiers (purchasers) and their per-issuer rates"""

    def __init__(self, db: Session):
        self.db = db

    def create_financier(self, name: str, minimum_term_days: int, annual_rates: Dict[int, int]) -> Financier:
        """
        Persist a financier with its rate configurations.

        Args:
            name: Unique financier name
            minimum_term_days: Shortest financing term the financier accepts
            annual_rates: Annual rate in bps keyed by issuer id
        """
        require_non_negative("Financier", "minimum_term_days", minimum_term_days)
        for rate in annual_rates.values():
            require_non_negative("RateConfiguration", "annual_rate_bps", rate)
        if self.get_by_name(name) is not None:
            raise DuplicateNameError(f"Duplicate financier name: {name!r}")

        record = FinancierRecord(
            name=name,
            minimum_term_days=minimum_term_days,
            rate_configurations=[
                RateConfigurationRecord(issuer_id=issuer_id, annual_rate_bps=rate)
                for issuer_id, rate in annual_rates.items()
            ],
        )
        self.db.add(record)
        self.db.flush()
        return to_financier(record)

    def get_by_name(self, name: str) -> Optional[Financier]:
        record = self.db.query(FinancierRecord).filter(FinancierRecord.name == name).first()
        return to_financier(record) if record else None

    def fetch_all(self) -> List[Financier]:
        """Load the full roster with rate configurations in one round trip per table"""
        records = (
            self.db.query(FinancierRecord)
            .options(selectinload(FinancierRecord.rate_configurations))
            .order_by(FinancierRecord.id)
            .all()
        )
        return [to_financier(r) for r in records]


class InvoiceRepository:
    """Repository for invoices; implements both invoice source and sink"""

    def __init__(self, db: Session):
        self.db = db

    def create_invoice(
        self,
        issuer_id: int,
        value_cents: int,
        maturity_date: date,
        obligor_id: Optional[int] = None,
        status: InvoiceStatus = InvoiceStatus.NON_FINANCED,
    ) -> Invoice:
        require_non_negative("Invoice", "value_cents", value_cents)
        record = InvoiceRecord(
            issuer_id=issuer_id,
            obligor_id=obligor_id,
            value_cents=value_cents,
            maturity_date=maturity_date,
            status=status,
        )
        self.db.add(record)
        self.db.flush()
        return to_invoice(record)

    def fetch_page(self, status: InvoiceStatus, page_size: int, page_token: Optional[int] = None) -> InvoicePage:
        """
        Fetch invoices in a status ordered by id, starting after page_token.

        Keyset pagination: the token is the last id of the previous page, so
        invoices moved out of the status by the caller neither shift nor hide
        the invoices that are still pending.
        """
        query = (
            self.db.query(InvoiceRecord)
            .options(joinedload(InvoiceRecord.issuer), joinedload(InvoiceRecord.obligor))
            .filter(InvoiceRecord.status == status)
        )
        if page_token is not None:
            query = query.filter(InvoiceRecord.id > page_token)

        # One extra row tells whether another page exists
        records = query.order_by(InvoiceRecord.id).limit(page_size + 1).all()
        has_next = len(records) > page_size
        records = records[:page_size]

        return InvoicePage(
            invoices=[to_invoice(r) for r in records],
            has_next=has_next,
            next_token=records[-1].id if records else page_token,
        )

    def save(self, invoice: Invoice) -> None:
        """Write status and financing fields back to the invoice row"""
        record = self.db.get(InvoiceRecord, invoice.id)
        if record is None:
            raise InvoiceNotFoundError(f"Invoice {invoice.id} not found")

        record.status = invoice.status
        record.financier_id = invoice.financier.id if invoice.financier else None
        record.financing_date = invoice.financing_date
        record.financing_term_days = invoice.financing_term_days
        record.financing_rate_bps = invoice.financing_rate_bps
        record.early_payment_value_cents = invoice.early_payment_value_cents
        self.db.flush()

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        record = self.db.get(InvoiceRecord, invoice_id)
        return to_invoice(record) if record else None

    def list_invoices(self, status: Optional[InvoiceStatus] = None, limit: int = 50) -> List[Invoice]:
        """Fetch invoices, optionally filtered by status, oldest first"""
        query = self.db.query(InvoiceRecord)
        if status is not None:
            query = query.filter(InvoiceRecord.status == status)
        return [to_invoice(r) for r in query.order_by(InvoiceRecord.id).limit(limit).all()]

    def count_by_status(self) -> Dict[InvoiceStatus, int]:
        rows = (
            self.db.query(InvoiceRecord.status, func.count(InvoiceRecord.id))
            .group_by(InvoiceRecord.status)
            .all()
        )
        return {status: count for status, count in rows}
