"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from invoice_financing.domain.exceptions import (
    DuplicateNameError,
    DuplicateRateConfigurationError,
    InvalidEntityError,
)


class InvoiceStatus(str, Enum):
    """Financing state of an invoice; every value except NON_FINANCED is terminal"""

    NON_FINANCED = "NON_FINANCED"
    FINANCED = "FINANCED"
    MISSING_FINANCIERS = "MISSING_FINANCIERS"
    SHORT_TERM = "SHORT_TERM"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"


def require_non_negative(entity: str, field_name: str, value: int) -> None:
    if value < 0:
        raise InvalidEntityError(f"{entity}.{field_name} must be >= 0, got {value}")


@dataclass(frozen=True)
class Issuer:
    """Creditor that issued the invoice and wants to be paid early"""

    id: int
    name: str
    max_rate_bps: int

    def __post_init__(self) -> None:
        require_non_negative("Issuer", "max_rate_bps", self.max_rate_bps)


@dataclass(frozen=True)
class Obligor:
    """Debtor obliged to pay the invoice at maturity"""

    id: int
    name: str


@dataclass(frozen=True)
class RateConfiguration:
    """Annual rate a financier charges a specific issuer"""

    issuer_id: int
    annual_rate_bps: int

    def __post_init__(self) -> None:
        require_non_negative("RateConfiguration", "annual_rate_bps", self.annual_rate_bps)


@dataclass(frozen=True)
class Financier:
    """
    Purchaser of invoices (usually a bank).

    Holds at most one rate configuration per issuer; a second configuration
    for the same issuer is rejected at construction.
    """

    id: int
    name: str
    minimum_term_days: int
    rate_configurations: Tuple[RateConfiguration, ...] = ()

    def __post_init__(self) -> None:
        require_non_negative("Financier", "minimum_term_days", self.minimum_term_days)

        # Accept any iterable but store an immutable tuple
        configurations = tuple(self.rate_configurations)
        seen = set()
        for configuration in configurations:
            if configuration.issuer_id in seen:
                raise DuplicateRateConfigurationError(self.name, configuration.issuer_id)
            seen.add(configuration.issuer_id)
        object.__setattr__(self, "rate_configurations", configurations)

    def annual_rate_for(self, issuer_id: int) -> Optional[int]:
        """Annual rate in bps configured for the issuer, or None"""
        for configuration in self.rate_configurations:
            if configuration.issuer_id == issuer_id:
                return configuration.annual_rate_bps
        return None


@dataclass
class Invoice:
    """Invoice issued by an issuer to an obligor, optionally financed by a financier"""

    id: Optional[int]
    issuer: Issuer
    value_cents: int
    maturity_date: date
    obligor: Optional[Obligor] = None
    status: InvoiceStatus = InvoiceStatus.NON_FINANCED

    # Set only when status is FINANCED
    financier: Optional[Financier] = None
    financing_date: Optional[date] = None
    financing_term_days: Optional[int] = None
    financing_rate_bps: Optional[int] = None
    early_payment_value_cents: Optional[int] = None

    def __post_init__(self) -> None:
        require_non_negative("Invoice", "value_cents", self.value_cents)


@dataclass(frozen=True)
class FinancingOffer:
    """Best prorated rate found for an invoice"""

    financier: Financier
    annual_rate_bps: int
    rate_bps: int


@dataclass(frozen=True)
class FinancingOutcome:
    """Result of evaluating one invoice against the financier roster"""

    status: InvoiceStatus
    term_days: int
    financing_date: date
    offer: Optional[FinancingOffer] = None
    interest_cents: Optional[int] = None
    early_payment_value_cents: Optional[int] = None

    @property
    def financed(self) -> bool:
        return self.status is InvoiceStatus.FINANCED

    @property
    def financier(self) -> Optional[Financier]:
        return self.offer.financier if self.offer else None

    @property
    def rate_bps(self) -> Optional[int]:
        return self.offer.rate_bps if self.offer else None


@dataclass(frozen=True)
class InvoicePage:
    """One page of invoices returned by an invoice source"""

    invoices: List[Invoice]
    has_next: bool
    next_token: Optional[int] = None


@dataclass
class FinancingRunSummary:
    """Aggregated result of one orchestrator run"""

    financing_date: date
    pages: int = 0
    processed: int = 0
    outcomes: Dict[InvoiceStatus, int] = field(default_factory=dict)
    financed_value_cents: int = 0
    early_payment_value_cents: int = 0

    def record(self, invoice: Invoice, outcome: FinancingOutcome) -> None:
        self.processed += 1
        self.outcomes[outcome.status] = self.outcomes.get(outcome.status, 0) + 1
        if outcome.financed:
            self.financed_value_cents += invoice.value_cents
            self.early_payment_value_cents += outcome.early_payment_value_cents

    def count(self, status: InvoiceStatus) -> int:
        return self.outcomes.get(status, 0)


def validate_unique_names(entities: Iterable, kind: str) -> None:
    """Raise DuplicateNameError if two entities of a roster share a name"""
    seen = set()
    for entity in entities:
        if entity.name in seen:
            raise DuplicateNameError(f"Duplicate {kind} name: {entity.name!r}")
        seen.add(entity.name)
