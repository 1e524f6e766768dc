"""Allocation engine - core business logic for financing invoices"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from invoice_financing.domain.exceptions import InvoiceAlreadyProcessedError
from invoice_financing.domain.models import (
    Financier,
    FinancingOffer,
    FinancingOutcome,
    Invoice,
    InvoiceStatus,
)
from invoice_financing.domain.rates import calculate_early_payment_cents, calculate_interest_cents, prorate_rate
from invoice_financing.utils.date_utils import days_between


def eligible_by_configuration(issuer_id: int, financiers: Iterable[Financier]) -> List[Financier]:
    """Financiers that have a rate configuration for the issuer"""
    return [f for f in financiers if f.annual_rate_for(issuer_id) is not None]


def eligible_by_term(term_days: int, financiers: Iterable[Financier]) -> List[Financier]:
    """Financiers whose minimum financing term fits into the available term"""
    return [f for f in financiers if f.minimum_term_days <= term_days]


def select_best_offer(issuer_id: int, term_days: int, financiers: Sequence[Financier]) -> Optional[FinancingOffer]:
    """
    Pick the financier with the lowest prorated rate for the term.

    Ties on the prorated rate go to the financier with the lowest id, so the
    result does not depend on roster order.
    """
    best: Optional[FinancingOffer] = None
    for financier in financiers:
        annual_rate = financier.annual_rate_for(issuer_id)
        if annual_rate is None:
            continue

        rate = prorate_rate(annual_rate, term_days)
        if best is None or (rate, financier.id) < (best.rate_bps, best.financier.id):
            best = FinancingOffer(financier=financier, annual_rate_bps=annual_rate, rate_bps=rate)

    return best


def evaluate_invoice(invoice: Invoice, financiers: Sequence[Financier], financing_date: date) -> FinancingOutcome:
    """
    Main entry point: find the cheapest eligible financier for an invoice.

    Steps (first failing step decides the outcome):
    1. Term = maturity date - financing date, in whole days
    2. Keep financiers configured for the invoice's issuer -> MISSING_FINANCIERS
    3. Keep financiers whose minimum term <= term -> SHORT_TERM
    4. Lowest prorated rate wins (annual * term / 360, rounded half up)
    5. Winning rate above the issuer's ceiling -> RATE_LIMIT_EXCEEDED
    6. Interest = round(value * rate / 10_000), early payment = value - interest

    Pure function: the invoice is not modified, see apply_outcome.
    """
    term_days = days_between(financing_date, invoice.maturity_date)
    issuer = invoice.issuer

    configured = eligible_by_configuration(issuer.id, financiers)
    if not configured:
        return FinancingOutcome(InvoiceStatus.MISSING_FINANCIERS, term_days, financing_date)

    # A past-due invoice has a negative term and never passes this filter
    in_term = eligible_by_term(term_days, configured)
    if not in_term:
        return FinancingOutcome(InvoiceStatus.SHORT_TERM, term_days, financing_date)

    offer = select_best_offer(issuer.id, term_days, in_term)
    if offer.rate_bps > issuer.max_rate_bps:
        return FinancingOutcome(InvoiceStatus.RATE_LIMIT_EXCEEDED, term_days, financing_date, offer=offer)

    return FinancingOutcome(
        status=InvoiceStatus.FINANCED,
        term_days=term_days,
        financing_date=financing_date,
        offer=offer,
        interest_cents=calculate_interest_cents(invoice.value_cents, offer.rate_bps),
        early_payment_value_cents=calculate_early_payment_cents(invoice.value_cents, offer.rate_bps),
    )


def apply_outcome(invoice: Invoice, outcome: FinancingOutcome) -> Invoice:
    """
    Write an outcome onto a pending invoice.

    Failures only change the status; financing fields are set for FINANCED.

    Raises:
        InvoiceAlreadyProcessedError: invoice is not NON_FINANCED
    """
    if invoice.status is not InvoiceStatus.NON_FINANCED:
        raise InvoiceAlreadyProcessedError(
            f"Invoice {invoice.id} already has status {invoice.status.value}"
        )

    invoice.status = outcome.status
    if outcome.financed:
        invoice.financier = outcome.financier
        invoice.financing_date = outcome.financing_date
        invoice.financing_term_days = outcome.term_days
        invoice.financing_rate_bps = outcome.rate_bps
        invoice.early_payment_value_cents = outcome.early_payment_value_cents

    return invoice
