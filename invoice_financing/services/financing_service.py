"""
Financing run - pages through pending invoices and persists one outcome per invoice.

The financier roster is loaded once per run and kept in memory as an
immutable tuple; runs are sized for rosters that fit in memory (hundreds of
financiers, not millions).
"""

import logging
import time
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from invoice_financing.config import settings
from invoice_financing.domain.financing import apply_outcome, evaluate_invoice
from invoice_financing.domain.models import FinancingRunSummary, InvoiceStatus, validate_unique_names
from invoice_financing.domain.ports import FinancierSource, InvoiceSink, InvoiceSource
from invoice_financing.infrastructure.database.repositories import FinancierRepository, InvoiceRepository
from invoice_financing.infrastructure.observability.logging import log_financing_outcome, log_financing_run
from invoice_financing.infrastructure.observability.metrics import record_outcome, run_duration_histogram


def finance_pending_invoices(
    invoice_source: InvoiceSource,
    invoice_sink: InvoiceSink,
    financier_source: FinancierSource,
    batch_size: int,
    financing_date: Optional[date] = None,
) -> FinancingRunSummary:
    """
    Finance every NON_FINANCED invoice, one page at a time.

    Flow:
    1. Fetch the first page of pending invoices (nothing to do if empty)
    2. Load the financier roster once (nothing to do if empty)
    3. Evaluate each invoice, apply and save its outcome
    4. Fetch the next page after the last processed invoice, until exhausted

    Every evaluated invoice is saved, failures included, before the next page
    is requested. Storage errors and a roster with duplicate financier names
    propagate and abort the run.

    Args:
        batch_size: Invoices per page
        financing_date: Date the financier pays the issuer (default: today)

    Returns:
        Summary with per-status counts and financed totals
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    if financing_date is None:
        financing_date = date.today()

    start_time = time.time()
    summary = FinancingRunSummary(financing_date=financing_date)
    logging.info("Financing started", extra={"financing_date": financing_date.isoformat(), "batch_size": batch_size})

    page = invoice_source.fetch_page(InvoiceStatus.NON_FINANCED, batch_size)
    if not page.invoices:
        logging.info("Cannot find any non-financed invoices")
        return summary

    financiers = tuple(financier_source.fetch_all())
    validate_unique_names(financiers, "financier")
    if not financiers:
        logging.info("No financiers configured yet, invoices stay pending")
        return summary

    while page.invoices:
        summary.pages += 1

        for invoice in page.invoices:
            outcome = evaluate_invoice(invoice, financiers, financing_date)
            invoice_sink.save(apply_outcome(invoice, outcome))

            summary.record(invoice, outcome)
            record_outcome(outcome, invoice.value_cents)
            log_financing_outcome(invoice.id, outcome)

        if not page.has_next:
            break
        page = invoice_source.fetch_page(InvoiceStatus.NON_FINANCED, batch_size, page.next_token)

    duration = time.time() - start_time
    run_duration_histogram.observe(duration)
    log_financing_run(summary, duration * 1000)

    return summary


def run_financing(
    db: Session,
    batch_size: Optional[int] = None,
    financing_date: Optional[date] = None,
) -> FinancingRunSummary:
    """
    Run one financing pass against the database in a single transaction.

    All outcomes are committed together at the end; any error rolls the
    whole run back.
    """
    invoice_repo = InvoiceRepository(db)
    financier_repo = FinancierRepository(db)

    try:
        summary = finance_pending_invoices(
            invoice_source=invoice_repo,
            invoice_sink=invoice_repo,
            financier_source=financier_repo,
            batch_size=settings.invoice_batch_size if batch_size is None else batch_size,
            financing_date=financing_date,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return summary
