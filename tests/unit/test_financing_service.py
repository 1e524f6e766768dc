"""Unit tests for the batch financing run"""

import pytest
from datetime import date, timedelta
from typing import Dict, List, Optional
from unittest.mock import MagicMock
from invoice_financing.domain.exceptions import DuplicateNameError
from invoice_financing.domain.models import (
    Financier,
    Invoice,
    InvoicePage,
    InvoiceStatus,
    Issuer,
    RateConfiguration,
)
from invoice_financing.services import financing_service
from invoice_financing.services.financing_service import finance_pending_invoices


class InMemoryInvoiceStore:
    """Invoice source and sink backed by a dict, paginated by id"""

    def __init__(self, invoices: List[Invoice]):
        self.invoices: Dict[int, Invoice] = {i.id: i for i in invoices}
        self.saved: List[int] = []
        self.fetched: List[int] = []

    def fetch_page(self, status: InvoiceStatus, page_size: int, page_token: Optional[int] = None) -> InvoicePage:
        matching = sorted(
            (i for i in self.invoices.values() if i.status is status and (page_token is None or i.id > page_token)),
            key=lambda i: i.id,
        )
        page = matching[:page_size]
        self.fetched.extend(i.id for i in page)
        return InvoicePage(
            invoices=page,
            has_next=len(matching) > page_size,
            next_token=page[-1].id if page else page_token,
        )

    def save(self, invoice: Invoice) -> None:
        self.saved.append(invoice.id)
        self.invoices[invoice.id] = invoice


class StaticFinancierSource:
    def __init__(self, financiers: List[Financier]):
        self.financiers = financiers
        self.calls = 0

    def fetch_all(self) -> List[Financier]:
        self.calls += 1
        return list(self.financiers)


def make_invoices(issuer: Issuer, today: date, count: int, start_id: int = 1, days: int = 30, **kwargs) -> List[Invoice]:
    return [
        Invoice(
            id=start_id + i,
            issuer=issuer,
            value_cents=1_000_000,
            maturity_date=today + timedelta(days=days),
            **kwargs,
        )
        for i in range(count)
    ]


def test_processes_every_page(issuer, rich_bank, fat_bank, today):
    store = InMemoryInvoiceStore(make_invoices(issuer, today, 7))
    financiers = StaticFinancierSource([rich_bank, fat_bank])

    summary = finance_pending_invoices(store, store, financiers, batch_size=3, financing_date=today)

    assert summary.pages == 3  # 3 + 3 + 1
    assert summary.processed == 7
    assert summary.count(InvoiceStatus.FINANCED) == 7
    assert summary.financed_value_cents == 7_000_000
    assert summary.early_payment_value_cents == 7 * 999_700
    assert sorted(store.saved) == list(range(1, 8))
    assert all(i.status is InvoiceStatus.FINANCED for i in store.invoices.values())


def test_roster_is_loaded_once_per_run(issuer, rich_bank, today):
    store = InMemoryInvoiceStore(make_invoices(issuer, today, 10))
    financiers = StaticFinancierSource([rich_bank])

    finance_pending_invoices(store, store, financiers, batch_size=2, financing_date=today)

    assert financiers.calls == 1


def test_processed_invoices_are_never_reselected(issuer, rich_bank, fat_bank, today):
    already_done = make_invoices(issuer, today, 5, start_id=1, status=InvoiceStatus.FINANCED)
    pending = make_invoices(issuer, today, 5, start_id=6)
    store = InMemoryInvoiceStore(already_done + pending)

    summary = finance_pending_invoices(
        store, store, StaticFinancierSource([rich_bank, fat_bank]), batch_size=2, financing_date=today
    )

    assert summary.processed == 5
    assert sorted(store.saved) == [6, 7, 8, 9, 10]
    assert len(store.fetched) == len(set(store.fetched))
    assert not set(store.fetched) & {1, 2, 3, 4, 5}


def test_failures_do_not_stop_the_run(issuer, rich_bank, fat_bank, today):
    other_issuer = Issuer(id=2, name="Nobody Finances Me", max_rate_bps=3)
    invoices = [
        *make_invoices(issuer, today, 1, start_id=1),
        *make_invoices(other_issuer, today, 1, start_id=2),
        *make_invoices(issuer, today, 1, start_id=3, days=5),
        *make_invoices(issuer, today, 1, start_id=4),
    ]
    store = InMemoryInvoiceStore(invoices)

    summary = finance_pending_invoices(
        store, store, StaticFinancierSource([rich_bank, fat_bank]), batch_size=10, financing_date=today
    )

    assert summary.outcomes == {
        InvoiceStatus.FINANCED: 2,
        InvoiceStatus.MISSING_FINANCIERS: 1,
        InvoiceStatus.SHORT_TERM: 1,
    }
    assert store.invoices[2].status is InvoiceStatus.MISSING_FINANCIERS
    assert store.invoices[3].status is InvoiceStatus.SHORT_TERM
    assert store.invoices[4].status is InvoiceStatus.FINANCED


def test_no_pending_invoices_skips_roster(today):
    source = MagicMock()
    source.fetch_page.return_value = InvoicePage(invoices=[], has_next=False)
    sink = MagicMock()
    financier_source = MagicMock()

    summary = finance_pending_invoices(source, sink, financier_source, batch_size=10, financing_date=today)

    assert summary.processed == 0
    financier_source.fetch_all.assert_not_called()
    sink.save.assert_not_called()


def test_empty_roster_leaves_invoices_pending(issuer, today):
    store = InMemoryInvoiceStore(make_invoices(issuer, today, 3))

    summary = finance_pending_invoices(store, store, StaticFinancierSource([]), batch_size=10, financing_date=today)

    assert summary.processed == 0
    assert store.saved == []
    assert all(i.status is InvoiceStatus.NON_FINANCED for i in store.invoices.values())


def test_single_page_is_saved_with_outcome(invoice, rich_bank, fat_bank, today):
    """Source with one page and no next page, sink receives the financed invoice"""
    source = MagicMock()
    source.fetch_page.return_value = InvoicePage(invoices=[invoice], has_next=False, next_token=invoice.id)
    sink = MagicMock()
    financier_source = MagicMock()
    financier_source.fetch_all.return_value = [rich_bank, fat_bank]

    finance_pending_invoices(source, sink, financier_source, batch_size=10, financing_date=today)

    source.fetch_page.assert_called_once_with(InvoiceStatus.NON_FINANCED, 10)
    sink.save.assert_called_once()
    saved = sink.save.call_args.args[0]
    assert saved.status is InvoiceStatus.FINANCED
    assert saved.financier == fat_bank
    assert saved.financing_rate_bps == 3
    assert saved.early_payment_value_cents == 999_700


def test_storage_error_aborts_run(issuer, rich_bank, today):
    store = InMemoryInvoiceStore(make_invoices(issuer, today, 3))
    sink = MagicMock()
    sink.save.side_effect = RuntimeError("database unavailable")

    with pytest.raises(RuntimeError):
        finance_pending_invoices(store, sink, StaticFinancierSource([rich_bank]), batch_size=10, financing_date=today)

    assert sink.save.call_count == 1


def test_financing_date_defaults_to_today(issuer, monkeypatch):
    fixed = date(2024, 6, 1)

    class FixedDate(date):
        @classmethod
        def today(cls):
            return fixed

    monkeypatch.setattr(financing_service, "date", FixedDate)
    financier = Financier(
        id=1,
        name="AnyTerm",
        minimum_term_days=0,
        rate_configurations=(RateConfiguration(issuer_id=issuer.id, annual_rate_bps=10),),
    )
    store = InMemoryInvoiceStore(make_invoices(issuer, fixed, 1))

    summary = finance_pending_invoices(store, store, StaticFinancierSource([financier]), batch_size=5)

    assert summary.financing_date == fixed
    assert store.invoices[1].financing_date == fixed
    assert store.invoices[1].financing_term_days == 30


@pytest.mark.parametrize("batch_size", [0, -1])
def test_batch_size_must_be_positive(batch_size, today):
    with pytest.raises(ValueError):
        finance_pending_invoices(MagicMock(), MagicMock(), MagicMock(), batch_size=batch_size, financing_date=today)


def test_duplicate_financier_names_abort_run(issuer, rich_bank, today):
    store = InMemoryInvoiceStore(make_invoices(issuer, today, 2))
    clone = Financier(id=9, name=rich_bank.name, minimum_term_days=0, rate_configurations=rich_bank.rate_configurations)

    with pytest.raises(DuplicateNameError):
        finance_pending_invoices(
            store, store, StaticFinancierSource([rich_bank, clone]), batch_size=10, financing_date=today
        )

    assert store.saved == []
    assert all(i.status is InvoiceStatus.NON_FINANCED for i in store.invoices.values())
