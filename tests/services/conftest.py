"""
In-memory data sources for service tests.

``FakeSources`` implements every read protocol over plain lists, records
each call with the LogContext scope active at the time, and can be told
to fail a given read.
"""

import threading
from datetime import date
from decimal import Decimal

import pytest

from erp_kernel.domain.records import (
    ActualCost,
    MonetaryItem,
    MonetaryItemKind,
    ProductionCostRecord,
    RevenueRecord,
    StandardCost,
    SystemPaymentRecord,
)
from erp_kernel.exceptions import CounterpartyNotFoundError
from erp_kernel.logging_config import LogContext


def invoice(item_id, customer, due, total, paid="0", branch="BR-1"):
    item = MonetaryItem(
        item_id=item_id,
        counterparty_id=customer,
        issue_date=date(2023, 12, 1),
        due_date=due,
        total_amount=Decimal(total),
        paid_amount=Decimal(paid),
        counterparty_name=f"Customer {customer}",
        document_number=item_id,
    )
    return branch, item


class FakeSources:

    def __init__(self):
        self.invoices = [
            invoice("INV-1", "C1", date(2024, 4, 15), "1000"),
            invoice("INV-2", "C1", date(2024, 3, 1), "500", paid="100"),
            invoice("INV-3", "C2", date(2024, 1, 1), "300", branch="BR-2"),
        ]
        self.purchase_orders = [
            ("BR-1", MonetaryItem(
                item_id="PO-1", counterparty_id="S1", issue_date=date(2024, 2, 1),
                due_date=date(2024, 2, 15), total_amount=Decimal("700"),
                kind=MonetaryItemKind.PURCHASE_ORDER,
            )),
        ]
        self.sales = [RevenueRecord(Decimal("150000"), date(2024, 3, 5))]
        self.services = [RevenueRecord(Decimal("20000"), date(2024, 3, 12))]
        self.production = [ProductionCostRecord(
            "MO-1", Decimal("10"), StandardCost(),
            ActualCost(material=Decimal("30000"), labor=Decimal("20000"), scrap=Decimal("1000")),
        )]
        self.credit_limits = {"C1": Decimal("10000"), "C2": None}
        self.histories = {"C1": [], "C2": []}
        self.payments = []
        self.calls = []
        self.failing = set()

    def _record(self, name, *args):
        self.calls.append((name, args, LogContext.get_all().get("scope"), threading.get_ident()))
        if name in self.failing:
            raise RuntimeError(f"{name} unavailable")

    @staticmethod
    def _in_scope(branch, item, scope):
        if scope.branch_id is not None and branch != scope.branch_id:
            return False
        return scope.counterparty_id is None or item.counterparty_id == scope.counterparty_id

    def calls_to(self, name):
        return [c for c in self.calls if c[0] == name]

    def open_invoices(self, scope):
        self._record("open_invoices", scope)
        return [item for branch, item in self.invoices if self._in_scope(branch, item, scope)]

    def open_purchase_orders(self, scope):
        self._record("open_purchase_orders", scope)
        return [item for branch, item in self.purchase_orders if self._in_scope(branch, item, scope)]

    def confirmed_orders(self, window, scope):
        self._record("confirmed_orders", window, scope)
        return [r for r in self.sales if window.contains(r.record_date)]

    def completed_services(self, window, scope):
        self._record("completed_services", window, scope)
        return [r for r in self.services if window.contains(r.record_date)]

    def completed_orders(self, window, scope):
        self._record("completed_orders", window, scope)
        return list(self.production)

    def recent_payments(self, counterparty_id, limit):
        self._record("recent_payments", counterparty_id, limit)
        if counterparty_id not in self.histories:
            raise CounterpartyNotFoundError(counterparty_id)
        return self.histories[counterparty_id][:limit]

    def credit_limit(self, counterparty_id):
        self._record("credit_limit", counterparty_id)
        if counterparty_id not in self.credit_limits:
            raise CounterpartyNotFoundError(counterparty_id)
        return self.credit_limits[counterparty_id]

    def payments_near(self, statement_date, window):
        self._record("payments_near", statement_date, window)
        return [p for p in self.payments if window.contains(p.payment_date)]


@pytest.fixture
def fake_sources():
    return FakeSources()


@pytest.fixture
def make_payment():
    def _make(payment_id, amount, payment_date, reference=None):
        return SystemPaymentRecord(
            payment_id=payment_id,
            amount=Decimal(amount),
            payment_date=payment_date,
            reference_number=reference,
            payment_number=payment_id,
        )
    return _make
