"""Data source protocols -- the read collaborators of the engines.

The engines never query storage.  Services read current records through
these protocols and pass them in.  ``SqlFinanceSources`` (SQLAlchemy)
implements every protocol; tests use in-memory fakes.

Contract for every implementation:
    - Reads are side-effect free and return frozen domain records.
    - ``ReportScope`` restricts results; its unset fields do not.
    - Failures (unavailable store, unknown counterparty) are raised as-is;
      services never retry or substitute partial data.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable

from erp_kernel.domain.records import (
    DateWindow,
    MonetaryItem,
    PaymentHistoryEntry,
    ProductionCostRecord,
    ReportScope,
    RevenueRecord,
    SystemPaymentRecord,
)


@runtime_checkable
class ReceivablesSource(Protocol):
    def open_invoices(self, scope: ReportScope) -> Sequence[MonetaryItem]:
        """Open customer invoices with a positive balance, by due date."""
        ...


@runtime_checkable
class PayablesSource(Protocol):
    def open_purchase_orders(self, scope: ReportScope) -> Sequence[MonetaryItem]:
        """Open supplier purchase orders, by due (delivery) date."""
        ...


@runtime_checkable
class SalesRevenueSource(Protocol):
    def confirmed_orders(self, window: DateWindow, scope: ReportScope) -> Sequence[RevenueRecord]:
        ...


@runtime_checkable
class ServiceRevenueSource(Protocol):
    def completed_services(self, window: DateWindow, scope: ReportScope) -> Sequence[RevenueRecord]:
        ...


@runtime_checkable
class ProductionCostSource(Protocol):
    def completed_orders(
        self, window: DateWindow, scope: ReportScope,
    ) -> Sequence[ProductionCostRecord]:
        """Cost records of production orders completed inside ``window``."""
        ...


@runtime_checkable
class PaymentHistorySource(Protocol):
    def recent_payments(self, counterparty_id: str, limit: int) -> Sequence[PaymentHistoryEntry]:
        """The ``limit`` most recent invoices of a customer, newest first.

        Raises:
            CounterpartyNotFoundError: When the customer does not exist.
        """
        ...

    def credit_limit(self, counterparty_id: str) -> Decimal | None:
        """Credit limit on file, or None.

        Raises:
            CounterpartyNotFoundError: When the customer does not exist.
        """
        ...


@runtime_checkable
class SystemPaymentSource(Protocol):
    def payments_near(self, statement_date: date, window: DateWindow) -> Sequence[SystemPaymentRecord]:
        """Completed banked payments dated inside ``window`` around a statement."""
        ...


@runtime_checkable
class FinanceSources(
    ReceivablesSource,
    PayablesSource,
    SalesRevenueSource,
    ServiceRevenueSource,
    ProductionCostSource,
    PaymentHistorySource,
    SystemPaymentSource,
    Protocol,
):
    """Every read the reporting services need."""
