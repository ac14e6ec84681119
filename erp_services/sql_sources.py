"""
SqlFinanceSources -- SQLAlchemy implementation of every data source protocol.

Each read opens its own short-lived session from the session factory and
closes it before returning, so independent reads (the dashboard's
concurrent fetches) never share a session across threads.  Sessions are
read-only: nothing is added, flushed or committed.

Production orders are read as raw cost inputs and turned into
``ProductionCostRecord`` values by ``CostVarianceAnalyzer.build_cost_record``
under the active costing policy.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session, sessionmaker

from erp_engines.policy import CostingPolicy
from erp_engines.variance import CostVarianceAnalyzer
from erp_kernel.domain.records import (
    DateWindow,
    MonetaryItem,
    PaymentHistoryEntry,
    ProductionCostRecord,
    ReportScope,
    RevenueRecord,
    SystemPaymentRecord,
)
from erp_kernel.logging_config import get_logger
from erp_kernel.selectors import (
    CounterpartySelector,
    LedgerSelector,
    PaymentSelector,
    ProductionSelector,
    RevenueSelector,
)

logger = get_logger("services.sql_sources")


class SqlFinanceSources:
    """Read every finance dataset from the ERP database."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        costing_policy: CostingPolicy | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._analyzer = CostVarianceAnalyzer(costing_policy)

    def open_invoices(self, scope: ReportScope) -> list[MonetaryItem]:
        with self._session_factory() as session:
            return LedgerSelector(session).open_invoices(scope)

    def open_purchase_orders(self, scope: ReportScope) -> list[MonetaryItem]:
        with self._session_factory() as session:
            return LedgerSelector(session).open_purchase_orders(scope)

    def confirmed_orders(self, window: DateWindow, scope: ReportScope) -> list[RevenueRecord]:
        with self._session_factory() as session:
            return RevenueSelector(session).confirmed_orders(window, scope)

    def completed_services(self, window: DateWindow, scope: ReportScope) -> list[RevenueRecord]:
        with self._session_factory() as session:
            return RevenueSelector(session).completed_services(window, scope)

    def completed_orders(
        self, window: DateWindow, scope: ReportScope,
    ) -> list[ProductionCostRecord]:
        with self._session_factory() as session:
            inputs = ProductionSelector(session).completed_orders(window, scope)
        records = [self._analyzer.build_cost_record(order) for order in inputs]
        logger.debug("production_cost_records_built", extra={
            "window": str(window),
            "order_count": len(records),
        })
        return records

    def recent_payments(self, counterparty_id: str, limit: int) -> list[PaymentHistoryEntry]:
        with self._session_factory() as session:
            return CounterpartySelector(session).recent_payments(counterparty_id, limit)

    def credit_limit(self, counterparty_id: str) -> Decimal | None:
        with self._session_factory() as session:
            return CounterpartySelector(session).credit_limit(counterparty_id)

    def payments_near(self, statement_date: date, window: DateWindow) -> list[SystemPaymentRecord]:
        with self._session_factory() as session:
            return PaymentSelector(session).payments_near(window)
