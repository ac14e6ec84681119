"""
FinancialDashboardService -- concurrent fetch and composition of the dashboard.

Responsibility:
    Fetch the P&L inputs, open receivables and open payables concurrently,
    then compose the dashboard with ``DashboardComposer``.

Architecture position:
    Services -- imperative shell.  The reads are the only suspension
    points; they run on a thread pool, each submission in a copy of the
    caller's context so ``LogContext`` fields reach the worker threads.

Invariants enforced:
    - All-or-nothing: ``Future.result()`` re-raises the first failure and
      the composition is aborted.  A dashboard is never built from partial
      data.
    - Aging is computed as of the window end.
"""

from __future__ import annotations

import contextvars
import time
from concurrent.futures import ThreadPoolExecutor

from erp_config.schema import FinancePolicy
from erp_engines.dashboard import DashboardComposer, FinancialDashboard
from erp_engines.profit_loss import ProfitLossGenerator
from erp_engines.receivables import ReceivablesAggregator
from erp_kernel.domain.clock import Clock, SystemClock
from erp_kernel.domain.records import CONSOLIDATED, DateWindow, ReportScope
from erp_kernel.logging_config import LogContext, get_logger
from erp_services.sources import FinanceSources

logger = get_logger("services.dashboard")

_FETCH_WORKERS = 5


class FinancialDashboardService:
    """Compose financial dashboards from current records."""

    def __init__(
        self,
        sources: FinanceSources,
        policy: FinancePolicy | None = None,
        clock: Clock | None = None,
        max_workers: int = _FETCH_WORKERS,
    ) -> None:
        self._sources = sources
        self._policy = policy or FinancePolicy()
        self._clock = clock or SystemClock()
        self._max_workers = max_workers
        self._aggregator = ReceivablesAggregator()
        self._profit_loss = ProfitLossGenerator(self._policy.profit_loss)
        self._composer = DashboardComposer(self._policy.dashboard)

    def compose(
        self,
        window: DateWindow | None = None,
        scope: ReportScope = CONSOLIDATED,
    ) -> FinancialDashboard:
        """
        Build the dashboard of ``window`` (default: trailing policy window
        ending today).

        Raises:
            Any exception raised by a data source, unchanged.
        """
        window = window or DateWindow.trailing(
            self._clock.today(), self._policy.dashboard.default_window_days,
        )
        sources = self._sources

        with LogContext.bind(scope=scope.label):
            t0 = time.monotonic()
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:

                def submit(fn, *args):
                    return pool.submit(contextvars.copy_context().run, fn, *args)

                sales = submit(sources.confirmed_orders, window, scope)
                services = submit(sources.completed_services, window, scope)
                production = submit(sources.completed_orders, window, scope)
                invoices = submit(sources.open_invoices, scope)
                purchase_orders = submit(sources.open_purchase_orders, scope)

                statement = self._profit_loss.generate(
                    window=window,
                    sales=sales.result(),
                    services=services.result(),
                    production=production.result(),
                    scope=scope,
                )
                receivables = self._aggregator.aggregate(
                    items=invoices.result(), as_of=window.end,
                )
                payables = self._aggregator.aggregate(
                    items=purchase_orders.result(), as_of=window.end,
                )

            logger.info("dashboard_inputs_fetched", extra={
                "window": str(window),
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            })
            return self._composer.compose(
                window=window,
                statement=statement,
                receivables=receivables,
                payables=payables,
            )
