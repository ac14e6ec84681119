"""
FinancialReportingService -- request/response surface of the finance engines.

Responsibility:
    One method per report.  Each method reads the records it needs through
    the injected data sources, supplies "today" from the injected clock,
    and hands everything to a pure engine configured from the active
    ``FinancePolicy``.

Architecture position:
    Services -- imperative shell.  Owns the clock and the data sources;
    engines stay pure.  Transport concerns (HTTP, auth, JSON marshaling)
    belong to the caller.

Invariants enforced:
    - Fail fast: request validation happens in the engines before any
      aggregation.
    - No partial financials: any data-source exception propagates
      unchanged and aborts the report.
    - Every call runs inside ``LogContext.bind(scope=...)`` and ends with a
      ``*_reported`` log event.

Usage:
    service = FinancialReportingService(SqlFinanceSources(factory), get_active_policy())
    ledgers = service.accounts_receivable(ReportScope(branch_id="BR-1"))
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from erp_config.schema import FinancePolicy
from erp_engines.cash_flow import CashFlowForecast, CashFlowForecaster
from erp_engines.collection import CollectionAnalysis, CollectionRecommender
from erp_engines.credit import CreditProfile, CreditScoringEngine
from erp_engines.profit_loss import ProfitLossGenerator, ProfitLossStatement
from erp_engines.receivables import CounterpartyLedger, ReceivablesAggregator
from erp_engines.tax import TaxCalculator, TaxRequest, TaxResult
from erp_engines.variance import CostVarianceAnalyzer, CostVarianceReport
from erp_kernel.domain.clock import Clock, SystemClock
from erp_kernel.domain.records import CONSOLIDATED, DateWindow, ReportScope
from erp_kernel.domain.values import ZERO
from erp_kernel.logging_config import LogContext, get_logger
from erp_services.sources import FinanceSources

logger = get_logger("services.financial_reporting")


class FinancialReportingService:
    """Reports over current ERP records.

    Contract:
        - Default windows are derived from the clock: P&L and cost
          analysis use the trailing dashboard window, cash flow the
          forward horizon of the cash flow policy.
        - Methods never write; sources are read-only.
    """

    def __init__(
        self,
        sources: FinanceSources,
        policy: FinancePolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._sources = sources
        self._policy = policy or FinancePolicy()
        self._clock = clock or SystemClock()
        self._aggregator = ReceivablesAggregator()
        self._tax = TaxCalculator(self._policy.tax)
        self._profit_loss = ProfitLossGenerator(self._policy.profit_loss)
        self._cash_flow = CashFlowForecaster(self._policy.cash_flow)
        self._variance = CostVarianceAnalyzer(self._policy.costing)
        self._credit = CreditScoringEngine(self._policy.credit)
        self._collection = CollectionRecommender(self._policy.collection)

    @property
    def policy(self) -> FinancePolicy:
        return self._policy

    def today(self) -> date:
        return self._clock.today()

    def default_report_window(self) -> DateWindow:
        return DateWindow.trailing(self.today(), self._policy.dashboard.default_window_days)

    # ------------------------------------------------------------------
    # Receivables / payables
    # ------------------------------------------------------------------

    def accounts_receivable(
        self, scope: ReportScope = CONSOLIDATED,
    ) -> tuple[CounterpartyLedger, ...]:
        """Customer ledgers of open invoices, aged as of today."""
        with LogContext.bind(scope=scope.label):
            items = self._sources.open_invoices(scope)
            ledgers = self._aggregator.aggregate(items=items, as_of=self.today())
            logger.info("accounts_receivable_reported", extra={
                "customer_count": len(ledgers),
                "total_outstanding": str(sum((ledger.total_outstanding for ledger in ledgers), ZERO)),
            })
            return ledgers

    def accounts_payable(
        self, scope: ReportScope = CONSOLIDATED,
    ) -> tuple[CounterpartyLedger, ...]:
        """Supplier ledgers of open purchase orders, aged as of today."""
        with LogContext.bind(scope=scope.label):
            items = self._sources.open_purchase_orders(scope)
            ledgers = self._aggregator.aggregate(items=items, as_of=self.today())
            logger.info("accounts_payable_reported", extra={
                "supplier_count": len(ledgers),
                "total_outstanding": str(sum((ledger.total_outstanding for ledger in ledgers), ZERO)),
            })
            return ledgers

    # ------------------------------------------------------------------
    # Tax
    # ------------------------------------------------------------------

    def calculate_tax(self, request: TaxRequest) -> TaxResult:
        return self._tax.calculate(request=request)

    # ------------------------------------------------------------------
    # P&L and cost analysis
    # ------------------------------------------------------------------

    def profit_and_loss(
        self,
        window: DateWindow | None = None,
        scope: ReportScope = CONSOLIDATED,
        other_income: Decimal = ZERO,
        other_expenses: Decimal = ZERO,
    ) -> ProfitLossStatement:
        """P&L statement of ``window`` (default: trailing report window)."""
        window = window or self.default_report_window()
        with LogContext.bind(scope=scope.label):
            statement = self._profit_loss.generate(
                window=window,
                sales=self._sources.confirmed_orders(window, scope),
                services=self._sources.completed_services(window, scope),
                production=self._sources.completed_orders(window, scope),
                scope=scope,
                other_income=other_income,
                other_expenses=other_expenses,
            )
            logger.info("profit_and_loss_reported", extra={
                "window": str(window),
                "total_revenue": str(statement.revenue.total),
                "net_profit": str(statement.net_profit),
            })
            return statement

    def manufacturing_cost_analysis(
        self,
        window: DateWindow | None = None,
        scope: ReportScope = CONSOLIDATED,
    ) -> CostVarianceReport:
        """Standard vs. actual cost of production orders completed in ``window``."""
        window = window or self.default_report_window()
        with LogContext.bind(scope=scope.label):
            report = self._variance.analyze_many(
                self._sources.completed_orders(window, scope)
            )
            logger.info("manufacturing_cost_analysis_reported", extra={
                "window": str(window),
                "order_count": report.order_count,
                "total_variance": str(report.total_variance),
            })
            return report

    # ------------------------------------------------------------------
    # Cash flow
    # ------------------------------------------------------------------

    def cash_flow_forecast(
        self,
        window: DateWindow | None = None,
        scope: ReportScope = CONSOLIDATED,
        opening_balance: Decimal = ZERO,
        monthly_payroll: Decimal = ZERO,
        capital_expenditure: Decimal = ZERO,
        tax_payments: Decimal = ZERO,
        other_income: Decimal = ZERO,
    ) -> CashFlowForecast:
        """
        Cash flow projection over ``window`` (default: from today over the
        policy horizon).  Average daily sales come from confirmed orders
        in the lookback period ending at the window start.
        """
        cash_policy = self._policy.cash_flow
        window = window or DateWindow.following(self.today(), cash_policy.default_horizon_days)
        history_window = DateWindow.trailing(window.start, cash_policy.lookback_days)
        with LogContext.bind(scope=scope.label):
            forecast = self._cash_flow.forecast(
                window=window,
                historical_sales=self._sources.confirmed_orders(history_window, scope),
                receivables=self._sources.open_invoices(scope),
                payables=self._sources.open_purchase_orders(scope),
                opening_balance=opening_balance,
                scope=scope,
                monthly_payroll=monthly_payroll,
                capital_expenditure=capital_expenditure,
                tax_payments=tax_payments,
                other_income=other_income,
            )
            logger.info("cash_flow_forecast_reported", extra={
                "window": str(window),
                "net_cash_flow": str(forecast.net_cash_flow),
                "closing_balance": str(forecast.closing_balance),
            })
            return forecast

    # ------------------------------------------------------------------
    # Credit and collections
    # ------------------------------------------------------------------

    def credit_profile(
        self,
        counterparty_id: str,
        credit_limit: Decimal | None = None,
    ) -> CreditProfile:
        """
        Credit profile of a customer.

        Credit used and overdue amount are the customer's open invoice
        balances as of today.  ``credit_limit`` overrides the limit on file.

        Raises:
            CounterpartyNotFoundError: From the data source, unchanged.
        """
        credit_policy = self._policy.credit
        scope = CONSOLIDATED.for_counterparty(counterparty_id)
        with LogContext.bind(scope=scope.label):
            today = self.today()
            if credit_limit is None:
                credit_limit = self._sources.credit_limit(counterparty_id)
            history = self._sources.recent_payments(counterparty_id, credit_policy.history_limit)
            ledgers = self._aggregator.aggregate(
                items=self._sources.open_invoices(scope), as_of=today,
            )
            profile = self._credit.score(
                counterparty_id=counterparty_id,
                history=history,
                as_of=today,
                credit_used=sum((ledger.total_outstanding for ledger in ledgers), ZERO),
                overdue_amount=sum((ledger.overdue_amount for ledger in ledgers), ZERO),
                credit_limit=credit_limit,
            )
            logger.info("credit_profile_reported", extra={
                "counterparty_id": counterparty_id,
                "credit_score": profile.credit_score,
                "risk_level": profile.risk_level.value,
            })
            return profile

    def collection_analysis(self, scope: ReportScope = CONSOLIDATED) -> CollectionAnalysis:
        """Collection totals and recommended actions over open invoices."""
        with LogContext.bind(scope=scope.label):
            ledgers = self._aggregator.aggregate(
                items=self._sources.open_invoices(scope), as_of=self.today(),
            )
            analysis = self._collection.analyze(ledgers=ledgers)
            logger.info("collection_analysis_reported", extra={
                "total_outstanding": str(analysis.total_outstanding),
                "recommended_action_count": len(analysis.recommended_actions),
            })
            return analysis
