"""
erp_engines.dashboard -- Financial dashboard composition.

Responsibility:
    Combine a P&L statement, receivables and payables ledgers and the
    configured balance-sheet figures into a KPI dashboard.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    ``FinancialDashboardService`` fetches the inputs (concurrently) and
    calls ``DashboardComposer.compose``.

Notes:
    KPI trend compares each value with its target: UP above target, DOWN
    below, STABLE on target.  The liquidity/return ratios and the cash
    position are configured figures from ``DashboardPolicy``; only the
    margins are derived from the statement.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from erp_engines.policy import DashboardPolicy
from erp_engines.profit_loss import ProfitLossStatement
from erp_engines.receivables import AgingSummary, CounterpartyLedger, summarize_aging
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import DateWindow
from erp_kernel.domain.values import of_percent, quantize_money
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.dashboard")


class Trend(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    STABLE = "STABLE"


class KPICategory(str, Enum):
    PROFITABILITY = "PROFITABILITY"
    EFFICIENCY = "EFFICIENCY"


@dataclass(frozen=True)
class FinancialKPI:
    name: str
    value: Decimal
    target: Decimal
    unit: str
    category: KPICategory
    period: str

    @property
    def variance(self) -> Decimal:
        return self.value - self.target

    @property
    def trend(self) -> Trend:
        if self.value > self.target:
            return Trend.UP
        if self.value < self.target:
            return Trend.DOWN
        return Trend.STABLE


@dataclass(frozen=True)
class FinancialRatios:
    current_ratio: Decimal
    quick_ratio: Decimal
    debt_to_equity_ratio: Decimal
    return_on_assets: Decimal
    return_on_equity: Decimal
    gross_profit_margin: Decimal
    net_profit_margin: Decimal


@dataclass(frozen=True)
class CashPosition:
    cash_on_hand: Decimal
    bank_balance: Decimal
    credit_limit: Decimal
    credit_used: Decimal

    @property
    def total_liquid_assets(self) -> Decimal:
        return self.cash_on_hand + self.bank_balance

    @property
    def available_credit(self) -> Decimal:
        return max(Decimal("0"), self.credit_limit - self.credit_used)


@dataclass(frozen=True)
class FinancialDashboard:
    scope_label: str
    window: DateWindow
    kpis: tuple[FinancialKPI, ...]
    ratios: FinancialRatios
    cash_position: CashPosition
    receivables_aging: AgingSummary
    payables_aging: AgingSummary

    def kpi(self, name: str) -> FinancialKPI:
        for kpi in self.kpis:
            if kpi.name == name:
                return kpi
        raise KeyError(name)


class DashboardComposer:
    """Pure KPI dashboard composition."""

    def __init__(self, policy: DashboardPolicy | None = None):
        self._policy = policy or DashboardPolicy()

    @traced_engine("dashboard", "1.0", fingerprint_fields=("window",))
    def compose(
        self,
        window: DateWindow,
        statement: ProfitLossStatement,
        receivables: Sequence[CounterpartyLedger],
        payables: Sequence[CounterpartyLedger],
    ) -> FinancialDashboard:
        policy = self._policy
        period = window.start.strftime("%Y-%m")
        revenue = statement.revenue.total

        kpis = (
            FinancialKPI(
                name="Total Revenue",
                value=revenue,
                target=quantize_money(
                    revenue + of_percent(revenue, policy.revenue_target_uplift_pct)
                ),
                unit=policy.currency_unit,
                category=KPICategory.PROFITABILITY,
                period=period,
            ),
            FinancialKPI(
                name="Gross Profit Margin",
                value=statement.gross_margin,
                target=policy.gross_margin_target,
                unit="%",
                category=KPICategory.PROFITABILITY,
                period=period,
            ),
            FinancialKPI(
                name="Net Profit Margin",
                value=statement.profit_margin,
                target=policy.net_margin_target,
                unit="%",
                category=KPICategory.PROFITABILITY,
                period=period,
            ),
            FinancialKPI(
                name="Operating Efficiency",
                value=statement.operating_margin,
                target=policy.operating_margin_target,
                unit="%",
                category=KPICategory.EFFICIENCY,
                period=period,
            ),
        )

        dashboard = FinancialDashboard(
            scope_label=statement.scope_label,
            window=window,
            kpis=kpis,
            ratios=FinancialRatios(
                current_ratio=policy.current_ratio,
                quick_ratio=policy.quick_ratio,
                debt_to_equity_ratio=policy.debt_to_equity_ratio,
                return_on_assets=policy.return_on_assets,
                return_on_equity=policy.return_on_equity,
                gross_profit_margin=statement.gross_margin,
                net_profit_margin=statement.profit_margin,
            ),
            cash_position=CashPosition(
                cash_on_hand=policy.cash_on_hand,
                bank_balance=policy.bank_balance,
                credit_limit=policy.credit_facility_limit,
                credit_used=policy.credit_facility_used,
            ),
            receivables_aging=summarize_aging(receivables),
            payables_aging=summarize_aging(payables),
        )

        logger.info("dashboard_composed", extra={
            "scope": dashboard.scope_label,
            "window": str(window),
            "total_revenue": str(revenue),
            "receivables_total": str(dashboard.receivables_aging.total),
            "payables_total": str(dashboard.payables_aging.total),
            "kpis_below_target": [k.name for k in kpis if k.trend == Trend.DOWN],
        })
        return dashboard
