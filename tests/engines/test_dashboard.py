"""
Tests for dashboard composition.

Covers:
- KPI values, targets, variance and trend
- Configured ratios and cash position
- Receivables / payables aging summaries
"""

from datetime import date
from decimal import Decimal

from erp_engines.dashboard import DashboardComposer, KPICategory, Trend
from erp_engines.policy import DashboardPolicy
from erp_engines.profit_loss import ProfitLossGenerator
from erp_engines.receivables import aggregate_payables, aggregate_receivables
from erp_kernel.domain.records import (
    ActualCost,
    DateWindow,
    MonetaryItem,
    MonetaryItemKind,
    ProductionCostRecord,
    RevenueRecord,
    StandardCost,
)

WINDOW = DateWindow(date(2024, 3, 1), date(2024, 3, 31))


def make_statement():
    return ProfitLossGenerator().generate(
        window=WINDOW,
        sales=[RevenueRecord(Decimal("150000"), date(2024, 3, 5))],
        services=[RevenueRecord(Decimal("20000"), date(2024, 3, 12))],
        production=[ProductionCostRecord(
            "MO-1", Decimal("10"), StandardCost(),
            ActualCost(material=Decimal("30000"), labor=Decimal("20000"), scrap=Decimal("1000")),
        )],
    )


def make_item(item_id, due, total, kind=MonetaryItemKind.INVOICE):
    return MonetaryItem(
        item_id=item_id, counterparty_id="CP", issue_date=date(2024, 1, 1),
        due_date=due, total_amount=Decimal(total), kind=kind,
    )


class TestDashboardComposer:

    def setup_method(self):
        self.composer = DashboardComposer()
        self.receivables = aggregate_receivables(
            items=[make_item("I1", date(2024, 3, 20), "1000"), make_item("I2", date(2024, 1, 1), "500")],
            as_of=WINDOW.end,
        )
        self.payables = aggregate_payables(
            items=[make_item("P1", date(2024, 2, 15), "700", MonetaryItemKind.PURCHASE_ORDER)],
            as_of=WINDOW.end,
        )

    def _compose(self):
        return self.composer.compose(
            window=WINDOW,
            statement=make_statement(),
            receivables=self.receivables,
            payables=self.payables,
        )

    def test_revenue_kpi(self):
        kpi = self._compose().kpi("Total Revenue")
        assert kpi.value == Decimal("170000.00")
        assert kpi.target == Decimal("187000.00")
        assert kpi.variance == Decimal("-17000.00")
        assert kpi.trend == Trend.DOWN
        assert kpi.unit == "INR"
        assert kpi.period == "2024-03"

    def test_margin_kpis(self):
        dashboard = self._compose()
        gross = dashboard.kpi("Gross Profit Margin")
        assert gross.value == Decimal("65.59")
        assert gross.target == Decimal("35")
        assert gross.trend == Trend.UP
        assert gross.unit == "%"
        efficiency = dashboard.kpi("Operating Efficiency")
        assert efficiency.category == KPICategory.EFFICIENCY
        assert efficiency.target == Decimal("20")
        assert dashboard.kpi("Net Profit Margin").target == Decimal("15")

    def test_ratios_and_cash_position(self):
        dashboard = self._compose()
        assert dashboard.ratios.current_ratio == Decimal("1.5")
        assert dashboard.ratios.return_on_equity == Decimal("18.2")
        assert dashboard.ratios.gross_profit_margin == Decimal("65.59")
        cash = dashboard.cash_position
        assert cash.total_liquid_assets == Decimal("300000")
        assert cash.available_credit == Decimal("200000")

    def test_aging_summaries(self):
        dashboard = self._compose()
        assert dashboard.receivables_aging.current == Decimal("1000")
        assert dashboard.receivables_aging.days_61_90 == Decimal("500")
        assert dashboard.payables_aging.days_31_60 == Decimal("700")
        assert dashboard.scope_label == "Consolidated"

    def test_stable_trend_on_target(self):
        composer = DashboardComposer(DashboardPolicy(gross_margin_target=Decimal("65.59")))
        dashboard = composer.compose(
            window=WINDOW, statement=make_statement(), receivables=(), payables=(),
        )
        assert dashboard.kpi("Gross Profit Margin").trend == Trend.STABLE
