"""
erp_engines.profit_loss -- Profit & loss statement generator.

Responsibility:
    Compose revenue, cost of goods sold and estimated operating expenses
    for a date window into an immutable ``ProfitLossStatement``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Revenue and production cost records are read by the caller through
    SalesRevenueSource / ServiceRevenueSource / ProductionCostSource and
    passed in; nothing is cached, every call recomputes.

Algorithm:
    1. sales_revenue   = sum of confirmed sales order amounts
    2. service_revenue = sum of completed service amounts
    3. COGS            = actual material + actual labor
                         + overhead (cogs_overhead_pct of material + labor)
                         + scrap, over completed production orders
    4. gross_profit     = total_revenue - total_cogs
    5. operating expenses from the policy's named rules
    6. operating_profit = gross_profit - total_operating_expenses
       net_profit       = operating_profit + other_income - other_expenses
       profit_margin    = net_profit / total_revenue * 100 (0 without revenue)

Failure modes:
    - InvalidAmountError when other_income / other_expenses is negative.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from erp_engines.policy import ExpenseBasis, OperatingExpenseRule, ProfitLossPolicy
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import (
    CONSOLIDATED,
    DateWindow,
    ProductionCostRecord,
    ReportScope,
    RevenueRecord,
)
from erp_kernel.domain.values import (
    ZERO,
    of_percent,
    percentage,
    quantize_money,
    round_percent,
    sum_amounts,
    to_decimal,
)
from erp_kernel.exceptions import InvalidAmountError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.profit_loss")


@dataclass(frozen=True)
class RevenueBreakdown:
    sales: Decimal
    service: Decimal
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.sales + self.service + self.other


@dataclass(frozen=True)
class CostOfGoodsSold:
    material: Decimal
    labor: Decimal
    manufacturing_overhead: Decimal
    scrap: Decimal

    @property
    def total(self) -> Decimal:
        return self.material + self.labor + self.manufacturing_overhead + self.scrap


@dataclass(frozen=True)
class ExpenseLine:
    """One estimated operating expense."""

    name: str
    basis: ExpenseBasis
    amount: Decimal


@dataclass(frozen=True)
class OperatingExpenses:
    lines: tuple[ExpenseLine, ...]

    @property
    def total(self) -> Decimal:
        return sum_amounts(line.amount for line in self.lines)

    def amount_of(self, name: str) -> Decimal:
        for line in self.lines:
            if line.name == name:
                return line.amount
        return ZERO


@dataclass(frozen=True)
class ProfitLossStatement:
    """
    Profit & loss statement for one window and scope.

    Immutable once computed.
    """

    scope_label: str
    window: DateWindow
    revenue: RevenueBreakdown
    cost_of_goods_sold: CostOfGoodsSold
    operating_expenses: OperatingExpenses
    other_income: Decimal
    other_expenses: Decimal
    production_order_count: int = 0

    @property
    def gross_profit(self) -> Decimal:
        return self.revenue.total - self.cost_of_goods_sold.total

    @property
    def operating_profit(self) -> Decimal:
        return self.gross_profit - self.operating_expenses.total

    @property
    def net_profit(self) -> Decimal:
        return self.operating_profit + self.other_income - self.other_expenses

    @property
    def profit_margin(self) -> Decimal:
        return round_percent(percentage(self.net_profit, self.revenue.total))

    @property
    def gross_margin(self) -> Decimal:
        return round_percent(percentage(self.gross_profit, self.revenue.total))

    @property
    def operating_margin(self) -> Decimal:
        return round_percent(percentage(self.operating_profit, self.revenue.total))


class ProfitLossGenerator:
    """
    Build P&L statements from revenue and production cost records.

    Pure - all records and adjustments are parameters.
    """

    def __init__(self, policy: ProfitLossPolicy | None = None):
        self._policy = policy or ProfitLossPolicy()

    @traced_engine(
        "profit_loss", "1.0",
        fingerprint_fields=("window", "scope", "other_income", "other_expenses"),
    )
    def generate(
        self,
        window: DateWindow,
        sales: Iterable[RevenueRecord],
        services: Iterable[RevenueRecord],
        production: Iterable[ProductionCostRecord],
        scope: ReportScope = CONSOLIDATED,
        other_income: Decimal = ZERO,
        other_expenses: Decimal = ZERO,
        other_revenue: Decimal = ZERO,
    ) -> ProfitLossStatement:
        """
        Compose a P&L statement.

        The statement is headed with ``scope.label``: the branch display
        name when the caller supplied one, else the branch id, or
        "Consolidated" for an unscoped report.

        Raises:
            InvalidAmountError: If an adjustment amount is negative.
        """
        t0 = time.monotonic()
        other_income = to_decimal(other_income)
        other_expenses = to_decimal(other_expenses)
        other_revenue = to_decimal(other_revenue)
        for name, value in (
            ("other_income", other_income),
            ("other_expenses", other_expenses),
            ("other_revenue", other_revenue),
        ):
            if value < ZERO:
                raise InvalidAmountError(name, value, "must not be negative")

        revenue = RevenueBreakdown(
            sales=quantize_money(sum_amounts(r.amount for r in sales)),
            service=quantize_money(sum_amounts(r.amount for r in services)),
            other=quantize_money(other_revenue),
        )
        cogs, order_count = self._cost_of_goods_sold(production)
        expenses = OperatingExpenses(
            lines=tuple(
                self._estimate(rule, revenue, cogs)
                for rule in self._policy.operating_expense_rules
            ),
        )

        statement = ProfitLossStatement(
            scope_label=scope.label,
            window=window,
            revenue=revenue,
            cost_of_goods_sold=cogs,
            operating_expenses=expenses,
            other_income=quantize_money(other_income),
            other_expenses=quantize_money(other_expenses),
            production_order_count=order_count,
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("profit_loss_generated", extra={
            "scope": statement.scope_label,
            "window": str(window),
            "total_revenue": str(revenue.total),
            "total_cogs": str(cogs.total),
            "total_operating_expenses": str(expenses.total),
            "net_profit": str(statement.net_profit),
            "profit_margin": str(statement.profit_margin),
            "production_order_count": order_count,
            "duration_ms": duration_ms,
        })
        return statement

    def _cost_of_goods_sold(
        self,
        production: Iterable[ProductionCostRecord],
    ) -> tuple[CostOfGoodsSold, int]:
        material = labor = scrap = ZERO
        count = 0
        for record in production:
            material += record.actual_cost.material
            labor += record.actual_cost.labor
            scrap += record.actual_cost.scrap
            count += 1
        overhead = quantize_money(of_percent(material + labor, self._policy.cogs_overhead_pct))
        cogs = CostOfGoodsSold(
            material=quantize_money(material),
            labor=quantize_money(labor),
            manufacturing_overhead=overhead,
            scrap=quantize_money(scrap),
        )
        return cogs, count

    @staticmethod
    def _estimate(
        rule: OperatingExpenseRule,
        revenue: RevenueBreakdown,
        cogs: CostOfGoodsSold,
    ) -> ExpenseLine:
        if rule.basis == ExpenseBasis.FIXED:
            amount = rule.amount
        elif rule.basis == ExpenseBasis.SALES_REVENUE:
            amount = of_percent(revenue.sales, rule.rate)
        elif rule.basis == ExpenseBasis.TOTAL_REVENUE:
            amount = of_percent(revenue.total, rule.rate)
        else:
            amount = of_percent(cogs.labor, rule.rate)
        return ExpenseLine(name=rule.name, basis=rule.basis, amount=quantize_money(amount))
