"""
erp_engines.cash_flow -- Cash flow forecaster.

Responsibility:
    Project cash inflows and outflows over a forecast window from a
    trailing daily sales average plus the open receivables and payables
    falling due inside the window.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Known simplifications:
    - ``forecast_accuracy`` is a configured or caller-supplied confidence
      figure; it is not derived from historical forecast error.
    - Fixed operating and other expenses are policy amounts charged once
      per forecast regardless of its length.
    - The opening balance is an external input, never computed here.

Failure modes:
    - InvalidAmountError for negative payroll, capex, tax payments or
      other income.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from erp_engines.policy import CashFlowPolicy
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import (
    CONSOLIDATED,
    DateWindow,
    MonetaryItem,
    ReportScope,
    RevenueRecord,
)
from erp_kernel.domain.values import (
    ZERO,
    quantize_money,
    safe_ratio,
    sum_amounts,
    to_decimal,
)
from erp_kernel.exceptions import InvalidAmountError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.cash_flow")


@dataclass(frozen=True)
class CashInflows:
    sales_receipts: Decimal
    receivable_collections: Decimal
    other_income: Decimal

    @property
    def total(self) -> Decimal:
        return self.sales_receipts + self.receivable_collections + self.other_income


@dataclass(frozen=True)
class CashOutflows:
    supplier_payments: Decimal
    salary_payments: Decimal
    operating_expenses: Decimal
    capital_expenditure: Decimal
    tax_payments: Decimal
    other_expenses: Decimal

    @property
    def total(self) -> Decimal:
        return (
            self.supplier_payments
            + self.salary_payments
            + self.operating_expenses
            + self.capital_expenditure
            + self.tax_payments
            + self.other_expenses
        )


@dataclass(frozen=True)
class CashFlowForecast:
    """Projected cash position at the end of a window."""

    scope_label: str
    window: DateWindow
    opening_balance: Decimal
    average_daily_sales: Decimal
    inflows: CashInflows
    outflows: CashOutflows
    forecast_accuracy: Decimal

    @property
    def forecast_days(self) -> int:
        return self.window.days

    @property
    def net_cash_flow(self) -> Decimal:
        return self.inflows.total - self.outflows.total

    @property
    def closing_balance(self) -> Decimal:
        return self.opening_balance + self.net_cash_flow


def _non_negative(name: str, value: Decimal | int | str) -> Decimal:
    amount = to_decimal(value)
    if amount < ZERO:
        raise InvalidAmountError(name, amount, "must not be negative")
    return amount


class CashFlowForecaster:
    """Cash flow projection over a window. Pure."""

    def __init__(self, policy: CashFlowPolicy | None = None):
        self._policy = policy or CashFlowPolicy()

    @property
    def policy(self) -> CashFlowPolicy:
        return self._policy

    @traced_engine(
        "cash_flow", "1.0",
        fingerprint_fields=("window", "scope", "opening_balance", "monthly_payroll"),
    )
    def forecast(
        self,
        window: DateWindow,
        historical_sales: Iterable[RevenueRecord],
        receivables: Iterable[MonetaryItem],
        payables: Iterable[MonetaryItem],
        opening_balance: Decimal = ZERO,
        scope: ReportScope = CONSOLIDATED,
        monthly_payroll: Decimal = ZERO,
        capital_expenditure: Decimal = ZERO,
        tax_payments: Decimal = ZERO,
        other_income: Decimal = ZERO,
        forecast_accuracy: Decimal | None = None,
    ) -> CashFlowForecast:
        """
        Project cash flow over ``window``.

        ``historical_sales`` covers the trailing lookback period; only
        receivables and payables due inside ``window`` are counted.
        """
        t0 = time.monotonic()
        policy = self._policy
        monthly_payroll = _non_negative("monthly_payroll", monthly_payroll)
        capital_expenditure = _non_negative("capital_expenditure", capital_expenditure)
        tax_payments = _non_negative("tax_payments", tax_payments)
        other_income = _non_negative("other_income", other_income)
        opening_balance = to_decimal(opening_balance)
        days = Decimal(window.days)

        historical_total = sum_amounts(r.amount for r in historical_sales)
        average_daily_sales = safe_ratio(historical_total, Decimal(policy.lookback_days))

        collections = sum_amounts(
            item.balance_amount for item in receivables if window.contains(item.due_date)
        )
        supplier_payments = sum_amounts(
            item.balance_amount for item in payables if window.contains(item.due_date)
        )
        salary = monthly_payroll / Decimal(policy.payroll_days_per_month) * days

        inflows = CashInflows(
            sales_receipts=quantize_money(average_daily_sales * days),
            receivable_collections=quantize_money(collections),
            other_income=quantize_money(other_income),
        )
        outflows = CashOutflows(
            supplier_payments=quantize_money(supplier_payments),
            salary_payments=quantize_money(salary),
            operating_expenses=quantize_money(policy.fixed_operating_expenses),
            capital_expenditure=quantize_money(capital_expenditure),
            tax_payments=quantize_money(tax_payments),
            other_expenses=quantize_money(policy.fixed_other_expenses),
        )
        result = CashFlowForecast(
            scope_label=scope.label,
            window=window,
            opening_balance=quantize_money(opening_balance),
            average_daily_sales=quantize_money(average_daily_sales),
            inflows=inflows,
            outflows=outflows,
            forecast_accuracy=(
                to_decimal(forecast_accuracy)
                if forecast_accuracy is not None
                else policy.forecast_accuracy
            ),
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("cash_flow_forecast_completed", extra={
            "scope": result.scope_label,
            "window": str(window),
            "forecast_days": result.forecast_days,
            "total_inflows": str(inflows.total),
            "total_outflows": str(outflows.total),
            "net_cash_flow": str(result.net_cash_flow),
            "closing_balance": str(result.closing_balance),
            "duration_ms": duration_ms,
        })
        return result
