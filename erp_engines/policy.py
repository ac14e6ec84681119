"""
Module: erp_engines.policy
Responsibility:
    Named, documented policy parameters for every engine.  The rates and
    thresholds that drive tax, costing, P&L estimates, cash-flow
    projection, credit scoring, reconciliation matching and collections
    are explicit inputs, never hard-wired constants, so tests and
    deployments can vary them without code changes.

Architecture position:
    Engines -- pure value objects.  ``erp_config`` loads YAML into these
    types; engines receive them as parameters.

Defaults:
    Every default equals the figure the ERP system historically hard-coded, so
    an unconfigured deployment reproduces its figures exactly.  All
    percentages are expressed in percent (15 means 15%).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


def _check_percent(name: str, value: Decimal) -> None:
    if value < Decimal("0") or value > Decimal("100"):
        raise ValueError(f"{name} must be within [0, 100], got {value}")


def _check_non_negative(name: str, value: Decimal | int) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


# =============================================================================
# Tax
# =============================================================================


@dataclass(frozen=True)
class TaxPolicy:
    """
    Statutory tax defaults.

    Attributes:
        default_gst_rate: GST percent applied when the request names none (18).
        default_tds_rate: TDS percent applied when the request names none (2).
        professional_tax_amount: Fixed professional tax deducted (200).
    """

    default_gst_rate: Decimal = Decimal("18")
    default_tds_rate: Decimal = Decimal("2")
    professional_tax_amount: Decimal = Decimal("200")

    def __post_init__(self) -> None:
        _check_percent("default_gst_rate", self.default_gst_rate)
        _check_percent("default_tds_rate", self.default_tds_rate)
        _check_non_negative("professional_tax_amount", self.professional_tax_amount)


# =============================================================================
# Manufacturing costing
# =============================================================================


@dataclass(frozen=True)
class CostingPolicy:
    """
    Standard and actual costing parameters for production orders.

    Attributes:
        standard_labor_rate_per_unit: Planned labor cost per finished unit (500).
        standard_overhead_pct: Overhead on standard material + labor (15).
        actual_labor_rate_per_unit: Labor estimate per unit when no labor
            cost was recorded for the order (520).
        actual_overhead_pct: Overhead on actual material + labor (16).
        scrap_is_variance: When True the whole scrap cost is reported as
            scrap variance; otherwise it is folded into material variance.
    """

    standard_labor_rate_per_unit: Decimal = Decimal("500")
    standard_overhead_pct: Decimal = Decimal("15")
    actual_labor_rate_per_unit: Decimal = Decimal("520")
    actual_overhead_pct: Decimal = Decimal("16")
    scrap_is_variance: bool = True

    def __post_init__(self) -> None:
        _check_non_negative("standard_labor_rate_per_unit", self.standard_labor_rate_per_unit)
        _check_non_negative("actual_labor_rate_per_unit", self.actual_labor_rate_per_unit)
        _check_percent("standard_overhead_pct", self.standard_overhead_pct)
        _check_percent("actual_overhead_pct", self.actual_overhead_pct)


# =============================================================================
# Profit & loss
# =============================================================================


class ExpenseBasis(str, Enum):
    """What an operating-expense estimate is proportional to."""

    SALES_REVENUE = "sales_revenue"
    TOTAL_REVENUE = "total_revenue"
    LABOR_COST = "labor_cost"
    FIXED = "fixed"


@dataclass(frozen=True)
class OperatingExpenseRule:
    """One estimated operating-expense line.

    Proportional rules carry ``rate`` (percent of the basis); FIXED rules
    carry ``amount`` charged once per statement.
    """

    name: str
    basis: ExpenseBasis
    rate: Decimal | None = None
    amount: Decimal | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("operating expense rule requires a name")
        if self.basis == ExpenseBasis.FIXED:
            if self.amount is None:
                raise ValueError(f"fixed expense {self.name!r} requires an amount")
            _check_non_negative(self.name, self.amount)
        else:
            if self.rate is None:
                raise ValueError(f"expense {self.name!r} requires a rate")
            _check_percent(self.name, self.rate)


DEFAULT_OPERATING_EXPENSE_RULES: tuple[OperatingExpenseRule, ...] = (
    OperatingExpenseRule("salaries_and_wages", ExpenseBasis.LABOR_COST, rate=Decimal("30")),
    OperatingExpenseRule("rent_and_utilities", ExpenseBasis.FIXED, amount=Decimal("50000")),
    OperatingExpenseRule("marketing_expenses", ExpenseBasis.SALES_REVENUE, rate=Decimal("2")),
    OperatingExpenseRule("administrative_expenses", ExpenseBasis.FIXED, amount=Decimal("25000")),
    OperatingExpenseRule("depreciation_and_amortization", ExpenseBasis.FIXED, amount=Decimal("15000")),
    OperatingExpenseRule("other_operating_expenses", ExpenseBasis.FIXED, amount=Decimal("10000")),
)


@dataclass(frozen=True)
class ProfitLossPolicy:
    """
    P&L estimation parameters.

    Attributes:
        cogs_overhead_pct: Manufacturing overhead charged to COGS as a
            percent of material + labor (15).
        operating_expense_rules: Named operating-expense estimates.
    """

    cogs_overhead_pct: Decimal = Decimal("15")
    operating_expense_rules: tuple[OperatingExpenseRule, ...] = DEFAULT_OPERATING_EXPENSE_RULES

    def __post_init__(self) -> None:
        _check_percent("cogs_overhead_pct", self.cogs_overhead_pct)
        names = [r.name for r in self.operating_expense_rules]
        if len(names) != len(set(names)):
            raise ValueError("operating expense rule names must be unique")


# =============================================================================
# Cash flow
# =============================================================================


@dataclass(frozen=True)
class CashFlowPolicy:
    """
    Cash-flow projection parameters.

    Attributes:
        lookback_days: Trailing window for the daily sales average (30).
        default_horizon_days: Forecast length when no end date is given (30).
        fixed_operating_expenses: Operating outflow per forecast (50000).
        fixed_other_expenses: Other outflow per forecast (10000).
        forecast_accuracy: Reported confidence percent (85).  An estimate,
            not derived from historical forecast error.
        payroll_days_per_month: Divisor turning monthly payroll into a
            daily rate (30).
    """

    lookback_days: int = 30
    default_horizon_days: int = 30
    fixed_operating_expenses: Decimal = Decimal("50000")
    fixed_other_expenses: Decimal = Decimal("10000")
    forecast_accuracy: Decimal = Decimal("85")
    payroll_days_per_month: int = 30

    def __post_init__(self) -> None:
        if self.lookback_days <= 0:
            raise ValueError("lookback_days must be positive")
        if self.payroll_days_per_month <= 0:
            raise ValueError("payroll_days_per_month must be positive")
        _check_non_negative("default_horizon_days", self.default_horizon_days)
        _check_non_negative("fixed_operating_expenses", self.fixed_operating_expenses)
        _check_non_negative("fixed_other_expenses", self.fixed_other_expenses)
        _check_percent("forecast_accuracy", self.forecast_accuracy)


# =============================================================================
# Credit scoring
# =============================================================================


@dataclass(frozen=True)
class CreditPolicy:
    """
    Credit scoring weights and risk-tier thresholds.

    These values directly gate credit-hold decisions and are a business
    policy: score = on-time % - average days late * days_late_penalty,
    clamped to [0, 100].

    Attributes:
        history_limit: Most recent invoices considered (12).
        late_threshold_days: Paid later than this is OVERDUE, else LATE (30).
        days_late_penalty: Score points lost per average day late (2).
        low_risk_min_score: Minimum score for LOW risk (80).
        medium_risk_min_score: Minimum score for MEDIUM risk (60).
        medium_risk_max_overdue_pct: MEDIUM requires overdue below this
            percent of the credit limit (20).
        default_credit_limit: Limit used when none is on file (100000).
    """

    history_limit: int = 12
    late_threshold_days: int = 30
    days_late_penalty: Decimal = Decimal("2")
    low_risk_min_score: Decimal = Decimal("80")
    medium_risk_min_score: Decimal = Decimal("60")
    medium_risk_max_overdue_pct: Decimal = Decimal("20")
    default_credit_limit: Decimal = Decimal("100000")

    def __post_init__(self) -> None:
        if self.history_limit <= 0:
            raise ValueError("history_limit must be positive")
        _check_non_negative("late_threshold_days", self.late_threshold_days)
        _check_non_negative("days_late_penalty", self.days_late_penalty)
        _check_percent("low_risk_min_score", self.low_risk_min_score)
        _check_percent("medium_risk_min_score", self.medium_risk_min_score)
        _check_percent("medium_risk_max_overdue_pct", self.medium_risk_max_overdue_pct)
        _check_non_negative("default_credit_limit", self.default_credit_limit)
        if self.medium_risk_min_score > self.low_risk_min_score:
            raise ValueError("medium_risk_min_score cannot exceed low_risk_min_score")


# =============================================================================
# Bank reconciliation
# =============================================================================


@dataclass(frozen=True)
class ReconciliationPolicy:
    """
    Bank matching tolerances.

    Attributes:
        amount_epsilon: Amounts match when strictly closer than this (0.01).
        date_tolerance_days: Dates match when at most this far apart (2).
        lookback_days: Candidate payments start this many days before the
            statement date (7).
        lookahead_days: ... and end this many days after it (1).
    """

    amount_epsilon: Decimal = Decimal("0.01")
    date_tolerance_days: int = 2
    lookback_days: int = 7
    lookahead_days: int = 1

    def __post_init__(self) -> None:
        if self.amount_epsilon <= Decimal("0"):
            raise ValueError("amount_epsilon must be positive")
        _check_non_negative("date_tolerance_days", self.date_tolerance_days)
        _check_non_negative("lookback_days", self.lookback_days)
        _check_non_negative("lookahead_days", self.lookahead_days)


# =============================================================================
# Collections
# =============================================================================


class CollectionActionType(str, Enum):
    REMINDER = "REMINDER"
    FOLLOW_UP = "FOLLOW_UP"
    LEGAL_NOTICE = "LEGAL_NOTICE"
    CREDIT_HOLD = "CREDIT_HOLD"


class CollectionPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    CollectionPriority.LOW: 0,
    CollectionPriority.MEDIUM: 1,
    CollectionPriority.HIGH: 2,
    CollectionPriority.URGENT: 3,
}


@dataclass(frozen=True)
class CollectionRule:
    """Action for items overdue up to ``max_days`` (None = no upper bound)."""

    max_days: int | None
    action: CollectionActionType
    priority: CollectionPriority
    reason: str


DEFAULT_COLLECTION_RULES: tuple[CollectionRule, ...] = (
    CollectionRule(15, CollectionActionType.REMINDER, CollectionPriority.LOW,
                   "Gentle reminder for overdue payment"),
    CollectionRule(30, CollectionActionType.FOLLOW_UP, CollectionPriority.MEDIUM,
                   "Follow-up call required for overdue payment"),
    CollectionRule(60, CollectionActionType.FOLLOW_UP, CollectionPriority.HIGH,
                   "Urgent follow-up required - payment significantly overdue"),
    CollectionRule(90, CollectionActionType.LEGAL_NOTICE, CollectionPriority.HIGH,
                   "Legal notice recommended for long overdue payment"),
    CollectionRule(None, CollectionActionType.CREDIT_HOLD, CollectionPriority.URGENT,
                   "Credit hold recommended - payment severely overdue"),
)


@dataclass(frozen=True)
class CollectionPolicy:
    """
    Collection recommendation parameters.

    Attributes:
        rules: Ascending day tiers; the last tier must be unbounded.
        max_actions: Recommended actions kept for presentation (20).
        bad_debt_provision_pct: Provision on amounts over 90 days (2).
    """

    rules: tuple[CollectionRule, ...] = DEFAULT_COLLECTION_RULES
    max_actions: int = 20
    bad_debt_provision_pct: Decimal = Decimal("2")

    def __post_init__(self) -> None:
        if not self.rules or self.rules[-1].max_days is not None:
            raise ValueError("collection rules must end with an unbounded tier")
        bounds = [r.max_days for r in self.rules[:-1]]
        if any(b is None for b in bounds) or bounds != sorted(bounds):
            raise ValueError("collection rule tiers must be ascending")
        _check_non_negative("max_actions", self.max_actions)
        _check_percent("bad_debt_provision_pct", self.bad_debt_provision_pct)


# =============================================================================
# Dashboard
# =============================================================================


@dataclass(frozen=True)
class DashboardPolicy:
    """
    Dashboard targets and externally maintained figures.

    The balance-sheet ratios and cash position are not derivable from the
    transactional records this engine reads; they are configured figures
    reported as-is.
    """

    default_window_days: int = 30
    gross_margin_target: Decimal = Decimal("35")
    net_margin_target: Decimal = Decimal("15")
    operating_margin_target: Decimal = Decimal("20")
    revenue_target_uplift_pct: Decimal = Decimal("10")  # Target = revenue + 10%
    current_ratio: Decimal = Decimal("1.5")
    quick_ratio: Decimal = Decimal("1.2")
    debt_to_equity_ratio: Decimal = Decimal("0.4")
    return_on_assets: Decimal = Decimal("12.5")
    return_on_equity: Decimal = Decimal("18.2")
    cash_on_hand: Decimal = Decimal("50000")
    bank_balance: Decimal = Decimal("250000")
    credit_facility_limit: Decimal = Decimal("500000")
    credit_facility_used: Decimal = Decimal("300000")
    currency_unit: str = field(default="INR")

    def __post_init__(self) -> None:
        if self.default_window_days <= 0:
            raise ValueError("default_window_days must be positive")
        _check_non_negative("credit_facility_limit", self.credit_facility_limit)
        _check_non_negative("credit_facility_used", self.credit_facility_used)
