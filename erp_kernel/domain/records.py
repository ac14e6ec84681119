"""
Records -- Immutable input records consumed by the engines.

Responsibility:
    Frozen dataclasses for every raw transactional record the engine reads:
    open invoices / purchase orders, revenue lines, production cost inputs,
    payment history and bank statement data, plus the typed filter
    (``ReportScope``) and date window (``DateWindow``) passed to every
    data source.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Populated by data sources
    (selectors or test fakes), consumed by ``erp_engines``.

Invariants enforced:
    - Amounts are Decimal (strings and ints are converted, floats rejected).
    - ``MonetaryItem.balance_amount == total_amount - paid_amount`` and is
      never negative.
    - ``DateWindow.start <= DateWindow.end``.
    - Identifiers are non-empty when present.

Failure modes:
    - InvalidAmountError / InvalidDateRangeError / MissingIdentifierError on
      construction with invalid values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum

from erp_kernel.domain.values import ZERO, sum_amounts, to_decimal
from erp_kernel.exceptions import (
    InvalidAmountError,
    InvalidDateRangeError,
    MissingIdentifierError,
)


def _set_decimal(obj: object, name: str) -> Decimal:
    value = to_decimal(getattr(obj, name))
    object.__setattr__(obj, name, value)
    return value


def _require_id(value: str | None, name: str) -> None:
    if value is None or not str(value).strip():
        raise MissingIdentifierError(name)


# =============================================================================
# Filters
# =============================================================================


@dataclass(frozen=True)
class ReportScope:
    """Typed query filter shared by every data source.

    ``None`` means "no restriction".  An empty string is rejected so that a
    blank form field can never silently widen a query to all branches.
    ``branch_name`` is display-only: reports print it instead of the id,
    and it takes no part in filtering or equality.
    """

    branch_id: str | None = None
    counterparty_id: str | None = None
    branch_name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.branch_id is not None:
            _require_id(self.branch_id, "branch_id")
        if self.counterparty_id is not None:
            _require_id(self.counterparty_id, "counterparty_id")

    @property
    def is_consolidated(self) -> bool:
        return self.branch_id is None

    @property
    def label(self) -> str:
        if self.branch_id is None:
            return "Consolidated"
        return self.branch_name or self.branch_id

    def for_counterparty(self, counterparty_id: str) -> ReportScope:
        return ReportScope(
            branch_id=self.branch_id,
            counterparty_id=counterparty_id,
            branch_name=self.branch_name,
        )


CONSOLIDATED = ReportScope()


@dataclass(frozen=True)
class DateWindow:
    """Inclusive calendar window ``[start, end]``."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidDateRangeError(self.start.isoformat(), self.end.isoformat())

    @classmethod
    def following(cls, start: date, days: int) -> DateWindow:
        return cls(start=start, end=start + timedelta(days=days))

    @classmethod
    def trailing(cls, end: date, days: int) -> DateWindow:
        return cls(start=end - timedelta(days=days), end=end)

    @property
    def days(self) -> int:
        """Number of whole days between start and end."""
        return (self.end - self.start).days

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


# =============================================================================
# Receivables / payables
# =============================================================================


class MonetaryItemKind(str, Enum):
    INVOICE = "invoice"
    PURCHASE_ORDER = "purchase_order"


@dataclass(frozen=True)
class MonetaryItem:
    """An open invoice or purchase order.

    ``balance_amount`` is derived, never stored, so it cannot drift from
    ``total_amount - paid_amount``.
    """

    item_id: str
    counterparty_id: str
    issue_date: date
    due_date: date
    total_amount: Decimal
    paid_amount: Decimal = ZERO
    counterparty_name: str | None = None
    document_number: str | None = None
    kind: MonetaryItemKind = MonetaryItemKind.INVOICE

    def __post_init__(self) -> None:
        _require_id(self.item_id, "item_id")
        _require_id(self.counterparty_id, "counterparty_id")
        total = _set_decimal(self, "total_amount")
        paid = _set_decimal(self, "paid_amount")
        if total < ZERO:
            raise InvalidAmountError("total_amount", total, "must not be negative")
        if paid < ZERO:
            raise InvalidAmountError("paid_amount", paid, "must not be negative")
        if paid > total:
            raise InvalidAmountError(
                "paid_amount", paid, f"exceeds total amount {total}"
            )

    @property
    def balance_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def is_settled(self) -> bool:
        return self.balance_amount == ZERO


@dataclass(frozen=True)
class RevenueRecord:
    """A confirmed sales order or completed service (amount + date)."""

    amount: Decimal
    record_date: date
    reference: str | None = None

    def __post_init__(self) -> None:
        _set_decimal(self, "amount")


# =============================================================================
# Manufacturing costs
# =============================================================================


@dataclass(frozen=True)
class BomLine:
    """Bill-of-materials requirement for one unit of finished product."""

    item_id: str
    quantity_per_unit: Decimal
    unit_standard_cost: Decimal

    def __post_init__(self) -> None:
        _set_decimal(self, "quantity_per_unit")
        _set_decimal(self, "unit_standard_cost")


@dataclass(frozen=True)
class MaterialConsumption:
    """Material actually issued to a production order."""

    item_id: str
    actual_quantity: Decimal
    unit_cost: Decimal

    def __post_init__(self) -> None:
        _set_decimal(self, "actual_quantity")
        _set_decimal(self, "unit_cost")


@dataclass(frozen=True)
class ProductionOrderCostInputs:
    """Raw cost data of one completed production order.

    ``actual_labor_cost`` is None when no time tracking was recorded; the
    costing policy then estimates labor from a per-unit rate.
    """

    production_order_id: str
    quantity: Decimal
    bom_lines: tuple[BomLine, ...] = ()
    consumptions: tuple[MaterialConsumption, ...] = ()
    scrap_costs: tuple[Decimal, ...] = ()
    actual_labor_cost: Decimal | None = None
    order_number: str | None = None
    completed_on: date | None = None

    def __post_init__(self) -> None:
        _set_decimal(self, "quantity")
        object.__setattr__(
            self, "scrap_costs", tuple(to_decimal(c) for c in self.scrap_costs)
        )
        if self.actual_labor_cost is not None:
            _set_decimal(self, "actual_labor_cost")


@dataclass(frozen=True)
class StandardCost:
    material: Decimal = ZERO
    labor: Decimal = ZERO
    overhead: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("material", "labor", "overhead"):
            _set_decimal(self, name)

    @property
    def total(self) -> Decimal:
        return self.material + self.labor + self.overhead


@dataclass(frozen=True)
class ActualCost:
    material: Decimal = ZERO
    labor: Decimal = ZERO
    overhead: Decimal = ZERO
    scrap: Decimal = ZERO

    def __post_init__(self) -> None:
        for name in ("material", "labor", "overhead", "scrap"):
            _set_decimal(self, name)

    @property
    def total(self) -> Decimal:
        return self.material + self.labor + self.overhead + self.scrap


@dataclass(frozen=True)
class ProductionCostRecord:
    """Standard vs. actual cost of one completed production order."""

    production_order_id: str
    quantity: Decimal
    standard_cost: StandardCost
    actual_cost: ActualCost
    order_number: str | None = None
    completed_on: date | None = None

    def __post_init__(self) -> None:
        _set_decimal(self, "quantity")


# =============================================================================
# Payment history (credit scoring)
# =============================================================================


@dataclass(frozen=True)
class PaymentHistoryEntry:
    """One invoice of a counterparty with its first payment, if any."""

    invoice_id: str
    due_date: date
    amount: Decimal
    paid_date: date | None = None
    invoice_number: str | None = None

    def __post_init__(self) -> None:
        _set_decimal(self, "amount")

    @property
    def is_paid(self) -> bool:
        return self.paid_date is not None


# =============================================================================
# Bank reconciliation
# =============================================================================


class TransactionDirection(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass(frozen=True)
class BankStatementLine:
    """One externally supplied bank statement transaction."""

    transaction_date: date
    description: str
    amount: Decimal
    direction: TransactionDirection = TransactionDirection.CREDIT
    reference_number: str | None = None

    def __post_init__(self) -> None:
        _set_decimal(self, "amount")


@dataclass(frozen=True)
class BankStatement:
    """A bank statement submitted for reconciliation.

    Validation (account id, balance sign) is performed by the matcher so
    that the rejection is reported as an invalid reconciliation request.
    """

    bank_account_id: str
    statement_date: date
    statement_balance: Decimal
    lines: tuple[BankStatementLine, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _set_decimal(self, "statement_balance")
        object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def line_total(self) -> Decimal:
        return sum_amounts(line.amount for line in self.lines)


@dataclass(frozen=True)
class SystemPaymentRecord:
    """A payment recorded internally, candidate for bank matching."""

    payment_id: str
    amount: Decimal
    payment_date: date
    reference_number: str | None = None
    status: str = "COMPLETED"
    payment_number: str | None = None

    def __post_init__(self) -> None:
        _set_decimal(self, "amount")
