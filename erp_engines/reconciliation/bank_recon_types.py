"""
Bank reconciliation domain types.

Pure frozen dataclasses produced by BankReconciliationMatcher (pure engine)
and returned by BankReconciliationService (imperative shell).

Architecture: erp_engines/reconciliation -- pure domain, zero I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from erp_kernel.domain.values import ZERO


class MatchBasis(str, Enum):
    """Why a statement line was paired with a payment (amount always agrees)."""

    REFERENCE = "REFERENCE"
    DATE = "DATE"


class UnreconciledType(str, Enum):
    BANK_ONLY = "BANK_ONLY"  # On the statement, not in the system
    SYSTEM_ONLY = "SYSTEM_ONLY"  # In the system, not on the statement


class ReconciliationStatus(str, Enum):
    MATCHED = "MATCHED"
    PARTIAL = "PARTIAL"
    UNMATCHED = "UNMATCHED"


@dataclass(frozen=True)
class ReconciliationMatch:
    """One statement line paired with one system payment."""

    line_index: int
    payment_id: str
    amount: Decimal
    basis: MatchBasis


@dataclass(frozen=True)
class UnreconciledItem:
    """A statement line or system payment left without a counterpart."""

    item_type: UnreconciledType
    item_date: date
    description: str
    amount: Decimal
    reference_number: str | None = None
    line_index: int | None = None
    payment_id: str | None = None


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of matching one bank statement.

    ``variance`` is statement_balance - reconciled_balance.
    """

    bank_account_id: str
    statement_date: date
    statement_balance: Decimal
    reconciled_balance: Decimal
    matches: tuple[ReconciliationMatch, ...] = ()
    unreconciled_items: tuple[UnreconciledItem, ...] = ()
    status: ReconciliationStatus = ReconciliationStatus.MATCHED

    @property
    def variance(self) -> Decimal:
        return self.statement_balance - self.reconciled_balance

    @property
    def matched_count(self) -> int:
        return len(self.matches)

    @property
    def bank_only(self) -> tuple[UnreconciledItem, ...]:
        return tuple(
            i for i in self.unreconciled_items if i.item_type == UnreconciledType.BANK_ONLY
        )

    @property
    def system_only(self) -> tuple[UnreconciledItem, ...]:
        return tuple(
            i for i in self.unreconciled_items if i.item_type == UnreconciledType.SYSTEM_ONLY
        )

    @property
    def unreconciled_total(self) -> Decimal:
        total = ZERO
        for item in self.unreconciled_items:
            total += item.amount
        return total
