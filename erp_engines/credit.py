"""
Module: erp_engines.credit
Responsibility:
    Derive a 0-100 credit score and a risk tier for a customer from its
    recent payment history, credit limit and current exposure.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    History entries come from a PaymentHistorySource; ``as_of`` and the
    exposure figures are supplied by the caller.

Scoring (weights and thresholds from ``CreditPolicy``):
    score = clamp(on_time % - average days late * days_late_penalty, 0, 100)
    LOW    if score >= low_risk_min_score and nothing is overdue
    MEDIUM if score >= medium_risk_min_score and overdue < 20% of limit
    HIGH   otherwise

    This is a linear heuristic and a business policy decision; the
    weights are configuration, not engineering constants.

Invariants enforced:
    - 0 <= credit_score <= 100 for every history.
    - available_credit = max(0, credit_limit - credit_used).
    - Unpaid entries not yet due are not scored.
    - The risk tier is decided on the unrounded score; the reported score
      is rounded half-up to an integer.

Failure modes:
    - MissingIdentifierError for an empty counterparty id.
    - InvalidAmountError for a negative credit limit or exposure.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from itertools import islice

from erp_engines.policy import CreditPolicy
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import PaymentHistoryEntry
from erp_kernel.domain.values import (
    HUNDRED,
    ZERO,
    clamp,
    of_percent,
    percentage,
    round_percent,
    safe_ratio,
    to_decimal,
)
from erp_kernel.exceptions import InvalidAmountError, MissingIdentifierError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.credit")


class PaymentStatus(str, Enum):
    ON_TIME = "ON_TIME"
    LATE = "LATE"
    OVERDUE = "OVERDUE"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class PaymentHistoryItem:
    """A scored history entry."""

    entry: PaymentHistoryEntry
    days_late: int
    status: PaymentStatus

    @property
    def invoice_id(self) -> str:
        return self.entry.invoice_id


@dataclass(frozen=True)
class CreditProfile:
    """Derived credit position of one customer; recomputed every call."""

    counterparty_id: str
    credit_limit: Decimal
    credit_used: Decimal
    overdue_amount: Decimal
    credit_score: int
    risk_level: RiskLevel
    on_time_percentage: Decimal
    average_days_late: Decimal
    payment_history: tuple[PaymentHistoryItem, ...]

    @property
    def available_credit(self) -> Decimal:
        return max(ZERO, self.credit_limit - self.credit_used)


class CreditScoringEngine:
    """
    Credit score and risk tier from payment history.

    Pure functions - no I/O, no clock access.
    """

    def __init__(self, policy: CreditPolicy | None = None):
        self._policy = policy or CreditPolicy()

    @property
    def policy(self) -> CreditPolicy:
        return self._policy

    def classify(self, entry: PaymentHistoryEntry, as_of: date) -> PaymentHistoryItem | None:
        """Score one entry; None for an unpaid entry that is not yet due."""
        if entry.is_paid:
            days_late = max(0, (entry.paid_date - entry.due_date).days)
            if days_late == 0:
                status = PaymentStatus.ON_TIME
            elif days_late <= self._policy.late_threshold_days:
                status = PaymentStatus.LATE
            else:
                status = PaymentStatus.OVERDUE
            return PaymentHistoryItem(entry, days_late, status)

        if entry.due_date < as_of:
            return PaymentHistoryItem(
                entry, (as_of - entry.due_date).days, PaymentStatus.OVERDUE,
            )
        return None

    @traced_engine(
        "credit", "1.0",
        fingerprint_fields=("counterparty_id", "as_of", "credit_limit", "credit_used", "overdue_amount"),
    )
    def score(
        self,
        counterparty_id: str,
        history: Iterable[PaymentHistoryEntry],
        as_of: date,
        credit_used: Decimal = ZERO,
        overdue_amount: Decimal = ZERO,
        credit_limit: Decimal | None = None,
    ) -> CreditProfile:
        """
        Build the credit profile of a customer.

        ``history`` is expected most recent first; only the first
        ``history_limit`` entries are considered.
        """
        t0 = time.monotonic()
        policy = self._policy
        if not counterparty_id or not str(counterparty_id).strip():
            raise MissingIdentifierError("counterparty_id")
        limit = policy.default_credit_limit if credit_limit is None else to_decimal(credit_limit)
        credit_used = to_decimal(credit_used)
        overdue_amount = to_decimal(overdue_amount)
        for name, value in (
            ("credit_limit", limit),
            ("credit_used", credit_used),
            ("overdue_amount", overdue_amount),
        ):
            if value < ZERO:
                raise InvalidAmountError(name, value, "must not be negative")

        items: list[PaymentHistoryItem] = []
        for entry in islice(history, policy.history_limit):
            item = self.classify(entry, as_of)
            if item is not None:
                items.append(item)

        count = Decimal(len(items))
        on_time = Decimal(sum(1 for i in items if i.status == PaymentStatus.ON_TIME))
        total_days_late = Decimal(sum(i.days_late for i in items))
        on_time_pct = percentage(on_time, count) if items else HUNDRED
        average_days_late = safe_ratio(total_days_late, count)

        raw_score = clamp(
            on_time_pct - average_days_late * policy.days_late_penalty, ZERO, HUNDRED,
        )
        risk = self._risk_level(raw_score, overdue_amount, limit)

        profile = CreditProfile(
            counterparty_id=counterparty_id,
            credit_limit=limit,
            credit_used=credit_used,
            overdue_amount=overdue_amount,
            credit_score=int(raw_score.to_integral_value(rounding=ROUND_HALF_UP)),
            risk_level=risk,
            on_time_percentage=round_percent(on_time_pct),
            average_days_late=round_percent(average_days_late),
            payment_history=tuple(items),
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("credit_profile_scored", extra={
            "counterparty_id": counterparty_id,
            "history_count": len(items),
            "credit_score": profile.credit_score,
            "risk_level": risk.value,
            "credit_limit": str(limit),
            "credit_used": str(credit_used),
            "overdue_amount": str(overdue_amount),
            "duration_ms": duration_ms,
        })
        return profile

    def _risk_level(
        self,
        score: Decimal,
        overdue_amount: Decimal,
        credit_limit: Decimal,
    ) -> RiskLevel:
        policy = self._policy
        if score >= policy.low_risk_min_score and overdue_amount == ZERO:
            return RiskLevel.LOW
        if (
            score >= policy.medium_risk_min_score
            and overdue_amount < of_percent(credit_limit, policy.medium_risk_max_overdue_pct)
        ):
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH
