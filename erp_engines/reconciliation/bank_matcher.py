"""
BankReconciliationMatcher -- Pure engine matching statement lines to payments.

Greedy, one-to-one, order-preserving matching of externally supplied bank
statement lines against internally recorded payments.

Architecture: erp_engines -- pure calculation, zero I/O, zero DB access.
Candidates are fetched by the service layer (SystemPaymentSource) from
``candidate_window(statement_date)``.

Matching rule:
    For each statement line, in statement order, scan the still-unmatched
    payments in their supplied order.  The first payment whose amount is
    within ``amount_epsilon`` AND whose reference appears inside the
    line's reference, or whose date is within ``date_tolerance_days``,
    is consumed.  First-fit, not best-fit: changing to optimal matching
    would change reconciliation outcomes.

Invariants enforced:
    - Each line and each payment is used at most once.
    - Deterministic: the same statement and candidate sequence always
      produce the same result.
    - status is MATCHED when nothing is left unreconciled, UNMATCHED when
      no pair was made, PARTIAL otherwise.

Failure modes:
    - InvalidReconciliationRequestError for an empty bank account id or a
      negative statement balance, raised before any matching.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from datetime import date, timedelta

from erp_engines.policy import ReconciliationPolicy
from erp_engines.reconciliation.bank_recon_types import (
    MatchBasis,
    ReconciliationMatch,
    ReconciliationResult,
    ReconciliationStatus,
    UnreconciledItem,
    UnreconciledType,
)
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import (
    BankStatement,
    BankStatementLine,
    DateWindow,
    SystemPaymentRecord,
)
from erp_kernel.domain.values import ZERO
from erp_kernel.exceptions import InvalidReconciliationRequestError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.reconciliation.bank_matcher")


class BankReconciliationMatcher:
    """Pure engine for bank statement matching.

    Usage:
        matcher = BankReconciliationMatcher()
        result = matcher.match(statement=statement, payments=candidates)
    """

    def __init__(self, policy: ReconciliationPolicy | None = None):
        self._policy = policy or ReconciliationPolicy()

    def candidate_window(self, statement_date: date) -> DateWindow:
        """Payment dates eligible for matching a statement."""
        return DateWindow(
            start=statement_date - timedelta(days=self._policy.lookback_days),
            end=statement_date + timedelta(days=self._policy.lookahead_days),
        )

    def validate(self, statement: BankStatement) -> None:
        """
        Reject a statement that cannot be reconciled.

        Raises:
            InvalidReconciliationRequestError: On an empty bank account id
                or a negative statement balance.
        """
        account = statement.bank_account_id
        if account is None or not str(account).strip():
            raise InvalidReconciliationRequestError(
                "", "bank_account_id is required",
            )
        if statement.statement_balance < ZERO:
            raise InvalidReconciliationRequestError(
                account,
                f"statement balance must not be negative (got {statement.statement_balance})",
            )

    def match_basis(
        self,
        line: BankStatementLine,
        payment: SystemPaymentRecord,
    ) -> MatchBasis | None:
        """How ``line`` matches ``payment``, or None if it does not."""
        policy = self._policy
        if abs(line.amount - payment.amount) >= policy.amount_epsilon:
            return None
        if (
            line.reference_number
            and payment.reference_number
            and payment.reference_number in line.reference_number
        ):
            return MatchBasis.REFERENCE
        if abs((line.transaction_date - payment.payment_date).days) <= policy.date_tolerance_days:
            return MatchBasis.DATE
        return None

    @traced_engine("bank_reconciliation", "1.0", fingerprint_fields=("statement", "payments"))
    def match(
        self,
        statement: BankStatement,
        payments: Sequence[SystemPaymentRecord],
    ) -> ReconciliationResult:
        """Match a statement against candidate payments."""
        t0 = time.monotonic()
        self.validate(statement)
        payments = tuple(payments)

        consumed: set[int] = set()
        matches: list[ReconciliationMatch] = []
        unreconciled: list[UnreconciledItem] = []
        reconciled = ZERO

        for line_index, line in enumerate(statement.lines):
            found = None
            for payment_index, payment in enumerate(payments):
                if payment_index in consumed:
                    continue
                basis = self.match_basis(line, payment)
                if basis is not None:
                    found = (payment_index, payment, basis)
                    break

            if found is None:
                unreconciled.append(UnreconciledItem(
                    item_type=UnreconciledType.BANK_ONLY,
                    item_date=line.transaction_date,
                    description=line.description,
                    amount=line.amount,
                    reference_number=line.reference_number or None,
                    line_index=line_index,
                ))
                continue

            payment_index, payment, basis = found
            consumed.add(payment_index)
            reconciled += line.amount
            matches.append(ReconciliationMatch(
                line_index=line_index,
                payment_id=payment.payment_id,
                amount=line.amount,
                basis=basis,
            ))

        for payment_index, payment in enumerate(payments):
            if payment_index in consumed:
                continue
            unreconciled.append(UnreconciledItem(
                item_type=UnreconciledType.SYSTEM_ONLY,
                item_date=payment.payment_date,
                description=f"Payment {payment.payment_number or payment.payment_id}",
                amount=payment.amount,
                reference_number=payment.reference_number or None,
                payment_id=payment.payment_id,
            ))

        if not unreconciled:
            status = ReconciliationStatus.MATCHED
        elif not matches:
            status = ReconciliationStatus.UNMATCHED
        else:
            status = ReconciliationStatus.PARTIAL

        result = ReconciliationResult(
            bank_account_id=statement.bank_account_id,
            statement_date=statement.statement_date,
            statement_balance=statement.statement_balance,
            reconciled_balance=reconciled,
            matches=tuple(matches),
            unreconciled_items=tuple(unreconciled),
            status=status,
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("bank_reconciliation_completed", extra={
            "bank_account_id": statement.bank_account_id,
            "statement_date": statement.statement_date.isoformat(),
            "line_count": len(statement.lines),
            "candidate_count": len(payments),
            "matched_count": len(matches),
            "unreconciled_count": len(unreconciled),
            "reconciled_balance": str(reconciled),
            "variance": str(result.variance),
            "status": status.value,
            "duration_ms": duration_ms,
        })
        return result
