"""
BankReconciliationService -- Service wrapper for bank statement matching.

Composes BankReconciliationMatcher (pure engine) with a SystemPaymentSource.

Architecture: erp_services -- imperative shell.
    The statement is validated before any read, candidate payments are
    fetched from the matcher's candidate window around the statement date,
    and the matcher pairs them with the statement lines.

Non-goals:
    - Does NOT persist the result or mark payments as reconciled.
"""

from __future__ import annotations

from erp_engines.policy import ReconciliationPolicy
from erp_engines.reconciliation.bank_matcher import BankReconciliationMatcher
from erp_engines.reconciliation.bank_recon_types import ReconciliationResult
from erp_kernel.domain.records import BankStatement
from erp_kernel.logging_config import LogContext, get_logger
from erp_services.sources import SystemPaymentSource

logger = get_logger("services.bank_reconciliation")


class BankReconciliationService:

    def __init__(
        self,
        payments: SystemPaymentSource,
        policy: ReconciliationPolicy | None = None,
        matcher: BankReconciliationMatcher | None = None,
    ) -> None:
        self._payments = payments
        self._matcher = matcher or BankReconciliationMatcher(policy)

    def reconcile(self, statement: BankStatement) -> ReconciliationResult:
        """Reconcile one bank statement against recorded payments.

        Raises:
            InvalidReconciliationRequestError: Before any read, for an
                empty account id or a negative statement balance.
        """
        self._matcher.validate(statement)
        with LogContext.bind(scope=statement.bank_account_id):
            window = self._matcher.candidate_window(statement.statement_date)
            candidates = self._payments.payments_near(statement.statement_date, window)
            logger.info("reconciliation_candidates_fetched", extra={
                "window": str(window),
                "candidate_count": len(candidates),
            })
            return self._matcher.match(statement=statement, payments=candidates)
