"""
Tests for BankReconciliationService.

Covers:
- Candidate payments read from the window around the statement date
- Validation happens before any read
- Matching result passed through from the matcher
"""

from datetime import date
from decimal import Decimal

import pytest

from erp_engines.policy import ReconciliationPolicy
from erp_engines.reconciliation import ReconciliationStatus
from erp_kernel.domain.records import BankStatement, BankStatementLine, DateWindow
from erp_kernel.exceptions import InvalidReconciliationRequestError
from erp_services import BankReconciliationService

STATEMENT_DATE = date(2024, 3, 31)


def make_statement(*lines, account="ACC-001", balance="1000"):
    return BankStatement(
        bank_account_id=account,
        statement_date=STATEMENT_DATE,
        statement_balance=Decimal(balance),
        lines=lines,
    )


class TestBankReconciliationService:

    def test_reads_candidate_window(self, fake_sources):
        service = BankReconciliationService(fake_sources)
        service.reconcile(make_statement())
        (call,) = fake_sources.calls_to("payments_near")
        assert call[1] == (STATEMENT_DATE, DateWindow(date(2024, 3, 24), date(2024, 4, 1)))
        assert call[2] == "ACC-001"

    def test_policy_widens_window(self, fake_sources):
        service = BankReconciliationService(fake_sources, ReconciliationPolicy(lookback_days=14))
        service.reconcile(make_statement())
        window = fake_sources.calls_to("payments_near")[0][1][1]
        assert window.start == date(2024, 3, 17)

    def test_matches_recorded_payment(self, fake_sources, make_payment):
        fake_sources.payments = [
            make_payment("P1", "1000", date(2024, 3, 28), reference="TXN123"),
            make_payment("P-OLD", "1000", date(2024, 2, 1), reference="TXN123"),
        ]
        result = BankReconciliationService(fake_sources).reconcile(make_statement(
            BankStatementLine(date(2024, 3, 28), "NEFT TXN123", Decimal("1000"), reference_number="TXN123"),
        ))
        assert result.status == ReconciliationStatus.MATCHED
        assert result.matches[0].payment_id == "P1"
        assert result.reconciled_balance == Decimal("1000")

    def test_unmatched_payment_reported(self, fake_sources, make_payment):
        fake_sources.payments = [make_payment("P2", "250", date(2024, 3, 30))]
        result = BankReconciliationService(fake_sources).reconcile(make_statement())
        assert result.status == ReconciliationStatus.UNMATCHED
        assert result.unreconciled_items[0].payment_id == "P2"

    @pytest.mark.parametrize("account,balance", [("", "1000"), ("ACC-001", "-1")])
    def test_invalid_statement_rejected_before_read(self, fake_sources, account, balance):
        service = BankReconciliationService(fake_sources)
        with pytest.raises(InvalidReconciliationRequestError):
            service.reconcile(make_statement(account=account, balance=balance))
        assert fake_sources.calls == []

    def test_candidates_logged(self, fake_sources, captured_logs):
        BankReconciliationService(fake_sources).reconcile(make_statement())
        record = [r for r in captured_logs() if r["message"] == "reconciliation_candidates_fetched"][0]
        assert record["candidate_count"] == 0
        assert record["scope"] == "ACC-001"
