"""
Tests for bank statement matching.

Covers:
- Reference and date matching within the amount tolerance
- Greedy first-fit, one-to-one consumption
- Unreconciled bank-only / system-only items and status
- Statement validation and candidate window
"""

from datetime import date
from decimal import Decimal

import pytest

from erp_engines.policy import ReconciliationPolicy
from erp_engines.reconciliation import (
    BankReconciliationMatcher,
    MatchBasis,
    ReconciliationStatus,
    UnreconciledType,
)
from erp_kernel.domain.records import BankStatement, BankStatementLine, SystemPaymentRecord
from erp_kernel.exceptions import InvalidReconciliationRequestError

STATEMENT_DATE = date(2024, 3, 31)


def line(amount, ref=None, on=date(2024, 3, 28), description="NEFT CREDIT"):
    return BankStatementLine(
        transaction_date=on, description=description, amount=Decimal(amount), reference_number=ref,
    )


def payment(pid, amount, ref=None, on=date(2024, 3, 28), number=None):
    return SystemPaymentRecord(
        payment_id=pid, amount=Decimal(amount), payment_date=on,
        reference_number=ref, payment_number=number,
    )


def statement(*lines, balance="1000", account="ACC-001"):
    return BankStatement(
        bank_account_id=account,
        statement_date=STATEMENT_DATE,
        statement_balance=Decimal(balance),
        lines=lines,
    )


class TestMatching:

    def setup_method(self):
        self.matcher = BankReconciliationMatcher()

    def test_reference_match_example(self):
        result = self.matcher.match(
            statement=statement(line("1000", ref="TXN123")),
            payments=[payment("P1", "1000", ref="TXN123")],
        )

        assert result.reconciled_balance == Decimal("1000")
        assert result.unreconciled_items == ()
        assert result.status == ReconciliationStatus.MATCHED
        assert result.variance == Decimal("0")
        assert result.matches[0].basis == MatchBasis.REFERENCE
        assert result.matches[0].payment_id == "P1"

    def test_reference_contained_in_line_reference(self):
        basis = self.matcher.match_basis(
            line("500", ref="NEFT/TXN123/ACME", on=date(2024, 3, 1)),
            payment("P1", "500", ref="TXN123", on=date(2024, 3, 20)),
        )
        assert basis == MatchBasis.REFERENCE

    def test_date_match_within_tolerance(self):
        basis = self.matcher.match_basis(
            line("500", on=date(2024, 3, 28)),
            payment("P1", "500", on=date(2024, 3, 26)),
        )
        assert basis == MatchBasis.DATE

    def test_date_outside_tolerance(self):
        basis = self.matcher.match_basis(
            line("500", on=date(2024, 3, 28)),
            payment("P1", "500", on=date(2024, 3, 25)),
        )
        assert basis is None

    def test_amount_tolerance(self):
        assert self.matcher.match_basis(line("500.00"), payment("P1", "500.009")) == MatchBasis.DATE
        assert self.matcher.match_basis(line("500.00"), payment("P1", "500.01")) is None

    def test_first_fit_consumes_each_payment_once(self):
        result = self.matcher.match(
            statement=statement(line("100"), line("100")),
            payments=[payment("P1", "100"), payment("P2", "100"), payment("P3", "100")],
        )
        assert [m.payment_id for m in result.matches] == ["P1", "P2"]
        assert [i.payment_id for i in result.system_only] == ["P3"]

    def test_first_fit_not_best_fit(self):
        # P1 matches line 0 on date although P2 matches its reference exactly
        result = self.matcher.match(
            statement=statement(line("100", ref="REF-2")),
            payments=[payment("P1", "100"), payment("P2", "100", ref="REF-2")],
        )
        assert result.matches[0].payment_id == "P1"
        assert result.matches[0].basis == MatchBasis.DATE

    def test_partial(self):
        result = self.matcher.match(
            statement=statement(line("100"), line("999", description="ATM CASH")),
            payments=[payment("P1", "100"), payment("P2", "40", on=date(2024, 3, 10), number="PAY-2")],
        )
        assert result.status == ReconciliationStatus.PARTIAL
        assert result.matched_count == 1
        bank_only = result.bank_only[0]
        assert bank_only.item_type == UnreconciledType.BANK_ONLY
        assert bank_only.description == "ATM CASH"
        assert bank_only.line_index == 1
        system_only = result.system_only[0]
        assert system_only.description == "Payment PAY-2"
        assert result.unreconciled_total == Decimal("1039")
        assert result.variance == Decimal("900")

    def test_nothing_matches(self):
        result = self.matcher.match(
            statement=statement(line("100")),
            payments=[payment("P1", "200", number=None)],
        )
        assert result.status == ReconciliationStatus.UNMATCHED
        assert result.system_only[0].description == "Payment P1"

    def test_empty_statement_and_no_payments(self):
        result = self.matcher.match(statement=statement(balance="0"), payments=[])
        assert result.status == ReconciliationStatus.MATCHED

    def test_idempotent(self):
        stmt = statement(line("100", ref="A"), line("250"))
        payments = [payment("P1", "250"), payment("P2", "100", ref="A")]
        assert self.matcher.match(statement=stmt, payments=payments) == self.matcher.match(
            statement=stmt, payments=payments,
        )


class TestValidation:

    def setup_method(self):
        self.matcher = BankReconciliationMatcher()

    def test_blank_account(self):
        with pytest.raises(InvalidReconciliationRequestError):
            self.matcher.match(statement=statement(account="  "), payments=[])

    def test_negative_balance(self):
        with pytest.raises(InvalidReconciliationRequestError) as exc_info:
            self.matcher.match(statement=statement(balance="-1"), payments=[])
        assert exc_info.value.bank_account_id == "ACC-001"
        assert exc_info.value.code == "INVALID_RECONCILIATION_REQUEST"


class TestCandidateWindow:

    def test_default_window(self):
        window = BankReconciliationMatcher().candidate_window(STATEMENT_DATE)
        assert window.start == date(2024, 3, 24)
        assert window.end == date(2024, 4, 1)

    def test_policy_window(self):
        matcher = BankReconciliationMatcher(ReconciliationPolicy(lookback_days=3, lookahead_days=0))
        window = matcher.candidate_window(STATEMENT_DATE)
        assert window.start == date(2024, 3, 28)
        assert window.end == STATEMENT_DATE
