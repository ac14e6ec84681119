"""
Property-based tests for the calculation engines.

Properties:
- Intra-state GST halves always sum exactly to the total tax
- Aging buckets partition [0, inf) with inclusive upper edges
- Aggregation conserves outstanding balances
- Credit scores stay within [0, 100]
- Reconciliation is deterministic for the same inputs
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from erp_engines.aging import STANDARD_BUCKETS, AgingBucket, AgingCalculator
from erp_engines.credit import CreditScoringEngine
from erp_engines.reconciliation import BankReconciliationMatcher
from erp_engines.receivables import aggregate_receivables
from erp_engines.tax import TaxCalculator, TaxRequest
from erp_kernel.domain.records import (
    BankStatement,
    BankStatementLine,
    MonetaryItem,
    PaymentHistoryEntry,
    SystemPaymentRecord,
)

AS_OF = date(2024, 6, 30)
FUZZ = settings(max_examples=200, suppress_health_check=[HealthCheck.function_scoped_fixture])

amounts = st.decimals(
    min_value=Decimal("0.01"),
    max_value=Decimal("99999999.99"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
rates = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("100"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
offsets = st.integers(min_value=-400, max_value=400)


@composite
def monetary_items(draw):
    total = draw(amounts)
    paid = draw(st.decimals(min_value=Decimal("0"), max_value=total, places=2))
    return MonetaryItem(
        item_id=f"I{draw(st.integers(0, 10**6))}",
        counterparty_id=draw(st.sampled_from(["C1", "C2", "C3", "C4"])),
        issue_date=AS_OF - timedelta(days=500),
        due_date=AS_OF + timedelta(days=draw(offsets)),
        total_amount=total,
        paid_amount=paid,
    )


@composite
def history_entries(draw):
    due = AS_OF + timedelta(days=draw(offsets))
    paid_offset = draw(st.one_of(st.none(), st.integers(min_value=-30, max_value=400)))
    return PaymentHistoryEntry(
        invoice_id=f"INV-{draw(st.integers(0, 999))}",
        due_date=due,
        amount=draw(amounts),
        paid_date=None if paid_offset is None else due + timedelta(days=paid_offset),
    )


class TestTaxSplitProperty:

    @given(amount=amounts, rate=rates)
    @FUZZ
    def test_cgst_plus_sgst_equals_total(self, amount, rate):
        result = TaxCalculator().calculate(request=TaxRequest(
            amount=amount, gst_rate=rate, is_inter_state=False,
        ))
        assert result.cgst + result.sgst == result.total_tax
        assert result.net_amount == result.base_amount + result.total_tax


class TestAgingPartitionProperty:

    @given(days=st.integers(min_value=0, max_value=100_000))
    @FUZZ
    def test_exactly_one_bucket(self, days):
        containing = [b for b in STANDARD_BUCKETS if b.contains(days)]
        assert len(containing) == 1
        assert AgingCalculator().classify(days) == containing[0].bucket

    def test_boundary_30_and_31(self):
        calculator = AgingCalculator()
        assert calculator.classify(30) == AgingBucket.CURRENT
        assert calculator.classify(31) == AgingBucket.DAYS_31_60


class TestAggregationConservation:

    @given(items=st.lists(monetary_items(), max_size=40))
    @FUZZ
    def test_outstanding_conserved(self, items):
        ledgers = aggregate_receivables(items=items, as_of=AS_OF)

        assert sum((ledger.total_outstanding for ledger in ledgers), Decimal("0")) == sum(
            (i.balance_amount for i in items), Decimal("0"),
        )
        for ledger in ledgers:
            assert ledger.current_amount + ledger.overdue_amount == ledger.total_outstanding


class TestCreditScoreBounds:

    @given(
        history=st.lists(history_entries(), max_size=20),
        overdue=st.decimals(min_value=Decimal("0"), max_value=Decimal("500000"), places=2),
    )
    @FUZZ
    def test_score_within_bounds(self, history, overdue):
        profile = CreditScoringEngine().score(
            counterparty_id="C1", history=history, as_of=AS_OF, overdue_amount=overdue,
        )
        assert 0 <= profile.credit_score <= 100
        assert len(profile.payment_history) <= 12


class TestReconciliationIdempotence:

    @given(
        line_amounts=st.lists(st.sampled_from(["100", "250", "999.99"]), max_size=8),
        payment_amounts=st.lists(st.sampled_from(["100", "250", "40"]), max_size=8),
        day_offsets=st.lists(st.integers(min_value=-7, max_value=1), min_size=16, max_size=16),
    )
    @FUZZ
    def test_same_inputs_same_result(self, line_amounts, payment_amounts, day_offsets):
        statement_date = AS_OF
        statement = BankStatement(
            bank_account_id="ACC-1",
            statement_date=statement_date,
            statement_balance=Decimal("5000"),
            lines=tuple(
                BankStatementLine(
                    transaction_date=statement_date + timedelta(days=day_offsets[i]),
                    description=f"LINE {i}",
                    amount=Decimal(a),
                )
                for i, a in enumerate(line_amounts)
            ),
        )
        payments = [
            SystemPaymentRecord(
                payment_id=f"P{i}",
                amount=Decimal(a),
                payment_date=statement_date + timedelta(days=day_offsets[8 + i]),
            )
            for i, a in enumerate(payment_amounts)
        ]
        matcher = BankReconciliationMatcher()

        first = matcher.match(statement=statement, payments=payments)
        second = matcher.match(statement=statement, payments=payments)

        assert first == second
        used = [m.payment_id for m in first.matches]
        assert len(used) == len(set(used))
        assert first.matched_count + len(first.bank_only) == len(line_amounts)
        assert first.matched_count + len(first.system_only) == len(payments)
