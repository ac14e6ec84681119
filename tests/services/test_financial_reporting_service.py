"""
Tests for FinancialReportingService over in-memory sources.

Covers:
- Receivables / payables aged as of the clock date, scope filtering
- Default report windows derived from the clock
- Credit profile assembly from limit, history and open invoices
- Collection analysis and cost analysis delegation
- Source failures propagate unchanged
"""

from datetime import date
from decimal import Decimal

import pytest

from erp_engines.policy import CollectionActionType, CollectionPriority
from erp_engines.credit import RiskLevel
from erp_engines.tax import TaxRequest, TaxType
from erp_kernel.domain.records import DateWindow, ReportScope
from erp_kernel.exceptions import CounterpartyNotFoundError, InvalidAmountError
from erp_services import FinanceSources, FinancialReportingService, ReceivablesSource


@pytest.fixture
def service(fake_sources, deterministic_clock):
    return FinancialReportingService(fake_sources, clock=deterministic_clock)


class TestProtocols:

    def test_fake_satisfies_protocols(self, fake_sources):
        assert isinstance(fake_sources, FinanceSources)
        assert isinstance(fake_sources, ReceivablesSource)

    def test_plain_object_does_not(self):
        assert not isinstance(object(), ReceivablesSource)


class TestReceivablesAndPayables:

    def test_accounts_receivable(self, service):
        ledgers = service.accounts_receivable()
        assert [ledger.counterparty_id for ledger in ledgers] == ["C1", "C2"]
        c1 = ledgers[0]
        assert c1.total_outstanding == Decimal("1400")
        assert c1.overdue_amount == Decimal("400")
        assert c1.current_amount == Decimal("1000")

    def test_branch_scope(self, service, fake_sources):
        ledgers = service.accounts_receivable(ReportScope(branch_id="BR-2"))
        assert [ledger.counterparty_id for ledger in ledgers] == ["C2"]
        assert fake_sources.calls_to("open_invoices")[0][2] == "BR-2"

    def test_accounts_payable(self, service):
        ledgers = service.accounts_payable()
        assert len(ledgers) == 1
        assert ledgers[0].overdue_amount == Decimal("700")

    def test_report_logged(self, service, captured_logs):
        service.accounts_receivable()
        record = [r for r in captured_logs() if r["message"] == "accounts_receivable_reported"][0]
        assert record["customer_count"] == 2
        assert record["total_outstanding"] == "1700"
        assert record["scope"] == "Consolidated"


class TestProfitAndLoss:

    def test_default_window(self, service, fake_sources):
        statement = service.profit_and_loss()
        expected = DateWindow(date(2024, 3, 1), date(2024, 3, 31))
        assert statement.window == expected
        assert fake_sources.calls_to("confirmed_orders")[0][1][0] == expected
        assert statement.revenue.total == Decimal("170000")
        assert statement.net_profit == Decimal("2500")

    def test_default_breakdown(self, service):
        statement = service.profit_and_loss()
        assert statement.cost_of_goods_sold.manufacturing_overhead == Decimal("7500")
        assert statement.cost_of_goods_sold.total == Decimal("58500")
        assert statement.gross_profit == Decimal("111500")
        amounts = {line.name: line.amount for line in statement.operating_expenses.lines}
        assert amounts["salaries_and_wages"] == Decimal("6000")
        assert amounts["marketing_expenses"] == Decimal("3000")
        assert statement.operating_expenses.total == Decimal("109000")

    def test_other_income(self, service):
        statement = service.profit_and_loss(other_income=Decimal("500"))
        assert statement.net_profit == Decimal("3000")

    def test_manufacturing_cost_analysis(self, service):
        report = service.manufacturing_cost_analysis()
        assert report.order_count == 1
        assert report.total_actual_cost == Decimal("51000")


class TestCashFlow:

    def test_default_horizon_and_history(self, service, fake_sources):
        forecast = service.cash_flow_forecast(opening_balance=Decimal("1000"))
        assert forecast.window == DateWindow(date(2024, 3, 31), date(2024, 4, 30))
        history_window = fake_sources.calls_to("confirmed_orders")[0][1][0]
        assert history_window == DateWindow(date(2024, 3, 1), date(2024, 3, 31))
        assert forecast.closing_balance == Decimal("1000") + forecast.net_cash_flow


class TestCredit:

    def test_profile_from_open_invoices(self, service, fake_sources):
        profile = service.credit_profile("C1")
        assert profile.credit_limit == Decimal("10000")
        assert profile.credit_used == Decimal("1400")
        assert profile.overdue_amount == Decimal("400")
        assert profile.credit_score == 100
        assert profile.risk_level == RiskLevel.MEDIUM
        assert fake_sources.calls_to("recent_payments")[0][1] == ("C1", 12)

    def test_default_limit_when_none_on_file(self, service):
        assert service.credit_profile("C2").credit_limit == Decimal("100000")

    def test_explicit_limit_skips_lookup(self, service, fake_sources):
        profile = service.credit_profile("C1", credit_limit=Decimal("5000"))
        assert profile.credit_limit == Decimal("5000")
        assert fake_sources.calls_to("credit_limit") == []

    def test_unknown_customer(self, service):
        with pytest.raises(CounterpartyNotFoundError):
            service.credit_profile("NOPE")


class TestCollections:

    def test_actions_by_priority(self, service):
        analysis = service.collection_analysis()
        assert analysis.total_outstanding == Decimal("1700")
        actions = analysis.recommended_actions
        assert [a.invoice_id for a in actions] == ["INV-3", "INV-2"]
        assert actions[0].action == CollectionActionType.LEGAL_NOTICE
        assert actions[0].priority == CollectionPriority.HIGH
        assert actions[1].action == CollectionActionType.FOLLOW_UP


class TestTaxAndFailures:

    def test_calculate_tax(self, service):
        result = service.calculate_tax(TaxRequest(amount=Decimal("1000"), tax_type=TaxType.GST))
        assert result.total_tax == Decimal("180.00")

    def test_invalid_tax_amount(self, service):
        with pytest.raises(InvalidAmountError):
            service.calculate_tax(TaxRequest(amount=Decimal("-1")))

    def test_source_failure_propagates(self, service, fake_sources):
        fake_sources.failing.add("open_purchase_orders")
        with pytest.raises(RuntimeError, match="open_purchase_orders unavailable"):
            service.accounts_payable()
