"""
erp_services -- imperative shell over the finance engines.

Services own the clock and the data sources; the engines they call stay
pure.  ``SqlFinanceSources`` implements every source protocol over a
SQLAlchemy session factory.
"""

from erp_services.bank_reconciliation_service import BankReconciliationService
from erp_services.dashboard_service import FinancialDashboardService
from erp_services.financial_reporting_service import FinancialReportingService
from erp_services.sources import (
    FinanceSources,
    PayablesSource,
    PaymentHistorySource,
    ProductionCostSource,
    ReceivablesSource,
    SalesRevenueSource,
    ServiceRevenueSource,
    SystemPaymentSource,
)
from erp_services.sql_sources import SqlFinanceSources

__all__ = [
    "BankReconciliationService",
    "FinanceSources",
    "FinancialDashboardService",
    "FinancialReportingService",
    "PayablesSource",
    "PaymentHistorySource",
    "ProductionCostSource",
    "ReceivablesSource",
    "SalesRevenueSource",
    "ServiceRevenueSource",
    "SqlFinanceSources",
    "SystemPaymentSource",
]
