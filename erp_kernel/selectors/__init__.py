"""Read-only query selectors returning frozen domain records."""

from erp_kernel.selectors.base import BaseSelector
from erp_kernel.selectors.counterparty_selector import CounterpartySelector
from erp_kernel.selectors.ledger_selector import LedgerSelector
from erp_kernel.selectors.payment_selector import PaymentSelector
from erp_kernel.selectors.production_selector import ProductionSelector
from erp_kernel.selectors.revenue_selector import RevenueSelector

__all__ = [
    "BaseSelector",
    "CounterpartySelector",
    "LedgerSelector",
    "PaymentSelector",
    "ProductionSelector",
    "RevenueSelector",
]
