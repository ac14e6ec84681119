"""
Pure domain layer.

Immutable input records, Decimal helpers and the injectable clock, with
NO dependencies on the ORM, the database or I/O.
"""

from erp_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from erp_kernel.domain.records import (
    CONSOLIDATED,
    ActualCost,
    BankStatement,
    BankStatementLine,
    BomLine,
    DateWindow,
    MaterialConsumption,
    MonetaryItem,
    MonetaryItemKind,
    PaymentHistoryEntry,
    ProductionCostRecord,
    ProductionOrderCostInputs,
    ReportScope,
    RevenueRecord,
    StandardCost,
    SystemPaymentRecord,
    TransactionDirection,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "CONSOLIDATED",
    "ActualCost",
    "BankStatement",
    "BankStatementLine",
    "BomLine",
    "DateWindow",
    "MaterialConsumption",
    "MonetaryItem",
    "MonetaryItemKind",
    "PaymentHistoryEntry",
    "ProductionCostRecord",
    "ProductionOrderCostInputs",
    "ReportScope",
    "RevenueRecord",
    "StandardCost",
    "SystemPaymentRecord",
    "TransactionDirection",
]
