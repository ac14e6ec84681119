"""
Read models for the persistence adapters.

Importing this package registers every table on ``Base.metadata``.
"""

from erp_kernel.models.counterparty import Counterparty, CounterpartyType
from erp_kernel.models.manufacturing import (
    BomLine,
    InventoryItem,
    MaterialConsumption,
    ProductionOrder,
    ProductionOrderStatus,
    ScrapRecord,
)
from erp_kernel.models.procurement import PurchaseOrder, PurchaseOrderStatus
from erp_kernel.models.receivables import (
    Invoice,
    InvoiceStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from erp_kernel.models.sales import (
    CONFIRMED_SALES_STATUSES,
    SalesOrder,
    SalesOrderStatus,
    ServicePart,
    ServiceRequest,
    ServiceStatus,
)

__all__ = [
    "BomLine",
    "CONFIRMED_SALES_STATUSES",
    "Counterparty",
    "CounterpartyType",
    "InventoryItem",
    "Invoice",
    "InvoiceStatus",
    "MaterialConsumption",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "ProductionOrder",
    "ProductionOrderStatus",
    "PurchaseOrder",
    "PurchaseOrderStatus",
    "SalesOrder",
    "SalesOrderStatus",
    "ScrapRecord",
    "ServicePart",
    "ServiceRequest",
    "ServiceStatus",
]
