"""
Module: erp_kernel.models.procurement
Responsibility: ORM persistence for supplier purchase orders (payables).
Architecture position: Kernel > Models.  May import from db/base.py only.

The delivery date doubles as the payment due date for payables aging.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_kernel.db.base import Base, UUIDString
from erp_kernel.models.counterparty import Counterparty


class PurchaseOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    SENT = "SENT"
    RECEIVED = "RECEIVED"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    po_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    supplier_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("counterparties.id"), nullable=False,
    )
    branch_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    order_date: Mapped[date] = mapped_column(nullable=False)
    delivery_date: Mapped[date] = mapped_column(nullable=False)
    final_amount: Mapped[Decimal] = mapped_column(nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PurchaseOrderStatus.DRAFT.value,
    )

    supplier: Mapped[Counterparty] = relationship()
