"""
Module: erp_kernel.models.receivables
Responsibility: ORM persistence for customer invoices and the payments
    applied to them (also the system side of bank reconciliation).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - balance_amount == total_amount - paid_amount, maintained by the
      writer; selectors re-derive it in the domain record.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_kernel.db.base import Base, UUIDString
from erp_kernel.models.counterparty import Counterparty


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    CHEQUE = "CHEQUE"
    UPI = "UPI"
    CARD = "CARD"


class Invoice(Base):
    """A customer invoice."""

    __tablename__ = "invoices"
    __table_args__ = (Index("idx_invoice_status_due", "status", "due_date"),)

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    customer_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("counterparties.id"), nullable=False,
    )
    invoice_date: Mapped[date] = mapped_column(nullable=False)
    due_date: Mapped[date] = mapped_column(nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    balance_amount: Mapped[Decimal] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvoiceStatus.PENDING.value,
    )

    customer: Mapped[Counterparty] = relationship()
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="invoice", order_by="Payment.payment_date",
    )


class Payment(Base):
    """A payment received (optionally against an invoice)."""

    __tablename__ = "payments"
    __table_args__ = (Index("idx_payment_date_status", "payment_date", "status"),)

    payment_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    invoice_id: Mapped[UUID | None] = mapped_column(
        UUIDString(), ForeignKey("invoices.id"), nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    payment_date: Mapped[date] = mapped_column(nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentMethod.BANK_TRANSFER.value,
    )
    reference_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.COMPLETED.value,
    )

    invoice: Mapped[Invoice | None] = relationship(back_populates="payments")
