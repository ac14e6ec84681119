"""
Module: erp_kernel.models.sales
Responsibility: ORM persistence for revenue-bearing records: sales orders
    and service requests with the parts consumed by them.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_kernel.db.base import Base, UUIDString
from erp_kernel.models.counterparty import Counterparty


class SalesOrderStatus(str, Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    IN_PRODUCTION = "IN_PRODUCTION"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Statuses that count as booked revenue
CONFIRMED_SALES_STATUSES = (
    SalesOrderStatus.CONFIRMED.value,
    SalesOrderStatus.IN_PRODUCTION.value,
    SalesOrderStatus.READY.value,
    SalesOrderStatus.DELIVERED.value,
)


class ServiceStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SalesOrder(Base):
    __tablename__ = "sales_orders"

    order_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    customer_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("counterparties.id"), nullable=False,
    )
    branch_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    order_date: Mapped[date] = mapped_column(nullable=False)
    final_amount: Mapped[Decimal] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SalesOrderStatus.DRAFT.value,
    )


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    request_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    customer_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("counterparties.id"), nullable=False,
    )
    service_date: Mapped[date] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ServiceStatus.OPEN.value,
    )

    customer: Mapped[Counterparty] = relationship()
    parts: Mapped[list["ServicePart"]] = relationship(back_populates="service_request")


class ServicePart(Base):
    """A part consumed by a service request."""

    __tablename__ = "service_parts"

    service_request_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("service_requests.id"), nullable=False,
    )
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total_cost: Mapped[Decimal] = mapped_column(nullable=False)

    service_request: Mapped[ServiceRequest] = relationship(back_populates="parts")
