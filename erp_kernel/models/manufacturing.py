"""
Module: erp_kernel.models.manufacturing
Responsibility: ORM persistence for the manufacturing cost inputs:
    inventory items, production orders, their bill-of-materials lines,
    material consumption and scrap records.
Architecture position: Kernel > Models.  May import from db/base.py only.

Quantities use four decimal places; money uses the base Numeric(18, 2).
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_kernel.db.base import Base, UUIDString

QUANTITY = Numeric(18, 4)


class ProductionOrderStatus(str, Enum):
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    item_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    standard_cost: Mapped[Decimal] = mapped_column(nullable=False)


class ProductionOrder(Base):
    __tablename__ = "production_orders"

    order_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    branch_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    actual_end_date: Mapped[date | None] = mapped_column(nullable=True)
    actual_labor_cost: Mapped[Decimal | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ProductionOrderStatus.PLANNED.value,
    )

    bom_lines: Mapped[list["BomLine"]] = relationship(back_populates="production_order")
    consumptions: Mapped[list["MaterialConsumption"]] = relationship(
        back_populates="production_order",
    )
    scrap_records: Mapped[list["ScrapRecord"]] = relationship(
        back_populates="production_order",
    )


class BomLine(Base):
    """Material required per finished unit of a production order."""

    __tablename__ = "bom_lines"

    production_order_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("production_orders.id"), nullable=False,
    )
    inventory_item_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("inventory_items.id"), nullable=False,
    )
    quantity_per_unit: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)

    production_order: Mapped[ProductionOrder] = relationship(back_populates="bom_lines")
    inventory_item: Mapped[InventoryItem] = relationship()


class MaterialConsumption(Base):
    __tablename__ = "material_consumptions"

    production_order_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("production_orders.id"), nullable=False,
    )
    inventory_item_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("inventory_items.id"), nullable=False,
    )
    actual_quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(nullable=False)

    production_order: Mapped[ProductionOrder] = relationship(back_populates="consumptions")


class ScrapRecord(Base):
    __tablename__ = "scrap_records"

    production_order_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("production_orders.id"), nullable=False,
    )
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    cost: Mapped[Decimal] = mapped_column(nullable=False)

    production_order: Mapped[ProductionOrder] = relationship(back_populates="scrap_records")
