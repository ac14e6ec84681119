"""
Module: erp_kernel.models.counterparty
Responsibility: ORM persistence for customers and suppliers.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - code is unique per counterparty.
    - credit_limit NULL means "no limit on file"; the credit policy then
      applies its default limit.
"""

from decimal import Decimal
from enum import Enum

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from erp_kernel.db.base import Base


class CounterpartyType(str, Enum):
    CUSTOMER = "CUSTOMER"
    SUPPLIER = "SUPPLIER"


class Counterparty(Base):
    """A customer or supplier."""

    __tablename__ = "counterparties"
    __table_args__ = (UniqueConstraint("code", name="uq_counterparty_code"),)

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    counterparty_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CounterpartyType.CUSTOMER.value,
    )
    branch_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    credit_limit: Mapped[Decimal | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<Counterparty {self.code}: {self.name}>"
