"""
Counterparty query selector.

Read-only access to a customer's credit limit and recent payment history
(the inputs of credit scoring).
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from erp_kernel.domain.records import PaymentHistoryEntry
from erp_kernel.exceptions import CounterpartyNotFoundError
from erp_kernel.models.counterparty import Counterparty
from erp_kernel.models.receivables import Invoice, PaymentStatus
from erp_kernel.selectors.base import BaseSelector, parse_counterparty_id


class CounterpartySelector(BaseSelector):

    def get(self, counterparty_id: str) -> Counterparty:
        """
        Raises:
            CounterpartyNotFoundError: If no such counterparty exists.
        """
        counterparty = self.session.get(Counterparty, parse_counterparty_id(counterparty_id))
        if counterparty is None:
            raise CounterpartyNotFoundError(str(counterparty_id))
        return counterparty

    def credit_limit(self, counterparty_id: str) -> Decimal | None:
        """Credit limit on file, or None when the counterparty has none."""
        return self.get(counterparty_id).credit_limit

    def recent_payments(self, counterparty_id: str, limit: int) -> list[PaymentHistoryEntry]:
        """
        The ``limit`` most recent invoices of a customer, newest first, each
        with the date of its first completed payment (None if unpaid).
        """
        customer = self.get(counterparty_id)
        stmt = (
            select(Invoice)
            .where(Invoice.customer_id == customer.id)
            .options(selectinload(Invoice.payments))
            .order_by(Invoice.invoice_date.desc(), Invoice.invoice_number.desc())
            .limit(limit)
        )
        entries = []
        for invoice in self.session.scalars(stmt):
            paid_dates = [
                p.payment_date
                for p in invoice.payments
                if p.status == PaymentStatus.COMPLETED.value
            ]
            entries.append(PaymentHistoryEntry(
                invoice_id=str(invoice.id),
                due_date=invoice.due_date,
                amount=invoice.total_amount,
                paid_date=min(paid_dates) if paid_dates else None,
                invoice_number=invoice.invoice_number,
            ))
        return entries
