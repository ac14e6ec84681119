"""
Payment query selector.

Read-only access to completed system payments made through a banking
channel (bank transfer, cheque, UPI): the candidates of bank
reconciliation.
"""

from sqlalchemy import select

from erp_kernel.domain.records import DateWindow, SystemPaymentRecord
from erp_kernel.models.receivables import Payment, PaymentMethod, PaymentStatus
from erp_kernel.selectors.base import BaseSelector

BANKED_PAYMENT_METHODS = (
    PaymentMethod.BANK_TRANSFER.value,
    PaymentMethod.CHEQUE.value,
    PaymentMethod.UPI.value,
)


class PaymentSelector(BaseSelector):

    def payments_near(self, window: DateWindow) -> list[SystemPaymentRecord]:
        """Completed banked payments dated inside ``window``, oldest first."""
        stmt = (
            select(Payment)
            .where(Payment.payment_date >= window.start)
            .where(Payment.payment_date <= window.end)
            .where(Payment.status == PaymentStatus.COMPLETED.value)
            .where(Payment.payment_method.in_(BANKED_PAYMENT_METHODS))
            .order_by(Payment.payment_date, Payment.payment_number)
        )
        return [
            SystemPaymentRecord(
                payment_id=str(p.id),
                amount=p.amount,
                payment_date=p.payment_date,
                reference_number=p.reference_number,
                status=p.status,
                payment_number=p.payment_number,
            )
            for p in self.session.scalars(stmt)
        ]
