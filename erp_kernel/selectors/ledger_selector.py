"""
Open item query selector.

Provides read-only access to open receivables (customer invoices) and
open payables (supplier purchase orders) as ``MonetaryItem`` records.

Filters:
- Receivables: status PENDING or OVERDUE with a positive balance,
  ordered by due date.
- Payables: status APPROVED or SENT, ordered by delivery date (the due
  date of a purchase order).
"""

from sqlalchemy import select

from erp_kernel.domain.records import MonetaryItem, MonetaryItemKind, ReportScope
from erp_kernel.models.counterparty import Counterparty
from erp_kernel.models.procurement import PurchaseOrder, PurchaseOrderStatus
from erp_kernel.models.receivables import Invoice, InvoiceStatus
from erp_kernel.selectors.base import BaseSelector
from erp_kernel.selectors.counterparty_selector import CounterpartySelector

OPEN_INVOICE_STATUSES = (InvoiceStatus.PENDING.value, InvoiceStatus.OVERDUE.value)
OPEN_PURCHASE_ORDER_STATUSES = (
    PurchaseOrderStatus.APPROVED.value,
    PurchaseOrderStatus.SENT.value,
)


class LedgerSelector(BaseSelector):

    def open_invoices(self, scope: ReportScope) -> list[MonetaryItem]:
        stmt = (
            select(Invoice, Counterparty)
            .join(Counterparty, Invoice.customer_id == Counterparty.id)
            .where(Invoice.status.in_(OPEN_INVOICE_STATUSES))
            .where(Invoice.balance_amount > 0)
            .order_by(Invoice.due_date, Invoice.invoice_number)
        )
        if scope.branch_id is not None:
            stmt = stmt.where(Counterparty.branch_id == scope.branch_id)
        if scope.counterparty_id is not None:
            customer = CounterpartySelector(self.session).get(scope.counterparty_id)
            stmt = stmt.where(Invoice.customer_id == customer.id)

        return [
            MonetaryItem(
                item_id=str(invoice.id),
                counterparty_id=str(customer.id),
                issue_date=invoice.invoice_date,
                due_date=invoice.due_date,
                total_amount=invoice.total_amount,
                paid_amount=invoice.total_amount - invoice.balance_amount,
                counterparty_name=customer.name,
                document_number=invoice.invoice_number,
                kind=MonetaryItemKind.INVOICE,
            )
            for invoice, customer in self.session.execute(stmt)
        ]

    def open_purchase_orders(self, scope: ReportScope) -> list[MonetaryItem]:
        stmt = (
            select(PurchaseOrder, Counterparty)
            .join(Counterparty, PurchaseOrder.supplier_id == Counterparty.id)
            .where(PurchaseOrder.status.in_(OPEN_PURCHASE_ORDER_STATUSES))
            .order_by(PurchaseOrder.delivery_date, PurchaseOrder.po_number)
        )
        if scope.branch_id is not None:
            stmt = stmt.where(PurchaseOrder.branch_id == scope.branch_id)
        if scope.counterparty_id is not None:
            supplier = CounterpartySelector(self.session).get(scope.counterparty_id)
            stmt = stmt.where(PurchaseOrder.supplier_id == supplier.id)

        return [
            MonetaryItem(
                item_id=str(po.id),
                counterparty_id=str(supplier.id),
                issue_date=po.order_date,
                due_date=po.delivery_date,
                total_amount=po.final_amount,
                paid_amount=po.paid_amount,
                counterparty_name=supplier.name,
                document_number=po.po_number,
                kind=MonetaryItemKind.PURCHASE_ORDER,
            )
            for po, supplier in self.session.execute(stmt)
        ]
