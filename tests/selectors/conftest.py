"""
Seed data for selector and SQL source tests.

One month of ERP activity (March 2024) across two branches, with records
in excluded statuses alongside the ones every selector should return.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from erp_kernel.models import (
    BomLine,
    Counterparty,
    CounterpartyType,
    InventoryItem,
    Invoice,
    InvoiceStatus,
    MaterialConsumption,
    Payment,
    PaymentMethod,
    PaymentStatus,
    ProductionOrder,
    ProductionOrderStatus,
    PurchaseOrder,
    PurchaseOrderStatus,
    SalesOrder,
    SalesOrderStatus,
    ScrapRecord,
    ServicePart,
    ServiceRequest,
    ServiceStatus,
)


def _invoice(number, customer, issued, due, total, paid, status):
    return Invoice(
        invoice_number=number,
        customer=customer,
        invoice_date=issued,
        due_date=due,
        total_amount=Decimal(total),
        paid_amount=Decimal(paid),
        balance_amount=Decimal(total) - Decimal(paid),
        status=status.value,
    )


@pytest.fixture
def seeded(session):
    """Commit the seed data and return the ids tests refer to."""
    acme = Counterparty(
        id=uuid4(), code="ACME", name="Acme Ltd", branch_id="BR-1",
        credit_limit=Decimal("50000"),
    )
    beta = Counterparty(id=uuid4(), code="BETA", name="Beta Traders", branch_id="BR-2")
    steelco = Counterparty(
        id=uuid4(), code="STEEL", name="Steel Co",
        counterparty_type=CounterpartyType.SUPPLIER.value, branch_id="BR-1",
    )
    steel = InventoryItem(id=uuid4(), item_code="STEEL", name="Steel rod", standard_cost=Decimal("50"))
    session.add_all([acme, beta, steelco, steel])

    inv1 = _invoice("INV-001", acme, date(2024, 1, 1), date(2024, 1, 31), "1000", "0", InvoiceStatus.PENDING)
    inv2 = _invoice("INV-002", acme, date(2024, 2, 1), date(2024, 3, 2), "500", "200", InvoiceStatus.OVERDUE)
    inv3 = _invoice("INV-003", acme, date(2024, 2, 10), date(2024, 3, 10), "800", "800", InvoiceStatus.PAID)
    inv4 = _invoice("INV-004", beta, date(2024, 3, 1), date(2024, 3, 31), "700", "0", InvoiceStatus.PENDING)
    inv5 = _invoice("INV-005", acme, date(2024, 3, 5), date(2024, 4, 5), "100", "0", InvoiceStatus.CANCELLED)
    session.add_all([inv1, inv2, inv3, inv4, inv5])

    session.add_all([
        Payment(payment_number="PAY-001", invoice=inv3, amount=Decimal("800"),
                payment_date=date(2024, 3, 12), reference_number="TXN1"),
        Payment(payment_number="PAY-002", invoice=inv2, amount=Decimal("200"),
                payment_date=date(2024, 3, 5), payment_method=PaymentMethod.UPI.value),
        Payment(payment_number="PAY-003", amount=Decimal("50"), payment_date=date(2024, 3, 28),
                payment_method=PaymentMethod.CASH.value),
        Payment(payment_number="PAY-004", amount=Decimal("75"), payment_date=date(2024, 3, 29),
                status=PaymentStatus.FAILED.value),
        Payment(payment_number="PAY-005", amount=Decimal("300"), payment_date=date(2024, 3, 30),
                payment_method=PaymentMethod.CHEQUE.value, reference_number="CHQ9"),
    ])

    session.add_all([
        PurchaseOrder(po_number="PO-1", supplier=steelco, branch_id="BR-1",
                      order_date=date(2024, 3, 1), delivery_date=date(2024, 3, 15),
                      final_amount=Decimal("700"), status=PurchaseOrderStatus.APPROVED.value),
        PurchaseOrder(po_number="PO-2", supplier=steelco, branch_id="BR-1",
                      order_date=date(2024, 3, 2), delivery_date=date(2024, 3, 20),
                      final_amount=Decimal("900"), status=PurchaseOrderStatus.DRAFT.value),
        PurchaseOrder(po_number="PO-3", supplier=steelco, branch_id="BR-2",
                      order_date=date(2024, 2, 1), delivery_date=date(2024, 3, 1),
                      final_amount=Decimal("400"), paid_amount=Decimal("100"),
                      status=PurchaseOrderStatus.SENT.value),
    ])

    session.add_all([
        SalesOrder(order_number="SO-1", customer_id=acme.id, branch_id="BR-1",
                   order_date=date(2024, 3, 5), final_amount=Decimal("150000"),
                   status=SalesOrderStatus.CONFIRMED.value),
        SalesOrder(order_number="SO-2", customer_id=acme.id, branch_id="BR-1",
                   order_date=date(2024, 3, 6), final_amount=Decimal("9999")),
        SalesOrder(order_number="SO-3", customer_id=beta.id, branch_id="BR-2",
                   order_date=date(2024, 3, 20), final_amount=Decimal("20000"),
                   status=SalesOrderStatus.DELIVERED.value),
        SalesOrder(order_number="SO-4", customer_id=acme.id, branch_id="BR-1",
                   order_date=date(2024, 2, 10), final_amount=Decimal("5000"),
                   status=SalesOrderStatus.CONFIRMED.value),
    ])

    session.add_all([
        ServiceRequest(request_number="SR-1", customer=acme, service_date=date(2024, 3, 12),
                       status=ServiceStatus.COMPLETED.value,
                       parts=[ServicePart(total_cost=Decimal("150")), ServicePart(total_cost=Decimal("350"))]),
        ServiceRequest(request_number="SR-2", customer=acme, service_date=date(2024, 3, 13),
                       parts=[ServicePart(total_cost=Decimal("80"))]),
        ServiceRequest(request_number="SR-3", customer=beta, service_date=date(2024, 3, 15),
                       status=ServiceStatus.COMPLETED.value,
                       parts=[ServicePart(total_cost=Decimal("100"))]),
    ])

    mo1 = ProductionOrder(
        id=uuid4(), order_number="MO-1", branch_id="BR-1", quantity=Decimal("10"),
        actual_end_date=date(2024, 3, 20), status=ProductionOrderStatus.COMPLETED.value,
    )
    mo1.bom_lines.append(BomLine(inventory_item=steel, quantity_per_unit=Decimal("2")))
    mo1.consumptions.append(MaterialConsumption(
        inventory_item_id=steel.id, actual_quantity=Decimal("21"), unit_cost=Decimal("52"),
    ))
    mo1.scrap_records.append(ScrapRecord(quantity=Decimal("1"), cost=Decimal("30")))
    mo2 = ProductionOrder(
        order_number="MO-2", branch_id="BR-2", quantity=Decimal("5"),
        status=ProductionOrderStatus.IN_PROGRESS.value,
    )
    session.add_all([mo1, mo2])
    session.commit()

    return {
        "acme": str(acme.id),
        "beta": str(beta.id),
        "steelco": str(steelco.id),
        "mo1": str(mo1.id),
    }
