"""
Revenue query selector.

Read-only access to booked sales revenue (confirmed sales orders) and
service revenue (completed service requests, valued at the cost of the
parts consumed) within a date window.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from erp_kernel.domain.records import DateWindow, ReportScope, RevenueRecord
from erp_kernel.models.counterparty import Counterparty
from erp_kernel.models.sales import (
    CONFIRMED_SALES_STATUSES,
    SalesOrder,
    ServiceRequest,
    ServiceStatus,
)
from erp_kernel.selectors.base import BaseSelector, parse_counterparty_id


class RevenueSelector(BaseSelector):

    def confirmed_orders(self, window: DateWindow, scope: ReportScope) -> list[RevenueRecord]:
        stmt = (
            select(SalesOrder)
            .where(SalesOrder.order_date >= window.start)
            .where(SalesOrder.order_date <= window.end)
            .where(SalesOrder.status.in_(CONFIRMED_SALES_STATUSES))
            .order_by(SalesOrder.order_date, SalesOrder.order_number)
        )
        if scope.branch_id is not None:
            stmt = stmt.where(SalesOrder.branch_id == scope.branch_id)
        if scope.counterparty_id is not None:
            stmt = stmt.where(
                SalesOrder.customer_id == parse_counterparty_id(scope.counterparty_id)
            )
        return [
            RevenueRecord(
                amount=order.final_amount,
                record_date=order.order_date,
                reference=order.order_number,
            )
            for order in self.session.scalars(stmt)
        ]

    def completed_services(self, window: DateWindow, scope: ReportScope) -> list[RevenueRecord]:
        stmt = (
            select(ServiceRequest)
            .join(Counterparty, ServiceRequest.customer_id == Counterparty.id)
            .where(ServiceRequest.service_date >= window.start)
            .where(ServiceRequest.service_date <= window.end)
            .where(ServiceRequest.status == ServiceStatus.COMPLETED.value)
            .options(selectinload(ServiceRequest.parts))
            .order_by(ServiceRequest.service_date, ServiceRequest.request_number)
        )
        if scope.branch_id is not None:
            stmt = stmt.where(Counterparty.branch_id == scope.branch_id)
        if scope.counterparty_id is not None:
            stmt = stmt.where(
                ServiceRequest.customer_id == parse_counterparty_id(scope.counterparty_id)
            )

        records = []
        for request in self.session.scalars(stmt):
            parts_cost = Decimal("0")
            for part in request.parts:
                parts_cost += part.total_cost
            records.append(RevenueRecord(
                amount=parts_cost,
                record_date=request.service_date,
                reference=request.request_number,
            ))
        return records
