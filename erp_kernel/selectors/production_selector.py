"""
Production query selector.

Read-only access to the cost inputs of completed production orders:
bill-of-materials lines (with the standard cost of each item), actual
material consumption, scrap records and recorded labor.
"""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from erp_kernel.domain.records import (
    BomLine,
    DateWindow,
    MaterialConsumption,
    ProductionOrderCostInputs,
    ReportScope,
)
from erp_kernel.models import manufacturing as m
from erp_kernel.selectors.base import BaseSelector


class ProductionSelector(BaseSelector):

    def completed_orders(
        self,
        window: DateWindow,
        scope: ReportScope,
    ) -> list[ProductionOrderCostInputs]:
        """Orders completed (actual end date) inside ``window``."""
        stmt = (
            select(m.ProductionOrder)
            .where(m.ProductionOrder.status == m.ProductionOrderStatus.COMPLETED.value)
            .where(m.ProductionOrder.actual_end_date >= window.start)
            .where(m.ProductionOrder.actual_end_date <= window.end)
            .options(
                selectinload(m.ProductionOrder.bom_lines).selectinload(m.BomLine.inventory_item),
                selectinload(m.ProductionOrder.consumptions),
                selectinload(m.ProductionOrder.scrap_records),
            )
            .order_by(m.ProductionOrder.actual_end_date, m.ProductionOrder.order_number)
        )
        if scope.branch_id is not None:
            stmt = stmt.where(m.ProductionOrder.branch_id == scope.branch_id)

        return [self._to_inputs(order) for order in self.session.scalars(stmt)]

    @staticmethod
    def _to_inputs(order: m.ProductionOrder) -> ProductionOrderCostInputs:
        return ProductionOrderCostInputs(
            production_order_id=str(order.id),
            quantity=order.quantity,
            bom_lines=tuple(
                BomLine(
                    item_id=str(line.inventory_item_id),
                    quantity_per_unit=line.quantity_per_unit,
                    unit_standard_cost=line.inventory_item.standard_cost,
                )
                for line in order.bom_lines
            ),
            consumptions=tuple(
                MaterialConsumption(
                    item_id=str(c.inventory_item_id),
                    actual_quantity=c.actual_quantity,
                    unit_cost=c.unit_cost,
                )
                for c in order.consumptions
            ),
            scrap_costs=tuple(s.cost for s in order.scrap_records),
            actual_labor_cost=order.actual_labor_cost,
            order_number=order.order_number,
            completed_on=order.actual_end_date,
        )
