"""
erp_engines.variance -- Manufacturing standard vs. actual cost variance.

Responsibility:
    Derive the standard (BOM-based) and actual (consumption-based) cost of
    a completed production order, and analyze the variance between them
    per category, in total and per unit.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Rates come from ``CostingPolicy``; records come from a
    ProductionCostSource.  The P&L generator reuses ``build_cost_record``
    so COGS and variance analysis never disagree on actual cost.

Invariants enforced:
    - variance = actual - standard, per category and in total; the
      category variances always sum to the total variance.
    - unit_variance = total_variance / quantity, with quantity > 0.
    - variance_percentage = total_variance / standard total * 100, and 0
      when the standard total is 0 (division guard).
    - Money is quantized to 2 places (ROUND_HALF_UP); percentages to 2.

Failure modes:
    - InvalidQuantityError when an order's quantity is not positive.

Usage:
    from erp_engines.variance import CostVarianceAnalyzer

    analyzer = CostVarianceAnalyzer()
    record = analyzer.build_cost_record(order=inputs)
    analysis = analyzer.analyze(record=record)
    analysis.unit_variance
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from erp_engines.policy import CostingPolicy
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import (
    ActualCost,
    ProductionCostRecord,
    ProductionOrderCostInputs,
    StandardCost,
)
from erp_kernel.domain.values import (
    ZERO,
    of_percent,
    percentage,
    quantize_money,
    round_percent,
    sum_amounts,
)
from erp_kernel.exceptions import InvalidQuantityError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.variance")


@dataclass(frozen=True)
class CostVarianceAnalysis:
    """
    Variance analysis of one production order.

    Positive variances are unfavorable (actual above standard).
    """

    production_order_id: str
    order_number: str | None
    quantity: Decimal
    standard_cost: StandardCost
    actual_cost: ActualCost
    material_variance: Decimal
    labor_variance: Decimal
    overhead_variance: Decimal
    scrap_variance: Decimal
    total_variance: Decimal
    unit_variance: Decimal
    variance_percentage: Decimal

    @property
    def standard_unit_cost(self) -> Decimal:
        return quantize_money(self.standard_cost.total / self.quantity)

    @property
    def actual_unit_cost(self) -> Decimal:
        return quantize_money(self.actual_cost.total / self.quantity)

    @property
    def is_favorable(self) -> bool:
        return self.total_variance < ZERO


@dataclass(frozen=True)
class CostVarianceReport:
    """Variance analyses of a batch of production orders."""

    analyses: tuple[CostVarianceAnalysis, ...]
    total_standard_cost: Decimal
    total_actual_cost: Decimal
    total_variance: Decimal

    @property
    def order_count(self) -> int:
        return len(self.analyses)


class CostVarianceAnalyzer:
    """
    Standard vs. actual cost analysis for production orders.

    Pure functions - no I/O, no clock access.
    """

    def __init__(self, policy: CostingPolicy | None = None):
        self._policy = policy or CostingPolicy()

    @property
    def policy(self) -> CostingPolicy:
        return self._policy

    def build_cost_record(self, order: ProductionOrderCostInputs) -> ProductionCostRecord:
        """
        Cost a production order under the costing policy.

        Standard: BOM quantity per unit x order quantity x standard unit
        cost, plus labor per unit and overhead on material + labor.
        Actual: consumed quantity x unit cost, recorded labor (or the
        per-unit estimate), overhead on material + labor, and scrap.

        Raises:
            InvalidQuantityError: If the order quantity is not positive.
        """
        if order.quantity <= ZERO:
            raise InvalidQuantityError(order.production_order_id, order.quantity)
        policy = self._policy
        qty = order.quantity

        std_material = quantize_money(sum_amounts(
            line.quantity_per_unit * qty * line.unit_standard_cost
            for line in order.bom_lines
        ))
        std_labor = quantize_money(qty * policy.standard_labor_rate_per_unit)
        std_overhead = quantize_money(
            of_percent(std_material + std_labor, policy.standard_overhead_pct)
        )

        act_material = quantize_money(sum_amounts(
            c.actual_quantity * c.unit_cost for c in order.consumptions
        ))
        if order.actual_labor_cost is not None:
            act_labor = quantize_money(order.actual_labor_cost)
        else:
            act_labor = quantize_money(qty * policy.actual_labor_rate_per_unit)
        act_overhead = quantize_money(
            of_percent(act_material + act_labor, policy.actual_overhead_pct)
        )
        act_scrap = quantize_money(sum_amounts(order.scrap_costs))

        return ProductionCostRecord(
            production_order_id=order.production_order_id,
            quantity=qty,
            standard_cost=StandardCost(std_material, std_labor, std_overhead),
            actual_cost=ActualCost(act_material, act_labor, act_overhead, act_scrap),
            order_number=order.order_number,
            completed_on=order.completed_on,
        )

    @traced_engine("variance", "1.0", fingerprint_fields=("record",))
    def analyze(self, record: ProductionCostRecord) -> CostVarianceAnalysis:
        """
        Analyze one cost record.

        With ``scrap_is_variance`` scrap is reported on its own line;
        otherwise it is folded into the material variance.

        Raises:
            InvalidQuantityError: If the record quantity is not positive.
        """
        if record.quantity <= ZERO:
            raise InvalidQuantityError(record.production_order_id, record.quantity)
        std = record.standard_cost
        act = record.actual_cost

        material_variance = act.material - std.material
        scrap_variance = act.scrap
        if not self._policy.scrap_is_variance:
            material_variance += act.scrap
            scrap_variance = ZERO
        labor_variance = act.labor - std.labor
        overhead_variance = act.overhead - std.overhead
        total_variance = quantize_money(act.total - std.total)

        analysis = CostVarianceAnalysis(
            production_order_id=record.production_order_id,
            order_number=record.order_number,
            quantity=record.quantity,
            standard_cost=std,
            actual_cost=act,
            material_variance=quantize_money(material_variance),
            labor_variance=quantize_money(labor_variance),
            overhead_variance=quantize_money(overhead_variance),
            scrap_variance=quantize_money(scrap_variance),
            total_variance=total_variance,
            unit_variance=quantize_money(total_variance / record.quantity),
            variance_percentage=round_percent(percentage(total_variance, std.total)),
        )

        if std.total == ZERO:
            logger.debug("variance_zero_standard_cost", extra={
                "production_order_id": record.production_order_id,
            })
        return analysis

    def analyze_many(self, records: Iterable[ProductionCostRecord]) -> CostVarianceReport:
        """Analyze a batch of records; fails on the first invalid record."""
        t0 = time.monotonic()
        analyses = tuple(self.analyze(record=record) for record in records)
        report = CostVarianceReport(
            analyses=analyses,
            total_standard_cost=sum_amounts(a.standard_cost.total for a in analyses),
            total_actual_cost=sum_amounts(a.actual_cost.total for a in analyses),
            total_variance=sum_amounts(a.total_variance for a in analyses),
        )
        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("cost_variance_analysis_completed", extra={
            "order_count": report.order_count,
            "total_standard_cost": str(report.total_standard_cost),
            "total_actual_cost": str(report.total_actual_cost),
            "total_variance": str(report.total_variance),
            "duration_ms": duration_ms,
        })
        return report
