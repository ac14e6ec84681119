"""
Finance policy schema.

``FinancePolicy`` is the single runtime configuration artifact: one
frozen value per engine policy plus identity (``policy_id``, ``version``)
and the ``checksum`` of the source it was loaded from.

The per-engine policy types live beside the engines in
``erp_engines.policy`` (engines never import this package) and are
re-exported here as the configuration schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from erp_engines.policy import (
    CashFlowPolicy,
    CollectionActionType,
    CollectionPolicy,
    CollectionPriority,
    CollectionRule,
    CostingPolicy,
    CreditPolicy,
    DashboardPolicy,
    ExpenseBasis,
    OperatingExpenseRule,
    ProfitLossPolicy,
    ReconciliationPolicy,
    TaxPolicy,
)


@dataclass(frozen=True)
class FinancePolicy:
    """All engine policies of one deployment."""

    policy_id: str = "default"
    version: int = 1
    tax: TaxPolicy = field(default_factory=TaxPolicy)
    costing: CostingPolicy = field(default_factory=CostingPolicy)
    profit_loss: ProfitLossPolicy = field(default_factory=ProfitLossPolicy)
    cash_flow: CashFlowPolicy = field(default_factory=CashFlowPolicy)
    credit: CreditPolicy = field(default_factory=CreditPolicy)
    reconciliation: ReconciliationPolicy = field(default_factory=ReconciliationPolicy)
    collection: CollectionPolicy = field(default_factory=CollectionPolicy)
    dashboard: DashboardPolicy = field(default_factory=DashboardPolicy)
    checksum: str = ""


__all__ = [
    "CashFlowPolicy",
    "CollectionActionType",
    "CollectionPolicy",
    "CollectionPriority",
    "CollectionRule",
    "CostingPolicy",
    "CreditPolicy",
    "DashboardPolicy",
    "ExpenseBasis",
    "FinancePolicy",
    "OperatingExpenseRule",
    "ProfitLossPolicy",
    "ReconciliationPolicy",
    "TaxPolicy",
]
