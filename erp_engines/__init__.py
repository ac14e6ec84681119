"""
Module: erp_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ``erp_services`` and ``erp_config``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import erp_kernel (domain, exceptions, logging_config) and
    sibling engine modules.  MUST NOT import erp_services or erp_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in as explicit parameters by the services.
    - Decimal-only arithmetic: floats are rejected at the record boundary.
    - Determinism: identical inputs always produce identical outputs.
    - Policy as input: every rate and threshold arrives through a policy
      object from ``erp_engines.policy``.

Audit relevance:
    Engine invocations are traced via ``@traced_engine``
    (see ``erp_engines.tracer``), emitting ERP_ENGINE_TRACE records.
"""

from erp_engines.aging import STANDARD_BUCKETS, AgeBucket, AgingBucket, AgingCalculator
from erp_engines.cash_flow import (
    CashFlowForecast,
    CashFlowForecaster,
    CashInflows,
    CashOutflows,
)
from erp_engines.collection import (
    CollectionAction,
    CollectionAnalysis,
    CollectionRecommender,
)
from erp_engines.credit import (
    CreditProfile,
    CreditScoringEngine,
    PaymentHistoryItem,
    PaymentStatus,
    RiskLevel,
)
from erp_engines.dashboard import (
    CashPosition,
    DashboardComposer,
    FinancialDashboard,
    FinancialKPI,
    FinancialRatios,
    KPICategory,
    Trend,
)
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
from erp_engines.profit_loss import (
    CostOfGoodsSold,
    ExpenseLine,
    OperatingExpenses,
    ProfitLossGenerator,
    ProfitLossStatement,
    RevenueBreakdown,
)
from erp_engines.receivables import (
    AgedItem,
    AgingSummary,
    CounterpartyLedger,
    ReceivablesAggregator,
    aggregate_payables,
    aggregate_receivables,
    summarize_aging,
)
from erp_engines.reconciliation import (
    BankReconciliationMatcher,
    MatchBasis,
    ReconciliationMatch,
    ReconciliationResult,
    ReconciliationStatus,
    UnreconciledItem,
    UnreconciledType,
)
from erp_engines.tax import (
    TaxBreakdownItem,
    TaxCalculator,
    TaxComponent,
    TaxRequest,
    TaxResult,
    TaxType,
)
from erp_engines.tracer import traced_engine
from erp_engines.variance import (
    CostVarianceAnalysis,
    CostVarianceAnalyzer,
    CostVarianceReport,
)

__all__ = [
    # Aging
    "AgeBucket",
    "AgingBucket",
    "AgingCalculator",
    "STANDARD_BUCKETS",
    # Receivables / payables
    "AgedItem",
    "AgingSummary",
    "CounterpartyLedger",
    "ReceivablesAggregator",
    "aggregate_payables",
    "aggregate_receivables",
    "summarize_aging",
    # Tax
    "TaxBreakdownItem",
    "TaxCalculator",
    "TaxComponent",
    "TaxRequest",
    "TaxResult",
    "TaxType",
    # Variance
    "CostVarianceAnalysis",
    "CostVarianceAnalyzer",
    "CostVarianceReport",
    # P&L
    "CostOfGoodsSold",
    "ExpenseLine",
    "OperatingExpenses",
    "ProfitLossGenerator",
    "ProfitLossStatement",
    "RevenueBreakdown",
    # Cash flow
    "CashFlowForecast",
    "CashFlowForecaster",
    "CashInflows",
    "CashOutflows",
    # Credit
    "CreditProfile",
    "CreditScoringEngine",
    "PaymentHistoryItem",
    "PaymentStatus",
    "RiskLevel",
    # Reconciliation
    "BankReconciliationMatcher",
    "MatchBasis",
    "ReconciliationMatch",
    "ReconciliationResult",
    "ReconciliationStatus",
    "UnreconciledItem",
    "UnreconciledType",
    # Collections
    "CollectionAction",
    "CollectionAnalysis",
    "CollectionRecommender",
    # Dashboard
    "CashPosition",
    "DashboardComposer",
    "FinancialDashboard",
    "FinancialKPI",
    "FinancialRatios",
    "KPICategory",
    "Trend",
    # Policy
    "CashFlowPolicy",
    "CollectionActionType",
    "CollectionPolicy",
    "CollectionPriority",
    "CollectionRule",
    "CostingPolicy",
    "CreditPolicy",
    "DashboardPolicy",
    "ExpenseBasis",
    "OperatingExpenseRule",
    "ProfitLossPolicy",
    "ReconciliationPolicy",
    "TaxPolicy",
    # Tracing
    "traced_engine",
]
