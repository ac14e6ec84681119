"""
Reconciliation - Bank statement matching against recorded payments.
"""

from erp_engines.reconciliation.bank_recon_types import (
    MatchBasis,
    ReconciliationMatch,
    ReconciliationResult,
    ReconciliationStatus,
    UnreconciledItem,
    UnreconciledType,
)
from erp_engines.reconciliation.bank_matcher import BankReconciliationMatcher

__all__ = [
    "BankReconciliationMatcher",
    "MatchBasis",
    "ReconciliationMatch",
    "ReconciliationResult",
    "ReconciliationStatus",
    "UnreconciledItem",
    "UnreconciledType",
]
