"""
Module: erp_engines.collection
Responsibility:
    Turn aggregated receivables ledgers into collection totals by overdue
    range and a prioritized, bounded list of recommended collection
    actions (reminder, follow-up, legal notice, credit hold).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes ``CounterpartyLedger`` output of the receivables aggregator.

Invariants enforced:
    - Totals are computed over every item; truncating the action list to
      ``max_actions`` never changes them.
    - current_due + overdue_30 + overdue_60 + overdue_90 + overdue_90_plus
      == total_outstanding.
    - Actions are ordered by priority, then days overdue (both
      descending); ties keep ledger order.

Failure modes:
    - None for well-formed input.  No ledgers yields zero totals, an
      efficiency of 100 and no actions.
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from erp_engines.policy import (
    CollectionActionType,
    CollectionPolicy,
    CollectionPriority,
    CollectionRule,
)
from erp_engines.receivables import AgedItem, CounterpartyLedger
from erp_engines.tracer import traced_engine
from erp_kernel.domain.values import (
    HUNDRED,
    ZERO,
    of_percent,
    percentage,
    quantize_money,
    round_percent,
    safe_ratio,
)
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.collection")


@dataclass(frozen=True)
class CollectionAction:
    """Recommended action for one overdue invoice."""

    invoice_id: str
    invoice_number: str | None
    counterparty_id: str
    counterparty_name: str | None
    amount: Decimal
    days_overdue: int
    action: CollectionActionType
    priority: CollectionPriority
    reason: str


@dataclass(frozen=True)
class CollectionAnalysis:
    total_outstanding: Decimal
    current_due: Decimal
    overdue_30: Decimal
    overdue_60: Decimal
    overdue_90: Decimal
    overdue_90_plus: Decimal
    collection_efficiency: Decimal
    average_days_overdue: Decimal
    bad_debt_provision: Decimal
    recommended_actions: tuple[CollectionAction, ...]
    overdue_item_count: int = 0

    @property
    def total_overdue(self) -> Decimal:
        return self.overdue_30 + self.overdue_60 + self.overdue_90 + self.overdue_90_plus


class CollectionRecommender:
    """Collection totals and prioritized actions. Pure."""

    def __init__(self, policy: CollectionPolicy | None = None):
        self._policy = policy or CollectionPolicy()

    def rule_for(self, days_overdue: int) -> CollectionRule:
        """First rule whose upper bound covers ``days_overdue``."""
        for rule in self._policy.rules:
            if rule.max_days is None or days_overdue <= rule.max_days:
                return rule
        return self._policy.rules[-1]

    def recommend(self, ledger: CounterpartyLedger, aged: AgedItem) -> CollectionAction:
        rule = self.rule_for(aged.days_overdue)
        return CollectionAction(
            invoice_id=aged.item_id,
            invoice_number=aged.item.document_number,
            counterparty_id=ledger.counterparty_id,
            counterparty_name=ledger.counterparty_name,
            amount=aged.balance_amount,
            days_overdue=aged.days_overdue,
            action=rule.action,
            priority=rule.priority,
            reason=rule.reason,
        )

    @traced_engine("collections", "1.0")
    def analyze(self, ledgers: Iterable[CounterpartyLedger]) -> CollectionAnalysis:
        t0 = time.monotonic()
        current = o30 = o60 = o90 = o90_plus = ZERO
        overdue_days_total = 0
        actions: list[CollectionAction] = []

        for ledger in ledgers:
            for aged in ledger.items:
                days = aged.days_overdue
                balance = aged.balance_amount
                if days <= 0:
                    current += balance
                    continue
                if days <= 30:
                    o30 += balance
                elif days <= 60:
                    o60 += balance
                elif days <= 90:
                    o90 += balance
                else:
                    o90_plus += balance
                overdue_days_total += days
                actions.append(self.recommend(ledger, aged))

        total = current + o30 + o60 + o90 + o90_plus
        efficiency = percentage(current, total) if total != ZERO else HUNDRED
        ordered = sorted(actions, key=lambda a: (a.priority.rank, a.days_overdue), reverse=True)
        kept = tuple(ordered[: self._policy.max_actions])

        analysis = CollectionAnalysis(
            total_outstanding=total,
            current_due=current,
            overdue_30=o30,
            overdue_60=o60,
            overdue_90=o90,
            overdue_90_plus=o90_plus,
            collection_efficiency=round_percent(efficiency),
            average_days_overdue=round_percent(
                safe_ratio(Decimal(overdue_days_total), Decimal(len(actions)))
            ),
            bad_debt_provision=quantize_money(
                of_percent(o90_plus, self._policy.bad_debt_provision_pct)
            ),
            recommended_actions=kept,
            overdue_item_count=len(actions),
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("collection_analysis_completed", extra={
            "total_outstanding": str(total),
            "total_overdue": str(analysis.total_overdue),
            "overdue_item_count": len(actions),
            "recommended_action_count": len(kept),
            "truncated": len(actions) > len(kept),
            "duration_ms": duration_ms,
        })
        return analysis
