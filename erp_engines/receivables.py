"""
Module: erp_engines.receivables
Responsibility:
    Group outstanding invoices (receivables) or purchase orders (payables)
    by counterparty, age every item, and sum outstanding / current /
    overdue totals per counterparty.  Also condenses ledgers into a
    per-bucket ``AgingSummary`` for dashboards.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes ``MonetaryItem`` records supplied by a ReceivablesSource or
    PayablesSource; ``as_of`` is injected by the caller.

Invariants enforced:
    - Conservation: sum(ledger.total_outstanding) == sum(item.balance_amount)
      over every aggregated item, and per ledger
      current_amount + overdue_amount == total_outstanding.
    - Ordering: ledgers appear in first-seen counterparty order; items
      keep their input order within a ledger.
    - Streaming: the input is consumed once, so a lazy iterator of
      thousands of items is reduced without materializing it twice.

Failure modes:
    - None for well-formed input.  An empty input yields an empty tuple.
      Settled items (balance 0) are skipped with a debug log.

Usage:
    from erp_engines.receivables import aggregate_receivables, summarize_aging

    ledgers = aggregate_receivables(items=open_invoices, as_of=today)
    summary = summarize_aging(ledgers)
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from erp_engines.aging import AgingBucket, AgingCalculator
from erp_engines.tracer import traced_engine
from erp_kernel.domain.records import MonetaryItem, MonetaryItemKind
from erp_kernel.domain.values import ZERO
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.receivables")


@dataclass(frozen=True)
class AgedItem:
    """A monetary item with its computed aging."""

    item: MonetaryItem
    days_overdue: int
    bucket: AgingBucket

    @property
    def item_id(self) -> str:
        return self.item.item_id

    @property
    def balance_amount(self) -> Decimal:
        return self.item.balance_amount

    @property
    def is_overdue(self) -> bool:
        return self.days_overdue > 0


@dataclass(frozen=True)
class CounterpartyLedger:
    """Outstanding position of one customer or supplier.

    A view recomputed on demand; never persisted.
    """

    counterparty_id: str
    counterparty_name: str | None
    total_outstanding: Decimal
    current_amount: Decimal
    overdue_amount: Decimal
    items: tuple[AgedItem, ...]

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class AgingSummary:
    """Outstanding amounts by aging bucket."""

    current: Decimal = ZERO
    days_31_60: Decimal = ZERO
    days_61_90: Decimal = ZERO
    days_90_plus: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.current + self.days_31_60 + self.days_61_90 + self.days_90_plus


@dataclass
class _LedgerAccumulator:
    counterparty_id: str
    counterparty_name: str | None
    current_amount: Decimal = ZERO
    overdue_amount: Decimal = ZERO
    items: list[AgedItem] = field(default_factory=list)

    def add(self, aged: AgedItem) -> None:
        if aged.is_overdue:
            self.overdue_amount += aged.balance_amount
        else:
            self.current_amount += aged.balance_amount
        self.items.append(aged)
        if self.counterparty_name is None:
            self.counterparty_name = aged.item.counterparty_name

    def freeze(self) -> CounterpartyLedger:
        return CounterpartyLedger(
            counterparty_id=self.counterparty_id,
            counterparty_name=self.counterparty_name,
            total_outstanding=self.current_amount + self.overdue_amount,
            current_amount=self.current_amount,
            overdue_amount=self.overdue_amount,
            items=tuple(self.items),
        )


class ReceivablesAggregator:
    """
    Counterparty aggregation over open monetary items.

    Contract:
        Pure -- the only inputs are the items and ``as_of``.
    Guarantees:
        - One ledger per distinct counterparty, in first-seen order.
        - Conservation of outstanding balances (see module docstring).
    """

    def __init__(self, calculator: AgingCalculator | None = None):
        self._calculator = calculator or AgingCalculator()

    @traced_engine("receivables", "1.0", fingerprint_fields=("as_of",))
    def aggregate(
        self,
        items: Iterable[MonetaryItem],
        as_of: date,
    ) -> tuple[CounterpartyLedger, ...]:
        t0 = time.monotonic()
        accumulators: dict[str, _LedgerAccumulator] = {}
        skipped = 0
        kinds: set[MonetaryItemKind] = set()

        for item in items:
            if item.is_settled:
                skipped += 1
                logger.debug("aggregation_item_settled_skipped", extra={
                    "item_id": item.item_id,
                    "counterparty_id": item.counterparty_id,
                })
                continue
            kinds.add(item.kind)
            days, bucket = self._calculator.age(item.due_date, as_of)
            acc = accumulators.get(item.counterparty_id)
            if acc is None:
                acc = _LedgerAccumulator(item.counterparty_id, item.counterparty_name)
                accumulators[item.counterparty_id] = acc
            acc.add(AgedItem(item=item, days_overdue=days, bucket=bucket))

        ledgers = tuple(acc.freeze() for acc in accumulators.values())

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("aggregation_completed", extra={
            "as_of": as_of.isoformat(),
            "kinds": sorted(k.value for k in kinds),
            "counterparty_count": len(ledgers),
            "item_count": sum(ledger.item_count for ledger in ledgers),
            "skipped_settled": skipped,
            "total_outstanding": str(sum((ledger.total_outstanding for ledger in ledgers), ZERO)),
            "duration_ms": duration_ms,
        })
        return ledgers


def aggregate_receivables(
    items: Iterable[MonetaryItem],
    as_of: date,
) -> tuple[CounterpartyLedger, ...]:
    """Customer ledgers over open invoices."""
    return ReceivablesAggregator().aggregate(items=items, as_of=as_of)


def aggregate_payables(
    items: Iterable[MonetaryItem],
    as_of: date,
) -> tuple[CounterpartyLedger, ...]:
    """Supplier ledgers over open purchase orders (same algorithm)."""
    return ReceivablesAggregator().aggregate(items=items, as_of=as_of)


def summarize_aging(ledgers: Iterable[CounterpartyLedger]) -> AgingSummary:
    """Total outstanding per aging bucket across ledgers."""
    totals = {bucket: ZERO for bucket in AgingBucket}
    for ledger in ledgers:
        for aged in ledger.items:
            totals[aged.bucket] += aged.balance_amount
    return AgingSummary(
        current=totals[AgingBucket.CURRENT],
        days_31_60=totals[AgingBucket.DAYS_31_60],
        days_61_90=totals[AgingBucket.DAYS_61_90],
        days_90_plus=totals[AgingBucket.DAYS_90_PLUS],
    )
