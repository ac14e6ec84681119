"""
Module: erp_engines.aging
Responsibility:
    Compute days overdue for a dated monetary item and classify it into one
    of the four standard aging buckets (0-30, 31-60, 61-90, 90+).  Used by
    the receivables/payables aggregator, the collection recommender and the
    dashboard aging summaries.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import erp_kernel.domain and erp_kernel.exceptions.

Invariants enforced:
    - Purity: "now" is always an explicit ``as_of`` parameter.
    - Partition: every non-negative day count maps to exactly one bucket;
      thresholds are inclusive upper edges (30 -> 0-30, 31 -> 31-60).

Failure modes:
    - InvalidInputError when a negative day count is classified.

Usage:
    from datetime import date
    from erp_engines.aging import AgingCalculator, AgingBucket

    calculator = AgingCalculator()
    days = calculator.days_overdue(
        due_date=date(2024, 1, 15),
        as_of=date(2024, 2, 15),
    )  # 31
    calculator.classify(days)  # AgingBucket.DAYS_31_60
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from erp_kernel.exceptions import InvalidInputError
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.aging")


class AgingBucket(str, Enum):
    """Aging classification of an outstanding amount."""

    CURRENT = "0-30"
    DAYS_31_60 = "31-60"
    DAYS_61_90 = "61-90"
    DAYS_90_PLUS = "90+"


@dataclass(frozen=True)
class AgeBucket:
    """
    Day range of one aging bucket.

    Contract:
        Frozen dataclass representing a contiguous, inclusive range of days.
    Guarantees:
        - min_days >= 0.
        - max_days >= min_days (when bounded).
    """

    bucket: AgingBucket
    min_days: int
    max_days: int | None  # None = unbounded (90+)

    def __post_init__(self) -> None:
        if self.min_days < 0:
            raise ValueError("min_days cannot be negative")
        if self.max_days is not None and self.max_days < self.min_days:
            raise ValueError("max_days cannot be less than min_days")

    def contains(self, days: int) -> bool:
        """Check if a day count falls within this bucket."""
        if days < self.min_days:
            return False
        if self.max_days is None:
            return True
        return days <= self.max_days


STANDARD_BUCKETS: tuple[AgeBucket, ...] = (
    AgeBucket(AgingBucket.CURRENT, 0, 30),
    AgeBucket(AgingBucket.DAYS_31_60, 31, 60),
    AgeBucket(AgingBucket.DAYS_61_90, 61, 90),
    AgeBucket(AgingBucket.DAYS_90_PLUS, 91, None),
)


class AgingCalculator:
    """
    Days-overdue computation and bucket classification.

    Contract:
        Pure functions -- no I/O, no clock access.
    Guarantees:
        - ``days_overdue`` is never negative (items not yet due are 0).
        - ``classify`` maps every non-negative day count to exactly one
          bucket of ``STANDARD_BUCKETS``.
    """

    BUCKETS = STANDARD_BUCKETS

    def days_overdue(self, due_date: date, as_of: date) -> int:
        """Whole days elapsed since ``due_date``, floored at zero."""
        return max(0, (as_of - due_date).days)

    def classify(self, days_overdue: int) -> AgingBucket:
        """
        Classify a day count into its aging bucket.

        Raises:
            InvalidInputError: If ``days_overdue`` is negative.
        """
        if days_overdue < 0:
            raise InvalidInputError(
                "days_overdue", f"must not be negative (got {days_overdue})"
            )

        for age_bucket in self.BUCKETS:
            if age_bucket.contains(days_overdue):
                return age_bucket.bucket

        # Unreachable with STANDARD_BUCKETS (terminal bucket is unbounded)
        logger.warning("aging_classification_no_bucket", extra={
            "days_overdue": days_overdue,
        })
        raise InvalidInputError("days_overdue", f"{days_overdue} fits no bucket")

    def age(self, due_date: date, as_of: date) -> tuple[int, AgingBucket]:
        """Convenience: days overdue and its bucket in one call."""
        days = self.days_overdue(due_date, as_of)
        return days, self.classify(days)
