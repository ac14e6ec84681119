"""
Tests for the aging calculator.

Covers:
- Days overdue (floored at zero)
- Bucket classification including the inclusive upper edges
- Bucket range validation
"""

from datetime import date

import pytest

from erp_engines.aging import STANDARD_BUCKETS, AgeBucket, AgingBucket, AgingCalculator
from erp_kernel.exceptions import InvalidInputError


class TestDaysOverdue:

    def setup_method(self):
        self.calculator = AgingCalculator()

    def test_days_after_due_date(self):
        assert self.calculator.days_overdue(date(2024, 1, 1), date(2024, 1, 31)) == 30

    def test_not_yet_due_is_zero(self):
        assert self.calculator.days_overdue(date(2024, 2, 15), date(2024, 1, 31)) == 0

    def test_due_today_is_zero(self):
        assert self.calculator.days_overdue(date(2024, 1, 31), date(2024, 1, 31)) == 0

    def test_crosses_leap_day(self):
        assert self.calculator.days_overdue(date(2024, 2, 28), date(2024, 3, 1)) == 2


class TestClassification:

    def setup_method(self):
        self.calculator = AgingCalculator()

    @pytest.mark.parametrize("days, expected", [
        (0, AgingBucket.CURRENT),
        (30, AgingBucket.CURRENT),
        (31, AgingBucket.DAYS_31_60),
        (60, AgingBucket.DAYS_31_60),
        (61, AgingBucket.DAYS_61_90),
        (90, AgingBucket.DAYS_61_90),
        (91, AgingBucket.DAYS_90_PLUS),
        (10_000, AgingBucket.DAYS_90_PLUS),
    ])
    def test_bucket_edges(self, days, expected):
        assert self.calculator.classify(days) == expected

    def test_negative_days_rejected(self):
        with pytest.raises(InvalidInputError) as exc_info:
            self.calculator.classify(-1)
        assert exc_info.value.field == "days_overdue"

    def test_age_returns_days_and_bucket(self):
        days, bucket = self.calculator.age(date(2024, 1, 1), date(2024, 2, 1))
        assert days == 31
        assert bucket == AgingBucket.DAYS_31_60

    def test_bucket_labels(self):
        assert [b.bucket.value for b in STANDARD_BUCKETS] == ["0-30", "31-60", "61-90", "90+"]


class TestAgeBucket:

    def test_unbounded_contains_large_values(self):
        bucket = AgeBucket(AgingBucket.DAYS_90_PLUS, 91, None)
        assert bucket.contains(91)
        assert bucket.contains(5000)
        assert not bucket.contains(90)

    def test_negative_min_rejected(self):
        with pytest.raises(ValueError):
            AgeBucket(AgingBucket.CURRENT, -1, 30)

    def test_max_below_min_rejected(self):
        with pytest.raises(ValueError):
            AgeBucket(AgingBucket.DAYS_31_60, 60, 31)
