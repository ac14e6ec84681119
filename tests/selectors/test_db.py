"""
Tests for engine and session management.

Covers:
- session_scope commit and rollback
- Uninitialized engine errors
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from erp_kernel.db import get_session, reset_engine, session_scope
from erp_kernel.models import Counterparty


def count_counterparties(session_factory):
    with session_factory() as session:
        return session.scalar(select(func.count()).select_from(Counterparty))


class TestSessionScope:

    def test_commits_on_success(self, session_factory):
        with session_scope() as session:
            session.add(Counterparty(code="C1", name="One", credit_limit=Decimal("10")))
        assert count_counterparties(session_factory) == 1

    def test_rolls_back_and_reraises(self, session_factory, captured_logs):
        with pytest.raises(RuntimeError, match="boom"):
            with session_scope() as session:
                session.add(Counterparty(code="C2", name="Two"))
                session.flush()
                raise RuntimeError("boom")
        assert count_counterparties(session_factory) == 0
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())


def test_get_session_requires_engine():
    reset_engine()
    with pytest.raises(RuntimeError, match="Engine not initialized"):
        get_session()
