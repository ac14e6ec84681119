"""
Common ground for the read-only selectors.

A selector borrows the caller's session, runs SELECTs and hands back
frozen records from ``erp_kernel.domain.records``.  It never adds,
flushes, commits or closes; the SQL data sources own the session and
open a fresh one for every read.
"""

from uuid import UUID

from sqlalchemy.orm import Session

from erp_kernel.exceptions import CounterpartyNotFoundError


class BaseSelector:

    def __init__(self, session: Session):
        self.session = session


def parse_counterparty_id(counterparty_id: str) -> UUID:
    """Counterparty ids are UUID strings; a malformed one cannot match any row."""
    try:
        return UUID(str(counterparty_id))
    except ValueError:
        raise CounterpartyNotFoundError(str(counterparty_id)) from None
