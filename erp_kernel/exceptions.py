"""
Typed exception hierarchy for the ERP finance engine.

Every error has a typed class (catch by type, not by message), a ``code``
class attribute (machine-readable, API-safe) and structured attributes
carrying the offending values.

    FinanceEngineError (base)
    |
    +-- InvalidInputError
    |   +-- InvalidAmountError
    |   +-- InvalidQuantityError
    |   +-- InvalidDateRangeError
    |   +-- MissingIdentifierError
    |   +-- UnsupportedTaxTypeError
    |   +-- InvalidReconciliationRequestError
    |
    +-- NotFoundError
        +-- CounterpartyNotFoundError

Category    | Code                            | When Raised
------------|---------------------------------|-------------------------------------
Input       | INVALID_INPUT                   | Generic rejected input
            | INVALID_AMOUNT                  | Non-positive / negative amount
            | INVALID_QUANTITY                | Production quantity <= 0
            | INVALID_DATE_RANGE              | Window end before start
            | MISSING_IDENTIFIER              | Required identifier empty
            | UNSUPPORTED_TAX_TYPE            | Tax type without a calculation rule
            | INVALID_RECONCILIATION_REQUEST  | Bad statement (balance/account)
------------|---------------------------------|-------------------------------------
Lookup      | NOT_FOUND                       | Generic missing record
            | COUNTERPARTY_NOT_FOUND          | Customer / supplier absent

Input errors are always raised before any aggregation begins. NotFound
errors are raised by data-source collaborators and propagate through the
engine unchanged. Zero denominators are never an error: ratio helpers in
``erp_kernel.domain.values`` return zero instead.

Exceptions inherit from Exception (not ValueError) so that domain errors
can be caught as a group without also catching programming errors.
"""

from decimal import Decimal


class FinanceEngineError(Exception):
    """
    Base exception for all finance engine errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "FINANCE_ENGINE_ERROR"


# Input validation


class InvalidInputError(FinanceEngineError):
    """Input rejected before any computation started."""

    code: str = "INVALID_INPUT"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class InvalidAmountError(InvalidInputError):
    """Monetary amount outside its permitted range."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, amount: Decimal | str, reason: str = "must be positive"):
        self.amount = str(amount)
        super().__init__(field, f"{reason} (got {amount})")


class InvalidQuantityError(InvalidInputError):
    """Production quantity must be strictly positive."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, order_id: str, quantity: Decimal | int | str):
        self.order_id = order_id
        self.quantity = str(quantity)
        super().__init__(
            "quantity",
            f"production order {order_id} has non-positive quantity {quantity}",
        )


class InvalidDateRangeError(InvalidInputError):
    """Date window whose end precedes its start."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__("date_range", f"end {end} is before start {start}")


class MissingIdentifierError(InvalidInputError):
    """Required identifier is empty."""

    code: str = "MISSING_IDENTIFIER"

    def __init__(self, field: str):
        super().__init__(field, "identifier is required")


class UnsupportedTaxTypeError(InvalidInputError):
    """Tax type has no calculation rule."""

    code: str = "UNSUPPORTED_TAX_TYPE"

    def __init__(self, tax_type: str):
        self.tax_type = tax_type
        super().__init__("tax_type", f"unsupported tax type {tax_type!r}")


class InvalidReconciliationRequestError(InvalidInputError):
    """Bank statement cannot be reconciled as submitted."""

    code: str = "INVALID_RECONCILIATION_REQUEST"

    def __init__(self, bank_account_id: str, reason: str):
        self.bank_account_id = bank_account_id
        super().__init__("statement", reason)


# Lookups (raised by collaborators)


class NotFoundError(FinanceEngineError):
    """Referenced record does not exist."""

    code: str = "NOT_FOUND"


class CounterpartyNotFoundError(NotFoundError):
    """Customer or supplier with given ID was not found."""

    code: str = "COUNTERPARTY_NOT_FOUND"

    def __init__(self, counterparty_id: str):
        self.counterparty_id = counterparty_id
        super().__init__(f"Counterparty not found: {counterparty_id}")
