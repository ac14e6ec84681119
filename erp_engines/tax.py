"""
Tax Engine - GST, TDS and professional tax breakdowns.

Pure functions with no I/O.  Statutory default rates come from a
``TaxPolicy`` passed in by the caller.

Rules:
    GST (default type): rate defaults to policy.default_gst_rate (18).
        Inter-state supplies carry a single IGST line at the full rate;
        intra-state supplies split into CGST + SGST at half the rate each.
        The GST amount is rounded once and the rounding remainder goes to
        SGST, so cgst + sgst == total_tax exactly.  GST is additive:
        net_amount = amount + total_tax.
    TDS: rate defaults to policy.default_tds_rate (2).  TDS is withheld:
        net_amount = amount - total_tax.
    PROFESSIONAL_TAX: fixed policy amount (200) subtracted from net.
    CESS: recognised, but no calculation rule exists.

Usage:
    from decimal import Decimal
    from erp_engines.tax import TaxCalculator, TaxRequest, TaxType

    result = TaxCalculator().calculate(
        request=TaxRequest(amount=Decimal("10000"), gst_rate=Decimal("18")),
    )
    result.cgst        # Decimal("900.00")
    result.net_amount  # Decimal("11800.00")
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from erp_engines.policy import TaxPolicy
from erp_engines.tracer import traced_engine
from erp_kernel.domain.values import HUNDRED, ZERO, quantize_money, to_decimal
from erp_kernel.exceptions import (
    InvalidAmountError,
    InvalidInputError,
    UnsupportedTaxTypeError,
)
from erp_kernel.logging_config import get_logger

logger = get_logger("engines.tax")

TWO = Decimal("2")


class TaxType(str, Enum):
    """Kind of tax requested."""

    GST = "GST"
    TDS = "TDS"
    PROFESSIONAL_TAX = "PROFESSIONAL_TAX"
    CESS = "CESS"  # Known, not calculable


class TaxComponent(str, Enum):
    """Kind of a single breakdown line."""

    CGST = "CGST"
    SGST = "SGST"
    IGST = "IGST"
    TDS = "TDS"
    PROFESSIONAL_TAX = "PROFESSIONAL_TAX"


def _format_rate(rate: Decimal) -> str:
    """Render a percent without trailing zeros (9.00 -> "9", 2.50 -> "2.5")."""
    return format(rate.normalize(), "f")


@dataclass(frozen=True)
class TaxRequest:
    """
    Tax calculation request.

    ``tax_type`` may be a ``TaxType`` or its name; None means GST.
    Unset rates fall back to the policy defaults.
    """

    amount: Decimal
    tax_type: TaxType | str | None = TaxType.GST
    gst_rate: Decimal | None = None
    tds_rate: Decimal | None = None
    is_inter_state: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        if self.gst_rate is not None:
            object.__setattr__(self, "gst_rate", to_decimal(self.gst_rate))
        if self.tds_rate is not None:
            object.__setattr__(self, "tds_rate", to_decimal(self.tds_rate))


@dataclass(frozen=True)
class TaxBreakdownItem:
    """One component of a tax computation."""

    tax_type: TaxComponent
    rate: Decimal  # Percent
    amount: Decimal
    description: str


@dataclass(frozen=True)
class TaxResult:
    """
    Tax calculation result.

    Immutable; ``cgst``/``sgst``/``igst``/``tds`` are None when the
    component does not apply to the request.
    """

    base_amount: Decimal
    tax_type: TaxType
    breakdown: tuple[TaxBreakdownItem, ...]
    total_tax: Decimal
    net_amount: Decimal
    cgst: Decimal | None = None
    sgst: Decimal | None = None
    igst: Decimal | None = None
    tds: Decimal | None = None

    def component(self, component: TaxComponent) -> Decimal:
        """Sum of breakdown lines of one component (zero when absent)."""
        total = ZERO
        for item in self.breakdown:
            if item.tax_type == component:
                total += item.amount
        return total


class TaxCalculator:
    """
    Calculate GST, TDS and professional tax.

    Pure functions - no I/O, no database access.
    """

    def __init__(self, policy: TaxPolicy | None = None):
        self._policy = policy or TaxPolicy()

    @traced_engine("tax", "1.0", fingerprint_fields=("request",))
    def calculate(self, request: TaxRequest) -> TaxResult:
        """
        Compute the tax breakdown for a request.

        Raises:
            InvalidAmountError: If the amount is not positive.
            InvalidInputError: If a supplied rate is outside [0, 100].
            UnsupportedTaxTypeError: If the tax type has no rule.
        """
        t0 = time.monotonic()
        tax_type = self._resolve_type(request.tax_type)
        if request.amount <= ZERO:
            raise InvalidAmountError("amount", request.amount)
        for name, rate in (("gst_rate", request.gst_rate), ("tds_rate", request.tds_rate)):
            if rate is not None and not (ZERO <= rate <= HUNDRED):
                raise InvalidInputError(name, f"must be within [0, 100] (got {rate})")

        logger.info("tax_calculation_started", extra={
            "amount": str(request.amount),
            "tax_type": tax_type.value,
            "is_inter_state": request.is_inter_state,
        })

        if tax_type == TaxType.GST:
            result = self._gst(request)
        elif tax_type == TaxType.TDS:
            result = self._tds(request)
        elif tax_type == TaxType.PROFESSIONAL_TAX:
            result = self._professional_tax(request)
        else:
            logger.warning("tax_type_unsupported", extra={"tax_type": tax_type.value})
            raise UnsupportedTaxTypeError(tax_type.value)

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("tax_calculation_completed", extra={
            "tax_type": tax_type.value,
            "base_amount": str(result.base_amount),
            "total_tax": str(result.total_tax),
            "net_amount": str(result.net_amount),
            "breakdown_count": len(result.breakdown),
            "duration_ms": duration_ms,
        })
        return result

    @staticmethod
    def _resolve_type(value: TaxType | str | None) -> TaxType:
        if value is None:
            return TaxType.GST
        if isinstance(value, TaxType):
            return value
        try:
            return TaxType(str(value).upper())
        except ValueError:
            raise UnsupportedTaxTypeError(str(value)) from None

    def _gst(self, request: TaxRequest) -> TaxResult:
        rate = request.gst_rate if request.gst_rate is not None else self._policy.default_gst_rate
        amount = request.amount
        gst_amount = quantize_money(amount * rate / HUNDRED)

        if request.is_inter_state:
            breakdown = (
                TaxBreakdownItem(
                    TaxComponent.IGST, rate, gst_amount,
                    f"Integrated GST @ {_format_rate(rate)}%",
                ),
            )
            return TaxResult(
                base_amount=amount,
                tax_type=TaxType.GST,
                breakdown=breakdown,
                total_tax=gst_amount,
                net_amount=quantize_money(amount + gst_amount),
                igst=gst_amount,
            )

        half_rate = rate / TWO
        cgst = quantize_money(gst_amount / TWO)
        sgst = gst_amount - cgst  # Remainder, so the halves sum exactly
        breakdown = (
            TaxBreakdownItem(
                TaxComponent.CGST, half_rate, cgst,
                f"Central GST @ {_format_rate(half_rate)}%",
            ),
            TaxBreakdownItem(
                TaxComponent.SGST, half_rate, sgst,
                f"State GST @ {_format_rate(half_rate)}%",
            ),
        )
        return TaxResult(
            base_amount=amount,
            tax_type=TaxType.GST,
            breakdown=breakdown,
            total_tax=gst_amount,
            net_amount=quantize_money(amount + gst_amount),
            cgst=cgst,
            sgst=sgst,
        )

    def _tds(self, request: TaxRequest) -> TaxResult:
        rate = request.tds_rate if request.tds_rate is not None else self._policy.default_tds_rate
        tds = quantize_money(request.amount * rate / HUNDRED)
        breakdown = (
            TaxBreakdownItem(
                TaxComponent.TDS, rate, tds,
                f"Tax Deducted at Source @ {_format_rate(rate)}%",
            ),
        )
        return TaxResult(
            base_amount=request.amount,
            tax_type=TaxType.TDS,
            breakdown=breakdown,
            total_tax=tds,
            net_amount=quantize_money(request.amount - tds),
            tds=tds,
        )

    def _professional_tax(self, request: TaxRequest) -> TaxResult:
        tax = quantize_money(self._policy.professional_tax_amount)
        breakdown = (
            TaxBreakdownItem(TaxComponent.PROFESSIONAL_TAX, ZERO, tax, "Professional Tax"),
        )
        return TaxResult(
            base_amount=request.amount,
            tax_type=TaxType.PROFESSIONAL_TAX,
            breakdown=breakdown,
            total_tax=tax,
            net_amount=quantize_money(request.amount - tax),
        )
