"""
Purchase line rate reducer.

A purchase line carries six linked numbers: quantity, GST %, rate
excluding tax, rate including tax, and both line totals. When a form edits
one of them, ``recompute`` returns a fully consistent line so that no
caller ever patches a subset of the fields by hand.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any

from invoiceflow.core.exceptions import ValidationError
from invoiceflow.core.services.pricing import HUNDRED, ZERO, to_decimal


class RateField(str, Enum):
    """The field a user edited."""

    QUANTITY = "quantity"
    GST = "gst"
    RATE_EXCL = "rate_excl"
    RATE_INCL = "rate_incl"
    LINE_TOTAL_EXCL = "line_total_excl"
    LINE_TOTAL = "line_total"


@dataclass(frozen=True)
class RateLine:
    """A consistent purchase line.

    Invariants: ``rate_incl == rate_excl * (1 + gst/100)``,
    ``line_total == rate_incl * quantity`` and
    ``line_total_excl == rate_excl * quantity``.
    """

    quantity: Decimal
    gst: Decimal
    rate_excl: Decimal
    rate_incl: Decimal
    line_total_excl: Decimal
    line_total: Decimal

    @classmethod
    def from_rate_incl(cls, rate_incl: Any, gst: Any, quantity: Any) -> "RateLine":
        rate_incl = to_decimal(rate_incl)
        gst = to_decimal(gst)
        quantity = to_decimal(quantity)
        rate_excl = rate_incl / _multiplier(gst)
        return cls(
            quantity=quantity,
            gst=gst,
            rate_excl=rate_excl,
            rate_incl=rate_incl,
            line_total_excl=rate_excl * quantity,
            line_total=rate_incl * quantity,
        )

    @classmethod
    def from_rate_excl(cls, rate_excl: Any, gst: Any, quantity: Any) -> "RateLine":
        rate_excl = to_decimal(rate_excl)
        gst = to_decimal(gst)
        quantity = to_decimal(quantity)
        rate_incl = rate_excl * _multiplier(gst)
        return cls(
            quantity=quantity,
            gst=gst,
            rate_excl=rate_excl,
            rate_incl=rate_incl,
            line_total_excl=rate_excl * quantity,
            line_total=rate_incl * quantity,
        )


def _multiplier(gst: Decimal) -> Decimal:
    return 1 + gst / HUNDRED


def recompute(line: RateLine, changed: RateField | str, value: Any) -> RateLine:
    """
    Apply an edit to one field and rederive the rest.

    Which rate stays fixed depends on the edit:

    - quantity: the tax-inclusive rate is kept.
    - gst: the tax-exclusive rate is kept.
    - either rate: the other rate follows through the GST multiplier.
    - either line total: both rates are derived from total / quantity.

    Raises:
        ValidationError: On a negative value, a GST outside 0-28, or a line
            total edit while quantity is zero.
    """
    changed = RateField(changed)
    value = to_decimal(value)
    if value < ZERO:
        raise ValidationError(changed.value, "must not be negative", value)

    if changed is RateField.QUANTITY:
        return RateLine.from_rate_incl(line.rate_incl, line.gst, value)

    if changed is RateField.GST:
        if value > 28:
            raise ValidationError("gst", "must be between 0 and 28", value)
        return RateLine.from_rate_excl(line.rate_excl, value, line.quantity)

    if changed is RateField.RATE_EXCL:
        return RateLine.from_rate_excl(value, line.gst, line.quantity)

    if changed is RateField.RATE_INCL:
        return RateLine.from_rate_incl(value, line.gst, line.quantity)

    if line.quantity <= ZERO:
        raise ValidationError(
            "quantity", "must be positive to derive a rate from a total", line.quantity
        )

    if changed is RateField.LINE_TOTAL_EXCL:
        return replace(
            RateLine.from_rate_excl(value / line.quantity, line.gst, line.quantity),
            line_total_excl=value,
        )

    # RateField.LINE_TOTAL
    return replace(
        RateLine.from_rate_incl(value / line.quantity, line.gst, line.quantity),
        line_total=value,
    )
