"""Shared helpers for prices, cart subtotals and checkout totals.

Prices are carried as integer cents; decimal amounts only appear at the
checkout boundary, always via ``Decimal`` with half-up rounding.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from .constants import CENTS_PER_UNIT, TAX_RATE
from .exceptions import ValidationException

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class CheckoutTotals:
    subtotal: Decimal
    tax: Decimal
    grand_total: Decimal

    def as_floats(self) -> dict[str, float]:
        return {
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "grandTotal": float(self.grand_total),
        }


def to_decimal(value: Any) -> Decimal:
    """Convert an int/float/str to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationException(f"Invalid amount: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationException(f"Invalid amount: {value!r}") from exc
    if not result.is_finite():
        raise ValidationException(f"Invalid amount: {value!r}")
    return result


def round_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def price_to_cents(price: Any) -> int:
    """``round(price * 100)`` in integer cents."""
    cents = to_decimal(price) * CENTS_PER_UNIT
    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_amount(cents: int | None) -> Decimal:
    return Decimal(int(cents or 0)) / CENTS_PER_UNIT


def calc_subtotal_cents(lines: Iterable[Any]) -> int:
    total = 0
    for line in lines:
        total += int(line.unit_price_cents) * int(line.quantity)
    return total


def calc_item_count(lines: Iterable[Any]) -> int:
    return sum(int(line.quantity) for line in lines)


def compute_totals(
    lines: Iterable[Any],
    totals_hint: Any = None,
    *,
    tax_rate: Decimal | float | str = TAX_RATE,
) -> CheckoutTotals:
    """Derive subtotal, tax and grand total in currency units.

    The subtotal is rounded before tax is applied, so per-line rounding error
    never accumulates into the tax.
    """
    hint_cents = getattr(totals_hint, "subtotal_cents", None)
    if isinstance(hint_cents, int) and not isinstance(hint_cents, bool):
        raw_subtotal = cents_to_amount(hint_cents)
    else:
        raw_subtotal = sum(
            (cents_to_amount(line.unit_price_cents) * int(line.quantity) for line in lines),
            Decimal("0"),
        )

    subtotal = round_money(raw_subtotal)
    tax = round_money(subtotal * to_decimal(tax_rate))
    grand_total = round_money(subtotal + tax)
    return CheckoutTotals(subtotal=subtotal, tax=tax, grand_total=grand_total)
