"""Order totals: subtotal, sales tax and total in fixed-point currency."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from lunch_app.core.config import settings

CENTS: Decimal = Decimal("0.01")


class InvalidAmountError(ValueError):
    """Raised when a unit price cannot be used for money arithmetic."""


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal

    def as_strings(self) -> dict[str, str]:
        return {"subtotal": f"{self.subtotal:.2f}", "tax": f"{self.tax:.2f}", "total": f"{self.total:.2f}"}


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_amount(value: Any) -> Decimal:
    """Convert a stored or submitted price to Decimal, refusing anything non-monetary."""
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(f"Invalid unit price: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(f"Invalid unit price: {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise InvalidAmountError(f"Invalid unit price: {value!r}")
    return amount


def _finalize(subtotal: Decimal, tax_rate: Decimal | None) -> OrderTotals:
    rate = settings.tax_rate if tax_rate is None else tax_rate
    rounded_subtotal = round_money(subtotal)
    tax = round_money(rounded_subtotal * rate)
    return OrderTotals(subtotal=rounded_subtotal, tax=tax, total=round_money(rounded_subtotal + tax))


def calculate_line_totals(quantity: int, unit_price: Any, tax_rate: Decimal | None = None) -> OrderTotals:
    """Return totals for a single order line."""
    return _finalize(Decimal(int(quantity)) * to_amount(unit_price), tax_rate)


def calculate_aggregate_totals(
    lines: Iterable[tuple[int, Any]],
    tax_rate: Decimal | None = None,
) -> OrderTotals:
    """Return totals for many lines, taxing the summed subtotal once."""
    subtotal = Decimal("0")
    for quantity, unit_price in lines:
        subtotal += Decimal(int(quantity)) * to_amount(unit_price)
    return _finalize(subtotal, tax_rate)


def order_lines(orders: Iterable[Any]) -> list[tuple[int, Any]]:
    """Extract ``(quantity, unit_price)`` pairs from order rows."""
    return [(order.quantity, order.unit_price) for order in orders]
