from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

ZERO = Decimal("0")


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item[name]
    return getattr(item, name)


def line_amount(quantity: Any, rate: Any) -> Decimal:
    return to_decimal(quantity) * to_decimal(rate)


def compute_totals(items: Iterable[Any], tax_rate: Any = 0) -> Totals:
    """
    Derive subtotal, tax and total from line items.

    Items may be mappings or objects exposing ``quantity`` and ``rate``.
    No rounding is applied here; formatting to cents happens at display time.
    """
    subtotal = sum(
        (line_amount(_field(item, "quantity"), _field(item, "rate")) for item in items),
        ZERO,
    )
    tax = subtotal * to_decimal(tax_rate)
    return Totals(subtotal=subtotal, tax=tax, total=subtotal + tax)
