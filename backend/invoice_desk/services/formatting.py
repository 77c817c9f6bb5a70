from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from invoice_desk.services.totals import to_decimal

CURRENCY_SYMBOLS = {"USD": "$"}
CENT = Decimal("0.01")


def format_currency(amount: Any, currency: str = "USD") -> str:
    """
    Format an amount for display, e.g. 1234.5 -> "$1,234.50".

    Rounds half-up to cents. Currencies without a known symbol are prefixed
    with their code ("EUR 10.00").
    """
    value = to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    body = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{sign}{symbol}{body}"
    return f"{sign}{currency} {body}"


def format_percent(rate: Any) -> str:
    """Tax rate as a percentage, e.g. 0.085 -> "8.5%"."""
    percent = (to_decimal(rate) * 100).normalize()
    if percent == percent.to_integral_value():
        return f"{int(percent)}%"
    return f"{percent}%"


def format_date(value: str) -> str:
    """ISO date string -> "Oct 19, 2026"; other strings are returned unchanged."""
    try:
        parsed = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return value
    return parsed.strftime("%b %d, %Y")
