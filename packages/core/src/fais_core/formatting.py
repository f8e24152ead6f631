"""Value formatting for form fields and the generic report."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from .coerce import as_decimal

_CENTS = Decimal("0.01")


def format_money_decimal(amount: Any) -> str:
    """Format an amount for a PDF form field: ``1234.56``, no currency symbol.

    Missing or non-finite amounts format as an empty string.
    """
    value = as_decimal(amount)
    if value is None:
        return ""
    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def format_money(amount: Any) -> str:
    """Format an amount for human display: ``$1,234.56``."""
    value = as_decimal(amount)
    if value is None:
        return ""
    quantized = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if quantized < 0:
        return f"-${-quantized:,.2f}"
    return f"${quantized:,.2f}"


def format_form_date(value: Optional[date] = None) -> str:
    """Format a signature date as ``M/D/YYYY``."""
    d = value or date.today()
    return f"{d.month}/{d.day}/{d.year}"


def full_name(
    first_name: Optional[str],
    last_name: Optional[str],
    username: Optional[str] = None,
) -> str:
    """Return "First Last", falling back to the username when both are blank."""
    first = (first_name or "").strip()
    last = (last_name or "").strip()
    return f"{first} {last}".strip() or (username or "").strip()
