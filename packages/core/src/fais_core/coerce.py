"""Lenient coercion of stored values.

Stored line items come from a document store that has held legacy data,
so numbers may arrive as ints, floats, numeric strings, ``None`` or junk.
These helpers turn anything unusable into ``None`` instead of raising, which
lets aggregation skip a bad row rather than abort.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional


def as_decimal(value: Any) -> Optional[Decimal]:
    """Return ``value`` as a finite Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
        return result if result.is_finite() else None
    return None


def as_type_id(value: Any) -> Optional[int]:
    """Return ``value`` as an integral type id, or None.

    Non-integral numbers (``1.5``) can never match an enumerated type and
    are treated as malformed.
    """
    number = as_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def optional_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for missing/blank values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def document_id(doc: Mapping[str, Any]) -> str:
    """Return the string id of a stored document (``_id`` or ``id``)."""
    raw = doc.get("_id", doc.get("id"))
    return "" if raw is None else str(raw)
