"""Category aggregation for affidavit line items.

Rows are grouped by their numeric type id and summed. Rows whose type id or
amount is missing or non-finite are skipped, so malformed legacy data leaves
a gap instead of failing the aggregation.

The official forms carry exactly one "other" slot per category. When a party
has several "other" rows they collapse into one total shown with the first
row's description.
"""

from decimal import Decimal
from typing import Iterable, Optional, Protocol

from pydantic import BaseModel

from .formatting import format_money_decimal

# "Other" catch-all type ids, by category
OTHER_INCOME_TYPE_ID = 16
OTHER_HOUSEHOLD_EXPENSE_TYPE_ID = 20
OTHER_ASSET_TYPE_ID = 19
OTHER_LIABILITY_TYPE_ID = 9

MAX_OTHER_ASSET_ROWS = 7
MAX_OTHER_LIABILITY_ROWS = 6

OVERFLOW_SEPARATOR = " — "


class TypedAmount(Protocol):
    """Anything with a type id and an amount."""

    @property
    def type_id(self) -> Optional[int]: ...

    @property
    def amount(self) -> Optional[Decimal]: ...


class OtherSlot(BaseModel):
    """The single "other" line of a category."""

    amount: Decimal = Decimal("0")
    description: str = ""


class MonthlyTotals(BaseModel):
    """Monthly income less deductions and household expenses.

    Exactly one of ``surplus`` and ``deficit`` is set; ``deficit`` holds the
    shortfall as a positive amount.
    """

    income: Decimal
    deductions: Decimal
    net: Decimal
    household_expenses: Decimal
    surplus: Optional[Decimal] = None
    deficit: Optional[Decimal] = None


def sum_by_type(rows: Iterable[TypedAmount]) -> dict[int, Decimal]:
    """Sum amounts per type id, skipping rows with a missing id or amount."""
    totals: dict[int, Decimal] = {}
    for row in rows:
        if row.type_id is None or row.amount is None:
            continue
        totals[row.type_id] = totals.get(row.type_id, Decimal("0")) + row.amount
    return totals


def sum_all(rows: Iterable[TypedAmount]) -> Decimal:
    """Sum every usable amount regardless of type id."""
    return sum(
        (row.amount for row in rows if row.amount is not None), Decimal("0")
    )


def sum_types(totals: dict[int, Decimal], *type_ids: int) -> Decimal:
    return sum((totals.get(t, Decimal("0")) for t in type_ids), Decimal("0"))


def _row_text(row: object) -> str:
    text = getattr(row, "if_other", None)
    if text is None:
        text = getattr(row, "description", None)
    return (text or "").strip()


def other_slot(rows: Iterable[TypedAmount], type_id: int) -> OtherSlot:
    """Collapse every row of ``type_id`` into one slot.

    The description comes from the first matching row, even when that row's
    description is blank.
    """
    matching = [row for row in rows if row.type_id == type_id]
    if not matching:
        return OtherSlot()
    return OtherSlot(
        amount=sum_all(matching),
        description=_row_text(matching[0]),
    )


def monthly_totals(
    income: Iterable[TypedAmount],
    deductions: Iterable[TypedAmount],
    household_expenses: Iterable[TypedAmount],
) -> MonthlyTotals:
    total_income = sum_all(income)
    total_deductions = sum_all(deductions)
    total_expenses = sum_all(household_expenses)
    net = total_income - total_deductions
    balance = net - total_expenses
    return MonthlyTotals(
        income=total_income,
        deductions=total_deductions,
        net=net,
        household_expenses=total_expenses,
        surplus=balance if balance >= 0 else None,
        deficit=-balance if balance < 0 else None,
    )


def overflow_lines(
    rows: Iterable[TypedAmount], type_id: int, limit: int
) -> list[str]:
    """Render up to ``limit`` rows of ``type_id`` as ``description — value``.

    Unlike ``other_slot`` each row keeps its own line. Empty parts are
    dropped, so a row with no description renders as the value alone.
    """
    lines = []
    for row in rows:
        if row.type_id != type_id:
            continue
        parts = [_row_text(row), format_money_decimal(row.amount)]
        lines.append(OVERFLOW_SEPARATOR.join(p for p in parts if p))
        if len(lines) == limit:
            break
    return lines
