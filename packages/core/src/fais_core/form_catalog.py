"""Field catalogs for the official short and long affidavit forms.

A catalog turns one party's aggregated data into an ordered list of field
assignments. Each assignment names the field label it targets and whether a
fallback lookup is allowed when the exact name is absent from the template
revision. Writing happens later in ``pdf_filler``; nothing here touches a
PDF.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from pydantic import BaseModel

from .aggregation import (
    MAX_OTHER_ASSET_ROWS,
    MAX_OTHER_LIABILITY_ROWS,
    OTHER_ASSET_TYPE_ID,
    OTHER_HOUSEHOLD_EXPENSE_TYPE_ID,
    OTHER_INCOME_TYPE_ID,
    OTHER_LIABILITY_TYPE_ID,
    monthly_totals,
    other_slot,
    overflow_lines,
    sum_by_type,
    sum_types,
)
from .formatting import format_form_date, format_money_decimal
from .income import PayFrequency
from .models import AffidavitData, CaseCaption, FieldKind, FormKey


class FieldAssignment(BaseModel):
    """A value destined for one form field."""

    label: str
    kind: FieldKind
    text: str = ""
    checked: bool = False
    fuzzy: bool = False


class _Builder:
    def __init__(self) -> None:
        self.assignments: list[FieldAssignment] = []

    def text(self, label: str, value: str, *, fuzzy: bool = False) -> None:
        self.assignments.append(
            FieldAssignment(label=label, kind=FieldKind.TEXT, text=value, fuzzy=fuzzy)
        )

    def money(self, label: str, amount: Optional[Decimal], *, fuzzy: bool = False) -> None:
        self.text(label, format_money_decimal(amount), fuzzy=fuzzy)

    def check(self, label: str, checked: bool, *, fuzzy: bool = False) -> None:
        self.assignments.append(
            FieldAssignment(
                label=label, kind=FieldKind.CHECKBOX, checked=checked, fuzzy=fuzzy
            )
        )


def caption_assignments(caption: CaseCaption) -> list[FieldAssignment]:
    """Case heading fields. Blank lookups leave their fields untouched."""
    b = _Builder()
    b.text("Case No", caption.case.case_number.strip())
    b.text("Division", caption.case.division.strip())
    if caption.circuit_name:
        b.text("Circuit No", caption.circuit_name)
    if caption.county_name:
        b.text("county", caption.county_name)
    if caption.circuit_name:
        b.text("IN THE CIRCUIT COURT OF THE", caption.circuit_name)
    if caption.county_name:
        b.text("IN AND FOR", caption.county_name)
    petitioner = caption.petitioner.display_name if caption.petitioner else ""
    respondent = caption.respondent.display_name if caption.respondent else ""
    if petitioner:
        b.text("Petitioner", petitioner)
    if respondent:
        b.text("Respondent", respondent)
    return b.assignments


def _employment_identity(data: AffidavitData):
    primary = data.employment[0] if data.employment else None
    if primary is None:
        return None, "", "", None
    return (
        primary,
        primary.employer_name.strip(),
        (primary.occupation or "").strip(),
        primary.pay_frequency_type_id,
    )


# Short form income lines by monthly income type id
_SHORT_INCOME_FIELDS = {
    2: "monthly bonuses, commissions",
    3: "monthly business income",
    4: "monthly disability",
    5: "monthly workers",
    6: "monthly unemployment",
    7: "monthly pension",
    8: "monthly social security",
    11: "monthly interest and dividends",
    12: "monthly rental income",
    13: "royalties, trusts, or estates",
    14: "monthly reimbursed expenses",
    15: "monthly gains derived",
}

_SHORT_DEDUCTION_FIELDS = [
    (1, "monthly federal, state, and local income tax"),
    (2, "monthly fica or self-employment taxes"),
    (3, "monthly medicare payments"),
    (4, "monthly mandatory union dues"),
    (5, "monthly mandatory retirement payments"),
    (6, "monthly health insurance payments"),
    (7, "monthly court-ordered child support actually paid"),
    (8, "monthly court-ordered alimony actually paid"),
    (9, "25b from other cases"),
    (9, "25b"),
]

# (label, type ids, fuzzy)
_SHORT_EXPENSE_FIELDS = [
    ("mortgage or rent", (1,), True),
    ("property taxes", (2,), False),
    ("utilities", (5, 6, 8), False),
    ("telephone", (7,), False),
    ("food", (14,), False),
    ("meals outside home", (15,), False),
    ("maintenance repairs", (9,), False),
]

_SHORT_FREQUENCY_BOXES = [
    ("every week check box", PayFrequency.WEEKLY),
    ("every other week check box", PayFrequency.BIWEEKLY),
    ("twice a month check box", PayFrequency.SEMI_MONTHLY),
    ("monthly check box", PayFrequency.MONTHLY),
]


def short_form_assignments(
    data: AffidavitData, name: str, today: Optional[date] = None
) -> list[FieldAssignment]:
    b = _Builder()
    primary, employer, occupation, frequency = _employment_identity(data)

    b.text("full legal name", name)
    b.text("full legal name 1", name, fuzzy=True)
    if occupation:
        b.text("occupation", occupation)
    if employer:
        b.text("employed by", employer)
    if primary is not None and primary.pay_rate is not None:
        b.money("pay rate", primary.pay_rate)

    if frequency is not None:
        for label, box in _SHORT_FREQUENCY_BOXES:
            b.check(label, frequency == box)
        b.check("other check box", frequency not in {f for _, f in _SHORT_FREQUENCY_BOXES})
    b.check("unemployed check box", not data.employment)

    # Income
    income = sum_by_type(data.monthly_income)
    b.money("monthly gross salary or wages", income.get(1))
    for type_id, label in _SHORT_INCOME_FIELDS.items():
        b.money(label, income.get(type_id), fuzzy=True)

    alimony_this_case = income.get(9, Decimal("0"))
    alimony_other_cases = income.get(10, Decimal("0"))
    if alimony_this_case + alimony_other_cases > 0:
        b.money(
            "monthly alimony actually received",
            alimony_this_case + alimony_other_cases,
            fuzzy=True,
        )
    if alimony_this_case > 0:
        b.money("alimony from this case", alimony_this_case)
    if alimony_other_cases > 0:
        b.money("alimony From other cases", alimony_other_cases)

    other_income = other_slot(data.monthly_income, OTHER_INCOME_TYPE_ID)
    if other_income.amount > 0:
        b.money("any other income of a", other_income.amount, fuzzy=True)
    if other_income.description:
        b.text(
            "other income of a recurring nature source",
            other_income.description,
            fuzzy=True,
        )

    totals = monthly_totals(
        data.monthly_income, data.monthly_deductions, data.monthly_household_expenses
    )
    if totals.income > 0:
        b.money("total present monthly gross income", totals.income, fuzzy=True)

    # Deductions
    deductions = sum_by_type(data.monthly_deductions)
    for type_id, label in _SHORT_DEDUCTION_FIELDS:
        b.money(label, deductions.get(type_id), fuzzy=True)
    if totals.deductions > 0:
        b.money(
            "total deductions allowable under section 61.30",
            totals.deductions,
            fuzzy=True,
        )

    b.money("present net monthly income", totals.net, fuzzy=True)
    b.money("total present monthly net income", totals.net, fuzzy=True)

    # Household expenses
    expenses = sum_by_type(data.monthly_household_expenses)
    for label, type_ids, fuzzy in _SHORT_EXPENSE_FIELDS:
        amount = sum_types(expenses, *type_ids)
        if amount > 0:
            b.money(label, amount, fuzzy=fuzzy)

    other_expense = other_slot(
        data.monthly_household_expenses, OTHER_HOUSEHOLD_EXPENSE_TYPE_ID
    )
    if other_expense.description:
        b.text("other 2", other_expense.description)
    if other_expense.amount > 0:
        b.money("other amount 2", other_expense.amount)

    if totals.household_expenses > 0:
        b.money("total monthly expenses 1", totals.household_expenses, fuzzy=True)
        b.money("total monthly expenses 2", totals.household_expenses, fuzzy=True)

    if totals.surplus is not None:
        b.money("surplus", totals.surplus, fuzzy=True)
        b.text("deficit", "", fuzzy=True)
    else:
        b.money("deficit", totals.deficit, fuzzy=True)
        b.text("surplus", "", fuzzy=True)

    signed = format_form_date(today)
    b.text("date", signed, fuzzy=True)
    b.text("dated", signed, fuzzy=True)
    return b.assignments


_LONG_FREQUENCY_BOXES = [
    ("Hourly", PayFrequency.HOURLY),
    ("Weekly", PayFrequency.WEEKLY),
    ("Biweekly", PayFrequency.BIWEEKLY),
    ("Monthly", PayFrequency.MONTHLY),
]

_LONG_INCOME_FIELD_OVERRIDES = {9: "9a From this case", 10: "9b From other cases"}

_LONG_DEDUCTION_FIELDS = {
    1: "19",
    2: "20",
    3: "21",
    4: "22",
    5: "23",
    6: "24",
    7: "25",
    8: "25a From this case",
    9: "25b From other cases",
    10: "26",
}


def long_form_assignments(
    data: AffidavitData, name: str, today: Optional[date] = None
) -> list[FieldAssignment]:
    b = _Builder()
    primary, employer, occupation, frequency = _employment_identity(data)

    b.text("I full legal name", name)
    if employer:
        b.text("Employed by", employer)
    if occupation:
        b.text("My occupation is", occupation)
    if primary is not None and primary.pay_rate is not None:
        b.money("Pay rate", primary.pay_rate)
    if frequency is not None:
        for label, box in _LONG_FREQUENCY_BOXES:
            b.check(label, frequency == box)

    income = sum_by_type(data.monthly_income)
    for type_id in range(1, 17):
        if type_id in income:
            label = _LONG_INCOME_FIELD_OVERRIDES.get(type_id, str(type_id))
            b.money(label, income[type_id])

    other_income = other_slot(data.monthly_income, OTHER_INCOME_TYPE_ID)
    if other_income.description:
        b.text(
            "Any other income of a recurring nature identify source",
            other_income.description,
        )

    totals = monthly_totals(
        data.monthly_income, data.monthly_deductions, data.monthly_household_expenses
    )
    if totals.income > 0:
        b.money("17", totals.income)
        b.money("18", totals.income * 12)

    deductions = sum_by_type(data.monthly_deductions)
    for type_id, label in _LONG_DEDUCTION_FIELDS.items():
        if type_id in deductions:
            b.money(label, deductions[type_id])
    if totals.deductions > 0:
        b.money("27", totals.deductions)

    expenses = sum_by_type(data.monthly_household_expenses)
    for type_id in range(1, 21):
        if type_id in expenses:
            b.money(f"{type_id}_2", expenses[type_id])

    asset_lines = overflow_lines(data.assets, OTHER_ASSET_TYPE_ID, MAX_OTHER_ASSET_ROWS)
    for row_number, line in enumerate(asset_lines, start=1):
        b.text(f"Other assetsRow{row_number}", line)

    liability_lines = overflow_lines(
        data.liabilities, OTHER_LIABILITY_TYPE_ID, MAX_OTHER_LIABILITY_ROWS
    )
    for row_number, line in enumerate(liability_lines, start=1):
        b.text(f"Other liabilitiesRow{row_number}", line)

    return b.assignments


CatalogBuilder = Callable[[AffidavitData, str, Optional[date]], list[FieldAssignment]]

CATALOGS: dict[FormKey, CatalogBuilder] = {
    FormKey.SHORT: short_form_assignments,
    FormKey.LONG: long_form_assignments,
}


def build_assignments(
    form: FormKey,
    data: AffidavitData,
    name: str,
    caption: Optional[CaseCaption] = None,
    today: Optional[date] = None,
) -> list[FieldAssignment]:
    """Caption fields first, then the form's own catalog."""
    assignments = caption_assignments(caption) if caption is not None else []
    assignments.extend(CATALOGS[form](data, name, today))
    return assignments
