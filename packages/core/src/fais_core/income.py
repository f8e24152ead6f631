"""Gross income and form-threshold calculation.

Employment pay rates are annualized by pay frequency and summed across all
jobs. That figure alone decides the affidavit form: below the threshold the
short form applies, at or above it the long form. Monthly income rows are
reported alongside but never used for the classification.
"""

from decimal import Decimal
from enum import IntEnum
from typing import Iterable, Optional

import structlog

from .aggregation import sum_all
from .models import (
    AffidavitSummary,
    AuditEntry,
    EmploymentRow,
    FormKey,
    MonthlyIncomeBreakdownItem,
    MonthlyLine,
)
from .store import MONTHLY_INCOME_TYPES, LookupSource

logger = structlog.get_logger()

# Statutory cut-over between the short and long forms
INCOME_THRESHOLD = Decimal("50000")


class PayFrequency(IntEnum):
    """Pay frequency type ids with their periods per year."""

    WEEKLY = 1
    BIWEEKLY = 2
    MONTHLY = 3
    SEMI_MONTHLY = 4
    ANNUALLY = 5
    SEMI_ANNUALLY = 6
    QUARTERLY = 7
    DAILY = 8
    HOURLY = 9

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BIWEEKLY: 26,
    PayFrequency.MONTHLY: 12,
    PayFrequency.SEMI_MONTHLY: 24,
    PayFrequency.ANNUALLY: 1,
    PayFrequency.SEMI_ANNUALLY: 2,
    PayFrequency.QUARTERLY: 4,
    PayFrequency.DAILY: 260,  # 5-day week
    PayFrequency.HOURLY: 2080,  # 40-hour week
}


def annual_multiplier(frequency_type_id: Optional[int]) -> Optional[int]:
    """Return periods per year for a frequency id, or None if unrecognized."""
    if frequency_type_id is None:
        return None
    try:
        return PayFrequency(frequency_type_id).periods_per_year
    except ValueError:
        return None


class IncomeCalculator:
    """
    Compute the income summary and affidavit form for one party.

    Every contribution is recorded in an audit log so the classification on
    a sworn document can be traced back to individual employment rows.
    """

    def __init__(
        self,
        lookups: Optional[LookupSource] = None,
    ):
        self.lookups = lookups
        self.threshold = INCOME_THRESHOLD
        self._audit_log: list[AuditEntry] = []

    def _log_step(
        self,
        step: str,
        input_value: str,
        output_value: str,
        source: str,
        notes: Optional[str] = None,
    ) -> None:
        """Add an entry to the audit log."""
        entry = AuditEntry(
            step=step,
            input_value=input_value,
            output_value=output_value,
            source=source,
            notes=notes,
        )
        self._audit_log.append(entry)
        logger.debug(
            "calculation_step",
            step=step,
            input=input_value,
            output=output_value,
            source=source,
        )

    def annual_income_from_employment(self, rows: Iterable[EmploymentRow]) -> Decimal:
        """Sum ``pay_rate x periods_per_year`` over usable employment rows.

        Rows with no positive pay rate are skipped; rows with an unrecognized
        or "other" frequency contribute zero.
        """
        total = Decimal("0")
        for row in rows:
            if row.pay_rate is None or row.pay_rate <= 0:
                continue
            multiplier = annual_multiplier(row.pay_frequency_type_id)
            if multiplier is None:
                self._log_step(
                    step="employment_annualized",
                    input_value=f"pay_rate={row.pay_rate}, frequency={row.pay_frequency_type_id}",
                    output_value="0",
                    source="pay frequency table",
                    notes="unrecognized frequency contributes nothing",
                )
                continue
            contribution = row.pay_rate * multiplier
            self._log_step(
                step="employment_annualized",
                input_value=f"pay_rate={row.pay_rate}, frequency={row.pay_frequency_type_id}",
                output_value=str(contribution),
                source="pay frequency table",
                notes=row.employer_name or None,
            )
            total += contribution
        return total

    def classify(self, annual_income: Decimal) -> FormKey:
        """Short form strictly below the threshold, long form otherwise."""
        form = FormKey.SHORT if annual_income < self.threshold else FormKey.LONG
        self._log_step(
            step="form_classification",
            input_value=f"annual={annual_income}, threshold={self.threshold}",
            output_value=form.value,
            source="income threshold",
        )
        return form

    async def _breakdown(
        self, rows: list[MonthlyLine]
    ) -> list[MonthlyIncomeBreakdownItem]:
        names: dict[int, Optional[str]] = {}
        if self.lookups is not None:
            for type_id in {r.type_id for r in rows if r.type_id is not None}:
                names[type_id] = await self.lookups.name(MONTHLY_INCOME_TYPES, type_id)

        items = []
        for row in rows:
            label = names.get(row.type_id) if row.type_id is not None else None
            items.append(
                MonthlyIncomeBreakdownItem(
                    type_id=row.type_id,
                    type_name=label
                    or f"Type {row.type_id if row.type_id is not None else '?'}",
                    amount=row.amount if row.amount is not None else Decimal("0"),
                    if_other=row.if_other,
                )
            )
        return items

    async def compute_summary(
        self,
        employment: list[EmploymentRow],
        monthly_income: list[MonthlyLine],
    ) -> AffidavitSummary:
        """Compute the summary for one party's employment and income rows."""
        self._audit_log = []

        from_employment = self.annual_income_from_employment(employment)
        monthly = sum_all(monthly_income)
        annual_from_monthly = monthly * 12
        self._log_step(
            step="monthly_income_annualized",
            input_value=str(monthly),
            output_value=str(annual_from_monthly),
            source="monthly income x 12",
            notes="reported only",
        )
        form = self.classify(from_employment)

        summary = AffidavitSummary(
            gross_annual_income=from_employment,
            gross_annual_income_from_employment=from_employment,
            gross_monthly_income_from_monthly_income=monthly,
            gross_annual_income_from_monthly_income=annual_from_monthly,
            threshold=self.threshold,
            form=form,
            monthly_income_breakdown=await self._breakdown(monthly_income),
            audit_log=list(self._audit_log),
        )
        logger.info(
            "affidavit_summary_computed",
            gross_annual_income=str(from_employment),
            form=form.value,
            employment_rows=len(employment),
        )
        return summary

    def get_audit_log(self) -> list[AuditEntry]:
        """Return a copy of the audit log from the last computation."""
        return list(self._audit_log)
