"""Affidavit results: summary, aggregated data, filled forms and documents."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .line_items import (
    AssetRow,
    ContingentAssetRow,
    ContingentLiabilityRow,
    EmploymentRow,
    LiabilityRow,
    Money,
    MonthlyLine,
)
from .parties import Case, Party


class FormKey(str, Enum):
    """The two official affidavit variants."""

    SHORT = "short"
    LONG = "long"


class FormSelection(str, Enum):
    """Requested form: a concrete variant, or ``auto`` to use the threshold."""

    AUTO = "auto"
    SHORT = "short"
    LONG = "long"

    def resolve(self, computed: FormKey) -> FormKey:
        """Return the explicit variant, or ``computed`` for ``auto``."""
        if self is FormSelection.AUTO:
            return computed
        return FormKey(self.value)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuditEntry(_CamelModel):
    """One step of a computation, kept for court-document traceability."""

    timestamp: datetime = Field(default_factory=datetime.utcnow)
    step: str
    input_value: str
    output_value: str
    source: str
    notes: Optional[str] = None


class MonthlyIncomeBreakdownItem(_CamelModel):
    type_id: Optional[int] = None
    type_name: str
    amount: Money
    if_other: Optional[str] = None


class AffidavitSummary(_CamelModel):
    """Income figures and the form classification for one party."""

    gross_annual_income: Money
    gross_annual_income_from_employment: Money
    gross_monthly_income_from_monthly_income: Money
    gross_annual_income_from_monthly_income: Money
    threshold: Money
    form: FormKey
    monthly_income_breakdown: list[MonthlyIncomeBreakdownItem] = Field(
        default_factory=list
    )
    audit_log: list[AuditEntry] = Field(default_factory=list, exclude=True)

    def to_response(self) -> dict[str, Any]:
        """Return the JSON summary body."""
        return self.model_dump(mode="json", by_alias=True)


class AffidavitData(BaseModel):
    """Every line-item category for one party, read in one snapshot."""

    owner_id: str
    employment: list[EmploymentRow] = Field(default_factory=list)
    monthly_income: list[MonthlyLine] = Field(default_factory=list)
    monthly_deductions: list[MonthlyLine] = Field(default_factory=list)
    monthly_household_expenses: list[MonthlyLine] = Field(default_factory=list)
    assets: list[AssetRow] = Field(default_factory=list)
    liabilities: list[LiabilityRow] = Field(default_factory=list)
    contingent_assets: list[ContingentAssetRow] = Field(default_factory=list)
    contingent_liabilities: list[ContingentLiabilityRow] = Field(default_factory=list)


class CaseCaption(BaseModel):
    """Case heading values for the official form."""

    case: Case
    circuit_name: Optional[str] = None
    county_name: Optional[str] = None
    petitioner: Optional[Party] = None
    respondent: Optional[Party] = None


class FieldKind(str, Enum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    OTHER = "other"


class TemplateField(BaseModel):
    name: str
    kind: FieldKind
    on_state: Optional[str] = Field(default=None, exclude=True)


class TemplateFieldListing(_CamelModel):
    form: FormKey
    field_count: int
    fields: list[TemplateField]

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FieldWrite(BaseModel):
    """Outcome of one catalog write against the template."""

    label: str
    field_name: Optional[str] = None
    tier: Optional[str] = None
    value: str = ""
    written: bool = False


class FilledForm(BaseModel):
    """Result of a template fill before it is wrapped as a document."""

    form: FormKey
    content: bytes
    page_count: int
    flattened: bool
    writes: list[FieldWrite] = Field(default_factory=list)

    @property
    def written_fields(self) -> dict[str, str]:
        return {w.field_name: w.value for w in self.writes if w.written and w.field_name}


class AffidavitDocument(BaseModel):
    """A rendered affidavit ready to send to the caller."""

    content: bytes
    form: FormKey
    filename: str
    media_type: str = "application/pdf"

    @classmethod
    def for_form(cls, content: bytes, form: FormKey) -> "AffidavitDocument":
        return cls(
            content=content,
            form=form,
            filename=f"financial-affidavit-{form.value}.pdf",
        )
