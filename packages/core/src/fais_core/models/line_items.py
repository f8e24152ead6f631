"""Financial line-item models.

Each affidavit category is a per-owner collection of typed rows. Rows are
read leniently from stored documents (``from_document``) so malformed legacy
values become ``None`` instead of failing the whole read, and written through
strict create/patch payload schemas.

The monthly income, deduction and expense collections share one shape and
are modelled by a single ``MonthlyLine`` record tagged with its category.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..coerce import as_decimal, as_type_id, document_id, optional_text

Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
"""Currency amount held as Decimal, serialized as a JSON number."""


class LineCategory(str, Enum):
    """Line-item collections, valued by their storage collection name."""

    EMPLOYMENT = "employment"
    MONTHLY_INCOME = "monthlyincome"
    MONTHLY_DEDUCTIONS = "monthlydeductions"
    MONTHLY_HOUSEHOLD_EXPENSES = "monthlyhouseholdexpense"
    MONTHLY_AUTOMOBILE_EXPENSES = "monthlyautomobileexpense"
    MONTHLY_CHILDREN_EXPENSES = "monthlychildrenexpense"
    MONTHLY_CHILDREN_OTHER_EXPENSES = "monthlychildrenotherrelationshipexpense"
    MONTHLY_CREDITOR_EXPENSES = "monthlycreditorexpense"
    MONTHLY_INSURANCE_EXPENSES = "monthlyinsuranceexpense"
    MONTHLY_OTHER_EXPENSES = "monthlyotherexpense"
    ASSETS = "assets"
    LIABILITIES = "liabilities"
    CONTINGENT_ASSETS = "contingentasset"
    CONTINGENT_LIABILITIES = "contingentliability"

    @property
    def is_monthly_line(self) -> bool:
        return self.value.startswith("monthly")


# =============================================================================
# STORED ROWS
# =============================================================================

class _StoredRow(BaseModel):
    """Common identity of a stored row."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    owner_id: str = Field(default="", alias="userId")


class EmploymentRow(_StoredRow):
    """One job held by the party."""

    employer_name: str = Field(default="", alias="name")
    occupation: Optional[str] = None
    pay_rate: Optional[Money] = None
    pay_frequency_type_id: Optional[int] = None
    pay_frequency_if_other: Optional[str] = None
    retired: bool = False

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "EmploymentRow":
        return cls(
            id=document_id(doc),
            owner_id=str(doc.get("userId") or ""),
            employer_name=str(doc.get("name") or "").strip(),
            occupation=optional_text(doc.get("occupation")),
            pay_rate=as_decimal(doc.get("payRate")),
            pay_frequency_type_id=as_type_id(doc.get("payFrequencyTypeId")),
            pay_frequency_if_other=optional_text(doc.get("payFrequencyIfOther")),
            retired=bool(doc.get("retired") or False),
        )


class MonthlyLine(_StoredRow):
    """A typed monthly amount: income, deduction or expense."""

    category: LineCategory = LineCategory.MONTHLY_INCOME
    type_id: Optional[int] = None
    amount: Optional[Money] = None
    if_other: Optional[str] = None

    @classmethod
    def from_document(
        cls, doc: Mapping[str, Any], category: LineCategory
    ) -> "MonthlyLine":
        return cls(
            id=document_id(doc),
            owner_id=str(doc.get("userId") or ""),
            category=category,
            type_id=as_type_id(doc.get("typeId")),
            amount=as_decimal(doc.get("amount")),
            if_other=optional_text(doc.get("ifOther")),
        )


class AssetRow(_StoredRow):
    """A marital or non-marital asset."""

    type_id: Optional[int] = Field(default=None, alias="assetsTypeId")
    description: str = ""
    market_value: Optional[Money] = None
    non_marital_type_id: Optional[int] = None
    judge_award: bool = False

    @property
    def amount(self) -> Optional[Decimal]:
        return self.market_value

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "AssetRow":
        return cls(
            id=document_id(doc),
            owner_id=str(doc.get("userId") or ""),
            type_id=as_type_id(doc.get("assetsTypeId")),
            description=str(doc.get("description") or "").strip(),
            market_value=as_decimal(doc.get("marketValue")),
            non_marital_type_id=as_type_id(doc.get("nonMaritalTypeId")),
            judge_award=bool(doc.get("judgeAward") or False),
        )


class LiabilityRow(_StoredRow):
    """A marital or non-marital debt."""

    type_id: Optional[int] = Field(default=None, alias="liabilitiesTypeId")
    description: str = ""
    amount_owed: Optional[Money] = None
    non_marital_type_id: Optional[int] = None
    user_owes: bool = False

    @property
    def amount(self) -> Optional[Decimal]:
        return self.amount_owed

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "LiabilityRow":
        return cls(
            id=document_id(doc),
            owner_id=str(doc.get("userId") or ""),
            type_id=as_type_id(doc.get("liabilitiesTypeId")),
            description=str(doc.get("description") or "").strip(),
            amount_owed=as_decimal(doc.get("amountOwed")),
            non_marital_type_id=as_type_id(doc.get("nonMaritalTypeId")),
            user_owes=bool(doc.get("userOwes") or False),
        )


class ContingentAssetRow(_StoredRow):
    """An asset the party may possibly receive."""

    description: str = ""
    possible_value: Optional[Money] = None
    non_marital_type_id: Optional[int] = None
    judge_award: bool = False

    @property
    def amount(self) -> Optional[Decimal]:
        return self.possible_value

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ContingentAssetRow":
        return cls(
            id=document_id(doc),
            owner_id=str(doc.get("userId") or ""),
            description=str(doc.get("description") or "").strip(),
            possible_value=as_decimal(doc.get("possibleValue")),
            non_marital_type_id=as_type_id(doc.get("nonMaritalTypeId")),
            judge_award=bool(doc.get("judgeAward") or False),
        )


class ContingentLiabilityRow(_StoredRow):
    """A debt the party may possibly owe."""

    description: str = ""
    possible_amount_owed: Optional[Money] = None
    non_marital_type_id: Optional[int] = None
    user_owes: bool = False

    @property
    def amount(self) -> Optional[Decimal]:
        return self.possible_amount_owed

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "ContingentLiabilityRow":
        return cls(
            id=document_id(doc),
            owner_id=str(doc.get("userId") or ""),
            description=str(doc.get("description") or "").strip(),
            possible_amount_owed=as_decimal(doc.get("possibleAmountOwed")),
            non_marital_type_id=as_type_id(doc.get("nonMaritalTypeId")),
            user_owes=bool(doc.get("userOwes") or False),
        )


# =============================================================================
# WRITE PAYLOADS
# =============================================================================

TypeId = Annotated[int, Field(ge=1, le=999)]
NonNegativeMoney = Annotated[
    Decimal,
    Field(ge=0, allow_inf_nan=False),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class _Payload(BaseModel):
    """Base for create/patch payloads.

    ``to_document`` renders the fields that were actually supplied, keyed by
    their storage names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nullable_on_write: ClassVar[frozenset[str]] = frozenset()

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        for name in self.nullable_on_write:
            alias = type(self).model_fields[name].alias or name
            doc.setdefault(alias, None)
        return doc


class _PatchPayload(_Payload):
    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("Invalid payload")
        return self

    def to_document(self) -> dict[str, Any]:
        # Patch never fills absent keys.
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class EmploymentCreate(_Payload):
    name: str = Field(min_length=1, max_length=200)
    occupation: Optional[str] = None
    pay_rate: NonNegativeMoney
    pay_frequency_type_id: TypeId
    pay_frequency_if_other: Optional[str] = None
    retired: bool = False

    def to_document(self) -> dict[str, Any]:
        doc = super().to_document()
        doc.setdefault("retired", False)
        return doc


class EmploymentPatch(_PatchPayload):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    occupation: Optional[str] = None
    pay_rate: Optional[NonNegativeMoney] = None
    pay_frequency_type_id: Optional[TypeId] = None
    pay_frequency_if_other: Optional[str] = None
    retired: Optional[bool] = None


class MonthlyLineCreate(_Payload):
    nullable_on_write: ClassVar[frozenset[str]] = frozenset({"if_other"})

    type_id: TypeId
    amount: NonNegativeMoney
    if_other: Optional[str] = None


class MonthlyLinePatch(_PatchPayload):
    type_id: Optional[TypeId] = None
    amount: Optional[NonNegativeMoney] = None
    if_other: Optional[str] = None


class AssetCreate(_Payload):
    nullable_on_write: ClassVar[frozenset[str]] = frozenset({"non_marital_type_id"})

    assets_type_id: TypeId
    description: str = Field(min_length=1, max_length=500)
    market_value: NonNegativeMoney
    non_marital_type_id: Optional[TypeId] = None
    judge_award: bool = False


class AssetPatch(_PatchPayload):
    assets_type_id: Optional[TypeId] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    market_value: Optional[NonNegativeMoney] = None
    non_marital_type_id: Optional[TypeId] = None
    judge_award: Optional[bool] = None


class LiabilityCreate(_Payload):
    nullable_on_write: ClassVar[frozenset[str]] = frozenset({"non_marital_type_id"})

    liabilities_type_id: TypeId
    description: str = Field(min_length=1, max_length=500)
    amount_owed: NonNegativeMoney
    non_marital_type_id: Optional[TypeId] = None
    user_owes: bool = False


class LiabilityPatch(_PatchPayload):
    liabilities_type_id: Optional[TypeId] = None
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    amount_owed: Optional[NonNegativeMoney] = None
    non_marital_type_id: Optional[TypeId] = None
    user_owes: Optional[bool] = None


class ContingentAssetCreate(_Payload):
    nullable_on_write: ClassVar[frozenset[str]] = frozenset({"non_marital_type_id"})

    description: str = Field(min_length=1, max_length=500)
    possible_value: NonNegativeMoney
    non_marital_type_id: Optional[TypeId] = None
    judge_award: bool = False


class ContingentAssetPatch(_PatchPayload):
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    possible_value: Optional[NonNegativeMoney] = None
    non_marital_type_id: Optional[TypeId] = None
    judge_award: Optional[bool] = None


class ContingentLiabilityCreate(_Payload):
    nullable_on_write: ClassVar[frozenset[str]] = frozenset({"non_marital_type_id"})

    description: str = Field(min_length=1, max_length=500)
    possible_amount_owed: NonNegativeMoney
    non_marital_type_id: Optional[TypeId] = None
    user_owes: bool = False


class ContingentLiabilityPatch(_PatchPayload):
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    possible_amount_owed: Optional[NonNegativeMoney] = None
    non_marital_type_id: Optional[TypeId] = None
    user_owes: Optional[bool] = None
