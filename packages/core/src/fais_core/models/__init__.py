"""Data models for fais-core.

This package provides the structures the affidavit engine reads and writes:
- Parties, cases and the authenticated principal (parties.py)
- Financial line items and their write payloads (line_items.py)
- Summaries, aggregated data, template fields and documents (affidavit.py)
"""

from fais_core.models.affidavit import (
    AffidavitData,
    AffidavitDocument,
    AffidavitSummary,
    AuditEntry,
    CaseCaption,
    FieldKind,
    FieldWrite,
    FilledForm,
    FormKey,
    FormSelection,
    MonthlyIncomeBreakdownItem,
    TemplateField,
    TemplateFieldListing,
)
from fais_core.models.line_items import (
    AssetCreate,
    AssetPatch,
    AssetRow,
    ContingentAssetCreate,
    ContingentAssetPatch,
    ContingentAssetRow,
    ContingentLiabilityCreate,
    ContingentLiabilityPatch,
    ContingentLiabilityRow,
    EmploymentCreate,
    EmploymentPatch,
    EmploymentRow,
    LiabilityCreate,
    LiabilityPatch,
    LiabilityRow,
    LineCategory,
    Money,
    MonthlyLine,
    MonthlyLineCreate,
    MonthlyLinePatch,
)
from fais_core.models.parties import (
    AffidavitQuery,
    Case,
    Party,
    Principal,
    Role,
    is_valid_entity_id,
)

__all__ = [
    # Parties
    "AffidavitQuery",
    "Case",
    "Party",
    "Principal",
    "Role",
    "is_valid_entity_id",
    # Line items
    "LineCategory",
    "Money",
    "EmploymentRow",
    "MonthlyLine",
    "AssetRow",
    "LiabilityRow",
    "ContingentAssetRow",
    "ContingentLiabilityRow",
    "EmploymentCreate",
    "EmploymentPatch",
    "MonthlyLineCreate",
    "MonthlyLinePatch",
    "AssetCreate",
    "AssetPatch",
    "LiabilityCreate",
    "LiabilityPatch",
    "ContingentAssetCreate",
    "ContingentAssetPatch",
    "ContingentLiabilityCreate",
    "ContingentLiabilityPatch",
    # Affidavit
    "AffidavitData",
    "AffidavitDocument",
    "AffidavitSummary",
    "AuditEntry",
    "CaseCaption",
    "FieldKind",
    "FieldWrite",
    "FilledForm",
    "FormKey",
    "FormSelection",
    "MonthlyIncomeBreakdownItem",
    "TemplateField",
    "TemplateFieldListing",
]
