"""Affidavit facade and line-item CRUD service.

Both services run the target resolver before touching line items and use
only the owner id it returns. They are the entry points a request layer
calls; every failure surfaces as a ``FaisError`` whose ``to_response()``
gives the status code and JSON body.

Example:
    ```python
    service = AffidavitService(directory=directory, store=store, lookups=lookups)
    summary = await service.get_summary(principal, AffidavitQuery())
    document = await service.get_official_pdf(principal, AffidavitQuery(), form="auto")
    ```
"""

import asyncio
from datetime import date
from typing import Any, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, ValidationError

from .config import FaisConfig
from .exceptions import InvalidInputError, NotFoundError
from .form_catalog import build_assignments
from .income import IncomeCalculator
from .models import (
    AffidavitDocument,
    AffidavitQuery,
    AffidavitSummary,
    AssetCreate,
    AssetPatch,
    AssetRow,
    Case,
    CaseCaption,
    ContingentAssetCreate,
    ContingentAssetPatch,
    ContingentAssetRow,
    ContingentLiabilityCreate,
    ContingentLiabilityPatch,
    ContingentLiabilityRow,
    EmploymentCreate,
    EmploymentPatch,
    EmploymentRow,
    FormKey,
    FormSelection,
    LiabilityCreate,
    LiabilityPatch,
    LiabilityRow,
    LineCategory,
    MonthlyLine,
    MonthlyLineCreate,
    MonthlyLinePatch,
    Principal,
    TemplateFieldListing,
    is_valid_entity_id,
)
from .pdf_filler import OfficialFormFiller
from .pdf_template import TemplateLoader, parse_form_key
from .report import AffidavitReportGenerator, HtmlPdfRenderer
from .resolver import AffidavitTargetResolver
from .store import (
    CIRCUITS,
    COUNTIES,
    DocumentStore,
    LineItemRepository,
    LookupSource,
    PartyDirectory,
)

logger = structlog.get_logger()


def parse_form_selection(value: Union[str, FormSelection, None]) -> FormSelection:
    """Parse the ``form`` query parameter. Missing means ``auto``."""
    if value is None or value == "":
        return FormSelection.AUTO
    try:
        return FormSelection(str(value).strip().lower())
    except ValueError:
        raise InvalidInputError(
            "Invalid form",
            field="form",
            value=value,
            constraint="Must be one of: auto, short, long",
        ) from None


def parse_category(value: Union[str, LineCategory]) -> LineCategory:
    try:
        return LineCategory(value)
    except ValueError:
        raise InvalidInputError(
            "Invalid category", field="category", value=value
        ) from None


class AffidavitService:
    """
    Summary, generic PDF and official PDF for one party's affidavit.

    Every entry point shares the target resolver and the income calculator.
    An ``auto`` form defers to the income classification; an explicit
    ``short`` or ``long`` is used as given.
    """

    def __init__(
        self,
        directory: PartyDirectory,
        store: DocumentStore,
        lookups: Optional[LookupSource] = None,
        config: Optional[FaisConfig] = None,
        renderer: Optional[HtmlPdfRenderer] = None,
    ):
        self.config = config or FaisConfig()
        self.directory = directory
        self.lookups = lookups
        self.renderer = renderer
        self.resolver = AffidavitTargetResolver(directory)
        self.repository = LineItemRepository(store)
        self.templates = TemplateLoader(self.config.templates)
        self.filler = OfficialFormFiller(
            self.config.pdf, instruction_pages=self.config.templates.instruction_pages
        )

    def _calculator(self) -> IncomeCalculator:
        return IncomeCalculator(self.lookups)

    async def get_summary(
        self, principal: Principal, query: Optional[AffidavitQuery] = None
    ) -> AffidavitSummary:
        """Income summary and form classification for the resolved target."""
        target = await self.resolver.resolve(principal, query)
        employment, income = await asyncio.gather(
            self.repository.list(LineCategory.EMPLOYMENT, target),
            self.repository.list(LineCategory.MONTHLY_INCOME, target),
        )
        return await self._calculator().compute_summary(
            [EmploymentRow.from_document(d) for d in employment],
            [MonthlyLine.from_document(d, LineCategory.MONTHLY_INCOME) for d in income],
        )

    async def get_generic_pdf(
        self,
        principal: Principal,
        query: Optional[AffidavitQuery] = None,
        form: Union[str, FormSelection, None] = None,
    ) -> AffidavitDocument:
        """Render the draft report of every category as a PDF."""
        selection = parse_form_selection(form)
        target = await self.resolver.resolve(principal, query)
        data = await self.repository.load_affidavit_data(target)
        summary = await self._calculator().compute_summary(
            data.employment, data.monthly_income
        )
        form_key = selection.resolve(summary.form)

        generator = AffidavitReportGenerator()
        if self.renderer is not None:
            html_document = generator.generate(data, summary, form_key, format="html")
            content = await self.renderer.render(html_document)
        else:
            content = generator.generate(data, summary, form_key, format="pdf")

        logger.info(
            "generic_affidavit_rendered",
            target=target,
            form=form_key.value,
            external_renderer=self.renderer is not None,
        )
        return AffidavitDocument.for_form(content, form_key)

    async def get_official_pdf(
        self,
        principal: Principal,
        query: Optional[AffidavitQuery] = None,
        form: Union[str, FormSelection, None] = None,
        today: Optional[date] = None,
    ) -> AffidavitDocument:
        """Fill the official court form for the resolved target.

        Raises:
            TemplateMissingError: The template for the chosen form is absent.
        """
        query = query or AffidavitQuery()
        selection = parse_form_selection(form)
        target = await self.resolver.resolve(principal, query)

        party = await self.directory.get_party(target)
        if party is None:
            raise NotFoundError("User not found", entity="user", entity_id=target)
        case = await self.resolver.resolve_case(principal, target, query.case_id)

        data = await self.repository.load_affidavit_data(target)
        if selection is FormSelection.AUTO:
            summary = await self._calculator().compute_summary(
                data.employment, data.monthly_income
            )
            form_key = summary.form
        else:
            form_key = FormKey(selection.value)

        caption = await self._caption(case) if case is not None else None
        template = await asyncio.to_thread(self.templates.load, form_key)
        assignments = build_assignments(
            form_key, data, party.display_name, caption=caption, today=today
        )
        filled = await asyncio.to_thread(self.filler.fill, template, assignments)

        logger.info(
            "official_affidavit_rendered",
            target=target,
            form=form_key.value,
            case_id=case.id if case else None,
            flattened=filled.flattened,
        )
        return AffidavitDocument.for_form(filled.content, form_key)

    async def _caption(self, case: Case) -> CaseCaption:
        async def lookup(table: str, type_id: Optional[int]) -> Optional[str]:
            if self.lookups is None or type_id is None:
                return None
            return await self.lookups.name(table, type_id)

        async def party(user_id: Optional[str]):
            return await self.directory.get_party(user_id) if user_id else None

        circuit, county, petitioner, respondent = await asyncio.gather(
            lookup(CIRCUITS, case.circuit_id),
            lookup(COUNTIES, case.county_id),
            party(case.petitioner_id),
            party(case.respondent_id),
        )
        return CaseCaption(
            case=case,
            circuit_name=(circuit or "").strip() or None,
            county_name=(county or "").strip() or None,
            petitioner=petitioner,
            respondent=respondent,
        )

    async def list_template_fields(self, form: Union[str, FormKey]) -> TemplateFieldListing:
        """Describe the fields a template declares."""
        form_key = parse_form_key(form)
        template = await asyncio.to_thread(self.templates.load, form_key)
        index = template.field_index()
        return TemplateFieldListing(
            form=form_key, field_count=len(index), fields=list(index.fields)
        )


# Per-category row parser and write schemas
_ROW_MODELS: dict[LineCategory, Any] = {
    LineCategory.EMPLOYMENT: EmploymentRow,
    LineCategory.ASSETS: AssetRow,
    LineCategory.LIABILITIES: LiabilityRow,
    LineCategory.CONTINGENT_ASSETS: ContingentAssetRow,
    LineCategory.CONTINGENT_LIABILITIES: ContingentLiabilityRow,
}

_CREATE_SCHEMAS: dict[LineCategory, type[BaseModel]] = {
    LineCategory.EMPLOYMENT: EmploymentCreate,
    LineCategory.ASSETS: AssetCreate,
    LineCategory.LIABILITIES: LiabilityCreate,
    LineCategory.CONTINGENT_ASSETS: ContingentAssetCreate,
    LineCategory.CONTINGENT_LIABILITIES: ContingentLiabilityCreate,
}

_PATCH_SCHEMAS: dict[LineCategory, type[BaseModel]] = {
    LineCategory.EMPLOYMENT: EmploymentPatch,
    LineCategory.ASSETS: AssetPatch,
    LineCategory.LIABILITIES: LiabilityPatch,
    LineCategory.CONTINGENT_ASSETS: ContingentAssetPatch,
    LineCategory.CONTINGENT_LIABILITIES: ContingentLiabilityPatch,
}


def _validate(schema: type[BaseModel], payload: Mapping[str, Any]) -> dict[str, Any]:
    try:
        return schema.model_validate(payload).to_document()
    except ValidationError as exc:
        raise InvalidInputError(
            "Invalid payload",
            field="body",
            details={"errors": exc.errors(
                include_url=False, include_input=False, include_context=False
            )},
        ) from exc


class LineItemService:
    """List, create, patch and delete line items for the resolved owner."""

    def __init__(self, directory: PartyDirectory, store: DocumentStore):
        self.resolver = AffidavitTargetResolver(directory)
        self.repository = LineItemRepository(store)

    async def list(
        self,
        principal: Principal,
        category: Union[str, LineCategory],
        query: Optional[AffidavitQuery] = None,
    ) -> list[BaseModel]:
        category = parse_category(category)
        owner = await self.resolver.resolve(principal, query)
        docs = await self.repository.list(category, owner)
        if category.is_monthly_line:
            return [MonthlyLine.from_document(d, category) for d in docs]
        return [_ROW_MODELS[category].from_document(d) for d in docs]

    async def create(
        self,
        principal: Principal,
        category: Union[str, LineCategory],
        payload: Mapping[str, Any],
        query: Optional[AffidavitQuery] = None,
    ) -> str:
        """Validate and insert a row. Returns the new row id."""
        category = parse_category(category)
        owner = await self.resolver.resolve_owner(principal, query)
        schema = MonthlyLineCreate if category.is_monthly_line else _CREATE_SCHEMAS[category]
        document = _validate(schema, payload)
        return await self.repository.insert(category, owner, document)

    async def patch(
        self,
        principal: Principal,
        category: Union[str, LineCategory],
        row_id: str,
        payload: Mapping[str, Any],
        query: Optional[AffidavitQuery] = None,
    ) -> None:
        category = parse_category(category)
        owner = await self.resolver.resolve_owner(principal, query)
        if not is_valid_entity_id(row_id):
            raise InvalidInputError("Invalid id", field="id")
        schema = MonthlyLinePatch if category.is_monthly_line else _PATCH_SCHEMAS[category]
        changes = _validate(schema, payload)
        if not await self.repository.patch(category, owner, row_id, changes):
            raise NotFoundError(entity=category.value, entity_id=row_id)

    async def delete(
        self,
        principal: Principal,
        category: Union[str, LineCategory],
        row_id: str,
        query: Optional[AffidavitQuery] = None,
    ) -> None:
        category = parse_category(category)
        owner = await self.resolver.resolve_owner(principal, query)
        if not is_valid_entity_id(row_id):
            raise InvalidInputError("Invalid id", field="id")
        if not await self.repository.delete(category, owner, row_id):
            raise NotFoundError(entity=category.value, entity_id=row_id)
