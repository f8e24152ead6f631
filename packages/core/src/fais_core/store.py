"""Collaborator contracts and the scoped line-item repository.

The engine never owns persistence. Documents, users, cases and lookup
tables live in external services described here as async
``typing.Protocol`` contracts; any object with matching methods is
compatible. In-memory implementations are provided for tests, examples
and local runs.

Example:
    ```python
    store = InMemoryDocumentStore()
    repo = LineItemRepository(store)
    row_id = await repo.insert(LineCategory.MONTHLY_INCOME, "u1", {"typeId": 1, "amount": 500})
    rows = await repo.list(LineCategory.MONTHLY_INCOME, "u1")
    ```
"""

from __future__ import annotations

import asyncio
import copy
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

import structlog

from .exceptions import UnexpectedError
from .models import (
    AffidavitData,
    AssetRow,
    Case,
    ContingentAssetRow,
    ContingentLiabilityRow,
    EmploymentRow,
    LiabilityRow,
    LineCategory,
    MonthlyLine,
    Party,
)

logger = structlog.get_logger()

Document = dict[str, Any]


# =============================================================================
# PROTOCOLS
# =============================================================================

@runtime_checkable
class DocumentStore(Protocol):
    """A collection-oriented document store.

    Filters are plain equality matches on top-level keys.
    """

    async def find(self, collection: str, query: Mapping[str, Any]) -> list[Document]:
        ...

    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> str:
        """Insert a document and return its new id."""
        ...

    async def update_one(
        self,
        collection: str,
        query: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> int:
        """Apply ``changes`` to the first match and return the matched count."""
        ...

    async def delete_one(self, collection: str, query: Mapping[str, Any]) -> int:
        """Delete the first match and return the deleted count."""
        ...


@runtime_checkable
class PartyDirectory(Protocol):
    """Read access to users and cases."""

    async def get_party(self, user_id: str) -> Optional[Party]:
        ...

    async def get_case(self, case_id: str) -> Optional[Case]:
        ...

    async def latest_case_for(self, user_id: str) -> Optional[Case]:
        """Return the most recently created case that includes ``user_id``."""
        ...


@runtime_checkable
class LookupSource(Protocol):
    """Numeric id to display-name lookup tables.

    A miss returns None and is never an error.
    """

    async def name(self, table: str, type_id: int) -> Optional[str]:
        ...


# Lookup table names
MONTHLY_INCOME_TYPES = "lookup_monthly_income_types"
CIRCUITS = "lookup_circuits"
COUNTIES = "lookup_counties"


# =============================================================================
# IN-MEMORY IMPLEMENTATIONS
# =============================================================================

class InMemoryDocumentStore:
    """Dictionary-backed ``DocumentStore``."""

    def __init__(self, collections: Optional[Mapping[str, list[Document]]] = None):
        self._collections: dict[str, list[Document]] = {
            name: [dict(doc) for doc in docs]
            for name, docs in (collections or {}).items()
        }

    @staticmethod
    def _matches(doc: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    async def find(self, collection: str, query: Mapping[str, Any]) -> list[Document]:
        docs = self._collections.get(collection, [])
        return [copy.deepcopy(doc) for doc in docs if self._matches(doc, query)]

    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> str:
        doc = dict(document)
        doc.setdefault("_id", uuid.uuid4().hex)
        self._collections.setdefault(collection, []).append(doc)
        return str(doc["_id"])

    async def update_one(
        self,
        collection: str,
        query: Mapping[str, Any],
        changes: Mapping[str, Any],
    ) -> int:
        for doc in self._collections.get(collection, []):
            if self._matches(doc, query):
                doc.update(changes)
                return 1
        return 0

    async def delete_one(self, collection: str, query: Mapping[str, Any]) -> int:
        docs = self._collections.get(collection, [])
        for index, doc in enumerate(docs):
            if self._matches(doc, query):
                del docs[index]
                return 1
        return 0


class InMemoryPartyDirectory:
    """``PartyDirectory`` over fixed lists of parties and cases."""

    def __init__(
        self,
        parties: Optional[list[Party]] = None,
        cases: Optional[list[Case]] = None,
    ):
        self._parties = {p.id: p for p in parties or []}
        self._cases = {c.id: c for c in cases or []}

    async def get_party(self, user_id: str) -> Optional[Party]:
        return self._parties.get(user_id)

    async def get_case(self, case_id: str) -> Optional[Case]:
        return self._cases.get(case_id)

    async def latest_case_for(self, user_id: str) -> Optional[Case]:
        cases = [c for c in self._cases.values() if c.includes(user_id)]
        if not cases:
            return None
        return max(cases, key=lambda c: c.created_at)


class InMemoryLookups:
    """``LookupSource`` over ``{table: {id: name}}``."""

    def __init__(self, tables: Optional[Mapping[str, Mapping[int, str]]] = None):
        self._tables = {name: dict(rows) for name, rows in (tables or {}).items()}

    async def name(self, table: str, type_id: int) -> Optional[str]:
        return self._tables.get(table, {}).get(type_id)


# =============================================================================
# REPOSITORY
# =============================================================================

class LineItemRepository:
    """Owner-scoped access to the line-item collections.

    ``list`` degrades to an empty result when the store fails so that a
    transiently unavailable category leaves blanks on the affidavit rather
    than failing it. Mutations raise.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list(self, category: LineCategory, owner_id: str) -> list[Document]:
        try:
            return await self.store.find(category.value, {"userId": owner_id})
        except Exception as exc:
            logger.warning(
                "line_item_list_failed",
                category=category.value,
                owner_id=owner_id,
                error=str(exc),
            )
            return []

    async def insert(
        self, category: LineCategory, owner_id: str, document: Mapping[str, Any]
    ) -> str:
        now = datetime.utcnow()
        doc = {**document, "userId": owner_id, "createdAt": now, "updatedAt": now}
        try:
            row_id = await self.store.insert_one(category.value, doc)
        except Exception as exc:
            logger.error("line_item_insert_failed", category=category.value, error=str(exc))
            raise UnexpectedError("Failed to save", details={"category": category.value}) from exc
        logger.info("line_item_created", category=category.value, row_id=row_id)
        return row_id

    async def patch(
        self,
        category: LineCategory,
        owner_id: str,
        row_id: str,
        changes: Mapping[str, Any],
    ) -> bool:
        """Apply ``changes`` to the owner's row. Returns False when no row matched."""
        update = {**changes, "updatedAt": datetime.utcnow()}
        # Ownership is never reassigned through a patch.
        update.pop("userId", None)
        try:
            matched = await self.store.update_one(
                category.value, {"_id": row_id, "userId": owner_id}, update
            )
        except Exception as exc:
            logger.error("line_item_patch_failed", category=category.value, error=str(exc))
            raise UnexpectedError("Failed to update", details={"category": category.value}) from exc
        return matched > 0

    async def delete(self, category: LineCategory, owner_id: str, row_id: str) -> bool:
        try:
            deleted = await self.store.delete_one(
                category.value, {"_id": row_id, "userId": owner_id}
            )
        except Exception as exc:
            logger.error("line_item_delete_failed", category=category.value, error=str(exc))
            raise UnexpectedError("Failed to delete", details={"category": category.value}) from exc
        return deleted > 0

    async def load_affidavit_data(self, owner_id: str) -> AffidavitData:
        """Read every affidavit category for ``owner_id`` concurrently."""
        (
            employment,
            income,
            deductions,
            household,
            assets,
            liabilities,
            contingent_assets,
            contingent_liabilities,
        ) = await asyncio.gather(
            self.list(LineCategory.EMPLOYMENT, owner_id),
            self.list(LineCategory.MONTHLY_INCOME, owner_id),
            self.list(LineCategory.MONTHLY_DEDUCTIONS, owner_id),
            self.list(LineCategory.MONTHLY_HOUSEHOLD_EXPENSES, owner_id),
            self.list(LineCategory.ASSETS, owner_id),
            self.list(LineCategory.LIABILITIES, owner_id),
            self.list(LineCategory.CONTINGENT_ASSETS, owner_id),
            self.list(LineCategory.CONTINGENT_LIABILITIES, owner_id),
        )
        return AffidavitData(
            owner_id=owner_id,
            employment=[EmploymentRow.from_document(d) for d in employment],
            monthly_income=[
                MonthlyLine.from_document(d, LineCategory.MONTHLY_INCOME) for d in income
            ],
            monthly_deductions=[
                MonthlyLine.from_document(d, LineCategory.MONTHLY_DEDUCTIONS)
                for d in deductions
            ],
            monthly_household_expenses=[
                MonthlyLine.from_document(d, LineCategory.MONTHLY_HOUSEHOLD_EXPENSES)
                for d in household
            ],
            assets=[AssetRow.from_document(d) for d in assets],
            liabilities=[LiabilityRow.from_document(d) for d in liabilities],
            contingent_assets=[
                ContingentAssetRow.from_document(d) for d in contingent_assets
            ],
            contingent_liabilities=[
                ContingentLiabilityRow.from_document(d) for d in contingent_liabilities
            ],
        )
