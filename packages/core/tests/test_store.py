"""Tests for the in-memory collaborators and the line-item repository."""

from datetime import datetime
from decimal import Decimal

import pytest

from fais_core.exceptions import UnexpectedError
from fais_core.models import LineCategory
from fais_core.store import (
    DocumentStore,
    InMemoryDocumentStore,
    InMemoryPartyDirectory,
    LineItemRepository,
    PartyDirectory,
)


class FailingStore(InMemoryDocumentStore):
    """Store whose every call raises."""

    async def find(self, collection, query):
        raise ConnectionError("store unavailable")

    async def insert_one(self, collection, document):
        raise ConnectionError("store unavailable")


class TestInMemoryCollaborators:
    """Test suite for the in-memory protocol implementations."""

    def test_protocol_conformance(self, directory):
        assert isinstance(InMemoryDocumentStore(), DocumentStore)
        assert isinstance(directory, PartyDirectory)

    @pytest.mark.asyncio
    async def test_find_returns_copies(self):
        store = InMemoryDocumentStore({"assets": [{"_id": "a1", "userId": "u1"}]})

        found = await store.find("assets", {"userId": "u1"})
        found[0]["userId"] = "hijacked"

        assert await store.find("assets", {"userId": "u1"}) == [{"_id": "a1", "userId": "u1"}]

    @pytest.mark.asyncio
    async def test_latest_case(self, directory):
        case = await directory.latest_case_for("pet1")

        assert case.id == "case1"
        assert await directory.latest_case_for("nobody") is None

    @pytest.mark.asyncio
    async def test_latest_case_prefers_newest(self, parties, cases):
        newer = cases[0].model_copy(update={"id": "case3", "created_at": datetime(2026, 9, 1)})
        directory = InMemoryPartyDirectory(parties=parties, cases=[*cases, newer])

        assert (await directory.latest_case_for("pet1")).id == "case3"


class TestLineItemRepository:
    """Test suite for owner-scoped line-item access."""

    @pytest.mark.asyncio
    async def test_list_scoped_to_owner(self, short_form_documents):
        repo = LineItemRepository(InMemoryDocumentStore(short_form_documents))

        rows = await repo.list(LineCategory.MONTHLY_INCOME, "pet1")

        assert {row["_id"] for row in rows} == {"i1", "i2", "i3"}

    @pytest.mark.asyncio
    async def test_list_failure_degrades_to_empty(self):
        """A failing read leaves the category empty instead of raising."""
        repo = LineItemRepository(FailingStore())

        assert await repo.list(LineCategory.ASSETS, "pet1") == []

    @pytest.mark.asyncio
    async def test_insert_stamps_owner(self):
        store = InMemoryDocumentStore()
        repo = LineItemRepository(store)

        row_id = await repo.insert(LineCategory.ASSETS, "pet1", {"description": "Boat"})

        (doc,) = await store.find("assets", {"_id": row_id})
        assert doc["userId"] == "pet1"
        assert doc["createdAt"] == doc["updatedAt"]

    @pytest.mark.asyncio
    async def test_insert_failure(self):
        repo = LineItemRepository(FailingStore())

        with pytest.raises(UnexpectedError, match="Failed to save"):
            await repo.insert(LineCategory.ASSETS, "pet1", {"description": "Boat"})

    @pytest.mark.asyncio
    async def test_patch_scoped_to_owner(self, short_form_documents):
        store = InMemoryDocumentStore(short_form_documents)
        repo = LineItemRepository(store)

        assert not await repo.patch(LineCategory.MONTHLY_INCOME, "pet1", "i4", {"amount": 1})
        assert await repo.patch(
            LineCategory.MONTHLY_INCOME, "pet1", "i1", {"amount": 250, "userId": "pet2"}
        )

        (doc,) = await store.find("monthlyincome", {"_id": "i1"})
        assert doc["amount"] == 250
        assert doc["userId"] == "pet1"

    @pytest.mark.asyncio
    async def test_delete_scoped_to_owner(self, short_form_documents):
        repo = LineItemRepository(InMemoryDocumentStore(short_form_documents))

        assert not await repo.delete(LineCategory.MONTHLY_INCOME, "pet1", "i4")
        assert await repo.delete(LineCategory.MONTHLY_INCOME, "pet1", "i1")
        assert not await repo.delete(LineCategory.MONTHLY_INCOME, "pet1", "i1")

    @pytest.mark.asyncio
    async def test_load_affidavit_data(self, long_form_documents):
        repo = LineItemRepository(InMemoryDocumentStore(long_form_documents))

        data = await repo.load_affidavit_data("pet1")

        assert data.owner_id == "pet1"
        assert len(data.employment) == 1
        assert data.employment[0].pay_rate == Decimal("1000")
        assert len(data.monthly_income) == 3
        assert all(
            row.category is LineCategory.MONTHLY_DEDUCTIONS for row in data.monthly_deductions
        )
        assert [a.description for a in data.assets] == ["House", "Boat", "Art"]
        assert data.liabilities[0].amount == Decimal("700")
        assert data.contingent_assets == []
