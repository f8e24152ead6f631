"""Tests for writing catalog assignments into templates."""

from io import BytesIO
from pathlib import Path

import pytest
from pypdf import PdfReader, PdfWriter

from fais_core.config import PdfConfig
from fais_core.form_catalog import FieldAssignment, build_assignments
from fais_core.models import FieldKind, FormKey
from fais_core.pdf_filler import OfficialFormFiller
from fais_core.pdf_template import TemplateLoader
from fais_core.store import InMemoryDocumentStore, LineItemRepository

from conftest import TODAY


@pytest.fixture
def loader(template_dir: Path) -> TemplateLoader:
    return TemplateLoader.from_directory(template_dir)


@pytest.fixture
def filler() -> OfficialFormFiller:
    return OfficialFormFiller(PdfConfig(flatten=False))


def text_values(content: bytes) -> dict:
    return PdfReader(BytesIO(content)).get_form_text_fields()


def field_value(content: bytes, name: str):
    return PdfReader(BytesIO(content)).get_fields()[name].get("/V")


class TestOfficialFormFiller:
    """Test suite for OfficialFormFiller."""

    def test_strips_instruction_pages(self, loader, filler):
        filled = filler.fill(loader.load(FormKey.SHORT), [])

        assert filled.page_count == 1
        assert len(PdfReader(BytesIO(filled.content)).pages) == 1
        assert not filled.flattened

    def test_text_and_checkbox(self, loader, filler):
        assignments = [
            FieldAssignment(label="Surplus", kind=FieldKind.TEXT, text="125.00"),
            FieldAssignment(label="monthly check box", kind=FieldKind.CHECKBOX, checked=True),
            FieldAssignment(label="unemployed check box", kind=FieldKind.CHECKBOX, checked=False),
        ]

        filled = filler.fill(loader.load(FormKey.SHORT), assignments)

        assert text_values(filled.content)["Surplus"] == "125.00"
        assert field_value(filled.content, "monthly check box") == "/Yes"
        assert field_value(filled.content, "unemployed check box") == "/Off"
        assert filled.written_fields == {
            "Surplus": "125.00",
            "monthly check box": "/Yes",
            "unemployed check box": "/Off",
        }

    def test_unresolved_label_skipped(self, loader, filler):
        filled = filler.fill(
            loader.load(FormKey.SHORT),
            [FieldAssignment(label="no such field", kind=FieldKind.TEXT, text="x", fuzzy=True)],
        )

        (write,) = filled.writes
        assert not write.written
        assert write.field_name is None

    def test_kind_mismatch_skipped(self, loader, filler):
        """Text aimed at a checkbox is skipped instead of corrupting it."""
        filled = filler.fill(
            loader.load(FormKey.SHORT),
            [FieldAssignment(label="monthly check box", kind=FieldKind.TEXT, text="yes")],
        )

        (write,) = filled.writes
        assert write.field_name == "monthly check box"
        assert not write.written

    def test_fallback_tier_recorded(self, loader, filler):
        filled = filler.fill(
            loader.load(FormKey.SHORT),
            [FieldAssignment(label="mortgage or rent", kind=FieldKind.TEXT, text="400.00", fuzzy=True)],
        )

        assert filled.writes[0].tier == "substring"
        assert text_values(filled.content)["mortgage or rent payments"] == "400.00"

    def test_flatten_bakes_values_into_page(self, loader, filler):
        filled = filler.fill(
            loader.load(FormKey.SHORT),
            [
                FieldAssignment(label="Surplus", kind=FieldKind.TEXT, text="125.00"),
                FieldAssignment(label="monthly check box", kind=FieldKind.CHECKBOX, checked=True),
            ],
            flatten=True,
        )

        assert filled.flattened is True
        reader = PdfReader(BytesIO(filled.content))
        assert len(reader.pages) == 1
        page = reader.pages[0]
        assert "125.00" in page.extract_text()
        annotations = page.get("/Annots") or []
        assert not [a for a in annotations if a.get_object().get("/Subtype") == "/Widget"]

    def test_flatten_failure_returns_filled_form(self, loader, filler, monkeypatch):
        def broken_remove_annotations(self, subtypes=None):
            raise RuntimeError("cannot remove annotations")

        monkeypatch.setattr(PdfWriter, "remove_annotations", broken_remove_annotations)

        filled = filler.fill(
            loader.load(FormKey.SHORT),
            [FieldAssignment(label="Surplus", kind=FieldKind.TEXT, text="125.00")],
            flatten=True,
        )

        assert filled.flattened is False
        assert text_values(filled.content)["Surplus"] == "125.00"

    def test_flatten_follows_config(self, loader):
        filled = OfficialFormFiller(PdfConfig()).fill(
            loader.load(FormKey.SHORT),
            [FieldAssignment(label="Surplus", kind=FieldKind.TEXT, text="125.00")],
        )

        assert filled.flattened is True


class TestCatalogFill:
    """End-to-end catalog writes against the fixture templates."""

    @pytest.mark.asyncio
    async def test_short_form(self, loader, filler, short_form_documents):
        data = await LineItemRepository(
            InMemoryDocumentStore(short_form_documents)
        ).load_affidavit_data("pet1")

        filled = filler.fill(
            loader.load(FormKey.SHORT),
            build_assignments(FormKey.SHORT, data, "Jane Doe", today=TODAY),
        )
        values = text_values(filled.content)

        assert values["full legal name"] == "Jane Doe"
        assert values["employed by"] == "Acme Corp"
        assert values["occupation"] == "Clerk"
        assert values["pay rate"] == "800.00"
        assert values["monthly gross salary or wages"] == "500.00"
        assert values["Any other income of a recurring nature"] == "100.00"
        assert values["Other income of a recurring nature source"] == "gift"
        assert values["Total Present Monthly Gross Income"] == "600.00"
        assert values["Monthly federal, state, and local income tax"] == "50.00"
        assert values["Total Present Monthly Net Income"] == "550.00"
        assert values["mortgage or rent payments"] == "400.00"
        assert values["other 2"] == "pet care"
        assert values["other amount 2"] == "25.00"
        assert values["Total monthly expenses 1"] == "425.00"
        assert values["Surplus"] == "125.00"
        assert values["Date"] == "10/18/2026"
        assert field_value(filled.content, "monthly check box") == "/Yes"
        assert field_value(filled.content, "every week check box") == "/Off"

    @pytest.mark.asyncio
    async def test_long_form(self, loader, filler, long_form_documents):
        data = await LineItemRepository(
            InMemoryDocumentStore(long_form_documents)
        ).load_affidavit_data("pet1")

        filled = filler.fill(
            loader.load(FormKey.LONG),
            build_assignments(FormKey.LONG, data, "Jane Doe", today=TODAY),
        )
        values = text_values(filled.content)

        assert values["I full legal name"] == "Jane Doe"
        assert values["1"] == "4000.00"
        assert values["9a From this case"] == "300.00"
        assert values["16"] == "50.00"
        assert values["Any other income of a recurring nature identify source"] == "royalty"
        assert values["17"] == "4350.00"
        assert values["18"] == "52200.00"
        assert values["19"] == "800.00"
        assert values["25b From other cases"] == "100.00"
        assert values["27"] == "900.00"
        assert values["1_2"] == "1500.00"
        assert values["20_2"] == "60.00"
        assert values["Other assetsRow1"] == "Boat — 5000.00"
        assert values["Other assetsRow2"] == "Art — 1200.50"
        assert values["Other liabilitiesRow1"] == "Loan from friend — 700.00"
        assert field_value(filled.content, "Weekly") == "/Yes"
        assert field_value(filled.content, "Hourly") == "/Off"
