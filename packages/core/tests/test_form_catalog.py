"""Tests for the official form field catalogs."""

from decimal import Decimal

import pytest

from fais_core.form_catalog import (
    build_assignments,
    caption_assignments,
    long_form_assignments,
    short_form_assignments,
)
from fais_core.models import (
    AffidavitData,
    Case,
    CaseCaption,
    EmploymentRow,
    FieldKind,
    FormKey,
    LineCategory,
    MonthlyLine,
    Party,
    Role,
)

from conftest import TODAY


def monthly(category, type_id, amount, if_other=None) -> MonthlyLine:
    return MonthlyLine(category=category, type_id=type_id, amount=Decimal(str(amount)), if_other=if_other)


def by_label(assignments):
    """Last assignment per label, matching the filler's overwrite order."""
    return {a.label: a for a in assignments}


@pytest.fixture
def caption() -> CaseCaption:
    return CaseCaption(
        case=Case(id="c1", case_number=" 2026-DR-1 ", division="Family"),
        circuit_name="Ninth Judicial Circuit",
        county_name=None,
        petitioner=Party(id="p", role=Role.PETITIONER, first_name="Jane", last_name="Doe"),
        respondent=None,
    )


class TestCaptionAssignments:
    """Test suite for case heading fields."""

    def test_present_values(self, caption):
        fields = by_label(caption_assignments(caption))

        assert fields["Case No"].text == "2026-DR-1"
        assert fields["Division"].text == "Family"
        assert fields["Circuit No"].text == "Ninth Judicial Circuit"
        assert fields["IN THE CIRCUIT COURT OF THE"].text == "Ninth Judicial Circuit"
        assert fields["Petitioner"].text == "Jane Doe"

    def test_blank_values_are_omitted(self, caption):
        """Missing lookups and parties leave their fields untouched."""
        fields = by_label(caption_assignments(caption))

        assert "county" not in fields
        assert "IN AND FOR" not in fields
        assert "Respondent" not in fields


class TestShortFormCatalog:
    """Test suite for the short form catalog."""

    def test_unemployed(self):
        fields = by_label(short_form_assignments(AffidavitData(owner_id="u"), "Jane Doe", TODAY))

        assert fields["unemployed check box"].checked
        assert "monthly check box" not in fields
        assert "employed by" not in fields
        assert fields["full legal name"].text == "Jane Doe"

    def test_other_frequency_checks_other_box(self):
        data = AffidavitData(
            owner_id="u",
            employment=[EmploymentRow(employer_name="Acme", pay_rate=Decimal("20"), pay_frequency_type_id=9)],
        )

        fields = by_label(short_form_assignments(data, "Jane Doe", TODAY))

        assert fields["other check box"].checked
        assert not fields["every week check box"].checked
        assert not fields["unemployed check box"].checked
        assert fields["pay rate"].text == "20.00"

    def test_stored_pay_rate_written_as_money(self):
        """A floating-point pay rate from the store is written with two decimals."""
        data = AffidavitData(
            owner_id="u",
            employment=[
                EmploymentRow.from_document(
                    {"name": "Acme", "payRate": 1000.0, "payFrequencyTypeId": 1}
                )
            ],
        )

        fields = by_label(short_form_assignments(data, "Jane Doe", TODAY))

        assert fields["pay rate"].text == "1000.00"

    def test_alimony_split(self):
        data = AffidavitData(
            owner_id="u",
            monthly_income=[
                monthly(LineCategory.MONTHLY_INCOME, 9, 300),
                monthly(LineCategory.MONTHLY_INCOME, 10, 200),
            ],
        )

        fields = by_label(short_form_assignments(data, "Jane Doe", TODAY))

        assert fields["monthly alimony actually received"].text == "500.00"
        assert fields["alimony from this case"].text == "300.00"
        assert fields["alimony From other cases"].text == "200.00"

    def test_deficit_written_as_positive(self):
        data = AffidavitData(
            owner_id="u",
            monthly_income=[monthly(LineCategory.MONTHLY_INCOME, 1, 100)],
            monthly_household_expenses=[monthly(LineCategory.MONTHLY_HOUSEHOLD_EXPENSES, 1, 300)],
        )

        fields = by_label(short_form_assignments(data, "Jane Doe", TODAY))

        assert fields["deficit"].text == "200.00"
        assert fields["surplus"].text == ""

    def test_utilities_combine_types(self):
        data = AffidavitData(
            owner_id="u",
            monthly_household_expenses=[
                monthly(LineCategory.MONTHLY_HOUSEHOLD_EXPENSES, 5, 40),
                monthly(LineCategory.MONTHLY_HOUSEHOLD_EXPENSES, 6, 10),
                monthly(LineCategory.MONTHLY_HOUSEHOLD_EXPENSES, 8, 5.5),
            ],
        )

        fields = by_label(short_form_assignments(data, "Jane Doe", TODAY))

        assert fields["utilities"].text == "55.50"
        assert "food" not in fields

    def test_signature_date(self):
        fields = by_label(short_form_assignments(AffidavitData(owner_id="u"), "Jane Doe", TODAY))

        assert fields["date"].text == "10/18/2026"
        assert fields["dated"].text == "10/18/2026"


class TestLongFormCatalog:
    """Test suite for the long form catalog."""

    def test_income_field_numbers(self):
        data = AffidavitData(
            owner_id="u",
            monthly_income=[
                monthly(LineCategory.MONTHLY_INCOME, 1, 4000),
                monthly(LineCategory.MONTHLY_INCOME, 10, 150),
            ],
        )

        fields = by_label(long_form_assignments(data, "Jane Doe", TODAY))

        assert fields["1"].text == "4000.00"
        assert fields["9b From other cases"].text == "150.00"
        assert fields["17"].text == "4150.00"
        assert fields["18"].text == "49800.00"
        assert "2" not in fields

    def test_frequency_boxes(self):
        data = AffidavitData(
            owner_id="u",
            employment=[EmploymentRow(employer_name="Acme", pay_rate=Decimal("30"), pay_frequency_type_id=9)],
        )

        fields = by_label(long_form_assignments(data, "Jane Doe", TODAY))

        assert fields["Hourly"].kind is FieldKind.CHECKBOX
        assert fields["Hourly"].checked
        assert not fields["Weekly"].checked

    def test_stored_pay_rate_written_as_money(self):
        data = AffidavitData(
            owner_id="u",
            employment=[
                EmploymentRow.from_document(
                    {"name": "Acme", "payRate": 1250.5, "payFrequencyTypeId": 2}
                )
            ],
        )

        fields = by_label(long_form_assignments(data, "Jane Doe", TODAY))

        assert fields["Pay rate"].text == "1250.50"

    def test_exact_labels_only(self):
        """Long form labels never use fallback lookups."""
        assignments = long_form_assignments(AffidavitData(owner_id="u"), "Jane Doe", TODAY)

        assert not any(a.fuzzy for a in assignments)


class TestBuildAssignments:
    """Test suite for catalog assembly."""

    def test_caption_first(self, caption):
        assignments = build_assignments(FormKey.LONG, AffidavitData(owner_id="u"), "Jane Doe", caption, TODAY)

        assert assignments[0].label == "Case No"
        assert assignments[-1].label == "I full legal name"

    def test_without_caption(self):
        assignments = build_assignments(FormKey.SHORT, AffidavitData(owner_id="u"), "Jane Doe", today=TODAY)

        assert assignments[0].label == "full legal name"
