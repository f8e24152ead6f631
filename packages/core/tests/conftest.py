"""Shared fixtures: parties, cases, in-memory collaborators and templates."""

from datetime import date, datetime
from io import BytesIO
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from fais_core.config import FaisConfig, PdfConfig, TemplateConfig
from fais_core.models import Case, Party, Principal, Role
from fais_core.store import (
    CIRCUITS,
    COUNTIES,
    MONTHLY_INCOME_TYPES,
    InMemoryDocumentStore,
    InMemoryLookups,
    InMemoryPartyDirectory,
)

TODAY = date(2026, 10, 18)

TEXT = "text"
CHECKBOX = "checkbox"

SHORT_FORM_FIELDS = [
    ("Case No", TEXT),
    ("Division", TEXT),
    ("Circuit No", TEXT),
    ("county", TEXT),
    ("Petitioner", TEXT),
    ("Respondent", TEXT),
    ("full legal name", TEXT),
    ("occupation", TEXT),
    ("employed by", TEXT),
    ("pay rate", TEXT),
    ("every week check box", CHECKBOX),
    ("every other week check box", CHECKBOX),
    ("twice a month check box", CHECKBOX),
    ("monthly check box", CHECKBOX),
    ("other check box", CHECKBOX),
    ("unemployed check box", CHECKBOX),
    ("monthly gross salary or wages", TEXT),
    ("Monthly bonuses, commissions, allowances, overtime, tips 2", TEXT),
    ("Monthly alimony actually received 9", TEXT),
    ("Any other income of a recurring nature", TEXT),
    ("Other income of a recurring nature source", TEXT),
    ("Total Present Monthly Gross Income", TEXT),
    ("Monthly federal, state, and local income tax", TEXT),
    ("Total Present Monthly Net Income", TEXT),
    ("mortgage or rent payments", TEXT),
    ("utilities", TEXT),
    ("food", TEXT),
    ("other 2", TEXT),
    ("other amount 2", TEXT),
    ("Total monthly expenses 1", TEXT),
    ("Surplus", TEXT),
    ("Deficit", TEXT),
    ("Date", TEXT),
]

LONG_FORM_FIELDS = [
    ("Case No", TEXT),
    ("I full legal name", TEXT),
    ("Employed by", TEXT),
    ("My occupation is", TEXT),
    ("Pay rate", TEXT),
    ("Hourly", CHECKBOX),
    ("Weekly", CHECKBOX),
    ("Biweekly", CHECKBOX),
    ("Monthly", CHECKBOX),
    ("1", TEXT),
    ("9a From this case", TEXT),
    ("16", TEXT),
    ("Any other income of a recurring nature identify source", TEXT),
    ("17", TEXT),
    ("18", TEXT),
    ("19", TEXT),
    ("25b From other cases", TEXT),
    ("27", TEXT),
    ("1_2", TEXT),
    ("20_2", TEXT),
    ("Other assetsRow1", TEXT),
    ("Other assetsRow2", TEXT),
    ("Other liabilitiesRow1", TEXT),
]


def build_form_pdf(fields, instruction_pages: int = 3) -> bytes:
    """Build an AcroForm PDF: instruction pages first, then the fields."""
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    for number in range(1, instruction_pages + 1):
        c.drawString(72, 720, f"Instructions, page {number}")
        c.showPage()

    y = 740
    for name, kind in fields:
        if kind == CHECKBOX:
            c.acroForm.checkbox(name=name, x=72, y=y, size=12, buttonStyle="check")
        else:
            c.acroForm.textfield(
                name=name, x=72, y=y, width=360, height=14, fontSize=8, borderWidth=0
            )
        y -= 20
        if y < 60:
            c.showPage()
            y = 740
    c.showPage()
    c.save()
    return buffer.getvalue()


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory holding short and long templates under their default names."""
    config = TemplateConfig(directory=tmp_path)
    config.path_for("short").write_bytes(build_form_pdf(SHORT_FORM_FIELDS))
    config.path_for("long").write_bytes(build_form_pdf(LONG_FORM_FIELDS))
    return tmp_path


@pytest.fixture
def config(template_dir: Path) -> FaisConfig:
    return FaisConfig(
        env="test",
        templates=TemplateConfig(directory=template_dir),
        pdf=PdfConfig(flatten=False),
    )


# =============================================================================
# PARTIES
# =============================================================================

@pytest.fixture
def petitioner() -> Party:
    return Party(id="pet1", role=Role.PETITIONER, uname="jdoe", first_name="Jane", last_name="Doe")


@pytest.fixture
def respondent() -> Party:
    return Party(id="resp1", role=Role.RESPONDENT, uname="jroe", first_name="John", last_name="Roe")


@pytest.fixture
def parties(petitioner: Party, respondent: Party) -> list[Party]:
    return [
        petitioner,
        respondent,
        Party(id="ratt1", role=Role.RESPONDENT_ATTORNEY, uname="counsel"),
        Party(id="admin1", role=Role.ADMINISTRATOR, uname="admin"),
        Party(id="pet2", role=Role.PETITIONER, uname="other", first_name="Other", last_name="Party"),
        Party(id="resp2", role=Role.RESPONDENT, uname="stranger"),
    ]


@pytest.fixture
def cases() -> list[Case]:
    return [
        Case(
            id="case1",
            case_number="2026-DR-0042",
            division="Family",
            circuit_id=9,
            county_id=48,
            petitioner_id="pet1",
            respondent_id="resp1",
            respondent_attorney_id="ratt1",
            created_at=datetime(2026, 1, 5),
        ),
        Case(
            id="case2",
            case_number="2026-DR-0099",
            division="Family",
            petitioner_id="pet2",
            respondent_id="resp2",
            created_at=datetime(2026, 3, 1),
        ),
    ]


@pytest.fixture
def directory(parties: list[Party], cases: list[Case]) -> InMemoryPartyDirectory:
    return InMemoryPartyDirectory(parties=parties, cases=cases)


@pytest.fixture
def lookups() -> InMemoryLookups:
    return InMemoryLookups({
        MONTHLY_INCOME_TYPES: {1: "Salary or wages", 16: "Other income"},
        CIRCUITS: {9: "Ninth Judicial Circuit"},
        COUNTIES: {48: "Orange"},
    })


@pytest.fixture
def petitioner_principal() -> Principal:
    return Principal(user_id="pet1", role=Role.PETITIONER)


@pytest.fixture
def respondent_principal() -> Principal:
    return Principal(user_id="resp1", role=Role.RESPONDENT)


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(user_id="admin1", role=Role.ADMINISTRATOR)


# =============================================================================
# LINE ITEMS
# =============================================================================

@pytest.fixture
def short_form_documents() -> dict[str, list[dict]]:
    """Line items for pet1 that classify as short form (800 monthly = 9600)."""
    return {
        "employment": [
            {"_id": "e1", "userId": "pet1", "name": "Acme Corp", "occupation": "Clerk",
             "payRate": 800, "payFrequencyTypeId": 3},
        ],
        "monthlyincome": [
            {"_id": "i1", "userId": "pet1", "typeId": 1, "amount": 200},
            {"_id": "i2", "userId": "pet1", "typeId": 1, "amount": 300},
            {"_id": "i3", "userId": "pet1", "typeId": 16, "amount": 100, "ifOther": "gift"},
            {"_id": "i4", "userId": "pet2", "typeId": 1, "amount": 9999},
        ],
        "monthlydeductions": [
            {"_id": "d1", "userId": "pet1", "typeId": 1, "amount": 50},
        ],
        "monthlyhouseholdexpense": [
            {"_id": "h1", "userId": "pet1", "typeId": 1, "amount": 400},
            {"_id": "h2", "userId": "pet1", "typeId": 20, "amount": 25, "ifOther": "pet care"},
        ],
    }


@pytest.fixture
def long_form_documents() -> dict[str, list[dict]]:
    """Line items for pet1 that classify as long form (1000 weekly = 52000)."""
    return {
        "employment": [
            {"_id": "e1", "userId": "pet1", "name": "Globex", "occupation": "Engineer",
             "payRate": 1000, "payFrequencyTypeId": 1},
        ],
        "monthlyincome": [
            {"_id": "i1", "userId": "pet1", "typeId": 1, "amount": 4000},
            {"_id": "i2", "userId": "pet1", "typeId": 9, "amount": 300},
            {"_id": "i3", "userId": "pet1", "typeId": 16, "amount": 50, "ifOther": "royalty"},
        ],
        "monthlydeductions": [
            {"_id": "d1", "userId": "pet1", "typeId": 1, "amount": 800},
            {"_id": "d2", "userId": "pet1", "typeId": 9, "amount": 100},
        ],
        "monthlyhouseholdexpense": [
            {"_id": "h1", "userId": "pet1", "typeId": 1, "amount": 1500},
            {"_id": "h2", "userId": "pet1", "typeId": 20, "amount": 60, "ifOther": "misc"},
        ],
        "assets": [
            {"_id": "a1", "userId": "pet1", "assetsTypeId": 1, "description": "House",
             "marketValue": 250000},
            {"_id": "a2", "userId": "pet1", "assetsTypeId": 19, "description": "Boat",
             "marketValue": 5000},
            {"_id": "a3", "userId": "pet1", "assetsTypeId": 19, "description": "Art",
             "marketValue": 1200.5},
        ],
        "liabilities": [
            {"_id": "l1", "userId": "pet1", "liabilitiesTypeId": 9,
             "description": "Loan from friend", "amountOwed": 700},
        ],
    }
