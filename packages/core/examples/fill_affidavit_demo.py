#!/usr/bin/env python3
"""
Financial Affidavit Demonstration

This script walks through the affidavit workflow with in-memory data:
1. Enter line items for a petitioner through the line-item service
2. Compute the income summary and form classification
3. Render the generic draft report
4. Fill the official court form (when templates are available)

Run: python examples/fill_affidavit_demo.py --templates ./private/forms
"""

import argparse
import asyncio
import json
from datetime import datetime
from pathlib import Path

from fais_core import (
    AffidavitService,
    FaisError,
    LineItemService,
    Principal,
    Role,
)
from fais_core.config import FaisConfig, PdfConfig, TemplateConfig, configure_logging
from fais_core.models import AffidavitQuery, Case, Party
from fais_core.store import (
    CIRCUITS,
    COUNTIES,
    MONTHLY_INCOME_TYPES,
    InMemoryDocumentStore,
    InMemoryLookups,
    InMemoryPartyDirectory,
)


def create_directory() -> InMemoryPartyDirectory:
    """Two parties on one case."""
    return InMemoryPartyDirectory(
        parties=[
            Party(id="pet1", role=Role.PETITIONER, uname="jdoe", first_name="Jane", last_name="Doe"),
            Party(id="resp1", role=Role.RESPONDENT, uname="jroe", first_name="John", last_name="Roe"),
        ],
        cases=[
            Case(
                id="case1",
                case_number="2026-DR-0042",
                division="Family",
                circuit_id=9,
                county_id=48,
                petitioner_id="pet1",
                respondent_id="resp1",
                created_at=datetime(2026, 1, 5),
            ),
        ],
    )


def create_lookups() -> InMemoryLookups:
    return InMemoryLookups({
        MONTHLY_INCOME_TYPES: {
            1: "Salary or wages",
            2: "Bonuses, commissions, allowances, overtime, tips",
            16: "Any other income of a recurring nature",
        },
        CIRCUITS: {9: "Ninth Judicial Circuit"},
        COUNTIES: {48: "Orange"},
    })


async def enter_line_items(items: LineItemService, petitioner: Principal) -> None:
    """Enter a realistic set of line items as the petitioner."""
    await items.create(petitioner, "employment", {
        "name": "Orange County Library System",
        "occupation": "Librarian",
        "payRate": 1750,
        "payFrequencyTypeId": 2,
    })
    for type_id, amount, if_other in [
        (1, 3791.67, None),
        (2, 150, None),
        (16, 200, "Tutoring"),
    ]:
        await items.create(petitioner, "monthlyincome", {
            "typeId": type_id, "amount": amount, "ifOther": if_other,
        })
    for type_id, amount in [(1, 520), (2, 290), (3, 55)]:
        await items.create(petitioner, "monthlydeductions", {"typeId": type_id, "amount": amount})
    for type_id, amount, if_other in [
        (1, 1450, None),
        (5, 180, None),
        (14, 600, None),
        (20, 75, "Pet care"),
    ]:
        await items.create(petitioner, "monthlyhouseholdexpense", {
            "typeId": type_id, "amount": amount, "ifOther": if_other,
        })
    await items.create(petitioner, "assets", {
        "assetsTypeId": 19, "description": "Piano", "marketValue": 3200,
    })
    await items.create(petitioner, "liabilities", {
        "liabilitiesTypeId": 9, "description": "Loan from parent", "amountOwed": 4000,
    })


async def main(templates: Path, output: Path) -> None:
    config = FaisConfig(
        templates=TemplateConfig(directory=templates),
        pdf=PdfConfig(flatten=True),
    )
    configure_logging(config)

    directory = create_directory()
    store = InMemoryDocumentStore()
    petitioner = Principal(user_id="pet1", role=Role.PETITIONER)
    respondent = Principal(user_id="resp1", role=Role.RESPONDENT)

    print("=" * 70)
    print("FINANCIAL AFFIDAVIT DEMONSTRATION")
    print("=" * 70)

    print("\n[1] Entering line items as the petitioner...")
    await enter_line_items(LineItemService(directory, store), petitioner)

    service = AffidavitService(directory, store, lookups=create_lookups(), config=config)

    print("\n[2] Income summary (as seen by the respondent on case1)...")
    summary = await service.get_summary(respondent, AffidavitQuery(case_id="case1"))
    print(json.dumps(summary.to_response(), indent=2))

    print("\n[3] Generic draft report...")
    output.mkdir(parents=True, exist_ok=True)
    generic = await service.get_generic_pdf(petitioner)
    generic_path = output / f"draft-{generic.filename}"
    generic_path.write_bytes(generic.content)
    print(f"    Wrote {generic_path} ({len(generic.content):,} bytes)")

    print("\n[4] Official court form...")
    try:
        official = await service.get_official_pdf(petitioner)
    except FaisError as e:
        print(f"    Skipped: {e}")
    else:
        official_path = output / official.filename
        official_path.write_bytes(official.content)
        print(f"    Wrote {official_path} ({official.form.value} form)")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Financial affidavit demonstration")
    parser.add_argument(
        "--templates",
        type=Path,
        default=Path("./private/forms"),
        help="Directory holding the official form PDFs",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("./output"),
        help="Directory for the generated PDFs",
    )
    args = parser.parse_args()
    asyncio.run(main(args.templates, args.output))
