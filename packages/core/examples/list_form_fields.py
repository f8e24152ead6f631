#!/usr/bin/env python3
"""
List Official Form Fields

Prints the AcroForm fields a template revision declares, which is the first
step when a new court revision renames fields. Use --filter to narrow the
listing (asset, liability and total fields by default).

Usage:
    python examples/list_form_fields.py long --templates ./private/forms
    python examples/list_form_fields.py short --filter "" --json
"""

import argparse
import json
from pathlib import Path

from fais_core import FaisError
from fais_core.pdf_template import TemplateLoader, parse_form_key

DEFAULT_FILTER = "asset,liabilit,total"


def main() -> int:
    parser = argparse.ArgumentParser(description="List official form template fields")
    parser.add_argument("form", help="short or long")
    parser.add_argument(
        "--templates",
        type=Path,
        default=Path("./private/forms"),
        help="Directory holding the official form PDFs",
    )
    parser.add_argument(
        "--filter",
        default=DEFAULT_FILTER,
        help="Comma-separated substrings; empty lists every field",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    args = parser.parse_args()

    try:
        form = parse_form_key(args.form)
        index = TemplateLoader.from_directory(args.templates).load(form).field_index()
    except FaisError as e:
        print(f"Error: {e}")
        return 1

    needles = [n.strip().lower() for n in args.filter.split(",") if n.strip()]
    fields = [
        f for f in index.fields
        if not needles or any(n in f.name.lower() for n in needles)
    ]

    if args.json:
        print(json.dumps(
            {"form": form.value, "fieldCount": len(index), "fields": [f.model_dump(mode="json") for f in fields]},
            indent=2,
        ))
        return 0

    print(f"{form.value.upper()} FORM: {len(index)} fields, {len(fields)} shown")
    print("-" * 60)
    for f in fields:
        print(f"  [{f.kind.value:<8}] {f.name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
