#!/usr/bin/env python3
"""
Run the Praxis import pipeline on one file and print the result manifest as JSON.

Dealers and users are read from JSON files (lists of {"code", "id"} and
{"name", "id"} objects) standing in for the host system's lookups.

Usage:
    python3 scripts/run_praxis_import.py --file <path> [options]
    python3 scripts/run_praxis_import.py --template csv|xlsx --out <path>

Examples:
    # Validate and transform, print the manifest
    python3 scripts/run_praxis_import.py --file praxis_export.csv --dealers dealers.json --users users.json

    # Keep the rows that passed even if others failed
    python3 scripts/run_praxis_import.py --file praxis_export.xlsx --allow-partial

    # Write a blank template
    python3 scripts/run_praxis_import.py --template xlsx --out praxis_import_template.xlsx
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run Praxis import: parse -> validate -> transform, or write a blank template.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--file", type=Path, default=None, help="Path to a Praxis CSV or XLSX export.")
    parser.add_argument("--dealers", type=Path, default=None, help="JSON file with dealer {code, id} records.")
    parser.add_argument("--users", type=Path, default=None, help="JSON file with user {name, id} records.")
    parser.add_argument("--default-factory", default=None, help="Factory label used when a row has no factory code.")
    parser.add_argument(
        "--allow-partial",
        action="store_true",
        help="Transform valid rows even when other rows fail validation.",
    )
    parser.add_argument("--catalog", type=Path, default=None, help="Alternate field map YAML.")
    parser.add_argument("--template", choices=("csv", "xlsx"), default=None, help="Write a blank template and exit.")
    parser.add_argument("--out", type=Path, default=None, help="Output path for --template.")
    parser.add_argument("--log-level", default="WARNING", help="Structured log level on stderr (default: WARNING).")
    return parser.parse_args()


def _load_lookup(path: Path | None) -> list:
    if path is None:
        return []
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list")
    return data


def main() -> int:
    args = _parse_args()

    # Lazy imports so we fail fast on args first
    from praxis_ingestion.config import default_catalog, load_catalog
    from praxis_ingestion.logging_config import configure_logging
    from praxis_ingestion.services import (
        ImportOptions,
        ImportService,
        TemplateService,
        template_filename,
    )

    configure_logging(level=args.log_level.upper(), stream=sys.stderr)

    try:
        catalog = load_catalog(args.catalog) if args.catalog else default_catalog()
    except Exception as e:
        print(f"ERROR: Failed to load catalog: {e}", file=sys.stderr)
        return 1

    if args.template:
        out = args.out or Path(template_filename(args.template))
        out.write_bytes(TemplateService(catalog).generate(args.template))
        print(f"Wrote {out}")
        return 0

    if args.file is None:
        print("ERROR: --file is required unless --template is given", file=sys.stderr)
        return 1
    source_path = args.file.resolve()
    if not source_path.is_file():
        print(f"ERROR: File not found: {source_path}", file=sys.stderr)
        return 1

    try:
        dealers = _load_lookup(args.dealers)
        users = _load_lookup(args.users)
    except (OSError, ValueError) as e:
        print(f"ERROR: Failed to load lookups: {e}", file=sys.stderr)
        return 1

    service = ImportService(catalog=catalog)
    result = service.run(
        source_path.read_bytes(),
        ImportOptions(
            dealers=dealers,
            users=users,
            default_factory=args.default_factory,
            allow_partial=args.allow_partial,
            source_filename=source_path.name,
        ),
    )
    print(json.dumps(result.to_dict(), indent=2, default=str))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
