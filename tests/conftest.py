"""
Pytest fixtures for the praxis_ingestion test suite.

Provides:
- The shipped field catalog and a small alternate catalog
- A deterministic clock
- Builders for CSV and XLSX content in the import template's shape

No database or network is involved; every test runs on in-memory content.
"""

import csv
import io
from datetime import datetime, timezone

import openpyxl
import pytest

from praxis_ingestion.clock import DeterministicClock
from praxis_ingestion.config import default_catalog
from praxis_ingestion.domain import FieldCategory, FieldMapEntry, FieldMappingCatalog
from praxis_ingestion.logging_config import LogContext, reset_logging

FIXED_NOW = datetime(2025, 6, 1, 9, 30, 0, tzinfo=timezone.utc)

DEALERS = [
    {"code": "PMSI", "id": "dealer-pmsi"},
    {"code": "MMG", "id": "dealer-mmg"},
]
USERS = [
    {"name": "Hank Smith", "id": "user-hank"},
    {"name": "Dana Ruiz", "id": "user-dana"},
]


def build_csv(headers, rows, delimiter=",") -> bytes:
    """CSV bytes with a header row; each row is a dict keyed by header."""
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, delimiter=delimiter, lineterminator="\r\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(h, "") for h in headers])
    return buf.getvalue().encode("utf-8")


def build_xlsx(grid) -> bytes:
    """XLSX bytes whose first sheet holds ``grid`` (a list of rows of raw cell values)."""
    wb = openpyxl.Workbook()
    ws = wb.active
    for row in grid:
        ws.append(list(row))
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


def praxis_row(**overrides) -> dict:
    """A valid row keyed by template header; keyword names use underscores for spaces."""
    row = {
        "Quote Number": "NW-0061-2025",
        "Building Description": "14x65 INL Restroom Facility",
        "Building Type": "CUSTOM",
        "Width": "14",
        "Length": "65",
        "Dealer Code": "PMSI",
        "Material Cost": "85303.59",
        "Total Price": "184824.33",
        "Has Plumbing": "Yes",
        "Date Sold": "2025-05-08",
        "Estimator": "Hank Smith",
        "Factory Code": "NW",
    }
    for key, value in overrides.items():
        row[key.replace("_", " ")] = value
    return row


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def catalog() -> FieldMappingCatalog:
    return default_catalog()


@pytest.fixture
def small_catalog() -> FieldMappingCatalog:
    """Four-column catalog for tests that want short rows."""
    return FieldMappingCatalog(
        entries=(
            FieldMapEntry("Name", "name", FieldCategory.STRING, required=True, sample="Shed"),
            FieldMapEntry("Count", "count", FieldCategory.INTEGER, sample="2"),
            FieldMapEntry("Kind", "kind", FieldCategory.STRING, allowed_values=("A", "B"), sample="A"),
            FieldMapEntry("Plant", "plant", FieldCategory.LOOKUP_FACTORY, sample="NW"),
        ),
        factory_labels={"NW": "NWBS - Northwest Building Systems"},
        name="small",
    )


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def dealers() -> list[dict]:
    return list(DEALERS)


@pytest.fixture
def users() -> list[dict]:
    return list(USERS)
