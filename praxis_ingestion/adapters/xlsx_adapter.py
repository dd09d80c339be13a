"""
XLSX grid reader for workbook exports.

Reads the first worksheet only, values not formulas. Cell values are
normalized to text the way a CSV export of the same sheet would show them:
blank -> "", whole floats without ".0", dates as YYYY-MM-DD, booleans as
TRUE/FALSE.
"""

from __future__ import annotations

import io
import zipfile
from datetime import date, datetime, time
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from praxis_ingestion.exceptions import StructuralError

XLSX_SIGNATURE = b"PK\x03\x04"


def looks_like_xlsx(content: bytes | str) -> bool:
    return isinstance(content, bytes) and content.startswith(XLSX_SIGNATURE)


def cell_text(value: Any) -> str:
    """Normalize one openpyxl cell value to stripped text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value).strip()


class XlsxGridReader:
    """Read the first sheet of an .xlsx workbook into physical rows of cell text."""

    def read_grid(self, content: bytes | str) -> list[list[str]]:
        if not isinstance(content, bytes):
            raise StructuralError("Workbook content must be bytes")
        try:
            wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
            raise StructuralError(f"Unreadable workbook: {e}") from e
        try:
            if not wb.worksheets:
                raise StructuralError("Workbook has no sheets")
            sheet = wb.worksheets[0]
            return [[cell_text(v) for v in row] for row in sheet.iter_rows(values_only=True)]
        finally:
            wb.close()
