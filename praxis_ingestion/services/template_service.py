"""
Template service: blank import templates for producers of Praxis exports.

Two variants, both with headers in catalog order:
  - CSV: header row plus one illustrative sample row.
  - XLSX: header-only import sheet plus an "Instructions" sheet covering
    required fields, accepted values, factory codes and formatting rules.

Only source-facing columns appear; provenance and internal fields never do.
"""

from __future__ import annotations

import csv
import io

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.types import FieldCategory

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

IMPORT_SHEET_TITLE = "Praxis Import"
INSTRUCTIONS_SHEET_TITLE = "Instructions"

_FORMATS = ("csv", "xlsx")

_CATEGORY_LABELS = {
    FieldCategory.STRING: "text",
    FieldCategory.BOOLEAN: "yes/no",
    FieldCategory.INTEGER: "whole number",
    FieldCategory.FLOAT: "decimal number",
    FieldCategory.DATE: "date (YYYY-MM-DD)",
    FieldCategory.LOOKUP_DEALER: "dealer code",
    FieldCategory.LOOKUP_ESTIMATOR: "estimator name",
    FieldCategory.LOOKUP_FACTORY: "factory code",
}


def _check_format(fmt: str) -> str:
    f = fmt.strip().lower().lstrip(".")
    if f not in _FORMATS:
        raise ValueError(f"Unsupported template format {fmt!r} (expected csv or xlsx)")
    return f


def template_filename(fmt: str = "csv") -> str:
    return f"praxis_import_template.{_check_format(fmt)}"


def media_type(fmt: str = "csv") -> str:
    return XLSX_MEDIA_TYPE if _check_format(fmt) == "xlsx" else CSV_MEDIA_TYPE


class TemplateService:
    """Builds template files from one catalog. Output depends only on the catalog."""

    def __init__(self, catalog: FieldMappingCatalog):
        self._catalog = catalog

    @property
    def headers(self) -> list[str]:
        return list(self._catalog.headers)

    def sample_row(self) -> list[str]:
        return [e.sample for e in self._catalog]

    def generate(self, fmt: str = "csv") -> bytes:
        return self.generate_xlsx() if _check_format(fmt) == "xlsx" else self.generate_csv()

    def generate_csv(self) -> bytes:
        buf = io.StringIO(newline="")
        writer = csv.writer(buf, lineterminator="\r\n")
        writer.writerow(self.headers)
        writer.writerow(self.sample_row())
        return buf.getvalue().encode("utf-8")

    def generate_xlsx(self) -> bytes:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = IMPORT_SHEET_TITLE
        ws.append(self.headers)
        bold = Font(bold=True)
        for col, header in enumerate(self.headers, start=1):
            ws.cell(row=1, column=col).font = bold
            ws.column_dimensions[get_column_letter(col)].width = max(len(header) + 2, 15)
        ws.freeze_panes = "A2"

        notes = wb.create_sheet(INSTRUCTIONS_SHEET_TITLE)
        for line in self.instruction_lines():
            notes.append([line])
        notes["A1"].font = bold
        notes.column_dimensions["A"].width = 80

        out = io.BytesIO()
        wb.save(out)
        return out.getvalue()

    def instruction_lines(self) -> list[str]:
        """Instruction text, one line per row of the Instructions sheet."""
        catalog = self._catalog
        lines = ["Praxis Import Template - Instructions", ""]

        lines.append("Required Fields:")
        for e in catalog.required_entries:
            lines.append(f"- {e.source_header}: {e.description}" if e.description else f"- {e.source_header}")
        lines.append("")

        recommended = [e for e in catalog if e.description and not e.required]
        if recommended:
            lines.append("Optional but Recommended:")
            lines.extend(f"- {e.source_header}: {e.description}" for e in recommended)
            lines.append("")

        lines.extend([
            "Data Format Notes:",
            "- Dates: Use YYYY-MM-DD format (e.g., 2025-05-08)",
            "- Boolean fields: Use Yes/No, True/False, or 1/0",
            "- Numbers: Use decimal point (e.g., 0.500 not 0,500)",
            "- Unknown values in the accepted-value lists below are imported as-is with a warning",
            "",
        ])

        enumerated = [e for e in catalog if e.allowed_values]
        if enumerated:
            lines.append("Accepted Values:")
            lines.extend(f"- {e.source_header}: {', '.join(e.allowed_values)}" for e in enumerated)
            lines.append("")

        if catalog.factory_labels:
            lines.append("Factory Codes:")
            codes_by_label: dict[str, list[str]] = {}
            for code, label in catalog.factory_labels.items():
                codes_by_label.setdefault(label, []).append(code)
            lines.extend(f"- {'/'.join(codes)}: {label}" for label, codes in codes_by_label.items())
            lines.append("")

        lines.append("Columns:")
        for e in catalog:
            suffix = ", required" if e.required else ""
            lines.append(f"- {e.source_header}: {_CATEGORY_LABELS[e.category]}{suffix}")
        return lines
