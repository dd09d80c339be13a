"""
Tabular parser: raw file content -> header list + numbered ``RawRow`` values.

Structural problems (unreadable content, no data row, unusable header) are
returned in ``ParseResult.errors``; they halt the pipeline but are not raised.
Pure function over its input.
"""

from __future__ import annotations

from praxis_ingestion.adapters.base import GridReader
from praxis_ingestion.adapters.csv_adapter import CsvGridReader
from praxis_ingestion.adapters.xlsx_adapter import XlsxGridReader, looks_like_xlsx
from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.types import ParseResult, RawRow
from praxis_ingestion.exceptions import StructuralError

MIN_ROWS_MESSAGE = "File must have at least a header row and one data row"


def _is_blank(cells: list[str]) -> bool:
    return all(not c.strip() for c in cells)


class TabularParser:
    """Pick a grid reader by content sniffing and number the rows it yields."""

    def __init__(
        self,
        csv_reader: GridReader | None = None,
        xlsx_reader: GridReader | None = None,
    ):
        self._csv_reader = csv_reader or CsvGridReader()
        self._xlsx_reader = xlsx_reader or XlsxGridReader()

    def reader_for(self, content: bytes | str) -> GridReader:
        return self._xlsx_reader if looks_like_xlsx(content) else self._csv_reader

    def parse(
        self,
        content: bytes | str,
        catalog: FieldMappingCatalog | None = None,
    ) -> ParseResult:
        try:
            grid = self.reader_for(content).read_grid(content)
        except StructuralError as e:
            return ParseResult(errors=(f"Unable to read file: {e}",))

        while grid and _is_blank(grid[-1]):
            grid.pop()
        if len(grid) < 2:
            return ParseResult(errors=(MIN_ROWS_MESSAGE,))

        headers = [str(h).strip() for h in grid[0]]
        while headers and not headers[-1]:
            headers.pop()
        if not headers:
            return ParseResult(errors=("Header row is empty",))

        seen: set[str] = set()
        for header in headers:
            if header and header in seen:
                return ParseResult(errors=(f'Duplicate column header "{header}"',))
            seen.add(header)

        rows: list[RawRow] = []
        # Header is physical row 1; blank rows are skipped without renumbering.
        for row_number, cells in enumerate(grid[1:], start=2):
            if _is_blank(cells):
                continue
            values = {
                header: (cells[i].strip() if i < len(cells) else "")
                for i, header in enumerate(headers)
                if header
            }
            row = RawRow(row_number=row_number, values=values)
            if row.is_empty():
                continue  # content only in unnamed columns
            rows.append(row)

        warnings: list[str] = []
        if catalog is not None:
            known = set(catalog.headers)
            for header in headers:
                if header and header not in known:
                    warnings.append(f'Column "{header}" is not part of the import template and will be ignored')

        return ParseResult(
            headers=tuple(h for h in headers if h),
            rows=tuple(rows),
            warnings=tuple(warnings),
        )


def parse_tabular(
    content: bytes | str,
    catalog: FieldMappingCatalog | None = None,
) -> ParseResult:
    """Parse CSV text/bytes or XLSX bytes with the default readers."""
    return TabularParser().parse(content, catalog)
