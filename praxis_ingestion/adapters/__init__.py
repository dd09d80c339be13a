"""Source readers and the tabular parser (content only; no filesystem, DB or catalog I/O)."""

from praxis_ingestion.adapters.base import GridReader
from praxis_ingestion.adapters.csv_adapter import CsvGridReader
from praxis_ingestion.adapters.parser import TabularParser, parse_tabular
from praxis_ingestion.adapters.xlsx_adapter import XlsxGridReader, looks_like_xlsx

__all__ = [
    "GridReader",
    "CsvGridReader",
    "XlsxGridReader",
    "TabularParser",
    "looks_like_xlsx",
    "parse_tabular",
]
