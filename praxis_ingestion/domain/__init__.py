"""
praxis_ingestion.domain -- Pure types, the field catalog, validation and reference lookup.

ZERO I/O.
"""

from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.references import ReferenceIndex
from praxis_ingestion.domain.types import (
    BatchValidationResult,
    CanonicalRecord,
    FieldCategory,
    FieldMapEntry,
    FormatHint,
    ImportResult,
    ImportStats,
    IssueSeverity,
    ParseResult,
    RawRow,
    RowValidationResult,
    ValidationIssue,
)

__all__ = [
    "BatchValidationResult",
    "CanonicalRecord",
    "FieldCategory",
    "FieldMapEntry",
    "FieldMappingCatalog",
    "FormatHint",
    "ImportResult",
    "ImportStats",
    "IssueSeverity",
    "ParseResult",
    "RawRow",
    "ReferenceIndex",
    "RowValidationResult",
    "ValidationIssue",
]
