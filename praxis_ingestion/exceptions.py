"""
Typed exceptions for the Praxis ingestion pipeline.

Row-level problems (missing fields, bad numbers, unknown lookups) are not
exceptions: they are ``ValidationIssue`` values carried inside results.
Exceptions are reserved for conditions a caller must handle by type:

    PraxisIngestionError (base)
    |
    +-- CatalogError        invalid field catalog definition (config load)
    +-- StructuralError     source content cannot be read as a table
    +-- TransformError      a validated row could not be turned into a record

Every class carries a ``code`` class attribute so handlers and log payloads
can identify the failure without parsing messages.
"""

from __future__ import annotations


class PraxisIngestionError(Exception):
    """Base exception for all ingestion errors."""

    code: str = "PRAXIS_INGESTION_ERROR"


class CatalogError(PraxisIngestionError):
    """Field catalog definition violates its invariants."""

    code: str = "INVALID_CATALOG"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class StructuralError(PraxisIngestionError):
    """Source content is not a readable table (bad encoding, corrupt workbook, no sheets)."""

    code: str = "STRUCTURAL_ERROR"


class TransformError(PraxisIngestionError):
    """A row that passed validation could not be converted to a canonical record."""

    code: str = "TRANSFORM_ERROR"

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")
