"""
Grid reader protocol.

Contract:
    GridReader.read_grid() turns raw file content into a list of physical
    rows, each a list of cell strings, in source order. Blank rows are kept so
    row numbers stay aligned with the source file; the parser decides what to
    skip.

Raises ``StructuralError`` when the content cannot be read as a table.
File content only; no filesystem, network or catalog access.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class GridReader(Protocol):
    """Protocol for decoding tabular content into rows of cell strings."""

    def read_grid(self, content: bytes | str) -> list[list[str]]:
        """Return every physical row of the first sheet / the whole text."""
        ...
