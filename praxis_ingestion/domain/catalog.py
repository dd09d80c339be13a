"""
Field mapping catalog: the canonical column set of the Praxis import template.

Pure data. The catalog is passed explicitly to the parser, validator,
transformer and template generator; nothing reads it from module state, so
tests can hand any component an alternate catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping

from praxis_ingestion.domain.types import FieldCategory, FieldMapEntry
from praxis_ingestion.exceptions import CatalogError


@dataclass(frozen=True)
class FieldMappingCatalog:
    """
    Ordered, read-only registry of ``FieldMapEntry`` values.

    Invariants (checked at construction, ``CatalogError`` on violation):
        - ``source_header`` unique across entries
        - ``target_field`` unique across entries
        - at most one entry per lookup category
    Entry order is template column order.
    """

    entries: tuple[FieldMapEntry, ...]
    factory_labels: Mapping[str, str] = field(default_factory=dict)  # code -> canonical label
    name: str = "praxis"

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(
            self,
            "factory_labels",
            MappingProxyType({k.upper(): v for k, v in self.factory_labels.items()}),
        )
        seen_headers: set[str] = set()
        seen_targets: set[str] = set()
        seen_lookups: set[FieldCategory] = set()
        for entry in self.entries:
            if not entry.source_header.strip():
                raise CatalogError("Catalog entry has an empty source header", field=entry.target_field)
            if entry.source_header in seen_headers:
                raise CatalogError(f"Duplicate source header {entry.source_header!r}", field=entry.source_header)
            if entry.target_field in seen_targets:
                raise CatalogError(f"Duplicate target field {entry.target_field!r}", field=entry.target_field)
            if entry.category.is_lookup:
                if entry.category in seen_lookups:
                    raise CatalogError(
                        f"More than one {entry.category.value} column",
                        field=entry.source_header,
                    )
                seen_lookups.add(entry.category)
            seen_headers.add(entry.source_header)
            seen_targets.add(entry.target_field)

    def __iter__(self) -> Iterator[FieldMapEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def headers(self) -> tuple[str, ...]:
        return tuple(e.source_header for e in self.entries)

    @property
    def required_entries(self) -> tuple[FieldMapEntry, ...]:
        return tuple(e for e in self.entries if e.required)

    def by_header(self, header: str) -> FieldMapEntry | None:
        for entry in self.entries:
            if entry.source_header == header:
                return entry
        return None

    def by_target(self, target_field: str) -> FieldMapEntry | None:
        for entry in self.entries:
            if entry.target_field == target_field:
                return entry
        return None

    def of_category(self, *categories: FieldCategory) -> tuple[FieldMapEntry, ...]:
        return tuple(e for e in self.entries if e.category in categories)

    def lookup_entry(self, category: FieldCategory) -> FieldMapEntry | None:
        """The single column of a lookup category, if the catalog declares one."""
        matches = self.of_category(category)
        return matches[0] if matches else None

    def target_to_header(self) -> dict[str, str]:
        """Reverse map (target field -> source header), used when exporting records."""
        return {e.target_field: e.source_header for e in self.entries}
