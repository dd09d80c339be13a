"""
Catalog loader (``praxis_ingestion.config.loader``).

Loads the YAML field map and parses it into a frozen
``FieldMappingCatalog``. The shipped definition lives next to this module in
``praxis_fields.yaml``; hosts and tests may load an alternate file.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown category or broken invariants  -> ``CatalogError``.
"""

from __future__ import annotations

import hashlib
import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from praxis_ingestion.domain.catalog import FieldMappingCatalog
from praxis_ingestion.domain.types import FieldCategory, FieldMapEntry, FormatHint
from praxis_ingestion.exceptions import CatalogError

DEFAULT_CATALOG_PATH = Path(__file__).with_name("praxis_fields.yaml")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict (empty if the file is empty)."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_category(value: Any) -> FieldCategory:
    try:
        return FieldCategory(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in FieldCategory)
        raise CatalogError(f"Unknown field category {value!r} (expected one of: {allowed})") from None


def parse_format_hint(data: dict[str, Any] | None) -> FormatHint | None:
    if not data:
        return None
    return FormatHint(pattern=str(data["pattern"]), example=str(data.get("example", "")))


def parse_field_entry(data: dict[str, Any]) -> FieldMapEntry:
    """Parse one ``fields:`` item into a ``FieldMapEntry``."""
    allowed = data.get("allowed_values")
    sample = data.get("sample")
    return FieldMapEntry(
        source_header=str(data["header"]).strip(),
        target_field=str(data["target"]).strip(),
        category=parse_category(data.get("category", "string")),
        required=bool(data.get("required", False)),
        allowed_values=tuple(str(v) for v in allowed) if allowed else None,
        strict=bool(data.get("strict", True)),
        format_hint=parse_format_hint(data.get("format_hint")),
        sample="" if sample is None else str(sample),
        description=str(data.get("description", "")),
    )


def parse_catalog(data: dict[str, Any]) -> FieldMappingCatalog:
    """Build a catalog from an already-loaded YAML document."""
    fields = data["fields"]
    if not isinstance(fields, list) or not fields:
        raise CatalogError("Catalog must declare a non-empty 'fields' list")
    factories = data.get("factories") or {}
    return FieldMappingCatalog(
        entries=tuple(parse_field_entry(f) for f in fields),
        factory_labels={str(k): str(v) for k, v in factories.items()},
        name=str(data.get("name", "praxis")),
    )


def load_catalog(path: Path | None = None) -> FieldMappingCatalog:
    """Load and parse a catalog file (default: the shipped Praxis field map)."""
    return parse_catalog(load_yaml_file(path or DEFAULT_CATALOG_PATH))


@lru_cache(maxsize=1)
def default_catalog() -> FieldMappingCatalog:
    """The shipped Praxis catalog. Immutable, so a single parsed instance is shared."""
    return load_catalog(DEFAULT_CATALOG_PATH)


def compute_checksum(catalog: FieldMappingCatalog) -> str:
    """Deterministic SHA-256 of a catalog, for identifying which field map produced an import."""
    payload = {
        "name": catalog.name,
        "fields": [
            {
                "header": e.source_header,
                "target": e.target_field,
                "category": e.category.value,
                "required": e.required,
                "allowed_values": list(e.allowed_values) if e.allowed_values else None,
                "strict": e.strict,
                "format_hint": e.format_hint.pattern if e.format_hint else None,
            }
            for e in catalog.entries
        ],
        "factories": dict(sorted(catalog.factory_labels.items())),
    }
    return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()
