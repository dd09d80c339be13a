"""Type coercion and row -> record transformation (pure)."""

from praxis_ingestion.mapping.coercion import (
    TRUE_TOKENS,
    coerce_boolean,
    coerce_date,
    coerce_float,
    coerce_integer,
    coerce_string,
    coerce_value,
    is_date,
    is_number,
)
from praxis_ingestion.mapping.transformer import (
    IMPORTED_FROM,
    INITIAL_STATUS,
    RecordTransformer,
    TransformDefaults,
)

__all__ = [
    "TRUE_TOKENS",
    "coerce_boolean",
    "coerce_date",
    "coerce_float",
    "coerce_integer",
    "coerce_string",
    "coerce_value",
    "is_date",
    "is_number",
    "IMPORTED_FROM",
    "INITIAL_STATUS",
    "RecordTransformer",
    "TransformDefaults",
]
