"""Field-mapping table and tolerant value parsers (pure)."""

from ledger_ingestion.mapping.field_map import (
    DEFAULT_FIELD_ALIASES,
    FieldMapper,
    parse_datetime,
    parse_decimal,
    parse_text,
)

__all__ = [
    "DEFAULT_FIELD_ALIASES",
    "FieldMapper",
    "parse_datetime",
    "parse_decimal",
    "parse_text",
]
