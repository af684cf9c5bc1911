"""Schema store boundary: reading and normalizing stored form schemas."""

from questionnaire.store.schema_loader import (
    FileSchemaStore,
    decode_localized_text,
    load_schema,
    normalize_schema_payload,
)

__all__ = [
    "FileSchemaStore",
    "decode_localized_text",
    "load_schema",
    "normalize_schema_payload",
]
