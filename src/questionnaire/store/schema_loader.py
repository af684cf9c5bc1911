"""
Loading and normalizing form schema files.

This is the boundary between stored schemas and the engine. Schemas saved by
the authoring tool sometimes hold localized text as serialized JSON strings
(``'{"en": "Name", "tr": "Ad"}'``) or as a plain string. Both are turned into a
language mapping here, once, so the engine only ever sees one shape.

The tool also leaves editing residue behind: validation limits cleared to
``""`` and kind-specific keys (``options``, ``fields``) kept after a field
changes kind. Both are removed here before the document is parsed.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from questionnaire.exceptions import SchemaLoadError
from questionnaire.runtime.localization import FALLBACK_LANGUAGE
from questionnaire.runtime.validators import parse_schema
from questionnaire.schemas.form_schema import FormSchema

logger = logging.getLogger(__name__)

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")

# Keys holding localized text, per level of the schema document
_SCHEMA_TEXT_KEYS = ("title", "description")
_FIELD_TEXT_KEYS = ("label", "placeholder", "description")

# Kind-specific attributes and the kinds that own them. The authoring tool keeps
# stale keys when a field changes kind, so they are dropped on load.
_KIND_ATTRIBUTES = {
    "options": ("select",),
    "items": ("dynamicList",),
    "fields": ("dynamicList",),
    "validation": ("text", "textarea"),
}


def decode_localized_text(value: Any, default_language: str = FALLBACK_LANGUAGE) -> Any:
    """
    Turn a serialized localized text into a language mapping.

    Args:
        value: Mapping, JSON string, plain string or None
        default_language: Language assigned to a plain string

    Returns:
        A mapping for string input; anything else is returned unchanged
    """
    if not isinstance(value, str):
        return value

    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return {default_language: value}

    if isinstance(decoded, dict):
        return {str(language): str(text) for language, text in decoded.items()}
    if isinstance(decoded, str):
        return {default_language: decoded}
    return {default_language: value}


def _clean_validation(validation: Dict[str, Any]) -> Dict[str, Any]:
    """Drop validation entries left blank by the authoring tool (``minLength: ""``)."""
    return {key: value for key, value in validation.items() if value is not None and value != ""}


def _normalize_field(field: Dict[str, Any], default_language: str) -> Dict[str, Any]:
    normalized = dict(field)
    kind = normalized.get("kind", normalized.get("type"))

    for key, owners in _KIND_ATTRIBUTES.items():
        if key in normalized and kind not in owners:
            logger.debug(f"Dropping stale '{key}' from {kind} field '{normalized.get('name')}'")
            del normalized[key]

    if isinstance(normalized.get("validation"), dict):
        normalized["validation"] = _clean_validation(normalized["validation"])

    for key in _FIELD_TEXT_KEYS:
        if key in normalized:
            normalized[key] = decode_localized_text(normalized[key], default_language)

    if isinstance(normalized.get("options"), list):
        normalized["options"] = [
            {**option, "label": decode_localized_text(option.get("label"), default_language)}
            if isinstance(option, dict) and "label" in option
            else option
            for option in normalized["options"]
        ]

    for items_key in ("items", "fields"):
        if isinstance(normalized.get(items_key), list):
            normalized[items_key] = [
                _normalize_field(sub, default_language) if isinstance(sub, dict) else sub
                for sub in normalized[items_key]
            ]
    return normalized


def normalize_schema_payload(
    data: Dict[str, Any],
    default_language: str = FALLBACK_LANGUAGE,
) -> Dict[str, Any]:
    """
    Normalize a raw schema document into the engine's canonical shape.

    Unwraps an API envelope (``{"schema": {...}}``), decodes every localized
    text slot and strips authoring residue from fields. The input is not
    modified.

    Raises:
        SchemaLoadError: If the document is not a mapping
    """
    if isinstance(data, dict) and isinstance(data.get("schema"), dict) and "sections" not in data:
        data = data["schema"]

    if not isinstance(data, dict):
        raise SchemaLoadError(f"Schema document must be a mapping, got {type(data).__name__}")

    normalized = dict(data)
    for key in _SCHEMA_TEXT_KEYS:
        if key in normalized:
            normalized[key] = decode_localized_text(normalized[key], default_language)

    sections: List[Any] = []
    for section in normalized.get("sections") or []:
        if not isinstance(section, dict):
            sections.append(section)
            continue
        section = dict(section)
        for key in _SCHEMA_TEXT_KEYS:
            if key in section:
                section[key] = decode_localized_text(section[key], default_language)
        section["fields"] = [
            _normalize_field(field, default_language) if isinstance(field, dict) else field
            for field in section.get("fields") or []
        ]
        sections.append(section)
    normalized["sections"] = sections

    return normalized


def read_schema_document(file_path: Path) -> Dict[str, Any]:
    """
    Read a JSON or YAML schema file without interpreting it.

    Raises:
        SchemaLoadError: If the file is missing, unreadable or not JSON/YAML
    """
    file_path = Path(file_path)
    if file_path.suffix.lower() not in SCHEMA_SUFFIXES:
        raise SchemaLoadError(f"Unsupported schema file type: {file_path.suffix or '(none)'}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except FileNotFoundError:
        raise SchemaLoadError(f"Schema file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"Invalid JSON in schema file: {e}")
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML in schema file: {e}")


def load_schema(file_path: Path, default_language: str = FALLBACK_LANGUAGE) -> FormSchema:
    """
    Load, normalize and parse a form schema file.

    Args:
        file_path: Path to a .json, .yaml or .yml schema file
        default_language: Language assigned to plain-string texts

    Returns:
        Parsed FormSchema (structure checks run later, at compile time)

    Raises:
        SchemaLoadError: If the file cannot be read or decoded
        SchemaError: If the document does not describe a form schema
    """
    document = read_schema_document(file_path)
    schema = parse_schema(normalize_schema_payload(document, default_language))
    logger.debug(f"Loaded schema '{schema.id}' from {file_path}")
    return schema


class FileSchemaStore:
    """Schema store backed by a directory of ``<schema_id>.json|yaml`` files."""

    def __init__(self, root: Path, default_language: str = FALLBACK_LANGUAGE):
        self.root = Path(root)
        self.default_language = default_language

    def path_for(self, schema_id: str) -> Optional[Path]:
        for suffix in SCHEMA_SUFFIXES:
            candidate = self.root / f"{schema_id}{suffix}"
            if candidate.exists():
                return candidate
        return None

    def list_ids(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            {path.stem for path in self.root.iterdir() if path.suffix.lower() in SCHEMA_SUFFIXES}
        )

    def get(self, schema_id: str) -> FormSchema:
        """
        Load a schema by id.

        Raises:
            SchemaLoadError: If no file exists for the id, it cannot be read or
                it declares a different id
            SchemaError: If the stored document is not a valid form schema
        """
        path = self.path_for(schema_id)
        if path is None:
            raise SchemaLoadError(f"No schema '{schema_id}' in {self.root}")

        schema = load_schema(path, self.default_language)
        if schema.id != schema_id:
            raise SchemaLoadError(f"Schema file {path.name} declares id '{schema.id}'")
        return schema
