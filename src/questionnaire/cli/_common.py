"""Shared helpers for CLI commands."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from rich.logging import RichHandler

from questionnaire.cli._console import print_err
from questionnaire.config import EngineConfig, get_engine_config
from questionnaire.exceptions import ConfigError, SchemaError, SchemaLoadError
from questionnaire.schemas.form_schema import FormSchema
from questionnaire.store import FileSchemaStore, load_schema

logger = logging.getLogger(__name__)


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=None,  # Use default stderr
        show_time=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def load_config() -> EngineConfig:
    """Load engine config, exiting with status 1 if it is invalid."""
    try:
        return get_engine_config()
    except ConfigError as e:
        print_err(str(e))
        raise SystemExit(1)


def resolve_schema(schema_ref: str, config: EngineConfig) -> FormSchema:
    """Load a schema from a file path, or by id from the configured schema dir.

    Raises:
        SystemExit: If the schema cannot be loaded or parsed.
    """
    try:
        path = Path(schema_ref)
        if path.is_file():
            return load_schema(path, config.default_language)
        return FileSchemaStore(config.schema_dir, config.default_language).get(schema_ref)
    except (SchemaLoadError, SchemaError) as e:
        print_err(str(e))
        raise SystemExit(1)


def load_answers(answers_path: Path) -> Dict[str, Any]:
    """Read an answers file (JSON or YAML mapping).

    Raises:
        SystemExit: If the file is missing or not a mapping.
    """
    if not answers_path.is_file():
        print_err(f"Answers file not found: {answers_path}")
        raise SystemExit(1)

    try:
        with open(answers_path, "r", encoding="utf-8") as f:
            if answers_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        print_err(f"Could not parse answers file {answers_path}: {e}")
        raise SystemExit(1)

    if not isinstance(data, dict):
        print_err(f"Answers file {answers_path} must contain a mapping")
        raise SystemExit(1)
    return data


def resolve_language(language: Optional[str], config: EngineConfig) -> str:
    """Use the --lang option when given, otherwise the configured default."""
    return (language or config.default_language).strip().lower()
