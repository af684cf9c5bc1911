"""Engine configuration schema and loader.

Settings are read from a YAML file (``questionnaire.yaml`` in the working
directory unless a path is given) and can be overridden from the environment.
A ``.env`` file in the working directory is loaded first.

Environment overrides:
    QUESTIONNAIRE_CONFIG                 path of the YAML file
    QUESTIONNAIRE_LANGUAGE               default_language
    QUESTIONNAIRE_SCHEMA_DIR             schema_dir
    QUESTIONNAIRE_ENFORCE_SELECT_OPTIONS enforce_select_options (true/false)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from questionnaire.exceptions import ConfigError
from questionnaire.runtime.localization import MessageCatalog, get_default_catalog

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("questionnaire.yaml")

_ENV_OVERRIDES = {
    "QUESTIONNAIRE_LANGUAGE": "default_language",
    "QUESTIONNAIRE_SCHEMA_DIR": "schema_dir",
    "QUESTIONNAIRE_ENFORCE_SELECT_OPTIONS": "enforce_select_options",
}


class EngineConfig(BaseModel):
    """Engine settings.

    Attributes:
        default_language: Language used when a caller does not pick one.
        schema_dir: Directory served by the file schema store.
        enforce_select_options: Reject select answers outside the declared
            options. On by default; turn off to accept any string.
        messages_path: Optional YAML catalog replacing the packaged messages.
    """

    model_config = ConfigDict(extra="forbid")

    default_language: str = Field(default="en", min_length=2)
    schema_dir: Path = Field(default=Path("schemas"))
    enforce_select_options: bool = Field(default=True)
    messages_path: Optional[Path] = Field(default=None)

    @field_validator("default_language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        """Language codes are stored lowercase."""
        return v.strip().lower()

    def message_catalog(self) -> MessageCatalog:
        """Catalog selected by this configuration."""
        if self.messages_path is None:
            return get_default_catalog()
        return MessageCatalog.from_file(self.messages_path)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(data)
    for env_name, key in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            merged[key] = value
    return merged


def load_engine_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Load engine configuration from YAML and the environment.

    Args:
        config_path: Explicit YAML path. Defaults to $QUESTIONNAIRE_CONFIG,
            then ``questionnaire.yaml``. A missing default file is not an error.

    Returns:
        EngineConfig with environment overrides applied

    Raises:
        ConfigError: If the file is invalid or values fail validation
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    explicit = config_path is not None or bool(os.getenv("QUESTIONNAIRE_CONFIG"))
    path = Path(config_path or os.getenv("QUESTIONNAIRE_CONFIG") or DEFAULT_CONFIG_FILE)

    data: Dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in engine config {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Engine config {path} must be a mapping")
        logger.debug(f"Loaded engine config from {path}")
    elif explicit:
        raise ConfigError(f"Engine config not found: {path}")

    try:
        return EngineConfig.model_validate(_apply_env_overrides(data))
    except ValidationError as e:
        raise ConfigError(f"Invalid engine config: {e}")


# Cached engine config (loaded once per process)
_cached_config: Optional[EngineConfig] = None


def get_engine_config(force_reload: bool = False) -> EngineConfig:
    """Get the engine configuration (cached)."""
    global _cached_config
    if force_reload or _cached_config is None:
        _cached_config = load_engine_config()
    return _cached_config


def reset_engine_config_cache() -> None:
    """Reset the cached engine configuration."""
    global _cached_config
    _cached_config = None
