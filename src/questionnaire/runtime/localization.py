"""Language lookups for schema text and validation messages.

The language code is always passed in explicitly; there is no ambient
"current language" anywhere in the engine.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jinja2 import Template

from questionnaire.exceptions import ConfigError

logger = logging.getLogger(__name__)

FALLBACK_LANGUAGE = "en"

# Default catalog shipped with the package
MESSAGES_PATH = Path(__file__).parent / "messages.yaml"


def resolve_text(
    text: Optional[Mapping[str, str]],
    language: str,
    fallback_language: str = FALLBACK_LANGUAGE,
) -> str:
    """Pick the best string for a language from a localized mapping.

    Lookup order is the requested language, then the fallback language, then
    the first non-empty value in declaration order. Empty strings count as
    missing at every step.

    Args:
        text: Language code to string mapping (may be None)
        language: Requested language code
        fallback_language: Language tried when the requested one is missing

    Returns:
        The resolved string, or "" when nothing is available
    """
    if not text:
        return ""
    if text.get(language):
        return text[language]
    if text.get(fallback_language):
        return text[fallback_language]
    for value in text.values():
        if value:
            return value
    return ""


def field_label(field: Any, language: str) -> str:
    """Resolve a field's label, falling back to its name."""
    return resolve_text(field.label, language) or field.name


class MessageCatalog:
    """Validation message templates keyed by message id, then language.

    Templates are Jinja2 strings such as ``"{{ label }} is required"``.
    """

    def __init__(self, messages: Mapping[str, Mapping[str, str]]):
        self.messages: Dict[str, Dict[str, str]] = {
            message_id: dict(texts) for message_id, texts in messages.items()
        }
        self._templates: Dict[str, Template] = {}

    @classmethod
    def from_file(cls, path: Path) -> "MessageCatalog":
        """Load a catalog from a YAML file.

        Raises:
            ConfigError: If the file is missing or not a mapping of mappings
        """
        if not path.exists():
            raise ConfigError(f"Message catalog not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in message catalog {path}: {e}")

        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            raise ConfigError(f"Message catalog {path} must map message ids to language mappings")

        logger.debug(f"Loaded {len(data)} message templates from {path}")
        return cls(data)

    @property
    def languages(self) -> set:
        found = set()
        for texts in self.messages.values():
            found.update(texts)
        return found

    def render(self, message_id: str, language: str, **context: Any) -> str:
        """Render a message for a language.

        Raises:
            KeyError: If the catalog has no entry for ``message_id``
        """
        source = resolve_text(self.messages[message_id], language)
        template = self._templates.get(source)
        if template is None:
            template = Template(source)
            self._templates[source] = template
        return template.render(**context)


_default_catalog: Optional[MessageCatalog] = None


def get_default_catalog() -> MessageCatalog:
    """Return the packaged message catalog (loaded once)."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = MessageCatalog.from_file(MESSAGES_PATH)
    return _default_catalog
