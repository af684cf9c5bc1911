"""Validator memoization keyed by (schema identity, language).

A fill-in session works with one schema and one language at a time, so the
cache holds a single entry. Switching either one drops the old entry before
the new validator is built and stores the result in one assignment, so the
old validator is never reachable for the new key, even when the rebuild fails.
"""

import logging
from typing import Any, Mapping, NamedTuple, Optional, Union

from questionnaire.runtime.localization import MessageCatalog
from questionnaire.runtime.validators import Validator, compile_validator
from questionnaire.schemas.form_schema import FormSchema

logger = logging.getLogger(__name__)


class _CacheEntry(NamedTuple):
    schema: Any
    language: str
    enforce_select_options: bool
    validator: Validator


class ValidatorCache:
    """Single-entry validator cache for one session."""

    def __init__(self, catalog: Optional[MessageCatalog] = None):
        self.catalog = catalog
        self._entry: Optional[_CacheEntry] = None
        self.hits = 0
        self.misses = 0

    def get(
        self,
        schema: Union[FormSchema, Mapping[str, Any]],
        language: str,
        *,
        enforce_select_options: bool = True,
    ) -> Validator:
        """
        Return the validator for this schema object and language.

        Identity, not equality, decides a hit: passing the same schema object
        again reuses the validator, any other object triggers a rebuild.

        Raises:
            SchemaError: If a rebuild is needed and the schema is malformed
        """
        entry = self._entry
        if (
            entry is not None
            and entry.schema is schema
            and entry.language == language
            and entry.enforce_select_options == enforce_select_options
        ):
            self.hits += 1
            return entry.validator

        self.misses += 1
        self._entry = None
        validator = compile_validator(
            schema,
            language,
            enforce_select_options=enforce_select_options,
            catalog=self.catalog,
        )
        self._entry = _CacheEntry(schema, language, enforce_select_options, validator)
        logger.debug(f"Validator cache miss for schema '{validator.schema.id}' ({language})")
        return validator

    def clear(self) -> None:
        self._entry = None

    @property
    def current(self) -> Optional[Validator]:
        return self._entry.validator if self._entry else None


_default_cache = ValidatorCache()


def get_validator(
    schema: Union[FormSchema, Mapping[str, Any]],
    language: str,
    *,
    enforce_select_options: bool = True,
) -> Validator:
    """Get a validator through the module-level cache."""
    return _default_cache.get(schema, language, enforce_select_options=enforce_select_options)


def reset_validator_cache() -> None:
    """Drop the module-level cached validator."""
    _default_cache.clear()
