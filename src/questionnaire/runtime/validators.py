"""
Schema-driven validation for questionnaire answers.

``compile_validator`` turns a form schema and a language into a reusable
``Validator``; ``validate`` applies it to an answer snapshot and returns an
error map. Compilation is the expensive step: the schema is checked, one rule
per field is built and every message is rendered for the active language.
Changing the language therefore means compiling a new validator.

Required-ness is resolved in two phases:
- Fields without conditions get static rules, applied on every call.
- Fields with conditions get gated rules. A hidden field cannot be required,
  so a gated rule only runs after ``is_visible`` confirms the field is shown
  for the current answers. Hidden fields always report None.

Rules per kind:
- text / textarea: value is trimmed; required fails on empty; length bounds
  apply to the trimmed value and pattern must match all of it, for any
  present string including a blank one (only an absent answer skips them);
  min / max require a non-blank value to be numeric and within bounds.
- date: required fails on an empty string; no calendar check.
- boolean: absent means False; required means "must be True".
- select: required fails on an empty string; with option enforcement on, a
  value outside the declared options is rejected.
- dynamicList: required fails on zero items; each item is checked against the
  sub-field rules and reports under ``<list>[<index>].<sub-field>``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from questionnaire.exceptions import SchemaError
from questionnaire.runtime.conditions import as_number, is_visible
from questionnaire.runtime.localization import MessageCatalog, field_label, get_default_catalog
from questionnaire.schemas.form_schema import (
    AnyField,
    BooleanField,
    DateField,
    DynamicListField,
    FieldValidation,
    FormSchema,
    SelectField,
    TextareaField,
    TextField,
)
from questionnaire.schemas.results import ErrorMap

logger = logging.getLogger(__name__)

ScalarRule = Callable[[Any], Optional[str]]


# ── Schema checks ────────────────────────────────────────────────────

def parse_schema(schema: Union[FormSchema, Mapping[str, Any]]) -> FormSchema:
    """
    Accept a parsed schema or a raw mapping and return a FormSchema.

    Raises:
        SchemaError: If the mapping does not describe a valid schema
            (unknown field kind, attributes that do not belong to a kind, ...)
    """
    if isinstance(schema, FormSchema):
        return schema
    if not isinstance(schema, Mapping):
        raise SchemaError(f"Schema must be a mapping, got {type(schema).__name__}")

    try:
        return FormSchema.model_validate(schema)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise SchemaError(
            f"Invalid form schema ({e.error_count()} error(s)); first at '{location}': {first['msg']}"
        ) from e


def check_schema(schema: FormSchema) -> None:
    """
    Check the cross-field invariants pydantic cannot express.

    - field names are unique across the whole schema
    - sub-field names are unique within their list and never equal a
      dynamic-list field's name
    - sub-fields carry no conditions
    - conditions reference existing top-level fields only
    - patterns are valid regular expressions

    Raises:
        SchemaError: On the first violation found
    """
    top_level: Dict[str, AnyField] = {}
    for field in schema.iter_fields():
        if field.name in top_level:
            raise SchemaError("duplicate field name", field.name)
        top_level[field.name] = field

    list_names = {
        field.name for field in top_level.values() if isinstance(field, DynamicListField)
    }
    sub_field_names = set()

    for field in top_level.values():
        _check_pattern(field)
        if not isinstance(field, DynamicListField):
            continue

        seen = set()
        for sub_field in field.items:
            path = f"{field.name}.{sub_field.name}"
            if sub_field.name in seen:
                raise SchemaError("duplicate sub-field name", path)
            if sub_field.name in list_names:
                raise SchemaError("sub-field name collides with a dynamic-list field", path)
            if sub_field.conditions:
                raise SchemaError("sub-fields cannot carry conditions", path)
            _check_pattern(sub_field, path)
            seen.add(sub_field.name)
        sub_field_names.update(seen)

    for field in top_level.values():
        for condition in field.conditions:
            if condition.field in top_level:
                continue
            if condition.field in sub_field_names:
                raise SchemaError(
                    f"condition references sub-field '{condition.field}'; "
                    "only top-level fields can gate visibility",
                    field.name,
                )
            raise SchemaError(f"condition references unknown field '{condition.field}'", field.name)


def _check_pattern(field: AnyField, path: Optional[str] = None) -> None:
    validation = getattr(field, "validation", None)
    if validation is None or not validation.pattern:
        return
    try:
        re.compile(validation.pattern)
    except re.error as e:
        raise SchemaError(f"invalid pattern '{validation.pattern}': {e}", path or field.name)


# ── Rule builders ────────────────────────────────────────────────────

def _text_rule(
    field: Union[TextField, TextareaField],
    language: str,
    catalog: MessageCatalog,
) -> ScalarRule:
    label = field_label(field, language)
    validation = field.validation or FieldValidation()
    required = field.required
    min_length = validation.min_length
    max_length = validation.max_length
    min_value = validation.min_value
    max_value = validation.max_value
    pattern = re.compile(validation.pattern) if validation.pattern else None

    required_message = catalog.render("required", language, label=label)
    type_message = catalog.render("invalid_type", language, label=label)
    min_length_message = catalog.render("min_length", language, label=label, limit=min_length)
    max_length_message = catalog.render("max_length", language, label=label, limit=max_length)
    pattern_message = catalog.render("pattern", language, label=label)
    number_message = catalog.render("not_a_number", language, label=label)
    min_value_message = catalog.render("min_value", language, label=label, limit=_format_limit(min_value))
    max_value_message = catalog.render("max_value", language, label=label, limit=_format_limit(max_value))

    def rule(value: Any) -> Optional[str]:
        if value is None:
            return required_message if required else None
        if not isinstance(value, str):
            return type_message

        text = value.strip()
        if not text and required:
            return required_message

        # A present string is bounded even when blank; only an absent answer skips
        if min_length is not None and len(text) < min_length:
            return min_length_message
        if max_length is not None and len(text) > max_length:
            return max_length_message
        if pattern is not None and pattern.fullmatch(text) is None:
            return pattern_message

        if text and (min_value is not None or max_value is not None):
            number = as_number(text)
            if number is None:
                return number_message
            if min_value is not None and number < min_value:
                return min_value_message
            if max_value is not None and number > max_value:
                return max_value_message
        return None

    return rule


def _date_rule(field: DateField, language: str, catalog: MessageCatalog) -> ScalarRule:
    label = field_label(field, language)
    required = field.required
    required_message = catalog.render("required", language, label=label)
    type_message = catalog.render("invalid_type", language, label=label)

    def rule(value: Any) -> Optional[str]:
        if value is None:
            value = ""
        if not isinstance(value, str):
            return type_message
        if required and value == "":
            return required_message
        return None

    return rule


def _boolean_rule(field: BooleanField, language: str, catalog: MessageCatalog) -> ScalarRule:
    label = field_label(field, language)
    required = field.required
    accept_message = catalog.render("must_accept", language, label=label)
    type_message = catalog.render("invalid_type", language, label=label)

    def rule(value: Any) -> Optional[str]:
        if value is None:
            value = False
        if not isinstance(value, bool):
            return type_message
        if required and value is not True:
            return accept_message
        return None

    return rule


def _select_rule(
    field: SelectField,
    language: str,
    catalog: MessageCatalog,
    enforce_options: bool,
) -> ScalarRule:
    label = field_label(field, language)
    required = field.required
    allowed = frozenset(field.option_values)
    required_message = catalog.render("required", language, label=label)
    type_message = catalog.render("invalid_type", language, label=label)
    option_message = catalog.render("invalid_option", language, label=label)

    def rule(value: Any) -> Optional[str]:
        if value is None:
            value = ""
        if not isinstance(value, str):
            return type_message
        if not value.strip():
            return required_message if required else None
        if enforce_options and value not in allowed:
            return option_message
        return None

    return rule


def _scalar_rule(
    field: AnyField,
    language: str,
    catalog: MessageCatalog,
    enforce_options: bool,
) -> ScalarRule:
    if isinstance(field, (TextField, TextareaField)):
        return _text_rule(field, language, catalog)
    if isinstance(field, DateField):
        return _date_rule(field, language, catalog)
    if isinstance(field, BooleanField):
        return _boolean_rule(field, language, catalog)
    if isinstance(field, SelectField):
        return _select_rule(field, language, catalog, enforce_options)
    raise SchemaError(f"unsupported field kind '{field.kind}'", field.name)


class ListRule:
    """Validates a dynamic-list answer and each of its items."""

    def __init__(
        self,
        field: DynamicListField,
        language: str,
        catalog: MessageCatalog,
        enforce_options: bool,
    ):
        label = field_label(field, language)
        self.name = field.name
        self.required = field.required
        self.required_message = catalog.render("required", language, label=label)
        self.type_message = catalog.render("invalid_type", language, label=label)
        self.item_rules: List[Tuple[str, ScalarRule]] = [
            (sub_field.name, _scalar_rule(sub_field, language, catalog, enforce_options))
            for sub_field in field.items
        ]

    def __call__(self, value: Any) -> Tuple[Optional[str], Dict[str, str]]:
        if value is None:
            value = []
        if not isinstance(value, (list, tuple)):
            return self.type_message, {}

        item_errors: Dict[str, str] = {}
        for index, item in enumerate(value):
            if not isinstance(item, Mapping):
                item_errors[f"{self.name}[{index}]"] = self.type_message
                continue
            for sub_name, rule in self.item_rules:
                message = rule(item.get(sub_name))
                if message is not None:
                    item_errors[f"{self.name}[{index}].{sub_name}"] = message

        if self.required and len(value) == 0:
            return self.required_message, item_errors
        return None, item_errors


def _format_limit(limit: Optional[float]) -> Any:
    if limit is not None and float(limit).is_integer():
        return int(limit)
    return limit


# ── Compiled validator ───────────────────────────────────────────────

@dataclass(frozen=True)
class CompiledField:
    """One field's rule, bound to the field it came from."""

    field: AnyField
    rule: Callable[[Any], Any]
    is_list: bool = False

    @property
    def name(self) -> str:
        return self.field.name

    def apply(self, answers: Mapping[str, Any]) -> Tuple[Optional[str], Dict[str, str]]:
        result = self.rule(answers.get(self.field.name))
        if self.is_list:
            return result
        return result, {}


@dataclass(frozen=True, eq=False)
class Validator:
    """
    Rules for one (schema, language) pair.

    Built by ``compile_validator``; immutable and safe to reuse for any number
    of answer snapshots.
    """

    schema: FormSchema
    language: str
    static_rules: Tuple[CompiledField, ...]
    gated_rules: Tuple[CompiledField, ...]
    enforce_select_options: bool = True

    @property
    def field_names(self) -> List[str]:
        return self.schema.field_names()

    def validate(self, answers: Mapping[str, Any]) -> ErrorMap:
        """
        Validate an answer snapshot.

        Args:
            answers: Current answers keyed by field name

        Returns:
            Error map with every top-level field in declared order (message or
            None), followed by failing dynamic-list item paths
        """
        errors: ErrorMap = {name: None for name in self.field_names}
        item_errors: Dict[str, str] = {}

        for compiled in self.static_rules:
            message, nested = compiled.apply(answers)
            errors[compiled.name] = message
            item_errors.update(nested)

        for compiled in self.gated_rules:
            if not is_visible(compiled.field, answers):
                continue
            message, nested = compiled.apply(answers)
            errors[compiled.name] = message
            item_errors.update(nested)

        errors.update(item_errors)
        return errors

    __call__ = validate


def compile_validator(
    schema: Union[FormSchema, Mapping[str, Any]],
    language: str,
    *,
    enforce_select_options: bool = True,
    catalog: Optional[MessageCatalog] = None,
) -> Validator:
    """
    Build a validator for a schema and language.

    Args:
        schema: Parsed FormSchema or raw schema mapping
        language: Language code used to render every message
        enforce_select_options: Reject select values outside the declared options
        catalog: Message templates (defaults to the packaged catalog)

    Returns:
        Validator closing over the schema and language

    Raises:
        SchemaError: If the schema is malformed
    """
    form = parse_schema(schema)
    check_schema(form)
    catalog = catalog or get_default_catalog()

    static_rules: List[CompiledField] = []
    gated_rules: List[CompiledField] = []

    for field in form.iter_fields():
        if isinstance(field, DynamicListField):
            compiled = CompiledField(
                field=field,
                rule=ListRule(field, language, catalog, enforce_select_options),
                is_list=True,
            )
        else:
            compiled = CompiledField(
                field=field,
                rule=_scalar_rule(field, language, catalog, enforce_select_options),
            )

        if field.is_conditional:
            gated_rules.append(compiled)
        else:
            static_rules.append(compiled)

    logger.debug(
        f"Compiled validator for schema '{form.id}' ({language}): "
        f"{len(static_rules)} static, {len(gated_rules)} gated rules"
    )

    return Validator(
        schema=form,
        language=language,
        static_rules=tuple(static_rules),
        gated_rules=tuple(gated_rules),
        enforce_select_options=enforce_select_options,
    )


def validate(validator: Validator, answers: Mapping[str, Any]) -> ErrorMap:
    """Apply a compiled validator to an answer snapshot."""
    return validator.validate(answers)
