"""
Form state reducer.

Every user interaction becomes an event; ``reduce`` maps the current answers
and one event to new answers and a fresh error map. Nothing is mutated, so an
interactive front end only has to keep the latest ``FormState`` and feed
events through this function.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from questionnaire.runtime.cache import ValidatorCache, get_validator
from questionnaire.runtime.repeatable import add_item, remove_item, update_item
from questionnaire.schemas.form_schema import DynamicListField, FormSchema
from questionnaire.schemas.results import ErrorMap


@dataclass(frozen=True)
class AnswerChanged:
    name: str
    value: Any


@dataclass(frozen=True)
class ItemAdded:
    field: str


@dataclass(frozen=True)
class ItemRemoved:
    field: str
    index: int


@dataclass(frozen=True)
class ItemAnswerChanged:
    field: str
    index: int
    sub_name: str
    value: Any


FormEvent = Union[AnswerChanged, ItemAdded, ItemRemoved, ItemAnswerChanged]


@dataclass(frozen=True)
class FormState:
    answers: Dict[str, Any] = field(default_factory=dict)
    errors: ErrorMap = field(default_factory=dict)


def _list_field(schema: FormSchema, name: str) -> DynamicListField:
    form_field = schema.get_field(name)
    if not isinstance(form_field, DynamicListField):
        raise KeyError(f"'{name}' is not a dynamic-list field")
    return form_field


def apply_event(schema: FormSchema, answers: Mapping[str, Any], event: FormEvent) -> Dict[str, Any]:
    """
    Return new answers with one event applied.

    Raises:
        KeyError: If the event names a field the schema does not have
        IndexError: If an item event points outside the list
    """
    updated = dict(answers)

    if isinstance(event, AnswerChanged):
        schema.get_field(event.name)
        updated[event.name] = event.value
    elif isinstance(event, ItemAdded):
        list_field = _list_field(schema, event.field)
        updated[event.field] = add_item(list_field, answers.get(event.field) or [])
    elif isinstance(event, ItemRemoved):
        _list_field(schema, event.field)
        updated[event.field] = remove_item(answers.get(event.field) or [], event.index)
    elif isinstance(event, ItemAnswerChanged):
        _list_field(schema, event.field)
        updated[event.field] = update_item(
            answers.get(event.field) or [], event.index, event.sub_name, event.value
        )
    else:
        raise TypeError(f"Unsupported form event: {type(event).__name__}")

    return updated


def reduce(
    schema: FormSchema,
    language: str,
    answers: Mapping[str, Any],
    event: FormEvent,
    *,
    cache: Optional[ValidatorCache] = None,
    enforce_select_options: bool = True,
) -> FormState:
    """Apply an event and revalidate the resulting answers."""
    new_answers = apply_event(schema, answers, event)
    if cache is not None:
        validator = cache.get(schema, language, enforce_select_options=enforce_select_options)
    else:
        validator = get_validator(schema, language, enforce_select_options=enforce_select_options)
    return FormState(answers=new_answers, errors=validator.validate(new_answers))
