"""
Structural operations on dynamic-list answers.

A dynamic-list answer is a list of item dicts, one key per sub-field. Every
operation returns a new list and leaves its input untouched. Item indexes
must be in range; an out-of-range index is a caller bug and raises IndexError.
Per-item validation lives with the list rule in ``validators``.
"""

from typing import Any, Dict, List, Sequence

from questionnaire.schemas.form_schema import BooleanField, DynamicListField

Item = Dict[str, Any]


def zero_value(field: Any) -> Any:
    """Empty answer for a field kind: False for booleans, [] for lists, "" otherwise."""
    if isinstance(field, BooleanField):
        return False
    if isinstance(field, DynamicListField):
        return []
    return ""


def default_item(field: DynamicListField) -> Item:
    """A new item with every sub-field set to its zero value."""
    return {sub_field.name: zero_value(sub_field) for sub_field in field.items}


def _check_index(items: Sequence[Item], index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"Item index {index} out of range for {len(items)} item(s)")


def add_item(field: DynamicListField, items: Sequence[Item]) -> List[Item]:
    """Append a default item."""
    return [dict(item) for item in items] + [default_item(field)]


def remove_item(items: Sequence[Item], index: int) -> List[Item]:
    """Drop the item at ``index``."""
    _check_index(items, index)
    return [dict(item) for position, item in enumerate(items) if position != index]


def update_item(items: Sequence[Item], index: int, sub_name: str, value: Any) -> List[Item]:
    """Replace one sub-field answer of the item at ``index``."""
    _check_index(items, index)
    updated = [dict(item) for item in items]
    updated[index][sub_name] = value
    return updated
