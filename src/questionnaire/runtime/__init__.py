"""
Runtime engine for schema-driven questionnaires.

Components:
1. Condition evaluation - conditions (is_visible)
2. Validation compiler - validators, with cache for memoized validators
3. Repeatable groups - repeatable (dynamic-list item operations)
4. Submission shaping - submission (process, submit)
5. Form reducer - reducer (event-driven state updates)
"""

from questionnaire.runtime.cache import ValidatorCache, get_validator, reset_validator_cache
from questionnaire.runtime.conditions import evaluate_condition, is_visible
from questionnaire.runtime.reducer import (
    AnswerChanged,
    FormState,
    ItemAdded,
    ItemAnswerChanged,
    ItemRemoved,
    reduce,
)
from questionnaire.runtime.repeatable import add_item, default_item, remove_item, update_item
from questionnaire.runtime.submission import process, submit
from questionnaire.runtime.validators import Validator, check_schema, compile_validator, validate

__all__ = [
    "ValidatorCache",
    "get_validator",
    "reset_validator_cache",
    "evaluate_condition",
    "is_visible",
    "AnswerChanged",
    "FormState",
    "ItemAdded",
    "ItemAnswerChanged",
    "ItemRemoved",
    "reduce",
    "add_item",
    "default_item",
    "remove_item",
    "update_item",
    "process",
    "submit",
    "Validator",
    "check_schema",
    "compile_validator",
    "validate",
]
