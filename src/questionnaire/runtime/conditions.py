"""
Condition evaluation - decides whether a field is currently visible.

A field with conditions is shown (and its rules enforced) only while every one
of its conditions holds against the current answers. Conditions combine with
logical AND; there is no OR grouping.

Operator semantics:
- A referenced answer that is absent or None makes the condition false, so an
  unanswered prerequisite keeps the gate closed.
- eq / neq are type-sensitive: a boolean only equals a boolean, and a string
  never equals a number.
- gt / lt compare as numbers when both operands are numeric (int or float that
  is not a bool, or a string that parses as a finite number); otherwise both
  operands are converted with str() and compared lexicographically.
- contains is true only when the answer is a list, tuple or set holding the
  constant; any other answer yields false.
"""

import math
from typing import Any, Mapping, Optional

from questionnaire.schemas.form_schema import Condition, ConditionOperator

COLLECTION_TYPES = (list, tuple, set, frozenset)


def as_number(value: Any) -> Optional[float]:
    """Return value as a float if it is numeric, None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _strict_equals(left: Any, right: Any) -> bool:
    # bool is an int subclass in Python, so True == 1 must be ruled out by hand
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    return left == right


def _compare(left: Any, right: Any) -> int:
    """Three-way comparison following the numeric-then-lexicographic policy."""
    left_number = as_number(left)
    right_number = as_number(right)
    if left_number is not None and right_number is not None:
        a, b = left_number, right_number
    else:
        a, b = str(left), str(right)
    return (a > b) - (a < b)


def evaluate_condition(condition: Condition, answers: Mapping[str, Any]) -> bool:
    """
    Evaluate a single condition against an answer snapshot.

    Args:
        condition: The condition to test
        answers: Current answers keyed by field name

    Returns:
        True if the condition holds
    """
    answer = answers.get(condition.field)
    if answer is None:
        return False

    operator = condition.operator
    expected = condition.value

    if operator == ConditionOperator.EQ:
        return _strict_equals(answer, expected)
    if operator == ConditionOperator.NEQ:
        return not _strict_equals(answer, expected)
    if operator == ConditionOperator.GT:
        return _compare(answer, expected) > 0
    if operator == ConditionOperator.LT:
        return _compare(answer, expected) < 0
    if operator == ConditionOperator.CONTAINS:
        if not isinstance(answer, COLLECTION_TYPES):
            return False
        return any(_strict_equals(member, expected) for member in answer)

    return False


def is_visible(field: Any, answers: Mapping[str, Any]) -> bool:
    """
    Decide whether a field is visible for the given answers.

    Args:
        field: Any top-level schema field
        answers: Current answers keyed by field name

    Returns:
        True if the field has no conditions or all of them hold
    """
    if not field.conditions:
        return True
    return all(evaluate_condition(condition, answers) for condition in field.conditions)
