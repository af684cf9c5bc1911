"""
Submission shaping - turns raw answers into the payload handed to transport.

Only fields that are visible for the submitted answers make it into the
payload. A field hidden by a later answer change is dropped entirely, even if
the user typed a value into it earlier, so stale data never leaks out.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Union

from questionnaire.runtime.conditions import is_visible
from questionnaire.runtime.repeatable import zero_value
from questionnaire.runtime.validators import Validator, check_schema, parse_schema
from questionnaire.schemas.form_schema import FormSchema
from questionnaire.schemas.results import SubmissionResult, has_errors

logger = logging.getLogger(__name__)


def process(
    schema: Union[FormSchema, Mapping[str, Any]],
    raw_answers: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Build the clean answer map for a submission.

    Args:
        schema: Parsed FormSchema or raw schema mapping
        raw_answers: Answers as captured by the presentation layer

    Returns:
        One key per visible field, in declared order. Visible fields with no
        answer get their kind's zero value; hidden fields are omitted.

    Raises:
        SchemaError: If the schema is malformed, as in ``compile_validator``
    """
    form = parse_schema(schema)
    check_schema(form)
    clean: Dict[str, Any] = {}
    omitted = 0

    for field in form.iter_fields():
        if not is_visible(field, raw_answers):
            omitted += 1
            continue
        value = raw_answers.get(field.name)
        clean[field.name] = zero_value(field) if value is None else copy.deepcopy(value)

    if omitted:
        logger.debug(f"Omitted {omitted} hidden field(s) from submission of '{form.id}'")
    return clean


def submit(validator: Validator, answers: Mapping[str, Any]) -> SubmissionResult:
    """
    Validate and shape a submission in one step.

    The payload is only produced when validation passes; otherwise the result
    is blocked and carries the error map.
    """
    errors = validator.validate(answers)
    if has_errors(errors):
        return SubmissionResult(errors=errors, payload=None)
    return SubmissionResult(errors=errors, payload=process(validator.schema, answers))
