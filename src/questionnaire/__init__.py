"""
Questionnaire Engine - validation and visibility for multi-language forms.

The four entry points used by a presentation layer:

    validator = compile(schema, "tr")      # or compile_validator
    errors = validate(validator, answers)
    shown = is_visible(field, answers)
    payload = process(schema, answers)
"""

__version__ = "0.1.0"

from questionnaire.exceptions import (
    ConfigError,
    QuestionnaireError,
    SchemaError,
    SchemaLoadError,
    SubmissionBlocked,
)
from questionnaire.runtime import (
    ValidatorCache,
    Validator,
    compile_validator,
    get_validator,
    is_visible,
    process,
    submit,
    validate,
)
from questionnaire.schemas import FormSchema, SubmissionResult, has_errors

compile = compile_validator

__all__ = [
    "ConfigError",
    "QuestionnaireError",
    "SchemaError",
    "SchemaLoadError",
    "SubmissionBlocked",
    "ValidatorCache",
    "Validator",
    "compile_validator",
    "get_validator",
    "is_visible",
    "process",
    "submit",
    "validate",
    "FormSchema",
    "SubmissionResult",
    "has_errors",
]
