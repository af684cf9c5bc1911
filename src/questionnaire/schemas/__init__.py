"""Pydantic models for form schemas and engine results."""

from questionnaire.schemas.form_schema import (
    BooleanField,
    Condition,
    ConditionOperator,
    DateField,
    DynamicListField,
    FieldKind,
    FieldValidation,
    FormOption,
    FormSchema,
    LocalizedText,
    Section,
    SelectField,
    TextareaField,
    TextField,
)
from questionnaire.schemas.results import ErrorMap, SubmissionResult, collect_errors, has_errors

__all__ = [
    "BooleanField",
    "Condition",
    "ConditionOperator",
    "DateField",
    "DynamicListField",
    "FieldKind",
    "FieldValidation",
    "FormOption",
    "FormSchema",
    "LocalizedText",
    "Section",
    "SelectField",
    "TextareaField",
    "TextField",
    "ErrorMap",
    "SubmissionResult",
    "collect_errors",
    "has_errors",
]
