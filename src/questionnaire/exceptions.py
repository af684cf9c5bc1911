"""Exception classes for the questionnaire engine.

Only schema-shape problems abort the flow with an exception. Invalid user
input is never raised: it is reported as a value in the error map returned by
``validate``.
"""

from typing import Dict, Optional


class QuestionnaireError(Exception):
    """Base exception class for all questionnaire engine errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class SchemaError(QuestionnaireError):
    """Raised by ``compile`` when a form schema is malformed.

    Fatal for that schema: the caller must refuse to render the form rather
    than guess a fallback.
    """

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        if field_name:
            message = f"Field '{field_name}': {message}"
        super().__init__(message)


class SchemaLoadError(QuestionnaireError):
    """Raised when a schema file cannot be read or decoded."""

    pass


class ConfigError(QuestionnaireError):
    """Raised when the engine configuration is invalid."""

    pass


class SubmissionBlocked(QuestionnaireError):
    """Raised on request when a submission still has validation errors.

    The engine itself never raises this for user input; it is only produced by
    ``SubmissionResult.raise_for_errors()`` for callers that prefer exceptions.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        fields = ", ".join(errors)
        super().__init__(f"Submission blocked by {len(errors)} invalid field(s): {fields}")
