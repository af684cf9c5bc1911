"""Result shapes returned by validation and submission."""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field

from questionnaire.exceptions import SubmissionBlocked

ErrorMap = Dict[str, Optional[str]]
"""Field name (or item path such as ``children[0].name``) to message or None.

Every top-level field appears in declared order; ``None`` means valid or
hidden. Failing dynamic-list sub-fields follow under their item paths.
"""


def has_errors(errors: Mapping[str, Optional[str]]) -> bool:
    """True if any entry carries a message."""
    return any(message is not None for message in errors.values())


def collect_errors(errors: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Keep only the entries that carry a message, preserving order."""
    return {key: message for key, message in errors.items() if message is not None}


class SubmissionResult(BaseModel):
    """Outcome of validating and shaping one submission."""

    errors: Dict[str, Optional[str]] = Field(default_factory=dict)
    payload: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Clean answers for the transport; None while errors remain",
    )

    @property
    def blocked(self) -> bool:
        return self.payload is None

    def raise_for_errors(self) -> Dict[str, Any]:
        """Return the payload, or raise SubmissionBlocked if validation failed."""
        if self.payload is None:
            raise SubmissionBlocked(collect_errors(self.errors))
        return self.payload
