"""Pydantic models for questionnaire form schemas.

A form schema is produced by an external authoring tool and consumed, read-only,
for the life of one fill-in session. Field kinds form a closed discriminated
union: each variant only carries the attributes meaningful to it, so a
``text`` field with ``options`` or a ``boolean`` field with ``validation`` is
rejected when the schema is parsed.

The authoring tool writes the kind under ``type`` and dynamic-list sub-fields
under ``fields``; both spellings are accepted alongside ``kind`` and ``items``.
"""

from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
)
from pydantic.alias_generators import to_camel

LocalizedText = Dict[str, str]
"""Language code to string, e.g. ``{"en": "Name", "tr": "Ad"}``."""


class FieldKind(str, Enum):
    """Closed set of field kinds understood by the engine."""

    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    DYNAMIC_LIST = "dynamicList"


class ConditionOperator(str, Enum):
    """Comparison operators available to visibility conditions."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    LT = "lt"
    CONTAINS = "contains"


class FormOption(BaseModel):
    """One choice of a select field."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: str = Field(..., description="Value stored in the answers")
    label: LocalizedText = Field(default_factory=dict, description="Display label per language")


class Condition(BaseModel):
    """Compares another field's current answer against a constant."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    field: str = Field(..., min_length=1, description="Name of the referenced top-level field")
    operator: ConditionOperator = Field(..., description="Comparison operator")
    value: Any = Field(default=None, description="Constant to compare against")


class FieldValidation(BaseModel):
    """Length, pattern and numeric bounds for free-text fields."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    pattern: Optional[str] = Field(default=None, description="Regex the whole trimmed value must match")
    min_value: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("min", "minValue", "min_value")
    )
    max_value: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("max", "maxValue", "max_value")
    )


# ── Field variants ───────────────────────────────────────────────────

class _FieldBase(BaseModel):
    """Attributes shared by every field kind."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, description="Unique key across the whole schema")
    label: LocalizedText = Field(default_factory=dict)
    placeholder: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    required: bool = False
    conditions: List[Condition] = Field(default_factory=list)

    @property
    def is_conditional(self) -> bool:
        return bool(self.conditions)


def _kind_field(kind: str) -> Any:
    return Field(default=kind, validation_alias=AliasChoices("kind", "type"))


class TextField(_FieldBase):
    kind: Literal["text"] = _kind_field("text")
    validation: Optional[FieldValidation] = None


class TextareaField(_FieldBase):
    kind: Literal["textarea"] = _kind_field("textarea")
    validation: Optional[FieldValidation] = None


class DateField(_FieldBase):
    kind: Literal["date"] = _kind_field("date")


class BooleanField(_FieldBase):
    kind: Literal["boolean"] = _kind_field("boolean")


class SelectField(_FieldBase):
    kind: Literal["select"] = _kind_field("select")
    options: List[FormOption] = Field(default_factory=list)

    @property
    def option_values(self) -> List[str]:
        return [option.value for option in self.options]


def _field_kind(value: Any) -> Optional[str]:
    """Read the kind tag from raw input or from an already-built model."""
    if isinstance(value, dict):
        return value.get("kind", value.get("type"))
    return getattr(value, "kind", None)


SubField = Annotated[
    Union[
        Annotated[TextField, Tag("text")],
        Annotated[TextareaField, Tag("textarea")],
        Annotated[DateField, Tag("date")],
        Annotated[BooleanField, Tag("boolean")],
        Annotated[SelectField, Tag("select")],
    ],
    Discriminator(_field_kind),
]
"""A field inside a dynamic-list item: any kind except ``dynamicList``."""


class DynamicListField(_FieldBase):
    kind: Literal["dynamicList"] = _kind_field("dynamicList")
    items: List[SubField] = Field(
        default_factory=list, validation_alias=AliasChoices("items", "fields")
    )


FormField = Annotated[
    Union[
        Annotated[TextField, Tag("text")],
        Annotated[TextareaField, Tag("textarea")],
        Annotated[DateField, Tag("date")],
        Annotated[BooleanField, Tag("boolean")],
        Annotated[SelectField, Tag("select")],
        Annotated[DynamicListField, Tag("dynamicList")],
    ],
    Discriminator(_field_kind),
]

AnyField = Union[TextField, TextareaField, DateField, BooleanField, SelectField, DynamicListField]


# ── Containers ───────────────────────────────────────────────────────

class Section(BaseModel):
    """An ordered group of fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1)
    title: LocalizedText = Field(default_factory=dict)
    description: Optional[LocalizedText] = None
    fields: List[FormField] = Field(default_factory=list)


class FormSchema(BaseModel):
    """A complete questionnaire: sections of fields with their rules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., min_length=1)
    title: LocalizedText = Field(default_factory=dict)
    description: Optional[LocalizedText] = None
    sections: List[Section] = Field(default_factory=list)

    def iter_fields(self) -> Iterator[AnyField]:
        """Yield every top-level field in section order, then field order."""
        for section in self.sections:
            yield from section.fields

    def field_names(self) -> List[str]:
        return [field.name for field in self.iter_fields()]

    def get_field(self, name: str) -> AnyField:
        """Look up a top-level field by name.

        Raises:
            KeyError: If no top-level field has that name.
        """
        for field in self.iter_fields():
            if field.name == name:
                return field
        raise KeyError(name)
