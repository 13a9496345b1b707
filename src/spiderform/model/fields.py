# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Field, section and form definition models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from spiderform.model.constraints import Constraint, Required

# ###############
# Public Interface
# ###############


class FieldType(Enum):
    """Input types known without registration."""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    HIDDEN = "hidden"
    SUBMIT = "submit"
    FILE = "file"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime-local"
    URL = "url"
    TEL = "tel"

    @property
    def requires_options(self) -> bool:
        """Return True if the type cannot be committed without options."""
        return self in (FieldType.SELECT, FieldType.RADIO)

    @property
    def is_button(self) -> bool:
        return self is FieldType.SUBMIT

    @property
    def is_file(self) -> bool:
        return self is FieldType.FILE

    @property
    def html_type(self) -> str:
        """Return the ``type`` passed to templates; textarea and select name their element."""
        return self.value


# Field types whose empty placeholder defaults to the title-cased field name.
PLACEHOLDER_TYPES = frozenset(
    {
        FieldType.TEXT.value,
        FieldType.EMAIL.value,
        FieldType.PASSWORD.value,
        FieldType.TEXTAREA.value,
        FieldType.NUMBER.value,
        FieldType.URL.value,
        FieldType.TEL.value,
    }
)


def is_known_type(type_name: str) -> bool:
    """Return True if *type_name* is a built-in :class:`FieldType` value."""
    return type_name in _KNOWN_TYPES


class FieldDefinition(BaseModel):
    """Static description of one form input.

    Attributes:
        name: Key of the field within the form; dots address nested data.
        type: A :class:`FieldType` value or a registered custom type name.
        label: Display label (translated at render time when a translation exists).
        attributes: Extra HTML attributes in declaration order.
        classes: CSS classes added on top of the theme's input class.
        options: Value to display-label mapping for select and radio fields.
        rules: Constraints in attachment order.
        help_text: Help text rendered next to the input.
        default: Initial value used when the bound data has no entry.
        transformers: Data transformers converting between the model value
            and the submitted view value, applied in order on submit.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    label: str = ""
    attributes: dict[str, str] = _Field(default_factory=dict)
    classes: tuple[str, ...] = ()
    options: dict[str, str] = _Field(default_factory=dict)
    rules: tuple[Constraint, ...] = ()
    help_text: str = ""
    default: Any = None
    transformers: tuple[Any, ...] = ()

    @property
    def required(self) -> bool:
        """Return True if a ``Required`` constraint is attached."""
        return any(isinstance(rule, Required) for rule in self.rules)

    @property
    def field_type(self) -> FieldType | None:
        """Return the built-in type, or None for a custom type."""
        return _KNOWN_TYPES.get(self.type)

    @property
    def is_button(self) -> bool:
        return self.field_type is not None and self.field_type.is_button

    @property
    def disabled(self) -> bool:
        """Return True if submitted values for this field are ignored."""
        return "disabled" in self.attributes

    @property
    def readonly(self) -> bool:
        return "readonly" in self.attributes


class Section(BaseModel):
    """An ordered group of fields rendered under a common header."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    fields: tuple[FieldDefinition, ...] = ()


class FormDefinition(BaseModel):
    """Immutable blueprint of an entire form.

    A definition is produced once by the builder (or the YAML loader) and
    shared read-only by every :class:`~spiderform.form.Form` bound to it.
    ``renderer`` holds a template adapter and ``theme`` a
    :class:`~spiderform.rendering.Theme`; both are optional.

    ``events`` is an :class:`~spiderform.form.EventDispatcher` with the
    listeners registered while building. ``csrf`` is a
    :class:`~spiderform.security.CsrfProtection` guarding the form through
    the hidden field ``csrf_field``; it is None for unprotected forms.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    sections: tuple[Section, ...] = ()
    constraints: tuple[Constraint, ...] = ()
    action: str = ""
    method: str = "POST"
    renderer: Any = None
    theme: Any = None
    custom_types: dict[str, str | None] = _Field(default_factory=dict)
    events: Any = None
    csrf: Any = None
    csrf_field: str = ""
    csrf_token_id: str = ""

    @property
    def fields(self) -> list[FieldDefinition]:
        """Return all fields in section and declaration order."""
        return [f for section in self.sections for f in section.fields]

    def get_field(self, name: str) -> FieldDefinition | None:
        """Return the field called *name*, or None."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def has_file_field(self) -> bool:
        return any(f.type == FieldType.FILE.value for f in self.fields)

    @property
    def is_csrf_protected(self) -> bool:
        return self.csrf is not None and bool(self.csrf_field)


# ################
# Implementation
# ################

_KNOWN_TYPES: dict[str, FieldType] = {t.value: t for t in FieldType}
