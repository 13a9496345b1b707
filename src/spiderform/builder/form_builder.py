# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Fluent construction of form definitions.

Example::

    form = (
        create("register")
        .add_section("Account")
        .add_email("email", "Email").required().add()
        .add_password("password", "Password").required().min_length(8).add()
        .add_password("password_confirm", "Confirm")
        .matches("password", message="Passwords do not match").add()
        .add_submit("save", "Register").add()
        .build_form()
    )

Every ``add_*`` call on :class:`FormBuilder` opens a :class:`FieldBuilder`;
``add()`` commits it and hands the form builder back. Structural mistakes
raise :class:`~spiderform.errors.BuilderError` as soon as they can be
detected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from spiderform.errors import BuilderError, ConfigurationError
from spiderform.form.events import EventDispatcher, EventSubscriber, FormEvents, Listener
from spiderform.form.runtime import Form
from spiderform.model.constraints import (
    Between,
    Choice,
    Constraint,
    Date,
    Email,
    Integer,
    Max,
    MaxLength,
    Min,
    MinLength,
    NotIn,
    Pattern,
    Required,
    Url,
    matches,
)
from spiderform.model.fields import FieldDefinition, FieldType, FormDefinition, Section, is_known_type
from spiderform.providers.options import OptionsProvider
from spiderform.rendering.adapters import TemplateAdapter
from spiderform.rendering.themes import Theme, get_theme
from spiderform.security.csrf import DEFAULT_FIELD_NAME, CsrfProtection
from spiderform.transform.transformers import DataTransformer

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def create(name: str) -> FormBuilder:
    """Start building a form called *name*."""
    return FormBuilder(name)


class FormBuilder:
    """Collects sections, fields and form-level settings."""

    def __init__(self, name: str) -> None:
        if not name:
            raise BuilderError("Form name must not be empty")
        self._name = name
        self._sections: list[_SectionDraft] = []
        self._constraints: list[Constraint] = []
        self._pending: list[FieldBuilder] = []
        self._names: set[str] = set()
        self._custom_types: dict[str, str | None] = {}
        self._action = ""
        self._method = "POST"
        self._renderer: TemplateAdapter | None = None
        self._theme: Theme | None = None
        self._events = EventDispatcher()
        self._csrf: CsrfProtection | None = None
        self._csrf_field = ""
        self._csrf_token_id = ""
        self._definition: FormDefinition | None = None

    # -- fields ---------------------------------------------------------------

    def add_field(self, field_type: str | FieldType, name: str, label: str = "") -> FieldBuilder:
        """Open a field of *field_type*, built-in or registered with :meth:`register_type`."""
        self._check_open()
        type_name = field_type.value if isinstance(field_type, FieldType) else field_type
        if not is_known_type(type_name) and type_name not in self._custom_types:
            raise ConfigurationError(f"Unknown field type '{type_name}' for field '{name}'")
        builder = FieldBuilder(self, type_name, name, label)
        self._pending.append(builder)
        return builder

    def add_text(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.TEXT, name, label)

    def add_email(self, name: str, label: str = "") -> FieldBuilder:
        """Open an email field; an :class:`Email` constraint is attached."""
        return self.add_field(FieldType.EMAIL, name, label).email()

    def add_password(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.PASSWORD, name, label)

    def add_number(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.NUMBER, name, label)

    def add_select(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.SELECT, name, label)

    def add_radio(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.RADIO, name, label)

    def add_checkbox(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.CHECKBOX, name, label)

    def add_textarea(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.TEXTAREA, name, label)

    def add_hidden(self, name: str, value: Any = None) -> FieldBuilder:
        return self.add_field(FieldType.HIDDEN, name).default(value)

    def add_submit(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.SUBMIT, name, label)

    def add_file(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.FILE, name, label)

    def add_date(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.DATE, name, label)

    def add_time(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.TIME, name, label)

    def add_datetime(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.DATETIME, name, label)

    def add_url(self, name: str, label: str = "") -> FieldBuilder:
        """Open a URL field; a :class:`Url` constraint is attached."""
        return self.add_field(FieldType.URL, name, label).url()

    def add_tel(self, name: str, label: str = "") -> FieldBuilder:
        return self.add_field(FieldType.TEL, name, label)

    # -- form level -----------------------------------------------------------

    def add_section(self, title: str, description: str = "") -> FormBuilder:
        """Open a section; fields added afterwards belong to it."""
        self._check_open()
        self._sections.append(_SectionDraft(title, description))
        return self

    def add_constraint(self, constraint: Constraint) -> FormBuilder:
        """Attach a form-level constraint evaluated against the whole data."""
        self._check_open()
        self._constraints.append(constraint)
        return self

    def register_type(self, name: str, template: str | None = None) -> FormBuilder:
        """Register a custom field type rendered with *template* (or the theme default)."""
        self._check_open()
        if not name:
            raise BuilderError("Custom field type name must not be empty")
        self._custom_types[name] = template
        return self

    def set_renderer(self, renderer: TemplateAdapter | None) -> FormBuilder:
        self._check_open()
        if renderer is not None and not isinstance(renderer, TemplateAdapter):
            raise ConfigurationError(f"Renderer {renderer!r} does not implement the template adapter interface")
        self._renderer = renderer
        return self

    def set_theme(self, theme: Theme | str | None) -> FormBuilder:
        self._check_open()
        self._theme = get_theme(theme) if isinstance(theme, str) else theme
        return self

    def set_action(self, action: str) -> FormBuilder:
        self._check_open()
        self._action = action
        return self

    def set_method(self, method: str) -> FormBuilder:
        self._check_open()
        verb = method.upper()
        if verb not in HTTP_METHODS:
            raise BuilderError(f"Unsupported HTTP method '{method}' (expected one of {', '.join(HTTP_METHODS)})")
        self._method = verb
        return self

    def add_event_listener(self, event: FormEvents, listener: Listener, priority: int = 0) -> FormBuilder:
        """Register *listener* for *event* on every form built from this definition."""
        self._check_open()
        self._events.add_listener(event, listener, priority)
        return self

    def add_event_subscriber(self, subscriber: EventSubscriber) -> FormBuilder:
        self._check_open()
        self._events.add_subscriber(subscriber)
        return self

    def enable_csrf(
        self,
        protection: CsrfProtection | None = None,
        *,
        field_name: str = DEFAULT_FIELD_NAME,
        token_id: str | None = None,
    ) -> FormBuilder:
        """Protect submissions with a CSRF token carried in the hidden field *field_name*.

        The token id defaults to the form name. Submitted forms without the
        current token get a violation at *field_name*.
        """
        self._check_open()
        if self._csrf is not None:
            raise BuilderError(f"CSRF protection of form '{self._name}' is already enabled")
        self.add_hidden(field_name).add()
        self._csrf = protection or CsrfProtection()
        self._csrf_field = field_name
        self._csrf_token_id = token_id or self._name
        return self

    # -- build ----------------------------------------------------------------

    def build_definition(self) -> FormDefinition:
        """Validate the structure and return the immutable definition.

        The builder is finalized afterwards; further mutations raise
        :class:`BuilderError`. Building again returns the same definition.

        Raises:
            BuilderError: If a field sub-builder was never committed or two
                fields share a name.
        """
        if self._definition is not None:
            return self._definition
        if self._pending:
            names = ", ".join(f"'{b.name}'" for b in self._pending)
            raise BuilderError(f"Field(s) {names} of form '{self._name}' were never committed with add()")

        seen: set[str] = set()
        for draft in self._sections:
            for field_def in draft.fields:
                if field_def.name in seen:
                    raise BuilderError(f"Duplicate field name '{field_def.name}' in form '{self._name}'")
                seen.add(field_def.name)

        self._definition = FormDefinition(
            name=self._name,
            sections=tuple(
                Section(title=d.title, description=d.description, fields=tuple(d.fields)) for d in self._sections
            ),
            constraints=tuple(self._constraints),
            action=self._action,
            method=self._method,
            renderer=self._renderer,
            theme=self._theme,
            custom_types=dict(self._custom_types),
            events=self._events,
            csrf=self._csrf,
            csrf_field=self._csrf_field,
            csrf_token_id=self._csrf_token_id,
        )
        logger.debug("Built form '%s' with %d field(s)", self._name, len(seen))
        return self._definition

    def build_form(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        validation_groups: Iterable[str] | None = None,
        translator: Any = None,
    ) -> Form:
        """Build the definition and bind it to a new :class:`Form`."""
        return Form(
            self.build_definition(),
            data,
            validation_groups=validation_groups,
            translator=translator,
        )

    def _check_open(self) -> None:
        if self._definition is not None:
            raise BuilderError(f"Form '{self._name}' has already been built and can no longer be modified")

    def _commit(self, builder: FieldBuilder, field_def: FieldDefinition) -> FormBuilder:
        self._check_open()
        if field_def.name in self._names:
            raise BuilderError(f"Duplicate field name '{field_def.name}' in form '{self._name}'")
        if not self._sections:
            self._sections.append(_SectionDraft("", ""))
        self._sections[-1].fields.append(field_def)
        self._names.add(field_def.name)
        self._pending.remove(builder)
        return self


class FieldBuilder:
    """Configures one field until :meth:`add` commits it.

    Constraint-creating modifiers accept ``groups`` (validation groups the
    rule belongs to) and ``message`` (overrides the default message).
    """

    def __init__(self, form: FormBuilder, field_type: str, name: str, label: str) -> None:
        if not name:
            raise BuilderError("Field name must not be empty")
        self._form = form
        self.name = name
        self.type = field_type
        self._label = label
        self._attributes: dict[str, str] = {}
        self._classes: list[str] = []
        self._options: dict[str, str] = {}
        self._provider: OptionsProvider | None = None
        self._rules: list[Constraint] = []
        self._choice: dict[str, Any] | None = None
        self._help_text = ""
        self._default: Any = None
        self._transformers: list[DataTransformer] = []
        self._committed = False

    def required(self, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        return self._rule(Required, groups, message)

    def min_length(
        self, length: int, *, groups: Iterable[str] | None = None, message: str | None = None
    ) -> FieldBuilder:
        self._rule(MinLength, groups, message, min=length)
        self._attributes["minlength"] = str(length)
        return self

    def max_length(
        self, length: int, *, groups: Iterable[str] | None = None, message: str | None = None
    ) -> FieldBuilder:
        self._rule(MaxLength, groups, message, max=length)
        self._attributes["maxlength"] = str(length)
        return self

    def min(self, value: float, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        self._rule(Min, groups, message, min=value)
        self._attributes["min"] = _number_text(value)
        return self

    def max(self, value: float, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        self._rule(Max, groups, message, max=value)
        self._attributes["max"] = _number_text(value)
        return self

    def pattern(self, regex: str, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        self._rule(Pattern, groups, message, regex=regex)
        self._attributes["pattern"] = regex
        return self

    def email(self, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        return self._rule(Email, groups, message)

    def url(self, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        return self._rule(Url, groups, message)

    def choice(
        self,
        choices: Iterable[str] | None = None,
        *,
        groups: Iterable[str] | None = None,
        message: str | None = None,
    ) -> FieldBuilder:
        """Restrict the value to *choices*, or to the option keys when omitted."""
        self._check_open()
        self._choice = {
            "choices": None if choices is None else tuple(str(c) for c in choices),
            **_rule_kwargs(groups, message),
        }
        return self

    def not_in(
        self, choices: Iterable[str], *, groups: Iterable[str] | None = None, message: str | None = None
    ) -> FieldBuilder:
        """Reject the values in *choices*."""
        return self._rule(NotIn, groups, message, choices=tuple(str(c) for c in choices))

    def between(
        self, low: float, high: float, *, groups: Iterable[str] | None = None, message: str | None = None
    ) -> FieldBuilder:
        """Require a number, text length or item count from *low* to *high*."""
        if low > high:
            raise BuilderError(f"Field '{self.name}': between() needs low <= high, got {low} and {high}")
        return self._rule(Between, groups, message, min=low, max=high)

    def integer(self, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        return self._rule(Integer, groups, message)

    def date(self, *, groups: Iterable[str] | None = None, message: str | None = None) -> FieldBuilder:
        return self._rule(Date, groups, message)

    def matches(
        self,
        other: str,
        *,
        groups: Iterable[str] | None = None,
        message: str | None = None,
    ) -> FieldBuilder:
        """Require this field to equal the field *other*; violations land on this field."""
        self._check_open()
        self._rules.append(matches(self.name, other, **_rule_kwargs(groups, message)))
        return self

    def constraint(self, constraint: Constraint) -> FieldBuilder:
        self._check_open()
        self._rules.append(constraint)
        return self

    def placeholder(self, text: str) -> FieldBuilder:
        return self.attribute("placeholder", text)

    def help_text(self, text: str) -> FieldBuilder:
        self._check_open()
        self._help_text = text
        return self

    def add_class(self, css_class: str) -> FieldBuilder:
        self._check_open()
        self._classes.extend(c for c in css_class.split() if c not in self._classes)
        return self

    def attribute(self, key: str, value: Any) -> FieldBuilder:
        self._check_open()
        self._attributes[key] = value if isinstance(value, str) else str(value)
        return self

    def options(self, options: Mapping[Any, Any] | OptionsProvider) -> FieldBuilder:
        """Set the choices of a select or radio field.

        *options* is either a value to label mapping or an
        :class:`~spiderform.providers.OptionsProvider`, queried on :meth:`add`.
        """
        self._check_open()
        if isinstance(options, Mapping):
            self._options = {str(k): str(v) for k, v in options.items()}
            self._provider = None
        elif isinstance(options, OptionsProvider):
            self._provider = options
        else:
            raise BuilderError(f"Options of field '{self.name}' must be a mapping or an options provider")
        return self

    def disabled(self, flag: bool = True) -> FieldBuilder:
        """Render the input disabled; submitted values for it are ignored."""
        return self._flag("disabled", flag)

    def readonly(self, flag: bool = True) -> FieldBuilder:
        return self._flag("readonly", flag)

    def add_transformer(self, transformer: DataTransformer) -> FieldBuilder:
        """Append a data transformer; see :mod:`spiderform.transform`."""
        self._check_open()
        if not isinstance(transformer, DataTransformer):
            raise BuilderError(f"Transformer {transformer!r} of field '{self.name}' lacks transform/reverse_transform")
        self._transformers.append(transformer)
        return self

    def set_transformers(self, transformers: Iterable[DataTransformer]) -> FieldBuilder:
        self._check_open()
        self._transformers = []
        for transformer in transformers:
            self.add_transformer(transformer)
        return self

    def default(self, value: Any) -> FieldBuilder:
        self._check_open()
        self._default = value
        return self

    def add(self) -> FormBuilder:
        """Commit this field to the form and return the form builder.

        Raises:
            BuilderError: If the field was already committed, its name is
                taken, or a select/radio field has no options.
            ProviderConnectionError: If an options provider fails.
        """
        if self._committed:
            raise BuilderError(f"Field '{self.name}' has already been added")
        if self._provider is not None:
            self._options = {str(k): str(v) for k, v in self._provider.get_options().items()}

        field_type = FieldType(self.type) if is_known_type(self.type) else None
        if field_type is not None and field_type.requires_options and not self._options:
            raise BuilderError(f"{field_type.value.capitalize()} field '{self.name}' needs at least one option")

        rules = list(self._rules)
        if self._choice is not None:
            settings = dict(self._choice)
            choices = settings.pop("choices") or tuple(self._options)
            rules.append(Choice(choices=choices, **settings))

        field_def = FieldDefinition(
            name=self.name,
            type=self.type,
            label=self._label,
            attributes=dict(self._attributes),
            classes=tuple(self._classes),
            options=dict(self._options),
            rules=tuple(rules),
            help_text=self._help_text,
            default=self._default,
            transformers=tuple(self._transformers),
        )
        form = self._form._commit(self, field_def)
        self._committed = True
        return form

    def _rule(
        self, rule_type: type[Constraint], groups: Iterable[str] | None, message: str | None, **params: Any
    ) -> FieldBuilder:
        self._check_open()
        self._rules.append(rule_type(**params, **_rule_kwargs(groups, message)))
        return self

    def _flag(self, name: str, flag: bool) -> FieldBuilder:
        self._check_open()
        if flag:
            self._attributes[name] = name
        else:
            self._attributes.pop(name, None)
        return self

    def _check_open(self) -> None:
        if self._committed:
            raise BuilderError(f"Field '{self.name}' has already been added and can no longer be modified")
        self._form._check_open()


# ################
# Implementation
# ################


class _SectionDraft:
    def __init__(self, title: str, description: str) -> None:
        self.title = title
        self.description = description
        self.fields: list[FieldDefinition] = []


def _rule_kwargs(groups: Iterable[str] | None, message: str | None) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if groups is not None:
        kwargs["groups"] = (groups,) if isinstance(groups, str) else tuple(groups)
    if message is not None:
        kwargs["message"] = message
    return kwargs


def _number_text(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
