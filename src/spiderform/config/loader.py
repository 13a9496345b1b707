# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML form configuration: parser for declarative form definitions."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic import Field as _Field

from spiderform.builder.form_builder import FieldBuilder, FormBuilder, create
from spiderform.errors import BuilderError, ConfigurationError
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
from spiderform.model.fields import FieldType, FormDefinition
from spiderform.rendering.adapters import create_adapter
from spiderform.rendering.renderer import Renderer

# ###############
# Public Interface
# ###############


class FormConfigError(ConfigurationError):
    """Raised when a form configuration file is invalid or cannot be loaded."""


class RendererSettings(BaseModel):
    """The optional ``renderer`` block of a form configuration file.

    Attributes:
        engine: ``builtin`` for the built-in HTML emitter or ``jinja2`` for
            template-based rendering.
        template_dir: Template root for the ``jinja2`` engine, relative to the
            configuration file; the shipped templates are used when omitted.
        theme: Built-in theme name.
        output_format: Default output format (``html``, ``json`` or ``xml``).
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    engine: Literal["builtin", "jinja2"] = "builtin"
    template_dir: str | None = _Field(alias="template-dir", default=None)
    theme: str = "generic"
    output_format: Literal["html", "json", "xml"] = _Field(alias="output-format", default="html")

    def create_renderer(self, base_dir: Path | None = None, translator: Any = None) -> Renderer:
        """Return a :class:`Renderer` configured from these settings.

        Raises:
            ConfigurationError: If the theme is unknown.
        """
        template_dir = None
        if self.template_dir is not None:
            template_dir = Path(self.template_dir)
            if base_dir is not None and not template_dir.is_absolute():
                template_dir = base_dir / template_dir
        return Renderer(
            create_adapter(self.engine, template_dir),
            self.theme,
            output_format=self.output_format,
            translator=translator,
        )


def load_form_definition(path: Path) -> FormDefinition:
    """Load and parse a form configuration file.

    Args:
        path: Path to the form YAML file.

    Returns:
        The immutable form definition. When the file has a ``renderer``
        block, its adapter and theme are attached to the definition.

    Raises:
        FormConfigError: If the file cannot be read or the configuration is invalid.
    """
    text = _read(path)
    return _parse_form_config(text, source_label=str(path), base_dir=path.parent)


def load_renderer_settings(path: Path) -> RendererSettings:
    """Load the ``renderer`` block of a form configuration file.

    A file without the block yields the default settings.

    Raises:
        FormConfigError: If the file cannot be read or the block is invalid.
    """
    data = _load_mapping(_read(path), str(path))
    return _parse_renderer_settings(data.get("renderer"), str(path))


STARTER_FORM = """\
# SpiderForm form definition
name: contact
action: /contact
method: POST

renderer:
  engine: builtin
  theme: bootstrap5

sections:
  - title: Contact
    fields:
      - name: name
        type: text
        label: Name
        required: true
        max-length: 100
      - name: email
        type: email
        label: Email
        required: true
      - name: message
        type: textarea
        label: Message
        min-length: 10
      - name: send
        type: submit
        label: Send
"""


# ################
# Implementation
# ################

_FORM_KEYS = frozenset({"name", "action", "method", "renderer", "types", "csrf", "sections", "fields", "constraints"})

_FIELD_KEYS = frozenset(
    {
        "name",
        "type",
        "label",
        "required",
        "min-length",
        "max-length",
        "min",
        "max",
        "pattern",
        "placeholder",
        "help-text",
        "class",
        "attributes",
        "options",
        "matches",
        "choices",
        "not-in",
        "between",
        "integer",
        "date",
        "disabled",
        "readonly",
        "default",
        "groups",
    }
)

_CONSTRAINT_TYPES: dict[str, type[Constraint]] = {
    "required": Required,
    "minLength": MinLength,
    "maxLength": MaxLength,
    "min": Min,
    "max": Max,
    "pattern": Pattern,
    "email": Email,
    "url": Url,
    "choice": Choice,
    "notIn": NotIn,
    "between": Between,
    "integer": Integer,
    "date": Date,
}

_MATCHES_KEYS = frozenset({"kind", "field", "other", "message", "groups"})


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FormConfigError(f"Form config file not found: {path}") from None
    except OSError as exc:
        raise FormConfigError(f"Cannot read form config file: {exc}") from exc


def _load_mapping(text: str, source_label: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FormConfigError(f"Invalid YAML in {source_label}: {exc}") from exc
    if not isinstance(data, dict):
        raise FormConfigError(f"{source_label}: form config must be a YAML mapping")
    return data


def _parse_form_config(text: str, source_label: str = "<string>", base_dir: Path | None = None) -> FormDefinition:
    """Parse form config YAML text into a FormDefinition.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).
        base_dir: Directory relative template paths are resolved against.

    Raises:
        FormConfigError: If the YAML is invalid, required fields are missing
            or the form is structurally invalid.
    """
    data = _load_mapping(text, source_label)
    _reject_unknown_keys(data, _FORM_KEYS, source_label)

    name = _require_string(data, "name", source_label)
    try:
        builder = create(name)
        if "action" in data:
            builder.set_action(_optional_string(data, "action", source_label))
        if "method" in data:
            builder.set_method(_optional_string(data, "method", source_label))

        settings = _parse_renderer_settings(data.get("renderer"), source_label)
        if "renderer" in data:
            renderer = settings.create_renderer(base_dir)
            builder.set_renderer(renderer.adapter)
            builder.set_theme(renderer.theme)

        for type_name, template in _optional_mapping(data, "types", source_label).items():
            if template is not None and not isinstance(template, str):
                raise FormConfigError(f"{source_label}: template of type '{type_name}' must be a string")
            builder.register_type(str(type_name), template)

        if "sections" in data and "fields" in data:
            raise FormConfigError(f"{source_label}: specify either 'sections' or 'fields', not both")
        if "fields" in data:
            _parse_fields(builder, data["fields"], source_label)
        for index, section in enumerate(_optional_list(data, "sections", source_label)):
            _parse_section(builder, section, f"{source_label}: sections[{index}]")
        _parse_constraints(builder, _optional_list(data, "constraints", source_label), source_label)
        if _optional_bool(data, "csrf", source_label):
            builder.enable_csrf()

        return builder.build_definition()
    except FormConfigError:
        raise
    except (BuilderError, ConfigurationError) as exc:
        raise FormConfigError(f"{source_label}: {exc}") from exc


def _parse_renderer_settings(raw: object, source_label: str) -> RendererSettings:
    if raw is None:
        return RendererSettings()
    if not isinstance(raw, dict):
        raise FormConfigError(f"{source_label}: 'renderer' must be a YAML mapping")
    try:
        return RendererSettings.model_validate(raw)
    except ValidationError as exc:
        raise FormConfigError(f"{source_label}: invalid renderer settings: {exc}") from exc


def _parse_constraints(builder: FormBuilder, raw: list[Any], source_label: str) -> None:
    for index, entry in enumerate(raw):
        builder.add_constraint(_parse_constraint(entry, f"{source_label}: constraints[{index}]"))


def _parse_constraint(entry: object, location: str) -> Constraint:
    """Parse a form-level constraint entry selected by its ``kind``."""
    if not isinstance(entry, dict):
        raise FormConfigError(f"{location} must be a YAML mapping")
    kind = _require_string(entry, "kind", location)
    location = f"{location} '{kind}'"
    groups = _parse_groups(entry, location)
    if kind == "matches":
        _reject_unknown_keys(entry, _MATCHES_KEYS, location)
        kwargs: dict[str, Any] = {}
        if groups is not None:
            kwargs["groups"] = groups
        if "message" in entry:
            kwargs["message"] = _require_string(entry, "message", location)
        return matches(_require_string(entry, "field", location), _require_string(entry, "other", location), **kwargs)

    constraint_type = _CONSTRAINT_TYPES.get(kind)
    if constraint_type is None:
        raise FormConfigError(f"{location}: unknown constraint kind '{kind}'")
    _reject_unknown_keys(entry, frozenset(constraint_type.model_fields), location)
    _require_string(entry, "path", location)
    params = dict(entry)
    if groups is not None:
        params["groups"] = groups
    try:
        return constraint_type.model_validate(params)
    except ValidationError as exc:
        raise FormConfigError(f"{location}: invalid constraint: {exc}") from exc


def _parse_section(builder: FormBuilder, entry: object, location: str) -> None:
    if not isinstance(entry, dict):
        raise FormConfigError(f"{location} must be a YAML mapping")
    _reject_unknown_keys(entry, frozenset({"title", "description", "fields"}), location)
    builder.add_section(
        _optional_string(entry, "title", location),
        _optional_string(entry, "description", location),
    )
    _parse_fields(builder, entry.get("fields", []), location)


def _parse_fields(builder: FormBuilder, raw: object, location: str) -> None:
    if not isinstance(raw, list):
        raise FormConfigError(f"{location}: 'fields' must be a list")
    for index, entry in enumerate(raw):
        _parse_field(builder, entry, f"{location}: fields[{index}]")


def _parse_field(builder: FormBuilder, entry: object, location: str) -> None:
    """Parse a single field entry and commit it to *builder*."""
    if not isinstance(entry, dict):
        raise FormConfigError(f"{location} must be a YAML mapping")
    _reject_unknown_keys(entry, _FIELD_KEYS, location)

    name = _require_string(entry, "name", location)
    location = f"{location} '{name}'"
    field_type = _optional_string(entry, "type", location) or FieldType.TEXT.value
    groups = _parse_groups(entry, location)

    field = builder.add_field(field_type, name, _optional_string(entry, "label", location))
    if field_type == FieldType.EMAIL.value:
        field.email(groups=groups)
    elif field_type == FieldType.URL.value:
        field.url(groups=groups)

    if _optional_bool(entry, "required", location):
        field.required(groups=groups)
    if "min-length" in entry:
        field.min_length(_require_int(entry, "min-length", location), groups=groups)
    if "max-length" in entry:
        field.max_length(_require_int(entry, "max-length", location), groups=groups)
    if "min" in entry:
        field.min(_require_number(entry, "min", location), groups=groups)
    if "max" in entry:
        field.max(_require_number(entry, "max", location), groups=groups)
    if "pattern" in entry:
        field.pattern(_require_string(entry, "pattern", location), groups=groups)
    if "matches" in entry:
        field.matches(_require_string(entry, "matches", location), groups=groups)
    if "choices" in entry:
        field.choice(_string_list(entry, "choices", location), groups=groups)
    if "not-in" in entry:
        field.not_in(_string_list(entry, "not-in", location), groups=groups)
    if "between" in entry:
        bounds = entry["between"]
        if (
            not isinstance(bounds, list)
            or len(bounds) != 2
            or any(isinstance(b, bool) or not isinstance(b, (int, float)) for b in bounds)
        ):
            raise FormConfigError(f"{location}: 'between' must be a list of two numbers")
        field.between(bounds[0], bounds[1], groups=groups)
    if _optional_bool(entry, "integer", location):
        field.integer(groups=groups)
    if _optional_bool(entry, "date", location):
        field.date(groups=groups)
    if _optional_bool(entry, "disabled", location):
        field.disabled()
    if _optional_bool(entry, "readonly", location):
        field.readonly()
    _apply_presentation(field, entry, location)
    field.add()


def _apply_presentation(field: FieldBuilder, entry: dict[str, Any], location: str) -> None:
    if "placeholder" in entry:
        field.placeholder(_require_string(entry, "placeholder", location))
    if "help-text" in entry:
        field.help_text(_require_string(entry, "help-text", location))
    if "class" in entry:
        field.add_class(_require_string(entry, "class", location))
    for key, value in _optional_mapping(entry, "attributes", location).items():
        field.attribute(str(key), value)
    if "options" in entry:
        options = entry["options"]
        if isinstance(options, list):
            options = {str(item): str(item) for item in options}
        if not isinstance(options, dict):
            raise FormConfigError(f"{location}: 'options' must be a mapping or a list")
        field.options(options)
    if "default" in entry:
        field.default(entry["default"])


def _parse_groups(entry: dict[str, Any], location: str) -> tuple[str, ...] | None:
    if "groups" not in entry:
        return None
    groups = entry["groups"]
    if isinstance(groups, str):
        return (groups,)
    if not isinstance(groups, list) or not all(isinstance(g, str) for g in groups):
        raise FormConfigError(f"{location}: 'groups' must be a string or a list of strings")
    return tuple(groups)


def _reject_unknown_keys(mapping: dict[str, Any], allowed: frozenset[str], location: str) -> None:
    unknown = sorted(str(k) for k in mapping if k not in allowed)
    if unknown:
        raise FormConfigError(f"{location}: unknown key(s) {', '.join(repr(k) for k in unknown)}")


def _require_string(mapping: dict[str, Any], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising FormConfigError if missing."""
    if key not in mapping:
        raise FormConfigError(f"{source_label}: missing required field '{key}'")
    value = mapping[key]
    if not isinstance(value, str):
        raise FormConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _optional_string(mapping: dict[str, Any], key: str, source_label: str) -> str:
    if mapping.get(key) is None:
        return ""
    return _require_string(mapping, key, source_label)


def _require_int(mapping: dict[str, Any], key: str, source_label: str) -> int:
    value = mapping[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormConfigError(f"{source_label}: '{key}' must be an integer")
    return value


def _require_number(mapping: dict[str, Any], key: str, source_label: str) -> float:
    value = mapping[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormConfigError(f"{source_label}: '{key}' must be a number")
    return value


def _optional_bool(mapping: dict[str, Any], key: str, source_label: str) -> bool:
    value = mapping.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise FormConfigError(f"{source_label}: '{key}' must be a boolean")
    return value


def _string_list(mapping: dict[str, Any], key: str, source_label: str) -> list[str]:
    value = mapping[key]
    if not isinstance(value, list) or not value:
        raise FormConfigError(f"{source_label}: '{key}' must be a non-empty list")
    return [str(item) for item in value]


def _optional_mapping(mapping: dict[str, Any], key: str, source_label: str) -> dict[Any, Any]:
    value = mapping.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise FormConfigError(f"{source_label}: '{key}' must be a YAML mapping")
    return value


def _optional_list(mapping: dict[str, Any], key: str, source_label: str) -> list[Any]:
    value = mapping.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise FormConfigError(f"{source_label}: '{key}' must be a list")
    return value
