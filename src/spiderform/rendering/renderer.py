# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Renderer dispatch: maps bound forms to HTML, JSON or XML.

For HTML, each field is rendered in declaration order:

- The theme picks a template name for the field type (a registered custom
  type may name its own template).
- With a template adapter, the template is looked up under the theme's
  build-format directory first and the ``generic`` directory second. The
  lookup result is cached per renderer instance. A template missing from
  both places is recorded as a :class:`RenderWarning` on the form and the
  field renders as an empty string.
- Without an adapter, the built-in emitter renders the field.

Fragments are then wrapped in section fieldsets and the ``<form>`` element.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from spiderform.errors import ConfigurationError
from spiderform.model.fields import PLACEHOLDER_TYPES, FieldDefinition, FieldType, FormDefinition
from spiderform.rendering.adapters import TemplateAdapter
from spiderform.rendering.emitter import emit_field, emit_form, emit_section, render_attributes
from spiderform.rendering.output import OutputFormat, to_json, to_xml
from spiderform.rendering.themes import GENERIC, GENERIC_BUILD_FORMAT, Theme, get_theme

if TYPE_CHECKING:
    from spiderform.form.runtime import Form

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class RenderWarning:
    """A non-fatal rendering problem; the affected field rendered empty.

    Attributes:
        field: Name of the field that could not be rendered.
        template: Template name that was looked up.
        message: Human-readable description of the problem.
    """

    field: str
    template: str
    message: str


class Renderer:
    """Render :class:`~spiderform.form.Form` instances.

    Args:
        adapter: Template adapter; falls back to the form definition's
            renderer, then to the built-in emitter.
        theme: A :class:`Theme` or built-in theme name; falls back to the
            definition's theme, then to the generic theme.
        output_format: Default output format of :meth:`render`.
        translator: Translator for labels, placeholders and button texts;
            falls back to the form's translator.

    A renderer may be shared between forms. Its only state is the template
    resolution cache, which is filled once per key.
    """

    def __init__(
        self,
        adapter: TemplateAdapter | None = None,
        theme: Theme | str | None = None,
        *,
        output_format: OutputFormat | str = OutputFormat.HTML,
        translator: Any = None,
    ) -> None:
        if adapter is not None and not isinstance(adapter, TemplateAdapter):
            raise ConfigurationError(f"Renderer adapter {adapter!r} does not implement the template adapter interface")
        self.adapter = adapter
        self.theme = get_theme(theme) if isinstance(theme, str) else theme
        self.output_format = _output_format(output_format)
        self.translator = translator
        self._template_cache: dict[tuple[Any, str, str], str | None] = {}

    def render(self, form: Form, output_format: OutputFormat | str | None = None) -> str:
        """Render *form* in *output_format* (default: the renderer's format)."""
        fmt = self.output_format if output_format is None else _output_format(output_format)
        if fmt is OutputFormat.JSON:
            return to_json(self.render_data(form))
        if fmt is OutputFormat.XML:
            return to_xml(self.render_data(form))
        return self.render_html(form)

    def render_html(self, form: Form) -> str:
        """Render *form* as HTML, recording render warnings on the form."""
        definition = form.definition
        theme = self._theme_for(definition)
        warnings: list[RenderWarning] = []

        sections: list[str] = []
        for section in definition.sections:
            body = "".join(self._render_field(form, f, theme, warnings) for f in section.fields)
            if section.title or section.description:
                body = emit_section(section.title, section.description, body, theme.section_class)
            sections.append(body)

        method = definition.method.upper()
        hidden = ""
        if method not in ("GET", "POST"):
            hidden = f"<input {render_attributes({'type': 'hidden', 'name': '_method', 'value': method})}>"
            method = "POST"
        attributes = {
            "name": definition.name,
            "id": definition.name,
            "action": definition.action,
            "method": method.lower(),
            "enctype": "multipart/form-data" if definition.has_file_field else None,
            "class": theme.form_class,
        }
        form.render_warnings = warnings
        return emit_form(attributes, hidden + "".join(sections))

    def render_data(self, form: Form) -> dict[str, Any]:
        """Return the structured ``{form, fields, errors}`` representation of *form*."""
        definition = form.definition
        translator = self._translator_for(form)
        fields: list[dict[str, Any]] = []
        for section in definition.sections:
            for field_def in section.fields:
                value = None if field_def.type == FieldType.PASSWORD.value else form.get_view_value(field_def.name)
                fields.append(
                    {
                        "name": field_def.name,
                        "type": field_def.type,
                        "label": _label(field_def, translator),
                        "section": section.title,
                        "required": field_def.required,
                        "attributes": dict(field_def.attributes),
                        "options": dict(field_def.options),
                        "help_text": field_def.help_text,
                        "value": value,
                    }
                )
        violations = form.violations
        return {
            "form": {
                "name": definition.name,
                "action": definition.action,
                "method": definition.method,
                "enctype": "multipart/form-data" if definition.has_file_field else None,
            },
            "fields": fields,
            "errors": violations.to_dict() if violations is not None else {},
        }

    def field_variables(self, form: Form, field_def: FieldDefinition, theme: Theme | None = None) -> dict[str, Any]:
        """Return the variables assigned to a field's template."""
        theme = theme or self._theme_for(form.definition)
        translator = self._translator_for(form)
        html_type = (field_def.field_type or FieldType.TEXT).html_type
        classes = theme.classes_for(field_def.type)

        attributes: dict[str, Any] = dict(field_def.attributes)
        role = "button" if field_def.is_button else "input"
        css = [c for c in (classes.get(role, ""), attributes.get("class", ""), *field_def.classes) if c]
        attributes["class"] = " ".join(css)
        if field_def.required:
            attributes["required"] = True
        if field_def.type in PLACEHOLDER_TYPES and not attributes.get("placeholder"):
            attributes["placeholder"] = _translate(
                translator, f"form.placeholder.{field_def.name}", _title_case(field_def.name)
            )

        value = form.get_view_value(field_def.name)
        if field_def.type == FieldType.PASSWORD.value:
            value = None
        violations = form.violations
        return {
            "name": field_def.name,
            "id": f"{form.definition.name}_{field_def.name}".replace(".", "_"),
            "type": html_type,
            "field_type": field_def.type,
            "label": _label(field_def, translator),
            "value": value,
            "checked": _is_checked(value),
            "attributes": attributes,
            "classes": classes,
            "required": field_def.required,
            "help_text": field_def.help_text,
            "options": [
                {"value": key, "label": label, "selected": _is_selected(key, value)}
                for key, label in field_def.options.items()
            ],
            "errors": violations.messages(field_def.name) if violations is not None else [],
        }

    def resolve_template(self, adapter: TemplateAdapter, build_format: str, template: str) -> str | None:
        """Return the template id for *template*, or None if no file exists.

        The build-format directory is searched before the generic one. The
        result is cached per ``(adapter, build_format, template)``; the first
        lookup of a key wins and later lookups reuse it.
        """
        key = (adapter, build_format, template)
        if key in self._template_cache:
            return self._template_cache[key]
        resolved: str | None = None
        for fmt in dict.fromkeys((build_format, GENERIC_BUILD_FORMAT)):
            candidate = adapter.resolve_template_dir(fmt) / f"{template}{adapter.suffix}"
            if candidate.is_file():
                resolved = f"{fmt}/{template}{adapter.suffix}"
                break
        logger.debug("Resolved template %s for build format %s: %s", template, build_format, resolved)
        return self._template_cache.setdefault(key, resolved)

    def _render_field(
        self,
        form: Form,
        field_def: FieldDefinition,
        theme: Theme,
        warnings: list[RenderWarning],
    ) -> str:
        variables = self.field_variables(form, field_def, theme)
        adapter = self.adapter or form.definition.renderer
        if adapter is None:
            return emit_field(variables)

        template = form.definition.custom_types.get(field_def.type) or theme.template_for(field_def.type)
        template_id = self.resolve_template(adapter, theme.build_format, template)
        if template_id is None:
            message = (
                f"There is no template file for '{template}' in '{theme.build_format}' "
                f"or '{GENERIC_BUILD_FORMAT}' (field '{field_def.name}')"
            )
            logger.warning(message)
            warnings.append(RenderWarning(field=field_def.name, template=template, message=message))
            return ""
        return adapter.render_template(template_id, {**variables, "theme": theme.name})

    def _theme_for(self, definition: FormDefinition) -> Theme:
        return self.theme or definition.theme or GENERIC

    def _translator_for(self, form: Form) -> Any:
        return self.translator if self.translator is not None else form.translator


# ################
# Implementation
# ################


def _output_format(value: OutputFormat | str) -> OutputFormat:
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(value)
    except ValueError:
        raise ConfigurationError(f"Unknown output format '{value}' (expected html, json or xml)") from None


def _translate(translator: Any, key: str, fallback: str) -> str:
    if translator is None:
        return fallback
    translated = translator.get(key)
    return fallback if translated is None else translated


def _label(field_def: FieldDefinition, translator: Any) -> str:
    prefix = "form.button" if field_def.is_button else "form.label"
    return _translate(translator, f"{prefix}.{field_def.name}", field_def.label)


def _title_case(name: str) -> str:
    return name.replace("_", " ").replace(".", " ").replace("-", " ").title()


def _is_checked(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "off", "no")
    return bool(value)


def _is_selected(option: str, value: Any) -> bool:
    if isinstance(value, (list, tuple, set)):
        return option in {str(v) for v in value}
    return value is not None and str(value) == option
