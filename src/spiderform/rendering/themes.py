# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Themes: field type to template and CSS class lookups per build format."""

from __future__ import annotations

from dataclasses import dataclass, field

from spiderform.errors import ConfigurationError

# ###############
# Public Interface
# ###############

GENERIC_BUILD_FORMAT = "generic"


@dataclass(frozen=True)
class Theme:
    """Template selection metadata for one CSS framework convention.

    Attributes:
        name: Theme identifier used by configuration files.
        build_format: Template directory searched before the generic one.
        template_map: Field type to template name; ``"default"`` is the fallback.
        input_classes: Field type to role (``wrapper``, ``label``, ``input``,
            ``help``, ``error``, ``button``) to CSS class; ``"default"`` is the
            fallback.
        form_class: CSS class of the ``<form>`` element.
        section_class: CSS class of each section ``<fieldset>``.
    """

    name: str
    build_format: str
    template_map: dict[str, str] = field(default_factory=dict)
    input_classes: dict[str, dict[str, str]] = field(default_factory=dict)
    form_class: str = ""
    section_class: str = ""

    def template_for(self, field_type: str) -> str:
        """Return the template name for *field_type*."""
        return self.template_map.get(field_type) or self.template_map.get("default") or "input_text"

    def classes_for(self, field_type: str) -> dict[str, str]:
        """Return the role to CSS class mapping for *field_type*."""
        return dict(self.input_classes.get(field_type) or self.input_classes.get("default") or {})


def get_theme(name: str) -> Theme:
    """Return the built-in theme called *name*.

    Raises:
        ConfigurationError: If no built-in theme has that name.
    """
    try:
        return BUILTIN_THEMES[name]
    except KeyError:
        known = ", ".join(sorted(BUILTIN_THEMES))
        raise ConfigurationError(f"Unknown theme '{name}' (known themes: {known})") from None


# ################
# Implementation
# ################

_TEXT_LIKE = ("text", "email", "password", "number", "date", "time", "datetime-local", "url", "tel")


def _template_map() -> dict[str, str]:
    templates = {t: "input_text" for t in _TEXT_LIKE}
    templates.update(
        {
            "textarea": "input_textarea",
            "select": "input_select",
            "checkbox": "input_checkbox",
            "radio": "input_radio",
            "file": "input_file",
            "hidden": "input_hidden",
            "submit": "button",
            "default": "input_text",
        }
    )
    return templates


def _classes(base: dict[str, str], overrides: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
    classes = {t: dict(base) for t in _TEXT_LIKE}
    classes["textarea"] = dict(base)
    classes["file"] = dict(base)
    classes["default"] = dict(base)
    for field_type, roles in overrides.items():
        classes[field_type] = {**base, **roles}
    return classes


GENERIC = Theme(
    name="generic",
    build_format=GENERIC_BUILD_FORMAT,
    template_map=_template_map(),
    input_classes=_classes(
        {"wrapper": "form-field", "label": "", "input": "", "help": "help", "error": "error"},
        {"submit": {"button": ""}},
    ),
)

BOOTSTRAP5 = Theme(
    name="bootstrap5",
    build_format="bootstrap5",
    template_map=_template_map(),
    input_classes=_classes(
        {
            "wrapper": "mb-3",
            "label": "form-label",
            "input": "form-control",
            "help": "form-text text-muted",
            "error": "invalid-feedback",
        },
        {
            "select": {"input": "form-select"},
            "checkbox": {"wrapper": "mb-3 form-check", "label": "form-check-label", "input": "form-check-input"},
            "radio": {"wrapper": "mb-3 form-check", "label": "form-check-label", "input": "form-check-input"},
            "submit": {"button": "btn btn-primary"},
        },
    ),
)

BOOTSTRAP3 = Theme(
    name="bootstrap3",
    build_format="bootstrap3",
    template_map=_template_map(),
    input_classes=_classes(
        {
            "wrapper": "form-group",
            "label": "control-label",
            "input": "form-control",
            "help": "help-block",
            "error": "help-block text-danger",
        },
        {
            "checkbox": {"wrapper": "checkbox", "input": ""},
            "radio": {"wrapper": "radio", "input": ""},
            "submit": {"button": "btn btn-primary"},
        },
    ),
)

TAILWIND = Theme(
    name="tailwind",
    build_format="tailwind",
    template_map=_template_map(),
    input_classes=_classes(
        {
            "wrapper": "mb-4",
            "label": "block text-sm font-medium text-gray-700 mb-1",
            "input": "w-full px-3 py-2 border border-gray-300 rounded-md",
            "help": "mt-1 text-sm text-gray-500",
            "error": "mt-1 text-sm text-red-600",
        },
        {
            "checkbox": {"input": "h-4 w-4 rounded border-gray-300"},
            "radio": {"input": "h-4 w-4 border-gray-300"},
            "submit": {"button": "px-4 py-2 bg-blue-600 text-white rounded-md"},
        },
    ),
    form_class="space-y-4",
)

BUILTIN_THEMES: dict[str, Theme] = {t.name: t for t in (GENERIC, BOOTSTRAP5, BOOTSTRAP3, TAILWIND)}
