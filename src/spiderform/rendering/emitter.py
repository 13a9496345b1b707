# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in minimal HTML emitter.

Used for every field when no template adapter is configured, and always for
the ``<form>`` wrapper and section headers. All text is escaped with
``markupsafe``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup, escape

# ###############
# Public Interface
# ###############


def render_attributes(attributes: Mapping[str, Any]) -> Markup:
    """Return *attributes* as an escaped HTML attribute string.

    ``True`` renders a bare boolean attribute; ``False``, ``None`` and empty
    strings are skipped.
    """
    parts: list[str] = []
    for key, value in attributes.items():
        if value is None or value is False or value == "":
            continue
        if value is True:
            parts.append(str(escape(key)))
        else:
            parts.append(f'{escape(key)}="{escape(value)}"')
    return Markup(" ".join(parts))


def emit_field(variables: Mapping[str, Any]) -> str:
    """Return the HTML of one field from its render variables."""
    html_type = variables["type"]
    if html_type == "hidden":
        return _input(variables)
    if html_type == "submit":
        return _button(variables)

    classes = variables.get("classes", {})
    if html_type == "textarea":
        control = _textarea(variables)
    elif html_type == "select":
        control = _select(variables)
    elif html_type == "radio":
        control = _radios(variables)
    else:
        control = _input(variables)

    label = _label(variables)
    if html_type == "checkbox":
        body = f"{control}{label}"
    else:
        body = f"{label}{control}"

    if variables.get("help_text"):
        body += f'<small{_class_attr(classes.get("help"))}>{escape(variables["help_text"])}</small>'
    for message in variables.get("errors", []):
        body += f'<div{_class_attr(classes.get("error"))}>{escape(message)}</div>'
    return f"<div{_class_attr(classes.get('wrapper'))}>{body}</div>"


def emit_section(title: str, description: str, body: str, css_class: str = "") -> str:
    """Wrap *body* in a ``<fieldset>`` with an optional legend and description."""
    legend = f"<legend>{escape(title)}</legend>" if title else ""
    desc = f"<p>{escape(description)}</p>" if description else ""
    return f"<fieldset{_class_attr(css_class)}>{legend}{desc}{body}</fieldset>"


def emit_form(attributes: Mapping[str, Any], body: str) -> str:
    """Wrap *body* in the ``<form>`` element."""
    return f"<form {render_attributes(attributes)}>{body}</form>"


# ################
# Implementation
# ################


def _class_attr(css_class: str | None) -> str:
    return f' class="{escape(css_class)}"' if css_class else ""


def _label(variables: Mapping[str, Any]) -> str:
    if not variables.get("label"):
        return ""
    marker = ' <span class="required">*</span>' if variables.get("required") else ""
    css = _class_attr(variables.get("classes", {}).get("label"))
    return f'<label for="{escape(variables["id"])}"{css}>{escape(variables["label"])}{marker}</label>'


def _input(variables: Mapping[str, Any]) -> str:
    attrs: dict[str, Any] = {"type": variables["type"], "name": variables["name"], "id": variables["id"]}
    if variables["type"] == "checkbox":
        attrs["value"] = variables.get("checkbox_value", "1")
        attrs["checked"] = bool(variables.get("checked"))
    elif variables.get("value") is not None:
        attrs["value"] = variables["value"]
    attrs.update(variables.get("attributes", {}))
    return f"<input {render_attributes(attrs)}>"


def _textarea(variables: Mapping[str, Any]) -> str:
    attrs = {"name": variables["name"], "id": variables["id"], **variables.get("attributes", {})}
    value = variables.get("value")
    content = escape(value) if value is not None else ""
    return f"<textarea {render_attributes(attrs)}>{content}</textarea>"


def _select(variables: Mapping[str, Any]) -> str:
    attrs = {"name": variables["name"], "id": variables["id"], **variables.get("attributes", {})}
    options = "".join(
        f"<option {render_attributes({'value': o['value'], 'selected': o['selected']})}>{escape(o['label'])}</option>"
        for o in variables.get("options", [])
    )
    return f"<select {render_attributes(attrs)}>{options}</select>"


def _radios(variables: Mapping[str, Any]) -> str:
    items = []
    for index, option in enumerate(variables.get("options", [])):
        option_id = f"{variables['id']}_{index}"
        attrs = {
            "type": "radio",
            "name": variables["name"],
            "id": option_id,
            "value": option["value"],
            "checked": option["selected"],
            **variables.get("attributes", {}),
        }
        label = f'<label for="{escape(option_id)}">{escape(option["label"])}</label>'
        items.append(f"<input {render_attributes(attrs)}>{label}")
    return "".join(items)


def _button(variables: Mapping[str, Any]) -> str:
    attrs = {
        "type": "submit",
        "name": variables["name"],
        "id": variables["id"],
        "class": variables.get("classes", {}).get("button"),
        **variables.get("attributes", {}),
    }
    return f"<button {render_attributes(attrs)}>{escape(variables.get('label') or variables['name'])}</button>"
