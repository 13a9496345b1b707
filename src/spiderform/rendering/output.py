# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Output formats and the structured (JSON/XML) serializers."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any
from xml.etree import ElementTree as ET

# ###############
# Public Interface
# ###############


class OutputFormat(Enum):
    """Formats the renderer can produce."""

    HTML = "html"
    JSON = "json"
    XML = "xml"

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value


def to_json(structure: dict[str, Any]) -> str:
    """Serialize a render structure (``{form, fields, errors}``) to JSON."""
    return json.dumps(structure, ensure_ascii=False, default=str)


def to_xml(structure: dict[str, Any]) -> str:
    """Serialize a render structure to an XML document string.

    Layout::

        <form name=.. action=.. method=..>
          <fields>
            <field name=.. type=.. required=.. section=..>
              <label/> <value/> <help/> <attribute name=../> <option value=../>
            </field>
          </fields>
          <errors><error path=..>message</error></errors>
        </form>
    """
    form_info = structure["form"]
    root = ET.Element("form", {k: _text(v) for k, v in form_info.items() if v is not None})

    fields_el = ET.SubElement(root, "fields")
    for item in structure["fields"]:
        field_el = ET.SubElement(
            fields_el,
            "field",
            {
                "name": item["name"],
                "type": item["type"],
                "required": _text(item["required"]),
                "section": item["section"],
            },
        )
        ET.SubElement(field_el, "label").text = item["label"]
        if item.get("value") is not None:
            ET.SubElement(field_el, "value").text = _text(item["value"])
        if item.get("help_text"):
            ET.SubElement(field_el, "help").text = item["help_text"]
        for key, value in item.get("attributes", {}).items():
            ET.SubElement(field_el, "attribute", {"name": key}).text = _text(value)
        for value, label in item.get("options", {}).items():
            ET.SubElement(field_el, "option", {"value": value}).text = label

    errors_el = ET.SubElement(root, "errors")
    for path, messages in structure["errors"].items():
        for message in messages:
            ET.SubElement(errors_el, "error", {"path": path}).text = message

    return ET.tostring(root, encoding="unicode")


# ################
# Implementation
# ################

_CONTENT_TYPES = {
    OutputFormat.HTML: "text/html",
    OutputFormat.JSON: "application/json",
    OutputFormat.XML: "application/xml",
}


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)
