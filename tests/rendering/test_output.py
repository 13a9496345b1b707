# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for output formats and the structured serializers."""

import json
from typing import Any
from xml.etree import ElementTree as ET

from spiderform.rendering import OutputFormat
from spiderform.rendering.output import to_json, to_xml

# ###############
# Test Helpers
# ###############


def _structure() -> dict[str, Any]:
    return {
        "form": {"name": "order", "action": "/order", "method": "POST", "enctype": None},
        "fields": [
            {
                "name": "size",
                "type": "select",
                "label": "Größe",
                "section": "Details",
                "required": True,
                "attributes": {"data-x": "1"},
                "options": {"s": "Small", "l": "Large"},
                "help_text": "Pick one",
                "value": "l",
            }
        ],
        "errors": {"size": ["Invalid selection"], "": ["Order rejected"]},
    }


# ###############
# Formats
# ###############


def test_content_types_and_extensions() -> None:
    assert OutputFormat.HTML.content_type == "text/html"
    assert OutputFormat.JSON.content_type == "application/json"
    assert OutputFormat.XML.content_type == "application/xml"
    assert OutputFormat.XML.extension == "xml"


def test_to_json_keeps_unicode() -> None:
    text = to_json(_structure())
    assert "Größe" in text
    assert json.loads(text) == _structure()


def test_to_xml_layout() -> None:
    root = ET.fromstring(to_xml(_structure()))

    assert root.tag == "form"
    assert root.attrib == {"name": "order", "action": "/order", "method": "POST"}

    field = root.find("fields/field")
    assert field is not None
    assert field.attrib == {"name": "size", "type": "select", "required": "true", "section": "Details"}
    assert field.findtext("label") == "Größe"
    assert field.findtext("value") == "l"
    assert field.findtext("help") == "Pick one"
    assert [(o.get("value"), o.text) for o in field.findall("option")] == [("s", "Small"), ("l", "Large")]
    attribute = field.find("attribute")
    assert attribute is not None and attribute.get("name") == "data-x"

    errors = [(e.get("path"), e.text) for e in root.findall("errors/error")]
    assert errors == [("size", "Invalid selection"), ("", "Order rejected")]
