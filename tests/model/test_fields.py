# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the field, section and form definition models."""

import pydantic
import pytest

from spiderform.model import (
    FieldDefinition,
    FieldType,
    FormDefinition,
    MaxLength,
    Required,
    Section,
    is_known_type,
)

# ###############
# Helpers
# ###############


def _definition() -> FormDefinition:
    return FormDefinition(
        name="profile",
        sections=(
            Section(
                title="Account",
                fields=(
                    FieldDefinition(name="user", type="text", rules=(Required(),)),
                    FieldDefinition(name="bio", type="textarea", rules=(MaxLength(max=200),)),
                ),
            ),
            Section(
                title="Files",
                fields=(
                    FieldDefinition(name="avatar", type="file"),
                    FieldDefinition(name="save", type="submit"),
                ),
            ),
        ),
    )


# ###############
# Field Types
# ###############


def test_select_and_radio_require_options() -> None:
    """Only select and radio fields need options."""
    assert FieldType.SELECT.requires_options
    assert FieldType.RADIO.requires_options
    assert not FieldType.CHECKBOX.requires_options
    assert not FieldType.TEXT.requires_options


def test_button_and_file_flags() -> None:
    assert FieldType.SUBMIT.is_button
    assert not FieldType.TEXT.is_button
    assert FieldType.FILE.is_file


def test_html_type() -> None:
    assert FieldType.DATETIME.html_type == "datetime-local"
    assert FieldType.TEXTAREA.html_type == "textarea"


def test_is_known_type() -> None:
    assert is_known_type("email")
    assert is_known_type("datetime-local")
    assert not is_known_type("color_picker")


# ###############
# Field Definition
# ###############


def test_field_is_required_when_required_rule_attached() -> None:
    field = FieldDefinition(name="user", type="text", rules=(MaxLength(max=3), Required()))
    assert field.required
    assert not FieldDefinition(name="user", type="text").required


def test_field_type_of_custom_type_is_none() -> None:
    """A registered custom type has no built-in FieldType."""
    field = FieldDefinition(name="color", type="color_picker")
    assert field.field_type is None
    assert not field.is_button


def test_field_definition_is_frozen() -> None:
    field = FieldDefinition(name="user", type="text")
    with pytest.raises(pydantic.ValidationError):
        field.name = "other"  # type: ignore[misc]


# ###############
# Form Definition
# ###############


def test_fields_are_flattened_in_declaration_order() -> None:
    definition = _definition()
    assert [f.name for f in definition.fields] == ["user", "bio", "avatar", "save"]


def test_get_field_by_name() -> None:
    definition = _definition()
    bio = definition.get_field("bio")
    assert bio is not None
    assert bio.type == "textarea"
    assert definition.get_field("missing") is None


def test_has_file_field() -> None:
    assert _definition().has_file_field
    assert not FormDefinition(name="empty").has_file_field


def test_form_definition_defaults() -> None:
    definition = FormDefinition(name="empty")
    assert definition.method == "POST"
    assert definition.action == ""
    assert definition.renderer is None
    assert definition.theme is None
    assert definition.custom_types == {}
