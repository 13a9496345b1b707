# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the constraint variants."""

from unittest.mock import MagicMock

from spiderform.model import (
    DEFAULT_GROUP,
    Callback,
    Choice,
    Max,
    MaxLength,
    Min,
    MinLength,
    Pattern,
    Required,
    matches,
)

# ###############
# Tags and Parameters
# ###############


def test_kind_tags() -> None:
    assert Required().kind == "required"
    assert MinLength(min=1).kind == "minLength"
    assert MaxLength(max=1).kind == "maxLength"
    assert Pattern(regex="x").kind == "pattern"
    assert Callback(callback=lambda data, context: None).kind == "callback"


def test_parameters_for_interpolation() -> None:
    assert MinLength(min=3).parameters() == {"min": 3}
    assert MaxLength(max=10).parameters() == {"max": 10}
    assert Pattern(regex="^a").parameters() == {"pattern": "^a"}
    assert Choice(choices=("a", "b")).parameters() == {"choices": "a, b"}


def test_whole_number_bounds_format_without_fraction() -> None:
    assert Min(min=5).parameters() == {"min": 5}
    assert Max(max=2.5).parameters() == {"max": 2.5}


# ###############
# Groups
# ###############


def test_default_group() -> None:
    rule = Required()
    assert rule.groups == (DEFAULT_GROUP,)
    assert rule.applies_to(["Default"])
    assert not rule.applies_to(["Draft"])


def test_groups_intersect() -> None:
    rule = Required(groups=("Draft", "Publish"))
    assert rule.applies_to(("Publish",))
    assert not rule.applies_to(("Default",))


# ###############
# matches()
# ###############


def test_matches_reports_mismatch_on_field() -> None:
    values = {"password": "abc123", "password_confirm": "xyz"}
    context = MagicMock()
    context.get_value.side_effect = values.get

    rule = matches("password_confirm", "password", message="Passwords do not match")
    rule.callback(values, context)

    context.add_violation.assert_called_once_with(
        "password_confirm", "Passwords do not match", {"other": "password"}
    )


def test_matches_ignores_empty_and_equal_values() -> None:
    context = MagicMock()
    rule = matches("confirm", "password")

    context.get_value.side_effect = {"password": "a", "confirm": "a"}.get
    rule.callback({}, context)
    context.get_value.side_effect = {"password": "a", "confirm": ""}.get
    rule.callback({}, context)

    context.add_violation.assert_not_called()


def test_matches_passes_groups() -> None:
    rule = matches("confirm", "password", groups=("Registration",))
    assert rule.groups == ("Registration",)
