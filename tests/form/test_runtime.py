# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the form runtime state machine."""

import logging
from collections.abc import Callable
from typing import Any
from unittest.mock import patch

import pytest

from spiderform.builder import create
from spiderform.form import EventDispatcher, Form, FormEvent, FormEvents, FormState
from spiderform.model import FormDefinition
from spiderform.rendering import Renderer
from spiderform.security import CsrfProtection
from spiderform.transform import BooleanToStringTransformer, StringToListTransformer
from spiderform.translation import Translator
from spiderform.validation import evaluate

# ###############
# Test Helpers
# ###############


def _definition() -> FormDefinition:
    return (
        create("signup")
        .add_text("name", "Name")
        .required()
        .add()
        .add_email("email", "Email")
        .required()
        .add()
        .add_text("draft_note")
        .required(groups=["Draft"])
        .add()
        .add_hidden("source", "web")
        .add()
        .add_submit("save", "Save")
        .add()
        .build_definition()
    )


# ###############
# States
# ###############


def test_new_form_is_unbound() -> None:
    form = Form(_definition())
    assert form.state is FormState.UNBOUND
    assert not form.submitted
    assert form.violations is None


def test_form_with_data_is_bound_edit_mode() -> None:
    form = Form(_definition(), {"name": "Ann"})
    assert form.state is FormState.BOUND
    assert not form.submitted
    assert form.get_value("name") == "Ann"


def test_submit_merges_and_marks_submitted() -> None:
    form = Form(_definition(), {"name": "Ann", "email": "old@example.com"})
    form.submit({"email": "new@example.com"})
    assert form.submitted
    assert form.state is FormState.BOUND
    assert form.data == {"name": "Ann", "email": "new@example.com"}


def test_set_data_replaces_without_submitting() -> None:
    form = Form(_definition(), {"name": "Ann"})
    form.set_data({"email": "a@example.com"})
    assert form.data == {"email": "a@example.com"}
    assert not form.submitted


def test_data_property_is_a_copy() -> None:
    form = Form(_definition(), {"name": "Ann"})
    form.data["name"] = "Bob"
    assert form.get_value("name") == "Ann"


# ###############
# Validation
# ###############


def test_round_trip_only_email_is_invalid() -> None:
    form = Form(_definition())
    form.submit({"name": "Ann", "email": "bad"})
    assert not form.is_valid()
    assert form.state is FormState.VALIDATED
    violations = form.get_violations()
    assert violations.paths() == ["email"]
    assert "name" not in violations


def test_validation_is_cached_and_idempotent() -> None:
    form = Form(_definition(), {"name": ""})
    with patch("spiderform.form.runtime.evaluate", wraps=evaluate) as ev:
        first = form.get_violations()
        assert form.is_valid() is False
        second = form.get_violations()
    assert first is second
    assert ev.call_count == 1


def test_submit_invalidates_cache() -> None:
    form = Form(_definition(), {"name": ""})
    first = form.get_violations()
    form.submit({"name": "Ann", "email": "ann@example.com"})
    assert form.violations is None
    assert form.is_valid()
    assert form.get_violations() is not first


def test_validation_groups() -> None:
    form = Form(_definition(), {"name": "Ann", "email": "ann@example.com"})
    assert form.is_valid()

    form.set_validation_groups(["Draft"])
    assert form.validation_groups == ("Draft",)
    assert form.state is FormState.BOUND
    assert form.get_errors() == {"draft_note": ["This field is required"]}


def test_validation_groups_from_constructor() -> None:
    form = Form(_definition(), {}, validation_groups=["Default", "Draft"])
    assert form.get_violations().paths() == ["name", "email", "draft_note"]


def test_get_errors_deep() -> None:
    definition = create("f").add_text("address.city").required().add().build_definition()
    form = Form(definition, {"address": {}})
    assert form.get_errors() == {"address.city": ["This field is required"]}
    assert form.get_errors(deep=True) == {"address": {"city": ["This field is required"]}}


def test_validated_data() -> None:
    form = Form(_definition(), {"name": "Ann", "email": "ann@example.com", "extra": "ignored"})
    assert form.validated_data() == {
        "name": "Ann",
        "email": "ann@example.com",
        "draft_note": None,
        "source": "web",
    }
    form.submit({"email": "bad"})
    assert form.validated_data() is None


def test_get_value_falls_back_to_default() -> None:
    form = Form(_definition())
    assert form.get_value("source") == "web"
    assert form.get_value("unknown") is None


def test_field_defaults_count_as_values_for_validation() -> None:
    definition = create("f").add_hidden("token", "abc").required().add().build_definition()
    assert Form(definition).is_valid()
    assert Form(definition, {}).is_valid()
    assert Form(definition, {"token": ""}).get_errors() == {"token": ["This field is required"]}


# ###############
# Disabled Fields and Transformers
# ###############


def test_submit_ignores_disabled_fields() -> None:
    definition = create("f").add_text("user").disabled().add().add_text("bio").add().build_definition()
    form = Form(definition, {"user": "ann"})
    form.submit({"user": "mallory", "bio": "hi"})
    assert form.data == {"user": "ann", "bio": "hi"}


def test_submit_reverse_transforms_and_render_transforms() -> None:
    definition = (
        create("f")
        .add_text("tags")
        .add_transformer(StringToListTransformer())
        .between(1, 2)
        .add()
        .add_checkbox("agree")
        .add_transformer(BooleanToStringTransformer())
        .add()
        .build_definition()
    )
    form = Form(definition).submit({"tags": "a, b,,", "agree": "on"})
    assert form.data == {"tags": ["a", "b"], "agree": True}
    assert form.is_valid()
    assert form.get_view_value("tags") == "a,b"
    assert form.get_view_value("agree") == "1"


def test_failed_reverse_transform_keeps_submitted_value(caplog: pytest.LogCaptureFixture) -> None:
    definition = create("f").add_checkbox("agree").add_transformer(BooleanToStringTransformer()).add().build_definition()
    with caplog.at_level(logging.WARNING, logger="spiderform.form.runtime"):
        form = Form(definition).submit({"agree": "maybe"})
    assert form.get_value("agree") == "maybe"
    assert form.get_view_value("agree") == "1"
    assert "Cannot transform submitted value of field 'agree'" in caplog.text


# ###############
# Events
# ###############


def test_submit_event_order_and_data() -> None:
    seen: list[tuple[str, Any]] = []

    def _pre_submit(event: FormEvent) -> None:
        seen.append(("pre_submit", dict(event.data)))
        event.data["name"] = event.data["name"].strip()

    def _record(name: str) -> Callable[[FormEvent], None]:
        return lambda event: seen.append((name, event.data))

    definition = (
        create("f")
        .add_text("name")
        .required()
        .add()
        .add_event_listener(FormEvents.PRE_SUBMIT, _pre_submit)
        .add_event_listener(FormEvents.SUBMIT, _record("submit"))
        .add_event_listener(FormEvents.POST_SUBMIT, _record("post_submit"))
        .add_event_listener(FormEvents.VALIDATION_SUCCESS, lambda event: seen.append(("valid", len(event.data))))
        .build_definition()
    )
    form = Form(definition).submit({"name": "  Ann "})
    assert form.is_valid()
    assert seen == [
        ("pre_submit", {"name": "  Ann "}),
        ("submit", {"name": "Ann"}),
        ("post_submit", {"name": "Ann"}),
        ("valid", 0),
    ]


def test_set_data_events_may_replace_data() -> None:
    def _defaults(event: FormEvent) -> None:
        event.data = {"country": "DE", **event.data}

    posted: list[dict[str, Any]] = []
    definition = (
        create("f")
        .add_text("country")
        .add()
        .add_event_listener(FormEvents.PRE_SET_DATA, _defaults)
        .add_event_listener(FormEvents.POST_SET_DATA, lambda event: posted.append(event.data))
        .build_definition()
    )
    form = Form(definition, {"city": "Berlin"})
    assert form.data == {"country": "DE", "city": "Berlin"}
    assert posted == [{"country": "DE", "city": "Berlin"}]
    assert not form.submitted


def test_validation_error_event_and_dispatcher_override() -> None:
    dispatcher = EventDispatcher()
    trees: list[Any] = []
    dispatcher.add_listener(FormEvents.VALIDATION_ERROR, lambda event: trees.append(event.data))
    form = Form(_definition(), {}, dispatcher=dispatcher)
    assert not form.is_valid()
    assert trees == [form.violations]


# ###############
# CSRF
# ###############


def _protected(protection: CsrfProtection) -> FormDefinition:
    return create("login").add_text("user").add().enable_csrf(protection).build_definition()


def test_csrf_token_is_rendered_and_checked_on_submit() -> None:
    protection = CsrfProtection()
    definition = _protected(protection)
    token = Form(definition).get_view_value("_csrf_token")
    assert token == protection.generate_token("login")

    form = Form(definition).submit({"user": "ann", "_csrf_token": token})
    assert form.is_valid()
    assert form.validated_data() == {"user": "ann"}


def test_csrf_violation_when_token_missing_or_wrong() -> None:
    definition = _protected(CsrfProtection())
    for data in ({"user": "ann"}, {"user": "ann", "_csrf_token": "forged"}):
        form = Form(definition).submit(data)
        violation = form.get_violations().first("_csrf_token")
        assert violation is not None
        assert violation.code == "invalid_csrf"
        assert violation.message == "The CSRF token is invalid. Please try to resubmit the form."


def test_csrf_not_checked_before_submit() -> None:
    assert Form(_protected(CsrfProtection()), {"user": "ann"}).is_valid()


def test_csrf_message_is_translated() -> None:
    translator = Translator()
    translator.add_translations("en_US", {"form": {"error": {"invalid_csrf": "Session expired"}}})
    form = Form(_protected(CsrfProtection()), translator=translator).submit({"user": "ann"})
    assert form.get_errors() == {"_csrf_token": ["Session expired"]}


# ###############
# Rendering
# ###############


def test_render_with_default_renderer() -> None:
    html = Form(_definition(), {"name": "Ann"}).render()
    assert html.startswith('<form name="signup"')
    assert 'value="Ann"' in html


def test_render_delegates_to_renderer() -> None:
    form = Form(_definition())
    renderer = Renderer()
    with patch.object(Renderer, "render", return_value="out") as render:
        assert form.render(renderer, "json") == "out"
    render.assert_called_once_with(form, "json")


def test_repr() -> None:
    assert repr(Form(_definition())) == "Form(name='signup', state=unbound)"
