# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for renderer dispatch and template resolution."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from spiderform.builder import create
from spiderform.errors import ConfigurationError
from spiderform.form import Form
from spiderform.rendering import BOOTSTRAP5, Jinja2Adapter, OutputFormat, Renderer, RenderWarning
from spiderform.security import CsrfProtection
from spiderform.transform import StringToListTransformer
from spiderform.translation import Translator

# ###############
# Test Helpers
# ###############


class _RecordingAdapter:
    """Template adapter rendering ``<template_id>|<name>`` and recording lookups."""

    suffix = ".tpl"

    def __init__(self, root: Path) -> None:
        self.root = root
        self.rendered: list[str] = []

    def resolve_template_dir(self, build_format: str) -> Path:
        return self.root / build_format

    def render_template(self, template_id: str, variables: Mapping[str, Any]) -> str:
        self.rendered.append(template_id)
        return f"[{template_id}|{variables['name']}|{variables['theme']}]"


def _write(root: Path, relative: str, content: str = "") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _text_form(**kwargs: Any) -> Form:
    return create("contact").add_text("name", "Name").required().add().build_form(**kwargs)


# ###############
# Template Resolution
# ###############


def test_generic_template_used_when_build_format_lacks_it(tmp_path: Path) -> None:
    _write(tmp_path, "generic/input_text.tpl")
    adapter = _RecordingAdapter(tmp_path)
    form = _text_form()

    html = Renderer(adapter, BOOTSTRAP5).render(form)

    assert "[generic/input_text.tpl|name|bootstrap5]" in html
    assert form.render_warnings == []


def test_build_format_template_preferred(tmp_path: Path) -> None:
    _write(tmp_path, "generic/input_text.tpl")
    _write(tmp_path, "bootstrap5/input_text.tpl")
    adapter = _RecordingAdapter(tmp_path)

    Renderer(adapter, BOOTSTRAP5).render(_text_form())

    assert adapter.rendered == ["bootstrap5/input_text.tpl"]


def test_missing_template_renders_empty_with_one_warning(tmp_path: Path) -> None:
    adapter = _RecordingAdapter(tmp_path)
    form = _text_form()

    html = Renderer(adapter, BOOTSTRAP5).render(form)

    assert html == '<form name="contact" id="contact" method="post"></form>'
    assert adapter.rendered == []
    assert len(form.render_warnings) == 1
    warning = form.render_warnings[0]
    assert isinstance(warning, RenderWarning)
    assert warning.field == "name"
    assert warning.template == "input_text"


def test_missing_template_is_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING", logger="spiderform.rendering.renderer"):
        Renderer(_RecordingAdapter(tmp_path)).render(_text_form())
    assert "There is no template file for 'input_text'" in caplog.text


def test_resolution_is_cached_per_key(tmp_path: Path) -> None:
    adapter = _RecordingAdapter(tmp_path)
    renderer = Renderer(adapter, BOOTSTRAP5)
    assert renderer.resolve_template(adapter, "bootstrap5", "input_text") is None

    # A file created later is not seen: the first lookup wins.
    _write(tmp_path, "generic/input_text.tpl")
    assert renderer.resolve_template(adapter, "bootstrap5", "input_text") is None
    assert Renderer(adapter).resolve_template(adapter, "bootstrap5", "input_text") == "generic/input_text.tpl"


def test_warnings_are_per_form(tmp_path: Path) -> None:
    renderer = Renderer(_RecordingAdapter(tmp_path))
    first, second = _text_form(), _text_form()
    renderer.render(first)
    assert len(first.render_warnings) == 1
    assert second.render_warnings == []


def test_custom_type_template(tmp_path: Path) -> None:
    _write(tmp_path, "generic/input_color.tpl")
    adapter = _RecordingAdapter(tmp_path)
    form = (
        create("f")
        .register_type("color_picker", "input_color")
        .add_field("color_picker", "color")
        .add()
        .set_renderer(adapter)
        .build_form()
    )
    Renderer().render(form)
    assert adapter.rendered == ["generic/input_color.tpl"]


# ###############
# Built-in Emitter and Form Wrapper
# ###############


def test_builtin_emitter_without_adapter() -> None:
    form = _text_form()
    html = Renderer().render(form)
    assert '<label for="contact_name">Name <span class="required">*</span></label>' in html
    assert 'placeholder="Name"' in html
    assert " required" in html


def test_sections_wrap_in_fieldsets() -> None:
    form = (
        create("f")
        .add_section("Account", "Your login")
        .add_text("user")
        .add()
        .build_form()
    )
    html = Renderer().render(form)
    assert "<fieldset><legend>Account</legend><p>Your login</p>" in html


def test_non_post_method_uses_hidden_override() -> None:
    form = create("f").set_method("DELETE").add_submit("go", "Go").add().build_form()
    html = Renderer().render(form)
    assert 'method="post"' in html
    assert '<input type="hidden" name="_method" value="DELETE">' in html


def test_file_field_sets_enctype() -> None:
    form = create("f").add_file("upload").add().build_form()
    assert 'enctype="multipart/form-data"' in Renderer().render(form)


def test_errors_rendered_after_validation() -> None:
    form = _text_form()
    form.submit({"name": ""})
    form.get_violations()
    html = Renderer(theme="bootstrap5").render(form)
    assert '<div class="invalid-feedback">This field is required</div>' in html


def test_values_are_escaped() -> None:
    form = _text_form(data={"name": '<script>"x"</script>'})
    html = Renderer().render(form)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_csrf_token_and_disabled_inputs_rendered() -> None:
    protection = CsrfProtection()
    form = (
        create("login")
        .add_text("user")
        .disabled()
        .add()
        .enable_csrf(protection)
        .build_form()
    )
    html = Renderer().render(form)
    token = protection.generate_token("login")
    assert f'<input type="hidden" name="_csrf_token" id="login__csrf_token" value="{token}"' in html
    assert 'disabled="disabled"' in html


def test_view_values_pass_transformers() -> None:
    form = (
        create("f")
        .add_text("tags")
        .add_transformer(StringToListTransformer())
        .add()
        .build_form(data={"tags": ["a", "b"]})
    )
    assert 'value="a,b"' in Renderer().render(form)
    assert json.loads(Renderer().render(form, "json"))["fields"][0]["value"] == "a,b"


# ###############
# Field Variables
# ###############


def test_field_variables() -> None:
    form = (
        create("f")
        .add_select("dept", "Department")
        .options({"sales": "Sales", "support": "Support"})
        .add_class("wide")
        .add()
        .add_password("secret")
        .add()
        .build_form(data={"dept": "support", "secret": "hunter2"})
    )
    renderer = Renderer(theme="bootstrap5")
    dept = renderer.field_variables(form, form.definition.get_field("dept"))  # type: ignore[arg-type]
    assert dept["id"] == "f_dept"
    assert dept["attributes"]["class"] == "form-select wide"
    assert dept["options"] == [
        {"value": "sales", "label": "Sales", "selected": False},
        {"value": "support", "label": "Support", "selected": True},
    ]
    assert dept["errors"] == []

    secret = renderer.field_variables(form, form.definition.get_field("secret"))  # type: ignore[arg-type]
    assert secret["value"] is None
    assert secret["attributes"]["placeholder"] == "Secret"


def test_labels_and_placeholders_are_translated() -> None:
    translator = Translator()
    translator.add_translations(
        "en_US",
        {"form": {"label": {"name": "Full name"}, "placeholder": {"name": "Jane Doe"}, "button": {"go": "Send"}}},
    )
    form = create("f").add_text("name", "Name").add().add_submit("go", "Go").add().build_form(translator=translator)
    html = Renderer().render(form)
    assert ">Full name</label>" in html
    assert 'placeholder="Jane Doe"' in html
    assert ">Send</button>" in html


# ###############
# Structured Output
# ###############


def test_json_output() -> None:
    form = create("f").add_text("name").required().add().add_password("pw").add().build_form(data={"pw": "x"})
    form.get_violations()
    data = json.loads(Renderer(output_format=OutputFormat.JSON).render(form))
    assert data["form"] == {"name": "f", "action": "", "method": "POST", "enctype": None}
    assert [f["name"] for f in data["fields"]] == ["name", "pw"]
    assert data["fields"][1]["value"] is None
    assert data["errors"] == {"name": ["This field is required"]}


def test_xml_output_by_name() -> None:
    xml = Renderer().render(_text_form(), "xml")
    assert xml.startswith('<form name="contact"')
    assert '<field name="name" type="text" required="true" section="">' in xml


def test_unknown_output_format_rejected() -> None:
    with pytest.raises(ConfigurationError, match="Unknown output format 'pdf'"):
        Renderer(output_format="pdf")


def test_non_adapter_rejected() -> None:
    with pytest.raises(ConfigurationError):
        Renderer(adapter=object())  # type: ignore[arg-type]


# ###############
# Shipped Jinja2 Templates
# ###############


def test_shipped_bootstrap5_templates() -> None:
    form = (
        create("f")
        .set_renderer(Jinja2Adapter())
        .set_theme("bootstrap5")
        .add_email("email", "Email")
        .required()
        .add()
        .add_textarea("note")
        .add()
        .add_submit("save", "Save")
        .add()
        .build_form()
    )
    html = form.render()
    assert '<div class="mb-3">' in html
    assert 'class="form-control"' in html
    assert "<textarea" in html
    assert 'class="btn btn-primary"' in html
    assert form.render_warnings == []
