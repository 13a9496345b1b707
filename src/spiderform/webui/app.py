# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Dash-based web UI for previewing rendered forms."""

from __future__ import annotations

import dash
from dash import html

from spiderform.form.runtime import Form
from spiderform.rendering.output import OutputFormat
from spiderform.rendering.renderer import Renderer
from spiderform.validation.violations import FORM_LEVEL_KEY

# ###############
# Public Interface
# ###############


def create_app(form: Form, renderer: Renderer | None = None) -> dash.Dash:
    """Create and configure the SpiderForm preview application.

    The form is rendered once as HTML and shown in an iframe, followed by
    its violations (when validated) and render warnings.
    """
    app = dash.Dash(
        __name__,
        title="SpiderForm Preview",
    )
    app.layout = _build_layout(form, renderer or Renderer())
    return app


# ################
# Implementation
# ################


def _build_layout(form: Form, renderer: Renderer) -> html.Div:
    """Build the application layout."""
    markup = renderer.render(form, OutputFormat.HTML)
    return html.Div(
        [
            html.H1("SpiderForm Preview"),
            html.P(f"Form: {form.name} ({form.state.value})"),
            html.Hr(),
            html.Iframe(
                id="form-preview",
                srcDoc=markup,
                style={"width": "100%", "height": "60vh", "border": "1px solid #ddd"},
            ),
            html.H2("Violations"),
            _violation_list(form),
            html.H2("Render warnings"),
            _warning_list(form),
        ],
        style={"fontFamily": "sans-serif", "padding": "2rem"},
    )


def _violation_list(form: Form) -> html.P | html.Ul:
    violations = form.violations
    if violations is None:
        return html.P("Not validated.", id="violations", style={"color": "#666"})
    if violations.is_empty():
        return html.P("No violations.", id="violations", style={"color": "#666"})
    return html.Ul(
        [html.Li(f"{v.path or FORM_LEVEL_KEY}: {v.message}") for v in violations],
        id="violations",
    )


def _warning_list(form: Form) -> html.P | html.Ul:
    if not form.render_warnings:
        return html.P("No render warnings.", id="render-warnings", style={"color": "#666"})
    return html.Ul([html.Li(w.message) for w in form.render_warnings], id="render-warnings")
