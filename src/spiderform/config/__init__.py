# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declarative YAML form configuration."""

from spiderform.config.loader import (
    STARTER_FORM,
    FormConfigError,
    RendererSettings,
    load_form_definition,
    load_renderer_settings,
)

__all__ = ["STARTER_FORM", "FormConfigError", "RendererSettings", "load_form_definition", "load_renderer_settings"]
