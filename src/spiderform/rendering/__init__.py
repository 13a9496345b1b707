# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Renderer dispatch, themes, template adapters and output formats."""

from spiderform.rendering.adapters import TEMPLATES_DIR, Jinja2Adapter, TemplateAdapter, create_adapter
from spiderform.rendering.output import OutputFormat
from spiderform.rendering.renderer import Renderer, RenderWarning
from spiderform.rendering.themes import (
    BOOTSTRAP3,
    BOOTSTRAP5,
    BUILTIN_THEMES,
    GENERIC,
    GENERIC_BUILD_FORMAT,
    TAILWIND,
    Theme,
    get_theme,
)

__all__ = [
    "BOOTSTRAP3",
    "BOOTSTRAP5",
    "BUILTIN_THEMES",
    "GENERIC",
    "GENERIC_BUILD_FORMAT",
    "TAILWIND",
    "TEMPLATES_DIR",
    "Jinja2Adapter",
    "OutputFormat",
    "RenderWarning",
    "Renderer",
    "TemplateAdapter",
    "Theme",
    "create_adapter",
    "get_theme",
]
