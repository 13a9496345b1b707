# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Template-engine adapters used by the renderer."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from spiderform.errors import ConfigurationError
from spiderform.rendering.emitter import render_attributes

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Templates shipped with the package (``generic/`` and ``bootstrap5/``).
TEMPLATES_DIR = Path(__file__).parent / "templates"


@runtime_checkable
class TemplateAdapter(Protocol):
    """What the renderer needs from a template engine.

    ``suffix`` is appended to template names when looking for files.
    ``resolve_template_dir`` maps a build format to the directory that holds
    its templates; ``render_template`` renders a template identified relative
    to the adapter's root (``"<build_format>/<name><suffix>"``).
    """

    suffix: str

    def resolve_template_dir(self, build_format: str) -> Path: ...

    def render_template(self, template_id: str, variables: Mapping[str, Any]) -> str: ...


class Jinja2Adapter:
    """Render field templates with Jinja2 from a directory tree.

    Args:
        template_dir: Root holding one subdirectory per build format.
            Defaults to the templates shipped with SpiderForm.
        suffix: File suffix of templates.
    """

    def __init__(self, template_dir: Path | None = None, suffix: str = ".html.j2") -> None:
        self.template_dir = Path(template_dir) if template_dir is not None else TEMPLATES_DIR
        self.suffix = suffix
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(enabled_extensions=("html", "j2"), default_for_string=True),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.globals["attrs"] = render_attributes

    def resolve_template_dir(self, build_format: str) -> Path:
        return self.template_dir / build_format

    def render_template(self, template_id: str, variables: Mapping[str, Any]) -> str:
        """Render *template_id* with *variables*.

        Raises:
            ConfigurationError: If Jinja2 cannot load or render the template.
        """
        logger.debug("Rendering template %s", template_id)
        try:
            return self._env.get_template(template_id).render(**variables)
        except TemplateError as exc:
            raise ConfigurationError(f"Failed to render template '{template_id}': {exc}") from exc


def create_adapter(engine: str, template_dir: Path | None = None) -> TemplateAdapter | None:
    """Return the adapter for the engine name used in configuration files.

    ``"builtin"`` selects the built-in HTML emitter and returns None.

    Raises:
        ConfigurationError: If *engine* is not a known adapter name.
    """
    if engine == "builtin":
        return None
    if engine == "jinja2":
        return Jinja2Adapter(template_dir)
    raise ConfigurationError(f"Unknown template engine '{engine}' (known engines: builtin, jinja2)")
