# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Translation file loaders returning nested string mappings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import yaml

from spiderform.errors import ConfigurationError

# ###############
# Public Interface
# ###############


class TranslationLoader(Protocol):
    """Loads one translation file into a nested mapping."""

    def load(self, path: Path) -> dict[str, Any]: ...


class YamlLoader:
    """Load ``forms.<locale>.yaml`` files."""

    def load(self, path: Path) -> dict[str, Any]:
        """Return the nested mapping stored in *path*.

        Raises:
            ConfigurationError: If the file cannot be read, is not valid YAML
                or does not contain a mapping.
        """
        text = _read(path)
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in translation file {path}: {exc}") from exc
        return _require_mapping(data, path)


class JsonLoader:
    """Load ``forms.<locale>.json`` files."""

    def load(self, path: Path) -> dict[str, Any]:
        """Return the nested mapping stored in *path*.

        Raises:
            ConfigurationError: If the file cannot be read, is not valid JSON
                or does not contain an object.
        """
        text = _read(path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in translation file {path}: {exc}") from exc
        return _require_mapping(data, path)


# ################
# Implementation
# ################


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read translation file {path}: {exc}") from exc


def _require_mapping(data: object, path: Path) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: translation file must contain a mapping")
    return data
