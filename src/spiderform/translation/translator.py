# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Key-based translation of labels, placeholders, buttons and error messages.

Translations are flattened to dotted keys (``form.label.email``). Resource
directories hold files named ``forms.<locale>.<ext>``; each registered
loader is tried for its extension the first time a locale is needed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from spiderform.translation.loaders import JsonLoader, TranslationLoader, YamlLoader

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class Translator:
    """Translate dotted keys with locale fallback.

    Args:
        locale: Active locale.
        fallback_locale: Locale consulted when the active one lacks a key.
        resource: Optional directory to register with :meth:`add_resource`.

    ``yaml``/``yml`` and ``json`` loaders are registered by default.
    """

    def __init__(
        self,
        locale: str = "en_US",
        fallback_locale: str = "en_US",
        resource: Path | None = None,
    ) -> None:
        self.locale = locale
        self.fallback_locale = fallback_locale
        self._translations: dict[str, dict[str, str]] = {}
        self._added: dict[str, dict[str, str]] = {}
        self._loaders: dict[str, TranslationLoader] = {}
        self._resources: list[Path] = []
        self.add_loader("yaml", YamlLoader())
        self.add_loader("yml", YamlLoader())
        self.add_loader("json", JsonLoader())
        if resource is not None:
            self.add_resource(resource)

    def add_loader(self, extension: str, loader: TranslationLoader) -> Translator:
        self._loaders[extension] = loader
        return self

    def add_resource(self, directory: Path) -> Translator:
        """Register a directory holding ``forms.<locale>.<ext>`` files.

        Locales loaded earlier are reloaded on next use; translations added
        with :meth:`add_translations` are kept and still win over file entries.
        """
        self._resources.append(Path(directory))
        self._translations.clear()
        return self

    def add_translations(self, locale: str, translations: Mapping[str, Any]) -> Translator:
        """Merge a nested mapping of translations into *locale*."""
        self._added.setdefault(locale, {}).update(flatten(translations))
        self._translations.pop(locale, None)
        return self

    def get(self, key: str, locale: str | None = None) -> str | None:
        """Return the translation of *key*, trying the fallback locale; None if missing."""
        locale = locale or self.locale
        message = self._load(locale).get(key)
        if message is None and locale != self.fallback_locale:
            message = self._load(self.fallback_locale).get(key)
        return message

    def trans(self, key: str, parameters: Mapping[str, Any] | None = None, locale: str | None = None) -> str:
        """Return the translation of *key* with parameters substituted.

        Both ``{{ name }}`` and ``%name%`` placeholders are replaced. A
        missing key is returned unchanged.
        """
        message = self.get(key, locale)
        if message is None:
            message = key
        if not parameters:
            return message

        def _replace(match: re.Match[str]) -> str:
            name = match.group(1) or match.group(2)
            return str(parameters[name]) if name in parameters else match.group(0)

        return _PLACEHOLDER.sub(_replace, message)

    def has(self, key: str, locale: str | None = None) -> bool:
        """Return True if *key* is translated in *locale* itself (no fallback)."""
        return key in self._load(locale or self.locale)

    def all(self, locale: str | None = None) -> dict[str, str]:
        return dict(self._load(locale or self.locale))

    def _load(self, locale: str) -> dict[str, str]:
        if locale not in self._translations:
            messages: dict[str, str] = {}
            for directory in self._resources:
                for extension, loader in self._loaders.items():
                    path = directory / f"forms.{locale}.{extension}"
                    if path.is_file():
                        logger.debug("Loading translations from %s", path)
                        messages.update(flatten(loader.load(path)))
            messages.update(self._added.get(locale, {}))
            self._translations[locale] = messages
        return self._translations[locale]


def flatten(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into dotted keys."""
    result: dict[str, str] = {}
    for key, value in mapping.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            result.update(flatten(value, full_key))
        else:
            result[full_key] = str(value)
    return result


# ################
# Implementation
# ################

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}|%(\w+)%")
