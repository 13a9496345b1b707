# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Translation of form labels, placeholders, buttons and error messages."""

from spiderform.translation.loaders import JsonLoader, TranslationLoader, YamlLoader
from spiderform.translation.translator import Translator, flatten

__all__ = ["JsonLoader", "TranslationLoader", "Translator", "YamlLoader", "flatten"]
