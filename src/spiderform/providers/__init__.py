# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Option providers for choice fields."""

from spiderform.providers.options import KeyLabelProvider, OptionsProvider, QueryOptionsProvider

__all__ = ["KeyLabelProvider", "OptionsProvider", "QueryOptionsProvider"]
