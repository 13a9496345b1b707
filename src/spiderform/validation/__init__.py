# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Constraint engine: evaluates field and form-level rules into a violation tree."""

from spiderform.validation.context import (
    ExecutionContext,
    ViolationBuilder,
    interpolate,
    resolve_path,
)
from spiderform.validation.engine import DEFAULT_MESSAGES, evaluate, is_empty
from spiderform.validation.violations import FORM_LEVEL_KEY, Violation, ViolationTree

__all__ = [
    "DEFAULT_MESSAGES",
    "FORM_LEVEL_KEY",
    "ExecutionContext",
    "Violation",
    "ViolationBuilder",
    "ViolationTree",
    "evaluate",
    "interpolate",
    "is_empty",
    "resolve_path",
]
