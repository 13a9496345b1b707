# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Execution context handed to constraint evaluators and callbacks."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from spiderform.validation.violations import Violation, ViolationTree

# ###############
# Public Interface
# ###############


def resolve_path(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Look up a dot-addressed *path* in nested mappings and sequences.

    A key containing dots that exists verbatim in *data* wins over the
    nested interpretation.
    """
    if path in data:
        return data[path]
    current: Any = data
    for segment in path.split("."):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return default
    return current


def interpolate(message: str, parameters: Mapping[str, Any]) -> str:
    """Substitute ``{{ name }}`` placeholders from *parameters*.

    Unknown placeholders are left untouched.
    """
    if not parameters:
        return message

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return str(parameters[key]) if key in parameters else match.group(0)

    return _PLACEHOLDER.sub(_replace, message)


class ExecutionContext:
    """Collects violations while the engine walks the constraints.

    Callbacks receive the context as their second argument and report
    failures with :meth:`add_violation` or the fluent
    :meth:`build_violation`. ``current_path`` is the path of the field whose
    constraint is running (``""`` for form-level constraints).
    """

    def __init__(self, data: Mapping[str, Any], translator: Any = None) -> None:
        self._data = data
        self._translator = translator
        self._tree = ViolationTree()
        self.current_path = ""
        self.current_group: str | None = None
        self.current_kind = ""

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    @property
    def translator(self) -> Any:
        return self._translator

    @property
    def violations(self) -> ViolationTree:
        return self._tree

    def get_value(self, path: str) -> Any:
        """Return the submitted value at *path*, or None."""
        return resolve_path(self._data, path)

    def add_violation(
        self,
        path: str | None,
        message: str,
        parameters: Mapping[str, Any] | None = None,
        *,
        code: str = "custom",
    ) -> None:
        """Record a violation at *path* (defaults to the current path).

        *message* may be a translation key; it is translated when the
        translator knows it, then its placeholders are substituted.
        """
        params = dict(parameters or {})
        if self._translator is not None:
            translated = self._translator.get(message)
            if translated is not None:
                message = translated
        target = self.current_path if path is None else path
        self._tree.add(
            Violation(
                path=target,
                message=interpolate(message, params),
                constraint_kind=self.current_kind,
                code=code,
                parameters=params,
            )
        )

    def build_violation(self, message: str) -> ViolationBuilder:
        """Start a fluent violation targeting the current path."""
        return ViolationBuilder(self, message)


class ViolationBuilder:
    """Fluent configuration of a single violation."""

    def __init__(self, context: ExecutionContext, message: str) -> None:
        self._context = context
        self._message = message
        self._path = context.current_path
        self._parameters: dict[str, Any] = {}
        self._code = "custom"

    def at_path(self, path: str) -> ViolationBuilder:
        self._path = path
        return self

    def set_parameter(self, key: str, value: Any) -> ViolationBuilder:
        self._parameters[key] = value
        return self

    def set_parameters(self, parameters: Mapping[str, Any]) -> ViolationBuilder:
        self._parameters = dict(parameters)
        return self

    def set_code(self, code: str) -> ViolationBuilder:
        self._code = code
        return self

    def add_violation(self) -> None:
        """Record the configured violation in the context."""
        self._context.add_violation(self._path, self._message, self._parameters, code=self._code)


# ################
# Implementation
# ################

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")
