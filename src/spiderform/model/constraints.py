# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Validation constraint variants attached to fields or whole forms."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############

DEFAULT_GROUP = "Default"


class Constraint(BaseModel):
    """Base class of every validation rule.

    The ``kind`` tag selects the evaluator. ``groups`` scopes the rule to
    validation passes, ``message`` overrides the default message and may
    contain ``{{ name }}`` placeholders, and ``path`` targets a data path
    explicitly (only meaningful for form-level constraints).
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    groups: tuple[str, ...] = (DEFAULT_GROUP,)
    message: str | None = None
    path: str | None = None

    def parameters(self) -> dict[str, Any]:
        """Return the values available for message interpolation."""
        return {}

    def applies_to(self, groups: tuple[str, ...] | list[str]) -> bool:
        """Return True if this constraint belongs to any of *groups*."""
        return any(group in self.groups for group in groups)


class Required(Constraint):
    """The value must be present and non-empty."""

    kind: Literal["required"] = "required"


class MinLength(Constraint):
    """The stringified value must have at least ``min`` characters."""

    kind: Literal["minLength"] = "minLength"
    min: int

    def parameters(self) -> dict[str, Any]:
        return {"min": self.min}


class MaxLength(Constraint):
    """The stringified value must have at most ``max`` characters."""

    kind: Literal["maxLength"] = "maxLength"
    max: int

    def parameters(self) -> dict[str, Any]:
        return {"max": self.max}


class Min(Constraint):
    """The numeric value must be greater than or equal to ``min``."""

    kind: Literal["min"] = "min"
    min: float

    def parameters(self) -> dict[str, Any]:
        return {"min": _format_number(self.min)}


class Max(Constraint):
    """The numeric value must be less than or equal to ``max``."""

    kind: Literal["max"] = "max"
    max: float

    def parameters(self) -> dict[str, Any]:
        return {"max": _format_number(self.max)}


class Pattern(Constraint):
    """The value must match the regular expression ``regex`` (searched, not anchored)."""

    kind: Literal["pattern"] = "pattern"
    regex: str

    def parameters(self) -> dict[str, Any]:
        return {"pattern": self.regex}


class Email(Constraint):
    """The value must look like an e-mail address."""

    kind: Literal["email"] = "email"


class Url(Constraint):
    """The value must be an absolute http(s) URL."""

    kind: Literal["url"] = "url"


class Choice(Constraint):
    """The value (or every item of a list value) must be one of ``choices``."""

    kind: Literal["choice"] = "choice"
    choices: tuple[str, ...]

    def parameters(self) -> dict[str, Any]:
        return {"choices": ", ".join(self.choices)}


class NotIn(Constraint):
    """The value (or every item of a list value) must not be one of ``choices``."""

    kind: Literal["notIn"] = "notIn"
    choices: tuple[str, ...]

    def parameters(self) -> dict[str, Any]:
        return {"choices": ", ".join(self.choices)}


class Between(Constraint):
    """The value must lie between ``min`` and ``max`` inclusive.

    Numbers are compared by value, other strings by length and lists by
    item count.
    """

    kind: Literal["between"] = "between"
    min: float
    max: float

    def parameters(self) -> dict[str, Any]:
        return {"min": _format_number(self.min), "max": _format_number(self.max)}


class Integer(Constraint):
    """The value must be a whole number, given as an int or as digits."""

    kind: Literal["integer"] = "integer"


class Date(Constraint):
    """The value must be a calendar date (``YYYY-MM-DD``) or a date object."""

    kind: Literal["date"] = "date"


class Callback(Constraint):
    """Custom rule evaluated by a function ``fn(data, context)``.

    The function receives the complete submitted data and an
    :class:`~spiderform.validation.ExecutionContext`; it reports failures
    through the context and may target any path, which is how cross-field
    rules such as password confirmation are expressed.
    """

    kind: Literal["callback"] = "callback"
    callback: Callable[..., None]


def matches(field: str, other: str, message: str = "Fields do not match", **kwargs: Any) -> Callback:
    """Return a Callback that requires *field* to equal *other*.

    The violation is reported at *field*. Empty values are left to
    ``Required``.
    """

    def _check(data: dict[str, Any], context: Any) -> None:
        value = context.get_value(field)
        if value in (None, ""):
            return
        if value != context.get_value(other):
            context.add_violation(field, message, {"other": other})

    return Callback(callback=_check, **kwargs)


# ################
# Implementation
# ################


def _format_number(value: float) -> int | float:
    """Return *value* as an int when it has no fractional part."""
    return int(value) if float(value).is_integer() else value
