# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Constraint evaluation for bound form data.

The engine walks a :class:`~spiderform.model.FormDefinition` in section and
field declaration order, evaluates every constraint that belongs to one of
the requested validation groups, then runs the form-level constraints once
against the whole data set. Failures are collected into a
:class:`~spiderform.validation.ViolationTree`; user data never raises.
"""

from __future__ import annotations

import datetime
import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

from spiderform.errors import ConfigurationError
from spiderform.model.constraints import DEFAULT_GROUP, Constraint
from spiderform.model.fields import FormDefinition
from spiderform.validation.context import ExecutionContext, resolve_path
from spiderform.validation.violations import ViolationTree

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_MESSAGES: dict[str, str] = {
    "required": "This field is required",
    "too_short": "Must be at least {{ min }} characters",
    "too_long": "Must not exceed {{ max }} characters",
    "not_numeric": "Please enter a valid number",
    "too_low": "Minimum value is {{ min }}",
    "too_high": "Maximum value is {{ max }}",
    "invalid_format": "Invalid format",
    "invalid_email": "Please enter a valid email address",
    "invalid_url": "Please enter a valid URL",
    "invalid_choice": "Invalid selection",
    "not_allowed": "This value is not allowed",
    "not_between": "Must be between {{ min }} and {{ max }}",
    "not_integer": "Please enter a whole number",
    "invalid_date": "Please enter a valid date",
    "invalid_csrf": "The CSRF token is invalid. Please try to resubmit the form.",
}


def evaluate(
    definition: FormDefinition,
    data: Mapping[str, Any],
    groups: Sequence[str] = (DEFAULT_GROUP,),
    *,
    translator: Any = None,
) -> ViolationTree:
    """Evaluate all applicable constraints of *definition* against *data*.

    Order of evaluation (and therefore of violations on a path):

    1. Field constraints, fields in section/declaration order, constraints in
       attachment order. A failing constraint never prevents the next one
       from running.
    2. Form-level constraints in attachment order, each run once against
       the complete data set.

    Args:
        definition: The form blueprint holding fields and constraints.
        data: Submitted or initial data keyed by field name.
        groups: Validation groups to evaluate; a constraint runs when its
            own groups intersect these.
        translator: Optional translator consulted for ``form.error.*``
            messages.

    Returns:
        The :class:`ViolationTree` of this pass. An empty tree means valid.

    Raises:
        ConfigurationError: If a constraint has an unknown kind or carries an
            invalid regular expression.
    """
    active = tuple(groups)
    context = ExecutionContext(data, translator=translator)

    for field_def in definition.fields:
        value = resolve_path(data, field_def.name)
        for constraint in field_def.rules:
            _run(constraint, field_def.name, value, context, active)

    for constraint in definition.constraints:
        path = constraint.path or ""
        value = resolve_path(data, path) if path else data
        _run(constraint, path, value, context, active)

    tree = context.violations
    logger.debug("Validated form '%s' for groups %s: %d violation(s)", definition.name, active, len(tree))
    return tree


def is_empty(value: Any) -> bool:
    """Return True for None, blank strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


# ################
# Implementation
# ################

_EMAIL_ADAPTER: TypeAdapter[str] = TypeAdapter(EmailStr)
_URL_ADAPTER: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)
_DATE_ADAPTER: TypeAdapter[datetime.date] = TypeAdapter(datetime.date)
_INTEGER = re.compile(r"^[+-]?\d+$")


def _run(
    constraint: Constraint,
    path: str,
    value: Any,
    context: ExecutionContext,
    groups: tuple[str, ...],
) -> None:
    """Evaluate a single constraint if it belongs to one of *groups*."""
    evaluator = _EVALUATORS.get(constraint.kind)
    if evaluator is None:
        raise ConfigurationError(f"Unknown constraint kind '{constraint.kind}' on '{path or '<form>'}'")
    matching = [g for g in constraint.groups if g in groups]
    if not matching:
        return
    context.current_path = path
    context.current_group = matching[0]
    context.current_kind = constraint.kind
    evaluator(constraint, value, context)


def _fail(constraint: Constraint, context: ExecutionContext, code: str, extra: Mapping[str, Any] | None = None) -> None:
    """Record a built-in violation, resolving its message."""
    parameters = constraint.parameters()
    if extra:
        parameters.update(extra)
    message = constraint.message
    if message is None and context.translator is not None:
        message = context.translator.get(f"form.error.{code}") or context.translator.get(
            f"form.error.{constraint.kind}"
        )
    if message is None:
        message = DEFAULT_MESSAGES[code]
    context.add_violation(None, message, parameters, code=code)


def _to_number(value: Any) -> float | None:
    """Return *value* as a float, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            return None
    if isinstance(value, Decimal):
        # float() raises on signalling NaN
        if value.is_nan():
            return None
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return None
    return None if math.isnan(number) else number


def _adapts(adapter: TypeAdapter[Any], value: Any) -> bool:
    """Return True if *adapter* accepts *value*."""
    try:
        adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _check_required(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        _fail(constraint, context, "required")


def _check_min_length(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    if len(str(value)) < constraint.min:
        _fail(constraint, context, "too_short")


def _check_max_length(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    if len(str(value)) > constraint.max:
        _fail(constraint, context, "too_long")


def _check_min(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    number = _to_number(value)
    if number is None:
        _fail(constraint, context, "not_numeric", {"value": value})
    elif number < constraint.min:
        _fail(constraint, context, "too_low", {"value": value})


def _check_max(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    number = _to_number(value)
    if number is None:
        _fail(constraint, context, "not_numeric", {"value": value})
    elif number > constraint.max:
        _fail(constraint, context, "too_high", {"value": value})


def _check_pattern(constraint: Any, value: Any, context: ExecutionContext) -> None:
    try:
        regex = re.compile(constraint.regex)
    except re.error as exc:
        raise ConfigurationError(f"Invalid pattern '{constraint.regex}' on '{context.current_path}': {exc}") from exc
    if is_empty(value):
        return
    if regex.search(str(value)) is None:
        _fail(constraint, context, "invalid_format")


def _check_email(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    if not isinstance(value, str) or not _adapts(_EMAIL_ADAPTER, value.strip()):
        _fail(constraint, context, "invalid_email")


def _check_url(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    if not isinstance(value, str) or not _adapts(_URL_ADAPTER, value.strip()):
        _fail(constraint, context, "invalid_url")


def _check_choice(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    items = value if isinstance(value, (list, tuple)) else [value]
    if any(str(item) not in constraint.choices for item in items):
        _fail(constraint, context, "invalid_choice")


def _check_not_in(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    items = value if isinstance(value, (list, tuple)) else [value]
    if any(str(item) in constraint.choices for item in items):
        _fail(constraint, context, "not_allowed")


def _check_between(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    size = _to_number(value)
    if size is None:
        if isinstance(value, (str, list, tuple, set, dict)):
            size = len(value)
        else:
            _fail(constraint, context, "not_numeric", {"value": value})
            return
    if not constraint.min <= size <= constraint.max:
        _fail(constraint, context, "not_between", {"value": value})


def _check_integer(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value):
        return
    if isinstance(value, bool):
        valid = False
    elif isinstance(value, int):
        valid = True
    elif isinstance(value, float):
        valid = value.is_integer()
    elif isinstance(value, Decimal):
        valid = value.is_finite() and value == value.to_integral_value()
    elif isinstance(value, str):
        valid = _INTEGER.match(value.strip()) is not None
    else:
        valid = False
    if not valid:
        _fail(constraint, context, "not_integer", {"value": value})


def _check_date(constraint: Any, value: Any, context: ExecutionContext) -> None:
    if is_empty(value) or isinstance(value, datetime.date):
        return
    if not isinstance(value, str) or not _adapts(_DATE_ADAPTER, value.strip()):
        _fail(constraint, context, "invalid_date", {"value": value})


def _check_callback(constraint: Any, value: Any, context: ExecutionContext) -> None:
    constraint.callback(context.data, context)


_EVALUATORS: dict[str, Callable[[Any, Any, ExecutionContext], None]] = {
    "required": _check_required,
    "minLength": _check_min_length,
    "maxLength": _check_max_length,
    "min": _check_min,
    "max": _check_max,
    "pattern": _check_pattern,
    "email": _check_email,
    "url": _check_url,
    "choice": _check_choice,
    "notIn": _check_not_in,
    "between": _check_between,
    "integer": _check_integer,
    "date": _check_date,
    "callback": _check_callback,
}
