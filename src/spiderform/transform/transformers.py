# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data transformers converting between model values and submitted values.

A transformer's :meth:`~DataTransformer.transform` turns the model value
(what the application works with) into the view value shown in the input.
:meth:`~DataTransformer.reverse_transform` turns submitted text back into
the model value. Several transformers on a field are chained: forward in
attachment order, reverse in the opposite order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from spiderform.errors import TransformationError

# ###############
# Public Interface
# ###############


@runtime_checkable
class DataTransformer(Protocol):
    """Converts a value between its model and view representation."""

    def transform(self, value: Any) -> Any: ...

    def reverse_transform(self, value: Any) -> Any: ...


class CallbackTransformer:
    """Wrap a pair of plain functions as a transformer."""

    def __init__(self, transform: Callable[[Any], Any], reverse_transform: Callable[[Any], Any]) -> None:
        self._transform = transform
        self._reverse = reverse_transform

    def transform(self, value: Any) -> Any:
        return self._transform(value)

    def reverse_transform(self, value: Any) -> Any:
        return self._reverse(value)


class BooleanToStringTransformer:
    """Map booleans to checkbox values and back.

    Args:
        true_value: Submitted value representing True.
        false_value: Submitted value representing False.

    Besides the two configured values, the usual spellings ``true``,
    ``yes``, ``on``, ``1`` and ``false``, ``no``, ``off``, ``0`` are
    accepted on submit (case-insensitive). Empty input is False.
    """

    def __init__(self, true_value: str = "1", false_value: str = "0") -> None:
        self.true_value = true_value
        self.false_value = false_value

    def transform(self, value: Any) -> str:
        if value is None:
            return self.false_value
        return self.true_value if value else self.false_value

    def reverse_transform(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        text = str(value).strip().lower()
        if text in ("", self.false_value.lower(), *_FALSE):
            return False
        if text in (self.true_value.lower(), *_TRUE):
            return True
        raise TransformationError(f"Cannot convert '{value}' to a boolean")


class StringToListTransformer:
    """Split delimited text into a list and join it back.

    Args:
        delimiter: Separator between items.
        trim: Strip whitespace around each item.
        remove_empty: Drop empty items after trimming.
    """

    def __init__(self, delimiter: str = ",", trim: bool = True, remove_empty: bool = True) -> None:
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        self.delimiter = delimiter
        self.trim = trim
        self.remove_empty = remove_empty

    def transform(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return self.delimiter.join(str(item) for item in value)

    def reverse_transform(self, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        items = str(value).split(self.delimiter)
        if self.trim:
            items = [item.strip() for item in items]
        if self.remove_empty:
            items = [item for item in items if item != ""]
        return items


def transform_value(transformers: Sequence[DataTransformer], value: Any) -> Any:
    """Apply the forward transformation of every transformer in order."""
    for transformer in transformers:
        value = transformer.transform(value)
    return value


def reverse_transform_value(transformers: Sequence[DataTransformer], value: Any) -> Any:
    """Apply the reverse transformations, last transformer first."""
    for transformer in reversed(transformers):
        value = transformer.reverse_transform(value)
    return value


# ################
# Implementation
# ################

_TRUE = ("true", "yes", "on", "1")
_FALSE = ("false", "no", "off", "0")
