# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Violation records and the path-keyed violation tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

# ###############
# Public Interface
# ###############

# Key used for violations without a path in nested output.
FORM_LEVEL_KEY = "_form"


@dataclass(frozen=True)
class Violation:
    """One failed constraint instance.

    Attributes:
        path: Dot-addressed data location; ``""`` for form-level violations.
        message: Final message with placeholders already substituted.
        constraint_kind: ``kind`` of the constraint that produced it.
        code: Finer-grained reason, e.g. ``"not_numeric"`` vs ``"too_low"``.
        parameters: Values used for placeholder substitution.
    """

    path: str
    message: str
    constraint_kind: str
    code: str = ""
    parameters: dict[str, Any] = field(default_factory=dict, compare=False)


class ViolationTree:
    """Violations of one validation pass, grouped by path.

    Paths keep their first-insertion order and violations on one path keep
    evaluation order. A path is only present once it holds a violation.
    """

    def __init__(self, violations: list[Violation] | None = None) -> None:
        self._by_path: dict[str, list[Violation]] = {}
        for violation in violations or []:
            self.add(violation)

    def add(self, violation: Violation) -> None:
        """Append *violation* under its path."""
        self._by_path.setdefault(violation.path, []).append(violation)

    def paths(self) -> list[str]:
        """Return the paths holding violations, in insertion order."""
        return list(self._by_path)

    def get(self, path: str) -> tuple[Violation, ...]:
        """Return the violations at *path* (empty when there are none)."""
        return tuple(self._by_path.get(path, ()))

    def messages(self, path: str) -> list[str]:
        """Return the messages of the violations at *path*."""
        return [v.message for v in self._by_path.get(path, ())]

    def first(self, path: str | None = None) -> Violation | None:
        """Return the first violation overall, or the first one at *path*."""
        if path is None:
            return next(iter(self), None)
        found = self._by_path.get(path)
        return found[0] if found else None

    def by_path(self, path: str, deep: bool = False) -> ViolationTree:
        """Return a tree restricted to *path* (and its children when *deep*)."""
        prefix = f"{path}."
        return ViolationTree(
            [v for v in self if v.path == path or (deep and v.path.startswith(prefix))]
        )

    def is_empty(self) -> bool:
        return not self._by_path

    def to_dict(self) -> dict[str, list[str]]:
        """Return a flat mapping of path to all messages."""
        return {path: [v.message for v in items] for path, items in self._by_path.items()}

    def to_flat(self) -> dict[str, str]:
        """Return a flat mapping of path to its first message."""
        return {path: items[0].message for path, items in self._by_path.items()}

    def to_nested(self) -> dict[str, Any]:
        """Return the "deep" form: paths split on dots into nested mappings.

        Messages of a path end up in a list under the final segment.
        Form-level violations are collected under ``"_form"``. When a path
        is both a leaf and a parent (``a`` and ``a.b``), the leaf messages
        are kept under ``"_self"`` of the parent mapping.
        """
        result: dict[str, Any] = {}
        for path, items in self._by_path.items():
            messages = [v.message for v in items]
            if not path:
                result.setdefault(FORM_LEVEL_KEY, []).extend(messages)
                continue
            *parents, leaf = path.split(".")
            node = result
            for key in parents:
                child = node.get(key)
                if isinstance(child, list):
                    child = {"_self": child}
                    node[key] = child
                node = node.setdefault(key, {})
            existing = node.get(leaf)
            if isinstance(existing, dict):
                existing.setdefault("_self", []).extend(messages)
            else:
                node.setdefault(leaf, []).extend(messages)
        return result

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def __getitem__(self, path: str) -> tuple[Violation, ...]:
        if path not in self._by_path:
            raise KeyError(path)
        return tuple(self._by_path[path])

    def __iter__(self) -> Iterator[Violation]:
        for items in self._by_path.values():
            yield from items

    def __len__(self) -> int:
        return sum(len(items) for items in self._by_path.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ViolationTree):
            return NotImplemented
        return self._by_path == other._by_path

    def __repr__(self) -> str:
        return f"ViolationTree({self.to_dict()!r})"
