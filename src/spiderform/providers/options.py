# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Option sources for select and radio fields."""

from __future__ import annotations

import logging
import re
import sqlite3
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from spiderform.errors import ConfigurationError, ProviderConnectionError

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@runtime_checkable
class OptionsProvider(Protocol):
    """Supplies the value to label mapping of a choice field."""

    def get_options(self) -> dict[str, str]: ...


class KeyLabelProvider:
    """Build options from in-memory rows (mappings or attribute objects).

    Args:
        rows: Records to read the option value and label from.
        key: Name of the value column or attribute.
        label: Name of the label column or attribute.
    """

    def __init__(self, rows: Iterable[Any], key: str, label: str) -> None:
        self.rows = rows
        self.key = key
        self.label = label

    def get_options(self) -> dict[str, str]:
        return {str(_column(row, self.key)): str(_column(row, self.label)) for row in self.rows}


class QueryOptionsProvider:
    """Load options from a database table via a DB-API connection.

    Args:
        connect: Zero-argument callable returning a DB-API connection
            (e.g. ``lambda: sqlite3.connect(path)``). The connection is
            closed after each query.
        table: Table to read from.
        key_column: Column holding the option value.
        label_column: Column holding the option label.
        where: Optional equality filters, bound as query parameters.
        order_by: Column to sort by; defaults to *label_column*.
        errors: Driver exception types reported as
            :class:`~spiderform.errors.ProviderConnectionError`.

    Identifiers are restricted to plain (optionally schema-qualified) names
    since they cannot be bound as parameters. Values are always bound with
    ``?`` placeholders.
    """

    def __init__(
        self,
        connect: Callable[[], Any],
        table: str,
        key_column: str,
        label_column: str,
        where: Mapping[str, Any] | None = None,
        *,
        order_by: str | None = None,
        errors: tuple[type[BaseException], ...] = (sqlite3.Error,),
    ) -> None:
        for identifier in (table, key_column, label_column, order_by, *(where or {})):
            if identifier is not None and not _IDENTIFIER.match(identifier):
                raise ConfigurationError(f"Invalid SQL identifier '{identifier}'")
        self.connect = connect
        self.table = table
        self.key_column = key_column
        self.label_column = label_column
        self.where = dict(where or {})
        self.order_by = order_by or label_column
        self.errors = errors

    def query(self) -> tuple[str, tuple[Any, ...]]:
        """Return the SQL statement and its bound parameters."""
        sql = f"SELECT {self.key_column}, {self.label_column} FROM {self.table}"
        if self.where:
            sql += " WHERE " + " AND ".join(f"{column} = ?" for column in self.where)
        sql += f" ORDER BY {self.order_by}"
        return sql, tuple(self.where.values())

    def get_options(self) -> dict[str, str]:
        """Run the query and return its rows as options.

        Raises:
            ProviderConnectionError: If connecting or querying fails.
        """
        sql, params = self.query()
        logger.debug("Loading options: %s %s", sql, params)
        try:
            connection = self.connect()
        except self.errors as exc:
            raise ProviderConnectionError(f"Cannot connect to options source for '{self.table}': {exc}") from exc
        try:
            cursor = connection.cursor()
            cursor.execute(sql, params)
            rows = cursor.fetchall()
        except self.errors as exc:
            raise ProviderConnectionError(f"Cannot load options from '{self.table}': {exc}") from exc
        finally:
            connection.close()
        return {str(key): str(label) for key, label in rows}


# ################
# Implementation
# ################

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def _column(row: Any, name: str) -> Any:
    # sqlite3.Row supports keys() and item access but is not a Mapping.
    if isinstance(row, Mapping) or hasattr(row, "keys"):
        return row[name]
    return getattr(row, name)
