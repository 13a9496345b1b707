# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""CSRF token issuing and verification for form submissions.

Tokens are random hex strings bound to a token id (usually the form name)
and kept in a mapping-like store, e.g. a web framework's session. A token
stays valid for ``lifetime`` seconds after it was issued; comparison is
constant-time.
"""

from __future__ import annotations

import hmac
import logging
import secrets
import time
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFAULT_FIELD_NAME = "_csrf_token"
DEFAULT_LIFETIME = 7200


class CsrfTokenManager:
    """Issue, look up and check CSRF tokens.

    Args:
        lifetime: Seconds a token remains valid.
        store: Mapping receiving ``{token_id: (token, issued_at)}``;
            defaults to an in-memory dict.
        clock: Returns the current time in seconds.
    """

    def __init__(
        self,
        lifetime: int = DEFAULT_LIFETIME,
        store: MutableMapping[str, Any] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.lifetime = lifetime
        self._store: MutableMapping[str, Any] = {} if store is None else store
        self._clock = clock

    def get_token(self, token_id: str) -> str:
        """Return the current token for *token_id*, issuing one if none is live."""
        token = self._live_token(token_id)
        if token is None:
            token = self.refresh_token(token_id)
        return token

    def refresh_token(self, token_id: str) -> str:
        token = secrets.token_hex(32)
        self._store[token_id] = (token, self._clock())
        logger.debug("Issued CSRF token for '%s'", token_id)
        return token

    def has_token(self, token_id: str) -> bool:
        return self._live_token(token_id) is not None

    def remove_token(self, token_id: str) -> None:
        self._store.pop(token_id, None)

    def is_token_valid(self, token_id: str, token: Any) -> bool:
        expected = self._live_token(token_id)
        if expected is None or not isinstance(token, str):
            return False
        return hmac.compare_digest(expected.encode(), token.encode())

    def _live_token(self, token_id: str) -> str | None:
        entry = self._store.get(token_id)
        if entry is None:
            return None
        token, issued_at = entry
        if self._clock() - issued_at > self.lifetime:
            logger.debug("CSRF token for '%s' expired", token_id)
            self._store.pop(token_id, None)
            return None
        return token


class CsrfProtection:
    """Bind a :class:`CsrfTokenManager` to forms and submitted data."""

    def __init__(self, manager: CsrfTokenManager | None = None) -> None:
        self.manager = manager or CsrfTokenManager()

    def generate_token(self, token_id: str) -> str:
        return self.manager.get_token(token_id)

    def get_token_value(self, data: Mapping[str, Any], field_name: str = DEFAULT_FIELD_NAME) -> Any:
        return data.get(field_name)

    def validate_token(self, token_id: str, data: Mapping[str, Any], field_name: str = DEFAULT_FIELD_NAME) -> bool:
        """Return True if *data* carries the live token of *token_id*."""
        valid = self.manager.is_token_valid(token_id, self.get_token_value(data, field_name))
        if not valid:
            logger.warning("Rejected CSRF token for '%s'", token_id)
        return valid
