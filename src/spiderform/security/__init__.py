# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""CSRF protection for submitted forms."""

from spiderform.security.csrf import DEFAULT_FIELD_NAME, DEFAULT_LIFETIME, CsrfProtection, CsrfTokenManager

__all__ = ["DEFAULT_FIELD_NAME", "DEFAULT_LIFETIME", "CsrfProtection", "CsrfTokenManager"]
