# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy shared by the builder, engine, renderer and loaders.

User data failing a constraint is never an exception: it is recorded as a
:class:`~spiderform.validation.Violation`. The classes below cover
programmer and integration errors only.
"""

# ###############
# Public Interface
# ###############


class SpiderFormError(Exception):
    """Base class for all errors raised by SpiderForm."""


class BuilderError(SpiderFormError):
    """Raised on structural misuse of the form builder.

    Examples are duplicate field names, a field sub-builder that was never
    committed with ``add()``, or a select field without options.
    """


class ConfigurationError(SpiderFormError):
    """Raised on programmer or integration errors.

    Covers unknown constraint kinds, unknown field types, unknown theme or
    renderer names and invalid regular expressions.
    """


class ProviderConnectionError(SpiderFormError, ConnectionError):
    """Raised when an options provider cannot reach its backing store."""


class TransformationError(SpiderFormError, ValueError):
    """Raised by a data transformer that cannot convert a value."""
