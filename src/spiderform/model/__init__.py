# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form model for SpiderForm (fields, sections, definitions and constraints)."""

from spiderform.model.constraints import (
    DEFAULT_GROUP,
    Between,
    Callback,
    Choice,
    Constraint,
    Date,
    Email,
    Integer,
    Max,
    MaxLength,
    Min,
    MinLength,
    NotIn,
    Pattern,
    Required,
    Url,
    matches,
)
from spiderform.model.fields import (
    PLACEHOLDER_TYPES,
    FieldDefinition,
    FieldType,
    FormDefinition,
    Section,
    is_known_type,
)

__all__ = [
    # Constraints
    "DEFAULT_GROUP",
    "Constraint",
    "Required",
    "MinLength",
    "MaxLength",
    "Min",
    "Max",
    "Pattern",
    "Email",
    "Url",
    "Choice",
    "NotIn",
    "Between",
    "Integer",
    "Date",
    "Callback",
    "matches",
    # Fields
    "PLACEHOLDER_TYPES",
    "FieldType",
    "FieldDefinition",
    "Section",
    "FormDefinition",
    "is_known_type",
]
