# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data transformers between model values and submitted view values."""

from spiderform.transform.transformers import (
    BooleanToStringTransformer,
    CallbackTransformer,
    DataTransformer,
    StringToListTransformer,
    reverse_transform_value,
    transform_value,
)

__all__ = [
    "DataTransformer",
    "CallbackTransformer",
    "BooleanToStringTransformer",
    "StringToListTransformer",
    "transform_value",
    "reverse_transform_value",
]
