# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Fluent form builder."""

from spiderform.builder.form_builder import HTTP_METHODS, FieldBuilder, FormBuilder, create

__all__ = ["HTTP_METHODS", "FieldBuilder", "FormBuilder", "create"]
