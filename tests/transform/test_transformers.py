# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the data transformers."""

import pytest

from spiderform.errors import TransformationError
from spiderform.transform import (
    BooleanToStringTransformer,
    CallbackTransformer,
    DataTransformer,
    StringToListTransformer,
    reverse_transform_value,
    transform_value,
)

# ###############
# Boolean
# ###############


@pytest.mark.parametrize("value", ["1", "true", "YES", " on ", True])
def test_boolean_truthy_submissions(value: object) -> None:
    assert BooleanToStringTransformer().reverse_transform(value) is True


@pytest.mark.parametrize("value", ["0", "false", "No", "off", "", None, False])
def test_boolean_falsy_submissions(value: object) -> None:
    assert BooleanToStringTransformer().reverse_transform(value) is False


def test_boolean_custom_values() -> None:
    transformer = BooleanToStringTransformer(true_value="Y", false_value="N")
    assert transformer.transform(True) == "Y"
    assert transformer.transform(None) == "N"
    assert transformer.reverse_transform("y") is True
    assert transformer.reverse_transform("N") is False


def test_boolean_rejects_unknown_text() -> None:
    with pytest.raises(TransformationError, match="'maybe'"):
        BooleanToStringTransformer().reverse_transform("maybe")


# ###############
# String to List
# ###############


def test_string_to_list() -> None:
    transformer = StringToListTransformer(";")
    assert transformer.reverse_transform(" a ; b;;c ") == ["a", "b", "c"]
    assert transformer.reverse_transform(["x", 1]) == ["x", "1"]
    assert transformer.reverse_transform(None) == []
    assert transformer.transform(["a", "b"]) == "a;b"
    assert transformer.transform(None) == ""


def test_string_to_list_keeps_empty_items_when_asked() -> None:
    transformer = StringToListTransformer(trim=False, remove_empty=False)
    assert transformer.reverse_transform("a, ,") == ["a", " ", ""]


def test_empty_delimiter_is_rejected() -> None:
    with pytest.raises(ValueError, match="delimiter"):
        StringToListTransformer("")


# ###############
# Chaining
# ###############


def test_chain_runs_reverse_in_opposite_order() -> None:
    upper = CallbackTransformer(str.lower, str.upper)
    wrap = CallbackTransformer(lambda v: f"[{v}]", lambda v: v.strip("[]"))
    assert transform_value([upper, wrap], "ABC") == "[abc]"
    assert reverse_transform_value([upper, wrap], "[abc]") == "ABC"


def test_protocol_membership() -> None:
    assert isinstance(StringToListTransformer(), DataTransformer)
    assert not isinstance(object(), DataTransformer)
