# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the translator and translation file loaders."""

import json
from pathlib import Path

import pytest

from spiderform.errors import ConfigurationError
from spiderform.translation import JsonLoader, Translator, YamlLoader, flatten

# ###############
# Helpers
# ###############


def _resources(tmp_path: Path) -> Path:
    (tmp_path / "forms.en_US.yaml").write_text(
        "form:\n  label:\n    email: Email address\n    name: Name\n  error:\n    required: Required\n",
        encoding="utf-8",
    )
    (tmp_path / "forms.fr_FR.json").write_text(
        json.dumps({"form": {"label": {"email": "Adresse e-mail"}}}),
        encoding="utf-8",
    )
    return tmp_path


# ###############
# Normal Cases
# ###############


def test_flatten() -> None:
    assert flatten({"form": {"label": {"a": "A"}, "x": 1}}) == {"form.label.a": "A", "form.x": "1"}


def test_resource_files_by_locale(tmp_path: Path) -> None:
    translator = Translator(locale="fr_FR", resource=_resources(tmp_path))
    assert translator.trans("form.label.email") == "Adresse e-mail"
    assert translator.trans("form.label.email", locale="en_US") == "Email address"


def test_fallback_locale_then_key(tmp_path: Path) -> None:
    translator = Translator(locale="fr_FR", resource=_resources(tmp_path))
    assert translator.trans("form.label.name") == "Name"
    assert translator.trans("form.label.unknown") == "form.label.unknown"
    assert translator.get("form.label.unknown") is None


def test_has_does_not_use_fallback(tmp_path: Path) -> None:
    translator = Translator(locale="fr_FR", resource=_resources(tmp_path))
    assert translator.has("form.label.email")
    assert not translator.has("form.label.name")


def test_parameters(tmp_path: Path) -> None:
    translator = Translator()
    translator.add_translations("en_US", {"msg": "Hello {{ name }}, you have %count% items"})
    assert translator.trans("msg", {"name": "Ann", "count": 3}) == "Hello Ann, you have 3 items"
    assert translator.trans("msg", {"name": "Ann"}) == "Hello Ann, you have %count% items"


def test_add_translations_merges(tmp_path: Path) -> None:
    translator = Translator(resource=_resources(tmp_path))
    translator.add_translations("en_US", {"form": {"label": {"name": "Full name"}}})
    assert translator.all()["form.label.name"] == "Full name"
    assert translator.all()["form.label.email"] == "Email address"


def test_added_translations_survive_new_resource(tmp_path: Path) -> None:
    """Registering a directory later keeps programmatic entries on top of the files."""
    translator = Translator()
    translator.add_translations("en_US", {"form": {"label": {"name": "Full name"}, "extra": "kept"}})
    translator.add_resource(_resources(tmp_path))
    assert translator.get("form.extra") == "kept"
    assert translator.get("form.label.name") == "Full name"
    assert translator.get("form.label.email") == "Email address"


def test_custom_loader(tmp_path: Path) -> None:
    class _IniLoader:
        def load(self, path: Path) -> dict[str, str]:
            key, value = path.read_text(encoding="utf-8").strip().split("=")
            return {key: value}

    (tmp_path / "forms.de_DE.ini").write_text("greeting=Hallo", encoding="utf-8")
    translator = Translator(locale="de_DE").add_loader("ini", _IniLoader()).add_resource(tmp_path)
    assert translator.trans("greeting") == "Hallo"


# ###############
# Error Cases
# ###############


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "forms.en_US.yaml"
    path.write_text("form: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        YamlLoader().load(path)


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "forms.en_US.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        JsonLoader().load(path)


def test_non_mapping_file(tmp_path: Path) -> None:
    path = tmp_path / "forms.en_US.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="must contain a mapping"):
        YamlLoader().load(path)


def test_empty_file_is_empty_mapping(tmp_path: Path) -> None:
    path = tmp_path / "forms.en_US.yaml"
    path.write_text("", encoding="utf-8")
    assert YamlLoader().load(path) == {}
