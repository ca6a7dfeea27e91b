"""Tests for the HTML plugin parameters and their relocatable serializer."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from docbridge.plugins import DOKKA_HTML_PLUGIN_FQN, HtmlPluginParameters, PluginParametersError
from docbridge.plugins.html import HtmlPluginParametersSerializer, SerializedHtmlParameters


def _components(tmp_path: Path, name: str = "components") -> Path:
    root = tmp_path / name
    (root / "images").mkdir(parents=True)
    (root / "images" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (root / "styles").mkdir()
    (root / "styles" / "theme.css").write_text("body {}", encoding="utf-8")
    (root / "templates").mkdir()
    return root


def _configured(root: Path) -> HtmlPluginParameters:
    spec = HtmlPluginParameters()
    spec.custom_assets.from_(root / "images" / "logo.svg")
    spec.custom_style_sheets.from_(root / "styles")
    spec.templates_dir.set(root / "templates")
    spec.footer_message.set("(c) Widgets")
    spec.homepage_link.set("https://widgets.example")
    spec.separate_inherited_members.set(True)
    return spec


def test_serialize_writes_paths_relative_to_components_dir(tmp_path: Path) -> None:
    root = _components(tmp_path)

    data = HtmlPluginParametersSerializer(root).serialize(_configured(root))

    assert data == {
        "name": "html",
        "customAssetsRelativePaths": ["images/logo.svg"],
        "customStyleSheetsRelativePaths": ["styles/theme.css"],
        "templatesDirRelativePath": "templates",
        "homepageLink": "https://widgets.example",
        "mergeImplicitExpectActualDeclarations": None,
        "separateInheritedMembers": True,
        "footerMessage": "(c) Widgets",
    }


def test_deserialize_rebuilds_paths_under_relocated_root(tmp_path: Path) -> None:
    original = _components(tmp_path)
    data = json.loads(json.dumps(HtmlPluginParametersSerializer(original).serialize(_configured(original))))
    relocated = tmp_path / "relocated"
    shutil.copytree(original, relocated)

    spec = HtmlPluginParametersSerializer(relocated).deserialize(data)

    assert spec.custom_assets.files == [relocated / "images" / "logo.svg"]
    assert spec.custom_style_sheets.files == [relocated / "styles" / "theme.css"]
    assert spec.templates_dir.get() == relocated / "templates"
    assert spec.footer_message.get() == "(c) Widgets"
    assert spec.homepage_link.get() == "https://widgets.example"
    assert spec.separate_inherited_members.get() is True
    assert spec.merge_implicit_expect_actual_declarations.get_or_none() is None


def test_serialize_rejects_files_outside_components_dir(tmp_path: Path) -> None:
    root = _components(tmp_path)
    outside = tmp_path / "outside.css"
    outside.write_text("p {}", encoding="utf-8")
    spec = HtmlPluginParameters()
    spec.custom_style_sheets.from_(outside)

    with pytest.raises(PluginParametersError, match="not inside"):
        HtmlPluginParametersSerializer(root).serialize(spec)


def test_deserialize_rejects_missing_files(tmp_path: Path) -> None:
    root = _components(tmp_path)
    data = SerializedHtmlParameters(name="html", custom_assets_relative_paths=["images/gone.svg"]).to_json()

    with pytest.raises(PluginParametersError, match="does not contain"):
        HtmlPluginParametersSerializer(root).deserialize(data)


def test_deserialize_requires_explicit_nulls(tmp_path: Path) -> None:
    root = _components(tmp_path)
    data = SerializedHtmlParameters(name="html").to_json()
    del data["footerMessage"]

    with pytest.raises(PluginParametersError, match="footerMessage"):
        HtmlPluginParametersSerializer(root).deserialize(data)


def test_deserialize_rejects_wrong_types(tmp_path: Path) -> None:
    root = _components(tmp_path)
    data = SerializedHtmlParameters(name="html").to_json()
    data["separateInheritedMembers"] = "yes"

    with pytest.raises(PluginParametersError, match="separateInheritedMembers"):
        HtmlPluginParametersSerializer(root).deserialize(data)


def test_json_encode_skips_unset_values(tmp_path: Path) -> None:
    spec = HtmlPluginParameters()
    spec.custom_assets.from_(tmp_path / "logo.svg")
    spec.footer_message.set("Footer")

    encoded = json.loads(spec.json_encode())

    assert encoded == {
        "customAssets": [(tmp_path / "logo.svg").as_posix()],
        "customStyleSheets": [],
        "footerMessage": "Footer",
    }


def test_plugin_configuration_identifies_plugin() -> None:
    spec = HtmlPluginParameters()
    spec.merge_implicit_expect_actual_declarations.set(False)

    configuration = spec.to_plugin_configuration()

    assert configuration["fqPluginName"] == DOKKA_HTML_PLUGIN_FQN
    assert configuration["serializationFormat"] == "JSON"
    assert json.loads(configuration["values"])["mergeImplicitExpectActualDeclarations"] is False


def test_finalize_freezes_values(tmp_path: Path) -> None:
    spec = HtmlPluginParameters()
    spec.footer_message.set("Footer")

    spec.finalize()

    with pytest.raises(RuntimeError):
        spec.footer_message.set("Changed")
    with pytest.raises(RuntimeError):
        spec.custom_assets.from_(tmp_path / "late.svg")


def test_empty_parameters_survive_serialization(tmp_path: Path) -> None:
    root = _components(tmp_path)

    data = json.loads(json.dumps(HtmlPluginParametersSerializer(root).serialize(HtmlPluginParameters())))
    spec = HtmlPluginParametersSerializer(root).deserialize(data)

    assert data["customAssetsRelativePaths"] == []
    assert data["customStyleSheetsRelativePaths"] == []
    assert data["templatesDirRelativePath"] is None
    assert spec.custom_assets.files == []
    assert spec.custom_style_sheets.files == []
    assert spec.templates_dir.get_or_none() is None
    assert spec.footer_message.get_or_none() is None
    assert spec.homepage_link.get_or_none() is None


def test_stage_files_copies_outside_files_into_components_dir(tmp_path: Path) -> None:
    root = _components(tmp_path)
    shared = tmp_path / "shared"
    (shared / "styles").mkdir(parents=True)
    (shared / "styles" / "brand.css").write_text("h1 {}", encoding="utf-8")
    (shared / "templates").mkdir()
    (shared / "templates" / "base.ftl").write_text("<#-- base -->", encoding="utf-8")
    spec = HtmlPluginParameters()
    spec.custom_assets.from_(root / "images" / "logo.svg").built_by("prepareAssets")
    spec.custom_style_sheets.from_(shared / "styles")
    spec.templates_dir.set(shared / "templates")

    spec.stage_files(root)

    staged = root / "plugin-files" / "html"
    assert spec.custom_assets.files == [root / "images" / "logo.svg"]
    assert spec.custom_assets.build_dependencies == ["prepareAssets"]
    assert spec.custom_style_sheets.files == [staged / "customStyleSheets" / "styles"]
    assert spec.templates_dir.get() == staged / "templates"
    assert (staged / "templates" / "base.ftl").is_file()
    data = HtmlPluginParametersSerializer(root).serialize(spec)
    assert data["customStyleSheetsRelativePaths"] == ["plugin-files/html/customStyleSheets/styles/brand.css"]
    assert data["templatesDirRelativePath"] == "plugin-files/html/templates"
