"""Parameters for the documentation generator's base HTML format."""

from __future__ import annotations

import json
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..logging import get_logger
from ..paths import invariant_separators_path, is_within
from ..providers import FileCollection, Property
from .base import PluginParametersBaseSpec, PluginParametersError, PluginParametersSerializer

DOKKA_HTML_PARAMETERS_NAME = "html"
DOKKA_HTML_PLUGIN_FQN = "org.jetbrains.dokka.base.DokkaBase"

# Directory under the components directory that receives copied user files.
STAGED_FILES_DIR_NAME = "plugin-files"

logger = get_logger("plugins.html")


class HtmlPluginParameters(PluginParametersBaseSpec):
    """Configuration for the base HTML format.

    ``custom_assets`` and ``custom_style_sheets`` are copied as-is into a fixed
    directory of the assembled publication, so any relative links inside them
    must still work after the move. Mirroring the publication's directory
    layout in the source files keeps those links valid.

    ``separate_inherited_members`` renders inherited members separately from
    declared ones. ``merge_implicit_expect_actual_declarations`` merges
    declarations that share a fully qualified name without being declared as
    expect/actual. Both are disabled by the generator when unset.

    ``homepage_link`` adds a link to the project homepage in the header; a
    custom ``homepage.svg`` in ``custom_assets`` replaces the icon.
    ``templates_dir`` points at a directory of custom HTML templates.
    """

    PLUGIN_FQN = DOKKA_HTML_PLUGIN_FQN

    def __init__(self, name: str = DOKKA_HTML_PARAMETERS_NAME) -> None:
        super().__init__(name, DOKKA_HTML_PLUGIN_FQN)
        self.custom_assets = FileCollection("customAssets")
        self.custom_style_sheets = FileCollection("customStyleSheets")
        self.separate_inherited_members: Property[bool] = Property("separateInheritedMembers")
        self.merge_implicit_expect_actual_declarations: Property[bool] = Property(
            "mergeImplicitExpectActualDeclarations"
        )
        self.footer_message: Property[str] = Property("footerMessage")
        self.homepage_link: Property[str] = Property("homepageLink")
        self.templates_dir: Property[Path] = Property("templatesDir")

    @classmethod
    def values_serializer(cls, components_dir: Path) -> "HtmlPluginParametersSerializer":
        return HtmlPluginParametersSerializer(components_dir)

    def json_encode(self) -> str:
        values: Dict[str, Any] = {
            "customAssets": [invariant_separators_path(path) for path in self.custom_assets.files],
            "customStyleSheets": [
                invariant_separators_path(path) for path in self.custom_style_sheets.files
            ],
        }
        optional: Dict[str, Any] = {
            "separateInheritedMembers": self.separate_inherited_members.get_or_none(),
            "mergeImplicitExpectActualDeclarations": self.merge_implicit_expect_actual_declarations.get_or_none(),
            "footerMessage": self.footer_message.get_or_none(),
            "templatesDir": _optional_posix(self.templates_dir.get_or_none()),
            "homepageLink": self.homepage_link.get_or_none(),
        }
        values.update({key: value for key, value in optional.items() if value is not None})
        return json.dumps(values)

    def stage_files(self, components_dir: Path) -> None:
        staging_dir = Path(components_dir) / STAGED_FILES_DIR_NAME / self.name
        self.custom_assets = _staged(self.custom_assets, components_dir, staging_dir / "customAssets")
        self.custom_style_sheets = _staged(
            self.custom_style_sheets, components_dir, staging_dir / "customStyleSheets"
        )
        templates = self.templates_dir.get_or_none()
        if templates is not None and Path(templates).is_dir() and not is_within(templates, components_dir):
            target = staging_dir / "templates"
            shutil.copytree(templates, target, dirs_exist_ok=True)
            logger.debug("Staged templates %s into %s", templates, target)
            self.templates_dir.set(target)

    def finalize(self) -> None:
        self.custom_assets.finalize_value()
        self.custom_style_sheets.finalize_value()
        for prop in (
            self.separate_inherited_members,
            self.merge_implicit_expect_actual_declarations,
            self.footer_message,
            self.homepage_link,
            self.templates_dir,
        ):
            prop.finalize_value()


@dataclass
class SerializedHtmlParameters:
    """At-rest form of :class:`HtmlPluginParameters`; every path is relative."""

    name: str
    custom_assets_relative_paths: List[str] = field(default_factory=list)
    custom_style_sheets_relative_paths: List[str] = field(default_factory=list)
    templates_dir_relative_path: Optional[str] = None
    homepage_link: Optional[str] = None
    merge_implicit_expect_actual_declarations: Optional[bool] = None
    separate_inherited_members: Optional[bool] = None
    footer_message: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "customAssetsRelativePaths": list(self.custom_assets_relative_paths),
            "customStyleSheetsRelativePaths": list(self.custom_style_sheets_relative_paths),
            "templatesDirRelativePath": self.templates_dir_relative_path,
            "homepageLink": self.homepage_link,
            "mergeImplicitExpectActualDeclarations": self.merge_implicit_expect_actual_declarations,
            "separateInheritedMembers": self.separate_inherited_members,
            "footerMessage": self.footer_message,
        }

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "SerializedHtmlParameters":
        if not isinstance(payload, Mapping):
            raise PluginParametersError("HTML plugin parameters must be a JSON object")
        name = payload.get("name")
        if not isinstance(name, str):
            raise PluginParametersError("HTML plugin parameters are missing 'name'")
        return cls(
            name=name,
            custom_assets_relative_paths=_str_list(payload, "customAssetsRelativePaths"),
            custom_style_sheets_relative_paths=_str_list(payload, "customStyleSheetsRelativePaths"),
            templates_dir_relative_path=_optional(payload, "templatesDirRelativePath", str),
            homepage_link=_optional(payload, "homepageLink", str),
            merge_implicit_expect_actual_declarations=_optional(
                payload, "mergeImplicitExpectActualDeclarations", bool
            ),
            separate_inherited_members=_optional(payload, "separateInheritedMembers", bool),
            footer_message=_optional(payload, "footerMessage", str),
        )


class HtmlPluginParametersSerializer(PluginParametersSerializer[HtmlPluginParameters]):
    def serialize(self, value: HtmlPluginParameters) -> Dict[str, Any]:
        return SerializedHtmlParameters(
            name=value.name,
            custom_assets_relative_paths=self.relative_paths(value.custom_assets),
            custom_style_sheets_relative_paths=self.relative_paths(value.custom_style_sheets),
            templates_dir_relative_path=self.optional_relative_path(value.templates_dir),
            homepage_link=value.homepage_link.get_or_none(),
            merge_implicit_expect_actual_declarations=value.merge_implicit_expect_actual_declarations.get_or_none(),
            separate_inherited_members=value.separate_inherited_members.get_or_none(),
            footer_message=value.footer_message.get_or_none(),
        ).to_json()

    def deserialize(self, data: Mapping[str, Any]) -> HtmlPluginParameters:
        delegate = SerializedHtmlParameters.from_json(data)
        spec = HtmlPluginParameters(delegate.name)
        spec.custom_assets.from_(self.absolute_paths(delegate.custom_assets_relative_paths))
        spec.custom_style_sheets.from_(
            self.absolute_paths(delegate.custom_style_sheets_relative_paths)
        )
        if delegate.templates_dir_relative_path is not None:
            spec.templates_dir.set(self.absolute_path(delegate.templates_dir_relative_path))
        spec.homepage_link.set(delegate.homepage_link)
        spec.merge_implicit_expect_actual_declarations.set(
            delegate.merge_implicit_expect_actual_declarations
        )
        spec.separate_inherited_members.set(delegate.separate_inherited_members)
        spec.footer_message.set(delegate.footer_message)
        return spec


def _staged(files: FileCollection, components_dir: Path, target_dir: Path) -> FileCollection:
    """Return a copy of ``files`` whose entries outside ``components_dir`` point at staged copies."""
    staged = FileCollection(files.name)
    for source in files.files:
        if is_within(source, components_dir) or not source.exists():
            staged.from_(source)
            continue
        destination = target_dir / source.name
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        logger.debug("Staged %s into %s", source, destination)
        staged.from_(destination)
    staged.built_by(*files.build_dependencies)
    return staged


def _optional_posix(path: Optional[Path]) -> Optional[str]:
    return invariant_separators_path(Path(path)) if path is not None else None


def _str_list(payload: Mapping[str, Any], key: str) -> List[str]:
    value = payload.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise PluginParametersError(f"'{key}' must be a list of relative paths")
    return list(value)


def _optional(payload: Mapping[str, Any], key: str, expected: type) -> Any:
    if key not in payload:
        raise PluginParametersError(f"'{key}' is missing; unset values must be written as null")
    value = payload[key]
    if value is not None and not isinstance(value, expected):
        raise PluginParametersError(f"'{key}' must be {expected.__name__} or null")
    return value


__all__ = [
    "DOKKA_HTML_PARAMETERS_NAME",
    "DOKKA_HTML_PLUGIN_FQN",
    "HtmlPluginParameters",
    "HtmlPluginParametersSerializer",
    "SerializedHtmlParameters",
]
