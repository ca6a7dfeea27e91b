"""Builds a host :class:`~docbridge.project.Project` from a YAML project description.

The ``project`` section of ``.docbridge.yml`` mirrors what the language plugin
would report::

    project:
      name: widgets
      path: ":widgets"
      plugins: [org.jetbrains.kotlin.multiplatform]
      kotlin:
        kind: multiplatform
        source_sets:
          - name: commonMain
            roots: [src/commonMain/kotlin]
          - name: jvmMain
            roots: [src/jvmMain/kotlin]
            depends_on: [commonMain]
        targets:
          - name: jvm
            platform: jvm
            compilations:
              - name: main
                default_source_set: jvmMain
      buckets:
        - name: jvmMainImplementation
          posture: resolvable
          files: [libs/annotations.jar]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .buckets import Bucket, consumable, declarable, resolvable
from .config import ConfigError, DocBridgeConfig
from .logging import get_logger
from .models import (
    AndroidCompilation,
    Compilation,
    KotlinJvmProjectExtension,
    KotlinMultiplatformExtension,
    KotlinProjectExtension,
    KotlinSingleTargetExtension,
    PlatformType,
    SourceSet,
    Target,
    Variant,
    VariantKind,
)
from .project import PATH_SEPARATOR, Project

logger = get_logger("loader")

KOTLIN_EXTENSION_NAME = "kotlin"

_POSTURES = {
    "declarable": declarable,
    "consumable": consumable,
    "resolvable": resolvable,
}

_SINGLE_TARGET_PLATFORMS = {
    "jvm": PlatformType.JVM,
    "js": PlatformType.JS,
    "android": PlatformType.ANDROID_JVM,
}


def load_project(config: DocBridgeConfig) -> Project:
    """Create a project, its buckets and its Kotlin extension from ``config.project``."""
    data = config.project
    name = _as_name(data.get("name")) or config.root.name or "root"
    path = _as_name(data.get("path")) or PATH_SEPARATOR
    project_dir = config.root / str(data.get("dir", "."))
    build_dir_value = data.get("build_dir")
    build_dir = project_dir / str(build_dir_value) if build_dir_value else None

    project = Project(
        name,
        path=path,
        project_dir=project_dir,
        build_dir=build_dir,
        host_version=config.host_version,
    )

    for raw in _as_list(data.get("buckets"), "project.buckets"):
        _load_bucket(project, project_dir, _as_mapping(raw, "bucket"))

    kotlin_data = data.get("kotlin")
    if kotlin_data is not None:
        extension = _load_kotlin_extension(project_dir, _as_mapping(kotlin_data, "project.kotlin"))
        project.extensions.add(KOTLIN_EXTENSION_NAME, extension)

    for plugin_id in _as_list(data.get("plugins"), "project.plugins"):
        project.plugin_manager.apply(str(plugin_id))

    logger.debug(
        "Loaded project %s with %d buckets and plugins %s",
        project.path,
        len(project.buckets.names),
        project.plugin_manager.applied,
    )
    return project


def _load_bucket(project: Project, project_dir: Path, data: Mapping[str, Any]) -> Bucket:
    name = _require_name(data, "bucket")
    bucket = project.buckets.maybe_create(name)
    posture = data.get("posture")
    if posture is not None:
        marker = _POSTURES.get(str(posture).lower())
        if marker is None:
            raise ConfigError(f"Bucket '{name}' has unknown posture '{posture}'")
        marker(bucket)
    bucket.add_dependencies(*(project_dir / str(item) for item in _as_list(data.get("files"), name)))
    for parent_name in _as_list(data.get("extends_from"), name):
        parent = project.buckets.find_by_name(str(parent_name))
        if parent is None:
            raise ConfigError(f"Bucket '{name}' extends unknown bucket '{parent_name}'")
        bucket.extend(parent)
    return bucket


def _load_kotlin_extension(project_dir: Path, data: Mapping[str, Any]) -> KotlinProjectExtension:
    source_sets = _load_source_sets(project_dir, _as_list(data.get("source_sets"), "source_sets"))
    kind = str(data.get("kind", "multiplatform")).lower()

    if kind == "multiplatform":
        targets = [
            _load_target(_as_mapping(raw, "target"), source_sets)
            for raw in _as_list(data.get("targets"), "targets")
        ]
        return KotlinMultiplatformExtension(targets=targets, source_sets=source_sets.values())

    platform = _SINGLE_TARGET_PLATFORMS.get(kind)
    if platform is None:
        raise ConfigError(f"Unknown Kotlin project kind '{kind}'")
    target_data = dict(_as_mapping(data.get("target") or {}, "target"))
    target_data.setdefault("name", kind)
    target_data.setdefault("platform", platform.value)
    target = _load_target(target_data, source_sets)
    if platform is PlatformType.JVM:
        return KotlinJvmProjectExtension(target, source_sets=source_sets.values())
    return KotlinSingleTargetExtension(target, source_sets=source_sets.values())


def _load_source_sets(project_dir: Path, entries: List[Any]) -> Dict[str, SourceSet]:
    source_sets: Dict[str, SourceSet] = {}
    edges: Dict[str, List[str]] = {}
    for raw in entries:
        data = _as_mapping(raw, "source set")
        name = _require_name(data, "source set")
        roots = data.get("roots")
        if roots is None:
            roots = [f"src/{name}/kotlin"]
        source_sets[name] = SourceSet(
            name=name,
            source_roots=[project_dir / str(root) for root in _as_list(roots, name)],
            implementation_configuration_name=str(data.get("implementation_bucket") or ""),
        )
        edges[name] = [str(item) for item in _as_list(data.get("depends_on"), name)]

    for name, dependencies in edges.items():
        for dependency in dependencies:
            source_sets[name].depends_on.append(_lookup(source_sets, dependency, f"source set '{name}'"))
    return source_sets


def _load_target(data: Mapping[str, Any], source_sets: Mapping[str, SourceSet]) -> Target:
    name = _require_name(data, "target")
    try:
        platform = PlatformType.from_string(str(data.get("platform", name)))
    except ValueError as exc:
        raise ConfigError(f"Target '{name}': {exc}") from exc
    compilations = [
        _load_compilation(_as_mapping(raw, "compilation"), source_sets, platform)
        for raw in _as_list(data.get("compilations"), name)
    ]
    return Target(name=name, platform_type=platform, compilations=compilations)


def _load_compilation(
    data: Mapping[str, Any], source_sets: Mapping[str, SourceSet], platform: PlatformType
) -> Compilation:
    name = _require_name(data, "compilation")
    context = f"compilation '{name}'"
    default_name = data.get("default_source_set")
    default = _lookup(source_sets, str(default_name), context) if default_name else None
    direct = [
        _lookup(source_sets, str(item), context)
        for item in _as_list(data.get("source_sets"), name)
    ]

    if platform is PlatformType.ANDROID_JVM or "variant" in data:
        return AndroidCompilation(
            name=name,
            default_source_set=default,
            source_sets=direct,
            android_variant=_load_variant(data.get("variant"), name),
        )
    return Compilation(name=name, default_source_set=default, source_sets=direct)


def _load_variant(value: Any, compilation: str) -> Optional[Variant]:
    if value is None:
        return None
    data = _as_mapping(value, "variant")
    try:
        kind = VariantKind(str(data.get("kind", "")).lower())
    except ValueError:
        raise ConfigError(f"Compilation '{compilation}' has an unknown variant kind") from None
    return Variant(name=str(data.get("name", compilation)), kind=kind)


def _lookup(source_sets: Mapping[str, SourceSet], name: str, context: str) -> SourceSet:
    try:
        return source_sets[name]
    except KeyError:
        raise ConfigError(f"{context} references unknown source set '{name}'") from None


def _require_name(data: Mapping[str, Any], kind: str) -> str:
    name = _as_name(data.get("name"))
    if not name:
        raise ConfigError(f"Every {kind} needs a 'name'")
    return name


def _as_name(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int)) and str(value) else None


def _as_list(value: Any, context: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        return [value]
    if isinstance(value, list):
        return value
    raise ConfigError(f"Expected a list for {context}")


def _as_mapping(value: Any, context: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"Expected a mapping for {context}")
    return value


__all__ = ["KOTLIN_EXTENSION_NAME", "load_project"]
