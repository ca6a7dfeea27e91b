"""Tests for building host projects from the ``project`` section."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from docbridge.config import ConfigError, DocBridgeConfig
from docbridge.loader import KOTLIN_EXTENSION_NAME, load_project
from docbridge.models import (
    AndroidCompilation,
    KotlinJvmProjectExtension,
    KotlinMultiplatformExtension,
    KotlinSingleTargetExtension,
    PlatformType,
    VariantKind,
)


def _config(tmp_path: Path, project: Dict[str, Any], host_version: str = "8.5") -> DocBridgeConfig:
    return DocBridgeConfig(root=tmp_path, host_version=host_version, project=project)


def test_multiplatform_project_is_loaded(tmp_path: Path) -> None:
    project = load_project(
        _config(
            tmp_path,
            {
                "name": "widgets",
                "path": ":lib:widgets",
                "plugins": ["org.jetbrains.kotlin.multiplatform"],
                "kotlin": {
                    "kind": "multiplatform",
                    "source_sets": [
                        {"name": "commonMain"},
                        {"name": "jvmMain", "depends_on": ["commonMain"], "roots": ["src/jvm"]},
                    ],
                    "targets": [
                        {
                            "name": "jvm",
                            "compilations": [{"name": "main", "default_source_set": "jvmMain"}],
                        }
                    ],
                },
            },
        )
    )

    extension = project.extensions.find_by_name(KOTLIN_EXTENSION_NAME)
    assert isinstance(extension, KotlinMultiplatformExtension)
    assert project.name == "widgets"
    assert project.path_as_file_path() == "lib/widgets"
    assert project.plugin_manager.has_plugin("org.jetbrains.kotlin.multiplatform")

    common = extension.source_sets.get_by_name("commonMain")
    jvm = extension.source_sets.get_by_name("jvmMain")
    assert common.source_roots == [tmp_path / "src" / "commonMain" / "kotlin"]
    assert jvm.source_roots == [tmp_path / "src" / "jvm"]
    assert jvm.depends_on == [common]
    assert jvm.implementation_configuration_name == "jvmMainImplementation"

    (target,) = extension.targets
    assert target.platform_type is PlatformType.JVM
    assert target.compilations[0].default_source_set is jvm


def test_single_target_projects_use_kind_as_platform(tmp_path: Path) -> None:
    jvm = load_project(_config(tmp_path, {"kotlin": {"kind": "jvm", "source_sets": [{"name": "main"}]}}))
    js = load_project(_config(tmp_path, {"kotlin": {"kind": "js", "source_sets": [{"name": "main"}]}}))

    jvm_extension = jvm.extensions.find_by_name(KOTLIN_EXTENSION_NAME)
    js_extension = js.extensions.find_by_name(KOTLIN_EXTENSION_NAME)
    assert isinstance(jvm_extension, KotlinJvmProjectExtension)
    assert jvm_extension.target.platform_type is PlatformType.JVM
    assert isinstance(js_extension, KotlinSingleTargetExtension)
    assert js_extension.target.platform_type is PlatformType.JS
    assert jvm_extension.source_sets.get_by_name("main").implementation_configuration_name == "implementation"


def test_android_compilations_carry_variants(tmp_path: Path) -> None:
    project = load_project(
        _config(
            tmp_path,
            {
                "kotlin": {
                    "kind": "android",
                    "source_sets": [{"name": "main"}, {"name": "test"}],
                    "target": {
                        "compilations": [
                            {
                                "name": "release",
                                "default_source_set": "main",
                                "variant": {"kind": "library"},
                            },
                            {"name": "releaseUnitTest", "default_source_set": "test"},
                        ]
                    },
                }
            },
        )
    )

    extension = project.extensions.find_by_name(KOTLIN_EXTENSION_NAME)
    release, unit_test = extension.target.compilations
    assert extension.target.platform_type is PlatformType.ANDROID_JVM
    assert isinstance(release, AndroidCompilation)
    assert release.android_variant.kind is VariantKind.LIBRARY
    assert release.android_variant.name == "release"
    assert isinstance(unit_test, AndroidCompilation)
    assert unit_test.android_variant is None


def test_buckets_are_created_with_postures(tmp_path: Path) -> None:
    project = load_project(
        _config(
            tmp_path,
            {
                "buckets": [
                    {"name": "implementation", "posture": "declarable", "files": ["libs/a.jar"]},
                    {
                        "name": "compileClasspath",
                        "posture": "resolvable",
                        "extends_from": ["implementation"],
                    },
                ]
            },
            host_version="8.3",
        )
    )

    implementation = project.buckets.named("implementation")
    classpath = project.buckets.named("compileClasspath")
    assert project.host_version == "8.3"
    assert implementation.can_be_declared is True
    assert implementation.can_be_resolved is False
    assert implementation.dependencies == [tmp_path / "libs" / "a.jar"]
    assert classpath.can_be_resolved is True
    assert classpath.extends_from == [implementation]


def test_project_without_kotlin_section_has_no_extension(tmp_path: Path) -> None:
    project = load_project(_config(tmp_path, {}))

    assert project.extensions.find_by_name(KOTLIN_EXTENSION_NAME) is None
    assert project.name == tmp_path.name
    assert project.build_dir == tmp_path / "build"


@pytest.mark.parametrize(
    ("project", "message"),
    [
        ({"kotlin": {"kind": "swift"}}, "Unknown Kotlin project kind"),
        ({"kotlin": {"source_sets": [{"name": "a", "depends_on": ["b"]}]}}, "unknown source set 'b'"),
        ({"kotlin": {"source_sets": [{"roots": ["src"]}]}}, "needs a 'name'"),
        ({"buckets": [{"name": "x", "posture": "shared"}]}, "unknown posture"),
        ({"buckets": [{"name": "x", "extends_from": ["y"]}]}, "unknown bucket 'y'"),
        ({"kotlin": {"targets": [{"name": "jvm", "platform": "cobol"}]}}, "Target 'jvm'"),
        ({"buckets": {"name": "x"}}, "Expected a list"),
    ],
)
def test_malformed_projects_raise_config_error(tmp_path: Path, project: Dict[str, Any], message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        load_project(_config(tmp_path, project))
