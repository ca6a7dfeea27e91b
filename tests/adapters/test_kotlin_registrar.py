"""Tests for registering Kotlin source sets as documentation source sets."""

from __future__ import annotations

from docbridge.base_plugin import DocBridgePlugin
from docbridge.buckets import declarable, resolvable
from docbridge.models import (
    AnalysisPlatform,
    Compilation,
    KotlinJvmProjectExtension,
    KotlinMultiplatformExtension,
    PlatformType,
    SourceSet,
    Target,
)
from docbridge.source_sets import SourceSetIdRef


def _jvm_extension(*source_sets: SourceSet) -> KotlinJvmProjectExtension:
    main, *others = source_sets
    compilations = [Compilation("main", default_source_set=main)]
    compilations.extend(Compilation(other.name, default_source_set=other) for other in others)
    target = Target("jvm", PlatformType.JVM, compilations)
    return KotlinJvmProjectExtension(target, source_sets)


def test_nonexistent_source_roots_are_skipped(project_builder) -> None:
    main = project_builder.source_set("main")
    generated = project_builder.root / "build" / "generated" / "kotlin"
    main.source_roots.append(generated)
    project, docs = project_builder.documented_project(_jvm_extension(main), ["org.jetbrains.kotlin.jvm"])

    doc = docs.source_sets.get_by_name("main")

    assert doc.source_roots.files == [project_builder.root / "src" / "main" / "kotlin"]


def test_classpath_resolves_implementation_bucket(project_builder) -> None:
    main = project_builder.source_set("main")
    project, docs = project_builder.documented_project(_jvm_extension(main), ["org.jetbrains.kotlin.jvm"])
    jar = project_builder.root / "libs" / "core.jar"
    jar.parent.mkdir()
    jar.write_text("jar", encoding="utf-8")
    resolvable(project.buckets.create("implementation").add_dependencies(jar))

    assert docs.source_sets.get_by_name("main").classpath.files == [jar]


def test_classpath_is_empty_for_declaration_only_bucket(project_builder) -> None:
    main = project_builder.source_set("main")
    project, docs = project_builder.documented_project(_jvm_extension(main), ["org.jetbrains.kotlin.jvm"])
    jar = project_builder.root / "core.jar"
    jar.write_text("jar", encoding="utf-8")
    declarable(project.buckets.create("implementation").add_dependencies(jar))

    assert docs.source_sets.get_by_name("main").classpath.files == []


def test_classpath_is_empty_for_missing_bucket(project_builder) -> None:
    main = project_builder.source_set("main")
    _, docs = project_builder.documented_project(_jvm_extension(main), ["org.jetbrains.kotlin.jvm"])

    assert docs.source_sets.get_by_name("main").classpath.files == []


def test_dependencies_become_dependent_source_sets(project_builder) -> None:
    common = project_builder.source_set("commonMain")
    jvm = project_builder.source_set("jvmMain", depends_on=[common])
    extension = KotlinMultiplatformExtension(
        [Target("jvm", PlatformType.JVM, [Compilation("main", default_source_set=jvm)])],
        [common, jvm],
    )
    _, docs = project_builder.documented_project(extension, ["org.jetbrains.kotlin.multiplatform"])

    doc = docs.source_sets.get_by_name("jvmMain")

    assert doc.dependent_source_sets == {"commonMain0": SourceSetIdRef(":widgets", "commonMain")}
    assert doc.analysis_platform.get() is AnalysisPlatform.JVM


def test_analysis_platform_is_common_for_several_targets(project_builder) -> None:
    common = project_builder.source_set("commonMain")
    extension = KotlinMultiplatformExtension(
        [Target("jvm", PlatformType.JVM), Target("js", PlatformType.JS)],
        [common],
    )
    _, docs = project_builder.documented_project(extension, ["org.jetbrains.kotlin.multiplatform"])

    assert docs.source_sets.get_by_name("commonMain").analysis_platform.get() is AnalysisPlatform.COMMON


def test_android_target_analyses_as_jvm(project_builder) -> None:
    main = project_builder.source_set("main")
    target = Target("android", PlatformType.ANDROID_JVM, [Compilation("release", default_source_set=main)])
    extension = KotlinJvmProjectExtension(target, [main])
    _, docs = project_builder.documented_project(extension, ["org.jetbrains.kotlin.android"])

    assert docs.source_sets.get_by_name("main").analysis_platform.get() is AnalysisPlatform.JVM


def test_user_override_beats_classification(project_builder) -> None:
    main = project_builder.source_set("main")
    test = project_builder.source_set("test")
    project = project_builder.project()
    project.extensions.add("kotlin", _jvm_extension(main, test))
    docs = DocBridgePlugin().apply(project)
    docs.source_sets.all(lambda doc: doc.suppress.set(False))

    project.plugin_manager.apply("org.jetbrains.kotlin.jvm")

    assert docs.source_sets.get_by_name("test").suppress.get() is False


def test_source_sets_added_later_are_registered(project_builder) -> None:
    main = project_builder.source_set("main")
    extension = _jvm_extension(main)
    _, docs = project_builder.documented_project(extension, ["org.jetbrains.kotlin.jvm"])

    late = project_builder.source_set("benchmark")
    extension.target.compilations.append(Compilation("benchmark", default_source_set=late))
    extension.source_sets.add(late.name, late)

    assert docs.source_sets.names == ["main", "benchmark"]
    assert docs.source_sets.get_by_name("benchmark").suppress.get() is True


def test_source_sets_register_once_for_several_kotlin_plugins(project_builder) -> None:
    main = project_builder.source_set("main")
    project = project_builder.project()
    project.extensions.add("kotlin", _jvm_extension(main))
    docs = DocBridgePlugin().apply(project)
    registered: list[str] = []
    docs.source_sets.all(lambda doc: registered.append(doc.name))

    project.plugin_manager.apply("org.jetbrains.kotlin.jvm")
    project.plugin_manager.apply("org.jetbrains.kotlin.multiplatform")

    assert registered == ["main"]


def test_project_without_kotlin_extension_is_left_alone(project_builder) -> None:
    project = project_builder.project()
    docs = DocBridgePlugin().apply(project)

    project.plugin_manager.apply("org.jetbrains.kotlin.jvm")

    assert docs.source_sets.names == []


def test_nothing_registers_until_a_kotlin_plugin_is_applied(project_builder) -> None:
    main = project_builder.source_set("main")
    project = project_builder.project()
    project.extensions.add("kotlin", _jvm_extension(main))

    docs = DocBridgePlugin().apply(project)

    assert docs.source_sets.names == []
