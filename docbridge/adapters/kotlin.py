"""Automatically registers Kotlin source sets as documentation source sets."""

from __future__ import annotations

from typing import Dict, List

from ..buckets import BucketContainer, resolved_files_or_empty
from ..capabilities import Capability, probe
from ..extension import DocBridgeExtension
from ..logging import get_logger
from ..models import (
    MAIN_VARIANT_KINDS,
    AnalysisPlatform,
    AndroidCompilation,
    Compilation,
    KotlinMultiplatformExtension,
    KotlinProjectExtension,
    KotlinSingleTargetExtension,
    PlatformType,
    SourceSet,
    VariantKind,
)
from ..paths import invariant_separators_path
from ..project import ExtensionContainer, Project
from ..providers import Provider
from ..source_sets import DocSourceSet
from .base import Adapter

logger = get_logger("adapters.kotlin")

KOTLIN_PLUGIN_IDS = (
    "org.jetbrains.kotlin.android",
    "org.jetbrains.kotlin.js",
    "org.jetbrains.kotlin.jvm",
    "org.jetbrains.kotlin.multiplatform",
)

# Raised by partially configured models; classification must survive them.
_LOOKUP_ERRORS = (AttributeError, LookupError, TypeError)


class KotlinAdapter(Adapter):
    """Registers every Kotlin source set of a project once a Kotlin plugin is applied."""

    plugin_ids = KOTLIN_PLUGIN_IDS

    def apply(self, project: Project) -> None:
        logger.info("Applied Kotlin adapter to %s", project.path)
        super().apply(project)

    def configure(self, project: Project) -> None:
        kotlin_extension = find_kotlin_extension(project.extensions)
        if kotlin_extension is None:
            logger.info("Could not find Kotlin extension in %s", project.path)
            return
        logger.info("Configuring documentation in Kotlin project %s", project.path)

        docs = project.extensions.get_by_type(DocBridgeExtension)
        context = KotlinAdapterContext(docs, kotlin_extension, project.buckets)

        def _register(source_set: SourceSet) -> None:
            logger.debug("Auto configuring Kotlin source set %s", source_set.name)
            context.register_source_set(source_set)

        kotlin_extension.source_sets.all(_register)


class KotlinAdapterContext:
    """Classifies Kotlin source sets and projects them into documentation source sets."""

    def __init__(
        self,
        docs: DocBridgeExtension,
        kotlin_extension: KotlinProjectExtension,
        buckets: BucketContainer,
    ) -> None:
        self.docs = docs
        self.kotlin_extension = kotlin_extension
        self.buckets = buckets
        self._classifications: Dict[int, Provider[bool]] = {}
        self.kotlin_target: Provider[PlatformType] = Provider(
            self._detect_kotlin_target, description="kotlinTarget"
        )
        self.analysis_platform: Provider[AnalysisPlatform] = self.kotlin_target.map(
            lambda target: AnalysisPlatform.from_string(target.value)
        )

    def is_main_source_set(self, source_set: SourceSet) -> Provider[bool]:
        """Determine lazily whether ``source_set`` holds main rather than test sources."""
        key = id(source_set)
        provider = self._classifications.get(key)
        if provider is None:
            provider = Provider(
                lambda: self._classify(source_set), description=f"isMainSourceSet:{source_set.name}"
            )
            self._classifications[key] = provider
        return provider

    def register_source_set(self, source_set: SourceSet) -> DocSourceSet:
        # TODO: honour source filters by registering individual source files instead of whole roots.
        extant_roots = [root for root in source_set.source_roots if root.exists()]
        logger.debug(
            "Kotlin source set %s has source roots: %s",
            source_set.name,
            [invariant_separators_path(root) for root in extant_roots],
        )

        is_main = self.is_main_source_set(source_set)
        kotlin_target = self.kotlin_target

        def _configure(doc: DocSourceSet) -> None:
            doc.suppress.convention(~is_main)
            doc.source_roots.from_(extant_roots)
            # Declaration-only buckets cannot be resolved; they contribute an empty classpath.
            doc.classpath.from_(
                resolved_files_or_empty(self.buckets, source_set.implementation_configuration_name)
            )
            doc.analysis_platform.set(self.analysis_platform)
            for dependency in source_set.depends_on:
                doc.register_dependent_source_set(
                    f"{dependency.name}{len(doc.dependent_source_sets)}", dependency.name
                )
            doc.display_name.set(
                kotlin_target.map(lambda target: display_name_for(source_set.name, target))
            )

        return self.docs.source_sets.register(source_set.name, _configure)

    def _classify(self, source_set: SourceSet) -> bool:
        compilations = [
            compilation
            for compilation in self._all_compilations()
            if _references(compilation, source_set)
        ]
        main_count = sum(1 for compilation in compilations if is_main_compilation(compilation))
        logger.debug(
            "Kotlin source set %s. empty: %s. main compilations: %d",
            source_set.name,
            not compilations,
            main_count,
        )
        return not compilations or main_count > 0

    def _all_compilations(self) -> List[Compilation]:
        extension = self.kotlin_extension
        try:
            if isinstance(extension, KotlinMultiplatformExtension):
                return [
                    compilation for target in extension.targets for compilation in target.compilations
                ]
            if isinstance(extension, KotlinSingleTargetExtension):
                return list(extension.target.compilations)
        except _LOOKUP_ERRORS:
            logger.debug("Kotlin extension of %s has no usable compilations", self.docs.module_path)
        return []

    def _detect_kotlin_target(self) -> PlatformType:
        extension = self.kotlin_extension
        try:
            if isinstance(extension, KotlinMultiplatformExtension):
                platforms = [target.platform_type for target in extension.targets]
                return platforms[0] if len(platforms) == 1 else PlatformType.COMMON
            if isinstance(extension, KotlinSingleTargetExtension):
                return extension.target.platform_type
        except _LOOKUP_ERRORS:
            logger.debug("Could not determine Kotlin target of %s", self.docs.module_path)
        return PlatformType.COMMON


def is_main_compilation(compilation: Compilation) -> bool:
    """Return True when ``compilation`` produces main (non-test) output."""
    if isinstance(compilation, AndroidCompilation):
        capability = probe(
            compilation,
            "android_variant",
            lambda variant: VariantKind(variant.kind) in MAIN_VARIANT_KINDS,
        )
        if capability is not Capability.UNAVAILABLE:
            return capability is Capability.AVAILABLE_TRUE
        # Older Android plugins expose no variant.
        return _is_not_test_by_name(compilation)
    try:
        return compilation.name == "main"
    except _LOOKUP_ERRORS:
        return _is_not_test_by_name(compilation)


def display_name_for(source_set_name: str, target: PlatformType) -> str:
    """Strip the trailing ``Main`` token, falling back to the platform name."""
    head, separator, _ = source_set_name.rpartition("Main")
    return head if separator else target.value


def find_kotlin_extension(extensions: ExtensionContainer) -> KotlinProjectExtension | None:
    return extensions.find_by_type(KotlinProjectExtension)


def _references(compilation: Compilation, source_set: SourceSet) -> bool:
    try:
        return (
            compilation.default_source_set is source_set
            or any(candidate is source_set for candidate in compilation.source_sets)
            or any(candidate is source_set for candidate in compilation.all_source_sets)
        )
    except _LOOKUP_ERRORS:
        return False


def _is_not_test_by_name(compilation: object) -> bool:
    name = getattr(compilation, "name", "") or ""
    return not str(name).lower().endswith("test")


__all__ = [
    "KOTLIN_PLUGIN_IDS",
    "KotlinAdapter",
    "KotlinAdapterContext",
    "display_name_for",
    "find_kotlin_extension",
    "is_main_compilation",
]
