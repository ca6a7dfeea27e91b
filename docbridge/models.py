"""Read-only view of the host language plugin's project model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from .containers import NamedContainer


class PlatformType(str, Enum):
    """Platform a compilation target builds for."""

    COMMON = "common"
    JVM = "jvm"
    JS = "js"
    ANDROID_JVM = "androidJvm"
    NATIVE = "native"
    WASM = "wasm"

    @classmethod
    def from_string(cls, value: str) -> "PlatformType":
        lowered = value.strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        raise ValueError(f"Unrecognized platform type: {value}")


class AnalysisPlatform(str, Enum):
    """Platform the documentation generator analyses a source set for."""

    JVM = "jvm"
    JS = "js"
    WASM = "wasm"
    NATIVE = "native"
    COMMON = "common"

    @classmethod
    def from_string(cls, key: str) -> "AnalysisPlatform":
        lowered = key.strip().lower()
        if lowered in {"androidjvm", "android"}:
            return cls.JVM
        if lowered == "metadata":
            return cls.COMMON
        for member in cls:
            if member.value == lowered:
                return member
        raise ValueError(f"Unrecognized platform: {key}")


class VariantKind(str, Enum):
    LIBRARY = "library"
    APPLICATION = "application"
    TEST = "test"
    UNIT_TEST = "unit_test"


MAIN_VARIANT_KINDS = frozenset({VariantKind.LIBRARY, VariantKind.APPLICATION})


@dataclass(eq=False)
class SourceSet:
    """A named group of source directories compiled together."""

    name: str
    source_roots: List[Path] = field(default_factory=list)
    depends_on: List["SourceSet"] = field(default_factory=list)
    implementation_configuration_name: str = ""

    def __post_init__(self) -> None:
        self.source_roots = [Path(root) for root in self.source_roots]
        if not self.implementation_configuration_name:
            self.implementation_configuration_name = _implementation_bucket_name(self.name)

    def __repr__(self) -> str:
        return f"SourceSet({self.name})"


@dataclass(eq=False)
class Variant:
    """Build variant attached to Android-style compilations."""

    name: str
    kind: VariantKind


@dataclass(eq=False)
class Compilation:
    """A build target consuming one or more source sets."""

    name: str
    default_source_set: Optional[SourceSet] = None
    source_sets: List[SourceSet] = field(default_factory=list)

    @property
    def all_source_sets(self) -> List[SourceSet]:
        """Direct source sets plus everything they transitively depend on."""
        roots: List[SourceSet] = []
        if self.default_source_set is not None:
            roots.append(self.default_source_set)
        roots.extend(self.source_sets)
        return list(_walk_depends_on(roots))

    def __repr__(self) -> str:
        return f"Compilation({self.name})"


@dataclass(eq=False)
class AndroidCompilation(Compilation):
    """Compilation bound to an Android build variant.

    Older Android plugins do not report a variant; ``android_variant`` is then
    ``None``.
    """

    android_variant: Optional[Variant] = None


@dataclass(eq=False)
class Target:
    """A compilation target such as ``jvm`` or ``js``."""

    name: str
    platform_type: PlatformType = PlatformType.COMMON
    compilations: List[Compilation] = field(default_factory=list)


class KotlinProjectExtension:
    """Base of the language plugin's project extensions."""

    def __init__(self, source_sets: Iterable[SourceSet] = ()) -> None:
        self.source_sets: NamedContainer[SourceSet] = NamedContainer("source set")
        for source_set in source_sets:
            self.source_sets.add(source_set.name, source_set)


class KotlinSingleTargetExtension(KotlinProjectExtension):
    def __init__(self, target: Target, source_sets: Iterable[SourceSet] = ()) -> None:
        super().__init__(source_sets)
        self.target = target


class KotlinJvmProjectExtension(KotlinSingleTargetExtension):
    pass


class KotlinMultiplatformExtension(KotlinProjectExtension):
    def __init__(self, targets: Iterable[Target] = (), source_sets: Iterable[SourceSet] = ()) -> None:
        super().__init__(source_sets)
        self.targets: List[Target] = list(targets)


def _implementation_bucket_name(source_set_name: str) -> str:
    if source_set_name == "main":
        return "implementation"
    return f"{source_set_name}Implementation"


def _walk_depends_on(roots: Iterable[SourceSet]) -> Iterable[SourceSet]:
    seen: set[int] = set()
    stack = list(reversed(list(roots)))
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(reversed(current.depends_on))


__all__ = [
    "AnalysisPlatform",
    "AndroidCompilation",
    "Compilation",
    "KotlinJvmProjectExtension",
    "KotlinMultiplatformExtension",
    "KotlinProjectExtension",
    "KotlinSingleTargetExtension",
    "MAIN_VARIANT_KINDS",
    "PlatformType",
    "SourceSet",
    "Target",
    "Variant",
    "VariantKind",
]
