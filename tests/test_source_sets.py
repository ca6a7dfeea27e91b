"""Tests for the documentation source-set registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from docbridge.containers import RegistrySealedError, UnknownElementError
from docbridge.models import AnalysisPlatform
from docbridge.source_sets import DocSourceSetRegistry, SourceSetIdRef


def test_new_source_set_has_documented_defaults() -> None:
    registry = DocSourceSetRegistry(":widgets")
    doc = registry.register("jvmMain")

    assert doc.suppress.get() is False
    assert doc.analysis_platform.get() is AnalysisPlatform.COMMON
    assert doc.documented_visibilities.get() == ["PUBLIC"]
    assert doc.skip_empty_packages.get() is True
    assert doc.jdk_version.get() == 8
    assert doc.display_name.get_or_none() is None
    assert doc.source_set_id == SourceSetIdRef(":widgets", "jvmMain")


def test_register_runs_configure_before_callbacks() -> None:
    registry = DocSourceSetRegistry(":widgets")
    observed: list[str] = []
    registry.all(lambda doc: observed.append(doc.display_name.get()))

    registry.register("jvmMain", lambda doc: doc.display_name.set("jvm"))

    assert observed == ["jvm"]


def test_register_replaces_existing_entry() -> None:
    registry = DocSourceSetRegistry(":widgets")
    first = registry.register("commonMain", lambda doc: doc.jdk_version.set(11))
    second = registry.register("commonMain")

    assert registry.get_by_name("commonMain") is second
    assert second is not first
    assert second.jdk_version.get() == 8
    assert len(registry) == 1


def test_maybe_create_returns_existing_entry() -> None:
    registry = DocSourceSetRegistry(":widgets")
    doc = registry.register("commonMain")

    assert registry.maybe_create("commonMain") is doc


def test_named_reference_resolves_lazily() -> None:
    registry = DocSourceSetRegistry(":widgets")
    reference = registry.named("jsMain")

    registry.register("jsMain")

    assert reference.get().name == "jsMain"
    with pytest.raises(UnknownElementError):
        registry.named("nativeMain").get()


def test_dependent_source_set_refs_serialize_with_scope() -> None:
    registry = DocSourceSetRegistry(":widgets")
    doc = registry.register("jvmMain")

    ref = doc.register_dependent_source_set("commonMain0", "commonMain")

    assert doc.dependent_source_sets == {"commonMain0": ref}
    assert ref.to_json() == {"scopeId": ":widgets", "sourceSetName": "commonMain"}


def test_seal_freezes_values_and_rejects_registration(tmp_path: Path) -> None:
    registry = DocSourceSetRegistry(":widgets")
    doc = registry.register("jvmMain")
    doc.source_roots.from_(tmp_path / "src")

    registry.seal()

    assert registry.is_sealed
    assert doc.source_roots.files == [tmp_path / "src"]
    with pytest.raises(RegistrySealedError):
        registry.register("jvmTest")
    with pytest.raises(RegistrySealedError):
        doc.register_dependent_source_set("commonMain0", "commonMain")
