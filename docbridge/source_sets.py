"""Documentation source sets and the per-project registry that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .containers import NamedContainer, RegistrySealedError
from .logging import get_logger
from .models import AnalysisPlatform
from .providers import FileCollection, Property

logger = get_logger("source_sets")


@dataclass(frozen=True)
class SourceSetIdRef:
    """Weak reference to a documentation source set, by project scope and name."""

    scope_id: str
    source_set_name: str

    def to_json(self) -> Dict[str, str]:
        return {"scopeId": self.scope_id, "sourceSetName": self.source_set_name}


class DocSourceSet:
    """The documentation generator's view of one source set."""

    def __init__(self, name: str, *, scope_id: str) -> None:
        self.name = name
        self.scope_id = scope_id
        self.suppress: Property[bool] = Property("suppress").convention(False)
        self.display_name: Property[str] = Property("displayName")
        self.analysis_platform: Property[AnalysisPlatform] = Property("analysisPlatform").convention(
            AnalysisPlatform.COMMON
        )
        self.source_roots = FileCollection("sourceRoots")
        self.classpath = FileCollection("classpath")
        self.samples = FileCollection("samples")
        self.includes = FileCollection("includes")
        self.documented_visibilities: Property[List[str]] = Property("documentedVisibilities").convention(
            ["PUBLIC"]
        )
        self.skip_empty_packages: Property[bool] = Property("skipEmptyPackages").convention(True)
        self.jdk_version: Property[int] = Property("jdkVersion").convention(8)
        self.dependent_source_sets: Dict[str, SourceSetIdRef] = {}
        self._finalized = False

    @property
    def source_set_id(self) -> SourceSetIdRef:
        return SourceSetIdRef(self.scope_id, self.name)

    def register_dependent_source_set(self, key: str, source_set_name: str) -> SourceSetIdRef:
        if self._finalized:
            raise RegistrySealedError(
                f"Cannot add dependent source set to '{self.name}': configuration phase has ended"
            )
        ref = SourceSetIdRef(self.scope_id, source_set_name)
        self.dependent_source_sets[key] = ref
        return ref

    def finalize(self) -> None:
        for prop in (
            self.suppress,
            self.display_name,
            self.analysis_platform,
            self.documented_visibilities,
            self.skip_empty_packages,
            self.jdk_version,
        ):
            prop.finalize_value()
        for collection in (self.source_roots, self.classpath, self.samples, self.includes):
            collection.finalize_value()
        self._finalized = True

    def __repr__(self) -> str:
        return f"DocSourceSet({self.scope_id}:{self.name})"


class DocSourceSetRegistry(NamedContainer[DocSourceSet]):
    """Registry of documentation source sets for one project.

    Registration is idempotent by name: registering an existing name replaces
    the previous entry. Sealing finalizes every value so reads during the
    execution phase never recompute.
    """

    def __init__(self, scope_id: str) -> None:
        super().__init__("documentation source set")
        self.scope_id = scope_id

    def register(
        self, name: str, configure: Optional[Callable[[DocSourceSet], None]] = None
    ) -> DocSourceSet:
        self._ensure_open(name)
        source_set = DocSourceSet(name, scope_id=self.scope_id)
        if configure is not None:
            configure(source_set)
        if name in self:
            logger.debug("Replacing documentation source set %s in %s", name, self.scope_id)
        return self.add(name, source_set)

    def maybe_create(self, name: str) -> DocSourceSet:
        existing = self.find_by_name(name)
        if existing is not None:
            return existing
        return self.register(name)

    def seal(self) -> None:
        if self.is_sealed:
            return
        for source_set in self:
            source_set.finalize()
        super().seal()
        logger.debug("Sealed %d documentation source sets for %s", len(self), self.scope_id)


__all__ = ["DocSourceSet", "DocSourceSetRegistry", "SourceSetIdRef"]
