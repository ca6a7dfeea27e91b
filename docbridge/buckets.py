"""Dependency buckets and helpers for marking and aggregating them.

A bucket takes one of three postures:

* declarable: dependencies are declared into it; it is never resolved or consumed.
* consumable: other modules consume it; it is never resolved or declared into.
* resolvable: it resolves to concrete files; it is never consumed or declared into.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from .capabilities import CAN_BE_DECLARED, DEFAULT_HOST_VERSION, is_feature_available
from .logging import get_logger
from .providers import FileCollection, Provider

logger = get_logger("buckets")


class ResolutionError(RuntimeError):
    """Raised when a bucket cannot be resolved to files."""


class UnknownBucketError(KeyError):
    """Raised when a named bucket does not exist."""


class Bucket:
    """A named, configurable collection of declared dependency files."""

    def __init__(self, name: str, *, host_version: str = DEFAULT_HOST_VERSION) -> None:
        self.name = name
        self.host_version = host_version
        self.can_be_resolved = True
        self.can_be_consumed = True
        self.visible = True
        self._can_be_declared = True
        self.dependencies: List[Path] = []
        self.extends_from: List["Bucket"] = []

    @property
    def can_be_declared(self) -> bool:
        return is_feature_available(CAN_BE_DECLARED, self.host_version) and self._can_be_declared

    @can_be_declared.setter
    def can_be_declared(self, value: bool) -> None:
        if is_feature_available(CAN_BE_DECLARED, self.host_version):
            self._can_be_declared = value

    def add_dependencies(self, *files: Path | str) -> "Bucket":
        self.dependencies.extend(Path(item) for item in files)
        return self

    def extend(self, *parents: "Bucket") -> "Bucket":
        self.extends_from.extend(parents)
        return self

    def resolve(self, *, lenient: bool = False) -> List[Path]:
        """Return the files declared in this bucket and every bucket it extends."""
        if not self.can_be_resolved:
            raise ResolutionError(
                f"Resolving bucket '{self.name}' is not allowed as it is defined as can_be_resolved=False"
            )
        resolved: List[Path] = []
        seen: set[Path] = set()
        for path in self._declared_files():
            if path in seen:
                continue
            seen.add(path)
            if not path.exists():
                if lenient:
                    logger.debug("Skipping missing artifact %s in bucket %s", path, self.name)
                    continue
                raise ResolutionError(f"Could not resolve {path} for bucket '{self.name}'")
            resolved.append(path)
        return resolved

    def _declared_files(self) -> Iterator[Path]:
        visited: set[int] = set()
        stack: List[Bucket] = [self]
        while stack:
            bucket = stack.pop(0)
            if id(bucket) in visited:
                continue
            visited.add(id(bucket))
            yield from bucket.dependencies
            stack.extend(bucket.extends_from)

    def __repr__(self) -> str:
        return (
            f"Bucket({self.name}, resolvable={self.can_be_resolved}, "
            f"consumable={self.can_be_consumed}, declarable={self.can_be_declared})"
        )


def declarable(bucket: Bucket, visible: bool = False) -> None:
    """Mark ``bucket`` as the raw bucket users declare dependencies into.

    Declarable buckets should be extended by resolvable and consumable buckets.
    """
    bucket.can_be_resolved = False
    bucket.can_be_consumed = False
    bucket.can_be_declared = True
    bucket.visible = visible


def consumable(bucket: Bucket, visible: bool = True) -> None:
    """Mark ``bucket`` as one that other modules consume."""
    bucket.can_be_resolved = False
    bucket.can_be_consumed = True
    bucket.can_be_declared = False
    bucket.visible = visible


def resolvable(bucket: Bucket, visible: bool = False) -> None:
    """Mark ``bucket`` as one that resolves artifacts from other modules."""
    bucket.can_be_resolved = True
    bucket.can_be_consumed = False
    bucket.can_be_declared = False
    bucket.visible = visible


class BucketContainer:
    """All dependency buckets of one project, keyed by name."""

    def __init__(self, *, host_version: str = DEFAULT_HOST_VERSION) -> None:
        self.host_version = host_version
        self._buckets: dict[str, Bucket] = {}

    def create(self, name: str) -> Bucket:
        if name in self._buckets:
            raise ValueError(f"Bucket '{name}' already exists")
        bucket = Bucket(name, host_version=self.host_version)
        self._buckets[name] = bucket
        return bucket

    def maybe_create(self, name: str, configure: Optional[Callable[[Bucket], None]] = None) -> Bucket:
        bucket = self._buckets.get(name) or self.create(name)
        if configure is not None:
            configure(bucket)
        return bucket

    def find_by_name(self, name: str) -> Optional[Bucket]:
        return self._buckets.get(name)

    def named(self, name: str) -> Bucket:
        bucket = self._buckets.get(name)
        if bucket is None:
            raise UnknownBucketError(f"Bucket '{name}' not found")
        return bucket

    @property
    def names(self) -> List[str]:
        return list(self._buckets)

    def __contains__(self, name: object) -> bool:
        return name in self._buckets

    def __iter__(self) -> Iterator[Bucket]:
        return iter(list(self._buckets.values()))


def collect_incoming_files(
    container: BucketContainer,
    named: str,
    collector: FileCollection,
    built_by: object | None = None,
    lenient: bool = True,
) -> None:
    """Aggregate the resolved files of bucket ``named`` into ``collector``.

    Buckets that do not exist or cannot be resolved are ignored. Files are
    resolved only when ``collector`` is read. Resolution is lenient by default
    because documentation rarely needs every dependency.

    ``built_by`` is recorded on the collector; it is only needed when another
    plugin forgets to declare the producer of the bucket's files.
    """
    bucket = container.find_by_name(named)
    if bucket is None or not bucket.can_be_resolved:
        logger.debug("Bucket %s is missing or not resolvable; no files collected", named)
        return

    collector.from_(
        Provider(lambda: bucket.resolve(lenient=lenient), description=f"bucket:{named}")
    )

    if built_by is not None:
        collector.built_by(built_by)


def resolved_files_or_empty(container: BucketContainer, named: str) -> Provider[Iterable[Path]]:
    """Lazily resolve ``named`` leniently, or produce no files when it cannot be resolved."""

    def _resolve() -> List[Path]:
        bucket = container.find_by_name(named)
        if bucket is None:
            logger.debug("Bucket %s does not exist; classpath is empty", named)
            return []
        if not bucket.can_be_resolved:
            logger.debug("Bucket %s cannot be resolved; classpath is empty", named)
            return []
        return bucket.resolve(lenient=True)

    return Provider(_resolve, description=f"bucket:{named}")


__all__ = [
    "Bucket",
    "BucketContainer",
    "ResolutionError",
    "UnknownBucketError",
    "collect_incoming_files",
    "consumable",
    "declarable",
    "resolvable",
    "resolved_files_or_empty",
]
