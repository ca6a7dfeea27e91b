"""Lazy values used while wiring documentation source sets.

Three small building blocks mirror how the host build tool defers work until a
value is actually read:

* :class:`Provider` computes its value on first read and memoizes it.
* :class:`Property` holds an optional explicit value on top of a lazily
  computed convention. Reads prefer the explicit value.
* :class:`FileCollection` aggregates paths from eagerly known files, nested
  collections and providers. Nothing is resolved until ``files`` is read.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")

_UNSET = object()


class MissingValueError(RuntimeError):
    """Raised when a provider or property without a value is read with ``get``."""


class FinalizedValueError(RuntimeError):
    """Raised when a finalized property or collection is mutated."""


class Provider(Generic[T]):
    """A value that is computed on first read and never recomputed."""

    def __init__(self, factory: Callable[[], Optional[T]], *, description: str = "provider") -> None:
        self._factory = factory
        self._value: object = _UNSET
        self.description = description

    @classmethod
    def of(cls, value: Optional[T]) -> "Provider[T]":
        provider: Provider[T] = cls(lambda: value, description="constant")
        provider._value = value
        return provider

    def get_or_none(self) -> Optional[T]:
        if self._value is _UNSET:
            self._value = self._factory()
        return self._value  # type: ignore[return-value]

    def get(self) -> T:
        value = self.get_or_none()
        if value is None:
            raise MissingValueError(f"{self.description} has no value")
        return value

    def get_or_else(self, default: T) -> T:
        value = self.get_or_none()
        return default if value is None else value

    @property
    def is_present(self) -> bool:
        return self.get_or_none() is not None

    @property
    def is_evaluated(self) -> bool:
        return self._value is not _UNSET

    def map(self, transform: Callable[[T], Optional[R]]) -> "Provider[R]":
        def _mapped() -> Optional[R]:
            value = self.get_or_none()
            if value is None:
                return None
            return transform(value)

        return Provider(_mapped, description=f"{self.description}.map")

    def flat_map(self, transform: Callable[[T], "Provider[R]"]) -> "Provider[R]":
        def _flat_mapped() -> Optional[R]:
            value = self.get_or_none()
            if value is None:
                return None
            return transform(value).get_or_none()

        return Provider(_flat_mapped, description=f"{self.description}.flat_map")

    def __invert__(self) -> "Provider[bool]":
        return self.map(lambda value: not value)

    def __repr__(self) -> str:
        if self.is_evaluated:
            return f"Provider({self.description}={self._value!r})"
        return f"Provider({self.description}, unevaluated)"


def as_provider(value: Union[T, Provider[T], None]) -> Provider[T]:
    """Wrap plain values so every property slot can be read the same way."""
    if isinstance(value, Provider):
        return value
    return Provider.of(value)


class Property(Generic[T]):
    """A property with a lazily computed convention and an optional explicit value.

    ``convention`` installs the default. ``set`` installs an explicit value that
    takes precedence over the convention no matter which was assigned first.
    ``set(None)`` discards the explicit value so the convention applies again.
    """

    def __init__(self, name: str = "property") -> None:
        self.name = name
        self._explicit: Optional[Provider[T]] = None
        self._convention: Optional[Provider[T]] = None
        self._finalized = False
        self._final_value: Optional[T] = None

    def set(self, value: Union[T, Provider[T], None]) -> None:
        self._ensure_mutable()
        self._explicit = None if value is None else as_provider(value)

    def convention(self, value: Union[T, Provider[T], None]) -> "Property[T]":
        self._ensure_mutable()
        self._convention = None if value is None else as_provider(value)
        return self

    @property
    def is_explicit(self) -> bool:
        return self._explicit is not None

    def get_or_none(self) -> Optional[T]:
        if self._finalized:
            return self._final_value
        if self._explicit is not None:
            return self._explicit.get_or_none()
        if self._convention is not None:
            return self._convention.get_or_none()
        return None

    def get(self) -> T:
        value = self.get_or_none()
        if value is None:
            raise MissingValueError(f"Property '{self.name}' has no value")
        return value

    def get_or_else(self, default: T) -> T:
        value = self.get_or_none()
        return default if value is None else value

    @property
    def is_present(self) -> bool:
        return self.get_or_none() is not None

    def as_provider(self) -> Provider[T]:
        return Provider(self.get_or_none, description=self.name)

    def map(self, transform: Callable[[T], Optional[R]]) -> Provider[R]:
        return self.as_provider().map(transform)

    def finalize_value(self) -> None:
        """Resolve the current value once and reject any further changes."""
        if self._finalized:
            return
        self._final_value = self.get_or_none()
        self._finalized = True

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def _ensure_mutable(self) -> None:
        if self._finalized:
            raise FinalizedValueError(f"Property '{self.name}' is final and cannot be changed")

    def __repr__(self) -> str:
        return f"Property({self.name})"


FileSource = Union[str, os.PathLike, "FileCollection", Provider, Iterable]


class FileCollection:
    """An ordered, de-duplicated, lazily resolved set of file paths."""

    def __init__(self, name: str = "files") -> None:
        self.name = name
        self._sources: List[FileSource] = []
        self._built_by: List[object] = []
        self._finalized = False
        self._final_files: List[Path] = []

    def from_(self, *sources: FileSource) -> "FileCollection":
        if self._finalized:
            raise FinalizedValueError(f"File collection '{self.name}' is final and cannot be changed")
        self._sources.extend(sources)
        return self

    def built_by(self, *tasks: object) -> "FileCollection":
        self._built_by.extend(tasks)
        return self

    @property
    def build_dependencies(self) -> List[object]:
        return list(self._built_by)

    @property
    def files(self) -> List[Path]:
        if self._finalized:
            return list(self._final_files)
        seen: set[Path] = set()
        ordered: List[Path] = []
        for path in _flatten_sources(self._sources):
            if path not in seen:
                seen.add(path)
                ordered.append(path)
        return ordered

    def as_file_tree(self) -> List[Path]:
        """Return the files of this collection with directories expanded to their contents."""
        result: List[Path] = []
        seen: set[Path] = set()
        for path in self.files:
            if path.is_dir():
                expanded = sorted(child for child in path.rglob("*") if child.is_file())
            elif path.exists():
                expanded = [path]
            else:
                expanded = []
            for item in expanded:
                if item not in seen:
                    seen.add(item)
                    result.append(item)
        return result

    def finalize_value(self) -> None:
        if self._finalized:
            return
        self._final_files = self.files
        self._finalized = True

    @property
    def is_empty(self) -> bool:
        return not self.files

    def __iter__(self) -> Iterator[Path]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __repr__(self) -> str:
        return f"FileCollection({self.name}, sources={len(self._sources)})"


def _flatten_sources(sources: Iterable[FileSource]) -> Iterator[Path]:
    for source in sources:
        if source is None:
            continue
        if isinstance(source, FileCollection):
            yield from source.files
        elif isinstance(source, Provider):
            yield from _flatten_sources([source.get_or_none()])
        elif isinstance(source, (str, os.PathLike)):
            yield Path(source)
        elif isinstance(source, Iterable):
            yield from _flatten_sources(source)
        else:
            raise TypeError(f"Unsupported file source: {source!r}")


__all__ = [
    "FileCollection",
    "FinalizedValueError",
    "MissingValueError",
    "Property",
    "Provider",
    "as_provider",
]
