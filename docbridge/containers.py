"""Named collections shared by the host model and the documentation model."""

from __future__ import annotations

from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from .providers import Provider

T = TypeVar("T")


class UnknownElementError(KeyError):
    """Raised when a named element is requested but was never added."""


class RegistrySealedError(RuntimeError):
    """Raised when a sealed container is modified after the configuration phase."""


class NamedContainer(Generic[T]):
    """Insertion-ordered mapping of unique names to elements.

    ``all`` callbacks run for every current element and for every element added
    later. Once :meth:`seal` is called the container rejects further changes.
    """

    def __init__(self, kind: str = "element") -> None:
        self.kind = kind
        self._elements: Dict[str, T] = {}
        self._callbacks: List[Callable[[T], None]] = []
        self._sealed = False

    def add(self, name: str, element: T) -> T:
        self._ensure_open(name)
        self._elements[name] = element
        for callback in list(self._callbacks):
            callback(element)
        return element

    def all(self, callback: Callable[[T], None]) -> None:
        self._callbacks.append(callback)
        for element in list(self._elements.values()):
            callback(element)

    def find_by_name(self, name: str) -> Optional[T]:
        return self._elements.get(name)

    def get_by_name(self, name: str) -> T:
        try:
            return self._elements[name]
        except KeyError:
            raise UnknownElementError(f"{self.kind} '{name}' not found") from None

    def named(self, name: str) -> Provider[T]:
        """Return a lazy reference that fails on read if ``name`` is still missing."""
        return Provider(lambda: self.get_by_name(name), description=f"{self.kind}:{name}")

    @property
    def names(self) -> List[str]:
        return list(self._elements)

    def seal(self) -> None:
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def _ensure_open(self, name: str) -> None:
        if self._sealed:
            raise RegistrySealedError(
                f"Cannot register {self.kind} '{name}': configuration phase has ended"
            )

    def __contains__(self, name: object) -> bool:
        return name in self._elements

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._elements.values()))

    def __len__(self) -> int:
        return len(self._elements)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}, names={self.names})"


__all__ = ["NamedContainer", "RegistrySealedError", "UnknownElementError"]
