"""Feature detection for host build-tool APIs that vary between versions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache, total_ordering
from typing import Any, Callable, Tuple

from .logging import get_logger

logger = get_logger("capabilities")

DEFAULT_HOST_VERSION = "8.5"

CAN_BE_DECLARED = "bucket.can_be_declared"

# Minimum host version that ships each optional API.
_FEATURE_MINIMUMS = {
    CAN_BE_DECLARED: "8.2",
}

_VERSION_PART = re.compile(r"\d+")


class Capability(Enum):
    """Outcome of probing an optional API."""

    AVAILABLE_TRUE = "available-true"
    AVAILABLE_FALSE = "available-false"
    UNAVAILABLE = "unavailable"

    @property
    def available(self) -> bool:
        return self is not Capability.UNAVAILABLE


@total_ordering
@dataclass(frozen=True)
class HostVersion:
    """Numeric host build-tool version, e.g. ``8.2`` or ``8.4-rc-1``."""

    raw: str
    parts: Tuple[int, ...] = field(compare=False)

    @classmethod
    def parse(cls, value: str) -> "HostVersion":
        text = str(value).strip()
        release = text.split("-", 1)[0]
        parts = tuple(int(match) for match in _VERSION_PART.findall(release))
        if not parts:
            raise ValueError(f"Unrecognised host version: {value!r}")
        return cls(raw=text, parts=parts)

    def _padded(self, other: "HostVersion") -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        width = max(len(self.parts), len(other.parts))
        left = self.parts + (0,) * (width - len(self.parts))
        right = other.parts + (0,) * (width - len(other.parts))
        return left, right

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            other = HostVersion.parse(other)
        if not isinstance(other, HostVersion):
            return NotImplemented
        left, right = self._padded(other)
        return left == right

    def __lt__(self, other: object) -> bool:
        if isinstance(other, str):
            other = HostVersion.parse(other)
        if not isinstance(other, HostVersion):
            return NotImplemented
        left, right = self._padded(other)
        return left < right

    def __hash__(self) -> int:
        parts = list(self.parts)
        while len(parts) > 1 and parts[-1] == 0:
            parts.pop()
        return hash(tuple(parts))

    def __str__(self) -> str:
        return self.raw


@lru_cache(maxsize=None)
def is_feature_available(feature: str, host_version: str) -> bool:
    """Return True when ``feature`` exists on ``host_version``.

    Evaluated once per (feature, version) pair.
    """
    minimum = _FEATURE_MINIMUMS.get(feature)
    if minimum is None:
        raise KeyError(f"Unknown host feature: {feature}")
    available = HostVersion.parse(host_version) >= minimum
    logger.debug("Host feature %s on %s: %s", feature, host_version, available)
    return available


def probe(obj: Any, attribute: str, predicate: Callable[[Any], bool] = bool) -> Capability:
    """Check an optional attribute and evaluate ``predicate`` against it.

    A missing attribute, or a lookup failure while evaluating the predicate,
    reports :attr:`Capability.UNAVAILABLE` instead of raising.
    """
    try:
        value = getattr(obj, attribute)
    except AttributeError:
        return Capability.UNAVAILABLE
    try:
        matched = predicate(value)
    except (AttributeError, LookupError, TypeError, ValueError):
        return Capability.UNAVAILABLE
    return Capability.AVAILABLE_TRUE if matched else Capability.AVAILABLE_FALSE


__all__ = [
    "CAN_BE_DECLARED",
    "Capability",
    "DEFAULT_HOST_VERSION",
    "HostVersion",
    "is_feature_available",
    "probe",
]
