"""Language adapters that register a language's source sets for documentation."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..discovery import load_entry_points
from .base import Adapter
from .kotlin import KotlinAdapter

ADAPTER_ENTRY_POINT_GROUP = "docbridge.adapters"

BUILTIN_ADAPTERS: Dict[str, object] = {
    "kotlin": KotlinAdapter,
}


def discover_adapters(enabled: Sequence[str] | None = None) -> List[Adapter]:
    """Instantiate the built-in and installed adapters, or only the ``enabled`` ones."""
    available = dict(BUILTIN_ADAPTERS)
    for name, target in load_entry_points(ADAPTER_ENTRY_POINT_GROUP, "adapter").items():
        available.setdefault(name, target)

    if enabled is None:
        names = list(available)
    else:
        names = list(dict.fromkeys(name.lower() for name in enabled))
        unknown = [name for name in names if name not in available]
        if unknown:
            raise ValueError(f"Unknown adapters requested: {', '.join(sorted(unknown))}")
    return [_instantiate(name, available[name]) for name in names]


def _instantiate(name: str, target: object) -> Adapter:
    adapter = target() if callable(target) and not isinstance(target, Adapter) else target
    if not isinstance(adapter, Adapter):
        raise TypeError(f"Adapter '{name}' must be an Adapter subclass, instance or factory")
    return adapter


__all__ = [
    "ADAPTER_ENTRY_POINT_GROUP",
    "Adapter",
    "BUILTIN_ADAPTERS",
    "KotlinAdapter",
    "discover_adapters",
]
