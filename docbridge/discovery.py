"""Loading extension points that third-party packages publish as entry points."""

from __future__ import annotations

from importlib import metadata
from typing import Dict

from .logging import get_logger

logger = get_logger("discovery")


def load_entry_points(group: str, kind: str) -> Dict[str, object]:
    """Load every entry point of ``group``, keyed by lower-cased name.

    The first entry point published under a name wins. ``kind`` names the
    extension point in error messages.
    """
    loaded: Dict[str, object] = {}
    for entry in metadata.entry_points(group=group):
        name = entry.name.lower()
        if name in loaded:
            logger.debug("Ignoring duplicate %s entry point %s", kind, entry.name)
            continue
        try:
            loaded[name] = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load {kind} entry point '{entry.name}': {exc}") from exc
    return loaded


__all__ = ["load_entry_points"]
