"""Relocatable path helpers for files stored under a shared components directory."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath


class PathRelocationError(ValueError):
    """Raised when a path cannot be expressed relative to, or rebuilt under, a root."""


def invariant_separators_path(path: Path) -> str:
    """Return ``path`` with ``/`` separators on every platform."""
    return Path(path).as_posix()


def absolute_path(path: Path) -> Path:
    """Make ``path`` absolute and normalize ``..`` segments without following symlinks."""
    return Path(os.path.abspath(Path(path).expanduser()))


def is_within(path: Path, root: Path) -> bool:
    return absolute_path(path).is_relative_to(absolute_path(root))


def relative_invariant_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` using ``/`` separators.

    ``root`` must contain ``path``; paths outside of it are rejected rather
    than encoded with ``..`` segments. Symlinks are not followed, so a link
    placed inside ``root`` stays inside it.
    """
    normalized_path = absolute_path(path)
    normalized_root = absolute_path(root)
    try:
        relative = normalized_path.relative_to(normalized_root)
    except ValueError:
        raise PathRelocationError(
            f"{invariant_separators_path(normalized_path)} is not inside components directory "
            f"{invariant_separators_path(normalized_root)}"
        ) from None
    return relative.as_posix()


def resolve_relative_path(relative: str, root: Path, *, must_exist: bool = True) -> Path:
    """Rebuild an absolute path from a relative path produced by :func:`relative_invariant_path`."""
    pure = PurePosixPath(relative)
    if pure.is_absolute() or Path(relative).is_absolute():
        raise PathRelocationError(f"Expected a relative path but got {relative!r}")
    if ".." in pure.parts:
        raise PathRelocationError(f"Relative path {relative!r} escapes the components directory")
    resolved = Path(root).joinpath(*pure.parts) if pure.parts else Path(root)
    if must_exist and not resolved.exists():
        raise PathRelocationError(
            f"Components directory {invariant_separators_path(Path(root))} does not contain {relative}"
        )
    return resolved


__all__ = [
    "PathRelocationError",
    "absolute_path",
    "invariant_separators_path",
    "is_within",
    "relative_invariant_path",
    "resolve_relative_path",
]
