"""Minimal host-project facade the documentation plugin configures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from .buckets import BucketContainer
from .capabilities import DEFAULT_HOST_VERSION
from .containers import UnknownElementError
from .logging import get_logger

logger = get_logger("project")

E = TypeVar("E")

PATH_SEPARATOR = ":"


class ExtensionContainer:
    """Named extension objects attached to a project."""

    def __init__(self) -> None:
        self._extensions: Dict[str, Any] = {}

    def add(self, name: str, extension: E) -> E:
        if name in self._extensions:
            raise ValueError(f"Extension '{name}' already exists")
        self._extensions[name] = extension
        return extension

    def find_by_name(self, name: str) -> Optional[Any]:
        return self._extensions.get(name)

    def find_by_type(self, extension_type: Type[E]) -> Optional[E]:
        for extension in self._extensions.values():
            if isinstance(extension, extension_type):
                return extension
        return None

    def get_by_type(self, extension_type: Type[E]) -> E:
        extension = self.find_by_type(extension_type)
        if extension is None:
            raise UnknownElementError(f"Extension of type {extension_type.__name__} not found")
        return extension


class PluginManager:
    """Tracks applied plugin ids and runs ``with_plugin`` actions once per id."""

    def __init__(self) -> None:
        self._applied: List[str] = []
        self._pending: Dict[str, List[Callable[[], None]]] = {}

    def apply(self, plugin_id: str) -> None:
        if plugin_id in self._applied:
            return
        self._applied.append(plugin_id)
        for action in self._pending.pop(plugin_id, []):
            action()

    def has_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self._applied

    def with_plugin(self, plugin_id: str, action: Callable[[], None]) -> None:
        """Run ``action`` now if ``plugin_id`` is applied, otherwise when it is."""
        if plugin_id in self._applied:
            action()
        else:
            self._pending.setdefault(plugin_id, []).append(action)

    @property
    def applied(self) -> List[str]:
        return list(self._applied)


class Project:
    """One module of the build graph."""

    def __init__(
        self,
        name: str,
        *,
        path: str = PATH_SEPARATOR,
        project_dir: Path | None = None,
        build_dir: Path | None = None,
        host_version: str = DEFAULT_HOST_VERSION,
    ) -> None:
        self.name = name
        self.path = path
        self.project_dir = Path(project_dir or Path.cwd())
        self.build_dir = Path(build_dir) if build_dir is not None else self.project_dir / "build"
        self.host_version = host_version
        self.extensions = ExtensionContainer()
        self.buckets = BucketContainer(host_version=host_version)
        self.plugin_manager = PluginManager()

    def path_as_file_path(self) -> str:
        """Return the project path as a relative file path, e.g. ``:a:b`` -> ``a/b``."""
        return self.path.removeprefix(PATH_SEPARATOR).replace(PATH_SEPARATOR, "/")

    def __repr__(self) -> str:
        return f"Project({self.path})"


__all__ = ["ExtensionContainer", "PATH_SEPARATOR", "PluginManager", "Project"]
