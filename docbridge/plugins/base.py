"""Base types for documentation-generator plugin parameters and their persistence."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from ..containers import NamedContainer, RegistrySealedError
from ..logging import get_logger
from ..paths import PathRelocationError, relative_invariant_path, resolve_relative_path
from ..providers import FileCollection, Property

logger = get_logger("plugins")

PARAMETERS_FILE_NAME = "plugin-parameters.json"

_PARAMETERS_FILE_VERSION = 1

SpecT = TypeVar("SpecT", bound="PluginParametersBaseSpec")


class PluginParametersError(ValueError):
    """Raised when plugin parameters cannot be serialized or rebuilt."""


class PluginParametersBaseSpec(ABC):
    """Options for one documentation-generator plugin, identified by its FQN."""

    #: Fully qualified name of the generator plugin these parameters configure.
    PLUGIN_FQN: str = ""

    def __init__(self, name: str, plugin_fqn: Optional[str] = None) -> None:
        self.name = name
        self.plugin_fqn = plugin_fqn or self.PLUGIN_FQN
        if not self.plugin_fqn:
            raise ValueError(f"Plugin parameters '{name}' need a plugin FQN")

    @classmethod
    @abstractmethod
    def values_serializer(cls, components_dir: Path) -> "PluginParametersSerializer[Any]":
        """Return the relocatable serializer for this parameter type."""

    @abstractmethod
    def json_encode(self) -> str:
        """Encode the values in the format the generator plugin reads."""

    @abstractmethod
    def finalize(self) -> None:
        """Freeze every value at the end of the configuration phase."""

    def stage_files(self, components_dir: Path) -> None:
        """Copy referenced files that live outside ``components_dir`` into it.

        Runs before the configuration phase ends. Specs without file values
        have nothing to stage.
        """

    def to_plugin_configuration(self) -> Dict[str, str]:
        return {
            "fqPluginName": self.plugin_fqn,
            "serializationFormat": "JSON",
            "values": self.json_encode(),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name}, {self.plugin_fqn})"


class PluginParametersSerializer(ABC, Generic[SpecT]):
    """Converts a parameter spec to and from a form relative to ``components_dir``."""

    def __init__(self, components_dir: Path) -> None:
        self.components_dir = Path(components_dir)

    @abstractmethod
    def serialize(self, value: SpecT) -> Dict[str, Any]:
        ...

    @abstractmethod
    def deserialize(self, data: Mapping[str, Any]) -> SpecT:
        ...

    # ------------------------------------------------------------------
    # Helpers shared by concrete serializers

    def relative_paths(self, files: FileCollection) -> List[str]:
        return [self.relative_path(path) for path in files.as_file_tree()]

    def relative_path(self, path: Path) -> str:
        try:
            return relative_invariant_path(path, self.components_dir)
        except PathRelocationError as exc:
            raise PluginParametersError(str(exc)) from exc

    def optional_relative_path(self, prop: Property[Path]) -> Optional[str]:
        value = prop.get_or_none()
        if value is None:
            return None
        return self.relative_path(Path(value))

    def absolute_paths(self, relative_paths: List[str]) -> List[Path]:
        return [self.absolute_path(item) for item in relative_paths]

    def absolute_path(self, relative: str) -> Path:
        try:
            return resolve_relative_path(relative, self.components_dir)
        except PathRelocationError as exc:
            raise PluginParametersError(str(exc)) from exc


class PluginParametersContainer(NamedContainer[PluginParametersBaseSpec]):
    """Named plugin-parameter specs, created from registered parameter types."""

    def __init__(self, types: Mapping[str, Type[PluginParametersBaseSpec]]) -> None:
        super().__init__("plugin parameters")
        self._types: Dict[str, Type[PluginParametersBaseSpec]] = dict(types)

    @property
    def types(self) -> Dict[str, Type[PluginParametersBaseSpec]]:
        return dict(self._types)

    def register_type(self, kind: str, spec_type: Type[PluginParametersBaseSpec]) -> None:
        self._types[kind] = spec_type

    def register(
        self,
        name: str,
        kind: Optional[str] = None,
        configure: Optional[Callable[[PluginParametersBaseSpec], None]] = None,
    ) -> PluginParametersBaseSpec:
        self._ensure_open(name)
        spec_type = self._types.get(kind or name)
        if spec_type is None:
            raise KeyError(f"No plugin parameter type registered for '{kind or name}'")
        spec = spec_type(name)
        if configure is not None:
            configure(spec)
        return self.add(name, spec)

    def maybe_create(self, name: str, kind: Optional[str] = None) -> PluginParametersBaseSpec:
        existing = self.find_by_name(name)
        if existing is not None:
            return existing
        return self.register(name, kind)

    def seal(self) -> None:
        if self.is_sealed:
            return
        for spec in self:
            spec.finalize()
        super().seal()

    def stage_files(self, components_dir: Path) -> None:
        if self.is_sealed:
            raise RegistrySealedError("Cannot stage plugin files: configuration phase has ended")
        for spec in self:
            spec.stage_files(components_dir)

    def plugins_configuration(self) -> List[Dict[str, str]]:
        return [spec.to_plugin_configuration() for spec in self]

    # ------------------------------------------------------------------
    # Persistence

    def serialize(self, components_dir: Path) -> Dict[str, Any]:
        plugins: Dict[str, Dict[str, Any]] = {}
        for spec in self:
            if spec.plugin_fqn in plugins:
                raise PluginParametersError(
                    f"Multiple parameter specs configure plugin {spec.plugin_fqn}"
                )
            plugins[spec.plugin_fqn] = spec.values_serializer(components_dir).serialize(spec)
        return {"version": _PARAMETERS_FILE_VERSION, "plugins": plugins}

    def write(self, components_dir: Path) -> Path:
        payload = self.serialize(components_dir)
        path = Path(components_dir) / PARAMETERS_FILE_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Wrote %d plugin parameter specs to %s", len(payload["plugins"]), path)
        return path

    def load(self, components_dir: Path, path: Optional[Path] = None) -> None:
        """Read a parameters file written by :meth:`write` and add its specs."""
        source = path or Path(components_dir) / PARAMETERS_FILE_NAME
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise PluginParametersError(f"Plugin parameters file not found: {source}") from None
        except json.JSONDecodeError as exc:
            raise PluginParametersError(f"Plugin parameters file {source} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict) or data.get("version") != _PARAMETERS_FILE_VERSION:
            raise PluginParametersError(f"Unsupported plugin parameters file: {source}")
        plugins = data.get("plugins")
        if not isinstance(plugins, dict):
            raise PluginParametersError(f"Plugin parameters file {source} has no 'plugins' mapping")

        by_fqn = {spec_type.PLUGIN_FQN: spec_type for spec_type in self._types.values()}
        for fqn, payload in plugins.items():
            spec_type = by_fqn.get(fqn)
            if spec_type is None:
                logger.warning("Ignoring parameters for unknown plugin %s", fqn)
                continue
            spec = spec_type.values_serializer(components_dir).deserialize(payload)
            self.add(spec.name, spec)


__all__ = [
    "PARAMETERS_FILE_NAME",
    "PluginParametersBaseSpec",
    "PluginParametersContainer",
    "PluginParametersError",
    "PluginParametersSerializer",
]
