"""Plugin-parameter types and discovery of third-party parameter types."""

from __future__ import annotations

from typing import Dict, Type

from ..discovery import load_entry_points
from .base import (
    PARAMETERS_FILE_NAME,
    PluginParametersBaseSpec,
    PluginParametersContainer,
    PluginParametersError,
    PluginParametersSerializer,
)
from .html import DOKKA_HTML_PARAMETERS_NAME, DOKKA_HTML_PLUGIN_FQN, HtmlPluginParameters

PARAMETERS_ENTRY_POINT_GROUP = "docbridge.plugin_parameters"

_BUILTIN_TYPES: Dict[str, Type[PluginParametersBaseSpec]] = {
    DOKKA_HTML_PARAMETERS_NAME: HtmlPluginParameters,
}


def discover_parameter_types() -> Dict[str, Type[PluginParametersBaseSpec]]:
    """Return built-in parameter types merged with those exposed via entry points."""
    types: Dict[str, Type[PluginParametersBaseSpec]] = dict(_BUILTIN_TYPES)
    for name, loaded in load_entry_points(PARAMETERS_ENTRY_POINT_GROUP, "plugin parameters").items():
        if name in types:
            continue
        if not (isinstance(loaded, type) and issubclass(loaded, PluginParametersBaseSpec)):
            raise TypeError(
                f"Plugin parameters entry point '{name}' must be a PluginParametersBaseSpec subclass"
            )
        types[name] = loaded
    return types


def plugin_parameters_container() -> PluginParametersContainer:
    """Create an empty container that knows every discoverable parameter type."""
    return PluginParametersContainer(discover_parameter_types())


__all__ = [
    "DOKKA_HTML_PARAMETERS_NAME",
    "DOKKA_HTML_PLUGIN_FQN",
    "HtmlPluginParameters",
    "PARAMETERS_ENTRY_POINT_GROUP",
    "PARAMETERS_FILE_NAME",
    "PluginParametersBaseSpec",
    "PluginParametersContainer",
    "PluginParametersError",
    "PluginParametersSerializer",
    "discover_parameter_types",
    "plugin_parameters_container",
]
