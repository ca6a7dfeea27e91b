"""Entry point that installs documentation support into a project."""

from __future__ import annotations

from typing import Iterable, Optional

from .adapters import Adapter, discover_adapters
from .buckets import Bucket, consumable, declarable, resolvable
from .extension import EXTENSION_NAME, DocBridgeExtension
from .logging import get_logger
from .project import Project

logger = get_logger("base_plugin")

# Users declare generator plugins here.
PLUGINS_BUCKET = "docbridgePlugin"
# Resolves the declared generator plugins to jars.
PLUGINS_CLASSPATH_BUCKET = "docbridgePluginsClasspath"
# Exposes this module's written configuration to aggregating modules.
CONFIGURATION_ELEMENTS_BUCKET = "docbridgeConfigurationElements"


class DocBridgePlugin:
    """Creates the ``docbridge`` extension, its buckets, and applies every language adapter."""

    def __init__(self, adapters: Optional[Iterable[Adapter]] = None) -> None:
        self._adapters = list(adapters) if adapters is not None else None

    def apply(self, project: Project) -> DocBridgeExtension:
        extension = project.extensions.find_by_type(DocBridgeExtension)
        if extension is None:
            extension = project.extensions.add(EXTENSION_NAME, DocBridgeExtension(project))
            logger.debug("Created %s extension for %s", EXTENSION_NAME, project.path)

        plugins = project.buckets.maybe_create(PLUGINS_BUCKET, declarable)

        def _plugins_classpath(bucket: Bucket) -> None:
            resolvable(bucket)
            if plugins not in bucket.extends_from:
                bucket.extend(plugins)

        project.buckets.maybe_create(PLUGINS_CLASSPATH_BUCKET, _plugins_classpath)
        project.buckets.maybe_create(CONFIGURATION_ELEMENTS_BUCKET, consumable)

        adapters = self._adapters if self._adapters is not None else discover_adapters()
        for adapter in adapters:
            adapter.apply(project)
        return extension


__all__ = [
    "CONFIGURATION_ELEMENTS_BUCKET",
    "DocBridgePlugin",
    "PLUGINS_BUCKET",
    "PLUGINS_CLASSPATH_BUCKET",
]
