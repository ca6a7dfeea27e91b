"""The ``docbridge`` project extension holding all documentation configuration."""

from __future__ import annotations

from pathlib import Path

from .logging import get_logger
from .plugins import DOKKA_HTML_PARAMETERS_NAME, plugin_parameters_container
from .project import Project
from .providers import Property
from .source_sets import DocSourceSetRegistry

logger = get_logger("extension")

EXTENSION_NAME = "docbridge"


class DocBridgeExtension:
    """Documentation settings for one project.

    Mutated during the configuration phase only. :meth:`seal` ends that phase
    and freezes every value for the execution phase.
    """

    def __init__(self, project: Project) -> None:
        self.module_path = project.path
        self.module_name: Property[str] = Property("moduleName").convention(project.name)
        self.module_version: Property[str] = Property("moduleVersion").convention("unspecified")
        self.components_dir: Property[Path] = Property("componentsDir").convention(
            project.build_dir / "docbridge"
        )
        self.output_dir: Property[Path] = Property("outputDir").convention(
            project.build_dir / "docbridge" / "html"
        )
        self.source_sets = DocSourceSetRegistry(scope_id=project.path)
        self.plugin_parameters = plugin_parameters_container()
        self.plugin_parameters.register(DOKKA_HTML_PARAMETERS_NAME)
        self._sealed = False

    def seal(self) -> None:
        if self._sealed:
            return
        for prop in (self.module_name, self.module_version, self.components_dir, self.output_dir):
            prop.finalize_value()
        self.source_sets.seal()
        self.plugin_parameters.seal()
        self._sealed = True
        logger.debug("Configuration phase finished for %s", self.module_path)

    @property
    def is_sealed(self) -> bool:
        return self._sealed


__all__ = ["DocBridgeExtension", "EXTENSION_NAME"]
