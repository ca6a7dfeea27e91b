"""Base class for language adapters."""

from abc import ABC, abstractmethod
from typing import Tuple

from ..project import Project


class Adapter(ABC):
    """Contract for adapters that register a language's source sets for documentation.

    ``configure`` runs at most once per project, as soon as any of
    ``plugin_ids`` is applied to it, however many of them end up applied.
    """

    plugin_ids: Tuple[str, ...] = ()

    def apply(self, project: Project) -> None:
        configured = False

        def _configure() -> None:
            nonlocal configured
            if configured:
                return
            configured = True
            self.configure(project)

        for plugin_id in self.plugin_ids:
            project.plugin_manager.with_plugin(plugin_id, _configure)

    @abstractmethod
    def configure(self, project: Project) -> None:
        """Register the source sets of ``project`` once its language plugin is applied."""
