"""Helper utilities for constructing host projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from docbridge.base_plugin import DocBridgePlugin
from docbridge.extension import DocBridgeExtension
from docbridge.models import SourceSet
from docbridge.project import Project


class ProjectBuilder:
    """Utility for laying out a throwaway project directory and its model."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def mkdirs(self, *relative: str) -> list[Path]:
        paths = []
        for item in relative:
            path = self.root / item
            path.mkdir(parents=True, exist_ok=True)
            paths.append(path)
        return paths

    def source_set(
        self,
        name: str,
        *,
        exists: bool = True,
        depends_on: Sequence[SourceSet] = (),
    ) -> SourceSet:
        """Return a source set rooted at `src/<name>/kotlin`, creating the directory when asked."""
        root = self.root / "src" / name / "kotlin"
        if exists:
            root.mkdir(parents=True, exist_ok=True)
        return SourceSet(name=name, source_roots=[root], depends_on=list(depends_on))

    def project(self, name: str = "widgets", *, path: str = ":widgets", host_version: str = "8.5") -> Project:
        return Project(name, path=path, project_dir=self.root, host_version=host_version)

    def documented_project(
        self, extension: object, plugin_ids: Iterable[str], **kwargs: object
    ) -> tuple[Project, DocBridgeExtension]:
        """Create a project carrying `extension` as its Kotlin extension, with docbridge applied."""
        project = self.project(**kwargs)  # type: ignore[arg-type]
        project.extensions.add("kotlin", extension)
        docs = DocBridgePlugin().apply(project)
        for plugin_id in plugin_ids:
            project.plugin_manager.apply(plugin_id)
        return project, docs

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["ProjectBuilder"]
