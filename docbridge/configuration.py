"""Writes and assembles the documentation generator's input configuration.

Configuration happens in two stages:

1. :func:`write_module_configuration` runs in the configuring process. It seals
   the extension, then writes the module description and the relocatable
   plugin-parameters file under the components directory.
2. :func:`assemble_generator_configuration` runs in the invoking process. It
   reads both files back, rebuilds the plugin parameters against the same
   components directory, and writes the document the generator consumes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .base_plugin import CONFIGURATION_ELEMENTS_BUCKET, PLUGINS_CLASSPATH_BUCKET
from .buckets import collect_incoming_files
from .extension import DocBridgeExtension
from .logging import get_logger
from .paths import invariant_separators_path
from .plugins import PluginParametersError, plugin_parameters_container
from .project import Project
from .providers import FileCollection
from .source_sets import DocSourceSet

logger = get_logger("configuration")

MODULE_CONFIGURATION_FILE_NAME = "module-configuration.json"
GENERATOR_CONFIGURATION_FILE_NAME = "dokka-configuration.json"

_MODULE_CONFIGURATION_VERSION = 1


@dataclass
class ModuleConfigurationFiles:
    """Files written for one module by :func:`write_module_configuration`."""

    components_dir: Path
    module_configuration: Path
    plugin_parameters: Path


def source_set_to_json(source_set: DocSourceSet) -> Dict[str, Any]:
    platform = source_set.analysis_platform.get()
    return {
        "displayName": source_set.display_name.get_or_else(source_set.name),
        "sourceSetID": source_set.source_set_id.to_json(),
        "classpath": _posix_list(source_set.classpath),
        "sourceRoots": _posix_list(source_set.source_roots),
        "dependentSourceSets": [ref.to_json() for ref in source_set.dependent_source_sets.values()],
        "samples": _posix_list(source_set.samples),
        "includes": _posix_list(source_set.includes),
        "skipEmptyPackages": source_set.skip_empty_packages.get(),
        "jdkVersion": source_set.jdk_version.get(),
        "documentedVisibilities": list(source_set.documented_visibilities.get()),
        "analysisPlatform": getattr(platform, "value", platform),
    }


def build_module_configuration(project: Project, extension: DocBridgeExtension) -> Dict[str, Any]:
    """Describe the module's non-suppressed source sets in generator terms."""
    plugins_classpath = FileCollection("pluginsClasspath")
    collect_incoming_files(project.buckets, PLUGINS_CLASSPATH_BUCKET, plugins_classpath)

    source_sets: List[Dict[str, Any]] = []
    for source_set in extension.source_sets:
        if source_set.suppress.get():
            logger.debug("Skipping suppressed source set %s", source_set.name)
            continue
        source_sets.append(source_set_to_json(source_set))

    return {
        "version": _MODULE_CONFIGURATION_VERSION,
        "moduleName": extension.module_name.get(),
        "moduleVersion": extension.module_version.get_or_none(),
        "modulePath": project.path_as_file_path(),
        "outputDir": invariant_separators_path(extension.output_dir.get()),
        "pluginsClasspath": _posix_list(plugins_classpath),
        "sourceSets": source_sets,
    }


def write_module_configuration(project: Project, extension: DocBridgeExtension) -> ModuleConfigurationFiles:
    """Stage plugin files, seal ``extension`` and write its configuration under the components directory."""
    components_dir = Path(extension.components_dir.get())
    components_dir.mkdir(parents=True, exist_ok=True)
    if not extension.is_sealed:
        extension.plugin_parameters.stage_files(components_dir)
        extension.seal()

    payload = build_module_configuration(project, extension)
    module_path = components_dir / MODULE_CONFIGURATION_FILE_NAME
    module_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    parameters_path = extension.plugin_parameters.write(components_dir)

    elements = project.buckets.find_by_name(CONFIGURATION_ELEMENTS_BUCKET)
    if elements is not None:
        elements.add_dependencies(module_path, parameters_path)

    logger.info(
        "Wrote documentation configuration for %s (%d source sets) to %s",
        project.path,
        len(payload["sourceSets"]),
        components_dir,
    )
    return ModuleConfigurationFiles(
        components_dir=components_dir,
        module_configuration=module_path,
        plugin_parameters=parameters_path,
    )


def assemble_generator_configuration(components_dir: Path) -> Path:
    """Combine the module description and plugin parameters into the generator's input file."""
    components_dir = Path(components_dir)
    module_path = components_dir / MODULE_CONFIGURATION_FILE_NAME
    try:
        module = json.loads(module_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise FileNotFoundError(f"Module configuration not found: {module_path}") from None
    except json.JSONDecodeError as exc:
        raise PluginParametersError(f"{module_path} is not valid JSON: {exc}") from exc
    if not isinstance(module, dict) or module.get("version") != _MODULE_CONFIGURATION_VERSION:
        raise PluginParametersError(f"Unsupported module configuration: {module_path}")

    parameters = plugin_parameters_container()
    parameters.load(components_dir)

    document: Dict[str, Any] = {
        "moduleName": module.get("moduleName"),
        "moduleVersion": module.get("moduleVersion"),
        "outputDir": module.get("outputDir"),
        "cacheRoot": None,
        "offlineMode": False,
        "failOnWarning": False,
        "sourceSets": module.get("sourceSets", []),
        "pluginsClasspath": module.get("pluginsClasspath", []),
        "pluginsConfiguration": parameters.plugins_configuration(),
        "modules": [],
        "includes": [],
        "suppressObviousFunctions": True,
        "suppressInheritedMembers": False,
        "delayTemplateSubstitution": False,
        "finalizeCoroutines": False,
    }
    output = components_dir / GENERATOR_CONFIGURATION_FILE_NAME
    output.write_text(json.dumps(document, indent=2), encoding="utf-8")
    logger.debug("Assembled generator configuration at %s", output)
    return output


def _posix_list(files: FileCollection) -> List[str]:
    return [invariant_separators_path(path) for path in files.files]


__all__ = [
    "GENERATOR_CONFIGURATION_FILE_NAME",
    "MODULE_CONFIGURATION_FILE_NAME",
    "ModuleConfigurationFiles",
    "assemble_generator_configuration",
    "build_module_configuration",
    "source_set_to_json",
    "write_module_configuration",
]
