"""Pipeline orchestration for the configure and generate flows."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .adapters import Adapter, discover_adapters
from .base_plugin import DocBridgePlugin
from .config import DocBridgeConfig, HtmlParametersConfig, SourceSetOverride, load_config
from .configuration import (
    ModuleConfigurationFiles,
    assemble_generator_configuration,
    write_module_configuration,
)
from .extension import DocBridgeExtension
from .generator import GeneratorResult, GeneratorRunner
from .loader import load_project
from .logging import get_logger
from .plugins import DOKKA_HTML_PARAMETERS_NAME, HtmlPluginParameters
from .project import Project
from .source_sets import DocSourceSet


@dataclass
class ConfigureOutcome:
    """Result of configuring one project."""

    config: DocBridgeConfig
    project: Project
    extension: DocBridgeExtension
    files: ModuleConfigurationFiles


@dataclass
class GenerateOutcome:
    """Result of configuring a project and running the generator on it."""

    configure: ConfigureOutcome
    configuration: Path
    output_dir: Path
    result: GeneratorResult


class Orchestrator:
    """Coordinates project loading, documentation configuration and generation."""

    def __init__(
        self,
        adapters: Optional[Iterable[Adapter]] = None,
        runner_factory: Optional[Callable[[DocBridgeConfig], GeneratorRunner]] = None,
    ) -> None:
        self._adapter_overrides = list(adapters) if adapters is not None else None
        self._runner_factory = runner_factory or _default_runner
        self.logger = get_logger("orchestrator")

    def run_configure(self, path: str) -> ConfigureOutcome:
        """Load the project at ``path`` and write its documentation configuration."""
        root = Path(path).expanduser().resolve()
        self.logger.info("Starting configure run for %s", root)
        config = load_config(root)
        project = load_project(config)
        extension = self.configure_project(project, config)
        files = write_module_configuration(project, extension)
        return ConfigureOutcome(config=config, project=project, extension=extension, files=files)

    def run_generate(self, path: str) -> GenerateOutcome:
        """Configure the project at ``path`` and invoke the documentation generator."""
        outcome = self.run_configure(path)
        configuration = assemble_generator_configuration(outcome.files.components_dir)
        runner = self._runner_factory(outcome.config)
        result = runner.run(configuration)
        output_dir = Path(outcome.extension.output_dir.get())
        self.logger.info("Documentation for %s generated in %s", outcome.project.path, output_dir)
        return GenerateOutcome(
            configure=outcome,
            configuration=configuration,
            output_dir=output_dir,
            result=result,
        )

    def configure_project(self, project: Project, config: DocBridgeConfig) -> DocBridgeExtension:
        """Apply the documentation plugin to ``project`` and layer user settings on top."""
        adapters = self._adapter_overrides
        if adapters is None:
            adapters = discover_adapters(config.adapters)
        extension = DocBridgePlugin(adapters).apply(project)
        self._apply_module_settings(extension, config)
        self._apply_source_set_overrides(extension, config)
        if config.html is not None:
            self._apply_html_parameters(extension, config.html)
        return extension

    def _apply_module_settings(self, extension: DocBridgeExtension, config: DocBridgeConfig) -> None:
        if config.module_name:
            extension.module_name.set(config.module_name)
        if config.module_version:
            extension.module_version.set(config.module_version)
        if config.components_dir is not None:
            extension.components_dir.set(config.components_dir)
        if config.output_dir is not None:
            extension.output_dir.set(config.output_dir)

    def _apply_source_set_overrides(self, extension: DocBridgeExtension, config: DocBridgeConfig) -> None:
        overrides = config.source_sets

        def _override(source_set: DocSourceSet) -> None:
            settings = overrides.get(source_set.name)
            if settings is not None:
                self.logger.debug("Applying user settings to source set %s", source_set.name)
                _apply_override(source_set, settings)

        extension.source_sets.all(_override)

        unknown = sorted(set(overrides) - set(extension.source_sets.names))
        for name in unknown:
            self.logger.warning("Settings for unknown source set %s were not applied", name)

    def _apply_html_parameters(self, extension: DocBridgeExtension, html: HtmlParametersConfig) -> None:
        spec = extension.plugin_parameters.maybe_create(DOKKA_HTML_PARAMETERS_NAME)
        if not isinstance(spec, HtmlPluginParameters):
            raise TypeError(f"'{DOKKA_HTML_PARAMETERS_NAME}' parameters are not HTML parameters")
        spec.custom_assets.from_(html.custom_assets)
        spec.custom_style_sheets.from_(html.custom_style_sheets)
        if html.footer_message is not None:
            spec.footer_message.set(html.footer_message)
        if html.homepage_link is not None:
            spec.homepage_link.set(html.homepage_link)
        if html.separate_inherited_members is not None:
            spec.separate_inherited_members.set(html.separate_inherited_members)
        if html.merge_implicit_expect_actual_declarations is not None:
            spec.merge_implicit_expect_actual_declarations.set(
                html.merge_implicit_expect_actual_declarations
            )
        if html.templates_dir is not None:
            spec.templates_dir.set(html.templates_dir)


def _apply_override(source_set: DocSourceSet, settings: SourceSetOverride) -> None:
    if settings.suppress is not None:
        source_set.suppress.set(settings.suppress)
    if settings.display_name is not None:
        source_set.display_name.set(settings.display_name)
    if settings.jdk_version is not None:
        source_set.jdk_version.set(settings.jdk_version)
    if settings.skip_empty_packages is not None:
        source_set.skip_empty_packages.set(settings.skip_empty_packages)
    if settings.documented_visibilities:
        source_set.documented_visibilities.set(list(settings.documented_visibilities))
    source_set.samples.from_(settings.samples)
    source_set.includes.from_(settings.includes)


def _default_runner(config: DocBridgeConfig) -> GeneratorRunner:
    return GeneratorRunner(
        executable=config.generator.executable,
        args=config.generator.args,
        timeout=config.generator.timeout,
    )


__all__ = ["ConfigureOutcome", "GenerateOutcome", "Orchestrator"]
