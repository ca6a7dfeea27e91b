"""Configuration loading for docbridge (.docbridge.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .capabilities import DEFAULT_HOST_VERSION

CONFIG_FILE_NAME = ".docbridge.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GeneratorConfig:
    """How to launch the external documentation generator."""

    executable: str = "dokka-cli"
    args: List[str] = field(default_factory=list)
    timeout: Optional[float] = None


@dataclass
class SourceSetOverride:
    """Explicit values that take precedence over auto-detected conventions."""

    suppress: Optional[bool] = None
    display_name: Optional[str] = None
    jdk_version: Optional[int] = None
    skip_empty_packages: Optional[bool] = None
    documented_visibilities: List[str] = field(default_factory=list)
    samples: List[Path] = field(default_factory=list)
    includes: List[Path] = field(default_factory=list)


@dataclass
class HtmlParametersConfig:
    """User settings for the base HTML format plugin."""

    custom_assets: List[Path] = field(default_factory=list)
    custom_style_sheets: List[Path] = field(default_factory=list)
    footer_message: Optional[str] = None
    homepage_link: Optional[str] = None
    separate_inherited_members: Optional[bool] = None
    merge_implicit_expect_actual_declarations: Optional[bool] = None
    templates_dir: Optional[Path] = None


@dataclass
class DocBridgeConfig:
    """Represents the high-level settings defined in .docbridge.yml."""

    root: Path
    host_version: str = DEFAULT_HOST_VERSION
    adapters: Optional[List[str]] = None
    module_name: Optional[str] = None
    module_version: Optional[str] = None
    components_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    source_sets: Dict[str, SourceSetOverride] = field(default_factory=dict)
    html: Optional[HtmlParametersConfig] = None
    project: Dict[str, Any] = field(default_factory=dict)


def load_config(config_path: Path) -> DocBridgeConfig:
    """Load configuration from disk."""
    config_file = resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocBridgeConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    host_version = _as_str(data.get("host_version")) or DEFAULT_HOST_VERSION
    adapters = _as_str_list(data["adapters"]) if "adapters" in data else None

    docs_data = _as_dict(data.get("docs"))
    source_sets = _parse_source_set_overrides(root, docs_data.get("source_sets"))
    html = _parse_html(root, docs_data.get("html"))

    generator_data = _as_dict(data.get("generator"))
    generator = GeneratorConfig()
    if generator_data:
        generator = GeneratorConfig(
            executable=_as_str(generator_data.get("executable")) or generator.executable,
            args=_as_str_list(generator_data.get("args")),
            timeout=_as_float(generator_data.get("timeout")),
        )

    project = data.get("project")
    if project is not None and not isinstance(project, dict):
        raise ConfigError("'project' must be a mapping")

    return DocBridgeConfig(
        root=root,
        host_version=host_version,
        adapters=adapters,
        module_name=_as_str(docs_data.get("module_name")),
        module_version=_as_str(docs_data.get("module_version")),
        components_dir=_as_path(root, docs_data.get("components_dir")),
        output_dir=_as_path(root, docs_data.get("output_dir")),
        generator=generator,
        source_sets=source_sets,
        html=html,
        project=project or {},
    )


def resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_source_set_overrides(root: Path, value: Any) -> Dict[str, SourceSetOverride]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("'docs.source_sets' must map source set names to settings")
    overrides: Dict[str, SourceSetOverride] = {}
    for name, raw in value.items():
        settings = _as_dict(raw)
        overrides[str(name)] = SourceSetOverride(
            suppress=_as_bool(settings.get("suppress")),
            display_name=_as_str(settings.get("display_name")),
            jdk_version=_as_int(settings.get("jdk_version")),
            skip_empty_packages=_as_bool(settings.get("skip_empty_packages")),
            documented_visibilities=[
                item.upper() for item in _as_str_list(settings.get("documented_visibilities"))
            ],
            samples=_as_path_list(root, settings.get("samples")),
            includes=_as_path_list(root, settings.get("includes")),
        )
    return overrides


def _parse_html(root: Path, value: Any) -> Optional[HtmlParametersConfig]:
    html_data = _as_dict(value)
    if not html_data:
        return None
    return HtmlParametersConfig(
        custom_assets=_as_path_list(root, html_data.get("custom_assets")),
        custom_style_sheets=_as_path_list(root, html_data.get("custom_style_sheets")),
        footer_message=_as_str(html_data.get("footer_message")),
        homepage_link=_as_str(html_data.get("homepage_link")),
        separate_inherited_members=_as_bool(html_data.get("separate_inherited_members")),
        merge_implicit_expect_actual_declarations=_as_bool(
            html_data.get("merge_implicit_expect_actual_declarations")
        ),
        templates_dir=_as_path(root, html_data.get("templates_dir")),
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return root / Path(text).expanduser()


def _as_path_list(root: Path, value: Any) -> List[Path]:
    return [root / Path(item).expanduser() for item in _as_str_list(value)]


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "DocBridgeConfig",
    "GeneratorConfig",
    "HtmlParametersConfig",
    "SourceSetOverride",
    "load_config",
    "resolve_config_path",
]
