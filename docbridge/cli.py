"""CLI entrypoints for docbridge commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .containers import RegistrySealedError
from .generator import GeneratorError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .plugins import PluginParametersError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory or .docbridge.yml file (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docbridge",
        description="Wire a documentation generator into a project's build model.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    configure_parser = subparsers.add_parser(
        "configure",
        help="Discover source sets and write the documentation configuration.",
    )
    _add_verbose_option(configure_parser, suppress_default=True)
    _add_path_argument(configure_parser)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the documentation configuration and run the generator.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docbridge commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "configure":
        try:
            outcome = orchestrator.run_configure(args.path)
        except (ConfigError, PluginParametersError, RegistrySealedError) as exc:
            parser.exit(1, f"docbridge configure failed: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"docbridge configure failed: {exc}\nRun with --verbose for more details.\n")
        rel_path = _relativize(outcome.files.components_dir)
        count = len(outcome.extension.source_sets)
        print(f"Configured {count} source sets in {rel_path}")
    elif args.command == "generate":
        try:
            result = orchestrator.run_generate(args.path)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, PluginParametersError, GeneratorError) as exc:
            parser.exit(1, f"docbridge generate failed: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"docbridge generate failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Documentation generated in {_relativize(result.output_dir)}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
