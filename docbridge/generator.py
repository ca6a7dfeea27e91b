"""Adapter for running the external documentation generator."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .logging import get_logger

logger = get_logger("generator")


class GeneratorError(RuntimeError):
    """Raised when the documentation generator cannot be run or fails."""


@dataclass
class GeneratorResult:
    """Captured output of one generator invocation."""

    configuration: Path
    stdout: str
    stderr: str


class GeneratorRunner:
    """Executes the documentation generator CLI against a configuration file."""

    def __init__(
        self,
        *,
        executable: str = "dokka-cli",
        args: Sequence[str] = (),
        timeout: Optional[float] = None,
    ) -> None:
        self.executable = executable
        self.args = list(args)
        self.timeout = timeout

    def run(self, configuration: Path) -> GeneratorResult:
        configuration = self._validate_configuration(configuration)
        command = [self.executable, *self.args, str(configuration)]
        logger.info("Running documentation generator: %s", " ".join(command))

        try:
            completed = subprocess.run(
                command,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:  # pragma: no cover - environment dependent
            raise GeneratorError(
                f"Unable to locate documentation generator executable '{self.executable}'."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise GeneratorError(
                f"Documentation generator timed out after {self.timeout} seconds"
            ) from exc
        except subprocess.CalledProcessError as exc:
            message = (exc.stderr or "").strip() or (exc.stdout or "").strip() or str(exc.returncode)
            raise GeneratorError(f"Documentation generator failed: {message}") from exc

        for line in completed.stdout.splitlines():
            logger.debug("generator: %s", line)
        return GeneratorResult(
            configuration=configuration,
            stdout=completed.stdout,
            stderr=completed.stderr or "",
        )

    @staticmethod
    def _validate_configuration(configuration: Path) -> Path:
        path = Path(configuration).expanduser().resolve()
        if not path.is_file():
            raise GeneratorError(f"Generator configuration not found at {path}")
        return path


__all__ = ["GeneratorError", "GeneratorResult", "GeneratorRunner"]
