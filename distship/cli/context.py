from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from distship.core.config import ShipConfig, load_config_or_default
from distship.core.errors import ErrorCode
from distship.core.project import Project, detect_project
from distship.output.console import ConsoleProtocol, RichConsole
from distship.cli.commands._helpers import unwrap_or_exit


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    config: ShipConfig
    console: ConsoleProtocol


def build_context(
    start: Path | None = None,
    *,
    code: ErrorCode = ErrorCode.ENV_ERROR,
    prefix: str = "",
) -> CLIContext:
    """Detect the project and load its config, exiting with `code` on failure."""
    console = RichConsole()
    project = unwrap_or_exit(detect_project(start), console, code=code, prefix=prefix)
    config = unwrap_or_exit(
        load_config_or_default(project.config_path),
        console,
        code=code,
        prefix=prefix,
    )
    return CLIContext(project=project, config=config, console=console)
