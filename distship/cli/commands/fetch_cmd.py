from __future__ import annotations

from pathlib import Path

import typer

from distship.cli.commands._helpers import unwrap_or_exit
from distship.core.config import ShipConfig, load_config_or_default
from distship.core.errors import ErrorCode
from distship.core.project import detect_project
from distship.core.result import Ok
from distship.output.console import ConsoleProtocol, RichConsole
from distship.release.errors import ReadError
from distship.release.fetch import fetch_published


def _config_for(package_dir: Path, console: ConsoleProtocol) -> ShipConfig:
    # Outside a project the defaults apply.
    project = detect_project(package_dir)
    if not isinstance(project, Ok):
        return ShipConfig()
    return unwrap_or_exit(
        load_config_or_default(project.value.config_path),
        console,
        code=ErrorCode.ENV_ERROR,
    )


def fetch(
    package_dir: Path = typer.Option(
        Path("."),
        "--package-dir",
        help="Package whose published tarball to download (default: current directory).",
    ),
) -> None:
    """Download the published tarball of a package into published/."""
    console = RichConsole()
    root = package_dir.expanduser().resolve()
    config = _config_for(root, console)

    result = fetch_published(
        root,
        registry_url=config.registry_url,
        published_dir=root / config.published_dir,
        console=console,
    )
    if not isinstance(result, Ok):
        code = ErrorCode.IO_ERROR if isinstance(result.error, ReadError) else ErrorCode.NETWORK_ERROR
        unwrap_or_exit(result, console, code=code)
