from __future__ import annotations

import typer

from distship.cli.commands._helpers import unwrap_or_exit
from distship.cli.context import CLIContext, build_context
from distship.core.errors import ErrorCode
from distship.git.repository import Repository
from distship.release.names import load_release_names
from distship.release.registry import NpmRegistryClient
from distship.release.ship import ShipContext, ship

_FAILED = "Ship failed. "


def _ship_context(ctx: CLIContext) -> ShipContext:
    project = ctx.project
    names = unwrap_or_exit(
        load_release_names(project.release_names_path(ctx.config)),
        ctx.console,
        code=ErrorCode.USER_ERROR,
        prefix=_FAILED,
    )
    return ShipContext(
        packages_dir=project.packages_dir(ctx.config),
        config=ctx.config,
        registry=NpmRegistryClient(project.root, ctx.config.registry_url),
        repository=Repository(project.root),
        release_names=names,
        console=ctx.console,
    )


def release(
    ship_it: bool = typer.Option(False, "--ship", "-s", help="Ship the release."),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-d", help="Validate and name the release without shipping it."
    ),
) -> None:
    """Promote @next to @latest and assign the next release name."""
    if not ship_it:
        typer.echo("Nothing to do.")
        return

    ctx = build_context(code=ErrorCode.USER_ERROR, prefix=_FAILED)
    report = unwrap_or_exit(
        ship(_ship_context(ctx), dry_run=dry_run),
        ctx.console,
        code=ErrorCode.USER_ERROR,
        prefix=_FAILED,
    )
    if not report.shipped:
        ctx.console.print(f"would ship {report.next_name} (was {report.previous_name})")
