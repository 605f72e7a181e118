"""The ship workflow.

1. Read the local package versions.
2. Read the registry dist-tags of those packages.
3. Refuse if any @next differs from the local version, or if nothing changed.
4. Pick the next release name; refuse if it cannot be determined or is taken.
5. Tag every package @latest and @<release name>.
6. Record the release name in the versioned package.json, commit (CI skipped)
   and push.

Steps 1-4 always run; steps 5-6 are skipped on a dry run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from distship.core.config import ShipConfig
from distship.core.result import Err, Ok, Result
from distship.git.repository import Repository
from distship.output.console import ConsoleProtocol
from distship.release.errors import ReleaseNameError, ShipError
from distship.release.model import ReleaseDelta
from distship.release.names import ReleaseNames, current_release_name, next_release_name
from distship.release.publisher import publish_release
from distship.release.reconcile import check_versions, merge_versions
from distship.release.registry import RegistryClient, fetch_tag_sets
from distship.release.versions import read_local_packages


@dataclass(frozen=True, slots=True)
class ShipContext:
    """Collaborators for one ship invocation."""

    packages_dir: Path
    config: ShipConfig
    registry: RegistryClient
    repository: Repository
    release_names: ReleaseNames
    console: ConsoleProtocol


@dataclass(frozen=True, slots=True)
class ShipReport:
    deltas: tuple[ReleaseDelta, ...]
    previous_name: str
    next_name: str
    shipped: bool


def ship(ctx: ShipContext, *, dry_run: bool) -> Result[ShipReport, ShipError]:
    console = ctx.console
    config = ctx.config

    versioned_package = config.versioned_package
    if versioned_package is None:
        return Err(
            ReleaseNameError(
                message="no versioned package configured",
                hint="Set versioned_package in distship.toml.",
            )
        )
    field = config.release_field_path

    records = read_local_packages(ctx.packages_dir)
    if isinstance(records, Err):
        return records

    tag_sets = fetch_tag_sets(
        ctx.registry,
        [r.name for r in records.value],
        console=console,
        max_workers=config.max_workers,
    )
    if isinstance(tag_sets, Err):
        return tag_sets

    state = merge_versions(records.value, tag_sets.value)

    deltas = check_versions(state)
    if isinstance(deltas, Err):
        return deltas
    for delta in deltas.value:
        console.print(f"Release delta: {delta}")

    previous = current_release_name(state, versioned_package=versioned_package, field=field)
    if isinstance(previous, Err):
        return previous
    next_name = next_release_name(
        state, ctx.release_names, versioned_package=versioned_package, field=field
    )
    if isinstance(next_name, Err):
        return next_name
    console.info(f"Next release: {next_name.value}")

    if dry_run:
        console.warning("dry run: registry tags and release commit skipped")
        return Ok(
            ShipReport(
                deltas=deltas.value,
                previous_name=previous.value,
                next_name=next_name.value,
                shipped=False,
            )
        )

    published = publish_release(
        ctx.registry,
        ctx.repository,
        state,
        versioned_package=versioned_package,
        field=field,
        previous_name=previous.value,
        new_name=next_name.value,
        console=console,
        max_workers=config.max_workers,
    )
    if isinstance(published, Err):
        return published

    console.success(f"shipped {next_name.value}")
    return Ok(
        ShipReport(
            deltas=deltas.value,
            previous_name=previous.value,
            next_name=next_name.value,
            shipped=True,
        )
    )
