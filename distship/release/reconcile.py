from __future__ import annotations

from collections.abc import Iterable

from distship.core.result import Err, Ok, Result
from distship.release.errors import ValidationError
from distship.release.model import (
    MergedPackage,
    MergedPackageState,
    PackageRecord,
    RegistryTagSet,
    ReleaseDelta,
)


def merge_versions(
    records: Iterable[PackageRecord],
    tag_sets: Iterable[RegistryTagSet],
) -> MergedPackageState:
    """Overlay registry dist-tags onto the local packages.

    Every local package appears in the result; one the registry does not
    know gets an empty tag mapping. Tag sets without a local package are
    dropped since there is no version to ship for them.
    """
    tags_by_name = {ts.name: ts.tags for ts in tag_sets}
    merged = {
        record.name: MergedPackage(
            path=record.path,
            name=record.name,
            version=record.version,
            manifest=record.manifest,
            tags=tags_by_name.get(record.name, {}),
        )
        for record in records
    }
    return MergedPackageState(merged)


def check_versions(state: MergedPackageState) -> Result[tuple[ReleaseDelta, ...], ValidationError]:
    """Check that shipping is safe and not a no-op.

    1. Each package's `next` must be the local version. Anything else means
       the published build drifted from what is about to be promoted.
    2. At least one package must have `latest` != `next`.

    Returns the packages whose `latest` will move.
    """
    for pkg in state.packages():
        if pkg.version != pkg.next:
            return Err(
                ValidationError(
                    message=(
                        "Cannot release as next does not match git version. "
                        f"The next version of {pkg.name} ({pkg.next}) is not the same "
                        f"as the local repo version ({pkg.version})."
                    ),
                    packages=(pkg.name,),
                    hint="Publish the local version to @next (or sync the checkout), then retry.",
                )
            )

    deltas = tuple(
        ReleaseDelta(name=pkg.name, previous=pkg.latest, current=pkg.version)
        for pkg in state.packages()
        if pkg.latest != pkg.next
    )
    if not deltas:
        return Err(
            ValidationError(
                message="No packages have been modified, there is nothing to release.",
            )
        )
    return Ok(deltas)
