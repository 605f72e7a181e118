"""Release naming.

Release names come from a fixed, ordered list kept in the repository (a JSON
array). The versioned package's manifest records the name of the last
release; the next release takes the following entry. A name is never reused:
if any package already carries it as a dist-tag, naming fails.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from distship.core.result import Err, Ok, Result
from distship.core.structured import as_obj_list, get_path
from distship.release.errors import ReleaseNameError
from distship.release.model import MergedPackageState
from distship.release.registry import normalize_tag

__all__ = [
    "ReleaseNames",
    "ReleaseNamesLookupError",
    "load_release_names",
    "current_release_name",
    "next_release_name",
]


@dataclass(frozen=True, slots=True)
class ReleaseNamesLookupError:
    kind: Literal["not_found", "exhausted"]
    name: str


@dataclass(frozen=True, slots=True)
class ReleaseNames:
    """Immutable ordered sequence of release names."""

    names: tuple[str, ...]

    def __post_init__(self) -> None:
        if any(not n.strip() for n in self.names):
            raise ValueError("release names must not be blank")
        seen: set[str] = set()
        for n in self.names:
            if n in seen:
                raise ValueError(f"duplicate release name: {n}")
            seen.add(n)

    @classmethod
    def of(cls, names: Iterable[str]) -> ReleaseNames:
        return cls(names=tuple(names))

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def next_after(self, current: str) -> Result[str, ReleaseNamesLookupError]:
        try:
            idx = self.names.index(current)
        except ValueError:
            return Err(ReleaseNamesLookupError(kind="not_found", name=current))
        if idx == len(self.names) - 1:
            return Err(ReleaseNamesLookupError(kind="exhausted", name=current))
        return Ok(self.names[idx + 1])


def load_release_names(path: Path) -> Result[ReleaseNames, ReleaseNameError]:
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(
            ReleaseNameError(
                message=f"release names file not found: {path}",
                hint="Set release_names in distship.toml.",
            )
        )
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(ReleaseNameError(message=f"cannot read release names {path}: {e}"))

    items = as_obj_list(obj)
    if items is None or not all(isinstance(i, str) for i in items):
        return Err(ReleaseNameError(message=f"{path} must be a JSON array of strings"))

    try:
        return Ok(ReleaseNames.of(str(i) for i in items))
    except ValueError as e:
        return Err(ReleaseNameError(message=f"invalid release names in {path}: {e}"))


def current_release_name(
    state: MergedPackageState,
    *,
    versioned_package: str,
    field: Sequence[str],
) -> Result[str, ReleaseNameError]:
    pkg = state.get(versioned_package)
    if pkg is None:
        return Err(
            ReleaseNameError(
                message=f"versioned package {versioned_package} is not a local package",
                hint="Check versioned_package in distship.toml.",
            )
        )

    name = get_path(pkg.manifest, field)
    if name is None:
        return Err(
            ReleaseNameError(
                message=f"{pkg.manifest_path} has no {'.'.join(field)} release name",
            )
        )
    return Ok(name)


def next_release_name(
    state: MergedPackageState,
    names: ReleaseNames,
    *,
    versioned_package: str,
    field: Sequence[str],
) -> Result[str, ReleaseNameError]:
    """Return the name the coming release will take.

    Pure: the same state always yields the same answer.
    """
    current = current_release_name(state, versioned_package=versioned_package, field=field)
    if isinstance(current, Err):
        return current
    release_name = current.value

    following = names.next_after(release_name)
    if isinstance(following, Err):
        match following.error.kind:
            case "not_found":
                return Err(
                    ReleaseNameError(
                        message=(
                            f"The existing release name ({release_name}) is not found "
                            "in release names list."
                        ),
                    )
                )
            case "exhausted":
                return Err(
                    ReleaseNameError(
                        message=(
                            f"The existing release name ({release_name}) is the last "
                            "in the list of named releases."
                        ),
                        hint="Append new names to the release names list.",
                    )
                )
    next_name = following.value

    candidates = {next_name, normalize_tag(next_name)}
    # A package tagged with both spellings is reported once.
    collisions = tuple(
        dict.fromkeys(
            f"{pkg.name}@{pkg.tags[tag]}"
            for pkg in state.packages()
            for tag in sorted(candidates)
            if tag in pkg.tags
        )
    )
    if collisions:
        return Err(
            ReleaseNameError(
                message=(
                    f"The release name ({next_name}) has already been used by "
                    f"{', '.join(collisions)}."
                ),
                collisions=collisions,
            )
        )

    return Ok(next_name)
