from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from distship.core.structured import StrDict


def _frozen_tags(tags: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(tags))


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """One local package directory and its parsed package.json."""

    path: Path
    name: str
    version: str
    manifest: StrDict = field(compare=False, repr=False)

    @property
    def manifest_path(self) -> Path:
        return self.path / "package.json"


@dataclass(frozen=True, slots=True)
class RegistryTagSet:
    """Dist-tags currently published for one package name."""

    name: str
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _frozen_tags(self.tags))


@dataclass(frozen=True, slots=True)
class MergedPackage:
    path: Path
    name: str
    version: str
    manifest: StrDict = field(compare=False, repr=False)
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _frozen_tags(self.tags))

    @property
    def next(self) -> str | None:
        return self.tags.get("next")

    @property
    def latest(self) -> str | None:
        return self.tags.get("latest")

    @property
    def spec(self) -> str:
        """npm-style `name@version`."""
        return f"{self.name}@{self.version}"

    @property
    def manifest_path(self) -> Path:
        return self.path / "package.json"

    def tag(self, name: str) -> str | None:
        return self.tags.get(name)


class MergedPackageState(Mapping[str, MergedPackage]):
    """Local packages overlaid with their registry dist-tags, keyed by name.

    Iteration order is the order in which packages were read from disk.
    """

    def __init__(self, packages: Mapping[str, MergedPackage]) -> None:
        self._packages = dict(packages)

    def __getitem__(self, name: str) -> MergedPackage:
        return self._packages[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def __repr__(self) -> str:
        return f"MergedPackageState({list(self._packages)!r})"

    def packages(self) -> tuple[MergedPackage, ...]:
        return tuple(self._packages.values())


@dataclass(frozen=True, slots=True)
class ReleaseDelta:
    """A package whose `latest` will move to its current version."""

    name: str
    previous: str | None
    current: str

    def __str__(self) -> str:
        return f"{self.name}@{self.previous} => {self.name}@{self.current}"
