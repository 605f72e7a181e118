"""Error payloads for the release flows.

Each kind of failure is its own frozen dataclass so callers can match on it;
all of them expose `message` and `hint` for rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ReadError:
    """A local manifest is missing, unreadable or malformed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class RegistryError:
    """A dist-tag query or mutation failed."""

    message: str
    package: str | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Local state and registry state disagree, or nothing changed."""

    message: str
    packages: tuple[str, ...] = ()
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseNameError:
    """The next release name cannot be determined or is already taken."""

    message: str
    collisions: tuple[str, ...] = ()
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PublishError:
    """Writing the manifest, committing or pushing failed."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class FetchError:
    """The external download of a published tarball failed."""

    message: str
    url: str | None = None
    hint: str | None = None


ShipError = (
    ReadError | RegistryError | ValidationError | ReleaseNameError | PublishError | FetchError
)


def describe(error: ShipError) -> str:
    if error.hint:
        return f"{error.message} (hint: {error.hint})"
    return error.message
