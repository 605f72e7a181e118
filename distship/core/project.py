"""Project root detection and paths.

The project is the root of the JavaScript monorepo being released. It is
identified by a `distship.toml` file or, failing that, by a `.git` entry.
`DISTSHIP_ROOT` overrides detection.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILENAME, ShipConfig
from .result import Err, Ok, Result

__all__ = [
    "ROOT_ENV_VAR",
    "Project",
    "ProjectError",
    "detect_project",
    "is_project_root",
]

ROOT_ENV_VAR = "DISTSHIP_ROOT"


@dataclass(frozen=True, slots=True)
class ProjectError:
    """Error when no project root can be found."""

    message: str
    searched_from: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class Project:
    root: Path

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    def packages_dir(self, config: ShipConfig) -> Path:
        return self.root / config.packages_dir

    def release_names_path(self, config: ShipConfig) -> Path:
        return self.root / config.release_names


def is_project_root(path: Path) -> bool:
    return (path / CONFIG_FILENAME).is_file() or (path / ".git").exists()


def detect_project(start: Path | None = None) -> Result[Project, ProjectError]:
    """Find the project root.

    Order: $DISTSHIP_ROOT, then start (default cwd) and its parents.
    """
    env = os.environ.get(ROOT_ENV_VAR)
    if env:
        root = Path(env).expanduser().resolve()
        if not root.is_dir():
            return Err(
                ProjectError(
                    message=f"{ROOT_ENV_VAR} is not a directory: {root}",
                    searched_from=root,
                )
            )
        return Ok(Project(root=root))

    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if is_project_root(candidate):
            return Ok(Project(root=candidate))

    return Err(
        ProjectError(
            message=f"no project root found from {origin}",
            searched_from=origin,
            hint=f"Run inside a git checkout or add {CONFIG_FILENAME}.",
        )
    )
