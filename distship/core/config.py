"""Typed configuration loading and access.

Configuration lives in the `[ship]` table of `distship.toml` at the project
root. Every key is optional; shipping additionally needs `versioned_package`.

    [ship]
    registry_url = "https://registry.example.com/npm"
    packages_dir = "packages"
    versioned_package = "@acme/core"
    release_names = "scripts/release-names.json"
    release_field = "release.release"
    published_dir = "published"
    max_workers = 8
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_table, split_path

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_REGISTRY_URL",
    "ConfigError",
    "ShipConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "distship.toml"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_PACKAGES_DIR = "packages"
DEFAULT_RELEASE_NAMES = "release-names.json"
DEFAULT_RELEASE_FIELD = "release.release"
DEFAULT_PUBLISHED_DIR = "published"
DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ShipConfig:
    """Release settings for one project."""

    registry_url: str = DEFAULT_REGISTRY_URL
    packages_dir: str = DEFAULT_PACKAGES_DIR
    versioned_package: str | None = None
    release_names: str = DEFAULT_RELEASE_NAMES
    release_field: str = DEFAULT_RELEASE_FIELD
    published_dir: str = DEFAULT_PUBLISHED_DIR
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def release_field_path(self) -> tuple[str, ...]:
        return split_path(self.release_field)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ShipConfig:
        """Create ShipConfig from a mapping (parsed TOML)."""
        ship: StrDict = get_table(data, "ship") or {}

        max_workers = get_int(ship, "max_workers")
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1 (got {max_workers})")

        release_field = get_str(ship, "release_field") or DEFAULT_RELEASE_FIELD
        if not split_path(release_field):
            raise ValueError(f"release_field is not a field path: {release_field!r}")

        return cls(
            registry_url=(get_str(ship, "registry_url") or DEFAULT_REGISTRY_URL).rstrip("/"),
            packages_dir=get_str(ship, "packages_dir") or DEFAULT_PACKAGES_DIR,
            versioned_package=get_str(ship, "versioned_package"),
            release_names=get_str(ship, "release_names") or DEFAULT_RELEASE_NAMES,
            release_field=release_field,
            published_dir=get_str(ship, "published_dir") or DEFAULT_PUBLISHED_DIR,
            max_workers=max_workers or DEFAULT_MAX_WORKERS,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ShipConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to distship.toml

    Returns:
        Ok(ShipConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ShipConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ShipConfig, ConfigError]:
    """Like load_config, but a missing file yields the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(ShipConfig())
    return load_config(path)
