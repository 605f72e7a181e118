"""Read local package manifests.

Every immediate subdirectory of the packages root is expected to be a
package with a package.json declaring at least `name` and `version`.
"""

from __future__ import annotations

import json
from pathlib import Path

from distship.core.result import Err, Ok, Result
from distship.core.structured import StrDict, as_str_dict, get_str
from distship.release.errors import ReadError
from distship.release.model import PackageRecord

MANIFEST_FILENAME = "package.json"


def read_manifest(package_dir: Path) -> Result[StrDict, ReadError]:
    path = package_dir / MANIFEST_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            ReadError(
                message=f"missing {MANIFEST_FILENAME} in {package_dir}",
                path=path,
                hint="Every directory under the packages root must be a package.",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReadError(message=f"cannot read {path}: {e}", path=path))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ReadError(message=f"invalid JSON in {path}: {e}", path=path))

    data = as_str_dict(obj)
    if data is None:
        return Err(ReadError(message=f"{path} must contain a JSON object", path=path))
    return Ok(data)


def read_package(package_dir: Path) -> Result[PackageRecord, ReadError]:
    manifest = read_manifest(package_dir)
    if isinstance(manifest, Err):
        return manifest

    data = manifest.value
    name = get_str(data, "name")
    version = get_str(data, "version")
    if name is None or version is None:
        missing = "name" if name is None else "version"
        path = package_dir / MANIFEST_FILENAME
        return Err(ReadError(message=f"{path} has no {missing}", path=path))

    return Ok(PackageRecord(path=package_dir, name=name, version=version, manifest=data))


def read_local_packages(root: Path) -> Result[tuple[PackageRecord, ...], ReadError]:
    """Read one PackageRecord per package directory under root, sorted by directory."""
    if not root.is_dir():
        return Err(
            ReadError(
                message=f"packages root not found: {root}",
                path=root,
                hint="Set packages_dir in distship.toml.",
            )
        )

    try:
        dirs = sorted(p for p in root.iterdir() if p.is_dir() and not p.name.startswith("."))
    except OSError as e:
        return Err(ReadError(message=f"cannot list {root}: {e}", path=root))

    records: list[PackageRecord] = []
    for package_dir in dirs:
        record = read_package(package_dir)
        if isinstance(record, Err):
            return record
        records.append(record.value)

    return Ok(tuple(records))
