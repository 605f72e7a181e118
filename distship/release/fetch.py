"""Download the tarball of the package version just published.

Runs after `npm publish` to keep a copy of the exact artifact under
`published/<name>@<version>.tgz`.
"""

from __future__ import annotations

from pathlib import Path

from distship.core.result import Err, Ok, Result
from distship.core.structured import get_str
from distship.output.console import ConsoleProtocol, Style
from distship.platform.process import run as run_process
from distship.release.errors import FetchError, ReadError
from distship.release.timeouts import CURL_TIMEOUT_SECONDS
from distship.release.versions import MANIFEST_FILENAME, read_manifest


def tarball_url(registry_url: str, name: str, version: str) -> str:
    base = registry_url.rstrip("/")
    return f"{base}/{name}/-/{name}-{version}.tgz"


def tarball_target(published_dir: Path, name: str, version: str) -> Path:
    # Scoped names (@scope/pkg) land in a per-scope subdirectory.
    return published_dir / f"{name}@{version}.tgz"


def fetch_published(
    package_dir: Path,
    *,
    registry_url: str,
    published_dir: Path,
    console: ConsoleProtocol,
    curl: str = "curl",
) -> Result[Path, ReadError | FetchError]:
    manifest = read_manifest(package_dir)
    if isinstance(manifest, Err):
        return manifest

    name = get_str(manifest.value, "name")
    version = get_str(manifest.value, "version")
    if name is None or version is None:
        path = package_dir / MANIFEST_FILENAME
        return Err(ReadError(message=f"{path} needs both name and version", path=path))

    url = tarball_url(registry_url, name, version)
    target = tarball_target(published_dir, name, version)
    shown = target.relative_to(package_dir) if target.is_relative_to(package_dir) else target
    console.print(f"Downloading {url} to ./{shown.as_posix()}")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(FetchError(message=f"cannot create {target.parent}: {e}", url=url))

    result = run_process(
        [curl, "--fail", "--silent", "--show-error", "-o", str(target), "-X", "GET", url],
        cwd=package_dir,
        timeout=CURL_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            FetchError(
                message=f"download failed: {url}",
                url=url,
                hint=result.error.detail,
            )
        )

    console.print(f"saved {shown.as_posix()}", Style.DIM)
    return Ok(target)
