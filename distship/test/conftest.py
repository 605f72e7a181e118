from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from distship.core.result import Err, Ok, Result
from distship.git.repository import GitError, Repository


class RecordingRepository(Repository):
    """Repository that records git calls instead of running git."""

    def __init__(self, path: Path, *, fail: str | None = None) -> None:
        super().__init__(path)
        self.fail = fail
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def _record(self, command: str, args: Sequence[str]) -> Result[str, GitError]:
        self.calls.append((command, tuple(args)))
        if command == self.fail:
            return Err(GitError(command=command, message=f"{command} rejected"))
        return Ok("")

    def add(self, paths: Sequence[str]) -> Result[str, GitError]:
        return self._record("add", paths)

    def commit(self, paragraphs: Sequence[str]) -> Result[str, GitError]:
        return self._record("commit", paragraphs)

    def push(self) -> Result[str, GitError]:
        return self._record("push", ())

    @property
    def commands(self) -> list[str]:
        return [c for c, _ in self.calls]


WritePackage = Callable[..., Path]


@pytest.fixture
def write_package() -> WritePackage:
    def _write(
        root: Path,
        dirname: str,
        *,
        name: str,
        version: str,
        release: str | None = None,
    ) -> Path:
        pkg_dir = root / dirname
        pkg_dir.mkdir(parents=True, exist_ok=True)
        manifest: dict[str, object] = {"name": name, "version": version}
        if release is not None:
            manifest["release"] = {"release": release}
        (pkg_dir / "package.json").write_text(json.dumps(manifest, indent="\t"), encoding="utf-8")
        return pkg_dir

    return _write


@pytest.fixture
def project(tmp_path: Path, write_package: WritePackage) -> Path:
    """Two-package project: a@1.2.0 (versioned, release Alpha) and b@1.2.0."""
    root = tmp_path / "project"
    packages = root / "packages"
    write_package(packages, "a", name="a", version="1.2.0", release="Alpha")
    write_package(packages, "b", name="b", version="1.2.0")
    (root / "release-names.json").write_text(
        json.dumps(["Alpha", "Beta", "Gamma"]), encoding="utf-8"
    )
    (root / "distship.toml").write_text('[ship]\nversioned_package = "a"\n', encoding="utf-8")
    return root


@pytest.fixture
def recording_repo(project: Path) -> RecordingRepository:
    return RecordingRepository(project)


@pytest.fixture
def make_repo(project: Path) -> Callable[..., RecordingRepository]:
    def _make(*, fail: str | None = None) -> RecordingRepository:
        return RecordingRepository(project, fail=fail)

    return _make
