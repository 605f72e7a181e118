from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from distship import __version__
from distship.cli.app import app
from distship.cli.commands import release_cmd
from distship.core.project import ROOT_ENV_VAR
from distship.release.registry import MockRegistryClient

# Wide terminal so rich does not wrap error lines.
runner = CliRunner(env={"COLUMNS": "500"})


@pytest.fixture
def registry(project: Path, monkeypatch: pytest.MonkeyPatch) -> MockRegistryClient:
    client = MockRegistryClient(
        {
            "a": {"next": "1.2.0", "latest": "1.1.0"},
            "b": {"next": "1.2.0", "latest": "1.1.0"},
        }
    )
    monkeypatch.setenv(ROOT_ENV_VAR, str(project))
    monkeypatch.setattr(release_cmd, "NpmRegistryClient", lambda root, url: client)
    return client


@pytest.fixture
def repo(make_repo, monkeypatch: pytest.MonkeyPatch):
    recording = make_repo()
    monkeypatch.setattr(release_cmd, "Repository", lambda root: recording)
    return recording


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_without_ship_flag_does_nothing(registry: MockRegistryClient) -> None:
    result = runner.invoke(app, ["release"])

    assert result.exit_code == 0
    assert "Nothing to do." in result.output
    assert registry.calls == []


def test_dry_run_alone_does_nothing(registry: MockRegistryClient) -> None:
    result = runner.invoke(app, ["release", "--dry-run"])

    assert result.exit_code == 0
    assert "Nothing to do." in result.output
    assert registry.calls == []


def test_ship_dry_run(registry: MockRegistryClient, repo) -> None:
    result = runner.invoke(app, ["release", "--ship", "--dry-run"])

    assert result.exit_code == 0, result.output
    assert "Next release: Beta" in result.output
    assert registry.mutations == []
    assert repo.calls == []


def test_ship(project: Path, registry: MockRegistryClient, repo) -> None:
    result = runner.invoke(app, ["release", "-s"])

    assert result.exit_code == 0, result.output
    assert registry.tags_for("b")["beta"] == "1.2.0"
    assert repo.commands == ["add", "commit", "push"]
    manifest = json.loads((project / "packages" / "a" / "package.json").read_text("utf-8"))
    assert manifest["release"]["release"] == "Beta"


def test_ship_failure_exits_one(project: Path, registry: MockRegistryClient, repo, write_package) -> None:
    write_package(project / "packages", "b", name="b", version="1.3.0")

    result = runner.invoke(app, ["release", "--ship"])

    assert result.exit_code == 1
    assert "Ship failed." in result.output
    assert "next version of b" in result.output
    assert registry.mutations == []


def test_missing_release_names_fails(project: Path, registry: MockRegistryClient, repo) -> None:
    (project / "release-names.json").unlink()

    result = runner.invoke(app, ["release", "--ship", "--dry-run"])

    assert result.exit_code == 1
    assert "release names file not found" in result.output
    assert "hint: Set release_names in distship.toml." in result.output


def test_bad_config_fails_the_ship(project: Path, registry: MockRegistryClient) -> None:
    (project / "distship.toml").write_text("[ship\n", encoding="utf-8")

    result = runner.invoke(app, ["release", "--ship"])

    assert result.exit_code == 1
    assert "Ship failed. Invalid TOML" in result.output
    assert registry.calls == []


def test_missing_project_fails_the_ship(
    tmp_path: Path, registry: MockRegistryClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(ROOT_ENV_VAR, str(tmp_path / "missing"))

    result = runner.invoke(app, ["release", "--ship", "--dry-run"])

    assert result.exit_code == 1
    assert "Ship failed." in result.output
    assert registry.calls == []
