"""Tests for git/repository.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from distship.core.result import Err, Ok
from distship.git import repository as repository_mod
from distship.git.repository import Repository
from distship.platform.process import ProcessError


class _FakeGit:
    def __init__(self, responses: dict[str, object] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[list[str], float | None]] = []

    def __call__(self, cmd: list[str], cwd: Path, env=None, *, timeout: float | None = None):
        self.calls.append((cmd, timeout))
        sub = cmd[3]
        response = self.responses.get(sub, Ok(""))
        return response


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> _FakeGit:
    fake = _FakeGit()
    monkeypatch.setattr(repository_mod, "run_process", fake)
    return fake


def test_add_stages_paths(fake_git: _FakeGit, tmp_path: Path) -> None:
    result = Repository(tmp_path).add(["packages/a/package.json"])

    assert result == Ok("")
    cmd, _ = fake_git.calls[0]
    assert cmd == ["git", "-C", str(tmp_path), "add", "--", "packages/a/package.json"]


def test_commit_uses_one_m_per_paragraph(fake_git: _FakeGit, tmp_path: Path) -> None:
    Repository(tmp_path).commit(["Released Alpha [ci-skip]", "a@1.2.0", "Next Release: Beta"])

    cmd, _ = fake_git.calls[0]
    assert cmd[3:] == [
        "commit",
        "-m",
        "Released Alpha [ci-skip]",
        "-m",
        "a@1.2.0",
        "-m",
        "Next Release: Beta",
    ]


def test_commit_requires_message(fake_git: _FakeGit, tmp_path: Path) -> None:
    result = Repository(tmp_path).commit([])
    assert isinstance(result, Err)
    assert fake_git.calls == []


def test_push_gets_network_timeout(fake_git: _FakeGit, tmp_path: Path) -> None:
    repo = Repository(tmp_path)
    repo.push()
    repo.add(["x"])

    assert fake_git.calls[0][1] == repository_mod._GIT_NETWORK_TIMEOUT_SECONDS
    assert fake_git.calls[1][1] == repository_mod._GIT_TIMEOUT_SECONDS


def test_failure_maps_stderr(fake_git: _FakeGit, tmp_path: Path) -> None:
    fake_git.responses["push"] = Err(
        ProcessError(
            command=("git", "push"),
            returncode=1,
            stdout="",
            stderr="! [rejected] main -> main (fetch first)\n",
        )
    )

    result = Repository(tmp_path).push()

    assert isinstance(result, Err)
    assert result.error.command == "push"
    assert result.error.message == "! [rejected] main -> main (fetch first)"
