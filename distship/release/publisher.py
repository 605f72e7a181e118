from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from distship.core.config import DEFAULT_MAX_WORKERS
from distship.core.result import Err, Ok, Result
from distship.core.structured import StrDict, with_path
from distship.git.repository import Repository
from distship.output.console import ConsoleProtocol, Style
from distship.platform.files import atomic_write_text
from distship.release.errors import PublishError, RegistryError
from distship.release.model import MergedPackageState
from distship.release.registry import RegistryClient, apply_tags

# Keeps the automated commit from triggering another pipeline run.
CI_SKIP_MARKER = "[ci-skip]"


def tag_release(
    client: RegistryClient,
    state: MergedPackageState,
    release_name: str,
    *,
    console: ConsoleProtocol,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Result[tuple[str, ...], RegistryError]:
    """Tag every package at its current version with `latest` and the release name."""
    return apply_tags(
        client,
        state.packages(),
        ["latest", release_name],
        console=console,
        max_workers=max_workers,
    )


def build_commit_message(
    state: MergedPackageState, *, previous_name: str, new_name: str
) -> list[str]:
    """Commit paragraphs: header with the CI-skip marker, shipped specs, next name."""
    return [
        f"Released {previous_name} {CI_SKIP_MARKER}",
        "\n".join(pkg.spec for pkg in state.packages()),
        f"Next Release: {new_name}",
    ]


def _render_manifest(manifest: StrDict) -> str:
    return json.dumps(manifest, indent="\t", ensure_ascii=False) + "\n"


def _relative(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return str(path)


def update_release_name(
    repo: Repository,
    state: MergedPackageState,
    *,
    versioned_package: str,
    field: Sequence[str],
    previous_name: str,
    new_name: str,
    console: ConsoleProtocol,
) -> Result[Path, PublishError]:
    """Record new_name in the versioned manifest, then commit and push it."""
    pkg = state.get(versioned_package)
    if pkg is None:
        return Err(PublishError(message=f"versioned package {versioned_package} not found"))

    manifest_path = pkg.manifest_path
    rel_path = _relative(manifest_path, repo.path)
    updated = with_path(pkg.manifest, field, new_name)
    message = build_commit_message(state, previous_name=previous_name, new_name=new_name)

    console.print(f"Updating {rel_path}", Style.DIM)
    for paragraph in message:
        console.print(paragraph, Style.DIM)
    try:
        atomic_write_text(manifest_path, _render_manifest(updated))
    except OSError as e:
        return Err(PublishError(message=f"cannot write {manifest_path}: {e}"))

    console.print(f"git add {rel_path}", Style.DIM)
    add = repo.add([rel_path])
    if isinstance(add, Err):
        return Err(PublishError(message="git add failed", hint=add.error.message))

    console.print("git commit", Style.DIM)
    commit = repo.commit(message)
    if isinstance(commit, Err):
        return Err(
            PublishError(
                message="git commit failed",
                hint=commit.error.message or "Configure git user.name/user.email, then retry.",
            )
        )

    console.print("git push", Style.DIM)
    push = repo.push()
    if isinstance(push, Err):
        return Err(
            PublishError(
                message="git push failed; registry tags are already applied",
                hint=push.error.message,
            )
        )

    return Ok(manifest_path)


def publish_release(
    client: RegistryClient,
    repo: Repository,
    state: MergedPackageState,
    *,
    versioned_package: str,
    field: Sequence[str],
    previous_name: str,
    new_name: str,
    console: ConsoleProtocol,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Result[Path, RegistryError | PublishError]:
    """Tag the registry first, then record the release in git.

    The registry is the source of truth for what shipped, so a failed push
    still leaves the release visible there.
    """
    tagged = tag_release(client, state, new_name, console=console, max_workers=max_workers)
    if isinstance(tagged, Err):
        return tagged

    return update_release_name(
        repo,
        state,
        versioned_package=versioned_package,
        field=field,
        previous_name=previous_name,
        new_name=new_name,
        console=console,
    )
