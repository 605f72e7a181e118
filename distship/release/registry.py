"""Registry dist-tag adapter.

Queries and mutations go through a RegistryClient. The production client
shells out to `npm dist-tag`; MockRegistryClient keeps tags in memory for
tests and dry experiments.

Fan-out: one query per package, one mutation per package x label. Calls run
on a thread pool, every call is awaited, and the first error (in submission
order) wins. Tags applied before a failing call stay applied.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TypeVar, runtime_checkable

from distship.core.config import DEFAULT_MAX_WORKERS
from distship.core.result import Err, Ok, Result
from distship.output.console import ConsoleProtocol, Style
from distship.platform.process import run as run_process
from distship.release.errors import RegistryError
from distship.release.model import MergedPackage, RegistryTagSet
from distship.release.timeouts import NPM_TIMEOUT_SECONDS

__all__ = [
    "RegistryClient",
    "NpmRegistryClient",
    "MockRegistryClient",
    "normalize_tag",
    "parse_dist_tags",
    "fetch_tag_sets",
    "apply_tags",
]

T = TypeVar("T")

_WHITESPACE_RE = re.compile(r"\s")
_TAG_LINE_RE = re.compile(r"^\s*([^:\s]+)\s*:\s*(\S+)\s*$")


def normalize_tag(label: str) -> str:
    """Make a release label usable as a dist-tag ("Spring Fling" -> "spring_fling")."""
    return _WHITESPACE_RE.sub("_", label.lower())


def parse_dist_tags(output: str) -> dict[str, str]:
    """Parse `npm dist-tag ls` output (`tag: version` per line)."""
    tags: dict[str, str] = {}
    for line in output.splitlines():
        m = _TAG_LINE_RE.match(line)
        if m is not None:
            tags[m.group(1)] = m.group(2)
    return tags


@runtime_checkable
class RegistryClient(Protocol):
    def list_dist_tags(self, name: str) -> Result[dict[str, str], RegistryError]:
        """Return every dist-tag of a package; empty if it was never published."""
        ...

    def add_dist_tag(self, name: str, version: str, tag: str) -> Result[None, RegistryError]:
        """Point tag at name@version."""
        ...


def _is_not_found(text: str) -> bool:
    lowered = text.lower()
    return "e404" in lowered or "404 not found" in lowered


class NpmRegistryClient:
    """RegistryClient backed by the npm CLI.

    Constructed once per invocation and passed down explicitly.
    """

    def __init__(
        self,
        cwd: Path,
        registry_url: str | None = None,
        *,
        npm: str = "npm",
        timeout: float = NPM_TIMEOUT_SECONDS,
    ) -> None:
        self.cwd = cwd
        self.registry_url = registry_url
        self._npm = npm
        self._timeout = timeout

    def _cmd(self, *args: str) -> list[str]:
        cmd = [self._npm, "dist-tag", *args]
        if self.registry_url:
            cmd.extend(["--registry", self.registry_url])
        return cmd

    def list_dist_tags(self, name: str) -> Result[dict[str, str], RegistryError]:
        result = run_process(self._cmd("ls", name), cwd=self.cwd, timeout=self._timeout)
        if isinstance(result, Err):
            e = result.error
            if _is_not_found(f"{e.stderr}\n{e.stdout}"):
                return Ok({})
            return Err(
                RegistryError(
                    message=f"npm dist-tag ls {name} failed",
                    package=name,
                    hint=e.detail,
                )
            )
        return Ok(parse_dist_tags(result.value))

    def add_dist_tag(self, name: str, version: str, tag: str) -> Result[None, RegistryError]:
        spec = f"{name}@{version}"
        result = run_process(self._cmd("add", spec, tag), cwd=self.cwd, timeout=self._timeout)
        if isinstance(result, Err):
            return Err(
                RegistryError(
                    message=f"npm dist-tag add {spec} {tag} failed",
                    package=name,
                    hint=result.error.detail,
                )
            )
        return Ok(None)


@dataclass(frozen=True, slots=True)
class RegistryCall:
    op: str
    name: str
    version: str | None = None
    tag: str | None = None


class MockRegistryClient:
    """In-memory RegistryClient.

    Usage:
        client = MockRegistryClient({"a": {"next": "1.2.0", "latest": "1.1.0"}})
        client.fail_on("add", "a", tag="beta")
    """

    def __init__(self, tags: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._tags: dict[str, dict[str, str]] = {k: dict(v) for k, v in (tags or {}).items()}
        self._failures: dict[tuple[str, str, str | None], str] = {}
        self._lock = threading.Lock()
        self.calls: list[RegistryCall] = []

    def tags_for(self, name: str) -> dict[str, str]:
        return dict(self._tags.get(name, {}))

    def fail_on(
        self, op: str, name: str, *, tag: str | None = None, message: str = "mock failure"
    ) -> None:
        self._failures[(op, name, tag)] = message

    def _failure(self, op: str, name: str, tag: str | None) -> str | None:
        return self._failures.get((op, name, tag)) or self._failures.get((op, name, None))

    def list_dist_tags(self, name: str) -> Result[dict[str, str], RegistryError]:
        with self._lock:
            self.calls.append(RegistryCall(op="ls", name=name))
            failure = self._failure("ls", name, None)
            if failure is not None:
                return Err(RegistryError(message=failure, package=name))
            return Ok(dict(self._tags.get(name, {})))

    def add_dist_tag(self, name: str, version: str, tag: str) -> Result[None, RegistryError]:
        with self._lock:
            self.calls.append(RegistryCall(op="add", name=name, version=version, tag=tag))
            failure = self._failure("add", name, tag)
            if failure is not None:
                return Err(RegistryError(message=failure, package=name))
            self._tags.setdefault(name, {})[tag] = version
            return Ok(None)

    @property
    def mutations(self) -> list[RegistryCall]:
        return [c for c in self.calls if c.op == "add"]


def _gather(
    tasks: Sequence[Callable[[], Result[T, RegistryError]]],
    *,
    max_workers: int,
) -> Result[list[T], RegistryError]:
    """Run tasks concurrently, wait for all, return values in order or the first error."""
    if not tasks:
        return Ok([])

    workers = max(1, min(max_workers, len(tasks)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(task) for task in tasks]
        results = [future.result() for future in futures]

    values: list[T] = []
    for result in results:
        if isinstance(result, Err):
            return result
        values.append(result.value)
    return Ok(values)


def fetch_tag_sets(
    client: RegistryClient,
    names: Iterable[str],
    *,
    console: ConsoleProtocol,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Result[tuple[RegistryTagSet, ...], RegistryError]:
    """Query dist-tags for every name, one concurrent call per package."""
    ordered = list(dict.fromkeys(names))
    for name in ordered:
        console.print(f"npm dist-tag ls {name}", Style.DIM)

    def query(name: str) -> Callable[[], Result[RegistryTagSet, RegistryError]]:
        return lambda: client.list_dist_tags(name).map(
            lambda tags: RegistryTagSet(name=name, tags=tags)
        )

    gathered = _gather([query(name) for name in ordered], max_workers=max_workers)
    if isinstance(gathered, Err):
        return gathered
    return Ok(tuple(gathered.value))


def apply_tags(
    client: RegistryClient,
    packages: Iterable[MergedPackage],
    labels: Sequence[str],
    *,
    console: ConsoleProtocol,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Result[tuple[str, ...], RegistryError]:
    """Point every normalized label at each package's current version.

    Returns the normalized labels that were applied.
    """
    safe_labels = tuple(dict.fromkeys(normalize_tag(label) for label in labels))

    tasks: list[Callable[[], Result[None, RegistryError]]] = []
    for pkg in packages:
        for tag in safe_labels:
            console.print(f"npm dist-tag add {pkg.spec} {tag}", Style.DIM)
            tasks.append(
                lambda name=pkg.name, version=pkg.version, tag=tag: client.add_dist_tag(
                    name, version, tag
                )
            )

    gathered = _gather(tasks, max_workers=max_workers)
    if isinstance(gathered, Err):
        return gathered
    return Ok(safe_labels)
