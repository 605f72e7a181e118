"""Run npm, git and curl as child processes.

Every external command goes through `run`. Output is captured and failures
come back as `ProcessError` values:

    match run(["npm", "dist-tag", "ls", "left-pad"], cwd=root):
        case Ok(stdout):
            ...
        case Err(error):
            console.error(error.detail)
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from distship.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

# A child never reads from the terminal; a credential prompt fails instead of hanging.
_NO_PROMPT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that could not be started, timed out, or exited non-zero.

    `returncode` is -1 when the process never ran to completion.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = list(self.command[:3])
        if len(self.command) > 3:
            shown.append("...")
        return f"{' '.join(shown)} failed (exit {self.returncode})"

    @property
    def detail(self) -> str:
        """Best available diagnostic text."""
        return self.stderr.strip() or self.stdout.strip() or str(self)


def _child_env(extra: Mapping[str, str] | None) -> dict[str, str]:
    merged = dict(os.environ)
    merged.update(_NO_PROMPT_ENV)
    if extra:
        merged.update(extra)
    return merged


def run(
    cmd: Sequence[str],
    cwd: Path,
    env: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run `cmd` in `cwd` and return its stdout.

    `env` is layered over the current environment. `timeout` is in seconds.
    """
    command = tuple(cmd)

    def failed(returncode: int, stdout: str, stderr: str) -> Err[ProcessError]:
        return Err(ProcessError(command, returncode, stdout, stderr))

    try:
        proc = subprocess.run(
            command,
            cwd=cwd,
            env=_child_env(env),
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return failed(-1, partial, f"Command timed out after {timeout}s")
    except OSError as e:
        return failed(-1, "", str(e))

    if proc.returncode:
        return failed(proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)
