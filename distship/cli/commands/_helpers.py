"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn, TypeVar

import typer

from distship.core.errors import ErrorCode
from distship.core.result import Err, Ok, Result
from distship.output.console import ConsoleProtocol, Style

T = TypeVar("T")
E = TypeVar("E")


def exit_with(
    console: ConsoleProtocol,
    message: str,
    *,
    code: ErrorCode,
    hint: str | None = None,
) -> NoReturn:
    """Report a fatal message on the console and exit."""
    console.error(message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)
    raise typer.Exit(code=int(code))


def unwrap_or_exit(
    result: Result[T, E],
    console: ConsoleProtocol,
    *,
    code: ErrorCode,
    prefix: str = "",
) -> T:
    """Return the Ok value, or report the error and exit.

    Expects error objects to have 'message' and optional 'hint' attributes.
    """
    if isinstance(result, Ok):
        return result.value
    assert isinstance(result, Err)
    error = result.error
    message: str = getattr(error, "message", str(error))
    hint: str | None = getattr(error, "hint", None)
    exit_with(console, f"{prefix}{message}", code=code, hint=hint)
