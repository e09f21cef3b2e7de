"""Error presentation for failed release runs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from relbuild.core.errors import ErrorCode
from relbuild.services.errors import (
    BuildError,
    EnvError,
    InvalidParameter,
    MissingParameter,
    PackagingError,
    StepFailed,
    ToolNotFound,
)

if TYPE_CHECKING:
    from relbuild.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]

_USAGE = "usage: relbuild --version X.Y.Z --commit SHA [--output_dir DIR] [--rpm]"


def print_release_error(error: StepFailed, console: ConsoleProtocol) -> None:
    """Print the failing step, its cause, the tool output and a hint."""
    console.error(error.message)
    if error.detail:
        console.detail(error.detail)

    match error.cause:
        case MissingParameter() | InvalidParameter():
            console.detail(_USAGE)
        case ToolNotFound(tool=tool, hint=hint):
            console.detail(f"hint: {hint or f'put {tool} on PATH'}")
        case EnvError(hint=hint) | BuildError(hint=hint) | PackagingError(hint=hint):
            if hint:
                console.detail(f"hint: {hint}")


def release_error_exit_code(error: StepFailed) -> int:
    """Every failed run exits 1; the message says which step failed."""
    return int(ErrorCode.FAILURE)
