"""Exit codes for the relbuild command.

The release tool reports every failure the same way to the shell: the step
and cause go to stderr, the exit status is 1.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable for CI scripts."""

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()
