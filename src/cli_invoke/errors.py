"""Exceptions raised by cli-invoke.

Hierarchy:
    CliInvokeError
    ├── InvalidOptionValue        (also a TypeError)
    └── ProcessExecutionError
        ├── SpawnError
        └── ProcessCancelledError
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

__all__ = [
    "CliInvokeError",
    "InvalidOptionValue",
    "ProcessExecutionError",
    "SpawnError",
    "ProcessCancelledError",
]


class CliInvokeError(Exception):
    """Base exception for cli-invoke."""


class InvalidOptionValue(CliInvokeError, TypeError):
    """An option value does not match the type declared in its schema.

    Attributes:
        option: Logical option name
        expected: Human readable name of the expected type
        value: The offending value
    """

    def __init__(self, option: str, expected: str, value: Any) -> None:
        self.option = option
        self.expected = expected
        self.value = value
        super().__init__(
            f"{option} should be {expected}, got {type(value).__name__}"
        )


class ProcessExecutionError(CliInvokeError):
    """The executable ran but did not complete successfully.

    Attributes:
        argv: Full argument vector, binary path first
        returncode: Exit status (None when the process never ran)
        stdout: Captured standard output
        stderr: Captured standard error
    """

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
        message: str | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if message is None:
            message = f"Command failed with exit status {returncode}: {self.command}"
            detail = stderr.strip()
            if detail:
                message = f"{message}\n{detail}"
        super().__init__(message)

    @property
    def command(self) -> str:
        """Space-joined argv, for messages only."""
        return " ".join(str(arg) for arg in self.argv)


class SpawnError(ProcessExecutionError):
    """The executable could not be found or started.

    The originating OSError is chained as ``__cause__``.
    """

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        self.path = str(argv[0]) if argv else ""
        self.reason = reason
        super().__init__(
            argv,
            None,
            message=f"Failed to start {self.path}: {reason}",
        )


class ProcessCancelledError(ProcessExecutionError):
    """Captured-mode execution was cancelled through a cancel scope."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(
            argv,
            returncode,
            stdout=stdout,
            stderr=stderr,
            message=f"Command cancelled: {' '.join(str(a) for a in argv)}",
        )
