"""Invocation of the wrapped executable.

Basic usage:
    from cli_invoke import CliRunner, prepare_command

    runner = CliRunner()
    output = await runner.execute(["--version"])
    assert output.strip().startswith("sentry-cli")

    args = prepare_command(["releases", "new"], SCHEMA, {"version": "1.0"})
    await runner.execute(args, live=True)

Module-level helpers operate on a lazily created default runner:
    from cli_invoke import execute, get_path, mock_binary_path

    mock_binary_path("/tmp/fake-cli")   # tests only
    output = await execute(["info"])
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

import anyio

from .binary import resolve_default_binary_path
from .config import get_config
from .errors import ProcessCancelledError, ProcessExecutionError
from .runtime import ProcessRunner, ProcessSpec

__all__ = [
    "CliRunner",
    "execute",
    "get_default_runner",
    "get_path",
    "mock_binary_path",
    "reset_default_runner",
]

logger = logging.getLogger(__name__)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class CliRunner:
    """Runs the wrapped executable with a given argument vector.

    The binary path is resolved once from the host platform unless given
    explicitly. ``mock_binary_path`` swaps it for a test double.

    Two modes:
    - captured (default): resolves with stdout text; non-zero exit raises
      ProcessExecutionError carrying the exit status and stderr
    - live (``live=True``): stdio inherited, resolves with None once the
      child exits, whatever its exit status
    """

    def __init__(
        self,
        binary_path: str | os.PathLike[str] | None = None,
        process_runner: ProcessRunner | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            binary_path: Executable to invoke (default: platform location)
            process_runner: Custom process runner
        """
        if binary_path is None:
            binary_path = resolve_default_binary_path()
        self._binary_path = os.fspath(binary_path)

        if process_runner is None:
            config = get_config()
            process_runner = ProcessRunner(
                term_timeout=config.term_timeout,
                kill_timeout=config.kill_timeout,
            )
        self._process_runner = process_runner

    @property
    def binary_path(self) -> str:
        return self._binary_path

    def get_path(self) -> str:
        """Return the absolute path of the executable currently in use."""
        return self._binary_path

    def mock_binary_path(self, path: str | os.PathLike[str]) -> None:
        """Replace the executable path, e.g. with a test double.

        Takes effect for every later invocation. Not thread-safe.
        """
        self._binary_path = os.fspath(path)

    def _build_spec(self, args: Sequence[str]) -> ProcessSpec:
        # Snapshot of the full parent environment, unmodified
        return ProcessSpec(
            argv=[self._binary_path, *args],
            env=dict(os.environ),
        )

    async def execute(
        self,
        args: Sequence[str],
        live: bool = False,
        *,
        cancel_scope: anyio.CancelScope | None = None,
    ) -> str | None:
        """Run the executable with the given arguments.

        Use ``prepare_command`` to build ``args`` for a subcommand, or
        ``serialize_options`` directly for top-level options.

        The captured output includes all newlines; trim it before parsing.

        Args:
            args: Command line arguments (binary path excluded)
            live: Inherit stdio and display output directly
            cancel_scope: Optional cancel scope (captured mode only)

        Returns:
            Standard output in captured mode, None in live mode

        Raises:
            SpawnError: The executable could not be started
            ProcessExecutionError: Captured mode exited with non-zero status
            ProcessCancelledError: The cancel scope fired
        """
        if live is True:
            await self.run_live(args)
            return None

        spec = self._build_spec(args)
        logger.debug("Executing: %s", " ".join(map(str, spec.argv)))

        result = await self._process_runner.run(spec, cancel_scope=cancel_scope)
        stdout = _decode(result.stdout)
        stderr = _decode(result.stderr)

        if result.cancelled:
            raise ProcessCancelledError(
                spec.argv, result.returncode, stdout=stdout, stderr=stderr
            )
        if result.returncode != 0:
            raise ProcessExecutionError(
                spec.argv, result.returncode, stdout=stdout, stderr=stderr
            )
        return stdout

    async def run_live(self, args: Sequence[str]) -> int:
        """Run the executable attached to the terminal.

        Returns:
            Exit status of the child

        Raises:
            SpawnError: The executable could not be started
        """
        spec = self._build_spec(args)
        logger.debug("Executing live: %s", " ".join(map(str, spec.argv)))
        return await self._process_runner.run_live(spec)


# Default runner, created lazily
_default_runner: CliRunner | None = None


def get_default_runner() -> CliRunner:
    """Return the process-wide default runner."""
    global _default_runner
    if _default_runner is None:
        _default_runner = CliRunner()
    return _default_runner


def reset_default_runner() -> CliRunner:
    """Recreate the default runner with the platform binary path (used by tests)."""
    global _default_runner
    _default_runner = CliRunner()
    return _default_runner


def get_path() -> str:
    """Return the absolute path of the executable used by the default runner."""
    return get_default_runner().get_path()


def mock_binary_path(path: str | os.PathLike[str]) -> None:
    """Override the default runner's executable path, useful for testing."""
    get_default_runner().mock_binary_path(path)


async def execute(args: Sequence[str], live: bool = False) -> str | None:
    """Run the executable through the default runner.

    See CliRunner.execute.
    """
    return await get_default_runner().execute(args, live)
