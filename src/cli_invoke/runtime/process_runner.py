"""Process runner for captured and live subprocess execution.

This module provides:
- Captured execution: stdout/stderr buffered, child isolated in its own
  session (POSIX) or process group (Windows)
- Live execution: stdio inherited from the parent, child stays in the
  parent's process group so terminal job control reaches it
- Cancel-safe cleanup using asyncio.shield
- Optional anyio.CancelScope raced against each pending stdout read

Termination strategy on cleanup: SIGTERM (CTRL_BREAK_EVENT on Windows),
wait term_timeout, then SIGKILL (kill() on Windows), wait kill_timeout.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import anyio

from ..config import DEFAULT_KILL_TIMEOUT, DEFAULT_TERM_TIMEOUT
from ..errors import SpawnError

__all__ = [
    "IS_WINDOWS",
    "ProcessResult",
    "ProcessRunner",
    "ProcessSpec",
]

logger = logging.getLogger(__name__)

# Platform detection
IS_WINDOWS = sys.platform == "win32"

CHUNK_SIZE = 4096

# How often a pending stdout read re-checks the cancel scope (seconds)
CANCEL_POLL_INTERVAL = 0.05


@dataclass(frozen=True)
class ProcessSpec:
    """Specification for a subprocess to run.

    Attributes:
        argv: Command line arguments (first element is the executable)
        cwd: Working directory (None = inherit parent)
        env: Environment variables (None = inherit parent)
    """

    argv: list[str]
    cwd: Path | None = None
    env: Mapping[str, str] | None = None


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a captured subprocess run.

    Attributes:
        argv: Arguments the process was started with
        returncode: Exit status (negative signal number on POSIX)
        stdout: Raw standard output
        stderr: Raw standard error
        cancelled: Reading stopped because the cancel scope fired
    """

    argv: list[str]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""
    cancelled: bool = field(default=False)

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.cancelled


@dataclass
class ProcessRunner:
    """Cross-platform process runner with reliable termination.

    Example:
        runner = ProcessRunner()
        result = await runner.run(ProcessSpec(argv=["my-cli", "--version"]))
        print(result.stdout.decode())

        status = await runner.run_live(ProcessSpec(argv=["my-cli", "login"]))
    """

    term_timeout: float = DEFAULT_TERM_TIMEOUT
    kill_timeout: float = DEFAULT_KILL_TIMEOUT

    async def run(
        self,
        spec: ProcessSpec,
        *,
        cancel_scope: anyio.CancelScope | None = None,
    ) -> ProcessResult:
        """Run a subprocess and buffer its output.

        This method:
        1. Starts the subprocess in an isolated process group/session
        2. Reads stdout in chunks while draining stderr concurrently
        3. Stops reading and terminates the child if cancel_scope fires
        4. Ensures cleanup even if the awaiting task is cancelled

        Args:
            spec: Process specification
            cancel_scope: Optional anyio.CancelScope for cancellation

        Returns:
            Process result (non-zero exit status is not an error here)

        Raises:
            SpawnError: The executable could not be started
        """
        process: asyncio.subprocess.Process | None = None
        stderr_task: asyncio.Task[bytes] | None = None

        kwargs = self._build_subprocess_kwargs(spec, isolate=True)

        try:
            process = await asyncio.create_subprocess_exec(
                *spec.argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **kwargs,
            )
        except (OSError, ValueError) as e:
            raise SpawnError(spec.argv, getattr(e, "strerror", None) or str(e)) from e

        logger.debug(f"Started subprocess pid={process.pid} argv={spec.argv[0]}")

        try:
            stderr_task = asyncio.create_task(self._drain(process.stderr))

            stdout_chunks: list[bytes] = []
            cancelled = False
            if process.stdout:
                while True:
                    chunk = await self._read_chunk(process.stdout, cancel_scope)
                    if chunk is None:
                        cancelled = True
                        break
                    if not chunk:
                        break
                    stdout_chunks.append(chunk)

            if cancelled:
                logger.debug(f"Cancel scope fired, terminating pid={process.pid}")
                await self._terminate_process(process, group=True)

            stderr = await stderr_task
            returncode = await process.wait()

            logger.debug(
                f"Subprocess completed pid={process.pid} returncode={returncode}"
            )

            return ProcessResult(
                argv=list(spec.argv),
                returncode=returncode,
                stdout=b"".join(stdout_chunks),
                stderr=stderr,
                cancelled=cancelled,
            )

        finally:
            await self._safe_cleanup(process, stderr_task, group=True)

    async def run_live(self, spec: ProcessSpec) -> int:
        """Run a subprocess attached to the parent's stdin/stdout/stderr.

        Args:
            spec: Process specification

        Returns:
            Exit status of the child

        Raises:
            SpawnError: The executable could not be started
        """
        process: asyncio.subprocess.Process | None = None
        kwargs = self._build_subprocess_kwargs(spec, isolate=False)

        try:
            process = await asyncio.create_subprocess_exec(*spec.argv, **kwargs)
        except (OSError, ValueError) as e:
            raise SpawnError(spec.argv, getattr(e, "strerror", None) or str(e)) from e

        logger.debug(f"Started live subprocess pid={process.pid} argv={spec.argv[0]}")

        try:
            returncode = await process.wait()
            logger.debug(
                f"Live subprocess exited pid={process.pid} returncode={returncode}"
            )
            return returncode
        finally:
            await self._safe_cleanup(process, None, group=False)

    def _build_subprocess_kwargs(
        self, spec: ProcessSpec, *, isolate: bool
    ) -> dict[str, Any]:
        """Build platform-specific subprocess kwargs.

        Args:
            spec: Process specification
            isolate: Start the child in its own process group/session

        Returns:
            Dict of kwargs for asyncio.create_subprocess_exec
        """
        kwargs: dict[str, Any] = {}

        if spec.cwd is not None:
            kwargs["cwd"] = spec.cwd
        if spec.env is not None:
            kwargs["env"] = dict(spec.env)

        if isolate:
            if IS_WINDOWS:
                kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
            else:
                # POSIX: equivalent to setsid
                kwargs["start_new_session"] = True

        return kwargs

    async def _read_chunk(
        self,
        stream: asyncio.StreamReader,
        cancel_scope: anyio.CancelScope | None,
    ) -> bytes | None:
        """Read one stdout chunk, racing it against the cancel scope.

        Returns None once the scope is cancelled, even if the child has
        written nothing.
        """
        if cancel_scope is None:
            return await stream.read(CHUNK_SIZE)
        if cancel_scope.cancel_called:
            return None

        read_task = asyncio.create_task(stream.read(CHUNK_SIZE))
        try:
            while True:
                done, _ = await asyncio.wait({read_task}, timeout=CANCEL_POLL_INTERVAL)
                if read_task in done:
                    return read_task.result()
                if cancel_scope.cancel_called:
                    return None
        finally:
            if not read_task.done():
                read_task.cancel()
                try:
                    await read_task
                except asyncio.CancelledError:
                    pass

    async def _drain(self, stream: asyncio.StreamReader | None) -> bytes:
        """Read a stream to EOF so the child never blocks on a full pipe."""
        chunks: list[bytes] = []
        if stream is not None:
            while True:
                chunk = await stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    async def _safe_cleanup(
        self,
        process: asyncio.subprocess.Process | None,
        stderr_task: asyncio.Task[bytes] | None,
        *,
        group: bool,
    ) -> None:
        """Cleanup subprocess and tasks, shielded from cancellation."""
        try:
            await asyncio.shield(self._do_cleanup(process, stderr_task, group=group))
        except asyncio.CancelledError:
            # Shield itself was cancelled, still try cleanup
            await self._do_cleanup(process, stderr_task, group=group)

    async def _do_cleanup(
        self,
        process: asyncio.subprocess.Process | None,
        stderr_task: asyncio.Task[bytes] | None,
        *,
        group: bool,
    ) -> None:
        if stderr_task and not stderr_task.done():
            stderr_task.cancel()
            try:
                await stderr_task
            except asyncio.CancelledError:
                pass

        if process is not None and process.returncode is None:
            await self._terminate_process(process, group=group)

    async def _terminate_process(
        self,
        process: asyncio.subprocess.Process,
        *,
        group: bool,
    ) -> None:
        """Terminate subprocess gracefully, then forcefully if needed.

        Args:
            process: The subprocess to terminate
            group: Signal the child's whole process group (isolated children only)
        """
        pid = process.pid
        logger.debug(f"Terminating subprocess pid={pid}")

        try:
            if IS_WINDOWS:
                self._windows_terminate(process, group=group)
            else:
                self._posix_signal(process, signal.SIGTERM, group=group)

            try:
                await asyncio.wait_for(process.wait(), timeout=self.term_timeout)
                logger.debug(
                    f"Subprocess terminated gracefully pid={pid} "
                    f"returncode={process.returncode}"
                )
                return
            except asyncio.TimeoutError:
                pass

            logger.debug(f"Force killing subprocess pid={pid}")
            if IS_WINDOWS:
                process.kill()
            else:
                self._posix_signal(process, signal.SIGKILL, group=group)

            try:
                await asyncio.wait_for(process.wait(), timeout=self.kill_timeout)
                logger.debug(
                    f"Subprocess killed pid={pid} returncode={process.returncode}"
                )
            except asyncio.TimeoutError:
                logger.warning(f"Subprocess did not exit after kill pid={pid}")

        except ProcessLookupError:
            logger.debug(f"Subprocess already exited pid={pid}")

    def _posix_signal(
        self,
        process: asyncio.subprocess.Process,
        signum: int,
        *,
        group: bool,
    ) -> None:
        """Send a signal to the child, or to its process group when isolated."""
        if not group:
            process.send_signal(signum)
            return
        try:
            # pgid == pid because of start_new_session
            pgid = os.getpgid(process.pid)
            os.killpg(pgid, signum)
            logger.debug(f"Sent signal {signum} to process group pgid={pgid}")
        except ProcessLookupError:
            pass
        except OSError as e:
            logger.debug(f"killpg failed, falling back to send_signal: {e}")
            process.send_signal(signum)

    def _windows_terminate(
        self,
        process: asyncio.subprocess.Process,
        *,
        group: bool,
    ) -> None:
        """Send CTRL_BREAK_EVENT to an isolated process group, else terminate()."""
        if not group:
            process.terminate()
            return
        try:
            os.kill(process.pid, signal.CTRL_BREAK_EVENT)
            logger.debug(f"Sent CTRL_BREAK_EVENT to pid={process.pid}")
        except OSError as e:
            logger.debug(f"CTRL_BREAK_EVENT failed, falling back: {e}")
            process.terminate()
