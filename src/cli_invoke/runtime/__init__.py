"""Runtime module for subprocess execution.

Captured runs are isolated in their own process group with reliable
termination; live runs inherit the parent's standard streams.
"""

from __future__ import annotations

from .process_runner import ProcessResult, ProcessRunner, ProcessSpec

__all__ = [
    "ProcessResult",
    "ProcessRunner",
    "ProcessSpec",
]
