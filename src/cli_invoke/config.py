"""cli-invoke environment configuration.

Environment variables:
    CLI_INVOKE_LOG_DEBUG: debug logging
        - true/1/yes/on = on (logs go to a temp file at DEBUG level)
        - false/0/no/off = off (default, logs go to stderr at INFO level)

    CLI_INVOKE_TERM_TIMEOUT: seconds to wait after SIGTERM before SIGKILL
        when a cancelled child is being cleaned up
        - default 2.0, clamped to 0.1-30

    CLI_INVOKE_KILL_TIMEOUT: seconds to wait after SIGKILL
        - default 1.0, clamped to 0.1-30

The path of the wrapped binary is intentionally not configurable here.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

__all__ = ["Config", "load_config", "get_config", "reload_config"]

DEFAULT_TERM_TIMEOUT = 2.0
DEFAULT_KILL_TIMEOUT = 1.0

_TIMEOUT_MIN = 0.1
_TIMEOUT_MAX = 30.0


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_timeout(value: str | None, default: float) -> float:
    """Parse a timeout in seconds, falling back to ``default`` when invalid."""
    if not value:
        return default
    try:
        timeout = float(value)
    except ValueError:
        return default
    return max(_TIMEOUT_MIN, min(timeout, _TIMEOUT_MAX))


@dataclass
class Config:
    """cli-invoke configuration.

    Attributes:
        log_debug: Debug logging to a temp file
        log_file: Log file path (set when log_debug is True)
        term_timeout: Grace period after SIGTERM (seconds)
        kill_timeout: Grace period after SIGKILL (seconds)
    """

    log_debug: bool = False
    log_file: str | None = None
    term_timeout: float = DEFAULT_TERM_TIMEOUT
    kill_timeout: float = DEFAULT_KILL_TIMEOUT

    def __repr__(self) -> str:
        return (
            f"Config(log_debug={self.log_debug}, "
            f"log_file={self.log_file}, "
            f"term_timeout={self.term_timeout}, "
            f"kill_timeout={self.kill_timeout})"
        )


def _generate_log_file_path() -> str:
    """Build a timestamped log file path under the system temp directory."""
    log_dir = Path(tempfile.gettempdir()) / "cli-invoke"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"cli_invoke_debug_{timestamp}.log"

    return str(log_file.resolve())


def load_config() -> Config:
    """Load configuration from environment variables."""
    log_debug = _parse_bool(os.environ.get("CLI_INVOKE_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    return Config(
        log_debug=log_debug,
        log_file=log_file,
        term_timeout=_parse_timeout(
            os.environ.get("CLI_INVOKE_TERM_TIMEOUT"), DEFAULT_TERM_TIMEOUT
        ),
        kill_timeout=_parse_timeout(
            os.environ.get("CLI_INVOKE_KILL_TIMEOUT"), DEFAULT_KILL_TIMEOUT
        ),
    )


# Global instance, loaded lazily
_config: Config | None = None


def get_config() -> Config:
    """Return the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from the environment (used by tests)."""
    global _config
    _config = load_config()
    return _config
