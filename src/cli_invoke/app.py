"""cli-invoke console entry point.

Forwards every argument to the wrapped executable in live mode and exits
with its status:

    cli-invoke releases list --org acme
    python -m cli_invoke --version
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from collections.abc import Sequence

from .config import Config, get_config
from .errors import SpawnError
from .runner import get_default_runner

__all__ = ["configure_logging", "exit_status", "main"]

logger = logging.getLogger(__name__)

# Conventional shell status for "command not found"
SPAWN_FAILURE_STATUS = 127


def configure_logging(config: Config) -> None:
    """Attach log handlers according to the configuration.

    LOG_DEBUG mode writes DEBUG records to the temp log file, otherwise
    INFO records go to stderr. Third-party loggers stay at WARNING.
    """
    log_handlers: list[logging.Handler] = []

    if config.log_debug and config.log_file:
        handler: logging.Handler = logging.FileHandler(config.log_file, encoding="utf-8")
        log_level = logging.DEBUG
    else:
        handler = logging.StreamHandler(sys.stderr)
        log_level = logging.INFO

    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    )
    log_handlers.append(handler)

    logging.basicConfig(level=logging.WARNING, handlers=log_handlers)
    logging.getLogger("cli_invoke").setLevel(log_level)


def exit_status(returncode: int) -> int:
    """Map a child exit status to a shell exit status.

    POSIX children killed by a signal report ``-signum``; shells report
    ``128 + signum``.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    config = get_config()
    configure_logging(config)

    args = list(sys.argv[1:] if argv is None else argv)
    runner = get_default_runner()
    logger.debug(f"Forwarding {len(args)} argument(s) to {runner.get_path()}")

    try:
        returncode = asyncio.run(runner.run_live(args))
    except SpawnError as e:
        print(f"cli-invoke: {e}", file=sys.stderr)
        return SPAWN_FAILURE_STATUS
    except KeyboardInterrupt:
        # The child shares our process group and received SIGINT as well
        return exit_status(-signal.SIGINT)

    return exit_status(returncode)


if __name__ == "__main__":
    sys.exit(main())
