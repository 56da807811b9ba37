#!/usr/bin/env python3
"""Fake CLI for integration testing.

Stands in for the wrapped executable. Control options are prefixed with
``--fake-`` so they never collide with the arguments under test; every
other argument is collected and can be echoed back as JSON.

Usage:
    python fake_cli.py [--fake-stdout TEXT] [--fake-stderr TEXT]
                       [--fake-exit-code CODE] [--fake-echo-args]
                       [--fake-echo-env NAME] [--fake-duration SECONDS]
                       [--fake-interval SECONDS] [--fake-sleep SECONDS] [ARGS...]

Arguments:
    --fake-stdout: Text written to stdout verbatim (no newline added)
    --fake-stderr: Text written to stderr verbatim
    --fake-exit-code: Exit status (default: 0)
    --fake-echo-args: Print the remaining arguments as a JSON list
    --fake-echo-env: Print the value of an environment variable
    --fake-duration: Keep printing "tick" lines for this many seconds
    --fake-interval: Interval between ticks (default: 0.1 seconds)
    --fake-sleep: Stay alive this many seconds without writing anything

SIGINT/SIGTERM stop the tick and sleep loops and exit with 128 + signum.
"""

from __future__ import annotations

import argparse
import json
import os
import signal
import sys
import time
from typing import NoReturn

_should_stop = False
_exit_code = 0


def signal_handler(signum: int, frame) -> None:
    """Handle SIGINT/SIGTERM signals."""
    global _should_stop, _exit_code
    _should_stop = True
    _exit_code = 128 + signum


def main() -> NoReturn:
    """Main entry point."""
    global _exit_code

    parser = argparse.ArgumentParser(description="Fake CLI for testing", allow_abbrev=False)
    parser.add_argument("--fake-stdout", type=str, default=None)
    parser.add_argument("--fake-stderr", type=str, default=None)
    parser.add_argument("--fake-exit-code", type=int, default=0)
    parser.add_argument("--fake-echo-args", action="store_true")
    parser.add_argument("--fake-echo-env", type=str, default=None)
    parser.add_argument("--fake-duration", type=float, default=0.0)
    parser.add_argument("--fake-interval", type=float, default=0.1)
    parser.add_argument("--fake-sleep", type=float, default=0.0)

    args, rest = parser.parse_known_args()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if args.fake_stdout is not None:
        sys.stdout.write(args.fake_stdout)
        sys.stdout.flush()
    if args.fake_stderr is not None:
        sys.stderr.write(args.fake_stderr)
        sys.stderr.flush()
    if args.fake_echo_args:
        print(json.dumps(rest), flush=True)
    if args.fake_echo_env is not None:
        print(os.environ.get(args.fake_echo_env, ""), flush=True)

    start_time = time.time()
    while not _should_stop and time.time() - start_time < args.fake_duration:
        print("tick", flush=True)
        time.sleep(args.fake_interval)

    start_time = time.time()
    while not _should_stop and time.time() - start_time < args.fake_sleep:
        time.sleep(0.05)

    if not _should_stop:
        _exit_code = args.fake_exit_code

    sys.exit(_exit_code)


if __name__ == "__main__":
    main()
