"""cli-invoke - thin async shim around a bundled command-line executable.

Serializes options into argv according to a declarative schema and runs
the executable either capturing stdout or attached to the terminal.

Environment variables:
    CLI_INVOKE_LOG_DEBUG: debug logging to a temp file (default false)
    CLI_INVOKE_TERM_TIMEOUT: SIGTERM grace period in seconds (default 2.0)
    CLI_INVOKE_KILL_TIMEOUT: SIGKILL grace period in seconds (default 1.0)
"""

__version__ = "0.1.0"

from .errors import (
    CliInvokeError,
    InvalidOptionValue,
    ProcessCancelledError,
    ProcessExecutionError,
    SpawnError,
)
from .options import (
    OptionRule,
    OptionsSchema,
    OptionType,
    normalize_schema,
    prepare_command,
    serialize_options,
)
from .runner import (
    CliRunner,
    execute,
    get_default_runner,
    get_path,
    mock_binary_path,
    reset_default_runner,
)

__all__ = [
    "__version__",
    "CliInvokeError",
    "CliRunner",
    "InvalidOptionValue",
    "OptionRule",
    "OptionType",
    "OptionsSchema",
    "ProcessCancelledError",
    "ProcessExecutionError",
    "SpawnError",
    "execute",
    "get_default_runner",
    "get_path",
    "mock_binary_path",
    "normalize_schema",
    "prepare_command",
    "reset_default_runner",
    "serialize_options",
]
