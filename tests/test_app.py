"""Console entry point tests."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest import mock

import pytest

import cli_invoke
from cli_invoke.app import SPAWN_FAILURE_STATUS, configure_logging, exit_status, main
from cli_invoke.config import Config


class TestExitStatus:
    """exit_status mapping."""

    @pytest.mark.parametrize("returncode,expected", [(0, 0), (1, 1), (255, 255)])
    def test_regular_status(self, returncode: int, expected: int):
        assert exit_status(returncode) == expected

    def test_signal_status(self):
        assert exit_status(-15) == 143
        assert exit_status(-2) == 130


@pytest.mark.usefixtures("clean_default_runner")
class TestMain:
    """main() forwarding."""

    def test_forwards_arguments_live(self, fake_binary: Path, capfd):
        cli_invoke.mock_binary_path(fake_binary)

        status = main(["--fake-echo-args", "info", "--org", "acme"])

        assert status == 0
        assert '["info", "--org", "acme"]' in capfd.readouterr().out

    def test_exit_status_forwarded(self, fake_binary: Path):
        cli_invoke.mock_binary_path(fake_binary)
        assert main(["--fake-exit-code", "3"]) == 3

    def test_missing_binary(self, missing_binary: Path, capfd):
        cli_invoke.mock_binary_path(missing_binary)

        status = main(["--version"])

        assert status == SPAWN_FAILURE_STATUS
        assert str(missing_binary) in capfd.readouterr().err

    def test_reads_sys_argv_by_default(self, fake_binary: Path):
        cli_invoke.mock_binary_path(fake_binary)
        with mock.patch("sys.argv", ["cli-invoke", "--fake-exit-code", "5"]):
            assert main() == 5


class TestConfigureLogging:
    """Logging setup."""

    @pytest.fixture(autouse=True)
    def restore_level(self):
        package_logger = logging.getLogger("cli_invoke")
        root = logging.getLogger()
        package_level, root_level = package_logger.level, root.level
        yield
        package_logger.setLevel(package_level)
        root.setLevel(root_level)

    def test_default_level_info(self):
        configure_logging(Config())
        assert logging.getLogger("cli_invoke").level == logging.INFO

    def test_debug_level_with_log_file(self, tmp_path: Path):
        log_file = tmp_path / "debug.log"
        root = logging.getLogger()
        handlers = list(root.handlers)
        with mock.patch.object(root, "handlers", []):
            configure_logging(Config(log_debug=True, log_file=str(log_file)))
            added = [h for h in root.handlers if h not in handlers]
            try:
                assert logging.getLogger("cli_invoke").level == logging.DEBUG
                assert any(isinstance(h, logging.FileHandler) for h in added)
            finally:
                for handler in added:
                    handler.close()
        assert os.path.exists(log_file)
