"""Pytest configuration and fixtures."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Add src to the Python path (development checkouts)
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

FIXTURES_DIR = PROJECT_ROOT / "tests" / "fixtures"
FAKE_CLI_PATH = FIXTURES_DIR / "fake_cli.py"

IS_WINDOWS = sys.platform == "win32"


@pytest.fixture
def fake_binary(tmp_path: Path) -> Path:
    """Executable wrapper that runs fake_cli.py with the current interpreter."""
    if IS_WINDOWS:
        pytest.skip("fake binary wrapper is a POSIX shell script")

    wrapper = tmp_path / "fake-cli"
    wrapper.write_text(
        "#!/bin/sh\n"
        f'exec "{sys.executable}" "{FAKE_CLI_PATH}" "$@"\n'
    )
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return wrapper


@pytest.fixture
def missing_binary(tmp_path: Path) -> Path:
    """Path where no executable exists."""
    return tmp_path / "does-not-exist" / "fake-cli"


@pytest.fixture
def clean_default_runner():
    """Restore the default runner after a test that mocks its binary path."""
    from cli_invoke import reset_default_runner

    reset_default_runner()
    yield
    reset_default_runner()
