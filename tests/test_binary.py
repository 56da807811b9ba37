"""Executable location tests."""

from __future__ import annotations

from pathlib import Path

import cli_invoke
from cli_invoke.binary import BINARY_NAME, resolve_default_binary_path


class TestResolveDefaultBinaryPath:
    """resolve_default_binary_path tests."""

    def test_posix_location(self, tmp_path: Path):
        path = resolve_default_binary_path(platform="linux", base_dir=tmp_path)
        assert path == str(tmp_path / BINARY_NAME)

    def test_darwin_uses_posix_location(self, tmp_path: Path):
        path = resolve_default_binary_path(platform="darwin", base_dir=tmp_path)
        assert path == str(tmp_path / BINARY_NAME)

    def test_windows_location(self, tmp_path: Path):
        path = resolve_default_binary_path(platform="win32", base_dir=tmp_path)
        assert Path(path).parts[-2:] == ("bin", f"{BINARY_NAME}.exe")

    def test_custom_name(self, tmp_path: Path):
        path = resolve_default_binary_path(platform="linux", base_dir=tmp_path, name="tool")
        assert Path(path).name == "tool"

    def test_default_base_is_next_to_package(self):
        package_parent = Path(cli_invoke.__file__).resolve().parent.parent
        path = resolve_default_binary_path(platform="linux")
        assert Path(path).parent == package_parent

    def test_path_is_absolute(self):
        assert Path(resolve_default_binary_path(base_dir="relative/dir")).is_absolute()
