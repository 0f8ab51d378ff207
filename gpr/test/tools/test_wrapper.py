"""Tests for shim installation."""

import os
import sys
from pathlib import Path

import pytest

from gpr.platform.detection import Platform
from gpr.tools.wrapper import ExecutableLocator, ShimInstaller, ShimSpec

SPEC = ShimSpec(name="bundletool", runtime="java", args=("-jar", "/cache/bundletool.jar"))


class TestExecutableLocator:
    """Tests for ExecutableLocator."""

    def test_command(self) -> None:
        """command() prefixes the executable path."""
        locator = ExecutableLocator(path=Path("/cache/bin/bundletool"), version="1.17.2")
        assert locator.command("version") == ["/cache/bin/bundletool", "version"]
        assert locator.bin_dir == Path("/cache/bin")


class TestShimInstaller:
    """Tests for ShimInstaller."""

    def test_bash_shim(self, tmp_path: Path) -> None:
        """Unix shims exec the runtime with LF line endings."""
        locator = ShimInstaller().install(SPEC, tmp_path / "bin", Platform.LINUX)

        assert locator.path == tmp_path / "bin" / "bundletool"
        content = locator.path.read_bytes()
        assert b"\r\n" not in content
        assert content.startswith(b"#!/usr/bin/env bash\n")
        assert b'exec "java" "-jar" "/cache/bundletool.jar" "$@"\n' in content

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_bash_shim_is_executable(self, tmp_path: Path) -> None:
        """Unix shims are made executable."""
        locator = ShimInstaller().install(SPEC, tmp_path, Platform.MACOS)
        assert os.access(locator.path, os.X_OK)

    def test_cmd_shim(self, tmp_path: Path) -> None:
        """Windows shims are .cmd files with CRLF line endings."""
        locator = ShimInstaller().install(SPEC, tmp_path, Platform.WINDOWS)

        assert locator.path.name == "bundletool.cmd"
        content = locator.path.read_bytes()
        assert content.startswith(b"@echo off\r\n")
        assert b'"java" "-jar" "/cache/bundletool.jar" %*\r\n' in content
