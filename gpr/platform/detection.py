"""Host platform and architecture detection.

The tool cache is keyed by architecture and the shim format depends on the
operating system, so both are detected once and cached.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from enum import Enum, auto
from functools import lru_cache

__all__ = ["Platform", "Arch", "detect_platform", "detect_arch"]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_windows(self) -> bool:
        return self == Platform.WINDOWS

    def exe_name(self, name: str) -> str:
        """Executable file name, e.g. ``aapt.exe`` on Windows."""
        return f"{name}.exe" if self.is_windows else name

    def shim_name(self, name: str) -> str:
        """Shim script file name, e.g. ``bundletool.cmd`` on Windows."""
        return f"{name}.cmd" if self.is_windows else name


class Arch(Enum):
    """CPU architecture, spelled the way CI tool caches spell it."""

    X64 = "x64"
    ARM64 = "arm64"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    # NOTE: platform.machine() may query WMI on Windows (slow).
    if detect_platform() == Platform.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        ).lower()
    else:
        machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    return Arch.UNKNOWN
