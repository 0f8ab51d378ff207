"""Platform abstraction: OS/arch detection, subprocesses, paths."""

from .detection import Arch, Platform, detect_arch, detect_platform
from .paths import prepend_to_path, tool_cache_root
from .process import ProcessError, Runner, run

__all__ = [
    "Arch",
    "Platform",
    "detect_arch",
    "detect_platform",
    "prepend_to_path",
    "tool_cache_root",
    "ProcessError",
    "Runner",
    "run",
]
