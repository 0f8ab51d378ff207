"""Platform-aware path utilities.

Locates the persistent tool cache and extends the process ``PATH`` with
provisioned tools.
"""

from __future__ import annotations

import os
from pathlib import Path

from .detection import Platform, detect_platform

__all__ = ["tool_cache_root", "prepend_to_path", "TOOL_CACHE_ENV", "RUNNER_TOOL_CACHE_ENV"]

APP_NAME = "gpr"

TOOL_CACHE_ENV = "GPR_TOOL_CACHE"
# Set by GitHub-hosted and most self-hosted CI runners.
RUNNER_TOOL_CACHE_ENV = "RUNNER_TOOL_CACHE"


def tool_cache_root(platform: Platform | None = None) -> Path:
    """Get the root of the tool cache.

    Order: $GPR_TOOL_CACHE, $RUNNER_TOOL_CACHE, then the per-user cache
    directory (~/.cache/gpr/tools, or %LOCALAPPDATA%/gpr/tools on Windows).
    """
    for var in (TOOL_CACHE_ENV, RUNNER_TOOL_CACHE_ENV):
        value = os.environ.get(var)
        if value:
            return Path(value).expanduser()

    if (platform or detect_platform()).is_windows:
        local = os.environ.get("LOCALAPPDATA")
        base = Path(local) if local else Path.home() / "AppData" / "Local"
        return base / APP_NAME / "tools"

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    base = Path(xdg_cache) if xdg_cache else Path.home() / ".cache"
    return base / APP_NAME / "tools"


def prepend_to_path(directory: Path) -> None:
    """Put ``directory`` first on this process's PATH (no-op if already first)."""
    current = os.environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    if entries and entries[0] == str(directory):
        return
    os.environ["PATH"] = os.pathsep.join([str(directory), *entries])
