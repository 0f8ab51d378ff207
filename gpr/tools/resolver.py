"""System tool resolution.

Finds inspection tools that are expected to be installed on the host
(``aapt`` from the Android SDK build-tools).

Search order:
1. System PATH
2. $ANDROID_HOME / $ANDROID_SDK_ROOT build-tools, greatest version directory
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Mapping
from pathlib import Path

from gpr.core.result import Err, Ok, Result
from gpr.platform.detection import Platform, detect_platform
from gpr.publish.errors import ToolNotFound

__all__ = ["SystemToolResolver", "SDK_ENV_VARS"]

SDK_ENV_VARS = ("ANDROID_HOME", "ANDROID_SDK_ROOT")


class SystemToolResolver:
    """Resolves tools shipped with the Android SDK."""

    def __init__(
        self,
        *,
        platform: Platform | None = None,
        which: Callable[[str], str | None] = shutil.which,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._platform = platform or detect_platform()
        self._which = which
        self._environ = environ if environ is not None else os.environ

    def resolve(self, name: str) -> Result[Path, ToolNotFound]:
        """Resolve ``name`` to an executable path."""
        found = self._which(name)
        if found:
            return Ok(Path(found))

        sdk_path = self._find_in_build_tools(name)
        if sdk_path is not None:
            return Ok(sdk_path)

        return Err(
            ToolNotFound(
                tool=name,
                hint=(
                    f"Put {name} on PATH or set ANDROID_HOME to an SDK "
                    "with build-tools installed"
                ),
            )
        )

    def _find_in_build_tools(self, name: str) -> Path | None:
        exe = self._platform.exe_name(name)
        for var in SDK_ENV_VARS:
            sdk = self._environ.get(var)
            if not sdk:
                continue
            build_tools = Path(sdk) / "build-tools"
            if not build_tools.is_dir():
                continue
            candidates = sorted(
                (d for d in build_tools.iterdir() if (d / exe).is_file()),
                key=lambda d: _version_key(d.name),
                reverse=True,
            )
            if candidates:
                return candidates[0] / exe
        return None


def _version_key(name: str) -> tuple[int, ...]:
    # build-tools dirs look like "34.0.0" or "35.0.0-rc1"
    parts: list[int] = []
    for part in name.split("-")[0].split("."):
        try:
            parts.append(int(part))
        except ValueError:
            parts.append(0)
    return tuple(parts)
