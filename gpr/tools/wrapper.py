"""Shim installation for downloaded tools.

A downloaded tool archive (e.g. ``bundletool-all-1.17.2.jar``) is not
executable on its own. ``ShimInstaller`` writes a small launcher next to
it that runs the archive through its runtime, and hands back an
``ExecutableLocator`` callers can run without knowing about the shim.

Shims:
- Bash scripts use LF line endings and are chmod 755
- Cmd scripts (Windows) use CRLF line endings
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gpr.platform.detection import Platform

__all__ = ["ShimSpec", "ExecutableLocator", "ToolInstaller", "ShimInstaller"]


@dataclass(frozen=True, slots=True)
class ShimSpec:
    """What a shim runs.

    Attributes:
        name: Shim name (e.g. "bundletool")
        runtime: Runtime command resolved from PATH at run time (e.g. "java")
        args: Arguments placed before the caller's arguments
    """

    name: str
    runtime: str
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ExecutableLocator:
    """Opaque handle to a runnable tool.

    Attributes:
        path: File to execute
        version: Tool version, when known
    """

    path: Path
    version: str | None = None

    @property
    def bin_dir(self) -> Path:
        return self.path.parent

    def command(self, *args: str) -> list[str]:
        """Build an argv list for this executable."""
        return [str(self.path), *args]


class ToolInstaller(Protocol):
    """Capability that turns an installed archive into something runnable."""

    def install(self, spec: ShimSpec, bin_dir: Path, platform: Platform) -> ExecutableLocator: ...


class ShimInstaller:
    """Writes bash/cmd shim scripts."""

    def install(self, spec: ShimSpec, bin_dir: Path, platform: Platform) -> ExecutableLocator:
        bin_dir.mkdir(parents=True, exist_ok=True)
        if platform.is_windows:
            path = self._write_cmd(spec, bin_dir / platform.shim_name(spec.name))
        else:
            path = self._write_bash(spec, bin_dir / platform.shim_name(spec.name))
        return ExecutableLocator(path=path)

    def _write_bash(self, spec: ShimSpec, path: Path) -> Path:
        args = "".join(f' "{arg}"' for arg in spec.args)
        lines = [
            "#!/usr/bin/env bash",
            "# Generated by gpr",
            f'exec "{spec.runtime}"{args} "$@"',
        ]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8", newline="\n")
        path.chmod(0o755)
        return path

    def _write_cmd(self, spec: ShimSpec, path: Path) -> Path:
        args = "".join(f' "{arg}"' for arg in spec.args)
        lines = [
            "@echo off",
            "REM Generated by gpr",
            f'"{spec.runtime}"{args} %*',
        ]
        path.write_bytes(("\r\n".join(lines) + "\r\n").encode("utf-8"))
        return path
