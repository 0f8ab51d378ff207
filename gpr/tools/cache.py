"""Persistent tool cache.

Layout, shared by every invocation on a host:

    <root>/<tool>/<version>/<arch>/           installed files + shim
    <root>/<tool>/<version>/<arch>.complete   written last, JSON state

A version only counts as installed once its ``.complete`` marker exists,
so an interrupted install is invisible to later runs. There is no lock:
two runs provisioning the same version concurrently may both download it.
"""

from __future__ import annotations

import json
import shutil
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from gpr.platform.detection import Arch

__all__ = ["ToolCache", "CacheEntry"]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """State recorded in a completion marker.

    Attributes:
        tool: Tool name
        version: Installed version string
        installed_at: ISO timestamp of installation
    """

    tool: str
    version: str
    installed_at: str

    @classmethod
    def now(cls, tool: str, version: str) -> CacheEntry:
        return cls(tool=tool, version=version, installed_at=datetime.now().isoformat())


class ToolCache:
    """Tool cache keyed by (tool, version, arch)."""

    def __init__(self, root: Path, arch: Arch) -> None:
        self._root = root
        self._arch = arch

    @property
    def root(self) -> Path:
        return self._root

    def dir_for(self, tool: str, version: str) -> Path:
        """Install directory for a tool version on this architecture."""
        return self._root / tool / version / str(self._arch)

    def _marker(self, tool: str, version: str) -> Path:
        return self._root / tool / version / f"{self._arch}.complete"

    def versions(self, tool: str) -> list[str]:
        """Completely installed versions of ``tool``, in directory order."""
        tool_dir = self._root / tool
        if not tool_dir.is_dir():
            return []
        return [
            d.name
            for d in tool_dir.iterdir()
            if d.is_dir()
            and self._marker(tool, d.name).is_file()
            and self.dir_for(tool, d.name).is_dir()
        ]

    def find(self, tool: str) -> tuple[str, Path] | None:
        """Return (version, dir) of the newest cached version.

        "Newest" is the lexicographically greatest version string, which
        misorders e.g. "1.9.0" and "1.10.0".
        """
        versions = self.versions(tool)
        if not versions:
            return None
        version = max(versions)
        return version, self.dir_for(tool, version)

    def mark_complete(self, tool: str, version: str) -> CacheEntry:
        """Record that ``tool`` ``version`` is fully installed."""
        entry = CacheEntry.now(tool, version)
        marker = self._marker(tool, version)
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.write_text(json.dumps(asdict(entry), indent=2), encoding="utf-8")
        return entry

    def remove(self, tool: str, version: str) -> None:
        """Drop a cached version; the marker goes first so a partial delete reads as absent."""
        self._marker(tool, version).unlink(missing_ok=True)
        install_dir = self.dir_for(tool, version)
        if install_dir.exists():
            shutil.rmtree(install_dir)
