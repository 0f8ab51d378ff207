"""Tests for the persistent tool cache."""

import json
import shutil
from pathlib import Path

import pytest

from gpr.platform.detection import Arch
from gpr.tools.cache import ToolCache


@pytest.fixture
def cache(tmp_path: Path) -> ToolCache:
    return ToolCache(tmp_path / "tools", Arch.X64)


def _install(cache: ToolCache, tool: str, version: str, *, complete: bool = True) -> Path:
    directory = cache.dir_for(tool, version)
    directory.mkdir(parents=True)
    (directory / tool).write_text("#!/bin/sh\n", encoding="utf-8")
    if complete:
        cache.mark_complete(tool, version)
    return directory


class TestToolCache:
    """Tests for ToolCache."""

    def test_layout(self, cache: ToolCache, tmp_path: Path) -> None:
        """Install dirs are keyed by tool, version and arch."""
        expected = tmp_path / "tools" / "bundletool" / "1.17.2" / "x64"
        assert cache.dir_for("bundletool", "1.17.2") == expected

    def test_empty(self, cache: ToolCache) -> None:
        """Nothing cached yet."""
        assert cache.versions("bundletool") == []
        assert cache.find("bundletool") is None

    def test_marker_written_last(self, cache: ToolCache, tmp_path: Path) -> None:
        """mark_complete writes <arch>.complete next to the install dir."""
        _install(cache, "bundletool", "1.17.2")
        marker = tmp_path / "tools" / "bundletool" / "1.17.2" / "x64.complete"
        assert marker.is_file()

        state = json.loads(marker.read_text(encoding="utf-8"))
        assert (state["tool"], state["version"]) == ("bundletool", "1.17.2")

    def test_incomplete_install_is_invisible(self, cache: ToolCache) -> None:
        """A directory without its marker does not count."""
        _install(cache, "bundletool", "1.18.0", complete=False)
        assert cache.find("bundletool") is None

    def test_marker_for_other_arch_does_not_count(self, tmp_path: Path) -> None:
        """Each architecture has its own marker."""
        arm = ToolCache(tmp_path / "tools", Arch.ARM64)
        _install(arm, "bundletool", "1.17.2")

        x64 = ToolCache(tmp_path / "tools", Arch.X64)

        assert x64.find("bundletool") is None
        assert arm.find("bundletool") is not None

    def test_find_newest_lexicographic(self, cache: ToolCache) -> None:
        """The lexicographically greatest complete version wins."""
        _install(cache, "bundletool", "1.15.6")
        newest = _install(cache, "bundletool", "1.17.2")
        _install(cache, "bundletool", "1.9.0", complete=False)

        assert cache.find("bundletool") == ("1.17.2", newest)

    def test_remove_drops_marker_and_files(self, cache: ToolCache, tmp_path: Path) -> None:
        """A removed version is gone from disk and from lookups."""
        directory = _install(cache, "bundletool", "1.17.2")

        cache.remove("bundletool", "1.17.2")

        assert not directory.exists()
        assert not (tmp_path / "tools" / "bundletool" / "1.17.2" / "x64.complete").exists()
        assert cache.find("bundletool") is None

    def test_remove_unlinks_marker_before_files(
        self, cache: ToolCache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """If deleting the files fails, the version is already no longer complete."""
        _install(cache, "bundletool", "1.17.2")

        def broken_rmtree(path: Path) -> None:
            raise OSError("busy")

        monkeypatch.setattr(shutil, "rmtree", broken_rmtree)

        with pytest.raises(OSError):
            cache.remove("bundletool", "1.17.2")

        assert cache.find("bundletool") is None

    def test_remove_missing_version(self, cache: ToolCache) -> None:
        cache.remove("bundletool", "0.0.1")
        assert cache.versions("bundletool") == []
