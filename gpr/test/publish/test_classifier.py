"""Tests for release directory classification."""

from pathlib import Path

from gpr.core.result import Err, Ok
from gpr.publish.classifier import classify_assets, list_release_directory
from gpr.publish.errors import (
    ConflictingArtifacts,
    EmptyReleaseDirectory,
    NoPrimaryArtifact,
    ReleaseDirectoryMissing,
)
from gpr.publish.model import ArtifactKind


def _touch(directory: Path, *names: str) -> list[Path]:
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(b"x")
        paths.append(path)
    return paths


class TestListReleaseDirectory:
    """Tests for list_release_directory."""

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A path that is not a directory is reported."""
        missing = tmp_path / "nope"
        assert list_release_directory(missing) == Err(ReleaseDirectoryMissing(path=missing))

    def test_lists_top_level_files_sorted(self, tmp_path: Path) -> None:
        """Subdirectories are ignored and files come back sorted by name."""
        _touch(tmp_path, "b.zip", "a.aab")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "c.apk").write_bytes(b"x")

        result = list_release_directory(tmp_path)

        assert isinstance(result, Ok)
        assert [p.name for p in result.value] == ["a.aab", "b.zip"]


class TestClassifyAssets:
    """Tests for classify_assets."""

    def test_empty_directory(self, tmp_path: Path) -> None:
        """No files at all is its own error."""
        assert classify_assets(tmp_path, []) == Err(EmptyReleaseDirectory(path=tmp_path))

    def test_single_bundle(self, tmp_path: Path) -> None:
        """A lone .aab becomes the primary bundle."""
        files = _touch(tmp_path, "app-release.aab")

        result = classify_assets(tmp_path, files)

        assert isinstance(result, Ok)
        assets = result.value
        assert assets.kind is ArtifactKind.BUNDLE
        assert assets.primary == tmp_path / "app-release.aab"
        assert assets.expansion_files == ()
        assert assets.symbol_files == ()
        assert assets.package is None

    def test_apk_with_auxiliary_files(self, tmp_path: Path) -> None:
        """Expansion and symbol files are collected; other files are ignored."""
        files = _touch(
            tmp_path,
            "README.txt",
            "app.APK",
            "main.1.com.example.obb",
            "mapping.zip",
            "patch.1.com.example.obb",
        )

        result = classify_assets(tmp_path, files)

        assert isinstance(result, Ok)
        assets = result.value
        assert assets.kind is ArtifactKind.APK
        assert assets.primary.name == "app.APK"
        assert [p.name for p in assets.expansion_files] == [
            "main.1.com.example.obb",
            "patch.1.com.example.obb",
        ]
        assert [p.name for p in assets.symbol_files] == ["mapping.zip"]

    def test_no_primary(self, tmp_path: Path) -> None:
        """Only auxiliary files is an error listing what was found."""
        files = _touch(tmp_path, "main.obb", "notes.txt")

        result = classify_assets(tmp_path, files)

        assert isinstance(result, Err)
        assert isinstance(result.error, NoPrimaryArtifact)
        assert result.error.files == tuple(files)

    def test_two_apks_conflict(self, tmp_path: Path) -> None:
        """More than one primary candidate is ambiguous."""
        files = _touch(tmp_path, "a.apk", "b.apk")

        result = classify_assets(tmp_path, files)

        assert isinstance(result, Err)
        assert isinstance(result.error, ConflictingArtifacts)
        assert len(result.error.apks) == 2

    def test_apk_and_bundle_conflict(self, tmp_path: Path) -> None:
        """An .apk next to an .aab is ambiguous."""
        files = _touch(tmp_path, "a.aab", "a.apk")

        result = classify_assets(tmp_path, files)

        assert result == Err(
            ConflictingArtifacts(apks=(tmp_path / "a.apk",), bundles=(tmp_path / "a.aab",))
        )
