"""Release directory classification.

Splits the top level of a release directory into one primary artifact
(APK or app bundle), expansion files and deobfuscation archives.
"""

from __future__ import annotations

from pathlib import Path

from gpr.core.result import Err, Ok, Result
from gpr.publish.errors import (
    ClassifyError,
    ConflictingArtifacts,
    EmptyReleaseDirectory,
    NoPrimaryArtifact,
    ReleaseDirectoryMissing,
)
from gpr.publish.model import ArtifactKind, AssetSet

__all__ = ["classify_assets", "list_release_directory"]

APK_SUFFIX = ".apk"
BUNDLE_SUFFIX = ".aab"
EXPANSION_SUFFIX = ".obb"
SYMBOL_SUFFIX = ".zip"


def list_release_directory(directory: Path) -> Result[list[Path], ReleaseDirectoryMissing]:
    """List regular files at the top level of ``directory``, sorted by name."""
    if not directory.is_dir():
        return Err(ReleaseDirectoryMissing(path=directory))
    return Ok(sorted((p for p in directory.iterdir() if p.is_file()), key=lambda p: p.name))


def classify_assets(directory: Path, files: list[Path]) -> Result[AssetSet, ClassifyError]:
    """Classify a flat listing of release files.

    Args:
        directory: The release directory (used in error reports)
        files: Files found in the directory

    Returns:
        Ok with an AssetSet without package info, or Err with a ClassifyError
    """
    if not files:
        return Err(EmptyReleaseDirectory(path=directory))

    apks: list[Path] = []
    bundles: list[Path] = []
    expansion: list[Path] = []
    symbols: list[Path] = []

    for path in files:
        suffix = path.suffix.lower()
        if suffix == APK_SUFFIX:
            apks.append(path)
        elif suffix == BUNDLE_SUFFIX:
            bundles.append(path)
        elif suffix == EXPANSION_SUFFIX:
            expansion.append(path)
        elif suffix == SYMBOL_SUFFIX:
            symbols.append(path)

    if len(apks) + len(bundles) > 1:
        return Err(ConflictingArtifacts(apks=tuple(apks), bundles=tuple(bundles)))

    if apks:
        kind, primary = ArtifactKind.APK, apks[0]
    elif bundles:
        kind, primary = ArtifactKind.BUNDLE, bundles[0]
    else:
        return Err(NoPrimaryArtifact(path=directory, files=tuple(files)))

    return Ok(
        AssetSet(
            kind=kind,
            primary=primary,
            expansion_files=tuple(sorted(expansion, key=lambda p: p.name)),
            symbol_files=tuple(sorted(symbols, key=lambda p: p.name)),
        )
    )
