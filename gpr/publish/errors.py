"""Error types for the publishing pipeline.

One frozen dataclass per failure class. Presentation and exit codes live
in ``gpr.output.errors``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


# Configuration


@dataclass(frozen=True, slots=True)
class ConfigInvalid:
    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class MetadataInvalid:
    reason: str
    source: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseDirectoryMissing:
    path: Path


# Classification


@dataclass(frozen=True, slots=True)
class EmptyReleaseDirectory:
    path: Path


@dataclass(frozen=True, slots=True)
class NoPrimaryArtifact:
    path: Path
    files: tuple[Path, ...]


@dataclass(frozen=True, slots=True)
class ConflictingArtifacts:
    apks: tuple[Path, ...]
    bundles: tuple[Path, ...]


# Extraction


@dataclass(frozen=True, slots=True)
class ArtifactInvalid:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ToolNotFound:
    tool: str
    hint: str


@dataclass(frozen=True, slots=True)
class ToolExecutionFailed:
    tool: str
    returncode: int
    output: str


@dataclass(frozen=True, slots=True)
class ManifestFieldMissing:
    path: Path
    fields: tuple[str, ...]


# Provisioning


@dataclass(frozen=True, slots=True)
class MissingRuntime:
    tool: str
    runtime: str


@dataclass(frozen=True, slots=True)
class ToolAcquisitionFailed:
    tool: str
    repo: str
    reason: str
    url: str | None = None


# Primary transaction


@dataclass(frozen=True, slots=True)
class EditOpenFailed:
    package_name: str
    reason: str


@dataclass(frozen=True, slots=True)
class UploadFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class UnknownTrack:
    track: str
    available: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TrackUpdateFailed:
    track: str
    reason: str


@dataclass(frozen=True, slots=True)
class ValidateFailed:
    edit_id: str
    reason: str


@dataclass(frozen=True, slots=True)
class CommitFailed:
    edit_id: str
    reason: str


ConfigError = ConfigInvalid | MetadataInvalid | ReleaseDirectoryMissing

ClassifyError = EmptyReleaseDirectory | NoPrimaryArtifact | ConflictingArtifacts

ProvisionError = MissingRuntime | ToolAcquisitionFailed

ExtractError = ArtifactInvalid | ToolNotFound | ToolExecutionFailed | ManifestFieldMissing

SessionError = (
    EditOpenFailed | UploadFailed | UnknownTrack | TrackUpdateFailed | ValidateFailed | CommitFailed
)

PublishError = ConfigError | ClassifyError | ProvisionError | ExtractError | SessionError
