"""Error presentation for the publish pipeline.

Centralized error formatting and exit code mapping, so every command
reports failures the same way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gpr.core.errors import ErrorCode
from gpr.output.console import Style
from gpr.publish.errors import (
    ArtifactInvalid,
    CommitFailed,
    ConfigInvalid,
    ConflictingArtifacts,
    EditOpenFailed,
    EmptyReleaseDirectory,
    ManifestFieldMissing,
    MetadataInvalid,
    MissingRuntime,
    NoPrimaryArtifact,
    PublishError,
    ReleaseDirectoryMissing,
    ToolAcquisitionFailed,
    ToolExecutionFailed,
    ToolNotFound,
    TrackUpdateFailed,
    UnknownTrack,
    UploadFailed,
    ValidateFailed,
)

if TYPE_CHECKING:
    from gpr.output.console import ConsoleProtocol

__all__ = ["print_publish_error", "publish_error_exit_code"]

_OUTPUT_TAIL_LINES = 20


def _tail(output: str) -> str:
    lines = output.strip().splitlines()
    return "\n".join(lines[-_OUTPUT_TAIL_LINES:])


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    """Print a publish error to console with appropriate formatting."""
    match error:
        case ConfigInvalid(field=field, reason=reason):
            console.error(f"--{field} {reason}")
        case MetadataInvalid(reason=reason, source=source):
            where = f" ({source})" if source else ""
            console.error(f"invalid metadata{where}: {reason}")
        case ReleaseDirectoryMissing(path=path):
            console.error(f"release directory not found: {path}")
        case EmptyReleaseDirectory(path=path):
            console.error(f"release directory is empty: {path}")
        case NoPrimaryArtifact(path=path, files=files):
            console.error(f"no .apk or .aab file in {path}")
            if files:
                console.print(f"found: {', '.join(f.name for f in files)}", Style.DIM)
        case ConflictingArtifacts(apks=apks, bundles=bundles):
            names = ", ".join(p.name for p in (*apks, *bundles))
            console.error(f"expected exactly one .apk or .aab, found: {names}")
        case ArtifactInvalid(path=path, reason=reason):
            console.error(f"{path}: {reason}")
        case ToolNotFound(tool=tool, hint=hint):
            console.error(f"{tool}: missing")
            console.print(f"hint: {hint}", Style.DIM)
        case ToolExecutionFailed(tool=tool, returncode=rc, output=output):
            console.error(f"{tool} failed (exit {rc})")
            if output.strip():
                console.print(_tail(output), Style.DIM)
        case ManifestFieldMissing(path=path, fields=fields):
            console.error(f"{path.name}: manifest has no {', '.join(fields)}")
        case MissingRuntime(tool=tool, runtime=runtime):
            console.error(f"{tool} needs {runtime}, which is not on PATH")
            console.print(f"hint: install a Java runtime or put {tool} on PATH", Style.DIM)
        case ToolAcquisitionFailed(tool=tool, repo=repo, reason=reason, url=url):
            console.error(f"cannot provision {tool} from {repo}: {reason}")
            if url:
                console.print(f"url: {url}", Style.DIM)
        case EditOpenFailed(package_name=package_name, reason=reason):
            console.error(f"cannot open edit for {package_name}: {reason}")
        case UploadFailed(path=path, reason=reason):
            console.error(f"upload of {path.name} failed: {reason}")
        case UnknownTrack(track=track, available=available):
            console.error(f"unknown track: {track}")
            if available:
                console.print(f"Available: {', '.join(available)}", Style.DIM)
        case TrackUpdateFailed(track=track, reason=reason):
            console.error(f"track {track} update failed: {reason}")
        case ValidateFailed(edit_id=edit_id, reason=reason):
            console.error(f"edit {edit_id} rejected by validation: {reason}")
        case CommitFailed(edit_id=edit_id, reason=reason):
            console.error(f"commit of edit {edit_id} failed: {reason}")


def publish_error_exit_code(error: PublishError) -> int:
    """Get exit code for a publish error."""
    match error:
        case ConfigInvalid() | MetadataInvalid() | ReleaseDirectoryMissing():
            return int(ErrorCode.USER_ERROR)
        case EmptyReleaseDirectory() | NoPrimaryArtifact() | ConflictingArtifacts():
            return int(ErrorCode.USER_ERROR)
        case ArtifactInvalid():
            return int(ErrorCode.IO_ERROR)
        case ToolNotFound() | ToolExecutionFailed() | ManifestFieldMissing() | MissingRuntime():
            return int(ErrorCode.ENV_ERROR)
        case ToolAcquisitionFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case EditOpenFailed() | UploadFailed() | UnknownTrack() | TrackUpdateFailed():
            return int(ErrorCode.PUBLISH_ERROR)
        case ValidateFailed() | CommitFailed():
            return int(ErrorCode.PUBLISH_ERROR)
