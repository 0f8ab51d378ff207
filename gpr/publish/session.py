"""Edit session orchestration.

One publish run is one edit transaction on the remote side:

    START -> EDIT_OPEN -> ARTIFACTS_UPLOADED -> TRACK_UPDATED
          -> LISTINGS_UPDATED (only with store-listing metadata)
          -> VALIDATED -> COMMITTED

Failures of the primary artifact, the track, validation or commit end the
run. Expansion files, deobfuscation files, listings and images are
auxiliary: a failure is reported as a warning and the run continues.
An abandoned edit is left to expire on the remote side.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from gpr.core.result import Err, Ok, Result
from gpr.core.structured import as_obj_list, as_str_dict, get_str
from gpr.publish.errors import (
    CommitFailed,
    EditOpenFailed,
    SessionError,
    TrackUpdateFailed,
    UnknownTrack,
    UploadFailed,
    ValidateFailed,
)
from gpr.publish.merge import merge_releases
from gpr.publish.model import ArtifactKind, AssetSet, EditSession, TrackRelease

if TYPE_CHECKING:
    from gpr.core.config import PublishConfig
    from gpr.output.console import ConsoleProtocol
    from gpr.publish.client import PublisherClient
    from gpr.publish.metadata import Metadata

__all__ = ["EditState", "PublishOutcome", "EditSessionOrchestrator", "expansion_file_type"]

NATIVE_CODE = "nativeCode"


class EditState(Enum):
    START = "START"
    EDIT_OPEN = "EDIT_OPEN"
    ARTIFACTS_UPLOADED = "ARTIFACTS_UPLOADED"
    TRACK_UPDATED = "TRACK_UPDATED"
    LISTINGS_UPDATED = "LISTINGS_UPDATED"
    VALIDATED = "VALIDATED"
    COMMITTED = "COMMITTED"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    """Result of a committed edit.

    Attributes:
        edit_id: Id of the committed edit
        package_name: Application id
        version_code: Version code reported by the upload
        track: Track that received the release
        release: The release as sent
        states: States visited, in order
    """

    edit_id: str
    package_name: str
    version_code: str
    track: str
    release: TrackRelease
    states: tuple[EditState, ...]


def expansion_file_type(path: Path) -> str | None:
    """Expansion slot for an ``.obb`` file ("main" or "patch"), from its name."""
    name = path.name.lower()
    if "main" in name:
        return "main"
    if "patch" in name:
        return "patch"
    return None


class EditSessionOrchestrator:
    """Drives one edit from open to commit.

    Args:
        client: Remote API client
        console: Progress and warning output
        config: Validated publish configuration
    """

    def __init__(
        self,
        client: PublisherClient,
        console: ConsoleProtocol,
        config: PublishConfig,
    ) -> None:
        self._client = client
        self._console = console
        self._config = config
        self._states: list[EditState] = []

    @property
    def states(self) -> tuple[EditState, ...]:
        return tuple(self._states)

    def _enter(self, state: EditState, message: str) -> None:
        self._states.append(state)
        self._console.step(str(state), message)

    def run(self, assets: AssetSet) -> Result[PublishOutcome, SessionError]:
        """Publish ``assets``; the package info must already be attached."""
        if assets.package is None:
            raise ValueError("AssetSet has no package info; run extraction first")
        package = assets.package

        self._states = []
        self._enter(EditState.START, f"{package.package_name} {package.release_name}")

        opened = self._client.insert_edit(package.package_name)
        if isinstance(opened, Err):
            return Err(EditOpenFailed(package_name=package.package_name, reason=str(opened.error)))
        session = opened.value
        self._enter(EditState.EDIT_OPEN, f"edit {session.edit_id}")

        uploaded = self._upload_primary(session, assets)
        if isinstance(uploaded, Err):
            return uploaded
        version_code = uploaded.value
        if assets.kind is ArtifactKind.APK:
            self._upload_expansion_files(session, version_code, assets.expansion_files)
        elif assets.expansion_files:
            self._console.warning("expansion files are only supported for APKs; skipped")
        self._upload_symbol_files(session, version_code, assets.symbol_files)
        self._enter(EditState.ARTIFACTS_UPLOADED, f"version code {version_code}")

        release = self._build_release(version_code, package.release_name)
        updated = self._update_track(session, release)
        if isinstance(updated, Err):
            return updated
        self._enter(EditState.TRACK_UPDATED, f"{self._config.track}: {release.status}")

        metadata = self._config.metadata
        if metadata is not None and metadata.has_store_listing:
            self._update_store_listing(session, metadata)
            self._enter(EditState.LISTINGS_UPDATED, "store listing")

        validated = self._client.validate_edit(session)
        if isinstance(validated, Err):
            return Err(ValidateFailed(edit_id=session.edit_id, reason=str(validated.error)))
        self._enter(EditState.VALIDATED, f"edit {session.edit_id}")

        committed = self._client.commit_edit(
            session, changes_not_sent_for_review=self._config.changes_not_sent_for_review
        )
        if isinstance(committed, Err):
            return Err(CommitFailed(edit_id=session.edit_id, reason=str(committed.error)))
        self._enter(EditState.COMMITTED, f"edit {session.edit_id}")

        return Ok(
            PublishOutcome(
                edit_id=session.edit_id,
                package_name=package.package_name,
                version_code=version_code,
                track=self._config.track,
                release=release,
                states=self.states,
            )
        )

    def _upload_primary(
        self, session: EditSession, assets: AssetSet
    ) -> Result[str, UploadFailed]:
        if assets.kind is ArtifactKind.APK:
            result = self._client.upload_apk(session, assets.primary)
        else:
            result = self._client.upload_bundle(session, assets.primary)
        if isinstance(result, Err):
            return Err(UploadFailed(path=assets.primary, reason=str(result.error)))
        if not result.value:
            return Err(UploadFailed(path=assets.primary, reason="response has no version code"))
        return Ok(result.value)

    def _upload_expansion_files(
        self, session: EditSession, version_code: str, files: tuple[Path, ...]
    ) -> None:
        for path in files:
            file_type = expansion_file_type(path)
            if file_type is None:
                self._console.warning(
                    f"{path.name}: expansion file name must contain 'main' or 'patch'; skipped"
                )
                continue
            result = self._client.upload_expansion_file(session, version_code, file_type, path)
            if isinstance(result, Err):
                self._console.warning(f"{path.name}: expansion file upload failed: {result.error}")
            else:
                self._console.info(f"{path.name}: uploaded as {file_type} expansion file")

    def _upload_symbol_files(
        self, session: EditSession, version_code: str, files: tuple[Path, ...]
    ) -> None:
        for path in files:
            result = self._client.upload_deobfuscation_file(
                session, version_code, NATIVE_CODE, path
            )
            if isinstance(result, Err):
                self._console.warning(f"{path.name}: symbol upload failed: {result.error}")
            else:
                self._console.info(f"{path.name}: uploaded as {NATIVE_CODE} symbols")

    def _build_release(self, version_code: str, default_name: str) -> TrackRelease:
        config = self._config
        fraction = config.user_fraction
        if fraction is not None and not config.status.is_staged:
            self._console.warning(
                f"user fraction {fraction} ignored for status {config.status}"
            )
            fraction = None

        metadata = config.metadata
        return TrackRelease(
            name=config.release_name or default_name,
            status=config.status,
            version_codes=(version_code,),
            user_fraction=fraction,
            release_notes=metadata.release_notes if metadata else (),
            country_targeting=metadata.country_targeting if metadata else None,
            in_app_update_priority=config.update_priority,
        )

    def _update_track(
        self, session: EditSession, release: TrackRelease
    ) -> Result[None, UnknownTrack | TrackUpdateFailed]:
        track = self._config.track
        listed = self._client.list_tracks(session)
        if isinstance(listed, Err):
            return Err(TrackUpdateFailed(track=track, reason=str(listed.error)))

        existing: list[TrackRelease] | None = None
        names: list[str] = []
        for resource in listed.value:
            name = get_str(resource, "track")
            if name is None:
                continue
            names.append(name)
            if name == track:
                existing = []
                for obj in as_obj_list(resource.get("releases")) or []:
                    data = as_str_dict(obj)
                    if data is not None:
                        existing.append(TrackRelease.from_api(data))

        if existing is None:
            return Err(UnknownTrack(track=track, available=tuple(names)))

        merged = merge_releases(existing, release, self._config.merge_policy)
        result = self._client.update_track(session, track, [r.to_api() for r in merged])
        if isinstance(result, Err):
            return Err(TrackUpdateFailed(track=track, reason=str(result.error)))
        return Ok(None)

    def _update_store_listing(self, session: EditSession, metadata: Metadata) -> None:
        for listing in metadata.listings:
            result = self._client.update_listing(session, listing.language, listing.to_api())
            if isinstance(result, Err):
                self._console.warning(f"listing {listing.language} failed: {result.error}")
            else:
                self._console.info(f"listing {listing.language} updated")

        for image in metadata.all_images:
            if not image.path.is_file():
                self._console.warning(f"image {image.path} not found; skipped")
                continue
            result = self._client.upload_image(
                session, image.language, image.type.value, image.path
            )
            if isinstance(result, Err):
                self._console.warning(f"image {image.path.name} failed: {result.error}")
            else:
                self._console.info(f"image {image.path.name} uploaded as {image.type}")
