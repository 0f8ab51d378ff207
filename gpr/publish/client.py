"""Google Play Developer API client.

``PublisherClient`` is the seam between the edit session and the remote
service. ``GooglePlayClient`` implements it on top of
google-api-python-client (androidpublisher v3); ``MockPublisherClient``
records calls for tests. One client object is built per run and passed to
whoever needs it.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, TypeVar, runtime_checkable

from gpr.core.result import Err, Ok, Result
from gpr.core.structured import StrDict, as_obj_list, as_str_dict
from gpr.publish.model import EditSession

__all__ = [
    "PlayApiError",
    "PublisherClient",
    "GooglePlayClient",
    "MockPublisherClient",
    "ANDROID_PUBLISHER_SCOPE",
]

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"
_BINARY_MIME = "application/octet-stream"

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PlayApiError:
    """A failed Play API call.

    Attributes:
        operation: API operation (e.g. "edits.commit")
        status: HTTP status code (0 when no response was received)
        message: Error message from the service or the client library
    """

    operation: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"{self.operation}: HTTP {self.status}: {self.message}"
        return f"{self.operation}: {self.message}"


@runtime_checkable
class PublisherClient(Protocol):
    """Operations of the androidpublisher edits API used by a publish run."""

    def insert_edit(self, package_name: str) -> Result[EditSession, PlayApiError]: ...

    def upload_apk(self, session: EditSession, path: Path) -> Result[str | None, PlayApiError]:
        """Upload an APK; Ok carries the version code the service reported."""
        ...

    def upload_bundle(self, session: EditSession, path: Path) -> Result[str | None, PlayApiError]:
        """Upload an app bundle; Ok carries the reported version code."""
        ...

    def upload_expansion_file(
        self, session: EditSession, version_code: str, file_type: str, path: Path
    ) -> Result[None, PlayApiError]: ...

    def upload_deobfuscation_file(
        self, session: EditSession, version_code: str, file_type: str, path: Path
    ) -> Result[None, PlayApiError]: ...

    def list_tracks(self, session: EditSession) -> Result[list[StrDict], PlayApiError]:
        """Return track resources: ``{"track": name, "releases": [...]}``."""
        ...

    def update_track(
        self, session: EditSession, track: str, releases: list[StrDict]
    ) -> Result[None, PlayApiError]: ...

    def update_listing(
        self, session: EditSession, language: str, listing: StrDict
    ) -> Result[None, PlayApiError]: ...

    def upload_image(
        self, session: EditSession, language: str, image_type: str, path: Path
    ) -> Result[None, PlayApiError]: ...

    def validate_edit(self, session: EditSession) -> Result[None, PlayApiError]: ...

    def commit_edit(
        self, session: EditSession, *, changes_not_sent_for_review: bool = False
    ) -> Result[None, PlayApiError]: ...


def _version_code(response: object) -> str | None:
    data = as_str_dict(response)
    if data is None:
        return None
    code = data.get("versionCode")
    if isinstance(code, bool) or not isinstance(code, (int, str)) or code in ("", 0):
        return None
    return str(code)


class GooglePlayClient:
    """PublisherClient backed by google-api-python-client.

    Library exceptions never escape: each call returns Ok or
    Err(PlayApiError).
    """

    def __init__(self, service: Any) -> None:
        self._service = service

    @classmethod
    def from_service_account(cls, key_file: Path) -> Result[GooglePlayClient, PlayApiError]:
        """Build a client authenticated with a service-account JSON key."""
        from google.auth.exceptions import GoogleAuthError
        from google.oauth2 import service_account
        from googleapiclient.discovery import build

        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(key_file), scopes=[ANDROID_PUBLISHER_SCOPE]
            )
            service = build(
                "androidpublisher", "v3", credentials=credentials, cache_discovery=False
            )
        except (GoogleAuthError, ValueError, OSError) as e:
            return Err(PlayApiError(operation="auth", status=0, message=str(e)))
        return Ok(cls(service))

    def _call(self, operation: str, request: Callable[[], T]) -> Result[T, PlayApiError]:
        from google.auth.exceptions import GoogleAuthError
        from googleapiclient.errors import HttpError

        try:
            return Ok(request())
        except HttpError as e:
            reason = getattr(e, "reason", None) or str(e)
            return Err(PlayApiError(operation=operation, status=e.resp.status, message=reason))
        except (GoogleAuthError, OSError) as e:
            return Err(PlayApiError(operation=operation, status=0, message=str(e)))

    def _media(self, path: Path, mimetype: str = _BINARY_MIME) -> Any:
        from googleapiclient.http import MediaFileUpload

        return MediaFileUpload(str(path), mimetype=mimetype, resumable=True)

    def insert_edit(self, package_name: str) -> Result[EditSession, PlayApiError]:
        result = self._call(
            "edits.insert",
            lambda: self._service.edits().insert(packageName=package_name, body={}).execute(),
        )
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value) or {}
        edit_id = data.get("id")
        if not isinstance(edit_id, str) or not edit_id:
            return Err(PlayApiError(operation="edits.insert", status=0, message="response has no edit id"))
        return Ok(EditSession(edit_id=edit_id, package_name=package_name))

    def upload_apk(self, session: EditSession, path: Path) -> Result[str | None, PlayApiError]:
        return self._call(
            "edits.apks.upload",
            lambda: self._service.edits()
            .apks()
            .upload(
                packageName=session.package_name,
                editId=session.edit_id,
                media_body=self._media(path),
            )
            .execute(),
        ).map(_version_code)

    def upload_bundle(self, session: EditSession, path: Path) -> Result[str | None, PlayApiError]:
        return self._call(
            "edits.bundles.upload",
            lambda: self._service.edits()
            .bundles()
            .upload(
                packageName=session.package_name,
                editId=session.edit_id,
                media_body=self._media(path),
            )
            .execute(),
        ).map(_version_code)

    def upload_expansion_file(
        self, session: EditSession, version_code: str, file_type: str, path: Path
    ) -> Result[None, PlayApiError]:
        return self._call(
            "edits.expansionfiles.upload",
            lambda: self._service.edits()
            .expansionfiles()
            .upload(
                packageName=session.package_name,
                editId=session.edit_id,
                apkVersionCode=int(version_code),
                expansionFileType=file_type,
                media_body=self._media(path),
            )
            .execute(),
        ).map(lambda _: None)

    def upload_deobfuscation_file(
        self, session: EditSession, version_code: str, file_type: str, path: Path
    ) -> Result[None, PlayApiError]:
        return self._call(
            "edits.deobfuscationfiles.upload",
            lambda: self._service.edits()
            .deobfuscationfiles()
            .upload(
                packageName=session.package_name,
                editId=session.edit_id,
                apkVersionCode=int(version_code),
                deobfuscationFileType=file_type,
                media_body=self._media(path),
            )
            .execute(),
        ).map(lambda _: None)

    def list_tracks(self, session: EditSession) -> Result[list[StrDict], PlayApiError]:
        result = self._call(
            "edits.tracks.list",
            lambda: self._service.edits()
            .tracks()
            .list(packageName=session.package_name, editId=session.edit_id)
            .execute(),
        )
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value) or {}
        tracks: list[StrDict] = []
        for obj in as_obj_list(data.get("tracks")) or []:
            track = as_str_dict(obj)
            if track is not None:
                tracks.append(track)
        return Ok(tracks)

    def update_track(
        self, session: EditSession, track: str, releases: list[StrDict]
    ) -> Result[None, PlayApiError]:
        return self._call(
            "edits.tracks.update",
            lambda: self._service.edits()
            .tracks()
            .update(
                packageName=session.package_name,
                editId=session.edit_id,
                track=track,
                body={"track": track, "releases": releases},
            )
            .execute(),
        ).map(lambda _: None)

    def update_listing(
        self, session: EditSession, language: str, listing: StrDict
    ) -> Result[None, PlayApiError]:
        return self._call(
            "edits.listings.update",
            lambda: self._service.edits()
            .listings()
            .update(
                packageName=session.package_name,
                editId=session.edit_id,
                language=language,
                body=listing,
            )
            .execute(),
        ).map(lambda _: None)

    def upload_image(
        self, session: EditSession, language: str, image_type: str, path: Path
    ) -> Result[None, PlayApiError]:
        mimetype = mimetypes.guess_type(path.name)[0] or "image/png"
        return self._call(
            "edits.images.upload",
            lambda: self._service.edits()
            .images()
            .upload(
                packageName=session.package_name,
                editId=session.edit_id,
                language=language,
                imageType=image_type,
                media_body=self._media(path, mimetype),
            )
            .execute(),
        ).map(lambda _: None)

    def validate_edit(self, session: EditSession) -> Result[None, PlayApiError]:
        return self._call(
            "edits.validate",
            lambda: self._service.edits()
            .validate(packageName=session.package_name, editId=session.edit_id)
            .execute(),
        ).map(lambda _: None)

    def commit_edit(
        self, session: EditSession, *, changes_not_sent_for_review: bool = False
    ) -> Result[None, PlayApiError]:
        kwargs: dict[str, Any] = {}
        if changes_not_sent_for_review:
            kwargs["changesNotSentForReview"] = True
        return self._call(
            "edits.commit",
            lambda: self._service.edits()
            .commit(packageName=session.package_name, editId=session.edit_id, **kwargs)
            .execute(),
        ).map(lambda _: None)


def _empty_calls() -> list[tuple[str, ...]]:
    return []


def _empty_failures() -> dict[tuple[str, str | None], str]:
    return {}


def _default_tracks() -> list[StrDict]:
    return [
        {"track": "internal", "releases": []},
        {"track": "alpha", "releases": []},
        {"track": "beta", "releases": []},
        {"track": "production", "releases": []},
    ]


@dataclass
class MockPublisherClient:
    """PublisherClient that records calls instead of talking to Play.

    Usage:
        client = MockPublisherClient(version_code="42")
        client.fail("update_listing", key="de-DE")
        ...
        assert ("commit_edit", "edit-1") in client.calls
    """

    version_code: str | None = "1"
    edit_id: str = "edit-1"
    tracks: list[StrDict] = field(default_factory=_default_tracks)
    calls: list[tuple[str, ...]] = field(default_factory=_empty_calls)
    updated_tracks: dict[str, list[StrDict]] = field(default_factory=dict)
    listings: dict[str, StrDict] = field(default_factory=dict)
    commit_options: dict[str, bool] = field(default_factory=dict)
    _failures: dict[tuple[str, str | None], str] = field(default_factory=_empty_failures)

    def fail(self, operation: str, key: str | None = None, message: str = "mock failure") -> None:
        """Make ``operation`` fail; ``key`` narrows it to one language or file name."""
        self._failures[(operation, key)] = message

    def _check(self, operation: str, key: str | None = None) -> Result[None, PlayApiError]:
        message = self._failures.get((operation, key)) or self._failures.get((operation, None))
        if message is not None:
            return Err(PlayApiError(operation=operation, status=500, message=message))
        return Ok(None)

    def insert_edit(self, package_name: str) -> Result[EditSession, PlayApiError]:
        self.calls.append(("insert_edit", package_name))
        check = self._check("insert_edit")
        if isinstance(check, Err):
            return check
        return Ok(EditSession(edit_id=self.edit_id, package_name=package_name))

    def upload_apk(self, session: EditSession, path: Path) -> Result[str | None, PlayApiError]:
        self.calls.append(("upload_apk", path.name))
        return self._check("upload_apk").map(lambda _: self.version_code)

    def upload_bundle(self, session: EditSession, path: Path) -> Result[str | None, PlayApiError]:
        self.calls.append(("upload_bundle", path.name))
        return self._check("upload_bundle").map(lambda _: self.version_code)

    def upload_expansion_file(
        self, session: EditSession, version_code: str, file_type: str, path: Path
    ) -> Result[None, PlayApiError]:
        self.calls.append(("upload_expansion_file", file_type, path.name))
        return self._check("upload_expansion_file", path.name)

    def upload_deobfuscation_file(
        self, session: EditSession, version_code: str, file_type: str, path: Path
    ) -> Result[None, PlayApiError]:
        self.calls.append(("upload_deobfuscation_file", file_type, path.name))
        return self._check("upload_deobfuscation_file", path.name)

    def list_tracks(self, session: EditSession) -> Result[list[StrDict], PlayApiError]:
        self.calls.append(("list_tracks",))
        return self._check("list_tracks").map(lambda _: list(self.tracks))

    def update_track(
        self, session: EditSession, track: str, releases: list[StrDict]
    ) -> Result[None, PlayApiError]:
        self.calls.append(("update_track", track))
        check = self._check("update_track")
        if isinstance(check, Err):
            return check
        self.updated_tracks[track] = releases
        return Ok(None)

    def update_listing(
        self, session: EditSession, language: str, listing: StrDict
    ) -> Result[None, PlayApiError]:
        self.calls.append(("update_listing", language))
        check = self._check("update_listing", language)
        if isinstance(check, Err):
            return check
        self.listings[language] = listing
        return Ok(None)

    def upload_image(
        self, session: EditSession, language: str, image_type: str, path: Path
    ) -> Result[None, PlayApiError]:
        self.calls.append(("upload_image", language, image_type, path.name))
        return self._check("upload_image", path.name)

    def validate_edit(self, session: EditSession) -> Result[None, PlayApiError]:
        self.calls.append(("validate_edit", session.edit_id))
        return self._check("validate_edit")

    def commit_edit(
        self, session: EditSession, *, changes_not_sent_for_review: bool = False
    ) -> Result[None, PlayApiError]:
        self.calls.append(("commit_edit", session.edit_id))
        check = self._check("commit_edit")
        if isinstance(check, Err):
            return check
        self.commit_options["changes_not_sent_for_review"] = changes_not_sent_for_review
        return Ok(None)
