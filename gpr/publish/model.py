"""Domain model for a Play release.

Everything here is immutable. ``TrackRelease`` converts to and from the
JSON shape used by the androidpublisher v3 ``tracks`` resource.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path

from gpr.core.structured import StrDict, as_obj_list, as_str_dict, get_list, get_str

__all__ = [
    "ArtifactKind",
    "ReleaseStatus",
    "PackageInfo",
    "AssetSet",
    "EditSession",
    "LocalizedText",
    "CountryTargeting",
    "TrackRelease",
]


class ArtifactKind(Enum):
    """Format of the primary release artifact."""

    APK = "apk"
    BUNDLE = "bundle"

    def __str__(self) -> str:
        return self.value

    @property
    def suffix(self) -> str:
        return ".apk" if self is ArtifactKind.APK else ".aab"


class ReleaseStatus(Enum):
    """Release status as spelled by the Play API."""

    DRAFT = "draft"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    HALTED = "halted"

    def __str__(self) -> str:
        return self.value

    @property
    def is_staged(self) -> bool:
        """True for statuses where a user fraction applies."""
        return self in (ReleaseStatus.IN_PROGRESS, ReleaseStatus.HALTED)

    @classmethod
    def parse(cls, value: str) -> ReleaseStatus | None:
        for status in cls:
            if status.value == value:
                return status
        return None


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Identity and version of a package file.

    Attributes:
        package_name: Application id (e.g. "com.example.app")
        version_name: User-visible version (e.g. "1.4.0")
        version_code: Integer version code, kept as the string the tool printed
        file_path: Package file the values were read from
    """

    package_name: str
    version_name: str
    version_code: str
    file_path: Path

    @property
    def release_name(self) -> str:
        """Default release label, e.g. ``"42 (1.4.0)"``."""
        return f"{self.version_code} ({self.version_name})"


@dataclass(frozen=True, slots=True)
class AssetSet:
    """Classified contents of a release directory.

    Attributes:
        kind: Format of the primary artifact
        primary: Path to the single APK or bundle
        expansion_files: ``.obb`` files, sorted by name
        symbol_files: ``.zip`` deobfuscation archives, sorted by name
        package: Extracted package info, attached after extraction
    """

    kind: ArtifactKind
    primary: Path
    expansion_files: tuple[Path, ...] = ()
    symbol_files: tuple[Path, ...] = ()
    package: PackageInfo | None = None

    def with_package(self, package: PackageInfo) -> AssetSet:
        return replace(self, package=package)


@dataclass(frozen=True, slots=True)
class EditSession:
    """Handle of an open edit on the remote side."""

    edit_id: str
    package_name: str


@dataclass(frozen=True, slots=True)
class LocalizedText:
    language: str
    text: str | None

    def to_api(self) -> StrDict:
        return {"language": self.language, "text": self.text}

    @classmethod
    def from_api(cls, data: StrDict) -> LocalizedText:
        return cls(language=get_str(data, "language") or "", text=get_str(data, "text"))


@dataclass(frozen=True, slots=True)
class CountryTargeting:
    countries: tuple[str, ...]
    include_rest_of_world: bool | None = None

    def to_api(self) -> StrDict:
        out: StrDict = {"countries": list(self.countries)}
        if self.include_rest_of_world is not None:
            out["includeRestOfWorld"] = self.include_rest_of_world
        return out

    @classmethod
    def from_api(cls, data: StrDict) -> CountryTargeting:
        countries = get_list(data, "countries") or []
        rest = data.get("includeRestOfWorld")
        return cls(
            countries=tuple(c for c in countries if isinstance(c, str)),
            include_rest_of_world=rest if isinstance(rest, bool) else None,
        )


_KNOWN_RELEASE_KEYS = frozenset(
    {
        "name",
        "status",
        "versionCodes",
        "userFraction",
        "releaseNotes",
        "countryTargeting",
        "inAppUpdatePriority",
    }
)


def _empty_extra() -> StrDict:
    return {}


@dataclass(frozen=True, slots=True)
class TrackRelease:
    """A release on a track.

    ``extra`` carries fields of releases read back from the remote service
    that this model does not interpret; they are sent back unchanged.
    ``raw_status`` holds a remote status outside ``ReleaseStatus``; such a
    release reads as a draft for merging and keeps its original status on
    the wire.
    """

    name: str | None
    status: ReleaseStatus
    version_codes: tuple[str, ...]
    user_fraction: float | None = None
    release_notes: tuple[LocalizedText, ...] = ()
    country_targeting: CountryTargeting | None = None
    in_app_update_priority: int | None = None
    extra: StrDict = field(default_factory=_empty_extra, compare=False)
    raw_status: str | None = field(default=None, compare=False)

    def with_status(self, status: ReleaseStatus) -> TrackRelease:
        return replace(self, status=status, raw_status=None)

    def to_api(self) -> StrDict:
        out: StrDict = dict(self.extra)
        if self.name is not None:
            out["name"] = self.name
        out["status"] = self.raw_status or self.status.value
        out["versionCodes"] = list(self.version_codes)
        if self.user_fraction is not None and (self.status.is_staged or self.raw_status):
            out["userFraction"] = self.user_fraction
        if self.release_notes:
            out["releaseNotes"] = [n.to_api() for n in self.release_notes]
        if self.country_targeting is not None:
            out["countryTargeting"] = self.country_targeting.to_api()
        if self.in_app_update_priority is not None:
            out["inAppUpdatePriority"] = self.in_app_update_priority
        return out

    @classmethod
    def from_api(cls, data: StrDict) -> TrackRelease:
        raw_status = get_str(data, "status")
        parsed = ReleaseStatus.parse(raw_status or "")

        codes = as_obj_list(data.get("versionCodes")) or []
        fraction = data.get("userFraction")
        priority = data.get("inAppUpdatePriority")

        notes: list[LocalizedText] = []
        for item in as_obj_list(data.get("releaseNotes")) or []:
            note = as_str_dict(item)
            if note is not None:
                notes.append(LocalizedText.from_api(note))

        targeting = as_str_dict(data.get("countryTargeting"))

        return cls(
            name=get_str(data, "name"),
            status=parsed or ReleaseStatus.DRAFT,
            version_codes=tuple(str(c) for c in codes if isinstance(c, (str, int))),
            user_fraction=float(fraction) if isinstance(fraction, (int, float)) else None,
            release_notes=tuple(notes),
            country_targeting=CountryTargeting.from_api(targeting) if targeting else None,
            in_app_update_priority=priority if isinstance(priority, int) else None,
            extra={k: v for k, v in data.items() if k not in _KNOWN_RELEASE_KEYS},
            raw_status=raw_status if parsed is None else None,
        )
