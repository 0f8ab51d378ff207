"""Tests for the release domain model."""

from pathlib import Path

import pytest

from gpr.publish.model import (
    ArtifactKind,
    AssetSet,
    CountryTargeting,
    LocalizedText,
    PackageInfo,
    ReleaseStatus,
    TrackRelease,
)


class TestReleaseStatus:
    """Tests for ReleaseStatus."""

    def test_parse(self) -> None:
        """API spellings parse; anything else does not."""
        assert ReleaseStatus.parse("inProgress") is ReleaseStatus.IN_PROGRESS
        assert ReleaseStatus.parse("in_progress") is None

    @pytest.mark.parametrize(
        ("status", "staged"),
        [
            (ReleaseStatus.DRAFT, False),
            (ReleaseStatus.IN_PROGRESS, True),
            (ReleaseStatus.HALTED, True),
            (ReleaseStatus.COMPLETED, False),
        ],
    )
    def test_is_staged(self, status: ReleaseStatus, staged: bool) -> None:
        """Only rollout statuses take a user fraction."""
        assert status.is_staged is staged


class TestPackageInfo:
    """Tests for PackageInfo and AssetSet."""

    def test_release_name(self) -> None:
        """The default release name combines version code and name."""
        info = PackageInfo("com.example.app", "1.4.0", "42", Path("app.aab"))
        assert info.release_name == "42 (1.4.0)"

    def test_with_package(self) -> None:
        """Attaching package info returns a new AssetSet."""
        assets = AssetSet(kind=ArtifactKind.BUNDLE, primary=Path("app.aab"))
        info = PackageInfo("com.example.app", "1.4.0", "42", Path("app.aab"))

        attached = assets.with_package(info)

        assert attached.package == info
        assert assets.package is None


class TestTrackRelease:
    """Tests for TrackRelease API conversion."""

    def test_to_api_minimal(self) -> None:
        """Unset optional fields are omitted."""
        release = TrackRelease(name=None, status=ReleaseStatus.DRAFT, version_codes=("1",))
        assert release.to_api() == {"status": "draft", "versionCodes": ["1"]}

    def test_fraction_only_for_staged(self) -> None:
        """userFraction is never sent for a completed release."""
        release = TrackRelease(
            name="r", status=ReleaseStatus.COMPLETED, version_codes=("1",), user_fraction=0.5
        )
        assert "userFraction" not in release.to_api()
        assert release.with_status(ReleaseStatus.HALTED).to_api()["userFraction"] == 0.5

    def test_from_api(self) -> None:
        """Remote releases are read, numeric codes included; unknown keys are kept."""
        release = TrackRelease.from_api(
            {
                "name": "7 (1.0)",
                "status": "inProgress",
                "versionCodes": ["7", 8],
                "userFraction": 0.2,
                "releaseNotes": [{"language": "en-US", "text": "Hi"}],
                "countryTargeting": {"countries": ["FR"], "includeRestOfWorld": True},
                "inAppUpdatePriority": 2,
                "rollbackEnabled": False,
            }
        )

        assert release == TrackRelease(
            name="7 (1.0)",
            status=ReleaseStatus.IN_PROGRESS,
            version_codes=("7", "8"),
            user_fraction=0.2,
            release_notes=(LocalizedText(language="en-US", text="Hi"),),
            country_targeting=CountryTargeting(countries=("FR",), include_rest_of_world=True),
            in_app_update_priority=2,
        )
        assert release.extra == {"rollbackEnabled": False}
        assert release.to_api()["rollbackEnabled"] is False

    def test_from_api_unknown_status(self) -> None:
        """An unrecognized status reads as draft but is written back unchanged."""
        release = TrackRelease.from_api(
            {"status": "statusUnspecified", "versionCodes": ["3"], "userFraction": 0.3}
        )
        assert release.status is ReleaseStatus.DRAFT
        assert release.raw_status == "statusUnspecified"
        assert release.to_api() == {
            "status": "statusUnspecified",
            "versionCodes": ["3"],
            "userFraction": 0.3,
        }

    def test_known_status_has_no_raw_status(self) -> None:
        release = TrackRelease.from_api({"status": "completed", "versionCodes": ["3"]})
        assert release.raw_status is None
        assert release.to_api()["status"] == "completed"

    def test_with_status_replaces_raw_status(self) -> None:
        """An explicit status change wins over the remote one."""
        release = TrackRelease.from_api({"status": "statusUnspecified"})
        assert release.with_status(ReleaseStatus.HALTED).to_api()["status"] == "halted"
