"""Tests for GitHub release lookup."""

from gpr.core.result import Err, Ok
from gpr.tools.github import GitHubRelease, ReleaseAsset, github_latest_release, latest_release_url
from gpr.tools.http import HttpError, MockHttpClient

URL = latest_release_url("google/bundletool")


class TestGitHubLatestRelease:
    """Tests for github_latest_release."""

    def test_url(self) -> None:
        """The latest-release endpoint of the repository is used."""
        assert URL == "https://api.github.com/repos/google/bundletool/releases/latest"

    def test_parse(self) -> None:
        """Tag and well-formed assets are read; broken assets are skipped."""
        http = MockHttpClient()
        http.set_json(
            URL,
            {
                "tag_name": "1.17.2",
                "assets": [
                    {
                        "name": "bundletool-all-1.17.2.jar",
                        "browser_download_url": "https://dl/a.jar",
                        "size": 9,
                    },
                    {"name": "no-url.jar"},
                    "junk",
                ],
            },
        )

        result = github_latest_release(http, "google/bundletool")

        assert result == Ok(
            GitHubRelease(
                tag="1.17.2",
                assets=(ReleaseAsset("bundletool-all-1.17.2.jar", "https://dl/a.jar", 9),),
            )
        )

    def test_missing_tag(self) -> None:
        """A response without tag_name is an error."""
        http = MockHttpClient()
        http.set_json(URL, {"assets": []})

        result = github_latest_release(http, "google/bundletool")

        assert isinstance(result, Err)
        assert "tag_name" in result.error.message

    def test_http_error_passes_through(self) -> None:
        """Transport errors are returned unchanged."""
        error = HttpError(url=URL, status=404, message="Not Found")
        http = MockHttpClient()
        http.set_json(URL, error)

        assert github_latest_release(http, "google/bundletool") == Err(error)


class TestGitHubRelease:
    """Tests for GitHubRelease helpers."""

    def test_version_strips_v(self) -> None:
        assert GitHubRelease(tag="v2.0.1", assets=()).version == "2.0.1"

    def test_assets_with_suffix(self) -> None:
        """Suffix matching ignores case."""
        release = GitHubRelease(
            tag="1",
            assets=(ReleaseAsset("a.JAR", "u1", 1), ReleaseAsset("b.zip", "u2", 1)),
        )
        assert [a.name for a in release.assets_with_suffix(".jar")] == ["a.JAR"]
