"""GitHub Releases API.

Tools provisioned on demand (bundletool) are published as GitHub release
assets. This module reads the latest release of a repository and picks
the asset to download.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gpr.core.result import Err, Ok, Result
from gpr.core.structured import as_obj_list, as_str_dict, get_str
from gpr.tools.http import HttpError

if TYPE_CHECKING:
    from gpr.tools.http import HttpClient

__all__ = ["ReleaseAsset", "GitHubRelease", "github_latest_release", "latest_release_url"]


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    name: str
    download_url: str
    size: int


@dataclass(frozen=True, slots=True)
class GitHubRelease:
    """A published release.

    Attributes:
        tag: Tag name as published (e.g. "1.17.2")
        assets: Uploaded assets
    """

    tag: str
    assets: tuple[ReleaseAsset, ...]

    @property
    def version(self) -> str:
        """Tag without a leading 'v'."""
        return self.tag.removeprefix("v")

    def assets_with_suffix(self, suffix: str) -> tuple[ReleaseAsset, ...]:
        return tuple(a for a in self.assets if a.name.lower().endswith(suffix.lower()))


def latest_release_url(repo: str) -> str:
    return f"https://api.github.com/repos/{repo}/releases/latest"


def github_latest_release(http: HttpClient, repo: str) -> Result[GitHubRelease, HttpError]:
    """Fetch the latest release of ``repo``.

    Args:
        http: HTTP client to use
        repo: Repository in "owner/repo" format (e.g. "google/bundletool")

    Returns:
        Ok with GitHubRelease, or Err with HttpError
    """
    url = latest_release_url(repo)
    result = http.get_json(url)
    if isinstance(result, Err):
        return result

    data = result.value
    tag = get_str(data, "tag_name")
    if tag is None:
        return Err(HttpError(url=url, status=0, message="Missing tag_name in response"))

    assets: list[ReleaseAsset] = []
    for obj in as_obj_list(data.get("assets")) or []:
        item = as_str_dict(obj)
        if item is None:
            continue
        name = get_str(item, "name")
        download_url = get_str(item, "browser_download_url")
        if name is None or download_url is None:
            continue
        size = item.get("size")
        assets.append(
            ReleaseAsset(
                name=name,
                download_url=download_url,
                size=size if isinstance(size, int) else 0,
            )
        )

    return Ok(GitHubRelease(tag=tag, assets=tuple(assets)))
