"""Tool infrastructure for package inspection.

- HTTP client for GitHub API and downloads (http.py)
- GitHub release lookup (github.py)
- Persistent tool cache (cache.py)
- Shim installation (wrapper.py)
- Provisioning of downloaded tools (provisioner.py)
- Resolution of SDK tools on the host (resolver.py)
"""

from gpr.tools.cache import CacheEntry, ToolCache
from gpr.tools.github import GitHubRelease, ReleaseAsset, github_latest_release
from gpr.tools.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from gpr.tools.provisioner import BUNDLETOOL, ToolProvisioner, ToolSpec
from gpr.tools.resolver import SystemToolResolver
from gpr.tools.wrapper import ExecutableLocator, ShimInstaller, ShimSpec, ToolInstaller

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # GitHub
    "GitHubRelease",
    "ReleaseAsset",
    "github_latest_release",
    # Cache
    "CacheEntry",
    "ToolCache",
    # Install
    "ExecutableLocator",
    "ShimInstaller",
    "ShimSpec",
    "ToolInstaller",
    # Provision / resolve
    "BUNDLETOOL",
    "ToolProvisioner",
    "ToolSpec",
    "SystemToolResolver",
]
