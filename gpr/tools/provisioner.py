"""On-demand provisioning of inspection tools.

``ToolProvisioner.ensure`` guarantees a runnable tool:

1. Reuse the newest completely cached version, if any.
2. Otherwise download the latest GitHub release asset into a scratch
   directory, copy it into the cache and install a shim for it.
3. Mark the cache entry complete and put the shim directory on PATH.

Usage:
    provisioner = ToolProvisioner(cache=ToolCache(root, arch), http=RealHttpClient())
    match provisioner.ensure(BUNDLETOOL):
        case Ok(locator):
            run(locator.command("version"))
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from gpr.core.result import Err, Ok, Result
from gpr.platform.detection import Platform, detect_platform
from gpr.platform.paths import prepend_to_path
from gpr.publish.errors import MissingRuntime, ProvisionError, ToolAcquisitionFailed
from gpr.tools.github import github_latest_release, latest_release_url
from gpr.tools.wrapper import ExecutableLocator, ShimInstaller, ShimSpec, ToolInstaller

if TYPE_CHECKING:
    from gpr.output.console import ConsoleProtocol
    from gpr.tools.cache import ToolCache
    from gpr.tools.http import HttpClient

__all__ = ["ToolSpec", "ToolProvisioner", "BUNDLETOOL"]

Which = Callable[[str], str | None]


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """A tool distributed as a GitHub release asset run through a runtime.

    Attributes:
        id: Tool name, also the shim name and the cache key
        repo: GitHub repository in "owner/repo" format
        asset_suffix: Suffix identifying the asset to download
        runtime: Runtime command that executes the asset
        runtime_args: Arguments passed to the runtime before the asset path
    """

    id: str
    repo: str
    asset_suffix: str
    runtime: str
    runtime_args: tuple[str, ...] = ()


BUNDLETOOL = ToolSpec(
    id="bundletool",
    repo="google/bundletool",
    asset_suffix=".jar",
    runtime="java",
    runtime_args=("-jar",),
)


class ToolProvisioner:
    """Locates or installs tools into a ToolCache."""

    def __init__(
        self,
        *,
        cache: ToolCache,
        http: HttpClient,
        installer: ToolInstaller | None = None,
        platform: Platform | None = None,
        which: Which = shutil.which,
        console: ConsoleProtocol | None = None,
        update_path: bool = True,
    ) -> None:
        self._cache = cache
        self._http = http
        self._installer = installer or ShimInstaller()
        self._platform = platform or detect_platform()
        self._which = which
        self._console = console
        self._update_path = update_path

    def ensure(self, spec: ToolSpec) -> Result[ExecutableLocator, ProvisionError]:
        """Return a runnable locator for ``spec``, installing it if needed."""
        if self._which(spec.runtime) is None:
            return Err(MissingRuntime(tool=spec.id, runtime=spec.runtime))

        cached = self._cache.find(spec.id)
        if cached is not None:
            version, install_dir = cached
            shim = install_dir / self._platform.shim_name(spec.id)
            if shim.is_file():
                self._log(f"{spec.id} {version} (cached)")
                return Ok(self._publish(ExecutableLocator(path=shim, version=version)))

        return self._acquire(spec)

    def _acquire(self, spec: ToolSpec) -> Result[ExecutableLocator, ProvisionError]:
        release_result = github_latest_release(self._http, spec.repo)
        if isinstance(release_result, Err):
            return Err(
                ToolAcquisitionFailed(
                    tool=spec.id,
                    repo=spec.repo,
                    reason=f"cannot read latest release: {release_result.error}",
                    url=latest_release_url(spec.repo),
                )
            )

        release = release_result.value
        assets = release.assets_with_suffix(spec.asset_suffix)
        if len(assets) != 1:
            names = ", ".join(a.name for a in release.assets) or "none"
            return Err(
                ToolAcquisitionFailed(
                    tool=spec.id,
                    repo=spec.repo,
                    reason=(
                        f"expected one {spec.asset_suffix} asset in release {release.tag}, "
                        f"found {len(assets)} (assets: {names})"
                    ),
                    url=latest_release_url(spec.repo),
                )
            )
        asset = assets[0]

        version = release.version
        self._log(f"download {spec.id} {version} ({asset.size} bytes): {asset.download_url}")

        with tempfile.TemporaryDirectory(prefix=f"gpr-{spec.id}-") as scratch:
            scratch_file = Path(scratch) / asset.name
            dres = self._http.download(asset.download_url, scratch_file)
            if isinstance(dres, Err):
                return Err(
                    ToolAcquisitionFailed(
                        tool=spec.id,
                        repo=spec.repo,
                        reason=f"download failed: {dres.error}",
                        url=asset.download_url,
                    )
                )

            if not scratch_file.is_file() or scratch_file.stat().st_size == 0:
                return Err(
                    ToolAcquisitionFailed(
                        tool=spec.id,
                        repo=spec.repo,
                        reason="downloaded file is empty",
                        url=asset.download_url,
                    )
                )

            install_dir = self._cache.dir_for(spec.id, version)
            archive = install_dir / asset.name
            try:
                self._cache.remove(spec.id, version)
                install_dir.mkdir(parents=True)
                shutil.copyfile(scratch_file, archive)
                locator = self._installer.install(
                    ShimSpec(
                        name=spec.id,
                        runtime=spec.runtime,
                        args=(*spec.runtime_args, str(archive)),
                    ),
                    install_dir,
                    self._platform,
                )
                self._cache.mark_complete(spec.id, version)
            except OSError as e:
                return Err(
                    ToolAcquisitionFailed(
                        tool=spec.id,
                        repo=spec.repo,
                        reason=f"cannot install into tool cache {self._cache.root}: {e}",
                        url=asset.download_url,
                    )
                )

        return Ok(self._publish(ExecutableLocator(path=locator.path, version=version)))

    def _publish(self, locator: ExecutableLocator) -> ExecutableLocator:
        if self._update_path:
            prepend_to_path(locator.bin_dir)
        return locator

    def _log(self, message: str) -> None:
        if self._console is not None:
            self._console.info(message)
