from __future__ import annotations

from dataclasses import dataclass

from gpr.output.console import ConsoleProtocol, RichConsole
from gpr.platform.detection import Arch, Platform, detect_arch, detect_platform
from gpr.platform.paths import tool_cache_root
from gpr.tools.cache import ToolCache
from gpr.tools.http import RealHttpClient
from gpr.tools.provisioner import ToolProvisioner
from gpr.tools.resolver import SystemToolResolver


@dataclass(frozen=True, slots=True)
class CLIContext:
    platform: Platform
    arch: Arch
    console: ConsoleProtocol

    def tool_cache(self) -> ToolCache:
        return ToolCache(tool_cache_root(self.platform), self.arch)

    def provisioner(self, *, github_token: str | None = None) -> ToolProvisioner:
        return ToolProvisioner(
            cache=self.tool_cache(),
            http=RealHttpClient(token=github_token),
            platform=self.platform,
            console=self.console,
        )

    def resolver(self) -> SystemToolResolver:
        return SystemToolResolver(platform=self.platform)


def build_context() -> CLIContext:
    return CLIContext(
        platform=detect_platform(),
        arch=detect_arch(),
        console=RichConsole(),
    )
