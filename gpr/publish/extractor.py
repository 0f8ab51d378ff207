"""Package metadata extraction.

Runs the inspection tool for the artifact format and turns its output
into a ``PackageInfo``:

- APK: ``aapt dump badging <file>`` (aapt from PATH or the Android SDK)
- Bundle: ``bundletool dump manifest --bundle <file>`` (bundletool from
  PATH, else provisioned into the tool cache)
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from gpr.core.result import Err, Ok, Result
from gpr.platform.process import Runner, run
from gpr.publish.errors import (
    ArtifactInvalid,
    ExtractError,
    ManifestFieldMissing,
    ProvisionError,
    ToolExecutionFailed,
)
from gpr.publish.manifest import AaptBadgingParser, BundleManifestParser, ManifestParser
from gpr.publish.model import ArtifactKind, PackageInfo
from gpr.tools.provisioner import BUNDLETOOL

if TYPE_CHECKING:
    from gpr.tools.provisioner import ToolProvisioner
    from gpr.tools.resolver import SystemToolResolver

__all__ = ["MetadataExtractor"]

AAPT = "aapt"


class MetadataExtractor:
    """Reads package identity from APK and bundle files.

    Args:
        resolver: Finds aapt on the host
        provisioner: Installs bundletool when it is not on PATH
        runner: Executes tool commands (injectable for tests)
        which: PATH lookup used for bundletool
    """

    def __init__(
        self,
        *,
        resolver: SystemToolResolver,
        provisioner: ToolProvisioner,
        runner: Runner = run,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self._resolver = resolver
        self._provisioner = provisioner
        self._runner = runner
        self._which = which
        self._parsers: dict[ArtifactKind, ManifestParser] = {
            ArtifactKind.APK: AaptBadgingParser(),
            ArtifactKind.BUNDLE: BundleManifestParser(),
        }

    def extract(
        self, path: Path, kind: ArtifactKind
    ) -> Result[PackageInfo, ExtractError | ProvisionError]:
        """Extract package info from ``path``.

        Args:
            path: Existing APK or bundle file
            kind: Format of the file

        Returns:
            Ok with PackageInfo, or Err describing what went wrong
        """
        if path.suffix.lower() != kind.suffix:
            return Err(ArtifactInvalid(path=path, reason=f"expected a {kind.suffix} file"))
        if not path.is_file():
            return Err(ArtifactInvalid(path=path, reason="file does not exist"))

        command = self._command(path, kind)
        if isinstance(command, Err):
            return command
        tool_name = AAPT if kind is ArtifactKind.APK else BUNDLETOOL.id

        output = self._runner(command.value)
        if isinstance(output, Err):
            e = output.error
            return Err(ToolExecutionFailed(tool=tool_name, returncode=e.returncode, output=e.output))

        fields = self._parsers[kind].parse(output.value)
        if fields.missing:
            return Err(ManifestFieldMissing(path=path, fields=fields.missing))

        # missing is empty, so all three are set
        assert fields.package_name and fields.version_code and fields.version_name
        return Ok(
            PackageInfo(
                package_name=fields.package_name,
                version_name=fields.version_name,
                version_code=fields.version_code,
                file_path=path,
            )
        )

    def _command(
        self, path: Path, kind: ArtifactKind
    ) -> Result[list[str], ExtractError | ProvisionError]:
        if kind is ArtifactKind.APK:
            aapt = self._resolver.resolve(AAPT)
            if isinstance(aapt, Err):
                return aapt
            return Ok([str(aapt.value), "dump", "badging", str(path)])

        on_path = self._which(BUNDLETOOL.id)
        if on_path:
            return Ok([on_path, "dump", "manifest", "--bundle", str(path)])

        locator = self._provisioner.ensure(BUNDLETOOL)
        if isinstance(locator, Err):
            return locator
        return Ok(locator.value.command("dump", "manifest", "--bundle", str(path)))
