"""Tests for MetadataExtractor (tools replaced by a fake runner)."""

from pathlib import Path

from gpr.core.result import Err, Ok, Result
from gpr.platform.detection import Arch, Platform
from gpr.platform.process import ProcessError
from gpr.publish.errors import (
    ArtifactInvalid,
    ManifestFieldMissing,
    MissingRuntime,
    ToolExecutionFailed,
    ToolNotFound,
)
from gpr.publish.extractor import MetadataExtractor
from gpr.publish.model import ArtifactKind, PackageInfo
from gpr.tools.cache import ToolCache
from gpr.tools.http import MockHttpClient
from gpr.tools.provisioner import ToolProvisioner
from gpr.tools.resolver import SystemToolResolver

BADGING = "package: name='com.example.app' versionCode='42' versionName='1.4.0'\n"
MANIFEST = (
    '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
    'android:versionCode="7" android:versionName="2.0" package="org.example.game">'
)


class FakeRunner:
    """Records commands and answers with a canned result."""

    def __init__(self, result: Result[str, ProcessError]) -> None:
        self.result = result
        self.commands: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> Result[str, ProcessError]:
        self.commands.append(cmd)
        return self.result


def _which(found: dict[str, str]):
    return lambda name: found.get(name)


def _extractor(
    tmp_path: Path,
    runner: FakeRunner,
    *,
    on_path: dict[str, str] | None = None,
) -> MetadataExtractor:
    which = _which(on_path if on_path is not None else {"aapt": "/sdk/aapt"})
    resolver = SystemToolResolver(platform=Platform.LINUX, which=which, environ={})
    provisioner = ToolProvisioner(
        cache=ToolCache(tmp_path / "cache", Arch.X64),
        http=MockHttpClient(),
        platform=Platform.LINUX,
        which=which,
        update_path=False,
    )
    return MetadataExtractor(
        resolver=resolver, provisioner=provisioner, runner=runner, which=which
    )


def _artifact(tmp_path: Path, name: str) -> Path:
    path = tmp_path / name
    path.write_bytes(b"PK\x03\x04")
    return path


class TestApkExtraction:
    """Tests for APK extraction through aapt."""

    def test_extract(self, tmp_path: Path) -> None:
        """aapt badging output becomes a PackageInfo."""
        apk = _artifact(tmp_path, "app.apk")
        runner = FakeRunner(Ok(BADGING))

        result = _extractor(tmp_path, runner).extract(apk, ArtifactKind.APK)

        assert result == Ok(
            PackageInfo(
                package_name="com.example.app",
                version_name="1.4.0",
                version_code="42",
                file_path=apk,
            )
        )
        assert runner.commands == [["/sdk/aapt", "dump", "badging", str(apk)]]

    def test_same_input_same_output(self, tmp_path: Path) -> None:
        """Extraction is repeatable for the same file."""
        apk = _artifact(tmp_path, "app.apk")
        extractor = _extractor(tmp_path, FakeRunner(Ok(BADGING)))
        assert extractor.extract(apk, ArtifactKind.APK) == extractor.extract(apk, ArtifactKind.APK)

    def test_aapt_not_found(self, tmp_path: Path) -> None:
        """No aapt on PATH and no SDK gives ToolNotFound."""
        apk = _artifact(tmp_path, "app.apk")
        runner = FakeRunner(Ok(BADGING))

        result = _extractor(tmp_path, runner, on_path={}).extract(apk, ArtifactKind.APK)

        assert isinstance(result, Err)
        assert isinstance(result.error, ToolNotFound)
        assert runner.commands == []

    def test_tool_failure(self, tmp_path: Path) -> None:
        """A failing tool run keeps its exit code and output."""
        apk = _artifact(tmp_path, "app.apk")
        error = ProcessError(
            command=("aapt",), returncode=1, stdout="", stderr="ERROR: not a zip"
        )

        result = _extractor(tmp_path, FakeRunner(Err(error))).extract(apk, ArtifactKind.APK)

        assert result == Err(ToolExecutionFailed(tool="aapt", returncode=1, output="ERROR: not a zip"))

    def test_missing_fields(self, tmp_path: Path) -> None:
        """Output lacking a field is reported with the missing names."""
        apk = _artifact(tmp_path, "app.apk")
        runner = FakeRunner(Ok("package: name='com.example.app' versionCode='42'\n"))

        result = _extractor(tmp_path, runner).extract(apk, ArtifactKind.APK)

        assert result == Err(ManifestFieldMissing(path=apk, fields=("versionName",)))


class TestBundleExtraction:
    """Tests for bundle extraction through bundletool."""

    def test_bundletool_on_path(self, tmp_path: Path) -> None:
        """bundletool found on PATH is used directly."""
        aab = _artifact(tmp_path, "app.aab")
        runner = FakeRunner(Ok(MANIFEST))
        on_path = {"bundletool": "/usr/local/bin/bundletool"}

        result = _extractor(tmp_path, runner, on_path=on_path).extract(aab, ArtifactKind.BUNDLE)

        assert isinstance(result, Ok)
        assert result.value.package_name == "org.example.game"
        assert result.value.version_code == "7"
        assert result.value.release_name == "7 (2.0)"
        assert runner.commands == [
            ["/usr/local/bin/bundletool", "dump", "manifest", "--bundle", str(aab)]
        ]

    def test_provisioning_needs_java(self, tmp_path: Path) -> None:
        """Without bundletool or java on PATH, provisioning fails first."""
        aab = _artifact(tmp_path, "app.aab")
        runner = FakeRunner(Ok(MANIFEST))

        result = _extractor(tmp_path, runner, on_path={}).extract(aab, ArtifactKind.BUNDLE)

        assert result == Err(MissingRuntime(tool="bundletool", runtime="java"))
        assert runner.commands == []


class TestInputChecks:
    """Tests for input validation."""

    def test_wrong_suffix(self, tmp_path: Path) -> None:
        """The file suffix must match the artifact kind."""
        aab = _artifact(tmp_path, "app.aab")
        result = _extractor(tmp_path, FakeRunner(Ok(BADGING))).extract(aab, ArtifactKind.APK)
        assert isinstance(result, Err)
        assert isinstance(result.error, ArtifactInvalid)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A file that does not exist is rejected before running tools."""
        runner = FakeRunner(Ok(BADGING))
        result = _extractor(tmp_path, runner).extract(tmp_path / "gone.apk", ArtifactKind.APK)
        assert isinstance(result, Err)
        assert isinstance(result.error, ArtifactInvalid)
        assert runner.commands == []
