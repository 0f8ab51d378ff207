"""Tests for inspection tool output parsers."""

from gpr.publish.manifest import AaptBadgingParser, BundleManifestParser, ManifestFields

AAPT_OUTPUT = """\
package: name='com.example.app' versionCode='42' versionName='1.4.0' platformBuildVersionName='14'
sdkVersion:'24'
targetSdkVersion:'34'
application-label:'Example'
"""

BUNDLETOOL_OUTPUT = """\
<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    android:compileSdkVersion="34"
    android:versionCode="7"
    android:versionName="2.0.0-beta"
    package="org.example.game"
    platformBuildVersionCode="34">
  <uses-sdk android:minSdkVersion="24" android:targetSdkVersion="34"/>
  <application android:label="Game"/>
</manifest>
"""


class TestAaptBadgingParser:
    """Tests for AaptBadgingParser."""

    def test_parse(self) -> None:
        """All three fields come from the package line."""
        fields = AaptBadgingParser().parse(AAPT_OUTPUT)
        assert fields == ManifestFields(
            package_name="com.example.app", version_code="42", version_name="1.4.0"
        )
        assert fields.missing == ()

    def test_attribute_order_does_not_matter(self) -> None:
        """Fields are matched individually."""
        output = "package: versionName='3' name='a.b' versionCode='9'\n"
        fields = AaptBadgingParser().parse(output)
        assert (fields.package_name, fields.version_code, fields.version_name) == ("a.b", "9", "3")

    def test_platform_build_version_name_is_not_version_name(self) -> None:
        """versionName does not match inside platformBuildVersionName."""
        output = "package: name='a.b' versionCode='1' platformBuildVersionName='14'\n"
        fields = AaptBadgingParser().parse(output)
        assert fields.version_name is None
        assert fields.missing == ("versionName",)

    def test_missing_package_line(self) -> None:
        """Output without a package line yields no fields."""
        fields = AaptBadgingParser().parse("ERROR: dump failed\n")
        assert fields.missing == ("package", "versionCode", "versionName")


class TestBundleManifestParser:
    """Tests for BundleManifestParser."""

    def test_parse(self) -> None:
        """Namespaced and plain attributes are both read."""
        fields = BundleManifestParser().parse(BUNDLETOOL_OUTPUT)
        assert fields == ManifestFields(
            package_name="org.example.game", version_code="7", version_name="2.0.0-beta"
        )

    def test_ignores_nested_elements(self) -> None:
        """Only the manifest element is considered."""
        output = '<manifest package="a.b"><application android:versionCode="5"/></manifest>'
        fields = BundleManifestParser().parse(output)
        assert fields.package_name == "a.b"
        assert fields.version_code is None

    def test_empty_value_counts_as_missing(self) -> None:
        """An attribute with an empty value is missing."""
        output = '<manifest package="" android:versionCode="1" android:versionName="1.0">'
        fields = BundleManifestParser().parse(output)
        assert fields.missing == ("package",)
