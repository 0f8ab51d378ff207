"""Parsers for inspection tool output.

Each tool family prints the manifest differently:

    aapt dump badging app.apk
        package: name='com.example.app' versionCode='42' versionName='1.4.0' ...

    bundletool dump manifest --bundle app.aab
        <manifest xmlns:android="..." android:versionCode="42"
            android:versionName="1.4.0" package="com.example.app" ...>

One parser per family keeps the formats isolated. Fields are matched
individually inside the relevant header, so attribute order does not
matter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

__all__ = [
    "ManifestFields",
    "ManifestParser",
    "AaptBadgingParser",
    "BundleManifestParser",
    "FIELD_NAMES",
]

FIELD_NAMES = ("package", "versionCode", "versionName")


@dataclass(frozen=True, slots=True)
class ManifestFields:
    """Fields found in tool output; None when absent."""

    package_name: str | None
    version_code: str | None
    version_name: str | None

    @property
    def missing(self) -> tuple[str, ...]:
        values = (self.package_name, self.version_code, self.version_name)
        return tuple(name for name, value in zip(FIELD_NAMES, values) if not value)


class ManifestParser(Protocol):
    """Extracts package identity from one tool family's output."""

    def parse(self, output: str) -> ManifestFields: ...


def _attr(header: str, name: str) -> str | None:
    # Either quoting style; the closing quote must match the opening one.
    match = re.search(rf"(?<![\w:]){name}=(['\"])(.*?)\1", header)
    if match is None:
        return None
    return match.group(2) or None


class AaptBadgingParser:
    """Parses ``aapt dump badging`` output (single-quoted attributes)."""

    _HEADER = re.compile(r"^package:(.*)$", re.MULTILINE)

    def parse(self, output: str) -> ManifestFields:
        match = self._HEADER.search(output)
        header = match.group(1) if match else ""
        return ManifestFields(
            package_name=_attr(header, "name"),
            version_code=_attr(header, "versionCode"),
            version_name=_attr(header, "versionName"),
        )


class BundleManifestParser:
    """Parses ``bundletool dump manifest`` output (XML, double-quoted)."""

    _HEADER = re.compile(r"<manifest\b([^>]*)>", re.DOTALL)

    def parse(self, output: str) -> ManifestFields:
        match = self._HEADER.search(output)
        header = match.group(1) if match else ""
        return ManifestFields(
            package_name=_attr(header, "package"),
            version_code=_attr(header, "(?:android:)?versionCode"),
            version_name=_attr(header, "(?:android:)?versionName"),
        )
