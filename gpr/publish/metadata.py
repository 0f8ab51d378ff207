"""Optional store-listing metadata.

Metadata is supplied as inline JSON or as a path to a JSON file:

    {
      "listing": {"language": "en-US", "title": "App", ...},
      "releaseNotes": [{"language": "en-US", "text": "Bug fixes"}],
      "countryTargeting": {"countries": ["US", "GB"], "includeRestOfWorld": false},
      "images": [{"language": "en-US", "type": "icon", "path": "store/icon.png"}]
    }

``listing`` and ``releaseNotes`` may be a single object or an array. Shape
is checked; content is passed through to the Play API untouched.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from gpr.core.result import Err, Ok, Result
from gpr.core.structured import StrDict, as_dict_list, as_str_dict, get_str
from gpr.publish.errors import MetadataInvalid
from gpr.publish.model import CountryTargeting, LocalizedText

__all__ = ["ImageType", "Image", "Listing", "Metadata", "load_metadata", "parse_metadata"]


class ImageType(Enum):
    PHONE_SCREENSHOTS = "phoneScreenshots"
    SEVEN_INCH_SCREENSHOTS = "sevenInchScreenshots"
    TEN_INCH_SCREENSHOTS = "tenInchScreenshots"
    TV_SCREENSHOTS = "tvScreenshots"
    WEAR_SCREENSHOTS = "wearScreenshots"
    ICON = "icon"
    FEATURE_GRAPHIC = "featureGraphic"
    TV_BANNER = "tvBanner"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Image:
    language: str
    type: ImageType
    path: Path


@dataclass(frozen=True, slots=True)
class Listing:
    """Localized store listing.

    ``fields`` holds the text fields exactly as given (title,
    fullDescription, shortDescription, video); it is the request body of a
    listings update.
    """

    language: str
    fields: StrDict
    images: tuple[Image, ...] = ()

    def to_api(self) -> StrDict:
        return {"language": self.language, **self.fields}


@dataclass(frozen=True, slots=True)
class Metadata:
    listings: tuple[Listing, ...] = ()
    release_notes: tuple[LocalizedText, ...] = ()
    country_targeting: CountryTargeting | None = None
    images: tuple[Image, ...] = ()

    @property
    def all_images(self) -> tuple[Image, ...]:
        """Top-level images followed by each listing's images."""
        nested = tuple(img for listing in self.listings for img in listing.images)
        return (*self.images, *nested)

    @property
    def has_store_listing(self) -> bool:
        return bool(self.listings or self.all_images)


_ROOT_KEYS = frozenset({"listing", "releaseNotes", "countryTargeting", "images"})
_LISTING_TEXT_KEYS = frozenset({"title", "fullDescription", "shortDescription", "video"})
# listings.update replaces the whole listing; these must be present, null allowed
_LISTING_REQUIRED_KEYS = ("title", "fullDescription", "shortDescription", "images")
_COUNTRY_CODE = re.compile(r"^[A-Z]{2}$")


def load_metadata(value: str, *, cwd: Path) -> Result[Metadata, MetadataInvalid]:
    """Load metadata from inline JSON or from a JSON file path.

    Image paths are resolved against the metadata file's directory, or
    against ``cwd`` for inline JSON.
    """
    text = value.strip()
    if text.startswith("{"):
        return _decode(text, source="inline", base_dir=cwd)

    path = Path(text).expanduser()
    if not path.is_absolute():
        path = cwd / path
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(MetadataInvalid(reason=f"cannot read metadata file: {e}", source=str(path)))
    return _decode(content, source=str(path), base_dir=path.parent)


def _decode(text: str, *, source: str, base_dir: Path) -> Result[Metadata, MetadataInvalid]:
    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(MetadataInvalid(reason=f"invalid JSON: {e}", source=source))

    result = parse_metadata(data, base_dir=base_dir)
    if isinstance(result, Err):
        return Err(MetadataInvalid(reason=result.error.reason, source=source))
    return result


def parse_metadata(data: object, *, base_dir: Path) -> Result[Metadata, MetadataInvalid]:
    """Check the shape of decoded metadata JSON and build a Metadata."""
    root = as_str_dict(data)
    if root is None:
        return Err(MetadataInvalid(reason="metadata must be a JSON object"))

    unknown = sorted(set(root) - _ROOT_KEYS)
    if unknown:
        return Err(MetadataInvalid(reason=f"unknown metadata keys: {', '.join(unknown)}"))

    listings: list[Listing] = []
    if root.get("listing") is not None:
        items = as_dict_list(root["listing"])
        if items is None:
            return Err(MetadataInvalid(reason="listing must be an object or an array of objects"))
        for item in items:
            listing = _parse_listing(item, base_dir)
            if isinstance(listing, Err):
                return listing
            listings.append(listing.value)

    notes: list[LocalizedText] = []
    if root.get("releaseNotes") is not None:
        items = as_dict_list(root["releaseNotes"])
        if items is None:
            return Err(MetadataInvalid(reason="releaseNotes must be an object or an array"))
        for item in items:
            language = get_str(item, "language")
            if language is None:
                return Err(MetadataInvalid(reason="releaseNotes entry without language"))
            text = item.get("text")
            if text is not None and not isinstance(text, str):
                return Err(MetadataInvalid(reason=f"releaseNotes text for {language} must be a string"))
            notes.append(LocalizedText(language=language, text=text))

    targeting: CountryTargeting | None = None
    if root.get("countryTargeting") is not None:
        parsed = _parse_country_targeting(root["countryTargeting"])
        if isinstance(parsed, Err):
            return parsed
        targeting = parsed.value

    images: list[Image] = []
    if "images" in root:
        raw_images = root["images"]
        if not isinstance(raw_images, list) or not raw_images:
            return Err(MetadataInvalid(reason="images must be a non-empty array"))
        parsed_images = _parse_images(raw_images, base_dir)
        if isinstance(parsed_images, Err):
            return parsed_images
        images.extend(parsed_images.value)

    return Ok(
        Metadata(
            listings=tuple(listings),
            release_notes=tuple(notes),
            country_targeting=targeting,
            images=tuple(images),
        )
    )


def _parse_listing(item: StrDict, base_dir: Path) -> Result[Listing, MetadataInvalid]:
    language = get_str(item, "language")
    if language is None:
        return Err(MetadataInvalid(reason="listing without language"))

    unknown = sorted(set(item) - _LISTING_TEXT_KEYS - {"language", "images"})
    if unknown:
        return Err(MetadataInvalid(reason=f"unknown listing keys for {language}: {', '.join(unknown)}"))
    missing = [key for key in _LISTING_REQUIRED_KEYS if key not in item]
    if missing:
        return Err(MetadataInvalid(reason=f"missing listing keys for {language}: {', '.join(missing)}"))

    fields: StrDict = {}
    for key in sorted(_LISTING_TEXT_KEYS & set(item)):
        value = item[key]
        if value is not None and not isinstance(value, str):
            return Err(MetadataInvalid(reason=f"listing {key} for {language} must be a string"))
        if value is not None:
            fields[key] = value

    images: tuple[Image, ...] = ()
    raw_images = item.get("images")
    if raw_images is not None:
        if not isinstance(raw_images, list):
            return Err(MetadataInvalid(reason=f"listing images for {language} must be an array"))
        parsed = _parse_images(raw_images, base_dir)
        if isinstance(parsed, Err):
            return parsed
        images = parsed.value

    return Ok(Listing(language=language, fields=fields, images=images))


def _parse_images(raw: list[object], base_dir: Path) -> Result[tuple[Image, ...], MetadataInvalid]:
    images: list[Image] = []
    for obj in raw:
        item = as_str_dict(obj)
        if item is None:
            return Err(MetadataInvalid(reason="image entries must be objects"))
        language = get_str(item, "language")
        type_name = get_str(item, "type")
        path = get_str(item, "path")
        if language is None or type_name is None or path is None:
            return Err(MetadataInvalid(reason="image entries need language, type and path"))
        try:
            image_type = ImageType(type_name)
        except ValueError:
            return Err(MetadataInvalid(reason=f"unknown image type: {type_name}"))
        image_path = Path(path).expanduser()
        if not image_path.is_absolute():
            image_path = base_dir / image_path
        images.append(Image(language=language, type=image_type, path=image_path))
    return Ok(tuple(images))


def _parse_country_targeting(obj: object) -> Result[CountryTargeting, MetadataInvalid]:
    data = as_str_dict(obj)
    if data is None:
        return Err(MetadataInvalid(reason="countryTargeting must be an object"))

    countries = data.get("countries")
    if not isinstance(countries, list) or not countries:
        return Err(MetadataInvalid(reason="countryTargeting.countries must be a non-empty array"))

    codes: list[str] = []
    for code in countries:
        if not isinstance(code, str) or not _COUNTRY_CODE.match(code):
            return Err(MetadataInvalid(reason=f"invalid country code: {code!r}"))
        if code in codes:
            return Err(MetadataInvalid(reason=f"duplicate country code: {code}"))
        codes.append(code)

    rest = data.get("includeRestOfWorld")
    if rest is not None and not isinstance(rest, bool):
        return Err(MetadataInvalid(reason="countryTargeting.includeRestOfWorld must be a boolean"))

    return Ok(CountryTargeting(countries=tuple(codes), include_rest_of_world=rest))
