"""Extractor: read EXIF metadata (capture date, GPS) from image files.

Pillow + piexif is tried first (HEIC files open through the pillow-heif plugin);
when Pillow cannot open the file or it carries no EXIF block, exifread parses the
raw bytes. A file no reader understands is not an error for the batch: it gets a
warning and a record without location or EXIF date.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional
import logging
import re

import exifread
import piexif
import pillow_heif
from PIL import Image

from .errors import MetadataReadError, MissingInputError
from .models import ExtractionResult, ImageRecord, Location
from .scanner import scan_images

pillow_heif.register_heif_opener()

FILENAME_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def _rational_to_float(value) -> float:
    # piexif yields (num, den) tuples, exifread yields Ratio objects printing as '12/1'
    if isinstance(value, tuple):
        num, den = value
        return float(num) / float(den) if den else float(num)
    s = str(value)
    if "/" in s:
        num, den = s.split("/")
        return float(num) / float(den) if float(den) != 0 else float(num)
    return float(s)


def _dms_to_decimal(dms) -> float:
    parts = [_rational_to_float(x) for x in dms]
    while len(parts) < 3:
        parts.append(0.0)
    deg, minute, sec = parts[:3]
    return deg + (minute / 60.0) + (sec / 3600.0)


def _text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode(errors="ignore")
    value = str(value).replace("\x00", "").strip()
    return value or None


def _read_with_piexif(path: Path) -> Optional[Dict]:
    with Image.open(path) as img:
        exif_bytes = img.info.get("exif")
    if not exif_bytes:
        return None
    exif = piexif.load(exif_bytes)
    gps_ifd = exif.get("GPS") or {}
    exif_ifd = exif.get("Exif") or {}
    zeroth = exif.get("0th") or {}

    tags = {}
    gps_lat = gps_ifd.get(piexif.GPSIFD.GPSLatitude)
    gps_lon = gps_ifd.get(piexif.GPSIFD.GPSLongitude)
    if gps_lat:
        tags["GPSLatitude"] = _dms_to_decimal(gps_lat)
    if gps_lon:
        tags["GPSLongitude"] = _dms_to_decimal(gps_lon)
    tags["GPSLatitudeRef"] = _text(gps_ifd.get(piexif.GPSIFD.GPSLatitudeRef))
    tags["GPSLongitudeRef"] = _text(gps_ifd.get(piexif.GPSIFD.GPSLongitudeRef))
    tags["DateTimeOriginal"] = exif_ifd.get(piexif.ExifIFD.DateTimeOriginal)
    tags["DateTime"] = zeroth.get(piexif.ImageIFD.DateTime)
    return tags


def _read_with_exifread(path: Path) -> Optional[Dict]:
    with open(path, "rb") as fh:
        raw = exifread.process_file(fh, details=False)
    if not raw:
        return None

    tags = {}
    if "GPS GPSLatitude" in raw:
        tags["GPSLatitude"] = _dms_to_decimal(raw["GPS GPSLatitude"].values)
    if "GPS GPSLongitude" in raw:
        tags["GPSLongitude"] = _dms_to_decimal(raw["GPS GPSLongitude"].values)
    tags["GPSLatitudeRef"] = _text(raw.get("GPS GPSLatitudeRef"))
    tags["GPSLongitudeRef"] = _text(raw.get("GPS GPSLongitudeRef"))
    tags["DateTimeOriginal"] = _text(raw.get("EXIF DateTimeOriginal"))
    tags["DateTime"] = _text(raw.get("Image DateTime"))
    return tags


def read_exif_tags(path: Path) -> Dict:
    """Return the GPS and timestamp tags of `path`, or raise MetadataReadError."""
    path = Path(path)
    errors = []
    for reader in (_read_with_piexif, _read_with_exifread):
        try:
            tags = reader(path)
        except Exception as exc:
            logging.debug("%s could not read %s: %s", reader.__name__, path.name, exc)
            errors.append(str(exc))
            continue
        if tags is not None:
            return tags
    reason = errors[-1] if errors else "no EXIF data"
    raise MetadataReadError(reason)


def location_from_tags(tags: Dict) -> Optional[Location]:
    """Both raw coordinates are required; hemisphere refs S and W negate."""
    lat = tags.get("GPSLatitude")
    lng = tags.get("GPSLongitude")
    if lat is None or lng is None:
        return None
    if (tags.get("GPSLatitudeRef") or "").upper().startswith("S"):
        lat = -lat
    if (tags.get("GPSLongitudeRef") or "").upper().startswith("W"):
        lng = -lng
    return Location(lat=lat, lng=lng)


def date_from_timestamp(value) -> Optional[str]:
    """Convert an EXIF timestamp (string or Unix epoch) to a UTC `YYYY-MM-DD`."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).date().isoformat()
    text = _text(value)
    if not text:
        return None
    try:
        return datetime.strptime(text, EXIF_DATETIME_FORMAT).date().isoformat()
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def date_from_tags(tags: Dict) -> Optional[str]:
    for key in ("DateTimeOriginal", "DateTime"):
        found = date_from_timestamp(tags.get(key))
        if found:
            return found
    return None


def date_from_filename(filename: str) -> Optional[str]:
    # IMG_XXXX style names carry no date
    match = FILENAME_DATE.search(filename)
    if not match:
        return None
    return f"{match.group(1)}-{match.group(2)}-{match.group(3)}"


def extract_metadata(path: Path, prefix: str = "data/images") -> ExtractionResult:
    """Build the ImageRecord for one file. Never raises for unreadable metadata."""
    path = Path(path)
    warning = None
    try:
        tags = read_exif_tags(path)
    except MetadataReadError as exc:
        warning = f"EXIF read error ({path.name}): {exc}"
        tags = {}

    reference = f"{prefix.rstrip('/')}/{path.name}" if prefix else path.name
    record = ImageRecord(
        reference=reference,
        location=location_from_tags(tags),
        captured_on=date_from_tags(tags) or date_from_filename(path.name),
    )
    return ExtractionResult(record=record, warning=warning)


def extract_directory(directory: Path, prefix: str = "data/images", workers: int = 1) -> List[ExtractionResult]:
    """Extract every recognized image in `directory`, preserving listing order.

    With `workers > 1` the reads run on a thread pool; results are still
    returned (and logged) in listing order, not completion order.
    """
    try:
        paths = list(scan_images(directory))
    except FileNotFoundError:
        raise MissingInputError(directory, hint="Put the photos in the image directory first") from None
    logging.info("Found %d image files", len(paths))

    def _extract(p: Path) -> ExtractionResult:
        return extract_metadata(p, prefix)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(_extract, paths))
    else:
        results = [_extract(p) for p in paths]

    for path, result in zip(paths, results):
        if result.warning:
            logging.warning(result.warning)
        loc = result.record.location
        if loc:
            logging.info("✓ %s: (%.6f, %.6f)", path.name, loc.lat, loc.lng)
        else:
            logging.info("✗ %s: no location", path.name)
    return results
