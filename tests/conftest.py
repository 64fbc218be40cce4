from __future__ import annotations

from pathlib import Path

import piexif
import pytest
from PIL import Image

from kyoto_temples.config import PipelineConfig


def _dms(value: float):
    value = abs(value)
    deg = int(value)
    rem = (value - deg) * 60
    minute = int(rem)
    sec = round((rem - minute) * 60 * 10000)
    return ((deg, 1), (minute, 1), (sec, 10000))


def make_jpeg(
    path: Path,
    lat: float | None = None,
    lng: float | None = None,
    lat_ref: str = "N",
    lng_ref: str = "E",
    original: str | None = None,
    datetime_: str | None = None,
) -> Path:
    """Write a tiny JPEG carrying the given GPS and timestamp EXIF tags."""
    exif = {"0th": {}, "Exif": {}, "GPS": {}, "1st": {}, "thumbnail": None}
    if lat is not None:
        exif["GPS"][piexif.GPSIFD.GPSLatitude] = _dms(lat)
        exif["GPS"][piexif.GPSIFD.GPSLatitudeRef] = lat_ref
    if lng is not None:
        exif["GPS"][piexif.GPSIFD.GPSLongitude] = _dms(lng)
        exif["GPS"][piexif.GPSIFD.GPSLongitudeRef] = lng_ref
    if original:
        exif["Exif"][piexif.ExifIFD.DateTimeOriginal] = original
    if datetime_:
        exif["0th"][piexif.ImageIFD.DateTime] = datetime_
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", (8, 8), "white").save(path, "jpeg", exif=piexif.dump(exif))
    return path


@pytest.fixture
def project(tmp_path: Path) -> PipelineConfig:
    config = PipelineConfig.from_root(tmp_path)
    config.images_dir.mkdir(parents=True)
    return config
