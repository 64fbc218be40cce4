"""Value types passed between the pipeline stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class ImageRecord:
    """One processed image file.

    `reference` is the relative path used to cross-reference the image in every
    later stage, e.g. ``data/images/IMG_0001.jpg``.
    """

    reference: str
    location: Optional[Location] = None
    captured_on: Optional[str] = None


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of reading one file: always a record, plus a warning when the
    metadata could not be read and fields were left absent."""

    record: ImageRecord
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.warning is None


@dataclass
class SiteCandidate:
    """A spatial cluster of images. `location` is the anchor and never moves."""

    location: Location
    images: List[str] = field(default_factory=list)
    date: Optional[str] = None

    def to_draft(self, index: int) -> Dict[str, Any]:
        """Render as an intermediate draft entry with blank fields to fill in."""
        return {
            "id": f"temple_{index}",
            "name": f"寺社 {index}",
            "nameKana": "",
            "category": "temple",
            "location": {**self.location.to_dict(), "address": ""},
            "description": "",
            "images": list(self.images),
            "visitDate": self.date or "",
            "tags": [],
            "website": "",
        }
