"""JSON document boundary: reading, validating and writing the pipeline's files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .errors import MalformedDocumentError, MissingInputError


def read_json(path: Path, hint: str = "") -> Any:
    path = Path(path)
    if not path.exists():
        raise MissingInputError(path, hint)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedDocumentError(path, f"invalid JSON: {exc}") from exc


def dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def write_json(path: Path, data: Any) -> None:
    """Serializes the whole document before the file is opened."""
    text = dump_json(data)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _check_entries(entries: List[Any], path: Path | None) -> List[Dict[str, Any]]:
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise MalformedDocumentError(path, f"entry {index} is not an object")
        images = entry.get("images")
        if images is None:
            continue
        if not isinstance(images, list):
            raise MalformedDocumentError(path, f"entry {index} has an 'images' value that is not an array")
        if not all(isinstance(ref, str) for ref in images):
            raise MalformedDocumentError(path, f"entry {index} has a non-string image reference")
    return entries


def sites_from_document(document: Any, path: Path | None = None) -> List[Dict[str, Any]]:
    """Return the `temples` array of a `{temples: [...]}` document."""
    if not isinstance(document, dict) or not isinstance(document.get("temples"), list):
        raise MalformedDocumentError(path, "expected an object with a 'temples' array")
    return _check_entries(document["temples"], path)


def draft_sites(document: Any, path: Path | None = None) -> List[Dict[str, Any]]:
    """Validate the intermediate draft: every entry needs `images` and `location.lat/lng`."""
    sites = sites_from_document(document, path)
    for index, site in enumerate(sites):
        location = site.get("location")
        if not isinstance(site.get("images"), list):
            raise MalformedDocumentError(path, f"draft entry {index} has no 'images' array")
        if not isinstance(location, dict) or "lat" not in location or "lng" not in location:
            raise MalformedDocumentError(path, f"draft entry {index} has no 'location.lat/lng'")
    return sites


def normalize_annotations(document: Any, path: Path | None = None) -> List[Dict[str, Any]]:
    """Accept either `{temples: [...]}` or a bare array; return the annotation list."""
    if isinstance(document, list):
        return _check_entries(document, path)
    if isinstance(document, dict) and isinstance(document.get("temples"), list):
        return _check_entries(document["temples"], path)
    raise MalformedDocumentError(path, "expected an array or an object with a 'temples' array")


def load_catalog(path: Path) -> List[Dict[str, Any]]:
    """Read the final catalog the way the map front end does."""
    document = read_json(path)
    if not isinstance(document, dict) or not isinstance(document.get("temples"), list):
        raise MalformedDocumentError(path, "Invalid data format")
    return document["temples"]


def resolve_image_url(image: str, base_path: str = "/") -> str:
    """Absolute URLs and root-relative paths pass through; others get `base_path`."""
    if image.startswith("http") or image.startswith("/"):
        return image
    if not base_path.endswith("/"):
        base_path += "/"
    return f"{base_path}{image}"
