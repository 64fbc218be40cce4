"""Merger: combine EXIF-derived site candidates with externally authored annotations.

An annotation matches the first candidate (in candidate order) whose images
share at least one filename with it; directories are ignored. On a match the
annotation wins field by field unless its value is empty, except coordinates,
which always come from the candidate's photo geolocation, and the visit date,
which prefers the candidate. Nothing is dropped: unmatched annotations pass
through unchanged and candidates no annotation recognized are appended as-is.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .utils.paths import image_filename, shares_filename

Site = Dict[str, Any]


@dataclass
class MergeReport:
    candidates: int = 0
    annotations: int = 0
    matched: int = 0
    unmatched_annotations: List[str] = field(default_factory=list)
    unrecognized_candidates: List[str] = field(default_factory=list)
    total: int = 0

    def summary_lines(self) -> List[str]:
        return [
            f"Candidates: {self.candidates}",
            f"Annotations: {self.annotations}",
            f"Matched: {self.matched}",
            f"Annotations without location: {len(self.unmatched_annotations)}",
            f"Candidates not annotated: {len(self.unrecognized_candidates)}",
            f"Merged result: {self.total}",
        ]


def _label(site: Site) -> str:
    return str(site.get("name") or site.get("id") or "<unnamed>")


def find_matching_candidate(candidates: Sequence[Site], annotation: Site) -> Optional[Site]:
    """First candidate sharing an image filename with `annotation`, not the best overlap."""
    for candidate in candidates:
        if shares_filename(candidate.get("images"), annotation.get("images")):
            return candidate
    return None


def union_images(first: Sequence[str] | None, second: Sequence[str] | None) -> List[str]:
    """Concatenate, dropping later references whose filename was already seen."""
    seen = set()
    result = []
    for ref in list(first or []) + list(second or []):
        name = image_filename(ref)
        if name in seen:
            continue
        seen.add(name)
        result.append(ref)
    return result


def merge_site(candidate: Site, annotation: Site) -> Site:
    cand_loc = candidate.get("location") or {}
    ann_loc = annotation.get("location")
    if not isinstance(ann_loc, dict):
        ann_loc = {}

    site: Site = {
        "id": annotation.get("id") or candidate.get("id"),
        "name": annotation.get("name") or candidate.get("name"),
        "nameKana": annotation.get("nameKana") or candidate.get("nameKana") or "",
        "category": annotation.get("category") or candidate.get("category"),
        "location": {
            "lat": cand_loc.get("lat"),
            "lng": cand_loc.get("lng"),
            "address": ann_loc.get("address") or cand_loc.get("address") or "",
        },
        "description": annotation.get("description") or candidate.get("description") or "",
        "images": union_images(candidate.get("images"), annotation.get("images")),
        "visitDate": candidate.get("visitDate") or annotation.get("visitDate") or "",
    }
    tags = annotation.get("tags")
    if tags is None:
        tags = candidate.get("tags")
    if tags is not None:
        site["tags"] = copy.deepcopy(tags)
    site["website"] = annotation.get("website") or candidate.get("website") or ""
    return site


def merge_catalog(candidates: Sequence[Site], annotations: Sequence[Site]) -> Tuple[Dict[str, List[Site]], MergeReport]:
    """Return the `{temples: [...]}` catalog and the match statistics."""
    report = MergeReport(candidates=len(candidates), annotations=len(annotations))
    merged: List[Site] = []

    for annotation in annotations:
        candidate = find_matching_candidate(candidates, annotation)
        if candidate is not None:
            merged.append(merge_site(candidate, annotation))
            report.matched += 1
        else:
            logging.warning("%s: no matching photo location found", _label(annotation))
            report.unmatched_annotations.append(_label(annotation))
            merged.append(copy.deepcopy(annotation))

    for candidate in candidates:
        found = any(shares_filename(candidate.get("images"), site.get("images")) for site in merged)
        if not found:
            logging.info("Added %s (not recognized in annotations)", _label(candidate))
            report.unrecognized_candidates.append(_label(candidate))
            merged.append(copy.deepcopy(candidate))

    report.total = len(merged)
    return {"temples": merged}, report
