"""Grouper: cluster located images into site candidates and render the draft document."""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List

from .models import ImageRecord, Location, SiteCandidate

# degrees of lat/lng, roughly 100m in Kyoto
DEFAULT_THRESHOLD = 0.001

DRAFT_NOTE = (
    "This file was generated automatically. "
    "Fill in name, nameKana, category, address and description by hand."
)


def degree_distance(a: Location, b: Location) -> float:
    """Euclidean distance in raw lat/lng degree space (not great-circle)."""
    return math.sqrt((a.lat - b.lat) ** 2 + (a.lng - b.lng) ** 2)


def cluster_records(records: Iterable[ImageRecord], threshold: float = DEFAULT_THRESHOLD) -> List[SiteCandidate]:
    """Greedy single-pass clustering of `records` by location.

    Each located record joins the first cluster, in creation order, whose anchor
    lies strictly closer than `threshold`; otherwise it anchors a new cluster.
    Membership depends on input order: first qualifying cluster wins, not the
    nearest. Anchors and dates never change after a cluster is opened.
    Records without a location are skipped.
    """
    clusters: List[SiteCandidate] = []
    for record in records:
        if record.location is None:
            continue
        for cluster in clusters:
            if degree_distance(cluster.location, record.location) < threshold:
                cluster.images.append(record.reference)
                break
        else:
            clusters.append(SiteCandidate(
                location=record.location,
                images=[record.reference],
                date=record.captured_on,
            ))
    return clusters


def build_draft(candidates: List[SiteCandidate]) -> Dict[str, Any]:
    """Return the intermediate `{temples, _note}` document for review."""
    temples = [c.to_draft(index) for index, c in enumerate(candidates, start=1)]
    logging.info("Detected %d sites", len(temples))
    return {"temples": temples, "_note": DRAFT_NOTE}
