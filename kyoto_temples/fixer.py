"""Fixer: repair image references whose filename case differs from the file on disk."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from .utils.paths import image_filename


@dataclass
class FixReport:
    fixed: int = 0
    missing: List[Tuple[str, str]] = field(default_factory=list)


def fix_image_paths(sites: List[Dict[str, Any]], existing_filenames: Iterable[str]) -> FixReport:
    """Rewrite `images` of each site in place to use the actual filename case.

    References with no file under any case are kept as they are and reported
    as missing, as (site name, reference) pairs.
    """
    by_lower = {}
    for name in existing_filenames:
        by_lower[name.lower()] = name

    report = FixReport()
    for site in sites:
        if not isinstance(site.get("images"), list):
            continue
        images = []
        for ref in site["images"]:
            name = image_filename(ref)
            actual = by_lower.get(name.lower())
            if actual is None:
                logging.warning("Missing file: %s (site: %s)", ref, site.get("name"))
                report.missing.append((str(site.get("name")), ref))
            elif actual != name:
                fixed = ref[: len(ref) - len(name)] + actual
                logging.info("Fixed: %s -> %s", ref, fixed)
                report.fixed += 1
                ref = fixed
            images.append(ref)
        site["images"] = images
    return report
