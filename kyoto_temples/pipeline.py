"""Stage entry points. Each reads its inputs, builds the whole output in memory,
then writes it; any fatal error is raised before the output file is touched."""
from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from .catalog import draft_sites, normalize_annotations, read_json, sites_from_document, write_json
from .config import PipelineConfig
from .errors import MalformedDocumentError, MissingInputError
from .extractor import extract_directory
from .fixer import FixReport, fix_image_paths
from .grouper import build_draft, cluster_records
from .merger import MergeReport, merge_catalog
from .scanner import scan_images


def generate_draft(config: PipelineConfig) -> Dict[str, Any]:
    """Extract metadata from the image directory, cluster it and write the draft."""
    results = extract_directory(config.images_dir, config.image_prefix, workers=config.workers)
    records = [r.record for r in results]
    located = sum(1 for r in records if r.location is not None)
    logging.info("Images with location: %d", located)

    candidates = cluster_records(records, threshold=config.cluster_threshold)
    draft = build_draft(candidates)
    write_json(config.generated_path, draft)
    logging.info("✓ Wrote %s", config.generated_path)
    return draft


def merge_documents(config: PipelineConfig) -> Tuple[Dict[str, Any], MergeReport]:
    """Merge the draft with the annotation document and write the catalog."""
    draft_doc = read_json(config.generated_path, hint="Run kyoto-generate first")
    annotation_doc = read_json(
        config.annotations_path,
        hint=f"Save the annotation JSON as {config.annotations_path.name}",
    )
    candidates = draft_sites(draft_doc, config.generated_path)
    annotations = normalize_annotations(annotation_doc, config.annotations_path)
    logging.info("Draft: %d entries", len(candidates))
    logging.info("Annotations: %d entries", len(annotations))

    catalog, report = merge_catalog(candidates, annotations)
    write_json(config.catalog_path, catalog)
    logging.info("✓ Wrote %s", config.catalog_path)
    return catalog, report


def fix_catalog_paths(config: PipelineConfig) -> FixReport:
    """Align image reference case in the catalog with the files on disk, in place."""
    document = read_json(config.catalog_path, hint="Run kyoto-merge first")
    sites = sites_from_document(document, config.catalog_path)
    for index, site in enumerate(sites):
        if not isinstance(site.get("images"), list):
            raise MalformedDocumentError(config.catalog_path, f"entry {index} has no 'images' array")
    try:
        existing = [p.name for p in scan_images(config.images_dir)]
    except FileNotFoundError:
        raise MissingInputError(config.images_dir, hint="Put the photos in the image directory first") from None

    report = fix_image_paths(sites, existing)
    write_json(config.catalog_path, document)
    return report
