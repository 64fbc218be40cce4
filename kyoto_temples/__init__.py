"""Kyoto Temples package - build the temple and shrine catalog from photo metadata and annotations."""

from .scanner import scan_images
from .extractor import extract_metadata, extract_directory
from .grouper import cluster_records, build_draft
from .merger import merge_catalog
from .fixer import fix_image_paths
from .config import PipelineConfig

__all__ = [
    "scan_images",
    "extract_metadata",
    "extract_directory",
    "cluster_records",
    "build_draft",
    "merge_catalog",
    "fix_image_paths",
    "PipelineConfig",
]
