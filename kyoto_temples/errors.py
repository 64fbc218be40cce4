from __future__ import annotations

from pathlib import Path


class CatalogError(Exception):
    """Base exception for the catalog pipeline."""


class MissingInputError(CatalogError):
    """Raised when a required input file or directory does not exist."""

    def __init__(self, path: Path, hint: str = ""):
        self.path = Path(path)
        self.hint = hint
        super().__init__(f"Required input not found: {self.path}")


class MalformedDocumentError(CatalogError):
    """Raised when a JSON document cannot be parsed or has the wrong shape."""

    def __init__(self, path: Path | None, reason: str):
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = f"{self.path}: " if self.path is not None else ""
        super().__init__(f"{where}{reason}")


class MetadataReadError(CatalogError):
    """Raised when no reader can decode the metadata of a single image."""
