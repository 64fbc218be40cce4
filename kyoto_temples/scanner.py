"""Scanner: list the image files of a directory in listing order."""
from pathlib import Path
from typing import Iterator, List

DEFAULT_EXTENSIONS = {".jpg", ".jpeg", ".png", ".heic"}


def is_image(path: Path, extensions=None) -> bool:
    exts = {e.lower() for e in (extensions or [])} or DEFAULT_EXTENSIONS
    return path.suffix.lower() in exts


def scan_images(source, extensions: List[str] = None) -> Iterator[Path]:
    """Yield Path objects for the image files directly inside `source`.

    Args:
        source: directory to scan (not recursed)
        extensions: optional list of extensions to include (case-insensitive)

    Files are yielded in the order the filesystem lists them; nothing is sorted.
    """
    p = Path(source)
    if not p.is_dir():
        raise FileNotFoundError(f"Image directory not found: {source}")

    for fp in p.iterdir():
        if not fp.is_file():
            continue
        if is_image(fp, extensions):
            yield fp
