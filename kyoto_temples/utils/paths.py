"""Path helpers: image reference filenames and user-supplied root paths."""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, Set

_WINDOWS_DRIVE_PATTERN = re.compile(r"^([A-Za-z]):\\(.*)")


def image_filename(reference: str) -> str:
    """Return the filename part of an image reference (`data/images/a.jpg` -> `a.jpg`)."""
    return reference.replace("\\", "/").rsplit("/", 1)[-1]


def filename_set(references: Iterable[str] | None) -> Set[str]:
    return {image_filename(ref) for ref in references or []}


def shares_filename(left: Iterable[str] | None, right: Iterable[str] | None) -> bool:
    """True when the two reference lists name at least one common file, ignoring directories."""
    return not filename_set(left).isdisjoint(filename_set(right))


def _windows_to_wsl(path: str) -> str:
    match = _WINDOWS_DRIVE_PATTERN.match(path)
    if not match:
        return path
    drive = match.group(1).lower()
    rest = match.group(2).replace("\\", "/")
    return f"/mnt/{drive}/{rest}"


def normalize_user_path(value: str | None) -> Path | None:
    """Normalize a user-supplied path (env var, override file) for the current runtime.

    On POSIX a Windows drive path such as ``C:\\photos`` is mapped to its WSL mount.
    """
    if not value or not value.strip():
        return None
    value = os.path.expanduser(value.strip())
    if os.name == "posix":
        value = _windows_to_wsl(value)
    return Path(value)
