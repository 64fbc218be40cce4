"""Pipeline configuration: file locations and tunables, resolved from one project root."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict

from .errors import MalformedDocumentError
from .grouper import DEFAULT_THRESHOLD
from .utils.paths import normalize_user_path

ROOT_ENV_VAR = "KYOTO_TEMPLES_ROOT"
OVERRIDES_FILENAME = "pipeline.json"

_PATH_KEYS = ("images_dir", "generated_path", "annotations_path", "catalog_path")


@dataclass(frozen=True)
class PipelineConfig:
    root: Path
    images_dir: Path
    generated_path: Path
    annotations_path: Path
    catalog_path: Path
    image_prefix: str = "data/images"
    cluster_threshold: float = DEFAULT_THRESHOLD
    workers: int = 1

    @classmethod
    def from_root(cls, root: Path) -> "PipelineConfig":
        root = Path(root)
        data_dir = root / "public" / "data"
        return cls(
            root=root,
            images_dir=data_dir / "images",
            generated_path=data_dir / "temples-generated.json",
            annotations_path=data_dir / "temples-from-gemini.json",
            catalog_path=data_dir / "temples.json",
        )

    @classmethod
    def load(cls, root: Path | None = None) -> "PipelineConfig":
        """Resolve the root (argument, then $KYOTO_TEMPLES_ROOT, then cwd) and
        apply overrides from `<root>/pipeline.json` when present."""
        if root is None:
            root = normalize_user_path(os.environ.get(ROOT_ENV_VAR)) or Path.cwd()
        root = Path(root).expanduser()
        if not root.is_absolute():
            root = Path.cwd() / root
        config = cls.from_root(root)
        overrides_path = config.root / OVERRIDES_FILENAME
        if not overrides_path.exists():
            return config
        try:
            raw = json.loads(overrides_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedDocumentError(overrides_path, f"invalid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise MalformedDocumentError(overrides_path, "expected a JSON object")
        return config.with_overrides(raw, source=overrides_path)

    def with_overrides(self, raw: Dict[str, Any], source: Path | None = None) -> "PipelineConfig":
        changes: Dict[str, Any] = {}
        for key in _PATH_KEYS:
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                path = Path(value.strip()).expanduser()
                changes[key] = path if path.is_absolute() else self.root / path
        if isinstance(raw.get("image_prefix"), str):
            changes["image_prefix"] = raw["image_prefix"].strip().rstrip("/")
        try:
            if "cluster_threshold" in raw:
                changes["cluster_threshold"] = float(raw["cluster_threshold"])
            if "workers" in raw:
                changes["workers"] = max(1, int(raw["workers"]))
        except (TypeError, ValueError) as exc:
            raise MalformedDocumentError(source, f"invalid numeric setting: {exc}") from exc
        return replace(self, **changes)
