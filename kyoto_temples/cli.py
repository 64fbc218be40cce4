"""Operator commands. None take flags; locations come from PipelineConfig.load().

Exit code 0 on success, 1 on any fatal error (no output is written then).
"""
from __future__ import annotations

import logging
import sys
from typing import Callable

from .config import PipelineConfig
from .errors import CatalogError, MissingInputError
from .pipeline import fix_catalog_paths, generate_draft, merge_documents

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)


def _run(step: Callable[[PipelineConfig], None]) -> int:
    configure_logging()
    try:
        config = PipelineConfig.load()
        step(config)
    except CatalogError as exc:
        logging.error("%s", exc)
        if isinstance(exc, MissingInputError) and exc.hint:
            logging.error("%s", exc.hint)
        return 1
    except OSError as exc:
        logging.error("I/O error: %s", exc)
        return 1
    return 0


def _generate(config: PipelineConfig) -> None:
    logging.info("Generating the site draft from image metadata...")
    generate_draft(config)
    logging.info("Next steps:")
    logging.info("1. Review %s", config.generated_path.name)
    logging.info("2. Fill in name, nameKana, category, address and description")
    logging.info("3. Run kyoto-merge with the annotation JSON in place")


def _merge(config: PipelineConfig) -> None:
    logging.info("Merging draft and annotations...")
    _catalog, report = merge_documents(config)
    for line in report.summary_lines():
        logging.info(line)
    logging.info("Next steps:")
    logging.info("1. Review %s", config.catalog_path.name)
    logging.info("2. Edit by hand where needed")
    logging.info("3. Reload the application")


def _fix_paths(config: PipelineConfig) -> None:
    report = fix_catalog_paths(config)
    logging.info("===== Summary =====")
    logging.info("Fixed: %d paths", report.fixed)
    logging.info("Missing: %d files", len(report.missing))
    if report.missing:
        logging.info("===== Missing Files =====")
        for name, ref in report.missing:
            logging.info("- %s: %s", name, ref)
    logging.info("%s has been updated", config.catalog_path.name)


def generate_main() -> int:
    return _run(_generate)


def merge_main() -> int:
    return _run(_merge)


def fix_paths_main() -> int:
    return _run(_fix_paths)
