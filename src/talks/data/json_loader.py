"""Low-level JSON helper for repositories."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import DataLoadError

logger = logging.getLogger(__name__)


def load_json(path: Path) -> object:
    """Read and decode ``path``, raising DataLoadError on any failure."""
    logger.debug("Loading talk definitions from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Talks file not found: {path}") from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read talks file: {path}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc
