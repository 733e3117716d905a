from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

Reporter = Callable[[str], None] | None

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(value: str, *, fallback: str = "") -> str:
    """Lowercase ``value`` and collapse everything but ASCII letters and digits into dashes."""
    slug = _SLUG_SEPARATORS.sub("-", value.lower()).strip("-")
    return slug or fallback


def report(reporter: Reporter, message: str) -> None:
    if reporter:
        reporter(message)


def current_timestamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


def artifact_path(destination: Path, label: str, suffix: str, *, timestamp: str | None = None) -> Path:
    """Return ``<destination>/<stamp>-<slug><suffix>`` for prompt artifacts."""
    stamp = timestamp or current_timestamp()
    return destination / f"{stamp}-{slugify(label, fallback='untitled')}{suffix}"


def thumbnail_path(destination: Path, index: int, concept_name: str) -> Path:
    """Return ``<destination>/NN-<slug>.png`` for the thumbnail at zero-based ``index``."""
    return destination / f"{index + 1:02d}-{slugify(concept_name, fallback='thumbnail')}.png"


__all__ = ["Reporter", "artifact_path", "current_timestamp", "report", "slugify", "thumbnail_path"]
