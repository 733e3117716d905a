from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, TypedDict, cast

import yaml

KitVariantName = Literal["basic", "extended"]

PROJECT_FILENAMES = ("tubekit.yaml", "tubekit.yml")


class ProjectConfig(TypedDict):
    """Channel context injected into every prompt."""

    channel_name: str
    niche: str
    audience: str
    tone: str
    keywords: list[str]
    language: str
    kit_variant: KitVariantName


DEFAULT_PROJECT: ProjectConfig = {
    "channel_name": "My Channel",
    "niche": "general",
    "audience": "general viewers",
    "tone": "energetic",
    "keywords": [],
    "language": "en",
    "kit_variant": "extended",
}


def default_project() -> ProjectConfig:
    """Return a copy of the default project configuration."""
    return _merge_with_defaults({})


def load_project(name: str, *, base_dir: Path | None = None) -> ProjectConfig:
    """Load a project by name (``<name>.yaml``/``<name>.yml``) or explicit path."""
    path = _resolve_project_path(name, base_dir=base_dir)
    return _load_project_file(path)


def load_default_project(*, base_dir: Path | None = None) -> tuple[ProjectConfig, str | None]:
    """Load ``tubekit.yaml`` (or ``.yml``) from ``base_dir`` if present.

    Returns the configuration and the path it came from, or the defaults and ``None``.
    """
    directory = base_dir or Path.cwd()
    for filename in PROJECT_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return _load_project_file(candidate), str(candidate)
    return default_project(), None


def _resolve_project_path(name: str, *, base_dir: Path | None) -> Path:
    explicit = Path(name).expanduser()
    if explicit.suffix in {".yaml", ".yml"}:
        if explicit.is_file():
            return explicit
        raise FileNotFoundError(f"Project config {explicit} not found")

    directory = base_dir or Path.cwd()
    for suffix in (".yaml", ".yml"):
        candidate = directory / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"Project config {directory / name}.yaml not found")


def _load_project_file(path: Path) -> ProjectConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:  # pragma: no cover - surfaced by CLI
        raise OSError(f"Unable to read project config {path}: {exc}") from exc

    try:
        raw_data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw_data, Mapping):
        raise ValueError(f"Project config {path} must be a mapping")

    return _merge_with_defaults(raw_data)


def _merge_with_defaults(data: Mapping[str, Any]) -> ProjectConfig:
    merged: dict[str, Any] = {
        "channel_name": DEFAULT_PROJECT["channel_name"],
        "niche": DEFAULT_PROJECT["niche"],
        "audience": DEFAULT_PROJECT["audience"],
        "tone": DEFAULT_PROJECT["tone"],
        "keywords": list(DEFAULT_PROJECT["keywords"]),
        "language": DEFAULT_PROJECT["language"],
        "kit_variant": DEFAULT_PROJECT["kit_variant"],
    }

    for key in ("channel_name", "niche", "audience", "tone", "language"):
        if (value := data.get(key)) is not None:
            merged[key] = str(value).strip()

    merged["keywords"] = _normalize_keywords(data.get("keywords", merged["keywords"]))

    if (variant := data.get("kit_variant")) is not None:
        merged["kit_variant"] = _normalize_variant(variant)

    return cast(ProjectConfig, merged)


def _normalize_keywords(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        candidates = [piece.strip() for piece in value.split(",")]
    elif isinstance(value, list):
        candidates = [str(item).strip() for item in value]
    else:
        raise ValueError("Project keywords must be a list or comma-separated string.")

    return [item for item in candidates if item]


def _normalize_variant(value: Any) -> KitVariantName:
    lowered = str(value).strip().lower()
    if lowered not in ("basic", "extended"):
        raise ValueError("Project kit_variant must be 'basic' or 'extended'.")
    return cast(KitVariantName, lowered)


__all__ = [
    "DEFAULT_PROJECT",
    "PROJECT_FILENAMES",
    "KitVariantName",
    "ProjectConfig",
    "default_project",
    "load_default_project",
    "load_project",
]
