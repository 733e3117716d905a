from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import frontmatter


IMAGE_MEDIA_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "image/gif"})


@dataclass(frozen=True)
class SourceDetails:
    """Source material (script, rough notes, transcript) and its front matter."""

    path: Path
    title: str
    body: str
    metadata: dict[str, Any]
    truncated: bool
    max_chars: int


@dataclass(frozen=True)
class ImageReference:
    """Visual reference passed to the model alongside the source text."""

    path: Path
    data: bytes
    media_type: str


def load_source(path: Path, *, max_chars: int) -> SourceDetails:
    """Load a Markdown/text source, honouring YAML front matter when present."""
    try:
        post = frontmatter.load(path)
    except OSError:
        raise
    except Exception as exc:  # yaml and decoding errors from front matter parsing
        raise ValueError(f"Unable to parse source {path}: {exc}") from exc

    metadata = dict(post.metadata or {})
    body, truncated = truncate(post.content.strip(), max_chars)
    title = metadata.get("title") or path.stem.replace("_", " ").replace("-", " ").title()

    return SourceDetails(
        path=path,
        title=str(title),
        body=body,
        metadata=metadata,
        truncated=truncated,
        max_chars=max_chars,
    )


def load_image(path: Path) -> ImageReference:
    """Read an image file and infer its media type from the extension."""
    media_type, _ = mimetypes.guess_type(path.name)
    if media_type not in IMAGE_MEDIA_TYPES:
        allowed = ", ".join(sorted(IMAGE_MEDIA_TYPES))
        raise ValueError(f"Unsupported image type for {path}; expected one of: {allowed}")
    data = path.read_bytes()
    if not data:
        raise ValueError(f"Image file {path} is empty")
    return ImageReference(path=path, data=data, media_type=media_type)


def truncate(value: str, max_chars: int) -> tuple[str, bool]:
    """Truncate text to ``max_chars`` characters, marking the cut with an ellipsis."""
    if len(value) <= max_chars:
        return value, False
    return value[: max_chars - 1].rstrip() + " …", True


__all__ = ["ImageReference", "SourceDetails", "load_image", "load_source", "truncate"]
