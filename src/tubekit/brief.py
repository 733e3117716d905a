from __future__ import annotations

import json
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class BriefError(Exception):
    """Raised when a creative brief cannot be loaded or produced."""

    exit_code = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class BriefValidationError(BriefError):
    exit_code = 2


class BriefFileError(BriefError):
    exit_code = 3


class CreativeBrief(BaseModel):
    """The short strategic brief every kit is generated from."""

    model_config = ConfigDict(extra="forbid")

    topic: str = Field(..., min_length=1)
    audience: str = ""
    outcome: str = ""
    reference_image: str | None = None

    @field_validator("topic", "audience", "outcome", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise TypeError("value must be a string")
        return value.strip()

    @field_validator("reference_image", mode="before")
    @classmethod
    def _strip_reference(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value).strip() or None


class AnalyzedBrief(BaseModel):
    """Output shape requested from the model when extracting a brief from source material."""

    model_config = ConfigDict(extra="forbid")

    topic: str = Field(..., min_length=3)
    audience: str = Field(..., min_length=3)
    outcome: str = Field(..., min_length=3)

    def to_brief(self, *, reference_image: str | None = None) -> CreativeBrief:
        return CreativeBrief(
            topic=self.topic,
            audience=self.audience,
            outcome=self.outcome,
            reference_image=reference_image,
        )


def load_brief(path: Path) -> CreativeBrief:
    """Load a brief from YAML or JSON.

    A relative ``reference_image`` is resolved against the brief's directory.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise BriefFileError(f"Brief file not found: {path}") from exc
    except OSError as exc:  # pragma: no cover - surfaced by CLI
        raise BriefFileError(f"Unable to read brief: {exc}") from exc

    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise BriefValidationError(f"Brief file is not valid YAML/JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise BriefValidationError(f"Brief file {path} must contain a mapping.")

    try:
        brief = CreativeBrief.model_validate(payload)
    except ValidationError as exc:
        raise BriefValidationError(f"Brief failed validation: {exc}") from exc

    if brief.reference_image is not None:
        image_path = Path(brief.reference_image).expanduser()
        if not image_path.is_absolute():
            image_path = path.parent / image_path
        brief = brief.model_copy(update={"reference_image": str(image_path)})
    return brief


def render_yaml(brief: CreativeBrief) -> str:
    payload = brief.model_dump(exclude_none=True)
    return cast(str, yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))


def render_json(brief: CreativeBrief) -> str:
    return json.dumps(brief.model_dump(exclude_none=True), indent=2, ensure_ascii=False)


__all__ = [
    "AnalyzedBrief",
    "BriefError",
    "BriefFileError",
    "BriefValidationError",
    "CreativeBrief",
    "load_brief",
    "render_json",
    "render_yaml",
]
