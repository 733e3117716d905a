from __future__ import annotations

import json
from collections.abc import Sequence
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class KitError(Exception):
    """Base class for publishing kit failures."""

    exit_code = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class KitValidationError(KitError):
    exit_code = 2


class KitVariant(str, Enum):
    """Which kit contract the model is asked to fill."""

    BASIC = "basic"
    EXTENDED = "extended"

    @classmethod
    def from_raw(cls, value: str) -> KitVariant:
        lowered = value.strip().lower()
        try:
            return cls(lowered)
        except ValueError as exc:
            raise KitValidationError("Kit variant must be basic or extended.") from exc


class TitleStyle(str, Enum):
    BENEFIT = "benefit"
    INTRIGUE = "intrigue"
    KEYWORD = "keyword"

    @classmethod
    def from_raw(cls, value: str) -> TitleStyle:
        lowered = value.strip().lower()
        try:
            return cls(lowered)
        except ValueError as exc:
            raise KitValidationError("--title must be benefit, intrigue, or keyword.") from exc


def _strip(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("value must be a string")
    return value.strip()


class Titles(BaseModel):
    model_config = ConfigDict(extra="forbid")

    benefit_driven: str = Field(..., min_length=3)
    intrigue_driven: str = Field(..., min_length=3)
    keyword_focused: str = Field(..., min_length=3)

    @field_validator("benefit_driven", "intrigue_driven", "keyword_focused", mode="before")
    @classmethod
    def _strip_titles(cls, value: Any) -> str:
        return _strip(value)

    def by_style(self, style: TitleStyle) -> str:
        if style is TitleStyle.BENEFIT:
            return self.benefit_driven
        if style is TitleStyle.INTRIGUE:
            return self.intrigue_driven
        return self.keyword_focused

    def labelled(self) -> list[tuple[str, str]]:
        return [
            ("Benefit", self.benefit_driven),
            ("Intrigue", self.intrigue_driven),
            ("SEO", self.keyword_focused),
        ]


class ThumbnailConcept(BaseModel):
    model_config = ConfigDict(extra="forbid")

    concept_name: str
    psychology: str
    visual_description: str
    ai_image_prompt: str = Field(..., min_length=5)

    @field_validator("concept_name", "psychology", "visual_description", "ai_image_prompt", mode="before")
    @classmethod
    def _strip_fields(cls, value: Any) -> str:
        return _strip(value)


class Scene(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scene_number: int = Field(..., ge=1)
    visual: str
    audio: str
    duration: str
    retention_tactic: str = Field(
        ...,
        description="Specific tactic to keep viewers watching (e.g. 'Pattern Interrupt', 'Loop Opening').",
    )


class Hook(BaseModel):
    model_config = ConfigDict(extra="forbid")

    style: str = Field(..., description="e.g. 'Negative Framing', 'Authority', 'Story Start'")
    script: str
    psychology: str


class Persona(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    pain_points: list[str]
    motivations: str

    @field_validator("pain_points", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            raise TypeError("value must be a list")
        return [str(item).strip() for item in value if str(item).strip()]


class _KitFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    titles: Titles
    description: str = Field(..., min_length=10)
    tags: str = Field(..., description="Comma-separated search tags.")
    hashtags: str = Field(..., description="Space-separated hashtags, each starting with '#'.")
    thumbnails: list[ThumbnailConcept] = Field(..., min_length=1)
    scenes: list[Scene] = Field(..., min_length=1)

    @field_validator("description", "tags", "hashtags", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        return _strip(value)


class BasicKit(_KitFields):
    """Titles, description, tags, thumbnail concepts and the scene script."""

    variant: Literal["basic"] = "basic"


class ExtendedKit(_KitFields):
    """Basic kit plus opening hooks, a viewer persona and a competitor gap analysis."""

    variant: Literal["extended"] = "extended"
    hooks: list[Hook] = Field(..., min_length=1)
    persona: Persona
    competitor_gap: str = Field(..., description="Analysis of why this specific angle beats existing content.")


PublishingKit = Annotated[BasicKit | ExtendedKit, Field(discriminator="variant")]

_KIT_ADAPTER: TypeAdapter[BasicKit | ExtendedKit] = TypeAdapter(PublishingKit)


def kit_model_for(variant: KitVariant) -> type[BasicKit] | type[ExtendedKit]:
    return ExtendedKit if variant is KitVariant.EXTENDED else BasicKit


def variant_of(kit: BasicKit | ExtendedKit) -> KitVariant:
    return KitVariant(kit.variant)


def parse_kit(payload: Any) -> BasicKit | ExtendedKit:
    """Validate a kit payload, dispatching on its ``variant`` tag."""
    return _KIT_ADAPTER.validate_python(payload)


def render_json(kit: BasicKit | ExtendedKit) -> str:
    return json.dumps(kit.model_dump(), indent=2, ensure_ascii=False)


def render_markdown(
    kit: BasicKit | ExtendedKit,
    *,
    selected_title: str | None = None,
    thumbnails: Sequence[str | None] = (),
) -> str:
    """Render the kit as a Markdown production document."""
    lines: list[str] = ["## 01 SEO & Metadata", "", "### Titles", ""]
    for label, title in kit.titles.labelled():
        marker = " (selected)" if selected_title == title else ""
        lines.append(f"- **{label}:** {title}{marker}")
    lines.extend(["", "### Description", "", kit.description, ""])
    lines.extend(["### Hashtags", "", kit.hashtags or "None.", ""])
    lines.extend(["### Search tags", "", f"`{kit.tags}`", ""])

    lines.extend(["## 02 Production Blueprint", ""])
    lines.append("| # | Duration | Visual | Audio/Dialogue | Retention |")
    lines.append("| --- | --- | --- | --- | --- |")
    for scene in kit.scenes:
        lines.append(
            f"| {scene.scene_number} | {_cell(scene.duration)} | {_cell(scene.visual)} | "
            f"{_cell(scene.audio)} | {_cell(scene.retention_tactic)} |"
        )
    lines.append("")

    lines.extend(["## 03 Visual Assets", ""])
    for index, concept in enumerate(kit.thumbnails):
        lines.append(f"### {concept.concept_name}")
        lines.append("")
        lines.append(f"_{concept.psychology}_")
        lines.append("")
        lines.append(concept.visual_description)
        lines.append("")
        lines.append(f"Prompt: `{concept.ai_image_prompt}`")
        image = thumbnails[index] if index < len(thumbnails) else None
        if image:
            lines.append("")
            lines.append(f"![{concept.concept_name}]({image})")
        lines.append("")

    if isinstance(kit, ExtendedKit):
        lines.extend(["## 04 Strategy", "", "### Hooks", ""])
        for hook in kit.hooks:
            lines.append(f"- **{hook.style}:** {hook.script} ({hook.psychology})")
        lines.extend(["", f"### Persona: {kit.persona.name}", ""])
        lines.extend(f"- {pain}" for pain in kit.persona.pain_points)
        lines.extend(["", f"Motivations: {kit.persona.motivations}", ""])
        lines.extend(["### Competitor gap", "", kit.competitor_gap, ""])

    return "\n".join(lines).rstrip() + "\n"


def _cell(value: str) -> str:
    return " ".join(value.split()).replace("|", "\\|")


__all__ = [
    "BasicKit",
    "ExtendedKit",
    "Hook",
    "KitError",
    "KitValidationError",
    "KitVariant",
    "Persona",
    "PublishingKit",
    "Scene",
    "ThumbnailConcept",
    "TitleStyle",
    "Titles",
    "kit_model_for",
    "parse_kit",
    "render_json",
    "render_markdown",
    "variant_of",
]
