from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .brief import CreativeBrief
from .kit import BasicKit, ExtendedKit, PublishingKit, TitleStyle
from .kit import render_markdown as render_kit_markdown
from .weights import CATEGORIES, TOTAL, Distribution, WeightsValidationError, validate_distribution

Phase = Literal["initial", "refined"]

_BAR_WIDTH = 30


class SessionError(Exception):
    """Base class for session file failures."""

    exit_code = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class SessionValidationError(SessionError):
    exit_code = 2


class SessionFileError(SessionError):
    exit_code = 3


class Session(BaseModel):
    """Working state carried between commands: brief, kit, weights and refinement phase."""

    model_config = ConfigDict(extra="forbid")

    brief: CreativeBrief
    kit: PublishingKit | None = None
    weights: dict[str, int] | None = None
    selected_title: str | None = None
    phase: Phase = "initial"
    thumbnails: list[str | None] = Field(default_factory=list)

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: dict[str, int] | None) -> dict[str, int] | None:
        if value is None:
            return None
        try:
            return validate_distribution(value)
        except WeightsValidationError as exc:
            raise ValueError(str(exc)) from exc

    @model_validator(mode="after")
    def _check_selection(self) -> Session:
        if self.selected_title is not None and self.kit is None:
            raise ValueError("selected_title requires a kit")
        if self.phase == "refined" and self.kit is None:
            raise ValueError("a refined session must contain a kit")
        return self

    def require_kit(self) -> BasicKit | ExtendedKit:
        if self.kit is None:
            raise SessionValidationError("Session has no publishing kit yet; run `tubekit kit` first.")
        return self.kit

    def require_weights(self) -> Distribution:
        if self.weights is None:
            raise SessionValidationError("Session has no category weights yet; run `tubekit kit` first.")
        return dict(self.weights)

    def require_editable(self) -> None:
        """Weights and title selection only change before the refinement pass."""
        if self.phase != "initial":
            raise SessionValidationError(
                "Session is already refined; start over with `tubekit kit` to tune weights again."
            )

    def with_weights(self, weights: Mapping[str, int]) -> Session:
        return self.model_copy(update={"weights": validate_distribution(weights)})

    def select_title(self, style: TitleStyle) -> Session:
        kit = self.require_kit()
        return self.model_copy(update={"selected_title": kit.titles.by_style(style)})


def new_session(
    brief: CreativeBrief,
    kit: BasicKit | ExtendedKit,
    weights: Mapping[str, int],
) -> Session:
    """Start a fresh session in the initial phase with one empty slot per thumbnail concept."""
    return Session(
        brief=brief,
        kit=kit,
        weights=dict(weights),
        thumbnails=[None] * len(kit.thumbnails),
    )


def load_session(path: Path) -> Session:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise SessionFileError(f"Session file not found: {path}") from exc
    except OSError as exc:  # pragma: no cover - surfaced by CLI
        raise SessionFileError(f"Unable to read session: {exc}") from exc

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SessionValidationError(f"Session file is not valid JSON: {exc}") from exc

    try:
        return Session.model_validate(payload)
    except ValidationError as exc:
        raise SessionValidationError(f"Session file failed validation: {exc}") from exc


def save_session(session: Session, path: Path) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_json(session) + "\n", encoding="utf-8")
    except OSError as exc:
        raise SessionFileError(f"Unable to write session {path}: {exc}") from exc
    return path


def render_json(session: Session) -> str:
    return json.dumps(session.model_dump(mode="json"), indent=2, ensure_ascii=False)


def render_weight_chart(weights: Mapping[str, int]) -> str:
    """Render the distribution as fixed-width text bars, one line per category."""
    label_width = max(len(category) for category in CATEGORIES)
    lines = []
    for category in CATEGORIES:
        value = weights.get(category, 0)
        filled = round(value / TOTAL * _BAR_WIDTH)
        bar = "█" * filled + "·" * (_BAR_WIDTH - filled)
        lines.append(f"{category.ljust(label_width)}  {bar} {value:>3}%")
    return "\n".join(lines)


def render_markdown(session: Session) -> str:
    sections: list[str] = [f"# {session.brief.topic}", ""]
    sections.append(f"- Audience: {session.brief.audience or 'not specified'}")
    sections.append(f"- Outcome: {session.brief.outcome or 'not specified'}")
    sections.append(f"- Phase: {session.phase}")
    if session.selected_title:
        sections.append(f"- Selected title: {session.selected_title}")
    sections.append("")

    if session.weights is not None:
        sections.extend(["## Strategy weights", "", "```", render_weight_chart(session.weights), "```", ""])

    if session.kit is None:
        sections.append("_No publishing kit generated yet._")
        return "\n".join(sections).rstrip() + "\n"

    body = render_kit_markdown(
        session.kit,
        selected_title=session.selected_title,
        thumbnails=session.thumbnails,
    )
    return "\n".join(sections) + body


__all__ = [
    "Phase",
    "Session",
    "SessionError",
    "SessionFileError",
    "SessionValidationError",
    "load_session",
    "new_session",
    "render_json",
    "render_markdown",
    "render_weight_chart",
    "save_session",
]
