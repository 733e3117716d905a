"""Scoring category definitions shared by the scoring and refine prompts."""

from __future__ import annotations

CATEGORY_DEFINITIONS: dict[str, str] = {
    "Clarity & Relevance": (
        "how directly titles, thumbnail and opening scenes tell the viewer what the video delivers; "
        "match between promise and topic; no vague or misleading framing"
    ),
    "Emotional Impact": (
        "stakes, tension and payoff; relatable frustration or aspiration; faces and reactions in "
        "thumbnails; language that makes the viewer feel something"
    ),
    "Curiosity Gap": (
        "open loops the viewer needs closed; withheld reveals; pattern interrupts; titles that raise a "
        "question without answering it"
    ),
    "Visual Appeal": (
        "thumbnail contrast and readability at small sizes; single focal point; colour and composition; "
        "visual pacing of the scene script"
    ),
    "SEO Strength": (
        "primary keyword placement in titles and the first lines of the description; searchable tags; "
        "relevant hashtags; alignment with how the audience phrases the query"
    ),
}


def render_category_guide() -> str:
    return "\n".join(f"- {name}: {definition}" for name, definition in CATEGORY_DEFINITIONS.items())


__all__ = ["CATEGORY_DEFINITIONS", "render_category_guide"]
