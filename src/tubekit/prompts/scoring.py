from __future__ import annotations

import json
import textwrap

from tubekit.brief import CreativeBrief
from tubekit.kit import BasicKit, ExtendedKit
from tubekit.weights import CATEGORIES

from . import PromptBundle
from .categories import render_category_guide

EVALUATE_SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are a strict YouTube packaging reviewer.
    Rate the strategy from 0 to 100 in each scoring category.
    These are independent ratings; their sum does not need to be 100.
    Output must be pure JSON with one integer per category name.
    """
).strip()

SUGGEST_SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are a YouTube growth strategist.
    Decide how much each scoring category should matter for this video.
    Output must be pure JSON with one integer per category name; the values must sum to 100.
    """
).strip()


def build_evaluate_prompt_bundle(kit: BasicKit | ExtendedKit) -> PromptBundle:
    """Prompt asking the model to score an existing kit."""
    competitor_gap = getattr(kit, "competitor_gap", None) or "(no competitor analysis)"
    template = textwrap.dedent(
        """\
        [CATEGORIES]
        {category_guide}

        [TITLES]
        {titles_json}

        [COMPETITOR GAP]
        {competitor_gap}

        [THUMBNAIL CONCEPTS]
        {thumbnails}

        [TASK]
        Evaluate this YouTube strategy. Rate 0-100 for each of: {category_names}.
        """
    ).strip()
    user_prompt = template.format(
        category_guide=render_category_guide(),
        titles_json=json.dumps(kit.titles.model_dump(), ensure_ascii=False),
        competitor_gap=competitor_gap,
        thumbnails="\n".join(f"- {item.concept_name}: {item.psychology}" for item in kit.thumbnails),
        category_names=", ".join(CATEGORIES),
    )
    return PromptBundle(system_prompt=EVALUATE_SYSTEM_PROMPT, user_prompt=user_prompt)


def build_suggest_prompt_bundle(brief: CreativeBrief) -> PromptBundle:
    """Prompt asking the model for the ideal weight distribution for a brief."""
    template = textwrap.dedent(
        """\
        [CATEGORIES]
        {category_guide}

        [BRIEF]
        - Topic: {topic}
        - Audience: {audience}
        - Outcome: {outcome}

        [TASK]
        Identify the target weight distribution for this video. Sum must be 100.
        """
    ).strip()
    user_prompt = template.format(
        category_guide=render_category_guide(),
        topic=brief.topic,
        audience=brief.audience or "(not specified)",
        outcome=brief.outcome or "(not specified)",
    )
    return PromptBundle(system_prompt=SUGGEST_SYSTEM_PROMPT, user_prompt=user_prompt)


__all__ = [
    "EVALUATE_SYSTEM_PROMPT",
    "SUGGEST_SYSTEM_PROMPT",
    "build_evaluate_prompt_bundle",
    "build_suggest_prompt_bundle",
]
