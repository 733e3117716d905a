from __future__ import annotations

import json
import textwrap
from collections.abc import Mapping

from tubekit.brief import CreativeBrief
from tubekit.kit import BasicKit, ExtendedKit, KitVariant
from tubekit.project import ProjectConfig

from . import PromptBundle
from .categories import render_category_guide

SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are a high-level YouTube Content Strategist.
    Output must be pure JSON, strictly matching the publishing kit schema.
    No explanations, no markdown outside JSON string values.
    Focus deeply on viewer psychology and retention.
    Every scene names a concrete retention tactic.
    Thumbnail image prompts describe a single striking frame, without any text overlay.
    """
).strip()

REFINE_SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are a high-level YouTube Content Strategist performing a high-fidelity synthesis.
    Rewrite the original kit around the selected title, steering every asset by the
    strategy weights: a category with a larger percentage must dominate the decisions.
    Output must be pure JSON, strictly matching the publishing kit schema.
    Keep the selected title verbatim as the title in its slot.
    """
).strip()

_EXTENDED_TASK = (
    "Also include opening hooks (style, script, psychology), a target viewer persona "
    "and a competitor gap analysis explaining why this angle beats existing videos."
)


def build_prompt_bundle(*, project: ProjectConfig, brief: CreativeBrief, variant: KitVariant) -> PromptBundle:
    """Create the prompt bundle for the initial kit generation."""
    user_prompt = build_user_prompt(project=project, brief=brief, variant=variant)
    return PromptBundle(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt)


def build_user_prompt(*, project: ProjectConfig, brief: CreativeBrief, variant: KitVariant) -> str:
    template = textwrap.dedent(
        """\
        {channel_block}

        [TASK]
        Based on the brief, generate a comprehensive Publishing Kit + Production Script:
        three titles (benefit-driven, intrigue-driven, keyword-focused), a description
        template, search tags, hashtags, three thumbnail concepts and a scene-by-scene script.
        {variant_task}

        [BRIEF]
        - Topic: {topic}
        - Audience: {audience}
        - Outcome: {outcome}
        """
    ).strip()

    return template.format(
        channel_block=_channel_block(project),
        variant_task=_EXTENDED_TASK if variant is KitVariant.EXTENDED else "",
        topic=brief.topic,
        audience=brief.audience or project["audience"],
        outcome=brief.outcome or "(not specified)",
    )


def build_refine_prompt_bundle(
    *,
    project: ProjectConfig,
    brief: CreativeBrief,
    kit: BasicKit | ExtendedKit,
    selected_title: str,
    weights: Mapping[str, int],
) -> PromptBundle:
    """Create the prompt bundle for the weighted refinement pass."""
    template = textwrap.dedent(
        """\
        {channel_block}

        [BRIEF]
        - Topic: {topic}
        - Audience: {audience}
        - Outcome: {outcome}

        [SELECTED TITLE]
        {selected_title}

        [TARGETED STRATEGY WEIGHTS]
        {weights_json}

        [CATEGORY GUIDE]
        {category_guide}

        [ORIGINAL KIT]
        {kit_json}

        [TASK]
        Synthesize a high-fidelity YouTube strategy from the original kit.
        """
    ).strip()

    user_prompt = template.format(
        channel_block=_channel_block(project),
        topic=brief.topic,
        audience=brief.audience or project["audience"],
        outcome=brief.outcome or "(not specified)",
        selected_title=selected_title.strip(),
        weights_json=json.dumps(dict(weights), ensure_ascii=False),
        category_guide=render_category_guide(),
        kit_json=json.dumps(kit.model_dump(), ensure_ascii=False),
    )
    return PromptBundle(system_prompt=REFINE_SYSTEM_PROMPT, user_prompt=user_prompt)


def _channel_block(project: ProjectConfig) -> str:
    keywords = ", ".join(project["keywords"]) if project["keywords"] else "none"
    return textwrap.dedent(
        f"""\
        [CHANNEL CONTEXT]
        Channel: {project['channel_name']}
        Niche: {project['niche']}
        Tone: {project['tone']}
        FocusKeywords: {keywords}
        Language: {project['language']}
        Output directive: write every text field in language code '{project['language']}'."""
    )


__all__ = [
    "REFINE_SYSTEM_PROMPT",
    "SYSTEM_PROMPT",
    "build_prompt_bundle",
    "build_refine_prompt_bundle",
    "build_user_prompt",
]
