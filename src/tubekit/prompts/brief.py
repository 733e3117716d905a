from __future__ import annotations

import textwrap

from tubekit.project import ProjectConfig

from . import PromptBundle

SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are a YouTube content strategist.
    Read raw source material (scripts, rough notes, transcripts, reference images)
    and distil it into a strategic brief.
    Output must be pure JSON matching the brief schema: topic, audience, outcome.
    The topic is a concrete video subject, not a category.
    The outcome is what the viewer can do or understand after watching.
    """
).strip()


def build_prompt_bundle(
    *,
    project: ProjectConfig,
    source_title: str,
    source_text: str,
    has_image: bool,
) -> PromptBundle:
    """Create the prompt bundle for extracting a brief from source material."""
    user_prompt = build_user_prompt(
        project=project,
        source_title=source_title,
        source_text=source_text,
        has_image=has_image,
    )
    return PromptBundle(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt)


def build_user_prompt(
    *,
    project: ProjectConfig,
    source_title: str,
    source_text: str,
    has_image: bool,
) -> str:
    keywords = ", ".join(project["keywords"]) if project["keywords"] else "none"
    image_note = "A visual reference image is attached; use it as context." if has_image else "No image attached."

    template = textwrap.dedent(
        """\
        [CHANNEL CONTEXT]
        Channel: {channel_name}
        Niche: {niche}
        DefaultAudience: {audience}
        Tone: {tone}
        FocusKeywords: {keywords}
        Language: {language}

        [TASK]
        Analyze the source below and create a YouTube strategic brief.
        {image_note}

        [SOURCE TITLE]
        {source_title}

        [TEXT SOURCE]
        {source_text}
        """
    ).strip()

    return template.format(
        channel_name=project["channel_name"],
        niche=project["niche"],
        audience=project["audience"],
        tone=project["tone"],
        keywords=keywords,
        language=project["language"],
        image_note=image_note,
        source_title=source_title.strip(),
        source_text=source_text.strip() or "(no text provided)",
    )


__all__ = ["SYSTEM_PROMPT", "build_prompt_bundle", "build_user_prompt"]
