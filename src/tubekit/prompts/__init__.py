"""Prompt templates for every model call Tubekit makes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tubekit.common import artifact_path, current_timestamp


@dataclass(frozen=True)
class PromptBundle:
    """Container for the system and user prompts."""

    system_prompt: str
    user_prompt: str


def save_prompt_artifacts(
    prompts: PromptBundle,
    *,
    destination: Path,
    label: str,
    response: str | None = None,
    timestamp: str | None = None,
) -> tuple[Path, Path | None]:
    """Persist the prompt pair (and optionally the JSON response) for debugging."""
    destination.mkdir(parents=True, exist_ok=True)
    stamp = timestamp or current_timestamp()
    prompt_path = artifact_path(destination, label, ".prompt.txt", timestamp=stamp)
    payload = f"SYSTEM PROMPT:\n{prompts.system_prompt}\n\nUSER PROMPT:\n{prompts.user_prompt}\n"
    prompt_path.write_text(payload, encoding="utf-8")

    response_path: Path | None = None
    if response is not None:
        response_path = artifact_path(destination, label, ".response.json", timestamp=stamp)
        response_path.write_text(response.rstrip() + "\n", encoding="utf-8")
    return prompt_path, response_path


__all__ = ["PromptBundle", "save_prompt_artifacts"]
