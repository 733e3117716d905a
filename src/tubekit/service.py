"""Client for the generative-AI content service.

Every model interaction goes through a ``ContentService`` instance that the caller
constructs and passes around; there is no module-level client.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_ai import Agent, BinaryContent, NativeOutput, UnexpectedModelBehavior
from pydantic_ai.settings import ModelSettings

from .brief import AnalyzedBrief, CreativeBrief
from .common import Reporter, report
from .io_utils import ImageReference
from .kit import BasicKit, ExtendedKit, KitVariant, kit_model_for, variant_of
from .llm import (
    DEFAULT_FAST_MODEL,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_PRO_MODEL,
    LLM_OUTPUT_RETRIES,
    LLM_TIMEOUT_SECONDS,
    OpenAISettings,
    apply_optional_settings,
    make_model,
)
from .project import ProjectConfig
from .prompts import PromptBundle
from .prompts.brief import build_prompt_bundle as build_brief_prompt_bundle
from .prompts.kit import build_prompt_bundle as build_kit_prompt_bundle
from .prompts.kit import build_refine_prompt_bundle
from .prompts.scoring import build_evaluate_prompt_bundle, build_suggest_prompt_bundle
from .weights import Distribution, WeightsValidationError, default_weights, normalize, validate_distribution

logger = logging.getLogger(__name__)

THUMBNAIL_STYLE_PREFIX = "YouTube Thumbnail Style, Vivid, High Definition:"
DEFAULT_IMAGE_SIZE = "1536x1024"

OutputT = TypeVar("OutputT", bound=BaseModel)


class ContentServiceError(Exception):
    """Base class for content service failures."""

    exit_code = 1

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ContentValidationError(ContentServiceError):
    exit_code = 2


class ContentLLMError(ContentServiceError):
    exit_code = 4


class CategoryScores(BaseModel):
    """Raw 0-100 scores per category as returned by the model."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    clarity_relevance: int = Field(..., ge=0, le=100, alias="Clarity & Relevance")
    emotional_impact: int = Field(..., ge=0, le=100, alias="Emotional Impact")
    curiosity_gap: int = Field(..., ge=0, le=100, alias="Curiosity Gap")
    visual_appeal: int = Field(..., ge=0, le=100, alias="Visual Appeal")
    seo_strength: int = Field(..., ge=0, le=100, alias="SEO Strength")

    def as_raw_scores(self) -> dict[str, int]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class ContentService:
    """Generates briefs, kits, scores and thumbnails through an OpenAI-compatible endpoint."""

    settings: OpenAISettings
    fast_model: str = DEFAULT_FAST_MODEL
    pro_model: str = DEFAULT_PRO_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_size: str = DEFAULT_IMAGE_SIZE
    temperature: float = 0.7
    top_p: float | None = None
    seed: int | None = None
    timeout_seconds: float = LLM_TIMEOUT_SECONDS
    reporter: Reporter = field(default=None, compare=False)

    @classmethod
    def from_env(cls, **overrides: Any) -> ContentService:
        return cls(settings=OpenAISettings.from_env(), **overrides)

    def analyze_source(
        self,
        *,
        project: ProjectConfig,
        source_title: str,
        source_text: str,
        image: ImageReference | None = None,
    ) -> CreativeBrief:
        """Distil raw notes (and an optional reference image) into a creative brief."""
        if not source_text.strip() and image is None:
            raise ContentValidationError("Please provide a script or an image for AI analysis.")

        prompts = build_brief_prompt_bundle(
            project=project,
            source_title=source_title,
            source_text=source_text,
            has_image=image is not None,
        )
        attachments = [image] if image is not None else []
        analyzed = self._run(AnalyzedBrief, prompts, model_name=self.fast_model, attachments=attachments)
        return analyzed.to_brief(reference_image=str(image.path) if image is not None else None)

    def generate_kit(
        self,
        brief: CreativeBrief,
        *,
        project: ProjectConfig,
        variant: KitVariant,
    ) -> BasicKit | ExtendedKit:
        if not brief.topic.strip():
            raise ContentValidationError("Strategic brief is incomplete: a topic is required.")
        prompts = build_kit_prompt_bundle(project=project, brief=brief, variant=variant)
        return self._run(kit_model_for(variant), prompts, model_name=self.pro_model)

    def evaluate_kit(self, kit: BasicKit | ExtendedKit) -> Distribution:
        """Score a kit and normalize the scores; falls back to the even split on failure."""
        prompts = build_evaluate_prompt_bundle(kit)
        try:
            scores = self._run(CategoryScores, prompts, model_name=self.fast_model)
            return normalize(scores.as_raw_scores())
        except (ContentServiceError, WeightsValidationError) as exc:
            logger.warning("Kit evaluation failed, using default weights: %s", exc)
            report(self.reporter, f"Evaluation failed ({exc}); using default weights.")
            return default_weights()

    def suggest_weights(self, brief: CreativeBrief) -> Distribution:
        prompts = build_suggest_prompt_bundle(brief)
        scores = self._run(CategoryScores, prompts, model_name=self.fast_model)
        try:
            return normalize(scores.as_raw_scores())
        except WeightsValidationError as exc:  # pragma: no cover - field bounds reject these first
            raise ContentValidationError(str(exc)) from exc

    def refine_kit(
        self,
        *,
        project: ProjectConfig,
        brief: CreativeBrief,
        kit: BasicKit | ExtendedKit,
        selected_title: str,
        weights: Mapping[str, int],
    ) -> BasicKit | ExtendedKit:
        """Rewrite the kit around the selected title, steered by the weight distribution."""
        if not selected_title.strip():
            raise ContentValidationError("Select a title before refining.")
        try:
            checked = validate_distribution(weights)
        except WeightsValidationError as exc:
            raise ContentValidationError(str(exc)) from exc

        prompts = build_refine_prompt_bundle(
            project=project,
            brief=brief,
            kit=kit,
            selected_title=selected_title,
            weights=checked,
        )
        return self._run(kit_model_for(variant_of(kit)), prompts, model_name=self.pro_model)

    def generate_image(self, prompt: str) -> bytes:
        """Synthesize a thumbnail and return the raw image bytes."""
        if not prompt.strip():
            raise ContentValidationError("Image prompt must not be empty.")
        full_prompt = f"{THUMBNAIL_STYLE_PREFIX} {prompt.strip()}"
        report(self.reporter, f"Requesting image from '{self.image_model}' via {self.settings.base_url}")
        try:
            return _invoke_image_model(
                self.settings,
                model_name=self.image_model,
                prompt=full_prompt,
                size=self.image_size,
                timeout_seconds=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise ContentLLMError(f"Image request timed out after {int(self.timeout_seconds)} seconds.") from exc
        except KeyboardInterrupt:
            raise
        except ContentServiceError:
            raise
        except httpx.HTTPError as exc:
            raise ContentLLMError(f"Image download failed: {exc}") from exc
        except Exception as exc:  # pragma: no cover - surfaced to CLI
            raise ContentLLMError(f"Image generation failed: {exc}") from exc

    def _run(
        self,
        output_type: type[OutputT],
        prompts: PromptBundle,
        *,
        model_name: str,
        attachments: Sequence[ImageReference] = (),
    ) -> OutputT:
        agent = self._create_agent(model_name, output_type, instructions=prompts.system_prompt)
        report(self.reporter, f"Calling model '{model_name}' via {self.settings.base_url}")
        logger.debug("Requesting %s from %s", output_type.__name__, model_name)

        try:
            result = _invoke_agent(
                agent,
                _compose_prompt(prompts.user_prompt, attachments),
                output_type=output_type,
                timeout_seconds=self.timeout_seconds,
            )
        except UnexpectedModelBehavior as exc:
            raise ContentValidationError(
                f"LLM response never satisfied the {output_type.__name__} schema, giving up after repeated retries."
            ) from exc
        except ValidationError as exc:
            raise ContentValidationError(f"LLM response failed {output_type.__name__} validation: {exc}") from exc
        except TimeoutError as exc:
            raise ContentLLMError(f"LLM request timed out after {int(self.timeout_seconds)} seconds.") from exc
        except KeyboardInterrupt:
            raise
        except Exception as exc:  # pragma: no cover - surfaced to CLI
            raise ContentLLMError(f"LLM request failed: {exc}") from exc

        report(self.reporter, f"LLM call complete, {output_type.__name__} validated.")
        return result

    def _create_agent(self, model_name: str, output_type: type[OutputT], *, instructions: str) -> Agent[None, OutputT]:
        model_settings = ModelSettings(temperature=self.temperature)
        apply_optional_settings(model_settings, top_p=self.top_p, seed=self.seed)
        model = make_model(model_name, model_settings=model_settings, settings=self.settings)
        return Agent[None, OutputT](
            model=model,
            output_type=NativeOutput(output_type, name=output_type.__name__, strict=True),
            instructions=instructions,
            output_retries=LLM_OUTPUT_RETRIES,
        )


def _compose_prompt(text: str, attachments: Sequence[ImageReference]) -> str | list[str | BinaryContent]:
    if not attachments:
        return text
    parts: list[str | BinaryContent] = [text]
    parts.extend(BinaryContent(data=item.data, media_type=item.media_type) for item in attachments)
    return parts


def _invoke_agent(
    agent: Agent[None, OutputT],
    prompt: str | list[str | BinaryContent],
    *,
    output_type: type[OutputT],
    timeout_seconds: float,
) -> OutputT:
    """Run the agent with a timeout using asyncio."""

    async def _call() -> OutputT:
        run = await agent.run(prompt)
        output = getattr(run, "output", None)
        if isinstance(output, output_type):
            return output
        if isinstance(output, BaseModel):
            return output_type.model_validate(output.model_dump())
        if isinstance(output, dict):
            return output_type.model_validate(output)
        raise TypeError(f"LLM output is not a {output_type.__name__} instance")

    return asyncio.run(asyncio.wait_for(_call(), timeout_seconds))


def _invoke_image_model(
    settings: OpenAISettings,
    *,
    model_name: str,
    prompt: str,
    size: str,
    timeout_seconds: float,
) -> bytes:
    provider = settings.make_provider()
    request: dict[str, Any] = {"model": model_name, "prompt": prompt, "n": 1, "size": size}
    if model_name.lower().startswith("dall-e"):
        # DALL-E answers with a URL unless base64 is requested explicitly.
        request["response_format"] = "b64_json"

    async def _call() -> bytes:
        response = await provider.client.images.generate(**request)
        image = response.data[0] if response.data else None
        if image is not None and image.b64_json:
            return base64.b64decode(image.b64_json)
        if image is not None and image.url:
            return await _download_image(image.url, timeout_seconds=timeout_seconds)
        raise ContentLLMError("Image generation failed: the model returned no image data.")

    return asyncio.run(asyncio.wait_for(_call(), timeout_seconds))


async def _download_image(url: str, *, timeout_seconds: float) -> bytes:
    async with httpx.AsyncClient(timeout=timeout_seconds, follow_redirects=True) as client:
        response = await client.get(url)
        response.raise_for_status()
        return response.content


__all__ = [
    "THUMBNAIL_STYLE_PREFIX",
    "CategoryScores",
    "ContentLLMError",
    "ContentService",
    "ContentServiceError",
    "ContentValidationError",
]
