import json
from collections.abc import Callable
from pathlib import Path

from tubekit.brief import CreativeBrief
from tubekit.kit import BasicKit, ExtendedKit, KitVariant
from tubekit.project import default_project
from tubekit.prompts import PromptBundle, save_prompt_artifacts
from tubekit.prompts.brief import build_prompt_bundle as build_brief_prompt_bundle
from tubekit.prompts.categories import CATEGORY_DEFINITIONS, render_category_guide
from tubekit.prompts.kit import build_prompt_bundle as build_kit_prompt_bundle
from tubekit.prompts.kit import build_refine_prompt_bundle
from tubekit.prompts.scoring import build_evaluate_prompt_bundle, build_suggest_prompt_bundle
from tubekit.weights import CATEGORIES, preset_weights


def test_category_definitions_follow_category_order() -> None:
    assert tuple(CATEGORY_DEFINITIONS) == CATEGORIES
    assert render_category_guide().splitlines()[0].startswith("- Clarity & Relevance:")


def test_brief_prompt_includes_channel_context_and_source() -> None:
    project = default_project()
    project["keywords"] = ["budget travel", "hostels"]

    bundle = build_brief_prompt_bundle(
        project=project,
        source_title="Lisbon on 30 euros",
        source_text="Rough notes about cheap food and free walking tours.",
        has_image=True,
    )

    assert "[CHANNEL CONTEXT]" in bundle.user_prompt
    assert "FocusKeywords: budget travel, hostels" in bundle.user_prompt
    assert "A visual reference image is attached" in bundle.user_prompt
    assert "[TEXT SOURCE]\nRough notes about cheap food" in bundle.user_prompt


def test_brief_prompt_marks_missing_text() -> None:
    bundle = build_brief_prompt_bundle(
        project=default_project(),
        source_title="Untitled",
        source_text="   ",
        has_image=True,
    )

    assert "(no text provided)" in bundle.user_prompt


def test_kit_prompt_adds_strategy_task_for_extended(creative_brief: CreativeBrief) -> None:
    basic = build_kit_prompt_bundle(project=default_project(), brief=creative_brief, variant=KitVariant.BASIC)
    extended = build_kit_prompt_bundle(project=default_project(), brief=creative_brief, variant=KitVariant.EXTENDED)

    assert f"- Topic: {creative_brief.topic}" in basic.user_prompt
    assert "competitor gap" not in basic.user_prompt
    assert "competitor gap" in extended.user_prompt
    assert "Output directive: write every text field in language code 'en'." in extended.user_prompt


def test_refine_prompt_embeds_weights_title_and_kit(
    creative_brief: CreativeBrief,
    make_extended_kit: Callable[[], ExtendedKit],
) -> None:
    kit = make_extended_kit()
    weights = preset_weights("viral")

    bundle = build_refine_prompt_bundle(
        project=default_project(),
        brief=creative_brief,
        kit=kit,
        selected_title=kit.titles.intrigue_driven,
        weights=weights,
    )

    assert f"[SELECTED TITLE]\n{kit.titles.intrigue_driven}" in bundle.user_prompt
    assert json.dumps(weights, ensure_ascii=False) in bundle.user_prompt
    assert "[CATEGORY GUIDE]" in bundle.user_prompt
    assert kit.competitor_gap in bundle.user_prompt
    assert "strategy weights" in bundle.system_prompt


def test_evaluate_prompt_lists_categories_and_thumbnails(make_basic_kit: Callable[[], BasicKit]) -> None:
    kit = make_basic_kit()

    bundle = build_evaluate_prompt_bundle(kit)

    assert "(no competitor analysis)" in bundle.user_prompt
    assert f"- {kit.thumbnails[0].concept_name}:" in bundle.user_prompt
    assert ", ".join(CATEGORIES) in bundle.user_prompt
    assert "independent ratings" in bundle.system_prompt


def test_suggest_prompt_requires_sum_of_100(creative_brief: CreativeBrief) -> None:
    bundle = build_suggest_prompt_bundle(creative_brief)

    assert "Sum must be 100." in bundle.user_prompt
    assert f"- Topic: {creative_brief.topic}" in bundle.user_prompt


def test_save_prompt_artifacts_writes_prompt_and_response(tmp_path: Path) -> None:
    prompts = PromptBundle(system_prompt="system text", user_prompt="user text")

    prompt_path, response_path = save_prompt_artifacts(
        prompts,
        destination=tmp_path / "artifacts",
        label="kit-Budget Travel",
        response='{"ok": true}',
        timestamp="20240101-120000",
    )

    assert prompt_path.name == "20240101-120000-kit-budget-travel.prompt.txt"
    assert "SYSTEM PROMPT:\nsystem text" in prompt_path.read_text(encoding="utf-8")
    assert response_path is not None
    assert json.loads(response_path.read_text(encoding="utf-8")) == {"ok": True}


def test_save_prompt_artifacts_without_response(tmp_path: Path) -> None:
    prompts = PromptBundle(system_prompt="s", user_prompt="u")

    _, response_path = save_prompt_artifacts(prompts, destination=tmp_path, label="analyze")

    assert response_path is None
