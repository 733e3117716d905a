from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from tubekit.kit import (
    BasicKit,
    ExtendedKit,
    KitValidationError,
    KitVariant,
    TitleStyle,
    kit_model_for,
    parse_kit,
    render_markdown,
    variant_of,
)


def test_parse_kit_dispatches_on_variant_tag(
    make_basic_kit: Callable[[], BasicKit],
    make_extended_kit: Callable[[], ExtendedKit],
) -> None:
    basic = parse_kit(make_basic_kit().model_dump())
    extended = parse_kit(make_extended_kit().model_dump())

    assert isinstance(basic, BasicKit)
    assert isinstance(extended, ExtendedKit)
    assert variant_of(basic) is KitVariant.BASIC
    assert variant_of(extended) is KitVariant.EXTENDED


def test_extended_kit_requires_strategy_fields(make_basic_kit: Callable[[], BasicKit]) -> None:
    payload: dict[str, Any] = make_basic_kit().model_dump()
    payload["variant"] = "extended"

    with pytest.raises(ValidationError) as excinfo:
        parse_kit(payload)

    assert "persona" in str(excinfo.value)


def test_basic_kit_rejects_strategy_fields(make_extended_kit: Callable[[], ExtendedKit]) -> None:
    payload: dict[str, Any] = make_extended_kit().model_dump()
    payload["variant"] = "basic"

    with pytest.raises(ValidationError):
        parse_kit(payload)


def test_kit_requires_at_least_one_scene(make_basic_kit: Callable[[], BasicKit]) -> None:
    payload: dict[str, Any] = make_basic_kit().model_dump()
    payload["scenes"] = []

    with pytest.raises(ValidationError) as excinfo:
        BasicKit.model_validate(payload)

    assert "scenes" in str(excinfo.value)


def test_kit_model_for_variant() -> None:
    assert kit_model_for(KitVariant.BASIC) is BasicKit
    assert kit_model_for(KitVariant.EXTENDED) is ExtendedKit


def test_title_style_lookup(make_basic_kit: Callable[[], BasicKit]) -> None:
    kit = make_basic_kit()

    assert kit.titles.by_style(TitleStyle.from_raw("Intrigue")) == kit.titles.intrigue_driven
    assert kit.titles.by_style(TitleStyle.KEYWORD) == kit.titles.keyword_focused


def test_title_style_rejects_unknown() -> None:
    with pytest.raises(KitValidationError) as excinfo:
        TitleStyle.from_raw("clickbait")

    assert excinfo.value.exit_code == 2


def test_kit_variant_rejects_unknown() -> None:
    with pytest.raises(KitValidationError):
        KitVariant.from_raw("premium")


def test_render_markdown_marks_selected_title_and_images(make_basic_kit: Callable[[], BasicKit]) -> None:
    kit = make_basic_kit()

    markdown = render_markdown(
        kit,
        selected_title=kit.titles.benefit_driven,
        thumbnails=["thumbs/01.png", None, None],
    )

    assert f"{kit.titles.benefit_driven} (selected)" in markdown
    assert "## 02 Production Blueprint" in markdown
    assert f"![{kit.thumbnails[0].concept_name}](thumbs/01.png)" in markdown
    assert "## 04 Strategy" not in markdown


def test_render_markdown_includes_strategy_for_extended(make_extended_kit: Callable[[], ExtendedKit]) -> None:
    kit = make_extended_kit()

    markdown = render_markdown(kit)

    assert "## 04 Strategy" in markdown
    assert f"### Persona: {kit.persona.name}" in markdown
    assert kit.competitor_gap in markdown


def test_render_markdown_escapes_table_pipes(make_basic_kit: Callable[[], BasicKit]) -> None:
    kit = make_basic_kit()
    scenes = [kit.scenes[0].model_copy(update={"visual": "Split screen | before and after"})]
    kit = kit.model_copy(update={"scenes": scenes})

    assert "Split screen \\| before and after" in render_markdown(kit)
