from collections.abc import Callable, Iterator
from typing import Any

import pytest
from faker import Faker

from tubekit.brief import CreativeBrief
from tubekit.kit import BasicKit, ExtendedKit, Hook, Persona, Scene, ThumbnailConcept, Titles


@pytest.fixture()
def fake() -> Iterator[Faker]:
    faker = Faker()
    # Ensure deterministic data per test function
    faker.seed_instance(1337)
    yield faker


def _kit_fields(fake: Faker) -> dict[str, Any]:
    return {
        "titles": Titles(
            benefit_driven=fake.sentence(nb_words=5),
            intrigue_driven=fake.sentence(nb_words=6),
            keyword_focused=fake.sentence(nb_words=4),
        ),
        "description": fake.paragraph(nb_sentences=4),
        "tags": ", ".join(fake.words(nb=5)),
        "hashtags": " ".join(f"#{word}" for word in fake.words(nb=3)),
        "thumbnails": [
            ThumbnailConcept(
                concept_name=fake.catch_phrase(),
                psychology=fake.sentence(),
                visual_description=fake.sentence(),
                ai_image_prompt=fake.sentence(nb_words=8),
            )
            for _ in range(3)
        ],
        "scenes": [
            Scene(
                scene_number=index,
                visual=fake.sentence(),
                audio=fake.sentence(),
                duration=f"0:{index * 10:02d}",
                retention_tactic=fake.random_element(["Pattern Interrupt", "Loop Opening", "Payoff Tease"]),
            )
            for index in range(1, 4)
        ],
    }


@pytest.fixture()
def make_basic_kit(fake: Faker) -> Callable[[], BasicKit]:
    return lambda: BasicKit(**_kit_fields(fake))


@pytest.fixture()
def make_extended_kit(fake: Faker) -> Callable[[], ExtendedKit]:
    def _build() -> ExtendedKit:
        return ExtendedKit(
            **_kit_fields(fake),
            hooks=[Hook(style="Negative Framing", script=fake.sentence(), psychology=fake.sentence())],
            persona=Persona(
                name=fake.name(),
                pain_points=[fake.sentence(), fake.sentence()],
                motivations=fake.sentence(),
            ),
            competitor_gap=fake.paragraph(),
        )

    return _build


@pytest.fixture()
def creative_brief(fake: Faker) -> CreativeBrief:
    return CreativeBrief(
        topic=fake.sentence(nb_words=5),
        audience=fake.job(),
        outcome=fake.sentence(nb_words=6),
    )
