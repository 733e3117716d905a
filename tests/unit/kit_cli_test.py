from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml
from faker import Faker
from pydantic import BaseModel
from typer.testing import CliRunner

from tubekit.kit import BasicKit, ExtendedKit
from tubekit.main import app
from tubekit.service import CategoryScores
from tubekit.weights import CATEGORIES

runner = CliRunner()


class StubLLM:
    def __init__(self, outputs: dict[type[BaseModel], BaseModel | Exception]) -> None:
        self.outputs = outputs
        self.requested: list[type[BaseModel]] = []
        self.prompts: list[Any] = []

    def __call__(self, agent: object, prompt: Any, *, output_type: type[BaseModel], timeout_seconds: float) -> Any:
        self.requested.append(output_type)
        self.prompts.append(prompt)
        result = self.outputs[output_type]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def brief_path(workdir: Path, fake: Faker) -> Path:
    path = workdir / "brief.yaml"
    payload = {"topic": fake.sentence(nb_words=5), "audience": fake.job(), "outcome": fake.sentence()}
    path.write_text(yaml.safe_dump(payload), encoding="utf-8")
    return path


def _scores() -> CategoryScores:
    return CategoryScores.model_validate(dict(zip(CATEGORIES, (80, 60, 40, 20, 0), strict=True)))


def test_kit_writes_session_with_evaluated_weights(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
    brief_path: Path,
    make_extended_kit: Callable[[], ExtendedKit],
) -> None:
    stub = StubLLM({ExtendedKit: make_extended_kit(), CategoryScores: _scores()})
    monkeypatch.setattr("tubekit.service._invoke_agent", stub)
    session_path = workdir / "session.json"

    result = runner.invoke(app, ["kit", "--brief", str(brief_path), "--session", str(session_path)])

    assert result.exit_code == 0, result.stderr
    payload = json.loads(session_path.read_text(encoding="utf-8"))
    assert payload["phase"] == "initial"
    assert payload["kit"]["variant"] == "extended"
    assert list(payload["weights"].values()) == [40, 30, 20, 10, 0]
    assert payload["thumbnails"] == [None, None, None]
    assert stub.requested == [ExtendedKit, CategoryScores]
    assert "Wrote extended kit session" in result.stdout
    assert "No project provided" in result.stderr


def test_kit_basic_without_evaluation_uses_even_split(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
    brief_path: Path,
    make_basic_kit: Callable[[], BasicKit],
) -> None:
    stub = StubLLM({BasicKit: make_basic_kit()})
    monkeypatch.setattr("tubekit.service._invoke_agent", stub)
    session_path = workdir / "session.json"

    result = runner.invoke(
        app,
        ["kit", "--brief", str(brief_path), "--session", str(session_path), "--basic", "--no-evaluate"],
    )

    assert result.exit_code == 0, result.stderr
    payload = json.loads(session_path.read_text(encoding="utf-8"))
    assert payload["kit"]["variant"] == "basic"
    assert set(payload["weights"].values()) == {20}
    assert stub.requested == [BasicKit]


def test_kit_uses_project_variant_by_default(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
    brief_path: Path,
    make_basic_kit: Callable[[], BasicKit],
) -> None:
    (workdir / "tubekit.yaml").write_text("channel_name: Test Kitchen\nkit_variant: basic\n", encoding="utf-8")
    stub = StubLLM({BasicKit: make_basic_kit()})
    monkeypatch.setattr("tubekit.service._invoke_agent", stub)

    result = runner.invoke(
        app,
        ["kit", "--brief", str(brief_path), "--session", str(workdir / "s.json"), "--no-evaluate"],
    )

    assert result.exit_code == 0, result.stderr
    assert stub.requested == [BasicKit]
    assert "Channel: Test Kitchen" in stub.prompts[0]


def test_kit_refuses_to_overwrite_session(workdir: Path, brief_path: Path) -> None:
    session_path = workdir / "session.json"
    session_path.write_text("{}", encoding="utf-8")

    result = runner.invoke(app, ["kit", "--brief", str(brief_path), "--session", str(session_path)])

    assert result.exit_code == 2
    assert "--force" in result.stderr


def test_kit_dry_run_prints_prompt(workdir: Path, brief_path: Path) -> None:
    result = runner.invoke(app, ["kit", "--brief", str(brief_path), "--dry-run", "--extended"])

    assert result.exit_code == 0, result.stderr
    assert "[BRIEF]" in result.stdout
    assert "competitor gap" in result.stdout
    assert not list(workdir.glob("*.json"))


def test_kit_requires_session_without_dry_run(brief_path: Path) -> None:
    result = runner.invoke(app, ["kit", "--brief", str(brief_path)])

    assert result.exit_code != 0
    assert "--session" in result.stderr


def test_kit_reports_missing_brief(workdir: Path) -> None:
    result = runner.invoke(
        app,
        ["kit", "--brief", str(workdir / "missing.yaml"), "--session", str(workdir / "session.json")],
    )

    assert result.exit_code == 3
    assert "Brief file not found" in result.stderr


def test_kit_maps_llm_timeout_to_exit_code(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
    brief_path: Path,
) -> None:
    monkeypatch.setattr("tubekit.service._invoke_agent", StubLLM({ExtendedKit: TimeoutError()}))
    session_path = workdir / "session.json"

    result = runner.invoke(app, ["kit", "--brief", str(brief_path), "--session", str(session_path)])

    assert result.exit_code == 4
    assert "timed out" in result.stderr
    assert not session_path.exists()


def test_kit_saves_prompt_artifacts(
    monkeypatch: pytest.MonkeyPatch,
    workdir: Path,
    brief_path: Path,
    make_basic_kit: Callable[[], BasicKit],
) -> None:
    monkeypatch.setattr("tubekit.service._invoke_agent", StubLLM({BasicKit: make_basic_kit()}))
    artifacts = workdir / "artifacts"

    result = runner.invoke(
        app,
        [
            "kit",
            "--brief",
            str(brief_path),
            "--session",
            str(workdir / "session.json"),
            "--basic",
            "--no-evaluate",
            "--save-prompt",
            str(artifacts),
        ],
    )

    assert result.exit_code == 0, result.stderr
    assert len(list(artifacts.glob("*.prompt.txt"))) == 1
    assert len(list(artifacts.glob("*.response.json"))) == 1
