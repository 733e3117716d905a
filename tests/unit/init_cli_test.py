from pathlib import Path

import yaml
from typer.testing import CliRunner

from tubekit.main import app

runner = CliRunner()


def _questionnaire_input(variant: str = "basic") -> str:
    return "\n".join(
        [
            "Crumb Lab",
            "home baking",
            "beginner bakers",
            "warm and practical",
            "sourdough, bread, baking",
            "en",
            variant,
        ]
    ) + "\n"


def test_init_writes_config_in_current_dir() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["init"], input=_questionnaire_input())

        assert result.exit_code == 0
        config_path = Path("tubekit.yaml")
        assert config_path.exists()
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        assert payload["channel_name"] == "Crumb Lab"
        assert payload["niche"] == "home baking"
        assert payload["audience"] == "beginner bakers"
        assert payload["tone"] == "warm and practical"
        assert payload["keywords"] == ["sourdough", "bread", "baking"]
        assert payload["language"] == "en"
        assert payload["kit_variant"] == "basic"


def test_init_writes_config_in_project_dir() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["init", "--project", "demo"], input=_questionnaire_input())

        assert result.exit_code == 0
        assert (Path("demo") / "tubekit.yaml").exists()


def test_init_writes_config_to_custom_file() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(
            app,
            ["init", "--file", "config/custom.yaml"],
            input=_questionnaire_input(),
        )

        assert result.exit_code == 0
        assert Path("config/custom.yaml").exists()


def test_init_falls_back_to_extended_for_unknown_variant() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["init"], input=_questionnaire_input("premium"))

        assert result.exit_code == 0
        payload = yaml.safe_load(Path("tubekit.yaml").read_text(encoding="utf-8"))
        assert payload["kit_variant"] == "extended"
        assert "Unknown kit variant" in result.stderr


def test_init_rejects_project_and_file_together() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["init", "--project", "demo", "--file", "x.yaml"])

        assert result.exit_code == 2


def test_init_keeps_existing_file_when_declined() -> None:
    with runner.isolated_filesystem():
        Path("tubekit.yaml").write_text("channel_name: Keep Me\n", encoding="utf-8")

        result = runner.invoke(app, ["init"], input="n\n")

        assert result.exit_code == 1
        assert "Keep Me" in Path("tubekit.yaml").read_text(encoding="utf-8")


def test_init_force_overwrites_existing_file() -> None:
    with runner.isolated_filesystem():
        Path("tubekit.yaml").write_text("channel_name: Old\n", encoding="utf-8")

        result = runner.invoke(app, ["init", "--force"], input=_questionnaire_input())

        assert result.exit_code == 0
        assert yaml.safe_load(Path("tubekit.yaml").read_text(encoding="utf-8"))["channel_name"] == "Crumb Lab"


def test_init_defaults_skips_questionnaire() -> None:
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["init", "--defaults"])

        assert result.exit_code == 0
        payload = yaml.safe_load(Path("tubekit.yaml").read_text(encoding="utf-8"))
        assert payload["channel_name"] == "My Channel"
        assert payload["keywords"] == []
        assert payload["kit_variant"] == "extended"
