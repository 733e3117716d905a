from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import typer
import yaml

from .project import PROJECT_FILENAMES, ProjectConfig, default_project


class InitError(Exception):
    """Raised when the channel config cannot be written."""

    exit_code = 2


@dataclass(frozen=True)
class _Question:
    key: str
    label: str
    hint: str
    example: str


_QUESTIONS: tuple[_Question, ...] = (
    _Question("channel_name", "Channel name", "The channel or brand name used in prompts.", "Ship It Weekly"),
    _Question(
        "niche",
        "Niche",
        "What the channel is about; helps the model pick angles and tags.",
        "indie SaaS development",
    ),
    _Question(
        "audience",
        "Audience",
        "Default viewer profile when a brief does not name one.",
        "Solo developers shipping side projects",
    ),
    _Question("tone", "Tone", "The voice titles, hooks and scripts should use.", "Direct, curious, a little irreverent"),
    _Question(
        "keywords",
        "Focus keywords",
        "Optional search terms to weave into titles and tags (comma-separated).",
        "saas, ai tools, indie hacking",
    ),
    _Question("language", "Language", "Output language code (ISO 639-1 where possible).", "en"),
    _Question(
        "kit_variant",
        "Kit variant",
        "basic = titles, description, tags, thumbnails, scenes; extended adds hooks, persona, competitor gap.",
        "extended",
    ),
)


def _target_path(project: str | None, file: Path | None) -> Path:
    if project and file:
        raise typer.BadParameter("Options --project and --file are mutually exclusive.", param_hint="--project/--file")
    if file:
        return file.expanduser()
    if not project:
        return Path(PROJECT_FILENAMES[0])

    directory = Path(project).expanduser()
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InitError(f"Unable to create project directory {directory}: {exc}") from exc
    return directory / PROJECT_FILENAMES[0]


def _may_write(path: Path, *, force: bool) -> bool:
    if path.is_dir():
        raise InitError(f"Target path {path} is a directory, expected a file.")
    if not path.exists() or force:
        return True
    return bool(typer.confirm(f"{path} already exists. Overwrite?", default=False))


def _ask(question: _Question, default: str) -> str:
    typer.echo("")
    typer.secho(question.label, fg=typer.colors.CYAN, bold=True)
    typer.echo(question.hint)
    typer.secho(f"Example: {question.example}", fg=typer.colors.MAGENTA)
    answer = typer.prompt("Value", default=default, show_default=bool(default))
    return cast(str, answer).strip()


def _ask_all(defaults: ProjectConfig) -> ProjectConfig:
    typer.secho("Tubekit init", fg=typer.colors.GREEN, bold=True)
    typer.echo("Let's create a tubekit.yaml so every kit matches your channel.")

    answers: dict[str, Any] = {}
    for question in _QUESTIONS:
        current = defaults[question.key]  # type: ignore[literal-required]
        default = ", ".join(current) if isinstance(current, list) else str(current)
        answers[question.key] = _ask(question, default)

    answers["keywords"] = [item.strip() for item in answers["keywords"].split(",") if item.strip()]
    variant = answers["kit_variant"].lower()
    if variant not in ("basic", "extended"):
        typer.secho(f"Unknown kit variant '{variant}', using extended.", err=True, fg=typer.colors.YELLOW)
        variant = "extended"
    answers["kit_variant"] = variant
    return cast(ProjectConfig, answers)


def _render_yaml(config: ProjectConfig) -> str:
    payload = {question.key: config[question.key] for question in _QUESTIONS}  # type: ignore[literal-required]
    return cast(str, yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))


def init_command(
    project: str | None = typer.Option(  # noqa: B008
        None,
        "--project",
        "-p",
        help="Project directory to create and write tubekit.yaml into.",
    ),
    file: Path | None = typer.Option(  # noqa: B008
        None,
        "--file",
        "-f",
        resolve_path=True,
        help="Custom path/filename for the tubekit.yaml output.",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        help="Overwrite existing files without prompting.",
    ),
    use_defaults: bool = typer.Option(  # noqa: B008
        False,
        "--defaults",
        help="Skip the questionnaire and write the default channel context.",
    ),
) -> None:
    """Write a channel configuration file through a short questionnaire."""
    try:
        target = _target_path(project, file)
        allowed = _may_write(target, force=force)
    except InitError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(exc.exit_code) from exc

    if not allowed:
        typer.secho("Cancelled; existing file preserved.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    config = default_project() if use_defaults else _ask_all(default_project())

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(_render_yaml(config), encoding="utf-8")
    except OSError as exc:
        typer.secho(f"Unable to write {target}: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(2) from exc

    typer.secho(f"Wrote {target}", fg=typer.colors.GREEN)


__all__ = ["init_command"]
