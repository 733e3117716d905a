from __future__ import annotations

from pathlib import Path

import typer

from .brief import BriefError, load_brief
from .cli_output import echo_error, echo_info, make_reporter, resolve_project
from .kit import KitVariant
from .kit import render_json as render_kit_json
from .llm import DEFAULT_FAST_MODEL, DEFAULT_PRO_MODEL
from .prompts import save_prompt_artifacts
from .prompts.kit import build_prompt_bundle
from .service import ContentService, ContentServiceError
from .session import SessionError, new_session, render_weight_chart, save_session
from .weights import default_weights


def kit_command(
    brief: Path = typer.Option(  # noqa: B008
        ...,
        "--brief",
        "-b",
        resolve_path=True,
        help="Creative brief (YAML/JSON with topic, audience, outcome).",
    ),
    session: Path | None = typer.Option(  # noqa: B008
        None,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file to create (holds brief, kit and weights).",
    ),
    project: str | None = typer.Option(  # noqa: B008
        None,
        "--project",
        "-p",
        help="Project name (loads <name>.yaml) or path; defaults to ./tubekit.yaml.",
    ),
    extended: bool | None = typer.Option(  # noqa: B008
        None,
        "--extended/--basic",
        help="Request hooks, persona and competitor gap (defaults to the project kit_variant).",
    ),
    evaluate: bool = typer.Option(  # noqa: B008
        True,
        "--evaluate/--no-evaluate",
        help="Score the generated kit to seed the category weights (otherwise use an even split).",
    ),
    model: str = typer.Option(  # noqa: B008
        DEFAULT_PRO_MODEL,
        "--model",
        "-m",
        help="Model used to generate the kit.",
    ),
    eval_model: str = typer.Option(  # noqa: B008
        DEFAULT_FAST_MODEL,
        "--eval-model",
        help="Model used to score the kit.",
    ),
    temperature: float = typer.Option(  # noqa: B008
        0.7,
        "--temperature",
        min=0.0,
        max=2.0,
        help="Temperature passed to the underlying model.",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        help="Overwrite an existing session file.",
    ),
    dry_run: bool = typer.Option(  # noqa: B008
        False,
        "--dry-run",
        help="Print the generated prompt and skip the model call.",
    ),
    save_prompt: Path | None = typer.Option(  # noqa: B008
        None,
        "--save-prompt",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory for saving prompt/response artifacts.",
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Print progress information to stderr.",
    ),
) -> None:
    """Generate a publishing kit from a brief and start a new session.

    Examples:
      tubekit kit --brief brief.yaml --session session.json
      tubekit kit --brief brief.yaml --session session.json --basic --no-evaluate
    """
    if dry_run and session is not None:
        raise typer.BadParameter("--dry-run cannot be combined with --session.", param_hint="--dry-run")
    if not dry_run and session is None:
        raise typer.BadParameter("Choose a session file with --session.", param_hint="--session")
    if session is not None and session.exists() and not force:
        echo_error(f"{session} already exists; pass --force to start over.")
        raise typer.Exit(2)

    reporter = make_reporter(verbose)
    project_config = resolve_project(project)

    try:
        creative_brief = load_brief(brief)
    except BriefError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if extended is None:
        variant = KitVariant(project_config["kit_variant"])
    else:
        variant = KitVariant.EXTENDED if extended else KitVariant.BASIC

    prompts = build_prompt_bundle(project=project_config, brief=creative_brief, variant=variant)
    if dry_run:
        typer.echo(prompts.user_prompt)
        return
    assert session is not None

    service = ContentService.from_env(
        fast_model=eval_model,
        pro_model=model,
        temperature=temperature,
        reporter=reporter,
    )
    try:
        kit = service.generate_kit(creative_brief, project=project_config, variant=variant)
        weights = service.evaluate_kit(kit) if evaluate else default_weights()
    except KeyboardInterrupt:
        typer.secho("Cancelled by user.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130) from None
    except ContentServiceError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if save_prompt is not None:
        try:
            save_prompt_artifacts(
                prompts,
                destination=save_prompt,
                label=f"kit-{creative_brief.topic}",
                response=render_kit_json(kit),
            )
        except OSError as exc:
            echo_error(f"Unable to save prompt artifacts: {exc}")
            raise typer.Exit(3) from exc

    try:
        save_session(new_session(creative_brief, kit, weights), session)
    except SessionError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    echo_info(render_weight_chart(weights))
    echo_info(f"Wrote {variant.value} kit session to {session}")


__all__ = ["kit_command"]
