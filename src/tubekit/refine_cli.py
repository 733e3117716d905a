from __future__ import annotations

from pathlib import Path

import typer

from .cli_output import echo_error, echo_info, make_reporter, resolve_project
from .common import thumbnail_path
from .kit import KitError, TitleStyle
from .llm import DEFAULT_IMAGE_MODEL, DEFAULT_PRO_MODEL
from .service import ContentService, ContentServiceError
from .session import Session, SessionError, load_session, save_session


def refine_command(
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
    title: str | None = typer.Option(  # noqa: B008
        None,
        "--title",
        "-t",
        help="Title to build on: benefit|intrigue|keyword (defaults to the session selection).",
    ),
    project: str | None = typer.Option(  # noqa: B008
        None,
        "--project",
        "-p",
        help="Project name (loads <name>.yaml) or path; defaults to ./tubekit.yaml.",
    ),
    model: str = typer.Option(  # noqa: B008
        DEFAULT_PRO_MODEL,
        "--model",
        "-m",
        help="Model used for the refinement pass.",
    ),
    image_model: str = typer.Option(  # noqa: B008
        DEFAULT_IMAGE_MODEL,
        "--image-model",
        help="Image model used for thumbnail synthesis.",
    ),
    images: bool = typer.Option(  # noqa: B008
        True,
        "--images/--no-images",
        help="Synthesize one thumbnail per concept after refining.",
    ),
    image_dir: Path | None = typer.Option(  # noqa: B008
        None,
        "--image-dir",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        help="Directory for generated thumbnails (defaults to <session dir>/thumbnails).",
    ),
    temperature: float = typer.Option(  # noqa: B008
        0.7,
        "--temperature",
        min=0.0,
        max=2.0,
        help="Temperature passed to the underlying model.",
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Print progress information to stderr.",
    ),
) -> None:
    """Refine the kit around a selected title using the session weights, then render thumbnails.

    Examples:
      tubekit refine --session session.json --title intrigue
      tubekit refine --session session.json --title benefit --no-images
    """
    reporter = make_reporter(verbose)

    try:
        state = load_session(session)
        state.require_editable()
        kit = state.require_kit()
        weights = state.require_weights()
        if title is not None:
            state = state.select_title(TitleStyle.from_raw(title))
    except (SessionError, KitError) as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if state.selected_title is None:
        echo_error("Select a title with --title benefit|intrigue|keyword before refining.")
        raise typer.Exit(2)

    project_config = resolve_project(project)
    service = ContentService.from_env(
        pro_model=model,
        image_model=image_model,
        temperature=temperature,
        reporter=reporter,
    )

    try:
        refined = service.refine_kit(
            project=project_config,
            brief=state.brief,
            kit=kit,
            selected_title=state.selected_title,
            weights=weights,
        )
    except KeyboardInterrupt:
        typer.secho("Cancelled by user.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130) from None
    except ContentServiceError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    state = state.model_copy(
        update={"kit": refined, "phase": "refined", "thumbnails": [None] * len(refined.thumbnails)}
    )
    _save(state, session)
    echo_info(f"Wrote refined kit to {session}")

    if not images:
        return

    target_dir = image_dir or session.parent / "thumbnails"
    state = _render_thumbnails(state, service, target_dir=target_dir, session_path=session)
    _save(state, session)


def _render_thumbnails(state: Session, service: ContentService, *, target_dir: Path, session_path: Path) -> Session:
    kit = state.require_kit()
    paths: list[str | None] = list(state.thumbnails)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        echo_error(f"Unable to create image directory {target_dir}: {exc}")
        raise typer.Exit(3) from exc

    for index, concept in enumerate(kit.thumbnails):
        try:
            data = service.generate_image(concept.ai_image_prompt)
        except KeyboardInterrupt:
            _save(state.model_copy(update={"thumbnails": paths}), session_path)
            typer.secho("Cancelled by user.", err=True, fg=typer.colors.YELLOW)
            raise typer.Exit(130) from None
        except ContentServiceError as exc:
            _save(state.model_copy(update={"thumbnails": paths}), session_path)
            echo_error(f"Thumbnail '{concept.concept_name}' failed: {exc}")
            raise typer.Exit(exc.exit_code) from exc

        image_path = thumbnail_path(target_dir, index, concept.concept_name)
        try:
            image_path.write_bytes(data)
        except OSError as exc:
            echo_error(f"Unable to write {image_path}: {exc}")
            raise typer.Exit(3) from exc
        paths[index] = str(image_path)
        echo_info(f"Wrote thumbnail to {image_path}")

    return state.model_copy(update={"thumbnails": paths})


def _save(state: Session, path: Path) -> None:
    try:
        save_session(state, path)
    except SessionError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc


__all__ = ["refine_command"]
