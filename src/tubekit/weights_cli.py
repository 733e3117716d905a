from __future__ import annotations

import json
from pathlib import Path

import typer

from .cli_output import echo_error, echo_info, make_reporter
from .llm import DEFAULT_FAST_MODEL
from .service import ContentService, ContentServiceError
from .session import Session, SessionError, load_session, render_weight_chart, save_session
from .weights import (
    PRESETS,
    Distribution,
    WeightsError,
    clamp_weight,
    default_weights,
    preset_weights,
    redistribute,
    resolve_category,
)

weights_app = typer.Typer(
    help="Inspect and tune the five category weights of a session (always summing to 100).",
    no_args_is_help=True,
)


def _load_editable(path: Path) -> Session:
    try:
        session = load_session(path)
        session.require_editable()
        session.require_weights()
    except SessionError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    return session


def _store(session: Session, weights: Distribution, path: Path) -> None:
    try:
        save_session(session.with_weights(weights), path)
    except (SessionError, WeightsError) as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    echo_info(render_weight_chart(weights))


@weights_app.command("show")
def show_command(
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
    json_output: bool = typer.Option(  # noqa: B008
        False,
        "--json",
        help="Print the weights as JSON instead of a bar chart.",
    ),
) -> None:
    """Print the current distribution."""
    try:
        weights = load_session(session).require_weights()
    except SessionError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if json_output:
        typer.echo(json.dumps(weights, indent=2, ensure_ascii=False))
        return
    typer.echo(render_weight_chart(weights))


@weights_app.command("set")
def set_command(
    category: str = typer.Argument(  # noqa: B008
        ...,
        help="Category display name or slug, e.g. 'Curiosity Gap' or curiosity-gap.",
    ),
    value: float = typer.Argument(  # noqa: B008
        ...,
        help="New percentage for the category; clamped to 0-100, must be finite.",
    ),
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
) -> None:
    """Set one category and rebalance the others proportionally."""
    state = _load_editable(session)
    try:
        resolved = resolve_category(category)
        updated = redistribute(state.require_weights(), resolved, value)
    except WeightsError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    if clamp_weight(value) != value:
        echo_info(f"Clamped {value:g} to {clamp_weight(value):g}.", err=True)
    _store(state, updated, session)


@weights_app.command("preset")
def preset_command(
    name: str = typer.Argument(  # noqa: B008
        ...,
        help=f"Preset name: {'|'.join(PRESETS)}.",
    ),
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
) -> None:
    """Replace the distribution with a named preset (viral, seo, visual, balanced)."""
    state = _load_editable(session)
    try:
        weights = preset_weights(name)
    except WeightsError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    _store(state, weights, session)


@weights_app.command("reset")
def reset_command(
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
) -> None:
    """Reset to the even split (20% each)."""
    state = _load_editable(session)
    _store(state, default_weights(), session)


@weights_app.command("suggest")
def suggest_command(
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
    model: str = typer.Option(  # noqa: B008
        DEFAULT_FAST_MODEL,
        "--model",
        "-m",
        help="Model asked for the suggested distribution.",
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Print progress information to stderr.",
    ),
) -> None:
    """Ask the model for the best weight strategy for the session brief."""
    state = _load_editable(session)
    service = ContentService.from_env(fast_model=model, reporter=make_reporter(verbose))
    try:
        weights = service.suggest_weights(state.brief)
    except KeyboardInterrupt:
        typer.secho("Cancelled by user.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130) from None
    except ContentServiceError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    _store(state, weights, session)


__all__ = ["weights_app"]
