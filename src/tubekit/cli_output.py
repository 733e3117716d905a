from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

import click
import typer

from .common import Reporter
from .project import ProjectConfig, load_default_project, load_project


def _context_obj() -> Mapping[str, Any]:
    context = click.get_current_context(silent=True)
    if context is None or context.obj is None:
        return {}
    return cast(Mapping[str, Any], context.obj)


def is_quiet() -> bool:
    return bool(_context_obj().get("quiet", False))


def echo_info(message: str, *, err: bool = False) -> None:
    """Print an informational line unless ``--quiet`` is active."""
    if is_quiet():
        return
    typer.echo(message, err=err)


def echo_error(message: str) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)


def echo_warning(message: str) -> None:
    if is_quiet():
        return
    typer.secho(message, err=True, fg=typer.colors.YELLOW)


def make_reporter(verbose: bool) -> Reporter:
    """Return a stderr progress reporter when ``verbose`` is set."""
    return (lambda msg: typer.secho(msg, err=True)) if verbose else None


def resolve_project(project: str | None) -> ProjectConfig:
    """Load the named project, or tubekit.yaml from the working directory, exiting with 5 on errors."""
    try:
        if project:
            return load_project(project)
        config, source = load_default_project()
    except (FileNotFoundError, ValueError, OSError) as exc:
        echo_error(str(exc))
        raise typer.Exit(5) from exc

    if source is None:
        echo_warning("No project provided; using default context (language=en, tone=energetic).")
    return config


__all__ = ["echo_error", "echo_info", "echo_warning", "is_quiet", "make_reporter", "resolve_project"]
