from __future__ import annotations

import os
from pathlib import Path

import click
import typer

from .analyze_cli import analyze_command
from .image_cli import image_command
from .init_cli import init_command
from .kit_cli import kit_command
from .logging_config import setup_logging
from .refine_cli import refine_command
from .show_cli import show_command
from .version_cli import version_command
from .weights_cli import weights_app

app = typer.Typer(
    help=(
        "Tubekit: turn a short creative brief into a YouTube publishing kit (titles, description, tags, "
        "thumbnail concepts, scene script) and steer its refinement with weighted scoring categories."
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
)

__all__ = ["app", "main"]


@app.callback(invoke_without_command=True)
def app_callback(
    ctx: typer.Context,
    quiet: bool = typer.Option(  # noqa: B008
        False,
        "--quiet",
        "-q",
        help="Suppress non-essential output (only emit primary stdout responses).",
    ),
    no_color: bool = typer.Option(  # noqa: B008
        False,
        "--no-color",
        help="Disable colored output (or set NO_COLOR=1).",
    ),
    debug: bool = typer.Option(  # noqa: B008
        False,
        "--debug",
        help="Emit debug log records to stderr.",
    ),
    log_file: Path | None = typer.Option(  # noqa: B008
        None,
        "--log-file",
        resolve_path=True,
        help="Also write log records to this file (or set TUBEKIT_LOG_FILE).",
    ),
) -> None:
    """Root Tubekit CLI callback."""
    ctx.obj = {"quiet": quiet}
    setup_logging(verbose=debug, log_file=log_file)
    if no_color or "NO_COLOR" in os.environ:
        context = click.get_current_context(silent=True)
        if context is not None:
            context.color = False


app.command("init", help="Create a tubekit.yaml channel config via a guided questionnaire.")(init_command)
app.command("analyze", help="Extract a creative brief from scripts, rough notes or a reference image.")(
    analyze_command
)
app.command("kit", help="Generate a publishing kit from a brief and start a session.")(kit_command)
app.add_typer(weights_app, name="weights")
app.command("refine", help="Refine the kit around a selected title using the session weights.")(refine_command)
app.command("show", help="Render a session as Markdown or JSON.")(show_command)
app.command("image", help="Synthesize a single thumbnail image from a prompt.")(image_command)
app.command("version", help="Print the Tubekit version.")(version_command)


def main() -> None:
    """Entrypoint used by `python -m tubekit.main`."""
    app()


if __name__ == "__main__":
    main()
