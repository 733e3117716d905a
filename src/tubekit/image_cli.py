from __future__ import annotations

from pathlib import Path

import typer

from .cli_output import echo_error, echo_info, make_reporter
from .llm import DEFAULT_IMAGE_MODEL
from .service import DEFAULT_IMAGE_SIZE, ContentService, ContentServiceError


def image_command(
    prompt: str = typer.Option(  # noqa: B008
        ...,
        "--prompt",
        help="Thumbnail description; the YouTube thumbnail style prefix is added automatically.",
    ),
    out: Path = typer.Option(  # noqa: B008
        ...,
        "--out",
        "-o",
        resolve_path=True,
        help="PNG file to write.",
    ),
    model: str = typer.Option(  # noqa: B008
        DEFAULT_IMAGE_MODEL,
        "--model",
        "-m",
        help="Image model to request.",
    ),
    size: str = typer.Option(  # noqa: B008
        DEFAULT_IMAGE_SIZE,
        "--size",
        help="Image size passed to the endpoint, e.g. 1536x1024.",
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False,
        "--verbose",
        "-v",
        help="Print progress information to stderr.",
    ),
) -> None:
    """Synthesize a single thumbnail image from a prompt."""
    service = ContentService.from_env(image_model=model, image_size=size, reporter=make_reporter(verbose))
    try:
        data = service.generate_image(prompt)
    except KeyboardInterrupt:
        typer.secho("Cancelled by user.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130) from None
    except ContentServiceError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(data)
    except OSError as exc:
        echo_error(f"Unable to write {out}: {exc}")
        raise typer.Exit(3) from exc
    echo_info(f"Wrote thumbnail to {out}")


__all__ = ["image_command"]
