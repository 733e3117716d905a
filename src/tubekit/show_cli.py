from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from .cli_output import echo_error, echo_info
from .session import SessionError, load_session, render_json, render_markdown


class ShowFormat(str, Enum):
    MARKDOWN = "md"
    JSON = "json"


def show_command(
    session: Path = typer.Option(  # noqa: B008
        ...,
        "--session",
        "-s",
        resolve_path=True,
        help="Session JSON file created by `tubekit kit`.",
    ),
    output_format: ShowFormat = typer.Option(  # noqa: B008
        ShowFormat.MARKDOWN,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format: md|json.",
    ),
    out: Path | None = typer.Option(  # noqa: B008
        None,
        "--out",
        "-o",
        resolve_path=True,
        help="Write output to this file (stdout if omitted).",
    ),
) -> None:
    """Render the session brief, weights and kit."""
    try:
        state = load_session(session)
    except SessionError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    payload = render_json(state) + "\n" if output_format is ShowFormat.JSON else render_markdown(state)

    if out is None:
        typer.echo(payload, nl=False)
        return
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
    except OSError as exc:
        echo_error(f"Unable to write {out}: {exc}")
        raise typer.Exit(3) from exc
    echo_info(f"Wrote session {output_format.value} to {out}")


__all__ = ["ShowFormat", "show_command"]
