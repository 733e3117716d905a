from __future__ import annotations

import typer

from . import __version__


def version_command() -> None:
    """Print the installed Tubekit version."""
    typer.echo(f"tubekit {__version__}")


__all__ = ["version_command"]
