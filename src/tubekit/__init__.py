from __future__ import annotations

import subprocess
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_DISTRIBUTION = "tubekit"


def _git_description() -> str | None:
    repo_root = Path(__file__).resolve().parents[2]
    if not (repo_root / ".git").exists():
        return None
    try:
        result = subprocess.run(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return result.stdout.strip() or None


def _resolve_version() -> str:
    """Return the package version, appending git details for development checkouts."""
    try:
        base = version(_DISTRIBUTION)
    except PackageNotFoundError:
        base = "0.0.0"

    description = _git_description()
    if not description:
        return base
    stripped = description.removeprefix("v")
    if stripped.startswith(base):
        return stripped
    return f"{base}+{stripped}"


__version__ = _resolve_version()

__all__ = ["__version__"]
