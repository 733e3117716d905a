from __future__ import annotations

from pathlib import Path

import typer

from . import brief as brief_module
from .cli_output import echo_error, echo_info, make_reporter, resolve_project
from .io_utils import ImageReference, load_image, load_source
from .llm import DEFAULT_FAST_MODEL
from .prompts import save_prompt_artifacts
from .prompts.brief import build_prompt_bundle
from .service import ContentService, ContentServiceError


def _validate_output_options(out: Path | None, json_output: bool, *, dry_run: bool) -> None:
    if dry_run:
        if out or json_output:
            raise typer.BadParameter(
                "--dry-run cannot be combined with --out/--json output options.",
                param_hint="--dry-run",
            )
        return

    if out is None and not json_output:
        raise typer.BadParameter(
            "Choose an output destination: use --out FILE or --json.",
            param_hint="--out",
        )
    if out is not None and json_output:
        raise typer.BadParameter(
            "Options --out and --json are mutually exclusive.",
            param_hint="--out/--json",
        )


def analyze_command(
    source: Path | None = typer.Option(  # noqa: B008
        None,
        "--source",
        "-s",
        resolve_path=True,
        help="Script, rough notes or transcript (Markdown, optional front matter).",
    ),
    image: Path | None = typer.Option(  # noqa: B008
        None,
        "--image",
        "-i",
        resolve_path=True,
        help="Optional visual reference image sent alongside the text.",
    ),
    project: str | None = typer.Option(  # noqa: B008
        None,
        "--project",
        "-p",
        help="Project name (loads <name>.yaml) or path; defaults to ./tubekit.yaml.",
    ),
    model: str = typer.Option(  # noqa: B008
        DEFAULT_FAST_MODEL,
        "--model",
        "-m",
        help="Model name to request via the OpenAI-compatible API.",
    ),
    out: Path | None = typer.Option(  # noqa: B008
        None,
        "--out",
        "-o",
        resolve_path=True,
        help="Write the brief to this file (YAML, or JSON for a .json suffix).",
    ),
    json_output: bool = typer.Option(  # noqa: B008
        False,
        "--json",
        help="Print the brief as JSON to stdout instead of writing a file.",
    ),
    max_chars: int = typer.Option(  # noqa: B008
        8000,
        "--max-chars",
        min=1,
        help="Maximum number of source characters to send to the model.",
    ),
    temperature: float = typer.Option(  # noqa: B008
        0.3,
        "--temperature",
        min=0.0,
        max=2.0,
        help="Temperature passed to the underlying model.",
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
    """Extract a creative brief (topic, audience, outcome) from raw source material.

    Examples:
      tubekit analyze --source notes.md --out brief.yaml
      tubekit analyze --source notes.md --image reference.png --json
    """
    _validate_output_options(out, json_output, dry_run=dry_run)

    if source is None and image is None:
        echo_error("Please provide a script or an image for AI analysis.")
        raise typer.Exit(2)

    reporter = make_reporter(verbose)
    project_config = resolve_project(project)

    source_title, source_text = "Untitled", ""
    if source is not None:
        try:
            details = load_source(source, max_chars=max_chars)
        except FileNotFoundError as exc:
            echo_error(f"Source file not found: {source}")
            raise typer.Exit(3) from exc
        except (OSError, ValueError) as exc:
            echo_error(str(exc))
            raise typer.Exit(3) from exc
        source_title, source_text = details.title, details.body
        if reporter:
            reporter(f"Loaded source '{details.title}' from {details.path}")
            if details.truncated:
                reporter(f"Source truncated to {details.max_chars} characters.")

    reference: ImageReference | None = None
    if image is not None:
        try:
            reference = load_image(image)
        except (OSError, ValueError) as exc:
            echo_error(str(exc))
            raise typer.Exit(3) from exc

    prompts = build_prompt_bundle(
        project=project_config,
        source_title=source_title,
        source_text=source_text,
        has_image=reference is not None,
    )

    if dry_run:
        typer.echo(prompts.user_prompt)
        return

    service = ContentService.from_env(fast_model=model, temperature=temperature, reporter=reporter)
    try:
        result = service.analyze_source(
            project=project_config,
            source_title=source_title,
            source_text=source_text,
            image=reference,
        )
    except KeyboardInterrupt:
        typer.secho("Cancelled by user.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130) from None
    except ContentServiceError as exc:
        echo_error(str(exc))
        raise typer.Exit(exc.exit_code) from exc

    json_payload = brief_module.render_json(result)

    if save_prompt is not None:
        try:
            save_prompt_artifacts(prompts, destination=save_prompt, label=f"analyze-{source_title}", response=json_payload)
        except OSError as exc:
            echo_error(f"Unable to save prompt artifacts: {exc}")
            raise typer.Exit(3) from exc

    if out is not None:
        payload = json_payload + "\n" if out.suffix.lower() == ".json" else brief_module.render_yaml(result)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
        echo_info(f"Wrote brief to {out}")
        return

    typer.echo(json_payload)


__all__ = ["analyze_command"]
