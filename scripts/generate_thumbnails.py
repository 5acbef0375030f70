#!/usr/bin/env python3
"""
Template thumbnail generation CLI

Compiles every catalog template (or the selected ones) and writes
<normalized_id>.png and <normalized_id>@2x.png thumbnails.

Commands:
    generate - Compile previews and write thumbnails
    sweep    - Remove abandoned run directories and expired cache entries

Examples:\n

    generate_thumbnails.py generate                      # Every stale template

    generate_thumbnails.py generate Default_Resume -f    # Force one template

    generate_thumbnails.py sweep
"""

from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from restex.contexts.rendering.cache import PreviewCache
from restex.contexts.rendering.exceptions import LatexCompilationError, RasterizationError
from restex.contexts.rendering.logger import setup_rendering_logger
from restex.contexts.rendering.preview import (
    LOGS_PATH,
    PREVIEW_CACHE_PATH,
    TEMP_PATH,
    THUMBNAILS_PATH,
    compile_preview,
    sweep_stale_runs,
    thumbnails_up_to_date,
)
from restex.contexts.rendering.validator import check_prerequisites
from restex.contexts.templating import TemplateLoadError, TemplateNotRegisteredError, TemplateRegistry
from restex.contexts.templating.template_registry import PROJECT_ROOT, TEMPLATES_CONFIG
from restex.utils.timestamp import now


def display_path(path: Path) -> str:
    """Return path relative to PROJECT_ROOT for cleaner display."""
    try:
        return str(Path(path).relative_to(PROJECT_ROOT))
    except ValueError:
        return str(path)


app = typer.Typer(
    help="Generate template preview thumbnails",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("generate")
def generate_command(
    template_ids: Annotated[
        Optional[List[str]],
        typer.Argument(help="Template ids (default: every template)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Regenerate even if thumbnails are up to date"),
    ] = False,
    skip_checks: Annotated[
        bool,
        typer.Option("--skip-checks", help="Skip the prerequisite check"),
    ] = False,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Do not read or write the preview cache"),
    ] = False,
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Template catalog (YAML)"),
    ] = TEMPLATES_CONFIG,
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", "-o", help="Thumbnail directory"),
    ] = THUMBNAILS_PATH,
):
    """
    Compile template previews and write thumbnails.

    Templates whose thumbnails are newer than their source are skipped
    unless --force is given.

    Examples:\n

        $ generate_thumbnails.py generate

        $ generate_thumbnails.py generate John_Miller_CV --force
    """
    log_dir = LOGS_PATH / f"thumbnails_{now()}"
    setup_rendering_logger(log_dir)

    try:
        registry = TemplateRegistry.from_config(config)
        templates = [registry.get(t) for t in template_ids] if template_ids else registry.list_templates()
    except (TemplateLoadError, TemplateNotRegisteredError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    sweep_stale_runs(TEMP_PATH)

    if not skip_checks:
        problems = check_prerequisites(templates)
        if problems:
            typer.secho("Prerequisite check failed:", fg=typer.colors.RED, bold=True, err=True)
            for problem in problems:
                typer.secho(f"  - {problem}", fg=typer.colors.RED, err=True)
            typer.echo("Use --skip-checks to try anyway.", err=True)
            raise typer.Exit(code=1)

    cache = None if no_cache else PreviewCache(PREVIEW_CACHE_PATH)

    generated = 0
    skipped = 0
    failed = 0
    for template in templates:
        if not force and thumbnails_up_to_date(template, output_dir):
            typer.echo(f"- {template.id}: up to date")
            skipped += 1
            continue

        typer.secho(f"\nGenerating: {template.id}", fg=typer.colors.BLUE, bold=True)
        try:
            result = compile_preview(
                template, thumbnails_dir=output_dir, cache=cache, transforms=registry.transforms
            )
        except LatexCompilationError as e:
            failed += 1
            typer.secho(f"✗ {template.id}: {e.kind.value}", fg=typer.colors.RED, bold=True)
            if e.log_path:
                typer.echo(f"  Log: {display_path(e.log_path)}")
            continue
        except RasterizationError as e:
            failed += 1
            typer.secho(f"✗ {template.id}: {e}", fg=typer.colors.RED, bold=True)
            continue

        generated += 1
        source = "cache" if result.from_cache else f"{len(result.attempts)} attempt(s)"
        typer.secho(f"✓ {template.id} ({source})", fg=typer.colors.GREEN)
        for path in result.image_paths:
            typer.echo(f"  {display_path(path)}")

    typer.echo("")
    typer.secho(
        f"Generated: {generated}  Skipped: {skipped}  Failed: {failed}",
        fg=typer.colors.RED if failed else typer.colors.GREEN,
        bold=True,
    )
    typer.echo(f"Logs: {display_path(log_dir)}")
    if failed:
        raise typer.Exit(code=1)


@app.command("sweep")
def sweep_command(
    max_age_hours: Annotated[
        float,
        typer.Option("--max-age", help="Remove run directories older than this many hours"),
    ] = 24.0,
):
    """
    Remove abandoned run directories and expired preview cache entries.

    Examples:\n

        $ generate_thumbnails.py sweep

        $ generate_thumbnails.py sweep --max-age 1
    """
    removed_runs = sweep_stale_runs(TEMP_PATH, max_age_seconds=max_age_hours * 3600)
    removed_cache = PreviewCache(PREVIEW_CACHE_PATH).evict_expired()
    typer.secho(
        f"Removed {removed_runs} run director{'y' if removed_runs == 1 else 'ies'} "
        f"and {removed_cache} cache entr{'y' if removed_cache == 1 else 'ies'}",
        fg=typer.colors.GREEN,
    )


if __name__ == "__main__":
    app()
