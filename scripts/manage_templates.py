#!/usr/bin/env python3
"""
Template catalog CLI

Inspects and validates the resume templates in config/templates.yaml.

Commands:
    list      - List catalog templates
    show      - Show one template's metadata and resolved packages
    validate  - Validate templates against the installed TeX toolchain
    transform - Transform a content file for a template
    check     - Check preview-generation prerequisites

Examples:\n

    manage_templates.py list

    manage_templates.py show John_Miller_CV

    manage_templates.py validate                              # Validate every template

    manage_templates.py transform John_Miller_CV content.tex -o out.tex
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from restex.contexts.rendering.validator import check_prerequisites, validate_template
from restex.contexts.templating import TemplateNotRegisteredError, TemplateRegistry, TemplateLoadError
from restex.contexts.templating.packages import extract_package_declarations, resolve_packages
from restex.contexts.templating.template_registry import PROJECT_ROOT, TEMPLATES_CONFIG, TEMPLATES_PATH
from restex.contexts.templating.transformer import render_template, transform_content


def display_path(path: Path) -> str:
    """Return path relative to PROJECT_ROOT for cleaner display."""
    try:
        return str(Path(path).relative_to(PROJECT_ROOT))
    except ValueError:
        return str(path)


def load_registry(config: Path) -> TemplateRegistry:
    try:
        return TemplateRegistry.from_config(config)
    except TemplateLoadError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Template catalog (YAML)"),
]

app = typer.Typer(
    help="Inspect and validate LaTeX resume templates",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("list")
def list_command(config: ConfigOption = TEMPLATES_CONFIG):
    """
    List catalog templates.

    Examples:\n

        $ manage_templates.py list
    """
    registry = load_registry(config)

    typer.secho(f"\n{len(registry)} template(s) in {display_path(config)}\n", fg=typer.colors.BLUE, bold=True)
    for template in registry:
        marker = " (default)" if template.is_default else ""
        typer.secho(f"  {template.id}{marker}", bold=True)
        typer.echo(f"    {template.name} - {display_path(template.source_path)}")
        if template.description:
            typer.echo(f"    {template.description}")


@app.command("show")
def show_command(
    template_id: Annotated[str, typer.Argument(help="Template id or source path")],
    config: ConfigOption = TEMPLATES_CONFIG,
):
    """
    Show a template's metadata and its resolved package list.

    Examples:\n

        $ manage_templates.py show Default_Resume

        $ manage_templates.py show templates/latex/John_Miller_CV.tex
    """
    registry = load_registry(config)
    try:
        template = registry.get(template_id)
    except TemplateNotRegisteredError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n{template.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Id:            {template.id} ({template.normalized_id})")
    typer.echo(f"Source:        {display_path(template.source_path)}")
    if template.source_url:
        typer.echo(f"Origin:        {template.source_url}")
    typer.echo(f"Fonts:         {', '.join(template.required_fonts) or '-'}")
    typer.echo(f"Packages:      {', '.join(template.custom_packages) or '-'}")
    for original, placeholder in template.image_placeholders.items():
        typer.echo(f"Image:         {original} -> {placeholder}")

    typer.secho("\nResolved declarations:", bold=True)
    for declaration in resolve_packages(extract_package_declarations(template.latex_source)):
        typer.echo(f"  {declaration}")


@app.command("validate")
def validate_command(
    template_id: Annotated[
        Optional[str],
        typer.Argument(help="Template id (default: every template)"),
    ] = None,
    config: ConfigOption = TEMPLATES_CONFIG,
):
    """
    Validate templates against the installed TeX toolchain.

    Exits with code 1 if any template has errors.

    Examples:\n

        $ manage_templates.py validate

        $ manage_templates.py validate Modular_professional_CV
    """
    registry = load_registry(config)
    try:
        templates = [registry.get(template_id)] if template_id else registry.list_templates()
    except TemplateNotRegisteredError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    invalid = 0
    for template in templates:
        result = validate_template(template)
        if result.is_valid:
            typer.secho(f"✓ {template.id}", fg=typer.colors.GREEN)
        else:
            invalid += 1
            typer.secho(f"✗ {template.id}", fg=typer.colors.RED, bold=True)
            for error in result.errors:
                typer.secho(f"    {error}", fg=typer.colors.RED)
        for warning in result.warnings:
            typer.secho(f"    {warning}", fg=typer.colors.YELLOW)

    typer.echo("")
    if invalid:
        typer.secho(f"{invalid}/{len(templates)} template(s) failed validation", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)
    typer.secho(f"All {len(templates)} template(s) valid", fg=typer.colors.GREEN, bold=True)


@app.command("transform")
def transform_command(
    template_id: Annotated[str, typer.Argument(help="Template id or source path")],
    content_file: Annotated[
        Path,
        typer.Argument(help="LaTeX content to transform", exists=True, dir_okay=False, readable=True),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write result here instead of stdout"),
    ] = None,
    full: Annotated[
        bool,
        typer.Option("--full", "-f", help="Place the content into the full template source"),
    ] = False,
    config: ConfigOption = TEMPLATES_CONFIG,
):
    """
    Transform a content file for a template.

    Examples:\n

        $ manage_templates.py transform John_Miller_CV body.tex

        $ manage_templates.py transform John_Miller_CV body.tex --full -o resume.tex
    """
    registry = load_registry(config)
    try:
        template = registry.get(template_id)
    except TemplateNotRegisteredError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    content = content_file.read_text(encoding="utf-8")
    if full:
        result = render_template(template, content, registry.transforms)
    else:
        result = transform_content(template, content, registry.transforms)

    if output is None:
        typer.echo(result)
        return

    output.write_text(result, encoding="utf-8")
    typer.secho(f"Wrote {display_path(output.resolve())}", fg=typer.colors.GREEN)


@app.command("check")
def check_command(
    config: ConfigOption = TEMPLATES_CONFIG,
    templates_dir: Annotated[
        Path,
        typer.Option("--templates-dir", "-t", help="Directory holding template sources"),
    ] = TEMPLATES_PATH,
):
    """
    Check that engines, template sources, fonts and packages are in place.

    Examples:\n

        $ manage_templates.py check
    """
    registry = load_registry(config)
    problems = check_prerequisites(registry.list_templates(), templates_dir=templates_dir)

    if problems:
        typer.secho(f"\n{len(problems)} problem(s) found:", fg=typer.colors.RED, bold=True)
        for problem in problems:
            typer.secho(f"  - {problem}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.secho("\nAll prerequisites satisfied", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()
