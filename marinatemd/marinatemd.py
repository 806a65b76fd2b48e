"""
Command line interface.
"""

from pathlib import Path

import click

from . import __version__
from .log import setup_logging
from .pipeline import MarinateError, MarinatePipeline, load_config
from .pipeline.generator import ExportResult
from .pipeline.injector import InjectResult


def _load_pipeline(ctx: click.Context, module: Path | None = None) -> MarinatePipeline:
    options = ctx.obj
    try:
        config = load_config(options["config"], module)
    except MarinateError as e:
        raise click.ClickException(str(e)) from e

    # A config file asking for verbose output counts like --verbose
    if config.verbose and not options["verbose"] and not options["debug"]:
        setup_logging(verbose=True)
    if config.config_file is not None:
        click.echo(f"Using config: {config.config_file}", err=True)
    return MarinatePipeline(config)


def _report_export(result: ExportResult) -> None:
    for schema_id in result.created:
        click.echo(f"created  {schema_id}")
    for schema_id in result.updated:
        click.echo(f"updated  {schema_id}")
    for schema_id, message in result.failures.items():
        click.echo(f"failed   {schema_id}: {message}", err=True)
    click.echo(f"Exported {len(result.created) + len(result.updated)} of {result.total} schema(s)")


def _report_inject(label: str, result: InjectResult) -> None:
    for marker_id, message in result.failures.items():
        click.echo(f"failed   {marker_id}: {message}", err=True)
    click.echo(f"Injected {len(result.injected)} of {result.total} marker(s) into {label}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="marinatemd")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Configuration file (default: search for .marinated.yml)")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show informational messages")
@click.option("--debug", is_flag=True, default=False, help="Show debug messages with timestamps")
@click.pass_context
def cli(ctx, config, verbose, debug):
    """Generate structured documentation for complex Terraform/OpenTofu variables."""
    setup_logging(verbose=verbose, debug=debug)
    ctx.obj = {"config": config, "verbose": verbose, "debug": debug}


@cli.command()
@click.argument("module", default=".", type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path))
@click.pass_context
def export(ctx, module):
    """Parse MARINATED variables and write or update their YAML schemas."""
    pipeline = _load_pipeline(ctx, module)
    try:
        result = pipeline.export(module)
    except MarinateError as e:
        raise click.ClickException(str(e)) from e
    _report_export(result)
    if not result.ok:
        ctx.exit(1)


@cli.command()
@click.argument("schema_dir", required=False, default=None, type=click.Path(file_okay=False, resolve_path=True, path_type=Path))
@click.option(
    "--inject-type",
    default="markdown",
    show_default=True,
    type=click.Choice(["markdown", "terraform", "both"]),
    help="Which documents to inject into",
)
@click.option("--markdown-file", default=None, type=click.Path(dir_okay=False, resolve_path=True, path_type=Path), help="Markdown file (default: configured docs_file)")
@click.option("--terraform-module", default=None, type=click.Path(file_okay=False, resolve_path=True, path_type=Path), help="Terraform module directory (default: current directory)")
@click.pass_context
def inject(ctx, schema_dir, inject_type, markdown_file, terraform_module):
    """Render stored schemas into markdown and/or Terraform descriptions."""
    cwd = Path.cwd()
    pipeline = _load_pipeline(ctx, terraform_module or cwd)
    if schema_dir is None:
        schema_dir = pipeline.config.docs_path(cwd) / "variables"
    if not schema_dir.is_dir():
        raise click.ClickException(f"Schema directory not found: {schema_dir}")

    ok = True
    try:
        if inject_type in ("markdown", "both"):
            markdown_file = markdown_file or pipeline.config.docs_file_path(cwd)
            if not markdown_file.is_file():
                raise click.ClickException(f"Markdown file not found: {markdown_file}")
            result = pipeline.inject_markdown(schema_dir, markdown_file)
            _report_inject(str(markdown_file), result)
            ok = ok and result.ok

        if inject_type in ("terraform", "both"):
            module = terraform_module or cwd
            result = pipeline.inject_terraform(schema_dir, module)
            _report_inject(str(module), result)
            ok = ok and result.ok
    except MarinateError as e:
        raise click.ClickException(str(e)) from e

    if not ok:
        ctx.exit(1)


@cli.command()
@click.argument("module", default=".", type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path))
@click.option("--input", "input_file", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path), help="Document to split")
@click.option("--output", "output_dir", default=None, type=click.Path(file_okay=False, resolve_path=True, path_type=Path), help="Directory for the per-variable files")
@click.option("--header", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path), help="Text prepended to each file")
@click.option("--footer", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True, path_type=Path), help="Text appended to each file")
@click.pass_context
def split(ctx, module, input_file, output_dir, header, footer):
    """Split a document into one markdown file per MARINATED variable."""
    pipeline = _load_pipeline(ctx, module)
    try:
        written = pipeline.split_module(module, input_file, output_dir, header, footer)
    except MarinateError as e:
        raise click.ClickException(str(e)) from e
    for path in written:
        click.echo(str(path))
    click.echo(f"Wrote {len(written)} file(s)")


@cli.command()
@click.argument("module", default=".", type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path))
@click.pass_context
def run(ctx, module):
    """Export schemas, then inject them into the configured docs file."""
    pipeline = _load_pipeline(ctx, module)
    try:
        export_result, inject_result = pipeline.run(module)
    except MarinateError as e:
        raise click.ClickException(str(e)) from e

    _report_export(export_result)
    ok = export_result.ok
    if inject_result is not None:
        _report_inject(str(pipeline.config.docs_file_path(module)), inject_result)
        ok = ok and inject_result.ok
    if not ok:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
