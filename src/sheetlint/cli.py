"""Command-line interface for sheetlint using Click."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from sheetlint.config import LintConfig, config_to_data, load_config_file
from sheetlint.constants import Severity, __version__
from sheetlint.context import ResultContext
from sheetlint.dispatcher import normalize_setting
from sheetlint.document import Root, document_from_dict
from sheetlint.errors import ConfigurationError, DocumentError
from sheetlint.formatters import OutputFormat, format_summary, get_formatter
from sheetlint.rules.registry import default_registry
from sheetlint.runner import lint, prepare_config


def format_config_text(*, config: LintConfig) -> str:
    """Format a resolved configuration as human-readable text."""
    lines: list[str] = [
        "sheetlint Configuration",
        "=" * 40,
        "",
        f"Base directory: {config.config_basedir or '(cwd)'}",
        f"Quiet: {config.quiet}",
        "",
        "Rules:",
    ]

    for name, raw in config.rules.items():
        severity: Severity = normalize_setting(raw, rule_name=name).severity
        lines.append(f"  {name}: {severity.label.upper()}")

    if config.plugins:
        lines.extend(["", "Plugins:"])
        lines.extend(f"  {name}: {lookup}" for name, lookup in config.plugins.items())

    return "\n".join(lines)


def _echo_config_error(error: ConfigurationError) -> None:
    click.echo(f"Error: {error}", err=True)
    if error.path:
        click.echo(f"  in: {error.path}", err=True)


def _build_options(ctx: click.Context) -> dict[str, Any]:
    config_path: Path | None = ctx.obj["config_path"]
    config: dict[str, Any] = load_config_file(config_path) if config_path else {}
    options: dict[str, Any] = {"config": config}
    if ctx.obj["config_basedir"] is not None:
        options["config_basedir"] = ctx.obj["config_basedir"]
    return options


@click.group()
@click.version_option(version=__version__, prog_name="sheetlint")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a configuration file (JSON, TOML, YAML or Python)",
)
@click.option(
    "--config-basedir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory extends and plugin lookups are resolved against",
)
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--debug", is_flag=True, help="Show detailed trace")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    config_path: Path | None,
    config_basedir: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """sheetlint - Configuration-driven style-sheet linter."""
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config_basedir"] = config_basedir


@cli.command()
@click.option("--validate", is_flag=True, help="Only validate configuration, don't print")
@click.option("--json", "as_json", is_flag=True, help="Output configuration as JSON")
@click.pass_context
def config(ctx: click.Context, *, validate: bool, as_json: bool) -> None:
    """Show or validate the resolved configuration."""
    try:
        cfg, _ = prepare_config(_build_options(ctx))
        for name, raw in cfg.rules.items():
            normalize_setting(raw, rule_name=name)
    except ConfigurationError as e:
        _echo_config_error(e)
        ctx.exit(1)
        return

    if validate:
        click.echo(f"Configuration valid: {ctx.obj['config_path'] or '(none)'}")
        return

    if as_json:
        click.echo(json.dumps(config_to_data(cfg), indent=2))
    else:
        click.echo(format_config_text(config=cfg))


@cli.command()
def rules() -> None:
    """List the built-in rules."""
    for name in default_registry().names():
        click.echo(name)


@cli.command(name="lint")
@click.argument("tree", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@click.pass_context
def lint_command(ctx: click.Context, tree: Path, *, output_format: str) -> None:
    """Lint a parsed document tree stored as JSON."""
    try:
        with open(tree, encoding="utf-8") as f:
            document: Root = document_from_dict(json.load(f))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, DocumentError) as e:
        click.echo(f"Error: cannot load document tree {tree}: {e}", err=True)
        ctx.exit(1)
        return

    try:
        result: ResultContext = lint(document, _build_options(ctx))
    except ConfigurationError as e:
        _echo_config_error(e)
        ctx.exit(1)
        return

    source: str = document.source or str(tree)
    output: str = get_formatter(output_format=OutputFormat(output_format)).format(
        diagnostics=result.diagnostics,
        source=source,
    )
    if output:
        click.echo(output)
    if output_format == OutputFormat.TEXT.value:
        click.echo(format_summary(diagnostics=result.diagnostics))
    ctx.exit(1 if result.diagnostics.has_errors else 0)


def main() -> None:
    """Main entry point for the sheetlint CLI."""
    cli()


if __name__ == "__main__":
    main()
