"""dirtally CLI - per-subdirectory size report."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from dirtally import __version__
from dirtally.config import (
    ConfigLoadError,
    ConfigValidationError,
    DirtallyConfig,
    VALID_OUTPUT_FORMATS,
    generate_config_template_string,
    get_config,
    get_project_config_path,
)
from dirtally.render import OutputFormat, get_renderer
from dirtally.walk import IOFailure, TreeAggregator

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Exit status when --strict is set and some entries could not be read
EXIT_INCOMPLETE = 2


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper())
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def _load_config(ctx: click.Context) -> DirtallyConfig:
    """Load the layered config once per invocation, exiting on errors."""
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = get_config()
        except (ConfigLoadError, ConfigValidationError) as e:
            err_console.print(f"[red]Config error:[/red] {escape(str(e))}", soft_wrap=True)
            raise SystemExit(1)
    return ctx.obj["config"]


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    envvar="DIRTALLY_LOG_LEVEL",
    help="Logging level (default: WARNING)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, log_level: str, quiet: bool) -> None:
    """dirtally - size, file and subfolder totals per subdirectory."""
    _configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet


@main.command()
def version() -> None:
    """Show version."""
    console.print(f"dirtally {__version__}")


@main.command()
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(VALID_OUTPUT_FORMATS),
    default=None,
    help="Output format: text (default), tree or json",
)
@click.option(
    "--follow-symlinks/--no-follow-symlinks",
    default=None,
    help="Descend into symlinked directories",
)
@click.option(
    "--sort/--no-sort", "sort_entries",
    default=None,
    help="Visit entries sorted by name (default) or in filesystem order",
)
@click.option(
    "--depth", type=click.IntRange(min=0), default=None,
    help="Deepest nesting level shown by the tree format (0 = top level only)",
)
@click.option("--strict", is_flag=True, help=f"Exit {EXIT_INCOMPLETE} if any entry could not be read")
@click.pass_context
def scan(
    ctx: click.Context,
    path: Path,
    output_format: str | None,
    follow_symlinks: bool | None,
    sort_entries: bool | None,
    depth: int | None,
    strict: bool,
) -> None:
    """Report totals for every subdirectory of PATH (default: cwd).

    One group of lines is printed per direct child directory of PATH, as
    soon as that child has been fully walked.
    """
    config = _load_config(ctx)
    quiet = ctx.obj["quiet"] or config.defaults.quiet
    fmt = OutputFormat(output_format or config.defaults.output_format)

    aggregator = TreeAggregator(
        path,
        follow_symlinks=(
            config.walk.follow_symlinks if follow_symlinks is None else follow_symlinks
        ),
        sort_entries=(
            config.walk.sort_entries if sort_entries is None else sort_entries
        ),
    )
    logger.debug("Scanning %s (format=%s)", aggregator.root, fmt.value)

    renderer = get_renderer(fmt, indent=config.defaults.indent)
    try:
        if fmt == OutputFormat.TEXT:
            if not quiet:
                click.echo(f"current path: {aggregator.root}")
            for group in aggregator.aggregate_groups():
                for line in renderer.render_group(group):
                    click.echo(line)
        else:
            groups = list(aggregator.aggregate_groups())
            click.echo(
                renderer.render(
                    groups,
                    root=aggregator.root,
                    failures=aggregator.failures,
                    depth=depth,
                )
            )
    except IOFailure as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise SystemExit(1)

    if aggregator.failures:
        if not quiet and fmt != OutputFormat.JSON:
            err_console.print(
                f"[yellow]Warning:[/yellow] {len(aggregator.failures)} entries could not be read",
                soft_wrap=True,
            )
        if strict:
            raise SystemExit(EXIT_INCOMPLETE)


@main.group()
def config() -> None:
    """Inspect and create configuration files."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the merged configuration as JSON."""
    merged = _load_config(ctx)
    click.echo(json.dumps(merged.to_dict(), indent=2))


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def config_init(force: bool) -> None:
    """Write a commented config template to ./.dirtally.json."""
    target = get_project_config_path(Path.cwd())
    if target.exists() and not force:
        err_console.print(
            f"[red]Error:[/red] {escape(str(target))} already exists (use --force to overwrite)",
            soft_wrap=True,
        )
        raise SystemExit(1)

    target.write_text(generate_config_template_string() + "\n")
    console.print(f"[green]Wrote config template to[/green] {escape(str(target))}", soft_wrap=True)


if __name__ == "__main__":
    main()
