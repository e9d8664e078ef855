"""
CLI for abi-docs.

Renders interface documents to ABI documentation, or checks that the
rendered documents are up to date.

Usage:
    abi-docs render interfaces/
    abi-docs render api.wit.yaml --variant callee --hrefs
    abi-docs check interfaces/
"""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from abi_docs import __version__
from abi_docs.config import AbiDocsConfig
from abi_docs.errors import AbiDocsError, OutOfDateError
from abi_docs.layout import AbiVariant
from abi_docs.logging import configure_logging
from abi_docs.orchestrator import DocumentationOrchestrator, RenderOutcome

console = Console()

_VARIANTS = click.Choice([v.value for v in AbiVariant])


def _common_options(func):
    func = click.option(
        "--json-logs/--console-logs",
        default=None,
        help="Log as JSON lines or colored console output (auto-detected by default).",
    )(func)
    func = click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default=None,
        help="Log level.",
    )(func)
    func = click.option(
        "--config", "-c", "config_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        default=None,
        help="YAML configuration file.",
    )(func)
    func = click.option(
        "--variant", "-v",
        type=_VARIANTS,
        default=None,
        help="ABI variant used for sizes and result documentation.",
    )(func)
    func = click.argument(
        "paths",
        nargs=-1,
        required=True,
        type=click.Path(exists=True, path_type=Path),
    )(func)
    return func


def _load_config(config_path: Path | None, **overrides) -> AbiDocsConfig:
    config = AbiDocsConfig.from_yaml(config_path) if config_path else AbiDocsConfig()
    config = config.merged(**overrides)
    configure_logging(level=config.log_level, json_format=config.json_logs)
    return config


def _summary(outcomes: list[RenderOutcome]) -> Table:
    table = Table()
    table.add_column("Source", style="cyan")
    table.add_column("Output")
    table.add_column("Size", justify="right")
    table.add_column("Status", justify="center")
    for outcome in outcomes:
        size = f"{outcome.size:,} bytes" if outcome.size else "-"
        table.add_row(str(outcome.source), str(outcome.destination), size, outcome.status)
    return table


def _run(paths: tuple[Path, ...], config_path: Path | None, **overrides) -> list[RenderOutcome]:
    try:
        config = _load_config(config_path, **overrides)
        orchestrator = DocumentationOrchestrator(config)
        outcomes = orchestrator.render_paths(paths)
    except OutOfDateError as e:
        console.print("[bold red]❌ Documentation is not up to date:[/bold red]")
        for path in e.context.get("files", [e.path]):
            console.print(f"  - {path}")
        raise click.exceptions.Exit(1) from e
    except AbiDocsError as e:
        console.print(f"[bold red]❌ {escape(e.message)}[/bold red]")
        for key, value in e.context.items():
            console.print(f"  {key}: {escape(str(value))}")
        raise click.exceptions.Exit(2) from e

    if not outcomes:
        console.print("[yellow]⚠️  No interface documents found.[/yellow]")
    else:
        console.print(_summary(outcomes))
    return outcomes


@click.group()
@click.version_option(version=__version__)
def cli():
    """ABI documentation generator.

    Renders interface documents to Markdown with cross-linked types and
    their size and alignment.
    """
    pass


@cli.command()
@_common_options
@click.option(
    "--hrefs/--no-hrefs",
    default=None,
    help="Also write the anchor map as <stem>.hrefs.json.",
)
def render(paths, variant, config_path, log_level, json_logs, hrefs):
    """Render interface documents to <stem>.abi.md.

    Examples:
        abi-docs render interfaces/
        abi-docs render api.wit.yaml --variant callee
    """
    _run(
        paths,
        config_path,
        variant=variant,
        log_level=log_level,
        json_logs=json_logs,
        write_hrefs=hrefs,
        check=False,
    )


@cli.command()
@_common_options
def check(paths, variant, config_path, log_level, json_logs):
    """Check that rendered documents are up to date.

    Exits with status 1 when any document differs from what would be
    rendered now.
    """
    outcomes = _run(
        paths,
        config_path,
        variant=variant,
        log_level=log_level,
        json_logs=json_logs,
        check=True,
    )
    if outcomes:
        console.print("[bold green]✅ All documents are up to date.[/bold green]")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
