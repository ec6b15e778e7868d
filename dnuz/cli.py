"""CLI commands for dnuz."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dnuz.encodings import supported_names
from dnuz.errors import DnuzError
from dnuz.models.archive import ExtractionReport
from dnuz.models.config import PipelineConfig
from dnuz.pipeline import run_local, run_pipeline

console = Console()


def _printable(path: str) -> str:
    """Render a filesystem path that may hold undecodable bytes."""
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def setup_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logger = logging.getLogger("dnuz")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(level)


def load_config(config_file: str | None) -> PipelineConfig:
    """Load the explicit config file, or ~/.dnuz.yaml when present."""
    if config_file:
        path = Path(config_file)
    else:
        path = PipelineConfig.default_path()
        if not path.is_file():
            return PipelineConfig()

    config = PipelineConfig.from_yaml(path)
    console.print(f"Using config file: {path}", markup=False, highlight=False)
    return config


def fail(ctx: click.Context, error: DnuzError) -> NoReturn:
    console.print(f"[red]Error: {escape(_printable(str(error)))}[/red]", soft_wrap=True)
    ctx.exit(1)


def command_config(ctx: click.Context, **overrides: object) -> PipelineConfig:
    """Config file values with command-line and environment overrides applied."""
    try:
        config = load_config(ctx.obj["config_file"])
    except DnuzError as e:
        fail(ctx, e)
    return config.merged(**overrides)


def print_report(report: ExtractionReport, show_size: bool = True) -> None:
    if show_size:
        console.print(f"Size of download: {report.downloaded_bytes}", highlight=False)
    console.print("Unzipped:")
    for path in report.paths:
        console.print(_printable(path), markup=False, highlight=False, soft_wrap=True)


def encoding_options(func):
    """Options shared by commands that extract archives."""
    func = click.option(
        "--out-enc", "out_enc", default=None, envvar="DNUZ_OUT_ENC",
        help="Encoding name for output filenames",
    )(func)
    func = click.option(
        "--nonUtf8-enc", "non_utf8_enc", default=None, envvar="DNUZ_NONUTF8_ENC",
        help="Encoding name for non-UTF-8 filenames",
    )(func)
    func = click.option(
        "--out-path", "out_path", default=None, envvar="DNUZ_OUT_PATH",
        help="Output path",
    )(func)
    return func


@click.group()
@click.option("--config", "config_file", default=None,
              help="Config file (default is $HOME/.dnuz.yaml)")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv)")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, verbose: int) -> None:
    """Download & unzip & fix non-UTF-8 paths/filenames."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file


@main.command()
@click.option("--src-url", "src_url", default=None, envvar="DNUZ_SRC_URL",
              help="Source file url")
@encoding_options
@click.option("--timeout", type=float, default=None, envvar="DNUZ_TIMEOUT",
              help="Download timeout in seconds")
@click.pass_context
def get(
    ctx: click.Context,
    src_url: str | None,
    out_path: str | None,
    non_utf8_enc: str | None,
    out_enc: str | None,
    timeout: float | None,
) -> None:
    """Download an archive and extract it with repaired names."""
    config = command_config(
        ctx,
        src_url=src_url,
        out_path=out_path,
        non_utf8_enc=non_utf8_enc,
        out_enc=out_enc,
        timeout=timeout,
    )

    try:
        with console.status(f"Downloading {config.src_url}..."):
            report = run_pipeline(config)
    except DnuzError as e:
        fail(ctx, e)

    print_report(report)


@main.command()
@click.argument("archive", type=click.Path(dir_okay=False))
@encoding_options
@click.pass_context
def extract(
    ctx: click.Context,
    archive: str,
    out_path: str | None,
    non_utf8_enc: str | None,
    out_enc: str | None,
) -> None:
    """Extract a local ZIP archive with repaired names."""
    config = command_config(
        ctx,
        out_path=out_path,
        non_utf8_enc=non_utf8_enc,
        out_enc=out_enc,
    )

    try:
        report = run_local(archive, config)
    except DnuzError as e:
        fail(ctx, e)

    print_report(report, show_size=False)


@main.command()
def encodings() -> None:
    """List supported encoding names."""
    table = Table(title="Supported Encodings")
    table.add_column("Name", style="cyan")
    table.add_column("Code page", style="green")

    for name, encoding in supported_names().items():
        table.add_row(name, encoding.value)

    console.print(table)
    console.print("[dim]Names are case-insensitive; an empty name disables the transform[/dim]")


if __name__ == "__main__":
    main()
