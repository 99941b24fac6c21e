"""Main CLI application."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..build import run_build
from ..config.loader import load_config
from ..reporting import report_error
from ..settings import BuildSettings
from .parsers import parse_overrides

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="article-builder",
    help="Build a wiki article from templates, partials, components and strings.",
)


@app.callback()
def _main() -> None:
    """Build a wiki article from templates, partials, components and strings."""


@app.command()
def build(
    config_path: Annotated[
        Path,
        typer.Argument(
            help="Build config file (.py, .json, .yaml).",
            metavar="CONFIG",
        ),
    ],
    overrides: Annotated[
        list[str],
        typer.Option(
            "--set",
            help="Override a top-level config value (format: KEY=VALUE). Repeatable.",
            metavar="KEY=VALUE",
        ),
    ] = [],
    stdout: Annotated[
        bool,
        typer.Option(
            "--stdout",
            help="Print the generated text instead of writing the output file.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Build the article described by CONFIG."""
    settings = BuildSettings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
    )

    source = config_path.expanduser().resolve()
    logger.debug(f"Config path: {source}")

    changes = parse_overrides(overrides)

    try:
        config = load_config(source)
        result = asyncio.run(run_build(config, source, changes, write=not stdout))
    except Exception as exc:
        report_error(exc)
        raise typer.Exit(code=1) from exc

    if stdout:
        typer.echo(result.text, nl=False)
    else:
        logger.debug(f"Completed: {result.output_path}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
