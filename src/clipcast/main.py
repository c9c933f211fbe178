"""CLI handling for clipcast.

This module provides the command-line interface for clipcast, handling
argument parsing via click, logging configuration, settings validation
and running the server.

Usage:
    clipcast [PORT] [--interval MS] [--host ADDR] [--source NAME]
             [--no-browser] [--verbose]
"""

import logging
import sys

import click

from clipcast.errors import InvalidConfiguration, SourceUnavailable, TransportBindFailure
from clipcast.main_logging import configure_logging
from clipcast.main_options import MutuallyExclusiveOption
from clipcast.settings import (
    DEFAULT_HOST,
    DEFAULT_INTERVAL_MS,
    DEFAULT_PORT,
    DEFAULT_SOURCE,
    AppSettings,
    validate_settings,
)
from clipcast.source import SOURCE_NAMES

logger = logging.getLogger(__name__)


@click.command()
@click.argument("port_arg", metavar="[PORT]", required=False, type=int)
@click.option(
    "--port",
    type=int,
    cls=MutuallyExclusiveOption,
    mutually_exclusive=["port_arg"],
    help=f"Port for the page and the WebSocket channel  [default: {DEFAULT_PORT}]",
)
@click.option(
    "--interval",
    type=int,
    default=DEFAULT_INTERVAL_MS,
    show_default=True,
    help="Clipboard polling interval in milliseconds",
)
@click.option(
    "--host",
    default=DEFAULT_HOST,
    show_default=True,
    help="Interface address to listen on",
)
@click.option(
    "--source",
    type=click.Choice(SOURCE_NAMES),
    default=DEFAULT_SOURCE,
    show_default=True,
    help="Where to read the clipboard from",
)
@click.option(
    "--no-browser",
    is_flag=True,
    help="Do not open the client page in the default browser",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)
def main(
    port_arg: int | None,
    port: int | None,
    interval: int,
    host: str,
    source: str,
    no_browser: bool,
    verbose: bool,
) -> None:
    """Broadcast clipboard text to browsers over a WebSocket."""
    configure_logging(verbose)

    if port is None:
        port = port_arg if port_arg is not None else DEFAULT_PORT
    settings = AppSettings(
        port=port,
        interval_ms=interval,
        host=host,
        source=source,
        open_browser=not no_browser,
    )
    try:
        validate_settings(settings)
    except InvalidConfiguration as e:
        raise click.UsageError(str(e)) from e
    logger.debug("Settings: %s", settings)

    _run(settings)


def _run(settings: AppSettings) -> None:
    """Open the clipboard source and serve until interrupted.

    Args:
        settings: Validated runtime configuration.
    """
    import asyncio

    from clipcast.server import run_server
    from clipcast.source import make_source

    try:
        clipboard = make_source(settings.source)
        try:
            asyncio.run(run_server(settings, clipboard))
        finally:
            clipboard.close()
    except (SourceUnavailable, TransportBindFailure) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.debug("Interrupted, exiting")
