#!/usr/bin/env python3
"""Main CLI entry point for nesbridge."""
import os

import click

from ..config import get_config
from ..server.main import setup_logging
from .config import config
from .session import probe, serve


@click.group()
@click.option('--log-level', default=None, type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level (defaults to logging.level from config)')
@click.version_option(package_name='nesbridge')
def cli(log_level):
    """Loopback session host for a web-based NES emulator."""
    log_level = log_level or get_config().logging.level
    os.environ['NESBRIDGE_LOG_LEVEL'] = log_level
    setup_logging(log_level)


cli.add_command(config)
cli.add_command(serve)
cli.add_command(probe)


if __name__ == "__main__":
    cli()
