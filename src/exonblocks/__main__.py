import importlib
import logging
import pkgutil
import sys

import click
import click_log

import exonblocks.commands

from .meta import VERSION
from .utils.cli_utils import create_logger

logger = logging.getLogger("exonblocks")


@click.group(name="exonblocks")
@click_log.simple_verbosity_option(logger, default="WARNING")
def main_entry():
    create_logger()
    logger.info("Invoked via: exonblocks %s", " ".join(sys.argv[1:]))


@main_entry.command()
def version():
    """Print the version of exonblocks."""
    click.echo(VERSION)


# Dynamically find and import sub-commands (allows for plugins at run-time):
for p in pkgutil.iter_modules(exonblocks.commands.__path__):
    mod = importlib.import_module(f".{p.name}", exonblocks.commands.__name__)
    main_entry.add_command(getattr(mod, "main"))


if __name__ == "__main__":
    main_entry()  # pylint: disable=E1120
