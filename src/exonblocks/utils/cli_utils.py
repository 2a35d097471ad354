import logging
import sys
from pathlib import Path

import click
import click_log

from .constants import (
    FILTER_INT_TAG,
    READ_BARCODE_CORRECTED_TAG,
    READ_UMI_CORRECTED_TAG,
)

log = logging.getLogger(__name__)


def create_logger():
    root_log = logging.getLogger()
    click_log.basic_config(root_log)
    root_log.handlers[0].setFormatter(
        logging.Formatter(
            "[%(levelname)5s %(asctime)s %(name)7s] %(message)s",
            "%Y-%m-%d %H:%M:%S",
        )
    )
    log.debug("Configured base logger")


def input_bam(function):
    return click.argument(
        "input-bam",
        required=True,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )(function)


def output_bam(help_message):
    # note: this one returns a new decorator
    return click.option(
        "-b",
        "--output-bam",
        default="",
        type=click.Path(dir_okay=False),
        help=help_message,
    )  # no call here


def force_overwrite(function):
    return click.option(
        "-f",
        "--force",
        is_flag=True,
        default=False,
        show_default=True,
        help="Force overwrite of the output files if they exist.",
    )(function)


def read_tags(function):
    """Options naming the integer filter tag and the cell barcode / UMI string tags."""
    function = click.option(
        "--umi-tag",
        default=READ_UMI_CORRECTED_TAG,
        show_default=True,
        help="String tag holding the UMI.  Reads without it are skipped.",
    )(function)
    function = click.option(
        "--barcode-tag",
        default=READ_BARCODE_CORRECTED_TAG,
        show_default=True,
        help="String tag holding the cell barcode.  Reads without it are skipped.",
    )(function)
    return click.option(
        "--filter-tag",
        default=FILTER_INT_TAG,
        show_default=True,
        help="Integer tag whose value must be one of the --allowed-value values.",
    )(function)


def format_obnoxious_warning_message(message):
    """Adds some obnoxious formatting to the given message."""
    header = r"""
#############################################
__        ___    ____  _   _ ___ _   _  ____
\ \      / / \  |  _ \| \ | |_ _| \ | |/ ___|
 \ \ /\ / / _ \ | |_) |  \| || ||  \| | |  _
  \ V  V / ___ \|  _ <| |\  || || |\  | |_| |
   \_/\_/_/   \_\_| \_\_| \_|___|_| \_|\____|

#############################################

"""

    return f"{header}{message}\n\n#############################################"


def get_field_count_and_percent_string(count, total, fformat="2.4f"):
    count_str = f"{count}/{total}"
    pct_str = f"({100.0*zero_safe_div(count, total):{fformat}}%)"

    return count_str, pct_str


def zero_safe_div(n, d):
    return 0 if not d else n / d


def is_interactive():
    return sys.stdin.isatty()
