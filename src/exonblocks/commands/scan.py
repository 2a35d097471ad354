import logging
import sys
import time
from pathlib import Path

import click

from ..utils import bam_utils, cli_utils
from ..utils.cli_utils import (
    format_obnoxious_warning_message,
    get_field_count_and_percent_string,
)
from ..utils.constants import FFORMAT
from ..utils.errors import ExonBlocksError
from ..utils.scan_utils import scan_region_blocks

PROG_NAME = "scan"

logger = logging.getLogger(__name__)


@click.command(PROG_NAME)
@click.option("-c", "--contig", required=True, type=str, help="Contig of the region to scan.")
@click.option(
    "-s",
    "--start",
    required=True,
    type=click.IntRange(min=1),
    help="Start of the region to scan (1-based, inclusive).",
)
@click.option(
    "-e",
    "--end",
    required=True,
    type=click.IntRange(min=1),
    help="End of the region to scan (1-based, inclusive).",
)
@click.option(
    "-o",
    "--output-tsv",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Block table output (one row per passing read).",
)
@cli_utils.output_bam("Filtered bam output (passing reads only, indexed when it ends in .bam).  [default: none]")
@click.option(
    "-a",
    "--allowed-value",
    "allowed_values",
    multiple=True,
    type=int,
    help="Allowed value of the filter tag.  May be given more than once.",
)
@cli_utils.read_tags
@cli_utils.force_overwrite
@cli_utils.input_bam
def main(
    contig,
    start,
    end,
    output_tsv,
    output_bam,
    allowed_values,
    filter_tag,
    barcode_tag,
    umi_tag,
    force,
    input_bam,
):
    """Write the exon blocks of the reads overlapping a region to a table."""

    t_start = time.time()

    if end < start:
        raise click.BadParameter(f"End ({end}) is before start ({start}).", param_hint="--end")

    # Check to see if the output files exist:
    bam_utils.check_for_preexisting_files([output_tsv, output_bam], exist_ok=force)

    logger.info(f"Scanning {input_bam} over {contig}:{start}-{end}")
    logger.info(f"Keeping reads with {filter_tag} in: {', '.join(map(str, sorted(set(allowed_values))))}")
    logger.info(f"Writing block table to: {output_tsv}")
    if output_bam:
        logger.info(f"Writing passing reads to: {output_bam}")

    try:
        summary = scan_region_blocks(
            input_bam,
            contig,
            start,
            end,
            output_tsv,
            allowed_values,
            output_bam=output_bam,
            filter_tag=filter_tag,
            barcode_tag=barcode_tag,
            umi_tag=umi_tag,
        )
    except ExonBlocksError as e:
        logger.error(str(e))
        sys.exit(1)

    # Yell at the user:
    logger.info(f"Done. Elapsed time: %{FFORMAT}s.", time.time() - t_start)
    logger.info(f"Total Reads Processed: {summary.num_reads_seen}")

    count_str, pct_str = get_field_count_and_percent_string(summary.num_reads, summary.num_reads_seen, FFORMAT)
    logger.info(f"# Reads Written: {count_str} {pct_str}")

    for reason, count in summary.rejection_counts.items():
        count_str, pct_str = get_field_count_and_percent_string(count, summary.num_reads_seen, FFORMAT)
        logger.info(f"# Reads Rejected ({reason}): {count_str} {pct_str}")

    count_str, pct_str = get_field_count_and_percent_string(
        summary.num_reads_without_blocks, summary.num_reads_seen, FFORMAT
    )
    logger.info(f"# Reads Without Aligned Blocks: {count_str} {pct_str}")

    if output_bam:
        if summary.bam_write_failed:
            logger.warning(
                f"Output bam {output_bam} is incomplete: "
                f"{summary.num_reads_written_to_bam} of {summary.num_reads} reads written."
            )
        elif not summary.bam_indexed:
            logger.info(f"Output bam {output_bam} was not indexed.")

    if summary.num_reads == 0:
        logger.warning(
            format_obnoxious_warning_message(
                f"No reads in {contig}:{start}-{end} passed the filters.  "
                f"You should check the region and the --allowed-value / tag settings."
            )
        )

    click.echo(summary.num_reads)
