import collections
import contextlib
import logging
import sys

import tqdm

from . import bam_utils
from .blocks import decompose_read_blocks
from .cli_utils import is_interactive
from .constants import (
    FILTER_INT_TAG,
    READ_BARCODE_CORRECTED_TAG,
    READ_UMI_CORRECTED_TAG,
)
from .errors import OutputOpenError
from .read_filter import REJECTION_REASONS, build_tag_filter_set, get_rejection_reason
from .row_utils import format_block_row, format_block_table_header

logger = logging.getLogger(__name__)

SCAN_PROGRAM_DESCRIPTION = "Write the exon blocks of the reads overlapping a region to a table."


class ScanSummary(
    collections.namedtuple(
        "ScanSummary",
        [
            "num_reads",
            "num_reads_seen",
            "num_reads_without_blocks",
            "rejection_counts",
            "num_reads_written_to_bam",
            "bam_write_failed",
            "bam_indexed",
        ],
    )
):
    """Result of one region scan.  `num_reads` is the number of rows written to the block table."""

    @property
    def num_reads_rejected(self):
        return sum(self.rejection_counts.values())


def scan_region_blocks(
    input_bam,
    contig,
    start,
    end,
    output_tsv,
    allowed_values,
    output_bam=None,
    filter_tag=FILTER_INT_TAG,
    barcode_tag=READ_BARCODE_CORRECTED_TAG,
    umi_tag=READ_UMI_CORRECTED_TAG,
):
    """Write the exon blocks of every passing read overlapping [start, end] (1-based, inclusive) of `contig`.

    Every read passing the filters in `read_filter` and having at least one aligned block gets one row in
    `output_tsv`.  If `output_bam` is given, the same reads are copied unmodified to it and the file is indexed
    once the scan completes (for .bam outputs).

    Failing to write to `output_bam` does not stop the scan: the failure is logged and the remaining reads are
    only written to `output_tsv`.

    :raises InputOpenError, IndexMissingError, UnknownContigError, OutputOpenError: before anything is written.
    :return: A ScanSummary.
    """

    allowed_values = build_tag_filter_set(allowed_values)
    if not allowed_values:
        logger.warning("No allowed filter tag values given.  Every read will be rejected.")

    tag_names = dict(filter_tag=filter_tag, barcode_tag=barcode_tag, umi_tag=umi_tag)

    with bam_utils.open_indexed_alignment_file(input_bam) as bam_file:
        bam_utils.resolve_contig(bam_file, contig)
        reads = bam_utils.fetch_region(bam_file, contig, start, end)

        bam_writer = None
        if output_bam:
            out_header = bam_utils.create_bam_header_with_program_group(
                "scan", bam_file.header, description=SCAN_PROGRAM_DESCRIPTION
            )
            bam_writer = bam_utils.SecondaryBamWriter(bam_utils.open_output_bam(output_bam, out_header), output_bam)

        try:
            tsv_file = open(output_tsv, "w", encoding="utf-8", newline="")
        except OSError as e:
            if bam_writer is not None:
                bam_writer.close()
            raise OutputOpenError(f"Failed to open TSV for write: {output_tsv} ({e})") from e

        num_reads = 0
        num_reads_seen = 0
        num_reads_without_blocks = 0
        rejection_counts = collections.OrderedDict((r, 0) for r in REJECTION_REASONS)

        # Reused for every read:
        blocks = []

        with tsv_file, bam_writer or contextlib.nullcontext():
            tsv_file.write(format_block_table_header())

            for read in tqdm.tqdm(
                reads,
                desc="Progress",
                unit=" read",
                colour="green",
                file=sys.stderr,
                leave=False,
                disable=not is_interactive(),
            ):
                num_reads_seen += 1

                reason = get_rejection_reason(read, allowed_values, **tag_names)
                if reason is not None:
                    rejection_counts[reason] += 1
                    continue

                blocks.clear()
                decompose_read_blocks(read, blocks)
                if not blocks:
                    logger.debug("Read %s has no aligned blocks.", read.query_name)
                    num_reads_without_blocks += 1
                    continue

                tsv_file.write(format_block_row(read.get_tag(barcode_tag), read.get_tag(umi_tag), blocks))

                if bam_writer is not None:
                    bam_writer.write(read)

                num_reads += 1

    # The writer is closed by now; only index complete outputs:
    bam_indexed = False
    if bam_writer is not None and not bam_writer.failed:
        bam_indexed = bam_utils.build_output_index(output_bam)

    return ScanSummary(
        num_reads=num_reads,
        num_reads_seen=num_reads_seen,
        num_reads_without_blocks=num_reads_without_blocks,
        rejection_counts=dict(rejection_counts),
        num_reads_written_to_bam=bam_writer.num_written if bam_writer is not None else 0,
        bam_write_failed=bam_writer.failed if bam_writer is not None else False,
        bam_indexed=bam_indexed,
    )
