import logging
import os
import sys
from pathlib import Path

import pysam

from ..meta import VERSION
from .constants import INDEXABLE_OUTPUT_SUFFIX
from .errors import (
    IndexBuildWarning,
    IndexMissingError,
    InputOpenError,
    OutputOpenError,
    SecondaryWriteError,
    UnknownContigError,
)

logger = logging.getLogger(__name__)


def create_bam_header_with_program_group(command_name, base_bam_header, description):
    """Create a pysam.AlignmentHeader object with program group (PG) information populated by the given arguments."""

    bam_header_dict = base_bam_header.to_dict()

    pg_dict = {
        "ID": f"exonblocks-{command_name}-{VERSION}",
        "PN": "exonblocks",
        "VN": f"{VERSION}",
        "DS": description,
        "CL": " ".join(sys.argv),
    }
    if "PG" in bam_header_dict:
        bam_header_dict["PG"].append(pg_dict)
    else:
        bam_header_dict["PG"] = [pg_dict]

    return pysam.AlignmentHeader.from_dict(bam_header_dict)


def check_for_preexisting_files(file_list, exist_ok=False):
    """Checks if the files in the given file_list exist.
    Empty / None entries (unused optional outputs) are ignored.
    If any file exists and exist_ok is False, this will exit the program.
    If any file exists and exist_ok is True, the program will continue.
    """

    # Allow users to be a little lazy with what input types they give:
    if not isinstance(file_list, (list, set, tuple)):
        file_list = [file_list]

    do_files_exist = False
    for f in filter(None, file_list):
        if os.path.exists(f) and str(f) != "/dev/null":
            if exist_ok:
                logger.warning(f"Output file exists: {f}.  Overwriting.")
            else:
                logger.error(f"Output file already exists: {f}!")
                do_files_exist = True
    if do_files_exist:
        sys.exit(1)


def open_indexed_alignment_file(path):
    """Open the given SAM/BAM/CRAM file for region queries.

    :raises InputOpenError: if the file cannot be opened or has no readable header.
    :raises IndexMissingError: if no index can be found for the file."""

    # silence htslib complaints about a missing index, we report that ourselves:
    pysam.set_verbosity(0)
    try:
        bam_file = pysam.AlignmentFile(str(path), "r", require_index=False)
    except (OSError, ValueError) as e:
        raise InputOpenError(f"Failed to open input: {path} ({e})") from e

    if not bam_file.has_index():
        bam_file.close()
        raise IndexMissingError(f"No index for input: {path}")

    return bam_file


def resolve_contig(bam_file, contig):
    """Get the reference id of the given contig name.

    :raises UnknownContigError: if the contig is not in the file header."""
    if contig not in bam_file.references:
        raise UnknownContigError(f"Unknown contig: {contig}")
    return bam_file.get_tid(contig)


def fetch_region(bam_file, contig, start, end):
    """Iterate over the reads overlapping the 1-based, inclusive interval [start, end] of the given contig."""
    # pysam (like htslib) queries are 0-based, half-open:
    return bam_file.fetch(contig, start - 1, end)


def open_output_bam(path, header):
    """Open a compressed bam file for writing with the given header.

    :raises OutputOpenError: if the file cannot be created."""
    try:
        return pysam.AlignmentFile(str(path), "wb", header=header)
    except (OSError, ValueError) as e:
        raise OutputOpenError(f"Failed to open output bam: {path} ({e})") from e


def is_indexable_output(path):
    return Path(path).suffix == INDEXABLE_OUTPUT_SUFFIX


def build_output_index(path):
    """Build a .bai index for the given bam file.

    Index build failures are logged, not raised: the bam itself is still valid.

    :return: True if the index was built, False otherwise."""
    if not is_indexable_output(path):
        logger.debug(f"Not indexing {path}: only {INDEXABLE_OUTPUT_SUFFIX} outputs are indexed.")
        return False

    try:
        pysam.index(str(path))
    except (pysam.utils.SamtoolsError, OSError) as e:
        logger.warning(f"Failed to build index for {path}: {e}", exc_info=IndexBuildWarning(str(e)))
        return False

    logger.info(f"Indexed {path}")
    return True


class SecondaryBamWriter:
    """Writes passing reads to an optional filtered bam output.

    The first write failure is reported once, the output is closed, and every later write is skipped."""

    def __init__(self, bam_file, path):
        self._bam_file = bam_file
        self.path = path
        self.num_written = 0
        self.failed = False

    @property
    def is_open(self):
        return self._bam_file is not None

    def write(self, read):
        """Write the given read if the output is still usable.

        :return: True if the read was written."""
        if self._bam_file is None:
            return False

        try:
            self._write(read)
        except SecondaryWriteError as e:
            logger.warning(f"{e}.  No further reads will be written to {self.path}.")
            self.failed = True
            self.close()
            return False

        self.num_written += 1
        return True

    def _write(self, read):
        try:
            self._bam_file.write(read)
        except (OSError, ValueError) as e:
            raise SecondaryWriteError(
                f"Failed to write alignment {read.query_name} to output bam: {self.path} ({e})"
            ) from e

    def close(self):
        if self._bam_file is None:
            return
        try:
            self._bam_file.close()
        except OSError as e:
            logger.warning(f"Failed to close output bam {self.path}: {e}")
            self.failed = True
        finally:
            self._bam_file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
