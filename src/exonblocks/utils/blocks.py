import collections

import pysam

from .constants import MISSING_BASE

# CIGAR operations that produce a block / move the cursors:
BLOCK_OPS = frozenset([pysam.CMATCH, pysam.CEQUAL, pysam.CDIFF])
QUERY_ONLY_OPS = frozenset([pysam.CINS, pysam.CSOFT_CLIP])
REFERENCE_ONLY_OPS = frozenset([pysam.CDEL, pysam.CREF_SKIP])


# Named tuple to store a reference block and the query bases aligned to it:
class Block(collections.namedtuple("Block", ["start", "end", "sequence"])):

    def __len__(self):
        # Must add 1 because the positions are inclusive coordinates:
        return self.end - self.start + 1

    def __str__(self):
        return f"Block({self.start}-{self.end}:{self.sequence})"


def _query_slice(query_sequence, query_start, length):
    """Get `length` query bases starting at `query_start`, padding with N where the record stores none."""
    if query_sequence is None:
        return MISSING_BASE * length

    bases = query_sequence[query_start:query_start + length]
    if len(bases) < length:
        bases += MISSING_BASE * (length - len(bases))

    return bases


def decompose_blocks(cigartuples, query_sequence, reference_start, blocks=None):
    """Split an alignment into its reference-contiguous blocks.

    Walks the CIGAR keeping a reference cursor (1-based, starting at `reference_start`) and a query cursor
    (0-based, starting at 0).  Every M / = / X operation yields one new Block spanning
    [ref_cursor, ref_cursor + len - 1] along with the query bases it covers.  Adjacent match operations are
    not merged.  I and S only move the query cursor, D and N only move the reference cursor, and H, P and
    any unrecognized operation move neither.

    :param cigartuples: Sequence of (operation, length) pairs as given by pysam.AlignedSegment.cigartuples.
    :param query_sequence: Decoded query bases (pysam.AlignedSegment.query_sequence), or None.
    :param reference_start: 1-based reference position of the first aligned base.
    :param blocks: Optional list to append the blocks to.  It is not cleared here.
    :return: The list of Block objects (empty if the CIGAR has no match operations).
    """
    if blocks is None:
        blocks = []

    ref_cursor = reference_start
    query_cursor = 0

    for op, length in cigartuples or ():
        if op in BLOCK_OPS:
            blocks.append(
                Block(
                    ref_cursor,
                    ref_cursor + length - 1,
                    _query_slice(query_sequence, query_cursor, length),
                )
            )
            ref_cursor += length
            query_cursor += length
        elif op in QUERY_ONLY_OPS:
            query_cursor += length
        elif op in REFERENCE_ONLY_OPS:
            ref_cursor += length

    return blocks


def decompose_read_blocks(read, blocks=None):
    """Decompose the given pysam.AlignedSegment into Blocks.  Reference coordinates are 1-based inclusive."""
    return decompose_blocks(read.cigartuples, read.query_sequence, read.reference_start + 1, blocks)
