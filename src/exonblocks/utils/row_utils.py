from .constants import (
    BLOCK_DELIMITER,
    BLOCK_TABLE_COLUMNS,
    BLOCK_TABLE_FIELD_DELIMITER,
)


def format_block_table_header():
    return BLOCK_TABLE_FIELD_DELIMITER.join(BLOCK_TABLE_COLUMNS) + "\n"


def format_block_row(cell_barcode, umi, blocks):
    """Render one block table row for a read.

    Tag values are written as-is.  A tab inside a tag value will therefore make the row ambiguous."""

    starts = BLOCK_DELIMITER.join(str(b.start) for b in blocks)
    ends = BLOCK_DELIMITER.join(str(b.end) for b in blocks)
    seqs = BLOCK_DELIMITER.join(b.sequence for b in blocks)

    return BLOCK_TABLE_FIELD_DELIMITER.join([cell_barcode, umi, starts, ends, seqs, str(len(blocks))]) + "\n"
