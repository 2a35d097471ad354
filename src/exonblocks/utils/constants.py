################################################################################
# General / high-level constants:
#######################################

FFORMAT = "2.2f"

################################################################################
# Constants for bam file reading / writing:
#######################################

FILTER_INT_TAG = "xf"  # Integer read annotation checked against the allowed values (e.g. 10x extra flags)
READ_BARCODE_CORRECTED_TAG = "CB"  # Cell barcode that is error-corrected and confirmed against a list of known-good barcode sequences
READ_UMI_CORRECTED_TAG = "UB"  # Error-corrected UMI

INDEXABLE_OUTPUT_SUFFIX = ".bam"

################################################################################
# Constants for the block table:
#######################################

BLOCK_DELIMITER = ";"
BLOCK_TABLE_FIELD_DELIMITER = "\t"
BLOCK_TABLE_COLUMNS = ("CB", "UMI", "block_start", "block_end", "block_seq", "num_blocks")

# Placeholder for query positions not stored in the record (SEQ of `*`):
MISSING_BASE = "N"
