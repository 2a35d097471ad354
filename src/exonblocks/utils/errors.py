class ExonBlocksError(Exception):
    """Base class for errors raised while scanning a region for exon blocks."""


class InputOpenError(ExonBlocksError):
    """The input alignment file could not be opened or its header could not be read."""


class IndexMissingError(ExonBlocksError):
    """The input alignment file has no usable position index."""


class UnknownContigError(ExonBlocksError):
    """The requested contig is not present in the input header."""


class OutputOpenError(ExonBlocksError):
    """An output destination (block table or filtered bam) could not be opened."""


class SecondaryWriteError(ExonBlocksError):
    """A read could not be written to the filtered bam output.

    Not fatal: the scan keeps producing the block table without the filtered bam."""


class IndexBuildWarning(UserWarning):
    """The index for the filtered bam output could not be built."""
