import functools

import pysam
import pytest


def _make_read(
    header,
    name="read",
    contig="chr1",
    reference_start=100,
    cigarstring="10M",
    query_sequence="ACGTACGTAC",
    flag=0,
    tags=None,
):
    read = pysam.AlignedSegment(header)
    read.query_name = name
    read.flag = flag
    read.reference_name = contig
    read.reference_start = reference_start
    read.mapping_quality = 60
    read.cigarstring = cigarstring
    read.query_sequence = query_sequence
    for tag, value in (tags or {}).items():
        read.set_tag(tag, value)
    return read


@pytest.fixture
def bam_header():
    return pysam.AlignmentHeader.from_dict({
        'HD': {'VN': '1.6', 'SO': 'coordinate'},
        'SQ': [
            {'SN': 'chr1', 'LN': 1000},
            {'SN': 'chr2', 'LN': 500},
        ],
        'RG': [{'ID': 'test', 'SM': 'sample1'}],
    })


@pytest.fixture
def make_read(bam_header):
    return functools.partial(_make_read, bam_header)


@pytest.fixture
def passing_tags():
    return {'xf': 25, 'CB': 'AAACCTGA-1', 'UB': 'TTTGGGCCAA'}


@pytest.fixture
def write_indexed_bam(tmpdir, bam_header):
    """Write the given (coordinate-sorted) reads to an indexed bam file in tmpdir and return its path."""

    def _write(reads, name="input.bam"):
        bam_path = str(tmpdir.join(name))
        with pysam.AlignmentFile(bam_path, "wb", header=bam_header) as bam_file:
            for r in reads:
                bam_file.write(r)
        pysam.index(bam_path)
        return bam_path

    return _write
