import pysam

from pathlib import Path


def convert_sam_to_bam(sam_path, out_bam_path, index=True):
    """Write the reads of the given (coordinate-sorted) sam file to a bam file, indexing it by default."""
    with pysam.AlignmentFile(str(sam_path), "r", check_sq=False, require_index=False) as input_file:
        with pysam.AlignmentFile(str(out_bam_path), "wb", header=input_file.header) as out_bam_file:
            for r in input_file:
                out_bam_file.write(r)

    if index:
        pysam.index(str(out_bam_path))


def assert_read_tags_are_equal(actual_read, expected_read):

    actual_tags = {tag: (val, tp) for tag, val, tp in actual_read.get_tags(with_value_type=True)}
    expected_tags = {tag: (val, tp) for tag, val, tp in expected_read.get_tags(with_value_type=True)}

    assert actual_tags.keys() == expected_tags.keys(), f"Read {actual_read.query_name}: Tags not equal: {actual_tags} != {expected_tags}"

    for tag, (actual_val, _) in actual_tags.items():
        expected_val = expected_tags[tag][0]
        assert actual_val == expected_val, f"Read {actual_read.query_name}: Actual and expected tag values are not equal for tag {tag}: {actual_val} != {expected_val}"


def assert_reads_are_equal(actual_read, expected_read):

    # Go through most fields until tags:
    assert actual_read.query_name == expected_read.query_name, f"Read {actual_read.query_name}: Read names not equal: {actual_read.query_name} != {expected_read.query_name}"
    assert actual_read.flag == expected_read.flag, f"Read {actual_read.query_name}: Read flags not equal"
    assert actual_read.reference_name == expected_read.reference_name, f"Read {actual_read.query_name}: Contig names not equal:  {actual_read.reference_name} != {expected_read.reference_name}"
    assert actual_read.reference_start == expected_read.reference_start, f"Read {actual_read.query_name}: Start position not equal:  {actual_read.reference_start} != {expected_read.reference_start}"
    assert actual_read.mapping_quality == expected_read.mapping_quality, f"Read {actual_read.query_name}: Mapping qualities not equal:  {actual_read.mapping_quality} != {expected_read.mapping_quality}"
    assert actual_read.cigarstring == expected_read.cigarstring, f"Read {actual_read.query_name}: CIGAR strings not equal:  {actual_read.cigarstring} != {expected_read.cigarstring}"
    assert actual_read.query_sequence == expected_read.query_sequence, f"Read {actual_read.query_name}: Base sequences not equal"
    assert actual_read.query_qualities == expected_read.query_qualities, f"Read {actual_read.query_name}: Base qualities not equal"

    # Tags are a collection, not an ordered list:
    assert_read_tags_are_equal(actual_read, expected_read)


def assert_reads_files_equal(actual_file, expected_file):
    """Assert that the two given sam/bam files hold the same reads in the same order."""

    actual_file = Path(actual_file)
    expected_file = Path(expected_file)

    actual_file_flags = "rb" if actual_file.name.endswith(".bam") else "r"
    expected_file_flags = "rb" if expected_file.name.endswith(".bam") else "r"

    with pysam.AlignmentFile(str(actual_file), actual_file_flags, check_sq=False, require_index=False) as actual_bam, \
            pysam.AlignmentFile(str(expected_file), expected_file_flags, check_sq=False, require_index=False) as expected_bam:

        actual_reads = list(actual_bam)
        expected_reads = list(expected_bam)

        assert len(actual_reads) == len(expected_reads), f"Number of reads not equal: {len(actual_reads)} != {len(expected_reads)}"
        for read1, read2 in zip(actual_reads, expected_reads):
            assert_reads_are_equal(read1, read2)


def read_bam_names(bam_path):
    with pysam.AlignmentFile(str(bam_path), "rb", check_sq=False, require_index=False) as bam_file:
        return [r.query_name for r in bam_file]


def assert_text_files_equal(actual_file, expected_file):
    """Assert that the two given text files are byte-for-byte equal, reporting the first differing line."""

    with open(actual_file, "rb") as f_actual, open(expected_file, "rb") as f_expected:
        actual_lines = f_actual.read().split(b"\n")
        expected_lines = f_expected.read().split(b"\n")

    for line_no, (actual_line, expected_line) in enumerate(zip(actual_lines, expected_lines), start=1):
        assert actual_line == expected_line, f"Line {line_no} not equal: Actual: {actual_line} || Expected: {expected_line}"

    assert len(actual_lines) == len(expected_lines), f"Number of lines not equal: {len(actual_lines)} != {len(expected_lines)}"
