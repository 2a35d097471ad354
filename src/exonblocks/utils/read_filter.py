from .constants import (
    FILTER_INT_TAG,
    READ_BARCODE_CORRECTED_TAG,
    READ_UMI_CORRECTED_TAG,
)

# Rejection reasons, in the order the checks are applied:
REJECT_FLAG = "unmapped/secondary/supplementary"
REJECT_FILTER_TAG = "filter tag missing or not allowed"
REJECT_MISSING_BARCODE_OR_UMI = "cell barcode or UMI missing"

REJECTION_REASONS = (REJECT_FLAG, REJECT_FILTER_TAG, REJECT_MISSING_BARCODE_OR_UMI)

STRING_TAG_TYPES = frozenset(["Z", "H"])


def build_tag_filter_set(values):
    """Create the set of allowed integer values for the filter tag."""
    return frozenset(int(v) for v in values)


def _get_string_tag(read, tag):
    if not read.has_tag(tag):
        return None
    # Only Z (and hex H) tags are strings; single-character A tags are not:
    value, value_type = read.get_tag(tag, with_value_type=True)
    return value if value_type in STRING_TAG_TYPES else None


def get_rejection_reason(
    read,
    allowed_values,
    filter_tag=FILTER_INT_TAG,
    barcode_tag=READ_BARCODE_CORRECTED_TAG,
    umi_tag=READ_UMI_CORRECTED_TAG,
):
    """Get the reason the given read should be skipped, or None if it passes all filters.

    A read is rejected if it is unmapped, secondary or supplementary, if its integer filter tag is absent or
    not one of `allowed_values`, or if either of its cell barcode / UMI string tags is absent."""

    if read.is_unmapped or read.is_secondary or read.is_supplementary:
        return REJECT_FLAG

    if not read.has_tag(filter_tag):
        return REJECT_FILTER_TAG
    filter_value = read.get_tag(filter_tag)
    if not isinstance(filter_value, int) or filter_value not in allowed_values:
        return REJECT_FILTER_TAG

    if _get_string_tag(read, barcode_tag) is None or _get_string_tag(read, umi_tag) is None:
        return REJECT_MISSING_BARCODE_OR_UMI

    return None


def passes_filters(read, allowed_values, **tag_names):
    """True if the given read passes every filter in `get_rejection_reason`."""
    return get_rejection_reason(read, allowed_values, **tag_names) is None
