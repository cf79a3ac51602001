# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Reference points and relative coordinates."""

from enum import IntEnum

from ..errors import ConfigurationError


class ReferencePoint(IntEnum):
    """Position codes: 5' end, 3' end, and 4 for the midpoint (between 5 and 3)."""

    FIVE_PRIME = 5
    THREE_PRIME = 3
    MIDPOINT = 4

    @classmethod
    def parse(cls, value):
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ConfigurationError(f'Reference position must be one of 5, 3, or 4, not {value!r}') from None


def reference_coordinate(position, start, stop, strand, practical_start=None, practical_stop=None):
    """Genomic coordinate of the reference point of a feature.

    ``practical_start`` and ``practical_stop`` replace the feature bounds
    when positions were stitched over sub-intervals.
    """
    position = ReferencePoint.parse(position)
    _start = practical_start if practical_start is not None else start
    _stop = practical_stop if practical_stop is not None else stop

    if position is ReferencePoint.MIDPOINT:
        length = stop - start + 1
        return _start + int(length / 2 + 0.5)
    if (position is ReferencePoint.FIVE_PRIME) == (strand >= 0):
        return _start
    return _stop


def to_relative(pos2data, reference, strand):
    """Re-key a position map as offsets from ``reference``, oriented by strand."""
    if strand >= 0:
        return {p - reference: v for p, v in pos2data.items()}
    return {reference - p: v for p, v in pos2data.items()}


def to_absolute(rel2data, reference, strand):
    """Inverse of :func:`to_relative`."""
    if strand >= 0:
        return {reference + r: v for r, v in rel2data.items()}
    return {reference - r: v for r, v in rel2data.items()}
