# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Genomic intervals and the enumerations that parameterize a scan."""

import re
from dataclasses import dataclass, replace
from enum import Enum

from ..errors import ConfigurationError

_REGION_RE = re.compile(r'^(?P<seq_id>[^:\s]+):(?P<start>[\d,]+)-(?P<stop>[\d,]+)(?::(?P<strand>[+\-.]|-?1|0))?$')

_STRAND_CODES = {
    '+': 1,
    '1': 1,
    '-': -1,
    '-1': -1,
    '.': 0,
    '0': 0,
}


class Strandedness(Enum):
    """Which alignments to keep relative to the queried feature's strand."""

    ALL = 'all'
    SENSE = 'sense'
    ANTISENSE = 'antisense'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f'Unknown strandedness "{value}". Expected one of: {", ".join(m.value for m in cls)}'
            ) from None


class ValueType(Enum):
    """Kind of value collected from a score source.

    ``COVERAGE`` is per-base coverage and ignores strand. ``NAME``
    collects query names for unique-name counting.
    """

    COVERAGE = 'score'
    COUNT = 'count'
    LENGTH = 'length'
    NAME = 'name'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f'Unknown value type "{value}". Expected one of: {", ".join(m.value for m in cls)}'
            ) from None


@dataclass(frozen=True)
class GenomicInterval:
    """A 1-based, fully closed interval on one sequence."""

    seq_id: str
    start: int
    stop: int
    strand: int = 0

    def __post_init__(self):
        if self.strand not in (-1, 0, 1):
            raise ConfigurationError(f'Strand must be -1, 0 or 1, not {self.strand!r}')

    @property
    def length(self):
        return self.stop - self.start + 1

    @property
    def is_empty(self):
        return self.stop < self.start

    def clamped(self):
        """Copy with the start raised to 1 if it falls below."""
        if self.start >= 1:
            return self
        return replace(self, start=1)

    def extended(self, extend):
        if not extend:
            return self
        return replace(self, start=self.start - extend, stop=self.stop + extend)

    def zero_based(self):
        """Half-open ``(seq_id, start, end)`` as consumed by score sources."""
        return self.seq_id, self.start - 1, self.stop

    @classmethod
    def parse(cls, text):
        """Parse ``chrom:start-stop`` with an optional ``:strand`` suffix."""
        m = _REGION_RE.match(text.strip())
        if m is None:
            raise ConfigurationError(f'Unable to parse region "{text}", expected chrom:start-stop[:strand]')
        strand = _STRAND_CODES[m.group('strand')] if m.group('strand') else 0
        return cls(
            m.group('seq_id'),
            int(m.group('start').replace(',', '')),
            int(m.group('stop').replace(',', '')),
            strand,
        )

    def __str__(self):
        _s = {1: '+', -1: '-', 0: '.'}[self.strand]
        return f'{self.seq_id}:{self.start}-{self.stop}:{_s}'
